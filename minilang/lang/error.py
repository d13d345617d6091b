"""Error handling for minilang. Only GenericExceptions should be encountered during running: if another type of
error is raised and makes it all the way to ErrorHandler, it is assumed to be an internal issue.

Error taxonomy:
- LexWarning: unrecognized character, skipped by the lexer (never raised, only reported)
- ParseError: grammar mismatch, aborts the current statement
- EvaluationError: runtime failure (undefined variable, division/modulo by zero, non-integer modulus)
"""

import sys

from termcolor import colored


class GenericException(Exception):
    """Templates an error/warning message so that it can be used to throw a minilang error/warning."""

    def __init__(self, msg, exprs=None, source=None, start=0, end=-1, diagnosis=True, internal=False):
        """msg is a str.format template: exprs are substituted into it in bold. source is the statement text that
        caused the error, and source[start:end] is the offending slice (used for diagnosis).
        """
        if exprs is None:
            exprs = []
        if isinstance(exprs, (str, int, float)):
            exprs = [exprs]

        self.msg = msg.format(*(colored(str(expr), attrs=["bold"]) for expr in exprs))  # color expr snippets
        self.source = source if source is not None else ""
        self.end = end if end != -1 else len(self.source)  # needed for error display

        self.start = start
        self.diagnosis = diagnosis and bool(self.source)
        self.internal = internal

        super().__init__(self.msg)


class LexWarning(GenericException):
    """Unrecognized character in source text. Lexing continues past it."""


class ParseError(GenericException):
    """Statement text does not match minilang grammar."""


class EvaluationError(GenericException):
    """Superclass for failures raised while evaluating a syntax tree."""

    def __init__(self, msg, exprs=None, **kwargs):
        kwargs.setdefault("diagnosis", False)  # syntax trees carry no source positions
        super().__init__(msg, exprs, **kwargs)


class UndefinedVariable(EvaluationError):

    def __init__(self, name):
        super().__init__("undefined variable '{}'", name)
        self.name = name


class DivisionByZero(EvaluationError):

    def __init__(self):
        super().__init__("division by zero")


class ModuloByZero(EvaluationError):

    def __init__(self):
        super().__init__("modulo by zero")


class NonIntegerModulus(EvaluationError):

    def __init__(self, left, right):
        super().__init__("modulo requires integer operands, got '{}' and '{}'", (left, right))


class ErrorHandler:
    """Context manager that will silently suppress Python errors and print custom minilang errors/warnings."""
    ERROR = "red"
    WARNING = "magenta"
    SH_FILE = "<in>"  # command-line mode has no file to report

    def __init__(self, fatal=True):
        self.fatal = fatal
        self.traceback = {}

    def register_file(self, path):
        """Registers path in traceback."""
        self.traceback[path] = (None, None)

    def register_line(self, path, line, line_num):
        """Registers line in traceback given path. Should be called prior to Session run."""
        self.traceback[path] = (line, line_num)

    def remove_line(self, path):
        """Removes line from traceback given path. Should be called after successful Session run."""
        self.traceback[path] = (None, None)

    @staticmethod
    def diagnose(error, warning=False):
        """Returns offending part of error.source highlighted and bolded."""
        color = ErrorHandler.WARNING if warning else ErrorHandler.ERROR

        diagnosis = "  " + error.source[:error.start]

        end = max(error.end, error.start + 1)
        diagnosis += colored(error.source[error.start:end], color, attrs=["bold"])
        diagnosis += error.source[end:] + "\n"

        diagnosis += "  " + " " * error.start
        diagnosis += colored("^" + "~" * (end - error.start - 1), color, attrs=["bold"])

        return diagnosis

    def warn(self, error):
        """Prints runtime warning message. error must be a GenericException (usually a LexWarning)."""
        error_msg = ""
        for file, (line, line_num) in self.traceback.items():
            if line is not None and file != ErrorHandler.SH_FILE:
                error_msg = colored(f"{file}:{line_num}:{error.start + 1}: ", attrs=["bold"])

        error_msg += colored("warning: ", ErrorHandler.WARNING, attrs=["bold"]) + error.msg
        print(error_msg)

        if not error.internal and error.diagnosis:
            print(ErrorHandler.diagnose(error, warning=True))

    def throw(self, error):
        """Throws error using error and self.traceback. error must be a GenericException, and self.traceback must be a
        dict of file: (line, line_num) representing origination of error.
        """
        error_msg = ""
        lines = 0
        for file, (line, line_num) in self.traceback.items():  # assumes dict is insertion-ordered
            if line is not None and file != ErrorHandler.SH_FILE:
                error_msg += f"  File '{file}', line {line_num}:\n"
                error_msg += f"    {line}\n"
                lines += 1

        if lines:
            error_msg = "Traceback:\n" + error_msg

        if error.internal:
            error_msg += colored("[internal] ", ErrorHandler.ERROR, attrs=["bold"])

        error_msg += colored("Error: ", ErrorHandler.ERROR, attrs=["bold"]) + error.msg
        print(error_msg)

        if not error.internal and error.diagnosis:
            print(ErrorHandler.diagnose(error))

        if self.fatal:
            sys.exit(1)
        for path in self.traceback:  # if error occurred, reset traceback (no need if error is fatal)
            self.remove_line(path)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        do_exit = False
        if exc_type is KeyboardInterrupt:
            self.throw(GenericException("keyboard interrupt"))
        elif exc_type is SystemExit:
            do_exit = True
        elif exc_type is RecursionError:
            self.throw(GenericException("maximum nesting depth exceeded"))
        elif exc_type is not None and issubclass(exc_type, GenericException):
            self.throw(exc_val)
        elif exc_type is not None:
            self.throw(GenericException("unknown error: '{}'", f"{exc_type.__name__}: {exc_val}", internal=True))
            do_exit = True

        return not do_exit
