"""Session control for minilang. Drives the lexer, parser and evaluator over statement text, either in command-line
mode or file interpretation mode. A session owns the one Environment shared by every statement it runs, so variables
survive across statements and across errors.
"""

import sys

from minilang.lang.error import ErrorHandler, GenericException
from minilang.lang.numerical import display
from minilang.pure.environment import Environment
from minilang.pure.evaluator import Evaluator
from minilang.pure.lexical import Lexer
from minilang.pure.parser import Parser
from minilang.pure.syntax import BinaryOp, NumberLiteral, VariableRef


class Session:
    """Governs a minilang session."""
    SH_FILE = ErrorHandler.SH_FILE  # command-line interpreter filename
    ECHOED = (NumberLiteral, VariableRef, BinaryOp)  # statements whose values are results

    def __init__(self, error_handler, path, cmd_line, output=None, parse_only=False):
        self.error_handler = error_handler
        self.error_handler.register_file(path)

        self.path = path              # used for error messages
        self.cmd_line = cmd_line      # whether or not in command-line mode
        self.parse_only = parse_only  # display syntax trees instead of evaluating them

        self.env = Environment()
        self.evaluator = Evaluator(output)
        self.output = output

        self.to_exec = {}  # dict of line num: statement text to execute

        if self.cmd_line:
            self.error_handler.fatal = False

        if path != Session.SH_FILE:
            buffered = ""
            try:
                with open(path, "r") as file:
                    for line_num, line in enumerate(file):
                        buffered, add_to_prev = self.preprocess_line(line, buffered)
                        if not add_to_prev and buffered.strip():
                            self.add(buffered, line_num + 1)
                            buffered = ""
            except OSError:
                raise GenericException("'{}' could not be opened", path, diagnosis=False)

            if buffered.strip():
                self.add(buffered, line_num + 1)  # unterminated statement: let the parser report it

        elif not cmd_line:
            raise GenericException("'{}' is a reserved filename", Session.SH_FILE)

    @staticmethod
    def preprocess_line(line, buffered=""):
        """Preprocesses a line from a file or command-line. Strips '#' comments and joins line with previously buffered
        text. Returns updated value of line and whether or not the statement continues on the next line (parentheses
        or braces still open).
        """
        if "#" in line:
            line = line[:line.index("#")]  # get rid of comments

        line = line.strip()
        if buffered:
            line = f"{buffered} {line}" if line else buffered

        return line, line.count("(") > line.count(")") or line.count("{") > line.count("}")

    def add(self, source, line_num=None):
        """Queues statement text. Nothing is parsed until run is called."""
        if line_num is None:
            line_num = max(self.to_exec, default=0) + 1
        self.to_exec[line_num] = source

    def run(self):
        """Runs queued statement text in line order. Will raise any errors that are encountered, leaving statements
        that have already run committed.
        """
        for line_num, source in sorted(self.to_exec.items()):
            self.error_handler.register_line(self.path, source, line_num)

            try:
                self.execute(source)
            finally:
                del self.to_exec[line_num]

            self.error_handler.remove_line(self.path)

    def execute(self, source):
        """Lexes, parses and evaluates source statement by statement. Returns the value of the last statement (None if
        source has no statements) and raises errors instead of reporting them. In command-line mode, values of
        expression statements are echoed as they are computed.
        """
        value = None
        for tree in Parser(Lexer(source, self.error_handler)):
            if self.parse_only:
                self.write(tree.display())
                continue

            value = self.evaluator.evaluate(tree, self.env)
            if self.cmd_line and isinstance(tree, Session.ECHOED):
                self.write(display(value))
        return value

    def write(self, text):
        """Writes a line to the session output (sys.stdout unless an output stream was given)."""
        print(text, file=self.output if self.output is not None else sys.stdout)
