"""Handles interactive/command-line mode for minilang interpreter. Uses cmd as backend."""

import cmd

from minilang.lang.numerical import display


class Shell(cmd.Cmd):
    """minilang interpreter shell."""
    intro = "minilang interpreter :: Python backend\nType '?' or 'help' for more information."
    prompt = "> "
    secondary_prompt = ". "  # used for line continuations
    _tmp_prompt = "> "       # also used for prompt swapping in line continuations

    def __init__(self, sess, *args, **kwargs):
        super().__init__(*args, **kwargs)

        self.sess = sess

        self._tmp_line = ""
        self.line_num = 0

    def default(self, line):
        """Executes arbitrary minilang statement(s)."""
        with self.sess.error_handler:  # needed because cmd.Cmd automatically exits on Exception
            self.line_num += 1
            line, add_to_prev = self.sess.preprocess_line(line, self._tmp_line)

            if add_to_prev:
                self._tmp_line = line
                self.prompt = self.secondary_prompt
            else:
                self._tmp_line = ""
                self.prompt = self._tmp_prompt

                if line:
                    self.sess.add(line, self.line_num)
                    self.sess.run()

    def do_help(self, arg):
        """Doesnt return docs, but rather a short intro."""
        self.sess.write("Welcome to the minilang interpreter!\n\n"
                        "Every value is a number. Assign with 'x = 5', print with 'print x * 2', and\n"
                        "separate statements with ';'. Comparisons '<' and '>' give 1 or 0, and any\n"
                        "nonzero number counts as true:\n\n"
                        "    if (x > 3) print 1 else print 0\n"
                        "    for (i = 0; i < 5; i = i + 1) { total = total + i; }\n\n"
                        "A line with unclosed '(' or '{' continues on the next line. 'vars' lists\n"
                        "variables, 'exit' quits.")

    def do_vars(self, arg):
        """Lists variables in the session."""
        for name, value in self.sess.env.items():
            self.sess.write(f"{name} = {display(value)}")

    def emptyline(self):
        """Do not repeat previous command on empty line."""
        return ""

    def do_EOF(self, arg):
        """Exits interpreter."""
        self.sess.write("")
        return self.do_exit(arg)

    def do_exit(self, arg):
        """Exits interpreter."""
        return True
