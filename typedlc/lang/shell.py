"""Handles interactive/command-line mode for typedlc interpreter. Uses cmd as backend."""

import cmd


class Shell(cmd.Cmd):
    """Reads one program per line (or per open paren group) and prints its value and type."""
    intro = "typedlc :: typed expressions, evaluated as you type\nType 'help' for the syntax."
    prompt = "> "
    secondary_prompt = ". "  # used for line continuations
    _tmp_prompt = "> "       # also used for prompt swapping in line continuations

    def __init__(self, sess, *args, **kwargs):
        super().__init__(*args, **kwargs)

        self.sess = sess

        self._tmp_line = ""
        self.line_num = 0

    def parseline(self, line):
        """Only 'help', 'exit' and end of input are commands: everything else (including lines starting with '?' or '!',
        which are valid identifiers) goes to default.
        """
        command = line.strip()
        if command == "EOF" or command in ("help", "exit") and not self._tmp_line:
            return command, "", line
        return None, None, line

    def default(self, line):
        """Executes arbitrary typedlc program."""
        with self.sess.error_handler:  # needed because cmd.Cmd automatically exits on Exception
            self.line_num += 1
            if self._tmp_line:
                line = self._tmp_line + "\n" + line
            line, add_to_prev = self.sess.preprocess_line(line)

            if add_to_prev:
                self._tmp_line = line
                self.prompt = self.secondary_prompt
                return

            self._tmp_line = ""
            self.prompt = self._tmp_prompt
            if not line.strip():
                return

            self.sess.add(line, self.line_num - line.count("\n"))
            self.sess.run()

            while self.sess.results:
                print(self.sess.pop())

    def do_help(self, arg):
        """Prints the syntax at a glance, with an example."""
        print("Operators, loosest binding first (all group to the left):\n"
              "  f < x, x > f         apply f to x\n"
              "  a and b              both bools\n"
              "  a = b                equality of ints or bools\n"
              "  a + b                int addition\n\n"
              "'let x = e in body' binds x inside body, and 'x: int -> body' is a one-argument\n"
              "function (param types: int, bool, (t -> t)). Both reach as far right as they can.\n\n"
              "Example: 'let inc = x: int -> x + 1 in inc < 2' gives '3 : int'.\n"
              "Leave a '(' open to continue on the next line. Quit with 'exit' or Ctrl-D.")

    def emptyline(self):
        """Blank input is skipped instead of rerunning the last line."""

    def do_exit(self, arg):
        """Leaves the shell."""
        return True

    def do_EOF(self, arg):
        """Ctrl-D: ends the prompt line, then leaves like 'exit'."""
        print()
        return True
