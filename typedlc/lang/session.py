"""Session control for typedlc. Parses, type checks and evaluates programs, either in command-line mode or file
interpretation mode.

A file holds any number of programs, separated by blank lines. ';;' starts a comment that runs to the end of the line.
"""

from dataclasses import dataclass
from typing import Optional

from typedlc.core.ast import Expr
from typedlc.core.evaluator import Evaluator, Value
from typedlc.core.typechecker import Type, TypeChecker
from typedlc.lang.error import LangException, TypeCheckError
from typedlc.lang.parser import parse


@dataclass
class Result:
    """Outcome of running a single program. type is None if type checking was skipped or failed leniently."""
    tree: Expr
    type: Optional[Type]
    value: Value

    def __str__(self):
        if self.type is None:
            return str(self.value)
        return f"{self.value} : {self.type}"


class Session:
    """Governs a typedlc session. check is one of CHECK_MODES:
    - "strict": a type error stops the program
    - "lenient": a type error is reported as a warning and the program is evaluated anyway
    - "off": programs are evaluated without being type checked
    """
    SH_FILE = "<in>"  # command-line interpreter filename
    CHECK_MODES = ("strict", "lenient", "off")

    def __init__(self, error_handler, path, cmd_line, check="strict", show_ast=False):
        if check not in Session.CHECK_MODES:
            raise LangException("unknown check mode '{}'", check, internal=True)

        self.error_handler = error_handler
        self.error_handler.register_file(path)

        self.path = path          # used for error messages
        self.cmd_line = cmd_line  # whether or not in command-line mode
        self.check = check
        self.show_ast = show_ast

        self.to_exec = {}   # dict of line num: (source, tree) to execute
        self.results = []   # Results of executed programs, in order

        if self.cmd_line:
            self.error_handler.fatal = False

        if path != Session.SH_FILE:
            try:
                with open(path, "r") as file:
                    programs = Session.split_programs(file)
            except OSError:
                raise LangException("'{}' could not be opened", path, diagnosis=False)

            for source, line_num in programs:
                self.add(source, line_num)

        elif not cmd_line:
            raise LangException("'<in>' is a reserved filename")

    @staticmethod
    def preprocess_line(line):
        """Strips comments and trailing whitespace from line. Returns updated line and whether or not the line leaves
        parentheses open (in which case the program continues on the next line).
        """
        if ";;" in line:
            line = line[:line.index(";;")]  # get rid of comments

        line = line.rstrip()
        return line, line.count("(") > line.count(")")

    @staticmethod
    def split_programs(lines):
        """Returns list of (source, line num) for every program in lines. Programs are separated by blank lines. Lines
        that only hold a comment are kept empty inside a program (so line numbers still match the file) and dropped
        between programs.
        """
        programs = []
        current, start = [], None

        for line_num, raw in enumerate(lines, 1):
            if not raw.strip():
                if current:
                    programs.append(("\n".join(current), start))
                current, start = [], None
                continue

            line, __ = Session.preprocess_line(raw)
            if line.strip():
                if start is None:
                    start = line_num
                current.append(line)
            elif current:
                current.append("")

        if current:
            programs.append(("\n".join(current), start))
        return programs

    def add(self, source, line_num):
        """Parses source and adds it to the current session. Evaluation is delayed until run is called."""
        self.error_handler.register_line(self.path, source, line_num)  # in case error is raised
        self.to_exec[line_num] = (source, parse(source))
        self.error_handler.remove_line(self.path)  # error was not raised

    def execute(self, tree):
        """Type checks (depending on self.check) and evaluates tree. Returns Result."""
        if self.show_ast:
            print(tree.display())

        tree_type = None
        if self.check != "off":
            try:
                tree_type = TypeChecker().typecheck(tree)
            except TypeCheckError as error:
                if self.check == "strict":
                    raise
                self.error_handler.warn(error)

        value = Evaluator(trace=self.error_handler.register_step).eval(tree)
        return Result(tree, tree_type, value)

    def run(self):
        """Runs this session's programs, in order. In file mode, every Result is printed as soon as it is computed. Will
        raise any errors that are encountered.
        """
        for line_num, (source, tree) in list(self.to_exec.items()):
            self.error_handler.register_line(self.path, source, line_num)

            try:
                result = self.execute(tree)
                self.results.append(result)
                if not self.cmd_line:
                    print(result)
            finally:
                if self.cmd_line:
                    del self.to_exec[line_num]

            self.error_handler.remove_line(self.path)

    def pop(self):
        """Removes and returns the oldest Result."""
        return self.results.pop(0)
