"""Error handling for the typedlc language. Only LangExceptions should be encountered while running: if another type of
error is raised and makes it all the way to ErrorHandler, it is assumed to be an internal issue.

Three kinds of LangException exist, one per stage: ParseError (parser), TypeCheckError (type checker) and EvalError
(evaluator). Every stage stops at its first error, so there is never more than one error to report per program.
"""

import sys

from termcolor import colored


class LangException(Exception):
    """Templates an error/warning message so that it can be used to throw a typedlc error/warning. msg is a format
    string whose '{}' slots are filled with exprs (highlighted in bold). span is the (start, end) Range of the
    offending code within the program source, if known.
    """

    def __init__(self, msg, exprs=None, span=None, diagnosis=True, internal=False):
        if exprs is None:
            exprs = ""
        if isinstance(exprs, str):
            exprs = [exprs]
        exprs = [str(expr) for expr in exprs]

        self.msg = msg.format(*(colored(expr, attrs=["bold"]) for expr in exprs))  # color expr snippets
        self.expr = exprs[0] if exprs else ""  # exprs[0] should be the offending expr that caused the error
        self.span = span

        self.diagnosis = diagnosis
        self.internal = internal

        super().__init__(self.msg)


class ParseError(LangException):
    """Source text is not valid typedlc grammar."""


class TypeCheckError(LangException):
    """Program is ill-typed."""


class EvalError(LangException):
    """Program failed while being evaluated."""


class ErrorHandler:
    """Context manager that will silently suppress Python errors and raise custom typedlc errors/warnings. Also prints
    evaluation steps when verbose.
    """
    ERROR = "red"
    WARNING = "magenta"
    STEP = "cyan"

    def __init__(self, fatal=True, verbose=False):
        self.fatal = fatal
        self.verbose = verbose
        self.traceback = {}

    def register_file(self, path):
        """Registers path in traceback."""
        self.traceback[path] = (None, None)

    def register_line(self, path, source, line_num):
        """Registers program source in traceback given path. line_num is the line the source starts on. Should be
        called prior to Session add/run.
        """
        self.traceback[path] = (source, line_num)

    def remove_line(self, path):
        """Removes source from traceback given path. Should be called after successful Session add/run."""
        self.traceback[path] = (None, None)

    def register_step(self, kind, text):
        """Prints a single evaluation step if verbose."""
        if self.verbose:
            print(colored(f"  {kind}: ", ErrorHandler.STEP, attrs=["bold"]) + text)

    @staticmethod
    def locate(source, span):
        """Returns (line offset, column, line text, end column) of span within source. The end column is clipped to the
        line that span starts on.
        """
        start = min(max(span.start, 0), len(source))
        line_start = source.rfind("\n", 0, start) + 1
        line_end = source.find("\n", start)
        if line_end == -1:
            line_end = len(source)

        col = start - line_start
        end_col = min(max(span.end, start + 1), line_end) - line_start
        return source.count("\n", 0, start), col, source[line_start:line_end], end_col

    @staticmethod
    def diagnose(error, source, warning=False):
        """Returns offending line of source with error.span highlighted and underlined."""
        color = ErrorHandler.WARNING if warning else ErrorHandler.ERROR
        __, col, line, end = ErrorHandler.locate(source, error.span)
        end = max(end, col + 1)

        diagnosis = "  " + line[:col]
        diagnosis += colored(line[col:end], color, attrs=["bold"])
        diagnosis += line[end:] + "\n"

        diagnosis += "  " + " " * col
        diagnosis += colored("^" + "~" * (end - col - 1), color, attrs=["bold"])

        return diagnosis

    def _report(self, error, label, color):
        """Prints 'file:line:col: label: msg' for error, followed by a diagnosis when one is possible."""
        location = ""
        source = None
        for file, (registered, line_num) in self.traceback.items():  # assumes dict is insertion-ordered
            if registered is None:
                continue
            source = registered
            if error.span is not None:
                offset, col, __, __ = ErrorHandler.locate(source, error.span)
                location = f"{file}:{line_num + offset}:{col + 1}: "
            else:
                location = f"{file}:{line_num}: "

        error_msg = colored(location, attrs=["bold"]) if location else ""
        if error.internal:
            error_msg += colored("[internal] ", ErrorHandler.ERROR, attrs=["bold"])
        error_msg += colored(f"{label}: ", color, attrs=["bold"]) + error.msg
        print(error_msg)

        if source and not error.internal and error.span is not None and error.diagnosis:
            print(ErrorHandler.diagnose(error, source, warning=color == ErrorHandler.WARNING))

    def warn(self, *args, **kwargs):
        """Generates and prints warning message. Accepts either a LangException or the arguments to build one."""
        error = args[0] if args and isinstance(args[0], LangException) else LangException(*args, **kwargs)
        self._report(error, "warning", ErrorHandler.WARNING)

    def throw(self, error):
        """Throws error using error and self.traceback. error must be a LangException, and self.traceback must be a
        dict of file: (source, line_num) representing origination of error.
        """
        self._report(error, "error", ErrorHandler.ERROR)

        if self.fatal:
            sys.exit(1)
        for file in self.traceback:  # if error occurred, reset traceback (no need if error is fatal)
            self.remove_line(file)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        do_exit = False
        if exc_type is KeyboardInterrupt:
            self.throw(LangException("keyboard interrupt"))
        elif exc_type is SystemExit:
            do_exit = True
        elif exc_type is RecursionError:
            self.throw(LangException("maximum recursion depth exceeded", internal=True))
        elif exc_type is not None and issubclass(exc_type, LangException):
            self.throw(exc_val)
        elif exc_type is not None:
            self.throw(LangException(f"unknown error: '{exc_type.__name__}: {exc_val}'", internal=True))
            do_exit = True

        return not do_exit
