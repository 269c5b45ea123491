"""Runs typedlc files, or an interactive shell when no file is given. Also uses error handling context manager. Called
from the typedlc console script.
"""

import argparse

from typedlc.lang.error import ErrorHandler
from typedlc.lang.session import Session
from typedlc.lang.shell import Shell


def main(argv=None):
    """Runs typedlc interpreter. Called from typedlc console script."""
    with ErrorHandler() as error_handler:
        parser = argparse.ArgumentParser(prog="typedlc", description="typedlc interpreter")
        parser.add_argument("file", help="file to interpret and run (if empty, goes to command-line mode)", nargs="?")
        parser.add_argument("-v", "--verbose", action="store_true", help="print let bindings and applications")
        parser.add_argument("--ast", action="store_true", help="print syntax tree of every program")

        checking = parser.add_mutually_exclusive_group()
        checking.add_argument("--unchecked", dest="check", action="store_const", const="off", default="strict",
                              help="skip type checking")
        checking.add_argument("--lenient", dest="check", action="store_const", const="lenient",
                              help="report type errors as warnings and evaluate anyway")
        args = parser.parse_args(argv)

        error_handler.verbose = args.verbose

        if args.file is not None:
            sess = Session(error_handler, args.file, cmd_line=False, check=args.check, show_ast=args.ast)
            sess.run()

        else:
            sess = Session(error_handler, Session.SH_FILE, cmd_line=True, check=args.check, show_ast=args.ast)
            Shell(sess).cmdloop()


if __name__ == "__main__":
    main()
