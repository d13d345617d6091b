"""Runs minilang files or the interactive interpreter, using the error handling context manager. Called from the
minilang console script.

Python version must be >=3.7, because error handling requires that dicts are insertion-ordered and syntax trees are
dataclasses.
"""

import argparse
import sys

from minilang.lang.error import ErrorHandler
from minilang.lang.session import Session
from minilang.lang.shell import Shell


__version__ = "0.1.0"


def create_arg_parser():
    """Create command line argument parser"""
    parser = argparse.ArgumentParser(prog="minilang", description="Tree-walking interpreter for minilang")
    parser.add_argument("file", help="file to interpret and run (if empty, goes to command-line mode)", nargs="?")
    parser.add_argument("--parse", action="store_true", help="show syntax tree of each statement instead of running it")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def main(argv=None):
    """Runs minilang interpreter. Called from minilang executable script."""
    assert sys.version_info >= (3, 7), "minilang cannot be run with python < 3.7"

    with ErrorHandler() as error_handler:
        args = create_arg_parser().parse_args(argv)

        if args.file is not None:
            sess = Session(error_handler, args.file, cmd_line=False, parse_only=args.parse)
            sess.run()

        else:
            Shell(Session(error_handler, Session.SH_FILE, cmd_line=True, parse_only=args.parse)).cmdloop()


if __name__ == "__main__":
    main()
