"""Runs Patty programs from .patty files or in command-line mode. Also uses the error handling context manager. Called
from the patty executable script.

Python version must be >=3.8; error handling requires that dicts are insertion-ordered.
"""

import argparse
import sys

from patty.lang.error import ErrorHandler
from patty.lang.session import Session
from patty.lang.shell import Shell


def build_parser():
    """Returns the argument parser for the patty command."""
    parser = argparse.ArgumentParser(prog="patty", description="Patty interpreter")
    parser.add_argument("file", help="Patty program to run (if empty, goes to command-line mode)", nargs="?")
    parser.add_argument("--ast", action="store_true", help="print the parsed program before evaluating it")
    parser.add_argument("--no-eval", action="store_true", help="print the parsed program, don't evaluate it")
    parser.add_argument("--tokens", action="store_true", help="print the tokens of the program and exit")
    parser.add_argument("--recursion-limit", type=int, metavar="N",
                        help="maximum Python recursion depth (deeply recursive programs need more)")
    return parser


def main(argv=None):
    """Runs patty interpreter. Called from patty executable script."""
    assert sys.version_info >= (3, 8), "patty cannot be run with python < 3.8"

    with ErrorHandler() as error_handler:
        args = build_parser().parse_args(argv)

        if args.recursion_limit is not None:
            sys.setrecursionlimit(args.recursion_limit)

        if args.file is None:
            Shell(Session(error_handler, Session.SH_FILE, cmd_line=True)).cmdloop()
            return

        sess = Session(error_handler, args.file, cmd_line=False)

        if args.tokens:
            for kind, text in sess.tokens(sess.source):
                print(f"{kind:<6} {text}")
            return

        if args.ast or args.no_eval:
            for expr in sess.expressions:
                print(expr.render(in_list=True))
            if args.no_eval:
                return

        sess.run()
        for result in sess.results:
            print(result.render())


if __name__ == "__main__":
    main()
