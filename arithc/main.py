"""Command-line entry point for arithc. Compiles one source file and, depending on flags, prints each statement's value,
its syntax tree, or its LLVM IR. Also uses the error handling context manager. Called from the arithc console script.
"""

import argparse
import sys

from arithc.lang.error import ErrorHandler, UsageError
from arithc.lang.session import Session
from arithc.lang.trace import Trace


class ArgumentParser(argparse.ArgumentParser):
    """argparse exits with status 2 on bad usage; arithc reports usage errors like any other error (status 1)."""

    def error(self, message):
        self.print_usage(sys.stderr)
        raise UsageError("{}", message)


def build_parser():
    parser = ArgumentParser(prog=ErrorHandler.PROG, description="Compile and run semicolon-terminated integer "
                                                                  "arithmetic statements.")
    parser.add_argument("file", help="source file to compile")

    mode = parser.add_mutually_exclusive_group()
    mode.add_argument("--ast", action="store_true", help="print the syntax tree of every statement")
    mode.add_argument("--emit-llvm", action="store_true", help="print the program as verified LLVM IR")
    mode.add_argument("--jit", action="store_true", help="run the lowered program natively and print its results")

    parser.add_argument("--trace", metavar="PATH", help="append a debug trace of tokens and lowered operations to PATH")
    return parser


def main(argv=None):
    """Runs arithc. Exits with status 1 on any error."""
    with ErrorHandler() as error_handler:
        args = build_parser().parse_args(argv)

        trace = Trace(args.trace, error_handler) if args.trace else None
        try:
            sess = Session(error_handler, args.file, trace)

            if args.ast:
                print(sess.ast())
            elif args.emit_llvm:
                print(sess.emit())
            elif args.jit:
                sess.jit()
            else:
                sess.run()
        finally:
            if trace is not None:
                trace.close()

    return 0
