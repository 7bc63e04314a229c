"""Runs pcalc on a single expression, a source file, or in command-line mode. Also uses the error handling context
manager. Called from the pcalc console script.

Python version must be >=3.7, because error handling requires that dicts are insertion-ordered and the syntax tree
uses dataclasses.
"""

import argparse
import sys

from pcalc.interpreter import Options, run
from pcalc.lang.error import ErrorHandler
from pcalc.lang.session import Session
from pcalc.lang.shell import Shell


def parse_args(argv=None):
    """Parses command-line arguments."""
    parser = argparse.ArgumentParser(prog="pcalc", description="prefix-notation expression interpreter")
    parser.add_argument("file", help="file to interpret and run (if empty, goes to command-line mode)", nargs="?")
    parser.add_argument("-e", "--expr", help="evaluate EXPR and print the result or error message")
    parser.add_argument("--permissive", action="store_true",
                        help="ignore input left over after a complete expression instead of rejecting it")
    parser.add_argument("--legacy-substitution", action="store_true",
                        help="do not substitute function arguments inside if, apply, or nested func")
    parser.add_argument("-v", "--verbose", action="store_true", help="print every reduction step")
    return parser.parse_args(argv)


def main(argv=None):
    """Runs pcalc interpreter. Called from pcalc console script."""
    assert sys.version_info >= (3, 7), "pcalc cannot be run with python < 3.7"

    args = parse_args(argv)
    options = Options(strict=not args.permissive, legacy_substitution=args.legacy_substitution)

    with ErrorHandler(verbose=args.verbose) as error_handler:
        if args.expr is not None:
            print(run(args.expr, options, error_handler))

        elif args.file is not None:
            sess = Session(error_handler, args.file, cmd_line=False, options=options)
            sess.run()

            for result in sess.results:
                print(result)

        else:
            Shell(Session(error_handler, Session.SH_FILE, cmd_line=True, options=options)).cmdloop()


if __name__ == "__main__":
    main()
