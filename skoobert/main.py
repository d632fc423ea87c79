"""Runs skoobert programs from a file, or in command-line mode when no file is given. Also uses the error handling
context manager. Called from the skoobert console script.
"""

import argparse
import sys

from skoobert.lang import shell
from skoobert.lang.error import ErrorHandler
from skoobert.lang.session import Session

DEFAULT_RECURSION_LIMIT = 10000  # call-by-need combinator programs recurse deeply


def main(argv=None):
    """Runs skoobert interpreter. Called from skoobert console script."""
    parser = argparse.ArgumentParser(prog="skoobert", description="Lazy, single-assignment lambda calculus interpreter")
    parser.add_argument("file", help="file to interpret and run (if empty, goes to command-line mode)", nargs="?")
    parser.add_argument("--recursion-limit", type=int, default=DEFAULT_RECURSION_LIMIT,
                        help=f"maximum Python recursion depth (default: {DEFAULT_RECURSION_LIMIT})")
    args = parser.parse_args(argv)

    sys.setrecursionlimit(args.recursion_limit)

    with ErrorHandler() as error_handler:
        if args.file is not None:
            Session(error_handler, args.file).run()
        else:
            shell.start(error_handler)


if __name__ == "__main__":
    main()
