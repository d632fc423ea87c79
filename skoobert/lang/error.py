"""Error handling for the skoobert language. Only SkoobertErrors should be encountered while running a program: if
another type of error is raised and makes it all the way to ErrorHandler, it is assumed to be an internal issue.

The core never renders errors itself. Every error carries a message, a 1-based (line, column) location and the source
text it was raised against; ErrorHandler is the host-side piece that turns those into a caret-pointing diagnosis.
"""

import sys

from termcolor import colored

from skoobert.grammar.tokens import Location


class SkoobertError(Exception):
    """Base class for lex, parse and runtime errors. location is a Location (or None if unknown), source is the full
    program text the location points into.
    """
    kind = "error"

    def __init__(self, msg, location=None, source=None):
        super().__init__(msg)
        self.msg = msg
        self.location = Location(*location) if location is not None else None
        self.source = source

    @property
    def line(self):
        return self.location.line if self.location else None

    @property
    def column(self):
        return self.location.column if self.location else None

    def attach(self, source):
        """Sets self.source if it hasn't been set yet."""
        if self.source is None:
            self.source = source

    def source_line(self):
        """Returns the line of self.source that self.location points into, or None if either is missing."""
        if self.source is None or self.location is None:
            return None
        lines = self.source.split("\n")
        if 0 < self.line <= len(lines):
            return lines[self.line - 1]
        return ""

    def __str__(self):
        if self.location is None:
            return f"{self.kind}: {self.msg}"
        return f"{self.kind} at line {self.line}, column {self.column}: {self.msg}"


class LexError(SkoobertError):
    """Unterminated string literal or unrecognized character."""
    kind = "lex error"


class ParseError(SkoobertError):
    """Expected-token mismatch."""
    kind = "parse error"


class EvalError(SkoobertError):
    """Runtime error: undefined variable, wrong value kind, division by zero, duplicate declaration."""
    kind = "runtime error"


class ErrorHandler:
    """Context manager that will silently suppress Python errors and print skoobert errors instead."""
    ERROR = "red"

    def __init__(self, path="<in>", fatal=True, file=None):
        self.path = path
        self.fatal = fatal
        self.file = file

    @staticmethod
    def diagnose(error):
        """Returns the offending line of error.source with a caret under error.column, or None if it can't."""
        line = error.source_line()
        if line is None:
            return None

        gutter = f"  {error.line} | "
        diagnosis = gutter + line + "\n"
        diagnosis += " " * (len(gutter) - 2) + "| " + " " * (error.column - 1)
        diagnosis += colored("^", ErrorHandler.ERROR, attrs=["bold"])

        return diagnosis

    def _print(self, msg):
        print(msg, file=self.file if self.file is not None else sys.stdout)

    def throw(self, error, internal=False):
        """Prints error, which must be a SkoobertError, and exits if self.fatal."""
        error_msg = ""
        if error.location is not None:
            error_msg += colored(f"{self.path}:{error.line}:{error.column}: ", attrs=["bold"])
        else:
            error_msg += colored(f"{self.path}: ", attrs=["bold"])

        if internal:
            error_msg += colored("[internal] ", ErrorHandler.ERROR, attrs=["bold"])

        error_msg += colored(f"{error.kind}: ", ErrorHandler.ERROR, attrs=["bold"]) + error.msg
        self._print(error_msg)

        diagnosis = ErrorHandler.diagnose(error)
        if not internal and diagnosis:
            self._print(diagnosis)

        if self.fatal:
            sys.exit(1)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        do_exit = False
        if exc_type is KeyboardInterrupt:
            self.throw(SkoobertError("keyboard interrupt"))
        elif exc_type is SystemExit:
            do_exit = True
        elif exc_type is RecursionError:
            self.throw(EvalError("maximum recursion depth exceeded (try a higher --recursion-limit)"))
        elif exc_type is not None and issubclass(exc_type, SkoobertError):
            self.throw(exc_val)
        elif exc_type is not None:
            self.throw(SkoobertError(f"unknown error: '{exc_type.__name__}: {exc_val}'"), internal=True)
            do_exit = True

        return not do_exit
