"""Error handling for the arithc compiler. Only GenericExceptions should be encountered during a run: if another type of
error is raised and makes it all the way to ErrorHandler, it is assumed to be an internal issue.

Every error is fatal to the run that raised it. Errors carry a character offset into the source rather than a line, so
ErrorHandler needs the source text (see register_source) to turn them into file:line:col diagnostics.
"""

import sys

from termcolor import colored


class GenericException(Exception):
    """Templates an error/warning message so that it can be used to throw an arithc error/warning."""

    def __init__(self, msg, exprs=None, offset=None, length=1, diagnosis=True, internal=False):
        """Parses args for GenericException or warning. Each expr in exprs is substituted into msg and bolded."""
        if exprs is None:
            exprs = []
        if isinstance(exprs, str):
            exprs = [exprs]

        super().__init__(msg.format(*exprs))
        self.msg = msg.format(*(colored(str(expr), attrs=["bold"]) for expr in exprs))  # color expr snippets

        self.offset = offset  # None if error isn't tied to a position in the source
        self.length = max(length, 1)
        self.diagnosis = diagnosis
        self.internal = internal


class UsageError(GenericException):
    """Bad command line or unreadable source file. Raised before the pipeline starts."""

    def __init__(self, msg, exprs=None):
        super().__init__(msg, exprs, diagnosis=False)


class LexError(GenericException):
    """Character that doesn't start any token, or an integer literal that doesn't fit in 64 bits."""

    def __init__(self, char, offset, msg="unexpected character '{}'", length=1):
        super().__init__(msg, char, offset=offset, length=length)
        self.char = char


class ParseError(GenericException):
    """Superclass for grammar errors. actual is the token the parser was looking at."""

    def __init__(self, msg, exprs, actual):
        super().__init__(msg, exprs, offset=actual.offset, length=actual.width)
        self.actual = actual


class UnexpectedToken(ParseError):

    def __init__(self, expected, actual):
        super().__init__("expected {}, got {}", (expected.label, actual.describe()), actual)
        self.expected = expected


class ExpectedSemicolon(ParseError):

    def __init__(self, actual):
        super().__init__("expected ';' at end of statement, got {}", actual.describe(), actual)


class EvalError(GenericException):
    """Superclass for errors raised while evaluating a statement."""


class DivisionByZero(EvalError):

    def __init__(self, node):
        super().__init__("division by zero", offset=node.offset)
        self.node = node


class ErrorHandler:
    """Context manager around a run: reports GenericExceptions (and any other exception, as an [internal] error) with
    file:line:col and a caret diagnosis, then exits with status 1 if fatal. Also prints non-fatal warnings.
    """
    ERROR = "red"
    WARNING = "magenta"
    PROG = "arithc"

    def __init__(self, fatal=True, stream=None):
        self.fatal = fatal
        self.stream = stream  # None means sys.stderr at time of printing
        self.path = None
        self.source = None

    def register_source(self, path, source):
        """Registers the file currently being compiled. Offsets in later errors are resolved against source."""
        self.path = path
        self.source = source

    def locate(self, offset):
        """Returns (line, line_num, col) of offset in the registered source. line_num and col are 1-based."""
        start = self.source.rfind("\n", 0, offset) + 1
        end = self.source.find("\n", offset)
        if end == -1:
            end = len(self.source)

        line_num = self.source.count("\n", 0, offset) + 1
        return self.source[start:end], line_num, offset - start + 1

    @staticmethod
    def diagnose(line, col, length, warning=False):
        """Returns offending part of line highlighted and bolded, with a caret underline."""
        color = ErrorHandler.WARNING if warning else ErrorHandler.ERROR
        start = col - 1
        end = min(start + length, max(len(line), start + 1))

        diagnosis = "  " + line[:start]
        diagnosis += colored(line[start:end], color, attrs=["bold"])
        diagnosis += line[end:] + "\n"

        diagnosis += "  " + " " * start
        diagnosis += colored("^" + "~" * (end - start - 1), color, attrs=["bold"])

        return diagnosis

    def _header(self, error):
        """file:line:col prefix for error, or the program name if error has no position."""
        if error.offset is not None and self.source is not None:
            __, line_num, col = self.locate(min(error.offset, len(self.source)))
            return colored(f"{self.path}:{line_num}:{col}: ", attrs=["bold"])
        if self.path is not None and not isinstance(error, UsageError):
            return colored(f"{self.path}: ", attrs=["bold"])
        return colored(f"{ErrorHandler.PROG}: ", attrs=["bold"])

    def _print(self, msg):
        print(msg, file=self.stream if self.stream is not None else sys.stderr)

    def _report(self, error, warning=False):
        if warning:
            kind = colored("warning: ", ErrorHandler.WARNING, attrs=["bold"])
        else:
            kind = colored("error: ", ErrorHandler.ERROR, attrs=["bold"])

        error_msg = self._header(error)
        if error.internal:
            error_msg += colored("[internal] ", ErrorHandler.ERROR, attrs=["bold"])
        self._print(error_msg + kind + error.msg)

        if not error.internal and error.diagnosis and error.offset is not None and self.source is not None:
            line, __, col = self.locate(min(error.offset, len(self.source)))
            self._print(ErrorHandler.diagnose(line, col, error.length, warning=warning))

    def warn(self, *args, **kwargs):
        """Generates and prints runtime warning message based on args. Never exits."""
        self._report(GenericException(*args, **kwargs), warning=True)

    def throw(self, error):
        """Prints error, which must be a GenericException, then exits with status 1 if this handler is fatal."""
        self._report(error)

        if self.fatal:
            sys.exit(1)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        do_exit = False
        if exc_type is KeyboardInterrupt:
            self.throw(GenericException("keyboard interrupt"))
        elif exc_type is SystemExit:
            do_exit = True
        elif exc_type is not None and issubclass(exc_type, GenericException):
            self.throw(exc_val)
        elif exc_type is not None:
            self.throw(GenericException("unknown error: '{}: {}'", (exc_type.__name__, exc_val), internal=True))

        return not do_exit
