"""Error handling for the sexpc language. Only GenericExceptions should be encountered during running: if another
type of error is raised and makes it all the way to ErrorHandler, it is assumed to be an internal issue.

Every failure is fatal to the evaluation that raised it. The subclasses below exist so that embedding code (tests, the
shell) can tell the kinds apart; the CLI treats them all the same.
"""

import sys

from termcolor import colored


class GenericException(Exception):
    """Templates an error/warning message so that it can be used to throw a sexpc error/warning. exprs are formatted
    into msg; exprs[0] doubles as the offending expr until locate is called.
    """

    def __init__(self, msg, exprs=None, start=0, end=-1, diagnosis=True, internal=False):
        """Parses args for GenericException or warning."""
        if exprs is None:
            exprs = ""
        if isinstance(exprs, str):
            exprs = [exprs]

        self.msg = msg.format(*(colored(expr, attrs=["bold"]) for expr in exprs))  # color expr snippets
        self.expr = exprs[0]  # exprs[0] should be the offending expr that caused the error
        self.end = end if end != -1 else len(self.expr)  # needed for error display

        self.start = start
        self.line_num = None
        self.diagnosis = diagnosis
        self.internal = internal

        super().__init__(self.msg)

    def locate(self, source, start, end):
        """Points this error at the byte range [start, end) of source. The offending expr becomes the first source
        line the range touches. Returns self so that callers can write `raise error.locate(...)`.
        """
        if isinstance(source, str):
            source = source.encode()

        line_start = source.rfind(b"\n", 0, start) + 1
        line_end = source.find(b"\n", start)
        if line_end == -1:
            line_end = len(source)

        line = source[line_start:line_end]
        self.expr = line.decode(errors="replace")
        self.line_num = source.count(b"\n", 0, start) + 1

        # columns are counted in characters, not bytes
        self.start = len(line[:start - line_start].decode(errors="replace"))
        self.end = len(line[:min(end, line_end) - line_start].decode(errors="replace"))
        return self


class LexError(GenericException):
    """Evaluation reached a byte the tokenizer did not recognize."""


class ParseError(GenericException):
    """Evaluation reached a node the parser could not build (e.g. an unmatched bracket)."""


class WrongTypeError(GenericException):
    """A builtin got a value of the wrong kind, or an application head is not an identifier."""


class ArityError(GenericException):
    """A builtin got the wrong number of arguments."""


class UnknownOperatorError(GenericException):
    """An application head names no builtin."""


class InputExhaustedError(GenericException):
    """No input word became available within the read budget."""


class InputFormatError(GenericException):
    """An input word could not be read as the requested kind."""


class StackUnderflowError(GenericException):
    """An application operand left no value on the evaluation stack."""


class ErrorHandler:
    """Context manager that will silently suppress Python errors and raise custom sexpc errors/warnings."""
    ERROR = "red"
    WARNING = "magenta"

    def __init__(self, fatal=True, stream=None):
        self.fatal = fatal
        self.stream = stream
        self.traceback = {}

    def _print(self, msg):
        print(msg, file=self.stream if self.stream is not None else sys.stderr)

    def register_file(self, path):
        """Registers path in traceback."""
        self.traceback[path] = None

    def _location(self, error):
        """Returns 'file:line:col: ' for error, or '' if error was never located."""
        if error.line_num is None or not self.traceback:
            return ""
        file = next(reversed(list(self.traceback)))  # most recently registered file
        return colored(f"{file}:{error.line_num}:{error.start + 1}: ", attrs=["bold"])

    @staticmethod
    def diagnose(error, warning=False):
        """Returns offending part of error.expr highlighted and bolded."""
        color = ErrorHandler.WARNING if warning else ErrorHandler.ERROR

        diagnosis = "  " + error.expr[:error.start]

        end = max(error.end, error.start + 1)
        diagnosis += colored(error.expr[error.start:end], color, attrs=["bold"])
        diagnosis += error.expr[end:] + "\n"

        diagnosis += "  " + " " * error.start
        diagnosis += colored("^" + "~" * (end - error.start - 1), color, attrs=["bold"])

        return diagnosis

    def warn(self, error):
        """Prints runtime warning message for error, a located GenericException."""
        error_msg = self._location(error)
        error_msg += colored("warning: ", ErrorHandler.WARNING, attrs=["bold"]) + error.msg
        self._print(error_msg)

        if not error.internal and error.expr and error.diagnosis:
            self._print(ErrorHandler.diagnose(error, warning=True))

    def throw(self, error):
        """Throws error. error must be a GenericException; its location is reported against the most recently
        registered file.
        """
        error_msg = self._location(error)

        if error.internal:
            error_msg += colored("[internal] ", ErrorHandler.ERROR, attrs=["bold"])

        error_msg += colored("error: ", ErrorHandler.ERROR, attrs=["bold"]) + error.msg
        self._print(error_msg)

        if not error.internal and error.expr and error.diagnosis:
            self._print(ErrorHandler.diagnose(error))

        if self.fatal:
            sys.exit(1)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        do_exit = False
        if exc_type is None:
            return False
        elif issubclass(exc_type, KeyboardInterrupt):
            self.throw(GenericException("keyboard interrupt", diagnosis=False))
        elif issubclass(exc_type, SystemExit):
            do_exit = True
        elif issubclass(exc_type, RecursionError):
            self.throw(GenericException("expression nested too deeply", diagnosis=False))
        elif issubclass(exc_type, GenericException):
            self.throw(exc_val)
        else:
            detail = str(exc_val).replace("{", "{{").replace("}", "}}")  # msg is a format string
            self.throw(GenericException(f"unknown error: '{exc_type.__name__}: {detail}'", internal=True))
            do_exit = True

        return not do_exit
