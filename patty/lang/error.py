"""Error handling for the Patty language. Every failure inside the engine is raised as a PattyError and nothing in the
engine recovers from one: the surface (file runner or shell) decides whether it is fatal. If another type of error
makes it all the way to ErrorHandler, it is assumed to be an internal issue.
"""

import sys

from termcolor import colored


class PattyError(Exception):
    """Templates an error message so that it can be used to abort a Patty evaluation. exprs fill the {} slots of msg;
    exprs[0] should be the offending expr that caused the error.
    """

    def __init__(self, msg, exprs=None, internal=False):
        if exprs is None:
            exprs = []
        if not isinstance(exprs, (list, tuple)):
            exprs = [exprs]  # a single offending expr

        self.template = msg
        self.exprs = [str(expr) for expr in exprs]
        self.msg = msg.format(*self.exprs)
        self.expr = self.exprs[0] if self.exprs else ""
        self.internal = internal

        super().__init__(self.msg)

    def highlighted(self, color):
        """Returns msg with its expr snippets bolded and colored."""
        return self.template.format(*(colored(expr, color, attrs=["bold"]) for expr in self.exprs))


class UnresolvedSymbol(PattyError):
    """A symbol was evaluated but no scope binds it."""

    def __init__(self, name):
        super().__init__("cannot resolve symbol '{}'", name)
        self.name = name


class TypeMismatch(PattyError):
    """A value of the wrong variant was handed to an operation."""


class ArityMismatch(PattyError):
    """Wrong number of arguments, formals or destructuring targets."""


class UnsupportedOperation(PattyError):
    """The operation exists but not for this kind of value."""


class OutOfRange(PattyError):
    """An index or count falls outside what the value can provide."""


class MalformedInput(PattyError):
    """The reader met text it cannot turn into an expression."""


class EndOfInput(PattyError):
    """(read ...) was asked for a value after standard input ran dry."""


class ResourceExhausted(PattyError):
    """Evaluation recursed deeper than the host allows."""


class ErrorHandler:
    """Context manager that reports PattyErrors (and stray Python errors) as Patty errors/warnings."""
    ERROR = "red"
    WARNING = "magenta"

    def __init__(self, fatal=True, stream=None):
        self.fatal = fatal
        self.stream = stream
        self.traceback = {}

    @property
    def out(self):
        return self.stream if self.stream is not None else sys.stderr

    def register_file(self, path):
        """Registers path in traceback."""
        self.traceback[path] = (None, None)

    def register_line(self, path, line, line_num):
        """Registers line in traceback given path. Should be called prior to Session add/run."""
        self.traceback[path] = (line, line_num)

    def remove_line(self, path):
        """Removes line from traceback given path. Should be called after successful Session add/run."""
        self.traceback[path] = (None, None)

    @staticmethod
    def diagnose(error, warning=False):
        """Returns the offending expr of error, indented and highlighted."""
        color = ErrorHandler.WARNING if warning else ErrorHandler.ERROR
        return "  in " + colored(error.expr, color, attrs=["bold"])

    def _location(self):
        """Returns 'file: ' for the first registered file, or an empty string."""
        for file in self.traceback:
            return colored(f"{file}: ", attrs=["bold"])
        return ""

    def warn(self, msg, *exprs):
        """Generates and prints a runtime warning message based on args."""
        warning = PattyError(msg, list(exprs))

        warning_msg = self._location()
        warning_msg += colored("warning: ", ErrorHandler.WARNING, attrs=["bold"]) + warning.highlighted(self.WARNING)
        print(warning_msg, file=self.out)

    def throw(self, error):
        """Throws error using error and self.traceback. error must be a PattyError, and self.traceback must be a dict of
        file: (line, line_num) representing origination of error.
        """
        error_msg = ""
        lines = 0
        for file, (line, line_num) in self.traceback.items():  # dicts are insertion-ordered
            if line:
                error_msg += f"  File '{file}', line {line_num}:\n"
                error_msg += f"    {line}\n"
                lines += 1

        if lines > 1:
            error_msg = "Traceback:\n" + error_msg
        elif not lines:
            error_msg = self._location()

        if error.internal:
            error_msg += colored("[internal] ", ErrorHandler.ERROR, attrs=["bold"])

        error_msg += colored("error: ", ErrorHandler.ERROR, attrs=["bold"]) + error.highlighted(self.ERROR)
        print(error_msg, file=self.out)

        if not error.internal and isinstance(error, (TypeMismatch, ArityMismatch)) and error.expr:
            print(ErrorHandler.diagnose(error), file=self.out)

        if self.fatal:
            sys.exit(1)
        for path in self.traceback:  # if error occurred, forget the lines (no need if error is fatal)
            self.remove_line(path)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        do_exit = False
        if exc_type is KeyboardInterrupt:
            self.throw(PattyError("keyboard interrupt"))
        elif exc_type is SystemExit:
            do_exit = True
        elif exc_type is RecursionError:
            self.throw(ResourceExhausted("maximum recursion depth exceeded"))
        elif exc_type is not None and issubclass(exc_type, PattyError):
            self.throw(exc_val)
        elif exc_type is not None:
            self.throw(PattyError("unknown error: '{}: {}'", [exc_type.__name__, exc_val], internal=True))
            do_exit = True

        return not do_exit
