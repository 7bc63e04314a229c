"""Error handling for pcalc. Every error raised by the lexer, parser, or evaluator is a GenericException: if another
type of error makes it all the way to ErrorHandler, it is assumed to be an internal issue.

Errors fall into three phases, mirroring the pipeline:

```
LexError    ; raised while turning text into tokens
ParseError  ; raised while turning tokens into an expression tree
EvalError   ; raised while reducing an expression tree to a value
```

Python version must be >=3.7, because the traceback requires that dicts are insertion-ordered.
"""

import sys

from termcolor import colored


class GenericException(Exception):
    """Templates an error/warning message so that it can be used to throw a pcalc error/warning. Each '{}' in msg is
    filled in with the corresponding entry of exprs. source, start, and end locate the error in the original text.
    """
    phase = "running"

    def __init__(self, msg, exprs=None, source=None, start=0, end=-1, diagnosis=True, internal=False):
        """Parses args for GenericException or warning."""
        if exprs is None:
            exprs = []
        if isinstance(exprs, str):
            exprs = [exprs]
        exprs = [str(expr) for expr in exprs]

        self.msg = msg.format(*exprs)
        self.colored_msg = msg.format(*(colored(expr, attrs=["bold"]) for expr in exprs))  # bold expr snippets

        self.source = source if source is not None else ""
        self.start = start
        self.end = end if end != -1 else len(self.source)  # needed for error display

        self.diagnosis = diagnosis
        self.internal = internal

        super().__init__(self.msg)


class LexError(GenericException):
    """Raised when source text cannot be split into tokens."""
    phase = "parsing"


class UnexpectedCharacter(LexError):

    def __init__(self, char, source=None, pos=0):
        super().__init__("unexpected character '{}'", char, source, start=pos, end=pos + 1)
        self.char = char


class IntegerOverflow(LexError):

    def __init__(self, literal, source=None, pos=0):
        msg = "integer literal '{}' does not fit in a 64-bit signed integer"
        super().__init__(msg, literal, source, start=pos, end=pos + len(literal))
        self.literal = literal


class ParseError(GenericException):
    """Raised when a token sequence does not match the grammar."""
    phase = "parsing"


class UnexpectedEndOfInput(ParseError):

    def __init__(self, source=None):
        pos = len(source) if source else 0
        super().__init__("Unexpected end of input", source=source, start=pos, end=pos + 1)


class ExpectedExpression(ParseError):

    def __init__(self, found, source=None, start=0, end=-1):
        super().__init__("Expected expression, found '{}'", found, source, start=start, end=end)
        self.found = found


class ExpectedToken(ParseError):
    """A required keyword or symbol was missing. kind is the TokenKind that was expected."""

    def __init__(self, kind, msg, source=None, start=0, end=-1):
        super().__init__(msg, source=source, start=start, end=end)
        self.kind = kind


class TrailingInput(ParseError):

    def __init__(self, rest, source=None, start=0, end=-1):
        super().__init__("Expected end of input, found '{}'", rest, source, start=start, end=end)
        self.rest = rest


class NestingTooDeep(ParseError):

    def __init__(self, source=None):
        super().__init__("expression is nested too deeply to parse", source=source, diagnosis=False)


class EvalError(GenericException):
    """Raised when a well-formed expression tree cannot be reduced to a value."""
    phase = "evaluating"


class TypeMismatch(EvalError):
    """An operand had the wrong type. operator is the display name of the offending operator, or 'If'."""

    def __init__(self, operator, msg=None):
        if msg is None:
            msg = "Invalid operands for '{}' operator"
        super().__init__(msg, operator)
        self.operator = operator


class NotAFunction(EvalError):

    def __init__(self, value):
        super().__init__("Invalid function expression in apply: '{}' is not a function", value)
        self.value = value


class DivisionByZero(EvalError):

    def __init__(self, dividend):
        super().__init__("Division by zero: '{} / 0'", dividend)


class ArithmeticOverflow(EvalError):

    def __init__(self, operator, lhs, rhs):
        msg = "'{}' operator overflows a 64-bit signed integer with operands {} and {}"
        super().__init__(msg, (operator, lhs, rhs))
        self.operator = operator


class RecursionLimitExceeded(EvalError):

    def __init__(self):
        super().__init__("maximum recursion depth exceeded during evaluation", diagnosis=False)


class ErrorHandler:
    """Context manager that will silently suppress Python errors and raise custom pcalc errors/warnings. Also the sink
    for reduction steps when tracing is on.
    """
    ERROR = "red"
    WARNING = "magenta"
    STEP = "cyan"

    def __init__(self, fatal=True, verbose=False):
        self.fatal = fatal
        self.verbose = verbose
        self.traceback = {}
        self.steps = []
        self.errors = []

    def register_file(self, path):
        """Registers path in traceback."""
        self.traceback[path] = (None, None)

    def register_line(self, path, line, line_num):
        """Registers line in traceback given path. Should be called prior to Session add/run."""
        self.traceback[path] = (line, line_num)

    def remove_line(self, path):
        """Removes line from traceback given path. Should be called after successful Session add/run."""
        self.traceback[path] = (None, None)

    def register_step(self, step, expr):
        """Records and prints a single reduction step. Does nothing unless verbose."""
        if not self.verbose:
            return

        self.steps.append((step, str(expr)))
        print(colored(f"  {step:>6} ", ErrorHandler.STEP, attrs=["bold"]) + str(expr))

    @staticmethod
    def diagnose(error, warning=False):
        """Returns offending part of error.source highlighted and bolded."""
        color = ErrorHandler.WARNING if warning else ErrorHandler.ERROR

        diagnosis = "  " + error.source[:error.start]

        end = max(error.end, error.start + 1)
        diagnosis += colored(error.source[error.start:end], color, attrs=["bold"])
        diagnosis += error.source[end:] + "\n"

        diagnosis += "  " + " " * error.start
        diagnosis += colored("^" + "~" * (end - error.start - 1), color, attrs=["bold"])

        return diagnosis

    def _location(self, error):
        """Returns 'file:line_num:col: ' for the innermost registered line, or an empty string."""
        for file, (line, line_num) in reversed(list(self.traceback.items())):
            if line:
                return colored(f"{file}:{line_num}:{error.start + 1}: ", attrs=["bold"])
        return ""

    def warn(self, *args, **kwargs):
        """Generates and prints runtime warning message based on args."""
        error = GenericException(*args, **kwargs)

        error_msg = self._location(error)
        error_msg += colored("warning: ", ErrorHandler.WARNING, attrs=["bold"]) + error.colored_msg

        print(error_msg)

        if not error.internal and error.source and error.diagnosis:
            print(ErrorHandler.diagnose(error, warning=True))

    def throw(self, error):
        """Throws error using error and self.traceback. error must be a GenericException, and self.traceback must be a
        dict of file: (line, line_num) representing origination of error.
        """
        self.errors.append(error)

        error_msg = ""
        lines = 0
        for file, (line, line_num) in self.traceback.items():  # assumes dict is insertion-ordered
            if line:
                error_msg += f"  File '{file}', line {line_num}:\n"
                error_msg += f"    {line}\n"
                lines += 1

        if lines > 1:
            error_msg = "Traceback:\n" + error_msg
        else:
            error_msg = self._location(error)

        if error.internal:
            error_msg += colored("[internal] ", ErrorHandler.ERROR, attrs=["bold"])

        error_msg += colored("error: ", ErrorHandler.ERROR, attrs=["bold"]) + error.colored_msg
        print(error_msg)

        if not error.internal and error.source and error.diagnosis:
            print(ErrorHandler.diagnose(error))

        if self.fatal:
            sys.exit(1)
        self.traceback = {path: (None, None) for path in self.traceback}  # reset (no need if error is fatal)

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
            do_exit = True

        return not do_exit
