"""Error taxonomy for the equation solver.

Every failure raised while parsing or evaluating an expression is an
EquationError. The concrete subclass (and its ``kind``) tells the caller
what went wrong:

- MissingItems: the input is structurally incomplete (unclosed group)
- UnexpectedToken: bad character, bad numeral, or a malformed token sequence
- UnsetVariable: a function was applied to a variable that is still unbound
- NestingTooDeep: groups are nested deeper than the configured limit
"""

from enum import Enum


class ErrorKind(Enum):
    """Kinds of errors that parsing or evaluation can produce."""

    MISSING_ITEMS = "MissingItems"
    UNEXPECTED_TOKEN = "UnexpectedToken"
    UNSET_VARIABLE = "UnsetVariable"
    NESTING_TOO_DEEP = "NestingTooDeep"


class EquationError(Exception):
    """Base class for all parse and evaluation errors.

    Attributes:
        message: Human-readable description of the problem
        kind: The error kind, fixed per subclass
    """

    kind: ErrorKind = ErrorKind.UNEXPECTED_TOKEN

    def __init__(self, message: str):
        self.message = message
        super().__init__(f"{self.kind.value} {message}")


class MissingItems(EquationError):
    """Input ended before every opened group was closed."""

    kind = ErrorKind.MISSING_ITEMS


class UnexpectedToken(EquationError):
    """A character or token appeared where it is not allowed."""

    kind = ErrorKind.UNEXPECTED_TOKEN

    def __init__(self, message: str, position: int | None = None):
        self.position = position
        if position is not None:
            message = f"{message} at position {position}"
        super().__init__(message)


class UnsetVariable(EquationError):
    """A functional operator was applied to an unbound variable."""

    kind = ErrorKind.UNSET_VARIABLE

    def __init__(self, variable: str):
        self.variable = variable
        super().__init__(f"Variable {variable} not set")


class NestingTooDeep(EquationError):
    """Groups are nested beyond the configured maximum depth."""

    kind = ErrorKind.NESTING_TOO_DEEP

    def __init__(self, max_depth: int):
        self.max_depth = max_depth
        super().__init__(f"Groups nested deeper than {max_depth} levels")
