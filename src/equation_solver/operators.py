"""Operators understood by the equation solver.

Binary operators combine the values on either side of them and are resolved
in three precedence tiers:

- Tier 0: ^ (power), root
- Tier 1: * /
- Tier 2: + -

Every tier is resolved left to right, so ``2^3^2`` is ``(2^3)^2``.

Functional operators (sin, ln, arccot, ...) are unary and apply to the value
immediately to their right.

All math follows IEEE-754 float semantics: division by zero and out-of-domain
arguments produce inf or nan instead of raising.
"""

import math
from enum import Enum
from typing import Callable


# -----------------------------------------------------------------------------
# IEEE-754 helpers
# -----------------------------------------------------------------------------


def _divide(left: float, right: float) -> float:
    """Divide, returning +/-inf or nan for a zero divisor."""
    if right == 0:
        if left == 0 or math.isnan(left):
            return math.nan
        return math.copysign(math.inf, left) * math.copysign(1.0, right)
    return left / right


def _power(base: float, exponent: float) -> float:
    """Raise base to exponent, returning inf or nan where math.pow raises."""
    try:
        return math.pow(base, exponent)
    except OverflowError:
        if base < 0 and exponent.is_integer() and exponent % 2 == 1:
            return -math.inf
        return math.inf
    except ValueError:
        # Zero to a negative power, or a negative base with a fractional exponent
        if base == 0:
            return math.inf
        return math.nan


def _reciprocal(value: float) -> float:
    return _divide(1.0, value)


def _domain(func: Callable[[float], float]) -> Callable[[float], float]:
    """Wrap a math function so domain errors yield nan."""

    def wrapper(x: float) -> float:
        try:
            return func(x)
        except ValueError:
            return math.nan

    wrapper.__name__ = func.__name__
    return wrapper


def _logarithm(func: Callable[[float], float]) -> Callable[[float], float]:
    """Wrap a logarithm so log(0) is -inf and negative input is nan."""

    def wrapper(x: float) -> float:
        if x == 0:
            return -math.inf
        if x < 0:
            return math.nan
        return func(x)

    wrapper.__name__ = func.__name__
    return wrapper


_sin = _domain(math.sin)
_cos = _domain(math.cos)
_tan = _domain(math.tan)
_asin = _domain(math.asin)
_acos = _domain(math.acos)


# -----------------------------------------------------------------------------
# Binary operators
# -----------------------------------------------------------------------------


class BinaryOp(Enum):
    """Left-associative binary operators.

    The value is the source symbol. ROOT has no symbol in expression text
    and is only available to code that builds token trees directly.
    """

    ADD = "+"
    SUBTRACT = "-"
    MULTIPLY = "*"
    DIVIDE = "/"
    POWER = "^"
    ROOT = "root"

    @property
    def tier(self) -> int:
        """Precedence tier; lower tiers are resolved first."""
        return _BINARY_TIERS[self]

    def apply(self, left: float, right: float) -> float:
        """Combine the left and right operands."""
        return _BINARY_IMPLEMENTATIONS[self](left, right)


PRECEDENCE_TIERS = (0, 1, 2)

_BINARY_TIERS: dict[BinaryOp, int] = {
    BinaryOp.POWER: 0,
    BinaryOp.ROOT: 0,
    BinaryOp.MULTIPLY: 1,
    BinaryOp.DIVIDE: 1,
    BinaryOp.ADD: 2,
    BinaryOp.SUBTRACT: 2,
}

_BINARY_IMPLEMENTATIONS: dict[BinaryOp, Callable[[float, float], float]] = {
    BinaryOp.ADD: lambda left, right: left + right,
    BinaryOp.SUBTRACT: lambda left, right: left - right,
    BinaryOp.MULTIPLY: lambda left, right: left * right,
    BinaryOp.DIVIDE: _divide,
    BinaryOp.POWER: _power,
    # left is the degree of the root, right the radicand
    BinaryOp.ROOT: lambda left, right: _power(right, _reciprocal(left)),
}


# -----------------------------------------------------------------------------
# Functional operators
# -----------------------------------------------------------------------------


class FunctionalOp(Enum):
    """Unary operators applied to the value on their right.

    The value is the exact (case-sensitive) name used in expression text.
    """

    LOG = "log"
    LN = "ln"
    SIN = "sin"
    COS = "cos"
    TAN = "tan"
    COT = "cot"
    SEC = "sec"
    CSC = "csc"
    ARCSIN = "arcsin"
    ARCCOS = "arccos"
    ARCTAN = "arctan"
    ARCCOT = "arccot"
    ARCSEC = "arcsec"
    ARCCSC = "arccsc"

    @classmethod
    def from_name(cls, name: str) -> "FunctionalOp | None":
        """Look up a function by its source name, or None if unknown."""
        try:
            return cls(name)
        except ValueError:
            return None

    def apply(self, value: float) -> float:
        """Evaluate the function at value."""
        return _FUNCTIONAL_IMPLEMENTATIONS[self](value)


# The inverse co-functions are reciprocals of the standard inverses
# (arccot(x) == 1 / atan(x)), not inverses of the reciprocals.
_FUNCTIONAL_IMPLEMENTATIONS: dict[FunctionalOp, Callable[[float], float]] = {
    FunctionalOp.LOG: _logarithm(math.log10),
    FunctionalOp.LN: _logarithm(math.log),
    FunctionalOp.SIN: _sin,
    FunctionalOp.COS: _cos,
    FunctionalOp.TAN: _tan,
    FunctionalOp.COT: lambda x: _reciprocal(_tan(x)),
    FunctionalOp.SEC: lambda x: _reciprocal(_cos(x)),
    FunctionalOp.CSC: lambda x: _reciprocal(_sin(x)),
    FunctionalOp.ARCSIN: _asin,
    FunctionalOp.ARCCOS: _acos,
    FunctionalOp.ARCTAN: math.atan,
    FunctionalOp.ARCCOT: lambda x: _reciprocal(math.atan(x)),
    FunctionalOp.ARCSEC: lambda x: _reciprocal(_acos(x)),
    FunctionalOp.ARCCSC: lambda x: _reciprocal(_asin(x)),
}
