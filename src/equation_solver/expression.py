"""Expressions with incremental variable binding.

An Expression owns one parsed token tree. Variables in it can be bound one at
a time, to a number or to another expression, and the expression can be
evaluated once nothing it depends on is left unbound.

Usage:
    expr = Expression("sin(x + 132^y) / z")
    expr.list_unresolved_variables()  # {"x", "y", "z"}
    expr.bind("x", 3).bind("y", 2.3).bind("z", 6.9)
    expr.evaluate()

The names pi, e, tau and deg are bound to their constants as soon as the
expression is constructed, so they never show up as unresolved.
"""

import logging
import math
from typing import Mapping

from equation_solver.config import SolverConfig
from equation_solver.evaluator import Evaluator
from equation_solver.parser import Group, Node, Number, Operator, Variable, parse
from equation_solver.validator import validate

logger = logging.getLogger(__name__)

CONSTANTS: dict[str, float] = {
    "pi": math.pi,
    "e": math.e,
    "tau": math.tau,
    "deg": math.pi / 180.0,
}


def _substitute(group: Group, name: str, replacement: Node) -> int:
    """Replace every variable called name in the tree with replacement.

    A Group replacement is copied for each occurrence; other nodes are
    immutable and are shared.

    Replacements are not searched again, so a variable can be bound to an
    expression that mentions the same name. Returns the number of
    replacements made.
    """
    count = 0
    stack = [group]
    while stack:
        current = stack.pop()
        for i, node in enumerate(current.nodes):
            if isinstance(node, Variable) and node.name == name:
                current.nodes[i] = (
                    replacement.copy() if isinstance(replacement, Group) else replacement
                )
                count += 1
            elif isinstance(node, Group):
                stack.append(node)
    return count


def _format_number(value: float) -> str:
    if value.is_integer():
        return str(int(value))
    return repr(value)


_CLOSE = object()


def _render(group: Group) -> str:
    out: list[str] = []
    stack: list = list(reversed(group.nodes))
    spaced = False
    while stack:
        node = stack.pop()
        if node is _CLOSE:
            out.append(")")
            spaced = True
            continue
        if spaced:
            out.append(" ")
        if isinstance(node, Group):
            out.append("(")
            stack.append(_CLOSE)
            stack.extend(reversed(node.nodes))
            spaced = False
            continue
        if isinstance(node, Number):
            out.append(_format_number(node.value))
        elif isinstance(node, Variable):
            out.append(node.name)
        elif isinstance(node, Operator):
            out.append(node.operator.value)
        spaced = True
    return "".join(out)


class Expression:
    """A parsed equation whose variables can be bound and evaluated.

    Args:
        source: The equation text
        config: Parsing and evaluation settings; defaults to SolverConfig()

    Raises:
        UnexpectedToken: On an unknown character or invalid numeral, or (with
            validate_on_construct) a malformed token sequence
        MissingItems: If a group is never closed
        NestingTooDeep: If groups nest deeper than config.max_depth
    """

    def __init__(self, source: str, config: SolverConfig | None = None):
        self.config = config or SolverConfig()
        self._group = parse(source, self.config.max_depth)
        self._prepare()

    @classmethod
    def from_group(cls, group: Group, config: SolverConfig | None = None) -> "Expression":
        """Create an expression from an existing token tree (which is copied)."""
        expression = cls.__new__(cls)
        expression.config = config or SolverConfig()
        expression._group = group.copy()
        expression._prepare()
        return expression

    def _prepare(self) -> None:
        if self.config.validate_on_construct:
            validate(self._group, self.config.max_depth)
        for name, value in CONSTANTS.items():
            _substitute(self._group, name, Number(value))

    @property
    def group(self) -> Group:
        """A copy of the token tree."""
        return self._group.copy()

    # -------------------------------------------------------------------------
    # Binding
    # -------------------------------------------------------------------------

    def bind(self, name: str, value: float) -> "Expression":
        """Bind every occurrence of a variable to a number.

        Binding a name that does not occur (or was already bound) does
        nothing. Returns self so calls can be chained.
        """
        count = _substitute(self._group, name, Number(float(value)))
        logger.debug("Bound %s = %r in %d place(s)", name, value, count)
        return self

    def bind_expression(self, name: str, other: "Expression") -> "Expression":
        """Bind every occurrence of a variable to a copy of another expression.

        The other expression is copied as it is now: values already bound in
        it stay bound, and its unbound variables become unbound variables of
        this expression. Returns self so calls can be chained.
        """
        count = _substitute(self._group, name, other._group.copy())
        logger.debug("Bound %s to expression %r in %d place(s)", name, str(other), count)
        return self

    def bind_all(self, values: Mapping[str, float]) -> "Expression":
        """Bind several variables to numbers. Returns self."""
        for name, value in values.items():
            self.bind(name, value)
        return self

    # -------------------------------------------------------------------------
    # Inspection and evaluation
    # -------------------------------------------------------------------------

    def list_unresolved_variables(self) -> set[str]:
        """Return the names of all variables that are still unbound."""
        names: set[str] = set()
        stack = [self._group]
        while stack:
            current = stack.pop()
            for node in current.nodes:
                if isinstance(node, Variable):
                    names.add(node.name)
                elif isinstance(node, Group):
                    stack.append(node)
        return names

    def validate(self) -> None:
        """Check the token tree's structure.

        Raises:
            UnexpectedToken: If the tree is malformed
        """
        validate(self._group, self.config.max_depth)

    def evaluate(self) -> float:
        """Evaluate the expression.

        Raises:
            UnsetVariable: If a function is applied to an unbound variable
            UnexpectedToken: If the expression is malformed, or an unbound
                variable is an operand of a binary operator
            NestingTooDeep: If groups nest deeper than config.max_depth
        """
        return Evaluator(self.config.max_depth).evaluate(self._group)

    def __str__(self) -> str:
        return _render(self._group)

    def __repr__(self) -> str:
        return f"Expression({str(self)!r})"


def solve(
    source: str,
    variables: Mapping[str, float] | None = None,
    config: SolverConfig | None = None,
) -> float:
    """Parse, bind and evaluate an equation in one call.

    Args:
        source: The equation text
        variables: Values for the equation's variables
        config: Parsing and evaluation settings

    Returns:
        The value of the equation

    Example:
        solve("x^2 + 1", {"x": 3})  # 10.0
    """
    expression = Expression(source, config)
    if variables:
        expression.bind_all(variables)
    return expression.evaluate()
