"""Evaluator for equation token trees.

Reduces a Group to a single float in three phases, each working on a copy
of the group's node list:

1. Nested groups are evaluated first and replaced by numbers
2. Functional operators are applied to the value on their right
3. Binary operators are collapsed with their neighbours, one precedence
   tier at a time (power/root, then multiply/divide, then add/subtract),
   left to right within a tier

Exactly one number must remain at the end.

Nested groups are visited with an explicit stack rather than by recursion,
so the only limit on nesting is max_depth.
"""

from equation_solver.errors import NestingTooDeep, UnexpectedToken, UnsetVariable
from equation_solver.operators import PRECEDENCE_TIERS
from equation_solver.parser import (
    DEFAULT_MAX_DEPTH,
    Group,
    Node,
    Number,
    Operator,
    Variable,
    describe,
)


class Evaluator:
    """Evaluates token trees.

    Usage:
        group = parse("2 + 3 * 4")
        result = Evaluator().evaluate(group)  # 14.0
    """

    def __init__(self, max_depth: int = DEFAULT_MAX_DEPTH):
        self.max_depth = max_depth

    def evaluate(self, group: Group) -> float:
        """Evaluate a group and return its value.

        Raises:
            UnsetVariable: If a function is applied to an unbound variable
            UnexpectedToken: If the group is malformed or still holds
                variables next to binary operators
            NestingTooDeep: If groups nest deeper than max_depth
        """
        # Each frame is (group being evaluated, its nodes with nested groups
        # already replaced by their values)
        frames: list[tuple[Group, list[Node]]] = [(group, [])]

        while True:
            current, resolved = frames[-1]

            if len(resolved) < len(current.nodes):
                node = current.nodes[len(resolved)]
                if isinstance(node, Group):
                    if len(frames) > self.max_depth:
                        raise NestingTooDeep(self.max_depth)
                    frames.append((node, []))
                else:
                    resolved.append(node)
                continue

            value = self._reduce(resolved)
            frames.pop()
            if not frames:
                return value
            frames[-1][1].append(Number(value))

    def _reduce(self, nodes: list[Node]) -> float:
        """Reduce a group's nodes, with no nested groups left, to one value."""
        if not nodes:
            raise UnexpectedToken("Empty expression")

        self._apply_functions(nodes)
        for tier in PRECEDENCE_TIERS:
            self._apply_binary(nodes, tier)

        if len(nodes) != 1 or not isinstance(nodes[0], Number):
            remaining = ", ".join(describe(node) for node in nodes)
            raise UnexpectedToken(f"Unexpected tokens left after evaluation: {remaining}")

        return nodes[0].value

    # -------------------------------------------------------------------------
    # Phases
    # -------------------------------------------------------------------------

    def _apply_functions(self, nodes: list[Node]) -> None:
        """Replace each (function, number) pair with the function's value."""
        i = 0
        while i < len(nodes):
            node = nodes[i]
            if isinstance(node, Operator) and node.is_functional:
                if i + 1 >= len(nodes):
                    raise UnexpectedToken(
                        f"Function '{node.operator.value}' has no argument"
                    )
                argument = nodes[i + 1]
                if isinstance(argument, Number):
                    nodes[i:i + 2] = [Number(node.operator.apply(argument.value))]
                elif isinstance(argument, Variable):
                    raise UnsetVariable(argument.name)
                else:
                    raise UnexpectedToken(
                        f"Function '{node.operator.value}' cannot be applied to "
                        f"{describe(argument)}"
                    )
            i += 1

    def _apply_binary(self, nodes: list[Node], tier: int) -> None:
        """Collapse every binary operator of the given tier with its operands."""
        i = 0
        while i < len(nodes):
            node = nodes[i]
            if isinstance(node, Operator) and node.is_binary and node.operator.tier == tier:
                if i == 0 or i == len(nodes) - 1:
                    raise UnexpectedToken(
                        f"Operator '{node.operator.value}' is missing an operand"
                    )
                left, right = nodes[i - 1], nodes[i + 1]
                if not (isinstance(left, Number) and isinstance(right, Number)):
                    raise UnexpectedToken(
                        f"Operator '{node.operator.value}' expects numbers, got "
                        f"{describe(left)} and {describe(right)}"
                    )
                nodes[i - 1:i + 2] = [Number(node.operator.apply(left.value, right.value))]
                # The next operator has shifted into position i
                continue
            i += 1


def evaluate(group: Group, max_depth: int = DEFAULT_MAX_DEPTH) -> float:
    """Convenience function to evaluate a token tree.

    Args:
        group: The top-level group
        max_depth: Maximum group nesting depth

    Returns:
        The value of the group
    """
    return Evaluator(max_depth).evaluate(group)
