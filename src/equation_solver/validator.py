"""Structural validation of token trees.

A well-formed group alternates values and operators:

    [function] value (binary-op [function] value)*

where a value is a number, a variable or a nested group. The check walks
each group with a three-state machine, descending into nested groups.
"""

from enum import Enum, auto

from equation_solver.errors import NestingTooDeep, UnexpectedToken
from equation_solver.parser import (
    DEFAULT_MAX_DEPTH,
    Group,
    Node,
    Number,
    Operator,
    Variable,
    describe,
)


class State(Enum):
    """Position within a group while validating."""

    START = auto()
    AFTER_FUNCTION = auto()   # also entered after a binary operator
    AFTER_VALUE = auto()


def _is_value(node: Node) -> bool:
    return isinstance(node, (Number, Variable, Group))


def _next_state(state: State, node: Node) -> State | None:
    if state in (State.START, State.AFTER_FUNCTION) and _is_value(node):
        return State.AFTER_VALUE
    if isinstance(node, Operator):
        if state == State.START and node.is_functional:
            return State.AFTER_FUNCTION
        if state == State.AFTER_VALUE and node.is_binary:
            return State.AFTER_FUNCTION
    return None


def validate(group: Group, max_depth: int = DEFAULT_MAX_DEPTH) -> None:
    """Check that a group and all nested groups are well formed.

    Nested groups are checked as soon as they are reached, in source order.

    Raises:
        UnexpectedToken: If a node appears where it is not allowed, or a
            group does not end with a value
        NestingTooDeep: If groups nest deeper than max_depth
    """
    # Each frame is [group, index of the next node, state]
    frames: list[list] = [[group, 0, State.START]]

    while frames:
        frame = frames[-1]
        current, index, state = frame

        if index == len(current.nodes):
            if state != State.AFTER_VALUE:
                raise UnexpectedToken("Expression does not end with a value")
            frames.pop()
            continue

        node = current.nodes[index]
        next_state = _next_state(state, node)
        if next_state is None:
            raise UnexpectedToken(f"Unexpected {describe(node)} at index {index}")
        frame[1] = index + 1
        frame[2] = next_state

        if isinstance(node, Group):
            if len(frames) > max_depth:
                raise NestingTooDeep(max_depth)
            frames.append([node, 0, State.START])


def is_valid(group: Group, max_depth: int = DEFAULT_MAX_DEPTH) -> bool:
    """Return True if the group passes validate()."""
    try:
        validate(group, max_depth)
    except (UnexpectedToken, NestingTooDeep):
        return False
    return True
