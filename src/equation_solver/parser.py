"""Parser for equation strings.

Converts the lexer's flat token stream into a token tree: one Group per
nesting level, holding numbers, variables, operators and nested groups in
source order. Precedence is not resolved here; the evaluator does that.

Parsing keeps an explicit stack of open groups, so it never recurses. Each
open group records the closer of the delimiter that opened it, and only that
closer may end it: ``(1+2)`` and ``[1+2]`` are fine, ``(1+2]`` is not.
"""

import logging
from dataclasses import dataclass, field

from equation_solver.errors import MissingItems, NestingTooDeep, UnexpectedToken
from equation_solver.lexer import OPERATOR_TOKENS, Lexer, TokenType
from equation_solver.operators import BinaryOp, FunctionalOp

logger = logging.getLogger(__name__)

DEFAULT_MAX_DEPTH = 256


# -----------------------------------------------------------------------------
# Token tree node types
# -----------------------------------------------------------------------------


class Node:
    """Base class for token tree nodes."""

    __slots__ = ()


@dataclass(frozen=True)
class Number(Node):
    """A numeric value."""
    value: float


@dataclass(frozen=True)
class Variable(Node):
    """A named value that has not been bound yet."""
    name: str


@dataclass(frozen=True)
class Operator(Node):
    """A binary or functional operator."""
    operator: BinaryOp | FunctionalOp

    @property
    def is_binary(self) -> bool:
        return isinstance(self.operator, BinaryOp)

    @property
    def is_functional(self) -> bool:
        return isinstance(self.operator, FunctionalOp)


@dataclass
class Group(Node):
    """An ordered sequence of nodes for one nesting level.

    The top level of an equation is a Group, and so is every parenthesized
    or bracketed part of it. A Group owns its node list.
    """
    nodes: list[Node] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.nodes)

    def copy(self) -> "Group":
        """Return a copy of this group with every nested group copied too.

        Numbers, variables and operators are immutable and are shared.
        Walks the tree with an explicit stack, so deep trees copy fine.
        """
        root = Group(list(self.nodes))
        stack = [root]
        while stack:
            current = stack.pop()
            for i, node in enumerate(current.nodes):
                if isinstance(node, Group):
                    clone = Group(list(node.nodes))
                    current.nodes[i] = clone
                    stack.append(clone)
        return root


def describe(node: Node) -> str:
    """Short human-readable description of a node for error messages."""
    if isinstance(node, Number):
        return f"number {node.value:g}"
    if isinstance(node, Variable):
        return f"unset variable '{node.name}'"
    if isinstance(node, Operator):
        return f"operator '{node.operator.value}'"
    return "group"


# -----------------------------------------------------------------------------
# Parser
# -----------------------------------------------------------------------------


OPENERS = {
    TokenType.LPAREN: TokenType.RPAREN,
    TokenType.LBRACKET: TokenType.RBRACKET,
}

CLOSERS = {TokenType.RPAREN, TokenType.RBRACKET}


class Parser:
    """Builds a token tree from an equation string.

    Usage:
        parser = Parser("sin(x + 132^y) / z")
        group = parser.parse()
    """

    def __init__(self, source: str, max_depth: int = DEFAULT_MAX_DEPTH):
        self.source = source
        self.max_depth = max_depth
        self.lexer = Lexer(source)

    def parse(self) -> Group:
        """Parse the source and return the top-level group.

        Raises:
            UnexpectedToken: On an unknown character, an invalid numeral, or
                a closing delimiter that does not close the current group
            MissingItems: If a group is still open at the end of input
            NestingTooDeep: If groups nest deeper than max_depth
        """
        # Each frame is (nodes collected so far, closer that ends the frame)
        frames: list[tuple[list[Node], TokenType | None]] = [([], None)]

        for token in self.lexer:
            nodes, closer = frames[-1]

            if token.type == TokenType.EOF:
                break

            if token.type == TokenType.NUMBER:
                nodes.append(Number(token.value))

            elif token.type == TokenType.IDENTIFIER:
                nodes.append(Variable(token.value))

            elif token.type == TokenType.FUNCTION or token.type in OPERATOR_TOKENS:
                nodes.append(Operator(token.value))

            elif token.type in OPENERS:
                if len(frames) > self.max_depth:
                    raise NestingTooDeep(self.max_depth)
                frames.append(([], OPENERS[token.type]))

            elif token.type in CLOSERS:
                if token.type != closer:
                    raise UnexpectedToken(
                        f"Unexpected closing delimiter '{token.value}'", token.position
                    )
                frames.pop()
                frames[-1][0].append(Group(nodes))

        if len(frames) != 1:
            raise MissingItems("Unexpected end of input (missing closing delimiter)")

        group = Group(frames[0][0])
        logger.debug("Parsed %r into %d top-level nodes", self.source, len(group))
        return group


def parse(source: str, max_depth: int = DEFAULT_MAX_DEPTH) -> Group:
    """Convenience function to parse an equation string.

    Args:
        source: The equation string
        max_depth: Maximum group nesting depth

    Returns:
        The top-level group
    """
    return Parser(source, max_depth).parse()
