"""Lexer/tokenizer for equation strings.

Converts an expression string into a flat stream of tokens for the parser.

Token types:
- Values: NUMBER, IDENTIFIER (variable names)
- Functions: FUNCTION (sin, ln, arccot, ...)
- Operators: PLUS, MINUS, MULTIPLY, DIVIDE, POWER
- Delimiters: LPAREN, RPAREN, LBRACKET, RBRACKET
"""

import re
from dataclasses import dataclass
from enum import Enum, auto
from typing import Iterator

from equation_solver.errors import UnexpectedToken
from equation_solver.operators import BinaryOp, FunctionalOp


class TokenType(Enum):
    """Types of tokens in an equation."""

    # Values
    NUMBER = auto()
    IDENTIFIER = auto()

    # Unary functions
    FUNCTION = auto()

    # Binary operators
    PLUS = auto()        # +
    MINUS = auto()       # -
    MULTIPLY = auto()    # *
    DIVIDE = auto()      # /
    POWER = auto()       # ^

    # Delimiters
    LPAREN = auto()      # (
    RPAREN = auto()      # )
    LBRACKET = auto()    # [
    RBRACKET = auto()    # ]

    # End of input
    EOF = auto()


@dataclass(frozen=True)
class Token:
    """A single token from the lexer.

    Attributes:
        type: The token type
        value: Parsed number, identifier text, or the operator it stands for
        position: Character position in the source string (0-indexed)
    """

    type: TokenType
    value: float | str | BinaryOp | FunctionalOp | None
    position: int

    def __repr__(self) -> str:
        return f"Token({self.type.name}, {self.value!r}, pos={self.position})"


# Token patterns, tried in order
TOKEN_PATTERNS = [
    # Whitespace (skip)
    (r"\s+", None),

    # A numeral starts with a digit and runs over every digit and '.'
    (r"\d[\d.]*", TokenType.NUMBER),

    # Maximal run of letters; digits and underscores end an identifier
    (r"[^\W\d_]+", TokenType.IDENTIFIER),

    (r"\+", TokenType.PLUS),
    (r"-", TokenType.MINUS),
    (r"\*", TokenType.MULTIPLY),
    (r"/", TokenType.DIVIDE),
    (r"\^", TokenType.POWER),

    (r"\(", TokenType.LPAREN),
    (r"\)", TokenType.RPAREN),
    (r"\[", TokenType.LBRACKET),
    (r"\]", TokenType.RBRACKET),
]

OPERATOR_TOKENS = {
    TokenType.PLUS: BinaryOp.ADD,
    TokenType.MINUS: BinaryOp.SUBTRACT,
    TokenType.MULTIPLY: BinaryOp.MULTIPLY,
    TokenType.DIVIDE: BinaryOp.DIVIDE,
    TokenType.POWER: BinaryOp.POWER,
}


class Lexer:
    """Tokenizer for equation strings.

    Usage:
        lexer = Lexer("sin(x + 132^y) / z")
        for token in lexer:
            print(token)
    """

    _compiled_patterns = [
        (re.compile(pattern), token_type) for pattern, token_type in TOKEN_PATTERNS
    ]

    def __init__(self, source: str):
        self.source = source
        self.position = 0

    def __iter__(self) -> Iterator[Token]:
        """Iterate over all tokens in the source."""
        while True:
            token = self.next_token()
            yield token
            if token.type == TokenType.EOF:
                break

    def next_token(self) -> Token:
        """Get the next token from the source."""
        while self.position < len(self.source):
            for pattern, token_type in self._compiled_patterns:
                match = pattern.match(self.source, self.position)
                if match:
                    break
            else:
                raise UnexpectedToken(
                    f"Unexpected character '{self.source[self.position]}'",
                    self.position,
                )

            start = self.position
            text = match.group()
            self.position = match.end()

            if token_type is None:
                continue

            if token_type == TokenType.NUMBER:
                try:
                    value = float(text)
                except ValueError:
                    raise UnexpectedToken(f"Invalid number '{text}'", start) from None
                return Token(TokenType.NUMBER, value, start)

            if token_type == TokenType.IDENTIFIER:
                function = FunctionalOp.from_name(text)
                if function is not None:
                    return Token(TokenType.FUNCTION, function, start)
                return Token(TokenType.IDENTIFIER, text, start)

            return Token(token_type, OPERATOR_TOKENS.get(token_type, text), start)

        return Token(TokenType.EOF, None, self.position)

    def tokenize(self) -> list[Token]:
        """Tokenize the entire source and return list of tokens."""
        return list(self)
