"""Equation parsing and evaluation.

This package provides:
- Lexer: Tokenizes equation strings
- Parser: Builds a token tree (nested groups) from tokens
- validate: Structural check of a token tree
- Evaluator: Reduces a token tree to a float by precedence tier
- Expression: Parsed equation with incremental variable binding
"""

from equation_solver.config import ConfigError, SolverConfig
from equation_solver.errors import (
    EquationError,
    ErrorKind,
    MissingItems,
    NestingTooDeep,
    UnexpectedToken,
    UnsetVariable,
)
from equation_solver.evaluator import Evaluator, evaluate
from equation_solver.expression import CONSTANTS, Expression, solve
from equation_solver.lexer import Lexer, Token, TokenType
from equation_solver.operators import BinaryOp, FunctionalOp
from equation_solver.parser import (
    Group,
    Node,
    Number,
    Operator,
    Parser,
    Variable,
    parse,
)
from equation_solver.validator import is_valid, validate

__all__ = [
    # Config
    "ConfigError",
    "SolverConfig",
    # Errors
    "EquationError",
    "ErrorKind",
    "MissingItems",
    "NestingTooDeep",
    "UnexpectedToken",
    "UnsetVariable",
    # Evaluator
    "Evaluator",
    "evaluate",
    # Expression
    "CONSTANTS",
    "Expression",
    "solve",
    # Lexer
    "Lexer",
    "Token",
    "TokenType",
    # Operators
    "BinaryOp",
    "FunctionalOp",
    # Parser
    "Group",
    "Node",
    "Number",
    "Operator",
    "Parser",
    "Variable",
    "parse",
    # Validator
    "is_valid",
    "validate",
]
