"""Tests for equation parsing and evaluation.

Tests cover:
- Lexer: Tokenization of equation strings
- Parser: Token tree generation
- Validator: Structural checks of token trees
- Evaluator: Precedence, functions, IEEE edge cases, errors
- Expression: Constants, binding, substitution, enumeration
"""

import math

import pytest

from equation_solver import (
    BinaryOp,
    EquationError,
    ErrorKind,
    Evaluator,
    Expression,
    FunctionalOp,
    Group,
    Lexer,
    MissingItems,
    NestingTooDeep,
    Number,
    Operator,
    SolverConfig,
    Token,
    TokenType,
    UnexpectedToken,
    UnsetVariable,
    Variable,
    evaluate,
    is_valid,
    parse,
    solve,
    validate,
)
from equation_solver.parser import DEFAULT_MAX_DEPTH


def calc(source: str) -> float:
    return evaluate(parse(source))


# =============================================================================
# Error Tests
# =============================================================================


class TestErrors:
    """Tests for the error taxonomy."""

    def test_kinds(self):
        assert MissingItems("x").kind == ErrorKind.MISSING_ITEMS
        assert UnexpectedToken("x").kind == ErrorKind.UNEXPECTED_TOKEN
        assert UnsetVariable("x").kind == ErrorKind.UNSET_VARIABLE
        assert NestingTooDeep(3).kind == ErrorKind.NESTING_TOO_DEEP

    def test_message_format(self):
        assert str(MissingItems("Missing delimiter")) == "MissingItems Missing delimiter"
        assert str(UnsetVariable("x")) == "UnsetVariable Variable x not set"

    def test_unexpected_token_position(self):
        error = UnexpectedToken("Unexpected character '#'", 1)
        assert error.position == 1
        assert error.message == "Unexpected character '#' at position 1"

    def test_all_errors_are_equation_errors(self):
        for error in (MissingItems("a"), UnexpectedToken("b"), UnsetVariable("c"), NestingTooDeep(1)):
            assert isinstance(error, EquationError)


# =============================================================================
# Lexer Tests
# =============================================================================


class TestLexer:
    """Tests for the equation lexer."""

    def test_tokenize_numbers(self):
        tokens = Lexer("42 3.14 0 100").tokenize()

        assert tokens[0] == Token(TokenType.NUMBER, 42.0, 0)
        assert tokens[1] == Token(TokenType.NUMBER, 3.14, 3)
        assert tokens[2] == Token(TokenType.NUMBER, 0.0, 8)
        assert tokens[3] == Token(TokenType.NUMBER, 100.0, 10)
        assert tokens[4].type == TokenType.EOF

    def test_tokenize_identifiers_and_functions(self):
        tokens = Lexer("x abc sin").tokenize()

        assert tokens[0] == Token(TokenType.IDENTIFIER, "x", 0)
        assert tokens[1] == Token(TokenType.IDENTIFIER, "abc", 2)
        assert tokens[2] == Token(TokenType.FUNCTION, FunctionalOp.SIN, 6)

    def test_function_names_are_case_sensitive(self):
        tokens = Lexer("Sin").tokenize()
        assert tokens[0] == Token(TokenType.IDENTIFIER, "Sin", 0)

    def test_every_function_name(self):
        for function in FunctionalOp:
            tokens = Lexer(function.value).tokenize()
            assert tokens[0].type == TokenType.FUNCTION
            assert tokens[0].value == function

    def test_trailing_identifier_keeps_last_character(self):
        tokens = Lexer("1+abc").tokenize()
        assert tokens[2] == Token(TokenType.IDENTIFIER, "abc", 2)

    def test_digits_end_identifier(self):
        types = [t.type for t in Lexer("x2").tokenize()[:-1]]
        assert types == [TokenType.IDENTIFIER, TokenType.NUMBER]

    def test_letters_end_numeral(self):
        tokens = Lexer("2x").tokenize()
        assert tokens[0] == Token(TokenType.NUMBER, 2.0, 0)
        assert tokens[1] == Token(TokenType.IDENTIFIER, "x", 1)

    def test_tokenize_operators(self):
        tokens = Lexer("+ - * / ^").tokenize()

        assert [t.type for t in tokens[:-1]] == [
            TokenType.PLUS,
            TokenType.MINUS,
            TokenType.MULTIPLY,
            TokenType.DIVIDE,
            TokenType.POWER,
        ]
        assert [t.value for t in tokens[:-1]] == [
            BinaryOp.ADD,
            BinaryOp.SUBTRACT,
            BinaryOp.MULTIPLY,
            BinaryOp.DIVIDE,
            BinaryOp.POWER,
        ]

    def test_tokenize_delimiters(self):
        types = [t.type for t in Lexer("( ) [ ]").tokenize()[:-1]]
        assert types == [
            TokenType.LPAREN,
            TokenType.RPAREN,
            TokenType.LBRACKET,
            TokenType.RBRACKET,
        ]

    def test_whitespace_is_skipped(self):
        tokens = Lexer(" \t1 \n").tokenize()
        assert len(tokens) == 2
        assert tokens[0] == Token(TokenType.NUMBER, 1.0, 2)

    def test_error_on_invalid_character(self):
        with pytest.raises(UnexpectedToken) as exc_info:
            Lexer("2#3").tokenize()
        assert exc_info.value.position == 1
        assert "#" in str(exc_info.value)

    def test_error_on_invalid_number(self):
        with pytest.raises(UnexpectedToken, match="Invalid number"):
            Lexer("1.2.3").tokenize()

    def test_error_on_leading_decimal_point(self):
        with pytest.raises(UnexpectedToken):
            Lexer(".5").tokenize()

    def test_error_on_underscore(self):
        with pytest.raises(UnexpectedToken):
            Lexer("x_y").tokenize()


# =============================================================================
# Parser Tests
# =============================================================================


class TestParser:
    """Tests for the token tree parser."""

    def test_parse_flat(self):
        assert parse("2+3") == Group([Number(2.0), Operator(BinaryOp.ADD), Number(3.0)])

    def test_parse_function_and_variable(self):
        assert parse("sin x") == Group([Operator(FunctionalOp.SIN), Variable("x")])

    def test_parse_group(self):
        group = parse("(2+3)*4")
        assert len(group) == 3
        assert group.nodes[0] == Group([Number(2.0), Operator(BinaryOp.ADD), Number(3.0)])
        assert group.nodes[1] == Operator(BinaryOp.MULTIPLY)

    def test_parse_brackets(self):
        assert parse("[2]") == Group([Group([Number(2.0)])])

    def test_parse_nested(self):
        assert parse("((x))") == Group([Group([Group([Variable("x")])])])

    def test_parse_mixed_delimiters(self):
        group = parse("[(1)]")
        assert group == Group([Group([Group([Number(1.0)])])])

    def test_parse_empty(self):
        assert parse("") == Group([])

    def test_unclosed_group(self):
        with pytest.raises(MissingItems):
            parse("(2+3")

    def test_unclosed_nested_group(self):
        with pytest.raises(MissingItems):
            parse("[(2+3)")

    def test_unopened_group(self):
        with pytest.raises(UnexpectedToken):
            parse("2+3)")

    def test_mismatched_delimiters(self):
        with pytest.raises(UnexpectedToken):
            parse("(2+3]")
        with pytest.raises(UnexpectedToken):
            parse("[2+3)")

    def test_max_depth(self):
        assert parse("((1))", max_depth=2) == Group([Group([Group([Number(1.0)])])])
        with pytest.raises(NestingTooDeep):
            parse("((1))", max_depth=1)

    def test_deep_nesting_within_default_limit(self):
        source = "(" * 200 + "1" + ")" * 200
        assert calc(source) == 1.0

    def test_group_copy(self):
        group = parse("(x + [1]) * 2")
        copied = group.copy()
        assert copied == group
        assert copied.nodes[0] is not group.nodes[0]
        assert copied.nodes[0].nodes[2] is not group.nodes[0].nodes[2]
        assert copied.nodes[1] is group.nodes[1]

        copied.nodes[0].nodes.clear()
        assert len(group.nodes[0]) == 3


# =============================================================================
# Validator Tests
# =============================================================================


class TestValidator:
    """Tests for structural validation."""

    @pytest.mark.parametrize(
        "source",
        ["1", "x", "sin(x)", "sin x + 2", "1 + 2 * (x - 3)", "[a] ^ (b / c)"],
    )
    def test_valid(self, source):
        validate(parse(source))
        assert is_valid(parse(source))

    @pytest.mark.parametrize(
        "source",
        ["", "1 2", "1 +", "+ 1", "2 + sin x", "sin", "(1 +) * 2", "x (y)", "1 * * 2"],
    )
    def test_invalid(self, source):
        with pytest.raises(UnexpectedToken):
            validate(parse(source))
        assert not is_valid(parse(source))

    def test_validate_depth(self):
        with pytest.raises(NestingTooDeep):
            validate(parse("((1))"), max_depth=1)

    def test_deep_nesting_with_raised_limit(self):
        group = parse("(" * 900 + "1" + ")" * 900, max_depth=2000)
        validate(group, max_depth=2000)
        with pytest.raises(NestingTooDeep):
            validate(group, max_depth=899)


# =============================================================================
# Evaluator Tests
# =============================================================================


class TestEvaluator:
    """Tests for token tree evaluation."""

    @pytest.mark.parametrize(
        "source, expected",
        [
            ("7", 7.0),
            ("2+3*4", 14.0),
            ("2*3+4", 10.0),
            ("(2+3)*4", 20.0),
            ("[2+3]*4", 20.0),
            ("1+2+3", 6.0),
            ("10-4-3", 3.0),
            ("100/10/5", 2.0),
            ("2*3^2", 18.0),
            ("2.5 * 4", 10.0),
            ("((1+1)*(2+2))^2", 64.0),
        ],
    )
    def test_arithmetic(self, source, expected):
        assert calc(source) == expected

    def test_power_is_left_associative(self):
        assert calc("2^3^2") == 64.0

    def test_root(self):
        group = Group([Number(3.0), Operator(BinaryOp.ROOT), Number(8.0)])
        assert evaluate(group) == pytest.approx(2.0)

    def test_root_binds_like_power(self):
        group = Group([
            Number(1.0),
            Operator(BinaryOp.ADD),
            Number(2.0),
            Operator(BinaryOp.ROOT),
            Number(9.0),
        ])
        assert evaluate(group) == pytest.approx(4.0)

    @pytest.mark.parametrize(
        "function, oracle",
        [
            (FunctionalOp.LOG, math.log10),
            (FunctionalOp.LN, math.log),
            (FunctionalOp.SIN, math.sin),
            (FunctionalOp.COS, math.cos),
            (FunctionalOp.TAN, math.tan),
            (FunctionalOp.COT, lambda x: 1 / math.tan(x)),
            (FunctionalOp.SEC, lambda x: 1 / math.cos(x)),
            (FunctionalOp.CSC, lambda x: 1 / math.sin(x)),
            (FunctionalOp.ARCSIN, math.asin),
            (FunctionalOp.ARCCOS, math.acos),
            (FunctionalOp.ARCTAN, math.atan),
            (FunctionalOp.ARCCOT, lambda x: 1 / math.atan(x)),
            (FunctionalOp.ARCSEC, lambda x: 1 / math.acos(x)),
            (FunctionalOp.ARCCSC, lambda x: 1 / math.asin(x)),
        ],
    )
    def test_functions(self, function, oracle):
        assert calc(f"{function.value}(0.5)") == pytest.approx(oracle(0.5))

    def test_function_applies_to_right_neighbour_only(self):
        assert calc("sin 0 + 1") == 1.0
        assert calc("sin(0 + 1)") == pytest.approx(math.sin(1.0))

    def test_function_of_power(self):
        assert calc("log(10^3)") == pytest.approx(3.0)

    def test_division_by_zero(self):
        assert calc("1/0") == math.inf
        assert calc("0-1/0") == -math.inf
        assert math.isnan(calc("0/0"))

    def test_out_of_domain(self):
        assert calc("ln 0") == -math.inf
        assert math.isnan(calc("log(0-1)"))
        assert math.isnan(calc("arcsin 2"))
        assert calc("cot 0") == math.inf

    def test_evaluation_does_not_modify_group(self):
        group = parse("(1+2)*sin 0")
        before = parse("(1+2)*sin 0")
        evaluate(group)
        assert group == before

    @pytest.mark.parametrize("source", ["2+", "+2", "1 2", "", "()", "sin", "sin sin 0", "2 * / 3"])
    def test_malformed(self, source):
        with pytest.raises(UnexpectedToken):
            calc(source)

    def test_function_of_unset_variable(self):
        with pytest.raises(UnsetVariable) as exc_info:
            calc("1 + sin x")
        assert exc_info.value.variable == "x"

    def test_operator_with_unset_variable(self):
        with pytest.raises(UnexpectedToken, match="'x'"):
            calc("x + 1")

    def test_lone_variable(self):
        with pytest.raises(UnexpectedToken, match="'x'"):
            calc("x")

    def test_max_depth(self):
        group = parse("((1))")
        assert Evaluator(max_depth=2).evaluate(group) == 1.0
        with pytest.raises(NestingTooDeep):
            Evaluator(max_depth=1).evaluate(group)

    def test_deep_nesting_with_raised_limit(self):
        group = parse("(" * 900 + "1" + ")" * 900, max_depth=2000)
        assert Evaluator(max_depth=2000).evaluate(group) == 1.0
        with pytest.raises(NestingTooDeep):
            Evaluator(max_depth=899).evaluate(group)


# =============================================================================
# Expression Tests
# =============================================================================


class TestExpression:
    """Tests for the Expression wrapper."""

    def test_readme_example(self):
        expr = Expression("sin (x + 132^y) / z")
        value = expr.bind("x", 3.0).bind("y", 2.3).bind("z", 6.9).evaluate()
        assert value == pytest.approx(math.sin(3.0 + 132.0 ** 2.3) / 6.9)

    def test_constants(self):
        assert Expression("pi").evaluate() == math.pi
        assert Expression("e").evaluate() == math.e
        assert Expression("tau").evaluate() == pytest.approx(2 * math.pi)
        assert Expression("180 * deg").evaluate() == pytest.approx(math.pi)

    def test_constants_are_not_unresolved(self):
        expr = Expression("pi * r^2 + e + tau + deg")
        assert expr.list_unresolved_variables() == {"r"}

    def test_constants_cannot_be_rebound(self):
        expr = Expression("pi")
        expr.bind("pi", 3.0)
        assert expr.evaluate() == math.pi

    def test_list_unresolved_variables(self):
        expr = Expression("x + (y * sin z) + [x]")
        assert expr.list_unresolved_variables() == {"x", "y", "z"}

    def test_no_unresolved_variables(self):
        assert Expression("1 + 2").list_unresolved_variables() == set()

    def test_bind_everywhere(self):
        expr = Expression("x + (x * [x])")
        expr.bind("x", 2)
        assert expr.list_unresolved_variables() == set()
        assert expr.evaluate() == 6.0

    def test_bind_is_idempotent(self):
        once = Expression("a * 2").bind("a", 4.0).evaluate()
        twice = Expression("a * 2").bind("a", 4.0).bind("a", 4.0).evaluate()
        assert once == twice == 8.0

    def test_bind_absent_name_is_noop(self):
        expr = Expression("a + 1")
        expr.bind("b", 5)
        assert expr.list_unresolved_variables() == {"a"}

    def test_bind_returns_self(self):
        expr = Expression("a")
        assert expr.bind("a", 1) is expr

    def test_bind_all(self):
        assert Expression("a - b").bind_all({"a": 5, "b": 2}).evaluate() == 3.0

    def test_arccsc_is_reciprocal_of_arcsin(self):
        value = Expression("arccsc(x)").bind("x", 1).evaluate()
        assert value == pytest.approx(1 / math.asin(1))
        assert value != pytest.approx(math.asin(1 / 1))

    def test_bind_expression(self):
        a = Expression("x+1")
        b = Expression("y*2")
        a.bind_expression("x", b)
        assert a.list_unresolved_variables() == {"y"}
        a.bind("y", 5)
        assert a.evaluate() == 11.0

    def test_bind_expression_keeps_bound_values(self):
        a = Expression("x+1")
        b = Expression("y*z").bind("y", 3)
        a.bind_expression("x", b)
        assert a.list_unresolved_variables() == {"z"}
        assert a.bind("z", 2).evaluate() == 7.0

    def test_bind_expression_copies(self):
        a = Expression("x+1")
        b = Expression("y*2")
        a.bind_expression("x", b)
        b.bind("y", 100)
        assert a.list_unresolved_variables() == {"y"}
        assert a.bind("y", 1).evaluate() == 3.0

    def test_bind_expression_with_same_name(self):
        a = Expression("x+1")
        a.bind_expression("x", Expression("x*2"))
        assert a.list_unresolved_variables() == {"x"}
        assert a.bind("x", 3).evaluate() == 7.0

    def test_unresolved_variables_cause_failures(self):
        expr = Expression("a + sin b")
        assert expr.list_unresolved_variables() == {"a", "b"}
        with pytest.raises(UnsetVariable):
            expr.evaluate()
        expr.bind("b", 0)
        with pytest.raises(UnexpectedToken, match="'a'"):
            expr.evaluate()
        assert expr.bind("a", 1).evaluate() == 1.0

    def test_construct_errors(self):
        with pytest.raises(MissingItems):
            Expression("(2+3")
        with pytest.raises(UnexpectedToken):
            Expression("2#3")

    def test_dangling_operator_fails_on_evaluate(self):
        expr = Expression("2+")
        with pytest.raises(UnexpectedToken):
            expr.evaluate()

    def test_validate_on_construct(self):
        Expression("1 2")
        with pytest.raises(UnexpectedToken):
            Expression("1 2", SolverConfig(validate_on_construct=True))

    def test_validate(self):
        Expression("sin(x) + 1").validate()
        with pytest.raises(UnexpectedToken):
            Expression("1 +").validate()

    def test_max_depth_from_config(self):
        with pytest.raises(NestingTooDeep):
            Expression("((1))", SolverConfig(max_depth=1))

    def test_max_depth_after_substitution(self):
        config = SolverConfig(max_depth=2)
        outer = Expression("(x)", config)
        outer.bind_expression("x", Expression("((1))", config))
        with pytest.raises(NestingTooDeep):
            outer.evaluate()

    def test_deep_tree_at_default_limit(self):
        depth = DEFAULT_MAX_DEPTH
        inner = Expression("(" * depth + "x" + ")" * depth)
        assert len(inner.group) == 1
        assert str(inner) == "(" * depth + "x" + ")" * depth

        copied = Expression.from_group(inner.group)
        assert copied.bind("x", 3).evaluate() == 3.0
        assert inner.list_unresolved_variables() == {"x"}

        outer = Expression("y + 1").bind_expression("y", inner)
        assert outer.list_unresolved_variables() == {"x"}
        assert str(outer) == "(" * (depth + 1) + "x" + ")" * (depth + 1) + " + 1"
        with pytest.raises(NestingTooDeep):
            outer.bind("x", 2).evaluate()

    def test_deep_tree_with_raised_limit(self):
        config = SolverConfig(max_depth=2000, validate_on_construct=True)
        expr = Expression("(" * 900 + "1" + ")" * 900, config)
        assert expr.evaluate() == 1.0
        assert len(expr.group) == 1

    def test_from_group(self):
        group = parse("x * pi")
        expr = Expression.from_group(group)
        assert expr.list_unresolved_variables() == {"x"}
        assert group.nodes[2] == Variable("pi")
        assert expr.bind("x", 2).evaluate() == pytest.approx(2 * math.pi)

    def test_group_is_a_copy(self):
        expr = Expression("x")
        expr.group.nodes.clear()
        assert expr.list_unresolved_variables() == {"x"}

    def test_str(self):
        assert str(Expression("(x + 2)*y")) == "(x + 2) * y"
        assert str(Expression("sin [a]")) == "sin (a)"
        assert repr(Expression("1.5")) == "Expression('1.5')"

    def test_solve(self):
        assert solve("x^2 + 1", {"x": 3}) == 10.0
        assert solve("2+3*4") == 14.0
