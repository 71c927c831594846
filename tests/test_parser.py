"""
Tests for formula/parser.py.

Covers the grammar (operators, aliases, grouping, right-recursive chaining),
each typed failure and the print/parse round-trip property.
"""

from __future__ import annotations

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from formula.expression import And, Expression, Implies, Not, Or, Var
from formula.parser import (
    EmptyExpressionError,
    InvalidCharacterError,
    InvalidOperatorError,
    MissingLeftOperandError,
    MissingNegationOperandError,
    MissingRightOperandError,
    ParseError,
    ParseErrorKind,
    UnmatchedParenthesesError,
    parse,
)

A, B, C = Var("A"), Var("B"), Var("C")


def expressions() -> st.SearchStrategy[Expression]:
    leaves = st.sampled_from("ABCPQRW").map(Var)
    return st.recursive(
        leaves,
        lambda children: st.one_of(
            children.map(Not),
            st.tuples(children, children).map(lambda pair: And(*pair)),
            st.tuples(children, children).map(lambda pair: Or(*pair)),
            st.tuples(children, children).map(lambda pair: Implies(*pair)),
        ),
        max_leaves=12,
    )


class TestGrammar:
    """Test successful parses."""

    @pytest.mark.parametrize(
        "text,expected",
        [
            ("A", A),
            ("A&B", And(A, B)),
            ("AvB", Or(A, B)),
            ("A|B", Or(A, B)),
            ("A>B", Implies(A, B)),
            ("A->B", Implies(A, B)),
            ("-A", Not(A)),
            ("~A", Not(A)),
            ("--A", Not(Not(A))),
            ("((A))", A),
        ],
    )
    def test_basic_forms(self, text, expected):
        assert parse(text) == expected

    def test_chained_operators_associate_right(self):
        assert parse("A&B&C") == And(A, And(B, C))
        assert parse("A>B>C") == Implies(A, Implies(B, C))
        assert parse("A&BvC") == And(A, Or(B, C))

    def test_negation_binds_to_next_operand(self):
        assert parse("-A&B") == And(Not(A), B)
        assert parse("-(A&B)") == Not(And(A, B))

    def test_brackets_group_left_operand(self):
        assert parse("(A&B)&C") == And(And(A, B), C)
        assert parse("(A>B)v(-C)") == Or(Implies(A, B), Not(C))

    def test_spaces_ignored(self):
        assert parse("  A  &  ( B v C ) ") == And(A, Or(B, C))
        assert parse("- A") == Not(A)


class TestErrors:
    """Each malformed input fails with its own error kind."""

    def test_empty(self):
        with pytest.raises(EmptyExpressionError):
            parse("")
        with pytest.raises(EmptyExpressionError):
            parse("   ")
        with pytest.raises(EmptyExpressionError):
            parse("()")

    def test_missing_left_operand(self):
        with pytest.raises(MissingLeftOperandError) as exc:
            parse("&B")
        assert exc.value.operator == "&"

    def test_missing_right_operand(self):
        with pytest.raises(MissingRightOperandError) as exc:
            parse("A&")
        assert exc.value.kind is ParseErrorKind.MISSING_RIGHT_OPERAND

    def test_invalid_character(self):
        with pytest.raises(InvalidCharacterError) as exc:
            parse("A$B")
        assert exc.value.char == "$"
        assert exc.value.kind is ParseErrorKind.INVALID_CHARACTER

    def test_lowercase_variable_rejected(self):
        with pytest.raises(InvalidCharacterError):
            parse("a&B")

    def test_missing_and_invalid_kinds_are_distinct(self):
        with pytest.raises(ParseError) as missing:
            parse("A&")
        with pytest.raises(ParseError) as invalid:
            parse("A$B")
        assert missing.value.kind != invalid.value.kind

    def test_missing_negation_operand(self):
        with pytest.raises(MissingNegationOperandError):
            parse("-")
        with pytest.raises(MissingNegationOperandError):
            parse("-&A")

    def test_adjacent_operands(self):
        with pytest.raises(InvalidOperatorError) as exc:
            parse("AB")
        assert exc.value.operator == "B"

    @pytest.mark.parametrize(
        "text,operator",
        [("A-B", "-"), ("A--", "-"), ("A~", "~"), ("A(B)", "("), ("(A)(B", "(")],
    )
    def test_operand_after_operand_is_checked_first(self, text, operator):
        """The misplaced token is reported before anything after it is parsed."""
        with pytest.raises(InvalidOperatorError) as exc:
            parse(text)
        assert exc.value.operator == operator

    def test_unclosed_bracket(self):
        with pytest.raises(UnmatchedParenthesesError) as exc:
            parse("(A&B")
        assert exc.value.partial == "A&B"
        assert exc.value.open_count == 1

    def test_nested_unclosed_bracket(self):
        with pytest.raises(UnmatchedParenthesesError) as exc:
            parse("((A&B)")
        assert exc.value.open_count == 1

    def test_stray_closing_bracket(self):
        with pytest.raises(UnmatchedParenthesesError) as exc:
            parse("A)")
        assert exc.value.open_count == -1

    def test_parse_errors_are_value_errors(self):
        with pytest.raises(ValueError):
            parse("A&")


class TestRoundTrip:
    """Canonical printing parses back to the same tree."""

    @given(expressions())
    @settings(max_examples=200)
    def test_parse_of_str_is_identity(self, expr):
        assert parse(str(expr)) == expr
