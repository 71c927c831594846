"""Propositional formula trees, parsing and truth-table evaluation."""

from .expression import And, Expression, Implies, Not, Or, Var, join_expressions
from .parser import (
    EmptyExpressionError,
    InvalidCharacterError,
    InvalidOperatorError,
    MissingLeftOperandError,
    MissingNegationOperandError,
    MissingRightOperandError,
    ParseError,
    ParseErrorKind,
    Parser,
    UnmatchedParenthesesError,
    parse,
)
from .truthtab import atoms, entails, evaluate

__all__: list[str] = [
    # Expression tree
    "And",
    "Expression",
    "Implies",
    "Not",
    "Or",
    "Var",
    "join_expressions",

    # Parsing
    "EmptyExpressionError",
    "InvalidCharacterError",
    "InvalidOperatorError",
    "MissingLeftOperandError",
    "MissingNegationOperandError",
    "MissingRightOperandError",
    "ParseError",
    "ParseErrorKind",
    "Parser",
    "UnmatchedParenthesesError",
    "parse",

    # Semantics
    "atoms",
    "entails",
    "evaluate",
]
