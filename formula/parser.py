"""
Parser for the single-line formula grammar used by the prover.

Grammar:
    * ``A``-``Z``        single-letter variables
    * ``&``              conjunction
    * ``v`` or ``|``     disjunction
    * ``>`` or ``->``    implication
    * ``-`` or ``~``     prefix negation (binds to the next operand only)
    * ``( ... )``        grouping; spaces are ignored

Binary operators take everything to their right as the right operand, so
``A&B&C`` parses as ``A&(B&C)`` and ``-A&B`` as ``(-A)&B``.  The ``->`` and
``~`` aliases let canonical printing (``str(expr)``) parse back to the same
tree.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional

from .expression import And, Expression, Implies, Not, Or, Var

VARIABLES = frozenset("ABCDEFGHIJKLMNOPQRSTUVWXYZ")
NEGATIONS = frozenset("-~")
CONNECTIVES = {"&": And, "v": Or, "|": Or, ">": Implies}
BINARY_OPERATORS = frozenset(CONNECTIVES)


class ParseErrorKind(Enum):
    INVALID_CHARACTER = "invalid_character"
    EMPTY_EXPRESSION = "empty_expression"
    MISSING_LEFT_OPERAND = "missing_left_operand"
    MISSING_RIGHT_OPERAND = "missing_right_operand"
    MISSING_NEGATION_OPERAND = "missing_negation_operand"
    INVALID_OPERATOR = "invalid_operator"
    UNMATCHED_PARENTHESES = "unmatched_parentheses"


class ParseError(ValueError):
    """Base class for formula parse failures."""

    kind: ParseErrorKind


class InvalidCharacterError(ParseError):
    kind = ParseErrorKind.INVALID_CHARACTER

    def __init__(self, char: str) -> None:
        self.char = char
        super().__init__(f"'{char}' did not match one of the valid characters.")


class EmptyExpressionError(ParseError):
    kind = ParseErrorKind.EMPTY_EXPRESSION

    def __init__(self) -> None:
        super().__init__("Empty expression")


class MissingLeftOperandError(ParseError):
    kind = ParseErrorKind.MISSING_LEFT_OPERAND

    def __init__(self, operator: str) -> None:
        self.operator = operator
        super().__init__(f"Expected left operand before '{operator}'")


class MissingRightOperandError(ParseError):
    kind = ParseErrorKind.MISSING_RIGHT_OPERAND

    def __init__(self, operator: str) -> None:
        self.operator = operator
        super().__init__(f"Expected right operand after '{operator}'")


class MissingNegationOperandError(ParseError):
    kind = ParseErrorKind.MISSING_NEGATION_OPERAND

    def __init__(self) -> None:
        super().__init__("Expected expression after '-'")


class InvalidOperatorError(ParseError):
    kind = ParseErrorKind.INVALID_OPERATOR

    def __init__(self, operator: str) -> None:
        self.operator = operator
        super().__init__(f"Invalid operator: '{operator}'")


class UnmatchedParenthesesError(ParseError):
    kind = ParseErrorKind.UNMATCHED_PARENTHESES

    def __init__(self, partial: str, open_count: int) -> None:
        self.partial = partial
        self.open_count = open_count
        super().__init__(
            f"Unmatched parentheses in expression: {partial} at bracket {open_count}"
        )


class Parser:
    """Recursive parser over a single formula string."""

    def __init__(self, text: str) -> None:
        self._text = text
        self._pos = 0

    def parse(self) -> Expression:
        operand: Optional[Expression] = None

        while self._pos < len(self._text):
            char = self._advance()
            if char == " ":
                continue
            if char == "(":
                self._expect_operand_slot(operand, char)
                operand = self._parse_bracket()
            elif char in VARIABLES:
                self._expect_operand_slot(operand, char)
                operand = Var(char)
            elif char == "-" and self._peek() == ">":
                self._advance()
                return self._parse_binary(">", operand)
            elif char in NEGATIONS:
                self._expect_operand_slot(operand, char)
                operand = self._parse_negation()
            elif char in BINARY_OPERATORS:
                return self._parse_binary(char, operand)
            elif char == ")":
                raise UnmatchedParenthesesError(self._text[: self._pos], -1)
            else:
                raise InvalidCharacterError(char)

        if operand is None:
            raise EmptyExpressionError()
        return operand

    def _advance(self) -> str:
        char = self._text[self._pos]
        self._pos += 1
        return char

    def _peek(self) -> Optional[str]:
        if self._pos < len(self._text):
            return self._text[self._pos]
        return None

    def _skip_spaces(self) -> None:
        while self._peek() == " ":
            self._pos += 1

    @staticmethod
    def _expect_operand_slot(operand: Optional[Expression], char: str) -> None:
        # Two operands in a row: the second one sits where an operator belongs.
        if operand is not None:
            raise InvalidOperatorError(char)

    def _parse_binary(self, operator: str, left: Optional[Expression]) -> Expression:
        if left is None:
            raise MissingLeftOperandError(operator)
        self._skip_spaces()
        if self._peek() is None:
            raise MissingRightOperandError(operator)
        return CONNECTIVES[operator](left, self.parse())

    def _parse_negation(self) -> Expression:
        self._skip_spaces()
        char = self._peek()
        if char is None:
            raise MissingNegationOperandError()
        if char == "(":
            self._advance()
            return Not(self._parse_bracket())
        if char in VARIABLES:
            self._advance()
            return Not(Var(char))
        if char in NEGATIONS and not (char == "-" and self._peek_ahead(1) == ">"):
            self._advance()
            return Not(self._parse_negation())
        if char in BINARY_OPERATORS or char in NEGATIONS or char == ")":
            raise MissingNegationOperandError()
        raise InvalidCharacterError(char)

    def _peek_ahead(self, offset: int) -> Optional[str]:
        index = self._pos + offset
        if index < len(self._text):
            return self._text[index]
        return None

    def _parse_bracket(self) -> Expression:
        """Consume up to the matching ``)`` and parse the contents on their own."""
        contents = []
        open_count = 1
        while self._pos < len(self._text):
            char = self._advance()
            if char == "(":
                open_count += 1
            elif char == ")":
                open_count -= 1
                if open_count == 0:
                    return Parser("".join(contents)).parse()
            contents.append(char)
        raise UnmatchedParenthesesError("".join(contents), open_count)


def parse(text: str) -> Expression:
    """Parse ``text`` into an expression tree, raising a ``ParseError`` on failure."""
    return Parser(text).parse()


__all__ = [
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
]
