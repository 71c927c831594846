"""
Proof lines and the inference rules that justify them.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterable, Optional, Tuple

from formula.expression import Expression


class Rule(Enum):
    """Inference rules, valued by their display abbreviation."""

    ASSUMPTION = "A"
    MODUS_PONENS = "MPP"
    MODUS_TOLLENS = "MTT"
    CONDITIONAL_PROOF = "CP"
    CONDITIONAL_PROOF_ASSUMPTION = "A(CP)"
    DOUBLE_NEGATION = "DN"
    AND_INTRODUCTION = "&I"
    AND_ELIMINATION = "&E"
    OR_INTRODUCTION = "vI"
    OR_ELIMINATION = "vE"
    OR_ELIMINATION_ASSUMPTION = "A(vE)"
    # Declared for display only; the search never generates it.
    REDUCTIO_AD_ABSURDUM = "RAA"

    def __str__(self) -> str:
        return self.value

    @property
    def opens_block(self) -> bool:
        return self in _DISCHARGES

    @property
    def closes_block(self) -> bool:
        return self in _OPENERS

    @property
    def discharge(self) -> Optional["Rule"]:
        """Rule that closes the block opened by this rule, if any."""
        return _DISCHARGES.get(self)

    @property
    def opener(self) -> Optional["Rule"]:
        """Rule that opens the block closed by this rule, if any."""
        return _OPENERS.get(self)


_DISCHARGES = {
    Rule.OR_ELIMINATION_ASSUMPTION: Rule.OR_ELIMINATION,
    Rule.CONDITIONAL_PROOF_ASSUMPTION: Rule.CONDITIONAL_PROOF,
}
_OPENERS = {closer: opener for opener, closer in _DISCHARGES.items()}


def _canonical_numbers(numbers: Iterable[int]) -> Tuple[int, ...]:
    return tuple(sorted(set(numbers)))


@dataclass(frozen=True, slots=True)
class Line:
    """
    A single proof step.

    Attributes:
        assumption_lines: Sorted, deduplicated indices of the root assumptions
            this line transitively rests on.
        line_number: Zero-based position in the owning sequence.
        expression: The formula established by this line.
        rule: Rule justifying the line.
        deduction_lines: Indices of the lines this one was derived from, in
            citation order; empty for assumptions and CP hypotheses.
    """

    assumption_lines: Tuple[int, ...]
    line_number: int
    expression: Expression
    rule: Rule
    deduction_lines: Tuple[int, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        # Assumption sets are always stored canonically.
        canonical = _canonical_numbers(self.assumption_lines)
        if canonical != self.assumption_lines:
            object.__setattr__(self, "assumption_lines", canonical)
        if not isinstance(self.deduction_lines, tuple):
            object.__setattr__(self, "deduction_lines", tuple(self.deduction_lines))

    def matches_expression(self, expression: Expression) -> bool:
        return self.expression == expression

    def shifted(self, offset: int, threshold: int) -> "Line":
        """
        Renumber a spliced line.

        The line itself moves by ``offset``; citations and assumption indices
        at or past ``threshold`` move with it, earlier ones are left alone.
        """
        return Line(
            tuple(n + offset if n >= threshold else n for n in self.assumption_lines),
            self.line_number + offset,
            self.expression,
            self.rule,
            tuple(n + offset if n >= threshold else n for n in self.deduction_lines),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "line": self.line_number + 1,
            "expression": str(self.expression),
            "rule": self.rule.value,
            "assumptions": [n + 1 for n in self.assumption_lines],
            "from": [n + 1 for n in _canonical_numbers(self.deduction_lines)],
        }

    def __str__(self) -> str:
        text = (
            f"Line {self.line_number + 1}: {self.expression} "
            f"[{_join_numbers(self.assumption_lines)}] using {self.rule}"
        )
        if self.deduction_lines:
            text += f" from lines {_join_numbers(self.deduction_lines)}"
        return text


def _join_numbers(numbers: Iterable[int]) -> str:
    return ", ".join(str(n + 1) for n in _canonical_numbers(numbers))


__all__ = ["Line", "Rule"]
