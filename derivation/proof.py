"""
Top-level proof object: assumptions, conclusion, settings and the final lines.

A ``Proof`` starts with one assumption line per input formula.  ``search()``
drives the breadth-first search and, on success, replaces those lines with
the full derivation.  The same class backs the nested sub-searches run by
disjunction elimination and conditional proof.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

from formula.expression import Expression, join_expressions
from formula.parser import parse

from .bounds import SearchSettings
from .lines import Line, Rule
from .search import SearchDriver, SearchError, SearchNode, SearchOutcome, SearchState, SearchStats
from .structure import block_depths

logger = logging.getLogger(__name__)

INPUT_DELIMITER = "/"
ASSUMPTION_SEPARATOR = ","


class InputError(ValueError):
    """Raised when a single-line proof request is malformed."""


def create_assumption_lines(assumptions: Iterable[Expression]) -> Tuple[Line, ...]:
    return tuple(
        Line((index,), index, expr, Rule.ASSUMPTION, ())
        for index, expr in enumerate(assumptions)
    )


def split_input(text: str) -> Tuple[List[str], str]:
    """
    Split ``"A,B>C/C"`` into assumption texts and the conclusion text.

    An empty assumption section means no assumptions.
    """
    if INPUT_DELIMITER not in text:
        raise InputError(f"Need a '{INPUT_DELIMITER}' to delimit assumptions and conclusion")
    assumptions_text, conclusion_text = text.split(INPUT_DELIMITER, 1)
    if not assumptions_text.strip():
        return [], conclusion_text
    return assumptions_text.split(ASSUMPTION_SEPARATOR), conclusion_text


class Proof:
    """Owns one search: its inputs, its settings and its resulting lines."""

    def __init__(
        self,
        assumptions: Sequence[Expression],
        conclusion: Expression,
        settings: Optional[SearchSettings] = None,
        *,
        lines: Optional[Sequence[Line]] = None,
        nested: bool = False,
    ) -> None:
        self.assumptions: Tuple[Expression, ...] = tuple(assumptions)
        self.conclusion = conclusion
        self.settings = settings or SearchSettings()
        self.lines: Tuple[Line, ...] = (
            tuple(lines) if lines is not None else create_assumption_lines(self.assumptions)
        )
        self.state = SearchState.SEARCHING
        self.stats: Optional[SearchStats] = None
        self._nested = nested

    @classmethod
    def from_text(
        cls,
        assumptions: Iterable[str],
        conclusion: str,
        settings: Optional[SearchSettings] = None,
    ) -> "Proof":
        """Parse formula strings; raises ``ParseError`` on the first bad one."""
        return cls([parse(text) for text in assumptions], parse(conclusion), settings)

    @classmethod
    def from_input(cls, text: str, settings: Optional[SearchSettings] = None) -> "Proof":
        assumptions, conclusion = split_input(text.strip())
        return cls.from_text(assumptions, conclusion, settings)

    @classmethod
    def for_sub_search(
        cls,
        assumptions: Sequence[Expression],
        conclusion: Expression,
        lines: Sequence[Line],
        settings: SearchSettings,
    ) -> "Proof":
        return cls(assumptions, conclusion, settings, lines=lines, nested=True)

    def search(self) -> SearchOutcome:
        """
        Search for a derivation of the conclusion.

        On success the proof's lines are replaced by the derivation; on
        failure ``SearchError`` is raised carrying the terminal state.
        """
        head = SearchNode(self.lines, self.conclusion, self.settings)
        driver = SearchDriver()
        level = logging.DEBUG if self._nested else logging.INFO
        try:
            outcome = driver.run(head)
        except SearchError as exc:
            self.state = exc.state
            self.stats = exc.stats
            logger.log(
                level,
                "No proof of %s: %s (iterations=%d)",
                self.conclusion,
                exc.state.label,
                exc.stats.iterations,
            )
            raise

        self.lines = outcome.lines
        self.state = outcome.state
        self.stats = outcome.stats
        logger.log(
            level,
            "Proved %s in %d lines (iterations=%d, sub_searches=%d)",
            self.conclusion,
            len(self.lines),
            outcome.stats.iterations,
            outcome.stats.sub_searches,
        )
        return outcome

    def get_deduction_lines(self, start: int = 0) -> List[Line]:
        """All non-assumption lines, optionally only those from index ``start`` on."""
        return [line for line in self.lines[start:] if line.rule is not Rule.ASSUMPTION]

    def render(self) -> str:
        out = [
            f"Assumptions: [{join_expressions(self.assumptions)}]",
            f"Conclusion: {self.conclusion}",
            f"Total Proof Steps: {len(self.lines)}",
            "Proof Steps:",
        ]
        for line, depth in zip(self.lines, block_depths(self.lines)):
            out.append(f"{'  ' * depth}{line}")
        return "\n".join(out)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "assumptions": [str(expr) for expr in self.assumptions],
            "conclusion": str(self.conclusion),
            "state": self.state.value,
            "settings": self.settings.to_dict(),
            "stats": self.stats.to_dict() if self.stats else None,
            "lines": [line.to_dict() for line in self.lines],
        }

    def __str__(self) -> str:
        return self.render()


__all__ = ["InputError", "Proof", "create_assumption_lines", "split_input"]
