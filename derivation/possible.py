"""
Candidate generation: every extension of a proof reachable in one step.

``PossibleFinder`` applies each inference rule to the lines of a search node
and collects the resulting ``Possible`` extensions.  Most rules add a single
line.  Disjunction elimination and conditional proof add a whole block: they
open a hypothesis, run a bounded, independent sub-search from it, and on
success splice the sub-proof in front of the discharging line.

Generation is pure with respect to the input node; calling ``find()`` twice
yields the same candidates.
"""

from __future__ import annotations

import itertools
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Iterator, List, Optional, Sequence, Tuple

from formula.expression import And, Expression, Implies, Not, Or, Var

from .lines import Line, Rule
from .structure import has_open_block, merge_assumptions, union_assumptions, vocabulary

if TYPE_CHECKING:  # pragma: no cover
    from .search import SearchNode

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class Possible:
    """One candidate extension: lines appended to a node atomically."""

    lines: Tuple[Line, ...]

    def __post_init__(self) -> None:
        if not self.lines:
            raise ValueError("A possible must contain at least one line")

    @classmethod
    def single(cls, line: Line) -> "Possible":
        return cls((line,))

    @property
    def last(self) -> Line:
        """The line carrying the formula this candidate establishes."""
        return self.lines[-1]

    @property
    def rule(self) -> Rule:
        return self.last.rule


class PossibleFinder:
    """Enumerate every ``Possible`` for a search node."""

    def __init__(self, node: "SearchNode") -> None:
        self.node = node
        self.sub_searches = 0
        self._possibles: List[Possible] = []
        self._vars: Tuple[str, ...] = ()

    def __len__(self) -> int:
        return len(self.node.lines)

    @property
    def possibles(self) -> List[Possible]:
        return list(self._possibles)

    def find(self) -> List[Possible]:
        """
        Generate, filter and de-duplicate all candidates for the node.

        Candidates whose resulting formula is already a line are dropped, as
        are exact duplicates (first occurrence wins).
        """
        self._vars = vocabulary(self.node.lines, self.node.conclusion)
        self.sub_searches = 0

        candidates = itertools.chain(
            self._possible_mp(),
            self._possible_mt(),
            self._possible_and_e(),
            self._possible_and_i(),
            self._possible_or_i(),
            self._possible_or_i_with_vars(),
            self._possible_dn_remove(),
            self._possible_dn_add(),
            self._possible_or_e(),
            self._possible_cp(),
        )

        known = {line.expression for line in self.node.lines}
        seen = set()
        possibles: List[Possible] = []
        for possible in candidates:
            if possible.last.expression in known or possible in seen:
                continue
            seen.add(possible)
            possibles.append(possible)

        self._possibles = possibles
        logger.debug(
            "Generated %d candidates for a %d-line node (%d sub-searches)",
            len(possibles),
            len(self),
            self.sub_searches,
        )
        return list(possibles)

    # ------------------------------------------------------------------
    # Single-line rules
    # ------------------------------------------------------------------

    def _derive(self, expression: Expression, rule: Rule, *deductions: int) -> Possible:
        return Possible.single(
            Line(
                union_assumptions(self.node.lines, deductions),
                len(self),
                expression,
                rule,
                deductions,
            )
        )

    def _pairs(self) -> Iterator[Tuple[Line, Line]]:
        return itertools.product(self.node.lines, repeat=2)

    def _possible_mp(self) -> Iterator[Possible]:
        for conditional, antecedent in self._pairs():
            expr = conditional.expression
            if isinstance(expr, Implies) and antecedent.matches_expression(expr.left):
                yield self._derive(
                    expr.right, Rule.MODUS_PONENS, conditional.line_number, antecedent.line_number
                )

    def _possible_mt(self) -> Iterator[Possible]:
        for conditional, denial in self._pairs():
            expr = conditional.expression
            if isinstance(expr, Implies) and denial.matches_expression(Not(expr.right)):
                yield self._derive(
                    Not(expr.left), Rule.MODUS_TOLLENS, conditional.line_number, denial.line_number
                )

    def _possible_and_e(self) -> Iterator[Possible]:
        for line in self.node.lines:
            expr = line.expression
            if isinstance(expr, And):
                yield self._derive(expr.left, Rule.AND_ELIMINATION, line.line_number)
                yield self._derive(expr.right, Rule.AND_ELIMINATION, line.line_number)

    def _possible_and_i(self) -> Iterator[Possible]:
        for first, second in self._pairs():
            yield self._derive(
                And(first.expression, second.expression),
                Rule.AND_INTRODUCTION,
                first.line_number,
                second.line_number,
            )

    def _possible_or_i(self) -> Iterator[Possible]:
        for first, second in self._pairs():
            yield self._derive(
                Or(first.expression, second.expression),
                Rule.OR_INTRODUCTION,
                first.line_number,
                second.line_number,
            )

    def _possible_or_i_with_vars(self) -> Iterator[Possible]:
        for line in self.node.lines:
            for name in self._vars:
                var = Var(name)
                yield self._derive(Or(line.expression, var), Rule.OR_INTRODUCTION, line.line_number)
                yield self._derive(Or(var, line.expression), Rule.OR_INTRODUCTION, line.line_number)

    def _possible_dn_remove(self) -> Iterator[Possible]:
        for line in self.node.lines:
            expr = line.expression
            if isinstance(expr, Not) and isinstance(expr.operand, Not):
                yield self._derive(expr.operand.operand, Rule.DOUBLE_NEGATION, line.line_number)

    def _possible_dn_add(self) -> Iterator[Possible]:
        for line in self.node.lines:
            yield self._derive(Not(Not(line.expression)), Rule.DOUBLE_NEGATION, line.line_number)

    # ------------------------------------------------------------------
    # Block rules (nested sub-search)
    # ------------------------------------------------------------------

    def _possible_or_e(self) -> Iterator[Possible]:
        lines = self.node.lines
        # A nested vE inside an open vE branch would recurse without bound.
        if self.node.is_complete() or has_open_block(lines, Rule.OR_ELIMINATION_ASSUMPTION):
            return

        start = len(self)
        for line in lines:
            expr = line.expression
            if not isinstance(expr, Or):
                continue
            branches = []
            for disjunct in (expr.left, expr.right):
                hypothesis = Line(
                    (start,),
                    start,
                    disjunct,
                    Rule.OR_ELIMINATION_ASSUMPTION,
                    (line.line_number,),
                )
                branch = self._search_sub_proof(hypothesis, self.node.conclusion)
                if branch is None:
                    break
                branches.append(branch)
            if len(branches) == 2:
                yield self._splice_or_e(line, branches[0], branches[1])

    def _splice_or_e(
        self,
        disjunction: Line,
        first: Sequence[Line],
        second: Sequence[Line],
    ) -> Possible:
        start = len(self)
        spliced = list(first)
        spliced.extend(line.shifted(len(first), start) for line in second)

        deductions = (disjunction.line_number,) + tuple(line.line_number for line in spliced)
        final = Line(
            merge_assumptions([disjunction, *spliced]),
            start + len(spliced),
            self.node.conclusion,
            Rule.OR_ELIMINATION,
            deductions,
        )
        return Possible(tuple(spliced) + (final,))

    def _possible_cp(self) -> Iterator[Possible]:
        conclusion = self.node.conclusion
        lines = self.node.lines
        if not isinstance(conclusion, Implies) or self.node.is_complete():
            return
        if has_open_block(lines, Rule.CONDITIONAL_PROOF_ASSUMPTION):
            return

        start = len(self)
        hypothesis = Line(
            (start,),
            start,
            conclusion.left,
            Rule.CONDITIONAL_PROOF_ASSUMPTION,
            (),
        )
        branch = self._search_sub_proof(hypothesis, conclusion.right)
        if branch is None:
            return

        deductions = [line.line_number for line in branch]
        cited = list(branch)
        if not any(line.matches_expression(conclusion.right) for line in branch):
            # The consequent was already established before the hypothesis.
            earlier = next(
                line for line in reversed(lines) if line.matches_expression(conclusion.right)
            )
            deductions.insert(0, earlier.line_number)
            cited.append(earlier)

        final = Line(
            merge_assumptions(cited),
            start + len(branch),
            conclusion,
            Rule.CONDITIONAL_PROOF,
            tuple(deductions),
        )
        yield Possible(tuple(branch) + (final,))

    def _search_sub_proof(self, hypothesis: Line, goal: Expression) -> Optional[Tuple[Line, ...]]:
        """
        Run an independent bounded search from the node plus ``hypothesis``.

        Returns the lines added from the hypothesis onward, or None when the
        sub-search fails for any reason.
        """
        from .proof import Proof
        from .search import SearchError

        self.sub_searches += 1
        proof = Proof.for_sub_search(
            self.node.assumptions(),
            goal,
            self.node.lines + (hypothesis,),
            self.node.settings.sub_search(),
        )
        try:
            proof.search()
        except SearchError as exc:
            logger.debug(
                "Sub-search for %s assuming %s failed: %s", goal, hypothesis.expression, exc.state
            )
            return None
        return tuple(proof.get_deduction_lines(start=len(self)))


__all__ = ["Possible", "PossibleFinder"]
