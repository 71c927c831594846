"""
Independent verification of finished line sequences.

Verification order:
    1. Structure: line numbering and backward-only citations.
    2. Rules: every line is a well-formed application of its rule.
    3. Assumption sets: every non-assumption line rests on exactly the union
       of what it cites.
    4. Conclusion: some line states the conclusion.
    5. Semantics (optional): the assumptions entail the conclusion by truth
       table.

The checker never consults the candidate generator, so it catches splicing
or renumbering mistakes the search itself would not notice.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, Optional, Sequence

from formula.expression import And, Expression, Implies, Not, Or
from formula.truthtab import entails

from .lines import Line, Rule
from .structure import is_assumption, union_assumptions


@dataclass(frozen=True, slots=True)
class VerificationOutcome:
    """
    Result of a verification attempt.

    Attributes:
        verified: True if every check passed.
        method: The last check performed (structure, rule, assumptions,
            conclusion, truth-table).
        details: Description of the first failure, if any.
    """
    verified: bool
    method: str
    details: Optional[str] = None


class ProofVerifier:
    """Layered checker for proofs produced by the search."""

    def __init__(self, check_semantics: bool = True) -> None:
        self._check_semantics = check_semantics
        self._rule_checks: Dict[Rule, Callable[[Line, Sequence[Line]], Optional[str]]] = {
            Rule.ASSUMPTION: _check_assumption,
            Rule.MODUS_PONENS: _check_mp,
            Rule.MODUS_TOLLENS: _check_mt,
            Rule.AND_ELIMINATION: _check_and_e,
            Rule.AND_INTRODUCTION: _check_and_i,
            Rule.OR_INTRODUCTION: _check_or_i,
            Rule.DOUBLE_NEGATION: _check_dn,
            Rule.OR_ELIMINATION_ASSUMPTION: _check_or_e_assumption,
            Rule.OR_ELIMINATION: _check_or_e,
            Rule.CONDITIONAL_PROOF_ASSUMPTION: _check_assumption,
            Rule.CONDITIONAL_PROOF: _check_cp,
        }

    def verify(
        self,
        lines: Sequence[Line],
        conclusion: Expression,
        assumptions: Optional[Sequence[Expression]] = None,
    ) -> VerificationOutcome:
        for index, line in enumerate(lines):
            if line.line_number != index:
                return VerificationOutcome(
                    False, "structure", f"line at position {index + 1} is numbered {line.line_number + 1}"
                )
            if any(n < 0 or n >= index for n in line.deduction_lines):
                return VerificationOutcome(
                    False, "structure", f"line {index + 1} cites a line that does not precede it"
                )

        for line in lines:
            check = self._rule_checks.get(line.rule)
            if check is None:
                return VerificationOutcome(False, "rule", f"line {line.line_number + 1}: unsupported rule {line.rule}")
            problem = check(line, lines)
            if problem:
                return VerificationOutcome(False, "rule", f"line {line.line_number + 1}: {problem}")

        for line in lines:
            if is_assumption(line):
                expected = (line.line_number,)
            else:
                expected = union_assumptions(lines, line.deduction_lines)
            if line.assumption_lines != expected:
                return VerificationOutcome(
                    False,
                    "assumptions",
                    f"line {line.line_number + 1} rests on {list(line.assumption_lines)}, expected {list(expected)}",
                )

        if not any(line.matches_expression(conclusion) for line in lines):
            return VerificationOutcome(False, "conclusion", f"no line states {conclusion}")

        if self._check_semantics and assumptions is not None:
            if not entails(assumptions, conclusion):
                return VerificationOutcome(
                    False, "truth-table", f"assumptions do not entail {conclusion}"
                )
            return VerificationOutcome(True, "truth-table")

        return VerificationOutcome(True, "conclusion")


# ---------------------------------------------------------------------------
# Per-rule checks: return a description of the problem, or None when valid
# ---------------------------------------------------------------------------


def _cited(line: Line, lines: Sequence[Line]) -> list[Expression]:
    return [lines[n].expression for n in line.deduction_lines]


def _check_assumption(line: Line, lines: Sequence[Line]) -> Optional[str]:
    if line.deduction_lines:
        return "assumptions cite no lines"
    return None


def _check_mp(line: Line, lines: Sequence[Line]) -> Optional[str]:
    cited = _cited(line, lines)
    if len(cited) == 2:
        conditional, antecedent = cited
        if isinstance(conditional, Implies) and conditional.left == antecedent and conditional.right == line.expression:
            return None
    return "not a modus ponens step"


def _check_mt(line: Line, lines: Sequence[Line]) -> Optional[str]:
    cited = _cited(line, lines)
    if len(cited) == 2:
        conditional, denial = cited
        if (
            isinstance(conditional, Implies)
            and denial == Not(conditional.right)
            and line.expression == Not(conditional.left)
        ):
            return None
    return "not a modus tollens step"


def _check_and_e(line: Line, lines: Sequence[Line]) -> Optional[str]:
    cited = _cited(line, lines)
    if len(cited) == 1 and isinstance(cited[0], And) and line.expression in (cited[0].left, cited[0].right):
        return None
    return "not a conjunction elimination"


def _check_and_i(line: Line, lines: Sequence[Line]) -> Optional[str]:
    cited = _cited(line, lines)
    if len(cited) == 2 and line.expression == And(cited[0], cited[1]):
        return None
    return "not a conjunction introduction"


def _check_or_i(line: Line, lines: Sequence[Line]) -> Optional[str]:
    cited = _cited(line, lines)
    expr = line.expression
    if len(cited) == 2 and expr == Or(cited[0], cited[1]):
        return None
    if len(cited) == 1 and isinstance(expr, Or) and cited[0] in (expr.left, expr.right):
        return None
    return "not a disjunction introduction"


def _check_dn(line: Line, lines: Sequence[Line]) -> Optional[str]:
    cited = _cited(line, lines)
    if len(cited) == 1 and (line.expression == Not(Not(cited[0])) or cited[0] == Not(Not(line.expression))):
        return None
    return "not a double negation step"


def _check_or_e_assumption(line: Line, lines: Sequence[Line]) -> Optional[str]:
    cited = _cited(line, lines)
    if len(cited) == 1 and isinstance(cited[0], Or) and line.expression in (cited[0].left, cited[0].right):
        return None
    return "hypothesis is not a disjunct of the cited line"


def _check_or_e(line: Line, lines: Sequence[Line]) -> Optional[str]:
    if not line.deduction_lines:
        return "disjunction elimination cites no lines"
    disjunction = lines[line.deduction_lines[0]]
    if not isinstance(disjunction.expression, Or):
        return "first citation is not a disjunction"
    hypotheses = [
        n
        for n in line.deduction_lines
        if lines[n].rule is Rule.OR_ELIMINATION_ASSUMPTION
        and lines[n].deduction_lines == (disjunction.line_number,)
    ]
    if len(hypotheses) != 2:
        return "expected two branch hypotheses"
    first, second = sorted(hypotheses)
    expected = (disjunction.expression.left, disjunction.expression.right)
    if (lines[first].expression, lines[second].expression) != expected:
        return "branch hypotheses do not match the disjuncts"
    cited = set(line.deduction_lines)
    for begin, end in ((first, second), (second, line.line_number)):
        if not any(lines[n].matches_expression(line.expression) for n in range(begin, end) if n in cited):
            return f"branch starting at line {begin + 1} does not reach {line.expression}"
    return None


def _check_cp(line: Line, lines: Sequence[Line]) -> Optional[str]:
    expr = line.expression
    if not isinstance(expr, Implies):
        return "conditional proof must state an implication"
    cited = [lines[n] for n in line.deduction_lines]
    if not any(c.rule is Rule.CONDITIONAL_PROOF_ASSUMPTION and c.expression == expr.left for c in cited):
        return "no matching conditional hypothesis cited"
    if not any(c.expression == expr.right for c in cited):
        return "consequent is not established by a cited line"
    return None


__all__ = ["ProofVerifier", "VerificationOutcome"]
