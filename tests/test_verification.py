"""
Tests for derivation/verification.py.
"""

from derivation.lines import Line, Rule
from derivation.proof import create_assumption_lines
from derivation.verification import ProofVerifier, VerificationOutcome
from formula.expression import Implies, Not, Or, Var

P, Q, W = Var("P"), Var("Q"), Var("W")


def modus_ponens_proof():
    return create_assumption_lines([P, Implies(P, Q)]) + (
        Line((0, 1), 2, Q, Rule.MODUS_PONENS, (1, 0)),
    )


class TestValidProofs:
    def test_modus_ponens(self, verifier):
        outcome = verifier.verify(modus_ponens_proof(), Q, [P, Implies(P, Q)])
        assert outcome == VerificationOutcome(True, "truth-table")

    def test_without_semantics(self):
        outcome = ProofVerifier(check_semantics=False).verify(modus_ponens_proof(), Q, [P])
        assert outcome.verified
        assert outcome.method == "conclusion"

    def test_or_elimination_block(self, verifier):
        lines = create_assumption_lines([Or(P, Q), Implies(P, W), Implies(Q, W)]) + (
            Line((3,), 3, P, Rule.OR_ELIMINATION_ASSUMPTION, (0,)),
            Line((1, 3), 4, W, Rule.MODUS_PONENS, (1, 3)),
            Line((5,), 5, Q, Rule.OR_ELIMINATION_ASSUMPTION, (0,)),
            Line((2, 5), 6, W, Rule.MODUS_PONENS, (2, 5)),
            Line((0, 1, 2, 3, 5), 7, W, Rule.OR_ELIMINATION, (0, 3, 4, 5, 6)),
        )
        assert verifier.verify(lines, W).verified


class TestRejections:
    """Each layer reports its own failure."""

    def test_renumbered_line(self, verifier):
        lines = create_assumption_lines([P]) + (Line((0,), 3, Not(Not(P)), Rule.DOUBLE_NEGATION, (0,)),)
        outcome = verifier.verify(lines, Not(Not(P)))
        assert not outcome.verified
        assert outcome.method == "structure"

    def test_forward_citation(self, verifier):
        lines = create_assumption_lines([P]) + (Line((0,), 1, Not(Not(P)), Rule.DOUBLE_NEGATION, (1,)),)
        assert verifier.verify(lines, Not(Not(P))).method == "structure"

    def test_bad_rule_application(self, verifier):
        lines = create_assumption_lines([P, Implies(Q, P)]) + (
            Line((0, 1), 2, Q, Rule.MODUS_PONENS, (1, 0)),
        )
        outcome = verifier.verify(lines, Q)
        assert outcome.method == "rule"
        assert "modus ponens" in outcome.details

    def test_reductio_not_supported(self, verifier):
        lines = create_assumption_lines([P]) + (Line((0,), 1, Q, Rule.REDUCTIO_AD_ABSURDUM, (0,)),)
        outcome = verifier.verify(lines, Q)
        assert outcome.method == "rule"
        assert "RAA" in outcome.details

    def test_wrong_assumption_set(self, verifier):
        lines = create_assumption_lines([P, Implies(P, Q)]) + (
            Line((1,), 2, Q, Rule.MODUS_PONENS, (1, 0)),
        )
        assert verifier.verify(lines, Q).method == "assumptions"

    def test_missing_conclusion(self, verifier):
        outcome = verifier.verify(modus_ponens_proof(), W)
        assert outcome == VerificationOutcome(False, "conclusion", "no line states W")

    def test_not_entailed(self, verifier):
        lines = create_assumption_lines([P, Q])
        outcome = verifier.verify(lines, Q, [P])
        assert outcome.method == "truth-table"
        assert not outcome.verified
