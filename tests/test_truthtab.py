"""
Tests for formula/truthtab.py.
"""

import pytest

from formula.expression import And, Implies, Not, Or, Var
from formula.truthtab import atoms, entails, evaluate

P, Q, R = Var("P"), Var("Q"), Var("R")


class TestEvaluate:
    @pytest.mark.parametrize(
        "expr,expected",
        [
            (And(P, Q), False),
            (Or(P, Q), True),
            (Implies(P, Q), False),
            (Implies(Q, P), True),
            (Not(Q), True),
        ],
    )
    def test_connectives(self, expr, expected):
        assert evaluate(expr, {"P": True, "Q": False}) is expected

    def test_unknown_atom(self):
        with pytest.raises(ValueError, match="Unknown atom: R"):
            evaluate(And(P, R), {"P": True})


class TestEntailment:
    """Brute-force entailment over every valuation."""

    def test_atoms_sorted_and_unique(self):
        assert atoms([Implies(R, P), Or(P, Q)]) == ["P", "Q", "R"]

    def test_modus_ponens_entailed(self):
        assert entails([P, Implies(P, Q)], Q)

    def test_affirming_the_consequent_not_entailed(self):
        assert not entails([Q, Implies(P, Q)], P)

    def test_tautology_needs_no_assumptions(self):
        assert entails([], Implies(P, P))
        assert not entails([], P)
