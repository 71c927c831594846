# -*- coding: utf-8 -*-
"""
Truth table evaluation for expression trees.

Used as a semantic cross-check of derived proofs: whatever the search
produces must be entailed by the assumptions under every valuation.
"""

import itertools
from typing import Dict, Iterable, List, Sequence

from .expression import And, Expression, Implies, Not, Or, Var


def atoms(expressions: Iterable[Expression]) -> List[str]:
    """Return the sorted variable names used across ``expressions``."""
    names = set()
    for expr in expressions:
        names.update(expr.variables())
    return sorted(names)


def evaluate(expr: Expression, env: Dict[str, bool]) -> bool:
    """Evaluate ``expr`` under the given variable assignment."""
    if isinstance(expr, Var):
        try:
            return env[expr.name]
        except KeyError:
            raise ValueError(f"Unknown atom: {expr.name}") from None
    if isinstance(expr, Not):
        return not evaluate(expr.operand, env)
    if isinstance(expr, And):
        return evaluate(expr.left, env) and evaluate(expr.right, env)
    if isinstance(expr, Or):
        return evaluate(expr.left, env) or evaluate(expr.right, env)
    if isinstance(expr, Implies):
        return (not evaluate(expr.left, env)) or evaluate(expr.right, env)
    raise TypeError(f"Unsupported expression node: {type(expr).__name__}")


def entails(assumptions: Sequence[Expression], conclusion: Expression) -> bool:
    """
    Check semantic entailment by brute force over every valuation.

    Returns True when every assignment satisfying all assumptions also
    satisfies the conclusion.
    """
    names = atoms([*assumptions, conclusion])
    for bits in itertools.product([False, True], repeat=len(names)):
        env = dict(zip(names, bits))
        if all(evaluate(a, env) for a in assumptions) and not evaluate(conclusion, env):
            return False
    return True

