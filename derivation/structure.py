"""
Structural utilities over proof line sequences.

All helpers are pure and deterministic.  Expression-level helpers are
memoised since the same formulas recur across thousands of search nodes.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Iterable, List, Sequence, Tuple

from formula.expression import Expression

from .lines import Line, Rule


@lru_cache(maxsize=8192)
def expression_variables(expr: Expression) -> Tuple[str, ...]:
    """Variable names of ``expr`` in first-seen pre-order."""
    return tuple(expr.variables())


def vocabulary(lines: Iterable[Line], conclusion: Expression) -> Tuple[str, ...]:
    """
    Every variable name appearing in the proof lines or the conclusion.

    Lines are scanned first, in order, then the conclusion; the first
    occurrence of a name fixes its position.
    """
    names = {}
    for line in lines:
        names.update(dict.fromkeys(expression_variables(line.expression)))
    names.update(dict.fromkeys(expression_variables(conclusion)))
    return tuple(names)


def merge_assumptions(lines: Iterable[Line]) -> Tuple[int, ...]:
    """Sorted union of the assumption sets of ``lines``."""
    merged = set()
    for line in lines:
        merged.update(line.assumption_lines)
    return tuple(sorted(merged))


def union_assumptions(lines: Sequence[Line], deduction_lines: Iterable[int]) -> Tuple[int, ...]:
    """Sorted union of the assumption sets of the lines cited by index."""
    return merge_assumptions(lines[n] for n in deduction_lines)


def is_assumption(line: Line) -> bool:
    """True for lines that rest on themselves rather than on their citations."""
    return line.rule is Rule.ASSUMPTION or line.rule.opens_block


def open_blocks(lines: Sequence[Line]) -> List[int]:
    """
    Indices of block-opening hypotheses that are still undischarged.

    A hypothesis is discharged once a later line with the matching discharge
    rule cites it.
    """
    discharged = set()
    for line in lines:
        if line.rule.closes_block:
            discharged.update((n, line.rule.opener) for n in line.deduction_lines)
    return [
        index
        for index, line in enumerate(lines)
        if line.rule.opens_block and (index, line.rule) not in discharged
    ]


def has_open_block(lines: Sequence[Line], opener: Rule) -> bool:
    return any(lines[index].rule is opener for index in open_blocks(lines))


def block_depths(lines: Sequence[Line]) -> List[int]:
    """
    Nesting depth of every line, used for indentation when rendering.

    Depth increases at a hypothesis and drops at its discharge line, which is
    itself reported at the outer depth.  The second vE branch hypothesis
    replaces the first at the same depth.
    """
    depths: List[int] = []
    stack: List[Rule] = []
    for line in lines:
        rule = line.rule
        if rule.opens_block:
            if rule is Rule.OR_ELIMINATION_ASSUMPTION and stack and stack[-1] is rule:
                stack.pop()
            stack.append(rule)
        elif rule.closes_block:
            while stack and stack[-1] is not rule.opener:
                stack.pop()
            if stack:
                stack.pop()
        depths.append(len(stack))
    return depths


__all__ = [
    "block_depths",
    "expression_variables",
    "has_open_block",
    "is_assumption",
    "merge_assumptions",
    "open_blocks",
    "union_assumptions",
    "vocabulary",
]
