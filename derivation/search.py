"""
Breadth-first proof search.

Responsibilities:
    * Expand proof-state nodes in FIFO order via ``PossibleFinder``.
    * Short-circuit on the first candidate that states the conclusion.
    * Enforce the line-length bound and the iteration budget.
    * Report distinct terminal states so callers can tell "ran out of depth"
      from "ran out of budget" from "nothing left to try".
    * Track per-run statistics for observability.

The search is uninformed and keeps no visited set over whole proof states
unless ``SearchSettings.deduplicate_states`` is enabled.
"""

from __future__ import annotations

import logging
from collections import Counter, deque
from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any, Deque, Dict, FrozenSet, List, NoReturn, Optional, Set, Tuple

from formula.expression import Expression

from .bounds import SearchSettings
from .lines import Line, Rule
from .possible import Possible, PossibleFinder

logger = logging.getLogger(__name__)


class SearchState(Enum):
    """Status of a search; every value except SEARCHING is terminal."""

    SEARCHING = "searching"
    FINISHED_PROOF = "finished_proof"
    DEAD_END = "dead_end"
    MAXIMUM_LINES = "maximum_lines"
    MAXIMUM_ITERATION = "maximum_iteration"

    @property
    def label(self) -> str:
        return _STATE_LABELS[self]

    def __str__(self) -> str:
        return self.label


_STATE_LABELS = {
    SearchState.SEARCHING: "Searching",
    SearchState.FINISHED_PROOF: "Finished proof",
    SearchState.DEAD_END: "Dead end",
    SearchState.MAXIMUM_LINES: "Maximum lines",
    SearchState.MAXIMUM_ITERATION: "Maximum iteration",
}


@dataclass(slots=True)
class SearchStats:
    """Aggregate statistics for a single search run."""

    iterations: int = 0
    nodes_enqueued: int = 0
    over_length_discarded: int = 0
    dead_ends: int = 0
    candidates_generated: int = 0
    sub_searches: int = 0
    duplicate_states_skipped: int = 0

    def to_dict(self) -> Dict[str, int]:
        return asdict(self)


class SearchError(Exception):
    """A search ended in a terminal state other than FINISHED_PROOF."""

    def __init__(self, state: SearchState, stats: Optional[SearchStats] = None) -> None:
        self.state = state
        self.stats = stats or SearchStats()
        super().__init__(f"Search error: {state.label}")


@dataclass(frozen=True, slots=True)
class SearchNode:
    """
    Immutable snapshot of a partial proof.

    Children are built by ``extend``, which copies the parent's lines and
    appends a candidate's lines; nodes never share mutable state.
    """

    lines: Tuple[Line, ...]
    conclusion: Expression
    settings: SearchSettings = field(default_factory=SearchSettings)

    def __post_init__(self) -> None:
        if not isinstance(self.lines, tuple):
            object.__setattr__(self, "lines", tuple(self.lines))

    def __len__(self) -> int:
        return len(self.lines)

    def is_complete(self) -> bool:
        return any(line.matches_expression(self.conclusion) for line in self.lines)

    def assumptions(self) -> List[Expression]:
        return [line.expression for line in self.lines if line.rule is Rule.ASSUMPTION]

    def extend(self, possible: Possible) -> "SearchNode":
        return SearchNode(self.lines + possible.lines, self.conclusion, self.settings)

    def state_key(self) -> FrozenSet[Tuple[Expression, int]]:
        """Multiset of line formulas, used when merging equivalent states."""
        return frozenset(Counter(line.expression for line in self.lines).items())


@dataclass(frozen=True, slots=True)
class SearchOutcome:
    """Successful search result."""

    state: SearchState
    lines: Tuple[Line, ...]
    stats: SearchStats

    @property
    def proved(self) -> bool:
        return self.state is SearchState.FINISHED_PROOF

    def to_dict(self) -> Dict[str, Any]:
        return {
            "state": self.state.value,
            "lines": [line.to_dict() for line in self.lines],
            "stats": self.stats.to_dict(),
        }


class SearchDriver:
    """
    FIFO expansion of search nodes under the head node's settings.

    The iteration counter lives on the driver instance, so nested searches
    run by the candidate generator never touch the outer budget.
    """

    def __init__(self) -> None:
        self.stats = SearchStats()
        self.state = SearchState.SEARCHING

    def run(self, head: SearchNode) -> SearchOutcome:
        settings = head.settings
        self.stats = SearchStats()
        self.state = SearchState.SEARCHING

        queue: Deque[SearchNode] = deque([head])
        visited: Optional[Set[FrozenSet[Tuple[Expression, int]]]] = None
        if settings.deduplicate_states:
            visited = {head.state_key()}
        last = head

        while queue:
            node = queue.popleft()
            last = node

            if node.is_complete():
                return self._finish(node.lines)

            if len(node) > settings.max_line_length:
                self.stats.over_length_discarded += 1
                continue

            self.stats.iterations += 1
            if self.stats.iterations > settings.iterations:
                self._fail(SearchState.MAXIMUM_ITERATION)

            finder = PossibleFinder(node)
            possibles = finder.find()
            self.stats.candidates_generated += len(possibles)
            self.stats.sub_searches += finder.sub_searches
            if not possibles:
                self.stats.dead_ends += 1
                continue

            for possible in possibles:
                if possible.last.matches_expression(node.conclusion):
                    return self._finish(node.extend(possible).lines)

            for possible in possibles:
                child = node.extend(possible)
                if visited is not None:
                    key = child.state_key()
                    if key in visited:
                        self.stats.duplicate_states_skipped += 1
                        continue
                    visited.add(key)
                queue.append(child)
                self.stats.nodes_enqueued += 1

        if len(last) > settings.max_line_length:
            self._fail(SearchState.MAXIMUM_LINES)
        self._fail(SearchState.DEAD_END)

    def _finish(self, lines: Tuple[Line, ...]) -> SearchOutcome:
        self.state = SearchState.FINISHED_PROOF
        logger.debug(
            "Search finished after %d iterations with %d lines", self.stats.iterations, len(lines)
        )
        return SearchOutcome(self.state, lines, self.stats)

    def _fail(self, state: SearchState) -> NoReturn:
        self.state = state
        logger.debug("Search stopped: %s after %d iterations", state.label, self.stats.iterations)
        raise SearchError(state, self.stats)


__all__ = [
    "SearchDriver",
    "SearchError",
    "SearchNode",
    "SearchOutcome",
    "SearchState",
    "SearchStats",
]
