"""Depth-first Klondike search over an explicit stack of frames.

Each frame owns a copy of its table and the candidate plays still to try
from it, best candidate last. The deepest frame is always expanded next; a
frame that runs out of candidates is popped and its parent resumes.
"""

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from enum import Enum

from klondike import Play, PlayKind, Rank, Table, TableKey, apply, generate_plays, new_table
from scoring import sort_plays

logger = logging.getLogger(__name__)

DEFAULT_MAX_ITERATIONS = 200_000


class SearchStatus(str, Enum):
    SEARCHING = "searching"
    WON = "won"
    EXHAUSTED = "exhausted"
    ITERATION_CAP = "iteration_cap"


@dataclass(frozen=True)
class SearchLimits:
    max_iterations: int = DEFAULT_MAX_ITERATIONS


@dataclass(frozen=True)
class SearchPolicy:
    # Skip children whose table was already reached elsewhere in the search.
    prune_revisited: bool = False
    # Allow lifting any face-up card of a tableau, not only its whole run.
    partial_runs: bool = False


DEFAULT_POLICY = SearchPolicy()


@dataclass
class Frame:
    parent: int | None
    play: Play
    table: Table
    candidates: list[Play] = field(default_factory=list)

    @staticmethod
    def expand(parent: int | None, play: Play, table: Table, policy: SearchPolicy = DEFAULT_POLICY) -> "Frame":
        plays = generate_plays(table, partial_runs=policy.partial_runs)
        return Frame(parent, play, table, sort_plays(table, plays))

    @property
    def exhausted(self) -> bool:
        return len(self.candidates) == 0


@dataclass
class SearchResult:
    status: SearchStatus
    plays: list[Play]
    iterations: int
    max_depth: int
    visited_states: int
    backtracks: int
    table: Table

    @property
    def won(self) -> bool:
        return self.status == SearchStatus.WON


def filter_play(play: Play, table: Table, path: Sequence[Play], policy: SearchPolicy = DEFAULT_POLICY) -> bool:
    """
    Rejects plays that can only lead the search in circles.

    Args:
        play: The candidate about to be applied
        table: The table the candidate would be applied to
        path: Plays from the root (its Setup included) down to ``table``
        policy: Search policy in effect

    Returns:
        True if the play may be expanded
    """
    if play.kind == PlayKind.RECYCLE_WASTE:
        # a second recycle needs something other than draws since the last one
        for previous in reversed(path):
            if previous.kind == PlayKind.DRAW_FROM_STOCK:
                continue
            return previous.kind != PlayKind.RECYCLE_WASTE
        return True

    if play.kind != PlayKind.MOVE_CARDS:
        return True

    assert play.source is not None and play.target is not None  # noqa: S101
    source = play.source
    if source.stack.is_foundation:
        return False
    if not source.stack.is_tableau:
        return True

    stack = table.get_stack(source.stack)
    if source.index == 0:
        # a king already anchors its column
        bottom = stack.bottom_card()
        return not (play.target.is_tableau and bottom is not None and bottom.rank == Rank.KING)
    if policy.partial_runs or stack.is_lift_point(source.index):
        return True
    return play.target.is_foundation and source.index == stack.foundation_source_index()


def reconstruct_path(frames: Sequence[Frame], index: int) -> list[Play]:
    """Plays leading from the root to ``frames[index]``, Setup excluded."""
    plays: list[Play] = []
    current: int | None = index
    while current is not None:
        frame = frames[current]
        if frame.parent is not None:
            plays.append(frame.play)
        current = frame.parent
    plays.reverse()
    return plays


class Solver:
    def __init__(self, table: Table, limits: SearchLimits | None = None, policy: SearchPolicy = DEFAULT_POLICY):
        self.limits = limits or SearchLimits()
        self.policy = policy
        self.root_table = table.copy()
        self.frames: list[Frame] = [Frame.expand(None, Play.setup(), self.root_table, policy)]
        self.visited: set[TableKey] = {self.root_table.key()}
        self.iterations = 0
        self.max_depth = 0
        self.backtracks = 0
        self.status = SearchStatus.WON if self.root_table.winner() else SearchStatus.SEARCHING

    @property
    def depth(self) -> int:
        return len(self.frames) - 1

    def path(self) -> list[Play]:
        return [frame.play for frame in self.frames]

    def step(self) -> SearchStatus:
        """Runs one iteration: a single expansion attempt or one backtrack."""
        if self.status != SearchStatus.SEARCHING:
            return self.status
        if self.iterations >= self.limits.max_iterations:
            self.status = SearchStatus.ITERATION_CAP
            return self.status
        self.iterations += 1

        frame = self.frames[-1]
        if frame.exhausted:
            self.frames.pop()
            self.backtracks += 1
            logger.debug("backtrack from depth %d after %s", len(self.frames), frame.play)
            if len(self.frames) == 0:
                self.status = SearchStatus.EXHAUSTED
            return self.status

        play = frame.candidates.pop()
        if not filter_play(play, frame.table, self.path(), self.policy):
            return self.status

        child = apply(play, frame.table)
        key = child.key()
        if self.policy.prune_revisited and key in self.visited:
            return self.status
        self.visited.add(key)

        self.frames.append(Frame.expand(len(self.frames) - 1, play, child, self.policy))
        self.max_depth = max(self.max_depth, self.depth)
        logger.debug("depth %d: %s", self.depth, play)

        if child.winner():
            self.status = SearchStatus.WON
        return self.status

    def run(self) -> SearchResult:
        while self.step() == SearchStatus.SEARCHING:
            pass
        result = self.result()
        logger.info(
            "search %s after %d iterations (depth %d, %d positions, %d backtracks)",
            result.status.value,
            result.iterations,
            result.max_depth,
            result.visited_states,
            result.backtracks,
        )
        return result

    def result(self) -> SearchResult:
        plays = reconstruct_path(self.frames, len(self.frames) - 1) if self.status == SearchStatus.WON else []
        table = self.frames[-1].table if self.frames else self.root_table
        return SearchResult(
            status=self.status,
            plays=plays,
            iterations=self.iterations,
            max_depth=self.max_depth,
            visited_states=len(self.visited),
            backtracks=self.backtracks,
            table=table,
        )


def solve(table: Table, limits: SearchLimits | None = None, policy: SearchPolicy = DEFAULT_POLICY) -> SearchResult:
    return Solver(table, limits, policy).run()


def solve_seed(seed: int, limits: SearchLimits | None = None, policy: SearchPolicy = DEFAULT_POLICY) -> SearchResult:
    return solve(new_table(seed), limits, policy)
