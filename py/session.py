import json
from dataclasses import dataclass, field

from klondike import IllegalPlayError, Play, Table, apply, generate_plays, new_table
from solver import SearchResult


@dataclass
class SolveRecord:
    """A seed plus the plays found for it; enough to rebuild every table."""

    seed: int
    status: str
    plays: list[Play] = field(default_factory=list)
    iterations: int = 0
    max_depth: int = 0
    visited_states: int = 0

    @staticmethod
    def from_result(seed: int, result: SearchResult) -> "SolveRecord":
        return SolveRecord(
            seed=seed,
            status=result.status.value,
            plays=list(result.plays),
            iterations=result.iterations,
            max_depth=result.max_depth,
            visited_states=result.visited_states,
        )

    def as_jsonable_dict(self) -> dict:
        return {
            "seed": self.seed,
            "status": self.status,
            "plays": [play.as_jsonable_dict() for play in self.plays],
            "iterations": self.iterations,
            "max_depth": self.max_depth,
            "visited_states": self.visited_states,
        }

    def as_json(self) -> str:
        return json.dumps(self.as_jsonable_dict())

    @staticmethod
    def from_json(data: str) -> "SolveRecord":
        raw = json.loads(data)
        return SolveRecord(
            seed=int(raw["seed"]),
            status=raw["status"],
            plays=[Play.from_jsonable_dict(play) for play in raw.get("plays", [])],
            iterations=int(raw.get("iterations", 0)),
            max_depth=int(raw.get("max_depth", 0)),
            visited_states=int(raw.get("visited_states", 0)),
        )

    def replay(self) -> list[Table]:
        return replay(self.seed, self.plays)


def replay(seed: int, plays: list[Play]) -> list[Table]:
    """
    Rebuilds the tables visited by ``plays`` from the deal of ``seed``.
    The first entry is the deal itself.
    """
    tables = [new_table(seed)]
    for step, play in enumerate(plays, start=1):
        current = tables[-1]
        if play not in generate_plays(current, partial_runs=True):
            msg = f"Play {step} ({play}) is not legal here"
            raise IllegalPlayError(msg)
        tables.append(apply(play, current))
    return tables
