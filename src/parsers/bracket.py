"""Single-elimination tournament bracket seeded from the scored batch.

Seeds are the top live curves by score. First round pairs adjacent
seeds (1v2, 3v4, ...); later rounds fill in as winners are recorded.
"""

from collections.abc import Sequence
from dataclasses import dataclass, replace
from typing import Literal

from src.models.curve import ScoredCurve, SortMode
from src.parsers.battles import battle_link
from src.parsers.scoring import rank_curves

Side = Literal["A", "B"]

ROUND_LABELS = {1: "Grand Final", 2: "Semi-Finals", 4: "Quarter-Finals"}
ROUND_PREFIX = {1: "f", 2: "sf", 4: "qf"}


class InsufficientEntrantsError(Exception):
    pass


@dataclass(frozen=True)
class Matchup:
    id: str
    round_index: int
    coin_a: ScoredCurve | None = None  # None = TBD
    coin_b: ScoredCurve | None = None
    winner: Side | None = None

    @property
    def is_tbd(self) -> bool:
        return self.coin_a is None or self.coin_b is None

    @property
    def link(self) -> str | None:
        if self.coin_a is None or self.coin_b is None:
            return None
        return battle_link(self.coin_a.symbol, self.coin_b.symbol)

    @property
    def winning_curve(self) -> ScoredCurve | None:
        if self.winner == "A":
            return self.coin_a
        if self.winner == "B":
            return self.coin_b
        return None


@dataclass(frozen=True)
class Bracket:
    rounds: tuple[tuple[Matchup, ...], ...]

    @property
    def champion(self) -> ScoredCurve | None:
        return self.rounds[-1][0].winning_curve

    def find(self, match_id: str) -> Matchup:
        for matchups in self.rounds:
            for m in matchups:
                if m.id == match_id:
                    return m
        raise KeyError(match_id)


def round_label(matches_in_round: int) -> str:
    if matches_in_round in ROUND_LABELS:
        return ROUND_LABELS[matches_in_round]
    return f"Round of {matches_in_round * 2}"


def _match_id(matches_in_round: int, index: int) -> str:
    prefix = ROUND_PREFIX.get(matches_in_round, f"r{matches_in_round * 2}-")
    return f"{prefix}{index + 1}"


def seed_bracket(scored: Sequence[ScoredCurve], size: int = 8) -> Bracket:
    """Build an empty bracket from the top ``size`` live curves."""
    if size < 2 or size & (size - 1):
        raise ValueError(f"bracket size must be a power of two >= 2, got {size}")

    seeds = rank_curves([c for c in scored if not c.is_dead], SortMode.SCORE)[:size]
    if len(seeds) < size:
        raise InsufficientEntrantsError(
            f"need {size} live curves for the bracket, have {len(seeds)}"
        )

    rounds: list[tuple[Matchup, ...]] = []
    matches = size // 2
    first = tuple(
        Matchup(id=_match_id(matches, i), round_index=0, coin_a=seeds[2 * i], coin_b=seeds[2 * i + 1])
        for i in range(matches)
    )
    rounds.append(first)
    round_index = 1
    while matches > 1:
        matches //= 2
        rounds.append(
            tuple(Matchup(id=_match_id(matches, i), round_index=round_index) for i in range(matches))
        )
        round_index += 1
    return Bracket(rounds=tuple(rounds))


def record_winner(bracket: Bracket, match_id: str, side: Side) -> Bracket:
    """Return a new bracket with ``side`` winning ``match_id``.

    The winner moves into the next round: even-indexed matches feed slot A,
    odd-indexed feed slot B.
    """
    if side not in ("A", "B"):
        raise ValueError(f"side must be 'A' or 'B', got {side!r}")
    match = bracket.find(match_id)
    if match.is_tbd:
        raise ValueError(f"{match_id} has no opponents yet")

    rounds = [list(r) for r in bracket.rounds]
    position = next(i for i, m in enumerate(rounds[match.round_index]) if m.id == match_id)
    decided = replace(match, winner=side)
    rounds[match.round_index][position] = decided

    next_index = match.round_index + 1
    if next_index < len(rounds):
        target = rounds[next_index][position // 2]
        slot = "coin_a" if position % 2 == 0 else "coin_b"
        rounds[next_index][position // 2] = replace(
            target, **{slot: decided.winning_curve}, winner=None
        )

    return Bracket(rounds=tuple(tuple(r) for r in rounds))
