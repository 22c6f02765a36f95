"""Leaderboard view over a scored batch: search, tier filter, sort, rank."""

from collections.abc import Collection, Sequence
from dataclasses import dataclass

from src.models.curve import ScoredCurve, SortMode, Tier
from src.parsers.scoring import rank_curves


@dataclass(frozen=True)
class LeaderboardEntry:
    rank: int  # 1-based
    curve: ScoredCurve


def matches_search(curve: ScoredCurve, search: str) -> bool:
    needle = search.strip().lower()
    if not needle:
        return True
    return needle in curve.name.lower() or needle in curve.symbol.lower()


def build_leaderboard(
    scored: Sequence[ScoredCurve],
    sort_mode: SortMode | str = SortMode.SCORE,
    *,
    search: str | None = None,
    tiers: Collection[Tier] | None = None,
    include_dead: bool = True,
    limit: int | None = None,
) -> list[LeaderboardEntry]:
    """Filter, rank and number the batch.

    Ranks are assigned after filtering, so they are positions within the
    filtered view.
    """
    rows = list(scored)
    if search:
        rows = [c for c in rows if matches_search(c, search)]
    if tiers:
        allowed = {Tier(t) for t in tiers}
        rows = [c for c in rows if c.tier in allowed]
    if not include_dead:
        rows = [c for c in rows if not c.is_dead]

    ranked = rank_curves(rows, sort_mode)
    if limit is not None:
        ranked = ranked[: max(limit, 0)]
    return [LeaderboardEntry(rank=i + 1, curve=c) for i, c in enumerate(ranked)]


def tier_counts(scored: Sequence[ScoredCurve]) -> dict[str, int]:
    counts = {t.value: 0 for t in Tier}
    for curve in scored:
        counts[curve.tier.value] += 1
    return counts
