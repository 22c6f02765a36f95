"""Leaderboard endpoint: the latest scored batch, filtered and ranked."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, Query

from src.api.dependencies import get_batch
from src.models.curve import SortMode, Tier
from src.parsers.leaderboard import build_leaderboard, tier_counts
from src.parsers.worker import PublishedBatch

router = APIRouter(prefix="/api/v1/leaderboard", tags=["leaderboard"])


@router.get("")
async def get_leaderboard(
    batch: PublishedBatch = Depends(get_batch),
    sort: SortMode = Query(SortMode.SCORE),
    search: str = Query("", max_length=100),
    tier: list[Tier] | None = Query(None),
    include_dead: bool = Query(True),
    limit: int = Query(50, ge=1, le=200),
) -> dict[str, Any]:
    entries = build_leaderboard(
        batch.curves,
        sort,
        search=search or None,
        tiers=tier,
        include_dead=include_dead,
        limit=limit,
    )
    return {
        "seq": batch.seq,
        "scored_at": batch.scored_at,
        "sort": sort.value,
        "tiers": tier_counts(batch.curves),
        "items": [
            {"rank": e.rank, **e.curve.model_dump(mode="json")} for e in entries
        ],
    }
