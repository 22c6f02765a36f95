"""Battle endpoints: live pairings and arena matchup lookup."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Query, status

from config.settings import settings
from src.api.dependencies import get_batch
from src.parsers.battles import BattleSide, default_matchup, live_battles
from src.parsers.worker import PublishedBatch

router = APIRouter(prefix="/api/v1", tags=["battles"])


def _side_json(side: BattleSide) -> dict[str, Any]:
    return {
        "name": side.curve.name,
        "symbol": side.curve.symbol,
        "token": side.curve.token,
        "uri": side.curve.uri,
        "health": side.health,
        "age": side.age,
        "score": side.curve.score,
        "tier": side.curve.tier.value,
    }


@router.get("/battles")
async def list_battles(batch: PublishedBatch = Depends(get_batch)) -> dict[str, Any]:
    """Home page battles: top live curves paired 1v2, 3v4."""
    battles = live_battles(batch.curves, now=batch.scored_at, limit=settings.live_battle_count)
    return {
        "seq": batch.seq,
        "battles": [
            {
                "id": b.id,
                "coin_a": _side_json(b.coin_a),
                "coin_b": _side_json(b.coin_b),
                "pot": f"{b.pot_eth} ETH",
                "link": b.link,
            }
            for b in battles
        ],
    }


@router.get("/battle")
async def get_battle(
    batch: PublishedBatch = Depends(get_batch),
    left: str | None = Query(None, max_length=32),
    right: str | None = Query(None, max_length=32),
) -> dict[str, Any]:
    """Arena matchup. Unknown or missing symbols fall back to the top live curves."""
    matchup = default_matchup(batch.curves, left, right)
    if matchup is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Not enough live curves for a battle",
        )
    coin_a, coin_b = matchup
    return {
        "left": coin_a.model_dump(mode="json"),
        "right": coin_b.model_dump(mode="json"),
    }
