"""Tournament bracket seeded from the latest batch."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, HTTPException, status

from config.settings import settings
from src.api.dependencies import get_batch
from src.models.curve import ScoredCurve
from src.parsers.bracket import InsufficientEntrantsError, Matchup, round_label, seed_bracket
from src.parsers.worker import PublishedBatch

router = APIRouter(prefix="/api/v1/bracket", tags=["bracket"])


def _coin(curve: ScoredCurve | None) -> dict[str, Any] | None:
    if curve is None:
        return None
    return {"name": curve.name, "symbol": curve.symbol, "uri": curve.uri, "score": curve.score}


def _matchup_json(m: Matchup) -> dict[str, Any]:
    return {
        "id": m.id,
        "coin_a": _coin(m.coin_a),
        "coin_b": _coin(m.coin_b),
        "winner": m.winner,
        "link": m.link,
    }


@router.get("")
async def get_bracket(batch: PublishedBatch = Depends(get_batch)) -> dict[str, Any]:
    try:
        bracket = seed_bracket(batch.curves, size=settings.bracket_size)
    except InsufficientEntrantsError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e

    return {
        "seq": batch.seq,
        "rounds": [
            {"label": round_label(len(matchups)), "matchups": [_matchup_json(m) for m in matchups]}
            for matchups in bracket.rounds
        ],
    }
