"""Curve scoring: composite potential score and activity tier.

Score is batch-relative: velocity, volume and trade count are min/max
normalized across the batch being scored, so absolute scores from two
different polls are not comparable. Only the ordering within one batch
means anything.

Weights:
- Velocity (trades/hour since launch): 40%
- Volume (ETH): 30%
- Trade count: 20%
- Traded within the last hour: 10%

Tiers are computed from raw values only, so a curve's tier never depends
on what else is in the batch.
"""

import math
import time
from collections.abc import Sequence

from src.models.curve import Curve, ScoredCurve, SortMode, Tier

SUPPLY = 1_000_000_000  # assumed total supply for the market cap estimate

WEIGHT_VELOCITY = 0.4
WEIGHT_VOLUME = 0.3
WEIGHT_TRADES = 0.2
WEIGHT_RECENCY = 0.1

RECENT_WINDOW_HOURS = 1.0
DEAD_AFTER_HOURS = 6.0
HOT_MIN_VELOCITY = 5.0
HOT_MIN_VOLUME = 0.5
RISING_MIN_VELOCITY = 1.0
RISING_MIN_VOLUME = 0.1

_CURVE_FIELDS = set(Curve.model_fields)

_SORT_FIELDS = {
    SortMode.SCORE: "score",
    SortMode.VOLUME: "volume",
    SortMode.VELOCITY: "velocity",
    SortMode.MARKETCAP: "estimated_market_cap",
}


def to_number(value: object) -> float:
    """Coerce an indexer decimal string to float; anything unusable is 0."""
    if value is None or isinstance(value, bool):
        return 0.0
    try:
        number = float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return 0.0
    if not math.isfinite(number):
        return 0.0
    return number


def _last_trade_ts(last_trade_at: str | None) -> float | None:
    if last_trade_at is None or last_trade_at == "":
        return None
    return to_number(last_trade_at)


def velocity(curve: Curve, now: float) -> float:
    """Trades per hour since the curve was created."""
    age_sec = now - to_number(curve.created_at)
    if age_sec <= 0:
        # Indexer clock ahead of ours, or the block isn't visible yet
        return 0.0
    # Negative counts are malformed indexer data
    return max(to_number(curve.trade_count), 0.0) / (age_sec / 3600)


def recently_traded(
    curve: Curve, now: float, window_hours: float = RECENT_WINDOW_HOURS
) -> bool:
    last_ts = _last_trade_ts(curve.last_trade_at)
    if last_ts is None:
        return False
    return (now - last_ts) / 3600 <= window_hours


def tier(
    velocity: float, volume: float, last_trade_at: str | None, now: float
) -> Tier:
    """Activity tier. First matching rule wins."""
    last_ts = _last_trade_ts(last_trade_at)
    if last_ts is None or (now - last_ts) / 3600 > DEAD_AFTER_HOURS:
        return Tier.DEAD
    if velocity > HOT_MIN_VELOCITY and volume > HOT_MIN_VOLUME:
        return Tier.HOT
    if velocity > RISING_MIN_VELOCITY or volume > RISING_MIN_VOLUME:
        return Tier.RISING
    return Tier.ACTIVE


def normalize(value: float, lo: float, hi: float) -> float:
    """Rescale into [0, 1]. A degenerate range (hi == lo) is always 0."""
    if hi == lo:
        return 0.0
    return max(0.0, min(1.0, (value - lo) / (hi - lo)))


def _require_sequence(items: object, name: str) -> None:
    if isinstance(items, (str, bytes)) or not isinstance(items, Sequence):
        raise TypeError(f"{name} must be a sequence, got {type(items).__name__}")


def score_curves(curves: Sequence[Curve], now: float | None = None) -> list[ScoredCurve]:
    """Score a batch of curves. Output order matches input order.

    Pure apart from reading the clock when ``now`` is omitted.
    """
    _require_sequence(curves, "curves")
    if not curves:
        return []
    if now is None:
        now = time.time()

    raw = [
        (
            curve,
            velocity(curve, now),
            to_number(curve.total_volume_eth),
            to_number(curve.trade_count),
        )
        for curve in curves
    ]

    velocities = [r[1] for r in raw]
    volumes = [r[2] for r in raw]
    trade_counts = [r[3] for r in raw]
    min_vel, max_vel = min(velocities), max(velocities)
    min_vol, max_vol = min(volumes), max(volumes)
    min_trades, max_trades = min(trade_counts), max(trade_counts)

    scored: list[ScoredCurve] = []
    for curve, vel, vol, trades in raw:
        recency = 1.0 if recently_traded(curve, now) else 0.0
        score = (
            normalize(vel, min_vel, max_vel) * WEIGHT_VELOCITY
            + normalize(vol, min_vol, max_vol) * WEIGHT_VOLUME
            + normalize(trades, min_trades, max_trades) * WEIGHT_TRADES
            + recency * WEIGHT_RECENCY
        )
        scored.append(
            ScoredCurve(
                **curve.model_dump(include=_CURVE_FIELDS),
                velocity=vel,
                estimated_market_cap=to_number(curve.last_price_usd) * SUPPLY,
                volume=vol,
                trades=trades,
                tier=tier(vel, vol, curve.last_trade_at, now),
                score=min(1.0, max(0.0, score)),
            )
        )
    return scored


def rank_curves(
    scored: Sequence[ScoredCurve], sort_mode: SortMode | str = SortMode.SCORE
) -> list[ScoredCurve]:
    """Return a new list sorted descending by ``sort_mode``.

    Stable: curves with equal keys keep their input order.
    """
    _require_sequence(scored, "scored")
    field_name = _SORT_FIELDS[SortMode(sort_mode)]
    return sorted(scored, key=lambda c: getattr(c, field_name), reverse=True)
