"""Live battle pairing for the home page and the battle arena.

Takes the top live curves by score and pairs them off: 1st vs 2nd,
3rd vs 4th. Dead curves and curves that never saw volume don't fight.
"""

from collections.abc import Sequence
from dataclasses import dataclass

from src.models.curve import ScoredCurve, SortMode
from src.parsers.scoring import rank_curves, to_number

# Volume (ETH) at which an ungraduated curve counts as fully healthy
HEALTH_FULL_VOLUME_ETH = 4.0


@dataclass(frozen=True)
class BattleSide:
    curve: ScoredCurve
    health: int  # 0-100, bonding curve progress approximation
    age: str


@dataclass(frozen=True)
class Battle:
    id: int
    coin_a: BattleSide
    coin_b: BattleSide
    pot_eth: str  # combined volume, 2 decimals

    @property
    def link(self) -> str:
        return battle_link(self.coin_a.curve.symbol, self.coin_b.curve.symbol)


def battle_link(left: str, right: str) -> str:
    return f"/battle?left={left}&right={right}"


def curve_health(curve: ScoredCurve) -> int:
    if curve.graduated:
        return 100
    return round(min(curve.volume / HEALTH_FULL_VOLUME_ETH * 100, 100))


def format_age(created_at: str, now: float) -> str:
    """``"3h 12m"`` once a curve is an hour old, ``"12m"`` before that."""
    minutes = max(int((now - to_number(created_at)) // 60), 0)
    hours = minutes // 60
    if hours > 0:
        return f"{hours}h {minutes % 60}m"
    return f"{minutes}m"


def live_contenders(scored: Sequence[ScoredCurve]) -> list[ScoredCurve]:
    """Curves eligible to battle, best score first."""
    alive = [c for c in scored if not c.is_dead and c.volume > 0]
    return rank_curves(alive, SortMode.SCORE)


def _side(curve: ScoredCurve, now: float) -> BattleSide:
    return BattleSide(curve=curve, health=curve_health(curve), age=format_age(curve.created_at, now))


def live_battles(scored: Sequence[ScoredCurve], now: float, limit: int = 4) -> list[Battle]:
    """Pair the top ``limit`` live curves. An odd one out sits out."""
    if len(scored) < 2:
        return []
    top = live_contenders(scored)[:limit]

    battles: list[Battle] = []
    for i in range(0, len(top) - 1, 2):
        coin_a, coin_b = top[i], top[i + 1]
        battles.append(
            Battle(
                id=i,
                coin_a=_side(coin_a, now),
                coin_b=_side(coin_b, now),
                pot_eth=f"{coin_a.volume + coin_b.volume:.2f}",
            )
        )
    return battles


def find_by_symbol(scored: Sequence[ScoredCurve], symbol: str) -> ScoredCurve | None:
    """First curve whose symbol matches, case-insensitive."""
    wanted = symbol.strip().upper()
    for curve in scored:
        if curve.symbol.upper() == wanted:
            return curve
    return None


def default_matchup(
    scored: Sequence[ScoredCurve],
    left: str | None = None,
    right: str | None = None,
) -> tuple[ScoredCurve, ScoredCurve] | None:
    """Resolve the arena's left/right symbols against the batch.

    A missing or unknown side falls back to the best live curve not
    already on the other side. ``None`` if two distinct curves can't be found.
    """
    coin_a = find_by_symbol(scored, left) if left else None
    coin_b = find_by_symbol(scored, right) if right else None
    if coin_a is not None and coin_b is not None and coin_a.id == coin_b.id:
        coin_b = None

    for candidate in live_contenders(scored):
        if coin_a is not None and coin_b is not None:
            break
        if candidate.id in {c.id for c in (coin_a, coin_b) if c is not None}:
            continue
        if coin_a is None:
            coin_a = candidate
        elif coin_b is None:
            coin_b = candidate

    if coin_a is None or coin_b is None:
        return None
    return coin_a, coin_b
