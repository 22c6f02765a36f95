"""Bonding-curve token records: raw indexer shape and the scored view."""

from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field, computed_field


class Tier(StrEnum):
    HOT = "hot"
    RISING = "rising"
    ACTIVE = "active"
    DEAD = "dead"


class SortMode(StrEnum):
    """Leaderboard sort keys. All sorts are descending."""

    SCORE = "score"
    VOLUME = "volume"
    VELOCITY = "velocity"
    MARKETCAP = "marketcap"


class Curve(BaseModel):
    """One launchpad token as returned by the pump-charts subgraph.

    Numeric fields stay decimal strings exactly as transported; the scorer
    does the coercion so a single malformed value never rejects the record.
    """

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
        coerce_numbers_to_str=True,
    )

    id: str
    created_at: str = Field("0", alias="createdAt")
    token: str = ""
    name: str = ""
    symbol: str = ""
    uri: str = ""
    creator: str = ""
    graduated: bool = False
    last_price_usd: str = Field("0", alias="lastPriceUsd")
    last_price_eth: str = Field("0", alias="lastPriceEth")
    total_volume_eth: str = Field("0", alias="totalVolumeEth")
    trade_count: str = Field("0", alias="tradeCount")
    last_trade_at: str | None = Field(None, alias="lastTradeAt")


class ScoredCurve(Curve):
    """Curve plus derived metrics from one scoring pass. Never persisted."""

    velocity: float  # trades per hour since creation
    estimated_market_cap: float  # last_price_usd * SUPPLY
    volume: float  # total_volume_eth as a number
    trades: float  # trade_count as a number
    tier: Tier
    score: float  # 0..1 composite

    @computed_field
    @property
    def is_hot(self) -> bool:
        return self.tier == Tier.HOT

    @computed_field
    @property
    def is_dead(self) -> bool:
        return self.tier == Tier.DEAD
