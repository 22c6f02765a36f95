"""Shared test fixtures."""

from collections.abc import Callable, Iterator

import pytest

from src.api.metrics_registry import registry
from src.models.curve import Curve

NOW = 1_750_000_000.0


@pytest.fixture
def now() -> float:
    """Fixed clock so scoring is deterministic."""
    return NOW


@pytest.fixture
def make_curve(now: float) -> Callable[..., Curve]:
    """Build a Curve from snake_case overrides; timestamps are relative to ``now``.

    ``age_sec`` and ``last_trade_ago_sec`` are shortcuts for created_at and
    last_trade_at. Pass ``last_trade_ago_sec=None`` for a never-traded curve.
    """
    counter = iter(range(1, 10_000))

    def _make(
        *,
        age_sec: float = 3600,
        last_trade_ago_sec: float | None = 60,
        **overrides: object,
    ) -> Curve:
        i = next(counter)
        fields: dict[str, object] = {
            "id": f"curve-{i}",
            "token": f"0xtoken{i:04d}",
            "creator": "0xcreator",
            "name": f"Coin {i}",
            "symbol": f"C{i}",
            "uri": f"ipfs://cid{i}",
            "graduated": False,
            "created_at": str(int(now - age_sec)),
            "last_price_usd": "0.000001",
            "last_price_eth": "0.0000000004",
            "total_volume_eth": "0.2",
            "trade_count": "10",
            "last_trade_at": None if last_trade_ago_sec is None else str(int(now - last_trade_ago_sec)),
        }
        fields.update(overrides)
        return Curve(**fields)

    return _make


@pytest.fixture(autouse=True)
def _reset_registry() -> Iterator[None]:
    """Each test starts with an empty runtime registry."""
    registry.state = None
    registry.poller_metrics = None
    registry.image_resolver = None
    yield
    registry.state = None
    registry.poller_metrics = None
    registry.image_resolver = None
