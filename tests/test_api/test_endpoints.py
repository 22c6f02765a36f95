"""Tests for the read-only leaderboard API."""

from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi.testclient import TestClient

from src.api.app import create_app
from src.api.metrics_registry import registry
from src.models.curve import SortMode
from src.parsers.metrics import PollerMetrics
from src.parsers.scoring import rank_curves, score_curves
from src.parsers.worker import LeaderboardState


@pytest.fixture
def api() -> TestClient:
    return TestClient(create_app())


@pytest.fixture
def published(make_curve, now) -> LeaderboardState:
    curves = [
        make_curve(symbol=f"S{n}", name=f"Coin {n}", trade_count=str(100 - n * 10), total_volume_eth=str(10 - n))
        for n in range(1, 10)
    ]
    curves.append(make_curve(symbol="DEAD", last_trade_ago_sec=None))
    state = LeaderboardState()
    state.publish(state.next_seq(), rank_curves(score_curves(curves, now=now), SortMode.SCORE), now)
    registry.state = state
    registry.poller_metrics = PollerMetrics()
    return state


def test_health_before_first_batch(api) -> None:
    body = api.get("/api/v1/health").json()
    assert body["status"] == "loading"
    assert body["batch_age_sec"] is None


def test_health_with_old_batch_is_stale(api, published) -> None:
    body = api.get("/api/v1/health").json()
    # Fixed test clock is far in the past relative to the wall clock
    assert body["status"] == "stale"
    assert body["last_seq"] == 1
    assert body["batch_size"] == 10


def test_leaderboard_requires_batch(api) -> None:
    assert api.get("/api/v1/leaderboard").status_code == 503


def test_leaderboard_default(api, published) -> None:
    body = api.get("/api/v1/leaderboard").json()
    assert body["seq"] == 1
    assert body["sort"] == "score"
    assert body["items"][0]["symbol"] == "S1"
    assert body["items"][0]["rank"] == 1
    assert body["items"][0]["is_hot"] is True
    assert body["tiers"]["dead"] == 1
    assert len(body["items"]) == 10


def test_leaderboard_filters(api, published) -> None:
    resp = api.get(
        "/api/v1/leaderboard",
        params={"sort": "volume", "include_dead": "false", "limit": 3},
    )
    items = resp.json()["items"]
    assert [i["symbol"] for i in items] == ["S1", "S2", "S3"]

    dead = api.get("/api/v1/leaderboard", params={"tier": "dead"}).json()["items"]
    assert [i["symbol"] for i in dead] == ["DEAD"]

    found = api.get("/api/v1/leaderboard", params={"search": "coin 9"}).json()["items"]
    assert [i["symbol"] for i in found] == ["S9"]


def test_leaderboard_unknown_sort(api, published) -> None:
    assert api.get("/api/v1/leaderboard", params={"sort": "holders"}).status_code == 422


def test_battles(api, published) -> None:
    body = api.get("/api/v1/battles").json()
    battles = body["battles"]
    assert len(battles) == 2
    assert battles[0]["coin_a"]["symbol"] == "S1"
    assert battles[0]["coin_b"]["symbol"] == "S2"
    assert battles[0]["pot"] == "17.00 ETH"
    assert battles[0]["link"] == "/battle?left=S1&right=S2"


def test_battle_lookup(api, published) -> None:
    body = api.get("/api/v1/battle", params={"left": "s5", "right": "nope"}).json()
    assert body["left"]["symbol"] == "S5"
    assert body["right"]["symbol"] == "S1"


def test_bracket(api, published) -> None:
    body = api.get("/api/v1/bracket").json()
    labels = [r["label"] for r in body["rounds"]]
    assert labels == ["Quarter-Finals", "Semi-Finals", "Grand Final"]
    first = body["rounds"][0]["matchups"][0]
    assert (first["coin_a"]["symbol"], first["coin_b"]["symbol"]) == ("S1", "S2")
    assert body["rounds"][2]["matchups"][0]["coin_a"] is None


def test_image_resolves(api) -> None:
    resolver = MagicMock()
    resolver.resolve = AsyncMock(return_value="https://gw.test/ipfs/img")
    registry.image_resolver = resolver

    resp = api.get("/api/v1/image", params={"uri": "ipfs://meta"})

    assert resp.status_code == 200
    assert resp.json() == {"uri": "ipfs://meta", "image_url": "https://gw.test/ipfs/img"}
    resolver.resolve.assert_awaited_once_with("ipfs://meta")


def test_image_not_found(api) -> None:
    resolver = MagicMock()
    resolver.resolve = AsyncMock(return_value=None)
    registry.image_resolver = resolver
    assert api.get("/api/v1/image", params={"uri": "ipfs://gone"}).status_code == 404


def test_metrics(api, published) -> None:
    body = api.get("/api/v1/metrics").json()
    assert body["last_seq"] == 1
    assert body["passes"] == 0
