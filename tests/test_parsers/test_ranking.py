"""Tests for rank_curves."""

import random

import pytest

from src.models.curve import SortMode
from src.parsers.scoring import rank_curves, score_curves


@pytest.fixture
def scored(make_curve, now):
    curves = [
        make_curve(trade_count="5", total_volume_eth="3.0", last_price_usd="0.00001"),
        make_curve(trade_count="40", total_volume_eth="0.5", last_price_usd="0.000002"),
        make_curve(trade_count="20", total_volume_eth="1.0", last_price_usd="0.00005"),
        make_curve(trade_count="1", total_volume_eth="0.01", last_price_usd="0.0000001"),
    ]
    return score_curves(curves, now=now)


@pytest.mark.parametrize(
    "mode,field",
    [
        (SortMode.SCORE, "score"),
        (SortMode.VOLUME, "volume"),
        (SortMode.VELOCITY, "velocity"),
        (SortMode.MARKETCAP, "estimated_market_cap"),
    ],
)
def test_sorted_descending(scored, mode, field) -> None:
    ranked = rank_curves(scored, mode)
    values = [getattr(c, field) for c in ranked]
    assert values == sorted(values, reverse=True)


def test_default_sort_is_score(scored) -> None:
    assert rank_curves(scored) == rank_curves(scored, SortMode.SCORE)


def test_accepts_plain_string_key(scored) -> None:
    assert [c.id for c in rank_curves(scored, "volume")] == [
        c.id for c in rank_curves(scored, SortMode.VOLUME)
    ]


def test_unknown_key_raises(scored) -> None:
    with pytest.raises(ValueError):
        rank_curves(scored, "holders")


def test_is_permutation_and_does_not_mutate(scored) -> None:
    before = list(scored)
    ranked = rank_curves(scored, SortMode.VELOCITY)
    assert scored == before
    assert ranked is not scored
    assert len(ranked) == len(scored)
    assert sorted(c.id for c in ranked) == sorted(c.id for c in scored)


def test_ties_keep_input_order(make_curve, now) -> None:
    # Identical metrics: every score ties
    curves = [make_curve(trade_count="3", total_volume_eth="0.3") for _ in range(5)]
    scored = score_curves(curves, now=now)
    ranked = rank_curves(scored, SortMode.SCORE)
    assert [c.id for c in ranked] == [c.id for c in curves]


def test_idempotent(make_curve, now) -> None:
    rng = random.Random(3)
    curves = [
        make_curve(
            trade_count=str(rng.randint(0, 4)),
            total_volume_eth=str(rng.choice([0.1, 0.2])),
        )
        for _ in range(20)
    ]
    scored = score_curves(curves, now=now)
    for mode in SortMode:
        once = rank_curves(scored, mode)
        assert [c.id for c in rank_curves(scored, mode)] == [c.id for c in once]
        assert [c.id for c in rank_curves(once, mode)] == [c.id for c in once]


def test_empty() -> None:
    assert rank_curves([], SortMode.VOLUME) == []


def test_hot_curve_ranks_first(make_curve, now) -> None:
    a = make_curve(trade_count="10", total_volume_eth="1.0", last_trade_ago_sec=60)
    b = make_curve(trade_count="1", total_volume_eth="0.05", last_trade_ago_sec=7200)
    ranked = rank_curves(score_curves([b, a], now=now), SortMode.SCORE)
    assert [c.id for c in ranked] == [a.id, b.id]
