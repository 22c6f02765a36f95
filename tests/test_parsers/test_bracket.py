"""Tests for tournament bracket seeding and winner propagation."""

import pytest

from src.parsers.bracket import (
    InsufficientEntrantsError,
    record_winner,
    round_label,
    seed_bracket,
)
from src.parsers.scoring import score_curves


@pytest.fixture
def scored(make_curve, now):
    # S1 is the strongest, S9 the weakest; DEAD would be 2nd if it counted
    curves = [
        make_curve(symbol=f"S{n}", trade_count=str(100 - n * 10), total_volume_eth=str(10 - n))
        for n in range(1, 10)
    ]
    curves.append(
        make_curve(symbol="DEAD", trade_count="95", total_volume_eth="9.5", last_trade_ago_sec=7 * 3600)
    )
    return score_curves(curves, now=now)


def _symbols(m):
    return (
        m.coin_a.symbol if m.coin_a else None,
        m.coin_b.symbol if m.coin_b else None,
    )


def test_seeds_top_eight_live_adjacent_pairs(scored) -> None:
    bracket = seed_bracket(scored, size=8)

    quarter, semi, final = bracket.rounds
    assert [m.id for m in quarter] == ["qf1", "qf2", "qf3", "qf4"]
    assert [_symbols(m) for m in quarter] == [
        ("S1", "S2"),
        ("S3", "S4"),
        ("S5", "S6"),
        ("S7", "S8"),
    ]
    assert [m.id for m in semi] == ["sf1", "sf2"]
    assert all(m.is_tbd for m in semi)
    assert final[0].id == "f1"
    assert final[0].link is None
    assert quarter[0].link == "/battle?left=S1&right=S2"


def test_round_labels() -> None:
    assert round_label(4) == "Quarter-Finals"
    assert round_label(2) == "Semi-Finals"
    assert round_label(1) == "Grand Final"
    assert round_label(8) == "Round of 16"


@pytest.mark.parametrize("size", [0, 1, 3, 6, 12])
def test_size_must_be_power_of_two(scored, size) -> None:
    with pytest.raises(ValueError):
        seed_bracket(scored, size=size)


def test_not_enough_live_curves(scored) -> None:
    with pytest.raises(InsufficientEntrantsError):
        seed_bracket(scored, size=16)


def test_winners_propagate_to_final(scored) -> None:
    bracket = seed_bracket(scored, size=8)
    for match_id, side in [("qf1", "A"), ("qf2", "B"), ("qf3", "A"), ("qf4", "B")]:
        bracket = record_winner(bracket, match_id, side)

    semi = bracket.rounds[1]
    assert _symbols(semi[0]) == ("S1", "S4")
    assert _symbols(semi[1]) == ("S5", "S8")
    assert semi[0].link == "/battle?left=S1&right=S4"

    bracket = record_winner(bracket, "sf1", "B")
    bracket = record_winner(bracket, "sf2", "A")
    assert _symbols(bracket.rounds[2][0]) == ("S4", "S5")
    assert bracket.champion is None

    bracket = record_winner(bracket, "f1", "A")
    assert bracket.champion.symbol == "S4"


def test_record_winner_returns_new_bracket(scored) -> None:
    original = seed_bracket(scored, size=4)
    updated = record_winner(original, "sf1", "A")
    assert original.find("sf1").winner is None
    assert updated.find("sf1").winner == "A"


def test_cannot_decide_tbd_match(scored) -> None:
    bracket = seed_bracket(scored, size=8)
    with pytest.raises(ValueError):
        record_winner(bracket, "f1", "A")


def test_unknown_match_or_side(scored) -> None:
    bracket = seed_bracket(scored, size=8)
    with pytest.raises(KeyError):
        record_winner(bracket, "qf9", "A")
    with pytest.raises(ValueError):
        record_winner(bracket, "qf1", "C")  # type: ignore[arg-type]
