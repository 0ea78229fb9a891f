"""Property-based tests for win/loss streak detection.

**Feature: trade-journal**
"""

import uuid
from datetime import date, timedelta

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from tradejournal.analytics import current_streak, longest_streaks
from tradejournal.models import LedgerEntry


def make_trade(pnl, day: date, **fields) -> LedgerEntry:
    data = dict(
        id=uuid.uuid4().hex,
        account_id="acc-1",
        date=day,
        symbol="BTCUSD",
        type="buy",
        entry_price=100.0,
        pnl=pnl,
        status="closed",
    )
    data.update(fields)
    return LedgerEntry(**data)


def newest_first(pnls: list) -> list[LedgerEntry]:
    """One closed trade per day, first element being the most recent."""
    start = date(2024, 3, 31)
    return [make_trade(p, start - timedelta(days=i)) for i, p in enumerate(pnls)]


class TestCurrentStreak:
    """
    **Feature: trade-journal, Property 5: Current Streak**

    The current streak is the run of identical outcomes starting at the
    most recent closed trade.
    """

    def test_example_sequence(self):
        """Newest to oldest +50, +20, -10, +5 gives a 2-trade win streak."""
        streak = current_streak(newest_first([50.0, 20.0, -10.0, 5.0]))
        assert streak.length == 2
        assert streak.kind == "win"

    def test_input_order_does_not_matter(self):
        entries = newest_first([50.0, 20.0, -10.0, 5.0])
        streak = current_streak(list(reversed(entries)))
        assert (streak.length, streak.kind) == (2, "win")

    def test_no_trades(self):
        streak = current_streak([])
        assert streak.length == 0
        assert streak.kind == ""

    def test_zero_pnl_counts_as_loss(self):
        streak = current_streak(newest_first([0.0, -5.0, 10.0]))
        assert (streak.length, streak.kind) == (2, "loss")

    def test_ignores_capital_movements_and_open_trades(self):
        latest = date(2024, 4, 10)
        entries = newest_first([-10.0, -20.0, 30.0]) + [
            make_trade(500.0, latest, type="deposit", entry_price=0.0, symbol="Deposit"),
            make_trade(75.0, latest, status="open"),
            make_trade(75.0, latest, status="stopped"),
        ]
        streak = current_streak(entries)
        assert (streak.length, streak.kind) == (2, "loss")

    def test_same_day_entries_keep_input_order(self):
        day = date(2024, 3, 1)
        entries = [make_trade(10.0, day), make_trade(-5.0, day)]
        assert current_streak(entries).kind == "win"
        assert current_streak(list(reversed(entries))).kind == "loss"

    @pytest.mark.parametrize(
        "policy, expected",
        [("loss", (1, "loss")), ("break", (0, "")), ("skip", (2, "win"))],
    )
    def test_missing_pnl_at_head(self, policy, expected):
        streak = current_streak(newest_first([None, 10.0, 20.0]), missing_pnl=policy)
        assert (streak.length, streak.kind) == expected

    @pytest.mark.parametrize(
        "policy, expected",
        [("loss", (1, "win")), ("break", (1, "win")), ("skip", (2, "win"))],
    )
    def test_missing_pnl_inside_run(self, policy, expected):
        streak = current_streak(newest_first([10.0, None, 20.0]), missing_pnl=policy)
        assert (streak.length, streak.kind) == expected

    def test_unknown_policy_rejected(self):
        with pytest.raises(ValueError):
            current_streak(newest_first([10.0]), missing_pnl="ignore")

    @given(
        pnls=st.lists(
            st.one_of(st.none(), st.floats(min_value=-1000, max_value=1000, allow_nan=False)),
            max_size=25,
        ),
        policy=st.sampled_from(["loss", "break", "skip"]),
    )
    @settings(max_examples=100)
    def test_streak_is_bounded_by_closed_trades(self, pnls, policy):
        """*For any* history, the streak never exceeds the closed trade count."""
        streak = current_streak(newest_first(pnls), missing_pnl=policy)

        assert 0 <= streak.length <= len(pnls)
        assert streak.kind in ("win", "loss", "")
        assert (streak.length == 0) == (streak.kind == "")

    @given(pnls=st.lists(st.floats(min_value=0.01, max_value=1000, allow_nan=False), min_size=1, max_size=25))
    @settings(max_examples=50)
    def test_all_winners(self, pnls):
        """*For any* history of winners only, the streak spans every trade."""
        streak = current_streak(newest_first(pnls))
        assert (streak.length, streak.kind) == (len(pnls), "win")


class TestLongestStreaks:
    def test_longest_runs(self):
        entries = newest_first([1.0, 1.0, -1.0, -1.0, -1.0, 1.0])
        assert longest_streaks(entries) == {"win": 2, "loss": 3}

    def test_empty(self):
        assert longest_streaks([]) == {"win": 0, "loss": 0}

    def test_break_policy_splits_runs(self):
        entries = newest_first([1.0, None, 1.0, 1.0])
        assert longest_streaks(entries, missing_pnl="break")["win"] == 2
        assert longest_streaks(entries, missing_pnl="skip")["win"] == 3
        assert longest_streaks(entries, missing_pnl="loss") == {"win": 2, "loss": 1}
