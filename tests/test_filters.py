"""Property-based tests for entry filtering.

**Feature: trade-journal**
"""

import uuid
from datetime import date

from hypothesis import given, settings
from hypothesis import strategies as st

from tradejournal.analytics import (
    available_emotions,
    available_tags,
    filter_entries,
)
from tradejournal.models import ENTRY_STATUSES, TRADE_TYPES, EntryFilter, LedgerEntry


def make_entry(**fields) -> LedgerEntry:
    data = dict(
        id=uuid.uuid4().hex,
        account_id="acc-1",
        date=date(2024, 3, 1),
        symbol="ETHUSD",
        type="buy",
        entry_price=2000.0,
        status="closed",
    )
    data.update(fields)
    return LedgerEntry(**data)


def mixed_journal() -> list[LedgerEntry]:
    return [
        make_entry(id="win", pnl=120.0, emotion="calm", tags=["breakout"]),
        make_entry(id="loss", type="sell", pnl=-60.0, emotion="fearful", tags=["reversal"]),
        make_entry(id="open", pnl=30.0, status="open", tags=["breakout"]),
        make_entry(id="stopped", pnl=-25.0, status="stopped"),
        make_entry(id="deposit", type="deposit", entry_price=0.0, pnl=500.0, tags=["deposit"]),
        make_entry(
            id="withdrawal",
            type="withdrawal",
            entry_price=0.0,
            pnl=-100.0,
            tags=["withdrawal"],
            date=date(2024, 3, 9),
        ),
        make_entry(id="other", account_id="acc-2", pnl=10.0, date=date(2024, 2, 1)),
    ]


def ids(entries: list[LedgerEntry]) -> list[str]:
    return [e.id for e in entries]


class TestStatusResultFilter:
    """
    **Feature: trade-journal, Property 7: Result Filters Only Match Trades**

    *For any* journal, 'win' and 'loss' select closed buy/sell entries by
    the sign of their P&L and never capital movements.
    """

    def test_win_excludes_deposits(self):
        result = filter_entries(mixed_journal(), EntryFilter(status_result="win"))
        assert ids(result) == ["win", "other"]

    def test_loss_excludes_withdrawals_and_stopped(self):
        result = filter_entries(mixed_journal(), EntryFilter(status_result="loss"))
        assert ids(result) == ["loss"]

    def test_closed_status_includes_capital_movements(self):
        result = filter_entries(mixed_journal(), EntryFilter(status_result="closed"))
        assert "deposit" in ids(result)
        assert "withdrawal" in ids(result)
        assert "open" not in ids(result)

    def test_open_and_stopped(self):
        journal = mixed_journal()
        assert ids(filter_entries(journal, EntryFilter(status_result="open"))) == ["open"]
        assert ids(filter_entries(journal, EntryFilter(status_result="stopped"))) == ["stopped"]

    @given(
        pnls=st.lists(st.floats(min_value=-500, max_value=500, allow_nan=False), max_size=20),
        statuses=st.lists(st.sampled_from(ENTRY_STATUSES), min_size=20, max_size=20),
        deposits=st.integers(min_value=0, max_value=5),
    )
    @settings(max_examples=100)
    def test_results_partition_closed_trades(self, pnls, statuses, deposits):
        entries = [
            make_entry(pnl=p, status=statuses[i], type=TRADE_TYPES[i % 2])
            for i, p in enumerate(pnls)
        ]
        entries += [
            make_entry(type="deposit", entry_price=0.0, pnl=100.0) for _ in range(deposits)
        ]

        wins = filter_entries(entries, EntryFilter(status_result="win"))
        losses = filter_entries(entries, EntryFilter(status_result="loss"))

        assert all(e.is_trade and e.status == "closed" and e.pnl > 0 for e in wins)
        assert all(e.is_trade and e.status == "closed" and e.pnl < 0 for e in losses)
        nonzero_closed = [e for e in entries if e.is_trade and e.status == "closed" and e.pnl]
        assert len(wins) + len(losses) == len(nonzero_closed)


class TestOtherDimensions:
    def test_no_criteria_returns_everything(self):
        journal = mixed_journal()
        assert filter_entries(journal) == journal
        assert filter_entries(journal, EntryFilter()) == journal

    def test_tag_never_matches_capital_movements(self):
        result = filter_entries(mixed_journal(), EntryFilter(tag="deposit"))
        assert result == []

        result = filter_entries(mixed_journal(), EntryFilter(tag="breakout"))
        assert ids(result) == ["win", "open"]

    def test_emotion(self):
        result = filter_entries(mixed_journal(), EntryFilter(emotion="fearful"))
        assert ids(result) == ["loss"]

    def test_type(self):
        result = filter_entries(mixed_journal(), EntryFilter(entry_type="withdrawal"))
        assert ids(result) == ["withdrawal"]

    def test_account_and_dates(self):
        journal = mixed_journal()
        assert ids(filter_entries(journal, EntryFilter(account_id="acc-2"))) == ["other"]

        in_march = EntryFilter(date_from=date(2024, 3, 1), date_to=date(2024, 3, 5))
        assert "other" not in ids(filter_entries(journal, in_march))
        assert "withdrawal" not in ids(filter_entries(journal, in_march))

    def test_dimensions_are_conjunctive(self):
        criteria = EntryFilter(status_result="win", tag="breakout", emotion="calm")
        assert ids(filter_entries(mixed_journal(), criteria)) == ["win"]

        criteria = EntryFilter(status_result="win", tag="reversal")
        assert filter_entries(mixed_journal(), criteria) == []

    @given(
        status=st.sampled_from(["all", "open", "closed", "stopped", "win", "loss"]),
        entry_type=st.sampled_from(["all", "buy", "sell", "deposit", "withdrawal"]),
    )
    @settings(max_examples=50)
    def test_result_is_ordered_subset(self, status, entry_type):
        """*For any* criteria, the result keeps input order and adds nothing."""
        journal = mixed_journal()
        result = filter_entries(journal, EntryFilter(status_result=status, entry_type=entry_type))

        positions = [journal.index(e) for e in result]
        assert positions == sorted(positions)


class TestFilterOptions:
    def test_available_tags_skip_capital_movements(self):
        assert available_tags(mixed_journal()) == ["breakout", "reversal"]

    def test_available_emotions(self):
        assert available_emotions(mixed_journal()) == ["calm", "fearful"]
