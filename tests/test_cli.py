"""Tests for the journal CLI commands.

**Feature: trade-journal**
"""

import json
import tempfile
from pathlib import Path

import click
import pytest
from click.testing import CliRunner

from tradejournal.cli.main import cli
from tradejournal.config import JournalConfig, StorageConfig, load_config, save_config
from tradejournal.ledger import Ledger
from tradejournal.storage import StorageGateway


@pytest.fixture
def workspace():
    """Temporary directory holding a config that points at local stores."""
    with tempfile.TemporaryDirectory() as tmpdir:
        root = Path(tmpdir)
        config = JournalConfig(
            storage=StorageConfig(db_path=root / "journal.db", local_path=root / "local.json")
        )
        save_config(config, root / "config.toml")
        yield root


def invoke(workspace: Path, *args: str, input: str | None = None):
    runner = CliRunner()
    return runner.invoke(cli, ["--config", str(workspace / "config.toml"), *args], input=input)


def plain(result) -> str:
    """Command output without terminal styling."""
    return click.unstyle(result.output)


def open_ledger(workspace: Path) -> Ledger:
    config = load_config(workspace / "config.toml")
    return Ledger(StorageGateway.from_config(config))


@pytest.fixture
def account_id(workspace: Path) -> str:
    result = invoke(workspace, "account", "add", "Main", "--balance", "1000")
    assert result.exit_code == 0, plain(result)
    return open_ledger(workspace).accounts[0].id


class TestAccountCommands:
    def test_add_account(self, workspace: Path):
        result = invoke(workspace, "account", "add", "Swing", "-b", "2500", "-c", "eur")

        assert result.exit_code == 0
        assert "Account 'Swing' created" in plain(result)
        [account] = open_ledger(workspace).accounts
        assert account.currency == "EUR"
        assert account.current_balance == 2500.0

    def test_add_account_rejects_zero_balance(self, workspace: Path):
        result = invoke(workspace, "account", "add", "Main", "--balance", "0")

        assert result.exit_code == 1
        assert open_ledger(workspace).accounts == []

    def test_list_empty(self, workspace: Path):
        result = invoke(workspace, "account", "list")
        assert result.exit_code == 0
        assert "No accounts yet" in plain(result)

    def test_delete_requires_confirmation(self, workspace: Path, account_id: str):
        result = invoke(workspace, "account", "delete", account_id, input="n\n")
        assert result.exit_code != 0
        assert len(open_ledger(workspace).accounts) == 1

        result = invoke(workspace, "account", "delete", account_id, input="y\n")
        assert result.exit_code == 0
        assert open_ledger(workspace).accounts == []

    def test_deposit_and_withdraw(self, workspace: Path, account_id: str):
        assert invoke(workspace, "deposit", account_id, "500").exit_code == 0
        assert invoke(workspace, "withdraw", account_id, "200").exit_code == 0

        account = open_ledger(workspace).get_account(account_id)
        assert account.current_balance == pytest.approx(1300.0)
        assert account.total_deposits == pytest.approx(1500.0)

    def test_withdraw_more_than_balance(self, workspace: Path, account_id: str):
        result = invoke(workspace, "withdraw", account_id, "5000")

        assert result.exit_code == 1
        assert "Insufficient Balance" in plain(result)
        assert open_ledger(workspace).entries == []


class TestTradeCommands:
    def test_add_and_list(self, workspace: Path, account_id: str):
        result = invoke(
            workspace,
            "trade", "add", account_id, "eurusd",
            "--type", "buy",
            "--entry", "100",
            "--exit", "110",
            "--risk", "5",
            "--pnl", "10",
            "--status", "closed",
            "--date", "2024-03-01",
            "--tag", "breakout",
        )

        assert result.exit_code == 0, plain(result)
        assert "EURUSD trade recorded" in plain(result)
        assert "R-multiple: 2.00R" in plain(result)

        invoke(workspace, "deposit", account_id, "500")
        listed = invoke(workspace, "trades", "--status", "win")
        assert listed.exit_code == 0
        assert "Entries: 1" in plain(listed)

    def test_add_requires_entry_price(self, workspace: Path, account_id: str):
        result = invoke(workspace, "trade", "add", account_id, "AAPL", "--type", "buy")
        assert result.exit_code == 2

    def test_edit_and_delete(self, workspace: Path, account_id: str):
        invoke(workspace, "trade", "add", account_id, "AAPL", "--type", "sell", "--entry", "180")
        entry_id = open_ledger(workspace).entries[0].id

        result = invoke(workspace, "trade", "edit", entry_id, "--pnl", "-20", "--status", "stopped")
        assert result.exit_code == 0, plain(result)
        assert open_ledger(workspace).get_account(account_id).current_balance == pytest.approx(980.0)

        result = invoke(workspace, "trade", "delete", entry_id)
        assert result.exit_code == 0
        assert open_ledger(workspace).entries == []

    def test_edit_without_changes_fails(self, workspace: Path, account_id: str):
        invoke(workspace, "trade", "add", account_id, "AAPL", "--type", "buy", "--entry", "180")
        entry_id = open_ledger(workspace).entries[0].id

        result = invoke(workspace, "trade", "edit", entry_id)
        assert result.exit_code == 1
        assert "Nothing to change" in plain(result)

    def test_export(self, workspace: Path, account_id: str):
        invoke(workspace, "trade", "add", account_id, "AAPL", "--type", "buy", "--entry", "180")
        output = workspace / "export.json"

        result = invoke(workspace, "export", account_id, "-o", str(output))

        assert result.exit_code == 0
        records = json.loads(output.read_text())
        assert [r["symbol"] for r in records] == ["AAPL"]


class TestAnalyticsCommands:
    def test_stats(self, workspace: Path, account_id: str):
        invoke(
            workspace, "trade", "add", account_id, "AAPL",
            "--type", "buy", "--entry", "180", "--pnl", "250", "--status", "closed",
            "--mistakes", "Moved stop",
        )

        result = invoke(workspace, "stats", account_id)

        assert result.exit_code == 0, plain(result)
        assert "100.0%" in plain(result)
        assert "25.00%" in plain(result)
        assert "Moved stop" in plain(result)

    def test_stats_unknown_account(self, workspace: Path):
        result = invoke(workspace, "stats", "missing")
        assert result.exit_code == 1
        assert "Account not found" in plain(result)

    def test_heatmap(self, workspace: Path, account_id: str):
        invoke(
            workspace, "trade", "add", account_id, "AAPL",
            "--type", "buy", "--entry", "180", "--pnl", "70",
            "--status", "closed", "--date", "2024-03-01",
        )

        result = invoke(workspace, "heatmap", account_id, "--month", "2024-03")

        assert result.exit_code == 0, plain(result)
        assert "March 2024" in plain(result)
        assert "+70.00" in plain(result)

    def test_heatmap_bad_month(self, workspace: Path, account_id: str):
        result = invoke(workspace, "heatmap", account_id, "--month", "March")
        assert result.exit_code == 1

    def test_tags_and_emotions_empty(self, workspace: Path, account_id: str):
        assert "No tagged trades" in plain(invoke(workspace, "tags", account_id))
        assert "No emotions recorded" in plain(invoke(workspace, "emotions", account_id))


class TestReviewAndSync:
    def test_review_check(self, workspace: Path):
        result = invoke(workspace, "review", "--check")
        assert result.exit_code == 0
        assert "Time for trade review" in plain(result)

    def test_review_marks_reviewed(self, workspace: Path, account_id: str):
        invoke(
            workspace, "trade", "add", account_id, "AAPL",
            "--type", "buy", "--entry", "180", "--pnl", "5", "--status", "closed",
        )

        assert invoke(workspace, "review").exit_code == 0
        assert not open_ledger(workspace).review_due()

    def test_push_reports_durable_row_counts(self, workspace: Path, account_id: str):
        invoke(workspace, "trade", "add", account_id, "AAPL", "--type", "buy", "--entry", "180")

        result = invoke(workspace, "sync", "push")

        assert result.exit_code == 0, plain(result)
        assert "Pushed 1 accounts and 1 trades" in plain(result)
        assert "accounts: 1, trades: 1" in plain(result)

    def test_pull_reports_durable_row_counts(self, workspace: Path, account_id: str):
        invoke(workspace, "sync", "push")

        result = invoke(workspace, "sync", "pull")

        assert result.exit_code == 0, plain(result)
        assert "accounts: 1, trades: 0" in plain(result)

    def test_migrate(self, workspace: Path, account_id: str):
        result = invoke(workspace, "sync", "migrate")

        assert result.exit_code == 0, plain(result)
        config = load_config(workspace / "config.toml")
        assert config.storage.mode == "durable"
        assert [a.id for a in open_ledger(workspace).accounts] == [account_id]

    def test_init_does_not_overwrite(self, workspace: Path):
        result = invoke(workspace, "init")
        assert result.exit_code == 0
        assert "already exists" in plain(result)
