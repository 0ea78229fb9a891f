"""Tests for configuration loading.

**Feature: trade-journal**
"""

import tempfile
from pathlib import Path

import pytest

from tradejournal.config import (
    CONFIG_DIR,
    JournalConfig,
    StorageConfig,
    load_config,
    save_config,
)


@pytest.fixture
def config_dir():
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


class TestLoadConfig:
    def test_missing_file_gives_defaults(self, config_dir: Path):
        config = load_config(config_dir / "missing.toml")

        assert config.storage.mode == "local"
        assert config.storage.db_path == CONFIG_DIR / "journal.db"
        assert config.analytics.missing_pnl == "loss"
        assert config.review.interval_days == 3
        assert config.logging.level == "WARNING"

    def test_reads_sections(self, config_dir: Path):
        path = config_dir / "config.toml"
        path.write_text(
            "[storage]\n"
            'mode = "durable"\n'
            'db_path = "~/journal/trades.db"\n'
            "\n"
            "[analytics]\n"
            'missing_pnl = "skip"\n'
            "\n"
            "[review]\n"
            "interval_days = 7\n"
            "\n"
            "[logging]\n"
            'level = "debug"\n'
        )

        config = load_config(path)

        assert config.storage.mode == "durable"
        assert config.storage.db_path == Path.home() / "journal" / "trades.db"
        assert config.analytics.missing_pnl == "skip"
        assert config.review.interval_days == 7
        assert config.logging.level == "DEBUG"

    @pytest.mark.parametrize(
        "content",
        [
            "[storage\nmode = 1",
            '[storage]\nmode = "cloud"\n',
            "[review]\ninterval_days = 0\n",
            '[analytics]\nmissing_pnl = "ignore"\n',
        ],
    )
    def test_invalid_file_gives_defaults(self, config_dir: Path, content: str):
        path = config_dir / "config.toml"
        path.write_text(content)

        assert load_config(path) == JournalConfig()


class TestSaveConfig:
    def test_save_then_load(self, config_dir: Path):
        path = config_dir / "nested" / "config.toml"
        config = JournalConfig(
            storage=StorageConfig(
                mode="durable",
                db_path=config_dir / "journal.db",
                local_path=config_dir / "local.json",
            )
        )

        written = save_config(config, path)

        assert written == path
        assert load_config(path) == config
