"""Tests for TOML-based report config loading."""

from __future__ import annotations

from datetime import UTC, datetime
from pathlib import Path

import pytest

from domain.common import GameRecord
from domain.report_config import ReportConfig, load_report_configs

ROOT_DIR = Path(__file__).resolve().parents[1]


def test_load_report_configs_from_directory(tmp_path: Path) -> None:
    (tmp_path / "weighted.toml").write_text(
        """
[report]
name = "weighted"
description = "Weighted by demand"
lookback_days = 180

[assessment]
use_demand_correction = true
""".strip()
    )

    configs = load_report_configs(tmp_path)
    assert len(configs) == 1

    config = configs[0]
    assert config.name == "weighted"
    assert config.description == "Weighted by demand"
    assert config.lookback_days == 180
    assert config.use_demand_correction is True
    assert config.file_path == tmp_path / "weighted.toml"
    assert config.as_config_json() == {"lookback_days": 180, "use_demand_correction": True}


def test_defaults_when_sections_are_sparse(tmp_path: Path) -> None:
    (tmp_path / "plain.toml").write_text('[report]\nname = "plain"\n')
    config = load_report_configs(tmp_path)[0]
    assert config.description is None
    assert config.lookback_days == 0
    assert config.use_demand_correction is False


def test_duplicate_names_raise_error(tmp_path: Path) -> None:
    template = '[report]\nname = "dup"\n'
    (tmp_path / "a.toml").write_text(template)
    (tmp_path / "b.toml").write_text(template)

    with pytest.raises(ValueError, match="Duplicate report names"):
        load_report_configs(tmp_path)


def test_missing_name_raises_error(tmp_path: Path) -> None:
    (tmp_path / "nameless.toml").write_text("[report]\nlookback_days = 10\n")
    with pytest.raises(ValueError, match=r"\[report\].name is required"):
        load_report_configs(tmp_path)


def test_negative_lookback_raises_error(tmp_path: Path) -> None:
    (tmp_path / "bad.toml").write_text('[report]\nname = "bad"\nlookback_days = -1\n')
    with pytest.raises(ValueError, match="lookback_days must be >= 0"):
        load_report_configs(tmp_path)


def test_non_boolean_demand_correction_raises_error(tmp_path: Path) -> None:
    (tmp_path / "bad.toml").write_text(
        '[report]\nname = "bad"\n\n[assessment]\nuse_demand_correction = "yes"\n'
    )
    with pytest.raises(ValueError, match="use_demand_correction must be a boolean"):
        load_report_configs(tmp_path)


def test_missing_directory_raises_error(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        load_report_configs(tmp_path / "missing")


def test_empty_directory_raises_error(tmp_path: Path) -> None:
    with pytest.raises(ValueError, match="No .toml config files"):
        load_report_configs(tmp_path)


def test_bundled_report_configs_load() -> None:
    configs = load_report_configs(ROOT_DIR / "config" / "reports")
    names = {config.name for config in configs}
    assert {"default", "demand_corrected"} <= names


def test_filter_games_applies_lookback_window(tmp_path: Path) -> None:
    config = ReportConfig(
        name="recent",
        description=None,
        file_path=tmp_path / "recent.toml",
        lookback_days=30,
    )
    games = {
        "recent": GameRecord(game_date="2025-06-20"),
        "old": GameRecord(game_date="2025-01-01"),
        "undated": GameRecord(game_date=""),
    }

    filtered = config.filter_games(games, as_of=datetime(2025, 7, 1, tzinfo=UTC))
    assert sorted(filtered) == ["recent", "undated"]


def test_filter_games_keeps_everything_without_lookback(tmp_path: Path) -> None:
    config = ReportConfig(name="all", description=None, file_path=tmp_path / "all.toml")
    games = {"old": GameRecord(game_date="2001-01-01")}
    assert config.filter_games(games) is games
