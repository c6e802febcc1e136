"""Load assessment report definitions from TOML files."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from pathlib import Path
from typing import Any
import tomllib

from domain.common import GameCollection, parse_game_date


@dataclass(frozen=True)
class ReportConfig:
    """One named way of reading the assessment snapshot."""

    name: str
    description: str | None
    file_path: Path
    lookback_days: int = 0
    use_demand_correction: bool = False

    def as_config_json(self) -> dict[str, Any]:
        return {
            "lookback_days": self.lookback_days,
            "use_demand_correction": self.use_demand_correction,
        }

    def filter_games(self, games: GameCollection, *, as_of: datetime | None = None) -> GameCollection:
        """Restrict the snapshot to the lookback window.

        A ``lookback_days`` of 0 keeps every game. Games whose date cannot be
        parsed are kept so the aggregates still see them.
        """
        if self.lookback_days == 0:
            return games

        reference = as_of or datetime.now(UTC)
        if reference.tzinfo is None:
            reference = reference.replace(tzinfo=UTC)
        cutoff = (reference - timedelta(days=self.lookback_days)).timestamp()

        filtered = {}
        for game_id, game in games.items():
            timestamp = parse_game_date(game.game_date)
            if timestamp is None or timestamp >= cutoff:
                filtered[game_id] = game
        return filtered


def load_report_configs(config_dir: Path) -> list[ReportConfig]:
    """Load and validate all report TOML config files in a directory."""
    if not config_dir.exists():
        raise FileNotFoundError(f"Config directory not found: {config_dir}")
    if not config_dir.is_dir():
        raise NotADirectoryError(f"Config path is not a directory: {config_dir}")

    config_files = sorted(config_dir.glob("*.toml"))
    if not config_files:
        raise ValueError(f"No .toml config files found in: {config_dir}")

    configs: list[ReportConfig] = []
    for file_path in config_files:
        with file_path.open("rb") as file:
            raw = tomllib.load(file)
        configs.append(_parse_report_config(raw, file_path))

    names = [config.name for config in configs]
    if len(names) != len(set(names)):
        raise ValueError(f"Duplicate report names found in {config_dir}: {names}")

    return configs


def _parse_report_config(raw: dict[str, Any], file_path: Path) -> ReportConfig:
    report_raw = raw.get("report", {})
    assessment_raw = raw.get("assessment", {})

    name = str(report_raw.get("name", "")).strip()
    if not name:
        raise ValueError(f"{file_path}: [report].name is required")

    description_value = report_raw.get("description")
    description = None if description_value is None else str(description_value)

    lookback_days = int(report_raw.get("lookback_days", 0))
    if lookback_days < 0:
        raise ValueError(f"{file_path}: [report].lookback_days must be >= 0")

    use_demand_correction = assessment_raw.get("use_demand_correction", False)
    if not isinstance(use_demand_correction, bool):
        raise ValueError(f"{file_path}: [assessment].use_demand_correction must be a boolean")

    return ReportConfig(
        name=name,
        description=description,
        file_path=file_path,
        lookback_days=lookback_days,
        use_demand_correction=use_demand_correction,
    )


__all__ = ["ReportConfig", "load_report_configs"]
