#!/usr/bin/env python3
"""Assessment and match statistics reports over the stored game snapshot."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Annotated

import typer

ROOT_DIR = Path(__file__).resolve().parents[1]
SRC_DIR = ROOT_DIR / "src"
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

from db import DEFAULT_DB_URL, create_db_engine, create_session_factory
from domain.assessment_stats import (
    MetricAverages,
    calculate_player_assessment_averages,
    calculate_team_assessment_averages,
    get_player_assessment_notes,
    get_player_assessment_trends,
)
from domain.common import ASSESSMENT_METRICS, GameCollection, Season, Tournament
from domain.pipeline import run_is_played_fix, run_player_id_fix
from domain.player_stats import calculate_player_stats
from domain.report_config import ReportConfig, load_report_configs
from repositories.storage_repository import (
    ensure_storage_schema,
    fetch_saved_games,
    fetch_seasons,
    fetch_tournaments,
)

DEFAULT_CONFIG_DIR = ROOT_DIR / "config" / "reports"
DEFAULT_REPORT = "default"

app = typer.Typer(
    add_completion=False,
    no_args_is_help=True,
    help="Player and team assessment reports.",
)

DbUrlOption = Annotated[
    str,
    typer.Option(
        "--db-url",
        help="Database URL. Defaults to the local soccer_coach postgres instance.",
    ),
]
ConfigDirOption = Annotated[
    Path,
    typer.Option("--config-dir", help="Directory holding report TOML files."),
]
ReportOption = Annotated[
    str,
    typer.Option("--report", help="Report name from [report].name."),
]
PlayerIdArgument = Annotated[str, typer.Argument(help="Player id as stored in assessments.")]


def _select_report(config_dir: Path, report_name: str) -> ReportConfig:
    for config in load_report_configs(config_dir):
        if config.name == report_name:
            return config
    raise typer.BadParameter(
        f"No report named '{report_name}' found in {config_dir}",
        param_hint="--report",
    )


def _load_games(db_url: str, report: ReportConfig) -> GameCollection:
    engine = create_db_engine(db_url)
    ensure_storage_schema(engine)
    session_factory = create_session_factory(engine)
    with session_factory() as session:
        games = fetch_saved_games(session)
    return report.filter_games(games)


def _load_competitions(db_url: str) -> tuple[list[Season], list[Tournament]]:
    engine = create_db_engine(db_url)
    session_factory = create_session_factory(engine)
    with session_factory() as session:
        return fetch_seasons(session), fetch_tournaments(session)


def _echo_averages(label: str, report: ReportConfig, result: MetricAverages | None) -> None:
    if result is None:
        typer.echo(f"{label}: no assessed games (report={report.name})")
        return

    typer.echo(
        f"{label} report={report.name} games={result.count} "
        f"demand_correction={report.use_demand_correction}"
    )
    for metric in ASSESSMENT_METRICS:
        typer.echo(f"  {metric:<12} {result.averages[metric]:6.2f}")
    typer.echo(f"  {'overall':<12} {result.overall:6.2f}")
    typer.echo(f"  {'final_score':<12} {result.final_score:6.2f}")


@app.command()
def player_averages(
    player_id: PlayerIdArgument,
    db_url: DbUrlOption = DEFAULT_DB_URL,
    config_dir: ConfigDirOption = DEFAULT_CONFIG_DIR,
    report: ReportOption = DEFAULT_REPORT,
) -> None:
    """Print one player's assessment averages."""
    report_config = _select_report(config_dir, report)
    games = _load_games(db_url, report_config)
    result = calculate_player_assessment_averages(
        player_id,
        games,
        use_demand_correction=report_config.use_demand_correction,
    )
    _echo_averages(f"player={player_id}", report_config, result)


@app.command()
def team_averages(
    db_url: DbUrlOption = DEFAULT_DB_URL,
    config_dir: ConfigDirOption = DEFAULT_CONFIG_DIR,
    report: ReportOption = DEFAULT_REPORT,
) -> None:
    """Print the team's mean-of-means assessment averages."""
    report_config = _select_report(config_dir, report)
    games = _load_games(db_url, report_config)
    result = calculate_team_assessment_averages(
        games,
        use_demand_correction=report_config.use_demand_correction,
    )
    _echo_averages("team", report_config, result)


@app.command()
def trends(
    player_id: PlayerIdArgument,
    metric: Annotated[
        str | None,
        typer.Option("--metric", help="Limit output to one metric."),
    ] = None,
    db_url: DbUrlOption = DEFAULT_DB_URL,
    config_dir: ConfigDirOption = DEFAULT_CONFIG_DIR,
    report: ReportOption = DEFAULT_REPORT,
) -> None:
    """Print one player's per-metric history, oldest first."""
    if metric is not None and metric not in ASSESSMENT_METRICS:
        raise typer.BadParameter(
            f"--metric must be one of: {', '.join(ASSESSMENT_METRICS)}",
            param_hint="--metric",
        )

    report_config = _select_report(config_dir, report)
    series = get_player_assessment_trends(player_id, _load_games(db_url, report_config))
    for name in ASSESSMENT_METRICS if metric is None else (metric,):
        points = series[name]
        values = " ".join(f"{point.date}={point.value:g}" for point in points)
        typer.echo(f"{name:<12} points={len(points):3d} {values}".rstrip())


@app.command()
def notes(
    player_id: PlayerIdArgument,
    db_url: DbUrlOption = DEFAULT_DB_URL,
    config_dir: ConfigDirOption = DEFAULT_CONFIG_DIR,
    report: ReportOption = DEFAULT_REPORT,
) -> None:
    """Print one player's assessment notes, most recent first."""
    report_config = _select_report(config_dir, report)
    entries = get_player_assessment_notes(player_id, _load_games(db_url, report_config))
    if not entries:
        typer.echo(f"no notes for player={player_id}")
        return
    for entry in entries:
        typer.echo(f"{entry.date}  {entry.notes}")


@app.command()
def player_stats(
    player_id: PlayerIdArgument,
    db_url: DbUrlOption = DEFAULT_DB_URL,
    config_dir: ConfigDirOption = DEFAULT_CONFIG_DIR,
    report: ReportOption = DEFAULT_REPORT,
) -> None:
    """Print goals, assists and per-competition totals for one player."""
    report_config = _select_report(config_dir, report)
    games = _load_games(db_url, report_config)
    seasons, tournaments = _load_competitions(db_url)
    stats = calculate_player_stats(player_id, games, seasons, tournaments)

    typer.echo(
        f"player={player_id} games={stats.total_games} goals={stats.total_goals} "
        f"assists={stats.total_assists} goals_per_game={stats.avg_goals_per_game:.2f} "
        f"assists_per_game={stats.avg_assists_per_game:.2f}"
    )
    for game in stats.game_by_game_stats:
        typer.echo(
            f"  {game.date} vs {game.opponent_name:<20} {game.result} "
            f"goals={game.goals} assists={game.assists} points={game.points}"
        )
    for label, performances in (
        ("season", stats.performance_by_season),
        ("tournament", stats.performance_by_tournament),
    ):
        for performance in performances.values():
            typer.echo(
                f"  {label}={performance.name} games={performance.games_played} "
                f"goals={performance.goals} assists={performance.assists} points={performance.points}"
            )


@app.command()
def list_reports(config_dir: ConfigDirOption = DEFAULT_CONFIG_DIR) -> None:
    """Print all report definitions in the config directory."""
    for config in load_report_configs(config_dir):
        typer.echo(
            f"{config.name:<24} lookback_days={config.lookback_days} "
            f"demand_correction={config.use_demand_correction} file={config.file_path.name}"
        )


@app.command()
def fix_is_played(
    db_url: DbUrlOption = DEFAULT_DB_URL,
    dry_run: Annotated[
        bool,
        typer.Option("--dry-run", help="Report games that would change without writing."),
    ] = False,
) -> None:
    """Mark stored games without an isPlayed flag as played."""
    engine = create_db_engine(db_url)
    ensure_storage_schema(engine)
    run_is_played_fix(
        session_factory=create_session_factory(engine),
        dry_run=dry_run,
        echo=typer.echo,
    )


@app.command()
def fix_player_ids(
    db_url: DbUrlOption = DEFAULT_DB_URL,
    dry_run: Annotated[
        bool,
        typer.Option("--dry-run", help="Report games that would change without writing."),
    ] = False,
) -> None:
    """Remap imported player ids in stored games to the current master roster by name."""
    engine = create_db_engine(db_url)
    ensure_storage_schema(engine)
    run_player_id_fix(
        session_factory=create_session_factory(engine),
        dry_run=dry_run,
        echo=typer.echo,
    )


if __name__ == "__main__":
    app()
