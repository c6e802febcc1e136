"""Stored-data repair jobs."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from sqlalchemy.orm import Session

from domain.migration import fix_game_event_player_ids, fix_missing_is_played
from repositories.storage_repository import (
    fetch_master_roster,
    fetch_saved_game_payloads,
    save_game_payloads,
)


@dataclass(frozen=True)
class IsPlayedFixSummary:
    """Outcome of one ``isPlayed`` backfill run."""

    total_games: int
    games_fixed: int
    fixed_game_ids: tuple[str, ...]
    dry_run: bool

    @property
    def message(self) -> str:
        if self.total_games == 0:
            return "No saved games found"
        return f"Fixed {self.games_fixed} out of {self.total_games} games"


@dataclass(frozen=True)
class PlayerIdFixSummary:
    """Outcome of one player-id remap run."""

    roster_size: int
    total_games: int
    games_fixed: int
    events_fixed: int
    fixed_game_ids: tuple[str, ...]
    dry_run: bool

    @property
    def message(self) -> str:
        if self.roster_size == 0:
            return "No players found in roster"
        if self.total_games == 0:
            return "No saved games found"
        return f"Fixed {self.events_fixed} events in {self.games_fixed} games"


def _store_fixed_payloads(
    session: Session,
    fixed_payloads: dict[str, dict[str, Any]],
    *,
    label: str,
    dry_run: bool,
    echo: Callable[[str], None] | None,
) -> tuple[str, ...]:
    fixed_ids = tuple(sorted(fixed_payloads))
    if echo is not None:
        for game_id in fixed_ids:
            echo(f"{'[dry-run] ' if dry_run else ''}fix game_id={game_id} {label}")

    if dry_run or not fixed_ids:
        session.rollback()
        return fixed_ids

    try:
        save_game_payloads(session, fixed_payloads)
        session.commit()
    except Exception:
        session.rollback()
        raise
    return fixed_ids


def run_is_played_fix(
    *,
    session_factory,
    dry_run: bool = False,
    echo: Callable[[str], None] | None = None,
) -> IsPlayedFixSummary:
    """Backfill ``isPlayed = true`` on stored games that predate the field."""
    with session_factory() as session:
        result = fix_missing_is_played(fetch_saved_game_payloads(session))
        fixed_ids = _store_fixed_payloads(
            session,
            result.fixed_payloads,
            label="isPlayed=true",
            dry_run=dry_run,
            echo=echo,
        )

    summary = IsPlayedFixSummary(
        total_games=result.total_games,
        games_fixed=result.games_fixed,
        fixed_game_ids=fixed_ids,
        dry_run=dry_run,
    )
    if echo is not None:
        echo(f"{summary.message} dry_run={dry_run}")
    return summary


def run_player_id_fix(
    *,
    session_factory,
    dry_run: bool = False,
    echo: Callable[[str], None] | None = None,
) -> PlayerIdFixSummary:
    """Remap stale player ids in stored games onto the current master roster."""
    with session_factory() as session:
        roster = fetch_master_roster(session)
        result = fix_game_event_player_ids(fetch_saved_game_payloads(session), roster)
        fixed_ids = _store_fixed_payloads(
            session,
            result.fixed_payloads,
            label="player_ids=remapped",
            dry_run=dry_run,
            echo=echo,
        )

    summary = PlayerIdFixSummary(
        roster_size=len(roster),
        total_games=result.total_games,
        games_fixed=result.games_fixed,
        events_fixed=result.events_fixed,
        fixed_game_ids=fixed_ids,
        dry_run=dry_run,
    )
    if echo is not None:
        echo(f"{summary.message} dry_run={dry_run}")
    return summary


__all__ = ["IsPlayedFixSummary", "PlayerIdFixSummary", "run_is_played_fix", "run_player_id_fix"]
