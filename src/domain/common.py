"""Shared types for game records and player assessments."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import UTC, datetime

ASSESSMENT_METRICS: tuple[str, ...] = (
    "intensity",
    "courage",
    "duels",
    "technique",
    "creativity",
    "decisions",
    "awareness",
    "teamwork",
    "fair_play",
    "impact",
)


@dataclass(frozen=True)
class Assessment:
    """A coach's evaluation of one player in one game."""

    sliders: Mapping[str, float]
    overall: float
    notes: str = ""
    minutes_played: int | None = None
    created_at: int | None = None
    created_by: str | None = None


@dataclass(frozen=True)
class GameEvent:
    """One logged in-game event. Only goals feed player statistics."""

    id: str
    type: str
    time: float = 0.0
    scorer_id: str | None = None
    assister_id: str | None = None


@dataclass(frozen=True)
class GameRecord:
    """Canonical saved-game payload consumed by the statistics functions."""

    game_date: str
    is_played: bool | None = None
    demand_factor: float | None = None
    assessments: Mapping[str, Assessment] = field(default_factory=dict)
    opponent_name: str = ""
    home_score: int = 0
    away_score: int = 0
    home_or_away: str = "home"
    selected_player_ids: tuple[str, ...] = ()
    game_events: tuple[GameEvent, ...] = ()
    season_id: str | None = None
    tournament_id: str | None = None


@dataclass(frozen=True)
class Season:
    id: str
    name: str


@dataclass(frozen=True)
class Tournament:
    id: str
    name: str


@dataclass(frozen=True)
class Player:
    """Master-roster entry; ids may change between imports, names do not."""

    id: str
    name: str


GameCollection = Mapping[str, GameRecord]


def is_eligible(game: GameRecord) -> bool:
    """Games count unless explicitly marked unplayed; a missing flag means played."""
    return game.is_played is not False


def parse_game_date(value: str | None) -> float | None:
    """Parse an ISO-8601 date or datetime into a UTC epoch timestamp.

    Naive values are read as UTC so the result never depends on the host
    timezone. Returns None for missing or unparseable input.
    """
    if not value:
        return None
    try:
        parsed = datetime.fromisoformat(value)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed.timestamp()


__all__ = [
    "ASSESSMENT_METRICS",
    "Assessment",
    "GameCollection",
    "GameEvent",
    "GameRecord",
    "Player",
    "Season",
    "Tournament",
    "is_eligible",
    "parse_game_date",
]
