"""Key/value persistence helpers for the app's stored documents."""

from __future__ import annotations

from collections.abc import Mapping
from datetime import UTC, datetime
from typing import Any

from sqlalchemy import select
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session

from domain.common import GameCollection, Player, Season, Tournament
from domain.migration import (
    games_from_payload,
    roster_from_payload,
    seasons_from_payload,
    tournaments_from_payload,
)
from models import StorageEntry

SAVED_GAMES_KEY = "savedSoccerGames"
SEASONS_LIST_KEY = "soccerSeasonsList"
TOURNAMENTS_LIST_KEY = "soccerTournamentsList"
MASTER_ROSTER_KEY = "soccerMasterRoster"


def ensure_storage_schema(engine: Engine) -> None:
    """Create the storage table if it does not exist."""
    with engine.begin() as connection:
        StorageEntry.__table__.create(bind=connection, checkfirst=True)


def get_value(session: Session, key: str) -> Any:
    """Return the stored document for one key, or None when absent."""
    entry = session.get(StorageEntry, key)
    if entry is None:
        return None
    return entry.value


def set_value(session: Session, key: str, value: Any) -> StorageEntry:
    """Create or replace the document stored under one key."""
    entry = session.execute(select(StorageEntry).where(StorageEntry.key == key)).scalar_one_or_none()
    if entry is None:
        entry = StorageEntry(key=key, value=value)
        session.add(entry)
    else:
        entry.value = value
        entry.updated_at = datetime.now(UTC).replace(tzinfo=None)
    session.flush()
    return entry


def fetch_saved_game_payloads(session: Session) -> dict[str, Any]:
    """Raw ``{game_id: document}`` mapping exactly as stored."""
    payload = get_value(session, SAVED_GAMES_KEY)
    if payload is None:
        return {}
    if not isinstance(payload, Mapping):
        raise ValueError(f"Stored value for {SAVED_GAMES_KEY!r} is not a mapping")
    return dict(payload)


def fetch_saved_games(session: Session) -> GameCollection:
    """Load the saved-games snapshot consumed by the statistics functions."""
    return games_from_payload(fetch_saved_game_payloads(session))


def save_game_payloads(session: Session, payloads: Mapping[str, Any]) -> None:
    """Merge game documents into the stored collection, replacing by id."""
    games = fetch_saved_game_payloads(session)
    games.update({str(game_id): payload for game_id, payload in payloads.items()})
    set_value(session, SAVED_GAMES_KEY, games)


def fetch_seasons(session: Session) -> list[Season]:
    return seasons_from_payload(get_value(session, SEASONS_LIST_KEY))


def fetch_tournaments(session: Session) -> list[Tournament]:
    return tournaments_from_payload(get_value(session, TOURNAMENTS_LIST_KEY))


def fetch_master_roster(session: Session) -> list[Player]:
    return roster_from_payload(get_value(session, MASTER_ROSTER_KEY))


__all__ = [
    "MASTER_ROSTER_KEY",
    "SAVED_GAMES_KEY",
    "SEASONS_LIST_KEY",
    "TOURNAMENTS_LIST_KEY",
    "ensure_storage_schema",
    "fetch_master_roster",
    "fetch_saved_game_payloads",
    "fetch_saved_games",
    "fetch_seasons",
    "fetch_tournaments",
    "get_value",
    "save_game_payloads",
    "set_value",
]
