"""Database repository helpers."""

from repositories.storage_repository import (
    MASTER_ROSTER_KEY,
    SAVED_GAMES_KEY,
    SEASONS_LIST_KEY,
    TOURNAMENTS_LIST_KEY,
    ensure_storage_schema,
    fetch_master_roster,
    fetch_saved_game_payloads,
    fetch_saved_games,
    fetch_seasons,
    fetch_tournaments,
    get_value,
    save_game_payloads,
    set_value,
)

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
