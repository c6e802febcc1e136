"""Conversion and repair of stored game payloads.

Saved games are stored as the web app's camelCase JSON documents. Older
exports may lack fields that newer code relies on; the helpers here turn those
documents into ``GameRecord`` values and backfill what legacy documents miss.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from math import nan
from typing import Any

from domain.common import Assessment, GameCollection, GameEvent, GameRecord, Player, Season, Tournament


def _optional_int(value: object) -> int | None:
    if value is None:
        return None
    return int(value)


def _optional_float(value: object) -> float | None:
    if value is None:
        return None
    return float(value)


def _float_or_nan(value: object) -> float:
    parsed = _optional_float(value)
    return nan if parsed is None else parsed


def _optional_str(value: object) -> str | None:
    if value is None or value == "":
        return None
    return str(value)


def _played_flag(value: object) -> bool | None:
    # Only a real boolean decides; legacy 0 or "" stay undecided and count as played.
    if isinstance(value, bool):
        return value
    return None


def _require_mapping(payload: object, label: str) -> Mapping[str, Any]:
    if not isinstance(payload, Mapping):
        raise ValueError(f"{label} payload must be a mapping, got {type(payload).__name__}")
    return payload


def assessment_from_payload(payload: object) -> Assessment:
    raw = _require_mapping(payload, "assessment")
    sliders_raw = raw.get("sliders") or {}
    if not isinstance(sliders_raw, Mapping):
        raise ValueError("assessment sliders must be a mapping")

    sliders = {
        str(metric): float(value)
        for metric, value in sliders_raw.items()
        if value is not None
    }
    return Assessment(
        sliders=sliders,
        overall=_float_or_nan(raw.get("overall")),
        notes=str(raw.get("notes") or ""),
        minutes_played=_optional_int(raw.get("minutesPlayed")),
        created_at=_optional_int(raw.get("createdAt")),
        created_by=_optional_str(raw.get("createdBy")),
    )


def game_event_from_payload(payload: object) -> GameEvent:
    raw = _require_mapping(payload, "game event")
    return GameEvent(
        id=str(raw.get("id", "")),
        type=str(raw.get("type", "")),
        time=float(raw.get("time") or 0.0),
        scorer_id=_optional_str(raw.get("scorerId")),
        assister_id=_optional_str(raw.get("assisterId")),
    )


def game_record_from_payload(payload: object) -> GameRecord:
    """Build a ``GameRecord`` from one stored game document."""
    raw = _require_mapping(payload, "game")

    assessments_raw = raw.get("assessments") or {}
    if not isinstance(assessments_raw, Mapping):
        raise ValueError("game assessments must be a mapping of player id to assessment")

    return GameRecord(
        game_date=str(raw.get("gameDate") or ""),
        is_played=_played_flag(raw.get("isPlayed")),
        demand_factor=_optional_float(raw.get("demandFactor")),
        assessments={
            str(player_id): assessment_from_payload(assessment)
            for player_id, assessment in assessments_raw.items()
            if isinstance(assessment, Mapping)
        },
        opponent_name=str(raw.get("opponentName") or ""),
        home_score=int(raw.get("homeScore") or 0),
        away_score=int(raw.get("awayScore") or 0),
        home_or_away=str(raw.get("homeOrAway") or "home"),
        selected_player_ids=tuple(str(player_id) for player_id in raw.get("selectedPlayerIds") or ()),
        game_events=tuple(game_event_from_payload(event) for event in raw.get("gameEvents") or ()),
        season_id=_optional_str(raw.get("seasonId")),
        tournament_id=_optional_str(raw.get("tournamentId")),
    )


def games_from_payload(payload: object) -> GameCollection:
    """Convert a stored ``{game_id: game}`` document, skipping malformed entries."""
    if payload is None:
        return {}
    raw = _require_mapping(payload, "saved games")
    return {
        str(game_id): game_record_from_payload(game)
        for game_id, game in raw.items()
        if isinstance(game, Mapping)
    }


def _named_items(payload: object, label: str) -> list[tuple[str, str]]:
    if payload is None:
        return []
    if not isinstance(payload, (list, tuple)):
        raise ValueError(f"{label} payload must be a list, got {type(payload).__name__}")
    return [
        (str(item.get("id", "")), str(item.get("name") or ""))
        for item in payload
        if isinstance(item, Mapping)
    ]


def seasons_from_payload(payload: object) -> list[Season]:
    return [Season(id=item_id, name=name) for item_id, name in _named_items(payload, "seasons")]


def tournaments_from_payload(payload: object) -> list[Tournament]:
    return [Tournament(id=item_id, name=name) for item_id, name in _named_items(payload, "tournaments")]


def roster_from_payload(payload: object) -> list[Player]:
    return [Player(id=item_id, name=name) for item_id, name in _named_items(payload, "roster")]


@dataclass(frozen=True)
class IsPlayedFixResult:
    """Outcome of backfilling ``isPlayed`` on legacy game documents."""

    fixed_payloads: dict[str, dict[str, Any]] = field(default_factory=dict)
    total_games: int = 0

    @property
    def games_fixed(self) -> int:
        return len(self.fixed_payloads)


def fix_missing_is_played(payloads: Mapping[str, Any]) -> IsPlayedFixResult:
    """Mark games without an ``isPlayed`` value (missing or null) as played.

    Returns copies of the documents that changed; the input is left untouched.
    Entries that are not mappings are ignored and do not count toward the total.
    """
    fixed: dict[str, dict[str, Any]] = {}
    total = 0
    for game_id, payload in payloads.items():
        if not isinstance(payload, Mapping):
            continue
        total += 1
        if payload.get("isPlayed") is None:
            fixed[str(game_id)] = {**payload, "isPlayed": True}
    return IsPlayedFixResult(fixed_payloads=fixed, total_games=total)


@dataclass(frozen=True)
class PlayerIdFixResult:
    """Outcome of remapping imported player ids onto the current roster."""

    fixed_payloads: dict[str, dict[str, Any]] = field(default_factory=dict)
    events_fixed: int = 0
    total_games: int = 0

    @property
    def games_fixed(self) -> int:
        return len(self.fixed_payloads)


def _current_id(
    available_players: list[Mapping[str, Any]],
    old_id: object,
    name_to_id: Mapping[str, str],
) -> str | None:
    """Roster id for ``old_id``, resolved through the game's own player list by name."""
    if not old_id or not isinstance(old_id, str):
        return None
    player = next((item for item in available_players if item.get("id") == old_id), None)
    if player is None:
        return None
    name = player.get("name")
    if not name or not isinstance(name, str):
        return None
    current_id = name_to_id.get(name)
    if current_id and current_id != old_id:
        return current_id
    return None


def _remap_player_list(players: list[Any], name_to_id: Mapping[str, str]) -> tuple[list[Any], bool]:
    remapped: list[Any] = []
    modified = False
    for player in players:
        name = player.get("name") if isinstance(player, Mapping) else None
        current_id = name_to_id.get(name) if isinstance(name, str) and name else None
        if current_id and current_id != player.get("id"):
            remapped.append({**player, "id": current_id})
            modified = True
        else:
            remapped.append(player)
    return remapped, modified


def _remap_game(game: Mapping[str, Any], name_to_id: Mapping[str, str]) -> tuple[dict[str, Any] | None, int]:
    updated = dict(game)
    modified = False
    events_fixed = 0
    available_players = [
        player for player in game.get("availablePlayers") or () if isinstance(player, Mapping)
    ]

    events = game.get("gameEvents")
    if isinstance(events, list):
        updated_events: list[Any] = []
        for event in events:
            if not isinstance(event, Mapping):
                updated_events.append(event)
                continue
            updated_event = dict(event)
            event_modified = False
            for key in ("scorerId", "assisterId"):
                current_id = _current_id(available_players, event.get(key), name_to_id)
                if current_id is not None:
                    updated_event[key] = current_id
                    event_modified = True
            if event_modified:
                events_fixed += 1
                modified = True
            updated_events.append(updated_event)
        if modified:
            updated["gameEvents"] = updated_events

    selected_ids = game.get("selectedPlayerIds")
    if isinstance(selected_ids, list):
        updated_selected = []
        for old_id in selected_ids:
            current_id = _current_id(available_players, old_id, name_to_id)
            if current_id is not None:
                modified = True
            updated_selected.append(current_id or old_id)
        if modified:
            updated["selectedPlayerIds"] = updated_selected

    for key in ("availablePlayers", "playersOnField"):
        players = game.get(key)
        if isinstance(players, list):
            remapped, list_modified = _remap_player_list(players, name_to_id)
            updated[key] = remapped
            modified = modified or list_modified

    return (updated if modified else None), events_fixed


def fix_game_event_player_ids(payloads: Mapping[str, Any], roster: list[Player]) -> PlayerIdFixResult:
    """Rewrite stale player ids in stored games to the ids of the current roster.

    Imports can give players new ids while old games still reference the old
    ones. Each game's ``availablePlayers`` maps an old id to a player name, and
    the name maps to the roster id. Goal scorers and assisters, selected ids and
    both player lists are rewritten. Returns copies of the changed documents;
    the input is left untouched.
    """
    name_to_id = {player.name: player.id for player in roster}
    if not name_to_id:
        return PlayerIdFixResult()

    fixed: dict[str, dict[str, Any]] = {}
    events_fixed = 0
    total = 0

    for game_id, payload in payloads.items():
        if not isinstance(payload, Mapping):
            continue
        total += 1
        updated, game_events_fixed = _remap_game(payload, name_to_id)
        events_fixed += game_events_fixed
        if updated is not None:
            fixed[str(game_id)] = updated

    return PlayerIdFixResult(fixed_payloads=fixed, events_fixed=events_fixed, total_games=total)


__all__ = [
    "IsPlayedFixResult",
    "PlayerIdFixResult",
    "assessment_from_payload",
    "fix_game_event_player_ids",
    "fix_missing_is_played",
    "game_event_from_payload",
    "game_record_from_payload",
    "games_from_payload",
    "roster_from_payload",
    "seasons_from_payload",
    "tournaments_from_payload",
]
