"""Tests for stored game payload conversion and legacy repairs."""

from __future__ import annotations

from math import isnan

import pytest

from domain.assessment_stats import calculate_player_assessment_averages
from domain.common import ASSESSMENT_METRICS, Player
from domain.migration import (
    assessment_from_payload,
    fix_game_event_player_ids,
    fix_missing_is_played,
    game_record_from_payload,
    games_from_payload,
    seasons_from_payload,
)


def _stored_game(**overrides) -> dict:
    payload = {
        "teamName": "Team",
        "opponentName": "Opp",
        "gameDate": "2024-01-01",
        "homeScore": 1,
        "awayScore": 0,
        "homeOrAway": "home",
        "selectedPlayerIds": ["p1"],
        "gameEvents": [{"id": "e1", "type": "goal", "time": 30, "scorerId": "p1"}],
        "assessments": {
            "p1": {
                "overall": 7,
                "sliders": {metric: 6 for metric in ASSESSMENT_METRICS},
                "notes": "solid",
                "minutesPlayed": 60,
                "createdAt": 1700000000000,
                "createdBy": "coach",
            }
        },
        "seasonId": "season-1",
        "tournamentId": "",
    }
    payload.update(overrides)
    return payload


def test_game_record_from_payload_reads_camel_case_fields() -> None:
    record = game_record_from_payload(_stored_game(demandFactor=1.25, isPlayed=True))
    assert record.game_date == "2024-01-01"
    assert record.is_played is True
    assert record.demand_factor == pytest.approx(1.25)
    assert record.opponent_name == "Opp"
    assert record.selected_player_ids == ("p1",)
    assert record.game_events[0].scorer_id == "p1"
    assert record.season_id == "season-1"
    assert record.tournament_id is None

    assessment = record.assessments["p1"]
    assert assessment.overall == pytest.approx(7.0)
    assert assessment.sliders["fair_play"] == pytest.approx(6.0)
    assert assessment.notes == "solid"
    assert assessment.minutes_played == 60
    assert assessment.created_by == "coach"


def test_missing_is_played_stays_undecided() -> None:
    record = game_record_from_payload(_stored_game())
    assert record.is_played is None


def test_legacy_game_without_assessments() -> None:
    record = game_record_from_payload({"gameDate": "2023-05-05"})
    assert record.assessments == {}
    assert record.game_events == ()
    assert record.demand_factor is None


def test_non_mapping_game_payload_raises() -> None:
    with pytest.raises(ValueError, match="game payload must be a mapping"):
        game_record_from_payload(["not", "a", "game"])


def test_missing_slider_degrades_to_nan() -> None:
    sliders = {metric: 5 for metric in ASSESSMENT_METRICS if metric != "impact"}
    assessment = assessment_from_payload({"overall": 5, "sliders": sliders})
    games = games_from_payload(
        {"g1": {"gameDate": "2024-01-01", "assessments": {"p1": {"overall": 5, "sliders": sliders}}}}
    )
    result = calculate_player_assessment_averages("p1", games)
    assert "impact" not in assessment.sliders
    assert result is not None
    assert isnan(result.averages["impact"])
    assert isnan(result.final_score)
    assert result.averages["intensity"] == pytest.approx(5.0)


def test_games_from_payload_skips_invalid_entries() -> None:
    games = games_from_payload({"g1": _stored_game(), "broken": None, "junk": "text"})
    assert list(games) == ["g1"]


def test_games_from_payload_handles_missing_document() -> None:
    assert games_from_payload(None) == {}


def test_seasons_from_payload() -> None:
    seasons = seasons_from_payload([{"id": "s1", "name": "Spring"}, "bad"])
    assert [(season.id, season.name) for season in seasons] == [("s1", "Spring")]


def test_fix_missing_is_played_marks_missing_and_null() -> None:
    game_missing = _stored_game()
    payloads = {
        "game1": {**_stored_game(), "isPlayed": None},
        "game2": _stored_game(isPlayed=True),
        "game3": _stored_game(isPlayed=False),
        "game4": game_missing,
    }

    result = fix_missing_is_played(payloads)

    assert result.total_games == 4
    assert result.games_fixed == 2
    assert sorted(result.fixed_payloads) == ["game1", "game4"]
    assert all(payload["isPlayed"] is True for payload in result.fixed_payloads.values())
    assert "isPlayed" not in game_missing


def test_fix_missing_is_played_with_nothing_to_fix() -> None:
    result = fix_missing_is_played({"game1": _stored_game(isPlayed=True), "game2": _stored_game(isPlayed=False)})
    assert result.games_fixed == 0
    assert result.total_games == 2


def test_fix_missing_is_played_ignores_invalid_entries() -> None:
    result = fix_missing_is_played({"valid": _stored_game(), "invalid": 42})
    assert result.total_games == 1
    assert result.games_fixed == 1


def test_null_assessment_entry_is_skipped() -> None:
    games = games_from_payload(
        {
            "g1": _stored_game(assessments={"p1": None}),
            "g2": _stored_game(gameDate="2024-01-08"),
        }
    )
    assert games["g1"].assessments == {}

    result = calculate_player_assessment_averages("p1", games)
    assert result is not None
    assert result.count == 1


@pytest.mark.parametrize("legacy_flag", [0, ""])
def test_falsy_non_boolean_is_played_counts_as_played(legacy_flag) -> None:
    record = game_record_from_payload(_stored_game(isPlayed=legacy_flag))
    assert record.is_played is None

    result = calculate_player_assessment_averages("p1", {"g1": record})
    assert result is not None
    assert result.count == 1


def test_explicit_false_is_played_excludes_game() -> None:
    record = game_record_from_payload(_stored_game(isPlayed=False))
    assert record.is_played is False
    assert calculate_player_assessment_averages("p1", {"g1": record}) is None


def _imported_game() -> dict:
    return _stored_game(
        availablePlayers=[
            {"id": "old-player-1", "name": "Player One"},
            {"id": "old-player-2", "name": "Player Two"},
            {"id": "old-player-3", "name": "Player Three"},
        ],
        playersOnField=[{"id": "old-player-1", "name": "Player One"}],
        selectedPlayerIds=["old-player-1", "old-player-2"],
        gameEvents=[
            {"id": "e1", "type": "goal", "time": 300, "scorerId": "old-player-1", "assisterId": "old-player-2"},
            {"id": "e2", "type": "goal", "time": 900, "scorerId": "old-player-3"},
            {"id": "e3", "type": "substitution", "time": 1200},
        ],
    )


ROSTER = [
    Player(id="new-player-1", name="Player One"),
    Player(id="new-player-2", name="Player Two"),
    Player(id="new-player-3", name="Player Three"),
]


def test_fix_game_event_player_ids_remaps_by_name() -> None:
    game1 = _imported_game()
    game2 = _stored_game(
        availablePlayers=[{"id": "new-player-1", "name": "Player One"}],
        selectedPlayerIds=["new-player-1"],
        gameEvents=[{"id": "e1", "type": "goal", "time": 60, "scorerId": "new-player-1"}],
    )

    result = fix_game_event_player_ids({"game1": game1, "game2": game2}, ROSTER)

    assert result.total_games == 2
    assert result.games_fixed == 1
    assert result.events_fixed == 2
    assert list(result.fixed_payloads) == ["game1"]

    fixed = result.fixed_payloads["game1"]
    events = fixed["gameEvents"]
    assert events[0]["scorerId"] == "new-player-1"
    assert events[0]["assisterId"] == "new-player-2"
    assert events[1]["scorerId"] == "new-player-3"
    assert "scorerId" not in events[2]
    assert fixed["selectedPlayerIds"] == ["new-player-1", "new-player-2"]
    assert [player["id"] for player in fixed["availablePlayers"]] == [
        "new-player-1",
        "new-player-2",
        "new-player-3",
    ]
    assert fixed["playersOnField"] == [{"id": "new-player-1", "name": "Player One"}]

    assert game1["gameEvents"][0]["scorerId"] == "old-player-1"
    assert game1["selectedPlayerIds"] == ["old-player-1", "old-player-2"]


def test_fix_game_event_player_ids_leaves_unknown_names_alone() -> None:
    game = _imported_game()
    game["availablePlayers"][2] = {"id": "old-player-3", "name": "Guest"}

    result = fix_game_event_player_ids({"game1": game}, ROSTER)

    events = result.fixed_payloads["game1"]["gameEvents"]
    assert events[1]["scorerId"] == "old-player-3"
    assert result.events_fixed == 1


def test_fix_game_event_player_ids_with_empty_roster() -> None:
    result = fix_game_event_player_ids({"game1": _imported_game()}, [])
    assert result.games_fixed == 0
    assert result.events_fixed == 0
    assert result.total_games == 0
