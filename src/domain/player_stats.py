"""Goal and assist statistics for one player across saved games."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field

from domain.common import GameCollection, GameRecord, Season, Tournament, is_eligible, parse_game_date

UNKNOWN_SEASON_NAME = "Unknown Season"
UNKNOWN_TOURNAMENT_NAME = "Unknown Tournament"


@dataclass(frozen=True)
class GameStats:
    game_id: str
    date: str
    opponent_name: str
    goals: int
    assists: int
    points: int
    result: str


@dataclass
class CompetitionPerformance:
    """Running totals for one season or tournament."""

    name: str
    games_played: int = 0
    goals: int = 0
    assists: int = 0
    points: int = 0

    def add_game(self, goals: int, assists: int) -> None:
        self.games_played += 1
        self.goals += goals
        self.assists += assists
        self.points += goals + assists


@dataclass(frozen=True)
class PlayerStats:
    total_games: int
    total_goals: int
    total_assists: int
    avg_goals_per_game: float
    avg_assists_per_game: float
    game_by_game_stats: list[GameStats] = field(default_factory=list)
    performance_by_season: dict[str, CompetitionPerformance] = field(default_factory=dict)
    performance_by_tournament: dict[str, CompetitionPerformance] = field(default_factory=dict)


def game_result(game: GameRecord) -> str:
    """W/L/D from the perspective of the coached team."""
    if game.home_score > game.away_score:
        return "W" if game.home_or_away == "home" else "L"
    if game.away_score > game.home_score:
        return "L" if game.home_or_away == "home" else "W"
    return "D"


def _count_goals(game: GameRecord, player_id: str) -> tuple[int, int]:
    goals = 0
    assists = 0
    for event in game.game_events:
        if event.type != "goal":
            continue
        if event.scorer_id == player_id:
            goals += 1
        if event.assister_id == player_id:
            assists += 1
    return goals, assists


def _competition_name(competitions: Sequence[Season] | Sequence[Tournament], competition_id: str, fallback: str) -> str:
    for competition in competitions:
        if competition.id == competition_id:
            return competition.name or fallback
    return fallback


def calculate_player_stats(
    player_id: str,
    games: GameCollection,
    seasons: Sequence[Season] = (),
    tournaments: Sequence[Tournament] = (),
) -> PlayerStats:
    """Aggregate goals and assists for games where the player was in the selected squad."""
    game_by_game: list[GameStats] = []
    by_season: dict[str, CompetitionPerformance] = {}
    by_tournament: dict[str, CompetitionPerformance] = {}

    for game_id, game in games.items():
        if not is_eligible(game):
            continue
        if player_id not in game.selected_player_ids:
            continue

        goals, assists = _count_goals(game, player_id)

        if game.season_id:
            if game.season_id not in by_season:
                by_season[game.season_id] = CompetitionPerformance(
                    name=_competition_name(seasons, game.season_id, UNKNOWN_SEASON_NAME)
                )
            by_season[game.season_id].add_game(goals, assists)

        if game.tournament_id:
            if game.tournament_id not in by_tournament:
                by_tournament[game.tournament_id] = CompetitionPerformance(
                    name=_competition_name(tournaments, game.tournament_id, UNKNOWN_TOURNAMENT_NAME)
                )
            by_tournament[game.tournament_id].add_game(goals, assists)

        game_by_game.append(
            GameStats(
                game_id=game_id,
                date=game.game_date,
                opponent_name=game.opponent_name,
                goals=goals,
                assists=assists,
                points=goals + assists,
                result=game_result(game),
            )
        )

    total_games = len(game_by_game)
    total_goals = sum(stats.goals for stats in game_by_game)
    total_assists = sum(stats.assists for stats in game_by_game)

    def _most_recent_first(stats: GameStats) -> tuple[bool, float]:
        timestamp = parse_game_date(stats.date)
        return (timestamp is None, -(timestamp or 0.0))

    game_by_game.sort(key=_most_recent_first)

    return PlayerStats(
        total_games=total_games,
        total_goals=total_goals,
        total_assists=total_assists,
        avg_goals_per_game=total_goals / total_games if total_games > 0 else 0.0,
        avg_assists_per_game=total_assists / total_games if total_games > 0 else 0.0,
        game_by_game_stats=game_by_game,
        performance_by_season=by_season,
        performance_by_tournament=by_tournament,
    )


__all__ = [
    "CompetitionPerformance",
    "GameStats",
    "PlayerStats",
    "UNKNOWN_SEASON_NAME",
    "UNKNOWN_TOURNAMENT_NAME",
    "calculate_player_stats",
    "game_result",
]
