"""Player and team assessment aggregates, trends and notes."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from math import nan
from typing import Any

from domain.common import (
    ASSESSMENT_METRICS,
    Assessment,
    GameCollection,
    GameRecord,
    is_eligible,
    parse_game_date,
)


@dataclass(frozen=True)
class MetricAverages:
    """Aggregated assessment values over the eligible games of a snapshot."""

    count: int
    averages: dict[str, float]
    overall: float
    final_score: float

    def as_dict(self) -> dict[str, Any]:
        return {
            "count": self.count,
            "averages": dict(self.averages),
            "overall": self.overall,
            "finalScore": self.final_score,
        }


@dataclass(frozen=True)
class MetricTrendPoint:
    date: str
    value: float


@dataclass(frozen=True)
class AssessmentNote:
    date: str
    notes: str


@dataclass(frozen=True)
class _GameSample:
    """Per-game values entering the cross-game reduction."""

    factor: float
    metrics: dict[str, float]
    overall: float
    final_score: float


def _slider(assessment: Assessment, metric: str) -> float:
    # Missing keys degrade to NaN instead of raising.
    return assessment.sliders.get(metric, nan)


def calculate_final_score(assessment: Assessment) -> float:
    """Unweighted mean of the ten slider values of one assessment."""
    total = 0.0
    for metric in ASSESSMENT_METRICS:
        total += _slider(assessment, metric)
    return total / len(ASSESSMENT_METRICS)


def _game_factor(game: GameRecord, use_demand_correction: bool) -> float:
    if not use_demand_correction:
        return 1.0
    if game.demand_factor is None:
        return 1.0
    return float(game.demand_factor)


def _reduce_samples(
    samples: Iterable[_GameSample],
    *,
    use_demand_correction: bool,
) -> MetricAverages | None:
    count = 0
    denominator = 0.0
    totals = {metric: 0.0 for metric in ASSESSMENT_METRICS}
    overall_total = 0.0
    final_score_total = 0.0

    for sample in samples:
        count += 1
        denominator += sample.factor
        for metric in ASSESSMENT_METRICS:
            totals[metric] += sample.metrics[metric] * sample.factor
        overall_total += sample.overall * sample.factor
        final_score_total += sample.final_score * sample.factor

    if count == 0:
        return None

    divisor = denominator if use_demand_correction else float(count)
    if divisor == 0.0:
        return MetricAverages(
            count=count,
            averages={metric: nan for metric in ASSESSMENT_METRICS},
            overall=nan,
            final_score=nan,
        )

    return MetricAverages(
        count=count,
        averages={metric: totals[metric] / divisor for metric in ASSESSMENT_METRICS},
        overall=overall_total / divisor,
        final_score=final_score_total / divisor,
    )


def _player_assessments(player_id: str, games: GameCollection) -> list[tuple[GameRecord, Assessment]]:
    pairs: list[tuple[GameRecord, Assessment]] = []
    for game in games.values():
        if not is_eligible(game):
            continue
        assessment = game.assessments.get(player_id)
        if assessment is None:
            continue
        pairs.append((game, assessment))
    return pairs


def calculate_player_assessment_averages(
    player_id: str,
    games: GameCollection,
    use_demand_correction: bool = False,
) -> MetricAverages | None:
    """Average one player's assessments, optionally weighted by game demand factor.

    Without correction the divisor is the plain game count even when demand
    factors are present. Returns None when the player has no eligible game.
    """
    samples = (
        _GameSample(
            factor=_game_factor(game, use_demand_correction),
            metrics={metric: _slider(assessment, metric) for metric in ASSESSMENT_METRICS},
            overall=assessment.overall,
            final_score=calculate_final_score(assessment),
        )
        for game, assessment in _player_assessments(player_id, games)
    )
    return _reduce_samples(samples, use_demand_correction=use_demand_correction)


def _team_game_sample(game: GameRecord, players: list[Assessment], use_demand_correction: bool) -> _GameSample:
    player_count = len(players)
    metrics: dict[str, float] = {}
    for metric in ASSESSMENT_METRICS:
        metrics[metric] = sum(_slider(assessment, metric) for assessment in players) / player_count
    return _GameSample(
        factor=_game_factor(game, use_demand_correction),
        metrics=metrics,
        overall=sum(assessment.overall for assessment in players) / player_count,
        final_score=sum(calculate_final_score(assessment) for assessment in players) / player_count,
    )


def calculate_team_assessment_averages(
    games: GameCollection,
    use_demand_correction: bool = False,
) -> MetricAverages | None:
    """Mean-of-means team aggregate.

    Each eligible game is first reduced to the mean over its assessed players,
    then the per-game means are averaged across games. ``count`` is the number
    of eligible games, not the number of player assessments.
    """
    samples: list[_GameSample] = []
    for game in games.values():
        if not is_eligible(game):
            continue
        players = list(game.assessments.values())
        if not players:
            continue
        samples.append(_team_game_sample(game, players, use_demand_correction))
    return _reduce_samples(samples, use_demand_correction=use_demand_correction)


def _ascending_date_key(date: str) -> tuple[bool, float]:
    timestamp = parse_game_date(date)
    return (timestamp is None, timestamp or 0.0)


def _descending_date_key(date: str) -> tuple[bool, float]:
    timestamp = parse_game_date(date)
    return (timestamp is None, -(timestamp or 0.0))


def get_player_assessment_trends(
    player_id: str,
    games: GameCollection,
) -> dict[str, list[MetricTrendPoint]]:
    """Per-metric chronological series for one player, oldest first.

    Every metric key is present, mapped to an empty list when the player has
    no eligible game.
    """
    trends: dict[str, list[MetricTrendPoint]] = {metric: [] for metric in ASSESSMENT_METRICS}
    for game, assessment in _player_assessments(player_id, games):
        for metric in ASSESSMENT_METRICS:
            trends[metric].append(MetricTrendPoint(date=game.game_date, value=_slider(assessment, metric)))

    for metric in ASSESSMENT_METRICS:
        trends[metric].sort(key=lambda point: _ascending_date_key(point.date))
    return trends


def get_player_assessment_notes(player_id: str, games: GameCollection) -> list[AssessmentNote]:
    """Non-empty assessment notes for one player, most recent first."""
    notes = [
        AssessmentNote(date=game.game_date, notes=assessment.notes)
        for game, assessment in _player_assessments(player_id, games)
        if assessment.notes
    ]
    notes.sort(key=lambda note: _descending_date_key(note.date))
    return notes


__all__ = [
    "AssessmentNote",
    "MetricAverages",
    "MetricTrendPoint",
    "calculate_final_score",
    "calculate_player_assessment_averages",
    "calculate_team_assessment_averages",
    "get_player_assessment_notes",
    "get_player_assessment_trends",
]
