"""Assessment and match statistics domain modules."""

from domain.assessment_stats import (
    AssessmentNote,
    MetricAverages,
    MetricTrendPoint,
    calculate_final_score,
    calculate_player_assessment_averages,
    calculate_team_assessment_averages,
    get_player_assessment_notes,
    get_player_assessment_trends,
)
from domain.common import ASSESSMENT_METRICS, Assessment, GameEvent, GameRecord, Season, Tournament

__all__ = [
    "ASSESSMENT_METRICS",
    "Assessment",
    "AssessmentNote",
    "GameEvent",
    "GameRecord",
    "MetricAverages",
    "MetricTrendPoint",
    "Season",
    "Tournament",
    "calculate_final_score",
    "calculate_player_assessment_averages",
    "calculate_team_assessment_averages",
    "get_player_assessment_notes",
    "get_player_assessment_trends",
]
