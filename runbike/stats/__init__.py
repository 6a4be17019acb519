"""Pure statistics engine: filters, aggregation and derived metrics."""

from .age_brackets import AgeBracketBest, age_on, find_age_bracket_bests
from .aggregation import (
    DailySummary,
    PersonDailyTrend,
    PlayerDailyStats,
    attempts_for_day,
    build_daily_summaries,
    build_person_trend,
    personal_best,
)
from .stability import simple_stability, summarize_values, weighted_stability

__all__ = [
    "AgeBracketBest",
    "DailySummary",
    "PersonDailyTrend",
    "PlayerDailyStats",
    "age_on",
    "attempts_for_day",
    "build_daily_summaries",
    "build_person_trend",
    "find_age_bracket_bests",
    "personal_best",
    "simple_stability",
    "summarize_values",
    "weighted_stability",
]
