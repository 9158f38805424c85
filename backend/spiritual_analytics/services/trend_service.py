"""
Half-split trend classification.

A series is sorted by date and split at floor(n / 2); the extra element of
an odd-length series lands in the second half. The two halves are compared
either by their mean value or, for dated-but-unscored records, by activity
density (unique days / calendar days spanned).
"""

import logging
from datetime import date
from typing import Any, Callable, List, Optional, Sequence, Tuple

from spiritual_analytics.models.activity_records import ActivityCollections, MoodEntry
from spiritual_analytics.models.analytics_report import Trend, Trends
from spiritual_analytics.services.analytics_base import DateExtractor, AnalyticsStatsCalculator
from spiritual_analytics.services.analytics_data_sufficiency_system import (
    AnalysisType,
    DataSufficiencyChecker
)

logger = logging.getLogger(__name__)


class TrendAnalyzer:

    # Minimum change between half means to leave 'stable'
    VALUE_THRESHOLD = 0.5
    DENSITY_THRESHOLD = 0.5
    PRAYER_THRESHOLD = 0.15

    @staticmethod
    def classify(difference: float, threshold: float) -> Trend:
        if difference > threshold:
            return Trend.IMPROVING
        if difference < -threshold:
            return Trend.DECLINING
        return Trend.STABLE

    @staticmethod
    def split_halves(items: Sequence[Any]) -> Tuple[Sequence[Any], Sequence[Any]]:
        midpoint = len(items) // 2
        return items[:midpoint], items[midpoint:]

    @staticmethod
    def value_trend(
        records: Sequence[Any],
        value_fn: Callable[[Any], Optional[float]],
        threshold: float = VALUE_THRESHOLD
    ) -> Trend:
        """
        Compare the mean of value_fn over the first and second half.

        Missing values are left out of each half's mean; a half with no
        values at all makes the trend 'stable'.
        """
        ordered = [record for _, record in DateExtractor.sort_by_date(records)]
        if not DataSufficiencyChecker.has_enough(AnalysisType.TREND, len(ordered)):
            return Trend.STABLE

        first_half, second_half = TrendAnalyzer.split_halves(ordered)
        first_values = [v for v in map(value_fn, first_half) if v is not None]
        second_values = [v for v in map(value_fn, second_half) if v is not None]

        if not first_values or not second_values:
            return Trend.STABLE

        difference = (
            AnalyticsStatsCalculator.safe_mean(second_values)
            - AnalyticsStatsCalculator.safe_mean(first_values)
        )
        return TrendAnalyzer.classify(difference, threshold)

    @staticmethod
    def density_trend(records: Sequence[Any]) -> Trend:
        """
        Compare engagement frequency between the two halves of a dated series.
        """
        days = [record_date for record_date, _ in DateExtractor.sort_by_date(records)]
        if not DataSufficiencyChecker.has_enough(AnalysisType.TREND, len(days)):
            return Trend.STABLE

        first_half, second_half = TrendAnalyzer.split_halves(days)
        difference = TrendAnalyzer._density(second_half) - TrendAnalyzer._density(first_half)
        return TrendAnalyzer.classify(difference, TrendAnalyzer.DENSITY_THRESHOLD)

    @staticmethod
    def _density(days: Sequence[date]) -> float:
        if not days:
            return 0.0
        span = (days[-1] - days[0]).days + 1
        return AnalyticsStatsCalculator.safe_ratio(len(set(days)), span)

    @staticmethod
    def prayer_trend(mood_entries: Sequence[MoodEntry]) -> Trend:
        """Share of check-ins with prayer, second half against first."""
        return TrendAnalyzer.value_trend(
            mood_entries,
            lambda e: 1.0 if e.prayer_time else 0.0,
            threshold=TrendAnalyzer.PRAYER_THRESHOLD
        )

    @staticmethod
    def combine(mood_trend: Trend, spiritual_trend: Trend) -> Trend:
        """
        Overall trend from the mood and spiritual sub-trends.

        Agreement wins; a single stable side defers to the other; opposite
        directions cancel out to stable.
        """
        if mood_trend == spiritual_trend:
            return mood_trend
        if mood_trend == Trend.STABLE:
            return spiritual_trend
        if spiritual_trend == Trend.STABLE:
            return mood_trend
        return Trend.STABLE

    @staticmethod
    def analyze(collections: ActivityCollections) -> Trends:
        mood_entries = collections.mood_entries

        mood = TrendAnalyzer.value_trend(mood_entries, lambda e: e.mood_score)
        spiritual = TrendAnalyzer.value_trend(mood_entries, lambda e: e.spiritual_score)

        engagement_records: List[Any] = (
            list(mood_entries)
            + list(collections.journal_entries)
            + list(collections.habit_logs)
        )

        trends = Trends(
            overall=TrendAnalyzer.combine(mood, spiritual),
            mood=mood,
            spiritual=spiritual,
            consistency=TrendAnalyzer.density_trend(engagement_records),
            prayer=TrendAnalyzer.prayer_trend(mood_entries)
        )
        logger.debug("Trends: %s", trends.to_dict())
        return trends
