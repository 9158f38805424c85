"""
Consistency ratios: active days divided by the days in the window.

Category ratios count distinct calendar days, so two check-ins on the same
day count once. All ratios are clamped to [0, 1].
"""

import math
from typing import Callable, Iterable, Sequence

from spiritual_analytics.models.activity_records import ActivityCollections, MoodEntry
from spiritual_analytics.models.analytics_report import ConsistencyRatios
from spiritual_analytics.services.analytics_base import (
    ActivityAggregator,
    AggregatedActivity,
    AnalyticsStatsCalculator
)


class ConsistencyCalculator:
    """Overall and per-category consistency for one window."""

    # Expected church attendance cadence, in logged days per service
    DAYS_PER_CHURCH_SERVICE = 7

    @staticmethod
    def calculate(collections: ActivityCollections, aggregated: AggregatedActivity) -> ConsistencyRatios:
        total_days = aggregated.total_days
        mood_entries = collections.mood_entries

        return ConsistencyRatios(
            overall=AnalyticsStatsCalculator.safe_ratio(
                aggregated.activity_days_count, total_days, cap=1.0
            ),
            prayer=ConsistencyCalculator._flag_ratio(
                mood_entries, lambda e: e.prayer_time, total_days
            ),
            bible_reading=ConsistencyCalculator._flag_ratio(
                mood_entries, lambda e: e.bible_reading, total_days
            ),
            church=ConsistencyCalculator.church_ratio(mood_entries),
            scripture_memory=ConsistencyCalculator._days_ratio(
                collections.scripture_memory, total_days
            ),
            journaling=ConsistencyCalculator._days_ratio(
                collections.journal_entries, total_days
            )
        )

    @staticmethod
    def church_ratio(mood_entries: Sequence[MoodEntry]) -> float:
        """
        Church attendance against one expected service per week of logging.

        The number of weeks is approximated from the mood-entry count, which
        assumes roughly daily check-ins.
        """
        if not mood_entries:
            return 0.0
        church_days = len(ActivityAggregator.unique_days(
            e for e in mood_entries if e.church_attendance
        ))
        expected_services = math.ceil(
            len(mood_entries) / ConsistencyCalculator.DAYS_PER_CHURCH_SERVICE
        )
        return AnalyticsStatsCalculator.safe_ratio(church_days, expected_services, cap=1.0)

    @staticmethod
    def _flag_ratio(
        mood_entries: Sequence[MoodEntry],
        flag: Callable[[MoodEntry], bool],
        total_days: int
    ) -> float:
        if not mood_entries:
            return 0.0
        flagged_days = ActivityAggregator.unique_days(e for e in mood_entries if flag(e))
        return AnalyticsStatsCalculator.safe_ratio(len(flagged_days), total_days, cap=1.0)

    @staticmethod
    def _days_ratio(records: Iterable, total_days: int) -> float:
        days = ActivityAggregator.unique_days(records)
        return AnalyticsStatsCalculator.safe_ratio(len(days), total_days, cap=1.0)
