"""
Pattern recognition over a user's spiritual activity.

Pattern Types:
1. Day-of-week activity (which weekdays carry the most activity)
2. Growth curve (average spiritual score per period of the window)
3. Positive trends and growth opportunities (rule tables over the report)
"""

from typing import Any, List, Optional, Sequence

from spiritual_analytics.models.activity_records import ActivityCollections, MoodEntry
from spiritual_analytics.models.analytics_report import (
    ActivityCounts,
    Averages,
    ConsistencyRatios,
    GrowthPoint,
    Patterns,
    Streaks,
    TimeRange,
    Trend,
    Trends
)
from spiritual_analytics.services.analytics_base import DateExtractor, AnalyticsStatsCalculator
from spiritual_analytics.services.analytics_data_sufficiency_system import (
    AnalysisType,
    DataSufficiencyChecker
)
from spiritual_analytics.utils.date_utils import MONTH_LABELS, WEEKDAY_LABELS, sunday_first_weekday


class PatternRecognitionService:
    """
    Detects temporal patterns and turns report metrics into short
    encouragement and growth statements.
    """

    # Growth-curve buckets per window
    GROWTH_LABELS = {
        TimeRange.WEEK: WEEKDAY_LABELS,
        TimeRange.MONTH: [f'Week {i}' for i in range(1, 5)],
        TimeRange.QUARTER: [f'Period {i}' for i in range(1, 7)],
        TimeRange.YEAR: MONTH_LABELS,
    }

    # Neutral midpoint of the 1-10 spiritual scale
    DEFAULT_GROWTH_VALUE = 5

    MAX_STATEMENTS = 3
    MIN_STATEMENTS = 2

    # ========================================================================
    # DAY OF WEEK
    # ========================================================================

    @staticmethod
    def detect_day_of_week_pattern(records: Sequence[Any]) -> List[float]:
        """
        Activity count per weekday (Sunday first), normalized to the busiest day.

        Returns seven zeros when there are no datable records.
        """
        day_counters = [0] * 7
        for record_date, _ in DateExtractor.sort_by_date(records):
            day_counters[sunday_first_weekday(record_date)] += 1

        max_count = max(day_counters)
        if not DataSufficiencyChecker.has_enough(AnalysisType.DAY_OF_WEEK, max_count):
            return [0.0] * 7
        return [count / max_count for count in day_counters]

    # ========================================================================
    # GROWTH CURVE
    # ========================================================================

    @staticmethod
    def detect_growth_pattern(mood_entries: Sequence[MoodEntry], time_range: TimeRange) -> List[GrowthPoint]:
        """
        Average spiritual score per period of the window.

        Scored entries are sorted by date and spread evenly over the buckets
        by position. An empty bucket takes the value of the nearest earlier
        non-empty bucket, else the nearest later one.
        """
        scored = [
            entry for _, entry in DateExtractor.sort_by_date(mood_entries)
            if entry.spiritual_score is not None
        ]

        if not DataSufficiencyChecker.has_enough(AnalysisType.GROWTH_CURVE, len(scored)):
            default = PatternRecognitionService.DEFAULT_GROWTH_VALUE
            return [GrowthPoint(label='Start', value=default), GrowthPoint(label='Now', value=default)]

        labels = PatternRecognitionService.GROWTH_LABELS[time_range]
        bucket_count = len(labels)
        bucket_size = len(scored) / bucket_count

        buckets: List[List[float]] = [[] for _ in range(bucket_count)]
        for index, entry in enumerate(scored):
            bucket_index = min(bucket_count - 1, int(index // bucket_size))
            buckets[bucket_index].append(entry.spiritual_score)

        averages = [
            AnalyticsStatsCalculator.safe_mean(values) if values else None
            for values in buckets
        ]

        return [
            GrowthPoint(label=label, value=PatternRecognitionService._fill_gap(averages, index))
            for index, label in enumerate(labels)
        ]

    @staticmethod
    def _fill_gap(averages: List[Optional[float]], index: int) -> float:
        if averages[index] is not None:
            return averages[index]
        for i in range(index - 1, -1, -1):
            if averages[i] is not None:
                return averages[i]
        for i in range(index + 1, len(averages)):
            if averages[i] is not None:
                return averages[i]
        return PatternRecognitionService.DEFAULT_GROWTH_VALUE

    # ========================================================================
    # POSITIVES AND OPPORTUNITIES
    # ========================================================================

    @staticmethod
    def generate_positives(
        trends: Trends,
        activity: ActivityCounts,
        averages: Averages,
        streaks: Streaks
    ) -> List[str]:
        """Up to three positive statements, most specific first."""
        positives = []

        if trends.spiritual == Trend.IMPROVING:
            positives.append('Your spiritual wellbeing is on an upward trajectory')
        if trends.mood == Trend.IMPROVING:
            positives.append('Your emotional wellbeing is improving')
        if trends.consistency == Trend.IMPROVING:
            positives.append('Your consistency in spiritual practices is growing')
        if trends.prayer == Trend.IMPROVING:
            positives.append('Your prayer life is becoming more consistent')
        if streaks.current > 3:
            positives.append(f'You have a {streaks.current}-day streak of spiritual activity')
        if averages.spiritual >= 7:
            positives.append('Your spiritual wellbeing score is strong')
        if activity.prayer_requests > 0 and activity.answered_prayers / activity.prayer_requests > 0.5:
            positives.append(f"You've seen {activity.answered_prayers} answered prayers recently")
        if activity.journal_entries > 5:
            positives.append("You're actively journaling your spiritual journey")

        if activity.bible_reading_days > activity.prayer_days and activity.bible_reading_days > 5:
            positives.append('Bible reading is a consistent strength for you')
        elif activity.prayer_days > activity.bible_reading_days and activity.prayer_days > 5:
            positives.append('Prayer is a strong foundation in your spiritual life')

        # Generic encouragement when few rules fired
        if len(positives) < PatternRecognitionService.MIN_STATEMENTS:
            if activity.total_entry_count > 0:
                positives.append("You're actively tracking your spiritual journey")
            if activity.scripture_memory_progress > 0:
                positives.append("You're growing in scripture knowledge")
            if activity.church_days > 0:
                positives.append("You're maintaining connection with your faith community")

        return positives[:PatternRecognitionService.MAX_STATEMENTS]

    @staticmethod
    def generate_opportunities(
        trends: Trends,
        activity: ActivityCounts,
        averages: Averages,
        consistency: ConsistencyRatios
    ) -> List[str]:
        """Up to three constructive growth statements."""
        opportunities = []

        if trends.spiritual == Trend.DECLINING:
            opportunities.append('Your spiritual wellbeing could use some focused attention')
        if trends.prayer == Trend.DECLINING or consistency.prayer < 0.3:
            opportunities.append('Increasing prayer consistency could strengthen your spiritual life')
        if consistency.bible_reading < 0.3:
            opportunities.append('More regular Bible reading would deepen your faith foundation')
        if consistency.church < 0.5:
            opportunities.append('Connecting more consistently with your faith community')
        if activity.journal_entries == 0:
            opportunities.append('Starting a spiritual journal could help track your growth')
        if averages.spiritual < 5:
            opportunities.append('Your spiritual wellbeing score indicates room for renewal')
        if consistency.overall < 0.4:
            opportunities.append('Developing more consistent spiritual habits')
        if activity.bible_studies == 0:
            opportunities.append('Adding Bible study to your practices could deepen understanding')
        if activity.scripture_memory_progress == 0:
            opportunities.append('Scripture memorization would strengthen your spiritual foundation')

        if len(opportunities) < PatternRecognitionService.MIN_STATEMENTS:
            opportunities.append('Setting specific spiritual growth goals for the coming month')
            opportunities.append('Exploring new spiritual disciplines to enrich your practice')

        return opportunities[:PatternRecognitionService.MAX_STATEMENTS]

    @staticmethod
    def detect_all_patterns(
        collections: ActivityCollections,
        time_range: TimeRange,
        trends: Trends,
        activity: ActivityCounts,
        averages: Averages,
        streaks: Streaks,
        consistency: ConsistencyRatios
    ) -> Patterns:
        """
        Assemble the patterns section of the report.

        The day-of-week histogram covers every category; the growth curve
        uses the spiritual scores of mood check-ins.
        """
        return Patterns(
            day_of_week=tuple(
                PatternRecognitionService.detect_day_of_week_pattern(collections.all_records())
            ),
            growth=tuple(
                PatternRecognitionService.detect_growth_pattern(collections.mood_entries, time_range)
            ),
            positives=tuple(
                PatternRecognitionService.generate_positives(trends, activity, averages, streaks)
            ),
            opportunities=tuple(
                PatternRecognitionService.generate_opportunities(trends, activity, averages, consistency)
            )
        )

    @staticmethod
    def scored_entry_count(mood_entries: Sequence[MoodEntry]) -> int:
        return sum(1 for e in mood_entries if e.spiritual_score is not None)
