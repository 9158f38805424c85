"""
Spiritual analytics report builder.

Turns the eight per-category collections for one window into a single
immutable AnalyticsReport. Each section is computed by its own component
from the raw collections (plus the aggregated activity-day view) and the
report is assembled once at the end.
"""

import logging
from datetime import date
from typing import Dict, List, Optional, Sequence

from spiritual_analytics.models.activity_records import ActivityCollections, JournalEntry, MoodEntry
from spiritual_analytics.models.analytics_report import (
    ActivityCounts,
    AnalyticsReport,
    Averages,
    DisciplineScore,
    TimeRange,
    TimeWindow,
    WellbeingPoint
)
from spiritual_analytics.services.analytics_base import (
    ActivityAggregator,
    AnalyticsStatsCalculator,
    DateExtractor
)
from spiritual_analytics.services.analytics_data_sufficiency_system import (
    AnalysisType,
    DataSufficiencyChecker
)
from spiritual_analytics.services.consistency_service import ConsistencyCalculator
from spiritual_analytics.services.correlation_service import CorrelationService
from spiritual_analytics.services.pattern_recognition_service import PatternRecognitionService
from spiritual_analytics.services.streak_service import StreakCalculator
from spiritual_analytics.services.trend_service import TrendAnalyzer
from spiritual_analytics.utils.date_utils import month_day_label, short_weekday_label

logger = logging.getLogger(__name__)


class WellbeingSeriesBuilder:
    """Mood and spiritual score per day, for the wellbeing chart."""

    @staticmethod
    def build(
        mood_entries: Sequence[MoodEntry],
        journal_entries: Sequence[JournalEntry],
        time_range: TimeRange
    ) -> List[WellbeingPoint]:
        """
        Merge check-ins and scored journal entries into one daily series.

        Check-ins own their day; a journal entry only fills a day with no
        check-in, and only when it carries a mood or spiritual score. Points
        are sorted by date and then labelled for the window ('Sun' style
        for a week, 'Oct 3' style otherwise).
        """
        points_by_date: Dict[date, Dict[str, Optional[float]]] = {}

        for entry_date, entry in DateExtractor.sort_by_date(mood_entries):
            points_by_date[entry_date] = {
                'mood': entry.mood_score,
                'spiritual': entry.spiritual_score
            }

        for entry_date, entry in DateExtractor.sort_by_date(journal_entries):
            if not entry.mood_score and not entry.spiritual_score:
                continue
            if entry_date not in points_by_date:
                points_by_date[entry_date] = {
                    'mood': entry.mood_score or None,
                    'spiritual': entry.spiritual_score or None
                }

        label = short_weekday_label if time_range == TimeRange.WEEK else month_day_label

        return [
            WellbeingPoint(date=label(point_date), mood=values['mood'], spiritual=values['spiritual'])
            for point_date, values in sorted(points_by_date.items())
        ]


class AnalyticsService:

    DISCIPLINE_NAMES = ['Prayer', 'Bible', 'Church', 'Habits']

    @staticmethod
    def calculate_averages(mood_entries: Sequence[MoodEntry]) -> Averages:
        return Averages(
            mood=AnalyticsStatsCalculator.safe_mean(e.mood_score for e in mood_entries),
            spiritual=AnalyticsStatsCalculator.safe_mean(e.spiritual_score for e in mood_entries)
        )

    @staticmethod
    def build_disciplines(collections: ActivityCollections) -> List[DisciplineScore]:
        """
        Share of check-ins (in %) with each practice.

        Habits are unique habit-log days relative to the number of check-ins,
        capped at 100. With no check-ins every discipline is 0.
        """
        mood_entries = collections.mood_entries
        total = len(mood_entries)

        def percentage(count: int) -> int:
            return int(round(AnalyticsStatsCalculator.safe_ratio(count, total, cap=1.0) * 100))

        if not total:
            return [DisciplineScore(name=name, percentage=0) for name in AnalyticsService.DISCIPLINE_NAMES]

        habit_days = ActivityAggregator.unique_days(collections.habit_logs)

        return [
            DisciplineScore(name='Prayer', percentage=percentage(sum(1 for e in mood_entries if e.prayer_time))),
            DisciplineScore(name='Bible', percentage=percentage(sum(1 for e in mood_entries if e.bible_reading))),
            DisciplineScore(name='Church', percentage=percentage(sum(1 for e in mood_entries if e.church_attendance))),
            DisciplineScore(name='Habits', percentage=percentage(len(habit_days))),
        ]

    @staticmethod
    def count_activity(collections: ActivityCollections) -> ActivityCounts:
        mood_entries = collections.mood_entries
        return ActivityCounts(
            journal_entries=len(collections.journal_entries),
            bible_studies=len(collections.bible_study_notes),
            devotional_entries=len(collections.devotional_progress),
            scripture_memory_progress=len(collections.scripture_memory),
            prayer_requests=len(collections.prayer_requests),
            answered_prayers=sum(1 for p in collections.prayer_requests if p.is_answered),
            habit_logs_count=len(collections.habit_logs),
            reading_progress=len(collections.reading_reflections),
            prayer_days=sum(1 for e in mood_entries if e.prayer_time),
            bible_reading_days=sum(1 for e in mood_entries if e.bible_reading),
            church_days=sum(1 for e in mood_entries if e.church_attendance),
            total_entry_count=collections.total_count()
        )

    @staticmethod
    def build_report(
        time_range: TimeRange,
        collections: ActivityCollections,
        today: Optional[date] = None
    ) -> AnalyticsReport:
        """
        Compute the full analytics report for one user and window.

        Args:
            time_range: week, month, quarter or year
            collections: records already fetched for the window
            today: reference day for the window and the current streak

        Returns:
            AnalyticsReport without insights (see InsightSynthesizer)
        """
        today = today or date.today()
        time_range = TimeRange.parse(time_range)
        window = TimeWindow.for_range(time_range, today)

        # 1. Unified activity-day view
        aggregated = ActivityAggregator.aggregate(collections, window)

        # 2. Independent sections
        mood_entries = collections.mood_entries
        consistency = ConsistencyCalculator.calculate(collections, aggregated)
        averages = AnalyticsService.calculate_averages(mood_entries)
        trends = TrendAnalyzer.analyze(collections)
        streaks = StreakCalculator.calculate(aggregated.activity_days, today)
        activity = AnalyticsService.count_activity(collections)
        correlations = CorrelationService.analyze(mood_entries)

        # 3. Patterns read the sections above
        patterns = PatternRecognitionService.detect_all_patterns(
            collections, time_range, trends, activity, averages, streaks, consistency
        )

        data_sufficiency = DataSufficiencyChecker.summarize({
            AnalysisType.TREND: len(mood_entries),
            AnalysisType.CORRELATION: CorrelationService.scored_entry_count(mood_entries),
            AnalysisType.GROWTH_CURVE: PatternRecognitionService.scored_entry_count(mood_entries),
            AnalysisType.DAY_OF_WEEK: aggregated.total_entry_count - aggregated.skipped_records,
        })

        report = AnalyticsReport(
            time_range=time_range,
            window=window,
            total_entry_count=aggregated.total_entry_count,
            activity_days_count=aggregated.activity_days_count,
            consistency=consistency,
            wellbeing_series=tuple(WellbeingSeriesBuilder.build(
                mood_entries, collections.journal_entries, time_range
            )),
            averages=averages,
            trends=trends,
            streaks=streaks,
            disciplines_series=tuple(AnalyticsService.build_disciplines(collections)),
            activity_counts=activity,
            correlations=correlations,
            patterns=patterns,
            data_sufficiency=data_sufficiency
        )

        logger.info(
            "Built %s report: %d entries over %d active day(s) of %d",
            time_range.value, report.total_entry_count, report.activity_days_count, report.total_days
        )
        return report
