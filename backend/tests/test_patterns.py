"""
Pattern recognition tests: weekday histogram, growth curve, and the
positive / opportunity statement tables.
"""

from datetime import date

from spiritual_analytics.models.activity_records import HabitLog, MoodEntry
from spiritual_analytics.models.analytics_report import (
    ActivityCounts,
    Averages,
    ConsistencyRatios,
    Streaks,
    TimeRange,
    Trend,
    Trends
)
from spiritual_analytics.services.pattern_recognition_service import PatternRecognitionService

from analytics_helpers import days_ago, make_mood

SUNDAY = date(2026, 10, 18)
MONDAY = date(2026, 10, 19)


class TestDayOfWeekPattern:

    def test_normalized_to_busiest_day_sunday_first(self):
        records = [
            make_mood(SUNDAY),
            HabitLog(completed_date=SUNDAY.isoformat()),
            make_mood(MONDAY),
        ]

        pattern = PatternRecognitionService.detect_day_of_week_pattern(records)

        assert pattern == [1.0, 0.5, 0.0, 0.0, 0.0, 0.0, 0.0]

    def test_no_records(self):
        assert PatternRecognitionService.detect_day_of_week_pattern([]) == [0.0] * 7

    def test_values_are_bounded(self, sample_collections):
        pattern = PatternRecognitionService.detect_day_of_week_pattern(sample_collections.all_records())

        assert len(pattern) == 7
        assert max(pattern) == 1.0
        assert all(0.0 <= value <= 1.0 for value in pattern)


class TestGrowthPattern:

    def test_not_enough_scored_entries(self):
        entries = [make_mood(days_ago(0), spiritual=9), MoodEntry(entry_date=days_ago(1).isoformat())]

        growth = PatternRecognitionService.detect_growth_pattern(entries, TimeRange.MONTH)

        assert [(g.label, g.value) for g in growth] == [('Start', 5), ('Now', 5)]

    def test_month_has_four_weekly_buckets(self):
        scores = [2, 4, 6, 6, 7, 9, 8, 10]
        entries = [make_mood(days_ago(len(scores) - i), spiritual=s) for i, s in enumerate(scores)]

        growth = PatternRecognitionService.detect_growth_pattern(entries, TimeRange.MONTH)

        assert [g.label for g in growth] == ['Week 1', 'Week 2', 'Week 3', 'Week 4']
        assert [g.value for g in growth] == [3, 6, 8, 9]

    def test_empty_buckets_take_nearest_earlier_value(self):
        entries = [make_mood(days_ago(1), spiritual=4), make_mood(days_ago(0), spiritual=8)]

        growth = PatternRecognitionService.detect_growth_pattern(entries, TimeRange.WEEK)

        assert [g.label for g in growth] == ['Sun', 'Mon', 'Tue', 'Wed', 'Thu', 'Fri', 'Sat']
        assert [g.value for g in growth] == [4, 4, 4, 8, 8, 8, 8]

    def test_year_and_quarter_labels(self):
        entries = [make_mood(days_ago(n), spiritual=6) for n in range(30)]

        year = PatternRecognitionService.detect_growth_pattern(entries, TimeRange.YEAR)
        quarter = PatternRecognitionService.detect_growth_pattern(entries, TimeRange.QUARTER)

        assert [g.label for g in year][:3] == ['Jan', 'Feb', 'Mar']
        assert len(year) == 12
        assert [g.label for g in quarter] == [f'Period {i}' for i in range(1, 7)]
        assert all(g.value == 6 for g in year + quarter)

    def test_fill_gap_looks_later_when_nothing_earlier(self):
        assert PatternRecognitionService._fill_gap([None, None, 7.0], 0) == 7.0
        assert PatternRecognitionService._fill_gap([None, None], 1) == 5


class TestPositives:

    def test_fillers_when_few_rules_fire(self):
        activity = ActivityCounts(total_entry_count=4, scripture_memory_progress=1, church_days=1)

        positives = PatternRecognitionService.generate_positives(Trends(), activity, Averages(), Streaks())

        assert positives == [
            "You're actively tracking your spiritual journey",
            "You're growing in scripture knowledge",
            "You're maintaining connection with your faith community",
        ]

    def test_nothing_to_report(self):
        positives = PatternRecognitionService.generate_positives(Trends(), ActivityCounts(), Averages(), Streaks())
        assert positives == []

    def test_capped_at_three_most_specific_first(self):
        trends = Trends(
            mood=Trend.IMPROVING, spiritual=Trend.IMPROVING,
            consistency=Trend.IMPROVING, prayer=Trend.IMPROVING
        )

        positives = PatternRecognitionService.generate_positives(
            trends, ActivityCounts(journal_entries=8), Averages(spiritual=8), Streaks(current=6, longest=6)
        )

        assert positives == [
            'Your spiritual wellbeing is on an upward trajectory',
            'Your emotional wellbeing is improving',
            'Your consistency in spiritual practices is growing',
        ]

    def test_streak_and_answered_prayers(self):
        activity = ActivityCounts(prayer_requests=4, answered_prayers=3)

        positives = PatternRecognitionService.generate_positives(
            Trends(), activity, Averages(), Streaks(current=5, longest=5)
        )

        assert positives[:2] == [
            'You have a 5-day streak of spiritual activity',
            "You've seen 3 answered prayers recently",
        ]

    def test_prayer_stronger_than_bible(self):
        activity = ActivityCounts(prayer_days=9, bible_reading_days=2)

        positives = PatternRecognitionService.generate_positives(
            Trends(), activity, Averages(spiritual=7.5), Streaks()
        )

        assert 'Prayer is a strong foundation in your spiritual life' in positives
        assert 'Bible reading is a consistent strength for you' not in positives


class TestOpportunities:

    def test_weak_consistency_comes_first(self):
        opportunities = PatternRecognitionService.generate_opportunities(
            Trends(), ActivityCounts(), Averages(), ConsistencyRatios()
        )

        assert opportunities == [
            'Increasing prayer consistency could strengthen your spiritual life',
            'More regular Bible reading would deepen your faith foundation',
            'Connecting more consistently with your faith community',
        ]

    def test_declining_spiritual_trend_leads(self):
        opportunities = PatternRecognitionService.generate_opportunities(
            Trends(spiritual=Trend.DECLINING), ActivityCounts(), Averages(), ConsistencyRatios()
        )

        assert opportunities[0] == 'Your spiritual wellbeing could use some focused attention'
        assert len(opportunities) == 3

    def test_fillers_when_nothing_fires(self):
        consistency = ConsistencyRatios(
            overall=1.0, prayer=1.0, bible_reading=1.0, church=1.0, scripture_memory=1.0, journaling=1.0
        )
        activity = ActivityCounts(journal_entries=3, bible_studies=2, scripture_memory_progress=1)

        opportunities = PatternRecognitionService.generate_opportunities(
            Trends(), activity, Averages(spiritual=8), consistency
        )

        assert opportunities == [
            'Setting specific spiritual growth goals for the coming month',
            'Exploring new spiritual disciplines to enrich your practice',
        ]

    def test_single_rule_is_padded_with_fillers(self):
        consistency = ConsistencyRatios(
            overall=1.0, prayer=1.0, bible_reading=1.0, church=1.0, scripture_memory=1.0, journaling=1.0
        )
        activity = ActivityCounts(journal_entries=0, bible_studies=2, scripture_memory_progress=1)

        opportunities = PatternRecognitionService.generate_opportunities(
            Trends(), activity, Averages(spiritual=8), consistency
        )

        assert opportunities == [
            'Starting a spiritual journal could help track your growth',
            'Setting specific spiritual growth goals for the coming month',
            'Exploring new spiritual disciplines to enrich your practice',
        ]
