"""
Analytics report aggregate.

The report is assembled once from the outputs of the individual analytics
components and never mutated afterwards; `with_insights` returns a copy.
`to_dict` produces the camelCase JSON shape consumed by the dashboard and
the narrative generator.
"""

from dataclasses import dataclass, field, replace
from datetime import date, datetime, timedelta
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from spiritual_analytics.services.exceptions import InvalidTimeRangeError
from spiritual_analytics.utils.date_utils import subtract_months, parse_calendar_date


class TimeRange(Enum):
    WEEK = 'week'
    MONTH = 'month'
    QUARTER = 'quarter'
    YEAR = 'year'

    @classmethod
    def parse(cls, value: Any) -> 'TimeRange':
        """Accept a TimeRange or its literal string; anything else is rejected."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            for member in cls:
                if member.value == value:
                    return member
        raise InvalidTimeRangeError(
            f"Invalid time range {value!r}. Use one of: week, month, quarter, year"
        )


class Trend(Enum):
    IMPROVING = 'improving'
    DECLINING = 'declining'
    STABLE = 'stable'


class InsightType(Enum):
    STRENGTH = 'strength'
    GROWTH = 'growth'
    OPPORTUNITY = 'opportunity'


# Months stepped back from today for each range (week is handled in days)
_RANGE_MONTHS = {
    TimeRange.MONTH: 1,
    TimeRange.QUARTER: 3,
    TimeRange.YEAR: 12,
}


@dataclass(frozen=True)
class TimeWindow:
    start_date: date
    end_date: date

    @classmethod
    def for_range(cls, time_range: TimeRange, today: Optional[date] = None) -> 'TimeWindow':
        today = today or date.today()
        if time_range == TimeRange.WEEK:
            return cls(start_date=today - timedelta(days=7), end_date=today)
        return cls(
            start_date=subtract_months(today, _RANGE_MONTHS[time_range]),
            end_date=today
        )

    @property
    def total_days(self) -> int:
        return (self.end_date - self.start_date).days + 1

    def contains(self, day: date) -> bool:
        return self.start_date <= day <= self.end_date


# ============================================================================
# REPORT SECTIONS
# ============================================================================

@dataclass(frozen=True)
class ConsistencyRatios:
    overall: float = 0.0
    prayer: float = 0.0
    bible_reading: float = 0.0
    church: float = 0.0
    scripture_memory: float = 0.0
    journaling: float = 0.0

    def to_dict(self) -> Dict[str, float]:
        return {
            'overall': self.overall,
            'prayer': self.prayer,
            'bibleReading': self.bible_reading,
            'church': self.church,
            'scriptureMemory': self.scripture_memory,
            'journaling': self.journaling,
        }


@dataclass(frozen=True)
class WellbeingPoint:
    date: str
    mood: Optional[float] = None
    spiritual: Optional[float] = None

    def to_dict(self) -> Dict[str, Any]:
        return {'date': self.date, 'mood': self.mood, 'spiritual': self.spiritual}


@dataclass(frozen=True)
class Averages:
    mood: float = 0.0
    spiritual: float = 0.0

    def to_dict(self) -> Dict[str, float]:
        return {'mood': self.mood, 'spiritual': self.spiritual}


@dataclass(frozen=True)
class Trends:
    overall: Trend = Trend.STABLE
    mood: Trend = Trend.STABLE
    spiritual: Trend = Trend.STABLE
    consistency: Trend = Trend.STABLE
    prayer: Trend = Trend.STABLE

    def to_dict(self) -> Dict[str, str]:
        return {
            'overall': self.overall.value,
            'mood': self.mood.value,
            'spiritual': self.spiritual.value,
            'consistency': self.consistency.value,
            'prayer': self.prayer.value,
        }


@dataclass(frozen=True)
class Streaks:
    current: int = 0
    longest: int = 0

    def to_dict(self) -> Dict[str, int]:
        return {'current': self.current, 'longest': self.longest}


@dataclass(frozen=True)
class DisciplineScore:
    name: str
    percentage: int

    def to_dict(self) -> Dict[str, Any]:
        return {'name': self.name, 'percentage': self.percentage}


@dataclass(frozen=True)
class ActivityCounts:
    journal_entries: int = 0
    bible_studies: int = 0
    devotional_entries: int = 0
    scripture_memory_progress: int = 0
    prayer_requests: int = 0
    answered_prayers: int = 0
    habit_logs_count: int = 0
    reading_progress: int = 0
    prayer_days: int = 0
    bible_reading_days: int = 0
    church_days: int = 0
    total_entry_count: int = 0

    def to_dict(self) -> Dict[str, int]:
        return {
            'journalEntries': self.journal_entries,
            'bibleStudies': self.bible_studies,
            'devotionalEntries': self.devotional_entries,
            'scriptureMemoryProgress': self.scripture_memory_progress,
            'prayerRequests': self.prayer_requests,
            'answeredPrayers': self.answered_prayers,
            'habitLogsCount': self.habit_logs_count,
            'readingProgress': self.reading_progress,
            'prayerDays': self.prayer_days,
            'bibleReadingDays': self.bible_reading_days,
            'churchDays': self.church_days,
            'totalEntryCount': self.total_entry_count,
        }


@dataclass(frozen=True)
class CorrelationValue:
    name: str
    value: float

    def to_dict(self) -> Dict[str, Any]:
        return {'name': self.name, 'value': self.value}


@dataclass(frozen=True)
class Correlations:
    activities: Tuple[CorrelationValue, ...] = ()
    insights: Tuple[str, ...] = ()

    def value_for(self, name: str) -> Optional[float]:
        for activity in self.activities:
            if activity.name == name:
                return activity.value
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'activities': [a.to_dict() for a in self.activities],
            'insights': list(self.insights),
        }


@dataclass(frozen=True)
class GrowthPoint:
    label: str
    value: float

    def to_dict(self) -> Dict[str, Any]:
        return {'label': self.label, 'value': self.value}


@dataclass(frozen=True)
class Patterns:
    day_of_week: Tuple[float, ...] = (0.0,) * 7
    growth: Tuple[GrowthPoint, ...] = ()
    positives: Tuple[str, ...] = ()
    opportunities: Tuple[str, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {
            'dayOfWeek': list(self.day_of_week),
            'growth': [g.to_dict() for g in self.growth],
            'positives': list(self.positives),
            'opportunities': list(self.opportunities),
        }


@dataclass(frozen=True)
class SufficiencyResult:
    analysis: str
    entry_count: int
    min_required: int
    is_eligible: bool
    confidence: str
    message: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            'analysis': self.analysis,
            'entryCount': self.entry_count,
            'minRequired': self.min_required,
            'isEligible': self.is_eligible,
            'confidence': self.confidence,
            'message': self.message,
        }


@dataclass(frozen=True)
class DataSufficiency:
    results: Tuple[SufficiencyResult, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {result.analysis: result.to_dict() for result in self.results}


# ============================================================================
# INSIGHTS
# ============================================================================

@dataclass(frozen=True)
class Scripture:
    reference: str
    text: str

    def to_dict(self) -> Dict[str, str]:
        return {'reference': self.reference, 'text': self.text}


@dataclass(frozen=True)
class Insight:
    type: InsightType
    title: str
    content: str
    scripture: Scripture

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Insight':
        """
        Build an insight from its JSON shape.

        Raises:
            KeyError: a required key is missing
            ValueError: `type` is not strength, growth or opportunity
        """
        scripture = data['scripture']
        return cls(
            type=InsightType(data['type']),
            title=data['title'],
            content=data['content'],
            scripture=Scripture(reference=scripture['reference'], text=scripture['text'])
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'type': self.type.value,
            'title': self.title,
            'content': self.content,
            'scripture': self.scripture.to_dict(),
        }


@dataclass(frozen=True)
class CacheEntry:
    """Stored narrative insights for one (user, time range) pair."""

    insights: Tuple[Insight, ...]
    analytics_data: Dict[str, Any] = field(default_factory=dict)
    generated_at: datetime = field(default_factory=datetime.now)

    def is_fresh(self, today: date) -> bool:
        # Same calendar day is the only validity rule
        return parse_calendar_date(self.generated_at) == today

    def to_dict(self) -> Dict[str, Any]:
        return {
            'insights': [i.to_dict() for i in self.insights],
            'analyticsData': self.analytics_data,
            'generatedAt': self.generated_at.isoformat(),
        }


# ============================================================================
# REPORT
# ============================================================================

@dataclass(frozen=True)
class AnalyticsReport:
    time_range: TimeRange
    window: TimeWindow
    total_entry_count: int
    activity_days_count: int
    consistency: ConsistencyRatios
    wellbeing_series: Tuple[WellbeingPoint, ...]
    averages: Averages
    trends: Trends
    streaks: Streaks
    disciplines_series: Tuple[DisciplineScore, ...]
    activity_counts: ActivityCounts
    correlations: Correlations
    patterns: Patterns
    data_sufficiency: DataSufficiency = DataSufficiency()
    insights: Optional[Tuple[Insight, ...]] = None

    @property
    def total_days(self) -> int:
        return self.window.total_days

    def with_insights(self, insights: List[Insight]) -> 'AnalyticsReport':
        return replace(self, insights=tuple(insights))

    def to_dict(self, include_insights: bool = True) -> Dict[str, Any]:
        result = {
            'timeRange': self.time_range.value,
            'startDate': self.window.start_date.isoformat(),
            'endDate': self.window.end_date.isoformat(),
            'totalEntryCount': self.total_entry_count,
            'activityDaysCount': self.activity_days_count,
            'totalDays': self.total_days,
            'consistency': self.consistency.to_dict(),
            'wellbeingData': [p.to_dict() for p in self.wellbeing_series],
            'averages': self.averages.to_dict(),
            'trends': self.trends.to_dict(),
            'streaks': self.streaks.to_dict(),
            'disciplinesData': [d.to_dict() for d in self.disciplines_series],
            'activity': self.activity_counts.to_dict(),
            'correlations': self.correlations.to_dict(),
            'patterns': self.patterns.to_dict(),
            'dataSufficiency': self.data_sufficiency.to_dict(),
        }
        if include_insights and self.insights is not None:
            result['insights'] = [i.to_dict() for i in self.insights]
        return result
