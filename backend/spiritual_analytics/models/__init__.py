from .activity_records import (
    ActivityRecord, MoodEntry, PrayerRequest, JournalEntry, ScriptureMemoryEntry,
    BibleStudyNote, DevotionalProgress, HabitLog, ReadingReflection,
    RecordCategory, ActivityCollections
)
from .analytics_report import TimeRange, TimeWindow, Trend, InsightType, Insight, Scripture, CacheEntry, AnalyticsReport
from .insight_cache import InsightCacheRecord

__all__ = [
    'ActivityRecord', 'MoodEntry', 'PrayerRequest', 'JournalEntry', 'ScriptureMemoryEntry',
    'BibleStudyNote', 'DevotionalProgress', 'HabitLog', 'ReadingReflection',
    'RecordCategory', 'ActivityCollections',
    'TimeRange', 'TimeWindow', 'Trend', 'InsightType', 'Insight', 'Scripture', 'CacheEntry', 'AnalyticsReport',
    'InsightCacheRecord'
]
