"""
Typed activity records.

Each source category has its own record type, and every type states which
of its fields carries the authoritative calendar date:

    MoodEntry             entry_date
    HabitLog              completed_date
    PrayerRequest         created_at
    JournalEntry          created_at
    BibleStudyNote        created_at
    DevotionalProgress    created_at
    ReadingReflection     created_at
    ScriptureMemoryEntry  last_practiced
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, fields
from datetime import date, datetime
from enum import Enum
from typing import ClassVar, Dict, List, Optional, Tuple, Union

from spiritual_analytics.services.exceptions import DateExtractionError
from spiritual_analytics.utils.date_utils import parse_calendar_date

DateValue = Union[str, date, datetime]


class RecordCategory(Enum):
    """Source categories; values match the ActivityCollections attribute names."""
    MOOD = 'mood_entries'
    PRAYER = 'prayer_requests'
    JOURNAL = 'journal_entries'
    SCRIPTURE_MEMORY = 'scripture_memory'
    BIBLE_STUDY = 'bible_study_notes'
    DEVOTIONAL = 'devotional_progress'
    HABIT = 'habit_logs'
    READING = 'reading_reflections'


def _date_from_field(record: 'ActivityRecord', field_name: str, value: Optional[DateValue]) -> date:
    if value is None:
        raise DateExtractionError(
            f"{type(record).__name__} has no '{field_name}' value", record=record
        )
    try:
        return parse_calendar_date(value)
    except (ValueError, TypeError) as e:
        raise DateExtractionError(
            f"{type(record).__name__}.{field_name} is not a valid date: {value!r}",
            record=record
        ) from e


@dataclass(frozen=True)
class ActivityRecord(ABC):
    """Common base for the eight record variants."""

    category: ClassVar[RecordCategory]

    @abstractmethod
    def extract_date(self) -> date:
        """Calendar date of the record, from the variant's own date field."""


@dataclass(frozen=True)
class MoodEntry(ActivityRecord):
    entry_date: Optional[DateValue] = None
    mood_score: Optional[float] = None
    spiritual_score: Optional[float] = None
    prayer_time: bool = False
    bible_reading: bool = False
    church_attendance: bool = False
    notes: Optional[str] = None
    id: Optional[str] = None

    category = RecordCategory.MOOD

    def extract_date(self) -> date:
        return _date_from_field(self, 'entry_date', self.entry_date)


@dataclass(frozen=True)
class PrayerRequest(ActivityRecord):
    created_at: Optional[DateValue] = None
    title: Optional[str] = None
    is_answered: bool = False
    answered_date: Optional[DateValue] = None
    id: Optional[str] = None

    category = RecordCategory.PRAYER

    def extract_date(self) -> date:
        return _date_from_field(self, 'created_at', self.created_at)


@dataclass(frozen=True)
class JournalEntry(ActivityRecord):
    created_at: Optional[DateValue] = None
    title: Optional[str] = None
    mood_score: Optional[float] = None
    spiritual_score: Optional[float] = None
    id: Optional[str] = None

    category = RecordCategory.JOURNAL

    def extract_date(self) -> date:
        return _date_from_field(self, 'created_at', self.created_at)


@dataclass(frozen=True)
class ScriptureMemoryEntry(ActivityRecord):
    last_practiced: Optional[DateValue] = None
    memorized_level: int = 0
    id: Optional[str] = None

    category = RecordCategory.SCRIPTURE_MEMORY

    def extract_date(self) -> date:
        return _date_from_field(self, 'last_practiced', self.last_practiced)


@dataclass(frozen=True)
class BibleStudyNote(ActivityRecord):
    created_at: Optional[DateValue] = None
    id: Optional[str] = None

    category = RecordCategory.BIBLE_STUDY

    def extract_date(self) -> date:
        return _date_from_field(self, 'created_at', self.created_at)


@dataclass(frozen=True)
class DevotionalProgress(ActivityRecord):
    created_at: Optional[DateValue] = None
    completed_at: Optional[DateValue] = None
    id: Optional[str] = None

    category = RecordCategory.DEVOTIONAL

    def extract_date(self) -> date:
        return _date_from_field(self, 'created_at', self.created_at)


@dataclass(frozen=True)
class HabitLog(ActivityRecord):
    completed_date: Optional[DateValue] = None
    habit_id: Optional[str] = None
    id: Optional[str] = None

    category = RecordCategory.HABIT

    def extract_date(self) -> date:
        return _date_from_field(self, 'completed_date', self.completed_date)


@dataclass(frozen=True)
class ReadingReflection(ActivityRecord):
    created_at: Optional[DateValue] = None
    id: Optional[str] = None

    category = RecordCategory.READING

    def extract_date(self) -> date:
        return _date_from_field(self, 'created_at', self.created_at)


RECORD_TYPES = {
    RecordCategory.MOOD: MoodEntry,
    RecordCategory.PRAYER: PrayerRequest,
    RecordCategory.JOURNAL: JournalEntry,
    RecordCategory.SCRIPTURE_MEMORY: ScriptureMemoryEntry,
    RecordCategory.BIBLE_STUDY: BibleStudyNote,
    RecordCategory.DEVOTIONAL: DevotionalProgress,
    RecordCategory.HABIT: HabitLog,
    RecordCategory.READING: ReadingReflection,
}


@dataclass(frozen=True)
class ActivityCollections:
    """The eight per-category collections for one user and one time window."""

    mood_entries: Tuple[MoodEntry, ...] = ()
    prayer_requests: Tuple[PrayerRequest, ...] = ()
    journal_entries: Tuple[JournalEntry, ...] = ()
    scripture_memory: Tuple[ScriptureMemoryEntry, ...] = ()
    bible_study_notes: Tuple[BibleStudyNote, ...] = ()
    devotional_progress: Tuple[DevotionalProgress, ...] = ()
    habit_logs: Tuple[HabitLog, ...] = ()
    reading_reflections: Tuple[ReadingReflection, ...] = ()

    @classmethod
    def from_lists(cls, **collections) -> 'ActivityCollections':
        """Build from any iterables; missing or None collections become empty."""
        known = {f.name for f in fields(cls)}
        unknown = set(collections) - known
        if unknown:
            raise ValueError(f"Unknown collections: {', '.join(sorted(unknown))}")
        return cls(**{
            name: tuple(records or ())
            for name, records in collections.items()
        })

    def by_category(self) -> Dict[RecordCategory, Tuple[ActivityRecord, ...]]:
        return {category: getattr(self, category.value) for category in RecordCategory}

    def all_records(self) -> List[ActivityRecord]:
        records = []
        for collection in self.by_category().values():
            records.extend(collection)
        return records

    def total_count(self) -> int:
        return sum(len(collection) for collection in self.by_category().values())
