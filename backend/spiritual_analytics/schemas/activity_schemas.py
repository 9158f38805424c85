from marshmallow import Schema, fields, validate, post_load, ValidationError, EXCLUDE

from spiritual_analytics.models.activity_records import (
    ActivityCollections,
    BibleStudyNote,
    DevotionalProgress,
    HabitLog,
    JournalEntry,
    MoodEntry,
    PrayerRequest,
    ReadingReflection,
    ScriptureMemoryEntry
)
from spiritual_analytics.utils.date_utils import parse_calendar_date

SCORE_RANGE = validate.Range(min=1, max=10)


class CalendarDate(fields.Field):
    """ISO date or date-time, loaded as its calendar date."""

    default_error_messages = {'invalid': 'Not a valid date or date-time.'}

    def _deserialize(self, value, attr, data, **kwargs):
        try:
            return parse_calendar_date(value)
        except (ValueError, TypeError) as e:
            raise self.make_error('invalid') from e

    def _serialize(self, value, attr, obj, **kwargs):
        return value.isoformat() if value is not None else None


class ActivityRecordSchema(Schema):
    """Base for record schemas; unknown columns from the data store are ignored."""
    id = fields.Str(allow_none=True, load_default=None)

    record_class = None

    class Meta:
        unknown = EXCLUDE

    @post_load
    def make_record(self, data, **kwargs):
        return self.record_class(**data)


class MoodEntrySchema(ActivityRecordSchema):
    entry_date = CalendarDate(required=True)
    mood_score = fields.Float(allow_none=True, load_default=None, validate=SCORE_RANGE)
    spiritual_score = fields.Float(allow_none=True, load_default=None, validate=SCORE_RANGE)
    prayer_time = fields.Bool(allow_none=True, load_default=False)
    bible_reading = fields.Bool(allow_none=True, load_default=False)
    church_attendance = fields.Bool(allow_none=True, load_default=False)
    notes = fields.Str(allow_none=True, load_default=None)

    record_class = MoodEntry


class PrayerRequestSchema(ActivityRecordSchema):
    created_at = CalendarDate(required=True)
    title = fields.Str(allow_none=True, load_default=None, validate=validate.Length(max=200))
    is_answered = fields.Bool(allow_none=True, load_default=False)
    answered_date = CalendarDate(allow_none=True, load_default=None)

    record_class = PrayerRequest


class JournalEntrySchema(ActivityRecordSchema):
    created_at = CalendarDate(required=True)
    title = fields.Str(allow_none=True, load_default=None)
    mood_score = fields.Float(allow_none=True, load_default=None, validate=SCORE_RANGE)
    spiritual_score = fields.Float(allow_none=True, load_default=None, validate=SCORE_RANGE)

    record_class = JournalEntry


class ScriptureMemorySchema(ActivityRecordSchema):
    last_practiced = CalendarDate(required=True)
    memorized_level = fields.Int(load_default=0, validate=validate.Range(min=0, max=5))

    record_class = ScriptureMemoryEntry


class BibleStudyNoteSchema(ActivityRecordSchema):
    created_at = CalendarDate(required=True)

    record_class = BibleStudyNote


class DevotionalProgressSchema(ActivityRecordSchema):
    created_at = CalendarDate(required=True)
    completed_at = CalendarDate(allow_none=True, load_default=None)

    record_class = DevotionalProgress


class HabitLogSchema(ActivityRecordSchema):
    completed_date = CalendarDate(required=True)
    habit_id = fields.Str(allow_none=True, load_default=None)

    record_class = HabitLog


class ReadingReflectionSchema(ActivityRecordSchema):
    created_at = CalendarDate(required=True)

    record_class = ReadingReflection


class AnalyticsRequestSchema(Schema):
    """
    Body of a report request: the eight collections already fetched for
    the window. Every collection is optional and defaults to empty.
    """
    mood_entries = fields.List(fields.Nested(MoodEntrySchema), data_key='moodEntries', load_default=list)
    prayer_requests = fields.List(fields.Nested(PrayerRequestSchema), data_key='prayerRequests', load_default=list)
    journal_entries = fields.List(fields.Nested(JournalEntrySchema), data_key='journalEntries', load_default=list)
    scripture_memory = fields.List(fields.Nested(ScriptureMemorySchema), data_key='scriptureMemory', load_default=list)
    bible_study_notes = fields.List(fields.Nested(BibleStudyNoteSchema), data_key='bibleStudyNotes', load_default=list)
    devotional_progress = fields.List(
        fields.Nested(DevotionalProgressSchema), data_key='devotionalProgress', load_default=list
    )
    habit_logs = fields.List(fields.Nested(HabitLogSchema), data_key='habitLogs', load_default=list)
    reading_reflections = fields.List(
        fields.Nested(ReadingReflectionSchema), data_key='readingProgress', load_default=list
    )

    class Meta:
        unknown = EXCLUDE

    @post_load
    def make_collections(self, data, **kwargs):
        try:
            return ActivityCollections.from_lists(**data)
        except ValueError as e:
            raise ValidationError(str(e)) from e
