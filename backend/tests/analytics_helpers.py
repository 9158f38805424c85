"""
Shared builders and collaborator fakes for the analytics tests.
"""
import threading
from datetime import date, timedelta

from spiritual_analytics.models.activity_records import MoodEntry
from spiritual_analytics.models.analytics_report import Insight, InsightType, Scripture
from spiritual_analytics.services.insight_service import InsightCache, NarrativeGenerator

# Monday
TODAY = date(2026, 10, 19)


def days_ago(n, today=TODAY):
    return today - timedelta(days=n)


def make_mood(day, mood=5, spiritual=5, prayer=False, bible=False, church=False):
    return MoodEntry(
        entry_date=day.isoformat(),
        mood_score=mood,
        spiritual_score=spiritual,
        prayer_time=prayer,
        bible_reading=bible,
        church_attendance=church
    )


def make_insight(title='Generated insight', insight_type=InsightType.GROWTH):
    return Insight(
        type=insight_type,
        title=title,
        content='Generated content',
        scripture=Scripture(reference='Psalm 1:3', text='He is like a tree planted by streams of water.')
    )


# ============================================================================
# COLLABORATOR FAKES
# ============================================================================

class FakeCache(InsightCache):
    def __init__(self, entry=None, fail_reads=False, fail_writes=False):
        self.entry = entry
        self.fail_reads = fail_reads
        self.fail_writes = fail_writes
        self.gets = 0
        self.puts = []

    def get(self, user_id, time_range):
        self.gets += 1
        if self.fail_reads:
            raise RuntimeError("cache unavailable")
        return self.entry

    def put(self, user_id, time_range, entry):
        if self.fail_writes:
            raise RuntimeError("cache write refused")
        self.puts.append((user_id, time_range, entry))
        self.entry = entry


class FakeGenerator(NarrativeGenerator):
    def __init__(self, insights=None, error=None, block=False):
        self.insights = insights if insights is not None else [make_insight()]
        self.error = error
        self.block = block
        self.release = threading.Event()
        self.calls = 0

    def generate(self, user_id, time_range, report):
        self.calls += 1
        if self.block:
            self.release.wait(timeout=5)
        if self.error is not None:
            raise self.error
        return list(self.insights)
