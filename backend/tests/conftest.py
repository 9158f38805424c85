"""
Pytest configuration and fixtures.

Engine tests pin "today" to a fixed Monday so windows, streaks and weekday
labels are deterministic. Route tests run against an in-memory SQLite
database created fresh for each test.
"""
from datetime import datetime

import pytest
from flask_jwt_extended import create_access_token

from spiritual_analytics import create_app, db
from spiritual_analytics.models.activity_records import (
    ActivityCollections,
    BibleStudyNote,
    DevotionalProgress,
    HabitLog,
    JournalEntry,
    PrayerRequest,
    ReadingReflection,
    ScriptureMemoryEntry
)

from analytics_helpers import TODAY, days_ago, make_mood


@pytest.fixture
def today():
    return TODAY


@pytest.fixture
def now():
    return datetime(TODAY.year, TODAY.month, TODAY.day, 9, 30)


@pytest.fixture
def empty_collections():
    return ActivityCollections()


@pytest.fixture
def sample_collections():
    """Two weeks of check-ins plus a few records of every other category."""
    mood_entries = [
        make_mood(days_ago(n), mood=4 + (13 - n) // 3, spiritual=3 + (13 - n) // 2,
                  prayer=n % 2 == 0, bible=n % 3 == 0, church=n in (1, 8))
        for n in range(13, -1, -1)
    ]
    return ActivityCollections.from_lists(
        mood_entries=mood_entries,
        prayer_requests=[
            PrayerRequest(created_at=f"{days_ago(3).isoformat()}T08:00:00Z", title='Family', is_answered=True),
            PrayerRequest(created_at=f"{days_ago(5).isoformat()}T08:00:00Z", title='Work'),
        ],
        journal_entries=[
            JournalEntry(created_at=f"{days_ago(2).isoformat()}T21:15:00Z", mood_score=7, spiritual_score=8),
        ],
        scripture_memory=[ScriptureMemoryEntry(last_practiced=days_ago(1).isoformat(), memorized_level=2)],
        bible_study_notes=[BibleStudyNote(created_at=f"{days_ago(4).isoformat()}T07:00:00Z")],
        devotional_progress=[DevotionalProgress(created_at=f"{days_ago(6).isoformat()}T07:00:00Z")],
        habit_logs=[HabitLog(completed_date=days_ago(n).isoformat(), habit_id='h1') for n in (0, 1, 2)],
        reading_reflections=[ReadingReflection(created_at=f"{days_ago(7).isoformat()}T20:00:00Z")],
    )


# ============================================================================
# FLASK APP
# ============================================================================

@pytest.fixture
def make_app():
    """Build a testing app (optionally with a custom synthesizer) with a fresh schema."""
    created = []

    def _make(synthesizer=None):
        app = create_app('testing', synthesizer=synthesizer)
        ctx = app.app_context()
        ctx.push()
        db.create_all()
        created.append(ctx)
        return app

    yield _make

    for ctx in reversed(created):
        db.session.remove()
        db.drop_all()
        ctx.pop()


@pytest.fixture
def app(make_app):
    return make_app()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def auth_headers(app):
    token = create_access_token(identity='user-1')
    return {'Authorization': f'Bearer {token}'}
