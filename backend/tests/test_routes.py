"""
API tests for the analytics blueprint and the database-backed insight cache.
"""

from datetime import datetime, timedelta

from flask_jwt_extended import create_access_token

from spiritual_analytics import db
from spiritual_analytics.models.analytics_report import CacheEntry, TimeRange
from spiritual_analytics.models.insight_cache import InsightCacheRecord
from spiritual_analytics.services.insight_cache_service import SqlAlchemyInsightCache
from spiritual_analytics.services.insight_service import InsightSynthesizer

from analytics_helpers import FakeGenerator, make_insight


def _report_body(today):
    return {
        'moodEntries': [
            {
                'entry_date': (today - timedelta(days=n)).isoformat(),
                'mood_score': 5 + n % 3,
                'spiritual_score': 6 + n % 4,
                'prayer_time': n % 2 == 0,
            }
            for n in range(5)
        ],
        'habitLogs': [{'completed_date': today.isoformat(), 'habit_id': 'h1'}],
    }


class TestHealth:

    def test_health_check(self, client):
        response = client.get('/api/health')

        assert response.status_code == 200
        assert response.get_json()['status'] == 'healthy'


class TestReportEndpoint:

    def test_requires_token(self, client):
        response = client.post('/api/analytics/month/report', json={})

        assert response.status_code == 401

    def test_invalid_time_range(self, client, auth_headers):
        response = client.post('/api/analytics/decade/report', json={}, headers=auth_headers)

        assert response.status_code == 400
        assert 'Invalid time range' in response.get_json()['error']

    def test_builds_report_with_insights(self, client, auth_headers):
        response = client.post(
            '/api/analytics/week/report',
            json=_report_body(datetime.now().date()),
            headers=auth_headers
        )

        assert response.status_code == 200
        data = response.get_json()['data']
        assert data['timeRange'] == 'week'
        assert data['totalEntryCount'] == 6
        assert data['totalDays'] == 8
        assert data['streaks']['current'] == 5
        assert len(data['insights']) >= 1

    def test_empty_body_still_gets_insights(self, client, auth_headers):
        response = client.post('/api/analytics/month/report', headers=auth_headers)

        assert response.status_code == 200
        data = response.get_json()['data']
        assert data['consistency']['overall'] == 0
        assert data['insights']

    def test_invalid_record_is_rejected(self, client, auth_headers):
        response = client.post(
            '/api/analytics/month/report',
            json={'moodEntries': [{'mood_score': 5}]},
            headers=auth_headers
        )

        assert response.status_code == 400
        body = response.get_json()
        assert body['error'] == 'Invalid activity data'
        assert 'moodEntries' in body['details']


class TestCacheEndpoint:

    def test_missing_entry(self, client, auth_headers):
        response = client.get('/api/analytics/month/cache', headers=auth_headers)

        assert response.status_code == 404

    def test_generated_insights_are_stored(self, make_app):
        generator = FakeGenerator()
        app = make_app(synthesizer=InsightSynthesizer(cache=SqlAlchemyInsightCache(), generator=generator))
        client = app.test_client()
        headers = {'Authorization': f"Bearer {create_access_token(identity='user-7')}"}

        assert client.get('/api/analytics/month/cache', headers=headers).status_code == 404

        client.post('/api/analytics/month/report', json=_report_body(datetime.now().date()), headers=headers)
        client.post('/api/analytics/month/report', json=_report_body(datetime.now().date()), headers=headers)

        response = client.get('/api/analytics/month/cache', headers=headers)

        assert response.status_code == 200
        data = response.get_json()['data']
        assert data['insights'][0]['title'] == 'Generated insight'
        assert data['analyticsData']['timeRange'] == 'month'
        assert generator.calls == 1

    def test_unreadable_entry_is_not_found(self, app, client, auth_headers):
        db.session.add(InsightCacheRecord(
            user_id='user-1',
            time_range='month',
            insights=[{'type': 'bogus'}],
            generated_at=datetime.now()
        ))
        db.session.commit()

        response = client.get('/api/analytics/month/cache', headers=auth_headers)

        assert response.status_code == 404
        assert response.get_json()['error'] == 'No cached insights found'


class TestSqlAlchemyInsightCache:

    def test_put_then_get(self, app):
        cache = SqlAlchemyInsightCache()
        generated_at = datetime(2026, 10, 19, 8, 0)

        cache.put('user-1', TimeRange.WEEK, CacheEntry(
            insights=(make_insight('First'),),
            analytics_data={'timeRange': 'week'},
            generated_at=generated_at
        ))
        entry = cache.get('user-1', TimeRange.WEEK)

        assert [i.title for i in entry.insights] == ['First']
        assert entry.analytics_data == {'timeRange': 'week'}
        assert entry.generated_at == generated_at
        assert cache.get('user-1', TimeRange.MONTH) is None

    def test_put_upserts_by_user_and_range(self, app):
        cache = SqlAlchemyInsightCache()

        cache.put('user-1', TimeRange.WEEK, CacheEntry(
            insights=(make_insight('First'),), generated_at=datetime(2026, 10, 18, 8, 0)
        ))
        cache.put('user-1', TimeRange.WEEK, CacheEntry(
            insights=(make_insight('Second'),), generated_at=datetime(2026, 10, 19, 8, 0)
        ))

        assert InsightCacheRecord.query.count() == 1
        assert cache.get('user-1', TimeRange.WEEK).insights[0].title == 'Second'

    def test_generated_at_defaults_to_local_time(self, app):
        before = datetime.now()
        db.session.add(InsightCacheRecord(user_id='user-1', time_range='week', insights=[]))
        db.session.commit()
        entry = CacheEntry(insights=())
        after = datetime.now()

        stored = db.session.get(InsightCacheRecord, ('user-1', 'week')).generated_at

        assert before <= stored <= after
        assert before <= entry.generated_at <= after
