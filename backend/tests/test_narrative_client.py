"""
HTTP narrative generator tests, with the requests session mocked out.
"""

from unittest.mock import MagicMock

import pytest
import requests

from spiritual_analytics.models.analytics_report import InsightType, TimeRange
from spiritual_analytics.services.analytics_service import AnalyticsService
from spiritual_analytics.services.exceptions import NarrativeGenerationError
from spiritual_analytics.services.narrative_client import HttpNarrativeGenerator

from analytics_helpers import TODAY

INSIGHT_PAYLOAD = {
    'type': 'strength',
    'title': 'Faithful in Prayer',
    'content': 'You prayed on most days this month.',
    'scripture': {'reference': 'Romans 12:12', 'text': 'Be joyful in hope, patient in affliction, faithful in prayer.'},
}


@pytest.fixture
def report(sample_collections):
    return AnalyticsService.build_report(TimeRange.MONTH, sample_collections, today=TODAY)


def _mock_session():
    mock_session = MagicMock()
    mock_session.__enter__.return_value = mock_session
    mock_session.__exit__.return_value = False
    response = MagicMock()
    response.ok = True
    response.status_code = 200
    response.json.return_value = {'insights': [INSIGHT_PAYLOAD]}
    mock_session.post.return_value = response
    return mock_session


@pytest.fixture
def session():
    return _mock_session()


def _generator(session, **kwargs):
    return HttpNarrativeGenerator(
        base_url='https://insights.example.org/',
        api_key='anon-key',
        session_factory=lambda: session,
        **kwargs
    )


class TestSuccessfulGeneration:

    def test_returns_parsed_insights(self, session, report):
        insights = _generator(session).generate('user-1', TimeRange.MONTH, report)

        assert len(insights) == 1
        assert insights[0].type == InsightType.STRENGTH
        assert insights[0].scripture.reference == 'Romans 12:12'

    def test_request_shape(self, session, report):
        _generator(session).generate('user-1', TimeRange.MONTH, report)

        args, kwargs = session.post.call_args
        assert args[0] == 'https://insights.example.org/functions/v1/spiritual-insights'
        assert kwargs['json']['userId'] == 'user-1'
        assert kwargs['json']['timeRange'] == 'month'
        assert kwargs['json']['analytics'] == report.to_dict(include_insights=False)
        assert kwargs['headers']['Authorization'] == 'Bearer anon-key'
        assert kwargs['timeout'] == 20.0

    def test_probe_runs_first_with_short_timeout(self, session, report):
        _generator(session, probe_timeout_seconds=1.5).generate('user-1', TimeRange.MONTH, report)

        args, kwargs = session.head.call_args
        assert args[0] == 'https://insights.example.org/rest/v1/'
        assert kwargs['params'] == {'apikey': 'anon-key'}
        assert kwargs['timeout'] == 1.5

    def test_unknown_fields_are_ignored(self, session, report):
        session.post.return_value.json.return_value = {
            'insights': [dict(INSIGHT_PAYLOAD, confidence=0.9)],
            'model': 'narrative-v2',
        }

        insights = _generator(session).generate('user-1', TimeRange.MONTH, report)

        assert insights[0].title == 'Faithful in Prayer'

    def test_each_call_uses_its_own_session(self, report):
        opened = []

        def factory():
            opened.append(_mock_session())
            return opened[-1]

        generator = HttpNarrativeGenerator(base_url='https://insights.example.org', session_factory=factory)
        generator.generate('user-1', TimeRange.MONTH, report)
        generator.generate('user-2', TimeRange.MONTH, report)

        assert len(opened) == 2
        assert opened[0] is not opened[1]
        for mock_session in opened:
            mock_session.head.assert_called_once()
            mock_session.post.assert_called_once()
            mock_session.__exit__.assert_called_once()
        assert opened[1].post.call_args.kwargs['json']['userId'] == 'user-2'

    def test_default_sessions_do_not_share_cookies(self):
        generator = HttpNarrativeGenerator(base_url='https://insights.example.org')

        first = generator.session_factory()
        second = generator.session_factory()
        first.cookies.set('sb-session', 'user-1')

        assert isinstance(first, requests.Session)
        assert 'sb-session' not in second.cookies
        first.close()
        second.close()

    def test_custom_function_path(self, session):
        generator = _generator(session, function_path='functions/v1/insights')
        assert generator.function_url == 'https://insights.example.org/functions/v1/insights'


class TestFailures:

    @pytest.mark.parametrize('error', [
        requests.exceptions.Timeout('probe timed out'),
        requests.exceptions.ConnectionError('no route to host'),
    ])
    def test_unreachable_service_skips_main_call(self, session, report, error):
        session.head.side_effect = error

        with pytest.raises(NarrativeGenerationError):
            _generator(session).generate('user-1', TimeRange.MONTH, report)

        session.post.assert_not_called()

    def test_main_call_timeout(self, session, report):
        session.post.side_effect = requests.exceptions.Timeout('read timed out')

        with pytest.raises(NarrativeGenerationError, match='timed out'):
            _generator(session).generate('user-1', TimeRange.MONTH, report)

    def test_non_success_status(self, session, report):
        session.post.return_value.ok = False
        session.post.return_value.status_code = 502

        with pytest.raises(NarrativeGenerationError, match='Error generating insights: 502'):
            _generator(session).generate('user-1', TimeRange.MONTH, report)

    def test_body_is_not_json(self, session, report):
        session.post.return_value.json.side_effect = ValueError('Expecting value')

        with pytest.raises(NarrativeGenerationError):
            _generator(session).generate('user-1', TimeRange.MONTH, report)

    @pytest.mark.parametrize('body', [
        {},
        {'insights': []},
        {'insights': [dict(INSIGHT_PAYLOAD, type='warning')]},
        {'insights': [{'type': 'growth', 'title': 'No scripture', 'content': 'Missing verse'}]},
    ])
    def test_invalid_payload(self, session, report, body):
        session.post.return_value.json.return_value = body

        with pytest.raises(NarrativeGenerationError):
            _generator(session).generate('user-1', TimeRange.MONTH, report)

    def test_base_url_is_required(self):
        with pytest.raises(ValueError):
            HttpNarrativeGenerator(base_url='')
