"""
HTTP client for the external spiritual-insights function.

A short HEAD probe against the service root runs before the main call so
an unreachable service fails within seconds instead of holding the request
for the full generation timeout.

Each call opens its own requests session, so no cookies or pooled
connections are shared between users or worker threads.
"""

import logging
from typing import Callable, List, Optional

import requests
from marshmallow import ValidationError

from spiritual_analytics.models.analytics_report import AnalyticsReport, Insight, TimeRange
from spiritual_analytics.schemas.insight_schemas import InsightsResponseSchema
from spiritual_analytics.services.exceptions import NarrativeGenerationError
from spiritual_analytics.services.insight_service import NarrativeGenerator

logger = logging.getLogger(__name__)


class HttpNarrativeGenerator(NarrativeGenerator):

    DEFAULT_FUNCTION_PATH = '/functions/v1/spiritual-insights'
    PROBE_PATH = '/rest/v1/'

    def __init__(
        self,
        base_url: str,
        api_key: Optional[str] = None,
        function_path: str = DEFAULT_FUNCTION_PATH,
        timeout_seconds: float = 20.0,
        probe_timeout_seconds: float = 3.0,
        session_factory: Callable[[], requests.Session] = requests.Session
    ):
        if not base_url:
            raise ValueError("base_url is required")
        self.base_url = base_url.rstrip('/')
        self.api_key = api_key
        self.function_path = '/' + function_path.lstrip('/')
        self.timeout_seconds = timeout_seconds
        self.probe_timeout_seconds = probe_timeout_seconds
        self.session_factory = session_factory

    @property
    def function_url(self) -> str:
        return f"{self.base_url}{self.function_path}"

    def probe(self, session: requests.Session) -> None:
        """
        Check that the service host answers at all.

        Any HTTP response counts as reachable; only connection problems fail.

        Raises:
            NarrativeGenerationError: timeout or connection failure
        """
        params = {'apikey': self.api_key} if self.api_key else None
        try:
            session.head(
                f"{self.base_url}{self.PROBE_PATH}",
                params=params,
                headers={'Content-Type': 'application/json'},
                timeout=self.probe_timeout_seconds
            )
        except requests.exceptions.Timeout as e:
            raise NarrativeGenerationError(
                f"Insights service probe timed out after {self.probe_timeout_seconds}s"
            ) from e
        except requests.exceptions.RequestException as e:
            raise NarrativeGenerationError(f"Insights service is unreachable: {e}") from e

    def generate(self, user_id: str, time_range: TimeRange, report: AnalyticsReport) -> List[Insight]:
        with self.session_factory() as session:
            return self._generate(session, user_id, time_range, report)

    def _generate(
        self,
        session: requests.Session,
        user_id: str,
        time_range: TimeRange,
        report: AnalyticsReport
    ) -> List[Insight]:
        self.probe(session)

        headers = {'Content-Type': 'application/json'}
        if self.api_key:
            headers['Authorization'] = f"Bearer {self.api_key}"

        payload = {
            'userId': str(user_id),
            'timeRange': time_range.value,
            'analytics': report.to_dict(include_insights=False),
        }

        try:
            response = session.post(
                self.function_url,
                json=payload,
                headers=headers,
                timeout=self.timeout_seconds
            )
        except requests.exceptions.Timeout as e:
            raise NarrativeGenerationError(
                f"Insights request timed out after {self.timeout_seconds}s"
            ) from e
        except requests.exceptions.RequestException as e:
            raise NarrativeGenerationError(f"Insights request failed: {e}") from e

        if not response.ok:
            raise NarrativeGenerationError(f"Error generating insights: {response.status_code}")

        try:
            body = response.json()
        except ValueError as e:
            raise NarrativeGenerationError("Insights response is not valid JSON") from e

        try:
            result = InsightsResponseSchema().load(body)
        except ValidationError as e:
            raise NarrativeGenerationError(f"Invalid insights payload: {e.messages}") from e

        logger.info("Generated %d insight(s) for user %s", len(result['insights']), user_id)
        return result['insights']
