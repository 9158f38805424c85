"""
Narrative insight synthesis.

The synthesizer attaches insights to a finished report, trying in order:

1. a cache entry generated today
2. the external narrative generator (result is cached)
3. an older cache entry
4. rule-based static insights

Only step 2 performs I/O. It runs on a worker thread with a deadline and
can be cancelled by the caller; a timeout, a cancellation or any generator
error moves on to step 3. The returned report always carries at least one
insight.
"""

import logging
import threading
import time
from abc import ABC, abstractmethod
from concurrent.futures import ThreadPoolExecutor, TimeoutError as FutureTimeoutError
from datetime import datetime
from enum import Enum
from typing import List, Optional, Tuple

from spiritual_analytics.models.analytics_report import (
    AnalyticsReport,
    CacheEntry,
    Insight,
    InsightType,
    Scripture,
    TimeRange,
    Trend
)
from spiritual_analytics.services.exceptions import NarrativeGenerationError

logger = logging.getLogger(__name__)


# ============================================================================
# COLLABORATORS
# ============================================================================

class InsightCache(ABC):
    """Stores one CacheEntry per (user, time range)."""

    @abstractmethod
    def get(self, user_id: str, time_range: TimeRange) -> Optional[CacheEntry]:
        raise NotImplementedError

    @abstractmethod
    def put(self, user_id: str, time_range: TimeRange, entry: CacheEntry) -> None:
        raise NotImplementedError


class NarrativeGenerator(ABC):
    """Turns an analytics report into narrative insights."""

    @abstractmethod
    def generate(self, user_id: str, time_range: TimeRange, report: AnalyticsReport) -> List[Insight]:
        """
        Raises:
            NarrativeGenerationError: the insights could not be produced
        """
        raise NotImplementedError


# ============================================================================
# STATIC INSIGHTS
# ============================================================================

class StaticInsightGenerator:
    """Deterministic insights built from the report's own metrics."""

    STRONG_CONSISTENCY = 0.6
    MOMENTUM_STREAK = 3

    @staticmethod
    def generate(report: AnalyticsReport) -> List[Insight]:
        insights = []

        strength = StaticInsightGenerator._strength_insight(report)
        if strength:
            insights.append(strength)

        growth = StaticInsightGenerator._growth_insight(report)
        if growth:
            insights.append(growth)

        insights.append(StaticInsightGenerator._opportunity_insight(report))
        return insights

    @staticmethod
    def _strength_insight(report: AnalyticsReport) -> Optional[Insight]:
        if report.trends.spiritual == Trend.IMPROVING:
            return Insight(
                type=InsightType.STRENGTH,
                title='Growing Spiritual Health',
                content='Your spiritual wellbeing scores have been trending upward, showing that '
                        'your practices are bearing fruit in your life.',
                scripture=Scripture(
                    reference='Galatians 6:9',
                    text='Let us not become weary in doing good, for at the proper time we will '
                         'reap a harvest if we do not give up.'
                )
            )

        overall = report.consistency.overall
        if overall > StaticInsightGenerator.STRONG_CONSISTENCY:
            return Insight(
                type=InsightType.STRENGTH,
                title='Consistent Spiritual Practices',
                content="You've been remarkably consistent in your spiritual activities, logging "
                        f"activity on {round(overall * 100)}% of days in this period.",
                scripture=Scripture(
                    reference='1 Corinthians 15:58',
                    text='Therefore, my dear brothers and sisters, stand firm. Let nothing move you. '
                         'Always give yourselves fully to the work of the Lord, because you know '
                         'that your labor in the Lord is not in vain.'
                )
            )
        return None

    @staticmethod
    def _growth_insight(report: AnalyticsReport) -> Optional[Insight]:
        positives = report.patterns.positives
        if positives:
            return Insight(
                type=InsightType.GROWTH,
                title='Positive Growth Trajectory',
                content=positives[0],
                scripture=Scripture(
                    reference='Philippians 1:6',
                    text='Being confident of this, that he who began a good work in you will carry '
                         'it on to completion until the day of Christ Jesus.'
                )
            )

        current = report.streaks.current
        if current > StaticInsightGenerator.MOMENTUM_STREAK:
            return Insight(
                type=InsightType.GROWTH,
                title='Building Momentum',
                content=f"You're currently on a {current}-day streak of spiritual activity. "
                        "Consistency is key to long-term spiritual growth.",
                scripture=Scripture(
                    reference='Hebrews 12:1',
                    text='Therefore, since we are surrounded by such a great cloud of witnesses, '
                         'let us throw off everything that hinders and the sin that so easily '
                         'entangles. And let us run with perseverance the race marked out for us.'
                )
            )
        return None

    @staticmethod
    def _opportunity_insight(report: AnalyticsReport) -> Insight:
        opportunities = report.patterns.opportunities
        if opportunities:
            return Insight(
                type=InsightType.OPPORTUNITY,
                title='Growth Opportunity',
                content=opportunities[0],
                scripture=Scripture(
                    reference='2 Peter 3:18',
                    text='But grow in the grace and knowledge of our Lord and Savior Jesus Christ. '
                         'To him be glory both now and forever! Amen.'
                )
            )

        return Insight(
            type=InsightType.OPPORTUNITY,
            title='Next Steps in Your Journey',
            content='Consider setting specific spiritual goals for the coming weeks to build on '
                    'your current foundation.',
            scripture=Scripture(
                reference='Proverbs 16:9',
                text='In their hearts humans plan their course, but the LORD establishes their steps.'
            )
        )


# ============================================================================
# SYNTHESIZER
# ============================================================================

class InsightSource(Enum):
    FRESH_CACHE = 'fresh_cache'
    GENERATED = 'generated'
    STALE_CACHE = 'stale_cache'
    STATIC = 'static'


class InsightSynthesizer:
    """Cache-aware orchestration around the narrative generator."""

    DEFAULT_TIMEOUT_SECONDS = 20.0

    # How often a pending generator call checks for cancellation
    CANCEL_POLL_SECONDS = 0.05

    def __init__(
        self,
        cache: Optional[InsightCache] = None,
        generator: Optional[NarrativeGenerator] = None,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS
    ):
        self.cache = cache
        self.generator = generator
        self.timeout_seconds = timeout_seconds

    def synthesize(
        self,
        user_id: str,
        report: AnalyticsReport,
        now: Optional[datetime] = None,
        cancel_event: Optional[threading.Event] = None
    ) -> AnalyticsReport:
        """Return a copy of the report with insights attached."""
        insights, source = self.resolve_insights(user_id, report, now, cancel_event)
        logger.info(
            "Insights for user %s (%s) served from %s",
            user_id, report.time_range.value, source.value
        )
        return report.with_insights(insights)

    def resolve_insights(
        self,
        user_id: str,
        report: AnalyticsReport,
        now: Optional[datetime] = None,
        cancel_event: Optional[threading.Event] = None
    ) -> Tuple[List[Insight], InsightSource]:
        now = now or datetime.now()
        time_range = report.time_range

        # 1. Same-day cache
        cached = self.read_cache(user_id, time_range)
        if cached and cached.insights and cached.is_fresh(now.date()):
            return list(cached.insights), InsightSource.FRESH_CACHE

        # 2. Live generation
        if self.generator is not None:
            try:
                insights = self._generate_with_deadline(user_id, report, cancel_event)
            except NarrativeGenerationError as e:
                logger.warning("Narrative generation failed for user %s: %s", user_id, e)
            except Exception:
                logger.exception("Unexpected narrative generator error for user %s", user_id)
            else:
                self._write_cache(user_id, report, insights, now)
                return insights, InsightSource.GENERATED
        else:
            logger.debug("No narrative generator configured")

        # 3. Older cache entry
        if cached and cached.insights:
            return list(cached.insights), InsightSource.STALE_CACHE

        # 4. Rule-based fallback
        return StaticInsightGenerator.generate(report), InsightSource.STATIC

    def _generate_with_deadline(
        self,
        user_id: str,
        report: AnalyticsReport,
        cancel_event: Optional[threading.Event]
    ) -> List[Insight]:
        if cancel_event is not None and cancel_event.is_set():
            raise NarrativeGenerationError("Narrative generation cancelled before start")

        executor = ThreadPoolExecutor(max_workers=1)
        try:
            future = executor.submit(self.generator.generate, user_id, report.time_range, report)
            deadline = time.monotonic() + self.timeout_seconds
            while True:
                try:
                    insights = future.result(timeout=self.CANCEL_POLL_SECONDS)
                    break
                except FutureTimeoutError:
                    if cancel_event is not None and cancel_event.is_set():
                        future.cancel()
                        raise NarrativeGenerationError("Narrative generation cancelled")
                    if time.monotonic() >= deadline:
                        future.cancel()
                        raise NarrativeGenerationError(
                            f"Narrative generation timed out after {self.timeout_seconds}s"
                        )
        finally:
            # A hung call is abandoned, not awaited
            executor.shutdown(wait=False)

        insights = list(insights or [])
        if not insights:
            raise NarrativeGenerationError("Narrative generator returned no insights")
        return insights

    def read_cache(self, user_id: str, time_range: TimeRange) -> Optional[CacheEntry]:
        """Stored entry for the key, or None when absent or unreadable."""
        if self.cache is None:
            return None
        try:
            return self.cache.get(user_id, time_range)
        except Exception:
            logger.exception("Insight cache read failed for user %s", user_id)
            return None

    def _write_cache(
        self,
        user_id: str,
        report: AnalyticsReport,
        insights: List[Insight],
        now: datetime
    ) -> None:
        if self.cache is None:
            return
        entry = CacheEntry(
            insights=tuple(insights),
            analytics_data=report.to_dict(include_insights=False),
            generated_at=now
        )
        try:
            self.cache.put(user_id, report.time_range, entry)
        except Exception:
            logger.exception("Insight cache write failed for user %s", user_id)
