"""
Correlation analysis between spiritual practices and wellbeing scores.

Supports:
- Practice-to-spiritual correlations (prayer, Bible reading, church attendance)
- Practice-to-mood correlations (prayer, Bible reading), used for insights only

Each practice is a 0/1 indicator per check-in and each score is the 1-10
rating of the same check-in; the coefficient is Pearson's r.
"""

import logging
from typing import Callable, Dict, List, Sequence

from spiritual_analytics.models.activity_records import MoodEntry
from spiritual_analytics.models.analytics_report import Correlations, CorrelationValue
from spiritual_analytics.services.analytics_base import AnalyticsStatsCalculator
from spiritual_analytics.services.analytics_data_sufficiency_system import (
    AnalysisType,
    DataSufficiencyChecker
)

logger = logging.getLogger(__name__)


class CorrelationService:
    """Detect relationships between practices and wellbeing."""

    # Correlation strength thresholds
    MEANINGFUL_CORRELATION = 0.3
    STRONG_CORRELATION = 0.5

    INSUFFICIENT_DATA_INSIGHT = 'Not enough data to analyze correlations yet.'
    DEFAULT_INSIGHT = (
        'Your spiritual practices show potential connections to your wellbeing, '
        'but more data will help clarify these patterns.'
    )
    COMBINED_INSIGHT = (
        'The combination of prayer and Bible reading shows an especially strong '
        'impact on your spiritual life.'
    )

    # (practice, score) -> message when r exceeds MEANINGFUL_CORRELATION
    PAIR_INSIGHTS = [
        (('prayer', 'spiritual'), 'Prayer appears to significantly strengthen your spiritual wellbeing.'),
        (('bible', 'spiritual'), 'Bible reading has a strong positive impact on your spiritual state.'),
        (('church', 'spiritual'), 'Church attendance correlates well with your spiritual growth.'),
        (('prayer', 'mood'), 'Prayer seems to positively impact your emotional wellbeing as well.'),
        (('bible', 'mood'), 'Bible reading appears to boost both your spiritual and emotional health.'),
    ]

    # Practices reported in the activities list, in display order
    REPORTED_PRACTICES = [
        ('prayer', 'Prayer'),
        ('bible', 'Bible Reading'),
        ('church', 'Church Attendance'),
    ]

    PRACTICES: Dict[str, Callable[[MoodEntry], bool]] = {
        'prayer': lambda e: e.prayer_time,
        'bible': lambda e: e.bible_reading,
        'church': lambda e: e.church_attendance,
    }

    SCORES: Dict[str, Callable[[MoodEntry], float]] = {
        'spiritual': lambda e: e.spiritual_score,
        'mood': lambda e: e.mood_score,
    }

    @staticmethod
    def correlate(mood_entries: Sequence[MoodEntry], practice: str, score: str) -> float:
        """Pearson r between a practice indicator and a score series."""
        indicator = CorrelationService.PRACTICES[practice]
        score_fn = CorrelationService.SCORES[score]
        return AnalyticsStatsCalculator.pearson(
            [1.0 if indicator(e) else 0.0 for e in mood_entries],
            [score_fn(e) for e in mood_entries]
        )

    @staticmethod
    def scored_entry_count(mood_entries: Sequence[MoodEntry]) -> int:
        """Check-ins with a spiritual score, i.e. usable correlation pairs."""
        return sum(1 for e in mood_entries if e.spiritual_score is not None)

    @staticmethod
    def analyze(mood_entries: Sequence[MoodEntry]) -> Correlations:
        """
        Correlate practices with wellbeing and describe the meaningful ones.

        Returns:
            Correlations with the three practice-to-spiritual coefficients
            (rounded to 2 decimals) and at least one insight string
        """
        if not DataSufficiencyChecker.has_enough(
            AnalysisType.CORRELATION, CorrelationService.scored_entry_count(mood_entries)
        ):
            return Correlations(
                activities=(),
                insights=(CorrelationService.INSUFFICIENT_DATA_INSIGHT,)
            )

        coefficients = {
            (practice, score): CorrelationService.correlate(mood_entries, practice, score)
            for (practice, score), _ in CorrelationService.PAIR_INSIGHTS
        }

        insights = CorrelationService._generate_correlation_insights(coefficients)

        activities = tuple(
            CorrelationValue(name=label, value=round(coefficients[(practice, 'spiritual')], 2))
            for practice, label in CorrelationService.REPORTED_PRACTICES
        )

        logger.debug("Correlation coefficients: %s", coefficients)
        return Correlations(activities=activities, insights=tuple(insights))

    @staticmethod
    def _generate_correlation_insights(coefficients: Dict) -> List[str]:
        insights = [
            message
            for pair, message in CorrelationService.PAIR_INSIGHTS
            if coefficients[pair] > CorrelationService.MEANINGFUL_CORRELATION
        ]

        if (coefficients[('prayer', 'spiritual')] > CorrelationService.STRONG_CORRELATION
                and coefficients[('bible', 'spiritual')] > CorrelationService.STRONG_CORRELATION):
            insights.append(CorrelationService.COMBINED_INSIGHT)

        if not insights:
            insights.append(CorrelationService.DEFAULT_INSIGHT)

        return insights
