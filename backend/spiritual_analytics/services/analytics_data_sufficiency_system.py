from typing import Dict, List
from enum import Enum

from spiritual_analytics.models.analytics_report import DataSufficiency, SufficiencyResult


class ConfidenceLevel(Enum):
    """Confidence levels for analytics results"""
    INSUFFICIENT = "insufficient"
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class AnalysisType(Enum):
    """Report analyses that depend on how much data is available"""
    TREND = "trend"
    CORRELATION = "correlation"
    GROWTH_CURVE = "growth_curve"
    DAY_OF_WEEK = "day_of_week"


class DataSufficiencyChecker:
    """Determines how much confidence each analysis deserves for a data set."""

    # Below these counts an analysis returns its neutral default
    MINIMUM_REQUIREMENTS = {
        AnalysisType.TREND: 3,
        AnalysisType.CORRELATION: 3,
        AnalysisType.GROWTH_CURVE: 2,
        AnalysisType.DAY_OF_WEEK: 1,
    }

    # Recommended entries for high confidence
    RECOMMENDED_REQUIREMENTS = {
        AnalysisType.TREND: 14,
        AnalysisType.CORRELATION: 10,
        AnalysisType.GROWTH_CURVE: 8,
        AnalysisType.DAY_OF_WEEK: 14,
    }

    @staticmethod
    def minimum_for(analysis: AnalysisType) -> int:
        return DataSufficiencyChecker.MINIMUM_REQUIREMENTS[analysis]

    @staticmethod
    def has_enough(analysis: AnalysisType, entry_count: int) -> bool:
        return int(entry_count) >= DataSufficiencyChecker.minimum_for(analysis)

    @staticmethod
    def check(analysis: AnalysisType, entry_count: int) -> SufficiencyResult:
        """Check whether an analysis has enough entries, and how reliable it is."""
        entry_count = int(entry_count)

        min_required = DataSufficiencyChecker.MINIMUM_REQUIREMENTS[analysis]
        recommended = DataSufficiencyChecker.RECOMMENDED_REQUIREMENTS.get(analysis, min_required)

        is_eligible = entry_count >= min_required

        if not is_eligible:
            confidence = ConfidenceLevel.INSUFFICIENT
        elif entry_count < min_required * 1.5:
            confidence = ConfidenceLevel.LOW
        elif entry_count < recommended:
            confidence = ConfidenceLevel.MEDIUM
        else:
            confidence = ConfidenceLevel.HIGH

        return SufficiencyResult(
            analysis=analysis.value,
            entry_count=entry_count,
            min_required=min_required,
            is_eligible=is_eligible,
            confidence=confidence.value,
            message=DataSufficiencyChecker._get_message(
                entry_count, min_required, recommended, confidence
            )
        )

    @staticmethod
    def _get_message(
        entry_count: int,
        min_required: int,
        recommended: int,
        confidence: ConfidenceLevel
    ) -> str:
        """Short status line shown next to each analysis on the dashboard."""
        if confidence == ConfidenceLevel.INSUFFICIENT:
            needed = min_required - entry_count
            plural = 'ies' if needed > 1 else 'y'
            return f"Add {needed} more entr{plural} to see this pattern"

        if confidence == ConfidenceLevel.LOW:
            return "Early pattern - keep checking in for a clearer picture"
        if confidence == ConfidenceLevel.MEDIUM:
            return f"Taking shape - {recommended - entry_count} more entries for a reliable read"
        return "Reliable - based on a full set of entries"

    @staticmethod
    def summarize(entry_counts: Dict[AnalysisType, int]) -> DataSufficiency:
        """
        Build the report's sufficiency block.

        Args:
            entry_counts: number of usable entries per analysis

        Returns:
            DataSufficiency with one result per analysis, in AnalysisType order
        """
        results: List[SufficiencyResult] = []
        for analysis in AnalysisType:
            if analysis in entry_counts:
                results.append(DataSufficiencyChecker.check(analysis, entry_counts[analysis]))
        return DataSufficiency(results=tuple(results))
