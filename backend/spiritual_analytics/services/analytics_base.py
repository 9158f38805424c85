# ============================================================================
# SHARED ANALYTICS BASE LAYER
# ============================================================================


import logging
from dataclasses import dataclass
from typing import List, Any, Optional, FrozenSet, Iterable, Sequence, Tuple
from datetime import date
import numpy as np
from scipy import stats

from spiritual_analytics.models.activity_records import ActivityRecord, ActivityCollections
from spiritual_analytics.models.analytics_report import TimeWindow
from spiritual_analytics.services.exceptions import DateExtractionError
from spiritual_analytics.utils.date_utils import parse_calendar_date

logger = logging.getLogger(__name__)


class DateExtractor:

    @staticmethod
    def extract(record: Any) -> date:
        """
        Return the canonical calendar date of an activity record.

        Only typed records are accepted; each variant knows its own date
        field. Raw payloads are converted by the request schemas first.

        Raises:
            DateExtractionError: no date field present, or its value is not a date
        """
        if isinstance(record, ActivityRecord):
            return record.extract_date()

        raise DateExtractionError(
            f"Unsupported record type: {type(record).__name__}", record=record
        )

    @staticmethod
    def extract_or_none(record: Any) -> Optional[date]:
        """Like extract(), but logs and returns None for undatable records."""
        try:
            return DateExtractor.extract(record)
        except DateExtractionError as e:
            logger.warning("Skipping record without a usable date: %s", e)
            return None

    @staticmethod
    def sort_by_date(records: Iterable[Any]) -> List[Tuple[date, Any]]:
        """
        Pair each record with its date and sort ascending.

        Undatable records are skipped (and logged). Records sharing a date
        keep their input order.
        """
        dated = []
        for record in records:
            record_date = DateExtractor.extract_or_none(record)
            if record_date is not None:
                dated.append((record_date, record))
        dated.sort(key=lambda item: item[0])
        return dated


@dataclass(frozen=True)
class AggregatedActivity:
    activity_days: FrozenSet[date]
    total_days: int
    total_entry_count: int
    skipped_records: int = 0

    @property
    def activity_days_count(self) -> int:
        return len(self.activity_days)


class ActivityAggregator:
    """
    Merges the per-category collections into a single activity-day view.
    """

    @staticmethod
    def aggregate(collections: ActivityCollections, window: TimeWindow) -> AggregatedActivity:
        """
        Build the unified activity-day set for a window.

        Every record of every category is dated through the DateExtractor;
        duplicate days collapse. Records without a usable date are skipped
        and counted in `skipped_records`.
        """
        activity_days = set()
        skipped = 0

        for records in collections.by_category().values():
            for record in records:
                record_date = DateExtractor.extract_or_none(record)
                if record_date is None:
                    skipped += 1
                    continue
                activity_days.add(record_date)

        if skipped:
            logger.warning("Excluded %d undatable record(s) from aggregation", skipped)

        return AggregatedActivity(
            activity_days=frozenset(activity_days),
            total_days=window.total_days,
            total_entry_count=collections.total_count(),
            skipped_records=skipped
        )

    @staticmethod
    def unique_days(records: Iterable[Any]) -> FrozenSet[date]:
        days = set()
        for record in records:
            record_date = DateExtractor.extract_or_none(record)
            if record_date is not None:
                days.add(record_date)
        return frozenset(days)


class AnalyticsStatsCalculator:
    """
    Shared numeric helpers. Every helper guards empty input and zero
    denominators and returns 0.0 instead of NaN.
    """

    @staticmethod
    def safe_mean(values: Iterable[Optional[float]]) -> float:
        numeric_values = [v for v in values if v is not None]
        if not numeric_values:
            return 0.0
        return float(np.mean(np.array(numeric_values, dtype=float)))

    @staticmethod
    def safe_ratio(numerator: float, denominator: float, cap: Optional[float] = None) -> float:
        if not denominator:
            return 0.0
        ratio = numerator / denominator
        if cap is not None:
            ratio = min(cap, ratio)
        return float(ratio)

    @staticmethod
    def pearson(x_values: Sequence[float], y_values: Sequence[Optional[float]]) -> float:
        """
        Pearson correlation coefficient clipped to [-1, 1].

        Pairs whose y value is missing are dropped. Returns 0.0 when fewer
        than two pairs remain or when either series is constant.
        """
        pairs = [(x, y) for x, y in zip(x_values, y_values) if x is not None and y is not None]
        if len(pairs) < 2:
            return 0.0

        x = np.array([p[0] for p in pairs], dtype=float)
        y = np.array([p[1] for p in pairs], dtype=float)

        # Zero variance on either side
        if np.all(x == x[0]) or np.all(y == y[0]):
            return 0.0

        r_value, _ = stats.pearsonr(x, y)
        r_value = float(r_value)
        if np.isnan(r_value):
            return 0.0
        return float(np.clip(r_value, -1.0, 1.0))
