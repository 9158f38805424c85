import logging
import threading
from typing import Dict, Optional, Tuple

from spiritual_analytics import db
from spiritual_analytics.models.analytics_report import CacheEntry, Insight, TimeRange
from spiritual_analytics.models.insight_cache import InsightCacheRecord
from spiritual_analytics.services.insight_service import InsightCache

logger = logging.getLogger(__name__)


class SqlAlchemyInsightCache(InsightCache):
    """Insight cache backed by the user_insights_cache table (upsert by key)."""

    def get(self, user_id: str, time_range: TimeRange) -> Optional[CacheEntry]:
        record = db.session.get(InsightCacheRecord, (str(user_id), time_range.value))
        if record is None:
            return None
        return SqlAlchemyInsightCache._to_entry(record)

    def put(self, user_id: str, time_range: TimeRange, entry: CacheEntry) -> None:
        try:
            record = db.session.get(InsightCacheRecord, (str(user_id), time_range.value))
            if record is None:
                record = InsightCacheRecord(user_id=str(user_id), time_range=time_range.value)
                db.session.add(record)

            record.insights = [i.to_dict() for i in entry.insights]
            record.analytics_data = entry.analytics_data
            record.generated_at = entry.generated_at

            db.session.commit()
        except Exception:
            db.session.rollback()
            raise
        logger.debug("Cached %d insight(s) for user %s (%s)", len(entry.insights), user_id, time_range.value)

    @staticmethod
    def _to_entry(record: InsightCacheRecord) -> CacheEntry:
        return CacheEntry(
            insights=tuple(Insight.from_dict(item) for item in (record.insights or [])),
            analytics_data=record.analytics_data or {},
            generated_at=record.generated_at
        )


class InMemoryInsightCache(InsightCache):
    """Process-local insight cache, used when no database is configured."""

    def __init__(self):
        self._entries: Dict[Tuple[str, str], CacheEntry] = {}
        self._lock = threading.Lock()

    def get(self, user_id: str, time_range: TimeRange) -> Optional[CacheEntry]:
        with self._lock:
            return self._entries.get((str(user_id), time_range.value))

    def put(self, user_id: str, time_range: TimeRange, entry: CacheEntry) -> None:
        with self._lock:
            self._entries[(str(user_id), time_range.value)] = entry
