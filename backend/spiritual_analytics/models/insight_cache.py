from datetime import datetime
from spiritual_analytics import db


class InsightCacheRecord(db.Model):
    """
    Daily narrative insights cache, one row per user and time range.

    insights:        list of {type, title, content, scripture: {reference, text}}
    analytics_data:  the report the insights were generated from
    """
    __tablename__ = 'user_insights_cache'

    user_id = db.Column(db.String(64), primary_key=True)
    time_range = db.Column(db.String(16), primary_key=True)

    insights = db.Column(db.JSON, nullable=False, default=list)
    analytics_data = db.Column(db.JSON, nullable=True)

    generated_at = db.Column(db.DateTime, nullable=False, default=datetime.now)

    __table_args__ = (
        db.CheckConstraint(
            "time_range IN ('week', 'month', 'quarter', 'year')",
            name='ck_user_insights_cache_time_range'
        ),
        db.Index('ix_user_insights_cache_generated_at', 'generated_at'),
    )

    def to_dict(self):
        return {
            'user_id': self.user_id,
            'time_range': self.time_range,
            'insights': self.insights or [],
            'analytics_data': self.analytics_data or {},
            'generated_at': self.generated_at.isoformat() if self.generated_at else None
        }

    def __repr__(self):
        return f'<InsightCacheRecord {self.user_id} - {self.time_range} - {self.generated_at}>'
