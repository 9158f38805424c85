from .activity_schemas import AnalyticsRequestSchema
from .insight_schemas import InsightSchema, InsightsResponseSchema

__all__ = ['AnalyticsRequestSchema', 'InsightSchema', 'InsightsResponseSchema']
