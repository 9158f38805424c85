from marshmallow import Schema, fields, validate, post_load, EXCLUDE

from spiritual_analytics.models.analytics_report import Insight, InsightType

INSIGHT_TYPES = [t.value for t in InsightType]


class ScriptureSchema(Schema):
    reference = fields.Str(required=True, validate=validate.Length(min=1, max=200))
    text = fields.Str(required=True, validate=validate.Length(min=1))

    class Meta:
        unknown = EXCLUDE


class InsightSchema(Schema):
    type = fields.Str(required=True, validate=validate.OneOf(INSIGHT_TYPES))
    title = fields.Str(required=True, validate=validate.Length(min=1, max=200))
    content = fields.Str(required=True, validate=validate.Length(min=1))
    scripture = fields.Nested(ScriptureSchema, required=True)

    class Meta:
        unknown = EXCLUDE

    @post_load
    def make_insight(self, data, **kwargs):
        return Insight.from_dict(data)


class InsightsResponseSchema(Schema):
    """Body returned by the narrative generator: {"insights": [...]}"""
    insights = fields.List(
        fields.Nested(InsightSchema),
        required=True,
        validate=validate.Length(min=1)
    )

    class Meta:
        unknown = EXCLUDE
