import logging
from flask import Blueprint, request, jsonify, current_app
from flask_jwt_extended import get_jwt_identity, jwt_required
from marshmallow import ValidationError
from typing import Tuple, Dict, Any

from spiritual_analytics.models.analytics_report import TimeRange
from spiritual_analytics.schemas.activity_schemas import AnalyticsRequestSchema
from spiritual_analytics.services.analytics_service import AnalyticsService
from spiritual_analytics.services.exceptions import InvalidTimeRangeError
from spiritual_analytics.services.insight_service import InsightSynthesizer

logger = logging.getLogger(__name__)

analytics_bp = Blueprint('analytics', __name__)

# HELPER FUNCTIONS
def error_response(message: str, status_code: int = 400, details: Dict[str, Any] = None) -> Tuple[Dict, int]:
    response = {'error': message}
    if details:
        response['details'] = details
    return jsonify(response), status_code

def success_response(message: str, data: Dict[str, Any] = None, status_code: int = 200) -> Tuple[Dict, int]:
    response = {'message': message}
    if data:
        response['data'] = data
    return jsonify(response), status_code

def get_synthesizer() -> InsightSynthesizer:
    return current_app.extensions['insight_synthesizer']


# ANALYTICS ENDPOINTS
@analytics_bp.route('/<time_range>/report', methods=['POST'])
@jwt_required()
def build_report(time_range):
    """
    Build the spiritual analytics report for the given window.

    Body: the collections already fetched for the window
    (moodEntries, prayerRequests, journalEntries, scriptureMemory,
    bibleStudyNotes, devotionalProgress, habitLogs, readingProgress).
    """
    try:
        parsed_range = TimeRange.parse(time_range)
    except InvalidTimeRangeError as e:
        return error_response(str(e), 400)

    user_id = str(get_jwt_identity())

    try:
        collections = AnalyticsRequestSchema().load(request.get_json(silent=True) or {})
    except ValidationError as e:
        return error_response("Invalid activity data", 400, e.messages)

    report = AnalyticsService.build_report(parsed_range, collections)
    report = get_synthesizer().synthesize(user_id, report)

    return success_response("Analytics report generated", report.to_dict())


@analytics_bp.route('/<time_range>/cache', methods=['GET'])
@jwt_required()
def get_cached_insights(time_range):
    """Return the stored insight cache entry for the current user."""
    try:
        parsed_range = TimeRange.parse(time_range)
    except InvalidTimeRangeError as e:
        return error_response(str(e), 400)

    user_id = str(get_jwt_identity())
    entry = get_synthesizer().read_cache(user_id, parsed_range)

    if entry is None:
        return error_response("No cached insights found", 404)

    return success_response("Cached insights retrieved", entry.to_dict())
