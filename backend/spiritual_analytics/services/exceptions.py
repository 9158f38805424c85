"""
Error types raised by the analytics engine.
"""


class AnalyticsError(Exception):
    """Base class for analytics engine errors."""
    pass


class DateExtractionError(AnalyticsError):
    """Raised when an activity record carries no usable date."""

    def __init__(self, message: str, record=None):
        super().__init__(message)
        self.record = record


class InvalidTimeRangeError(AnalyticsError, ValueError):
    """Raised when a time range is not one of week, month, quarter, year."""
    pass


class NarrativeGenerationError(AnalyticsError):
    """Raised when the external narrative generator cannot produce insights."""
    pass
