# Routes package
from .analytics import analytics_bp

__all__ = ['analytics_bp']
