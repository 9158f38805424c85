from flask import Flask
from flask_sqlalchemy import SQLAlchemy
from flask_migrate import Migrate
from flask_cors import CORS
from flask_jwt_extended import JWTManager
from config import config

# Initialize extensions
db = SQLAlchemy()
migrate = Migrate()
jwt = JWTManager()

def create_app(config_name='development', synthesizer=None):
    """Application factory pattern"""
    app = Flask(__name__)

    # Load configuration
    app.config.from_object(config[config_name])

    from spiritual_analytics.utils.log_utils import setup_logging
    setup_logging(app.config.get('LOG_LEVEL', 'INFO'))

    # Initialize extensions with app
    db.init_app(app)
    migrate.init_app(app, db)
    jwt.init_app(app)
    CORS(app)

    # Import models
    from spiritual_analytics.models import InsightCacheRecord

    # Insight synthesis collaborators
    app.extensions['insight_synthesizer'] = synthesizer or build_insight_synthesizer(app.config)

    # Register blueprints
    from spiritual_analytics.routes.analytics import analytics_bp
    app.register_blueprint(analytics_bp, url_prefix='/api/analytics')

    # Health check endpoint
    @app.route('/api/health')
    def health_check():
        return {'status': 'healthy', 'message': 'Spiritual Analytics API is running'}

    return app

def build_insight_synthesizer(app_config):
    """Wire the cache and, when a service URL is configured, the narrative generator."""
    from spiritual_analytics.services.insight_cache_service import InMemoryInsightCache, SqlAlchemyInsightCache
    from spiritual_analytics.services.insight_service import InsightSynthesizer
    from spiritual_analytics.services.narrative_client import HttpNarrativeGenerator

    if app_config.get('INSIGHTS_CACHE_BACKEND') == 'memory':
        cache = InMemoryInsightCache()
    else:
        cache = SqlAlchemyInsightCache()

    generator = None
    if app_config.get('INSIGHTS_SERVICE_URL'):
        generator = HttpNarrativeGenerator(
            base_url=app_config['INSIGHTS_SERVICE_URL'],
            api_key=app_config.get('INSIGHTS_API_KEY'),
            function_path=app_config['INSIGHTS_FUNCTION_PATH'],
            timeout_seconds=app_config['INSIGHTS_TIMEOUT_SECONDS'],
            probe_timeout_seconds=app_config['INSIGHTS_PROBE_TIMEOUT_SECONDS']
        )

    return InsightSynthesizer(
        cache=cache,
        generator=generator,
        timeout_seconds=app_config['INSIGHTS_TIMEOUT_SECONDS'] + app_config['INSIGHTS_PROBE_TIMEOUT_SECONDS']
    )
