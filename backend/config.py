import os
from datetime import timedelta
from dotenv import load_dotenv

load_dotenv()

class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY')

    # Database
    SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL')
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # JWT Configuration
    JWT_SECRET_KEY = os.environ.get('JWT_SECRET_KEY')
    JWT_ACCESS_TOKEN_EXPIRES = timedelta(hours=24)

    # Narrative insights service
    INSIGHTS_SERVICE_URL = os.environ.get('INSIGHTS_SERVICE_URL')
    INSIGHTS_FUNCTION_PATH = os.environ.get('INSIGHTS_FUNCTION_PATH', '/functions/v1/spiritual-insights')
    INSIGHTS_API_KEY = os.environ.get('INSIGHTS_API_KEY')
    INSIGHTS_TIMEOUT_SECONDS = float(os.environ.get('INSIGHTS_TIMEOUT_SECONDS', 20))
    INSIGHTS_PROBE_TIMEOUT_SECONDS = float(os.environ.get('INSIGHTS_PROBE_TIMEOUT_SECONDS', 3))

    # 'database' or 'memory'
    INSIGHTS_CACHE_BACKEND = os.environ.get('INSIGHTS_CACHE_BACKEND', 'database')

    # Logging
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')

    # Flask settings
    DEBUG = False
    TESTING = False

class DevelopmentConfig(Config):
    DEBUG = True
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'DEBUG')

class ProductionConfig(Config):
    DEBUG = False

class TestingConfig(Config):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = os.environ.get('TEST_DATABASE_URL', 'sqlite://')
    SECRET_KEY = 'test-secret-key'
    JWT_SECRET_KEY = 'test-jwt-secret-key-with-enough-length'
    INSIGHTS_SERVICE_URL = None

config = {
    'development': DevelopmentConfig,
    'production': ProductionConfig,
    'testing': TestingConfig,
    'default': DevelopmentConfig
}
