import os
from dotenv import load_dotenv

load_dotenv()


def _float_env(name, default):
    return float(os.getenv(name, str(default)))


class Config:
    """Base configuration"""
    SECRET_KEY = os.getenv('SECRET_KEY') or 'dev-secret-key-change-in-production'

    SQLALCHEMY_DATABASE_URI = os.getenv('DATABASE_URL', 'sqlite:///rxprint.db')
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ENGINE_OPTIONS = {
        'pool_pre_ping': True,
    }

    # Document assets: full URLs, data: URIs or paths under the static folder
    HEADER_IMAGE_URL = os.getenv('HEADER_IMAGE_URL', 'images/header.png')
    WATERMARK_IMAGE_URL = os.getenv('WATERMARK_IMAGE_URL', 'images/watermark.png')
    SEPARATOR_IMAGE_URL = os.getenv('SEPARATOR_IMAGE_URL', 'images/separator.png')
    DEFAULT_PATIENT_IMAGE_URL = os.getenv('DEFAULT_PATIENT_IMAGE_URL', 'images/default-patient.png')
    ASSET_TIMEOUT = _float_env('ASSET_TIMEOUT', 5)  # seconds per asset

    # Rendering
    RASTER_SCALE = _float_env('RASTER_SCALE', 2)  # capture density vs. screen
    PDF_FONT_PATH = os.getenv('PDF_FONT_PATH')  # TTF with the rupee glyph, e.g. DejaVuSans.ttf
    FOOTER_CAPTION = os.getenv('FOOTER_CAPTION', '')
    PRINT_PAGE_SIZE = os.getenv('PRINT_PAGE_SIZE', 'A4')

    CORS_ORIGINS = os.getenv('CORS_ORIGINS', '*')

    # Logging
    LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO')
    LOG_FILE = os.getenv('LOG_FILE', 'app.log')


class DevelopmentConfig(Config):
    """Development configuration"""
    DEBUG = True
    TESTING = False


class ProductionConfig(Config):
    """Production configuration"""
    DEBUG = False
    TESTING = False

    SESSION_COOKIE_HTTPONLY = True
    SESSION_COOKIE_SAMESITE = 'Lax'

    SQLALCHEMY_ENGINE_OPTIONS = {
        'pool_pre_ping': True,
        'pool_recycle': 3600,
    }

    # Logging
    LOG_LEVEL = os.getenv('LOG_LEVEL', 'WARNING')


class TestingConfig(Config):
    """Testing configuration"""
    TESTING = True
    DEBUG = True
    SQLALCHEMY_DATABASE_URI = os.getenv('TEST_DATABASE_URL', 'sqlite:///:memory:')
    SQLALCHEMY_ENGINE_OPTIONS = {}

    # No network or disk assets unless a test sets them
    HEADER_IMAGE_URL = None
    WATERMARK_IMAGE_URL = None
    SEPARATOR_IMAGE_URL = None
    DEFAULT_PATIENT_IMAGE_URL = None
    PDF_FONT_PATH = None
    RASTER_SCALE = 1


# Configuration mapping
config = {
    'development': DevelopmentConfig,
    'production': ProductionConfig,
    'testing': TestingConfig,
    'default': DevelopmentConfig
}


def get_config():
    """Get configuration based on FLASK_ENV"""
    env = os.getenv('FLASK_ENV', 'development')
    return config.get(env, config['default'])
