"""
Recipe Box Configuration

One class per environment; FLASK_ENV picks which one app.py loads.
"""

import os

# Base directory of the application
BASE_DIR = os.path.dirname(os.path.abspath(__file__))


class Config:
    """Settings shared by every environment."""

    SECRET_KEY = os.environ.get('SECRET_KEY', 'dev-only-change-in-production')

    # Database (recipes, ingredients and stored recipe photos)
    SQLALCHEMY_DATABASE_URI = os.environ.get(
        'DATABASE_URL', 'sqlite:///' + os.path.join(BASE_DIR, 'recipe_box.db')
    )
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Request bodies: recipe text files and photos
    MAX_CONTENT_LENGTH = 16 * 1024 * 1024
    IMPORT_ENCODING = os.environ.get('IMPORT_ENCODING', 'utf-8')
    ALLOWED_EXTENSIONS = {'png', 'jpg', 'jpeg', 'gif', 'webp'}
    IMAGE_MAX_SIDE = 2048

    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO').upper()
    LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


class DevelopmentConfig(Config):
    DEBUG = True
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'DEBUG').upper()


class ProductionConfig(Config):
    DEBUG = False


class TestingConfig(Config):
    """In-memory database, rebuilt per test by the fixtures."""
    TESTING = True
    SQLALCHEMY_DATABASE_URI = 'sqlite:///:memory:'
    IMAGE_MAX_SIDE = 256


config = {
    'development': DevelopmentConfig,
    'production': ProductionConfig,
    'testing': TestingConfig,
    'default': DevelopmentConfig
}


def get_config(env=None):
    """Config class for env, or for FLASK_ENV when env is None."""
    if env is None:
        env = os.environ.get('FLASK_ENV', 'development')
    return config.get(env, config['default'])
