import os
import re
from datetime import timedelta


def parse_duration(value, default):
    """Turn '15m' / '7d' / '3600' style strings into a timedelta."""
    if not value:
        return default
    match = re.fullmatch(r'\s*(\d+)\s*([smhd]?)\s*', str(value))
    if not match:
        raise ValueError(f'Invalid duration: {value!r}')
    amount, unit = int(match.group(1)), match.group(2) or 's'
    return {
        's': timedelta(seconds=amount),
        'm': timedelta(minutes=amount),
        'h': timedelta(hours=amount),
        'd': timedelta(days=amount),
    }[unit]


def check_required_env(config_class):
    """Fail fast when a config lists environment variables that are unset."""
    for name in getattr(config_class, 'REQUIRED_ENV', ()):
        if not os.environ.get(name):
            raise RuntimeError(f'Missing env var: {name}')


class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'your-secret-key-here'
    # Relative SQLite paths resolve inside the Flask instance folder
    SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL') or 'sqlite:///bdr_dragon.db'
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Token configuration
    JWT_ACCESS_SECRET = os.environ.get('JWT_ACCESS_SECRET') or 'dev-access-secret'
    JWT_REFRESH_SECRET = os.environ.get('JWT_REFRESH_SECRET') or 'dev-refresh-secret'
    JWT_ACCESS_EXPIRES = parse_duration(os.environ.get('JWT_ACCESS_EXPIRES_IN'), timedelta(minutes=15))
    JWT_REFRESH_EXPIRES = parse_duration(os.environ.get('JWT_REFRESH_EXPIRES_IN'), timedelta(days=7))

    # Cookie configuration
    AUTH_COOKIE_SECURE = False
    AUTH_COOKIE_SAMESITE = 'Lax'

    BCRYPT_ROUNDS = int(os.environ.get('BCRYPT_ROUNDS') or 12)

    CORS_ORIGINS = [
        os.environ.get('CORS_ORIGIN') or 'http://localhost:5173',
        'http://localhost:5173',
        'http://localhost:3000',
        'https://noahcoleman76.github.io',
    ]

    # Environment variables that must be set for this config to start
    REQUIRED_ENV = ()

    # Logging
    LOG_LEVEL = os.environ.get('LOG_LEVEL') or 'INFO'
    LOG_FILE = os.environ.get('LOG_FILE')

    DEBUG = False
    TESTING = False

class DevelopmentConfig(Config):
    DEBUG = True

class ProductionConfig(Config):
    DEBUG = False
    # Front end is served from a different site, so cookies must be cross-site
    AUTH_COOKIE_SECURE = True
    AUTH_COOKIE_SAMESITE = 'None'
    # Dev fallbacks are not accepted in production
    REQUIRED_ENV = ('DATABASE_URL', 'JWT_ACCESS_SECRET', 'JWT_REFRESH_SECRET', 'SECRET_KEY')

class TestingConfig(Config):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = 'sqlite:///:memory:'
    JWT_ACCESS_SECRET = 'test-access-secret'
    JWT_REFRESH_SECRET = 'test-refresh-secret'
    BCRYPT_ROUNDS = 4
    LOG_LEVEL = 'WARNING'

config = {
    'development': DevelopmentConfig,
    'production': ProductionConfig,
    'testing': TestingConfig,
    'default': DevelopmentConfig
}
