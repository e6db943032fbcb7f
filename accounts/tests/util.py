"""Testing helpers."""

from typing import Any

from flask import Flask

from ..factory import create_web_app

TEST_CONFIG = {
    'SQLALCHEMY_DATABASE_URI': 'sqlite://',
    'SQLALCHEMY_ENGINE_OPTIONS': {},
    'REDIS_FAKE': True,
    'JWT_SECRET': 'foosecret',
    'SESSION_DURATION': '3600',
    'PROFILE_CACHE_TTL': '300',
    'BCRYPT_ROUNDS': '4',
    'CREATE_DB': True
}


def create_test_app(**overrides: Any) -> Flask:
    """Get an app backed by an in-memory database and a fake Redis."""
    config = dict(TEST_CONFIG)
    config.update(overrides)
    return create_web_app(config)
