"""
Ephemeral session state in Redis.

Two independent keyspaces live here: active-token bookkeeping
(``token:<token>``) and revocation (``token:blacklist:<token>``). There is
also a cache of public account projections (``user:info:<id>``). Nothing in
this module decides whether a failure matters; every Redis error is raised
as :class:`.CacheUnavailable` and the caller chooses to swallow it or not.
"""

import logging
from typing import Any, Optional

import redis
import fakeredis
from flask import Flask, current_app

from ...exceptions import CacheUnavailable

logger = logging.getLogger(__name__)


def token_key(token: str) -> str:
    """Key for the active-token record of ``token``."""
    return f'token:{token}'


def revocation_key(token: str) -> str:
    """Key for the revocation record of ``token``."""
    return f'token:blacklist:{token}'


def profile_key(account_id: int) -> str:
    """Key for the cached public projection of an account."""
    return f'user:info:{account_id}'


class SessionCache(object):
    """
    Manages a connection to Redis.

    The StrictRedis instance is thread safe and connections are attached at
    the time a command is executed. This class provides a container for
    configuration, and translates Redis failures.
    """

    def __init__(self, host: str = 'localhost', port: int = 6379,
                 database: int = 0, password: Optional[str] = None,
                 socket_timeout: Optional[float] = None,
                 fake: bool = False) -> None:
        """Open the connection to Redis."""
        if fake:
            logger.debug('Using in-process fake Redis')
            self.r = fakeredis.FakeStrictRedis(server=fakeredis.FakeServer(),
                                               decode_responses=True)
        else:
            logger.debug('New Redis connection at %s, port %s', host, port)
            self.r = redis.StrictRedis(host=host, port=port, db=database,
                                       password=password,
                                       socket_timeout=socket_timeout,
                                       socket_connect_timeout=socket_timeout,
                                       decode_responses=True)

    def put(self, key: str, value: Any, ttl: int) -> None:
        """
        Set ``key`` to ``value``, expiring after ``ttl`` seconds.

        Raises
        ------
        :class:`.CacheUnavailable`

        """
        try:
            self.r.set(key, value, ex=ttl)
        except redis.exceptions.RedisError as e:
            raise CacheUnavailable(f'failed to set {key}: {e}') from e

    def get(self, key: str) -> Optional[str]:
        """Get the value at ``key``, or ``None`` if there is none."""
        try:
            value: Optional[str] = self.r.get(key)
        except redis.exceptions.RedisError as e:
            raise CacheUnavailable(f'failed to get {key}: {e}') from e
        return value

    def delete(self, key: str) -> None:
        """Remove ``key``. Removing a missing key is not an error."""
        try:
            self.r.delete(key)
        except redis.exceptions.RedisError as e:
            raise CacheUnavailable(f'failed to delete {key}: {e}') from e

    def exists(self, key: str) -> bool:
        """Determine whether ``key`` is set."""
        try:
            return bool(self.r.exists(key))
        except redis.exceptions.RedisError as e:
            raise CacheUnavailable(f'failed to check {key}: {e}') from e

    def ping(self) -> bool:
        """Check our connection to Redis."""
        try:
            return bool(self.r.ping())
        except redis.exceptions.RedisError as e:
            logger.error('Encountered an error talking to Redis: %s', e)
            return False


def init_app(app: Flask) -> None:
    """Set default configuration parameters and attach a cache to the app."""
    config = app.config
    config.setdefault('REDIS_HOST', 'localhost')
    config.setdefault('REDIS_PORT', '6379')
    config.setdefault('REDIS_DATABASE', '0')
    config.setdefault('REDIS_PASSWORD', None)
    config.setdefault('REDIS_SOCKET_TIMEOUT', '5')
    config.setdefault('REDIS_FAKE', False)
    app.extensions['session_cache'] = get_session_cache(app)


def get_session_cache(app: Flask) -> SessionCache:
    """Get a new :class:`.SessionCache` configured for ``app``."""
    config = app.config
    timeout = config.get('REDIS_SOCKET_TIMEOUT')
    return SessionCache(
        host=config.get('REDIS_HOST', 'localhost'),
        port=int(config.get('REDIS_PORT', '6379')),
        database=int(config.get('REDIS_DATABASE', '0')),
        password=config.get('REDIS_PASSWORD') or None,
        socket_timeout=float(timeout) if timeout else None,
        fake=bool(config.get('REDIS_FAKE'))
    )


def current_cache() -> SessionCache:
    """Get the :class:`.SessionCache` attached to the current application."""
    cache: SessionCache = current_app.extensions['session_cache']
    return cache
