"""Flask configuration."""
import os

VERSION = '0.1.0'
"""The application version."""

#################### Sessions and tokens ####################
JWT_SECRET = os.environ.get('JWT_SECRET')
"""Secret used to sign session tokens.

If not set, a random secret is generated at startup (and a warning logged).
Tokens will then not survive a restart or be shared between processes."""

SESSION_DURATION = os.environ.get('SESSION_DURATION', '86400')
"""Lifetime of a session token, in seconds.

Revocation entries written at logout live this long, too."""

REVOCATION_FAIL_CLOSED = bool(int(os.environ.get('REVOCATION_FAIL_CLOSED', '0')))
"""What to do when the revocation list cannot be checked.

If false (the default), the token is treated as not revoked. If true, it is
treated as revoked."""

PROFILE_CACHE_TTL = os.environ.get('PROFILE_CACHE_TTL', '300')
"""Seconds to cache public account info in Redis. 0 disables the cache."""

BCRYPT_ROUNDS = os.environ.get('BCRYPT_ROUNDS', '10')
"""bcrypt cost factor for new password hashes."""

#################### Redis ####################
REDIS_HOST = os.environ.get('REDIS_HOST', 'localhost')
REDIS_PORT = os.environ.get('REDIS_PORT', '6379')
REDIS_DATABASE = os.environ.get('REDIS_DATABASE', '0')
REDIS_PASSWORD = os.environ.get('REDIS_PASSWORD', None)
REDIS_SOCKET_TIMEOUT = os.environ.get('REDIS_SOCKET_TIMEOUT', '5')
"""Seconds to wait on any single Redis command or connection attempt."""

REDIS_FAKE = bool(int(os.environ.get('REDIS_FAKE', '0')))
"""Use the FakeRedis library instead of a redis service.

Useful for testing, dev, beta."""

#################### Database ####################
SQLALCHEMY_DATABASE_URI = os.environ.get('ACCOUNTS_DATABASE_URI',
                                         'sqlite:///accounts.db')
SQLALCHEMY_TRACK_MODIFICATIONS = False

SQLALCHEMY_ENGINE_OPTIONS = {'pool_pre_ping': True}
if not SQLALCHEMY_DATABASE_URI.startswith('sqlite'):
    SQLALCHEMY_ENGINE_OPTIONS.update({
        'pool_size': int(os.environ.get('DB_MAX_IDLE_CONNS', '10')),
        'max_overflow': int(os.environ.get('DB_MAX_OVERFLOW', '90')),
        'pool_timeout': int(os.environ.get('DB_POOL_TIMEOUT', '30')),
        'pool_recycle': int(os.environ.get('DB_MAX_LIFETIME', '3600')),
    })

CREATE_DB = bool(int(os.environ.get('CREATE_DB', 0)))
"""Create tables on startup. For dev/test."""

#################### Logging ####################
LOGLEVEL = os.environ.get('LOGLEVEL', 'INFO')
