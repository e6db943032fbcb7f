"""Tests for :mod:`accounts.services.session_cache`."""

from unittest import TestCase, mock

from flask import Flask
from redis.exceptions import ConnectionError, TimeoutError

from ... import session_cache
from ....exceptions import CacheUnavailable


class TestKeys(TestCase):
    """Each kind of record has its own keyspace."""

    def test_keys(self):
        """Keys are prefixed by kind."""
        self.assertEqual(session_cache.token_key('abc'), 'token:abc')
        self.assertEqual(session_cache.revocation_key('abc'),
                         'token:blacklist:abc')
        self.assertEqual(session_cache.profile_key(5), 'user:info:5')


class TestFakeSessionCache(TestCase):
    """Round trips against an in-process fake Redis."""

    def setUp(self):
        """Get a fresh fake cache."""
        self.cache = session_cache.SessionCache(fake=True)

    def test_put_get(self):
        """A stored value can be read back as a string."""
        self.cache.put('token:abc', 1, 60)
        self.assertEqual(self.cache.get('token:abc'), '1')
        self.assertTrue(self.cache.exists('token:abc'))

    def test_ttl(self):
        """Stored values expire."""
        self.cache.put('token:abc', 1, 60)
        ttl = self.cache.r.ttl('token:abc')
        self.assertGreater(ttl, 0)
        self.assertLessEqual(ttl, 60)

    def test_missing(self):
        """Reading a missing key gives ``None``."""
        self.assertIsNone(self.cache.get('token:nope'))
        self.assertFalse(self.cache.exists('token:nope'))

    def test_delete(self):
        """Deleted keys are gone; deleting twice is fine."""
        self.cache.put('token:abc', 1, 60)
        self.cache.delete('token:abc')
        self.assertFalse(self.cache.exists('token:abc'))
        self.cache.delete('token:abc')

    def test_isolated(self):
        """Two fake caches do not share data."""
        other = session_cache.SessionCache(fake=True)
        self.cache.put('token:abc', 1, 60)
        self.assertFalse(other.exists('token:abc'))

    def test_ping(self):
        """The fake is always there."""
        self.assertTrue(self.cache.ping())


class TestRedisFailures(TestCase):
    """Redis errors are reported as :class:`.CacheUnavailable`."""

    @mock.patch(f'{session_cache.__name__}.redis.StrictRedis')
    def test_connection_failed(self, mock_redis):
        """Every operation raises when Redis cannot be reached."""
        mock_connection = mock.MagicMock()
        mock_connection.set.side_effect = ConnectionError
        mock_connection.get.side_effect = ConnectionError
        mock_connection.delete.side_effect = ConnectionError
        mock_connection.exists.side_effect = TimeoutError
        mock_redis.return_value = mock_connection
        cache = session_cache.SessionCache('localhost', 6379, 0)
        with self.assertRaises(CacheUnavailable):
            cache.put('token:abc', 1, 60)
        with self.assertRaises(CacheUnavailable):
            cache.get('token:abc')
        with self.assertRaises(CacheUnavailable):
            cache.delete('token:abc')
        with self.assertRaises(CacheUnavailable):
            cache.exists('token:abc')

    @mock.patch(f'{session_cache.__name__}.redis.StrictRedis')
    def test_ping_failed(self, mock_redis):
        """A failed ping is reported, not raised."""
        mock_connection = mock.MagicMock()
        mock_connection.ping.side_effect = ConnectionError
        mock_redis.return_value = mock_connection
        cache = session_cache.SessionCache('localhost', 6379, 0)
        self.assertFalse(cache.ping())


class TestInitApp(TestCase):
    """The cache is configured from the application."""

    @mock.patch(f'{session_cache.__name__}.redis.StrictRedis')
    def test_config(self, mock_redis):
        """Connection parameters come from the app config."""
        app = Flask(__name__)
        app.config.update({
            'REDIS_HOST': 'redis',
            'REDIS_PORT': '1234',
            'REDIS_DATABASE': '4',
            'REDIS_PASSWORD': 'foopass',
            'REDIS_SOCKET_TIMEOUT': '2.5'
        })
        session_cache.init_app(app)
        _, kwargs = mock_redis.call_args
        self.assertEqual(kwargs['host'], 'redis')
        self.assertEqual(kwargs['port'], 1234)
        self.assertEqual(kwargs['db'], 4)
        self.assertEqual(kwargs['password'], 'foopass')
        self.assertEqual(kwargs['socket_timeout'], 2.5)
        with app.app_context():
            self.assertIsInstance(session_cache.current_cache(),
                                  session_cache.SessionCache)

    def test_fake(self):
        """``REDIS_FAKE`` selects the in-process fake."""
        app = Flask(__name__)
        app.config['REDIS_FAKE'] = True
        session_cache.init_app(app)
        with app.app_context():
            self.assertTrue(session_cache.current_cache().ping())
