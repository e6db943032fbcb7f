"""
Account registration, authentication and session verification.

:class:`IdentityService` is the only stateful-looking thing above the stores,
and it holds nothing but its collaborators and configuration. Every method
performs at most one durable write, so a request that dies midway leaves no
partial account data behind.

Cache writes that only serve as bookkeeping (caching an issued token, clearing
a stale profile) are best-effort: failures are logged and never reach the
caller. The revocation check in :meth:`IdentityService.verify_token` is the one
cache read that matters; what happens when it cannot be performed is decided
by ``fail_closed``.
"""

import json
import logging
import secrets
from typing import Callable, Iterable, List, Optional, Tuple

from flask import Flask, current_app

from . import credentials
from .domain import Account, AccountInfo, Claims, Gender, Status
from .exceptions import AccountDisabled, AuthFailed, CacheUnavailable, \
    Conflict, InvalidInput, NotFound, Revoked
from .services import datastore, session_cache
from .services.datastore import AccountStore
from .services.session_cache import SessionCache
from .tokens import TokenIssuer

logger = logging.getLogger(__name__)

BAD_CREDENTIALS = 'username or password incorrect'


class IdentityService(object):
    """Orchestrates the account store, session cache and token issuer."""

    def __init__(self, store: AccountStore, cache: SessionCache,
                 issuer: TokenIssuer, duration: int,
                 fail_closed: bool = False, profile_ttl: int = 0,
                 password_rounds: int = credentials.DEFAULT_COST) -> None:
        """
        Wire up the service.

        Parameters
        ----------
        store : :class:`.AccountStore`
        cache : :class:`.SessionCache`
        issuer : :class:`.TokenIssuer`
        duration : int
            Lifetime of issued tokens, in seconds. Also used as the lifetime
            of revocation entries.
        fail_closed : bool
            If True, a token whose revocation status cannot be checked is
            treated as revoked. Otherwise it is treated as not revoked.
        profile_ttl : int
            Seconds to cache public account projections; 0 disables.
        password_rounds : int
            bcrypt cost for new password hashes.

        """
        self.store = store
        self.cache = cache
        self.issuer = issuer
        self.duration = duration
        self.fail_closed = fail_closed
        self.profile_ttl = profile_ttl
        self.password_rounds = password_rounds

    def register(self, email: str, username: str, password: str,
                 nickname: str = '', gender: int = Gender.UNKNOWN) -> int:
        """
        Create a new, active account.

        Fields are checked in order (email, username, password, gender) and
        the first bad one is reported. E-mail uniqueness is checked before
        username uniqueness.

        Returns
        -------
        int
            The ID of the new account.

        Raises
        ------
        :class:`.InvalidInput`
        :class:`.Conflict`
        :class:`.Internal`

        """
        if not credentials.validate_email(email):
            raise InvalidInput('invalid email', field='email')
        if not credentials.validate_username(username):
            raise InvalidInput('invalid username: 3-20 characters, '
                               'alphanumeric and underscore only',
                               field='username')
        if not credentials.validate_password(password):
            raise InvalidInput('invalid password: 8-20 characters, '
                               'letters and digits only', field='password')
        gender = _gender(gender)

        if self._exists(self.store.get_by_email, email):
            raise Conflict('email already exists')
        if self._exists(self.store.get_by_username, username):
            raise Conflict('username already exists')

        account = Account(
            username=username,
            email=email,
            password_hash=credentials.hash_password(password,
                                                    self.password_rounds),
            nickname=nickname or '',
            gender=gender,
            status=Status.ACTIVE
        )
        account_id = self.store.create(account)
        logger.info('Registered account %s', account_id)
        return account_id

    def login(self, username: str, password: str) -> Tuple[str, AccountInfo]:
        """
        Check credentials and issue a session token.

        An unknown username and a wrong password produce the same
        :class:`.AuthFailed`, so that callers cannot tell which usernames exist.

        Returns
        -------
        str
            The session token.
        :class:`.AccountInfo`

        Raises
        ------
        :class:`.AuthFailed`
        :class:`.AccountDisabled`
        :class:`.Internal`

        """
        try:
            account = self.store.get_by_username(username)
        except NotFound as e:
            logger.debug('Login for unknown username')
            raise AuthFailed(BAD_CREDENTIALS) from e
        if not account.is_active:
            raise AccountDisabled('account is disabled')
        if not credentials.verify_password(password, account.password_hash):
            logger.debug('Bad password for account %s', account.account_id)
            raise AuthFailed(BAD_CREDENTIALS)

        token = self.issuer.issue(account.account_id, account.username,
                                  self.duration)
        try:
            self.cache.put(session_cache.token_key(token), account.account_id,
                           self.duration)
        except CacheUnavailable as e:
            logger.warning('Failed to cache token: %s', e)
        logger.info('Account %s logged in', account.account_id)
        return token, account.to_info()

    def logout(self, account_id: int, token: str) -> None:
        """
        Revoke a session token.

        Both cache writes are best-effort; this never fails.
        """
        try:
            self.cache.delete(session_cache.token_key(token))
        except CacheUnavailable as e:
            logger.warning('Failed to remove cached token: %s', e)
        try:
            self.cache.put(session_cache.revocation_key(token), account_id,
                           self.duration)
        except CacheUnavailable as e:
            logger.warning('Failed to revoke token: %s', e)
        logger.info('Account %s logged out', account_id)

    def verify_token(self, token: str) -> Claims:
        """
        Check that a token is valid and has not been revoked.

        Raises
        ------
        :class:`.Revoked`
        :class:`.TokenInvalid`
        :class:`.TokenExpired`

        """
        try:
            revoked = self.cache.exists(session_cache.revocation_key(token))
        except CacheUnavailable as e:
            if self.fail_closed:
                logger.warning('Cannot check revocation, refusing token: %s',
                               e)
                raise Revoked('token has been revoked') from e
            logger.warning('Cannot check revocation, accepting token: %s', e)
            revoked = False
        if revoked:
            raise Revoked('token has been revoked')
        return self.issuer.verify(token)

    def refresh_token(self, token: str) -> str:
        """
        Issue a new token for the session behind ``token``.

        ``token`` must pass :meth:`verify_token`. It is not revoked.
        """
        claims = self.verify_token(token)
        return self.issuer.issue(claims.account_id, claims.username,
                                 self.duration)

    def get_account_info(self, account_id: int) -> AccountInfo:
        """Get the public projection of an account. Raises :class:`.NotFound`."""
        info = self._cached_info(account_id)
        if info is not None:
            return info
        info = self.store.get_by_id(account_id).to_info()
        if self.profile_ttl > 0:
            try:
                self.cache.put(session_cache.profile_key(account_id),
                               json.dumps(info.to_dict()), self.profile_ttl)
            except CacheUnavailable as e:
                logger.warning('Failed to cache account info: %s', e)
        return info

    def update_account_info(self, account_id: int,
                            nickname: Optional[str] = None,
                            gender: Optional[int] = None,
                            avatar: Optional[str] = None) -> None:
        """
        Update profile fields of an account.

        Only the fields that are not ``None`` are changed. An empty string is
        a real value: it clears the field.

        Raises
        ------
        :class:`.NotFound`
        :class:`.InvalidInput`
        :class:`.Internal`

        """
        account = self.store.get_by_id(account_id)
        changes = {}
        if nickname is not None:
            changes['nickname'] = nickname
        if gender is not None:
            changes['gender'] = _gender(gender)
        if avatar is not None:
            changes['avatar'] = avatar
        self.store.update(account._replace(**changes))
        self._forget_info(account_id)

    def update_account_status(self, account_id: int, status: Status) -> None:
        """
        Enable or disable an account.

        Disabled accounts cannot log in. Tokens already issued stay valid
        until they expire or are revoked.

        Raises
        ------
        :class:`.NotFound`
        :class:`.Internal`

        """
        self.store.update_status(account_id, Status(status))
        self._forget_info(account_id)
        logger.info('Set status of account %s to %s', account_id,
                    Status(status).name)

    def get_accounts_by_ids(self, account_ids: Iterable[int]) \
            -> List[AccountInfo]:
        """Get public projections for the accounts that exist."""
        account_ids = list(account_ids)
        if not account_ids:
            return []
        return [account.to_info()
                for account in self.store.get_by_ids(account_ids)]

    def health(self) -> dict:
        """Report liveness and backend availability."""
        return {
            'status': 'ok',
            'database': datastore.is_available(),
            'cache': self.cache.ping()
        }

    def _exists(self, lookup: Callable[[str], Account], value: str) -> bool:
        try:
            lookup(value)
        except NotFound:
            return False
        return True

    def _forget_info(self, account_id: int) -> None:
        try:
            self.cache.delete(session_cache.profile_key(account_id))
        except CacheUnavailable as e:
            logger.warning('Failed to clear cached account info: %s', e)

    def _cached_info(self, account_id: int) -> Optional[AccountInfo]:
        if self.profile_ttl <= 0:
            return None
        try:
            raw = self.cache.get(session_cache.profile_key(account_id))
        except CacheUnavailable as e:
            logger.warning('Failed to read cached account info: %s', e)
            return None
        if raw is None:
            return None
        try:
            return AccountInfo.from_dict(json.loads(raw))
        except (ValueError, KeyError, TypeError) as e:
            logger.warning('Ignoring corrupted account info cache: %s', e)
            return None


def _gender(value: object) -> Gender:
    if not isinstance(value, int) or isinstance(value, bool):
        raise InvalidInput('invalid gender', field='gender')
    try:
        return Gender(value)
    except ValueError as e:
        raise InvalidInput('invalid gender', field='gender') from e


def init_app(app: Flask) -> None:
    """Set default configuration parameters and attach a service to the app."""
    config = app.config
    config.setdefault('SESSION_DURATION', '86400')
    config.setdefault('REVOCATION_FAIL_CLOSED', False)
    config.setdefault('PROFILE_CACHE_TTL', '300')
    config.setdefault('BCRYPT_ROUNDS', str(credentials.DEFAULT_COST))
    if not config.get('JWT_SECRET'):
        logger.warning('JWT_SECRET is not set, using a random secret; tokens '
                       'will not be accepted by other processes or after a '
                       'restart')
        config['JWT_SECRET'] = secrets.token_urlsafe(32)
    app.extensions['identity'] = get_service(app)


def get_service(app: Flask) -> IdentityService:
    """Get a new :class:`.IdentityService` configured for ``app``."""
    config = app.config
    try:
        secret = config['JWT_SECRET']
    except KeyError as e:
        raise RuntimeError('Configuration error: missing JWT_SECRET') from e
    return IdentityService(
        store=AccountStore(),
        cache=app.extensions['session_cache'],
        issuer=TokenIssuer(secret),
        duration=int(config['SESSION_DURATION']),
        fail_closed=bool(config['REVOCATION_FAIL_CLOSED']),
        profile_ttl=int(config['PROFILE_CACHE_TTL']),
        password_rounds=int(config['BCRYPT_ROUNDS'])
    )


def current_service() -> IdentityService:
    """Get the :class:`.IdentityService` attached to the current application."""
    service: IdentityService = current_app.extensions['identity']
    return service
