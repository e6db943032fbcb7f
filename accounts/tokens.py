"""Functions for issuing and verifying session tokens."""

import logging
from datetime import datetime, timedelta
from typing import Optional, Union

import jwt
from pytz import UTC

from . import domain
from .exceptions import TokenInvalid, TokenExpired

logger = logging.getLogger(__name__)

ALGORITHM = 'HS256'
REQUIRED_CLAIMS = ['account_id', 'username', 'iat', 'nbf', 'exp']

TTL = Union[int, timedelta]


class TokenIssuer(object):
    """
    Signs and verifies session tokens with a single shared secret.

    Tokens are HS256 JWTs carrying the account ID and username. Validity is
    determined only by signature and time bounds; revocation is handled a
    layer up, by :class:`accounts.identity.IdentityService`.
    """

    def __init__(self, secret: str, algorithm: str = ALGORITHM) -> None:
        """Hold on to the signing secret."""
        if not secret:
            raise ValueError('A signing secret is required')
        self._secret = secret
        self._algorithm = algorithm

    def issue(self, account_id: int, username: str, ttl: TTL,
              now: Optional[datetime] = None) -> str:
        """
        Issue a token valid from now until ``now + ttl``.

        Time claims carry microseconds, so two tokens issued for the same
        account within one second still differ.

        Parameters
        ----------
        account_id : int
        username : str
        ttl : int or :class:`.timedelta`
            Lifetime of the token; ints are seconds.
        now : :class:`.datetime`
            Issue time. Defaults to the current time.

        Returns
        -------
        str

        """
        if not isinstance(ttl, timedelta):
            ttl = timedelta(seconds=ttl)
        if now is None:
            now = datetime.now(tz=UTC)
        issued = domain.timestamp(now)
        claims = {
            'account_id': int(account_id),
            'username': username,
            'iat': issued,
            'nbf': issued,
            'exp': domain.timestamp(now + ttl)
        }
        return jwt.encode(claims, self._secret, algorithm=self._algorithm)

    def verify(self, token: str) -> domain.Claims:
        """
        Check a token's signature and time bounds.

        Raises
        ------
        :class:`.TokenExpired`
            If the expiry time has passed.
        :class:`.TokenInvalid`
            For a bad signature, malformed token, missing claims, or a
            not-before time in the future.

        """
        if not isinstance(token, str) or not token:
            raise TokenInvalid('invalid token')
        try:
            payload = jwt.decode(token, self._secret,
                                 algorithms=[self._algorithm],
                                 options={'require': REQUIRED_CLAIMS})
        except jwt.ExpiredSignatureError as e:
            raise TokenExpired('token has expired') from e
        except jwt.ImmatureSignatureError as e:
            raise TokenInvalid('token is not yet valid') from e
        except jwt.InvalidTokenError as e:
            logger.debug('Token failed verification: %s', e)
            raise TokenInvalid('invalid token') from e

        account_id = payload['account_id']
        username = payload['username']
        if type(account_id) is not int or not isinstance(username, str):
            raise TokenInvalid('invalid token')
        return domain.Claims(
            account_id=account_id,
            username=username,
            issued_at=domain.from_epoch(payload['iat']),
            not_before=domain.from_epoch(payload['nbf']),
            expires_at=domain.from_epoch(payload['exp'])
        )

    def refresh(self, token: str, ttl: TTL) -> str:
        """
        Issue a new token with the same identity as ``token``.

        The old token is left alone; revoking it is up to the caller.
        """
        claims = self.verify(token)
        return self.issue(claims.account_id, claims.username, ttl)
