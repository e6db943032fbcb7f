"""
Exceptions raised by the accounts core.

Every business or infrastructure failure that a caller may see is an
:class:`IdentityError`. The request handler turns these into failure
envelopes; anything else is a bug and goes to the transport's error channel.
"""

from typing import Optional


class IdentityError(RuntimeError):
    """Base class for failures reported to callers."""


class InvalidInput(IdentityError):
    """A request field failed validation."""

    def __init__(self, message: str, field: Optional[str] = None) -> None:
        """Record the name of the offending field."""
        super(InvalidInput, self).__init__(message)
        self.field = field


class Conflict(IdentityError):
    """An account with the same email or username already exists."""


class AuthFailed(IdentityError):
    """Bad credentials; never says which part was wrong."""


class AccountDisabled(IdentityError):
    """The account exists but may not log in."""


class NotFound(IdentityError):
    """No such account."""


class TokenInvalid(IdentityError):
    """Token is malformed, forged, or not yet valid."""


class TokenExpired(IdentityError):
    """Token is past its expiry time."""


class Revoked(IdentityError):
    """Token was explicitly revoked (e.g. by logout)."""


class Internal(IdentityError):
    """The database, cache or hashing backend failed."""


class CryptoFailure(Internal):
    """Could not hash a password (entropy source failure)."""


class CacheUnavailable(Internal):
    """The session cache could not be reached."""
