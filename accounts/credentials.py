"""Password hashing and credential format checks."""

import re
import secrets
import logging
from typing import Any

import bcrypt
from email_validator import validate_email as _validate_email, \
    EmailNotValidError

from .exceptions import CryptoFailure

logger = logging.getLogger(__name__)

DEFAULT_COST = 10
"""bcrypt work factor used when none is configured."""

USERNAME = re.compile(r'[A-Za-z0-9_]{3,20}')
PASSWORD = re.compile(r'[A-Za-z0-9]{8,20}')


def hash_password(password: str, rounds: int = DEFAULT_COST) -> str:
    """
    Generate a salted, adaptive hash of a password.

    The salt and cost are embedded in the result, so :func:`verify_password`
    needs nothing else.

    Raises
    ------
    :class:`.CryptoFailure`
        If the system entropy source is unavailable.

    """
    try:
        salt = bcrypt.gensalt(rounds=rounds)
    except (OSError, NotImplementedError) as e:
        raise CryptoFailure('failed to hash password') from e
    return bcrypt.hashpw(password.encode('utf-8'), salt).decode('ascii')


def verify_password(password: Any, hashed: Any) -> bool:
    """Check a password against a bcrypt hash. Malformed input is a miss."""
    if not isinstance(password, str) or not isinstance(hashed, str):
        return False
    try:
        return bcrypt.checkpw(password.encode('utf-8'),
                              hashed.encode('utf-8'))
    except ValueError:  # Not a bcrypt hash.
        logger.debug('Refusing to check against a malformed hash')
        return False


def validate_email(email: Any) -> bool:
    """
    Check e-mail address syntax, without any DNS lookups.

    Domains need not be globally deliverable, so ``x@intranet`` and
    ``alice@example.test`` pass. Other special-use domains such as
    ``localhost`` are still refused by the validator.
    """
    if not isinstance(email, str):
        return False
    try:
        _validate_email(email, check_deliverability=False,
                        globally_deliverable=False, test_environment=True)
    except EmailNotValidError:
        return False
    return True


def validate_username(username: Any) -> bool:
    """3-20 letters, digits or underscores."""
    return isinstance(username, str) and bool(USERNAME.fullmatch(username))


def validate_password(password: Any) -> bool:
    """8-20 letters or digits."""
    return isinstance(password, str) and bool(PASSWORD.fullmatch(password))


def generate_random_string(length: int) -> str:
    """Get ``length`` hex characters from a secure random source."""
    if length < 0:
        raise ValueError('length must not be negative')
    return secrets.token_hex((length + 1) // 2)[:length]
