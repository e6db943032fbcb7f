"""Defines the core data structures for the accounts service."""

from typing import Any, NamedTuple, Optional
from datetime import datetime
from enum import IntEnum

from pytz import UTC


class Gender(IntEnum):
    """Self-reported gender of an account holder."""

    UNKNOWN = 0
    MALE = 1
    FEMALE = 2


class Status(IntEnum):
    """Account lifecycle state. Only active accounts may log in."""

    DISABLED = 0
    ACTIVE = 1


class AccountInfo(NamedTuple):
    """Public projection of an :class:`.Account`; safe to return to callers."""

    account_id: int
    username: str
    nickname: str
    email: str
    gender: int
    avatar: str
    status: int
    created_at: int
    """Epoch seconds."""

    def to_dict(self) -> dict:
        """Serialize for a response envelope or the profile cache."""
        return dict(self._asdict())

    @classmethod
    def from_dict(cls, data: dict) -> 'AccountInfo':
        """Load from :meth:`to_dict` output; raises on missing fields."""
        return cls(**{field: data[field] for field in cls._fields})


class Account(NamedTuple):
    """A registered user identity, including its credentials."""

    username: str
    """Unique, slug-like username."""

    email: str
    """Unique primary e-mail address."""

    password_hash: str
    """bcrypt hash. Never leaves the service."""

    nickname: str = ''
    """Display name."""

    gender: Gender = Gender.UNKNOWN

    avatar: str = ''
    """Reference (usually a URL) to the avatar image."""

    status: Status = Status.ACTIVE

    account_id: Optional[int] = None
    """Assigned by the store on creation. If ``None``, not yet persisted."""

    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def is_active(self) -> bool:
        """Whether the account may log in."""
        return self.status == Status.ACTIVE

    def to_info(self) -> AccountInfo:
        """Project to the public :class:`.AccountInfo`."""
        if self.account_id is None:
            raise ValueError('Account has not been persisted')
        created = epoch(self.created_at) if self.created_at else 0
        return AccountInfo(
            account_id=self.account_id,
            username=self.username,
            nickname=self.nickname,
            email=self.email,
            gender=int(self.gender),
            avatar=self.avatar,
            status=int(self.status),
            created_at=created
        )


class Claims(NamedTuple):
    """Identity claims carried by a verified session token."""

    account_id: int
    username: str
    issued_at: datetime
    not_before: datetime
    expires_at: datetime


def now() -> int:
    """Get the current epoch/unix time."""
    return epoch(datetime.now(tz=UTC))


def epoch(t: datetime) -> int:
    """Convert a :class:`.datetime` to UNIX time."""
    if t.tzinfo is None:
        t = t.replace(tzinfo=UTC)
    return int(t.timestamp())


def timestamp(t: datetime) -> float:
    """Convert a :class:`.datetime` to UNIX time, to the microsecond."""
    if t.tzinfo is None:
        t = t.replace(tzinfo=UTC)
    return round(t.timestamp(), 6)


def from_epoch(t: Any) -> datetime:
    """Get a :class:`datetime` from an UNIX timestamp."""
    return datetime.fromtimestamp(float(t), tz=UTC)
