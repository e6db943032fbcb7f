"""
Database integration for persisting accounts.

:class:`AccountStore` is the only thing that reads or writes account records.
Each method runs in its own transaction, so every operation is atomic at the
level of a single record. Uniqueness of username and e-mail is enforced by
the database; a violation is reported as :class:`.Conflict`, which is also
how two concurrent registrations for the same name are resolved.
"""

import logging
from typing import Iterable, List

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from . import util, models
from .models import DBAccount
from ...domain import Account, Gender, Status, from_epoch, now
from ...exceptions import Conflict, Internal, NotFound

logger = logging.getLogger(__name__)

init_app = util.init_app
create_all = util.create_all
drop_all = util.drop_all
is_available = util.is_available
transaction = util.transaction


class AccountStore(object):
    """Reads and writes :class:`.Account` records in the relational store."""

    def create(self, account: Account) -> int:
        """
        Persist a new :class:`.Account`.

        Parameters
        ----------
        account : :class:`.Account`
            ``account_id`` and the timestamps are ignored; the store assigns
            them.

        Returns
        -------
        int
            The newly assigned account ID.

        Raises
        ------
        :class:`.Conflict`
            If the username or e-mail address is already taken.
        :class:`.Internal`
            When there is a problem talking to the database.

        """
        db_account = DBAccount(
            username=account.username,
            email=account.email,
            password_hash=account.password_hash,
            nickname=account.nickname,
            gender=int(account.gender),
            avatar=account.avatar,
            status=int(account.status)
        )
        try:
            with transaction() as session:
                session.add(db_account)
                session.commit()
                account_id = int(db_account.account_id)
        except IntegrityError as e:
            raise Conflict('username or email already exists') from e
        except SQLAlchemyError as e:
            raise Internal('failed to create account') from e
        logger.debug('Created account %s', account_id)
        return account_id

    def get_by_id(self, account_id: int) -> Account:
        """Load an account by ID. Raises :class:`.NotFound`."""
        return self._get_one(DBAccount.account_id == account_id)

    def get_by_username(self, username: str) -> Account:
        """Load an account by username. Raises :class:`.NotFound`."""
        return self._get_one(DBAccount.username == username)

    def get_by_email(self, email: str) -> Account:
        """Load an account by e-mail address. Raises :class:`.NotFound`."""
        return self._get_one(DBAccount.email == email)

    def get_by_ids(self, account_ids: Iterable[int]) -> List[Account]:
        """
        Load every account whose ID is in ``account_ids``.

        IDs with no matching account are left out; that is not an error.
        Results are in no particular order.
        """
        account_ids = list(set(account_ids))
        if not account_ids:
            return []
        try:
            db_accounts = util.current_session().query(DBAccount) \
                .filter(DBAccount.account_id.in_(account_ids)) \
                .all()
        except SQLAlchemyError as e:
            raise Internal('failed to get accounts') from e
        return [_to_domain(db_account) for db_account in db_accounts]

    def update(self, account: Account) -> None:
        """
        Replace the stored record for ``account`` with its current values.

        Raises
        ------
        :class:`.NotFound`
            If there is no account with ``account.account_id``.
        :class:`.Conflict`
            If the new username or e-mail address is already taken.
        :class:`.Internal`
            When there is a problem talking to the database.

        """
        if account.account_id is None:
            raise ValueError('Account ID must be set')
        try:
            db_account = util.current_session() \
                .get(DBAccount, account.account_id)
        except SQLAlchemyError as e:
            raise Internal('failed to get account') from e
        if db_account is None:
            raise NotFound('account not found')
        try:
            with transaction() as session:
                db_account.username = account.username
                db_account.email = account.email
                db_account.password_hash = account.password_hash
                db_account.nickname = account.nickname
                db_account.gender = int(account.gender)
                db_account.avatar = account.avatar
                db_account.status = int(account.status)
                db_account.updated_at = now()
                session.add(db_account)
                session.commit()
        except IntegrityError as e:
            raise Conflict('username or email already exists') from e
        except SQLAlchemyError as e:
            raise Internal('failed to update account') from e

    def update_status(self, account_id: int, status: Status) -> None:
        """Set the lifecycle status of an account. Raises :class:`.NotFound`."""
        try:
            with transaction() as session:
                updated = session.query(DBAccount) \
                    .filter(DBAccount.account_id == account_id) \
                    .update({DBAccount.status: int(status),
                             DBAccount.updated_at: now()},
                            synchronize_session=False)
                session.commit()
        except SQLAlchemyError as e:
            raise Internal('failed to update account status') from e
        if not updated:
            raise NotFound('account not found')

    def _get_one(self, criterion: object) -> Account:
        try:
            db_account = util.current_session().query(DBAccount) \
                .filter(criterion) \
                .first()
        except SQLAlchemyError as e:
            raise Internal('failed to get account') from e
        if db_account is None:
            raise NotFound('account not found')
        return _to_domain(db_account)


def _to_domain(db_account: models.DBAccount) -> Account:
    return Account(
        account_id=db_account.account_id,
        username=db_account.username,
        email=db_account.email,
        password_hash=db_account.password_hash,
        nickname=db_account.nickname or '',
        gender=Gender(db_account.gender),
        avatar=db_account.avatar or '',
        status=Status(db_account.status),
        created_at=from_epoch(db_account.created_at),
        updated_at=from_epoch(db_account.updated_at)
    )
