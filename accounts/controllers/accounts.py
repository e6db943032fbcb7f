"""
Request handlers for the remote account API.

Each function takes the decoded request parameters and returns response data,
an HTTP status code, and extra headers. Business failures are not transport
failures: they come back as a normal response whose envelope has
``status == FAILURE`` and a human-readable ``message``. Only faults that are
not an :class:`.IdentityError` escape to the transport's error channel.
"""

import logging
from http import HTTPStatus
from typing import Any, Dict, List, Optional, Tuple

from .. import identity
from ..exceptions import IdentityError, Internal, InvalidInput

logger = logging.getLogger(__name__)

ResponseData = Tuple[dict, int, dict]

SUCCESS = 0
FAILURE = 1
OK = 'success'


def register(params: Dict[str, Any]) -> ResponseData:
    """Create a new account; responds with its ``account_id``."""
    try:
        account_id = identity.current_service().register(
            email=params.get('email', ''),
            username=params.get('username', ''),
            password=params.get('password', ''),
            nickname=params.get('nickname', ''),
            gender=params.get('gender', 0)
        )
    except IdentityError as e:
        return _failure(e)
    return _success(account_id=account_id)


def login(params: Dict[str, Any]) -> ResponseData:
    """Authenticate; responds with a ``token`` and ``account_info``."""
    try:
        token, info = identity.current_service().login(
            params.get('username', ''),
            params.get('password', '')
        )
    except IdentityError as e:
        return _failure(e)
    return _success(token=token, account_info=info.to_dict())


def logout(params: Dict[str, Any]) -> ResponseData:
    """Revoke a session token."""
    try:
        account_id = _int(params.get('account_id'), 'account_id')
        identity.current_service().logout(account_id,
                                          _str(params.get('token'), 'token'))
    except IdentityError as e:
        return _failure(e)
    return _success()


def verify_token(params: Dict[str, Any]) -> ResponseData:
    """Check a session token; responds with the identity it carries."""
    try:
        claims = identity.current_service().verify_token(
            _str(params.get('token'), 'token')
        )
    except IdentityError as e:
        return _failure(e)
    return _success(account_id=claims.account_id, username=claims.username)


def refresh_token(params: Dict[str, Any]) -> ResponseData:
    """Exchange a valid session token for a fresh one."""
    try:
        token = identity.current_service().refresh_token(
            _str(params.get('token'), 'token')
        )
    except IdentityError as e:
        return _failure(e)
    return _success(token=token)


def get_account_info(account_id: Any) -> ResponseData:
    """Get the public profile of an account."""
    try:
        info = identity.current_service().get_account_info(
            _int(account_id, 'account_id')
        )
    except IdentityError as e:
        return _failure(e)
    return _success(account_info=info.to_dict())


def update_account_info(account_id: Any,
                        params: Dict[str, Any]) -> ResponseData:
    """
    Update profile fields of an account.

    Fields that are absent from ``params`` (or null) are left unchanged.
    """
    try:
        identity.current_service().update_account_info(
            _int(account_id, 'account_id'),
            nickname=_optional_str(params.get('nickname'), 'nickname'),
            gender=params.get('gender'),
            avatar=_optional_str(params.get('avatar'), 'avatar')
        )
    except IdentityError as e:
        return _failure(e)
    return _success()


def get_accounts_by_ids(params: Dict[str, Any]) -> ResponseData:
    """Get public profiles for a batch of account IDs."""
    try:
        account_ids = _int_list(params.get('account_ids', []), 'account_ids')
        infos = identity.current_service().get_accounts_by_ids(account_ids)
    except IdentityError as e:
        return _failure(e)
    return _success(account_infos=[info.to_dict() for info in infos])


def health() -> ResponseData:
    """Report service health."""
    return identity.current_service().health(), HTTPStatus.OK, {}


def _success(**payload: Any) -> ResponseData:
    data = {'status': SUCCESS, 'message': OK}
    data.update(payload)
    return data, HTTPStatus.OK, {}


def _failure(error: IdentityError) -> ResponseData:
    if isinstance(error, Internal):
        logger.error('Request failed: %s', error, exc_info=error)
    else:
        logger.debug('Request refused: %s', error)
    return {'status': FAILURE, 'message': str(error)}, HTTPStatus.OK, {}


def _int(value: Any, field: str) -> int:
    if isinstance(value, bool):
        raise InvalidInput(f'invalid {field}', field=field)
    try:
        return int(value)
    except (TypeError, ValueError) as e:
        raise InvalidInput(f'invalid {field}', field=field) from e


def _int_list(value: Any, field: str) -> List[int]:
    if not isinstance(value, list):
        raise InvalidInput(f'invalid {field}', field=field)
    return [_int(item, field) for item in value]


def _str(value: Any, field: str) -> str:
    if not isinstance(value, str) or not value:
        raise InvalidInput(f'invalid {field}', field=field)
    return value


def _optional_str(value: Any, field: str) -> Optional[str]:
    if value is None:
        return None
    if not isinstance(value, str):
        raise InvalidInput(f'invalid {field}', field=field)
    return value
