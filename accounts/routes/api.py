"""Provides routes for the remote account API."""

from typing import Any, Dict

from flask import Blueprint, jsonify, request
from werkzeug.exceptions import BadRequest

from ..controllers import accounts

blueprint = Blueprint('api', __name__, url_prefix='/accounts/api')


def _params() -> Dict[str, Any]:
    payload = request.get_json(force=True)    # Ignore Content-Type.
    if not isinstance(payload, dict):
        raise BadRequest('Request body must be a JSON object')
    return payload


@blueprint.route('/status', methods=['GET'])
def health() -> tuple:
    """Health check endpoint."""
    data, status_code, headers = accounts.health()
    return jsonify(data), status_code, headers


@blueprint.route('/register', methods=['POST'])
def register() -> tuple:
    """Create a new account."""
    data, status_code, headers = accounts.register(_params())
    return jsonify(data), status_code, headers


@blueprint.route('/login', methods=['POST'])
def login() -> tuple:
    """Log in with a username and password."""
    data, status_code, headers = accounts.login(_params())
    return jsonify(data), status_code, headers


@blueprint.route('/logout', methods=['POST'])
def logout() -> tuple:
    """Revoke a session token."""
    data, status_code, headers = accounts.logout(_params())
    return jsonify(data), status_code, headers


@blueprint.route('/verify_token', methods=['POST'])
def verify_token() -> tuple:
    """Check a session token."""
    data, status_code, headers = accounts.verify_token(_params())
    return jsonify(data), status_code, headers


@blueprint.route('/refresh_token', methods=['POST'])
def refresh_token() -> tuple:
    """Get a fresh session token."""
    data, status_code, headers = accounts.refresh_token(_params())
    return jsonify(data), status_code, headers


@blueprint.route('/account/<int:account_id>', methods=['GET'])
def get_account_info(account_id: int) -> tuple:
    """Get the public profile of an account."""
    data, status_code, headers = accounts.get_account_info(account_id)
    return jsonify(data), status_code, headers


@blueprint.route('/account/<int:account_id>', methods=['POST'])
def update_account_info(account_id: int) -> tuple:
    """Update profile fields of an account."""
    data, status_code, headers = \
        accounts.update_account_info(account_id, _params())
    return jsonify(data), status_code, headers


@blueprint.route('/accounts', methods=['POST'])
def get_accounts_by_ids() -> tuple:
    """Get public profiles for a batch of accounts."""
    data, status_code, headers = accounts.get_accounts_by_ids(_params())
    return jsonify(data), status_code, headers
