"""Application factory for the accounts service."""

import logging
from typing import Any, Mapping, Optional

from flask import Flask, jsonify, Response
from werkzeug.exceptions import BadRequest, HTTPException, NotFound, \
    MethodNotAllowed, InternalServerError

from . import identity
from .routes import api
from .services import datastore, session_cache

logger = logging.getLogger(__name__)


def jsonify_exception(error: HTTPException) -> Response:
    """Render an HTTP error as ``{"reason": ...}``."""
    exc_resp = error.get_response()
    response = jsonify(reason=error.description)
    response.status_code = exc_resp.status_code
    return response


def create_web_app(config: Optional[Mapping[str, Any]] = None) -> Flask:
    """
    Initialize and configure the accounts application.

    Parameters
    ----------
    config : mapping
        Overrides applied on top of ``config.py`` before any service is
        attached. Database engines and the Redis connection are created at
        attach time, so overrides cannot be applied afterwards.

    """
    app = Flask('accounts')
    app.config.from_pyfile('config.py')
    if config:
        app.config.update(config)

    datastore.init_app(app)
    session_cache.init_app(app)
    identity.init_app(app)    # Needs the session cache.

    app.register_blueprint(api.blueprint)
    app.errorhandler(BadRequest)(jsonify_exception)
    app.errorhandler(NotFound)(jsonify_exception)
    app.errorhandler(MethodNotAllowed)(jsonify_exception)
    app.errorhandler(InternalServerError)(jsonify_exception)

    if app.config['CREATE_DB']:
        with app.app_context():
            datastore.create_all()
    logger.debug('Created accounts app, version %s', app.config['VERSION'])
    return app
