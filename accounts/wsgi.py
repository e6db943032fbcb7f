"""Web Server Gateway Interface entry-point."""

from accounts.app_logging import setup_logger
from accounts.factory import create_web_app

__flask_app__ = None


def application(environ, start_response):    # type: ignore
    """WSGI application."""
    global __flask_app__
    if __flask_app__ is None:
        __flask_app__ = create_web_app()
        setup_logger(__flask_app__.config['LOGLEVEL'])
    return __flask_app__(environ, start_response)
