import logging
from typing import Union

from pythonjsonlogger import jsonlogger


def setup_logger(level: Union[int, str] = logging.INFO) -> None:
    """Send JSON-formatted log records from every logger to stderr."""
    logger = logging.getLogger()
    if any(getattr(handler, '_accounts_json', False)
           for handler in logger.handlers):
        logger.setLevel(level)
        return
    logHandler = logging.StreamHandler()
    formatter = jsonlogger.JsonFormatter('%(asctime)s %(levelname)s %(name)s %(message)s',
                                         rename_fields={'levelname': 'level', 'asctime': 'timestamp'})
    logHandler.setFormatter(formatter)
    setattr(logHandler, '_accounts_json', True)
    logger.addHandler(logHandler)
    logger.setLevel(level)
