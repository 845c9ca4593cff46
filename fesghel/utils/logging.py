"""JSON logging for the lambda functions

Call `initialize_logging()` from the lambda package's `__init__.py`, before
anything logs. Each record becomes one JSON line on stdout; fields passed via
`extra=` are merged in:

    >>> logger.info('Redirecting client to target URL. Responding with 307.', extra={'key': 'abc123'})
    {"timestamp": "2025-12-26T12:00:00.000Z", "level": "INFO", "logger": "fesghel.lambdas.redirect_url.app",
     "message": "Redirecting client to target URL. Responding with 307.", "key": "abc123"}
"""

import os
import json
import logging
import logging.config
from datetime import datetime, UTC

from fesghel.utils.constants import LOG_LEVEL_ENV


# Attributes every LogRecord carries; anything else came in through `extra=`
RESERVED_ATTRS = frozenset(vars(logging.LogRecord('', logging.INFO, '', 0, '', (), None))) | {'message', 'asctime'}

# Database drivers are chatty below WARNING (pymongo logs every command at DEBUG)
DRIVER_LOGGERS = ('pymongo', 'redis')


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        created = datetime.fromtimestamp(record.created, tz=UTC)
        log = {
            'timestamp': created.isoformat(timespec='milliseconds').replace('+00:00', 'Z'),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
        }
        log.update((k, v) for k, v in vars(record).items() if k not in RESERVED_ATTRS)

        if record.exc_info:
            log['exception'] = self.formatException(record.exc_info)
        if record.stack_info:
            log['stack'] = self.formatStack(record.stack_info)

        return json.dumps(log, default=str)


def initialize_logging() -> None:
    """Route the root logger to stdout as JSON, at LOG_LEVEL (INFO by default)"""
    level = os.getenv(LOG_LEVEL_ENV, 'INFO').upper()
    logging.config.dictConfig(
        {
            'version': 1,
            'disable_existing_loggers': False,
            'formatters': {'json': {'()': JsonFormatter}},
            'handlers': {
                'stdout': {
                    'class': 'logging.StreamHandler',
                    'formatter': 'json',
                    'stream': 'ext://sys.stdout',
                }
            },
            'loggers': {name: {'level': 'WARNING'} for name in DRIVER_LOGGERS},
            'root': {'level': level, 'handlers': ['stdout']},
        }
    )
