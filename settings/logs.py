import logging
import sys
import time
from typing import Optional

import ujson

from .config import STAND, env

loggers = {
    'environs': {
        'level': 'ERROR',
    },
    'aiosqlite': {
        'level': 'ERROR',
    },
    'sqlalchemy.engine': {
        'level': 'WARNING',
    },
    'uvicorn.access': {
        'level': 'WARNING',
    },
}


class JSONFormatter(logging.Formatter):
    default_time_format = '%Y-%m-%d %H:%M:%S{ms} %z'
    msec_format = ',%03d'

    def __init__(self, *args, jsondumps_kwargs: Optional[dict] = None, **kwargs):
        """JSON format implementation of logging formatter."""
        super().__init__(*args, **kwargs)
        self._jsondumps_kwargs = jsondumps_kwargs.copy() if jsondumps_kwargs else {}

    def formatTime(self, record, *args) -> str:  # noqa: N802
        """Format TZ-time with milliseconds as this: 2024-07-25 08:12:44,512 +0900."""
        ct = self.converter(record.created)  # type: ignore
        formatted_ms = self.msec_format % record.msecs
        time_format_with_msec = self.default_time_format.format(ms=formatted_ms)

        return time.strftime(time_format_with_msec, ct)

    def format(self, record: logging.LogRecord) -> str:
        r"""Serialize a log record to JSON.

        {"time": "2024-07-25 08:12:44,512", "name": "app.services", "lvl": "INFO",
         "msg": "Added weight record 12 for member 3", "place": "services.add_record:181"}
        """
        record_representation = {
            'time': self.formatTime(record),
            'name': record.name,
            'lvl': record.levelname,
            'msg': record.getMessage(),
            'place': f'{record.module}.{record.funcName}:{record.lineno}',
        }

        if record.exc_info:
            record_representation['exc_info'] = self.formatException(record.exc_info)

        return ujson.dumps(record_representation, **self._jsondumps_kwargs)


def create_logger_config(log_level: str, stand: str, loggers: dict):
    return {
        'version': 1,
        'disable_existing_loggers': False,
        'loggers': {
            **loggers,
            '': {
                'level': log_level,
                'handlers': ['console'],
            },
            'root': {
                'level': log_level,
                'handlers': ['console'],
                'propagate': False,
            },
        },
        'handlers': {
            'console': {
                'class': 'logging.StreamHandler',
                'formatter': 'generic' if stand == 'local' else 'json',
                'stream': sys.stdout,
            },
            'error_console': {
                'class': 'logging.StreamHandler',
                'formatter': 'generic',
                'stream': sys.stderr,
            },
        },
        'formatters': {
            'generic': {
                'format': '%(asctime)s (%(name)s)[%(levelname)s] %(message)s',
                'datefmt': '[%Y-%m-%d %H:%M:%S %z]',
                'class': 'logging.Formatter',
            },
            'json': {
                '()': JSONFormatter,
                'jsondumps_kwargs': {
                    'ensure_ascii': False,
                },
            },
        },
    }


class LogsConfig:
    LOG_LEVEL = env.str('LOG_LEVEL', default='INFO')
    ACCESS_LOG = env.bool('LOGGING_ACCESS_LOG', default=True)
    LOGGING = create_logger_config(log_level=LOG_LEVEL, loggers=loggers, stand=STAND)
