"""Logging setup for the upload policy service.

Policy and presenter modules log at DEBUG (compiled extension lists,
rejection reasons, failure buckets); the HTTP layer and the rest of the
package log at INFO. Uvicorn's formatters keep the output in line with the
server's own access and error logs.
"""

import sys
from logging.config import dictConfig

SERVICE_LOGGERS = ("uploadgate.services",)
HTTP_LOGGERS = ("uploadgate.api", "uploadgate.main", "uploadgate.core")

LOGGING_CONFIG = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "default": {
            "()": "uvicorn.logging.DefaultFormatter",
            "fmt": "%(levelprefix)s %(asctime)s [%(name)s] %(message)s",
            "datefmt": "%Y-%m-%d %H:%M:%S",
        },
        "access": {
            "()": "uvicorn.logging.AccessFormatter",
            "fmt": '%(levelprefix)s %(asctime)s [%(name)s] "%(request_line)s" %(status_code)s',
        },
    },
    "handlers": {
        "default": {
            "class": "logging.StreamHandler",
            "formatter": "default",
            "stream": sys.stderr,
            "level": "INFO",
        },
        "access": {
            "class": "logging.StreamHandler",
            "formatter": "access",
            "stream": sys.stdout,
            "level": "INFO",
        },
        "uploadgate": {
            "class": "logging.StreamHandler",
            "formatter": "default",
            "stream": sys.stdout,
            "level": "DEBUG",
        },
    },
    "loggers": {
        "root": {"handlers": ["default"], "level": "INFO", "propagate": False},
        "uvicorn.error": {"handlers": ["default"], "level": "INFO", "propagate": False},
        "uvicorn.access": {"handlers": ["access"], "level": "INFO", "propagate": False},
        "uploadgate": {"handlers": ["uploadgate"], "level": "INFO", "propagate": False},
        # Children propagate to the "uploadgate" handler; only the level differs.
        **{name: {"level": "DEBUG"} for name in SERVICE_LOGGERS},
        **{name: {"level": "INFO"} for name in HTTP_LOGGERS},
    },
}


def setup_logging() -> None:
    """Configures application-wide logging using dictConfig."""
    dictConfig(LOGGING_CONFIG)
