#!/usr/bin/env python3
"""JSON logging for applications embedding the XMCDA layer.

The library only logs through module loggers; applications that want JSON
records on stdout call setup_logging() once at startup.
"""

import logging
import logging.config
from typing import Optional

from pythonjsonlogger import jsonlogger

from .config import xmcda_config


def setup_logging(level: Optional[str] = None):
    """Setup JSON logging configuration.

    Args:
        level: Root level name; defaults to XMCDA_LOG_LEVEL
    """
    root_level = (level or xmcda_config.LOG_LEVEL).upper()
    logging_config = {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "json": {
                "()": jsonlogger.JsonFormatter,
                "format": "%(asctime)s %(name)s %(levelname)s %(message)s"
            }
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": "json",
                "stream": "ext://sys.stdout"
            }
        },
        "loggers": {
            "": {
                "handlers": ["console"],
                "level": root_level,
                "propagate": False
            }
        }
    }

    logging.config.dictConfig(logging_config)
    logging.getLogger(__name__).debug(f"JSON logging configured at level {root_level}")
