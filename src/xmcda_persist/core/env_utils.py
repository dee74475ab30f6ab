#!/usr/bin/env python3
"""
Helpers for reading the XMCDA layer settings from environment variables.

Values coming from .env files edited on another platform may carry CRLF line
endings or stray whitespace; every helper cleans them before converting.
"""

import os
import logging
from typing import Optional

logger = logging.getLogger(__name__)

_TRUE_VALUES = frozenset({"true", "1", "yes", "on"})
_FALSE_VALUES = frozenset({"false", "0", "no", "off", ""})


def getenv_clean(key: str, default: Optional[str] = None) -> Optional[str]:
    """Environment variable with surrounding whitespace and line endings removed.

    Example:
        >>> # .env file has: XMCDA_ERROR_STRATEGY=collect\r\n
        >>> getenv_clean("XMCDA_ERROR_STRATEGY", "throw")
        'collect'
    """
    value = os.environ.get(key)
    if value is None:
        return default
    cleaned = value.strip()
    if cleaned != value:
        logger.warning(f"Stripped whitespace from {key}: {value!r} -> {cleaned!r}")
    return cleaned


def getenv_bool(key: str, default: bool = False) -> bool:
    """Environment variable as a boolean, the default on unknown spellings."""
    value = getenv_clean(key)
    if value is None:
        return default
    flag = value.lower()
    if flag in _TRUE_VALUES or flag in _FALSE_VALUES:
        return flag in _TRUE_VALUES
    logger.warning(f"{key}={value!r} is not a boolean, keeping {default}")
    return default


def getenv_float(key: str, default: float) -> float:
    """Environment variable as a float.

    Args:
        key: Environment variable name
        default: Value used when the variable is unset, empty or not a number

    Returns:
        Float value
    """
    value = getenv_clean(key)
    if not value:
        return default
    try:
        return float(value)
    except ValueError:
        logger.warning(f"{key}={value!r} is not a number, keeping {default}")
        return default
