#!/usr/bin/env python3
"""
Configuration settings for the XMCDA persistence layer.

Format constants are fixed by the XMCDA 2 schemas. Tunable settings can be
overridden via environment variables; a new XmcdaConfig instance picks up the
environment as it is at construction time.
"""

import logging

from .env_utils import getenv_bool, getenv_clean, getenv_float

logger = logging.getLogger(__name__)

# XMCDA 2 namespaces are this prefix followed by the schema version
XMCDA_NAMESPACE_PREFIX = "http://www.decision-deck.org/2009/XMCDA-"

# Version every document is normalized to and written in
CANONICAL_VERSION = "2.1.0"

# Documents declaring no version are read as this one
OLDEST_LEGACY_VERSION = "2.0.0"

VALID_ERROR_STRATEGIES = ("throw", "collect", "log")


class XmcdaConfig:
    """Tunable settings for reading and writing XMCDA documents.

    All values can be overridden via environment variables.
    """

    def __init__(self):
        # Tolerance for approximate equality of floating values after a round-trip
        self.FLOAT_TOLERANCE = getenv_float("XMCDA_FLOAT_TOLERANCE", 1e-5)

        # What to do with domain-invalid input: raise, collect messages, or log them
        strategy = (getenv_clean("XMCDA_ERROR_STRATEGY", "throw") or "throw").lower()
        if strategy not in VALID_ERROR_STRATEGIES:
            logger.warning(
                f"Unknown XMCDA_ERROR_STRATEGY {repr(strategy)}, expected one of "
                f"{VALID_ERROR_STRATEGIES}. Using default: throw"
            )
            strategy = "throw"
        self.ERROR_STRATEGY = strategy

        # Indent written documents
        self.PRETTY_PRINT = getenv_bool("XMCDA_PRETTY_PRINT", True)

        # Root level used by setup_logging()
        self.LOG_LEVEL = (getenv_clean("XMCDA_LOG_LEVEL", "INFO") or "INFO").upper()

    @property
    def canonical_namespace(self) -> str:
        """Namespace of the canonical XMCDA version."""
        return XMCDA_NAMESPACE_PREFIX + CANONICAL_VERSION


# Singleton instance
xmcda_config = XmcdaConfig()
