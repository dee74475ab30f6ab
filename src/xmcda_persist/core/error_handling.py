#!/usr/bin/env python3
"""Error strategy shared by the codecs and readers taking part in one read.

By default the first domain-invalid item aborts the read. Callers that want a
report of everything wrong with a document can collect the messages instead,
or only log them; in both cases the offending item is skipped.
"""

import logging
from enum import Enum
from typing import Optional

from .config import xmcda_config
from .exceptions import InvalidInputError

logger = logging.getLogger(__name__)


class ErrorStrategy(str, Enum):
    """How domain-invalid input is reported."""
    THROW = "throw"
    COLLECT = "collect"
    LOG = "log"


class ErrorsManager:
    """Reports invalid input according to an ErrorStrategy."""

    def __init__(self, strategy: Optional[ErrorStrategy] = None):
        if strategy is None:
            strategy = ErrorStrategy(xmcda_config.ERROR_STRATEGY)
        self._strategy = ErrorStrategy(strategy)
        self._errors: list[str] = []

    @property
    def strategy(self) -> ErrorStrategy:
        return self._strategy

    @strategy.setter
    def strategy(self, strategy: ErrorStrategy):
        self._strategy = ErrorStrategy(strategy)
        if self._strategy != ErrorStrategy.COLLECT:
            self._errors.clear()

    @property
    def errors(self) -> list[str]:
        """Messages collected so far (COLLECT strategy only)."""
        return list(self._errors)

    def error(self, message: str, **details) -> None:
        """Report an invalid item.

        Args:
            message: What is wrong
            **details: Context such as fragment kind and offending identifiers

        Raises:
            InvalidInputError: Under the THROW strategy
        """
        if self._strategy == ErrorStrategy.THROW:
            raise InvalidInputError(message, details)
        rendered = str(InvalidInputError(message, details))
        if self._strategy == ErrorStrategy.COLLECT:
            self._errors.append(rendered)
        else:
            logger.error(rendered)
