#!/usr/bin/env python3
"""Tests for exceptions and the error strategy manager."""

import logging
import os
from unittest.mock import patch

import pytest

from xmcda_persist.core.error_handling import ErrorsManager, ErrorStrategy
from xmcda_persist.core.exceptions import (
    InvalidInputError,
    MalformedInputError,
    UnsupportedVersionError,
    XmcdaError,
)


class TestXmcdaError:
    """Test suite for the exception hierarchy."""

    def test_message_and_details(self):
        """Test that details are rendered after the message."""
        error = InvalidInputError("Duplicate criterion id: g1", {"fragment": "criteria", "criterion": "g1"})

        assert error.message == "Duplicate criterion id: g1"
        assert error.details == {"fragment": "criteria", "criterion": "g1"}
        assert str(error) == "Duplicate criterion id: g1 (fragment=criteria, criterion=g1)"

    def test_without_details(self):
        error = MalformedInputError("Invalid XML")
        assert error.details == {}
        assert str(error) == "Invalid XML"

    @pytest.mark.parametrize("error_class", [MalformedInputError, UnsupportedVersionError, InvalidInputError])
    def test_hierarchy(self, error_class):
        """Test that every error kind derives from XmcdaError."""
        assert issubclass(error_class, XmcdaError)


class TestErrorsManager:
    """Test suite for ErrorsManager."""

    def test_throw_raises_with_details(self):
        """Test that THROW raises at the first error."""
        errors = ErrorsManager(ErrorStrategy.THROW)

        with pytest.raises(InvalidInputError) as exc_info:
            errors.error("Unknown category", alternative="a1", category="C9")

        assert exc_info.value.details == {"alternative": "a1", "category": "C9"}

    def test_collect_keeps_messages(self):
        """Test that COLLECT records rendered messages in order."""
        errors = ErrorsManager(ErrorStrategy.COLLECT)

        errors.error("first", fragment="criteria")
        errors.error("second")

        assert errors.errors == ["first (fragment=criteria)", "second"]

    def test_errors_is_a_copy(self):
        errors = ErrorsManager(ErrorStrategy.COLLECT)
        errors.error("first")
        errors.errors.clear()
        assert len(errors.errors) == 1

    def test_log_strategy_logs(self, caplog):
        """Test that LOG reports at error level and does not raise."""
        errors = ErrorsManager(ErrorStrategy.LOG)

        with caplog.at_level(logging.ERROR):
            errors.error("Unknown criterion", criterion="g9")

        assert "Unknown criterion (criterion=g9)" in caplog.text
        assert errors.errors == []

    def test_switching_strategy_clears_collected(self):
        errors = ErrorsManager(ErrorStrategy.COLLECT)
        errors.error("first")

        errors.strategy = ErrorStrategy.LOG

        assert errors.errors == []

    def test_accepts_string_strategy(self):
        assert ErrorsManager("collect").strategy is ErrorStrategy.COLLECT

    def test_default_strategy_from_config(self):
        """Test that the default strategy comes from configuration."""
        with patch("xmcda_persist.core.error_handling.xmcda_config") as config:
            config.ERROR_STRATEGY = "collect"
            assert ErrorsManager().strategy is ErrorStrategy.COLLECT

    @patch.dict(os.environ, {}, clear=True)
    def test_throw_is_the_usual_default(self):
        from xmcda_persist.core.config import XmcdaConfig

        with patch("xmcda_persist.core.error_handling.xmcda_config", XmcdaConfig()):
            assert ErrorsManager().strategy is ErrorStrategy.THROW
