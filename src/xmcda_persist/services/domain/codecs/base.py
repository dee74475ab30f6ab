#!/usr/bin/env python3
"""Shared helpers for XMCDA entity codecs.

Fragments are unqualified children of the XMCDA root, so lookups use plain
local names. Numbers are read from <real> or <integer> and always written as
<real> in positional notation.
"""

import logging
import math
from decimal import Decimal
from typing import Iterable, Optional
from xml.etree.ElementTree import Element, SubElement

from ....core.error_handling import ErrorsManager
from ....core.exceptions import InvalidInputError

logger = logging.getLogger(__name__)

CONCEPT_ATTRIBUTE = "mcdaConcept"


def format_number(value: float) -> str:
    """Fixed decimal text for a number, as short as round-trip precision allows.

    Raises:
        InvalidInputError: If value is not finite
    """
    value = float(value)
    if not math.isfinite(value):
        raise InvalidInputError("Cannot write a non-finite number", {"value": value})
    if value == 0:
        return "0.0"
    text = format(Decimal(repr(value)), "f")
    return text if "." in text else text + ".0"


def text_of(element: Optional[Element]) -> Optional[str]:
    """Stripped text of an element, None when missing or blank."""
    if element is None or element.text is None:
        return None
    text = element.text.strip()
    return text or None


def child_text(element: Element, tag: str) -> Optional[str]:
    return text_of(element.find(tag))


def attribute(element: Element, name: str) -> Optional[str]:
    """Attribute value, None when missing or empty."""
    value = element.get(name)
    if value is None:
        return None
    value = value.strip()
    return value or None


class XmcdaCodec:
    """Base class carrying the errors manager shared by one read."""

    # Local name of the fragment the codec reads and writes
    KIND: str = ""

    def __init__(self, errors: Optional[ErrorsManager] = None):
        self.errors = errors if errors is not None else ErrorsManager()

    def _error(self, message: str, **details) -> None:
        """Report invalid input; returns only when the strategy skips the item."""
        details.setdefault("fragment", self.KIND)
        self.errors.error(message, **details)

    def _check_kind(self, fragment: Element, kind: Optional[str] = None):
        expected = kind or self.KIND
        if fragment.tag != expected:
            raise ValueError(f"Expected a {expected} fragment, got {fragment.tag}")

    def _unique_or_none(self, element: Element, tag: str) -> Optional[Element]:
        """The single child with the given tag, None if absent."""
        found = element.findall(tag)
        if len(found) > 1:
            self._error(f"Found more than one {tag}, expected zero or one", element=element.tag)
            return None
        return found[0] if found else None

    def read_number(self, value_element: Optional[Element], context: str) -> Optional[float]:
        """Numeric content of a value-like element (<real> or <integer> child)."""
        if value_element is None:
            self._error(f"Expected a value at {context}")
            return None
        real = value_element.find("real")
        integer = value_element.find("integer")
        raw = text_of(real) if real is not None else text_of(integer)
        if raw is None:
            self._error(f"Expected numeric value at {context}")
            return None
        try:
            number = float(raw) if real is not None else float(int(raw))
        except ValueError:
            self._error(f"Expected numeric value at {context}", value=raw)
            return None
        if math.isnan(number):
            self._error(f"Expected numeric value at {context}", value=raw)
            return None
        return number

    def read_boolean(self, element: Optional[Element], context: str) -> Optional[bool]:
        raw = text_of(element)
        if raw is None:
            return None
        lowered = raw.lower()
        if lowered in ("true", "1"):
            return True
        if lowered in ("false", "0"):
            return False
        self._error(f"Expected boolean value at {context}", value=raw)
        return None

    @staticmethod
    def write_value(parent: Element, value: float, tag: str = "value", concept: Optional[str] = None) -> Element:
        """Append <tag><real>value</real></tag> to parent."""
        value_element = SubElement(parent, tag)
        if concept is not None:
            value_element.set(CONCEPT_ATTRIBUTE, concept)
        SubElement(value_element, "real").text = format_number(value)
        return value_element

    @staticmethod
    def write_id_element(parent: Element, tag: str, identifier: str) -> Element:
        element = SubElement(parent, tag)
        element.text = identifier
        return element

    @staticmethod
    def ordered(items: Iterable, order: Optional[Iterable]) -> list:
        """Items arranged by order first, the remaining ones in their own order."""
        items = list(dict.fromkeys(items))
        if order is None:
            return items
        present = set(items)
        arranged = [item for item in dict.fromkeys(order) if item in present]
        placed = set(arranged)
        return arranged + [item for item in items if item not in placed]
