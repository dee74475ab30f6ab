#!/usr/bin/env python3
"""Method parameters and method messages.

These are the plumbing fragments exchanged with decision services: a single
scalar parameter in, and log or error messages out.
"""

import logging
from typing import Iterable, Optional
from xml.etree.ElementTree import Element, SubElement

from .base import XmcdaCodec, text_of

logger = logging.getLogger(__name__)

MESSAGES_KIND = "methodMessages"
MESSAGE_KINDS = ("logMessage", "message", "errorMessage")


class MethodParametersCodec(XmcdaCodec):
    """Reads and writes the unique parameter of a methodParameters fragment."""

    KIND = "methodParameters"

    def _unique_value(self, fragment: Element) -> Optional[Element]:
        self._check_kind(fragment)
        parameters = fragment.findall("parameter")
        if len(parameters) != 1:
            self._error(f"Expected exactly one parameter, found {len(parameters)}", count=len(parameters))
            return None
        x_value = parameters[0].find("value")
        if x_value is None:
            self._error("Expected a value in parameter")
        return x_value

    def read_number(self, fragment: Element, context: str = "parameter") -> Optional[float]:
        x_value = self._unique_value(fragment)
        if x_value is None:
            return None
        return super().read_number(x_value, context)

    def read_boolean(self, fragment: Element, context: str = "parameter") -> Optional[bool]:
        x_value = self._unique_value(fragment)
        if x_value is None:
            return None
        x_boolean = x_value.find("boolean")
        if x_boolean is None:
            self._error(f"Expected boolean value at {context}")
            return None
        return super().read_boolean(x_boolean, context)

    def read_label(self, fragment: Element) -> Optional[str]:
        x_value = self._unique_value(fragment)
        if x_value is None:
            return None
        label = text_of(x_value.find("label"))
        if label is None:
            self._error("Expected label value at parameter")
        return label

    def _parameter_value(self) -> tuple[Element, Element]:
        x_parameters = Element(self.KIND)
        return x_parameters, SubElement(SubElement(x_parameters, "parameter"), "value")

    def write_number(self, value: float) -> Element:
        x_parameters = Element(self.KIND)
        self.write_value(SubElement(x_parameters, "parameter"), value)
        return x_parameters

    def write_boolean(self, value: bool) -> Element:
        x_parameters, x_value = self._parameter_value()
        SubElement(x_value, "boolean").text = "true" if value else "false"
        return x_parameters

    def write_label(self, value: str) -> Element:
        x_parameters, x_value = self._parameter_value()
        SubElement(x_value, "label").text = value
        return x_parameters

    def read_messages(self, fragment: Element) -> list[str]:
        """Texts of every message, whatever its kind, in document order."""
        self._check_kind(fragment, MESSAGES_KIND)
        messages = []
        for x_message in fragment:
            if x_message.tag not in MESSAGE_KINDS:
                continue
            text = text_of(x_message.find("text"))
            if text is not None:
                messages.append(text)
        return messages

    def write_messages(self, messages: Iterable[str], kind: str = "message") -> Element:
        if kind not in MESSAGE_KINDS:
            raise ValueError(f"Unknown message kind {kind}, expected one of {MESSAGE_KINDS}")
        x_messages = Element(MESSAGES_KIND)
        for message in messages:
            SubElement(SubElement(x_messages, kind), "text").text = message
        return x_messages
