#!/usr/bin/env python3
"""Decision makers codec.

XMCDA 2 has no dedicated decision makers element: they are listed as label
parameters of a methodParameters fragment.
"""

import logging
from typing import Iterable
from xml.etree.ElementTree import Element, SubElement

from ....models.entities import DecisionMaker
from .base import XmcdaCodec, child_text

logger = logging.getLogger(__name__)


class DecisionMakersCodec(XmcdaCodec):
    KIND = "methodParameters"

    def read(self, fragment: Element) -> tuple[DecisionMaker, ...]:
        """Decision makers in document order.

        Raises:
            InvalidInputError: On a missing or duplicate label
        """
        self._check_kind(fragment)
        decision_makers: dict[DecisionMaker, None] = {}
        for x_parameter in fragment.findall("parameter"):
            label = child_text(x_parameter, "value/label")
            if label is None:
                self._error("Expected a label naming a decision maker")
                continue
            dm = DecisionMaker(label)
            if dm in decision_makers:
                self._error(f"Duplicate decision maker: {label}", decision_maker=label)
                continue
            decision_makers[dm] = None
        logger.debug(f"Read {len(decision_makers)} decision makers")
        return tuple(decision_makers)

    def write(self, decision_makers: Iterable[DecisionMaker]) -> Element:
        x_parameters = Element(self.KIND)
        for dm in dict.fromkeys(decision_makers):
            SubElement(SubElement(SubElement(x_parameters, "parameter"), "value"), "label").text = dm.id
        return x_parameters
