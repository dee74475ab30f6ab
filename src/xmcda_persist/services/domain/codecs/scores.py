#!/usr/bin/env python3
"""Alternatives scores codec (alternativesValues), e.g. net flows."""

import logging
from typing import Optional
from xml.etree.ElementTree import Element, SubElement

from ....models.entities import Alternative
from ....models.matrices import AlternativesScores
from .base import CONCEPT_ATTRIBUTE, XmcdaCodec, child_text

logger = logging.getLogger(__name__)


class AlternativesScoresCodec(XmcdaCodec):
    KIND = "alternativesValues"

    def read(self, fragment: Element) -> AlternativesScores:
        """Read one score per alternative, in document order.

        Raises:
            InvalidInputError: On a duplicate alternative or a missing value
        """
        self._check_kind(fragment)
        scores = AlternativesScores()
        for x_entry in fragment.findall("alternativeValue"):
            alternative_id = child_text(x_entry, "alternativeID")
            if alternative_id is None:
                self._error("Found a score with no alternative id")
                continue
            alternative = Alternative(alternative_id)
            if alternative in scores:
                self._error(f"Duplicate score for {alternative_id}", alternative=alternative_id)
                continue
            score = self.read_number(x_entry.find("value"), f"score of {alternative_id}")
            if score is None:
                continue
            scores.put(alternative, score)
        logger.debug(f"Read {len(scores)} scores")
        return scores

    def write(self, scores: AlternativesScores, concept: Optional[str] = None) -> Element:
        x_values = Element(self.KIND)
        if concept is not None:
            x_values.set(CONCEPT_ATTRIBUTE, concept)
        for alternative, score in scores.items():
            x_entry = SubElement(x_values, "alternativeValue")
            self.write_id_element(x_entry, "alternativeID", alternative.id)
            self.write_value(x_entry, score)
        return x_values
