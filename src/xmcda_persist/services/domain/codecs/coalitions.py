#!/usr/bin/env python3
"""Coalitions codec: criteria weights and the majority threshold."""

import logging
from typing import Iterable, Mapping, Optional, Sequence
from xml.etree.ElementTree import Element, SubElement

from ....models.entities import Criterion, DecisionMaker
from ....models.preferences import Coalitions
from .base import CONCEPT_ATTRIBUTE, XmcdaCodec, attribute, child_text

logger = logging.getLogger(__name__)

IMPORTANCE_CONCEPT = "Importance"
MAJORITY_THRESHOLD_CONCEPT = "majority threshold"
WEIGHTS_KIND = "criteriaValues"


class CoalitionsCodec(XmcdaCodec):
    """Reads and writes coalitions as <criteriaSet> fragments.

    Weights can also be read from a <criteriaValues> fragment, which carries
    no majority threshold.
    """

    KIND = "criteriaSet"

    def __init__(self, known_criteria: Optional[Iterable[Criterion]] = None, errors=None):
        super().__init__(errors)
        self.known_criteria = frozenset(known_criteria) if known_criteria is not None else None

    def read(self, fragment: Element) -> Coalitions:
        """Read one coalitions set.

        Raises:
            InvalidInputError: On a duplicate or unknown criterion, or several majority thresholds
        """
        if fragment.tag == WEIGHTS_KIND:
            return Coalitions(self.read_weights(fragment))
        self._check_kind(fragment)
        coalitions = Coalitions(self.read_weights(fragment))

        thresholds = [
            x_value for x_value in fragment.findall("value")
            if attribute(x_value, CONCEPT_ATTRIBUTE) == MAJORITY_THRESHOLD_CONCEPT
        ]
        if len(thresholds) > 1:
            self._error("Found more than one majority threshold", count=len(thresholds))
        elif thresholds:
            coalitions.majority_threshold = self.read_number(thresholds[0], "majority threshold")
        return coalitions

    def read_weights(self, fragment: Element) -> dict[Criterion, float]:
        """Weights in document order from a criteriaSet or criteriaValues fragment."""
        if fragment.tag == WEIGHTS_KIND:
            entries, kind = fragment.findall("criterionValue"), WEIGHTS_KIND
        else:
            self._check_kind(fragment)
            entries, kind = fragment.findall("element"), self.KIND
        weights: dict[Criterion, float] = {}
        for x_entry in entries:
            criterion_id = child_text(x_entry, "criterionID")
            if criterion_id is None:
                self._error("Found a weight with no criterion id", fragment=kind)
                continue
            criterion = Criterion(criterion_id)
            if criterion in weights:
                self._error(f"Duplicate weight for {criterion_id}", criterion=criterion_id, fragment=kind)
                continue
            if self.known_criteria is not None and criterion not in self.known_criteria:
                self._error(f"Weight given for unknown criterion {criterion_id}", criterion=criterion_id, fragment=kind)
                continue
            weight = self.read_number(x_entry.find("value"), f"weight of {criterion_id}")
            if weight is None:
                continue
            weights[criterion] = weight
        return weights

    def might_be_per_decision_maker(self, fragments: Sequence[Element]) -> bool:
        """Whether any coalitions set names a decision maker."""
        return any(attribute(fragment, "name") is not None for fragment in fragments)

    def read_all(self, fragments: Sequence[Element]) -> dict[DecisionMaker, Coalitions]:
        """Read every named coalitions set, keyed by decision maker.

        Unnamed sets are shared values and are skipped here.
        """
        all_coalitions: dict[DecisionMaker, Coalitions] = {}
        for fragment in fragments:
            name = attribute(fragment, "name")
            if name is None:
                continue
            dm = DecisionMaker(name)
            if dm in all_coalitions:
                self._error(f"Found two coalitions sets for {name}", decision_maker=name)
                continue
            all_coalitions[dm] = self.read(fragment)
        logger.debug(f"Read coalitions of {len(all_coalitions)} decision makers")
        return all_coalitions

    def write(self, coalitions: Coalitions, name: Optional[str] = None) -> Element:
        x_set = Element(self.KIND, {CONCEPT_ATTRIBUTE: IMPORTANCE_CONCEPT})
        if name is not None:
            x_set.set("name", name)
        for criterion, weight in coalitions.weights.items():
            x_element = SubElement(x_set, "element")
            self.write_id_element(x_element, "criterionID", criterion.id)
            self.write_value(x_element, weight)
        if coalitions.majority_threshold is not None:
            self.write_value(x_set, coalitions.majority_threshold, concept=MAJORITY_THRESHOLD_CONCEPT)
        return x_set

    def write_all(self, all_coalitions: Mapping[DecisionMaker, Coalitions]) -> list[Element]:
        return [self.write(coalitions, name=dm.id) for dm, coalitions in all_coalitions.items()]
