#!/usr/bin/env python3
"""Criteria codec: criterion declarations with scales and thresholds."""

import logging
import math
from dataclasses import dataclass, field
from typing import Iterable, Mapping, Optional
from xml.etree.ElementTree import Element, SubElement

from ....models.entities import Criterion, Interval, PreferenceDirection
from ....models.preferences import Thresholds
from .base import CONCEPT_ATTRIBUTE, XmcdaCodec, attribute, text_of

logger = logging.getLogger(__name__)

# Threshold concepts as written in XMCDA, and the Thresholds kind they map to
THRESHOLD_CONCEPTS = {
    "pref": "preference",
    "ind": "indifference",
    "veto": "veto",
}
_CONCEPT_OF_KIND = {kind: concept for concept, kind in THRESHOLD_CONCEPTS.items()}


@dataclass(frozen=True)
class CriteriaRead:
    """Result of reading a criteria fragment."""
    criteria: tuple[Criterion, ...] = ()
    scales: dict[Criterion, Interval] = field(default_factory=dict)
    thresholds: Thresholds = field(default_factory=Thresholds)
    inactive: frozenset[Criterion] = frozenset()


class CriteriaCodec(XmcdaCodec):
    """Reads and writes <criteria> fragments.

    Criteria keep their declaration order. Inactive criteria are reported
    apart and left out of the criteria sequence.
    """

    KIND = "criteria"

    def read(self, fragment: Element) -> CriteriaRead:
        """Read a criteria fragment.

        Args:
            fragment: <criteria> element

        Returns:
            CriteriaRead with criteria in document order

        Raises:
            InvalidInputError: On missing or duplicate ids, or malformed scales and thresholds
        """
        self._check_kind(fragment)
        criteria: dict[Criterion, None] = {}
        seen: set[Criterion] = set()
        scales: dict[Criterion, Interval] = {}
        thresholds = Thresholds()
        inactive: set[Criterion] = set()

        for x_criterion in fragment.findall("criterion"):
            criterion_id = attribute(x_criterion, "id")
            if criterion_id is None:
                self._error("Found a criterion with no id")
                continue
            criterion = Criterion(criterion_id, attribute(x_criterion, "name"))
            if criterion in seen:
                self._error(f"Duplicate criterion id: {criterion_id}", criterion=criterion_id)
                continue
            seen.add(criterion)

            x_scale = self._unique_or_none(x_criterion, "scale")
            if x_scale is not None:
                scale = self.read_scale(x_scale, criterion)
                if scale is not None:
                    scales[criterion] = scale

            self._read_criterion_thresholds(x_criterion, criterion, thresholds)

            active = self.read_boolean(self._unique_or_none(x_criterion, "active"), f"criterion {criterion_id}")
            if active is False:
                inactive.add(criterion)
                continue
            criteria[criterion] = None

        logger.debug(f"Read {len(criteria)} criteria ({len(inactive)} inactive)")
        return CriteriaRead(tuple(criteria), scales, thresholds, frozenset(inactive))

    def read_thresholds(self, fragment: Element) -> Thresholds:
        """Thresholds of a criteria fragment, ignoring everything else."""
        return self.read(fragment).thresholds

    def read_scale(self, x_scale: Element, criterion: Criterion) -> Optional[Interval]:
        quantitative = x_scale.find("quantitative")
        if quantitative is None:
            self._error(f"Expected quantitative scale for {criterion.id}", criterion=criterion.id)
            return None
        direction = None
        raw_direction = text_of(quantitative.find("preferenceDirection"))
        if raw_direction is not None:
            try:
                direction = PreferenceDirection(raw_direction.lower())
            except ValueError:
                self._error(
                    f"Unknown preference direction {raw_direction!r} for {criterion.id}",
                    criterion=criterion.id,
                )
                return None
        minimum = -math.inf
        maximum = math.inf
        x_minimum = quantitative.find("minimum")
        if x_minimum is not None:
            value = self.read_number(x_minimum, f"minimum of {criterion.id}")
            minimum = value if value is not None else minimum
        x_maximum = quantitative.find("maximum")
        if x_maximum is not None:
            value = self.read_number(x_maximum, f"maximum of {criterion.id}")
            maximum = value if value is not None else maximum
        if minimum > maximum:
            self._error(
                f"Scale minimum exceeds maximum for {criterion.id}",
                criterion=criterion.id, minimum=minimum, maximum=maximum,
            )
            return None
        return Interval(preference_direction=direction, minimum=minimum, maximum=maximum)

    def _read_criterion_thresholds(self, x_criterion: Element, criterion: Criterion, thresholds: Thresholds):
        found: set[str] = set()
        for x_threshold in x_criterion.findall("thresholds/threshold"):
            concept = attribute(x_threshold, CONCEPT_ATTRIBUTE)
            if concept is None:
                self._error(f"Expected MCDA concept on threshold of {criterion.id}", criterion=criterion.id)
                continue
            if concept not in THRESHOLD_CONCEPTS:
                self._error(
                    f"Unknown threshold concept {concept!r} for {criterion.id}",
                    criterion=criterion.id, concept=concept,
                )
                continue
            if concept in found:
                self._error(
                    f"Found more than one {concept} threshold for {criterion.id}",
                    criterion=criterion.id, concept=concept,
                )
                continue
            constant = x_threshold.find("constant")
            if constant is None:
                self._error(f"Expected constant threshold for {criterion.id}", criterion=criterion.id)
                continue
            value = self.read_number(constant, f"{concept} threshold of {criterion.id}")
            if value is None:
                continue
            found.add(concept)
            thresholds.put(THRESHOLD_CONCEPTS[concept], criterion, value)

    def write(
        self,
        criteria: Iterable[Criterion],
        scales: Optional[Mapping[Criterion, Interval]] = None,
        thresholds: Optional[Thresholds] = None,
        inactive: Optional[Iterable[Criterion]] = None,
        name: Optional[str] = None,
    ) -> Element:
        """Write criteria in the given order.

        Args:
            criteria: Criteria, iteration order is the written order
            scales: Optional scale per criterion
            thresholds: Optional thresholds
            inactive: Criteria to mark inactive, written after the active ones
            name: Optional fragment name (decision maker id for per-DM thresholds)

        Returns:
            <criteria> element, with no children when criteria is empty
        """
        scales = scales or {}
        inactive = list(dict.fromkeys(inactive or ()))
        x_criteria = Element(self.KIND)
        if name is not None:
            x_criteria.set("name", name)
        inactive_set = set(inactive)
        ordered = [c for c in dict.fromkeys(criteria) if c not in inactive_set] + inactive
        for criterion in ordered:
            x_criterion = SubElement(x_criteria, "criterion", {"id": criterion.id})
            if criterion.name:
                x_criterion.set("name", criterion.name)
            if criterion in inactive_set:
                SubElement(x_criterion, "active").text = "false"
            scale = scales.get(criterion)
            if scale is not None:
                self._write_scale(x_criterion, scale)
            if thresholds is not None:
                self._write_thresholds(x_criterion, criterion, thresholds)
        return x_criteria

    def _write_scale(self, x_criterion: Element, scale: Interval):
        quantitative = SubElement(SubElement(x_criterion, "scale"), "quantitative")
        if scale.preference_direction is not None:
            SubElement(quantitative, "preferenceDirection").text = scale.preference_direction.value
        if not math.isinf(scale.minimum):
            self.write_value(quantitative, scale.minimum, tag="minimum")
        if not math.isinf(scale.maximum):
            self.write_value(quantitative, scale.maximum, tag="maximum")

    def _write_thresholds(self, x_criterion: Element, criterion: Criterion, thresholds: Thresholds):
        values = [
            (_CONCEPT_OF_KIND[kind], thresholds.get(kind, criterion))
            for kind in ("indifference", "preference", "veto")
        ]
        values = [(concept, value) for concept, value in values if value is not None]
        if not values:
            return
        x_thresholds = SubElement(x_criterion, "thresholds")
        for concept, value in values:
            x_threshold = SubElement(x_thresholds, "threshold", {CONCEPT_ATTRIBUTE: concept})
            self.write_value(x_threshold, value, tag="constant")
