#!/usr/bin/env python3
"""Performance table codec.

The codec tolerates identifiers that are declared nowhere else; checking
them against declared alternatives and criteria belongs to the aggregate
integrity pass.
"""

import logging
from typing import Iterable, Mapping, Optional, Sequence
from xml.etree.ElementTree import Element, SubElement

from ....models.entities import Alternative, Criterion, DecisionMaker
from ....models.matrices import Evaluations
from .base import CONCEPT_ATTRIBUTE, XmcdaCodec, attribute, child_text
from .concept import Concept, matching_fragments, select_fragments

logger = logging.getLogger(__name__)


class EvaluationsCodec(XmcdaCodec):
    """Reads and writes <performanceTable> fragments for one concept.

    concept selects among several tables: REAL or FICTIVE for the table
    tagged so, ALL to merge every table, None for the untagged one.
    """

    KIND = "performanceTable"

    def __init__(self, concept: Optional[Concept] = None, errors=None):
        super().__init__(errors)
        self.concept = concept

    def read(self, fragments: Sequence[Element]) -> Evaluations:
        """Read the selected table(s) into one sparse matrix.

        Raises:
            InvalidInputError: On ambiguous selection, duplicate cells, or
                rows given differently by two merged tables
        """
        if isinstance(fragments, Element):
            fragments = [fragments]
        selected = select_fragments(list(fragments), self.concept, self.KIND)
        merged = Evaluations()
        for fragment in selected:
            table = self.read_table(fragment)
            conflicting = [
                a.id for a in table.rows
                if a in merged.rows and merged.row(a) != table.row(a)
            ]
            if conflicting:
                self._error(
                    f"Found distinct evaluations for the same alternatives: {conflicting}",
                    alternatives=conflicting,
                )
                continue
            merged = merged.merged_with(table)
        logger.debug(f"Read {merged.value_count} evaluations from {len(selected)} table(s)")
        return merged

    def read_table(self, fragment: Element) -> Evaluations:
        """Read one performance table."""
        self._check_kind(fragment)
        evaluations = Evaluations()
        for x_row in fragment.findall("alternativePerformances"):
            alternative_id = child_text(x_row, "alternativeID")
            if alternative_id is None:
                self._error("Found alternative performances with no alternative id")
                continue
            alternative = Alternative(alternative_id)
            for x_performance in x_row.findall("performance"):
                criterion_id = child_text(x_performance, "criterionID")
                if criterion_id is None:
                    self._error(
                        f"Found a performance of {alternative_id} with no criterion id",
                        alternative=alternative_id,
                    )
                    continue
                criterion = Criterion(criterion_id)
                if evaluations.get(alternative, criterion) is not None:
                    self._error(
                        f"Duplicate evaluation for {alternative_id}, {criterion_id}",
                        alternative=alternative_id, criterion=criterion_id,
                    )
                    continue
                value = self.read_number(
                    x_performance.find("value"), f"performance of {alternative_id} on {criterion_id}"
                )
                if value is None:
                    continue
                evaluations.put(alternative, criterion, value)
        return evaluations

    def has_names(self, fragments: Sequence[Element]) -> bool:
        """Whether every table of the configured concept names a decision maker."""
        candidates = self._candidates(fragments)
        return bool(candidates) and all(attribute(f, "name") is not None for f in candidates)

    def read_per_decision_maker(self, fragments: Sequence[Element]) -> dict[DecisionMaker, Evaluations]:
        """Read named tables of the configured concept, one per decision maker.

        Raises:
            InvalidInputError: If a table has no name or a name appears twice
        """
        all_evaluations: dict[DecisionMaker, Evaluations] = {}
        for fragment in self._candidates(fragments):
            name = attribute(fragment, "name")
            if name is None:
                self._error("Expected decision maker name on performance table")
                continue
            dm = DecisionMaker(name)
            if dm in all_evaluations:
                self._error(f"Found two performance tables for {name}", decision_maker=name)
                continue
            all_evaluations[dm] = self.read_table(fragment)
        return all_evaluations

    def _candidates(self, fragments: Sequence[Element]) -> list[Element]:
        fragments = list(fragments)
        if self.concept is None or self.concept is Concept.ALL:
            return fragments
        return matching_fragments(fragments, self.concept)

    def write(
        self,
        evaluations: Evaluations,
        alternatives_order: Optional[Iterable[Alternative]] = None,
        criteria_order: Optional[Iterable[Criterion]] = None,
        concept: Optional[Concept] = None,
        name: Optional[str] = None,
    ) -> Element:
        """Write a performance table.

        Rows follow alternatives_order and cells follow criteria_order; rows and
        columns missing from those orders come after, in the matrix order.
        Missing cells are not written.
        """
        if concept is Concept.ALL:
            raise ValueError("Cannot write a performance table with concept ALL")
        x_table = Element(self.KIND)
        if concept is not None:
            x_table.set(CONCEPT_ATTRIBUTE, concept.value.upper())
        if name is not None:
            x_table.set("name", name)
        criteria = self.ordered(evaluations.columns, criteria_order)
        for alternative in self.ordered(evaluations.rows, alternatives_order):
            x_row = SubElement(x_table, "alternativePerformances")
            self.write_id_element(x_row, "alternativeID", alternative.id)
            for criterion in criteria:
                value = evaluations.get(alternative, criterion)
                if value is None:
                    continue
                x_performance = SubElement(x_row, "performance")
                self.write_id_element(x_performance, "criterionID", criterion.id)
                self.write_value(x_performance, value)
        return x_table

    def write_per_decision_maker(
        self,
        all_evaluations: Mapping[DecisionMaker, Evaluations],
        alternatives_order: Optional[Iterable[Alternative]] = None,
        criteria_order: Optional[Iterable[Criterion]] = None,
        concept: Optional[Concept] = None,
    ) -> list[Element]:
        """One named table per decision maker, in mapping order."""
        return [
            self.write(evaluations, alternatives_order, criteria_order, concept, name=dm.id)
            for dm, evaluations in all_evaluations.items()
        ]
