#!/usr/bin/env python3
"""Assignments codec (alternativesAffectations)."""

import logging
from typing import Iterable, Optional, Sequence, Union
from xml.etree.ElementTree import Element, SubElement

from ....models.assignments import Assignments, AssignmentsToMultiple, AssignmentsWithCredibilities
from ....models.entities import Alternative, Category, DecisionMaker
from .base import XmcdaCodec, attribute, child_text

logger = logging.getLogger(__name__)

AnyAssignments = Union[Assignments, AssignmentsToMultiple, AssignmentsWithCredibilities]


class AssignmentsCodec(XmcdaCodec):
    """Reads and writes <alternativesAffectations> fragments.

    Each affectation holds either a single <categoryID> or a <categoriesSet>;
    a credibility <value> may follow any category.
    """

    KIND = "alternativesAffectations"

    def __init__(self, known_categories: Optional[Iterable[Category]] = None, errors=None):
        super().__init__(errors)
        self.known_categories = frozenset(known_categories) if known_categories is not None else None

    def _read_affectations(self, fragment: Element) -> dict[Alternative, dict[Category, Optional[float]]]:
        """Categories and optional credibilities per alternative, in document order."""
        self._check_kind(fragment)
        affectations: dict[Alternative, dict[Category, Optional[float]]] = {}
        for x_affectation in fragment.findall("alternativeAffectation"):
            alternative_id = child_text(x_affectation, "alternativeID")
            if alternative_id is None:
                self._error("Found an affectation with no alternative id")
                continue
            alternative = Alternative(alternative_id)
            if alternative in affectations:
                self._error(f"Duplicate affectation of {alternative_id}", alternative=alternative_id)
                continue

            x_category = x_affectation.find("categoryID")
            x_set = x_affectation.find("categoriesSet")
            if (x_category is None) == (x_set is None):
                self._error(
                    f"Affectation of {alternative_id} needs exactly one of categoryID or categoriesSet",
                    alternative=alternative_id,
                )
                continue
            holders = [x_affectation] if x_set is None else x_set.findall("element")

            credibilities = self._read_categories(alternative_id, holders)
            if credibilities:
                affectations[alternative] = credibilities
        return affectations

    def _read_categories(self, alternative_id: str, holders: list[Element]) -> Optional[dict[Category, Optional[float]]]:
        credibilities: dict[Category, Optional[float]] = {}
        for x_holder in holders:
            category_id = child_text(x_holder, "categoryID")
            if category_id is None:
                self._error(f"Found an empty category in affectation of {alternative_id}", alternative=alternative_id)
                return None
            category = Category(category_id)
            if self.known_categories is not None and category not in self.known_categories:
                self._error(
                    f"Alternative {alternative_id} is assigned to unknown category {category_id}",
                    alternative=alternative_id, category=category_id,
                )
                return None
            if category in credibilities:
                self._error(
                    f"Category {category_id} appears twice in affectation of {alternative_id}",
                    alternative=alternative_id, category=category_id,
                )
                return None
            credibility = None
            x_value = x_holder.find("value")
            if x_value is not None:
                credibility = self.read_number(x_value, f"credibility of {alternative_id} in {category_id}")
                if credibility is None:
                    return None
                if not 0.0 <= credibility <= 1.0:
                    self._error(
                        f"Credibility of {alternative_id} in {category_id} is out of [0, 1]",
                        alternative=alternative_id, category=category_id, credibility=credibility,
                    )
                    return None
            credibilities[category] = credibility
        if not credibilities:
            self._error(f"Affectation of {alternative_id} has no category", alternative=alternative_id)
            return None
        return credibilities

    def read(self, fragment: Element) -> Assignments:
        """Read crisp assignments; every alternative must go to one category."""
        assignments = Assignments()
        for alternative, credibilities in self._read_affectations(fragment).items():
            if len(credibilities) > 1:
                self._error(
                    f"Alternative {alternative.id} is assigned to {len(credibilities)} categories",
                    alternative=alternative.id,
                )
                continue
            assignments.assign(alternative, next(iter(credibilities)))
        return assignments

    def read_to_multiple(self, fragment: Element) -> AssignmentsToMultiple:
        assignments = AssignmentsToMultiple()
        for alternative, credibilities in self._read_affectations(fragment).items():
            assignments.assign(alternative, credibilities)
        return assignments

    def read_with_credibilities(self, fragment: Element) -> AssignmentsWithCredibilities:
        """Read assignments with credibilities.

        A category without a credibility reads as fully credible when it is the
        only category of its alternative.

        Raises:
            InvalidInputError: On a missing credibility among several categories
        """
        assignments = AssignmentsWithCredibilities()
        for alternative, credibilities in self._read_affectations(fragment).items():
            if len(credibilities) == 1 and None in credibilities.values():
                credibilities = {category: 1.0 for category in credibilities}
            missing = [c.id for c, value in credibilities.items() if value is None]
            if missing:
                self._error(
                    f"Missing credibilities for {alternative.id}",
                    alternative=alternative.id, categories=missing,
                )
                continue
            assignments.assign(alternative, credibilities)
        return assignments

    def read_all(self, fragments: Sequence[Element]) -> dict[DecisionMaker, AssignmentsToMultiple]:
        """Read named assignments, one fragment per decision maker.

        Raises:
            InvalidInputError: If a fragment has no name or a name appears twice
        """
        all_assignments: dict[DecisionMaker, AssignmentsToMultiple] = {}
        for fragment in fragments:
            name = attribute(fragment, "name")
            if name is None:
                self._error("Expected decision maker name on assignments")
                continue
            dm = DecisionMaker(name)
            if dm in all_assignments:
                self._error(f"Found two assignments for {name}", decision_maker=name)
                continue
            all_assignments[dm] = self.read_to_multiple(fragment)
        logger.debug(f"Read assignments of {len(all_assignments)} decision makers")
        return all_assignments

    def write(self, assignments: AnyAssignments, name: Optional[str] = None) -> Element:
        """Write any kind of assignments, alternatives in insertion order.

        A single category is written as <categoryID>, several as a <categoriesSet>.
        Credibilities are written as values.
        """
        x_affectations = Element(self.KIND)
        if name is not None:
            x_affectations.set("name", name)
        for alternative, assigned in assignments.items():
            x_affectation = SubElement(x_affectations, "alternativeAffectation")
            self.write_id_element(x_affectation, "alternativeID", alternative.id)
            if isinstance(assigned, Category):
                self.write_id_element(x_affectation, "categoryID", assigned.id)
                continue
            credibilities = assigned if isinstance(assigned, dict) else dict.fromkeys(assigned)
            if len(credibilities) == 1 and not isinstance(assigned, dict):
                self.write_id_element(x_affectation, "categoryID", next(iter(credibilities)).id)
                continue
            x_set = SubElement(x_affectation, "categoriesSet")
            for category, credibility in credibilities.items():
                x_element = SubElement(x_set, "element")
                self.write_id_element(x_element, "categoryID", category.id)
                if credibility is not None:
                    self.write_value(x_element, credibility)
        return x_affectations
