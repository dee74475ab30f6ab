#!/usr/bin/env python3
"""Writer turning composed sorting problems into canonical XMCDA documents.

Fragments are appended in a fixed order and entities keep their declaration
order, so writing the same problem twice yields the same bytes. Empty
optional collections are left out. The integrity checks run before anything
is appended and always raise on invalid objects.
"""

import logging
from typing import Optional
from xml.etree.ElementTree import Element

from ....core.error_handling import ErrorsManager, ErrorStrategy
from ....models.entities import DecisionMaker
from ....models.models import (
    GroupSortingPreferences,
    GroupSortingResults,
    ProblemData,
    SortingData,
    SortingPreferences,
    SortingResults,
    SortingResultsToMultiple,
    SortingResultsWithCredibilities,
)
from ....models.preferences import Thresholds
from ...document import XmcdaDocument
from ..codecs.alternatives import AlternativesCodec
from ..codecs.assignments import AssignmentsCodec
from ..codecs.categories import CategoriesCodec
from ..codecs.coalitions import CoalitionsCodec
from ..codecs.concept import Concept
from ..codecs.criteria import CriteriaCodec
from ..codecs.decision_makers import DecisionMakersCodec
from ..codecs.evaluations import EvaluationsCodec
from . import integrity

logger = logging.getLogger(__name__)


class SortingProblemWriter:
    """Appends composed problems to a new canonical document.

    Example:
        writer = SortingProblemWriter()
        writer.append_sorting_preferences(preferences)
        content = writer.to_bytes()
    """

    def __init__(self):
        self.document = XmcdaDocument.new()
        self._errors = ErrorsManager(ErrorStrategy.THROW)

    def append_fragment(self, fragment: Element) -> None:
        """Append any extra fragment, such as scores, matrices or messages."""
        self.document.append(fragment)

    def to_bytes(self, pretty: Optional[bool] = None) -> bytes:
        return self.document.to_bytes(pretty)

    # Integrity

    def _check_problem_data(self, data: ProblemData, profiles=()) -> None:
        integrity.resolve_alternatives(data.alternatives, data.evaluations, profiles, self._errors)
        integrity.resolve_criteria(data.criteria, [data.evaluations], self._errors)
        integrity.check_criteria_references(data.scales, data.criteria, "criteria", self._errors)

    def _check_sorting_data(self, data: SortingData) -> None:
        data.cats_and_profs.validate()
        self._check_problem_data(data, data.all_profiles)
        integrity.check_profiles_not_alternatives(data.alternatives, data.all_profiles, self._errors)
        integrity.check_categories_agree(data.categories, data.cats_and_profs, self._errors)

    def _check_preferences(self, data: SortingData, coalitions, thresholds, profiles_evaluations,
                           dm: Optional[DecisionMaker] = None) -> None:
        if coalitions is not None:
            integrity.check_criteria_references(coalitions.criteria, data.criteria, "criteriaSet", self._errors, dm)
        if thresholds is not None:
            integrity.check_criteria_references(thresholds.criteria, data.criteria, "criteria", self._errors, dm)
        if profiles_evaluations is not None:
            integrity.check_profile_rows(profiles_evaluations, data.all_profiles, self._errors, dm)
            integrity.resolve_criteria(data.criteria, [profiles_evaluations], self._errors)

    # Fragments

    def _append_problem_fragments(self, data: ProblemData, thresholds: Optional[Thresholds] = None) -> None:
        if data.alternatives:
            self.append_fragment(AlternativesCodec().write(data.alternatives, concept=Concept.REAL))
        if isinstance(data, SortingData) and data.all_profiles:
            self.append_fragment(AlternativesCodec().write(data.all_profiles, concept=Concept.FICTIVE))
        if data.criteria:
            self.append_fragment(CriteriaCodec().write(data.criteria, data.scales, thresholds))
        if not data.evaluations.is_empty():
            self.append_fragment(
                EvaluationsCodec().write(data.evaluations, data.alternatives, data.criteria, Concept.REAL)
            )

    def _append_chain_fragments(self, data: SortingData) -> None:
        categories = data.cats_and_profs.categories or data.categories
        if categories:
            self.append_fragment(CategoriesCodec().write_categories(categories))
        if data.cats_and_profs.profiles:
            self.append_fragment(CategoriesCodec().write(data.cats_and_profs))

    def _append_preference_fragments(self, data: SortingData, coalitions, profiles_evaluations,
                                     name: Optional[str] = None) -> None:
        if coalitions is not None and not coalitions.is_empty():
            self.append_fragment(CoalitionsCodec().write(coalitions, name=name))
        if profiles_evaluations is not None and not profiles_evaluations.is_empty():
            self.append_fragment(
                EvaluationsCodec().write(
                    profiles_evaluations, data.all_profiles, data.criteria, Concept.FICTIVE, name=name
                )
            )

    # Composed problems

    def append_problem_data(self, data: ProblemData) -> None:
        """Real alternatives, criteria with scales and the real performance table."""
        self._check_problem_data(data)
        self._append_problem_fragments(data)

    def append_sorting_data(self, data: SortingData) -> None:
        """Problem data plus fictive profiles, categories and category profiles."""
        self._check_sorting_data(data)
        self._append_problem_fragments(data)
        self._append_chain_fragments(data)

    def append_sorting_preferences(self, preferences: SortingPreferences) -> None:
        """Sorting data with thresholds on criteria, coalitions and profiles evaluations."""
        self._check_sorting_data(preferences)
        self._check_preferences(
            preferences, preferences.coalitions, preferences.thresholds, preferences.profiles_evaluations
        )
        self._append_problem_fragments(preferences, preferences.thresholds)
        self._append_chain_fragments(preferences)
        self._append_preference_fragments(preferences, preferences.coalitions, preferences.profiles_evaluations)

    def _append_results(self, results, assignments) -> None:
        integrity.check_assignments(
            assignments, results.alternatives, results.cats_and_profs.categories or results.categories, self._errors
        )
        self.append_sorting_preferences(results)
        if not assignments.is_empty():
            self.append_fragment(AssignmentsCodec().write(assignments))

    def append_sorting_results(self, results: SortingResults) -> None:
        self._append_results(results, results.assignments)

    def append_sorting_results_to_multiple(self, results: SortingResultsToMultiple) -> None:
        self._append_results(results, results.assignments)

    def append_sorting_results_with_credibilities(self, results: SortingResultsWithCredibilities) -> None:
        self._append_results(results, results.assignments)

    def append_group_preferences(self, preferences: GroupSortingPreferences) -> None:
        """Group preferences: shared values unnamed, overrides named after their decision maker.

        Raises:
            InvalidInputError: If an override belongs to an undeclared decision maker
        """
        self._check_sorting_data(preferences)
        integrity.resolve_decision_makers(preferences.decision_makers, [preferences.overrides], self._errors)
        shared = preferences.shared
        self._check_preferences(preferences, shared.coalitions, shared.thresholds, shared.profiles_evaluations)
        for dm, own in preferences.overrides.items():
            self._check_preferences(preferences, own.coalitions, own.thresholds, own.profiles_evaluations, dm)

        if preferences.decision_makers:
            self.append_fragment(DecisionMakersCodec().write(preferences.decision_makers))
        self._append_problem_fragments(preferences, shared.thresholds)
        self._append_chain_fragments(preferences)
        self._append_preference_fragments(preferences, shared.coalitions, shared.profiles_evaluations)
        for dm, own in preferences.overrides.items():
            if own.thresholds is not None and not own.thresholds.is_empty():
                with_thresholds = set(own.thresholds.criteria)
                self.append_fragment(
                    CriteriaCodec().write(
                        [c for c in preferences.criteria if c in with_thresholds],
                        thresholds=own.thresholds, name=dm.id,
                    )
                )
            self._append_preference_fragments(preferences, own.coalitions, own.profiles_evaluations, name=dm.id)
        logger.debug(f"Wrote group preferences of {len(preferences.decision_makers)} decision makers")

    def append_group_results(self, results: GroupSortingResults) -> None:
        """Group preferences plus assignments named after each decision maker."""
        integrity.resolve_decision_makers(results.decision_makers, [results.assignments], self._errors)
        categories = results.cats_and_profs.categories or results.categories
        for dm, assignments in results.assignments.items():
            integrity.check_assignments(assignments, results.alternatives, categories, self._errors, dm)
        self.append_group_preferences(results)
        codec = AssignmentsCodec()
        for dm, assignments in results.assignments.items():
            if not assignments.is_empty():
                self.append_fragment(codec.write(assignments, name=dm.id))
