#!/usr/bin/env python3
"""Reader for sorting problems: categories, profiles, preferences and assignments."""

import logging

from ....models.assignments import Assignments, AssignmentsToMultiple, AssignmentsWithCredibilities
from ....models.categories import CatsAndProfs
from ....models.entities import Alternative, Category
from ....models.matrices import Evaluations
from ....models.models import (
    SortingData,
    SortingPreferences,
    SortingResults,
    SortingResultsToMultiple,
    SortingResultsWithCredibilities,
)
from ..codecs.alternatives import AlternativesCodec, ParsingMethod
from ..codecs.assignments import AssignmentsCodec
from ..codecs.categories import PROFILES_KIND, CategoriesCodec
from ..codecs.concept import Concept
from ..codecs.evaluations import EvaluationsCodec
from . import integrity
from .problem_reader import ProblemReader, SourceKind

logger = logging.getLogger(__name__)


class SortingProblemReader(ProblemReader):
    """Reads sorting problems.

    Profiles are the FICTIVE alternatives. When alternatives and profiles are
    declared in the same source and every alternative is taken, profiles are
    told apart by their FICTIVE marking or by their place in the category
    chain. Likewise, when both performance tables come from the same source,
    rows of profiles go to the profiles evaluations and the other rows to the
    alternatives evaluations.
    """

    def _splits_declared_alternatives(self) -> bool:
        return (
            self._shares_source(SourceKind.ALTERNATIVES, SourceKind.PROFILES)
            and self.resolved_parsing_method is ParsingMethod.TAKE_ALL
        )

    def _splits_evaluations(self) -> bool:
        return self._shares_source(SourceKind.ALTERNATIVES_EVALUATIONS, SourceKind.PROFILES_EVALUATIONS)

    # Categories

    def read_categories(self) -> tuple[Category, ...]:
        """Declared categories, worst to best."""
        return self._cached("categories", self._read_categories)

    def _read_categories(self) -> tuple[Category, ...]:
        fragment = self._at_most_one(self._fragments(SourceKind.CATEGORIES, "categories"), "categories")
        if fragment is None:
            return ()
        return CategoriesCodec(self.errors).read_categories(fragment)

    def read_cats_and_profs(self) -> CatsAndProfs:
        """The category chain, named after the declared categories when available.

        A single declared category makes a chain without profiles.
        """
        return self._cached("cats_and_profs", self._read_cats_and_profs)

    def _read_cats_and_profs(self) -> CatsAndProfs:
        categories = self.read_categories()
        fragment = self._at_most_one(
            self._fragments(SourceKind.CATEGORIES_PROFILES, PROFILES_KIND), PROFILES_KIND
        )
        chain = CategoriesCodec(self.errors).read(fragment) if fragment is not None else CatsAndProfs.empty()
        if chain.is_empty():
            return CatsAndProfs.of_categories(categories) if len(categories) == 1 else chain
        named = {category: category for category in categories}
        return CatsAndProfs([named.get(c, c) for c in chain.categories], chain.profiles)

    # Profiles

    def read_profiles(self) -> tuple[Alternative, ...]:
        """Declared profiles followed by chain profiles not declared."""
        return self._cached("profiles", self._read_profiles)

    def _read_profiles(self) -> tuple[Alternative, ...]:
        chain_profiles = self.read_cats_and_profs().profiles
        if self._splits_declared_alternatives():
            declared = self._read_declared_alternatives().marked(Concept.FICTIVE)
        else:
            fragments = self._fragments(SourceKind.PROFILES, "alternatives")
            method = self.resolved_parsing_method
            if not self._shares_source(SourceKind.ALTERNATIVES, SourceKind.PROFILES):
                method = ParsingMethod.TAKE_ALL
            declared = AlternativesCodec(Concept.FICTIVE, method, self.errors).read(fragments).alternatives
        return tuple(dict.fromkeys(declared + chain_profiles))

    def _read_alternatives(self) -> tuple[Alternative, ...]:
        alternatives = super()._read_alternatives()
        if self._splits_declared_alternatives():
            profiles = set(self.read_profiles())
            alternatives = tuple(a for a in alternatives if a not in profiles)
        return alternatives

    # Evaluations

    def _read_alternatives_evaluations(self) -> Evaluations:
        evaluations = super()._read_alternatives_evaluations()
        if self._splits_evaluations():
            profiles = set(self.read_profiles())
            evaluations = evaluations.restricted_to_rows(a for a in evaluations.rows if a not in profiles)
        return evaluations

    def read_profiles_evaluations(self) -> Evaluations:
        """Evaluations of the profiles, from the FICTIVE table or from every table with TAKE_ALL."""
        return self._cached("profiles_evaluations", self._read_profiles_evaluations)

    def _read_profiles_evaluations(self) -> Evaluations:
        concept = Concept.ALL if self.resolved_parsing_method is ParsingMethod.TAKE_ALL else Concept.FICTIVE
        fragments = self._evaluation_fragments(SourceKind.PROFILES_EVALUATIONS)
        evaluations = EvaluationsCodec(concept, self.errors).read(fragments)
        if self._splits_evaluations():
            evaluations = evaluations.restricted_to_rows(self.read_profiles())
        return evaluations

    # Assignments

    def _assignments_fragment(self):
        fragments = self._shared(self._fragments(SourceKind.ASSIGNMENTS, "alternativesAffectations"))
        return self._at_most_one(fragments, "alternativesAffectations")

    def read_assignments(self) -> Assignments:
        return self._cached("assignments", lambda: self._read_assignments("read", Assignments))

    def read_assignments_to_multiple(self) -> AssignmentsToMultiple:
        return self._cached(
            "assignments_to_multiple", lambda: self._read_assignments("read_to_multiple", AssignmentsToMultiple)
        )

    def read_assignments_with_credibilities(self) -> AssignmentsWithCredibilities:
        return self._cached(
            "assignments_with_credibilities",
            lambda: self._read_assignments("read_with_credibilities", AssignmentsWithCredibilities),
        )

    def _read_assignments(self, method: str, empty):
        fragment = self._assignments_fragment()
        if fragment is None:
            return empty()
        return getattr(AssignmentsCodec(errors=self.errors), method)(fragment)

    # Composition

    def read_sorting_data(self) -> SortingData:
        """Alternatives, profiles, criteria, category chain and alternatives evaluations."""
        return self._composed("sorting_data", self._compose_sorting_data)

    def _compose_sorting_data(self) -> SortingData:
        categories = self.read_categories()
        chain = self.read_cats_and_profs()
        profiles = self.read_profiles()
        evaluations = self.read_alternatives_evaluations()
        integrity.check_categories_agree(categories, chain, self.errors)
        integrity.check_profiles_not_alternatives(self.read_alternatives(), profiles, self.errors)
        alternatives = integrity.resolve_alternatives(self.read_alternatives(), evaluations, profiles, self.errors)
        criteria = integrity.resolve_criteria(self.read_criteria(), [evaluations], self.errors)
        data = SortingData(
            alternatives=alternatives,
            criteria=criteria,
            scales=self.read_scales(),
            evaluations=evaluations,
            profiles=profiles,
            categories=categories or chain.categories,
            cats_and_profs=chain,
        )
        logger.info(
            f"Read sorting data with {len(alternatives)} alternatives, {len(profiles)} profiles "
            f"and {len(chain)} categories"
        )
        return data

    def read_sorting_preferences(self) -> SortingPreferences:
        """Sorting data plus coalitions, thresholds and profiles evaluations."""
        return self._composed("sorting_preferences", self._compose_sorting_preferences)

    def _compose_sorting_preferences(self) -> SortingPreferences:
        data = self.read_sorting_data()
        coalitions = self.read_coalitions()
        thresholds = self.read_thresholds()
        profiles_evaluations = self.read_profiles_evaluations()
        criteria = integrity.resolve_criteria(
            self.read_criteria(), [data.evaluations, profiles_evaluations], self.errors
        )
        integrity.check_profile_rows(profiles_evaluations, data.profiles, self.errors)
        integrity.check_criteria_references(coalitions.criteria, criteria, "criteriaSet", self.errors)
        integrity.check_criteria_references(thresholds.criteria, criteria, "criteria", self.errors)
        return SortingPreferences(
            **{**dict(data), "criteria": criteria},
            coalitions=coalitions,
            thresholds=thresholds,
            profiles_evaluations=profiles_evaluations,
        )

    def _compose_results(self, results_class, assignments):
        preferences = self.read_sorting_preferences()
        integrity.check_assignments(
            assignments, preferences.alternatives, preferences.cats_and_profs.categories or preferences.categories,
            self.errors,
        )
        fields = dict(preferences)
        if not fields["alternatives"]:
            fields["alternatives"] = assignments.alternatives
        return results_class(**fields, assignments=assignments)

    def read_sorting_results(self) -> SortingResults:
        """Sorting preferences plus crisp assignments.

        Raises:
            InvalidInputError: If an alternative is assigned to several categories
        """
        return self._composed(
            "sorting_results", lambda: self._compose_results(SortingResults, self.read_assignments())
        )

    def read_sorting_results_to_multiple(self) -> SortingResultsToMultiple:
        return self._composed(
            "sorting_results_to_multiple",
            lambda: self._compose_results(SortingResultsToMultiple, self.read_assignments_to_multiple()),
        )

    def read_sorting_results_with_credibilities(self) -> SortingResultsWithCredibilities:
        return self._composed(
            "sorting_results_with_credibilities",
            lambda: self._compose_results(
                SortingResultsWithCredibilities, self.read_assignments_with_credibilities()
            ),
        )
