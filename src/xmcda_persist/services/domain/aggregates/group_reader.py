#!/usr/bin/env python3
"""Reader for group sorting problems.

Fragments named after a decision maker carry that decision maker's own
coalitions, thresholds, profiles evaluations or assignments. Unnamed
fragments carry the values shared by the whole group.
"""

import logging

from ....models.assignments import AssignmentsToMultiple
from ....models.entities import DecisionMaker
from ....models.matrices import Evaluations
from ....models.models import DecisionMakerOverrides, GroupSortingPreferences, GroupSortingResults
from ....models.preferences import Coalitions, Thresholds
from ..codecs.alternatives import ParsingMethod
from ..codecs.base import attribute
from ..codecs.coalitions import CoalitionsCodec
from ..codecs.concept import Concept
from ..codecs.criteria import CriteriaCodec
from ..codecs.decision_makers import DecisionMakersCodec
from ..codecs.evaluations import EvaluationsCodec
from ..codecs.assignments import AssignmentsCodec
from . import integrity
from .problem_reader import SourceKind
from .sorting_reader import SortingProblemReader

logger = logging.getLogger(__name__)


def _named(fragments: list) -> list:
    return [fragment for fragment in fragments if attribute(fragment, "name") is not None]


class GroupSortingProblemReader(SortingProblemReader):
    """Reads group sorting problems.

    Reads inherited from SortingProblemReader only see unnamed fragments and
    so return the shared values.
    """

    def _shared(self, fragments: list) -> list:
        return [fragment for fragment in fragments if attribute(fragment, "name") is None]

    def read_decision_makers(self) -> tuple[DecisionMaker, ...]:
        """Declared decision makers, empty when none are declared."""
        return self._cached("decision_makers", self._read_decision_makers)

    def _read_decision_makers(self) -> tuple[DecisionMaker, ...]:
        fragment = self._at_most_one(
            self._fragments(SourceKind.DECISION_MAKERS, DecisionMakersCodec.KIND), DecisionMakersCodec.KIND
        )
        if fragment is None:
            return ()
        return DecisionMakersCodec(self.errors).read(fragment)

    def read_all_coalitions(self) -> dict[DecisionMaker, Coalitions]:
        return self._cached(
            "all_coalitions",
            lambda: CoalitionsCodec(errors=self.errors).read_all(
                _named(self._fragments(SourceKind.COALITIONS, "criteriaSet"))
            ),
        )

    def read_all_thresholds(self) -> dict[DecisionMaker, Thresholds]:
        """Thresholds of each decision maker, from criteria fragments named after them."""
        return self._cached("all_thresholds", self._read_all_thresholds)

    def _read_all_thresholds(self) -> dict[DecisionMaker, Thresholds]:
        codec = CriteriaCodec(self.errors)
        all_thresholds: dict[DecisionMaker, Thresholds] = {}
        for fragment in _named(self._fragments(SourceKind.CRITERIA, "criteria")):
            dm = DecisionMaker(attribute(fragment, "name"))
            if dm in all_thresholds:
                self.errors.error(
                    f"Found two criteria fragments for {dm.id}", fragment="criteria", decision_maker=dm.id
                )
                continue
            all_thresholds[dm] = codec.read_thresholds(fragment)
        return all_thresholds

    def read_all_profiles_evaluations(self) -> dict[DecisionMaker, Evaluations]:
        return self._cached("all_profiles_evaluations", self._read_all_profiles_evaluations)

    def _read_all_profiles_evaluations(self) -> dict[DecisionMaker, Evaluations]:
        concept = None if self.resolved_parsing_method is ParsingMethod.TAKE_ALL else Concept.FICTIVE
        fragments = _named(self._fragments(SourceKind.PROFILES_EVALUATIONS, "performanceTable"))
        return EvaluationsCodec(concept, self.errors).read_per_decision_maker(fragments)

    def read_all_assignments(self) -> dict[DecisionMaker, AssignmentsToMultiple]:
        return self._cached(
            "all_assignments",
            lambda: AssignmentsCodec(errors=self.errors).read_all(
                _named(self._fragments(SourceKind.ASSIGNMENTS, "alternativesAffectations"))
            ),
        )

    def _shared_overrides(self) -> DecisionMakerOverrides:
        coalitions = self.read_coalitions()
        thresholds = self.read_thresholds()
        profiles_evaluations = self.read_profiles_evaluations()
        return DecisionMakerOverrides(
            coalitions=None if coalitions.is_empty() else coalitions,
            thresholds=None if thresholds.is_empty() else thresholds,
            profiles_evaluations=None if profiles_evaluations.is_empty() else profiles_evaluations,
        )

    def read_group_preferences(self) -> GroupSortingPreferences:
        """Sorting data, decision makers, shared preferences and per decision maker overrides."""
        return self._composed("group_preferences", self._compose_group_preferences)

    def _compose_group_preferences(self) -> GroupSortingPreferences:
        data = self.read_sorting_data()
        shared = self._shared_overrides()
        all_coalitions = self.read_all_coalitions()
        all_thresholds = self.read_all_thresholds()
        all_profiles_evaluations = self.read_all_profiles_evaluations()
        decision_makers = integrity.resolve_decision_makers(
            self.read_decision_makers(), [all_coalitions, all_thresholds, all_profiles_evaluations], self.errors
        )

        tables = [data.evaluations, shared.profiles_evaluations or Evaluations()]
        tables.extend(all_profiles_evaluations.values())
        criteria = integrity.resolve_criteria(self.read_criteria(), tables, self.errors)

        integrity.check_criteria_references(self.read_coalitions().criteria, criteria, "criteriaSet", self.errors)
        integrity.check_criteria_references(self.read_thresholds().criteria, criteria, "criteria", self.errors)
        integrity.check_profile_rows(self.read_profiles_evaluations(), data.profiles, self.errors)
        overrides: dict[DecisionMaker, DecisionMakerOverrides] = {}
        for dm in decision_makers:
            own = DecisionMakerOverrides(
                coalitions=all_coalitions.get(dm),
                thresholds=all_thresholds.get(dm),
                profiles_evaluations=all_profiles_evaluations.get(dm),
            )
            if own.coalitions is not None:
                integrity.check_criteria_references(own.coalitions.criteria, criteria, "criteriaSet", self.errors, dm)
            if own.thresholds is not None:
                integrity.check_criteria_references(own.thresholds.criteria, criteria, "criteria", self.errors, dm)
            if own.profiles_evaluations is not None:
                integrity.check_profile_rows(own.profiles_evaluations, data.profiles, self.errors, dm)
            if not own.is_empty():
                overrides[dm] = own

        logger.info(f"Read group preferences of {len(decision_makers)} decision makers")
        return GroupSortingPreferences(
            **{**dict(data), "criteria": criteria},
            decision_makers=decision_makers,
            shared=shared,
            overrides=overrides,
        )

    def read_group_results(self) -> GroupSortingResults:
        """Group preferences plus the assignments of each decision maker."""
        return self._composed("group_results", self._compose_group_results)

    def _compose_group_results(self) -> GroupSortingResults:
        preferences = self.read_group_preferences()
        all_assignments = self.read_all_assignments()
        decision_makers = preferences.decision_makers
        if self.read_decision_makers():
            integrity.resolve_decision_makers(decision_makers, [all_assignments], self.errors)
        else:
            decision_makers = tuple(dict.fromkeys(decision_makers + tuple(all_assignments)))
        categories = preferences.cats_and_profs.categories or preferences.categories
        for dm, assignments in all_assignments.items():
            integrity.check_assignments(assignments, preferences.alternatives, categories, self.errors, dm)
        return GroupSortingResults(
            **{**dict(preferences), "decision_makers": decision_makers},
            assignments=all_assignments,
        )
