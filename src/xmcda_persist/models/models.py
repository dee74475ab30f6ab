#!/usr/bin/env python3

from pydantic import BaseModel, ConfigDict, Field

from .assignments import Assignments, AssignmentsToMultiple, AssignmentsWithCredibilities
from .categories import CatsAndProfs
from .entities import Alternative, Category, Criterion, DecisionMaker, Interval
from .matrices import Evaluations
from .preferences import Coalitions, Thresholds

# Pydantic Models


class _Composed(BaseModel):
    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)


class ProblemData(_Composed):
    """Alternatives, criteria with their scales, and the alternatives performance table."""

    alternatives: tuple[Alternative, ...] = ()
    criteria: tuple[Criterion, ...] = ()
    scales: dict[Criterion, Interval] = {}
    evaluations: Evaluations = Field(default_factory=Evaluations)


class SortingData(ProblemData):
    profiles: tuple[Alternative, ...] = ()
    categories: tuple[Category, ...] = ()  # worst to best
    cats_and_profs: CatsAndProfs = Field(default_factory=CatsAndProfs.empty)

    @property
    def all_profiles(self) -> tuple[Alternative, ...]:
        """Declared profiles followed by chain profiles not declared."""
        return tuple(dict.fromkeys(self.profiles + self.cats_and_profs.profiles))

    @property
    def all_alternatives(self) -> tuple[Alternative, ...]:
        return self.alternatives + self.all_profiles


class SortingPreferences(SortingData):
    coalitions: Coalitions = Field(default_factory=Coalitions)
    thresholds: Thresholds = Field(default_factory=Thresholds)
    profiles_evaluations: Evaluations = Field(default_factory=Evaluations)


class SortingResults(SortingPreferences):
    assignments: Assignments = Field(default_factory=Assignments)


class SortingResultsToMultiple(SortingPreferences):
    assignments: AssignmentsToMultiple = Field(default_factory=AssignmentsToMultiple)


class SortingResultsWithCredibilities(SortingPreferences):
    assignments: AssignmentsWithCredibilities = Field(default_factory=AssignmentsWithCredibilities)


class DecisionMakerPreferences(_Composed):
    """Preferences of one decision maker once shared values are filled in."""

    coalitions: Coalitions = Field(default_factory=Coalitions)
    thresholds: Thresholds = Field(default_factory=Thresholds)
    profiles_evaluations: Evaluations = Field(default_factory=Evaluations)


class DecisionMakerOverrides(_Composed):
    """Values given for one decision maker; None means not given."""

    coalitions: Coalitions | None = None
    thresholds: Thresholds | None = None
    profiles_evaluations: Evaluations | None = None

    def is_empty(self) -> bool:
        return self.coalitions is None and self.thresholds is None and self.profiles_evaluations is None


class GroupSortingPreferences(SortingData):
    """Sorting data shared by a group plus shared and per decision maker preferences.

    Each preference field is resolved on its own: a decision maker's own value
    when given, else the shared value, else an empty value.
    """

    decision_makers: tuple[DecisionMaker, ...] = ()
    shared: DecisionMakerOverrides = Field(default_factory=DecisionMakerOverrides)
    overrides: dict[DecisionMaker, DecisionMakerOverrides] = {}

    def preferences_of(self, dm: DecisionMaker) -> DecisionMakerPreferences:
        if dm not in self.decision_makers:
            raise KeyError(f"Unknown decision maker {dm.id}")
        own = self.overrides.get(dm) or DecisionMakerOverrides()
        resolved = {}
        for field_name in ("coalitions", "thresholds", "profiles_evaluations"):
            value = getattr(own, field_name)
            if value is None:
                value = getattr(self.shared, field_name)
            if value is not None:
                resolved[field_name] = value
        return DecisionMakerPreferences(**resolved)

    @property
    def preferences(self) -> dict[DecisionMaker, DecisionMakerPreferences]:
        return {dm: self.preferences_of(dm) for dm in self.decision_makers}


class GroupSortingResults(GroupSortingPreferences):
    assignments: dict[DecisionMaker, AssignmentsToMultiple] = {}

    def assignments_of(self, dm: DecisionMaker) -> AssignmentsToMultiple:
        if dm not in self.decision_makers:
            raise KeyError(f"Unknown decision maker {dm.id}")
        return self.assignments.get(dm) or AssignmentsToMultiple()
