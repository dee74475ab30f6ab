#!/usr/bin/env python3
"""Referential integrity checks across already-parsed entity values.

Entity codecs accept identifiers they know nothing about; these functions are
where alternatives, criteria, categories and decision makers mentioned by one
entity are checked against those declared by another. They are pure: they
only read their arguments and report problems through an ErrorsManager.
Readers run them after reading and the writer runs them before writing.
"""

import logging
from typing import Iterable, Mapping, Optional, Sequence

from ....core.error_handling import ErrorsManager
from ....models.assignments import Assignments, AssignmentsToMultiple, AssignmentsWithCredibilities
from ....models.categories import CatsAndProfs
from ....models.entities import Alternative, Category, Criterion, DecisionMaker
from ....models.matrices import Evaluations

logger = logging.getLogger(__name__)


def _ids(items: Iterable) -> list[str]:
    return [item.id for item in items]


def check_profiles_not_alternatives(
    alternatives: Sequence[Alternative], profiles: Sequence[Alternative], errors: ErrorsManager
) -> None:
    """A profile may not also be declared as a real alternative."""
    known_profiles = set(profiles)
    both = [a for a in alternatives if a in known_profiles]
    if both:
        errors.error(
            f"Alternatives also used as profiles: {_ids(both)}",
            fragment="alternatives", alternatives=_ids(both),
        )


def check_categories_agree(
    categories: Sequence[Category], cats_and_profs: CatsAndProfs, errors: ErrorsManager
) -> None:
    """Declared categories and the chain categories must be the same, in the same order."""
    if not categories or cats_and_profs.is_empty():
        return
    if tuple(categories) != cats_and_profs.categories:
        errors.error(
            "Declared categories do not match the category chain",
            fragment="categories",
            categories=_ids(categories), chain=_ids(cats_and_profs.categories),
        )


def resolve_alternatives(
    declared: Sequence[Alternative],
    evaluations: Evaluations,
    profiles: Sequence[Alternative],
    errors: ErrorsManager,
) -> tuple[Alternative, ...]:
    """Alternatives of a problem, checked against or inferred from evaluation rows.

    Args:
        declared: Declared alternatives, may be empty
        evaluations: Alternatives performance table
        profiles: Profiles, whose rows are accepted in the table as well
        errors: Errors manager of the current read

    Returns:
        The declared alternatives, or when none are declared the evaluation
        rows that are not profiles, in first-seen order
    """
    known_profiles = set(profiles)
    if not declared:
        inferred = tuple(a for a in evaluations.rows if a not in known_profiles)
        if inferred:
            logger.debug(f"Inferred {len(inferred)} alternatives from evaluations")
        return inferred
    known = set(declared) | known_profiles
    unknown = [a for a in evaluations.rows if a not in known]
    if unknown:
        errors.error(
            f"Evaluations reference undeclared alternatives: {_ids(unknown)}",
            fragment="performanceTable", alternatives=_ids(unknown),
        )
    return tuple(declared)


def resolve_criteria(
    declared: Sequence[Criterion], all_evaluations: Iterable[Evaluations], errors: ErrorsManager
) -> tuple[Criterion, ...]:
    """Criteria of a problem, checked against or inferred from evaluation columns."""
    columns: dict[Criterion, None] = {}
    for evaluations in all_evaluations:
        columns.update(dict.fromkeys(evaluations.columns))
    if not declared:
        return tuple(columns)
    known = set(declared)
    unknown = [c for c in columns if c not in known]
    if unknown:
        errors.error(
            f"Evaluations reference undeclared criteria: {_ids(unknown)}",
            fragment="performanceTable", criteria=_ids(unknown),
        )
    return tuple(declared)


def check_profile_rows(
    profiles_evaluations: Evaluations, profiles: Sequence[Alternative], errors: ErrorsManager,
    decision_maker: Optional[DecisionMaker] = None,
) -> None:
    """Rows of a profiles performance table must be profiles."""
    known = set(profiles)
    unknown = [p for p in profiles_evaluations.rows if p not in known]
    if unknown:
        details = {"fragment": "performanceTable", "profiles": _ids(unknown)}
        if decision_maker is not None:
            details["decision_maker"] = decision_maker.id
        errors.error(f"Profiles evaluations reference unknown profiles: {_ids(unknown)}", **details)


def check_criteria_references(
    used: Iterable[Criterion], criteria: Sequence[Criterion], fragment: str, errors: ErrorsManager,
    decision_maker: Optional[DecisionMaker] = None,
) -> None:
    """Criteria used by coalitions or thresholds must be declared.

    Skipped when no criteria are known at all.
    """
    if not criteria:
        return
    known = set(criteria)
    unknown = [c for c in used if c not in known]
    if unknown:
        details = {"fragment": fragment, "criteria": _ids(unknown)}
        if decision_maker is not None:
            details["decision_maker"] = decision_maker.id
        errors.error(f"Reference to unknown criteria: {_ids(unknown)}", **details)


def check_assignments(
    assignments: Assignments | AssignmentsToMultiple | AssignmentsWithCredibilities,
    alternatives: Sequence[Alternative],
    categories: Sequence[Category],
    errors: ErrorsManager,
    decision_maker: Optional[DecisionMaker] = None,
) -> None:
    """Assigned alternatives and target categories must be known.

    An empty alternatives or categories sequence means nothing was declared and
    the corresponding check is skipped.
    """
    details = {"fragment": "alternativesAffectations"}
    if decision_maker is not None:
        details["decision_maker"] = decision_maker.id
    if alternatives:
        known = set(alternatives)
        unknown = [a for a in assignments.alternatives if a not in known]
        if unknown:
            errors.error(f"Assignments of unknown alternatives: {_ids(unknown)}", alternatives=_ids(unknown), **details)
    if categories:
        known = set(categories)
        unknown = [c for c in assignments.categories if c not in known]
        if unknown:
            errors.error(f"Assignments to unknown categories: {_ids(unknown)}", categories=_ids(unknown), **details)


def resolve_decision_makers(
    declared: Sequence[DecisionMaker], per_decision_maker: Iterable[Mapping[DecisionMaker, object]],
    errors: ErrorsManager,
) -> tuple[DecisionMaker, ...]:
    """Decision makers of a group, checked against or inferred from per-DM data.

    Returns:
        The declared decision makers, or when none are declared every decision
        maker having data, in first-seen order
    """
    mentioned: dict[DecisionMaker, None] = {}
    for mapping in per_decision_maker:
        mentioned.update(dict.fromkeys(mapping))
    if not declared:
        return tuple(mentioned)
    known = set(declared)
    unknown = [dm for dm in mentioned if dm not in known]
    if unknown:
        errors.error(
            f"Data given for unknown decision makers: {_ids(unknown)}",
            fragment="methodParameters", decision_makers=_ids(unknown),
        )
    return tuple(declared)
