#!/usr/bin/env python3
"""Assignments of alternatives to categories."""

import math
from typing import Iterable, Optional

from ..core.exceptions import InvalidInputError
from .entities import Alternative, Category
from .matrices import values_close


class Assignments:
    """Crisp assignments: each alternative goes to exactly one category."""

    def __init__(self):
        self._assignments: dict[Alternative, Category] = {}

    def assign(self, alternative: Alternative, category: Category):
        self._assignments[alternative] = category

    def get(self, alternative: Alternative) -> Optional[Category]:
        return self._assignments.get(alternative)

    def items(self):
        return self._assignments.items()

    @property
    def alternatives(self) -> tuple[Alternative, ...]:
        return tuple(self._assignments)

    @property
    def categories(self) -> tuple[Category, ...]:
        return tuple(dict.fromkeys(self._assignments.values()))

    def is_empty(self) -> bool:
        return not self._assignments

    def __len__(self) -> int:
        return len(self._assignments)

    def __eq__(self, other) -> bool:
        if not isinstance(other, Assignments):
            return NotImplemented
        return self._assignments == other._assignments

    def __repr__(self) -> str:
        return f"Assignments({ {a.id: c.id for a, c in self._assignments.items()} })"


class AssignmentsToMultiple:
    """Each alternative goes to a non-empty ordered set of categories."""

    def __init__(self):
        self._assignments: dict[Alternative, tuple[Category, ...]] = {}

    def assign(self, alternative: Alternative, categories: Iterable[Category]):
        categories = tuple(dict.fromkeys(categories))
        if not categories:
            raise ValueError(f"{alternative} must be assigned to at least one category")
        self._assignments[alternative] = categories

    def get(self, alternative: Alternative) -> Optional[tuple[Category, ...]]:
        return self._assignments.get(alternative)

    def items(self):
        return self._assignments.items()

    @property
    def alternatives(self) -> tuple[Alternative, ...]:
        return tuple(self._assignments)

    @property
    def categories(self) -> tuple[Category, ...]:
        seen: dict[Category, None] = {}
        for categories in self._assignments.values():
            seen.update(dict.fromkeys(categories))
        return tuple(seen)

    def is_empty(self) -> bool:
        return not self._assignments

    def __len__(self) -> int:
        return len(self._assignments)

    def __eq__(self, other) -> bool:
        if not isinstance(other, AssignmentsToMultiple):
            return NotImplemented
        return {a: set(c) for a, c in self._assignments.items()} == {
            a: set(c) for a, c in other._assignments.items()
        }

    def __repr__(self) -> str:
        return f"AssignmentsToMultiple({ {a.id: [c.id for c in cs] for a, cs in self._assignments.items()} })"


class AssignmentsWithCredibilities:
    """Each alternative goes to categories with a credibility degree in [0, 1]."""

    def __init__(self):
        self._assignments: dict[Alternative, dict[Category, float]] = {}

    def assign(self, alternative: Alternative, credibilities: dict[Category, float]):
        if not credibilities:
            raise ValueError(f"{alternative} must be assigned to at least one category")
        checked = {}
        for category, credibility in credibilities.items():
            credibility = float(credibility)
            if math.isnan(credibility) or not 0.0 <= credibility <= 1.0:
                raise InvalidInputError(
                    "Credibility degree out of [0, 1]",
                    {"alternative": alternative.id, "category": category.id, "credibility": credibility},
                )
            checked[category] = credibility
        self._assignments[alternative] = checked

    def get(self, alternative: Alternative) -> Optional[dict[Category, float]]:
        credibilities = self._assignments.get(alternative)
        return dict(credibilities) if credibilities is not None else None

    def items(self):
        return ((a, dict(c)) for a, c in self._assignments.items())

    @property
    def alternatives(self) -> tuple[Alternative, ...]:
        return tuple(self._assignments)

    @property
    def categories(self) -> tuple[Category, ...]:
        seen: dict[Category, None] = {}
        for credibilities in self._assignments.values():
            seen.update(dict.fromkeys(credibilities))
        return tuple(seen)

    def is_empty(self) -> bool:
        return not self._assignments

    def __len__(self) -> int:
        return len(self._assignments)

    def approx_equals(self, other: "AssignmentsWithCredibilities", tolerance: Optional[float] = None) -> bool:
        if self._assignments.keys() != other._assignments.keys():
            return False
        for alternative, credibilities in self._assignments.items():
            theirs = other._assignments[alternative]
            if credibilities.keys() != theirs.keys():
                return False
            if not all(values_close(v, theirs[c], tolerance) for c, v in credibilities.items()):
                return False
        return True

    def __eq__(self, other) -> bool:
        if not isinstance(other, AssignmentsWithCredibilities):
            return NotImplemented
        return self._assignments == other._assignments

    def __repr__(self) -> str:
        return f"AssignmentsWithCredibilities({len(self._assignments)} alternatives)"
