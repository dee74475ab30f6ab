#!/usr/bin/env python3
"""Ordered chain of categories separated by boundary profiles."""

from typing import Iterable, Optional

from ..core.exceptions import InvalidInputError
from .entities import Alternative, Category


class CatsAndProfs:
    """Categories ordered from worst to best, with one profile between each pair.

    The profile at index i is the upper bound of category i and the lower bound
    of category i + 1. The chain is connex by construction: a chain that does
    not have exactly one profile between consecutive categories, or that
    repeats a category or profile, is rejected rather than repaired.
    """

    def __init__(self, categories: Iterable[Category] = (), profiles: Iterable[Alternative] = ()):
        self._categories = tuple(categories)
        self._profiles = tuple(profiles)
        self.validate()

    @classmethod
    def empty(cls) -> "CatsAndProfs":
        return cls()

    @classmethod
    def of_categories(cls, categories: Iterable[Category]) -> "CatsAndProfs":
        """Chain of categories without profiles; only valid for at most one category."""
        return cls(categories, ())

    def validate(self) -> None:
        """Check connexity of the chain.

        Raises:
            InvalidInputError: If the chain is broken
        """
        expected_profiles = max(len(self._categories) - 1, 0)
        if len(self._profiles) != expected_profiles:
            raise InvalidInputError(
                "Category chain is not connex: expected one profile between each pair of categories",
                {
                    "fragment": "categoriesProfiles",
                    "categories": [c.id for c in self._categories],
                    "profiles": [p.id for p in self._profiles],
                },
            )
        for label, items in (("category", self._categories), ("profile", self._profiles)):
            seen = set()
            for item in items:
                if item in seen:
                    raise InvalidInputError(
                        f"Category chain is not connex: {label} {item.id} appears twice",
                        {"fragment": "categoriesProfiles", label: item.id},
                    )
                seen.add(item)

    @property
    def categories(self) -> tuple[Category, ...]:
        return self._categories

    @property
    def profiles(self) -> tuple[Alternative, ...]:
        return self._profiles

    def is_empty(self) -> bool:
        return not self._categories

    def __len__(self) -> int:
        return len(self._categories)

    def _category_index(self, category: Category) -> int:
        try:
            return self._categories.index(category)
        except ValueError:
            raise KeyError(f"Unknown category {category.id}") from None

    def _profile_index(self, profile: Alternative) -> int:
        try:
            return self._profiles.index(profile)
        except ValueError:
            raise KeyError(f"Unknown profile {profile.id}") from None

    def profile_down(self, category: Category) -> Optional[Alternative]:
        """Lower bound profile of the category, None for the worst one."""
        index = self._category_index(category)
        return self._profiles[index - 1] if index > 0 else None

    def profile_up(self, category: Category) -> Optional[Alternative]:
        """Upper bound profile of the category, None for the best one."""
        index = self._category_index(category)
        return self._profiles[index] if index < len(self._profiles) else None

    def category_down(self, profile: Alternative) -> Category:
        return self._categories[self._profile_index(profile)]

    def category_up(self, profile: Alternative) -> Category:
        return self._categories[self._profile_index(profile) + 1]

    def __eq__(self, other) -> bool:
        if not isinstance(other, CatsAndProfs):
            return NotImplemented
        return self._categories == other._categories and self._profiles == other._profiles

    def __repr__(self) -> str:
        parts = []
        for index, category in enumerate(self._categories):
            parts.append(category.id)
            if index < len(self._profiles):
                parts.append(f"<{self._profiles[index].id}>")
        return f"CatsAndProfs({' '.join(parts)})"
