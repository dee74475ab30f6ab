#!/usr/bin/env python3
"""Categories and category profiles codec.

Categories are ranked with rank 1 for the best category. Profiles are the
boundaries between consecutive categories; the chain they form must be
connex, and any break is reported with the place where it breaks.
"""

import logging
from dataclasses import dataclass
from typing import Iterable, Optional
from xml.etree.ElementTree import Element, SubElement

from ....models.categories import CatsAndProfs
from ....models.entities import Alternative, Category
from .base import XmcdaCodec, attribute, child_text

logger = logging.getLogger(__name__)

PROFILES_KIND = "categoriesProfiles"


@dataclass(frozen=True)
class _ProfileBounds:
    profile: Alternative
    lower: Category
    upper: Category


class CategoriesCodec(XmcdaCodec):
    """Reads and writes <categories> and <categoriesProfiles> fragments."""

    KIND = "categories"

    def read_categories(self, fragment: Element) -> tuple[Category, ...]:
        """Read categories, ordered from worst to best.

        Raises:
            InvalidInputError: On a missing id, duplicate id, missing or duplicate rank
        """
        self._check_kind(fragment)
        ranked: dict[Category, float] = {}
        ranks: dict[float, Category] = {}
        for x_category in fragment.findall("category"):
            category_id = attribute(x_category, "id")
            if category_id is None:
                self._error("Found a category with no id")
                continue
            category = Category(category_id, attribute(x_category, "name"))
            if category in ranked:
                self._error(f"Duplicate category id: {category_id}", category=category_id)
                continue
            x_rank = x_category.find("rank")
            if x_rank is None:
                self._error(f"Expected a rank for category {category_id}", category=category_id)
                continue
            rank = self.read_number(x_rank, f"rank of {category_id}")
            if rank is None:
                continue
            if rank in ranks:
                self._error(
                    f"Categories {ranks[rank].id} and {category_id} share rank {rank}",
                    category=category_id, rank=rank,
                )
                continue
            ranked[category] = rank
            ranks[rank] = category
        return tuple(sorted(ranked, key=lambda c: ranked[c], reverse=True))

    def write_categories(self, categories: Iterable[Category]) -> Element:
        """Write categories given worst to best; the best one gets rank 1."""
        categories = list(dict.fromkeys(categories))
        x_categories = Element(self.KIND)
        count = len(categories)
        for index, category in enumerate(categories):
            x_category = SubElement(x_categories, "category", {"id": category.id})
            if category.name:
                x_category.set("name", category.name)
            SubElement(SubElement(x_category, "rank"), "integer").text = str(count - index)
        return x_categories

    def read(self, fragment: Element) -> CatsAndProfs:
        """Build the category chain from a categoriesProfiles fragment.

        Args:
            fragment: <categoriesProfiles> element

        Returns:
            CatsAndProfs ordered from worst to best, empty if there are no profiles

        Raises:
            InvalidInputError: If the profiles do not form one connex chain
        """
        self._check_kind(fragment, PROFILES_KIND)
        records = self._read_profile_bounds(fragment)
        if not records:
            return CatsAndProfs.empty()

        by_lower: dict[Category, _ProfileBounds] = {}
        by_upper: dict[Category, _ProfileBounds] = {}
        for record in records:
            if record.lower == record.upper:
                self._error(
                    f"Profile {record.profile.id} bounds category {record.lower.id} on both sides",
                    profile=record.profile.id, category=record.lower.id, fragment=PROFILES_KIND,
                )
                return CatsAndProfs.empty()
            for index, category, side in ((by_lower, record.lower, "lower"), (by_upper, record.upper, "upper")):
                if category in index:
                    self._error(
                        f"Category {category.id} is the {side} category of profiles "
                        f"{index[category].profile.id} and {record.profile.id}",
                        category=category.id, profiles=[index[category].profile.id, record.profile.id],
                        fragment=PROFILES_KIND,
                    )
                    return CatsAndProfs.empty()
                index[category] = record

        starts = [category for category in by_lower if category not in by_upper]
        if len(starts) != 1:
            self._error(
                f"Expected one worst category in the profile chain, found {len(starts)}",
                categories=[c.id for c in starts], fragment=PROFILES_KIND,
            )
            return CatsAndProfs.empty()

        categories = [starts[0]]
        profiles = []
        while categories[-1] in by_lower and len(profiles) < len(records):
            record = by_lower[categories[-1]]
            profiles.append(record.profile)
            categories.append(record.upper)

        if len(profiles) != len(records):
            chained = set(profiles)
            unchained = [r.profile.id for r in records if r.profile not in chained]
            self._error(
                f"Category chain breaks after category {categories[-1].id}",
                category=categories[-1].id, unchained_profiles=unchained, fragment=PROFILES_KIND,
            )
            return CatsAndProfs.empty()

        logger.debug(f"Read category chain of {len(categories)} categories")
        return CatsAndProfs(categories, profiles)

    def _read_profile_bounds(self, fragment: Element) -> list[_ProfileBounds]:
        records: list[_ProfileBounds] = []
        seen: set[Alternative] = set()
        for x_profile in fragment.findall("categoryProfile"):
            profile_id = child_text(x_profile, "alternativeID")
            if profile_id is None:
                self._error("Found a category profile with no alternative id", fragment=PROFILES_KIND)
                continue
            profile = Alternative(profile_id)
            if profile in seen:
                self._error(f"Duplicate profile: {profile_id}", profile=profile_id, fragment=PROFILES_KIND)
                continue
            seen.add(profile)
            lower = self._bound(x_profile, "lowerCategory")
            upper = self._bound(x_profile, "upperCategory")
            if lower is None or upper is None:
                self._error(
                    f"Profile {profile_id} needs both a lower and an upper category",
                    profile=profile_id, fragment=PROFILES_KIND,
                )
                continue
            records.append(_ProfileBounds(profile, lower, upper))
        return records

    @staticmethod
    def _bound(x_profile: Element, tag: str) -> Optional[Category]:
        category_id = child_text(x_profile, f"limits/{tag}/categoryID")
        return Category(category_id) if category_id is not None else None

    def write(self, cats_and_profs: CatsAndProfs) -> Element:
        """Write the profiles of a chain, worst boundary first.

        Raises:
            InvalidInputError: If the chain is not connex
        """
        cats_and_profs.validate()
        x_profiles = Element(PROFILES_KIND)
        categories = cats_and_profs.categories
        for index, profile in enumerate(cats_and_profs.profiles):
            x_profile = SubElement(x_profiles, "categoryProfile")
            self.write_id_element(x_profile, "alternativeID", profile.id)
            x_limits = SubElement(x_profile, "limits")
            self.write_id_element(SubElement(x_limits, "lowerCategory"), "categoryID", categories[index].id)
            self.write_id_element(SubElement(x_limits, "upperCategory"), "categoryID", categories[index + 1].id)
        return x_profiles
