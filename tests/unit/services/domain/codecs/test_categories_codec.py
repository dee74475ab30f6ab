#!/usr/bin/env python3

import pytest

from xmcda_persist.core.error_handling import ErrorsManager, ErrorStrategy
from xmcda_persist.core.exceptions import InvalidInputError
from xmcda_persist.models.categories import CatsAndProfs
from xmcda_persist.models.entities import Alternative, Category
from xmcda_persist.services.domain.codecs import CategoriesCodec
from tests.fixtures.xmcda_fixtures import categories_profiles_xml, categories_xml, fragment

C1, C2, C3 = Category("C1"), Category("C2"), Category("C3")
P1, P2 = Alternative("p1"), Alternative("p2")


class TestCategoriesRead:
    """Test suite for reading ranked categories."""

    def test_ordered_worst_to_best(self):
        """Test that rank 1 is the best category and comes last."""
        categories = CategoriesCodec().read_categories(
            fragment(categories_xml([("good", 1), ("bad", 3), ("medium", 2)]))
        )
        assert [c.id for c in categories] == ["bad", "medium", "good"]

    def test_shared_rank(self):
        with pytest.raises(InvalidInputError):
            CategoriesCodec().read_categories(fragment(categories_xml([("C1", 1), ("C2", 1)])))

    def test_missing_rank(self):
        with pytest.raises(InvalidInputError):
            CategoriesCodec().read_categories(fragment('<categories><category id="C1"/></categories>'))

    def test_write_ranks(self):
        x_categories = CategoriesCodec().write_categories([C1, C2, C3])

        assert [x.findtext("rank/integer") for x in x_categories] == ["3", "2", "1"]
        assert CategoriesCodec().read_categories(x_categories) == (C1, C2, C3)


class TestCategoryChain:
    """Test suite for building the chain from categoriesProfiles."""

    def test_two_categories(self):
        chain = CategoriesCodec().read(fragment(categories_profiles_xml([("p1", "C1", "C2")])))
        assert chain == CatsAndProfs([C1, C2], [P1])

    def test_three_categories_any_order(self):
        """Test that the chain is rebuilt whatever the profile order."""
        chain = CategoriesCodec().read(
            fragment(categories_profiles_xml([("p2", "C2", "C3"), ("p1", "C1", "C2")]))
        )

        assert chain.categories == (C1, C2, C3)
        assert chain.profiles == (P1, P2)

    def test_gap_fails(self):
        """Test that a chain with a missing link is rejected."""
        xml = categories_profiles_xml([("p1", "C1", "C2"), ("p2", "C3", "C4")])
        with pytest.raises(InvalidInputError):
            CategoriesCodec().read(fragment(xml))

    def test_break_location_reported(self):
        xml = categories_profiles_xml([("p1", "C1", "C2"), ("p2", "C3", "C4"), ("p3", "C4", "C3")])

        with pytest.raises(InvalidInputError) as exc_info:
            CategoriesCodec().read(fragment(xml))

        assert exc_info.value.details["category"] == "C2"
        assert exc_info.value.details["unchained_profiles"] == ["p2", "p3"]

    def test_branching_fails(self):
        xml = categories_profiles_xml([("p1", "C1", "C2"), ("p2", "C1", "C3")])
        with pytest.raises(InvalidInputError):
            CategoriesCodec().read(fragment(xml))

    def test_broken_chain_is_empty_when_collecting(self):
        errors = ErrorsManager(ErrorStrategy.COLLECT)
        xml = categories_profiles_xml([("p1", "C1", "C1")])

        chain = CategoriesCodec(errors).read(fragment(xml))

        assert chain.is_empty()
        assert len(errors.errors) == 1

    def test_no_profiles(self):
        assert CategoriesCodec().read(fragment("<categoriesProfiles/>")).is_empty()

    def test_write_then_read(self):
        chain = CatsAndProfs([C1, C2, C3], [P1, P2])
        assert CategoriesCodec().read(CategoriesCodec().write(chain)) == chain
