#!/usr/bin/env python3

import pytest

from xmcda_persist.core.exceptions import InvalidInputError
from xmcda_persist.services.domain.codecs import Concept, matching_fragments, select_fragments
from tests.fixtures.xmcda_fixtures import fragment, performance_table_xml

CELLS = {"a1": {"g1": 1.0}}


def _tables(*concepts):
    return [fragment(performance_table_xml(CELLS, concept=concept)) for concept in concepts]


class TestConcept:
    """Test suite for concept tags."""

    @pytest.mark.parametrize("tag,expected", [("REAL", Concept.REAL), ("Fictive", Concept.FICTIVE), (None, None), ("other", None)])
    def test_from_tag(self, tag, expected):
        assert Concept.from_tag(tag) is expected

    def test_all_matches_everything(self):
        assert Concept.ALL.matches(None)
        assert Concept.ALL.matches("anything")
        assert not Concept.REAL.matches(None)


class TestSelectFragments:
    """Test suite for choosing same-kind fragments by concept."""

    def test_single_fragment_whatever_its_tag(self):
        """Test that a lone fragment is used for any requested concept."""
        tables = _tables("REAL")
        for concept in (Concept.REAL, Concept.FICTIVE, Concept.ALL, None):
            assert select_fragments(tables, concept, "performanceTable") == tables

    def test_pick_by_concept(self):
        real, fictive = _tables("REAL", "FICTIVE")

        assert select_fragments([real, fictive], Concept.FICTIVE, "performanceTable") == [fictive]
        assert select_fragments([real, fictive], Concept.REAL, "performanceTable") == [real]

    def test_all_keeps_everything(self):
        tables = _tables("REAL", "FICTIVE", None)
        assert select_fragments(tables, Concept.ALL, "performanceTable") == tables

    def test_untagged_among_two_tagged_fails(self):
        """Test that asking for the untagged table among two tagged ones is ambiguous."""
        with pytest.raises(InvalidInputError) as exc_info:
            select_fragments(_tables("REAL", "FICTIVE"), None, "performanceTable")
        assert exc_info.value.details["matches"] == 0

    def test_two_matches_fail(self):
        with pytest.raises(InvalidInputError):
            select_fragments(_tables("REAL", "real"), Concept.REAL, "performanceTable")

    def test_no_fragments(self):
        assert select_fragments([], Concept.REAL, "performanceTable") == []

    def test_matching_untagged(self):
        tables = _tables("REAL", None)
        assert matching_fragments(tables, None) == [tables[1]]
