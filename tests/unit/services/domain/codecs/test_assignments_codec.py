#!/usr/bin/env python3

import pytest

from xmcda_persist.core.error_handling import ErrorsManager, ErrorStrategy
from xmcda_persist.core.exceptions import InvalidInputError
from xmcda_persist.models.assignments import Assignments, AssignmentsToMultiple, AssignmentsWithCredibilities
from xmcda_persist.models.entities import Alternative, Category, DecisionMaker
from xmcda_persist.services.domain.codecs import AssignmentsCodec
from tests.fixtures.xmcda_fixtures import affectations_xml, fragment

A1, A2 = Alternative("a1"), Alternative("a2")
C1, C2 = Category("C1"), Category("C2")

WITH_SETS = """
<alternativesAffectations>
  <alternativeAffectation>
    <alternativeID>a1</alternativeID>
    <categoriesSet>
      <element><categoryID>C1</categoryID><value><real>0.3</real></value></element>
      <element><categoryID>C2</categoryID><value><real>0.7</real></value></element>
    </categoriesSet>
  </alternativeAffectation>
  <alternativeAffectation>
    <alternativeID>a2</alternativeID>
    <categoryID>C2</categoryID>
  </alternativeAffectation>
</alternativesAffectations>
"""


def _affectation(body: str) -> str:
    return (
        "<alternativesAffectations><alternativeAffectation><alternativeID>a1</alternativeID>"
        f"{body}</alternativeAffectation></alternativesAffectations>"
    )


class TestAssignmentsCodecRead:
    """Test suite for reading alternativesAffectations."""

    def test_crisp(self):
        assignments = AssignmentsCodec().read(fragment(affectations_xml({"a1": "C1", "a2": "C2"})))

        assert assignments.get(A1) == C1
        assert assignments.alternatives == (A1, A2)

    def test_crisp_rejects_several_categories(self):
        with pytest.raises(InvalidInputError):
            AssignmentsCodec().read(fragment(WITH_SETS))

    def test_to_multiple(self):
        assignments = AssignmentsCodec().read_to_multiple(fragment(WITH_SETS))

        assert assignments.get(A1) == (C1, C2)
        assert assignments.get(A2) == (C2,)

    def test_with_credibilities(self):
        """Test that a lone category without credibility is fully credible."""
        assignments = AssignmentsCodec().read_with_credibilities(fragment(WITH_SETS))

        assert assignments.get(A1) == {C1: 0.3, C2: 0.7}
        assert assignments.get(A2) == {C2: 1.0}

    def test_missing_credibility_among_several(self):
        xml = _affectation(
            "<categoriesSet><element><categoryID>C1</categoryID><value><real>0.5</real></value></element>"
            "<element><categoryID>C2</categoryID></element></categoriesSet>"
        )
        with pytest.raises(InvalidInputError) as exc_info:
            AssignmentsCodec().read_with_credibilities(fragment(xml))
        assert exc_info.value.details["categories"] == ["C2"]

    def test_credibility_out_of_range(self):
        xml = _affectation("<categoryID>C1</categoryID><value><real>1.5</real></value>")
        with pytest.raises(InvalidInputError):
            AssignmentsCodec().read_with_credibilities(fragment(xml))

    def test_both_category_forms(self):
        xml = _affectation("<categoryID>C1</categoryID><categoriesSet/>")
        with pytest.raises(InvalidInputError):
            AssignmentsCodec().read(fragment(xml))

    def test_unknown_category_skipped_when_collecting(self):
        errors = ErrorsManager(ErrorStrategy.COLLECT)
        codec = AssignmentsCodec(known_categories=[C1], errors=errors)

        assignments = codec.read(fragment(affectations_xml({"a1": "C1", "a2": "C9"})))

        assert assignments.alternatives == (A1,)
        assert "C9" in errors.errors[0]

    def test_read_all_requires_names(self):
        fragments = [
            fragment(affectations_xml({"a1": "C1"}, name="d1")),
            fragment(affectations_xml({"a1": "C2"})),
        ]
        with pytest.raises(InvalidInputError):
            AssignmentsCodec().read_all(fragments)

    def test_read_all(self):
        fragments = [
            fragment(affectations_xml({"a1": "C1"}, name="d1")),
            fragment(affectations_xml({"a1": "C2"}, name="d2")),
        ]

        all_assignments = AssignmentsCodec().read_all(fragments)

        assert all_assignments[DecisionMaker("d2")].get(A1) == (C2,)


class TestAssignmentsCodecWrite:
    """Test suite for writing alternativesAffectations."""

    def test_crisp(self):
        assignments = Assignments()
        assignments.assign(A1, C2)

        x_affectations = AssignmentsCodec().write(assignments)

        assert x_affectations.findtext("alternativeAffectation/categoryID") == "C2"
        assert AssignmentsCodec().read(x_affectations) == assignments

    def test_to_multiple(self):
        assignments = AssignmentsToMultiple()
        assignments.assign(A1, [C1, C2])
        assignments.assign(A2, [C2])

        x_affectations = AssignmentsCodec().write(assignments, name="d1")

        assert x_affectations.get("name") == "d1"
        assert x_affectations[1].find("categoriesSet") is None
        assert AssignmentsCodec().read_to_multiple(x_affectations) == assignments

    def test_with_credibilities(self):
        assignments = AssignmentsWithCredibilities()
        assignments.assign(A1, {C1: 0.25, C2: 0.75})

        restored = AssignmentsCodec().read_with_credibilities(AssignmentsCodec().write(assignments))

        assert restored.approx_equals(assignments)
