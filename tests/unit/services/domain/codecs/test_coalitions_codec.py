#!/usr/bin/env python3

import pytest

from xmcda_persist.core.exceptions import InvalidInputError
from xmcda_persist.models.entities import Criterion, DecisionMaker
from xmcda_persist.models.preferences import Coalitions
from xmcda_persist.services.domain.codecs import CoalitionsCodec
from tests.fixtures.xmcda_fixtures import coalitions_xml, fragment

G1, G2 = Criterion("g1"), Criterion("g2")

CRITERIA_VALUES = """
<criteriaValues mcdaConcept="Importance">
  <criterionValue><criterionID>g2</criterionID><value><real>3</real></value></criterionValue>
  <criterionValue><criterionID>g1</criterionID><value><integer>1</integer></value></criterionValue>
</criteriaValues>
"""


class TestCoalitionsCodec:
    """Test suite for reading and writing coalitions."""

    def test_weights_and_majority(self):
        coalitions = CoalitionsCodec().read(fragment(coalitions_xml({"g1": 0.6, "g2": 0.4}, majority=0.7)))

        assert coalitions.weights == {G1: 0.6, G2: 0.4}
        assert coalitions.majority_threshold == 0.7

    def test_criteria_values(self):
        coalitions = CoalitionsCodec().read(fragment(CRITERIA_VALUES))

        assert coalitions.criteria == (G2, G1)
        assert coalitions.majority_threshold is None

    def test_duplicate_weight(self):
        xml = (
            '<criteriaSet><element><criterionID>g1</criterionID><value><real>1</real></value></element>'
            "<element><criterionID>g1</criterionID><value><real>2</real></value></element></criteriaSet>"
        )
        with pytest.raises(InvalidInputError):
            CoalitionsCodec().read(fragment(xml))

    def test_unknown_criterion(self):
        codec = CoalitionsCodec(known_criteria=[G1])
        with pytest.raises(InvalidInputError) as exc_info:
            codec.read(fragment(coalitions_xml({"g1": 0.5, "g9": 0.5})))
        assert exc_info.value.details["criterion"] == "g9"

    def test_two_majority_thresholds(self):
        xml = (
            '<criteriaSet><value mcdaConcept="majority threshold"><real>0.5</real></value>'
            '<value mcdaConcept="majority threshold"><real>0.6</real></value></criteriaSet>'
        )
        with pytest.raises(InvalidInputError):
            CoalitionsCodec().read(fragment(xml))

    def test_read_all_named(self):
        """Test that unnamed sets are left to the shared values."""
        fragments = [
            fragment(coalitions_xml({"g1": 1.0})),
            fragment(coalitions_xml({"g1": 2.0}, name="d1")),
            fragment(coalitions_xml({"g2": 3.0}, name="d2")),
        ]
        codec = CoalitionsCodec()

        assert codec.might_be_per_decision_maker(fragments)
        all_coalitions = codec.read_all(fragments)

        assert list(all_coalitions) == [DecisionMaker("d1"), DecisionMaker("d2")]
        assert all_coalitions[DecisionMaker("d2")].weight(G2) == 3.0

    def test_write_then_read(self):
        coalitions = Coalitions({G2: 5.0, G1: 1.0}, majority_threshold=0.75)

        x_set = CoalitionsCodec().write(coalitions, name="d1")

        assert x_set.get("mcdaConcept") == "Importance"
        assert x_set.get("name") == "d1"
        assert CoalitionsCodec().read(x_set) == coalitions
