#!/usr/bin/env python3

import math

import pytest

from xmcda_persist.core.error_handling import ErrorsManager, ErrorStrategy
from xmcda_persist.core.exceptions import InvalidInputError
from xmcda_persist.models.entities import Criterion, Interval, PreferenceDirection
from xmcda_persist.models.preferences import Thresholds
from xmcda_persist.services.domain.codecs import CriteriaCodec
from tests.fixtures.xmcda_fixtures import criteria_xml, fragment

CRITERIA_WITH_DETAILS = """
<criteria>
  <criterion id="g1" name="price">
    <scale><quantitative>
      <preferenceDirection>min</preferenceDirection>
      <minimum><real>0</real></minimum>
      <maximum><integer>100</integer></maximum>
    </quantitative></scale>
    <thresholds>
      <threshold mcdaConcept="ind"><constant><real>1.5</real></constant></threshold>
      <threshold mcdaConcept="pref"><constant><real>3</real></constant></threshold>
    </thresholds>
  </criterion>
  <criterion id="g2">
    <active>false</active>
  </criterion>
  <criterion id="g3">
    <thresholds>
      <threshold mcdaConcept="veto"><constant><real>10</real></constant></threshold>
    </thresholds>
  </criterion>
</criteria>
"""


class TestCriteriaCodecRead:
    """Test suite for reading criteria fragments."""

    def test_order_preserved(self):
        """Test that criteria keep document order rather than a sorted one."""
        read = CriteriaCodec().read(fragment(criteria_xml(["c1", "c3", "c4", "c2", "c5"])))
        assert [c.id for c in read.criteria] == ["c1", "c3", "c4", "c2", "c5"]

    def test_scales_thresholds_and_inactive(self):
        read = CriteriaCodec().read(fragment(CRITERIA_WITH_DETAILS))
        g1, g2, g3 = Criterion("g1"), Criterion("g2"), Criterion("g3")

        assert read.criteria == (g1, g3)
        assert read.criteria[0].name == "price"
        assert read.inactive == frozenset({g2})
        assert read.scales[g1] == Interval(
            preference_direction=PreferenceDirection.MINIMIZE, minimum=0.0, maximum=100.0
        )
        assert read.thresholds.get("indifference", g1) == 1.5
        assert read.thresholds.get("preference", g1) == 3.0
        assert read.thresholds.veto_thresholds == {g3: 10.0}

    def test_duplicate_id_rejected(self):
        with pytest.raises(InvalidInputError) as exc_info:
            CriteriaCodec().read(fragment(criteria_xml(["g1", "g2", "g1"])))
        assert exc_info.value.details["criterion"] == "g1"

    def test_duplicate_skipped_when_collecting(self):
        errors = ErrorsManager(ErrorStrategy.COLLECT)

        read = CriteriaCodec(errors).read(fragment(criteria_xml(["g1", "g2", "g1"])))

        assert [c.id for c in read.criteria] == ["g1", "g2"]
        assert len(errors.errors) == 1

    def test_unknown_threshold_concept(self):
        xml = (
            '<criteria><criterion id="g1"><thresholds>'
            '<threshold mcdaConcept="strict"><constant><real>1</real></constant></threshold>'
            "</thresholds></criterion></criteria>"
        )
        with pytest.raises(InvalidInputError):
            CriteriaCodec().read(fragment(xml))

    def test_inverted_scale(self):
        xml = (
            '<criteria><criterion id="g1"><scale><quantitative>'
            "<minimum><real>5</real></minimum><maximum><real>1</real></maximum>"
            "</quantitative></scale></criterion></criteria>"
        )
        with pytest.raises(InvalidInputError):
            CriteriaCodec().read(fragment(xml))

    def test_wrong_fragment_kind(self):
        with pytest.raises(ValueError):
            CriteriaCodec().read(fragment("<alternatives/>"))


class TestCriteriaCodecWrite:
    """Test suite for writing criteria fragments."""

    def test_empty_is_minimal(self):
        x_criteria = CriteriaCodec().write([])
        assert x_criteria.tag == "criteria"
        assert len(x_criteria) == 0

    def test_write_then_read(self):
        g1, g2 = Criterion("g1"), Criterion("g2")
        thresholds = Thresholds()
        thresholds.put_preference(g2, 2.0)
        scales = {g1: Interval(preference_direction=PreferenceDirection.MAXIMIZE, minimum=0.0)}

        x_criteria = CriteriaCodec().write([g2, g1], scales=scales, thresholds=thresholds)
        read = CriteriaCodec().read(x_criteria)

        assert read.criteria == (g2, g1)
        assert read.scales[g1].maximum == math.inf
        assert read.scales[g1].preference_direction is PreferenceDirection.MAXIMIZE
        assert read.thresholds == thresholds

    def test_unrestricted_scale_kept(self):
        """Test that a scale with no direction or bound survives a write and read."""
        g1, g2 = Criterion("g1"), Criterion("g2")
        read = CriteriaCodec().read(fragment(
            '<criteria><criterion id="g1"><scale><quantitative/></scale></criterion>'
            '<criterion id="g2"/></criteria>'
        ))
        assert read.scales == {g1: Interval()}

        x_criteria = CriteriaCodec().write(read.criteria, scales=read.scales)

        assert x_criteria.find("criterion[@id='g1']/scale/quantitative") is not None
        assert x_criteria.find("criterion[@id='g2']/scale") is None
        assert CriteriaCodec().read(x_criteria).scales == {g1: Interval()}
        assert g2 not in CriteriaCodec().read(x_criteria).scales

    def test_inactive_written_last(self):
        g1, g2 = Criterion("g1"), Criterion("g2")

        x_criteria = CriteriaCodec().write([g1, g2], inactive=[g1], name="d1")

        assert x_criteria.get("name") == "d1"
        assert [x.get("id") for x in x_criteria] == ["g2", "g1"]
        assert x_criteria.find("criterion/active").text == "false"
