#!/usr/bin/env python3

import pytest

from xmcda_persist.core.exceptions import InvalidInputError
from xmcda_persist.models.entities import Alternative, Criterion, DecisionMaker
from xmcda_persist.models.matrices import Evaluations
from xmcda_persist.services.domain.codecs import Concept, EvaluationsCodec
from tests.fixtures.xmcda_fixtures import fragment, performance_table_xml

A1, P1 = Alternative("a1"), Alternative("p1")
G1, G2 = Criterion("g1"), Criterion("g2")


class TestEvaluationsCodecRead:
    """Test suite for reading performance tables."""

    @pytest.fixture
    def tables(self):
        return [
            fragment(performance_table_xml({"a1": {"g1": 1.0, "g2": 2.0}}, concept="REAL")),
            fragment(performance_table_xml({"p1": {"g1": 5.0}}, concept="FICTIVE")),
        ]

    def test_real_and_fictive(self, tables):
        real = EvaluationsCodec(Concept.REAL).read(tables)
        fictive = EvaluationsCodec(Concept.FICTIVE).read(tables)

        assert real.rows == (A1,)
        assert real.get(A1, G2) == 2.0
        assert fictive.rows == (P1,)

    def test_all_merges(self, tables):
        merged = EvaluationsCodec(Concept.ALL).read(tables)
        assert merged.rows == (A1, P1)
        assert merged.value_count == 3

    def test_untagged_among_tagged_fails(self, tables):
        with pytest.raises(InvalidInputError):
            EvaluationsCodec().read(tables)

    def test_single_table_any_concept(self):
        table = [fragment(performance_table_xml({"a1": {"g1": 1.0}}, concept="FICTIVE"))]
        assert EvaluationsCodec(Concept.REAL).read(table).get(A1, G1) == 1.0

    def test_sparse_table(self):
        """Test that missing cells stay missing."""
        table = fragment(performance_table_xml({"a1": {"g1": 1.0}, "p1": {"g2": 2.0}}))

        evaluations = EvaluationsCodec().read(table)

        assert evaluations.value_count == 2
        assert evaluations.get(A1, G2) is None

    def test_duplicate_cell(self):
        xml = (
            "<performanceTable><alternativePerformances><alternativeID>a1</alternativeID>"
            "<performance><criterionID>g1</criterionID><value><real>1</real></value></performance>"
            "<performance><criterionID>g1</criterionID><value><real>2</real></value></performance>"
            "</alternativePerformances></performanceTable>"
        )
        with pytest.raises(InvalidInputError) as exc_info:
            EvaluationsCodec().read(fragment(xml))
        assert exc_info.value.details["criterion"] == "g1"

    def test_conflicting_merge(self):
        tables = [
            fragment(performance_table_xml({"a1": {"g1": 1.0}}, concept="REAL")),
            fragment(performance_table_xml({"a1": {"g1": 2.0}}, concept="FICTIVE")),
        ]
        with pytest.raises(InvalidInputError):
            EvaluationsCodec(Concept.ALL).read(tables)

    def test_per_decision_maker(self):
        tables = [
            fragment(performance_table_xml({"p1": {"g1": 1.0}}, concept="FICTIVE", name="d1")),
            fragment(performance_table_xml({"p1": {"g1": 2.0}}, concept="FICTIVE", name="d2")),
        ]
        codec = EvaluationsCodec(Concept.FICTIVE)

        assert codec.has_names(tables)
        per_dm = codec.read_per_decision_maker(tables)
        assert per_dm[DecisionMaker("d2")].get(P1, G1) == 2.0

    def test_per_decision_maker_duplicate_name(self):
        tables = [
            fragment(performance_table_xml({"p1": {"g1": 1.0}}, name="d1")),
            fragment(performance_table_xml({"p1": {"g1": 2.0}}, name="d1")),
        ]
        with pytest.raises(InvalidInputError):
            EvaluationsCodec().read_per_decision_maker(tables)


class TestEvaluationsCodecWrite:
    """Test suite for writing performance tables."""

    def test_orders_and_concept(self):
        evaluations = Evaluations()
        evaluations.put(A1, G1, 1.0)
        evaluations.put(A1, G2, 2.0)
        evaluations.put(P1, G1, 3.0)

        x_table = EvaluationsCodec().write(
            evaluations, alternatives_order=[P1, A1], criteria_order=[G2, G1], concept=Concept.REAL
        )

        assert x_table.get("mcdaConcept") == "REAL"
        assert [x.findtext("alternativeID") for x in x_table] == ["p1", "a1"]
        assert [x.findtext("criterionID") for x in x_table[1].findall("performance")] == ["g2", "g1"]
        assert x_table[1][1].findtext("value/real") == "2.0"

    def test_write_then_read(self):
        evaluations = Evaluations()
        evaluations.put(A1, G1, 0.1)
        evaluations.put(P1, G2, 12345.678)

        restored = EvaluationsCodec().read(EvaluationsCodec().write(evaluations))

        assert restored == evaluations

    def test_all_rejected(self):
        with pytest.raises(ValueError):
            EvaluationsCodec().write(Evaluations(), concept=Concept.ALL)
