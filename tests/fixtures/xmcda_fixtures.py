"""Test fixtures for XMCDA documents."""

from xmcda_persist.services.document import parse_xml

CANONICAL_NAMESPACE = "http://www.decision-deck.org/2009/XMCDA-2.1.0"

# Criteria order is deliberately not sorted
END_TO_END_CRITERIA = ["c1", "c3", "c4", "c2", "c5"]
END_TO_END_ALTERNATIVES = ["a1", "a2", "a3", "a4", "a5", "a6"]


def xmcda_document(*fragments: str, version: str = "2.1.0") -> bytes:
    """
    Wrap fragments in an XMCDA root declaring the given version.

    Args:
        fragments: XML text of each fragment, in document order
        version: Version suffix of the root namespace

    Returns:
        Document bytes
    """
    body = "\n".join(fragments)
    return (
        '<?xml version="1.0" encoding="UTF-8"?>\n'
        f'<xmcda:XMCDA xmlns:xmcda="http://www.decision-deck.org/2009/XMCDA-{version}">\n'
        f"{body}\n"
        "</xmcda:XMCDA>\n"
    ).encode("utf-8")


def legacy_document(*fragments: str) -> bytes:
    """Wrap fragments in an XMCDA root without namespace (read as 2.0.0)."""
    body = "\n".join(fragments)
    return f'<?xml version="1.0" encoding="UTF-8"?>\n<XMCDA>\n{body}\n</XMCDA>\n'.encode("utf-8")


def fragment(xml: str):
    """Parse a single fragment into an element."""
    return parse_xml(xml)


def criteria_xml(ids, name: str = None) -> str:
    name_attribute = f' name="{name}"' if name else ""
    criteria = "".join(f'<criterion id="{c}"/>' for c in ids)
    return f"<criteria{name_attribute}>{criteria}</criteria>"


def alternatives_xml(ids, concept: str = None) -> str:
    concept_attribute = f' mcdaConcept="{concept}"' if concept else ""
    alternatives = "".join(f'<alternative id="{a}"/>' for a in ids)
    return f"<alternatives{concept_attribute}>{alternatives}</alternatives>"


def performance_table_xml(cells, concept: str = None, name: str = None) -> str:
    """
    Build a performance table.

    Args:
        cells: Mapping alternative id -> {criterion id: value}
        concept: Optional mcdaConcept
        name: Optional decision maker name

    Returns:
        XML text of the table
    """
    attributes = ""
    if concept:
        attributes += f' mcdaConcept="{concept}"'
    if name:
        attributes += f' name="{name}"'
    rows = []
    for alternative, values in cells.items():
        performances = "".join(
            f"<performance><criterionID>{c}</criterionID><value><real>{v}</real></value></performance>"
            for c, v in values.items()
        )
        rows.append(
            f"<alternativePerformances><alternativeID>{alternative}</alternativeID>"
            f"{performances}</alternativePerformances>"
        )
    return f"<performanceTable{attributes}>{''.join(rows)}</performanceTable>"


def categories_xml(ranked) -> str:
    """Categories given as (id, rank) pairs."""
    categories = "".join(
        f'<category id="{c}"><rank><integer>{rank}</integer></rank></category>' for c, rank in ranked
    )
    return f"<categories>{categories}</categories>"


def categories_profiles_xml(bounds) -> str:
    """Profiles given as (profile, lower category, upper category) triples."""
    profiles = "".join(
        f"<categoryProfile><alternativeID>{p}</alternativeID><limits>"
        f"<lowerCategory><categoryID>{lower}</categoryID></lowerCategory>"
        f"<upperCategory><categoryID>{upper}</categoryID></upperCategory>"
        f"</limits></categoryProfile>"
        for p, lower, upper in bounds
    )
    return f"<categoriesProfiles>{profiles}</categoriesProfiles>"


def coalitions_xml(weights, majority: float = None, name: str = None) -> str:
    name_attribute = f' name="{name}"' if name else ""
    elements = "".join(
        f"<element><criterionID>{c}</criterionID><value><real>{w}</real></value></element>"
        for c, w in weights.items()
    )
    threshold = ""
    if majority is not None:
        threshold = f'<value mcdaConcept="majority threshold"><real>{majority}</real></value>'
    return f'<criteriaSet mcdaConcept="Importance"{name_attribute}>{elements}{threshold}</criteriaSet>'


def affectations_xml(assigned, name: str = None) -> str:
    """Crisp affectations given as alternative id -> category id."""
    name_attribute = f' name="{name}"' if name else ""
    affectations = "".join(
        f"<alternativeAffectation><alternativeID>{a}</alternativeID>"
        f"<categoryID>{c}</categoryID></alternativeAffectation>"
        for a, c in assigned.items()
    )
    return f"<alternativesAffectations{name_attribute}>{affectations}</alternativesAffectations>"


def end_to_end_cells() -> dict:
    """30 filled cells: every alternative evaluated on every criterion."""
    return {
        a: {c: float(i * 10 + j) for j, c in enumerate(END_TO_END_CRITERIA, start=1)}
        for i, a in enumerate(END_TO_END_ALTERNATIVES, start=1)
    }


def end_to_end_document() -> bytes:
    """Five criteria, six alternatives, one untagged table and a three category chain."""
    return xmcda_document(
        criteria_xml(END_TO_END_CRITERIA),
        alternatives_xml(END_TO_END_ALTERNATIVES),
        performance_table_xml(end_to_end_cells()),
        categories_xml([("bad", 3), ("medium", 2), ("good", 1)]),
        categories_profiles_xml([("p1", "bad", "medium"), ("p2", "medium", "good")]),
    )


def sorting_document() -> bytes:
    """Sorting problem with REAL and FICTIVE fragments, coalitions and assignments."""
    return xmcda_document(
        alternatives_xml(["a1", "a2", "a3"], concept="REAL"),
        alternatives_xml(["p1", "p2"], concept="FICTIVE"),
        criteria_xml(["g1", "g2"]),
        performance_table_xml(
            {"a1": {"g1": 1.0, "g2": 2.0}, "a2": {"g1": 5.0, "g2": 5.0}, "a3": {"g1": 9.0, "g2": 8.0}},
            concept="REAL",
        ),
        performance_table_xml({"p1": {"g1": 3.0, "g2": 3.0}, "p2": {"g1": 7.0, "g2": 7.0}}, concept="FICTIVE"),
        categories_xml([("C1", 3), ("C2", 2), ("C3", 1)]),
        categories_profiles_xml([("p1", "C1", "C2"), ("p2", "C2", "C3")]),
        coalitions_xml({"g1": 0.6, "g2": 0.4}, majority=0.7),
        affectations_xml({"a1": "C1", "a2": "C2", "a3": "C3"}),
    )


def decision_makers_xml(ids) -> str:
    parameters = "".join(f"<parameter><value><label>{dm}</label></value></parameter>" for dm in ids)
    return f"<methodParameters>{parameters}</methodParameters>"


def group_document() -> bytes:
    """Two decision makers: d1 has its own coalitions and profiles evaluations, d2 its own thresholds."""
    return xmcda_document(
        decision_makers_xml(["d1", "d2"]),
        alternatives_xml(["a1", "a2"], concept="REAL"),
        alternatives_xml(["p1"], concept="FICTIVE"),
        criteria_xml(["g1", "g2"]),
        '<criteria name="d2"><criterion id="g1"><thresholds>'
        '<threshold mcdaConcept="pref"><constant><real>1.0</real></constant></threshold>'
        "</thresholds></criterion></criteria>",
        performance_table_xml({"a1": {"g1": 1.0, "g2": 2.0}, "a2": {"g1": 6.0, "g2": 5.0}}, concept="REAL"),
        performance_table_xml({"p1": {"g1": 3.0, "g2": 3.0}}, concept="FICTIVE"),
        performance_table_xml({"p1": {"g1": 4.0, "g2": 4.0}}, concept="FICTIVE", name="d1"),
        categories_xml([("C1", 2), ("C2", 1)]),
        categories_profiles_xml([("p1", "C1", "C2")]),
        coalitions_xml({"g1": 0.5, "g2": 0.5}, majority=0.6),
        coalitions_xml({"g1": 0.8, "g2": 0.2}, name="d1"),
        affectations_xml({"a1": "C1", "a2": "C2"}, name="d1"),
        affectations_xml({"a1": "C2", "a2": "C2"}, name="d2"),
    )
