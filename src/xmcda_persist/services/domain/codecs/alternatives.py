#!/usr/bin/env python3
"""Alternatives codec.

Real alternatives and fictive ones (category profiles) are both declared in
<alternatives> fragments. They are told apart either by the mcdaConcept of
the container or by a <type> child on each alternative.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, Mapping, Optional, Sequence
from xml.etree.ElementTree import Element, SubElement

from ....models.entities import Alternative
from .base import CONCEPT_ATTRIBUTE, XmcdaCodec, attribute, text_of
from .concept import Concept, concept_tag, select_fragments

logger = logging.getLogger(__name__)


class ParsingMethod(str, Enum):
    """How alternatives of a given concept are found among several fragments."""
    TAKE_ALL = "take_all"            # every declared alternative
    SEEK_CONCEPT = "seek_concept"    # the fragment tagged with the concept
    USE_MARKING = "use_marking"      # alternatives marked with the concept, wherever declared


@dataclass(frozen=True)
class AlternativesRead:
    alternatives: tuple[Alternative, ...] = ()
    marking: dict[Alternative, Concept] = field(default_factory=dict)
    inactive: frozenset[Alternative] = frozenset()

    def marked(self, concept: Concept) -> tuple[Alternative, ...]:
        """Alternatives explicitly marked with the concept, active or not."""
        return tuple(a for a, c in self.marking.items() if c is concept)


def default_parsing_method(fragment_count: int) -> ParsingMethod:
    """TAKE_ALL for at most one fragment, SEEK_CONCEPT otherwise."""
    return ParsingMethod.TAKE_ALL if fragment_count <= 1 else ParsingMethod.SEEK_CONCEPT


class AlternativesCodec(XmcdaCodec):
    """Reads and writes <alternatives> fragments for one concept."""

    KIND = "alternatives"

    def __init__(self, concept: Concept = Concept.REAL, method: ParsingMethod = ParsingMethod.TAKE_ALL,
                 errors=None):
        super().__init__(errors)
        if concept is Concept.ALL and method is not ParsingMethod.TAKE_ALL:
            raise ValueError(f"{method} needs a REAL or FICTIVE concept")
        self.concept = concept
        self.method = method

    def read(self, fragments: Sequence[Element]) -> AlternativesRead:
        """Read the alternatives of the configured concept.

        Args:
            fragments: <alternatives> elements in document order

        Returns:
            AlternativesRead; alternatives in first-seen order, inactive ones left out

        Raises:
            InvalidInputError: On missing or duplicate ids, type mismatches,
                or an ambiguous concept selection
        """
        if isinstance(fragments, Element):
            fragments = [fragments]
        fragments = list(fragments)
        if self.method is ParsingMethod.SEEK_CONCEPT:
            fragments = select_fragments(fragments, self.concept, self.KIND)

        alternatives: dict[Alternative, None] = {}
        marking: dict[Alternative, Concept] = {}
        inactive: set[Alternative] = set()
        for fragment in fragments:
            self._check_kind(fragment)
            self._read_fragment(fragment, alternatives, marking, inactive)

        if self.method is ParsingMethod.USE_MARKING:
            alternatives = {a: None for a in alternatives if marking.get(a) is self.concept}
            inactive = {a for a in inactive if marking.get(a) is self.concept}
        logger.debug(
            f"Read {len(alternatives)} {self.concept.name} alternatives using {self.method.name}"
        )
        return AlternativesRead(tuple(alternatives), marking, frozenset(inactive))

    def _read_fragment(self, fragment: Element, alternatives: dict, marking: dict, inactive: set):
        outer_tag = concept_tag(fragment)
        outer = Concept.from_tag(outer_tag)
        for x_alternative in fragment.findall("alternative"):
            alternative_id = attribute(x_alternative, "id")
            if alternative_id is None:
                self._error("Found an alternative with no id")
                continue
            alternative = Alternative(alternative_id, attribute(x_alternative, "name"))
            if alternative in alternatives or alternative in inactive:
                self._error(f"Duplicate alternative id: {alternative_id}", alternative=alternative_id)
                continue

            raw_type = text_of(self._unique_or_none(x_alternative, "type"))
            if raw_type is None:
                own = outer
            else:
                own = Concept.from_tag(raw_type)
                if own is None:
                    self._error(f"Unknown alternative type {raw_type!r}", alternative=alternative_id)
                    continue
            if outer is not None and own is not outer:
                self._error(
                    f"Type of alternative {alternative_id} ({own.name}) does not match "
                    f"outer concept {outer.name}",
                    alternative=alternative_id,
                )
                continue
            if own is not None:
                marking[alternative] = own

            active = self.read_boolean(
                self._unique_or_none(x_alternative, "active"), f"alternative {alternative_id}"
            )
            if active is False:
                inactive.add(alternative)
                continue
            alternatives[alternative] = None

    def write(
        self,
        alternatives: Iterable[Alternative],
        concept: Optional[Concept] = None,
        marking: Optional[Mapping[Alternative, Concept]] = None,
        inactive: Optional[Iterable[Alternative]] = None,
        mark_active: bool = False,
    ) -> Element:
        """Write alternatives in the given order.

        Args:
            alternatives: Alternatives to declare
            concept: REAL or FICTIVE container concept, None for untagged
            marking: Optional per alternative type written as <type>
            inactive: Alternatives to declare inactive, written after the others
            mark_active: Also write <active>true</active> on active alternatives

        Returns:
            <alternatives> element, with no children when alternatives is empty
        """
        if concept is Concept.ALL:
            raise ValueError("Cannot write alternatives with concept ALL")
        marking = marking or {}
        inactive = list(dict.fromkeys(inactive or ()))
        inactive_set = set(inactive)
        x_alternatives = Element(self.KIND)
        if concept is not None:
            x_alternatives.set(CONCEPT_ATTRIBUTE, concept.value.capitalize())
        ordered = [a for a in dict.fromkeys(alternatives) if a not in inactive_set] + inactive
        for alternative in ordered:
            x_alternative = SubElement(x_alternatives, "alternative", {"id": alternative.id})
            if alternative.name:
                x_alternative.set("name", alternative.name)
            own = marking.get(alternative)
            if own is not None:
                SubElement(x_alternative, "type").text = own.value
            if alternative in inactive_set:
                SubElement(x_alternative, "active").text = "false"
            elif mark_active:
                SubElement(x_alternative, "active").text = "true"
        return x_alternatives
