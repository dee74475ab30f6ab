#!/usr/bin/env python3
"""Concept tags and the selection of same-kind fragments by concept.

Several fragments of one kind may coexist in a document, told apart by their
mcdaConcept attribute: a performance table for the real alternatives and one
for the fictive profiles, for instance.
"""

import logging
from enum import Enum
from typing import Optional, Sequence
from xml.etree.ElementTree import Element

from ....core.exceptions import InvalidInputError
from .base import CONCEPT_ATTRIBUTE, attribute

logger = logging.getLogger(__name__)


class Concept(str, Enum):
    """Requested concept when reading tagged fragments."""
    REAL = "real"
    FICTIVE = "fictive"
    ALL = "all"

    @classmethod
    def from_tag(cls, tag: Optional[str]) -> Optional["Concept"]:
        """Concept of a fragment tag; None for an untagged or foreign tag."""
        if tag is None:
            return None
        lowered = tag.lower()
        if lowered == cls.REAL.value:
            return cls.REAL
        if lowered == cls.FICTIVE.value:
            return cls.FICTIVE
        return None

    def matches(self, tag: Optional[str]) -> bool:
        if self is Concept.ALL:
            return True
        return tag is not None and tag.lower() == self.value


def concept_tag(fragment: Element) -> Optional[str]:
    """The raw mcdaConcept of a fragment, None when untagged."""
    return attribute(fragment, CONCEPT_ATTRIBUTE)


def matching_fragments(fragments: Sequence[Element], concept: Optional[Concept]) -> list[Element]:
    """Every fragment matching the concept; None matches untagged fragments."""
    if concept is None:
        return [fragment for fragment in fragments if concept_tag(fragment) is None]
    return [fragment for fragment in fragments if concept.matches(concept_tag(fragment))]


def select_fragments(fragments: Sequence[Element], concept: Optional[Concept], kind: str) -> list[Element]:
    """Fragments taking part in a read of the requested concept.

    A lone fragment is used whatever its tag. Among several, ALL keeps them
    all; REAL or FICTIVE needs exactly one fragment with that tag; no concept
    needs exactly one untagged fragment.

    Args:
        fragments: Same-kind fragments in document order
        concept: Requested concept, None for untagged
        kind: Fragment kind, for error messages

    Returns:
        Selected fragments, empty if there were none

    Raises:
        InvalidInputError: If the selection is empty or ambiguous
    """
    fragments = list(fragments)
    if len(fragments) <= 1:
        return fragments
    if concept is Concept.ALL:
        return fragments
    selected = matching_fragments(fragments, concept)
    if len(selected) != 1:
        requested = concept.name if concept is not None else "untagged"
        raise InvalidInputError(
            f"Expected exactly one {kind} fragment matching concept {requested}, found {len(selected)}",
            {
                "fragment": kind,
                "concept": requested,
                "matches": len(selected),
                "tags": [concept_tag(fragment) for fragment in fragments],
            },
        )
    logger.debug(f"Selected {kind} fragment with concept {concept} among {len(fragments)}")
    return selected
