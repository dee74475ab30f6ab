#!/usr/bin/env python3
"""Document access layer for XMCDA documents.

Parses bytes into element trees (through defusedxml, so entity expansion and
external entities are refused), lists the fragments of a kind in document
order, and serializes canonical documents back to bytes.
"""

import copy
import logging
from typing import Iterable, Optional, Union

import defusedxml.ElementTree as ET
from defusedxml import DefusedXmlException
from xml.etree.ElementTree import Element, indent, register_namespace, tostring

from ..core.config import CANONICAL_VERSION, xmcda_config
from ..core.exceptions import InvalidInputError, MalformedInputError
from .domain.version.normalizer import ROOT_TAG, VersionNormalizer, local_name

logger = logging.getLogger(__name__)

XMCDA_PREFIX = "xmcda"

# Serialized documents are always in the canonical version
register_namespace(XMCDA_PREFIX, xmcda_config.canonical_namespace)


def parse_xml(content: Union[bytes, str]) -> Element:
    """Parse raw XML into an element tree.

    Args:
        content: XML document as bytes or string

    Returns:
        Root element

    Raises:
        MalformedInputError: If content is not well-formed XML or uses forbidden constructs
    """
    try:
        return ET.fromstring(content)
    except ET.ParseError as e:
        raise MalformedInputError(f"Invalid XML: {str(e)}")
    except DefusedXmlException as e:
        raise MalformedInputError(f"Refused XML construct: {str(e)}")


def serialize_tree(root: Element, pretty: Optional[bool] = None) -> bytes:
    """Serialize an element tree to UTF-8 bytes with an XML declaration."""
    if pretty is None:
        pretty = xmcda_config.PRETTY_PRINT
    if pretty:
        root = copy.deepcopy(root)
        indent(root, space="  ")
    return tostring(root, encoding="UTF-8", xml_declaration=True) + b"\n"


class XmcdaDocument:
    """A canonical-version XMCDA document and the version it was read from."""

    def __init__(self, root: Element, source_version: str = CANONICAL_VERSION):
        self.root = root
        self.source_version = source_version

    @classmethod
    def new(cls) -> "XmcdaDocument":
        """Empty document in the canonical version."""
        return cls(Element(f"{{{xmcda_config.canonical_namespace}}}{ROOT_TAG}"))

    @classmethod
    def from_bytes(cls, content: Union[bytes, str]) -> "XmcdaDocument":
        """Parse a document and normalize it to the canonical version.

        Raises:
            MalformedInputError: If content is not well-formed or not an XMCDA document
            UnsupportedVersionError: If the declared version cannot be normalized
        """
        root = parse_xml(content)
        normalizer = VersionNormalizer()
        normalized = normalizer.normalize_tree(root)
        logger.debug(f"Loaded XMCDA document, version read: {normalizer.source_version}")
        return cls(normalized, normalizer.source_version)

    def fragments(self, kind: str) -> list[Element]:
        """Children of the root with the given local name, in document order."""
        return [child for child in self.root if local_name(child.tag) == kind]

    def append(self, fragment: Element) -> None:
        self.root.append(fragment)

    def extend(self, fragments: Iterable[Element]) -> None:
        for fragment in fragments:
            self.append(fragment)

    def to_bytes(self, pretty: Optional[bool] = None) -> bytes:
        return serialize_tree(self.root, pretty)


def find_fragments(documents: Iterable[XmcdaDocument], kind: str) -> list[Element]:
    """All fragments of a kind across documents, in the order documents are given."""
    found = []
    for document in documents:
        found.extend(document.fragments(kind))
    return found


def fragment_to_bytes(fragment: Element, pretty: Optional[bool] = None) -> bytes:
    """Wrap a single fragment in a fresh canonical document."""
    document = XmcdaDocument.new()
    document.append(fragment)
    return document.to_bytes(pretty)


def fragment_from_bytes(content: Union[bytes, str], kind: str) -> Element:
    """Read the unique fragment of a kind from a document.

    Raises:
        InvalidInputError: If the document holds zero or several such fragments
    """
    fragments = XmcdaDocument.from_bytes(content).fragments(kind)
    if len(fragments) != 1:
        raise InvalidInputError(
            f"Expected exactly one {kind} fragment", {"fragment": kind, "found": len(fragments)}
        )
    return fragments[0]
