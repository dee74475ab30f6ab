#!/usr/bin/env python3
"""XMCDA schema version normalization.

XMCDA 2 documents declare their version through the namespace of the root
element (http://www.decision-deck.org/2009/XMCDA-<version>). Every document is
rewritten to the canonical version before any typed access, so codecs only
ever see one shape. Only upgrades to the canonical version are supported.
"""

import copy
import logging
from typing import Callable, Optional, Union
from xml.etree.ElementTree import Element

from ....core.config import CANONICAL_VERSION, OLDEST_LEGACY_VERSION, XMCDA_NAMESPACE_PREFIX
from ....core.exceptions import MalformedInputError, UnsupportedVersionError

logger = logging.getLogger(__name__)

ROOT_TAG = "XMCDA"


def local_name(tag: str) -> str:
    """Tag without its namespace part."""
    return tag.rsplit("}", 1)[-1] if tag.startswith("{") else tag


def namespace_of(tag: str) -> Optional[str]:
    if tag.startswith("{"):
        return tag[1:].split("}", 1)[0]
    return None


def _is_xmcda_namespace(namespace: Optional[str]) -> bool:
    return namespace is not None and namespace.startswith(XMCDA_NAMESPACE_PREFIX)


def declared_version(root: Element) -> str:
    """Version declared by a document root.

    A root without namespace declares nothing and is read as the oldest legacy version.

    Raises:
        MalformedInputError: If the root is not an XMCDA element
        UnsupportedVersionError: If the root lives in a foreign namespace
    """
    if local_name(root.tag) != ROOT_TAG:
        raise MalformedInputError(
            f"Root element is not {ROOT_TAG}: {local_name(root.tag)}", {"root": root.tag}
        )
    namespace = namespace_of(root.tag)
    if namespace is None:
        return OLDEST_LEGACY_VERSION
    if not _is_xmcda_namespace(namespace):
        raise UnsupportedVersionError(
            f"Namespace should start with {XMCDA_NAMESPACE_PREFIX}", {"namespace": namespace}
        )
    return namespace[len(XMCDA_NAMESPACE_PREFIX):]


def _unqualify_fragments(root: Element) -> None:
    """Move XMCDA-qualified descendants and attributes back to the unqualified form.

    Producers sometimes make the XMCDA namespace the default namespace of the
    root, which qualifies every fragment; the schema prescribes unqualified
    fragments under a qualified root.
    """
    for element in root.iter():
        if element is not root and _is_xmcda_namespace(namespace_of(element.tag)):
            element.tag = local_name(element.tag)
        for name in [n for n in element.attrib if _is_xmcda_namespace(namespace_of(n))]:
            element.attrib[local_name(name)] = element.attrib.pop(name)


def _keep_canonical(root: Element) -> Element:
    rewritten = copy.deepcopy(root)
    _unqualify_fragments(rewritten)
    return rewritten


def _relocate_legacy_namespace(root: Element) -> Element:
    """Rewrite a 2.0.0 document into the 2.1.0 shape: the root moves to the canonical namespace."""
    rewritten = copy.deepcopy(root)
    rewritten.tag = f"{{{XMCDA_NAMESPACE_PREFIX}{CANONICAL_VERSION}}}{ROOT_TAG}"
    _unqualify_fragments(rewritten)
    return rewritten


# Structural rewrite from each known version to the canonical one
REWRITES: dict[str, Callable[[Element], Element]] = {
    CANONICAL_VERSION: _keep_canonical,
    OLDEST_LEGACY_VERSION: _relocate_legacy_namespace,
}


class VersionNormalizer:
    """Rewrites documents of known XMCDA versions into the canonical version.

    Records the version of the last document it normalized.
    """

    def __init__(self):
        self.source_version: Optional[str] = None

    def normalize_tree(self, root: Element, target_version: str = CANONICAL_VERSION) -> Element:
        """Return a canonical copy of the document; the input is never mutated.

        Args:
            root: Document root
            target_version: Requested version, only the canonical one is supported

        Returns:
            Root of the rewritten copy

        Raises:
            UnsupportedVersionError: If no rewrite leads from the declared version to target_version
            MalformedInputError: If the root is not an XMCDA element
        """
        if target_version != CANONICAL_VERSION:
            raise UnsupportedVersionError(
                f"Only normalization to {CANONICAL_VERSION} is supported",
                {"target_version": target_version},
            )
        version = declared_version(root)
        rewrite = REWRITES.get(version)
        if rewrite is None:
            raise UnsupportedVersionError(
                f"No normalization path from XMCDA {version} to {target_version}",
                {"version": version, "supported": sorted(REWRITES)},
            )
        self.source_version = version
        if version != target_version:
            logger.info(f"Normalizing XMCDA document from version {version} to {target_version}")
        return rewrite(root)

    def normalize(self, source: Union[bytes, str], target_version: str = CANONICAL_VERSION) -> bytes:
        """Byte level normalization: parse, rewrite, serialize.

        Raises:
            MalformedInputError: If source is not well-formed XML
            UnsupportedVersionError: See normalize_tree
        """
        from ...document import parse_xml, serialize_tree

        return serialize_tree(self.normalize_tree(parse_xml(source), target_version))


def normalize(source: Union[bytes, str], target_version: str = CANONICAL_VERSION) -> bytes:
    """Normalize a document to target_version with a throwaway normalizer."""
    return VersionNormalizer().normalize(source, target_version)
