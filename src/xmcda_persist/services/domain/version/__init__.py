"""
XMCDA Version Normalization Domain

Rewrites documents declaring an older XMCDA 2 version into the canonical
version before codecs read them.
"""

from .normalizer import VersionNormalizer, declared_version, normalize

__all__ = ["VersionNormalizer", "declared_version", "normalize"]
