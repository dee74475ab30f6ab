"""
Domain Layer

This package contains the XMCDA mapping logic organized by domain area.
Domain services translate between element trees and domain values but do not
handle raw I/O (the document access layer does that).

Domains:
- version: normalization of older XMCDA versions to the canonical one
- codecs: one reader/writer per entity kind, plus the concept filter
- aggregates: composition of entity reads into complete decision problems
"""
