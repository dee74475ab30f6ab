"""
XMCDA Entity Codecs Domain

One reader/writer per entity kind, independent of each other:
- Concept filter (selection of same-kind fragments by mcdaConcept)
- Criteria, alternatives and performance tables
- Categories and category profiles
- Coalitions, assignments, scores and comparison matrices
- Decision makers, method parameters and messages
"""

from .alternatives import AlternativesCodec, AlternativesRead, ParsingMethod, default_parsing_method
from .assignments import AssignmentsCodec
from .base import XmcdaCodec, format_number
from .categories import CategoriesCodec
from .coalitions import CoalitionsCodec
from .concept import Concept, matching_fragments, select_fragments
from .criteria import CriteriaCodec, CriteriaRead
from .decision_makers import DecisionMakersCodec
from .evaluations import EvaluationsCodec
from .matrix import AlternativesMatrixCodec
from .scores import AlternativesScoresCodec
from .various import MethodParametersCodec

__all__ = [
    # Concept filter
    "Concept",
    "matching_fragments",
    "select_fragments",
    # Base
    "XmcdaCodec",
    "format_number",
    # Codecs
    "AlternativesCodec",
    "AlternativesRead",
    "ParsingMethod",
    "default_parsing_method",
    "AssignmentsCodec",
    "CategoriesCodec",
    "CoalitionsCodec",
    "CriteriaCodec",
    "CriteriaRead",
    "DecisionMakersCodec",
    "EvaluationsCodec",
    "AlternativesMatrixCodec",
    "AlternativesScoresCodec",
    "MethodParametersCodec",
]
