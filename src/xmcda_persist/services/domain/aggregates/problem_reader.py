#!/usr/bin/env python3
"""Reader assembling a decision problem from XMCDA fragments.

The fragments of one problem may be spread over several documents: a source
can be given per kind of data, and every kind without its own source is read
from the main one. Each read is memoized in an explicit cache scoped to the
reader, so a reader serves one problem and is not meant to be shared between
threads.
"""

import logging
from enum import Enum
from typing import Callable, Optional, Sequence, Union

from ....core.error_handling import ErrorsManager
from ....core.exceptions import InvalidInputError
from ....models.entities import Alternative, Criterion, Interval
from ....models.matrices import Evaluations
from ....models.models import ProblemData
from ....models.preferences import Coalitions, Thresholds
from ...document import XmcdaDocument, find_fragments
from ..codecs.alternatives import AlternativesCodec, AlternativesRead, ParsingMethod, default_parsing_method
from ..codecs.base import CONCEPT_ATTRIBUTE, attribute
from ..codecs.coalitions import IMPORTANCE_CONCEPT, WEIGHTS_KIND, CoalitionsCodec
from ..codecs.concept import Concept
from ..codecs.criteria import CriteriaCodec, CriteriaRead
from ..codecs.evaluations import EvaluationsCodec
from . import integrity

logger = logging.getLogger(__name__)

Source = Union[bytes, str, Sequence[Union[bytes, str]]]


class SourceKind(str, Enum):
    """Kinds of data that can come from their own source."""
    MAIN = "main"
    ALTERNATIVES = "alternatives"
    ALTERNATIVES_EVALUATIONS = "alternatives_evaluations"
    CRITERIA = "criteria"
    COALITIONS = "coalitions"
    CATEGORIES = "categories"
    CATEGORIES_PROFILES = "categories_profiles"
    PROFILES = "profiles"
    PROFILES_EVALUATIONS = "profiles_evaluations"
    ASSIGNMENTS = "assignments"
    DECISION_MAKERS = "decision_makers"


class ReaderState(str, Enum):
    UNCONFIGURED = "unconfigured"
    SOURCES_SET = "sources_set"
    PARTIALLY_READ = "partially_read"
    COMPOSED = "composed"


class ReadCache:
    """Results computed so far by one reader, keyed by entity name."""

    def __init__(self):
        self._results: dict[str, object] = {}

    def __contains__(self, name: str) -> bool:
        return name in self._results

    @property
    def computed(self) -> frozenset[str]:
        """Names of the entities computed so far."""
        return frozenset(self._results)

    def get_or_compute(self, name: str, compute: Callable[[], object]):
        if name not in self._results:
            self._results[name] = compute()
        return self._results[name]

    def clear(self) -> None:
        self._results.clear()


class ProblemReader:
    """Reads alternatives, criteria and their evaluations.

    Args:
        source: Optional main source, bytes of one document or a sequence of them
        errors: Errors manager shared by every codec of this reader
    """

    def __init__(self, source: Optional[Source] = None, errors: Optional[ErrorsManager] = None):
        self.errors = errors if errors is not None else ErrorsManager()
        self.alternatives_parsing_method: Optional[ParsingMethod] = None
        self._sources: dict[SourceKind, list] = {}
        self._documents: dict[SourceKind, list[XmcdaDocument]] = {}
        self._cache = ReadCache()
        self._state = ReaderState.UNCONFIGURED
        if source is not None:
            self.set_source(SourceKind.MAIN, source)

    # Sources

    @property
    def state(self) -> ReaderState:
        return self._state

    @property
    def cache(self) -> ReadCache:
        return self._cache

    def set_source(self, kind: SourceKind, source: Source) -> None:
        """Set the source of one kind of data and forget every result read so far."""
        if source is None:
            raise ValueError(f"Source for {kind.value} cannot be None")
        documents = [source] if isinstance(source, (bytes, str)) else list(source)
        self._sources[kind] = documents
        self._documents.pop(kind, None)
        self._cache.clear()
        self._state = ReaderState.SOURCES_SET

    def _resolved_kind(self, kind: SourceKind) -> SourceKind:
        return kind if kind in self._sources else SourceKind.MAIN

    def _shares_source(self, first: SourceKind, second: SourceKind) -> bool:
        return self._resolved_kind(first) == self._resolved_kind(second)

    def _documents_for(self, kind: SourceKind) -> list[XmcdaDocument]:
        if not self._sources:
            raise ValueError("No source set on this reader")
        resolved = self._resolved_kind(kind)
        if resolved not in self._sources:
            return []
        if resolved not in self._documents:
            self._documents[resolved] = [XmcdaDocument.from_bytes(s) for s in self._sources[resolved]]
        return self._documents[resolved]

    def _fragments(self, kind: SourceKind, fragment_kind: str) -> list:
        return find_fragments(self._documents_for(kind), fragment_kind)

    def _shared(self, fragments: list) -> list:
        """Fragments taking part in reads that do not distinguish decision makers."""
        return fragments

    @property
    def source_version(self) -> Optional[str]:
        """Version shared by every source document, None if they differ or there are none."""
        versions = {
            document.source_version
            for kind in self._sources
            for document in self._documents_for(kind)
        }
        return versions.pop() if len(versions) == 1 else None

    def _cached(self, name: str, compute: Callable[[], object]):
        result = self._cache.get_or_compute(name, compute)
        if self._state is ReaderState.SOURCES_SET:
            self._state = ReaderState.PARTIALLY_READ
        return result

    def _composed(self, name: str, compute: Callable[[], object]):
        result = self._cached(name, compute)
        self._state = ReaderState.COMPOSED
        return result

    def _at_most_one(self, fragments: list, kind: str):
        if len(fragments) > 1:
            raise InvalidInputError(
                f"Expected at most one {kind} fragment, found {len(fragments)}",
                {"fragment": kind, "found": len(fragments)},
            )
        return fragments[0] if fragments else None

    # Alternatives

    @property
    def resolved_parsing_method(self) -> ParsingMethod:
        """Parsing method set by the caller, else inferred from the alternatives fragments."""
        if self.alternatives_parsing_method is not None:
            return self.alternatives_parsing_method
        return default_parsing_method(len(self._fragments(SourceKind.ALTERNATIVES, "alternatives")))

    def _read_declared_alternatives(self) -> AlternativesRead:
        fragments = self._fragments(SourceKind.ALTERNATIVES, "alternatives")
        codec = AlternativesCodec(Concept.REAL, self.resolved_parsing_method, self.errors)
        return codec.read(fragments)

    def read_alternatives(self) -> tuple[Alternative, ...]:
        """Declared real alternatives, in declaration order."""
        return self._cached("alternatives", self._read_alternatives)

    def _read_alternatives(self) -> tuple[Alternative, ...]:
        return self._read_declared_alternatives().alternatives

    # Criteria

    def _read_criteria_fragment(self) -> CriteriaRead:
        fragment = self._at_most_one(self._shared(self._fragments(SourceKind.CRITERIA, "criteria")), "criteria")
        if fragment is None:
            return CriteriaRead()
        return CriteriaCodec(self.errors).read(fragment)

    def _criteria_read(self) -> CriteriaRead:
        return self._cached("criteria_fragment", self._read_criteria_fragment)

    def read_criteria(self) -> tuple[Criterion, ...]:
        """Declared active criteria, in declaration order."""
        return self._cached("criteria", lambda: self._criteria_read().criteria)

    def read_scales(self) -> dict[Criterion, Interval]:
        return self._cached("scales", lambda: dict(self._criteria_read().scales))

    def read_thresholds(self) -> Thresholds:
        return self._cached("thresholds", lambda: self._criteria_read().thresholds)

    # Coalitions

    def _coalitions_fragments(self) -> list:
        sets = self._shared(self._fragments(SourceKind.COALITIONS, "criteriaSet"))
        if sets:
            return sets
        return [
            fragment for fragment in self._shared(self._fragments(SourceKind.COALITIONS, WEIGHTS_KIND))
            if (attribute(fragment, CONCEPT_ATTRIBUTE) or "").lower() == IMPORTANCE_CONCEPT.lower()
        ]

    def read_coalitions(self) -> Coalitions:
        """The coalitions set of the problem, empty when none is given.

        Raises:
            InvalidInputError: If several coalitions sets are given
        """
        return self._cached("coalitions", self._read_coalitions)

    def _read_coalitions(self) -> Coalitions:
        fragment = self._at_most_one(self._coalitions_fragments(), "criteriaSet")
        if fragment is None:
            return Coalitions()
        return CoalitionsCodec(errors=self.errors).read(fragment)

    # Evaluations

    def _evaluation_fragments(self, kind: SourceKind) -> list:
        return self._shared(self._fragments(kind, "performanceTable"))

    def read_alternatives_evaluations(self) -> Evaluations:
        """Evaluations of the alternatives.

        With TAKE_ALL parsing every table is read and merged, otherwise the
        table of the REAL concept is read.
        """
        return self._cached("alternatives_evaluations", self._read_alternatives_evaluations)

    def _read_alternatives_evaluations(self) -> Evaluations:
        concept = Concept.ALL if self.resolved_parsing_method is ParsingMethod.TAKE_ALL else Concept.REAL
        fragments = self._evaluation_fragments(SourceKind.ALTERNATIVES_EVALUATIONS)
        return EvaluationsCodec(concept, self.errors).read(fragments)

    # Composition

    def read_problem_data(self) -> ProblemData:
        """Alternatives, criteria, scales and evaluations, cross-checked.

        Alternatives and criteria are inferred from the evaluations when none
        are declared.
        """
        return self._composed("problem_data", self._compose_problem_data)

    def _compose_problem_data(self) -> ProblemData:
        evaluations = self.read_alternatives_evaluations()
        alternatives = integrity.resolve_alternatives(self.read_alternatives(), evaluations, (), self.errors)
        criteria = integrity.resolve_criteria(self.read_criteria(), [evaluations], self.errors)
        data = ProblemData(
            alternatives=alternatives,
            criteria=criteria,
            scales=self.read_scales(),
            evaluations=evaluations,
        )
        logger.info(
            f"Read problem with {len(alternatives)} alternatives, {len(criteria)} criteria "
            f"and {evaluations.value_count} evaluations"
        )
        return data
