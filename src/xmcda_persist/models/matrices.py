#!/usr/bin/env python3
"""Sparse numeric mappings: performance tables, pairwise comparisons, scores.

Missing cells are a valid state. Row and column orders are the orders in
which entries were first put, which is what writers use when no explicit
order is given.
"""

import math
from typing import Iterable, Iterator, Optional

from ..core.config import xmcda_config
from .entities import Alternative, Criterion


def values_close(first: float, second: float, tolerance: Optional[float] = None) -> bool:
    """Approximate equality used for round-tripped floating values."""
    if tolerance is None:
        tolerance = xmcda_config.FLOAT_TOLERANCE
    return math.isclose(first, second, rel_tol=0.0, abs_tol=tolerance)


class _SparseMatrix:
    """Ordered sparse (row, column) -> float mapping."""

    def __init__(self):
        self._cells: dict[tuple, float] = {}
        self._rows: dict = {}
        self._columns: dict = {}

    def put(self, row, column, value: float):
        value = float(value)
        if math.isnan(value):
            raise ValueError(f"Cannot store NaN at ({row}, {column})")
        if (row, column) not in self._cells:
            self._rows[row] = self._rows.get(row, 0) + 1
            self._columns[column] = self._columns.get(column, 0) + 1
        self._cells[(row, column)] = value

    def get(self, row, column) -> Optional[float]:
        return self._cells.get((row, column))

    def remove(self, row, column) -> Optional[float]:
        value = self._cells.pop((row, column), None)
        if value is not None:
            for counts, key in ((self._rows, row), (self._columns, column)):
                counts[key] -= 1
                if not counts[key]:
                    del counts[key]
        return value

    def __contains__(self, key) -> bool:
        return key in self._cells

    def __iter__(self) -> Iterator[tuple]:
        """Iterate over (row, column, value) triples in insertion order."""
        for (row, column), value in self._cells.items():
            yield row, column, value

    def __len__(self) -> int:
        return len(self._cells)

    @property
    def rows(self) -> tuple:
        return tuple(self._rows)

    @property
    def columns(self) -> tuple:
        return tuple(self._columns)

    @property
    def value_count(self) -> int:
        return len(self._cells)

    def is_empty(self) -> bool:
        return not self._cells

    def approx_equals(self, other: "_SparseMatrix", tolerance: Optional[float] = None) -> bool:
        if self._cells.keys() != other._cells.keys():
            return False
        return all(
            values_close(value, other._cells[key], tolerance) for key, value in self._cells.items()
        )

    def __eq__(self, other) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        return self._cells == other._cells

    def __repr__(self) -> str:
        return f"{type(self).__name__}({len(self._rows)} rows, {len(self._columns)} columns, {len(self._cells)} values)"


class Evaluations(_SparseMatrix):
    """Performance table: (Alternative, Criterion) -> value."""

    def put(self, alternative: Alternative, criterion: Criterion, value: float):
        super().put(alternative, criterion, value)

    def row(self, alternative: Alternative) -> dict[Criterion, float]:
        return {column: value for row, column, value in self if row == alternative}

    def restricted_to_rows(self, alternatives: Iterable[Alternative]) -> "Evaluations":
        """Copy holding only the rows of the given alternatives."""
        keep = set(alternatives)
        restricted = Evaluations()
        for alternative, criterion, value in self:
            if alternative in keep:
                restricted.put(alternative, criterion, value)
        return restricted

    def merged_with(self, other: "Evaluations") -> "Evaluations":
        """Union of both tables; cells of other win on overlap."""
        merged = Evaluations()
        for source in (self, other):
            for alternative, criterion, value in source:
                merged.put(alternative, criterion, value)
        return merged


class AlternativesMatrix(_SparseMatrix):
    """Pairwise comparison matrix: (Alternative, Alternative) -> value."""

    def put(self, initial: Alternative, terminal: Alternative, value: float):
        super().put(initial, terminal, value)


class AlternativesScores:
    """Alternative -> score, such as a net flow."""

    def __init__(self, scores: Optional[dict[Alternative, float]] = None):
        self._scores: dict[Alternative, float] = {}
        for alternative, score in (scores or {}).items():
            self.put(alternative, score)

    def put(self, alternative: Alternative, score: float):
        score = float(score)
        if math.isnan(score):
            raise ValueError(f"Cannot store NaN score for {alternative}")
        self._scores[alternative] = score

    def get(self, alternative: Alternative) -> Optional[float]:
        return self._scores.get(alternative)

    def items(self):
        return self._scores.items()

    @property
    def alternatives(self) -> tuple[Alternative, ...]:
        return tuple(self._scores)

    def ranking(self) -> list[Alternative]:
        """Alternatives from best to worst score, ties in insertion order."""
        return sorted(self._scores, key=lambda alternative: -self._scores[alternative])

    def approx_equals(self, other: "AlternativesScores", tolerance: Optional[float] = None) -> bool:
        if self._scores.keys() != other._scores.keys():
            return False
        return all(
            values_close(score, other._scores[alternative], tolerance)
            for alternative, score in self._scores.items()
        )

    def __len__(self) -> int:
        return len(self._scores)

    def __contains__(self, alternative) -> bool:
        return alternative in self._scores

    def __eq__(self, other) -> bool:
        if not isinstance(other, AlternativesScores):
            return NotImplemented
        return self._scores == other._scores

    def __repr__(self) -> str:
        return f"AlternativesScores({len(self._scores)} alternatives)"
