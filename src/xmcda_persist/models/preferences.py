#!/usr/bin/env python3
"""Coalitions (criteria weights) and discrimination thresholds."""

import math
from typing import Optional

from .entities import Criterion
from .matrices import values_close


class Coalitions:
    """Weights per criterion plus an optional majority threshold.

    Weights need not sum to one.
    """

    def __init__(self, weights: Optional[dict[Criterion, float]] = None,
                 majority_threshold: Optional[float] = None):
        self._weights: dict[Criterion, float] = {}
        for criterion, weight in (weights or {}).items():
            self.put_weight(criterion, weight)
        self.majority_threshold = majority_threshold

    @property
    def majority_threshold(self) -> Optional[float]:
        return self._majority_threshold

    @majority_threshold.setter
    def majority_threshold(self, value: Optional[float]):
        if value is not None:
            value = float(value)
            if not math.isfinite(value):
                raise ValueError(f"Majority threshold must be finite, got {value}")
        self._majority_threshold = value

    def put_weight(self, criterion: Criterion, weight: float):
        weight = float(weight)
        if not math.isfinite(weight):
            raise ValueError(f"Weight of {criterion} must be finite, got {weight}")
        self._weights[criterion] = weight

    def weight(self, criterion: Criterion) -> Optional[float]:
        return self._weights.get(criterion)

    @property
    def weights(self) -> dict[Criterion, float]:
        return dict(self._weights)

    @property
    def criteria(self) -> tuple[Criterion, ...]:
        return tuple(self._weights)

    def is_empty(self) -> bool:
        return not self._weights and self._majority_threshold is None

    def approx_equals(self, other: "Coalitions", tolerance: Optional[float] = None) -> bool:
        if self._weights.keys() != other._weights.keys():
            return False
        if (self._majority_threshold is None) != (other._majority_threshold is None):
            return False
        if self._majority_threshold is not None and not values_close(
            self._majority_threshold, other._majority_threshold, tolerance
        ):
            return False
        return all(values_close(w, other._weights[c], tolerance) for c, w in self._weights.items())

    def __eq__(self, other) -> bool:
        if not isinstance(other, Coalitions):
            return NotImplemented
        return self._weights == other._weights and self._majority_threshold == other._majority_threshold

    def __repr__(self) -> str:
        return f"Coalitions(weights={self._weights}, majority_threshold={self._majority_threshold})"


class Thresholds:
    """Preference, indifference and veto thresholds per criterion."""

    KINDS = ("preference", "indifference", "veto")

    def __init__(self):
        self._values: dict[str, dict[Criterion, float]] = {kind: {} for kind in self.KINDS}

    def _put(self, kind: str, criterion: Criterion, value: float):
        value = float(value)
        if not math.isfinite(value):
            raise ValueError(f"{kind} threshold of {criterion} must be finite, got {value}")
        self._values[kind][criterion] = value

    def put_preference(self, criterion: Criterion, value: float):
        self._put("preference", criterion, value)

    def put_indifference(self, criterion: Criterion, value: float):
        self._put("indifference", criterion, value)

    def put_veto(self, criterion: Criterion, value: float):
        self._put("veto", criterion, value)

    def put(self, kind: str, criterion: Criterion, value: float):
        if kind not in self.KINDS:
            raise ValueError(f"Unknown threshold kind {kind!r}, expected one of {self.KINDS}")
        self._put(kind, criterion, value)

    def get(self, kind: str, criterion: Criterion) -> Optional[float]:
        return self._values[kind].get(criterion)

    @property
    def preference_thresholds(self) -> dict[Criterion, float]:
        return dict(self._values["preference"])

    @property
    def indifference_thresholds(self) -> dict[Criterion, float]:
        return dict(self._values["indifference"])

    @property
    def veto_thresholds(self) -> dict[Criterion, float]:
        return dict(self._values["veto"])

    @property
    def criteria(self) -> tuple[Criterion, ...]:
        seen: dict[Criterion, None] = {}
        for kind in self.KINDS:
            seen.update(dict.fromkeys(self._values[kind]))
        return tuple(seen)

    def is_empty(self) -> bool:
        return not any(self._values.values())

    def approx_equals(self, other: "Thresholds", tolerance: Optional[float] = None) -> bool:
        for kind in self.KINDS:
            mine, theirs = self._values[kind], other._values[kind]
            if mine.keys() != theirs.keys():
                return False
            if not all(values_close(v, theirs[c], tolerance) for c, v in mine.items()):
                return False
        return True

    def __eq__(self, other) -> bool:
        if not isinstance(other, Thresholds):
            return NotImplemented
        return self._values == other._values

    def __repr__(self) -> str:
        return f"Thresholds({self._values})"
