#!/usr/bin/env python3
"""Identity value objects and criterion scales.

Alternatives, criteria, decision makers and categories are compared and hashed
by identifier alone; the optional name is carried along for writing back.
"""

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, model_validator


def _check_id(kind: str, identifier: str):
    if not isinstance(identifier, str) or not identifier:
        raise ValueError(f"{kind} id must be a non-empty string, got {identifier!r}")


@dataclass(frozen=True)
class Alternative:
    """An alternative, or a profile when used as a category boundary."""
    id: str
    name: Optional[str] = field(default=None, compare=False)

    def __post_init__(self):
        _check_id("Alternative", self.id)


@dataclass(frozen=True)
class Criterion:
    id: str
    name: Optional[str] = field(default=None, compare=False)

    def __post_init__(self):
        _check_id("Criterion", self.id)


@dataclass(frozen=True)
class DecisionMaker:
    id: str

    def __post_init__(self):
        _check_id("DecisionMaker", self.id)


@dataclass(frozen=True)
class Category:
    id: str
    name: Optional[str] = field(default=None, compare=False)

    def __post_init__(self):
        _check_id("Category", self.id)


class PreferenceDirection(str, Enum):
    """Whether higher or lower values are preferred on a criterion."""
    MINIMIZE = "min"
    MAXIMIZE = "max"


class Interval(BaseModel):
    """Admissible value range of a criterion.

    Missing bounds are infinite. An interval with no preference direction and
    no finite bound is still a declared scale, distinct from a criterion
    that has no scale at all.
    """

    model_config = ConfigDict(frozen=True)

    preference_direction: Optional[PreferenceDirection] = None
    minimum: float = -math.inf
    maximum: float = math.inf

    @model_validator(mode="after")
    def _check_bounds(self):
        if math.isnan(self.minimum) or math.isnan(self.maximum):
            raise ValueError("Interval bounds must be numbers")
        if self.minimum > self.maximum:
            raise ValueError(f"Interval minimum {self.minimum} exceeds maximum {self.maximum}")
        return self

    @property
    def is_unrestricted(self) -> bool:
        return (
            self.preference_direction is None
            and math.isinf(self.minimum)
            and math.isinf(self.maximum)
        )

    def approx_equals(self, other: "Interval", tolerance: float) -> bool:
        if self.preference_direction != other.preference_direction:
            return False
        return _bound_close(self.minimum, other.minimum, tolerance) and _bound_close(
            self.maximum, other.maximum, tolerance
        )


def _bound_close(first: float, second: float, tolerance: float) -> bool:
    if math.isinf(first) or math.isinf(second):
        return first == second
    return abs(first - second) <= tolerance
