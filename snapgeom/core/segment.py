"""Finite 2D segment descriptor used as input to the relation classifier."""
from __future__ import annotations

from dataclasses import dataclass

from .brect import BRect
from .errors import GeometryError
from .vectors import Pt, UnitVc

__all__ = ['Segment']


@dataclass(frozen=True)
class Segment:
    """Segment from ``origin`` to ``origin + direction * length``.

    The direction is unitized and the length computed once, at construction,
    so the classifier never normalizes anything itself.
    """
    origin: Pt
    direction: UnitVc
    length: float

    @classmethod
    def from_points(cls, start: Pt, end: Pt) -> 'Segment':
        """Raises UnitizingError if the two points coincide."""
        v = end - start
        return cls(start, v.unitized(), v.length)

    @classmethod
    def create(cls, origin: Pt, direction: UnitVc, length: float) -> 'Segment':
        if not length >= 0.0:
            raise GeometryError(f"Segment.create: length must be non-negative, got {length}")
        return cls(origin, direction, length)

    @property
    def end(self) -> Pt:
        return self.origin + self.direction * self.length

    def point_at(self, t: float) -> Pt:
        """Point at parameter ``t`` (in length units, not normalized)."""
        return self.origin + self.direction * t

    def bounding_rect(self, expansion: float = 0.0) -> BRect:
        return BRect.create(self.origin, self.end, expansion)
