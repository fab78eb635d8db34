"""Axis aligned bounding boxes in 2D (``BRect``) and 3D (``BBox``).

The overlap test is the cheap O(1) rejection filter that callers run before
the line relation classifier. Boxes touching at an edge count as overlapping.

A box whose min exceeds its max on some axis is a defined state, reported by
``is_not_valid``. It only arises from :meth:`BRect.expand` with a negative
distance larger than half the box size; :meth:`BRect.create` with an
expansion and the ``expand_safe`` methods collapse such an axis to its
midpoint instead.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Tuple

import numpy as np

from .errors import EmptySequenceError
from .vectors import Pnt, Pt, Vc

__all__ = ['BRect', 'BBox', 'bbox_overlap']


def _expand_interval(lo: float, hi: float, dist: float) -> Tuple[float, float]:
    """Move lo and hi apart by dist; collapse to the midpoint if they cross."""
    lo_ch = lo - dist
    hi_ch = hi + dist
    if lo_ch > hi_ch:
        mid = lo + (hi - lo) * 0.5
        return mid, mid
    return lo_ch, hi_ch


def bbox_overlap(minx1, maxx1, miny1, maxy1, minx2, maxx2, miny2, maxy2):
    """Vectorized bbox overlap test; returns boolean array where bbox1 overlaps bbox2.

    All inputs may be scalars or arrays broadcastable to a common shape.
    """
    return ~((maxx1 < minx2) | (maxx2 < minx1) | (maxy1 < miny2) | (maxy2 < miny1))


@dataclass(frozen=True)
class BRect:
    """A 2D bounding rectangle."""
    min_x: float
    min_y: float
    max_x: float
    max_y: float

    def __str__(self) -> str:
        return (f"BRect: width={self.width:g}, height={self.height:g} "
                f"(at X={self.min_x:g} Y={self.min_y:g})")

    @property
    def min_pt(self) -> Pt:
        return Pt(self.min_x, self.min_y)

    @property
    def max_pt(self) -> Pt:
        return Pt(self.max_x, self.max_y)

    @property
    def width(self) -> float:
        return self.max_x - self.min_x

    @property
    def height(self) -> float:
        return self.max_y - self.min_y

    @property
    def area(self) -> float:
        return self.width * self.height

    @property
    def diagonal(self) -> Vc:
        return Vc(self.max_x - self.min_x, self.max_y - self.min_y)

    @property
    def center(self) -> Pt:
        return Pt((self.max_x + self.min_x) * 0.5, (self.max_y + self.min_y) * 0.5)

    @property
    def is_valid(self) -> bool:
        return self.min_x <= self.max_x and self.min_y <= self.max_y

    @property
    def is_not_valid(self) -> bool:
        return self.min_x > self.max_x or self.min_y > self.max_y

    def expand(self, dist: float) -> 'BRect':
        """Grow by ``dist`` on every side. A negative ``dist`` may invert the box."""
        return BRect(self.min_x - dist, self.min_y - dist, self.max_x + dist, self.max_y + dist)

    def expand_safe(self, dist: float) -> 'BRect':
        """Like :meth:`expand`, but an axis shrunk past zero size collapses to its midpoint."""
        min_x, max_x = _expand_interval(self.min_x, self.max_x, dist)
        min_y, max_y = _expand_interval(self.min_y, self.max_y, dist)
        return BRect(min_x, min_y, max_x, max_y)

    def translate(self, v: Vc) -> 'BRect':
        return BRect(self.min_x + v.x, self.min_y + v.y, self.max_x + v.x, self.max_y + v.y)

    def as_polyline(self) -> List[Pt]:
        """Counter-clockwise closed loop starting at the min corner (last == first)."""
        return [
            Pt(self.min_x, self.min_y),
            Pt(self.max_x, self.min_y),
            Pt(self.max_x, self.max_y),
            Pt(self.min_x, self.max_y),
            Pt(self.min_x, self.min_y),
        ]

    def overlaps_with(self, other: 'BRect') -> bool:
        return BRect.do_overlap(self, other)

    def contains(self, p: Pt) -> bool:
        return self.min_x <= p.x <= self.max_x and self.min_y <= p.y <= self.max_y

    def contains_rect(self, other: 'BRect') -> bool:
        return self.contains(other.min_pt) and self.contains(other.max_pt)

    def union(self, other: 'BRect') -> 'BRect':
        return BRect(min(self.min_x, other.min_x), min(self.min_y, other.min_y),
                     max(self.max_x, other.max_x), max(self.max_y, other.max_y))

    def union_pt(self, p: Pt) -> 'BRect':
        return BRect(min(self.min_x, p.x), min(self.min_y, p.y),
                     max(self.max_x, p.x), max(self.max_y, p.y))

    @staticmethod
    def do_overlap(a: 'BRect', b: 'BRect') -> bool:
        """True if the two rectangles overlap or touch."""
        return not (b.min_x > a.max_x
                    or a.min_x > b.max_x
                    or a.min_y > b.max_y
                    or b.min_y > a.max_y)

    @classmethod
    def create(cls, a: Pt, b: Pt, expansion: float = 0.0) -> 'BRect':
        """Rectangle spanning two points, grown by ``expansion`` on every side.

        A negative expansion shrinks it; an axis shrunk past zero size is set
        to the midpoint of the original interval.
        """
        min_x, max_x = (a.x, b.x) if a.x <= b.x else (b.x, a.x)
        min_y, max_y = (a.y, b.y) if a.y <= b.y else (b.y, a.y)
        if expansion:
            min_x, max_x = _expand_interval(min_x, max_x, expansion)
            min_y, max_y = _expand_interval(min_y, max_y, expansion)
        return cls(min_x, min_y, max_x, max_y)

    @classmethod
    def create_from_points(cls, pts: Iterable[Pt]) -> 'BRect':
        it = iter(pts)
        try:
            first = next(it)
        except StopIteration:
            raise EmptySequenceError("BRect.create_from_points: input is an empty sequence") from None
        min_x = max_x = first.x
        min_y = max_y = first.y
        for p in it:
            min_x = min(min_x, p.x)
            min_y = min(min_y, p.y)
            max_x = max(max_x, p.x)
            max_y = max(max_y, p.y)
        return cls(min_x, min_y, max_x, max_y)

    @classmethod
    def create_unchecked(cls, min_x: float, min_y: float, max_x: float, max_y: float) -> 'BRect':
        """Does not verify the order of min and max values."""
        return cls(min_x, min_y, max_x, max_y)


@dataclass(frozen=True)
class BBox:
    """A 3D bounding box."""
    min_x: float
    min_y: float
    min_z: float
    max_x: float
    max_y: float
    max_z: float

    @property
    def min_pnt(self) -> Pnt:
        return Pnt(self.min_x, self.min_y, self.min_z)

    @property
    def max_pnt(self) -> Pnt:
        return Pnt(self.max_x, self.max_y, self.max_z)

    @property
    def size_x(self) -> float:
        return self.max_x - self.min_x

    @property
    def size_y(self) -> float:
        return self.max_y - self.min_y

    @property
    def size_z(self) -> float:
        return self.max_z - self.min_z

    @property
    def volume(self) -> float:
        return self.size_x * self.size_y * self.size_z

    @property
    def center(self) -> Pnt:
        return Pnt((self.max_x + self.min_x) * 0.5,
                   (self.max_y + self.min_y) * 0.5,
                   (self.max_z + self.min_z) * 0.5)

    @property
    def is_valid(self) -> bool:
        return self.min_x <= self.max_x and self.min_y <= self.max_y and self.min_z <= self.max_z

    @property
    def is_not_valid(self) -> bool:
        return not self.is_valid

    def expand(self, dist: float) -> 'BBox':
        """Grow by ``dist`` on every side. A negative ``dist`` may invert the box."""
        return BBox(self.min_x - dist, self.min_y - dist, self.min_z - dist,
                    self.max_x + dist, self.max_y + dist, self.max_z + dist)

    def expand_safe(self, dist: float) -> 'BBox':
        min_x, max_x = _expand_interval(self.min_x, self.max_x, dist)
        min_y, max_y = _expand_interval(self.min_y, self.max_y, dist)
        min_z, max_z = _expand_interval(self.min_z, self.max_z, dist)
        return BBox(min_x, min_y, min_z, max_x, max_y, max_z)

    def translate(self, v: Pnt) -> 'BBox':
        return BBox(self.min_x + v.x, self.min_y + v.y, self.min_z + v.z,
                    self.max_x + v.x, self.max_y + v.y, self.max_z + v.z)

    def overlaps_with(self, other: 'BBox') -> bool:
        return BBox.do_overlap(self, other)

    def contains(self, p: Pnt) -> bool:
        return (self.min_x <= p.x <= self.max_x
                and self.min_y <= p.y <= self.max_y
                and self.min_z <= p.z <= self.max_z)

    def union(self, other: 'BBox') -> 'BBox':
        return BBox(min(self.min_x, other.min_x), min(self.min_y, other.min_y), min(self.min_z, other.min_z),
                    max(self.max_x, other.max_x), max(self.max_y, other.max_y), max(self.max_z, other.max_z))

    def union_pnt(self, p: Pnt) -> 'BBox':
        return BBox(min(self.min_x, p.x), min(self.min_y, p.y), min(self.min_z, p.z),
                    max(self.max_x, p.x), max(self.max_y, p.y), max(self.max_z, p.z))

    def as_brect(self) -> BRect:
        return BRect(self.min_x, self.min_y, self.max_x, self.max_y)

    @staticmethod
    def do_overlap(a: 'BBox', b: 'BBox') -> bool:
        """True if the two boxes overlap or touch."""
        return not (b.min_x > a.max_x
                    or a.min_x > b.max_x
                    or a.min_y > b.max_y
                    or b.min_y > a.max_y
                    or a.min_z > b.max_z
                    or b.min_z > a.max_z)

    @classmethod
    def create(cls, a: Pnt, b: Pnt, expansion: float = 0.0) -> 'BBox':
        min_x, max_x = (a.x, b.x) if a.x <= b.x else (b.x, a.x)
        min_y, max_y = (a.y, b.y) if a.y <= b.y else (b.y, a.y)
        min_z, max_z = (a.z, b.z) if a.z <= b.z else (b.z, a.z)
        if expansion:
            min_x, max_x = _expand_interval(min_x, max_x, expansion)
            min_y, max_y = _expand_interval(min_y, max_y, expansion)
            min_z, max_z = _expand_interval(min_z, max_z, expansion)
        return cls(min_x, min_y, min_z, max_x, max_y, max_z)

    @classmethod
    def create_from_points(cls, pts: Iterable[Pnt]) -> 'BBox':
        arr = np.asarray([(p.x, p.y, p.z) for p in pts], dtype=np.float64)
        if arr.size == 0:
            raise EmptySequenceError("BBox.create_from_points: input is an empty sequence")
        lo = arr.min(axis=0)
        hi = arr.max(axis=0)
        return cls(float(lo[0]), float(lo[1]), float(lo[2]), float(hi[0]), float(hi[1]), float(hi[2]))
