"""Immutable 2D and 3D point and vector value types.

``Pt`` is a location, ``Vc`` a free vector and ``UnitVc`` a vector of length
one. Arithmetic follows the usual affine rules: ``Pt - Pt`` gives a ``Vc``,
``Pt + Vc`` gives a ``Pt``. ``Pt + Pt`` and ``Pt * float`` are allowed too so
that midpoints and averages can be written directly.

The only fallible operation is unitizing, which raises
:class:`~snapgeom.core.errors.UnitizingError` for vectors shorter than
``ZERO_LENGTH_TOLERANCE``.
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Union

from .constants import ZERO_LENGTH_TOLERANCE
from .errors import UnitizingError

__all__ = ['Pt', 'Vc', 'UnitVc', 'Pnt']


@dataclass(frozen=True)
class Vc:
    """A 2D vector."""
    x: float
    y: float

    def __add__(self, other: 'Vc') -> 'Vc':
        return Vc(self.x + other.x, self.y + other.y)

    def __sub__(self, other: 'Vc') -> 'Vc':
        return Vc(self.x - other.x, self.y - other.y)

    def __neg__(self) -> 'Vc':
        return Vc(-self.x, -self.y)

    def __mul__(self, f: float) -> 'Vc':
        return Vc(self.x * f, self.y * f)

    __rmul__ = __mul__

    def cross(self, other: 'Vc') -> float:
        """2D cross product (z component of the 3D cross product)."""
        return self.x * other.y - self.y * other.x

    def dot(self, other: 'Vc') -> float:
        return self.x * other.x + self.y * other.y

    @property
    def length_sq(self) -> float:
        return self.x * self.x + self.y * self.y

    @property
    def length(self) -> float:
        return math.sqrt(self.x * self.x + self.y * self.y)

    @property
    def rotate90_ccw(self) -> 'Vc':
        return Vc(-self.y, self.x)

    @property
    def rotate90_cw(self) -> 'Vc':
        return Vc(self.y, -self.x)

    def unitized(self) -> 'UnitVc':
        return UnitVc.create(self.x, self.y)


@dataclass(frozen=True)
class UnitVc(Vc):
    """A 2D vector of length one.

    Construct through :meth:`create`, which unitizes arbitrary components, or
    :meth:`create_unchecked` when the components are known to be unit length.
    Calling ``UnitVc(x, y)`` directly is the unchecked path without the name
    saying so; avoid it.
    """

    @classmethod
    def create(cls, x: float, y: float) -> 'UnitVc':
        length = math.sqrt(x * x + y * y)
        # 'not >' so that NaN fails too
        if not length > ZERO_LENGTH_TOLERANCE:
            raise UnitizingError(
                f"UnitVc.create: x:{x:g} and y:{y:g} are too small for creating a unit vector, "
                f"tolerance: {ZERO_LENGTH_TOLERANCE:g}")
        return cls(x / length, y / length)

    @classmethod
    def create_unchecked(cls, x: float, y: float) -> 'UnitVc':
        return cls(x, y)

    @property
    def rotate90_ccw(self) -> 'UnitVc':
        return UnitVc.create_unchecked(-self.y, self.x)

    @property
    def rotate90_cw(self) -> 'UnitVc':
        return UnitVc.create_unchecked(self.y, -self.x)

    @property
    def length(self) -> float:
        return 1.0

    def unitized(self) -> 'UnitVc':
        return self

    def matches_orientation(self, other: Vc) -> bool:
        return self.dot(other) > 0.0


UnitVc.X_AXIS = UnitVc.create_unchecked(1.0, 0.0)
UnitVc.Y_AXIS = UnitVc.create_unchecked(0.0, 1.0)


@dataclass(frozen=True)
class Pt:
    """A 2D point."""
    x: float
    y: float

    def __add__(self, other: Union[Vc, 'Pt']) -> 'Pt':
        return Pt(self.x + other.x, self.y + other.y)

    def __sub__(self, other):
        if isinstance(other, Pt):
            return Vc(self.x - other.x, self.y - other.y)
        return Pt(self.x - other.x, self.y - other.y)

    def __mul__(self, f: float) -> 'Pt':
        return Pt(self.x * f, self.y * f)

    __rmul__ = __mul__

    @staticmethod
    def distance(a: 'Pt', b: 'Pt') -> float:
        return math.hypot(a.x - b.x, a.y - b.y)

    @staticmethod
    def distance_sq(a: 'Pt', b: 'Pt') -> float:
        dx = a.x - b.x
        dy = a.y - b.y
        return dx * dx + dy * dy

    @staticmethod
    def midpoint(a: 'Pt', b: 'Pt') -> 'Pt':
        return Pt((a.x + b.x) * 0.5, (a.y + b.y) * 0.5)

    def closest_point_on_line(self, from_pt: 'Pt', uv: UnitVc, length: float) -> 'Pt':
        """Closest point on the finite segment ``from_pt + uv * [0, length]``."""
        dot = uv.dot(self - from_pt)
        if dot <= 0.0:
            return from_pt
        if dot >= length:
            return from_pt + uv * length
        return from_pt + uv * dot

    def distance_sq_to_line(self, from_pt: 'Pt', uv: UnitVc, length: float) -> float:
        """Squared distance to the finite segment ``from_pt + uv * [0, length]``."""
        v = self - from_pt
        dot = uv.dot(v)
        if dot <= 0.0:
            return v.length_sq
        if dot >= length:
            return Pt.distance_sq(self, from_pt + uv * length)
        perp = uv.rotate90_ccw.dot(v)
        return perp * perp

    def distance_to_line(self, from_pt: 'Pt', uv: UnitVc, length: float) -> float:
        return math.sqrt(self.distance_sq_to_line(from_pt, uv, length))

    def as_vc(self) -> Vc:
        return Vc(self.x, self.y)


@dataclass(frozen=True)
class Pnt:
    """A 3D point; only the parts needed for 3D bounding boxes."""
    x: float
    y: float
    z: float

    def __add__(self, other: 'Pnt') -> 'Pnt':
        return Pnt(self.x + other.x, self.y + other.y, self.z + other.z)

    def __sub__(self, other: 'Pnt') -> 'Pnt':
        return Pnt(self.x - other.x, self.y - other.y, self.z - other.z)

    def __mul__(self, f: float) -> 'Pnt':
        return Pnt(self.x * f, self.y * f, self.z * f)

    __rmul__ = __mul__
