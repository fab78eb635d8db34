"""Robust relation test for two finite 2D line segments.

Each segment is given as start point, unit direction and length. The
classifier returns one of five outcomes (see :class:`RelationKind`) and is
tolerant to the usual floating point trouble: segments that almost touch at
an end, nearly parallel segments, and intersection parameters that fall just
outside ``[0, length]``.

A parameter outside the range extended by the snap threshold is only taken
as a rejection once two *offset probes* agree: A is shifted sideways by
``+snap`` and ``-snap`` and the parameter is recomputed at both positions.
At shallow angles a tiny lateral shift moves the parameter a lot, so a
single unperturbed test would reject segments that touch within tolerance.
With the threshold subtracted as well, the accepted footprint is 1.0 to 1.4
times the snap threshold depending on the angle (0.7 to 1.0 without it).

Callers working on many pairs should first run the cheap box prefilter
(:meth:`BRect.do_overlap` or the vectorized :func:`~snapgeom.core.brect.bbox_overlap`).
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Optional, Tuple

import numpy as np

from .brect import BRect
from .constants import ZERO_LENGTH_TOLERANCE
from .segment import Segment
from .vectors import Pt, UnitVc

__all__ = [
    'RelationKind', 'LineLineRelation',
    'get_x_para', 'is_param_still_below_zero_after_offsets',
    'is_param_still_more_than_length_after_offsets',
    'get_relation', 'classify', 'touch_given_box_overlap',
    'do_intersect_or_overlap_colinear', 'get_x_point_or_mid', 'relation_kinds',
]


class RelationKind(IntEnum):
    """The five mutually exclusive outcomes of :func:`get_relation`."""
    NO_INTERSECTION = 0
    # parallel and within snap distance; overlap still needs the box check
    COLINEAR = 1
    # parallel and further apart than snap distance
    PARALLEL = 2
    # crossing with au x bu > 0
    CROSS_FROM_RIGHT = 3
    # crossing with au x bu <= 0
    CROSS_FROM_LEFT = 4


@dataclass(frozen=True)
class LineLineRelation:
    """Outcome of the classifier.

    ``param_a`` and ``param_b`` are only set for the two crossing kinds. They
    are distances along the unit directions of A and B and may lie outside
    ``[0, length]`` by up to the snap threshold (more at shallow angles);
    clamp them if a point on the segment itself is required.
    """
    kind: RelationKind
    param_a: Optional[float] = None
    param_b: Optional[float] = None

    @property
    def is_crossing(self) -> bool:
        return self.kind in (RelationKind.CROSS_FROM_RIGHT, RelationKind.CROSS_FROM_LEFT)

    @property
    def touches(self) -> bool:
        """True for colinear and crossing outcomes."""
        return self.kind not in (RelationKind.NO_INTERSECTION, RelationKind.PARALLEL)

    @property
    def params(self) -> Tuple[float, float]:
        if not self.is_crossing:
            raise ValueError(f"{self.kind.name} carries no intersection parameters")
        return self.param_a, self.param_b


_NO_INTERSECTION = LineLineRelation(RelationKind.NO_INTERSECTION)
_COLINEAR = LineLineRelation(RelationKind.COLINEAR)
_PARALLEL = LineLineRelation(RelationKind.PARALLEL)

LineLineRelation.NO_INTERSECTION = _NO_INTERSECTION
LineLineRelation.COLINEAR = _COLINEAR
LineLineRelation.PARALLEL = _PARALLEL


def get_x_para(a: Pt, va_x_vb_inverse: float, b: Pt, vb: UnitVc) -> float:
    """Parameter on ray A where it meets the infinite line through ``b`` along ``vb``.

    ``va_x_vb_inverse`` is ``1 / (va x vb)``, computed once per pair by the caller.
    """
    dx = b.x - a.x
    dy = b.y - a.y
    return (dx * vb.y - dy * vb.x) * va_x_vb_inverse


def is_param_still_below_zero_after_offsets(ap: Pt, au: UnitVc, a_x_b_inverse: float,
                                            bp: Pt, bu: UnitVc, snap_threshold: float) -> bool:
    """True if A's parameter stays below ``-snap_threshold`` with A shifted by ``+-snap`` sideways."""
    n = au.rotate90_ccw * snap_threshold
    return (get_x_para(ap + n, a_x_b_inverse, bp, bu) < -snap_threshold
            and get_x_para(ap - n, a_x_b_inverse, bp, bu) < -snap_threshold)


def is_param_still_more_than_length_after_offsets(ap: Pt, au: UnitVc, a_x_b_inverse: float, al: float,
                                                  bp: Pt, bu: UnitVc, snap_threshold: float) -> bool:
    """True if A's parameter stays above ``al + snap_threshold`` with A shifted by ``+-snap`` sideways."""
    n = au.rotate90_ccw * snap_threshold
    limit = al + snap_threshold
    return (get_x_para(ap + n, a_x_b_inverse, bp, bu) > limit
            and get_x_para(ap - n, a_x_b_inverse, bp, bu) > limit)


def get_relation(ap: Pt, au: UnitVc, al: float,
                 bp: Pt, bu: UnitVc, bl: float,
                 snap_threshold: float) -> LineLineRelation:
    """Classify segment A (``ap``, ``au``, ``al``) against segment B (``bp``, ``bu``, ``bl``).

    Directions must be unit vectors and lengths non-negative; neither is
    checked here. A call should be preceded by a box overlap test so that
    far apart pairs exit early.

    Parameters exactly at 0, at the length, or inside the tolerance band are
    accepted as crossings. Parallel segments whose perpendicular distance
    equals the snap threshold exactly are PARALLEL.
    """
    a_x_b = au.x * bu.y - au.y * bu.x

    if abs(a_x_b) > ZERO_LENGTH_TOLERANCE:
        a_x_b_inverse = 1.0 / a_x_b
        ta = get_x_para(ap, a_x_b_inverse, bp, bu)

        if ta < -snap_threshold and is_param_still_below_zero_after_offsets(
                ap, au, a_x_b_inverse, bp, bu, snap_threshold):
            return _NO_INTERSECTION  # B's parameter is never computed
        if ta > al + snap_threshold and is_param_still_more_than_length_after_offsets(
                ap, au, a_x_b_inverse, al, bp, bu, snap_threshold):
            return _NO_INTERSECTION

        b_x_a_inverse = -a_x_b_inverse
        tb = get_x_para(bp, b_x_a_inverse, ap, au)

        if tb < -snap_threshold and is_param_still_below_zero_after_offsets(
                bp, bu, b_x_a_inverse, ap, au, snap_threshold):
            return _NO_INTERSECTION
        if tb > bl + snap_threshold and is_param_still_more_than_length_after_offsets(
                bp, bu, b_x_a_inverse, bl, ap, au, snap_threshold):
            return _NO_INTERSECTION

        if a_x_b > 0.0:
            return LineLineRelation(RelationKind.CROSS_FROM_RIGHT, ta, tb)
        return LineLineRelation(RelationKind.CROSS_FROM_LEFT, ta, tb)

    # parallel: distance of B's start from A's line
    perp = au.rotate90_ccw
    dot = perp.x * (ap.x - bp.x) + perp.y * (ap.y - bp.y)
    if abs(dot) < snap_threshold:
        return _COLINEAR
    return _PARALLEL


def classify(a: Segment, b: Segment, snap_threshold: float) -> LineLineRelation:
    """:func:`get_relation` for two :class:`Segment` descriptors."""
    return get_relation(a.origin, a.direction, a.length, b.origin, b.direction, b.length, snap_threshold)


def touch_given_box_overlap(ap: Pt, au: UnitVc, al: float,
                            bp: Pt, bu: UnitVc, bl: float,
                            snap_threshold: float) -> bool:
    """True if the segments cross or are colinear within the snap threshold.

    Only meaningful once the caller has confirmed that the bounding boxes of
    the two segments overlap: two colinear segments far apart along their
    common line are still reported as touching.
    """
    return get_relation(ap, au, al, bp, bu, bl, snap_threshold).touches


def do_intersect_or_overlap_colinear(ap: Pt, au: UnitVc, al: float, abb: BRect,
                                     bp: Pt, bu: UnitVc, bl: float, bbb: BRect,
                                     snap_threshold: float) -> bool:
    """Box overlap test followed by :func:`touch_given_box_overlap`."""
    return BRect.do_overlap(abb, bbb) and touch_given_box_overlap(ap, au, al, bp, bu, bl, snap_threshold)


def get_x_point_or_mid(ap: Pt, au: UnitVc, al: float,
                       bp: Pt, bu: UnitVc, bl: float,
                       snap_threshold: float) -> Pt:
    """Intersection point, or the average of the four end points if there is none.

    The intersection point lies on A's infinite line even when the parameter
    is slightly outside A. Meant for placing debug annotations.
    """
    rel = get_relation(ap, au, al, bp, bu, bl, snap_threshold)
    if rel.is_crossing:
        return ap + au * rel.param_a
    return (ap + ap + bp + bp + au * al + bu * bl) * 0.25


def relation_kinds(ap, au, al, bp, bu, bl, snap_threshold: float):
    """Vectorized :func:`get_relation` for equal-length batches of segment pairs.

    ap, au, bp, bu : arrays of shape (M,2); au and bu are unit directions
    al, bl         : arrays of shape (M,)
    Returns (kinds, ta, tb): int8 array of :class:`RelationKind` values and the
    two parameter arrays, NaN wherever the kind is not a crossing.
    """
    ap = np.asarray(ap, dtype=np.float64).reshape(-1, 2)
    au = np.asarray(au, dtype=np.float64).reshape(-1, 2)
    bp = np.asarray(bp, dtype=np.float64).reshape(-1, 2)
    bu = np.asarray(bu, dtype=np.float64).reshape(-1, 2)
    al = np.asarray(al, dtype=np.float64).reshape(-1)
    bl = np.asarray(bl, dtype=np.float64).reshape(-1)
    m = ap.shape[0]
    if m == 0:
        empty = np.empty((0,), dtype=np.float64)
        return np.empty((0,), dtype=np.int8), empty, empty.copy()
    snap = float(snap_threshold)

    def x_para(a, inv, b, vb):
        d = b - a
        return (d[:, 0] * vb[:, 1] - d[:, 1] * vb[:, 0]) * inv

    def rejected(p, u, inv, length, q, v, t):
        n = np.column_stack((-u[:, 1], u[:, 0])) * snap
        t_plus = x_para(p + n, inv, q, v)
        t_minus = x_para(p - n, inv, q, v)
        below = (t < -snap) & (t_plus < -snap) & (t_minus < -snap)
        limit = length + snap
        beyond = (t > limit) & (t_plus > limit) & (t_minus > limit)
        return below | beyond

    a_x_b = au[:, 0] * bu[:, 1] - au[:, 1] * bu[:, 0]
    crossing_rows = np.abs(a_x_b) > ZERO_LENGTH_TOLERANCE
    inv = 1.0 / np.where(crossing_rows, a_x_b, 1.0)

    ta = x_para(ap, inv, bp, bu)
    tb = x_para(bp, -inv, ap, au)
    rej = rejected(ap, au, inv, al, bp, bu, ta) | rejected(bp, bu, -inv, bl, ap, au, tb)

    perp_dot = -au[:, 1] * (ap[:, 0] - bp[:, 0]) + au[:, 0] * (ap[:, 1] - bp[:, 1])
    parallel_kind = np.where(np.abs(perp_dot) < snap, int(RelationKind.COLINEAR), int(RelationKind.PARALLEL))
    cross_kind = np.where(a_x_b > 0.0, int(RelationKind.CROSS_FROM_RIGHT), int(RelationKind.CROSS_FROM_LEFT))
    kinds = np.where(crossing_rows,
                     np.where(rej, int(RelationKind.NO_INTERSECTION), cross_kind),
                     parallel_kind).astype(np.int8)

    is_cross = crossing_rows & ~rej
    ta = np.where(is_cross, ta, np.nan)
    tb = np.where(is_cross, tb, np.nan)
    return kinds, ta, tb
