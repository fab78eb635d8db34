"""Closed counter-clockwise polylines with precomputed segment data.

A :class:`Loop` is built once from raw points and then queried many times,
so everything the relation classifier needs per segment (unit vector,
length, expanded bounding rectangle) is computed at construction.
Construction rejects loops that fold back on themselves or self-intersect.
"""
from __future__ import annotations

from enum import Enum
from typing import List, Optional, Sequence, Tuple

import numpy as np

from .brect import BRect, bbox_overlap
from .config import LoopConfig
from .constants import U_TURN_DOT_LIMIT
from .debug_draw import DebugDraw, NullDebugDraw
from .errors import GeometryError, SelfIntersectionError
from .intersect import get_x_point_or_mid, touch_given_box_overlap
from .logging_utils import get_logger
from .segment import Segment
from .vectors import Pt, UnitVc

logger = get_logger('snapgeom.loops')

__all__ = ['PointLoopRel', 'Loop', 'signed_area']


class PointLoopRel(Enum):
    """Relation of a point to a closed loop."""
    IN = 'in'
    ON = 'on'
    OUT = 'out'

    @property
    def is_inside(self) -> bool:
        return self is PointLoopRel.IN

    @property
    def is_outside(self) -> bool:
        return self is PointLoopRel.OUT


def signed_area(pts: Sequence[Pt]) -> float:
    """Signed area of a closed point list (last point equal to first).

    Positive for counter-clockwise order.
    """
    if len(pts) < 3:
        return 0.0
    xy = np.asarray([(p.x, p.y) for p in pts], dtype=np.float64)
    x = xy[:, 0]
    y = xy[:, 1]
    return 0.5 * float(np.sum((x[:-1] - x[1:]) * (y[1:] + y[:-1])))


class Loop:
    """A counter-clockwise, closed series of points.

    Use :meth:`create` or :meth:`from_config`. ``points`` is one item longer
    than ``unit_vectors``, ``lengths`` and ``bboxes``; its last point equals
    its first. Colinear points are kept.
    """

    def __init__(self, points: List[Pt], unit_vectors: List[UnitVc], bboxes: List[BRect],
                 lengths: List[float], area: float, min_segment_length: float,
                 snap_threshold: float, bounding_box: BRect):
        self._points = points
        self._unit_vectors = unit_vectors
        self._bboxes = bboxes
        self._lengths = lengths
        self._area = area
        self._min_segment_length = min_segment_length
        self._snap_threshold = snap_threshold
        self._bounding_box = bounding_box
        self._pts_arr = np.asarray([(p.x, p.y) for p in points], dtype=np.float64)
        self._uvs_arr = np.asarray([(u.x, u.y) for u in unit_vectors], dtype=np.float64)
        self._lens_arr = np.asarray(lengths, dtype=np.float64)

    @property
    def area(self) -> float:
        """Unsigned, since the loop is always counter-clockwise."""
        return self._area

    @property
    def points(self) -> List[Pt]:
        return list(self._points)

    @property
    def unit_vectors(self) -> List[UnitVc]:
        return list(self._unit_vectors)

    @property
    def lengths(self) -> List[float]:
        return list(self._lengths)

    @property
    def bboxes(self) -> List[BRect]:
        """Per segment, expanded by the snap threshold."""
        return list(self._bboxes)

    @property
    def xys(self) -> np.ndarray:
        """Flat x0, y0, x1, y1, ... of every segment start (closing point excluded)."""
        return self._pts_arr[:-1].reshape(-1).copy()

    @property
    def segment_count(self) -> int:
        return len(self._unit_vectors)

    @property
    def bounding_box(self) -> BRect:
        """Overall box, expanded by the snap threshold."""
        return self._bounding_box

    @property
    def min_segment_length(self) -> float:
        return self._min_segment_length

    @property
    def snap_threshold(self) -> float:
        return self._snap_threshold

    def segment(self, i: int) -> Segment:
        return Segment(self._points[i], self._unit_vectors[i], self._lengths[i])

    def clone(self) -> 'Loop':
        return Loop(list(self._points), list(self._unit_vectors), list(self._bboxes), list(self._lengths),
                    self._area, self._min_segment_length, self._snap_threshold, self._bounding_box)

    def _distances_sq(self, pt: Pt) -> np.ndarray:
        starts = self._pts_arr[:-1]
        v = np.array([pt.x, pt.y]) - starts
        dot = np.clip(np.einsum('ij,ij->i', v, self._uvs_arr), 0.0, self._lens_arr)
        closest = starts + self._uvs_arr * dot[:, None]
        d = np.array([pt.x, pt.y]) - closest
        return np.einsum('ij,ij->i', d, d)

    def closest_segment(self, pt: Pt) -> int:
        """Index of the segment closest to ``pt``."""
        return int(np.argmin(self._distances_sq(pt)))

    def closest_segments(self, pt: Pt) -> Tuple[int, int]:
        """Indices of the closest and second closest segment.

        Both may contain the closest point, in the corner where they meet.
        """
        order = np.argsort(self._distances_sq(pt), kind='stable')
        return int(order[0]), int(order[1])

    def closest_point(self, pt: Pt) -> Pt:
        i = self.closest_segment(pt)
        return pt.closest_point_on_line(self._points[i], self._unit_vectors[i], self._lengths[i])

    def contains_point(self, pt: Pt) -> PointLoopRel:
        """Inside, on (within the snap threshold) or outside.

        Decides by the side of the closest segment rather than by ray
        crossing counts, which break when the point is level with several
        loop segments.
        """
        if not self._bounding_box.contains(pt):
            return PointLoopRel.OUT
        snap = self._snap_threshold
        ps, us, ls = self._points, self._unit_vectors, self._lengths
        j, k = self.closest_segments(pt)
        dj = pt.distance_to_line(ps[j], us[j], ls[j])
        if dj < snap:
            return PointLoopRel.ON
        dk = pt.distance_to_line(ps[k], us[k], ls[k])
        if dj + snap < dk:
            i = j
        else:
            # both segments meet at the closest point: compare offset copies
            uj90 = us[j].rotate90_cw * snap
            ddj = min(pt.distance_sq_to_line(ps[j] + uj90, us[j], ls[j]),
                      pt.distance_sq_to_line(ps[j] - uj90, us[j], ls[j]))
            uk90 = us[k].rotate90_cw * snap
            ddk = min(pt.distance_sq_to_line(ps[k] + uk90, us[k], ls[k]),
                      pt.distance_sq_to_line(ps[k] - uk90, us[k], ls[k]))
            i = j if ddj <= ddk else k
        if us[i].cross(pt - ps[i]) < 0.0:
            return PointLoopRel.OUT
        return PointLoopRel.IN

    @classmethod
    def from_config(cls, points: Sequence[Pt], config: LoopConfig,
                    debug: Optional[DebugDraw] = None) -> 'Loop':
        return cls.create(points, config.min_segment_length, config.snap_threshold,
                          debug=debug, u_turn_dot_limit=config.u_turn_dot_limit)

    @classmethod
    def create(cls, points: Sequence[Pt], min_segment_length: float, snap_threshold: float,
               debug: Optional[DebugDraw] = None, u_turn_dot_limit: float = U_TURN_DOT_LIMIT) -> 'Loop':
        """Build a Loop from a series of points.

        Consecutive points closer than ``min_segment_length`` are merged into
        their average, the loop is closed if needed and reversed to
        counter-clockwise order. Raises :class:`SelfIntersectionError` for a
        kink sharper than 170 degrees or for any self intersection within
        ``snap_threshold``.
        """
        if min_segment_length < 0.0:
            raise GeometryError(f"Loop.create: min_segment_length < 0.0: {min_segment_length:g}")
        if snap_threshold < 0.0:
            raise GeometryError(f"Loop.create: snap_threshold < 0.0: {snap_threshold:g}")
        if len(points) < 3:
            raise GeometryError(f"Loop.create: needs at least three points, not {len(points)}")
        debug = debug if debug is not None else NullDebugDraw()

        pts = cls._merge_short_segments(points, min_segment_length, debug)
        if len(pts) < 4:
            raise GeometryError(
                f"Loop.create: only {len(pts) - 1} distinct points left after merging "
                f"segments shorter than {min_segment_length:g}")

        area = signed_area(pts)
        if area < 0.0:
            pts.reverse()
            area = -area

        unit_vectors: List[UnitVc] = []
        bboxes: List[BRect] = []
        lengths: List[float] = []
        for t, n in zip(pts[:-1], pts[1:]):
            v = n - t
            length = v.length
            # no zero check needed, segments are longer than min_segment_length
            unit_vectors.append(UnitVc.create_unchecked(v.x / length, v.y / length))
            bboxes.append(BRect.create(t, n, snap_threshold))
            lengths.append(length)

        cls._check_u_turns(pts, unit_vectors, u_turn_dot_limit, debug)
        if len(unit_vectors) > 3:  # a triangle is covered by the kink check
            cls._check_self_intersection(pts, unit_vectors, lengths, bboxes, snap_threshold, debug)

        box = BRect.create_from_points(pts).expand(snap_threshold)
        return cls(pts, unit_vectors, bboxes, lengths, area, min_segment_length, snap_threshold, box)

    @staticmethod
    def _merge_short_segments(points: Sequence[Pt], min_segment_length: float,
                              debug: DebugDraw) -> List[Pt]:
        min_len_sq = min_segment_length * min_segment_length
        ps = [points[0]]
        for i in range(1, len(points)):
            pt = points[i]
            if Pt.distance_sq(ps[-1], pt) > min_len_sq:
                ps.append(pt)
            else:
                logger.debug('Loop: segment %d shorter than %g was merged, it was just %g long.',
                             i - 1, min_segment_length, Pt.distance(ps[-1], pt))
                ps[-1] = (ps[-1] + pt) * 0.5
                debug.draw_dot(f'short segm: {i - 1}', pt)
        if Pt.distance_sq(ps[-1], ps[0]) > min_len_sq:
            ps.append(ps[0])
        else:
            ps[-1] = ps[0]
        return ps

    @staticmethod
    def _check_u_turns(pts: List[Pt], unit_vectors: List[UnitVc], limit: float,
                       debug: DebugDraw) -> None:
        count = len(unit_vectors)
        for i in range(count):
            prev = unit_vectors[i - 1]  # i == 0 checks the closing corner
            if prev.dot(unit_vectors[i]) < limit:
                debug.draw_dot('+170 deg turn?', pts[i])
                logger.warning('Loop rejected: kink between 170 and 180 degrees at point %d', i)
                raise SelfIntersectionError(
                    f"Loop: lines for Loop make a kink between 170 and 180 degrees at point {i}")

    @staticmethod
    def _check_self_intersection(pts: List[Pt], unit_vectors: List[UnitVc], lengths: List[float],
                                 bboxes: List[BRect], snap_threshold: float, debug: DebugDraw) -> None:
        count = len(unit_vectors)
        minx = np.array([b.min_x for b in bboxes])
        maxx = np.array([b.max_x for b in bboxes])
        miny = np.array([b.min_y for b in bboxes])
        maxy = np.array([b.max_y for b in bboxes])
        last = count - 1
        # TODO: quadratic in the segment count, a sweep line would scale better
        for i in range(count - 2):
            js = np.arange(i + 2, count)
            if i == 0:
                js = js[js != last]  # first and last segment are neighbours
            if js.size == 0:
                continue
            hits = bbox_overlap(minx[i], maxx[i], miny[i], maxy[i], minx[js], maxx[js], miny[js], maxy[js])
            ap, au, al = pts[i], unit_vectors[i], lengths[i]
            for j in js[hits]:
                j = int(j)
                bp, bu, bl = pts[j], unit_vectors[j], lengths[j]
                if touch_given_box_overlap(ap, au, al, bp, bu, bl, snap_threshold):
                    debug.draw_dot(f'self X: {i} + {j}',
                                   get_x_point_or_mid(ap, au, al, bp, bu, bl, snap_threshold))
                    debug.draw_line(ap, ap + au * al)
                    debug.draw_line(bp, bp + bu * bl)
                    logger.warning('Loop rejected: segments %d and %d intersect', i, j)
                    raise SelfIntersectionError(
                        f"Loop: Loop of {len(pts) - 1} points has self intersection "
                        f"between segments {i} and {j}")
