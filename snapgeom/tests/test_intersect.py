"""Tests for the finite segment relation classifier and its helpers."""
import math

import numpy as np
import pytest

from snapgeom.core.brect import BRect
from snapgeom.core.constants import ZERO_LENGTH_TOLERANCE
from snapgeom.core.intersect import (
    LineLineRelation,
    RelationKind,
    classify,
    do_intersect_or_overlap_colinear,
    get_relation,
    get_x_para,
    get_x_point_or_mid,
    is_param_still_below_zero_after_offsets,
    is_param_still_more_than_length_after_offsets,
    touch_given_box_overlap,
)
from snapgeom.core.segment import Segment
from snapgeom.core.vectors import Pt, UnitVc

SNAP = 0.001
CROSSING = (RelationKind.CROSS_FROM_RIGHT, RelationKind.CROSS_FROM_LEFT)
SWAPPED = {
    RelationKind.CROSS_FROM_RIGHT: RelationKind.CROSS_FROM_LEFT,
    RelationKind.CROSS_FROM_LEFT: RelationKind.CROSS_FROM_RIGHT,
    RelationKind.NO_INTERSECTION: RelationKind.NO_INTERSECTION,
    RelationKind.COLINEAR: RelationKind.COLINEAR,
    RelationKind.PARALLEL: RelationKind.PARALLEL,
}


def seg(x0, y0, x1, y1):
    return Segment.from_points(Pt(x0, y0), Pt(x1, y1))


def random_segments(rng, n, scale=10.0):
    out = []
    while len(out) < n:
        a = rng.uniform(-scale, scale, size=2)
        b = rng.uniform(-scale, scale, size=2)
        if np.hypot(*(b - a)) > 0.01:
            out.append(seg(a[0], a[1], b[0], b[1]))
    return out


class TestParameterSolver:
    def test_perpendicular_rays(self):
        # A along +x from origin, B along +y through x=3
        t = get_x_para(Pt(0.0, 0.0), 1.0, Pt(3.0, -2.0), UnitVc.create_unchecked(0.0, 1.0))
        assert t == pytest.approx(3.0)

    def test_uses_precomputed_inverse(self):
        au = UnitVc.create_unchecked(1.0, 0.0)
        bu = UnitVc.create(1.0, 1.0)
        inv = 1.0 / au.cross(bu)
        # B passes through (4, 0)
        t = get_x_para(Pt(0.0, 0.0), inv, Pt(2.0, -2.0), bu)
        assert t == pytest.approx(4.0)

    def test_negative_parameter_behind_origin(self):
        t = get_x_para(Pt(0.0, 0.0), 1.0, Pt(-7.0, 5.0), UnitVc.create_unchecked(0.0, 1.0))
        assert t == pytest.approx(-7.0)


class TestOffsetProbes:
    """Far apart and steep: both probes have to confirm the rejection."""

    def setup_method(self):
        self.ap, self.au, self.al = Pt(0.0, 0.0), UnitVc.create_unchecked(1.0, 0.0), 1.0
        self.bu = UnitVc.create(3.0, 4.0)
        self.inv = 1.0 / self.au.cross(self.bu)

    def test_beyond_length_confirmed_for_a(self):
        bp = Pt(100.0, 100.0)
        ta = get_x_para(self.ap, self.inv, bp, self.bu)
        assert ta == pytest.approx(25.0)
        assert is_param_still_more_than_length_after_offsets(
            self.ap, self.au, self.inv, self.al, bp, self.bu, SNAP)
        assert not is_param_still_below_zero_after_offsets(
            self.ap, self.au, self.inv, bp, self.bu, SNAP)

    def test_below_zero_confirmed_for_b(self):
        bp = Pt(100.0, 100.0)
        tb = get_x_para(bp, -self.inv, self.ap, self.au)
        assert tb == pytest.approx(-125.0)
        assert is_param_still_below_zero_after_offsets(bp, self.bu, -self.inv, self.ap, self.au, SNAP)
        assert not is_param_still_more_than_length_after_offsets(
            bp, self.bu, -self.inv, 1.0, self.ap, self.au, SNAP)

    def test_below_zero_confirmed_for_a(self):
        bp = Pt(-100.0, -100.0)
        assert get_x_para(self.ap, self.inv, bp, self.bu) == pytest.approx(-25.0)
        assert is_param_still_below_zero_after_offsets(self.ap, self.au, self.inv, bp, self.bu, SNAP)

    def test_aggregate_outcome_is_no_intersection(self):
        a = Segment(self.ap, self.au, self.al)
        b = Segment(Pt(100.0, 100.0), self.bu, 1.0)
        assert classify(a, b, SNAP).kind is RelationKind.NO_INTERSECTION
        assert classify(b, a, SNAP).kind is RelationKind.NO_INTERSECTION

    def test_shallow_angle_probe_does_not_confirm(self):
        # B starts 2*SNAP before A's start at a very shallow angle: shifting A
        # sideways by SNAP moves the parameter far into the segment.
        ap, au = Pt(0.0, 0.0), UnitVc.create_unchecked(1.0, 0.0)
        bp, bu = Pt(-0.002, 0.0), UnitVc.create(1.0, 0.01)
        inv = 1.0 / au.cross(bu)
        assert get_x_para(ap, inv, bp, bu) < -SNAP
        assert not is_param_still_below_zero_after_offsets(ap, au, inv, bp, bu, SNAP)

    def test_steep_angle_probe_confirms(self):
        ap, au = Pt(0.0, 0.0), UnitVc.create_unchecked(1.0, 0.0)
        bp, bu = Pt(-0.002, -1.0), UnitVc.create_unchecked(0.0, 1.0)
        inv = 1.0 / au.cross(bu)
        assert is_param_still_below_zero_after_offsets(ap, au, inv, bp, bu, SNAP)


class TestClassifierScenarios:
    def test_perpendicular_crossing(self):
        a = seg(0, 0, 10, 0)
        b = seg(5, -5, 5, 5)
        rel = classify(a, b, SNAP)
        assert rel.kind is RelationKind.CROSS_FROM_RIGHT
        assert rel.param_a == pytest.approx(5.0)
        assert rel.param_b == pytest.approx(5.0)
        assert rel.params == (rel.param_a, rel.param_b)

    def test_cross_sign_follows_direction_order(self):
        a = seg(0, 0, 10, 0)
        b = seg(5, 5, 5, -5)  # reversed B
        rel = classify(a, b, SNAP)
        assert rel.kind is RelationKind.CROSS_FROM_LEFT
        assert rel.param_a == pytest.approx(5.0)
        assert rel.param_b == pytest.approx(5.0)

    def test_colinear_far_apart(self):
        a = Segment(Pt(0.0, 0.0), UnitVc.create_unchecked(1.0, 0.0), 10.0)
        b = Segment(Pt(20.0, 0.0), UnitVc.create_unchecked(1.0, 0.0), 5.0)
        rel = classify(a, b, SNAP)
        assert rel.kind is RelationKind.COLINEAR
        assert rel.param_a is None and rel.param_b is None
        # the box check is what tells these apart
        assert touch_given_box_overlap(a.origin, a.direction, a.length, b.origin, b.direction, b.length, SNAP)
        assert not do_intersect_or_overlap_colinear(
            a.origin, a.direction, a.length, a.bounding_rect(SNAP),
            b.origin, b.direction, b.length, b.bounding_rect(SNAP), SNAP)

    def test_colinear_overlapping_with_box_check(self):
        a = Segment(Pt(0.0, 0.0), UnitVc.create_unchecked(1.0, 0.0), 10.0)
        b = Segment(Pt(5.0, 0.0), UnitVc.create_unchecked(1.0, 0.0), 10.0)
        assert do_intersect_or_overlap_colinear(
            a.origin, a.direction, a.length, a.bounding_rect(SNAP),
            b.origin, b.direction, b.length, b.bounding_rect(SNAP), SNAP)

    def test_gap_within_tolerance_is_absorbed(self):
        a = seg(0, 0, 10, 0)
        b = seg(5, 0.0005, 5, 10)
        rel = classify(a, b, SNAP)
        assert rel.kind in CROSSING
        assert rel.param_a == pytest.approx(5.0)
        assert rel.param_b == pytest.approx(-0.0005)

    def test_gap_beyond_tolerance_is_rejected(self):
        a = seg(0, 0, 10, 0)
        b = seg(5, 0.01, 5, 10)
        assert classify(a, b, SNAP).kind is RelationKind.NO_INTERSECTION

    def test_shallow_near_miss_is_escalated_to_crossing(self):
        a = Segment(Pt(0.0, 0.0), UnitVc.create_unchecked(1.0, 0.0), 10.0)
        b = Segment(Pt(-0.002, 0.0), UnitVc.create(1.0, 0.01), 5.0)
        rel = classify(a, b, SNAP)
        assert rel.kind is RelationKind.CROSS_FROM_RIGHT
        assert rel.param_a == pytest.approx(-0.002)
        assert rel.param_b == pytest.approx(0.0, abs=1e-15)

    def test_steep_near_miss_is_rejected(self):
        a = Segment(Pt(0.0, 0.0), UnitVc.create_unchecked(1.0, 0.0), 10.0)
        b = Segment(Pt(-0.002, -1.0), UnitVc.create_unchecked(0.0, 1.0), 2.0)
        assert classify(a, b, SNAP).kind is RelationKind.NO_INTERSECTION
        # a wider tolerance absorbs the same gap
        assert classify(a, b, 0.003).kind is RelationKind.CROSS_FROM_RIGHT

    def test_get_relation_matches_classify(self):
        a = seg(0, 0, 4, 4)
        b = seg(0, 4, 4, 0)
        assert get_relation(a.origin, a.direction, a.length, b.origin, b.direction, b.length, SNAP) == \
            classify(a, b, SNAP)


class TestBoundaryAcceptance:
    @pytest.mark.parametrize("b", [
        seg(0, -5, 0, 5),    # through A's start
        seg(10, -5, 10, 5),  # through A's end
        seg(5, 0, 5, 5),     # B starts on A
        seg(5, -5, 5, 0),    # B ends on A
    ])
    def test_exact_end_parameters_are_crossings_without_tolerance(self, b):
        a = seg(0, 0, 10, 0)
        rel = classify(a, b, 0.0)
        assert rel.kind in CROSSING

    def test_parameters_at_zero_and_length(self):
        a = seg(0, 0, 10, 0)
        assert classify(a, seg(0, -5, 0, 5), 0.0).param_a == 0.0
        assert classify(a, seg(10, -5, 10, 5), 0.0).param_a == 10.0

    def test_just_outside_without_tolerance(self):
        a = seg(0, 0, 10, 0)
        assert classify(a, seg(10.5, -5, 10.5, 5), 0.0).kind is RelationKind.NO_INTERSECTION


class TestParallelAndColinear:
    def test_within_snap_is_colinear(self):
        a = seg(0, 0, 10, 0)
        assert classify(a, seg(0, 0.0005, 10, 0.0005), SNAP).kind is RelationKind.COLINEAR

    def test_beyond_snap_is_parallel(self):
        a = seg(0, 0, 10, 0)
        assert classify(a, seg(0, 0.002, 10, 0.002), SNAP).kind is RelationKind.PARALLEL

    def test_exact_snap_distance_is_parallel(self):
        a = Segment(Pt(0.0, 0.0), UnitVc.create_unchecked(1.0, 0.0), 10.0)
        b = Segment(Pt(0.0, 0.001), UnitVc.create_unchecked(1.0, 0.0), 10.0)
        assert classify(a, b, 0.001).kind is RelationKind.PARALLEL

    def test_opposite_directions_are_parallel_too(self):
        a = seg(0, 0, 10, 0)
        assert classify(a, seg(20, 0, 15, 0), SNAP).kind is RelationKind.COLINEAR
        assert classify(a, seg(20, 3, 15, 3), SNAP).kind is RelationKind.PARALLEL

    def test_direction_difference_below_zero_length_tolerance(self):
        a = Segment(Pt(0.0, 0.0), UnitVc.create_unchecked(1.0, 0.0), 10.0)
        bu = UnitVc.create(1.0, ZERO_LENGTH_TOLERANCE / 10.0)
        assert abs(a.direction.cross(bu)) <= ZERO_LENGTH_TOLERANCE
        assert classify(a, Segment(Pt(0.0, 0.0005), bu, 10.0), SNAP).kind is RelationKind.COLINEAR
        assert classify(a, Segment(Pt(0.0, 0.5), bu, 10.0), SNAP).kind is RelationKind.PARALLEL

    def test_parallel_outcomes_are_shared_values(self):
        a = seg(0, 0, 10, 0)
        assert classify(a, seg(0, 5, 10, 5), SNAP) is LineLineRelation.PARALLEL
        with pytest.raises(ValueError):
            LineLineRelation.PARALLEL.params


class TestProperties:
    def test_symmetry_on_random_pairs(self):
        rng = np.random.RandomState(7)
        segs = random_segments(rng, 120)
        for a, b in zip(segs[::2], segs[1::2]):
            for snap in (0.0, 0.01, 0.5):
                r1 = classify(a, b, snap)
                r2 = classify(b, a, snap)
                assert r2.kind is SWAPPED[r1.kind]
                if r1.is_crossing:
                    assert r2.param_a == pytest.approx(r1.param_b, rel=1e-12, abs=1e-12)
                    assert r2.param_b == pytest.approx(r1.param_a, rel=1e-12, abs=1e-12)

    def test_symmetry_of_perpendicular_crossing(self):
        a = seg(0, 0, 10, 0)
        b = seg(5, -5, 5, 5)
        assert classify(a, b, SNAP).kind is RelationKind.CROSS_FROM_RIGHT
        assert classify(b, a, SNAP).kind is RelationKind.CROSS_FROM_LEFT

    def test_symmetry_of_parallel_pairs(self):
        a = seg(0, 0, 10, 0)
        for b in (seg(20, 0, 25, 0), seg(0, 3, 10, 3), seg(10, 0.0005, 0, 0.0005)):
            assert classify(a, b, SNAP).kind is classify(b, a, SNAP).kind

    def test_tolerance_monotonicity(self):
        rng = np.random.RandomState(3)
        ladder = [0.0, 1e-4, 1e-3, 1e-2, 0.1, 0.5, 2.0]
        segs = random_segments(rng, 200)
        # near misses around the end of a fixed segment, at many angles
        base = seg(0, 0, 10, 0)
        near = []
        for ang in np.linspace(0.01, math.pi - 0.01, 25):
            for gap in (0.0005, 0.005, 0.05):
                d = UnitVc.create(math.cos(ang), math.sin(ang))
                near.append((base, Segment(Pt(10.0 + gap, 0.0), d, 3.0)))
                near.append((base, Segment(Pt(5.0, gap), d, 3.0)))
        pairs = list(zip(segs[::2], segs[1::2])) + near
        for a, b in pairs:
            touched = False
            for snap in ladder:
                t = classify(a, b, snap).touches
                assert not (touched and not t), (a, b, snap)
                touched = touched or t


class TestDerivedQueries:
    def test_touch_given_box_overlap(self):
        a = seg(0, 0, 10, 0)
        args_a = (a.origin, a.direction, a.length)
        for b, expected in [
            (seg(5, -5, 5, 5), True),           # crossing
            (seg(5, 5, 5, -5), True),           # crossing, other side
            (seg(2, 0.0001, 8, 0.0001), True),  # colinear
            (seg(0, 1, 10, 1), False),          # parallel
            (seg(20, -5, 20, 5), False),        # no intersection
        ]:
            assert touch_given_box_overlap(*args_a, b.origin, b.direction, b.length, SNAP) is expected

    def test_x_point_for_crossing(self):
        a = seg(0, 0, 10, 0)
        b = seg(3, -1, 3, 4)
        p = get_x_point_or_mid(a.origin, a.direction, a.length, b.origin, b.direction, b.length, SNAP)
        assert p.x == pytest.approx(3.0)
        assert p.y == pytest.approx(0.0)

    def test_x_point_is_on_a_line_not_clamped(self):
        a = seg(0, 0, 10, 0)
        b = seg(-0.0005, -1, -0.0005, 1)
        p = get_x_point_or_mid(a.origin, a.direction, a.length, b.origin, b.direction, b.length, SNAP)
        assert p.x == pytest.approx(-0.0005)
        assert p.y == pytest.approx(0.0)

    def test_midpoint_fallback(self):
        a = seg(0, 0, 10, 0)
        b = seg(0, 5, 10, 5)
        p = get_x_point_or_mid(a.origin, a.direction, a.length, b.origin, b.direction, b.length, SNAP)
        assert p.x == pytest.approx(5.0)
        assert p.y == pytest.approx(2.5)

    def test_midpoint_fallback_for_no_intersection(self):
        a = seg(0, 0, 2, 0)
        b = seg(10, 10, 10, 14)
        p = get_x_point_or_mid(a.origin, a.direction, a.length, b.origin, b.direction, b.length, SNAP)
        assert p.x == pytest.approx((0 + 2 + 10 + 10) / 4.0)
        assert p.y == pytest.approx((0 + 0 + 10 + 14) / 4.0)

    def test_box_prefilter_short_circuits(self):
        a = seg(0, 0, 10, 0)
        b = seg(5, -5, 5, 5)
        far = BRect(100.0, 100.0, 101.0, 101.0)
        assert not do_intersect_or_overlap_colinear(
            a.origin, a.direction, a.length, a.bounding_rect(SNAP),
            b.origin, b.direction, b.length, far, SNAP)
