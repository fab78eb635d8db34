"""Public package API for the snapgeom geometry toolkit.

This facade provides a flat import surface on top of the internal
implementation package ``snapgeom.core`` and defers the matplotlib backed
debug drawing until first use to keep ``import snapgeom`` fast.

Example
-------
    from snapgeom import Pt, Segment, classify, RelationKind

    a = Segment.from_points(Pt(0, 0), Pt(10, 0))
    b = Segment.from_points(Pt(5, -5), Pt(5, 5))
    rel = classify(a, b, snap_threshold=1e-3)
    assert rel.kind is RelationKind.CROSS_FROM_RIGHT

The deeper modules (``snapgeom.core.*``) are considered internal and may
change; rely on this layer for public symbols.
"""
from importlib import import_module as _imp
from importlib.metadata import PackageNotFoundError as _NotInstalled
from importlib.metadata import version as _pkg_version
import logging as _logging

try:
    __version__ = _pkg_version("snapgeom")
except _NotInstalled:  # pragma: no cover - running from a source checkout
    __version__ = "0.0.0+dev"

_logging.getLogger(__name__).addHandler(_logging.NullHandler())

# Eager light-weight submodules
_const = _imp('snapgeom.core.constants')
_errors = _imp('snapgeom.core.errors')
_vec = _imp('snapgeom.core.vectors')
_brect = _imp('snapgeom.core.brect')
_seg = _imp('snapgeom.core.segment')
_isect = _imp('snapgeom.core.intersect')
_loops = _imp('snapgeom.core.loops')
_debug = _imp('snapgeom.core.debug_draw')
_config = _imp('snapgeom.core.config')
_log = _imp('snapgeom.core.logging_utils')


def _lazy_module(mod_name):
    class _ModuleProxy:
        __slots__ = ('_m',)

        def _load(self):
            try:
                return self._m
            except AttributeError:
                self._m = _imp(mod_name)
                return self._m

        def __getattr__(self, item):
            if item == '_m':  # unset slot, not yet loaded
                raise AttributeError(item)
            return getattr(self._load(), item)

        def __dir__(self):
            return dir(self._load())
    return _ModuleProxy()


# Lazily loaded, matplotlib dependent
visualization = _lazy_module('snapgeom.core.visualization')

# Value types
Pt = _vec.Pt
Vc = _vec.Vc
UnitVc = _vec.UnitVc
Pnt = _vec.Pnt
BRect = _brect.BRect
BBox = _brect.BBox
Segment = _seg.Segment
Loop = _loops.Loop
PointLoopRel = _loops.PointLoopRel

# Relation classifier
RelationKind = _isect.RelationKind
LineLineRelation = _isect.LineLineRelation
get_relation = _isect.get_relation
classify = _isect.classify
touch_given_box_overlap = _isect.touch_given_box_overlap
do_intersect_or_overlap_colinear = _isect.do_intersect_or_overlap_colinear
get_x_point_or_mid = _isect.get_x_point_or_mid
relation_kinds = _isect.relation_kinds
bbox_overlap = _brect.bbox_overlap
signed_area = _loops.signed_area

# Tolerances
ZERO_LENGTH_TOLERANCE = _const.ZERO_LENGTH_TOLERANCE

# Errors
GeometryError = _errors.GeometryError
UnitizingError = _errors.UnitizingError
EmptySequenceError = _errors.EmptySequenceError
SelfIntersectionError = _errors.SelfIntersectionError

# Debug drawing, configuration, logging
DebugDraw = _debug.DebugDraw
NullDebugDraw = _debug.NullDebugDraw
RecordingDebugDraw = _debug.RecordingDebugDraw
LoopConfig = _config.LoopConfig
GeometryConfig = _config.GeometryConfig
get_logger = _log.get_logger
configure_logging = _log.configure_logging

# Namespace submodules for exploratory users
constants = _const
intersect = _isect
loops = _loops

__all__ = [
    '__version__',
    # value types
    'Pt', 'Vc', 'UnitVc', 'Pnt', 'BRect', 'BBox', 'Segment', 'Loop', 'PointLoopRel',
    # classifier
    'RelationKind', 'LineLineRelation', 'get_relation', 'classify', 'touch_given_box_overlap',
    'do_intersect_or_overlap_colinear', 'get_x_point_or_mid', 'relation_kinds',
    'bbox_overlap', 'signed_area',
    # tolerances and errors
    'ZERO_LENGTH_TOLERANCE', 'GeometryError', 'UnitizingError', 'EmptySequenceError',
    'SelfIntersectionError',
    # debug drawing, configuration, logging
    'DebugDraw', 'NullDebugDraw', 'RecordingDebugDraw', 'LoopConfig', 'GeometryConfig',
    'get_logger', 'configure_logging',
    # submodules
    'constants', 'intersect', 'loops', 'visualization',
]
