"""Configuration objects for snapgeom loops and tolerance handling."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict

from .constants import DEFAULT_MIN_SEGMENT_LENGTH, DEFAULT_SNAP_THRESHOLD, U_TURN_DOT_LIMIT


@dataclass
class LoopConfig:
    """Tolerances used when building a :class:`~snapgeom.core.loops.Loop`.

    - min_segment_length: consecutive points closer than this are merged.
    - snap_threshold: distance at which segments count as touching; also
      the expansion of every segment bounding box.
    - u_turn_dot_limit: dot product of consecutive unit vectors below which
      the loop is rejected as folding back onto itself.
    """
    min_segment_length: float = DEFAULT_MIN_SEGMENT_LENGTH
    snap_threshold: float = DEFAULT_SNAP_THRESHOLD
    u_turn_dot_limit: float = U_TURN_DOT_LIMIT


@dataclass
class GeometryConfig:
    """Unified configuration.

    Attributes
    ----------
    loop : LoopConfig
        Parameters for closed loop construction.
    extras : dict
        Free-form dictionary for application specific settings.
    """
    loop: LoopConfig = field(default_factory=LoopConfig)
    extras: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def with_snap_threshold(cls, snap_threshold: float, **loop_overrides: Any) -> 'GeometryConfig':
        lc = LoopConfig(snap_threshold=snap_threshold)
        for k, v in loop_overrides.items():
            if not hasattr(lc, k):
                raise AttributeError(f"LoopConfig has no field '{k}'")
            setattr(lc, k, v)
        return cls(loop=lc)


__all__ = ['LoopConfig', 'GeometryConfig']
