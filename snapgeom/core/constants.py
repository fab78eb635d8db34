"""Central numerical tolerances and small geometry constants.

This module centralizes tiny numeric thresholds used across the codebase so
they can be tuned consistently and referenced without scattering literals.
"""
from __future__ import annotations

# Geometry tolerances
ZERO_LENGTH_TOLERANCE: float = 1e-12   # below this a length or a cross product counts as zero

# Dot product of consecutive unit vectors for a 170 degree turn.
# 160 deg: -0.93969, 170 deg: -0.984808, 178 deg: -0.999391
U_TURN_DOT_LIMIT: float = -0.984808

# Defaults for Loop construction
DEFAULT_MIN_SEGMENT_LENGTH: float = 1e-6
DEFAULT_SNAP_THRESHOLD: float = 1e-6

__all__ = [
    'ZERO_LENGTH_TOLERANCE',
    'U_TURN_DOT_LIMIT',
    'DEFAULT_MIN_SEGMENT_LENGTH',
    'DEFAULT_SNAP_THRESHOLD',
]
