"""Exception types raised by snapgeom.

All of them derive from ``ValueError`` so callers that only guard against bad
arguments keep working.
"""
from __future__ import annotations


class GeometryError(ValueError):
    """Base class for invalid geometric input."""


class UnitizingError(GeometryError):
    """A vector was too short to be unitized."""


class EmptySequenceError(GeometryError):
    """A sequence of points was empty where at least one is required."""


class SelfIntersectionError(GeometryError):
    """A closed loop intersects or folds back onto itself."""


__all__ = ['GeometryError', 'UnitizingError', 'EmptySequenceError', 'SelfIntersectionError']
