"""Optional debug drawing, passed explicitly to the code that wants it.

Components that can report problem geometry (currently :class:`Loop`) take a
``debug`` argument implementing :class:`DebugDraw`. The default
:class:`NullDebugDraw` does nothing. Nothing in the relation classifier
draws.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, List, Protocol, Sequence, Tuple

from .vectors import Pt

__all__ = ['DebugDraw', 'NullDebugDraw', 'RecordingDebugDraw']


class DebugDraw(Protocol):
    def draw_dot(self, msg: str, pt: Pt) -> None: ...

    def draw_pt(self, pt: Pt) -> None: ...

    def draw_line(self, a: Pt, b: Pt) -> None: ...

    def draw_polyline(self, pts: Sequence[Pt]) -> None: ...


class NullDebugDraw:
    """Discards everything."""

    def draw_dot(self, msg: str, pt: Pt) -> None:
        pass

    def draw_pt(self, pt: Pt) -> None:
        pass

    def draw_line(self, a: Pt, b: Pt) -> None:
        pass

    def draw_polyline(self, pts: Sequence[Pt]) -> None:
        pass


@dataclass
class RecordingDebugDraw:
    """Keeps every call as ``(kind, payload)`` in :attr:`calls`."""
    calls: List[Tuple[str, Any]] = field(default_factory=list)

    def draw_dot(self, msg: str, pt: Pt) -> None:
        self.calls.append(('dot', (msg, pt)))

    def draw_pt(self, pt: Pt) -> None:
        self.calls.append(('pt', pt))

    def draw_line(self, a: Pt, b: Pt) -> None:
        self.calls.append(('line', (a, b)))

    def draw_polyline(self, pts: Sequence[Pt]) -> None:
        self.calls.append(('polyline', list(pts)))

    def of_kind(self, kind: str) -> list:
        return [payload for k, payload in self.calls if k == kind]
