"""Matplotlib backed debug drawing.

Imported lazily by the package facade so that ``import snapgeom`` does not
pull in matplotlib. Figures are created through the object oriented API and
never registered with pyplot, so nothing here depends on the active backend.
"""
from __future__ import annotations

from typing import Optional, Sequence

from matplotlib.axes import Axes
from matplotlib.figure import Figure

from .logging_utils import get_logger
from .vectors import Pt

logger = get_logger('snapgeom.viz')

__all__ = ['MatplotlibDebugDraw']


class MatplotlibDebugDraw:
    """:class:`~snapgeom.core.debug_draw.DebugDraw` sink that draws onto an ``Axes``.

    Args:
        ax: axes to draw on; a new 6x6 inch figure is created when omitted
        color: color used for lines and polylines
        dot_color: color used for annotated dots and plain points
    """

    def __init__(self, ax: Optional[Axes] = None, color=(0.2, 0.3, 0.85), dot_color=(0.85, 0.2, 0.2)):
        if ax is None:
            fig = Figure(figsize=(6, 6))
            ax = fig.add_subplot()
        self.ax = ax
        self.color = color
        self.dot_color = dot_color
        self.count = 0

    @property
    def figure(self) -> Figure:
        return self.ax.figure

    def draw_dot(self, msg: str, pt: Pt) -> None:
        self.ax.scatter([pt.x], [pt.y], s=12, color=self.dot_color, zorder=3)
        self.ax.annotate(msg, (pt.x, pt.y), textcoords='offset points', xytext=(4, 4), fontsize=7)
        self.count += 1

    def draw_pt(self, pt: Pt) -> None:
        self.ax.scatter([pt.x], [pt.y], s=6, color=self.dot_color, zorder=3)
        self.count += 1

    def draw_line(self, a: Pt, b: Pt) -> None:
        self.ax.plot([a.x, b.x], [a.y, b.y], color=self.color, linewidth=1.2)
        self.count += 1

    def draw_polyline(self, pts: Sequence[Pt]) -> None:
        pts = list(pts)
        if len(pts) < 2:
            return
        self.ax.plot([p.x for p in pts], [p.y for p in pts], color=self.color, linewidth=1.0)
        self.count += 1

    def draw_loop(self, loop) -> None:
        """Outline of a :class:`~snapgeom.core.loops.Loop` with its vertices."""
        pts = loop.points
        self.draw_polyline(pts)
        npts = max(1, len(pts))
        s = max(0.6, min(12.0, 200.0 / float(npts)))
        self.ax.scatter([p.x for p in pts], [p.y for p in pts], s=s, color='black')

    def save(self, outname: str = 'debug.png', dpi: int = 150) -> str:
        self.ax.set_aspect('equal')
        self.figure.savefig(outname, dpi=dpi)
        logger.info('Saved debug drawing with %d items to %s', self.count, outname)
        return outname
