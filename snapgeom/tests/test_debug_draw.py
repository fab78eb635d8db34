import pytest

from snapgeom.core.debug_draw import DebugDraw, NullDebugDraw, RecordingDebugDraw
from snapgeom.core.errors import SelfIntersectionError
from snapgeom.core.loops import Loop
from snapgeom.core.vectors import Pt
from snapgeom.core.visualization import MatplotlibDebugDraw


def _exercise(dbg: DebugDraw):
    dbg.draw_dot('here', Pt(1.0, 2.0))
    dbg.draw_pt(Pt(0.0, 0.0))
    dbg.draw_line(Pt(0.0, 0.0), Pt(1.0, 1.0))
    dbg.draw_polyline([Pt(0.0, 0.0), Pt(1.0, 0.0), Pt(1.0, 1.0)])


def test_null_sink_accepts_everything():
    _exercise(NullDebugDraw())


def test_recording_sink_keeps_calls_in_order():
    dbg = RecordingDebugDraw()
    _exercise(dbg)
    assert [k for k, _ in dbg.calls] == ['dot', 'pt', 'line', 'polyline']
    assert dbg.of_kind('dot') == [('here', Pt(1.0, 2.0))]
    assert dbg.of_kind('line') == [(Pt(0.0, 0.0), Pt(1.0, 1.0))]


def test_matplotlib_sink_saves(tmp_path):
    dbg = MatplotlibDebugDraw()
    _exercise(dbg)
    dbg.draw_polyline([Pt(0.0, 0.0)])  # too short, ignored
    assert dbg.count == 4
    loop = Loop.create([Pt(0, 0), Pt(4, 0), Pt(4, 3)], 1e-6, 1e-3)
    dbg.draw_loop(loop)
    out = dbg.save(str(tmp_path / 'debug.png'), dpi=50)
    assert (tmp_path / 'debug.png').exists()
    assert out.endswith('debug.png')


def test_loop_rejection_can_be_drawn(tmp_path):
    dbg = MatplotlibDebugDraw()
    with pytest.raises(SelfIntersectionError):
        Loop.create([Pt(0, 0), Pt(1, 1), Pt(1, 0), Pt(0, 1)], 1e-6, 1e-3, debug=dbg)
    assert dbg.count == 3
    dbg.save(str(tmp_path / 'bowtie.png'), dpi=50)
