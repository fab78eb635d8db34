"""Smoke test to ensure top-level package import works and the flat API
layer (`snapgeom/__init__.py`) exposes the classifier and loop types.
"""

def test_import_snapgeom_smoke():
    import snapgeom  # noqa: F401
    assert hasattr(snapgeom, 'classify')
    assert hasattr(snapgeom, 'Loop')
    assert snapgeom.RelationKind.CROSS_FROM_RIGHT == 3
    # lazy proxy should resolve
    assert hasattr(snapgeom.visualization, 'MatplotlibDebugDraw')


def test_docstring_example():
    from snapgeom import Pt, RelationKind, Segment, classify

    a = Segment.from_points(Pt(0, 0), Pt(10, 0))
    b = Segment.from_points(Pt(5, -5), Pt(5, 5))
    rel = classify(a, b, snap_threshold=1e-3)
    assert rel.kind is RelationKind.CROSS_FROM_RIGHT
