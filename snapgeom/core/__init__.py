"""Internal implementation modules of snapgeom. Import from ``snapgeom`` instead."""
