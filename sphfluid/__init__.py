"""Smoothed-particle hydrodynamics fluid simulation on a uniform block grid, with FLD file input and output."""

__version__ = "1.0.0"

__all__ = ["particle", "boundaries", "block", "grid", "simulator", "fld"]