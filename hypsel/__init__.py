"""Event selection, reweighting, fitting and statistics tools for a hyperon search."""

__version__ = "0.1.0"