"""sqlgrid - query result rendering and export engine."""

from sqlgrid.__about__ import __version__

__all__ = ["__version__"]
