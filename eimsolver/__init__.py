"""Effective index method solvers for slab, strip/rib and slot waveguides."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("eimsolver")
except PackageNotFoundError:  # pragma: no cover - local editable install
    __version__ = "0.0.0"

__all__ = ["__version__"]
