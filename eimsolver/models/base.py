"""Abstract interface shared by the effective-index waveguide models."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, Generic, Mapping, Sequence, Tuple, TypeVar

import numpy as np
from pydantic import BaseModel

from ..fields import FieldMap
from ..geometry import Polarization, apply_updates
from ..mesh import SampleGrid
from ..slab import SolverOptions

ParamsT = TypeVar("ParamsT", bound=BaseModel)


@dataclass(slots=True)
class EIMResult:
    """Final effective index plus the intermediate indices it was built from."""

    neff: float
    polarization: Polarization
    mode_order: int
    vertical: Dict[str, float]
    lateral_stack: Tuple[float, ...]
    fallback: bool = False
    fallback_stages: Tuple[str, ...] = field(default_factory=tuple)

    @property
    def label(self) -> str:
        return self.polarization.label(self.mode_order)


class WaveguideModel(ABC, Generic[ParamsT]):
    """Effective index model of one 2D waveguide cross-section.

    Models hold no solver state: every call to :meth:`solve` reads the current
    ``params`` and recomputes the full chain of slab solves.
    """

    kind: str = ""
    #: Geometry echoed into every sweep row, in output order.
    echo_fields: Sequence[str] = ()

    def __init__(self, params: ParamsT, options: SolverOptions | None = None) -> None:
        self.params = params
        self.options = options or SolverOptions()

    @abstractmethod
    def solve(self) -> EIMResult:
        """Run the vertical and horizontal slab solves."""
        raise NotImplementedError

    @abstractmethod
    def mode_2d(self, transverse: np.ndarray, lateral: np.ndarray | None = None) -> FieldMap:
        """Reconstruct the principal field on a transverse x lateral grid."""
        raise NotImplementedError

    @abstractmethod
    def sweep_axes(self, config) -> Dict[str, Sequence[Any]]:
        """Ordered mapping of parameter name to the values a sweep visits."""
        raise NotImplementedError

    def effective_index(self) -> float:
        return self.solve().neff

    @property
    def polarization(self) -> Polarization:
        return Polarization(self.params.polarization)

    @property
    def mode_label(self) -> str:
        return self.polarization.label(self.params.mode_order)

    def describe(self) -> Dict[str, float]:
        return {name: getattr(self.params, name) for name in self.echo_fields}

    def with_updates(self, updates: Mapping[str, Any] | None = None, **kwargs: Any) -> "WaveguideModel[ParamsT]":
        changes = {**dict(updates or {}), **kwargs}
        return type(self)(apply_updates(self.params, changes), options=self.options)

    def field_map(self, grid: SampleGrid) -> FieldMap:
        return self.mode_2d(grid.transverse, grid.lateral)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.params!r})"


__all__ = ["EIMResult", "WaveguideModel"]
