"""Parameter records for strip/rib and slot waveguide cross-sections.

All lengths (wavelength included) share one unit; micrometres are the
convention used throughout the examples and tests.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, Mapping, Type, TypeVar

from pydantic import BaseModel, Field, validator


class Polarization(str, Enum):
    TE = "TE"
    TM = "TM"

    @property
    def crossed(self) -> "Polarization":
        """The orthogonal polarization."""
        return Polarization.TM if self is Polarization.TE else Polarization.TE

    def label(self, order: int) -> str:
        return f"{self.value}{order}"


class WaveguideKind(str, Enum):
    STRIP = "strip"
    SLOT = "slot"


class StripParams(BaseModel):
    """Strip (``t_slab == 0``) or rib (``t_slab > 0``) waveguide.

    ::

          clad       clad       clad
        +------+-----------+------+
        | slab |    rib    | slab |   t_rib (rib), t_slab (sides)
        +------+-----------+------+
          box        box        box
                 <- w_rib ->
    """

    wavelength: float = Field(..., gt=0)
    t_rib: float = Field(..., gt=0, description="Core height at the rib")
    t_slab: float = Field(0.0, ge=0, description="Core height beside the rib")
    w_rib: float = Field(..., gt=0)
    n_box: float = Field(..., gt=0)
    n_core: float = Field(..., gt=0)
    n_clad: float = Field(..., gt=0)
    mode_order: int = Field(0, ge=0)
    polarization: Polarization = Polarization.TE

    @validator("t_slab")
    def _slab_below_rib(cls, value: float, values: Dict[str, Any]) -> float:
        t_rib = values.get("t_rib")
        if t_rib is not None and value >= t_rib:
            raise ValueError("t_slab must be smaller than t_rib")
        return value

    @validator("n_core")
    def _core_guides(cls, value: float, values: Dict[str, Any]) -> float:
        n_box = values.get("n_box")
        if n_box is not None and value <= n_box:
            raise ValueError("n_core must exceed n_box for a guided mode")
        return value

    @validator("n_clad")
    def _clad_below_core(cls, value: float, values: Dict[str, Any]) -> float:
        n_core = values.get("n_core")
        if n_core is not None and value >= n_core:
            raise ValueError("n_clad must be smaller than n_core for a guided mode")
        return value


class SlotParams(BaseModel):
    """Symmetric slot waveguide: two cores of width ``w_core`` around a slot.

    ::

        | clad | core | slot | core | clad |   t_core
                <w_core><w_slot>
    """

    wavelength: float = Field(..., gt=0)
    t_core: float = Field(..., gt=0)
    w_core: float = Field(..., gt=0)
    w_slot: float = Field(..., gt=0)
    n_box: float = Field(..., gt=0)
    n_clad: float = Field(..., gt=0)
    n_core: float = Field(..., gt=0)
    n_slot: float = Field(..., gt=0)
    mode_order: int = Field(0, ge=0)
    polarization: Polarization = Polarization.TE

    @validator("n_core")
    def _core_guides(cls, value: float, values: Dict[str, Any]) -> float:
        for name in ("n_box", "n_clad"):
            other = values.get(name)
            if other is not None and value <= other:
                raise ValueError(f"n_core must exceed {name} for a guided mode")
        return value

    @validator("n_slot")
    def _slot_below_core(cls, value: float, values: Dict[str, Any]) -> float:
        n_core = values.get("n_core")
        if n_core is not None and value >= n_core:
            raise ValueError("n_slot must be smaller than n_core")
        return value


ParamsT = TypeVar("ParamsT", bound=BaseModel)


def dump_params(params: BaseModel) -> Dict[str, Any]:
    if hasattr(params, "model_dump"):
        return params.model_dump()  # Pydantic v2+
    return params.dict()  # pragma: no cover - Pydantic v1


def load_params(cls: Type[ParamsT], data: Mapping[str, Any]) -> ParamsT:
    if hasattr(cls, "model_validate"):
        return cls.model_validate(dict(data))  # Pydantic v2+
    return cls.parse_obj(dict(data))  # pragma: no cover - Pydantic v1


def apply_updates(params: ParamsT, updates: Mapping[str, Any]) -> ParamsT:
    """Return a validated copy of ``params`` with ``updates`` applied."""

    data = dump_params(params)
    unknown = set(updates) - set(data)
    if unknown:
        raise KeyError(f"Unknown parameter(s): {', '.join(sorted(unknown))}")
    data.update(updates)
    return load_params(type(params), data)


__all__ = [
    "Polarization",
    "WaveguideKind",
    "StripParams",
    "SlotParams",
    "dump_params",
    "load_params",
    "apply_updates",
]
