"""Factory utilities for instantiating waveguide models."""

from __future__ import annotations

from typing import Any, Mapping

from pydantic import ValidationError

from ..geometry import SlotParams, StripParams, WaveguideKind, load_params
from ..slab import SolverOptions
from .base import WaveguideModel
from .slot import SlotWaveguide
from .strip import StripWaveguide

_MODELS = {
    WaveguideKind.STRIP: (StripWaveguide, StripParams),
    WaveguideKind.SLOT: (SlotWaveguide, SlotParams),
}


class WaveguideFactoryError(ValueError):
    """Raised when a waveguide configuration is invalid."""


def create_waveguide(config: Mapping[str, Any] | None = None) -> WaveguideModel:
    """Create a :class:`WaveguideModel` from a user configuration mapping.

    Parameters
    ----------
    config:
        Mapping describing the waveguide. Supported keys:

        ``kind`` (str, optional):
            ``"strip"`` (default, also covers rib waveguides) or ``"slot"``.
        ``options`` (mapping, optional):
            Numerical settings passed to :class:`SolverOptions`.
        All remaining keys are the geometry/material parameters of
        :class:`StripParams` or :class:`SlotParams`.

    Returns
    -------
    WaveguideModel
        Model ready to solve.
    """

    cfg = dict(config or {})
    kind_name = str(cfg.pop("kind", WaveguideKind.STRIP.value)).lower()
    try:
        kind = WaveguideKind(kind_name)
    except ValueError as exc:
        raise WaveguideFactoryError(f"Unknown waveguide kind '{kind_name}'.") from exc

    options_cfg = cfg.pop("options", None) or {}
    try:
        options = SolverOptions(**options_cfg)
    except TypeError as exc:
        raise WaveguideFactoryError(f"Unsupported solver options: {exc}") from exc

    model_cls, params_cls = _MODELS[kind]
    known = getattr(params_cls, "model_fields", None) or params_cls.__fields__
    unknown = set(cfg) - set(known)
    if unknown:
        raise WaveguideFactoryError(
            f"Unsupported {kind.value} waveguide parameters: {', '.join(sorted(unknown))}"
        )
    try:
        params = load_params(params_cls, cfg)
    except ValidationError as exc:
        raise WaveguideFactoryError(f"Invalid {kind.value} waveguide parameters: {exc}") from exc
    return model_cls(params, options=options)


__all__ = ["create_waveguide", "WaveguideFactoryError"]
