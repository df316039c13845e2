"""Effective index waveguide models."""

from .base import EIMResult, WaveguideModel
from .factory import WaveguideFactoryError, create_waveguide
from .slot import SlotWaveguide
from .strip import StripWaveguide

__all__ = [
    "EIMResult",
    "WaveguideModel",
    "StripWaveguide",
    "SlotWaveguide",
    "create_waveguide",
    "WaveguideFactoryError",
]
