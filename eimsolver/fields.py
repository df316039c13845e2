"""Closed-form 1D mode profiles and their 2D outer-product combination.

The three-layer profile uses x = 0 at the lower boundary of the guiding layer
(or at its centre when ``centered``)::

    | n1: C1 exp(g1 x) | n2: C2 cos(g2 x + alpha) | n3: C3 exp(-g3 (x - W)) |
    ----------------- 0 ------------------------- W ------------------------->

With ``C2 = 1`` the remaining coefficients follow from continuity of the
principal field and of its (index-weighted for TM) derivative. The principal
field is E_y for TE and H_y for TM; it is continuous at every boundary.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Callable, Sequence

import numpy as np

from .equations import ETA0, free_space_wavenumber, propagation_constants
from .geometry import Polarization
from .parallel import parallel_for

LOGGER = logging.getLogger(__name__)


class FieldShapeError(ValueError):
    """Raised when a caller-supplied output buffer has the wrong shape."""


@dataclass(slots=True)
class FieldProfile:
    """Field components sampled along one confinement axis.

    ``principal`` is E_y (TE) or H_y (TM); ``companion`` the transverse field
    of the other kind (H_x or E_x) and ``longitudinal`` the z component
    (H_z or E_z). Companions are ``None`` where not evaluated.
    """

    x: np.ndarray
    principal: np.ndarray
    companion: np.ndarray | None = None
    longitudinal: np.ndarray | None = None


@dataclass(slots=True)
class FieldMap:
    transverse: np.ndarray
    lateral: np.ndarray
    field: np.ndarray

    @property
    def amplitude(self) -> np.ndarray:
        return np.abs(self.field)

    @property
    def shape(self) -> tuple[int, int]:
        return self.field.shape

    def peak_position(self) -> tuple[float, float]:
        i, j = np.unravel_index(np.argmax(self.amplitude), self.field.shape)
        return float(self.transverse[i]), float(self.lateral[j])


def slab_mode_1d(
    polarization: Polarization,
    x: Sequence[float] | np.ndarray,
    neff: float,
    n1: float,
    n2: float,
    n3: float,
    wavelength: float,
    width: float,
    order: int = 0,
    centered: bool = True,
) -> FieldProfile:
    """Evaluate the three-layer slab mode at positions ``x``."""

    polarization = Polarization(polarization)
    x = np.asarray(x, dtype=float)
    pos = x + 0.5 * width if centered else x
    gamma1, gamma2, gamma3 = propagation_constants(neff, n1, n2, n3, wavelength)
    if any(math.isnan(g) for g in (gamma1, gamma2, gamma3)):
        raise ValueError(f"neff={neff} lies outside the guided band of ({n1}, {n2}, {n3}).")

    tm = polarization is Polarization.TM
    w1 = n2 * n2 / (n1 * n1) if tm else 1.0
    w3 = n2 * n2 / (n3 * n3) if tm else 1.0
    alpha = -math.atan2(w1 * gamma1, gamma2) + order * math.pi

    c2 = 1.0
    c1 = c2 * math.cos(alpha)
    c3 = c2 * math.cos(gamma2 * width + alpha)

    lower = pos < 0
    upper = pos > width
    inner = ~(lower | upper)

    principal = np.zeros(pos.shape, dtype=np.complex128)
    derivative = np.zeros(pos.shape, dtype=np.complex128)
    index = np.empty(pos.shape, dtype=float)

    principal[lower] = c1 * np.exp(gamma1 * pos[lower])
    derivative[lower] = gamma1 * principal[lower]
    index[lower] = n1

    phase = gamma2 * pos[inner] + alpha
    principal[inner] = c2 * np.cos(phase)
    derivative[inner] = -c2 * gamma2 * np.sin(phase)
    index[inner] = n2

    principal[upper] = c3 * np.exp(-gamma3 * (pos[upper] - width))
    derivative[upper] = -gamma3 * principal[upper]
    index[upper] = n3

    k0 = free_space_wavenumber(wavelength)
    if tm:
        companion = neff * ETA0 / index**2 * principal
        longitudinal = -1j * ETA0 / (k0 * index**2) * derivative
    else:
        companion = -neff / ETA0 * principal
        longitudinal = 1j / (k0 * ETA0) * derivative
    return FieldProfile(x=x, principal=principal, companion=companion, longitudinal=longitudinal)


def slot_mode_1d(
    polarization: Polarization,
    y: Sequence[float] | np.ndarray,
    neff: float,
    n_clad: float,
    n_core: float,
    n_slot: float,
    wavelength: float,
    w_slot: float,
    w_core: float,
    odd: bool = False,
) -> FieldProfile:
    """Evaluate the symmetric five-layer slot mode, slot centred at ``y = 0``.

    Even modes use ``cosh`` inside the slot, odd modes ``sinh``; the core
    field is ``cos(kappa (|y| - a) - phi)`` and the cladding decays
    exponentially beyond ``b = a + w_core``. The mode order enters only
    through ``neff``.
    """

    polarization = Polarization(polarization)
    y = np.asarray(y, dtype=float)
    a = 0.5 * w_slot
    b = a + w_core
    k0 = free_space_wavenumber(wavelength)
    radicands = (neff**2 - n_slot**2, n_core**2 - neff**2, neff**2 - n_clad**2)
    if min(radicands) < 0:
        raise ValueError(f"neff={neff} lies outside the guided band of the slot stack.")
    gamma_slot, kappa, gamma_clad = (k0 * math.sqrt(r) for r in radicands)

    w_slot_weight = n_core**2 / n_slot**2 if polarization is Polarization.TM else 1.0
    arg = gamma_slot * a
    if odd:
        coupling = gamma_slot / math.tanh(arg) if arg > 0 else 1.0 / a
    else:
        coupling = gamma_slot * math.tanh(arg)
    phi = math.atan2(w_slot_weight * coupling, kappa)

    ay = np.abs(y)
    sign = np.sign(y) if odd else np.ones_like(y)
    principal = np.zeros(y.shape, dtype=np.complex128)

    in_slot = ay < a
    in_core = (ay >= a) & (ay <= b)
    in_clad = ay > b

    if odd:
        if arg > 0:
            principal[in_slot] = math.cos(phi) * np.sinh(gamma_slot * y[in_slot]) / math.sinh(arg)
        else:
            principal[in_slot] = math.cos(phi) * y[in_slot] / a
    else:
        principal[in_slot] = math.cos(phi) * np.cosh(gamma_slot * y[in_slot]) / math.cosh(arg)
    principal[in_core] = sign[in_core] * np.cos(kappa * (ay[in_core] - a) - phi)
    c_clad = math.cos(kappa * (b - a) - phi)
    principal[in_clad] = sign[in_clad] * c_clad * np.exp(-gamma_clad * (ay[in_clad] - b))
    return FieldProfile(x=y, principal=principal)


def _prepare_output(a: np.ndarray, b: np.ndarray, out: np.ndarray | None) -> np.ndarray:
    if a.ndim != 1 or b.ndim != 1:
        raise FieldShapeError("Outer product operands must be one-dimensional.")
    shape = (a.size, b.size)
    if out is None:
        return np.empty(shape, dtype=np.result_type(a, b))
    if out.shape != shape:
        raise FieldShapeError(f"Output buffer has shape {out.shape}, expected {shape}.")
    return out


def outer_product(a, b, out: np.ndarray | None = None) -> np.ndarray:
    """Serial ``out[i, j] = a[i] * b[j]``."""

    a = np.asarray(a)
    b = np.asarray(b)
    result = _prepare_output(a, b, out)
    result[...] = np.multiply.outer(a, b)
    return result


def parallel_outer_product(
    a,
    b,
    out: np.ndarray | None = None,
    workers: int | None = None,
    progress: Callable[[int], object] | None = None,
) -> np.ndarray:
    """Row-parallel ``out[i, j] = a[i] * b[j]`` using :func:`parallel_for`.

    Each worker owns a contiguous block of rows, so writes never overlap.
    """

    a = np.asarray(a)
    b = np.asarray(b)
    result = _prepare_output(a, b, out)

    def _fill_row(ai, i: int) -> None:
        result[i, :] = ai * b

    parallel_for(a, _fill_row, workers=workers, progress=progress, with_index=True)
    return result


def combine_profiles(
    transverse: FieldProfile,
    lateral: FieldProfile,
    workers: int | None = None,
    parallel: bool = True,
) -> FieldMap:
    """Outer product of two 1D principal fields into a 2D :class:`FieldMap`."""

    if LOGGER.isEnabledFor(logging.DEBUG):
        LOGGER.debug(
            "Combining %d x %d field (%s)", transverse.x.size, lateral.x.size, "parallel" if parallel else "serial"
        )
    if parallel:
        field = parallel_outer_product(transverse.principal, lateral.principal, workers=workers)
    else:
        field = outer_product(transverse.principal, lateral.principal)
    return FieldMap(transverse=transverse.x, lateral=lateral.x, field=field)


__all__ = [
    "FieldShapeError",
    "FieldProfile",
    "FieldMap",
    "slab_mode_1d",
    "slot_mode_1d",
    "outer_product",
    "parallel_outer_product",
    "combine_profiles",
]
