"""Dispersion relations of three-layer (strip) and five-layer (slot) slabs.

Each function returns ``rhs - lhs`` of the guided-mode relation evaluated at a
trial effective index, so a root is a valid effective index. Wavelength and
widths share one length unit. Propagation constants use the real branch only:
a negative radicand (trial index outside the guided band) produces NaN, which
the bisection treats as an unusable bracket.
"""

from __future__ import annotations

import math

from scipy import constants

from .geometry import Polarization

EPS0 = constants.epsilon_0
MU0 = constants.mu_0
C0 = constants.c
ETA0 = math.sqrt(MU0 / EPS0)


def free_space_wavenumber(wavelength: float) -> float:
    return 2.0 * math.pi / wavelength


def _root(k0: float, radicand: float) -> float:
    if radicand < 0:
        return math.nan
    return k0 * math.sqrt(radicand)


def propagation_constants(
    neff: float, n1: float, n2: float, n3: float, wavelength: float
) -> tuple[float, float, float]:
    """Return ``(gamma1, gamma2, gamma3)``.

    ``gamma1``/``gamma3`` are the decay constants in the outer layers and
    ``gamma2`` the transverse wavenumber inside the guiding layer.
    """

    k0 = free_space_wavenumber(wavelength)
    gamma1 = _root(k0, neff * neff - n1 * n1)
    gamma2 = _root(k0, n2 * n2 - neff * neff)
    gamma3 = _root(k0, neff * neff - n3 * n3)
    return gamma1, gamma2, gamma3


def slab_equation(
    polarization: Polarization,
    n1: float,
    n2: float,
    n3: float,
    wavelength: float,
    width: float,
    order: int,
    neff: float,
) -> float:
    """Three-layer relation ``gamma2*W = phi1 + phi3 + (order+1)*pi``.

    ``phi1``/``phi3`` are the (negative) reflection phases at the two
    boundaries; for TM the arctangent arguments carry the index-squared
    weights.
    """

    gamma1, gamma2, gamma3 = propagation_constants(neff, n1, n2, n3, wavelength)
    lhs = gamma2 * width
    if Polarization(polarization) is Polarization.TE:
        rhs = -math.atan2(gamma2, gamma1) - math.atan2(gamma2, gamma3)
    else:
        rhs = -math.atan2(n1 * n1 * gamma2, n2 * n2 * gamma1) - math.atan2(
            n3 * n3 * gamma2, n2 * n2 * gamma3
        )
    return rhs + (order + 1) * math.pi - lhs


def _slot_profile_term(gamma_slot: float, a: float, odd: bool) -> float:
    """``gamma_s * tanh(gamma_s a)`` (even) or ``gamma_s * coth(gamma_s a)`` (odd)."""

    arg = gamma_slot * a
    if not odd:
        return gamma_slot * math.tanh(arg)
    if arg == 0.0:
        # gamma*coth(gamma*a) -> 1/a as gamma -> 0
        return 1.0 / a if a > 0 else math.inf
    return gamma_slot / math.tanh(arg)


def slot_equation(
    polarization: Polarization,
    n_clad: float,
    n_core: float,
    n_slot: float,
    wavelength: float,
    a: float,
    b: float,
    order: int,
    neff: float,
    odd: bool = False,
) -> float:
    """Five-layer symmetric slot relation.

    ``a`` is the slot half-width and ``b`` the half-width of slot plus one
    core, so ``b - a`` is the core width. The even (``cosh``) branch uses
    ``tanh`` in the slot coupling term, the odd (``sinh``) branch ``coth``.
    TM weights the arctangent arguments with ``n_core^2 / n_i^2``.
    """

    k0 = free_space_wavenumber(wavelength)
    gamma_slot = _root(k0, neff * neff - n_slot * n_slot)
    kappa_core = _root(k0, n_core * n_core - neff * neff)
    gamma_clad = _root(k0, neff * neff - n_clad * n_clad)
    if math.isnan(gamma_slot) or math.isnan(kappa_core) or math.isnan(gamma_clad):
        return math.nan

    if Polarization(polarization) is Polarization.TM:
        w_clad = n_core * n_core / (n_clad * n_clad)
        w_slot = n_core * n_core / (n_slot * n_slot)
    else:
        w_clad = w_slot = 1.0

    clad_phase = math.atan2(w_clad * gamma_clad, kappa_core)
    slot_phase = math.atan2(w_slot * _slot_profile_term(gamma_slot, a, odd), kappa_core)
    lhs = clad_phase + slot_phase + order * math.pi
    rhs = kappa_core * (b - a)
    return rhs - lhs


def slot_cosh_equation(n_clad, n_core, n_slot, wavelength, a, b, order, neff, polarization=Polarization.TM):
    return slot_equation(polarization, n_clad, n_core, n_slot, wavelength, a, b, order, neff, odd=False)


def slot_sinh_equation(n_clad, n_core, n_slot, wavelength, a, b, order, neff, polarization=Polarization.TM):
    return slot_equation(polarization, n_clad, n_core, n_slot, wavelength, a, b, order, neff, odd=True)


__all__ = [
    "EPS0",
    "MU0",
    "C0",
    "ETA0",
    "free_space_wavenumber",
    "propagation_constants",
    "slab_equation",
    "slot_equation",
    "slot_cosh_equation",
    "slot_sinh_equation",
]
