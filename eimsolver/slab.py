"""One-dimensional slab and slot solvers built on the bisection root finder.

A branch that fails to converge is replaced by the lower bound of its search
bracket (the cutoff index) so chained solves always receive a finite value.
The substitution is recorded on :class:`BranchSolution` via ``fallback``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from functools import partial
from typing import Callable, Iterator, List

from .equations import slab_equation, slot_equation
from .geometry import Polarization
from .optimize import BisectionResult, bisection
from .parallel import parallel_for

LOGGER = logging.getLogger(__name__)


@dataclass(slots=True)
class SolverOptions:
    """Numerical settings shared by the slab solvers and waveguide models."""

    tolerance: float = 1e-4
    max_iterations: int = 100
    parallel_branches: bool = False
    workers: int | None = None


@dataclass(frozen=True, slots=True)
class BranchSolution:
    neff: float
    result: BisectionResult
    fallback: bool


@dataclass(frozen=True, slots=True)
class SlabSolution:
    te: BranchSolution
    tm: BranchSolution

    def __iter__(self) -> Iterator[float]:
        yield self.te.neff
        yield self.tm.neff

    def branch(self, polarization: Polarization) -> BranchSolution:
        return self.te if Polarization(polarization) is Polarization.TE else self.tm

    def neff(self, polarization: Polarization) -> float:
        return self.branch(polarization).neff

    @property
    def fallback(self) -> bool:
        return self.te.fallback or self.tm.fallback


@dataclass(frozen=True, slots=True)
class SlotSolution:
    even: BranchSolution
    odd: BranchSolution
    polarization: Polarization = field(default=Polarization.TM)

    def __iter__(self) -> Iterator[float]:
        yield self.even.neff
        yield self.odd.neff

    @property
    def fallback(self) -> bool:
        return self.even.fallback or self.odd.fallback


def _solve_branch(
    func: Callable[[float], float],
    lower: float,
    upper: float,
    options: SolverOptions,
    name: str,
) -> BranchSolution:
    result = bisection(func, lower, upper, tol=options.tolerance, max_iter=options.max_iterations)
    if result.converged:
        return BranchSolution(neff=result.root, result=result, fallback=False)
    if LOGGER.isEnabledFor(logging.DEBUG):
        LOGGER.debug(
            "%s branch did not converge on [%.6g, %.6g] (%s after %d iteration(s), residual=%.3g); "
            "using cutoff index %.6g",
            name,
            lower,
            upper,
            result.status.name,
            result.iterations,
            result.residual,
            lower,
        )
    return BranchSolution(neff=lower, result=result, fallback=True)


def _solve_pair(
    funcs: List[Callable[[float], float]],
    names: List[str],
    lower: float,
    upper: float,
    options: SolverOptions,
) -> List[BranchSolution]:
    solutions: List[BranchSolution | None] = [None] * len(funcs)

    def _run(func: Callable[[float], float], index: int) -> None:
        solutions[index] = _solve_branch(func, lower, upper, options, names[index])

    if options.parallel_branches:
        parallel_for(funcs, _run, workers=len(funcs), with_index=True)
    else:
        for index, func in enumerate(funcs):
            _run(func, index)
    return solutions  # type: ignore[return-value]


def solve_slab(
    n1: float,
    n2: float,
    n3: float,
    wavelength: float,
    width: float,
    order: int = 0,
    options: SolverOptions | None = None,
) -> SlabSolution:
    """Resolve TE and TM effective indices of a three-layer slab.

    ``n1``/``n3`` are the outer layers, ``n2`` the guiding layer of thickness
    ``width``. The search bracket is ``[min(n1, n3), n2]``; for asymmetric
    stacks the part below ``max(n1, n3)`` evaluates to NaN and is shrunk away
    by the bisection. A branch below cutoff falls back to ``min(n1, n3)``.
    """

    options = options or SolverOptions()
    lower = min(n1, n3)
    funcs = [
        partial(slab_equation, pol, n1, n2, n3, wavelength, width, order)
        for pol in (Polarization.TE, Polarization.TM)
    ]
    te, tm = _solve_pair(funcs, ["TE", "TM"], lower, n2, options)
    return SlabSolution(te=te, tm=tm)


def solve_slot_slab(
    n_clad: float,
    n_core: float,
    n_slot: float,
    wavelength: float,
    w_slot: float,
    w_core: float,
    order: int = 0,
    polarization: Polarization = Polarization.TM,
    options: SolverOptions | None = None,
) -> SlotSolution:
    """Resolve the even (cosh) and odd (sinh) roots of a five-layer slot slab.

    ``polarization`` selects the boundary weighting of the horizontal slab:
    TM carries the index-squared weights (quasi-TE waveguide mode).
    """

    options = options or SolverOptions()
    a = w_slot / 2.0
    b = a + w_core
    lower = max(n_clad, n_slot)
    funcs = [
        partial(_slot_residual, polarization, n_clad, n_core, n_slot, wavelength, a, b, order, odd)
        for odd in (False, True)
    ]
    even, odd = _solve_pair(funcs, ["cosh", "sinh"], lower, n_core, options)
    return SlotSolution(even=even, odd=odd, polarization=Polarization(polarization))


def _slot_residual(polarization, n_clad, n_core, n_slot, wavelength, a, b, order, odd, neff):
    return slot_equation(polarization, n_clad, n_core, n_slot, wavelength, a, b, order, neff, odd=odd)


__all__ = [
    "SolverOptions",
    "BranchSolution",
    "SlabSolution",
    "SlotSolution",
    "solve_slab",
    "solve_slot_slab",
]
