"""Bracketed root finding with explicit convergence diagnostics."""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import IntEnum
from typing import Callable


class SolveStatus(IntEnum):
    CONVERGED = 0
    DIVERGED = 1
    INVALID_RANGE = 2


@dataclass(frozen=True, slots=True)
class BisectionResult:
    """Outcome of one bisection run.

    ``root`` is only meaningful when ``status`` is ``CONVERGED``; for
    ``INVALID_RANGE`` it is the left bracket endpoint used as a sentinel.
    """

    root: float
    status: SolveStatus
    iterations: int
    residual: float

    @property
    def converged(self) -> bool:
        return self.status is SolveStatus.CONVERGED


def _smaller_magnitude(fa: float, fb: float) -> float:
    finite = [abs(v) for v in (fa, fb) if math.isfinite(v)]
    return min(finite) if finite else math.nan


def bisection(
    func: Callable[[float], float],
    a: float,
    b: float,
    tol: float = 1e-4,
    max_iter: int = 100,
) -> BisectionResult:
    """Find a root of ``func`` inside ``[a, b]`` by interval halving.

    The run stops as soon as ``|func(mid)| < tol`` or after ``max_iter``
    halvings; an exhausted run still converges when the remaining half-width is
    within ``tol`` and both ends of the bracket still carry finite values of
    opposite sign. A root landing within ``tol`` of either original endpoint is
    reported as ``DIVERGED`` because the search collapsed onto the bracket
    rather than an interior root.

    One endpoint may evaluate to NaN (a trial index outside the guided band).
    The bracket then shrinks from that side: a non-finite midpoint replaces the
    non-finite endpoint, and a finite midpoint is placed using the sign of the
    finite endpoint. Only a bracket with no finite endpoint is
    ``INVALID_RANGE`` on that account.
    """

    fa = float(func(a))
    fb = float(func(b))
    a_finite = math.isfinite(fa)
    b_finite = math.isfinite(fb)
    if not (a_finite or b_finite) or (a_finite and b_finite and fa * fb > 0):
        return BisectionResult(
            root=a,
            status=SolveStatus.INVALID_RANGE,
            iterations=0,
            residual=_smaller_magnitude(fa, fb),
        )

    lo, hi = a, b
    mid = 0.5 * (lo + hi)
    fmid = math.nan
    status: SolveStatus | None = None
    iterations = 0
    while iterations < max_iter:
        mid = 0.5 * (lo + hi)
        fmid = float(func(mid))
        if not math.isfinite(fmid):
            if not math.isfinite(fa):
                lo = mid
            elif not math.isfinite(fb):
                hi = mid
            else:
                status = SolveStatus.DIVERGED
                break
            iterations += 1
            continue
        if abs(fmid) < tol:
            status = SolveStatus.CONVERGED
            break
        if math.isfinite(fa):
            root_on_left = fa * fmid < 0
        else:
            root_on_left = fb * fmid > 0
        if root_on_left:
            hi, fb = mid, fmid
        else:
            lo, fa = mid, fmid
        iterations += 1

    if status is None:
        mid = 0.5 * (lo + hi)
        fmid = float(func(mid))
        bracketed = math.isfinite(fa) and math.isfinite(fb) and fa * fb <= 0
        if bracketed and abs(hi - lo) / 2.0 <= tol:
            status = SolveStatus.CONVERGED
        else:
            status = SolveStatus.DIVERGED

    if abs(mid - a) < tol or abs(mid - b) < tol:
        status = SolveStatus.DIVERGED

    return BisectionResult(root=mid, status=status, iterations=iterations, residual=abs(fmid))


__all__ = ["bisection", "BisectionResult", "SolveStatus"]
