"""Tests for the three-layer and five-layer slab solvers."""

from __future__ import annotations

import pytest

from eimsolver.geometry import Polarization
from eimsolver.slab import SolverOptions, solve_slab, solve_slot_slab

N_SIO2 = 1.444
N_SI = 3.476


@pytest.mark.parametrize("width", [0.22, 0.5])
def test_symmetric_slab_orders_te_above_tm(width):
    solution = solve_slab(N_SIO2, N_SI, N_SIO2, 1.55, width)
    te, tm = solution
    assert N_SIO2 < tm <= te < N_SI
    assert not solution.fallback
    assert solution.branch(Polarization.TE).result.converged


def test_wider_slab_has_higher_index():
    thin_te, _ = solve_slab(N_SIO2, N_SI, N_SIO2, 1.55, 0.22)
    thick_te, _ = solve_slab(N_SIO2, N_SI, N_SIO2, 1.55, 0.5)
    assert thick_te > thin_te


def test_order_below_cutoff_falls_back_to_bracket_lower_bound():
    solution = solve_slab(N_SIO2, N_SI, N_SIO2, 1.55, 0.22, order=1)
    assert solution.fallback
    assert solution.te.fallback and solution.tm.fallback
    assert tuple(solution) == (N_SIO2, N_SIO2)


def test_asymmetric_stack_root_lies_above_both_claddings():
    solution = solve_slab(1.0, N_SI, N_SIO2, 1.55, 0.22)
    te, tm = solution
    assert not solution.fallback
    assert N_SIO2 < tm < te < N_SI


def test_asymmetric_stack_below_cutoff_falls_back_to_lower_cladding():
    solution = solve_slab(1.0, N_SI, N_SIO2, 1.55, 0.22, order=3)
    assert solution.te.fallback and solution.tm.fallback
    assert tuple(solution) == (1.0, 1.0)
    assert tuple(solve_slab(N_SIO2, N_SI, 1.0, 1.55, 0.22, order=3)) == (1.0, 1.0)


def test_parallel_branches_match_serial():
    serial = solve_slab(N_SIO2, N_SI, N_SIO2, 1.55, 0.22)
    threaded = solve_slab(N_SIO2, N_SI, N_SIO2, 1.55, 0.22, options=SolverOptions(parallel_branches=True))
    assert tuple(serial) == tuple(threaded)


def test_tighter_tolerance_refines_root():
    coarse, _ = solve_slab(N_SIO2, N_SI, N_SIO2, 1.55, 0.22, options=SolverOptions(tolerance=1e-2))
    fine, _ = solve_slab(N_SIO2, N_SI, N_SIO2, 1.55, 0.22, options=SolverOptions(tolerance=1e-8, max_iterations=200))
    assert coarse == pytest.approx(fine, abs=1e-2)


@pytest.mark.parametrize("polarization", [Polarization.TE, Polarization.TM])
def test_slot_roots_lie_inside_bracket(polarization):
    solution = solve_slot_slab(N_SIO2, 2.85, N_SIO2, 1.55, 0.1, 0.25, polarization=polarization)
    even, odd = solution
    assert not solution.fallback
    assert N_SIO2 < odd < even < 2.85
    assert solution.polarization is polarization


def test_slot_parallel_branches_match_serial():
    serial = solve_slot_slab(N_SIO2, 2.85, N_SIO2, 1.55, 0.1, 0.25)
    threaded = solve_slot_slab(N_SIO2, 2.85, N_SIO2, 1.55, 0.1, 0.25, options=SolverOptions(parallel_branches=True))
    assert tuple(serial) == tuple(threaded)
