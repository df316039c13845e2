"""Tests for 1D mode profiles and their 2D reconstruction."""

from __future__ import annotations

import numpy as np
import pytest

from eimsolver.equations import ETA0
from eimsolver.fields import (
    FieldShapeError,
    combine_profiles,
    outer_product,
    parallel_outer_product,
    slab_mode_1d,
    slot_mode_1d,
)
from eimsolver.geometry import Polarization
from eimsolver.mesh import SampleGrid
from eimsolver.models import SlotWaveguide, StripWaveguide
from eimsolver.slab import solve_slab, solve_slot_slab

from test_waveguides import make_slot, make_strip

N_SIO2 = 1.444
N_SI = 3.476


def test_outer_product_serial_and_parallel_agree():
    a = np.arange(7, dtype=float) - 3.0
    b = np.linspace(0.5, 2.0, 5) + 1j
    expected = np.outer(a, b)
    assert np.array_equal(outer_product(a, b), expected)
    for workers in (1, 2, 3, 16):
        assert np.array_equal(parallel_outer_product(a, b, workers=workers), expected)


def test_outer_product_writes_into_buffer():
    a = np.array([1.0, 2.0])
    b = np.array([3.0, 4.0, 5.0])
    out = np.zeros((2, 3))
    result = parallel_outer_product(a, b, out=out)
    assert result is out
    assert np.array_equal(out, [[3.0, 4.0, 5.0], [6.0, 8.0, 10.0]])


def test_outer_product_rejects_mismatched_buffer():
    a = np.ones(3)
    b = np.ones(4)
    with pytest.raises(FieldShapeError):
        outer_product(a, b, out=np.empty((4, 3)))
    with pytest.raises(FieldShapeError):
        parallel_outer_product(a, b, out=np.empty((3, 5)))
    with pytest.raises(FieldShapeError):
        outer_product(np.ones((2, 2)), b)


def test_parallel_outer_product_reports_progress():
    reports = []
    parallel_outer_product(np.ones(10), np.ones(3), workers=5, progress=reports.append)
    assert sorted(reports) == [1, 2, 3, 4, 5]


@pytest.mark.parametrize("polarization", [Polarization.TE, Polarization.TM])
def test_slab_profile_is_continuous_at_boundaries(polarization):
    width = 0.22
    neff = solve_slab(N_SIO2, N_SI, N_SIO2, 1.55, width).neff(polarization)
    eps = 1e-9
    x = np.array([-eps, 0.0, eps, width - eps, width, width + eps])
    profile = slab_mode_1d(polarization, x, neff, N_SIO2, N_SI, N_SIO2, 1.55, width, centered=False)
    field = profile.principal.real
    assert field[0] == pytest.approx(field[1], abs=1e-6)
    assert field[2] == pytest.approx(field[1], abs=1e-6)
    assert field[3] == pytest.approx(field[4], abs=1e-6)
    assert field[5] == pytest.approx(field[4], abs=1e-6)


def test_fundamental_slab_profile_peaks_at_centre():
    neff = solve_slab(N_SIO2, N_SI, N_SIO2, 1.55, 0.22).te.neff
    x = np.linspace(-0.5, 0.5, 101)
    profile = slab_mode_1d(Polarization.TE, x, neff, N_SIO2, N_SI, N_SIO2, 1.55, 0.22)
    assert x[np.argmax(np.abs(profile.principal))] == pytest.approx(0.0, abs=1e-9)
    assert np.abs(profile.principal[0]) < 0.1


def test_te_companion_fields():
    neff = solve_slab(N_SIO2, N_SI, N_SIO2, 1.55, 0.22).te.neff
    x = np.linspace(-0.3, 0.3, 11)
    profile = slab_mode_1d(Polarization.TE, x, neff, N_SIO2, N_SI, N_SIO2, 1.55, 0.22)
    assert np.allclose(profile.companion, -neff / ETA0 * profile.principal)
    assert np.allclose(profile.longitudinal.real, 0.0)


def test_profile_outside_guided_band_is_rejected():
    with pytest.raises(ValueError):
        slab_mode_1d(Polarization.TE, [0.0], 1.0, N_SIO2, N_SI, N_SIO2, 1.55, 0.22)


@pytest.mark.parametrize("odd", [False, True])
def test_slot_profile_symmetry_and_continuity(odd):
    w_slot, w_core = 0.1, 0.25
    solution = solve_slot_slab(N_SIO2, 2.85, N_SIO2, 1.55, w_slot, w_core)
    neff = solution.odd.neff if odd else solution.even.neff
    a = w_slot / 2
    b = a + w_core
    eps = 1e-9
    y = np.array([a - eps, a, b, b + eps])
    field = slot_mode_1d(Polarization.TM, y, neff, N_SIO2, 2.85, N_SIO2, 1.55, w_slot, w_core, odd=odd).principal
    assert field[0] == pytest.approx(field[1], abs=1e-6)
    assert field[2] == pytest.approx(field[3], abs=1e-6)

    ys = np.linspace(-0.6, 0.6, 61)
    profile = slot_mode_1d(Polarization.TM, ys, neff, N_SIO2, 2.85, N_SIO2, 1.55, w_slot, w_core, odd=odd).principal
    sign = -1.0 if odd else 1.0
    assert np.allclose(profile[::-1], sign * profile)


def test_strip_field_peaks_at_origin():
    model = StripWaveguide(make_strip())
    grid = SampleGrid.square(1.0, 41)
    field_map = model.field_map(grid)
    assert field_map.shape == (41, 41)
    transverse, lateral = field_map.peak_position()
    assert transverse == pytest.approx(0.0, abs=1e-9)
    assert lateral == pytest.approx(0.0, abs=1e-9)


def test_parallel_and_serial_combination_agree():
    model = StripWaveguide(make_strip())
    axis = np.linspace(-1.0, 1.0, 21)
    parallel = model.mode_2d(axis)
    vertical = slab_mode_1d(Polarization.TE, axis, 2.5, N_SIO2, N_SI, N_SIO2, 1.55, 0.22)
    serial = combine_profiles(vertical, vertical, parallel=False)
    threaded = combine_profiles(vertical, vertical, workers=4)
    assert np.array_equal(serial.field, threaded.field)
    assert parallel.field.shape == (21, 21)


def test_slot_field_concentrates_near_slot():
    model = SlotWaveguide(make_slot())
    axis = np.linspace(-1.0, 1.0, 41)
    field_map = model.mode_2d(axis)
    transverse, lateral = field_map.peak_position()
    assert transverse == pytest.approx(0.0, abs=1e-9)
    assert abs(lateral) <= 0.05 + 0.25
