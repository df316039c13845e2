"""Tests for the strip/rib and slot effective index models."""

from __future__ import annotations

import pytest

from eimsolver.geometry import Polarization, SlotParams, StripParams, apply_updates
from eimsolver.models import SlotWaveguide, StripWaveguide
from eimsolver.models import slot as slot_module
from eimsolver.slab import solve_slab, solve_slot_slab


def make_strip(**overrides) -> StripParams:
    values = dict(
        wavelength=1.55,
        t_rib=0.22,
        t_slab=0.0,
        w_rib=0.5,
        n_box=1.444,
        n_core=3.476,
        n_clad=1.444,
    )
    values.update(overrides)
    return StripParams(**values)


def make_slot(**overrides) -> SlotParams:
    values = dict(
        wavelength=1.55,
        t_core=0.22,
        w_core=0.25,
        w_slot=0.1,
        n_box=1.444,
        n_clad=1.444,
        n_core=3.476,
        n_slot=1.444,
    )
    values.update(overrides)
    return SlotParams(**values)


def test_strip_quasi_te_above_quasi_tm():
    te = StripWaveguide(make_strip()).solve()
    tm = StripWaveguide(make_strip(polarization="TM")).solve()
    assert 1.444 < tm.neff < te.neff < 3.476
    assert not te.fallback and not tm.fallback
    assert te.label == "TE0"
    assert tm.label == "TM0"


def test_strip_lateral_stack_uses_vertical_indices():
    result = StripWaveguide(make_strip()).solve()
    n_side, n_rib, n_side_right = result.lateral_stack
    assert n_side == n_side_right == pytest.approx(1.444)
    assert n_rib == result.vertical["rib"]
    assert n_side < result.neff < n_rib


def test_rib_slab_raises_effective_index():
    strip = StripWaveguide(make_strip()).effective_index()
    rib = StripWaveguide(make_strip(t_slab=0.09)).effective_index()
    assert rib > strip


def test_higher_order_below_cutoff_reports_fallback():
    result = StripWaveguide(make_strip(w_rib=0.25, mode_order=1)).solve()
    assert result.fallback
    assert "lateral" in result.fallback_stages
    assert result.neff == pytest.approx(result.lateral_stack[0])


def test_params_mutation_is_seen_by_next_solve():
    params = make_strip()
    model = StripWaveguide(params)
    narrow = model.effective_index()
    model.params = apply_updates(params, {"w_rib": 0.6})
    assert model.effective_index() > narrow


def test_with_updates_returns_new_model():
    model = StripWaveguide(make_strip())
    wider = model.with_updates(w_rib=0.6)
    assert isinstance(wider, StripWaveguide)
    assert wider.params.w_rib == 0.6
    assert model.params.w_rib == 0.5
    assert wider.options is model.options
    with pytest.raises(KeyError):
        model.with_updates(width=0.6)


def test_describe_echoes_geometry():
    model = StripWaveguide(make_strip())
    assert model.describe() == {"t_slab": 0.0, "t_rib": 0.22, "w_rib": 0.5}
    assert model.polarization is Polarization.TE


def test_slot_index_lies_between_cladding_and_core_column():
    result = SlotWaveguide(make_slot()).solve()
    assert not result.fallback
    assert 1.444 < result.neff < result.vertical["core"]
    assert len(result.lateral_stack) == 5
    assert result.lateral_stack[2] == result.vertical["slot"]


def test_slot_wider_gap_lowers_index():
    narrow = SlotWaveguide(make_slot(w_slot=0.05)).effective_index()
    wide = SlotWaveguide(make_slot(w_slot=0.2)).effective_index()
    assert wide < narrow


def test_invalid_geometry_is_rejected():
    with pytest.raises(ValueError):
        make_strip(t_slab=0.3)
    with pytest.raises(ValueError):
        make_slot(n_slot=3.5)


@pytest.mark.parametrize("polarization", [Polarization.TE, Polarization.TM])
def test_strip_crosses_polarization_between_vertical_and_lateral_solves(polarization):
    params = make_strip(polarization=polarization)
    result = StripWaveguide(params).solve()

    n_rib = solve_slab(1.444, 3.476, 1.444, 1.55, 0.22).neff(polarization)
    n_side = 1.444
    lateral = solve_slab(n_side, n_rib, n_side, 1.55, 0.5)
    assert result.vertical["rib"] == n_rib
    assert result.neff == lateral.neff(polarization.crossed)
    assert result.neff != lateral.neff(polarization)


def test_air_clad_strip_uses_lower_outer_index_for_side_columns():
    result = StripWaveguide(make_strip(n_clad=1.0)).solve()
    n_side, n_rib, _ = result.lateral_stack
    assert n_side == 1.0
    assert n_rib == solve_slab(1.444, 3.476, 1.0, 1.55, 0.22).te.neff
    assert 1.444 < n_rib < 3.476
    assert n_side < result.neff < n_rib


@pytest.mark.parametrize("polarization", [Polarization.TE, Polarization.TM])
def test_slot_solves_lateral_stack_with_crossed_polarization(polarization, monkeypatch):
    calls = []

    def recording_solve(*args, **kwargs):
        calls.append(kwargs["polarization"])
        return solve_slot_slab(*args, **kwargs)

    monkeypatch.setattr(slot_module, "solve_slot_slab", recording_solve)
    result = SlotWaveguide(make_slot(polarization=polarization)).solve()
    assert calls == [polarization.crossed]

    stack = result.lateral_stack
    expected = solve_slot_slab(stack[0], stack[1], stack[2], 1.55, 0.1, 0.25, polarization=polarization.crossed)
    assert result.neff == expected.even.neff
    assert result.neff != expected.odd.neff
