"""Strip and rib waveguides solved by the effective index method."""

from __future__ import annotations

import logging
from typing import Any, Dict, Sequence

import numpy as np

from ..fields import FieldMap, combine_profiles, slab_mode_1d
from ..geometry import StripParams
from ..slab import SlabSolution, solve_slab
from .base import EIMResult, WaveguideModel

LOGGER = logging.getLogger(__name__)


class StripWaveguide(WaveguideModel[StripParams]):
    """Two nested slab solves: vertical confinement, then lateral.

    The rib column (``box / core / clad`` of height ``t_rib``) and the side
    columns (a ``t_slab`` core slab for ribs, no core for strips) are solved
    vertically for their fundamental indices. Those indices form the lateral
    stack ``(n_side, n_rib, n_side)`` of width ``w_rib``, solved for
    ``mode_order``.

    The quasi-TE waveguide mode has its electric field parallel to the
    vertical slab interfaces and normal to the lateral ones, so it takes the
    TE branch of the vertical solve and the TM branch of the lateral solve;
    quasi-TM is the mirror image.
    """

    kind = "strip"
    echo_fields = ("t_slab", "t_rib", "w_rib")

    def vertical_solutions(self) -> Dict[str, SlabSolution]:
        p = self.params
        rib = solve_slab(p.n_box, p.n_core, p.n_clad, p.wavelength, p.t_rib, 0, self.options)
        if p.t_slab > 0:
            side = solve_slab(p.n_box, p.n_core, p.n_clad, p.wavelength, p.t_slab, 0, self.options)
        else:
            side = solve_slab(p.n_box, p.n_clad, p.n_clad, p.wavelength, p.t_rib, 0, self.options)
        return {"rib": rib, "side": side}

    def solve(self) -> EIMResult:
        p = self.params
        pol = self.polarization
        vertical = self.vertical_solutions()
        n_rib = vertical["rib"].neff(pol)
        n_side = vertical["side"].neff(pol)

        lateral = solve_slab(n_side, n_rib, n_side, p.wavelength, p.w_rib, p.mode_order, self.options)
        branch = lateral.branch(pol.crossed)

        stages = []
        # a core-less side column has no guided mode; its cutoff index is expected
        if vertical["rib"].branch(pol).fallback:
            stages.append("rib")
        if p.t_slab > 0 and vertical["side"].branch(pol).fallback:
            stages.append("side")
        if branch.fallback:
            stages.append("lateral")
        if stages and LOGGER.isEnabledFor(logging.DEBUG):
            LOGGER.debug("Strip %s: cutoff index substituted at stage(s) %s", self.mode_label, ", ".join(stages))

        return EIMResult(
            neff=branch.neff,
            polarization=pol,
            mode_order=p.mode_order,
            vertical={"rib": n_rib, "side": n_side},
            lateral_stack=(n_side, n_rib, n_side),
            fallback=bool(stages),
            fallback_stages=tuple(stages),
        )

    def mode_2d(self, transverse: np.ndarray, lateral: np.ndarray | None = None) -> FieldMap:
        """Principal field on a grid centred on the rib core.

        Rows follow the vertical (transverse) axis, columns the lateral axis.
        """

        p = self.params
        pol = self.polarization
        lateral = transverse if lateral is None else lateral
        result = self.solve()
        n_side, n_rib, _ = result.lateral_stack
        vertical_profile = slab_mode_1d(
            pol, transverse, result.vertical["rib"], p.n_box, p.n_core, p.n_clad, p.wavelength, p.t_rib, 0
        )
        lateral_profile = slab_mode_1d(
            pol.crossed, lateral, result.neff, n_side, n_rib, n_side, p.wavelength, p.w_rib, p.mode_order
        )
        return combine_profiles(vertical_profile, lateral_profile, workers=self.options.workers)

    def sweep_axes(self, config) -> Dict[str, Sequence[Any]]:
        return {
            "wavelength": list(config.wavelengths),
            "w_rib": list(config.widths),
            "mode_order": list(config.mode_orders),
        }


__all__ = ["StripWaveguide"]
