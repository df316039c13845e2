"""Slot waveguides solved by the effective index method.

::

     z ^
       |  clad  | clad | clad | clad | clad
       |  clad  | core | slot | core | clad     t_core
       |  box   | box  | box  | box  | box
       +-------------------------------------> y
                 w_core w_slot w_core
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Sequence

import numpy as np

from ..fields import FieldMap, combine_profiles, slab_mode_1d, slot_mode_1d
from ..geometry import SlotParams
from ..slab import SlabSolution, SlotSolution, solve_slab, solve_slot_slab
from .base import EIMResult, WaveguideModel

LOGGER = logging.getLogger(__name__)


class SlotWaveguide(WaveguideModel[SlotParams]):
    """Vertical three-layer solves per column, then the lateral five-layer slot.

    The core, slot and cladding columns are solved vertically (fundamental,
    thickness ``t_core``) with the waveguide polarization. Their indices feed
    the symmetric slot relation, solved with the crossed polarization; the
    even (cosh) root is reported.
    Quasi-TM slots therefore use unit (TE) weights in the five-layer relation.
    """

    kind = "slot"
    echo_fields = ("t_core", "w_core", "w_slot")

    def vertical_solutions(self) -> Dict[str, SlabSolution]:
        p = self.params
        args = (p.wavelength, p.t_core, 0, self.options)
        return {
            "core": solve_slab(p.n_box, p.n_core, p.n_clad, *args),
            "slot": solve_slab(p.n_box, p.n_slot, p.n_clad, *args),
            "clad": solve_slab(p.n_box, p.n_clad, p.n_clad, *args),
        }

    def lateral_solution(self, vertical: Dict[str, float]) -> SlotSolution:
        p = self.params
        return solve_slot_slab(
            vertical["clad"],
            vertical["core"],
            vertical["slot"],
            p.wavelength,
            p.w_slot,
            p.w_core,
            p.mode_order,
            polarization=self.polarization.crossed,
            options=self.options,
        )

    def solve(self) -> EIMResult:
        p = self.params
        pol = self.polarization
        solutions = self.vertical_solutions()
        vertical = {name: sol.neff(pol) for name, sol in solutions.items()}
        lateral = self.lateral_solution(vertical)

        stages = []
        if solutions["core"].branch(pol).fallback:
            stages.append("core")
        if lateral.even.fallback:
            stages.append("lateral")
        if stages and LOGGER.isEnabledFor(logging.DEBUG):
            LOGGER.debug("Slot %s: cutoff index substituted at stage(s) %s", self.mode_label, ", ".join(stages))

        return EIMResult(
            neff=lateral.even.neff,
            polarization=pol,
            mode_order=p.mode_order,
            vertical=vertical,
            lateral_stack=(
                vertical["clad"],
                vertical["core"],
                vertical["slot"],
                vertical["core"],
                vertical["clad"],
            ),
            fallback=bool(stages),
            fallback_stages=tuple(stages),
        )

    def mode_2d(self, transverse: np.ndarray, lateral: np.ndarray | None = None) -> FieldMap:
        """Principal field on a grid centred on the slot.

        The vertical profile is that of the core column; the slot column only
        enters through the lateral five-layer profile.
        """

        p = self.params
        pol = self.polarization
        lateral = transverse if lateral is None else lateral
        result = self.solve()
        v = result.vertical
        vertical_profile = slab_mode_1d(
            pol, transverse, v["core"], p.n_box, p.n_core, p.n_clad, p.wavelength, p.t_core, 0
        )
        lateral_profile = slot_mode_1d(
            pol.crossed, lateral, result.neff, v["clad"], v["core"], v["slot"], p.wavelength, p.w_slot, p.w_core
        )
        return combine_profiles(vertical_profile, lateral_profile, workers=self.options.workers)

    def sweep_axes(self, config) -> Dict[str, Sequence[Any]]:
        gaps = list(config.gaps) or [self.params.w_slot]
        return {
            "wavelength": list(config.wavelengths),
            "w_slot": gaps,
            "w_core": list(config.widths),
            "mode_order": list(config.mode_orders),
        }


__all__ = ["SlotWaveguide"]
