#!/usr/bin/env python3
"""Plot the reconstructed 2D mode field and the 1D profiles it is built from."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

import matplotlib

if not matplotlib.rcParams.get("backend"):
    matplotlib.use("Agg")

import matplotlib.pyplot as plt
import yaml

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from eimsolver.fields import slab_mode_1d
from eimsolver.mesh import sample_axis
from eimsolver.models import StripWaveguide, create_waveguide
from eimsolver.plots import plot_field_map, plot_profile


def load_config(path: Path) -> dict:
    with path.open() as fh:
        return yaml.safe_load(fh)


def main() -> None:
    parser = argparse.ArgumentParser(description="Plot a waveguide mode reconstructed by the EIM")
    parser.add_argument("config", type=Path, help="YAML configuration file")
    parser.add_argument("--output", type=Path, help="Optional path to save figure instead of showing")
    args = parser.parse_args()

    cfg = load_config(args.config)
    waveguide_cfg = dict(cfg["waveguide"])
    if "options" in cfg:
        waveguide_cfg["options"] = cfg["options"]
    model = create_waveguide(waveguide_cfg)
    field_cfg = cfg.get("field", {})
    axis = sample_axis(field_cfg.get("extent", 1.0), field_cfg.get("points", 201))

    field_map = model.mode_2d(axis)
    fig, (ax1, ax2) = plt.subplots(1, 2, figsize=(12, 5))
    plot_field_map(field_map, ax1, title=f"{model.mode_label} |field|")

    if isinstance(model, StripWaveguide):
        p = model.params
        result = model.solve()
        vertical = slab_mode_1d(
            model.polarization, axis, result.vertical["rib"], p.n_box, p.n_core, p.n_clad, p.wavelength, p.t_rib
        )
        plot_profile(vertical, ax2, label="vertical")
    centre_row = field_map.field[len(axis) // 2]
    ax2.plot(axis, centre_row.real, label="lateral cut")
    ax2.legend()
    fig.tight_layout()

    if args.output:
        args.output.parent.mkdir(parents=True, exist_ok=True)
        fig.savefig(args.output, dpi=300)
    else:  # pragma: no cover - requires interactive backend
        plt.show()


if __name__ == "__main__":
    main()
