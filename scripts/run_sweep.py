#!/usr/bin/env python3
"""CLI entry point to run effective index sweeps."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

import yaml

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from eimsolver.models import create_waveguide
from eimsolver.sweep import FieldConfig, SweepConfig, run_field_sweep, run_index_sweep


def load_config(path: Path) -> dict:
    with path.open() as f:
        return yaml.safe_load(f)


def main() -> None:
    parser = argparse.ArgumentParser(description="Sweep effective indices of strip/slot waveguides")
    parser.add_argument("config", type=Path, help="YAML configuration file")
    parser.add_argument("--output", type=Path, default=Path("outputs/eim.csv"), help="CSV output path")
    parser.add_argument("--fields", type=Path, help="Optional CSV path for 2D field amplitudes")
    parser.add_argument("--progress", action="store_true", help="Show a progress bar")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable verbose logging")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logger = logging.getLogger("eimsolver.sweep")

    cfg = load_config(args.config)
    waveguide_cfg = dict(cfg["waveguide"])
    if "options" in cfg:
        waveguide_cfg["options"] = cfg["options"]
    model = create_waveguide(waveguide_cfg)
    sweep = cfg["sweep"]
    sweep_cfg = SweepConfig(
        wavelengths=sweep["wavelengths"],
        widths=sweep["widths"],
        mode_orders=sweep.get("mode_orders", [0]),
        gaps=sweep.get("gaps", []),
        flag_fallback=sweep.get("flag_fallback", False),
        skip_errors=sweep.get("skip_errors", False),
    )

    df = run_index_sweep(model, sweep_cfg, show_progress=args.progress, logger=logger)
    args.output.parent.mkdir(parents=True, exist_ok=True)
    df.to_csv(args.output, index=False)
    print(f"Saved sweep results to {args.output}")

    if args.fields:
        field_cfg = FieldConfig(**cfg.get("field", {"points": 101, "extent": 1.0}))
        fields = run_field_sweep(model, sweep_cfg, field_cfg, show_progress=args.progress, logger=logger)
        args.fields.parent.mkdir(parents=True, exist_ok=True)
        fields.to_csv(args.fields, index=False)
        print(f"Saved field maps to {args.fields}")


if __name__ == "__main__":
    main()
