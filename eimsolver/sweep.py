"""Parameter sweeps producing effective-index and field tables."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from itertools import product
from time import perf_counter
from typing import Any, Dict, Iterator, List, Sequence, Tuple

import pandas as pd
from tqdm.auto import tqdm

from .mesh import SampleGrid
from .models import WaveguideModel


@dataclass(slots=True)
class SweepConfig:
    wavelengths: Sequence[float]
    widths: Sequence[float]
    mode_orders: Sequence[int] = (0,)
    gaps: Sequence[float] = field(default_factory=tuple)
    flag_fallback: bool = False
    skip_errors: bool = False


@dataclass(slots=True)
class FieldConfig:
    points: int
    extent: float
    workers: int | None = None

    def grid(self) -> SampleGrid:
        return SampleGrid.square(self.extent, self.points)


def iter_models(
    model: WaveguideModel, config: SweepConfig
) -> Iterator[Tuple[Dict[str, Any], WaveguideModel]]:
    """Yield ``(updates, model)`` for every sweep combination in caller order."""

    axes = model.sweep_axes(config)
    keys = list(axes)
    for combination in product(*(axes[key] for key in keys)):
        updates = dict(zip(keys, combination))
        yield updates, model.with_updates(updates)


def _total(model: WaveguideModel, config: SweepConfig) -> int:
    total = 1
    for values in model.sweep_axes(config).values():
        total *= len(values)
    return total


def _iterate(model, config, show_progress, desc):
    iterator = iter_models(model, config)
    total = _total(model, config)
    if show_progress:
        iterator = tqdm(iterator, total=total, desc=desc)
    return iterator, total


def run_index_sweep(
    model: WaveguideModel,
    config: SweepConfig,
    show_progress: bool = False,
    logger: logging.Logger | None = None,
) -> pd.DataFrame:
    """Effective index for every (wavelength, [gap,] width, mode order)."""

    logger = logger or logging.getLogger(__name__)
    iterator, total = _iterate(model, config, show_progress, "EIM sweep")
    rows: List[Dict[str, Any]] = []
    start = perf_counter()
    for idx, (updates, point) in enumerate(iterator, start=1):
        try:
            result = point.solve()
        except Exception:
            if not config.skip_errors:
                logger.error("Sweep point %s failed; aborting sweep", updates)
                raise
            logger.exception("Sweep point %s failed; skipping", updates)
            continue
        if result.fallback:
            logger.warning(
                "[%d/%d] %s at %s fell back to a cutoff index (%s)",
                idx,
                total,
                result.label,
                updates,
                ", ".join(result.fallback_stages),
            )
        row = {
            **point.describe(),
            "wavelength": point.params.wavelength,
            "mode": result.label,
            "neff": result.neff,
        }
        if config.flag_fallback:
            row["fallback"] = result.fallback
        rows.append(row)
    if logger.isEnabledFor(logging.INFO):
        logger.info("Solved %d sweep point(s) in %.3f s", len(rows), perf_counter() - start)
    return pd.DataFrame(rows)


def run_field_sweep(
    model: WaveguideModel,
    config: SweepConfig,
    field_config: FieldConfig,
    show_progress: bool = False,
    logger: logging.Logger | None = None,
) -> pd.DataFrame:
    """Field amplitude on the sample grid for every sweep combination."""

    logger = logger or logging.getLogger(__name__)
    grid = field_config.grid()
    if field_config.workers is not None:
        model = type(model)(model.params, options=replace(model.options, workers=field_config.workers))
    transverse, lateral = grid.coordinates()
    iterator, total = _iterate(model, config, show_progress, "Field sweep")
    frames: List[pd.DataFrame] = []
    for idx, (updates, point) in enumerate(iterator, start=1):
        solve_start = perf_counter()
        try:
            field_map = point.field_map(grid)
        except Exception:
            if not config.skip_errors:
                logger.error("Field reconstruction failed at %s; aborting sweep", updates)
                raise
            logger.exception("Field reconstruction failed at %s; skipping", updates)
            continue
        if logger.isEnabledFor(logging.INFO):
            rows, cols = field_map.shape
            logger.info(
                "[%d/%d] Reconstructed %s field (%dx%d) at %s in %.3f s",
                idx,
                total,
                point.mode_label,
                rows,
                cols,
                updates,
                perf_counter() - solve_start,
            )
        frame = pd.DataFrame(
            {
                "transverse": transverse,
                "lateral": lateral,
                "amplitude": field_map.amplitude.ravel(),
            }
        )
        echo = {**point.describe(), "wavelength": point.params.wavelength, "mode": point.mode_label}
        for position, (key, value) in enumerate(echo.items()):
            frame.insert(position, key, value)
        frames.append(frame)
    if not frames:
        return pd.DataFrame(columns=[*model.echo_fields, "wavelength", "mode", "transverse", "lateral", "amplitude"])
    return pd.concat(frames, ignore_index=True)


__all__ = [
    "SweepConfig",
    "FieldConfig",
    "iter_models",
    "run_index_sweep",
    "run_field_sweep",
]
