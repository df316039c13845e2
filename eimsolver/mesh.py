"""Sample axes for transverse field reconstruction."""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np


class GridError(ValueError):
    pass


def sample_axis(extent: float, points: int) -> np.ndarray:
    """Linearly spaced samples on ``[-extent, extent]``."""

    if points < 2:
        raise GridError(f"At least two sample points are required, got {points}.")
    if not extent > 0:
        raise GridError(f"Sample extent must be positive, got {extent}.")
    return np.linspace(-extent, extent, int(points))


@dataclass(slots=True)
class SampleGrid:
    """Transverse (rows) and lateral (columns) sample coordinates."""

    transverse: np.ndarray
    lateral: np.ndarray

    @classmethod
    def square(cls, extent: float, points: int) -> "SampleGrid":
        axis = sample_axis(extent, points)
        return cls(transverse=axis, lateral=axis.copy())

    def __post_init__(self) -> None:
        self.transverse = np.asarray(self.transverse, dtype=float)
        self.lateral = np.asarray(self.lateral, dtype=float)
        if self.transverse.ndim != 1 or self.lateral.ndim != 1:
            raise GridError("Sample axes must be one-dimensional.")
        if self.transverse.size == 0 or self.lateral.size == 0:
            raise GridError("Sample axes must not be empty.")

    @property
    def shape(self) -> tuple[int, int]:
        return self.transverse.size, self.lateral.size

    def coordinates(self) -> tuple[np.ndarray, np.ndarray]:
        """Flattened ``(transverse, lateral)`` pairs in row-major order."""

        rows, cols = self.shape
        return np.repeat(self.transverse, cols), np.tile(self.lateral, rows)


__all__ = ["GridError", "SampleGrid", "sample_axis"]
