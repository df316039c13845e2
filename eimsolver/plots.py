"""Plotting helpers for effective index sweeps and mode fields."""

from __future__ import annotations

import matplotlib.pyplot as plt
import numpy as np
import pandas as pd

from .fields import FieldMap, FieldProfile


def plot_neff(df: pd.DataFrame, x: str = "w_rib", ax: plt.Axes | None = None) -> plt.Axes:
    """One curve of ``neff`` versus ``x`` per mode label (and wavelength)."""

    ax = ax or plt.gca()
    group_keys = ["mode", "wavelength"] if df["wavelength"].nunique() > 1 else ["mode"]
    for key, group in df.sort_values(x).groupby(group_keys):
        label = " ".join(str(k) for k in np.atleast_1d(key))
        ax.plot(group[x], group["neff"], marker="o", markersize=3, label=label)
    ax.set_xlabel(x)
    ax.set_ylabel(r"$n_\mathrm{eff}$")
    ax.grid(True, linestyle=":", linewidth=0.5)
    ax.legend()
    return ax


def plot_field_map(field_map: FieldMap, ax: plt.Axes | None = None, title: str | None = None) -> plt.Axes:
    ax = ax or plt.gca()
    Y, X = np.meshgrid(field_map.lateral, field_map.transverse)
    img = ax.pcolormesh(Y, X, field_map.amplitude, shading="auto", cmap="inferno")
    ax.set_xlabel("lateral")
    ax.set_ylabel("transverse")
    ax.set_aspect("equal", adjustable="box")
    if title:
        ax.set_title(title)
    plt.colorbar(img, ax=ax, label="|field|")
    return ax


def plot_profile(profile: FieldProfile, ax: plt.Axes | None = None, label: str | None = None) -> plt.Axes:
    ax = ax or plt.gca()
    ax.plot(profile.x, np.real(profile.principal), label=label)
    ax.set_xlabel("position")
    ax.set_ylabel("Re(field)")
    ax.grid(True, linestyle=":", linewidth=0.5)
    if label:
        ax.legend()
    return ax


__all__ = ["plot_neff", "plot_field_map", "plot_profile"]
