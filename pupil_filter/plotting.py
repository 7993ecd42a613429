# pupil_filter/plotting.py
from __future__ import annotations

from typing import Optional

import matplotlib.pyplot as plt
import pandas as pd

from .constants import ColumnNames
from .processing.blinks import VelocityBounds


def plot_dilation(df: pd.DataFrame, title: Optional[str] = None, show: bool = True):
    """
    Raw vs. smoothed dilation over time, epochs shaded.
    """
    times = df[ColumnNames.TIME].astype(float)

    fig, ax = plt.subplots(1, 1, figsize=(10, 4))
    ax.plot(times, df[ColumnNames.DILATION].astype(float), alpha=0.5, label="dilation")
    if ColumnNames.SMOOTH in df.columns:
        ax.plot(times, df[ColumnNames.SMOOTH].astype(float), label="smooth")

    if ColumnNames.EPOCH_ORDER in df.columns and len(df) > 0:
        for order, group in df.groupby(ColumnNames.EPOCH_ORDER, sort=True):
            if int(order) % 2 == 0:
                t = group[ColumnNames.TIME].astype(float)
                ax.axvspan(t.min(), t.max(), color="grey", alpha=0.15)

    ax.set_xlabel("Time [ms]")
    ax.set_ylabel("Dilation [mm]")
    ax.set_title(title or "Baseline-corrected pupil dilation")
    ax.legend()
    fig.tight_layout()
    if show:
        plt.show()
    return fig


def plot_velocity(
    df: pd.DataFrame,
    bounds: Optional[VelocityBounds] = None,
    show: bool = True,
):
    """
    Velocity profile with the rejection band.
    """
    mask = df[ColumnNames.VELOCITY].notna()
    times = df.loc[mask, ColumnNames.TIME].astype(float)
    vels = df.loc[mask, ColumnNames.VELOCITY].astype(float)

    fig, ax = plt.subplots(1, 1, figsize=(10, 4))
    ax.plot(times, vels)
    if bounds is not None and not bounds.is_degenerate:
        ax.axhline(bounds.lower, color="red", linestyle="--")
        ax.axhline(bounds.upper, color="red", linestyle="--")
    ax.set_xlabel("Time [ms]")
    ax.set_ylabel("Dilation velocity [mm/ms]")
    ax.set_title("Dilation velocity")
    fig.tight_layout()
    if show:
        plt.show()
    return fig
