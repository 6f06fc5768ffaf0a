from __future__ import annotations

from io import BytesIO
import base64
import logging
import os
from typing import Mapping

import numpy as np
import pandas as pd

import matplotlib
matplotlib.use("Agg")  # headless
import matplotlib.pyplot as plt
from matplotlib.lines import Line2D

from .conf import AGE_GAP_COLORS, AGE_GAP_PLOT_TITLE

logger = logging.getLogger(__name__)


def _apply_theme(ax) -> None:
    ax.set_facecolor("#f9fafb")
    ax.grid(True, axis="x", linestyle="--", alpha=0.35)
    ax.set_axisbelow(True)
    for spine in ("top", "right"):
        ax.spines[spine].set_visible(False)


def _hide_tick_labels(ax) -> None:
    ax.tick_params(axis="both", which="both", length=0, labelbottom=False, labelleft=False)


def _fig_to_base64(fig) -> str:
    buf = BytesIO()
    fig.tight_layout()
    fig.savefig(buf, format="png", dpi=140)
    plt.close(fig)
    return base64.b64encode(buf.getvalue()).decode("ascii")


def _chart_from_fig(title: str, fig) -> dict:
    return {"title": title, "png_base64": _fig_to_base64(fig)}


def year_positions(per_year: pd.DataFrame) -> np.ndarray:
    """y position of each row: its year's place in the categorical display order."""
    years = per_year["release_year"]
    if isinstance(years.dtype, pd.CategoricalDtype):
        return years.cat.codes.to_numpy()
    return np.arange(len(years))


def _dumbbell_figure(per_year: pd.DataFrame, colors: Mapping[str, str], title: str):
    fig = plt.figure(figsize=(7.5, max(3.6, 0.12 * len(per_year))))
    ax = fig.add_subplot(111)
    _apply_theme(ax)

    y = year_positions(per_year)
    man = per_year["man"].to_numpy(dtype=float)
    woman = per_year["woman"].to_numpy(dtype=float)

    both = ~(np.isnan(man) | np.isnan(woman))
    ax.hlines(
        y[both],
        np.minimum(man, woman)[both],
        np.maximum(man, woman)[both],
        color=colors["segment"],
        linewidth=1.5,
        zorder=1,
    )
    for gender in ("man", "woman"):
        values = per_year[gender].to_numpy(dtype=float)
        ok = ~np.isnan(values)
        ax.scatter(values[ok], y[ok], s=18, color=colors[gender], zorder=2)

    _hide_tick_labels(ax)
    ax.set_title(title)
    ax.set_xlabel("Mean age")
    ax.set_ylabel("Release year")

    handles = [
        Line2D([0], [0], marker="o", linestyle="", color=colors["man"], label="Men"),
        Line2D([0], [0], marker="o", linestyle="", color=colors["woman"], label="Women"),
    ]
    ax.legend(handles=handles, loc="lower right", frameon=False)
    return fig


def chart_age_gap_dumbbell(
    per_year: pd.DataFrame,
    *,
    colors: Mapping[str, str] = AGE_GAP_COLORS,
    title: str = AGE_GAP_PLOT_TITLE,
) -> dict:
    return _chart_from_fig(title, _dumbbell_figure(per_year, colors, title))


def save_chart_png(
    per_year: pd.DataFrame,
    path,
    *,
    colors: Mapping[str, str] = AGE_GAP_COLORS,
    title: str = AGE_GAP_PLOT_TITLE,
    dpi: int = 160,
) -> str:
    path = os.fspath(path)
    parent = os.path.dirname(path)
    if parent:
        os.makedirs(parent, exist_ok=True)
    fig = _dumbbell_figure(per_year, colors, title)
    fig.tight_layout()
    fig.savefig(path, dpi=dpi)
    plt.close(fig)
    logger.info("Saved static chart to %s", path)
    return path
