from __future__ import annotations

import logging
import os
from typing import Mapping, Optional

import numpy as np
import pandas as pd
import plotly.graph_objects as go

from .conf import (
    AGE_GAP_COLORS,
    AGE_GAP_PLOT_FOOTER,
    AGE_GAP_PLOT_SUBTITLE,
    AGE_GAP_PLOT_TITLE,
)
from .data_processing_charts import year_positions

logger = logging.getLogger(__name__)

# hover only: no mode bar, no scroll zoom
PLOTLY_CONFIG = {"displayModeBar": False, "scrollZoom": False}

_GENDER_LABELS = {"man": "Men", "woman": "Women"}


def _segments(per_year: pd.DataFrame, y: np.ndarray) -> tuple[list, list]:
    # one trace for all segments, broken apart with None
    xs: list = []
    ys: list = []
    for pos, man, woman in zip(y, per_year["man"], per_year["woman"]):
        if pd.isna(man) or pd.isna(woman):
            continue
        xs.extend([man, woman, None])
        ys.extend([int(pos), int(pos), None])
    return xs, ys


def build_interactive_chart(
    per_year: pd.DataFrame,
    *,
    colors: Mapping[str, str] = AGE_GAP_COLORS,
    title: str = AGE_GAP_PLOT_TITLE,
    subtitle: str = AGE_GAP_PLOT_SUBTITLE,
    footer: str = AGE_GAP_PLOT_FOOTER,
) -> go.Figure:
    """
    Interactive counterpart of the static dumbbell chart: same segments and
    points per year, tooltips on the points, everything else locked down.
    """
    y = year_positions(per_year)
    years = per_year["release_year"].astype(str).to_numpy()
    diffs = per_year["diff"].to_numpy(dtype=float)

    fig = go.Figure()
    seg_x, seg_y = _segments(per_year, y)
    fig.add_trace(
        go.Scatter(
            x=seg_x,
            y=seg_y,
            mode="lines",
            line=dict(color=colors["segment"], width=2),
            hoverinfo="skip",
            showlegend=False,
        )
    )

    for gender in ("man", "woman"):
        values = per_year[gender].to_numpy(dtype=float)
        ok = ~np.isnan(values)
        fig.add_trace(
            go.Scatter(
                x=values[ok],
                y=y[ok],
                mode="markers",
                name=_GENDER_LABELS[gender],
                marker=dict(color=colors[gender], size=8),
                customdata=[list(row) for row in zip(years[ok], diffs[ok])],
                hovertemplate=(
                    "<b>%{customdata[0]}</b><br>"
                    + _GENDER_LABELS[gender]
                    + ": %{x:.1f} years<br>Gap: %{customdata[1]:.1f} years<extra></extra>"
                ),
            )
        )

    fig.update_layout(
        title=dict(text=f"{title}<br><sup>{subtitle}</sup>", x=0.02),
        template="plotly_white",
        hovermode="closest",
        dragmode=False,
        height=max(500, 12 * len(per_year)),
        margin=dict(t=110, b=70),
        legend=dict(
            orientation="h",
            yanchor="bottom",
            y=1.0,
            xanchor="right",
            x=1,
            itemclick=False,
            itemdoubleclick=False,
        ),
        annotations=[
            dict(
                text=footer,
                xref="paper",
                yref="paper",
                x=1,
                y=-0.08,
                xanchor="right",
                showarrow=False,
                font=dict(size=10, color="#6b7280"),
            )
        ],
    )
    fig.update_xaxes(title_text="Mean age", fixedrange=True, showticklabels=False)
    fig.update_yaxes(title_text="Release year", fixedrange=True, showticklabels=False, showgrid=False)
    return fig


def interactive_html_fragment(fig: go.Figure) -> str:
    return fig.to_html(full_html=False, include_plotlyjs="cdn", config=PLOTLY_CONFIG)


def write_interactive_html(fig: go.Figure, path) -> str:
    path = os.fspath(path)
    parent = os.path.dirname(path)
    if parent:
        os.makedirs(parent, exist_ok=True)
    fig.write_html(path, include_plotlyjs="cdn", config=PLOTLY_CONFIG)
    logger.info("Wrote interactive chart to %s", path)
    return path


def publish_chart(
    fig: go.Figure,
    *,
    title: str = AGE_GAP_PLOT_TITLE,
    username: Optional[str] = None,
    api_key: Optional[str] = None,
) -> str:
    '''
    Upload the figure to Chart Studio under `title` and return its URL.

    Without explicit credentials the ones stored by chart_studio on this
    machine are used. Network and auth errors propagate.
    '''
    import chart_studio.plotly as chart_studio_plotly

    if username and api_key:
        chart_studio_plotly.sign_in(username, api_key)

    logger.info("Uploading interactive chart '%s' to Chart Studio", title)
    url = chart_studio_plotly.plot(fig, filename=title, auto_open=False, sharing="public")
    logger.info("Published chart at %s", url)
    return url
