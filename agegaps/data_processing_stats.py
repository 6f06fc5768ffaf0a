from __future__ import annotations

import logging

import pandas as pd

from .data_processing import melt_participants

logger = logging.getLogger(__name__)

GENDERS = ("man", "woman")


def melt_people(cleaned: pd.DataFrame) -> pd.DataFrame:
    """One row per person: the actor_N_* and character_N_* groups melted together."""
    return melt_participants(cleaned)


def mean_age_by_year(long: pd.DataFrame) -> pd.DataFrame:
    return (
        long.groupby(["release_year", "gender"])["age"]
        .mean()
        .reset_index(name="mean_age")
    )


def summarize_age_gaps(cleaned: pd.DataFrame, order_by: str = "woman") -> pd.DataFrame:
    '''
    Per release year: mean age of men and women and the absolute gap.

    Rows are sorted by gap (widest first, years missing a gender last).
    release_year becomes an ordered categorical sorted by the mean age of
    `order_by`, which is what the charts use for the year axis.
    '''
    if order_by not in GENDERS:
        raise ValueError(f"order_by must be one of {GENDERS}, got {order_by!r}")

    means = mean_age_by_year(melt_people(cleaned))
    per_year = (
        means.pivot(index="release_year", columns="gender", values="mean_age")
        .reindex(columns=list(GENDERS))
    )
    per_year.columns.name = None
    per_year["diff"] = (per_year["man"] - per_year["woman"]).abs()
    per_year = per_year.reset_index().sort_values("diff", ascending=False, kind="mergesort")

    year_order = per_year.sort_values([order_by, "release_year"], kind="mergesort")["release_year"]
    per_year["release_year"] = pd.Categorical(
        per_year["release_year"], categories=list(year_order), ordered=True
    )
    logger.info("Summarized %d release years", len(per_year))
    return per_year.reset_index(drop=True)
