from __future__ import annotations

import logging
from typing import Mapping

import pandas as pd

from .conf import AGE_GAP_NAME_CORRECTIONS
from .data_processing_io import PARTICIPANT_FIELDS


logger = logging.getLogger(__name__)


# This module turns the raw feed (one row per couple, two fixed actor column
# groups in arbitrary order) into rows where the older participant always
# sits in the actor_1_* group:
# number couples -> melt -> sort -> correct names -> re-widen -> rename genders.
#
# Every step is a pure function over a DataFrame and returns a new frame.


# prefix -> participant slot. character_N_gender appears once the gender
# columns have been renamed, so cleaned output can be melted the same way.
PARTICIPANT_PREFIXES = {
    "actor_1_": 1,
    "actor_2_": 2,
    "character_1_": 1,
    "character_2_": 2,
}

COUPLE_KEYS = ["movie_name", "couple_number"]

_SORT_COLUMNS = ["age_difference", "movie_name", "birthdate"]
_SORT_ASCENDING = [False, True, True]


# ------------------------
# Reshaping steps
# ------------------------

def number_couples(df: pd.DataFrame) -> pd.DataFrame:
    '''
    Add couple_number: 1, 2, ... per movie_name in row order. A complete
    couple_number column (e.g. from a cleaned file) is kept as-is.
    '''
    out = df.copy()
    if "couple_number" in out.columns and out["couple_number"].notna().all():
        return out
    out["couple_number"] = out.groupby("movie_name", sort=False).cumcount() + 1
    return out


def _participant_columns(df: pd.DataFrame, prefixes: Mapping[str, int]) -> dict[int, dict[str, str]]:
    by_slot: dict[int, dict[str, str]] = {}
    for col in df.columns:
        for prefix, slot in prefixes.items():
            if col.startswith(prefix):
                by_slot.setdefault(slot, {})[col] = col[len(prefix):]
                break
    return by_slot


def melt_participants(df: pd.DataFrame, prefixes: Mapping[str, int] = PARTICIPANT_PREFIXES) -> pd.DataFrame:
    '''
    Wide -> long: one row per (couple, slot) with the participant attributes
    (name, gender, birthdate, age) as columns. Columns that do not belong to
    a participant group are repeated on both rows.
    '''
    by_slot = _participant_columns(df, prefixes)
    participant_cols = {c for cols in by_slot.values() for c in cols}
    id_cols = [c for c in df.columns if c not in participant_cols]

    base = df.reset_index(drop=True)
    frames = []
    for slot in sorted(by_slot):
        renames = by_slot[slot]
        part = base[id_cols + list(renames)].rename(columns=renames)
        part.insert(len(id_cols), "slot", slot)
        frames.append(part)

    # interleave so each couple's slots stay adjacent
    long = pd.concat(frames).sort_index(kind="mergesort")
    return long.reset_index(drop=True)


def sort_participants(long: pd.DataFrame) -> pd.DataFrame:
    return long.sort_values(_SORT_COLUMNS, ascending=_SORT_ASCENDING, kind="mergesort").reset_index(drop=True)


def correct_names(long: pd.DataFrame, corrections: Mapping[str, str] = AGE_GAP_NAME_CORRECTIONS) -> pd.DataFrame:
    out = long.copy()
    for old, new in corrections.items():
        out["name"] = out["name"].str.replace(old, new, regex=False)
    return out


def widen_participants(long: pd.DataFrame) -> pd.DataFrame:
    '''
    Long -> wide. The n-th row of a couple in the current order becomes
    actor_n_*; couples keep the order in which they first appear.
    '''
    fields = [f for f in PARTICIPANT_FIELDS if f in long.columns]
    id_cols = [c for c in long.columns if c not in fields and c != "slot"]

    ordered = long.copy()
    ordered["position"] = ordered.groupby(COUPLE_KEYS, sort=False).cumcount() + 1

    # unstack rather than pivot(values=[...]) so ages stay int and birthdates datetime
    wide = ordered.set_index(COUPLE_KEYS + ["position"])[fields].unstack("position")
    wide.columns = [f"actor_{pos}_{field}" for field, pos in wide.columns]
    positions = sorted(ordered["position"].unique())
    wide = wide[[f"actor_{pos}_{field}" for pos in positions for field in fields]].reset_index()

    couples = ordered[id_cols].drop_duplicates(subset=COUPLE_KEYS)
    return couples.merge(wide, on=COUPLE_KEYS, how="left").reset_index(drop=True)


def rename_character_genders(df: pd.DataFrame) -> pd.DataFrame:
    '''
    actor_N_gender describes the character, not the actor; rename it to
    character_N_gender and move those columns last.
    '''
    renames = {c: "character_" + c[len("actor_"):] for c in df.columns if c.startswith("actor_") and c.endswith("_gender")}
    out = df.rename(columns=renames)
    genders = list(renames.values())
    return out[[c for c in out.columns if c not in genders] + genders]


def tidy_couples(raw: pd.DataFrame, *, corrections: Mapping[str, str] = AGE_GAP_NAME_CORRECTIONS) -> pd.DataFrame:
    long = melt_participants(number_couples(raw))
    long = sort_participants(long)
    long = correct_names(long, corrections)
    cleaned = rename_character_genders(widen_participants(long))
    logger.info("Reshaped %d couples into %d cleaned rows", len(raw), len(cleaned))
    return cleaned


