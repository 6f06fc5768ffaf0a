from __future__ import annotations

from io import BytesIO
import logging
import os
import re
from typing import Optional

import pandas as pd

from .conf import AGE_GAP_DATA_URL

logger = logging.getLogger(__name__)

PARTICIPANT_FIELDS = ["name", "gender", "birthdate", "age"]

REQUIRED_COLUMNS = [
    "movie_name",
    "release_year",
    "age_difference",
    *[f"actor_{slot}_{field}" for slot in (1, 2) for field in PARTICIPANT_FIELDS],
]

_BIRTHDATE_SUFFIX = "birthdate"


def _norm_col(name: str) -> str:
    s = str(name).strip().lower()
    s = re.sub(r"[^a-z0-9]+", "_", s)
    s = re.sub(r"_+", "_", s).strip("_")
    return s or "col"


def _normalize_columns(df: pd.DataFrame) -> pd.DataFrame:
    out = df.copy()
    out.columns = [_norm_col(c) for c in out.columns]
    return out


_CANDIDATE_FORMATS = [
    "%Y-%m-%d",
    "%Y/%m/%d",
    "%d/%m/%Y",
    "%m/%d/%Y",
    "%d-%m-%Y",
    "%m-%d-%Y",
    "%d.%m.%Y",
    "%Y.%m.%d",
]


def _guess_date_format(series: pd.Series, sample_size: int = 200) -> Optional[str]:
    s = series.dropna().astype(str).str.strip()
    if s.empty:
        return None
    if len(s) > sample_size:
        s = s.sample(sample_size, random_state=0)

    best_fmt, best_score = None, 0.0
    for fmt in _CANDIDATE_FORMATS:
        score = float(pd.to_datetime(s, format=fmt, errors="coerce").notna().mean())
        if score > best_score:
            best_fmt, best_score = fmt, score
            if best_score == 1.0:
                break
    return best_fmt


def parse_birthdate(df: pd.DataFrame, col: str) -> tuple[pd.Series, str]:
    '''
    Parse one birthdate column into datetime64.

    Unlike a best-effort coercion, values that do not match the detected
    format raise, so a malformed feed stops the pipeline.
    '''
    if col not in df.columns:
        raise KeyError(f"Column '{col}' not found")

    s = df[col]
    if s.dtype.kind == "M":
        return s, f"{col}: already datetime64[ns]"

    fmt = _guess_date_format(s)
    if fmt is None:
        return pd.to_datetime(s), f"{col}: parsed with pandas default"
    return pd.to_datetime(s.astype("string").str.strip(), format=fmt), f"{col}: parsed with explicit format '{fmt}'"


def _parse_birthdates(df: pd.DataFrame) -> pd.DataFrame:
    out = df.copy()
    for col in out.columns:
        if not col.endswith(_BIRTHDATE_SUFFIX):
            continue
        out[col], audit = parse_birthdate(out, col)
        logger.debug(audit)
    return out


def _check_required(df: pd.DataFrame) -> None:
    missing = [c for c in REQUIRED_COLUMNS if c not in df.columns]
    if missing:
        raise ValueError(f"CSV is missing required columns: {missing}. Found: {list(df.columns)}")


def _prepare(df: pd.DataFrame) -> pd.DataFrame:
    df = _normalize_columns(df)
    _check_required(df)
    return _parse_birthdates(df)


def load_age_gaps(source=AGE_GAP_DATA_URL) -> pd.DataFrame:
    """
    Read the age gap CSV from a URL, a path or a file-like object, normalize
    column labels to snake case and parse the *birthdate columns.
    """
    logger.info("Loading age gap data from %s", source if isinstance(source, (str, os.PathLike)) else "buffer")
    df = _prepare(pd.read_csv(source))
    logger.info("Loaded %d couples, %d columns", *df.shape)
    return df


def read_upload(file_bytes: bytes, filename: str) -> pd.DataFrame:
    filename = (filename or "").lower()
    if not filename.endswith(".csv"):
        raise ValueError("Unsupported file type. Please upload a .csv file")

    bio = BytesIO(file_bytes)
    try:
        raw = pd.read_csv(bio)
    except UnicodeDecodeError:
        bio.seek(0)
        raw = pd.read_csv(bio, encoding="latin1")
    return _prepare(raw)


def to_csv_bytes(df: pd.DataFrame) -> bytes:
    return df.to_csv(index=False, date_format="%Y-%m-%d").encode("utf-8")


def write_cleaned_csv(df: pd.DataFrame, path) -> str:
    path = os.fspath(path)
    parent = os.path.dirname(path)
    if parent:
        os.makedirs(parent, exist_ok=True)
    df.to_csv(path, index=False, date_format="%Y-%m-%d")
    logger.info("Wrote cleaned CSV with %d rows to %s", len(df), path)
    return path


def load_cleaned(path) -> pd.DataFrame:
    """Re-read a persisted cleaned CSV; character_*_gender columns are kept as-is."""
    df = _normalize_columns(pd.read_csv(path))
    return _parse_birthdates(df)
