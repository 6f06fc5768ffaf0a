from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import Mapping, Optional

from .conf import AGE_GAP_DATA_URL, AGE_GAP_NAME_CORRECTIONS
from .data_processing import tidy_couples
from .data_processing_charts import chart_age_gap_dumbbell
from .data_processing_io import load_age_gaps, read_upload, to_csv_bytes
from .data_processing_stats import summarize_age_gaps
from .publishing import build_interactive_chart, interactive_html_fragment

logger = logging.getLogger(__name__)


@dataclass
class ReportResult:
    source: str                        # URL or uploaded filename
    original_shape: tuple[int, int]
    cleaned_shape: tuple[int, int]
    columns: list[str]
    head_html: str
    per_year_html: str
    notes: list[str]
    charts: list[dict]                 # [{title, png_base64}]
    interactive_html: str
    cleaned_csv_bytes: bytes


def build_report(
    source: Optional[str] = None,
    *,
    file_bytes: Optional[bytes] = None,
    filename: Optional[str] = None,
    corrections: Mapping[str, str] = AGE_GAP_NAME_CORRECTIONS,
) -> ReportResult:
    if file_bytes is not None:
        raw = read_upload(file_bytes, filename or "")
        source_label = filename or "upload"
    else:
        source_label = source or AGE_GAP_DATA_URL
        raw = load_age_gaps(source_label)

    cleaned = tidy_couples(raw, corrections=corrections)
    per_year = summarize_age_gaps(cleaned)

    notes = [
        f"{len(cleaned)} couples across {cleaned['movie_name'].nunique()} movies.",
        f"{len(per_year)} release years, {int(per_year['diff'].isna().sum())} of them without both genders.",
    ]
    if per_year["diff"].notna().any():
        widest = per_year.iloc[0]
        notes.append(f"Widest average gap: {widest['diff']:.1f} years in {widest['release_year']}.")

    head_html = cleaned.head(20).to_html(index=False, classes="table")
    per_year_html = per_year.round(1).to_html(index=False, classes="table")

    return ReportResult(
        source=source_label,
        original_shape=raw.shape,
        cleaned_shape=cleaned.shape,
        columns=list(cleaned.columns),
        head_html=head_html,
        per_year_html=per_year_html,
        notes=notes,
        charts=[chart_age_gap_dumbbell(per_year)],
        interactive_html=interactive_html_fragment(build_interactive_chart(per_year)),
        cleaned_csv_bytes=to_csv_bytes(cleaned),
    )
