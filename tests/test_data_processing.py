from __future__ import annotations

import pandas as pd
import pytest

from agegaps.data_processing import (
    COUPLE_KEYS,
    correct_names,
    melt_participants,
    number_couples,
    rename_character_genders,
    sort_participants,
    tidy_couples,
    widen_participants,
)
from agegaps.data_processing_io import load_age_gaps

from .conftest import write_raw_csv


@pytest.fixture
def cleaned(raw_frame):
    return tidy_couples(raw_frame)


def test_number_couples_counts_within_movie(raw_frame):
    numbered = number_couples(raw_frame)

    love = numbered[numbered["movie_name"] == "Love Actually"]
    assert list(love["couple_number"]) == [1, 2]
    assert (numbered[numbered["movie_name"] != "Love Actually"]["couple_number"] == 1).all()
    assert "couple_number" not in raw_frame.columns


def test_number_couples_keeps_existing_numbers(raw_frame):
    numbered = raw_frame.assign(couple_number=[3, 1, 1, 1, 7, 2])
    assert list(number_couples(numbered)["couple_number"]) == [3, 1, 1, 1, 7, 2]


def test_melt_participants_gives_one_row_per_slot(raw_frame):
    long = melt_participants(number_couples(raw_frame))

    assert len(long) == 2 * len(raw_frame)
    assert {"name", "gender", "birthdate", "age", "slot"} <= set(long.columns)
    assert not any(c.startswith("actor_") for c in long.columns)
    # slots of one couple stay adjacent
    assert list(long["slot"].head(4)) == [1, 2, 1, 2]
    assert list(long["name"].head(2)) == ["Ruth Gordon", "Bud Cort"]


def test_sort_participants_orders_by_gap_movie_then_birthdate(raw_frame):
    long = sort_participants(melt_participants(number_couples(raw_frame)))

    assert long["age_difference"].is_monotonic_decreasing
    tens = long[long["age_difference"] == 10]
    assert list(tens["movie_name"]) == ["Alpha Movie", "Alpha Movie", "Beta Movie", "Beta Movie"]
    assert list(tens["name"]) == ["Old Man", "Young Woman", "Old Woman", "Young Man"]


def test_correct_names_is_a_literal_substitution():
    long = pd.DataFrame({"name": ["Ellen Page", "Ellen Pageant", "A.B", "AzB", "Bud Cort"]})

    fixed = correct_names(long, {"Ellen Page": "Elliot Page", "A.B": "X"})

    assert list(fixed["name"]) == ["Elliot Page", "Elliot Pageant", "X", "AzB", "Bud Cort"]
    assert list(long["name"])[0] == "Ellen Page"


def test_correct_names_default_correction(cleaned):
    names = set(cleaned["actor_1_name"]) | set(cleaned["actor_2_name"])
    assert "Elliot Page" in names
    assert "Ellen Page" not in names
    assert "Michael Cera" in names


def test_widen_then_rename_gives_actor_and_character_columns(raw_frame):
    long = sort_participants(melt_participants(number_couples(raw_frame)))
    wide = widen_participants(long)

    assert [c for c in wide.columns if c.startswith("actor_")] == [
        "actor_1_name", "actor_1_gender", "actor_1_birthdate", "actor_1_age",
        "actor_2_name", "actor_2_gender", "actor_2_birthdate", "actor_2_age",
    ]
    renamed = rename_character_genders(wide)
    assert list(renamed.columns[-2:]) == ["character_1_gender", "character_2_gender"]
    assert "actor_1_gender" not in renamed.columns


def test_cleaned_layout(cleaned):
    assert list(cleaned.columns) == [
        "movie_name", "release_year", "director", "age_difference", "couple_number",
        "actor_1_name", "actor_1_birthdate", "actor_1_age",
        "actor_2_name", "actor_2_birthdate", "actor_2_age",
        "character_1_gender", "character_2_gender",
    ]
    assert len(cleaned) == 6


def test_older_participant_is_always_first(cleaned):
    assert (cleaned["actor_1_age"] >= cleaned["actor_2_age"]).all()
    assert (cleaned["actor_1_birthdate"] <= cleaned["actor_2_birthdate"]).all()


def test_gender_follows_the_participant(cleaned):
    juno = cleaned[cleaned["movie_name"] == "Juno"].iloc[0]
    assert juno["actor_1_name"] == "Elliot Page"
    assert juno["character_1_gender"] == "woman"
    assert juno["character_2_gender"] == "man"


def test_rows_ordered_by_gap_then_movie(cleaned):
    assert list(cleaned["movie_name"]) == [
        "Harold and Maude", "Love Actually", "Alpha Movie", "Beta Movie", "Love Actually", "Juno",
    ]
    assert list(cleaned["couple_number"]) == [1, 1, 1, 1, 2, 1]


def test_tidy_couples_is_idempotent(cleaned):
    again = tidy_couples(cleaned)

    def _rows(df):
        return df.sort_values(COUPLE_KEYS).reset_index(drop=True)

    pd.testing.assert_frame_equal(_rows(again), _rows(cleaned))


def test_swapping_participants_does_not_change_output(raw_frame):
    swapped = raw_frame.copy()
    for field in ("name", "gender", "birthdate", "age"):
        swapped[f"actor_1_{field}"] = raw_frame[f"actor_2_{field}"]
        swapped[f"actor_2_{field}"] = raw_frame[f"actor_1_{field}"]

    pd.testing.assert_frame_equal(tidy_couples(swapped), tidy_couples(raw_frame))


def test_single_couple_younger_listed_first(tmp_path):
    rows = [["Only Movie", 2010, "Someone", 12,
             "Ann Young", "woman", "1985-01-01", 25, "Bob Old", "man", "1973-01-01", 37]]
    raw = load_age_gaps(write_raw_csv(tmp_path / "one.csv", rows=rows))

    cleaned = tidy_couples(raw)

    row = cleaned.iloc[0]
    assert row["actor_1_name"] == "Bob Old"
    assert row["actor_2_name"] == "Ann Young"
    assert row["age_difference"] == row["actor_1_age"] - row["actor_2_age"] == 12


def test_tie_on_gap_follows_movie_title(tmp_path):
    rows = [
        ["Zulu", 2001, "D", 5, "A", "man", "1960-01-01", 40, "B", "woman", "1965-01-01", 35],
        ["Alpha", 2001, "D", 5, "C", "man", "1960-01-01", 40, "D", "woman", "1965-01-01", 35],
    ]
    cleaned = tidy_couples(load_age_gaps(write_raw_csv(tmp_path / "tie.csv", rows=rows)))

    assert list(cleaned["movie_name"]) == ["Alpha", "Zulu"]
