from __future__ import annotations

import pandas as pd
import pytest

RAW_HEADER = [
    "Movie Name", "Release Year", "Director", "Age Difference",
    "Actor 1 Name", "Actor 1 Gender", "Actor 1 Birthdate", "Actor 1 Age",
    "Actor 2 Name", "Actor 2 Gender", "Actor 2 Birthdate", "Actor 2 Age",
]

RAW_ROWS = [
    ["Harold and Maude", 1971, "Hal Ashby", 52,
     "Ruth Gordon", "woman", "1896-10-30", 75, "Bud Cort", "man", "1948-03-29", 23],
    # younger participant listed first
    ["Juno", 2007, "Jason Reitman", 1,
     "Michael Cera", "man", "1988-06-07", 19, "Ellen Page", "woman", "1987-02-21", 20],
    ["Beta Movie", 2007, "Some Director", 10,
     "Young Man", "man", "1980-01-01", 27, "Old Woman", "woman", "1970-01-01", 37],
    ["Alpha Movie", 2007, "Other Director", 10,
     "Old Man", "man", "1960-05-05", 47, "Young Woman", "woman", "1970-05-05", 37],
    # two couples in one movie
    ["Love Actually", 2003, "Richard Curtis", 16,
     "Martine McCutcheon", "woman", "1976-05-14", 27, "Hugh Grant", "man", "1960-09-09", 43],
    ["Love Actually", 2003, "Richard Curtis", 8,
     "Keira Knightley", "woman", "1985-03-26", 18, "Chiwetel Ejiofor", "man", "1977-07-10", 26],
]


def write_raw_csv(path, rows=RAW_ROWS, header=RAW_HEADER):
    pd.DataFrame(rows, columns=header).to_csv(path, index=False)
    return path


@pytest.fixture
def raw_csv(tmp_path):
    return write_raw_csv(tmp_path / "movies.csv")


@pytest.fixture
def raw_frame(raw_csv):
    from agegaps.data_processing_io import load_age_gaps

    return load_age_gaps(raw_csv)
