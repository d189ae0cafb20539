import pandas as pd
import pytest

from netflix_pipeline.transform.impute import SENTINEL, impute_missing
from netflix_pipeline.utils.basic_validator import SchemaError


def test_impute_replaces_blank_and_absent_only():
    df = pd.DataFrame({
        "director": ["", None, "  ", "Unknown Director", "Ava DuVernay"],
        "country": ["India", pd.NA, "", "Japan", "\t"],
        "cast": ["", None, "", "", ""],
    })

    replaced = impute_missing(df)

    assert df["director"].tolist() == [SENTINEL, SENTINEL, SENTINEL, "Unknown Director", "Ava DuVernay"]
    assert df["country"].tolist() == ["India", SENTINEL, SENTINEL, "Japan", SENTINEL]
    assert replaced == {"director": 3, "country": 3}
    # andere Spalten bleiben wie sie sind
    assert df["cast"].tolist()[:2] == ["", None]


def test_impute_custom_mapping():
    df = pd.DataFrame({"rating": ["", "TV-MA"], "director": ["", "x"]})

    replaced = impute_missing(df, {"rating": "NR"})

    assert df["rating"].tolist() == ["NR", "TV-MA"]
    assert df["director"].tolist() == ["", "x"]
    assert replaced == {"rating": 1}


def test_impute_missing_column_raises():
    df = pd.DataFrame({"director": [""]})
    with pytest.raises(SchemaError):
        impute_missing(df)
