import locale
from datetime import date

import pandas as pd
import pytest

from netflix_pipeline.transform.normalize import normalize_titles, parse_date_added, parse_release_year


def test_parse_date_added_month_day_year():
    assert parse_date_added("September 9, 2019") == date(2019, 9, 9)
    assert parse_date_added(" August 4, 2017 ") == date(2017, 8, 4)
    assert parse_date_added("december 31, 2020") == date(2020, 12, 31)


@pytest.mark.parametrize("value", [
    "", "   ", None, float("nan"), "not a date", "2019-09-09", "Septembre 9, 2019",
    "Dezember 9, 2019", "February 30, 2019",
])
def test_parse_date_added_absent_on_failure(value):
    assert parse_date_added(value) is None


def test_parse_date_added_ignores_locale():
    previous = locale.setlocale(locale.LC_TIME)
    try:
        locale.setlocale(locale.LC_TIME, "de_DE.UTF-8")
    except locale.Error:
        pytest.skip("de_DE.UTF-8 nicht installiert")
    try:
        assert parse_date_added("March 1, 2018") == date(2018, 3, 1)
    finally:
        locale.setlocale(locale.LC_TIME, previous)


def test_parse_release_year():
    assert parse_release_year("2019") == 2019
    assert parse_release_year(" 1993 ") == 1993
    assert parse_release_year(2001) == 2001


@pytest.mark.parametrize("value", ["2020.0", 2020.0, " 2020.00 "])
def test_parse_release_year_integral_float(value):
    assert parse_release_year(value) == 2020


@pytest.mark.parametrize("value", ["", "0", 0, "0.0", None, "abc", "19.5", 19.5, True, False])
def test_parse_release_year_absent(value):
    assert parse_release_year(value) is None


def test_normalize_titles_types_and_raw_untouched(raw_df):
    raw_copy = raw_df.copy()
    typed = normalize_titles(raw_df)

    pd.testing.assert_frame_equal(raw_df, raw_copy)
    assert list(typed.columns) == list(raw_df.columns)
    assert typed.loc[0, "date_added"] == date(2021, 9, 25)
    assert typed.loc[2, "date_added"] == date(2021, 9, 24)
    assert pd.isna(typed.loc[3, "date_added"])
    assert pd.isna(typed.loc[5, "date_added"])

    assert str(typed["release_year"].dtype) == "Int64"
    assert typed.loc[0, "release_year"] == 2020
    assert pd.isna(typed.loc[5, "release_year"])

    # alle anderen Spalten unverändert
    for col in ["show_id", "type", "director", "cast", "country", "duration"]:
        assert typed[col].tolist() == raw_df[col].tolist()
