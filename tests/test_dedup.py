import pandas as pd

from netflix_pipeline.transform.dedup import backup_table, deduplicate, find_duplicates
from netflix_pipeline.transform.normalize import normalize_titles


def test_deduplicate_collapses_identical_rows(make_row):
    a, b = make_row(show_id="s1"), make_row(show_id="s2", title="Other")
    df = normalize_titles(pd.DataFrame([a, dict(a), b]))

    deduped = deduplicate(df)

    assert len(deduped) == 2
    assert deduped["show_id"].tolist() == ["s1", "s2"]
    assert list(deduped.index) == [0, 1]
    assert len(find_duplicates(df)) == 1


def test_deduplicate_without_duplicates_keeps_all(make_row):
    df = normalize_titles(pd.DataFrame([make_row(show_id=f"s{i}") for i in range(3)]))

    deduped = deduplicate(df)

    assert len(deduped) == len(df) == 3
    assert find_duplicates(df).empty


def test_same_show_id_with_different_fields_is_not_merged(make_row):
    df = normalize_titles(pd.DataFrame([
        make_row(show_id="s7", rating="TV-14"),
        make_row(show_id="s7", rating="TV-MA"),
    ]))

    assert len(deduplicate(df)) == 2


def test_absent_values_compare_equal(make_row):
    # beide Zeilen haben kein Datum und kein Jahr -> trotzdem Duplikate
    row = make_row(date_added="", release_year="0")
    df = normalize_titles(pd.DataFrame([row, dict(row)]))

    assert len(deduplicate(df)) == 1


def test_backup_is_independent_copy(raw_df):
    working = normalize_titles(raw_df)
    backup = backup_table(working)

    working.loc[0, "director"] = "Changed"
    working.drop(index=1, inplace=True)

    assert backup.loc[0, "director"] == "Kirsten Johnson"
    assert len(backup) == len(raw_df)
    assert len(deduplicate(working)) <= len(backup)
