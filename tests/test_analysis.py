import pandas as pd
import pytest

from netflix_pipeline.main_pipeline import NetflixPipeline
from netflix_pipeline.reports.aggregations import REPORTS
from netflix_pipeline.run_comprehensive_analysis import (
    ComprehensiveTitleAnalyzer,
    add_duration_columns,
    get_numeric_statistics,
    parse_duration,
    run_report_plots,
)


@pytest.mark.parametrize("value, expected", [
    ("90 min", (90, "min")),
    ("1 Season", (1, "season")),
    ("3 Seasons", (3, "season")),
    ("", (None, None)),
    (None, (None, None)),
    ("74 min 30 s", (None, None)),
])
def test_parse_duration(value, expected):
    assert parse_duration(value) == expected


def test_add_duration_columns():
    df = pd.DataFrame({"duration": ["90 min", "2 Seasons", ""]})
    result = add_duration_columns(df)
    assert result.loc[0, "duration_minutes"] == 90
    assert result.loc[1, "duration_seasons"] == 2
    assert pd.isna(result.loc[2, "duration_minutes"])
    assert "duration_minutes" not in df.columns


def test_numeric_statistics():
    df = pd.DataFrame({"release_year": pd.array([2000, 2010, None], dtype="Int64")})
    stats = get_numeric_statistics(df, {"release_year": "Jahr", "missing": "Fehlt"})
    assert stats.loc["Jahr", "mean"] == 2005
    assert stats.loc["Jahr", "count"] == 2
    assert "Fehlt" not in stats.index


def test_run_report_plots_skips_empty(tmp_path):
    results = {
        "type_counts": pd.DataFrame({"type": ["Movie", "TV Show"], "count": [3, 2]}),
        "yearly_trend": pd.DataFrame({"release_year": pd.array([2019, 2020], dtype="Int64"), "total_titles": [1, 4]}),
        "top_cast": pd.DataFrame(columns=["actor", "cnt"]),
        "summary": pd.DataFrame([{"total_titles": 5}]),
    }
    written = run_report_plots(results, tmp_path)
    assert sorted(p.name for p in written) == ["bar_01_type_counts.png", "bar_03_yearly_trend.png"]
    assert all(p.exists() for p in written)


def test_analyzer_on_pipeline_snapshot(write_config, raw_df, tmp_path):
    config = write_config()
    NetflixPipeline(config_filename=config).run(raw_df)

    analyzer = ComprehensiveTitleAnalyzer(config_path_str=config)
    results = analyzer.run_analyses()

    assert results["summary"].loc[0, "total_titles"] == 5
    report_text = (tmp_path / "analysis" / "report.txt").read_text(encoding="utf-8")
    assert "Report: top_cast" in report_text
    assert (tmp_path / "analysis" / "stats_01_numeric.csv").exists()
    assert (tmp_path / "analysis" / "bar_02_top_countries.png").exists()


def test_analyzer_without_snapshot(write_config):
    analyzer = ComprehensiveTitleAnalyzer(config_path_str=write_config())
    assert analyzer.run_analyses() == {}


def test_analyzer_reports_match_pipeline(write_config, raw_df):
    raw_df.loc[5, "rating"] = ""
    raw_df.loc[1, "duration"] = ""
    config = write_config(reports={name: {} for name in REPORTS})
    pipeline_results = NetflixPipeline(config_filename=config).run(raw_df)

    analyzer_results = ComprehensiveTitleAnalyzer(config_path_str=config).run_analyses()

    assert set(analyzer_results) == set(REPORTS)
    assert {"rating": "", "cnt": 1} in analyzer_results["rating_distribution"].to_dict("records")
    for name in REPORTS:
        pd.testing.assert_frame_equal(
            analyzer_results[name].reset_index(drop=True),
            pipeline_results[name].reset_index(drop=True),
            check_dtype=False,
        )
