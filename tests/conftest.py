import matplotlib

matplotlib.use("Agg")

import pandas as pd
import pytest
import yaml

from netflix_pipeline.utils.basic_validator import TITLE_COLUMNS


def _make_row(**overrides) -> dict:
    row = {
        "show_id": "s1",
        "type": "Movie",
        "title": "Dick Johnson Is Dead",
        "director": "Kirsten Johnson",
        "cast": "",
        "country": "United States",
        "date_added": "September 25, 2021",
        "release_year": "2020",
        "rating": "PG-13",
        "duration": "90 min",
        "listed_in": "Documentaries",
        "description": "As her father nears the end of his life, filmmaker Kirsten Johnson stages his death.",
    }
    row.update(overrides)
    return row


@pytest.fixture
def make_row():
    return _make_row


@pytest.fixture
def raw_df() -> pd.DataFrame:
    sankofa = _make_row(
        show_id="s4", title="Sankofa", director="Haile Gerima",
        cast="Kofi Ghanaba, Oyafunmike Ogunlano, Alexandra Duah, Nick Medley",
        country="United States, Ghana, Burkina Faso, United Kingdom, Germany, Ethiopia",
        date_added="not a date", release_year="1993", rating="TV-MA", duration="125 min",
        listed_in="Dramas, Independent Movies, International Movies",
    )
    rows = [
        _make_row(),
        _make_row(
            show_id="s2", type="TV Show", title="Blood & Water", director="",
            cast="Ama Qamata, Khosi Ngema, Gail Mabalane", country="South Africa",
            date_added="September 24, 2021", release_year="2021", rating="TV-MA",
            duration="2 Seasons", listed_in="International TV Shows, TV Dramas, TV Mysteries",
        ),
        _make_row(
            show_id="s3", type="TV Show", title="Ganglands", director="Julien Leclercq",
            cast="Sami Bouajila, Tracy Gotoas, Samuel Jouy", country="  ",
            date_added=" September 24, 2021", release_year="2021", rating="TV-MA",
            duration="1 Season", listed_in="Crime TV Shows, International TV Shows, TV Action & Adventure",
        ),
        sankofa,
        dict(sankofa),
        _make_row(
            show_id="s6", title="Zero Year", director="Unknown Director", cast="Tom, Jerry , Tom",
            date_added="", release_year="0", rating="PG", duration="95 min", listed_in="Comedies",
        ),
    ]
    return pd.DataFrame(rows, columns=TITLE_COLUMNS)


@pytest.fixture
def write_config(tmp_path):
    """Schreibt eine config.yaml mit absoluten Pfaden unter tmp_path."""

    def _write(**overrides) -> str:
        cfg = {
            "logging": {"level": "DEBUG"},
            "sources": {"NetflixAdapter": {"file_path": str(tmp_path / "netflix_titles.csv")}},
            "output": {
                "save_snapshots": True,
                "snapshot_dir": str(tmp_path / "snapshots"),
                "report_dir": str(tmp_path / "reports"),
                "validation_reports_dir": str(tmp_path / "validation_reports"),
                "analysis": {
                    "analysis_dir": str(tmp_path / "analysis"),
                    "analysis_report_path": str(tmp_path / "analysis" / "report.txt"),
                },
            },
            "aux_output_dirs": {
                "duplicates": str(tmp_path / "aux" / "duplicates"),
                "unparsed": str(tmp_path / "aux" / "unparsed"),
                "rejected": str(tmp_path / "aux" / "rejected"),
            },
            "reports": {
                "type_counts": {},
                "top_countries": {"limit": 10},
                "top_cast": {"limit": 20, "max_positions": 100},
                "summary": {},
            },
        }
        cfg.update(overrides)
        path = tmp_path / "config.yaml"
        path.write_text(yaml.safe_dump(cfg), encoding="utf-8")
        return str(path)

    return _write
