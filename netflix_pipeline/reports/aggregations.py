# netflix_pipeline/reports/aggregations.py
"""
Read-only Auswertungen auf der deduplizierten Tabelle.

Alle Funktionen liefern ein neues DataFrame und verändern die Eingabe nicht.
Fehlende Gruppenschlüssel werden ausgelassen (groupby dropna). Bei
Gleichstand in nach Anzahl sortierten Reports entscheidet der Schlüssel
aufsteigend, bei Token-Reports das zuerst gesehene Token.
"""
import logging
from typing import Callable

import pandas as pd

from netflix_pipeline.transform.tokenize import token_frequencies

MOVIE: str = "Movie"
TV_SHOW: str = "TV Show"


class UnknownReportError(KeyError):
    pass


def _grouped_counts(df: pd.DataFrame, keys: list[str], count_col: str) -> pd.DataFrame:
    # groupby sortiert die Schlüssel aufsteigend -> stabile Sortierung behält diese Reihenfolge bei Gleichstand
    return df.groupby(keys, dropna=True).size().reset_index(name=count_col)


def _top(counts: pd.DataFrame, count_col: str, limit: int | None) -> pd.DataFrame:
    result = counts.sort_values(count_col, ascending=False, kind="stable")
    if limit is not None:
        result = result.head(limit)
    return result.reset_index(drop=True)


def type_counts(df: pd.DataFrame) -> pd.DataFrame:
    """Movies vs TV Shows."""
    return _grouped_counts(df, ["type"], "count")


def top_countries(df: pd.DataFrame, limit: int | None = 10) -> pd.DataFrame:
    return _top(_grouped_counts(df, ["country"], "count"), "count", limit)


def yearly_trend(df: pd.DataFrame) -> pd.DataFrame:
    """Titel pro Erscheinungsjahr, aufsteigend nach Jahr."""
    return _grouped_counts(df, ["release_year"], "total_titles")


def duration_distribution(df: pd.DataFrame, limit: int | None = 30) -> pd.DataFrame:
    # 'duration' bleibt Rohtext (Minuten bei Filmen, Staffeln bei Serien)
    return _top(_grouped_counts(df, ["type", "duration"], "cnt"), "cnt", limit)


def rating_distribution(df: pd.DataFrame) -> pd.DataFrame:
    return _top(_grouped_counts(df, ["rating"], "cnt"), "cnt", None)


def token_report(
    df: pd.DataFrame,
    column: str,
    token_label: str,
    limit: int | None = 20,
    max_positions: int | None = None,
) -> pd.DataFrame:
    """
    Häufigkeit der einzelnen Einträge einer kommagetrennten Listen-Spalte.

    Args:
        df: Deduplizierte Tabelle.
        column: Listen-Spalte, z.B. 'cast' oder 'listed_in'.
        token_label: Name der Ergebnisspalte für das Token.
        limit: Top-K (None = alle).
        max_positions: Höchstens so viele Einträge pro Zeile lesen.
    """
    freqs = token_frequencies(df[column], top_k=limit, max_positions=max_positions)
    return pd.DataFrame(freqs, columns=[token_label, "cnt"])


def top_cast(df: pd.DataFrame, limit: int | None = 20, max_positions: int | None = None) -> pd.DataFrame:
    """Häufigste Darsteller:innen aus der 'cast'-Liste."""
    return token_report(df, "cast", "actor", limit=limit, max_positions=max_positions)


def top_genres(df: pd.DataFrame, limit: int | None = 20, max_positions: int | None = None) -> pd.DataFrame:
    return token_report(df, "listed_in", "genre", limit=limit, max_positions=max_positions)


def summary(df: pd.DataFrame, movie_label: str = MOVIE, show_label: str = TV_SHOW) -> pd.DataFrame:
    """Eine Zeile: Gesamtzahl, Filme, Serien, verschiedene Länder und Regisseur:innen."""
    row = {
        "total_titles": len(df),
        "total_movies": int(df["type"].eq(movie_label).sum()),
        "total_shows": int(df["type"].eq(show_label).sum()),
        "unique_countries": int(df["country"].nunique(dropna=True)),
        "unique_directors": int(df["director"].nunique(dropna=True)),
    }
    return pd.DataFrame([row])


REPORTS: dict[str, Callable[..., pd.DataFrame]] = {
    "type_counts": type_counts,
    "top_countries": top_countries,
    "yearly_trend": yearly_trend,
    "duration_distribution": duration_distribution,
    "rating_distribution": rating_distribution,
    "top_cast": top_cast,
    "top_genres": top_genres,
    "summary": summary,
}


def run_report(name: str, df: pd.DataFrame, **params) -> pd.DataFrame:
    """
    Führt einen Report aus der REPORTS-Registry aus.

    Raises:
        UnknownReportError: Wenn der Name nicht registriert ist.
    """
    report_fn = REPORTS.get(name)
    if report_fn is None:
        raise UnknownReportError(f"Unbekannter Report: '{name}'. Verfügbar: {', '.join(REPORTS)}")
    result = report_fn(df, **params)
    logging.info(f"Report '{name}' erstellt ({len(result)} Zeilen).")
    return result
