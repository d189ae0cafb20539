# netflix_pipeline/transform/normalize.py
import logging
import re
from datetime import date

import pandas as pd

# "September 9, 2019"; Monatsnamen fest auf Englisch, unabhängig von der Locale
_DATE_ADDED_PATTERN = re.compile(r"([A-Za-z]+)\s+(\d{1,2}),\s*(\d{4})")
_MONTHS: dict[str, int] = {
    name: number for number, name in enumerate(
        ["january", "february", "march", "april", "may", "june", "july",
         "august", "september", "october", "november", "december"], start=1)
}
# Ganzzahl, optional mit ".0" (z.B. aus einer Float-Spalte)
_YEAR_PATTERN = re.compile(r"([+-]?\d+)(?:\.0*)?")


def _is_absent(value) -> bool:
    # pd.isna liefert bei Listen/Arrays ein Array, daher nur Skalare prüfen
    return value is None or (not isinstance(value, str) and pd.isna(value))


def parse_date_added(value) -> date | None:
    """
    Wandelt einen 'Monat Tag, Jahr'-String in ein Kalenderdatum um.

    Leere oder nicht parsebare Werte ergeben None (kein Fehler), damit sie
    später über die Sanity-Checks gezählt werden können. Die Monatsnamen
    werden ohne strptime aufgelöst, ein gesetztes setlocale ändert nichts.
    """
    if _is_absent(value):
        return None
    match = _DATE_ADDED_PATTERN.fullmatch(str(value).strip())
    if not match:
        return None
    month = _MONTHS.get(match.group(1).lower())
    if month is None:
        return None
    try:
        return date(int(match.group(3)), month, int(match.group(2)))
    except ValueError:
        return None


def parse_release_year(value) -> int | None:
    """Ganzzahliges Jahr oder None; "" und "0" gelten als fehlend, "2020.0" wird 2020."""
    if _is_absent(value) or isinstance(value, bool):
        return None
    if isinstance(value, int):
        year = value
    elif isinstance(value, float):
        if not value.is_integer():
            return None
        year = int(value)
    else:
        match = _YEAR_PATTERN.fullmatch(str(value).strip())
        if not match:
            return None
        year = int(match.group(1))
    return year if year != 0 else None


def normalize_titles(raw_df: pd.DataFrame) -> pd.DataFrame:
    """
    Erzeugt die typisierte Version der Rohtabelle.

    'date_added' wird zu datetime.date (oder None), 'release_year' zu Int64
    (oder <NA>). Alle anderen Spalten werden unverändert übernommen. Die
    Rohtabelle selbst wird nicht verändert.

    Args:
        raw_df: Rohtabelle mit String-Spalten.

    Returns:
        Neues DataFrame mit korrigierten Datentypen.
    """
    df = raw_df.copy()

    if "date_added" in df.columns:
        df["date_added"] = df["date_added"].map(parse_date_added).astype(object)
        # Nicht-leere Eingaben, die trotzdem kein Datum ergeben haben
        bad_dates = df["date_added"].isna() & raw_df["date_added"].fillna("").astype(str).str.strip().ne("")
        if bad_dates.any():
            logging.warning(
                f"Normalize: {int(bad_dates.sum())} Werte in 'date_added' nicht parsebar -> fehlend (manuelle Prüfung).")

    if "release_year" in df.columns:
        years = [parse_release_year(v) for v in raw_df["release_year"]]
        df["release_year"] = pd.Series(pd.array(years, dtype="Int64"), index=df.index)
        logging.info(
            f"Normalize: {int(df['release_year'].isna().sum())} fehlende Werte in 'release_year' nach dem Parsen.")

    return df
