import logging
from typing import List, Tuple
from datetime import datetime
import pandas as pd
from pathlib import Path

CURRENT_YEAR: int = datetime.now().year
YEAR_MIN: int = 1888
YEAR_MAX: int = CURRENT_YEAR + 1
TITLE_COLUMNS: List[str] = [
    "show_id", "type", "title", "director", "cast", "country",
    "date_added", "release_year", "rating", "duration", "listed_in",
    "description",
]
KNOWN_TYPES: Tuple[str, ...] = ("Movie", "TV Show")


class SchemaError(ValueError):
    """Tabelle entspricht nicht dem erwarteten Titel-Schema."""


def stage_sanity_checks(raw_df: pd.DataFrame, typed_df: pd.DataFrame) -> dict[str, int]:
    """
    Zählungen zur manuellen Kontrolle nach der Typisierung: Zeilen in Roh-
    und Clean-Tabelle sowie fehlende Werte in 'date_added'/'release_year'.
    """
    checks = {
        "total_raw": len(raw_df),
        "total_clean": len(typed_df),
        "null_date_added": int(typed_df["date_added"].isna().sum()) if "date_added" in typed_df.columns else 0,
        "null_release_year": int(typed_df["release_year"].isna().sum()) if "release_year" in typed_df.columns else 0,
    }
    for key, value in checks.items():
        logging.info(f"Sanity-Check {key}: {value}")
    if checks["total_raw"] != checks["total_clean"]:
        logging.warning(
            f"Sanity-Check: Zeilenzahl weicht ab (raw={checks['total_raw']}, clean={checks['total_clean']}).")
    return checks


def validate_dataframe(
    df: pd.DataFrame,
    *,
    required_cols: List[str] | None = None,
    allow_empty: bool = False,
    df_name: str | None = None,
    log_level: int = logging.WARNING,
    known_types: Tuple[str, ...] = KNOWN_TYPES,
    check_duplicates: bool = False,
    error_report_path: str | None = None,
    save_invalid_rows: bool = False,
    invalid_rows_output_path: str = "invalid_rows_found.csv",
) -> Tuple[bool, List[str]]:
    name = df_name or "DataFrame"
    errors: List[str] = []
    invalid_rows_parts: List[pd.DataFrame] = []

    # 0) Leerer DataFrame
    if df.empty and not allow_empty:
        errors.append(f"{name} ist leer.")

    # 1) Pflichtspalten prüfen
    req_cols = set(TITLE_COLUMNS if required_cols is None else required_cols)
    missing = req_cols.difference(df.columns)
    if missing:
        errors.append(f"{name}: fehlende Spalten: {', '.join(sorted(missing))}")

    # 2) Jahr prüfen (fehlend ist erlaubt, wird über Sanity-Checks gezählt)
    if "release_year" in df.columns and pd.api.types.is_numeric_dtype(df["release_year"]):
        years = df["release_year"]
        invalid_year_mask = (~years.between(YEAR_MIN, YEAR_MAX)) & years.notna()
        invalid_year_mask = invalid_year_mask.fillna(False).astype(bool)
        if invalid_year_mask.any():
            n_bad = int(invalid_year_mask.sum())
            errors.append(
                f"{name}: {n_bad} Zeilen mit ungültigem Jahr (<{YEAR_MIN} oder >{YEAR_MAX}) in Spalte 'release_year'."
            )
            if save_invalid_rows:
                invalid_rows_parts.append(df[invalid_year_mask])

    # 3) Unbekannte Kategorien (erweiterbar, daher nur Meldung)
    if "type" in df.columns and known_types:
        unknown_mask = df["type"].notna() & ~df["type"].isin(known_types)
        if unknown_mask.any():
            variants = sorted(df.loc[unknown_mask, "type"].astype(str).unique())
            errors.append(
                f"{name}: {int(unknown_mask.sum())} Zeilen mit unbekanntem type: {', '.join(variants[:10])}"
            )
            if save_invalid_rows:
                invalid_rows_parts.append(df[unknown_mask])

    # 4) Exakte Duplikate (alle Spalten)
    if check_duplicates:
        dupes = df.duplicated(keep=False)
        if dupes.any():
            errors.append(f"{name}: {int(dupes.sum())} Zeilen sind exakte Duplikate.")

    for msg in errors:
        logging.log(log_level, msg)

    # --- Fehlerhafte Zeilen speichern ---
    if save_invalid_rows:
        try:
            if invalid_rows_parts:
                invalid_df = pd.concat(invalid_rows_parts)
                invalid_df = invalid_df[~invalid_df.index.duplicated(keep="first")]
            else:
                # Leere CSV mit Spaltenkopf erstellen
                invalid_df = df.head(0).copy()
            out_path = Path(invalid_rows_output_path)
            out_path.parent.mkdir(parents=True, exist_ok=True)
            invalid_df.to_csv(out_path, index=False)
            logging.info(
                f"{name}: Fehlerhafte Zeilen gespeichert unter {out_path} (Anzahl: {len(invalid_df)})"
            )
        except OSError as e:
            logging.error(
                f"{name}: Fehler beim Speichern fehlerhafter Zeilen: {e}")

    # --- Fehlerreport speichern ---
    if error_report_path and errors:
        try:
            rep_path = Path(error_report_path)
            rep_path.parent.mkdir(parents=True, exist_ok=True)
            rep_path.write_text("\n".join(errors), encoding="utf-8")
            logging.info(f"{name}: Fehlerreport gespeichert unter {rep_path}")
        except OSError as e:
            logging.error(
                f"{name}: Fehler beim Speichern des Fehlerreports: {e}")

    return len(errors) == 0, errors


def validate_or_raise(
    df: pd.DataFrame,
    **kwargs,
) -> None:
    ok, errs = validate_dataframe(df, **kwargs)
    if not ok:
        joined = "\n - ".join(errs)
        raise ValueError(f"Validation Fehler:\n - {joined}")
