# netflix_pipeline/transform/impute.py
import logging

import pandas as pd

from netflix_pipeline.utils.basic_validator import SchemaError

SENTINEL: str = "Unknown"
# Feld -> Ersatzwert; nur diese Felder werden befüllt
DEFAULT_IMPUTATIONS: dict[str, str] = {
    "director": SENTINEL,
    "country": SENTINEL,
}


def blank_mask(series: pd.Series) -> pd.Series:
    """True für fehlende Werte und Strings, die nach strip() leer sind."""
    stripped = series.map(lambda v: v.strip() if isinstance(v, str) else v)
    return series.isna() | stripped.eq("")


def impute_missing(df: pd.DataFrame, defaults: dict[str, str] | None = None) -> dict[str, int]:
    """
    Ersetzt fehlende/leere Werte in den angegebenen Textspalten durch einen
    festen Platzhalter.

    Achtung: arbeitet IN-PLACE auf dem übergebenen DataFrame (wie das
    UPDATE im ursprünglichen Workflow). Deshalb erst nach der Typisierung
    und vor dem Backup ausführen.

    Args:
        df: Typisierte Tabelle, wird verändert.
        defaults: Mapping {Spaltenname: Ersatzwert}. Standard ist
                  DEFAULT_IMPUTATIONS ('director' und 'country' -> 'Unknown').

    Returns:
        Anzahl ersetzter Werte je Spalte.

    Raises:
        SchemaError: Wenn eine der Spalten im DataFrame fehlt.
    """
    mapping = DEFAULT_IMPUTATIONS if defaults is None else defaults
    missing = [col for col in mapping if col not in df.columns]
    if missing:
        raise SchemaError(f"Imputation: fehlende Spalten: {', '.join(missing)}")

    replaced: dict[str, int] = {}
    for col, default_value in mapping.items():
        mask = blank_mask(df[col])
        n_replaced = int(mask.sum())
        if n_replaced:
            df.loc[mask, col] = default_value
        replaced[col] = n_replaced
        logging.info(f"Impute: {n_replaced} Werte in '{col}' durch '{default_value}' ersetzt.")
    return replaced
