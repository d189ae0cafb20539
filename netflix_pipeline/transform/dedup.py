# netflix_pipeline/transform/dedup.py
import logging

import pandas as pd


def backup_table(df: pd.DataFrame) -> pd.DataFrame:
    """Vollständige, unabhängige Kopie (keine View) vor destruktiven Schritten."""
    backup = df.copy(deep=True)
    logging.info(f"Backup: {len(backup)} Zeilen gesichert.")
    return backup


def find_duplicates(df: pd.DataFrame) -> pd.DataFrame:
    """
    Liefert die überzähligen Zeilen, die deduplicate() entfernen würde.

    Duplikat heißt: ALLE Spalten identisch (inkl. show_id). Fehlende Werte
    gelten dabei als gleich, wie bei SELECT DISTINCT.
    """
    return df[df.duplicated(keep="first")].copy()


def deduplicate(df: pd.DataFrame) -> pd.DataFrame:
    """
    Entfernt exakte Duplikate über das komplette Spalten-Tupel.

    Zeilen mit gleicher show_id aber abweichenden anderen Feldern bleiben
    bewusst beide erhalten. Pro Äquivalenzklasse bleibt die erste Zeile.

    Args:
        df: Typisierte und imputierte Tabelle (wird nicht verändert).

    Returns:
        Neues DataFrame mit frischem RangeIndex, len(result) <= len(df).
    """
    deduped = df.drop_duplicates(keep="first", ignore_index=True)
    n_removed = len(df) - len(deduped)
    if n_removed:
        logging.warning(f"Dedup: {n_removed} exakte Duplikate entfernt ({len(df)} -> {len(deduped)} Zeilen).")
    else:
        logging.info(f"Dedup: keine Duplikate gefunden ({len(deduped)} Zeilen).")

    # show_id mehrfach, aber nicht zeilengleich -> nur melden, nicht mergen
    if "show_id" in deduped.columns:
        shared_ids = deduped["show_id"].dropna().duplicated(keep=False)
        if shared_ids.any():
            logging.warning(
                f"Dedup: {int(shared_ids.sum())} Zeilen teilen sich eine show_id bei abweichenden Feldern (nicht zusammengeführt).")
    return deduped
