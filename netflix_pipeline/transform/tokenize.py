# netflix_pipeline/transform/tokenize.py
import logging
from collections import Counter
from typing import Iterable, List, Tuple

import pandas as pd


def split_tokens(value, delimiter: str = ",", max_positions: int | None = None) -> List[str]:
    """
    Zerlegt eine kommagetrennte Liste (z.B. 'cast') in getrimmte Tokens.

    Eine Zeile hat 1 + Anzahl(delimiter) Positionen; jede Position wird
    getrimmt, leere Tokens fallen weg. Mehrfach vorkommende Tokens innerhalb
    einer Zeile bleiben mehrfach erhalten.

    Args:
        value: Rohwert der Zelle (str oder fehlend).
        delimiter: Trennzeichen.
        max_positions: Optional höchstens so viele Positionen pro Zeile lesen.

    Returns:
        Liste der Tokens in Originalreihenfolge.
    """
    if value is None or (not isinstance(value, str) and pd.isna(value)):
        return []
    parts = str(value).split(delimiter)
    if max_positions is not None:
        parts = parts[:max_positions]
    return [part.strip() for part in parts if part.strip()]


def token_frequencies(
    values: Iterable,
    top_k: int | None = None,
    delimiter: str = ",",
    max_positions: int | None = None,
) -> List[Tuple[str, int]]:
    """
    Zählt die Häufigkeit aller Tokens über alle Zeilen.

    Sortierung: Anzahl absteigend; bei Gleichstand gewinnt das zuerst
    gesehene Token (Counter behält die Einfügereihenfolge, most_common
    sortiert stabil).

    Args:
        values: Spalte/Iterable mit Listen-Strings.
        top_k: Anzahl der zurückgegebenen Tokens (None = alle).
        delimiter: Trennzeichen.
        max_positions: Siehe split_tokens.

    Returns:
        Liste von (token, anzahl).

    Raises:
        ValueError: Wenn top_k kleiner als 1 ist.
    """
    if top_k is not None and top_k < 1:
        raise ValueError(f"top_k muss >= 1 sein, erhalten: {top_k}")

    counts: Counter = Counter()
    n_rows = 0
    for value in values:
        counts.update(split_tokens(value, delimiter=delimiter, max_positions=max_positions))
        n_rows += 1
    logging.debug(f"Tokenize: {len(counts)} verschiedene Tokens aus {n_rows} Zeilen.")
    return counts.most_common(top_k)
