# netflix_pipeline/adapters/adapters/netflix_adapter.py
import logging
from typing import List

import pandas as pd

from netflix_pipeline.adapters.adapters.base_adapter import BaseAdapter
from netflix_pipeline.utils.basic_validator import TITLE_COLUMNS, SchemaError


class NetflixAdapter(BaseAdapter):
    """Netflix-Titel-Adapter (Staging-Tabelle, alles Strings).

    • show_id … description   str, leere Felder bleiben "" (kein NaN)
    • Spaltenreihenfolge       wie TITLE_COLUMNS
    • Zeilen mit falscher Feldanzahl werden übersprungen und protokolliert
    """

    # ------------------------------------------------------------ #
    # 1) Extract                                                   #
    # ------------------------------------------------------------ #
    def extract(self) -> pd.DataFrame:  # type: ignore[override]
        rejected_rows: List[dict] = []

        def _on_bad_line(fields: list[str]) -> None:
            rejected_rows.append({"n_fields": len(fields), "raw": ",".join(fields)})
            return None

        df = pd.read_csv(
            self.config["file_path"],
            dtype=str,
            keep_default_na=False,
            encoding=self.config.get("encoding", "utf-8"),
            on_bad_lines=_on_bad_line,
            engine="python",
        )
        if rejected_rows:
            logging.warning(f"NetflixAdapter: {len(rejected_rows)} fehlerhafte CSV-Zeilen übersprungen.")
            self._log_aux_files("NetflixAdapter", rejected_rows)
        logging.info(f"NetflixAdapter: {len(df)} Rohzeilen gelesen aus {self.config['file_path']}.")
        return df

    # ------------------------------------------------------------ #
    # 2) Transform (Schema)                                        #
    # ------------------------------------------------------------ #
    def transform(self, df: pd.DataFrame) -> pd.DataFrame:  # type: ignore[override]
        df = df.copy()
        df.columns = [str(c).strip() for c in df.columns]

        missing = [c for c in TITLE_COLUMNS if c not in df.columns]
        if missing:
            raise SchemaError(f"NetflixAdapter: fehlende Spalten: {', '.join(missing)}")

        extra = [c for c in df.columns if c not in TITLE_COLUMNS]
        if extra:
            logging.warning(f"NetflixAdapter: zusätzliche Spalten werden verworfen: {', '.join(extra)}")

        # Staging bleibt string-typisiert; fehlende Werte als "" wie im VARCHAR-Import
        result = df[TITLE_COLUMNS].copy()
        for col in TITLE_COLUMNS:
            if pd.api.types.is_float_dtype(result[col]):
                # Float-Spalte (z.B. Jahr mit NaN): 2020.0 -> "2020", nicht "2020.0"
                result[col] = result[col].map(_float_to_text)
        result = result.fillna("").astype(str)
        return result.reset_index(drop=True)


def _float_to_text(value: float) -> str:
    if pd.isna(value):
        return ""
    return str(int(value)) if float(value).is_integer() else str(value)
