import logging
from pathlib import Path
import pandas as pd

# Standardverzeichnisse, werden von der Pipeline über configure_aux_dirs() überschrieben
_AUX_DIRS: dict[str, str] = {
    "duplicates": "data/validation_reports/duplicates",
    "unparsed": "data/validation_reports/unparsed",
    "rejected": "data/validation_reports/rejected",
}


def configure_aux_dirs(dirs: dict[str, str | Path]) -> None:
    """Übernimmt die Verzeichnisse aus der Config (aux_output_dirs)."""
    _AUX_DIRS.update({kind: str(path) for kind, path in dirs.items()})


def _get_target_dir(kind: str) -> Path:
    """Liefert das Zielverzeichnis für eine CSV-Art (duplicates/unparsed)."""
    return Path(_AUX_DIRS.get(kind, f"data/validation_reports/{kind}"))


def save_aux_csv(kind: str, stage_name: str, df: pd.DataFrame) -> Path:
    """Speichert DataFrame unter <dir>/<stage_name>_<kind>.csv."""
    target_dir = _get_target_dir(kind)
    target_dir.mkdir(parents=True, exist_ok=True)
    out_path = target_dir / f"{stage_name}_{kind}.csv"
    df.to_csv(out_path, index=False)
    logging.info(f"{stage_name}: {len(df)} Zeilen ({kind}) gespeichert unter {out_path}")
    return out_path
