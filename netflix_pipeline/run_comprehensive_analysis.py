# netflix_pipeline/run_comprehensive_analysis.py
import re
import sys
import yaml
import logging
from pathlib import Path
import pandas as pd
import numpy as np
import seaborn as sns
import matplotlib.pyplot as plt

from netflix_pipeline.main_pipeline import SNAPSHOT_FILENAMES
from netflix_pipeline.reports.aggregations import REPORTS, run_report

# --- Globale Stil-Einstellung für Plots ---
plt.style.use('seaborn-v0_8-whitegrid')

_DURATION_PATTERN = re.compile(r"^\s*(\d+)\s*(min|seasons?)\s*$", re.IGNORECASE)

# Report -> Achsen, Ausrichtung und Titel; nur diese Reports werden geplottet
DEFAULT_PLOT_CONFIGS: dict[str, dict] = {
    "type_counts": {"x": "type", "y": "count", "orient": "v", "title": "Movies vs. TV Shows", "filename": "bar_01_type_counts.png"},
    "top_countries": {"x": "count", "y": "country", "orient": "h", "title": "Top-Länder nach Anzahl Titel", "filename": "bar_02_top_countries.png"},
    "yearly_trend": {"x": "release_year", "y": "total_titles", "orient": "v", "title": "Titel pro Erscheinungsjahr", "filename": "bar_03_yearly_trend.png"},
    "rating_distribution": {"x": "cnt", "y": "rating", "orient": "h", "title": "Verteilung der Altersfreigaben", "filename": "bar_04_rating_distribution.png"},
    "top_cast": {"x": "cnt", "y": "actor", "orient": "h", "title": "Häufigste Darsteller:innen", "filename": "bar_05_top_cast.png"},
    "top_genres": {"x": "cnt", "y": "genre", "orient": "h", "title": "Häufigste Genres", "filename": "bar_06_top_genres.png"},
}


def parse_duration(value) -> tuple[int | None, str | None]:
    """
    Zerlegt die Rohdauer in (Anzahl, Einheit).

    "90 min" -> (90, "min"), "2 Seasons" -> (2, "season"); alles andere
    ergibt (None, None).
    """
    if not isinstance(value, str):
        return None, None
    match = _DURATION_PATTERN.match(value)
    if not match:
        return None, None
    unit = match.group(2).lower()
    return int(match.group(1)), ("min" if unit == "min" else "season")


def add_duration_columns(df: pd.DataFrame) -> pd.DataFrame:
    """Neue Spalten 'duration_minutes' (Filme) und 'duration_seasons' (Serien)."""
    result = df.copy()
    parsed = [parse_duration(v) for v in result["duration"]]
    minutes = [amount if unit == "min" else None for amount, unit in parsed]
    seasons = [amount if unit == "season" else None for amount, unit in parsed]
    result["duration_minutes"] = pd.Series(pd.array(minutes, dtype="Int64"), index=result.index)
    result["duration_seasons"] = pd.Series(pd.array(seasons, dtype="Int64"), index=result.index)
    return result


def get_numeric_statistics(df: pd.DataFrame, cols_map: dict) -> pd.DataFrame:
    """
    Berechnet deskriptive Statistiken für numerische Spalten.
    Args:
        df: DataFrame, das die Spalten enthält.
        cols_map: Dictionary {'Spaltenname_im_df': 'Anzeigename_im_Bericht'}
    Returns:
        DataFrame mit Statistiken.
    """
    stats = {}
    for col_name, display_name in cols_map.items():
        if col_name in df.columns:
            series = pd.to_numeric(df[col_name], errors="coerce").dropna().astype(float)
            if not series.empty:
                stats[display_name] = {
                    'mean': series.mean(),
                    'std': series.std(),
                    'min': series.min(),
                    'max': series.max(),
                    'median': series.median(),
                    'count': series.count()
                }
            else:
                stats[display_name] = {k: np.nan for k in ['mean', 'std', 'min', 'max', 'median', 'count']}
        else:
            logging.warning(f"Statistik-Spalte '{col_name}' nicht im DataFrame gefunden.")
    return pd.DataFrame(stats).T.round(2)


def run_report_plots(report_results: dict[str, pd.DataFrame], output_dir: Path, plot_configs_override: dict | None = None) -> list[Path]:
    """Erstellt je Report ein Balkendiagramm; leere oder nicht konfigurierte Reports werden übersprungen."""
    output_dir.mkdir(parents=True, exist_ok=True)
    logging.info(f"Erstelle Report-Plots in '{output_dir}'...")
    plot_configs = plot_configs_override if plot_configs_override else DEFAULT_PLOT_CONFIGS

    written: list[Path] = []
    for name, report_df in report_results.items():
        config = plot_configs.get(name)
        if not config:
            logging.debug(f"Keine Plot-Konfiguration für Report '{name}'.")
            continue
        if report_df is None or report_df.empty or not {config["x"], config["y"]}.issubset(report_df.columns):
            logging.info(f"Keine gültigen Daten für Plot des Reports '{name}'.")
            continue

        plot_df = report_df.dropna(subset=[config["x"], config["y"]]).copy()
        # Kategorische Achse als String, sonst interpretiert seaborn Jahre numerisch
        horizontal = config.get("orient", "v") == "h"
        cat_col = config["y"] if horizontal else config["x"]
        plot_df[cat_col] = plot_df[cat_col].astype(str)

        fig, ax = plt.subplots(figsize=(10, max(4, 0.35 * len(plot_df))))
        sns.barplot(data=plot_df, x=config["x"], y=config["y"], ax=ax,
                    orient="h" if horizontal else "v", color="steelblue")
        ax.set_title(config["title"])
        if not horizontal:
            ax.tick_params(axis='x', rotation=90)
        plt.tight_layout()
        file_path = output_dir / config["filename"]
        plt.savefig(file_path)
        plt.close(fig)
        written.append(file_path)
        logging.info(f"Plot '{config['filename']}' gespeichert in '{file_path}'.")
    return written


def generate_titles_analysis_report(
    dedup_df: pd.DataFrame,
    report_path: Path,
    report_results: dict[str, pd.DataFrame],
    numeric_stats: pd.DataFrame | None = None,
) -> Path:
    report_path.parent.mkdir(parents=True, exist_ok=True)
    report_lines = []
    report_lines.append("======================================")
    report_lines.append("     Netflix-Titel Analyse-Bericht     ")
    report_lines.append("======================================")
    report_lines.append(f"Datum der Analyse: {pd.Timestamp.now().strftime('%Y-%m-%d %H:%M:%S')}\n")

    report_lines.append("--- Allgemeine Statistiken (deduplizierte Tabelle) ---")
    report_lines.append(f"Gesamtzahl Titel: {len(dedup_df)}")

    report_lines.append("\n--- Details zu allen Spalten ---")
    for col in dedup_df.columns:
        non_na_count = dedup_df[col].notna().sum()
        dtype = str(dedup_df[col].dtype)
        report_lines.append(f"  - Spalte '{col}' (Typ: {dtype}): {non_na_count} nicht-fehlende Werte (von {len(dedup_df)})")

    if numeric_stats is not None and not numeric_stats.empty:
        report_lines.append("\n--- Numerische Statistiken ---")
        report_lines.append(numeric_stats.to_string())

    for name, result in report_results.items():
        report_lines.append(f"\n--- Report: {name} ({len(result)} Zeilen) ---")
        report_lines.append(result.to_string(index=False) if not result.empty else "(leer)")

    with open(report_path, "w", encoding="utf-8") as f:
        for line in report_lines:
            f.write(line + "\n")
    logging.info(f"Analysebericht gespeichert unter: {report_path}")
    return report_path


class ComprehensiveTitleAnalyzer:
    def __init__(self, config_path_str: str = 'config.yaml'):
        self.config_path = Path(config_path_str)
        if not self.config_path.exists():
            alt_config_path = Path(__file__).resolve().parent / config_path_str
            if alt_config_path.exists():
                self.config_path = alt_config_path
            else:
                raise FileNotFoundError(f"Konfigurationsdatei nicht gefunden: {config_path_str} oder {alt_config_path}")

        with open(self.config_path, 'r', encoding='utf-8') as f:
            self.cfg = yaml.safe_load(f) or {}

        log_level_str = self.cfg.get('logging', {}).get('level', 'INFO').upper()
        logging.basicConfig(level=getattr(logging, log_level_str, logging.INFO),
                            format='%(asctime)s - %(levelname)s - %(message)s')

        self.output_cfg = self.cfg.get('output', {})
        self.analysis_cfg = self.output_cfg.get('analysis', {})

    def _resolve_path(self, path_str: str | Path) -> Path:
        """ Löst relative Pfade wie die Pipeline relativ zum Paketverzeichnis auf. """
        path_obj = Path(path_str)
        if path_obj.is_absolute():
            return path_obj
        return (Path(__file__).resolve().parent / path_obj).resolve()

    def load_data(self) -> pd.DataFrame | None:
        """Lädt den deduplizierten Snapshot und stellt die Datentypen wieder her."""
        snapshot_dir = self._resolve_path(self.output_cfg.get("snapshot_dir", "data/snapshots"))
        dedup_path = snapshot_dir / SNAPSHOT_FILENAMES["dedup"]
        try:
            # "" bleibt "" wie in der Pipeline; nur Datum und Jahr kennen fehlende Werte
            df = pd.read_csv(dedup_path, dtype=str, keep_default_na=False)
        except FileNotFoundError:
            logging.error(f"Deduplizierter Snapshot NICHT gefunden: {dedup_path}")
            return None

        # CSV kennt keine Typen: Datum steht als ISO-String, Jahr als Zahl drin
        dates = pd.to_datetime(df["date_added"], format="%Y-%m-%d", errors="coerce")
        df["date_added"] = [d.date() if pd.notna(d) else None for d in dates]
        df["release_year"] = pd.to_numeric(df["release_year"], errors="coerce").astype("Int64")
        logging.info(f"Deduplizierter Snapshot geladen von: {dedup_path} ({len(df)} Zeilen)")
        return df

    def run_analyses(self, dedup_df: pd.DataFrame | None = None) -> dict[str, pd.DataFrame]:
        logging.info("Starte Analyse der Netflix-Titel...")
        if dedup_df is None:
            dedup_df = self.load_data()
        if dedup_df is None:
            logging.critical("Kritisch: Deduplizierte Tabelle konnte nicht geladen werden. Analyse abgebrochen.")
            return {}

        analysis_dir = self._resolve_path(self.analysis_cfg.get("analysis_dir", "data/analysis"))
        analysis_dir.mkdir(parents=True, exist_ok=True)
        report_path = self._resolve_path(
            self.analysis_cfg.get("analysis_report_path", "data/analysis/titles_analysis_report.txt"))

        # Reports mit denselben Parametern wie in der Pipeline
        reports_cfg: dict = self.cfg.get("reports") or {name: {} for name in REPORTS}
        report_results = {name: run_report(name, dedup_df, **(params or {})) for name, params in reports_cfg.items()}

        with_durations = add_duration_columns(dedup_df)
        stats_df = get_numeric_statistics(with_durations, {
            'release_year': 'Erscheinungsjahr',
            'duration_minutes': 'Dauer Filme (Minuten)',
            'duration_seasons': 'Dauer Serien (Staffeln)',
        })
        stats_df.to_csv(analysis_dir / "stats_01_numeric.csv")
        logging.info(f"Numerische Statistiken gespeichert. Inhalt:\n{stats_df}")

        generate_titles_analysis_report(dedup_df, report_path, report_results, stats_df)
        run_report_plots(report_results, analysis_dir)

        logging.info(f"Analyse abgeschlossen. Ergebnisse in '{analysis_dir}'.")
        return report_results


if __name__ == '__main__':
    config_file = sys.argv[1] if len(sys.argv) > 1 else "config.yaml"
    analyzer = ComprehensiveTitleAnalyzer(config_path_str=config_file)
    analyzer.run_analyses()
