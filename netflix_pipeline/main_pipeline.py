import sys
import yaml
import logging
from pathlib import Path
import pandas as pd

# Adapter-Importe
from netflix_pipeline.adapters.adapters.netflix_adapter import NetflixAdapter

# Transformations-Importe
from netflix_pipeline.transform.normalize import normalize_titles
from netflix_pipeline.transform.impute import impute_missing, DEFAULT_IMPUTATIONS
from netflix_pipeline.transform.dedup import backup_table, deduplicate, find_duplicates
from netflix_pipeline.reports.aggregations import run_report

# Loader-/Utils-Importe
from netflix_pipeline.loaders.csv_loader import CsvLoader
from netflix_pipeline.pipeline_state import PipelineState, Stage
from netflix_pipeline.utils.basic_validator import validate_dataframe, stage_sanity_checks
from netflix_pipeline.utils.save_aux_csv import save_aux_csv, configure_aux_dirs

# Dateinamen der vier Tabellen-Snapshots
SNAPSHOT_FILENAMES: dict[str, str] = {
    "raw": "netflix_titles.csv",
    "clean": "netflix_titles_clean.csv",
    "backup": "netflix_titles_clean_backup.csv",
    "dedup": "netflix_titles_clean_dedup.csv",
}


class NetflixPipeline:
    """
    Orchestriert die Netflix-Titel-Pipeline: Ingestion, Typisierung,
    Imputation, Backup und Deduplizierung, danach die Reports.

    Jede Stage ist eine eigene Methode und darf nur in fester Reihenfolge
    und genau einmal laufen (siehe PipelineState).
    """

    def __init__(self, config_filename: str | Path = 'config.yaml'):
        """
        Initialisiert die Pipeline.

        Liest die Konfigurationsdatei ein und initialisiert das Logging.

        Args:
            config_filename: Pfad zur YAML-Konfigurationsdatei; relative Pfade
                             beziehen sich auf den Speicherort dieses Skripts.

        Raises:
            FileNotFoundError: Wenn die Konfigurationsdatei nicht gefunden wird.
            yaml.YAMLError: Wenn die Konfigurationsdatei nicht gültig ist.
        """
        self.script_dir: Path = Path(__file__).resolve().parent
        config_path = Path(config_filename)
        if not config_path.is_absolute():
            config_path = self.script_dir / config_path

        if not config_path.exists():
            raise FileNotFoundError(
                f"Konfigurationsdatei nicht gefunden: {config_path}")

        try:
            with open(config_path, 'r', encoding='utf-8') as f:
                self.config: dict = yaml.safe_load(f)
        except yaml.YAMLError as e:
            logging.error(
                f"Fehler beim Parsen der Konfigurationsdatei {config_path}: {e}"
            )
            raise

        if self.config is None:  # yaml.safe_load liefert None bei leerer Datei
            self.config = {}
            logging.warning(
                f"Konfigurationsdatei {config_path} ist leer oder enthält keine gültige YAML-Struktur."
            )

        log_config: dict = self.config.get('logging', {})
        level_name = log_config.get('level', 'INFO').upper()
        level_value = getattr(logging, level_name, logging.INFO)
        logging.basicConfig(
            level=level_value,
            format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S')
        logging.getLogger().setLevel(level_value)
        self.logger = logging.getLogger(__name__)

        output_cfg: dict = self.config.get("output", {})
        self.validation_reports_dir: Path = self._resolve_path(
            output_cfg.get("validation_reports_dir", "data/validation_reports"))
        self.validation_reports_dir.mkdir(parents=True, exist_ok=True)

        aux_dirs = self.config.get("aux_output_dirs", {})
        configure_aux_dirs({kind: self._resolve_path(path) for kind, path in aux_dirs.items()})

        self.state = PipelineState()
        self.raw_df: pd.DataFrame | None = None
        self.typed_df: pd.DataFrame | None = None
        self.backup_df: pd.DataFrame | None = None
        self.dedup_df: pd.DataFrame | None = None
        self.sanity_checks: dict[str, int] = {}

    def _resolve_path(self, path_value: str | Path) -> Path:
        """
        Konvertiert einen Pfadwert aus der Konfiguration in ein absolutes Path-Objekt.

        Relative Pfade werden relativ zum Verzeichnis dieses Skripts aufgelöst.

        Raises:
            ValueError: Wenn der path_value weder ein String noch ein Path-Objekt ist.
        """
        if isinstance(path_value, Path):
            path_obj = path_value
        elif isinstance(path_value, str):
            path_obj = Path(path_value)
        else:
            self.logger.error(
                f"Ungültiger Pfadwert in Config: {path_value} (Typ: {type(path_value)})"
            )
            raise ValueError(
                f"Pfadwert muss ein String oder Path-Objekt sein: {path_value}")

        if path_obj.is_absolute():
            return path_obj
        return (self.script_dir / path_obj).resolve()

    def _save_snapshot(self, name: str, df: pd.DataFrame) -> None:
        """Schreibt einen Tabellen-Snapshot als CSV, falls output.save_snapshots aktiv ist."""
        output_cfg = self.config.get("output", {})
        if not output_cfg.get("save_snapshots", False):
            self.logger.debug(f"Snapshot '{name}' nicht gespeichert (output.save_snapshots=false).")
            return

        snapshot_dir = self._resolve_path(output_cfg.get("snapshot_dir", "data/snapshots"))
        file_path = snapshot_dir / SNAPSHOT_FILENAMES[name]
        try:
            CsvLoader(file_path).load(df)
        except OSError as e:
            self.logger.error(
                f"Fehler beim Speichern des Snapshots '{name}' nach {file_path}: {e}",
                exc_info=True)

    def _validate(self, df: pd.DataFrame, df_name: str, **kwargs) -> None:
        ok, errs = validate_dataframe(
            df,
            df_name=df_name,
            error_report_path=str(self.validation_reports_dir / f"{df_name}_report.txt"),
            save_invalid_rows=True,
            invalid_rows_output_path=str(self.validation_reports_dir / f"{df_name}_invalid_rows.csv"),
            **kwargs)
        if not ok:
            self.logger.warning(f"Validation-Probleme im {df_name}: {errs}")

    # ------------------------------------------------------------ #
    # Stages                                                       #
    # ------------------------------------------------------------ #
    def ingest(self, df: pd.DataFrame | None = None) -> pd.DataFrame:
        """
        Lädt die Rohtabelle (alle Felder als String).

        Args:
            df: Optional bereits geladene Rohdaten; sonst wird die in
                sources.NetflixAdapter konfigurierte CSV gelesen.
        """
        self.state.require_next(Stage.INGEST)
        adapter_config = dict(self.config.get("sources", {}).get("NetflixAdapter", {}))
        if "file_path" in adapter_config:
            adapter_config["file_path"] = self._resolve_path(adapter_config["file_path"])
        adapter = NetflixAdapter(adapter_config)

        if df is None:
            if "file_path" not in adapter_config:
                raise ValueError("Keine Rohdaten übergeben und kein 'sources.NetflixAdapter.file_path' konfiguriert.")
            df = adapter.extract()

        self.raw_df = adapter.transform(df)
        self.state.mark_done(Stage.INGEST)
        self.logger.info(f"Ingest abgeschlossen: {len(self.raw_df)} Rohzeilen.")
        self._save_snapshot("raw", self.raw_df)
        return self.raw_df

    def normalize(self) -> pd.DataFrame:
        """Erzeugt die typisierte Tabelle und protokolliert die Sanity-Checks."""
        self.state.require_next(Stage.NORMALIZE)
        self.typed_df = normalize_titles(self.raw_df)
        self.sanity_checks = stage_sanity_checks(self.raw_df, self.typed_df)

        # Nicht parsebare Datumswerte für die manuelle Nacharbeit ablegen
        raw_dates = self.raw_df["date_added"].str.strip()
        unparsed_mask = self.typed_df["date_added"].isna() & raw_dates.ne("")
        if unparsed_mask.any():
            try:
                save_aux_csv("unparsed", "date_added", self.raw_df[unparsed_mask])
            except OSError as e:
                self.logger.error(f"Fehler beim Speichern der nicht parsebaren Datumswerte: {e}", exc_info=True)

        self.state.mark_done(Stage.NORMALIZE)
        return self.typed_df

    def impute(self) -> dict[str, int]:
        """Füllt fehlende Textfelder in-place mit dem Platzhalter."""
        self.state.require_next(Stage.IMPUTE)
        defaults = self.config.get("processing", {}).get("impute_defaults", DEFAULT_IMPUTATIONS)
        replaced = impute_missing(self.typed_df, defaults)
        self.state.mark_done(Stage.IMPUTE)
        self._validate(self.typed_df, "Clean-DF")
        self._save_snapshot("clean", self.typed_df)
        return replaced

    def backup(self) -> pd.DataFrame:
        self.state.require_next(Stage.BACKUP)
        self.backup_df = backup_table(self.typed_df)
        self.state.mark_done(Stage.BACKUP)
        self._save_snapshot("backup", self.backup_df)
        return self.backup_df

    def dedup(self) -> pd.DataFrame:
        """Entfernt exakte Duplikate; setzt ein vorhandenes Backup voraus."""
        self.state.require_next(Stage.DEDUP)
        duplicates = find_duplicates(self.typed_df)
        if not duplicates.empty:
            try:
                save_aux_csv("duplicates", "Clean-DF", duplicates)
            except OSError as e:
                self.logger.error(f"Fehler beim Speichern der Duplikate: {e}", exc_info=True)

        self.dedup_df = deduplicate(self.typed_df)
        self.state.mark_done(Stage.DEDUP)
        self.logger.info(
            f"Dedup abgeschlossen: {len(self.backup_df)} -> {len(self.dedup_df)} Zeilen.")
        self._validate(self.dedup_df, "Dedup-DF", check_duplicates=True)
        self._save_snapshot("dedup", self.dedup_df)
        return self.dedup_df

    def report(self, name: str, **params) -> pd.DataFrame:
        """
        Führt einen Report auf der deduplizierten Tabelle aus.

        Raises:
            StageOrderError: Wenn die Dedup-Stage noch nicht gelaufen ist.
            UnknownReportError: Bei unbekanntem Report-Namen.
        """
        self.state.require_done(Stage.DEDUP)
        result = run_report(name, self.dedup_df, **params)

        output_cfg = self.config.get("output", {})
        report_dir_str = output_cfg.get("report_dir")
        if report_dir_str:
            report_path = self._resolve_path(report_dir_str) / f"{name}.csv"
            try:
                CsvLoader(report_path).load(result)
            except OSError as e:
                self.logger.error(
                    f"Fehler beim Speichern des Reports '{name}' nach {report_path}: {e}",
                    exc_info=True)
        return result

    def run(self, df: pd.DataFrame | None = None) -> dict[str, pd.DataFrame]:
        """Führt alle Stages und die konfigurierten Reports aus."""
        self.logger.info("Starte Netflix-Pipeline...")
        self.ingest(df)
        if self.raw_df.empty:
            self.logger.warning("Rohtabelle ist leer. Reports werden trotzdem erstellt.")
        self.normalize()
        self.impute()
        self.backup()
        self.dedup()

        reports_cfg: dict = self.config.get("reports", {}) or {}
        results: dict[str, pd.DataFrame] = {}
        for name, params in reports_cfg.items():
            results[name] = self.report(name, **(params or {}))
            self.logger.info(f"Report '{name}':\n{results[name]}")

        self.logger.info(
            f"Pipeline abgeschlossen. {len(self.dedup_df)} Titel in der deduplizierten Tabelle.")
        return results


def main(argv: list[str] | None = None) -> None:
    args = sys.argv[1:] if argv is None else argv
    config_file = args[0] if args else 'config.yaml'
    # Relative Pfade auf der Kommandozeile beziehen sich auf das Arbeitsverzeichnis
    if args and Path(config_file).exists():
        config_file = str(Path(config_file).resolve())
    pipeline = NetflixPipeline(config_filename=config_file)
    pipeline.run()


if __name__ == '__main__':
    main()
