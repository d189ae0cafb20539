from abc import ABC, abstractmethod
import pandas as pd
from netflix_pipeline.utils.save_aux_csv import save_aux_csv

class BaseAdapter(ABC):
    def __init__(self, source_config: dict):
        self.config = source_config

    @abstractmethod
    def extract(self) -> pd.DataFrame:
        """Lädt Rohdaten als DataFrame (alle Felder als String)"""

    @abstractmethod
    def transform(self, data: pd.DataFrame) -> pd.DataFrame:
        """Prüft das Schema und bringt die Rohdaten in die kanonische Spaltenform"""

    def _log_aux_files(
        self,
        adapter_name: str,
        rejected_rows: list[dict],
    ) -> None:
        if rejected_rows:
            save_aux_csv("rejected", adapter_name, pd.DataFrame(rejected_rows))
