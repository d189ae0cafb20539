# netflix_pipeline/pipeline_state.py
import logging
from enum import Enum


class Stage(str, Enum):
    INGEST = "ingest"
    NORMALIZE = "normalize"
    IMPUTE = "impute"
    BACKUP = "backup"
    DEDUP = "dedup"


STAGE_ORDER: tuple[Stage, ...] = (
    Stage.INGEST, Stage.NORMALIZE, Stage.IMPUTE, Stage.BACKUP, Stage.DEDUP,
)


class StageOrderError(RuntimeError):
    """Stage wurde außerhalb der festen Reihenfolge oder doppelt aufgerufen."""


class PipelineState:
    """
    Merkt sich, welche Stages abgeschlossen sind.

    Jede Stage läuft genau einmal und nur, wenn alle vorherigen Stages
    abgeschlossen sind. Reports setzen die Dedup-Stage voraus.
    """

    def __init__(self):
        self.completed: list[Stage] = []

    @property
    def next_stage(self) -> Stage | None:
        if len(self.completed) < len(STAGE_ORDER):
            return STAGE_ORDER[len(self.completed)]
        return None

    def is_done(self, stage: Stage) -> bool:
        return stage in self.completed

    def require_next(self, stage: Stage) -> None:
        if self.is_done(stage):
            raise StageOrderError(f"Stage '{stage.value}' wurde bereits ausgeführt.")
        expected = self.next_stage
        if stage != expected:
            raise StageOrderError(
                f"Stage '{stage.value}' kann nicht ausgeführt werden, als nächstes ist '{expected.value}' dran.")

    def mark_done(self, stage: Stage) -> None:
        self.require_next(stage)
        self.completed.append(stage)
        logging.getLogger(__name__).debug(f"Stage '{stage.value}' abgeschlossen.")

    def require_done(self, stage: Stage) -> None:
        if not self.is_done(stage):
            raise StageOrderError(f"Stage '{stage.value}' muss zuerst ausgeführt werden.")
