"""Состояние и итоговый отчёт пакетной обработки."""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List

from sharpener.models.image_model import ProcessedResult, ProcessOutcome


class BatchState(Enum):
    IDLE = "idle"
    RUNNING = "running"
    COMPLETED = "completed"
    COMPLETED_WITH_SKIPS = "completed_with_skips"


@dataclass
class BatchReport:
    """Отчёт о прогоне: успешные результаты в порядке входа и пропущенные файлы."""
    state: BatchState
    results: List[ProcessedResult] = field(default_factory=list)
    failures: List[ProcessOutcome] = field(default_factory=list)
    attempted: int = 0

    @property
    def success_count(self) -> int:
        return len(self.results)

    @property
    def skipped_count(self) -> int:
        return len(self.failures)
