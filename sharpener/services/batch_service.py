"""Пакетная обработка: последовательный прогон драйвера по списку файлов."""
from __future__ import annotations

import logging
from typing import Any, Callable, Iterable, Optional

from sharpener.models.batch_model import BatchReport, BatchState
from sharpener.models.image_model import UploadedImage
from sharpener.services.image_processor import ImageProcessor

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[int, int], None]


class BatchService:
    """Запускает `ImageProcessor` для каждого файла по очереди.

    Список файлов и настройки фиксируются в начале прогона. Результаты
    успешных файлов идут в порядке входа, ошибочные файлы попадают
    в `failures` и в результаты не входят.
    """

    def __init__(self, processor: ImageProcessor) -> None:
        self.processor = processor
        self._state = BatchState.IDLE

    @property
    def state(self) -> BatchState:
        return self._state

    def run(
        self,
        uploads: Iterable[UploadedImage],
        settings: Any,
        on_progress: Optional[ProgressCallback] = None,
    ) -> BatchReport:
        items = tuple(uploads)
        snapshot = settings
        total = len(items)

        self._state = BatchState.RUNNING
        report = BatchReport(state=BatchState.RUNNING)
        logger.info("Batch started: %d file(s), settings=%s", total, snapshot)
        try:
            for index, upload in enumerate(items, start=1):
                outcome = self.processor.try_process(upload, snapshot)
                if outcome.ok:
                    report.results.append(outcome.result)
                else:
                    report.failures.append(outcome)
                report.attempted = index
                if on_progress:
                    on_progress(index, total)
        except Exception:
            self._state = BatchState.IDLE
            raise

        report.state = BatchState.COMPLETED_WITH_SKIPS if report.failures else BatchState.COMPLETED
        self._state = report.state
        logger.info(
            "Batch finished: %d processed, %d skipped", report.success_count, report.skipped_count
        )
        return report
