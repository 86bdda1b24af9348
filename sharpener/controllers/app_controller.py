"""Контроллер приложения: оркестрация UI и сервисов.

SOLID:
- SRP: класс управляет связями между UI и сервисами (без пиксельной математики).
- DIP: драйверы обработки получают кодек через конструктор.
Clean Code:
- Список файлов и текущие настройки живут только здесь; ядро получает их снимком.
"""
from __future__ import annotations

import io
import logging
from dataclasses import dataclass, field
from pathlib import Path
from tkinter import TclError, filedialog, messagebox
from typing import Any, List, Optional, Tuple

import customtkinter as ctk
from PIL import Image, ImageOps

from sharpener.config import AppConfig
from sharpener.models.image_model import ProcessedResult
from sharpener.services.batch_service import BatchService
from sharpener.services.errors import ProcessingError
from sharpener.services.image_processor import ImageProcessor, grayscale_processor, sharpening_processor
from sharpener.services.image_service import ImageCodec
from sharpener.services.upload_service import UploadService
from sharpener.ui.bottom_bar import BottomBar
from sharpener.ui.image_viewer import ImageViewer
from sharpener.ui.sidebar import TAB_TONE, Sidebar

logger = logging.getLogger(__name__)


@dataclass
class AppController:
    """Связывает элементы UI с прикладной логикой.

    Ответственности:
    - Бинд событий (UI -> контроллер).
    - Владение списком файлов через `UploadService`.
    - Отложенный предпросмотр первого файла при изменении настроек.
    - Запуск пакетной обработки и сохранение результатов.
    """
    viewer: ImageViewer
    sidebar: Sidebar
    bottom: BottomBar
    window: ctk.CTk
    config: AppConfig = field(default_factory=AppConfig)

    _uploads: UploadService = field(default_factory=UploadService)
    _processed: List[ProcessedResult] = field(default_factory=list)
    _preview_job: Optional[str] = None

    def __post_init__(self) -> None:
        self._sharpener = sharpening_processor(ImageCodec("JPEG", quality=self.config.jpeg_quality))
        self._toner = grayscale_processor()

    def bind_events(self) -> None:
        """Регистрирует обработчики; компоненты UI общаются только через контроллер."""
        self.sidebar.on_add_files = self._handle_add_files
        self.sidebar.on_remove_file = self._handle_remove_file
        self.sidebar.on_clear_files = self._handle_clear_files
        self.sidebar.on_settings_change = self._schedule_preview

        self.bottom.on_compare_mode_change = self.viewer.set_compare_mode
        self.bottom.on_wipe_change = self.viewer.set_wipe_percent
        self.bottom.on_process = self._handle_process
        self.bottom.on_save = self._handle_save

    # ---- Handlers ----
    def _handle_add_files(self) -> None:
        try:
            paths = filedialog.askopenfilenames(
                title="Выберите изображения",
                filetypes=(
                    ("Images", "*.png *.jpg *.jpeg *.bmp *.gif *.tiff *.webp"),
                    ("All files", "*.*"),
                ),
            )
        except TclError:
            # Silent fail if dialog cannot open
            return
        if not paths:
            return

        had_first = self._uploads.first()
        added = self._uploads.add_paths(paths)
        self._on_files_changed(first_changed=had_first is None and bool(added))

    def _handle_remove_file(self, upload_id: str) -> None:
        first = self._uploads.first()
        if self._uploads.remove(upload_id):
            self._on_files_changed(first_changed=first is not None and first.id == upload_id)

    def _handle_clear_files(self) -> None:
        self._uploads.clear()
        self._on_files_changed(first_changed=True)

    def _handle_process(self) -> None:
        if len(self._uploads) == 0:
            return
        processor, settings = self._current_tool()
        service = BatchService(processor)

        self.bottom.set_busy(True)
        self.bottom.set_status("Обработка…")

        def on_progress(done: int, total: int) -> None:
            self.bottom.set_progress(done, total)
            self.bottom.set_status(f"Обработано {done} из {total}")
            self.window.update_idletasks()

        try:
            report = service.run(self._uploads.items, settings, on_progress=on_progress)
        finally:
            self.bottom.set_busy(False)

        self._processed = list(report.results)
        self.bottom.set_save_enabled(bool(self._processed))
        self.bottom.set_status(f"Готово: {report.success_count}, пропущено: {report.skipped_count}")
        message = f"Обработано файлов: {report.success_count} из {report.attempted}."
        if report.failures:
            skipped = ", ".join(o.upload.display_name for o in report.failures)
            message += f"\nПропущены: {skipped}"
        messagebox.showinfo("Обработка завершена", message)

    def _handle_save(self) -> None:
        if not self._processed:
            messagebox.showwarning("Нет результатов", "Нет обработанных файлов для сохранения")
            return
        folder = filedialog.askdirectory(title="Папка для сохранения")
        if not folder:
            return
        target = Path(folder)
        for result in self._processed:
            (target / result.output_name).write_bytes(result.output_bytes)
        logger.info("Saved %d file(s) to %s", len(self._processed), target)
        self.bottom.set_status(f"Сохранено в {target}")

    # ---- Helpers ----
    def _current_tool(self) -> Tuple[ImageProcessor, Any]:
        if self.sidebar.active_tab() == TAB_TONE:
            return self._toner, self.sidebar.get_tone_settings()
        return self._sharpener, self.sidebar.get_filter_settings()

    def _on_files_changed(self, first_changed: bool) -> None:
        # results of an earlier run no longer match the list
        self._processed = []
        self.bottom.set_save_enabled(False)
        self.bottom.set_progress(0, 0)
        self.sidebar.set_files(self._uploads.items)
        count = len(self._uploads)
        self.bottom.set_status(f"Файлов: {count}" if count else "Добавьте изображения")
        if first_changed:
            self._show_original()
        self._schedule_preview()

    def _show_original(self) -> None:
        first = self._uploads.first()
        if first is None:
            self.viewer.set_image(None)
            return
        try:
            image = Image.open(io.BytesIO(first.source_bytes))
            image.load()
            image = ImageOps.exif_transpose(image)
        except (OSError, SyntaxError, ValueError):
            logger.warning("Cannot display %s", first.display_name)
            self.viewer.set_image(None)
            return
        self.viewer.set_image(image.convert("RGBA"))

    def _schedule_preview(self) -> None:
        """Перезапускает таймер предпросмотра (debounce)."""
        if self._preview_job is not None:
            self.window.after_cancel(self._preview_job)
        self._preview_job = self.window.after(self.config.preview_delay_ms, self._apply_preview)

    def _apply_preview(self) -> None:
        self._preview_job = None
        processor, settings = self._current_tool()
        try:
            result = processor.preview(self._uploads.items, settings)
        except ProcessingError as exc:
            logger.warning("Preview failed: %s", exc)
            self.viewer.set_processed_image(None)
            return
        if result is None:
            self.viewer.set_processed_image(None)
            return
        self.viewer.set_processed_image(Image.open(io.BytesIO(result.output_bytes)))
