"""Боковая панель: список файлов и параметры фильтров.

Принципы:
- SRP: управляет только UI параметров, не содержит алгоритмов.
- ISP: выдаёт параметры через компактные методы `get_*`, события через `on_*`.
"""
from __future__ import annotations

from typing import Callable, Iterable, Optional

import customtkinter as ctk

from sharpener.models.image_model import MAX_RADIUS, FilterSettings, ToneMode, ToneSettings, UploadedImage

TAB_SHARPEN = "Резкость"
TAB_TONE = "Оттенки серого"

_TONE_LABELS = {
    "Стандарт": ToneMode.STANDARD,
    "Высокий контраст": ToneMode.HIGH_CONTRAST,
    "Сепия": ToneMode.SEPIA,
}


def _format_size(size_bytes: int) -> str:
    size = float(size_bytes)
    for unit in ("Б", "КБ", "МБ"):
        if size < 1024:
            return f"{size:.0f} {unit}" if unit == "Б" else f"{size:.1f} {unit}"
        size /= 1024
    return f"{size:.1f} ГБ"


class Sidebar(ctk.CTkFrame):
    """Панель: файлы, вкладки «Резкость» и «Оттенки серого»."""
    def __init__(self, master: ctk.CTk, sharpen: FilterSettings, tone: ToneSettings, **kwargs) -> None:
        super().__init__(master, width=300, **kwargs)

        self.grid_columnconfigure(0, weight=1)

        # Callbacks
        self.on_add_files: Optional[Callable[[], None]] = None
        self.on_remove_file: Optional[Callable[[str], None]] = None
        self.on_clear_files: Optional[Callable[[], None]] = None
        self.on_settings_change: Optional[Callable[[], None]] = None

        # Files
        self._files_title = ctk.CTkLabel(self, text="Файлы", font=ctk.CTkFont(size=16, weight="bold"))
        self._files_title.grid(row=0, column=0, padx=8, pady=(8, 4), sticky="w")

        self._add_btn = ctk.CTkButton(self, text="Добавить изображения…", command=self._emit_add_files)
        self._add_btn.grid(row=1, column=0, padx=8, pady=(0, 6), sticky="ew")

        self._files_frame = ctk.CTkScrollableFrame(self, height=160)
        self._files_frame.grid(row=2, column=0, padx=8, pady=(0, 6), sticky="nsew")
        self._files_frame.grid_columnconfigure(0, weight=1)
        self._selected_id = ctk.StringVar(value="")

        buttons = ctk.CTkFrame(self, fg_color="transparent")
        buttons.grid(row=3, column=0, padx=8, pady=(0, 12), sticky="ew")
        buttons.grid_columnconfigure((0, 1), weight=1)
        self._remove_btn = ctk.CTkButton(buttons, text="Убрать", command=self._emit_remove_file)
        self._remove_btn.grid(row=0, column=0, padx=(0, 4), sticky="ew")
        self._clear_btn = ctk.CTkButton(buttons, text="Очистить", command=self._emit_clear_files)
        self._clear_btn.grid(row=0, column=1, padx=(4, 0), sticky="ew")

        # Processing tabs
        self._tabs = ctk.CTkTabview(self, command=self._emit_settings_change)
        self._tabs.grid(row=4, column=0, padx=8, pady=(0, 8), sticky="nsew")
        self._tabs.add(TAB_SHARPEN)
        self._tabs.add(TAB_TONE)
        self.grid_rowconfigure(4, weight=1)

        sharp_tab = self._tabs.tab(TAB_SHARPEN)
        sharp_tab.grid_columnconfigure(0, weight=1)
        self._strength_val = ctk.StringVar()
        self._radius_val = ctk.StringVar()
        self._threshold_val = ctk.StringVar()
        self._strength_slider = self._add_slider(
            sharp_tab, 0, "Сила:", self._strength_val, 0, 100, 100, sharpen.strength, "{:.0f}%"
        )
        self._radius_slider = self._add_slider(
            sharp_tab, 3, "Радиус, px:", self._radius_val, 0, MAX_RADIUS, MAX_RADIUS, min(sharpen.radius, MAX_RADIUS), "{:.0f}"
        )
        self._threshold_slider = self._add_slider(
            sharp_tab, 6, "Порог:", self._threshold_val, 0, 50, 50, min(sharpen.threshold, 50), "{:.0f}"
        )

        tone_tab = self._tabs.tab(TAB_TONE)
        tone_tab.grid_columnconfigure(0, weight=1)
        self._tone_mode_label = ctk.CTkLabel(tone_tab, text="Режим:")
        self._tone_mode_label.grid(row=0, column=0, padx=6, pady=(6, 2), sticky="w")
        self._tone_mode_menu = ctk.CTkOptionMenu(
            tone_tab, values=list(_TONE_LABELS), command=lambda _v: self._emit_settings_change()
        )
        self._tone_mode_menu.set(next(k for k, v in _TONE_LABELS.items() if v is tone.mode))
        self._tone_mode_menu.grid(row=1, column=0, padx=6, pady=(0, 6), sticky="ew")
        self._intensity_val = ctk.StringVar()
        self._intensity_slider = self._add_slider(
            tone_tab, 2, "Интенсивность:", self._intensity_val, 0, 100, 100, tone.intensity, "{:.0f}%"
        )

    # ---- Public API ----
    def active_tab(self) -> str:
        return self._tabs.get()

    def get_filter_settings(self) -> FilterSettings:
        return FilterSettings(
            strength=int(round(self._strength_slider.get())),
            radius=int(round(self._radius_slider.get())),
            threshold=float(round(self._threshold_slider.get())),
        )

    def get_tone_settings(self) -> ToneSettings:
        return ToneSettings(
            mode=_TONE_LABELS[self._tone_mode_menu.get()],
            intensity=int(round(self._intensity_slider.get())),
        )

    def set_files(self, uploads: Iterable[UploadedImage]) -> None:
        """Перестраивает список файлов; выбор сохраняется, если файл остался."""
        for child in self._files_frame.winfo_children():
            child.destroy()
        ids = []
        for row, upload in enumerate(uploads):
            ids.append(upload.id)
            ctk.CTkRadioButton(
                self._files_frame,
                text=f"{upload.display_name} ({_format_size(upload.size_bytes)})",
                variable=self._selected_id,
                value=upload.id,
            ).grid(row=row, column=0, padx=4, pady=2, sticky="w")
        if self._selected_id.get() not in ids:
            self._selected_id.set(ids[0] if ids else "")

    # ---- Internals ----
    def _add_slider(
        self,
        parent: ctk.CTkFrame,
        row: int,
        label: str,
        var: ctk.StringVar,
        from_: float,
        to: float,
        steps: int,
        initial: float,
        fmt: str,
    ) -> ctk.CTkSlider:
        def on_change(value: float) -> None:
            var.set(fmt.format(value))
            self._emit_settings_change()

        ctk.CTkLabel(parent, text=label).grid(row=row, column=0, padx=6, pady=(6, 2), sticky="w")
        slider = ctk.CTkSlider(parent, from_=from_, to=to, number_of_steps=steps, command=on_change)
        slider.set(initial)
        slider.grid(row=row + 1, column=0, padx=6, pady=(0, 2), sticky="ew")
        var.set(fmt.format(initial))
        ctk.CTkLabel(parent, textvariable=var, width=48, anchor="w").grid(
            row=row + 2, column=0, padx=6, pady=(0, 4), sticky="w"
        )
        return slider

    def _emit_add_files(self) -> None:
        if self.on_add_files:
            self.on_add_files()

    def _emit_remove_file(self) -> None:
        selected = self._selected_id.get()
        if selected and self.on_remove_file:
            self.on_remove_file(selected)

    def _emit_clear_files(self) -> None:
        if self.on_clear_files:
            self.on_clear_files()

    def _emit_settings_change(self) -> None:
        if self.on_settings_change:
            self.on_settings_change()
