from __future__ import annotations

from typing import Callable, Optional

import customtkinter as ctk


class BottomBar(ctk.CTkFrame):
    def __init__(self, master: ctk.CTk, **kwargs) -> None:
        super().__init__(master, height=64, **kwargs)

        # callbacks
        self.on_compare_mode_change: Optional[Callable[[str], None]] = None
        self.on_wipe_change: Optional[Callable[[int], None]] = None
        self.on_process: Optional[Callable[[], None]] = None
        self.on_save: Optional[Callable[[], None]] = None

        # layout
        self.grid_rowconfigure(0, weight=1)
        self.grid_columnconfigure(3, weight=1)  # progress stretches

        # Compare
        self._compare_menu = ctk.CTkOptionMenu(
            self, values=["Нет", "Шторка", "2-up"], command=self._on_compare_mode
        )
        self._compare_menu.set("Нет")
        self._compare_menu.grid(row=0, column=0, padx=(10, 6), pady=8, sticky="w")

        # Wipe slider (hidden by default)
        self._wipe_value = ctk.StringVar(value="50%")
        self._wipe_slider = ctk.CTkSlider(self, from_=0, to=100, number_of_steps=100, command=self._on_wipe_slider)
        self._wipe_slider.set(50)
        self._wipe_value_label = ctk.CTkLabel(self, textvariable=self._wipe_value, width=40, anchor="w")
        self._toggle_wipe_controls(visible=False)

        # Progress + status
        self._progress = ctk.CTkProgressBar(self)
        self._progress.set(0)
        self._progress.grid(row=0, column=3, padx=6, pady=8, sticky="ew")
        self._status = ctk.StringVar(value="Добавьте изображения")
        self._status_label = ctk.CTkLabel(self, textvariable=self._status, width=220, anchor="w")
        self._status_label.grid(row=0, column=4, padx=6, pady=8, sticky="w")

        # Actions
        self._process_btn = ctk.CTkButton(self, text="Обработать", width=120, command=self._emit_process)
        self._process_btn.grid(row=0, column=5, padx=6, pady=8)
        self._save_btn = ctk.CTkButton(self, text="Сохранить…", width=120, command=self._emit_save, state="disabled")
        self._save_btn.grid(row=0, column=6, padx=(6, 10), pady=8)

    # public API (sync from controller)
    def set_status(self, text: str) -> None:
        self._status.set(text)

    def set_progress(self, done: int, total: int) -> None:
        self._progress.set(done / total if total else 0)

    def set_busy(self, busy: bool) -> None:
        self._process_btn.configure(state="disabled" if busy else "normal")

    def set_save_enabled(self, enabled: bool) -> None:
        self._save_btn.configure(state="normal" if enabled else "disabled")

    # events
    def _on_compare_mode(self, value: str) -> None:
        self._toggle_wipe_controls(visible=(value == "Шторка"))
        if self.on_compare_mode_change:
            self.on_compare_mode_change(value)

    def _on_wipe_slider(self, value: float) -> None:
        percent = int(round(value))
        self._wipe_value.set(f"{percent}%")
        if self.on_wipe_change:
            self.on_wipe_change(percent)

    def _emit_process(self) -> None:
        if self.on_process:
            self.on_process()

    def _emit_save(self) -> None:
        if self.on_save:
            self.on_save()

    # helpers
    def _toggle_wipe_controls(self, visible: bool) -> None:
        if visible:
            self._wipe_slider.grid(row=0, column=1, padx=6, pady=8, sticky="ew")
            self._wipe_value_label.grid(row=0, column=2, padx=(0, 6), pady=8, sticky="w")
        else:
            self._wipe_slider.grid_remove()
            self._wipe_value_label.grid_remove()
