"""Виджет предпросмотра: «до/после» первого файла списка.

Принципы:
- SRP: только отображение; никаких вычислений над пикселями, кроме масштабирования.
- Масштаб всегда «вписать в окно», пересчитывается при изменении размера канвы.
"""
from __future__ import annotations

from typing import Optional

import customtkinter as ctk
import tkinter as tk
from PIL import Image, ImageTk

_GAP = 16
_COMPARE_MODES = {"Нет": "off", "Шторка": "wipe", "2-up": "side_by_side"}


class ImageViewer(ctk.CTkFrame):
    """Канва с режимами: только результат, шторка и side-by-side."""
    def __init__(self, master: ctk.CTk | tk.Misc, **kwargs) -> None:
        super().__init__(master, **kwargs)
        self.grid_rowconfigure(0, weight=1)
        self.grid_columnconfigure(0, weight=1)

        self._canvas = tk.Canvas(self, highlightthickness=0, bg=self._get_canvas_bg())
        self._canvas.grid(row=0, column=0, sticky="nsew")

        self._original_image: Optional[Image.Image] = None
        self._processed_image: Optional[Image.Image] = None
        # PhotoImage must stay referenced while on the canvas
        self._tk_images: list[ImageTk.PhotoImage] = []

        self._compare_mode: str = "off"
        self._wipe_ratio: float = 0.5

        self._canvas.bind("<Configure>", lambda _e: self._render_image())

    # ---- Public API ----
    def set_image(self, image: Optional[Image.Image]) -> None:
        """Устанавливает исходное изображение (или очищает канву при None)."""
        self._original_image = image
        self._processed_image = None
        self._render_image()

    def set_processed_image(self, image: Optional[Image.Image]) -> None:
        """Устанавливает результат предпросмотра и перерисовывает канву."""
        self._processed_image = image
        self._render_image()

    def set_compare_mode(self, mode: str) -> None:
        """Режим сравнения: 'Нет' | 'Шторка' | '2-up'."""
        self._compare_mode = _COMPARE_MODES.get(mode, "off")
        self._render_image()

    def set_wipe_percent(self, percent: int) -> None:
        self._wipe_ratio = max(0.0, min(1.0, percent / 100.0))
        if self._compare_mode == "wipe":
            self._render_image()

    # ---- Internals ----
    def _fit_scale(self, content_w: int, content_h: int) -> float:
        canvas_w = max(1, int(self._canvas.winfo_width()))
        canvas_h = max(1, int(self._canvas.winfo_height()))
        if content_w == 0 or content_h == 0:
            return 1.0
        return max(0.01, min(1.0, canvas_w / content_w, canvas_h / content_h))

    def _place(self, image: Image.Image, x: int, y: int) -> None:
        photo = ImageTk.PhotoImage(image)
        self._tk_images.append(photo)
        self._canvas.create_image(x, y, image=photo, anchor="nw")

    def _render_image(self) -> None:
        self._canvas.delete("all")
        self._tk_images.clear()
        if self._original_image is None:
            return

        img_w, img_h = self._original_image.size
        after = self._processed_image
        side_by_side = self._compare_mode == "side_by_side" and after is not None

        content_w = img_w * 2 + _GAP if side_by_side else img_w
        scale = self._fit_scale(content_w, img_h)
        scaled_w = max(1, int(img_w * scale))
        scaled_h = max(1, int(img_h * scale))

        before = self._original_image.resize((scaled_w, scaled_h), Image.Resampling.LANCZOS)
        resized_after = after.resize((scaled_w, scaled_h), Image.Resampling.LANCZOS) if after else None

        total_w = scaled_w * 2 + _GAP if side_by_side else scaled_w
        ox = max(0, (int(self._canvas.winfo_width()) - total_w) // 2)
        oy = max(0, (int(self._canvas.winfo_height()) - scaled_h) // 2)

        if resized_after is None:
            self._place(before, ox, oy)
        elif side_by_side:
            self._place(before, ox, oy)
            self._place(resized_after, ox + scaled_w + _GAP, oy)
        elif self._compare_mode == "wipe":
            split = int(round(scaled_w * self._wipe_ratio))
            if split > 0:
                self._place(before.crop((0, 0, split, scaled_h)), ox, oy)
            if split < scaled_w:
                self._place(resized_after.crop((split, 0, scaled_w, scaled_h)), ox + split, oy)
        else:
            self._place(resized_after, ox, oy)

    def _get_canvas_bg(self) -> str:
        return "#1f1f1f" if ctk.get_appearance_mode().lower() == "dark" else "#f2f2f2"
