"""Ошибки обработки одного файла.

Все три перехватываются на границе обработки файла и превращаются
в пропуск этого файла, пакет при этом продолжается.
"""
from __future__ import annotations

from typing import Optional


class ProcessingError(Exception):
    def __init__(self, message: str, file_name: Optional[str] = None) -> None:
        super().__init__(message)
        self.file_name = file_name

    def __str__(self) -> str:
        base = super().__str__()
        return f"{self.file_name}: {base}" if self.file_name else base


class DecodeError(ProcessingError):
    """Байты не распознаны как изображение."""


class CanvasUnavailableError(ProcessingError):
    """Не удалось выделить буфер пикселей под изображение."""


class EncodeError(ProcessingError):
    """Не удалось закодировать результат."""
