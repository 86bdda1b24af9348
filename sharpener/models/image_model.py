"""Модели данных: загруженные файлы, параметры фильтров и результаты.

Принципы:
- SRP: только структура данных и проверка инвариантов, без обработки пикселей.
- Чистый код: неизменяемость (`frozen=True`) — настройки заменяются целиком.
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from numbers import Real
from typing import Optional

MAX_RADIUS = 5  # ограничение слайдера в UI, ядро принимает любой radius >= 0


def _check_int(name: str, value: object, low: int, high: Optional[int] = None) -> None:
    """Целое (не bool) в диапазоне [low, high]; иначе ValueError."""
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"{name} должен быть целым: {value!r}")
    if value < low or (high is not None and value > high):
        bounds = f"{low}..{high}" if high is not None else f">= {low}"
        raise ValueError(f"{name} вне диапазона {bounds}: {value}")


@dataclass(frozen=True)
class UploadedImage:
    """Файл, добавленный пользователем в список обработки.

    Fields:
        id: Непрозрачный идентификатор (9 символов).
        source_bytes: Исходные байты файла.
        display_name: Имя файла для отображения и построения имени результата.
        size_bytes: Размер файла, байт.
    """
    id: str
    source_bytes: bytes
    display_name: str
    size_bytes: int


@dataclass(frozen=True)
class FilterSettings:
    """Параметры нерезкого маскирования.

    Fields:
        strength: Сила, целое 0–100 (проценты).
        radius: Радиус окна размытия, px, целое >= 0.
        threshold: Порог величины разницы, >= 0.
    """
    strength: int = 50
    radius: int = 1
    threshold: float = 0.0

    def __post_init__(self) -> None:
        _check_int("strength", self.strength, 0, 100)
        _check_int("radius", self.radius, 0)
        if isinstance(self.threshold, bool) or not isinstance(self.threshold, Real):
            raise ValueError(f"threshold должен быть числом: {self.threshold!r}")
        if not math.isfinite(self.threshold):
            raise ValueError(f"threshold должен быть конечным: {self.threshold}")
        if self.threshold < 0:
            raise ValueError(f"threshold не может быть отрицательным: {self.threshold}")

    @property
    def strength_factor(self) -> float:
        return self.strength / 100.0


class ToneMode(Enum):
    STANDARD = "standard"
    HIGH_CONTRAST = "high-contrast"
    SEPIA = "sepia"


@dataclass(frozen=True)
class ToneSettings:
    """Параметры тонового фильтра (оттенки серого, контраст, сепия).

    `mode` принимает как `ToneMode`, так и его строковое значение.
    """
    mode: ToneMode = ToneMode.STANDARD
    intensity: int = 100

    def __post_init__(self) -> None:
        if not isinstance(self.mode, ToneMode):
            try:
                object.__setattr__(self, "mode", ToneMode(self.mode))
            except ValueError:
                raise ValueError(
                    f"'{self.mode}' не является режимом. Доступные: {[m.value for m in ToneMode]}"
                ) from None
        _check_int("intensity", self.intensity, 0, 100)

    @property
    def blend(self) -> float:
        return self.intensity / 100.0


@dataclass(frozen=True)
class ProcessedResult:
    """Закодированный результат для одного входного файла."""
    output_name: str
    output_bytes: bytes


@dataclass(frozen=True)
class ProcessOutcome:
    """Итог обработки одного файла: либо `result`, либо `error`."""
    upload: UploadedImage
    result: Optional[ProcessedResult] = None
    error: Optional[Exception] = None

    @property
    def ok(self) -> bool:
        return self.result is not None and self.error is None
