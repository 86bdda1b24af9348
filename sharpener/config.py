"""Настройки приложения: значения по умолчанию и необязательный YAML-файл.

Пример файла::

    sharpen:
      strength: 70
      radius: 2
      threshold: 5
    tone:
      mode: sepia
      intensity: 80
    jpeg_quality: 85
    preview_delay_ms: 300
    log_level: DEBUG
"""
from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from sharpener.models.image_model import FilterSettings, ToneSettings

CONFIG_ENV_VAR = "SHARPENER_CONFIG"

_TOP_LEVEL_KEYS = {"sharpen", "tone", "jpeg_quality", "preview_delay_ms", "log_level"}


@dataclass(frozen=True)
class AppConfig:
    sharpen: FilterSettings = field(default_factory=FilterSettings)
    tone: ToneSettings = field(default_factory=ToneSettings)
    jpeg_quality: int = 90
    preview_delay_ms: int = 250
    log_level: str = "INFO"

    def __post_init__(self) -> None:
        if not 1 <= self.jpeg_quality <= 100:
            raise ValueError(f"jpeg_quality вне диапазона 1..100: {self.jpeg_quality}")
        if self.preview_delay_ms < 0:
            raise ValueError(f"preview_delay_ms не может быть отрицательным: {self.preview_delay_ms}")


def _section(raw: Dict[str, Any], key: str) -> Dict[str, Any]:
    value = raw.get(key) or {}
    if not isinstance(value, dict):
        raise ValueError(f"Секция '{key}' должна быть словарём")
    return value


def load_config(path: Optional[str | Path] = None) -> AppConfig:
    """Загружает конфигурацию; без пути читает `SHARPENER_CONFIG`, иначе — умолчания.

    Raises:
        FileNotFoundError: если указанный файл не существует.
        ValueError: неизвестные ключи или недопустимые значения.
    """
    if path is None:
        path = os.environ.get(CONFIG_ENV_VAR) or None
    if path is None:
        return AppConfig()

    config_path = Path(path)
    if not config_path.is_file():
        raise FileNotFoundError(f"Файл конфигурации не найден: {config_path}")

    with open(config_path, "r", encoding="utf-8") as f:
        raw = yaml.safe_load(f) or {}
    if not isinstance(raw, dict):
        raise ValueError("Конфигурация должна быть словарём верхнего уровня")

    unknown = set(raw) - _TOP_LEVEL_KEYS
    if unknown:
        raise ValueError(f"Неизвестные ключи конфигурации: {sorted(unknown)}")

    try:
        sharpen = FilterSettings(**_section(raw, "sharpen"))
        tone = ToneSettings(**_section(raw, "tone"))
    except TypeError as exc:
        raise ValueError(f"Некорректные параметры фильтра: {exc}") from exc

    defaults = AppConfig()
    return AppConfig(
        sharpen=sharpen,
        tone=tone,
        jpeg_quality=int(raw.get("jpeg_quality", defaults.jpeg_quality)),
        preview_delay_ms=int(raw.get("preview_delay_ms", defaults.preview_delay_ms)),
        log_level=str(raw.get("log_level", defaults.log_level)).upper(),
    )
