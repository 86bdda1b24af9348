"""Пиксельные фильтры над буфером RGBA (H, W, 4), uint8.

Все функции чистые: принимают буфер и параметры, возвращают новый буфер
тех же размеров. Альфа-канал не изменяется.
"""
from __future__ import annotations

import numpy as np

from sharpener.models.image_model import FilterSettings, ToneMode, ToneSettings

# Коэффициенты сепии, применяемые к уже усреднённому серому (суммы строк матрицы)
_SEPIA_R = 0.393 + 0.769 + 0.189
_SEPIA_G = 0.349 + 0.686 + 0.168
_SEPIA_B = 0.272 + 0.534 + 0.131


def _check_buffer(pixels: np.ndarray) -> None:
    if not isinstance(pixels, np.ndarray) or pixels.dtype != np.uint8:
        raise ValueError("Ожидается numpy-массив uint8")
    if pixels.ndim != 3 or pixels.shape[2] != 4:
        raise ValueError(f"Ожидается буфер RGBA формы (H, W, 4), получено {pixels.shape}")


def _store_u8(values: np.ndarray) -> np.ndarray:
    """Округление к ближайшему (половины к чётному) и насыщение в [0, 255]."""
    return np.clip(np.rint(values), 0, 255).astype(np.uint8)


def box_blur(pixels: np.ndarray, radius: int) -> np.ndarray:
    """Блочное размытие R/G/B по квадратному окну [-r, r] x [-r, r].

    Обрабатываются только пиксели с r <= x < W - r и r <= y < H - r;
    рамка шириной `radius` копируется без изменений. Сумма окна
    накапливается по одному смещению за раз, O(W * H * r^2).

    Returns:
        Новый буфер uint8 той же формы.

    Raises:
        ValueError: если буфер некорректен или radius < 0.
    """
    _check_buffer(pixels)
    if radius < 0:
        raise ValueError(f"radius не может быть отрицательным: {radius}")

    blurred = pixels.copy()
    h, w = pixels.shape[:2]
    r = int(radius)
    if r == 0 or h <= 2 * r or w <= 2 * r:
        return blurred

    rgb = pixels[..., :3].astype(np.uint32)
    acc = np.zeros((h - 2 * r, w - 2 * r, 3), dtype=np.uint32)
    for dy in range(-r, r + 1):
        for dx in range(-r, r + 1):
            acc += rgb[r + dy:h - r + dy, r + dx:w - r + dx]

    count = (2 * r + 1) ** 2
    blurred[r:h - r, r:w - r, :3] = _store_u8(acc / count)
    return blurred


def unsharp_mask(original: np.ndarray, blurred: np.ndarray, settings: FilterSettings) -> np.ndarray:
    """Нерезкое маскирование: original + (original - blurred) * strength.

    Пиксель меняется только если длина вектора разницы по R/G/B строго
    больше `settings.threshold`. Значения насыщаются в [0, 255].
    """
    _check_buffer(original)
    _check_buffer(blurred)
    if original.shape != blurred.shape:
        raise ValueError(f"Размеры буферов не совпадают: {original.shape} vs {blurred.shape}")

    orig = original[..., :3].astype(np.float64)
    delta = orig - blurred[..., :3].astype(np.float64)
    magnitude = np.sqrt(np.sum(delta * delta, axis=-1))
    gate = magnitude > settings.threshold

    sharpened = _store_u8(orig + delta * settings.strength_factor)
    out = original.copy()
    out[..., :3] = np.where(gate[..., None], sharpened, original[..., :3])
    return out


def sharpen(pixels: np.ndarray, settings: FilterSettings) -> np.ndarray:
    """Размытие и затем маскирование: `(buffer, settings) -> buffer`."""
    blurred = box_blur(pixels, settings.radius)
    return unsharp_mask(pixels, blurred, settings)


def apply_tone(pixels: np.ndarray, settings: ToneSettings) -> np.ndarray:
    """Оттенки серого / высокий контраст / сепия со смешиванием по интенсивности."""
    _check_buffer(pixels)
    rgb = pixels[..., :3].astype(np.float64)
    gray = rgb.sum(axis=-1) / 3.0

    if settings.mode is ToneMode.HIGH_CONTRAST:
        gray = np.where(gray > 128, 255.0, 0.0)

    if settings.mode is ToneMode.SEPIA:
        toned = np.stack(
            [
                np.minimum(255.0, gray * _SEPIA_R),
                np.minimum(255.0, gray * _SEPIA_G),
                np.minimum(255.0, gray * _SEPIA_B),
            ],
            axis=-1,
        )
    else:
        toned = np.repeat(gray[..., None], 3, axis=-1)

    blend = settings.blend
    out = pixels.copy()
    out[..., :3] = _store_u8(toned * blend + rgb * (1.0 - blend))
    return out
