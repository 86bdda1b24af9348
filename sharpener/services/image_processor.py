"""Обработка одного файла: декодирование, фильтр, кодирование."""
from __future__ import annotations

import logging
import time
from typing import Any, Callable, Optional, Sequence

import numpy as np

from sharpener.models.image_model import ProcessedResult, ProcessOutcome, UploadedImage
from sharpener.services.errors import ProcessingError
from sharpener.services.filter_service import apply_tone, sharpen
from sharpener.services.image_service import ImageCodec

logger = logging.getLogger(__name__)

PixelFilter = Callable[[np.ndarray, Any], np.ndarray]


class ImageProcessor:
    """Драйвер для одного изображения.

    Args:
        codec: Объект с методами `decode`, `rasterize`, `encode`.
        filter_fn: Чистая функция `(pixels, settings) -> pixels`.
        output_prefix: Префикс имени выходного файла.
    """

    def __init__(self, codec: ImageCodec, filter_fn: PixelFilter, output_prefix: str) -> None:
        self.codec = codec
        self.filter_fn = filter_fn
        self.output_prefix = output_prefix

    def output_name(self, upload: UploadedImage) -> str:
        return f"{self.output_prefix}{upload.display_name}"

    def process(self, upload: UploadedImage, settings: Any) -> ProcessedResult:
        """Обрабатывает один файл целиком.

        Raises:
            DecodeError, CanvasUnavailableError, EncodeError: с именем файла.
        """
        started = time.perf_counter()
        try:
            bitmap = self.codec.decode(upload.source_bytes)
            pixels = self.codec.rasterize(bitmap)
            filtered = self.filter_fn(pixels, settings)
            data = self.codec.encode(filtered)
        except ProcessingError as exc:
            if exc.file_name is None:
                exc.file_name = upload.display_name
            raise

        logger.debug(
            "Processed %s %s in %.3fs",
            upload.display_name,
            "x".join(str(d) for d in pixels.shape[1::-1]),
            time.perf_counter() - started,
        )
        return ProcessedResult(output_name=self.output_name(upload), output_bytes=data)

    def try_process(self, upload: UploadedImage, settings: Any) -> ProcessOutcome:
        """Как `process`, но ошибки файла возвращаются в `ProcessOutcome`."""
        try:
            result = self.process(upload, settings)
        except ProcessingError as exc:
            logger.warning("Skipping %s: %s", upload.display_name, exc)
            return ProcessOutcome(upload=upload, error=exc)
        return ProcessOutcome(upload=upload, result=result)

    def preview(self, uploads: Sequence[UploadedImage], settings: Any) -> Optional[ProcessedResult]:
        """Обрабатывает только первый файл списка; `None` для пустого списка."""
        if not uploads:
            return None
        return self.process(uploads[0], settings)


def sharpening_processor(codec: Optional[ImageCodec] = None) -> ImageProcessor:
    return ImageProcessor(codec or ImageCodec("JPEG"), sharpen, "sharpened-")


def grayscale_processor(codec: Optional[ImageCodec] = None) -> ImageProcessor:
    return ImageProcessor(codec or ImageCodec("PNG"), apply_tone, "grayscale-")
