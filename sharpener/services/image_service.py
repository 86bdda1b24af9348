"""Кодек изображений и загрузка файлов с диска.

Принципы:
- SRP: `ImageCodec` только переводит байты в буфер пикселей и обратно,
  `ImageService` только читает файлы и упаковывает метаданные.
- DIP: драйвер обработки получает кодек через конструктор, в тестах его
  заменяет фейк с тем же интерфейсом.
"""
from __future__ import annotations

import io
import logging
import mimetypes
import uuid
from pathlib import Path

import numpy as np
from PIL import Image, ImageOps, UnidentifiedImageError

from sharpener.models.image_model import UploadedImage
from sharpener.services.errors import CanvasUnavailableError, DecodeError, EncodeError

logger = logging.getLogger(__name__)

JPEG_QUALITY = 90


class ImageCodec:
    """Декодирование через Pillow и кодирование результата в JPEG или PNG."""

    def __init__(self, format: str = "JPEG", quality: int = JPEG_QUALITY) -> None:
        self.format = format.upper()
        if self.format not in ("JPEG", "PNG"):
            raise ValueError(f"Неподдерживаемый формат вывода: {format}")
        self.quality = quality

    def decode(self, data: bytes) -> Image.Image:
        """Распознаёт байты как изображение.

        Raises:
            DecodeError: пустые, повреждённые или неподдерживаемые данные.
        """
        if not data:
            raise DecodeError("пустой файл")
        try:
            bitmap = Image.open(io.BytesIO(data))
            bitmap.load()
        except (UnidentifiedImageError, Image.DecompressionBombError) as exc:
            raise DecodeError(f"файл не является изображением: {exc}") from exc
        except (OSError, SyntaxError, ValueError) as exc:
            raise DecodeError(f"не удалось декодировать изображение: {exc}") from exc
        return bitmap

    def rasterize(self, bitmap: Image.Image) -> np.ndarray:
        """Переносит изображение в буфер RGBA (H, W, 4) uint8.

        Ориентация из EXIF применяется до растеризации, поэтому снимок
        с Orientation=6 даёт буфер повёрнутой геометрии.

        Raises:
            CanvasUnavailableError: нулевой размер или не хватило памяти.
        """
        width, height = bitmap.size
        if width <= 0 or height <= 0:
            raise CanvasUnavailableError(f"недопустимый размер {width}x{height}")
        try:
            upright = ImageOps.exif_transpose(bitmap)
            width, height = upright.size
            rgba = upright if upright.mode == "RGBA" else upright.convert("RGBA")
            pixels = np.array(rgba, dtype=np.uint8)
        except MemoryError as exc:
            raise CanvasUnavailableError(f"не удалось выделить буфер {width}x{height}") from exc
        except (OSError, ValueError) as exc:
            raise DecodeError(f"режим {bitmap.mode} не переводится в RGBA: {exc}") from exc
        if pixels.shape != (height, width, 4):
            raise CanvasUnavailableError(f"неожиданная форма буфера {pixels.shape}")
        return pixels

    def encode(self, pixels: np.ndarray) -> bytes:
        """Кодирует буфер RGBA.

        JPEG не хранит альфу: изображение накладывается на чёрный фон,
        полностью прозрачные пиксели становятся чёрными.

        Raises:
            EncodeError: если Pillow не смог записать результат.
        """
        buf = io.BytesIO()
        try:
            image = Image.fromarray(pixels)
            if self.format == "JPEG":
                flat = Image.new("RGB", image.size, 0)
                flat.paste(image.convert("RGB"), mask=image.getchannel("A"))
                flat.save(buf, format="JPEG", quality=self.quality)
            else:
                image.save(buf, format="PNG")
        except (OSError, ValueError, TypeError, KeyError) as exc:
            raise EncodeError(f"не удалось закодировать {self.format}: {exc}") from exc
        return buf.getvalue()


def is_image_file(file_path: str | Path) -> bool:
    """Фильтр `image/*` по расширению файла."""
    mime, _encoding = mimetypes.guess_type(str(file_path))
    return mime is not None and mime.startswith("image/")


class ImageService:
    def load_upload(self, file_path: str | Path) -> UploadedImage:
        """Читает файл с диска и возвращает его как `UploadedImage`.

        Содержимое не декодируется: повреждённый файл обнаружится
        при обработке и будет пропущен.

        Raises:
            FileNotFoundError: если путь не существует или не указывает на файл.
        """
        path = Path(file_path)
        if not path.exists() or not path.is_file():
            raise FileNotFoundError(f"Файл не найден: {path}")

        data = path.read_bytes()
        logger.debug("Loaded %s (%d bytes)", path.name, len(data))
        return UploadedImage(
            id=uuid.uuid4().hex[:9],
            source_bytes=data,
            display_name=path.name,
            size_bytes=len(data),
        )
