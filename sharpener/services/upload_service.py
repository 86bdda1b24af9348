"""Изменяемый список загруженных файлов, которым владеет UI."""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, List, Optional, Tuple

from sharpener.models.image_model import UploadedImage
from sharpener.services.image_service import ImageService, is_image_file

logger = logging.getLogger(__name__)


class UploadService:
    def __init__(self, image_service: Optional[ImageService] = None) -> None:
        self._image_service = image_service or ImageService()
        self._items: List[UploadedImage] = []

    @property
    def items(self) -> Tuple[UploadedImage, ...]:
        return tuple(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def first(self) -> Optional[UploadedImage]:
        return self._items[0] if self._items else None

    def add_paths(self, paths: Iterable[str | Path]) -> List[UploadedImage]:
        """Добавляет файлы в конец списка.

        Файлы без MIME-типа `image/*` и отсутствующие файлы пропускаются.

        Returns:
            Только реально добавленные элементы, в порядке `paths`.
        """
        added: List[UploadedImage] = []
        for path in paths:
            if not is_image_file(path):
                logger.warning("Ignoring non-image file: %s", path)
                continue
            try:
                upload = self._image_service.load_upload(path)
            except FileNotFoundError as exc:
                logger.warning("%s", exc)
                continue
            added.append(upload)
        self._items.extend(added)
        return added

    def remove(self, upload_id: str) -> bool:
        before = len(self._items)
        self._items = [item for item in self._items if item.id != upload_id]
        return len(self._items) != before

    def clear(self) -> None:
        self._items.clear()
