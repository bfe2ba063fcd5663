# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Image object store on the local filesystem."""

from __future__ import annotations

import asyncio
import io
from pathlib import Path

from PIL import Image, ImageOps, UnidentifiedImageError

from catalog.application.interfaces import ObjectStore
from catalog.shared.logging import logger


class LocalImageStore(ObjectStore):
    """Renders uploads to fixed-size PNG files within configured root."""

    def __init__(self, root: Path) -> None:
        self._root = root
        self._root.mkdir(parents=True, exist_ok=True)

    def _resolve(self, object_id: str) -> Path:
        path = (self._root / f"{object_id}.png").resolve()
        if path.parent != self._root.resolve():
            msg = "Attempted directory traversal outside storage root"
            raise ValueError(msg)
        return path

    async def store(self, object_id: str, image_data: bytes, width: int, height: int) -> bool:
        return await asyncio.to_thread(self._store, object_id, image_data, width, height)

    async def remove(self, object_id: str) -> bool:
        return await asyncio.to_thread(self._remove, object_id)

    def _store(self, object_id: str, image_data: bytes, width: int, height: int) -> bool:
        try:
            file_path = self._resolve(object_id)
            with Image.open(io.BytesIO(image_data)) as source:
                rendered = ImageOps.fit(source.convert("RGBA"), (width, height))
            rendered.save(file_path, format="PNG")
        except (UnidentifiedImageError, ValueError, OSError):
            logger.exception(f"storage: store failed id={object_id}")
            return False
        logger.debug(f"storage: stored id={object_id} size={width}x{height}")
        return True

    def _remove(self, object_id: str) -> bool:
        try:
            file_path = self._resolve(object_id)
            # Already gone counts as removed.
            file_path.unlink(missing_ok=True)
        except (ValueError, OSError):
            logger.exception(f"storage: remove failed id={object_id}")
            return False
        logger.debug(f"storage: removed id={object_id}")
        return True

    def ensure_placeholder(self, object_id: str, width: int, height: int) -> Path:
        """Create a plain picture under ``object_id`` unless one already exists."""
        file_path = self._resolve(object_id)
        if not file_path.exists():
            Image.new("RGBA", (width, height), (200, 200, 200, 255)).save(file_path, format="PNG")
            logger.info(f"storage: created placeholder id={object_id}")
        return file_path

    def path_for(self, object_id: str) -> Path:
        return self._resolve(object_id)


__all__ = ["LocalImageStore"]
