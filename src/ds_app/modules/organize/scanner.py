# src/ds_app/modules/organize/scanner.py
from __future__ import annotations

from typing import Any

from ds_app.core.media_types import IMAGE_EXTS, is_image_name

from .schemas import PhotoEntry
from .storage import Storage


class PhotoScanner:
    """Top-level image files of one folder, in the storage's own listing order."""

    def __init__(self, storage: Storage, exts: frozenset[str] | set[str] | None = None) -> None:
        self.storage = storage
        self.exts = frozenset(e.lower() for e in exts) if exts else IMAGE_EXTS

    def scan(self, root: Any) -> list[PhotoEntry]:
        return [
            PhotoEntry(name=name, handle=handle)
            for name, handle in self.storage.list_top_level_files(root)
            if is_image_name(name, self.exts)
        ]
