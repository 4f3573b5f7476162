# src/ds_app/modules/organize/storage.py
from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime
from pathlib import Path
from typing import Any, Protocol, runtime_checkable

from ds_app.core.paths import child_path

Handle = Any


@runtime_checkable
class Storage(Protocol):
    """
    What the organizer needs from a backend. Handles are opaque: the engine only
    passes them back to the storage that produced them.
    """

    def list_top_level_files(self, root: Handle) -> Iterable[tuple[str, Handle]]: ...
    def read_all(self, handle: Handle) -> bytes: ...
    def last_modified(self, handle: Handle) -> datetime: ...
    def ensure_subfolder(self, root: Handle, name: str) -> Handle: ...
    def write_all(self, folder: Handle, name: str, data: bytes) -> Handle: ...
    def remove(self, root: Handle, name: str) -> None: ...


class LocalStorage(Storage):
    """Storage over the local filesystem; handles are `Path` objects."""

    def list_top_level_files(self, root: Path) -> Iterable[tuple[str, Path]]:
        root = Path(root)
        if not root.is_dir():
            raise NotADirectoryError(f"Not a directory: {root}")
        # natural enumeration order, no sort
        for p in root.iterdir():
            if p.is_file():
                yield p.name, p

    def read_all(self, handle: Path) -> bytes:
        return Path(handle).read_bytes()

    def last_modified(self, handle: Path) -> datetime:
        return datetime.fromtimestamp(Path(handle).stat().st_mtime)

    def ensure_subfolder(self, root: Path, name: str) -> Path:
        folder = child_path(Path(root), name)
        folder.mkdir(exist_ok=True)
        return folder

    def write_all(self, folder: Path, name: str, data: bytes) -> Path:
        dst = child_path(Path(folder), name)
        # overwrite-on-create; the context manager closes (finalizes) the write
        with open(dst, "wb") as fh:
            fh.write(data)
        return dst

    def remove(self, root: Path, name: str) -> None:
        child_path(Path(root), name).unlink()
