"""Pytest configuration and fixtures."""

import io
import os
from datetime import datetime
from pathlib import Path

import piexif
import pytest
from PIL import Image

from ds_app.core.progress import Severity
from ds_app.modules.organize.storage import LocalStorage


def make_jpeg(original=None, digitized=None, generic=None) -> bytes:
    """Small JPEG with the given EXIF timestamp strings ('YYYY:MM:DD HH:MM:SS')."""
    zeroth, exif = {}, {}
    if generic:
        zeroth[piexif.ImageIFD.DateTime] = generic.encode()
    if original:
        exif[piexif.ExifIFD.DateTimeOriginal] = original.encode()
    if digitized:
        exif[piexif.ExifIFD.DateTimeDigitized] = digitized.encode()

    buf = io.BytesIO()
    img = Image.new("RGB", (8, 8), "red")
    if zeroth or exif:
        img.save(buf, "JPEG", exif=piexif.dump({"0th": zeroth, "Exif": exif}))
    else:
        img.save(buf, "JPEG")
    return buf.getvalue()


def write_photo(folder: Path, name: str, data: bytes, mtime: datetime | None = None) -> Path:
    path = folder / name
    path.write_bytes(data)
    if mtime is not None:
        ts = mtime.timestamp()
        os.utime(path, (ts, ts))
    return path


class RecordingSink:
    """ProgressSink that keeps everything it receives."""

    def __init__(self):
        self.ticks = []
        self.lines = []

    def tick(self, processed, total):
        self.ticks.append((processed, total))

    def log(self, message, severity=Severity.info):
        self.lines.append((message, Severity(severity)))

    def messages(self, severity=None):
        return [m for m, s in self.lines if severity is None or s == severity]


class FlakyStorage(LocalStorage):
    """LocalStorage that fails on demand for chosen names."""

    def __init__(self, fail_write=(), fail_remove=(), fail_folder=(), fail_read=()):
        self.fail_write = set(fail_write)
        self.fail_remove = set(fail_remove)
        self.fail_folder = set(fail_folder)
        self.fail_read = set(fail_read)

    def read_all(self, handle):
        if Path(handle).name in self.fail_read:
            raise OSError("unreadable")
        return super().read_all(handle)

    def ensure_subfolder(self, root, name):
        if name in self.fail_folder:
            raise PermissionError(f"cannot create {name}")
        return super().ensure_subfolder(root, name)

    def write_all(self, folder, name, data):
        if name in self.fail_write:
            raise OSError("disk full")
        return super().write_all(folder, name, data)

    def remove(self, root, name):
        if name in self.fail_remove:
            raise PermissionError("read-only source")
        super().remove(root, name)


@pytest.fixture
def photo_dir(tmp_path):
    """Empty source folder."""
    src = tmp_path / "photos"
    src.mkdir()
    return src


@pytest.fixture
def sink():
    return RecordingSink()


@pytest.fixture
def scenario_a(photo_dir):
    """Three photos over two days, written in a known order."""
    write_photo(photo_dir, "f1.jpg", make_jpeg(original="2024:01:15 10:00:00"))
    write_photo(photo_dir, "f2.jpg", make_jpeg(original="2024:01:15 23:00:00"))
    write_photo(photo_dir, "f3.jpg", make_jpeg(original="2024:02:01 00:00:00"))
    return photo_dir
