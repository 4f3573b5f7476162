# src/ds_app/modules/organize/extractor.py
from __future__ import annotations

import re
from collections.abc import Mapping, Sequence
from datetime import date
from io import BytesIO
from typing import Any

import exifread
from PIL import ExifTags, Image
from pillow_heif import register_heif_opener

from ds_app.core.logging import get_logger

log = get_logger(__name__)

DATE_TIME_ORIGINAL = "DateTimeOriginal"
DATE_TIME_DIGITIZED = "DateTimeDigitized"
DATE_TIME = "DateTime"

# Capture time first, the generic "file changed" DateTime last.
DEFAULT_TAG_ORDER: tuple[str, ...] = (DATE_TIME_ORIGINAL, DATE_TIME_DIGITIZED, DATE_TIME)
# Order used by the old browser tool (generic DateTime wins).
REFERENCE_TAG_ORDER: tuple[str, ...] = (DATE_TIME, DATE_TIME_ORIGINAL, DATE_TIME_DIGITIZED)

_EXIF_IDS = {
    DATE_TIME_ORIGINAL: ExifTags.Base.DateTimeOriginal,
    DATE_TIME_DIGITIZED: ExifTags.Base.DateTimeDigitized,
    DATE_TIME: ExifTags.Base.DateTime,
}
_EXIFREAD_KEYS = {
    DATE_TIME_ORIGINAL: "EXIF DateTimeOriginal",
    DATE_TIME_DIGITIZED: "EXIF DateTimeDigitized",
    DATE_TIME: "Image DateTime",
}

# "YYYY:MM:DD HH:MM:SS" (or a bare "YYYY:MM:DD"); only the date part is used
_DATE_RE = re.compile(r"^(\d{4}):(\d{2}):(\d{2})(?: |$)")


class MetadataDateExtractor:
    """
    Pull the capture day out of raw image bytes.

    Lookup chain: Pillow EXIF (IFD0 + Exif IFD), then textual image-info fields
    (PNG tEXt and friends). If Pillow cannot open the container at all, exifread
    gets a try on the same bytes. Anything unreadable degrades to ``None``.
    """

    _HEIF_REGISTERED = False  # lazy, best-effort

    def __init__(self, tag_order: Sequence[str] = DEFAULT_TAG_ORDER) -> None:
        unknown = [t for t in tag_order if t not in _EXIF_IDS]
        if unknown or not tag_order:
            raise ValueError(f"Unsupported tag order: {list(tag_order)}")
        self.tag_order = tuple(tag_order)
        self._ensure_heif_registered()

    @classmethod
    def _ensure_heif_registered(cls) -> None:
        if cls._HEIF_REGISTERED:
            return
        try:
            register_heif_opener()
        except Exception as e:
            log.debug("HEIF opener unavailable: %s", e)
        cls._HEIF_REGISTERED = True

    def extract(self, data: bytes) -> date | None:
        if not data:
            return None
        try:
            found = self._from_pillow(data)
        except Exception as e:
            log.debug("Pillow could not read image (%s); trying exifread", e)
            found = self._from_exifread(data)
        return found

    __call__ = extract

    # ---- readers ----------------------------------------------------------------

    def _from_pillow(self, data: bytes) -> date | None:
        with Image.open(BytesIO(data)) as im:
            exif = im.getexif()
            sub = exif.get_ifd(ExifTags.IFD.Exif)
            values = {
                name: sub.get(tag_id, exif.get(tag_id))
                for name, tag_id in _EXIF_IDS.items()
            }
            found = self._first_date(values)
            if found is None:
                # textual fallback: tEXt/iTXt chunks surface as plain info keys
                found = self._first_date(im.info)
        return found

    def _from_exifread(self, data: bytes) -> date | None:
        try:
            tags = exifread.process_file(BytesIO(data), details=False)
        except Exception as e:
            log.debug("exifread failed: %s", e)
            return None
        values = {name: tags.get(key) for name, key in _EXIFREAD_KEYS.items()}
        return self._first_date(values)

    def _first_date(self, values: Mapping[str, Any]) -> date | None:
        for name in self.tag_order:
            parsed = self.parse_date(values.get(name))
            if parsed is not None:
                return parsed
        return None

    # ---- parsing ----------------------------------------------------------------

    @staticmethod
    def parse_date(value: Any) -> date | None:
        """
        Parse the date part of an EXIF timestamp (``YYYY:MM:DD``, colons and
        two-digit fields only); ``None`` when absent or malformed.
        """
        if value is None:
            return None
        if isinstance(value, bytes):
            value = value.decode(errors="ignore")
        text = str(value).replace("\x00", "").strip()
        m = _DATE_RE.match(text)
        if not m:
            return None
        try:
            return date(int(m.group(1)), int(m.group(2)), int(m.group(3)))
        except ValueError:
            return None
