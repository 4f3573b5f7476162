# src/ds_app/core/media_types.py
from __future__ import annotations

# Formats a browser/phone export commonly produces; matched case-insensitively
IMAGE_EXTS: frozenset[str] = frozenset(
    {
        ".jpg",
        ".jpeg",
        ".png",
        ".gif",
        ".bmp",
        ".webp",
        ".heic",
        ".heif",
    }
)


def is_image_name(name: str, exts: frozenset[str] | set[str] = IMAGE_EXTS) -> bool:
    lowered = name.lower()
    return any(lowered.endswith(ext) for ext in exts)
