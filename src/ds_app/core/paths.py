from __future__ import annotations

from pathlib import Path


def ensure_within_root(candidate: Path, root: Path) -> Path:
    """
    Guardrail: resolve and ensure `candidate` is under `root`.
    """
    candidate = candidate.resolve()
    root = root.resolve()
    if root not in candidate.parents and candidate != root:
        raise ValueError(f"{candidate} is outside of root {root}")
    return candidate


def child_path(root: Path, name: str) -> Path:
    """
    Build `root/name` for a direct child; nested or escaping names are rejected.
    """
    candidate = ensure_within_root(root / name, root)
    if candidate.parent != root.resolve():
        raise ValueError(f"{name!r} is not a direct child name")
    return candidate


def plain_folder_name(name: str) -> str:
    """
    Strip `name` and require a single path component (no separators, not `.`/`..`).
    """
    name = name.strip()
    if not name or name in {".", ".."} or "/" in name or "\\" in name:
        raise ValueError(f"must be a plain folder name: {name!r}")
    return name
