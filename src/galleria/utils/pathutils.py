"""Utilities for working with filesystem paths inside an album."""

from __future__ import annotations

from pathlib import Path

from ..config import WORK_DIR_NAME


def ensure_work_dir(root: Path, name: str = WORK_DIR_NAME) -> Path:
    """Ensure that the album work directory exists and return it."""

    work_dir = root / name
    work_dir.mkdir(parents=True, exist_ok=True)
    return work_dir


def is_hidden(path: Path) -> bool:
    """Return ``True`` for dot-files such as ``.DS_Store`` or ``._IMG_0001.jpg``."""

    return path.name.startswith(".")


def resolve_against(base: Path, target: str | Path) -> Path:
    """Return *target* as an absolute path, anchoring relative paths at *base*."""

    candidate = Path(target).expanduser()
    if not candidate.is_absolute():
        candidate = base / candidate
    return candidate.resolve()
