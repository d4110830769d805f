"""Default configuration values for galleria."""

from __future__ import annotations

from pathlib import Path
from typing import Final

# Hidden per-album folder holding the album record, its backups and locks.
WORK_DIR_NAME: Final[str] = ".galleria"
ALBUM_RECORD_NAME: Final[str] = "album.json"
RECORD_BACKUP_DIR_NAME: Final[str] = "record.bak"
RECORD_BACKUP_KEEP: Final[int] = 5
LOCK_DIR_NAME: Final[str] = "locks"

# Per-image sidecars live next to the image: ``IMG_0001.jpg.json``.
SIDECAR_SUFFIX: Final[str] = ".json"

LOCK_EXPIRE_SEC: Final[int] = 30
LOCK_TIMEOUT_SEC: Final[float] = 10.0
LOCK_POLL_SEC: Final[float] = 0.05

DEFAULT_TEMPLATE: Final[str] = "default"
TEMPLATE_PATH_ENV: Final[str] = "GALLERIA_TEMPLATE_PATH"
USER_TEMPLATE_DIR: Final[Path] = Path.home() / WORK_DIR_NAME / "templates"
BUILTIN_TEMPLATE_DIR: Final[Path] = Path(__file__).resolve().parent / "templates"

# Files written by the renderer into the destination tree.
PUBLISH_DATA_NAME: Final[str] = "album.json"
PUBLISH_IMAGE_DIR_NAME: Final[str] = "images"
