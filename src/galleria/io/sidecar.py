"""Read/write helpers for ``<image>.json`` sidecar files."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from ..config import SIDECAR_SUFFIX
from ..errors import PersistenceError
from ..schemas import ValidationError, validate_image_sidecar
from ..utils.jsonio import read_json, write_json
from ..utils.logging import get_logger

LOGGER = get_logger("sidecar")

SIDECAR_KEYS = ("title", "type", "description", "width", "height")


def sidecar_path_for_image(image_path: Path) -> Path:
    """Return the sidecar path for *image_path*: the full name plus the suffix."""

    return image_path.with_name(image_path.name + SIDECAR_SUFFIX)


def is_sidecar(path: Path) -> bool:
    """Return ``True`` when *path* looks like the sidecar of a sibling file."""

    if not path.name.endswith(SIDECAR_SUFFIX):
        return False
    owner = path.with_name(path.name[: -len(SIDECAR_SUFFIX)])
    return bool(owner.name) and owner.is_file()


def load_sidecar(image_path: Path) -> Optional[Dict[str, Any]]:
    """Return the sidecar record stored next to *image_path*, or ``None``.

    A missing, unreadable, undecodable or structurally invalid sidecar is
    reported as ``None`` so the image keeps its derived defaults.
    """

    sidecar_path = sidecar_path_for_image(image_path)
    if not sidecar_path.exists():
        return None
    try:
        data = read_json(sidecar_path)
        validate_image_sidecar(data)
    except PersistenceError as exc:
        LOGGER.warning("Ignoring unreadable sidecar %s: %s", sidecar_path, exc)
        return None
    except ValueError as exc:
        LOGGER.warning("Ignoring malformed sidecar %s: %s", sidecar_path, exc)
        return None
    except ValidationError as exc:
        LOGGER.warning("Ignoring invalid sidecar %s: %s", sidecar_path, exc.message)
        return None
    return data


def save_sidecar(image_path: Path, record: Mapping[str, Any]) -> Path:
    """Persist *record* next to *image_path* and return the sidecar path."""

    sidecar_path = sidecar_path_for_image(image_path)
    write_json(sidecar_path, {key: record[key] for key in SIDECAR_KEYS})
    return sidecar_path


__all__ = ["SIDECAR_KEYS", "is_sidecar", "load_sidecar", "save_sidecar", "sidecar_path_for_image"]
