"""JSON helpers with atomic replacement of the target file."""

from __future__ import annotations

import json
import os
import shutil
import tempfile
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from ..config import RECORD_BACKUP_KEEP
from ..errors import PersistenceError


def read_json(path: Path) -> Any:
    """Return the decoded JSON document stored at *path*.

    ``OSError`` is reported as :class:`PersistenceError`. Decoding errors are
    left as :class:`json.JSONDecodeError` so callers can decide whether a
    malformed document is fatal.
    """

    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise PersistenceError(f"Could not read {path}: {exc}") from exc
    return json.loads(text)


def dump_json(data: Any) -> str:
    return json.dumps(data, ensure_ascii=False, indent=2, sort_keys=True) + "\n"


def write_json(
    path: Path,
    data: Any,
    *,
    backup_dir: Path | None = None,
    keep_backups: int = RECORD_BACKUP_KEEP,
) -> bool:
    """Write *data* to *path* through a temporary file and ``os.replace``.

    Returns ``False`` without touching the file when it already holds the
    same document. When *backup_dir* is given, the previous file is copied
    there first and only the newest *keep_backups* copies are retained.
    """

    payload = dump_json(data)
    tmp_name: str | None = None
    try:
        if path.exists():
            if _read_text_or_none(path) == payload:
                return False
            if backup_dir is not None:
                _backup(path, backup_dir, keep_backups)
        path.parent.mkdir(parents=True, exist_ok=True)
        with tempfile.NamedTemporaryFile(
            "w",
            encoding="utf-8",
            dir=path.parent,
            prefix=f".{path.name}.",
            suffix=".tmp",
            delete=False,
        ) as handle:
            tmp_name = handle.name
            handle.write(payload)
            handle.flush()
            os.fsync(handle.fileno())
        os.replace(tmp_name, path)
        tmp_name = None
    except OSError as exc:
        raise PersistenceError(f"Could not write {path}: {exc}") from exc
    finally:
        if tmp_name is not None:
            Path(tmp_name).unlink(missing_ok=True)
    return True


def _read_text_or_none(path: Path) -> str | None:
    try:
        return path.read_text(encoding="utf-8")
    except UnicodeDecodeError:
        return None


def _backup(path: Path, backup_dir: Path, keep: int) -> None:
    backup_dir.mkdir(parents=True, exist_ok=True)
    stamp = datetime.now(timezone.utc).strftime("%Y%m%dT%H%M%S%fZ")
    shutil.copy2(path, backup_dir / f"{path.stem}-{stamp}{path.suffix}")
    backups = sorted(backup_dir.glob(f"{path.stem}-*{path.suffix}"))
    for stale in backups[: max(0, len(backups) - keep)]:
        stale.unlink(missing_ok=True)


__all__ = ["dump_json", "read_json", "write_json"]
