"""Album record handling and reconciliation against the album directory."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Optional

from ..cache.lock import FileLock
from ..config import ALBUM_RECORD_NAME, RECORD_BACKUP_DIR_NAME, WORK_DIR_NAME
from ..errors import AlbumNotFoundError, PersistenceError
from ..io.scanner import DiscoveryCallback, collect_images, list_candidate_filenames
from ..schemas import ValidationError, validate_album_record
from ..utils.jsonio import read_json, write_json
from ..utils.logging import get_logger
from ..utils.pathutils import ensure_work_dir
from .image import ImageMetadata

LOGGER = get_logger("album")

EDITABLE_FIELDS = ("title", "subtitle", "description")


@dataclass(slots=True)
class AlbumRecord:
    """Persisted album state. Images are referenced by filename only."""

    title: str
    subtitle: str = ""
    description: str = ""
    template: Optional[str] = None
    destination: Optional[str] = None
    images: List[str] = field(default_factory=list)

    @classmethod
    def defaults(cls, root: Path) -> "AlbumRecord":
        return cls(title=root.name)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], root: Path) -> "AlbumRecord":
        """Build a record from a validated mapping, defaulting absent keys."""

        return cls(
            title=data.get("title", root.name),
            subtitle=data.get("subtitle", ""),
            description=data.get("description", ""),
            template=data.get("template"),
            destination=data.get("destination"),
            images=list(data.get("images", [])),
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def merge_image_lists(previous: Iterable[str], on_disk: Iterable[str]) -> List[str]:
    """Return the reconciled image list.

    Filenames from *previous* that are still on disk keep their order and
    come first; filenames only found on disk follow in lexicographic order.
    Duplicates are dropped, keeping the first occurrence.
    """

    present = set(on_disk)
    merged: List[str] = []
    seen: set[str] = set()
    for name in previous:
        if name in present and name not in seen:
            merged.append(name)
            seen.add(name)
    merged.extend(sorted(present - seen))
    return merged


def record_path_for(root: Path) -> Path:
    return root / WORK_DIR_NAME / ALBUM_RECORD_NAME


def read_record(root: Path) -> Optional[AlbumRecord]:
    """Return the persisted record of *root* or ``None`` when there is none.

    A record that cannot be decoded or fails validation is logged and reported
    as ``None``; an I/O failure raises :class:`PersistenceError`.
    """

    path = record_path_for(root)
    if not path.exists():
        return None
    try:
        data = read_json(path)
        validate_album_record(data)
    except ValueError as exc:
        LOGGER.error("Failed to decode album record %s: %s", path, exc)
        return None
    except ValidationError as exc:
        LOGGER.error("Album record %s failed validation (%s); using defaults.", path, exc.message)
        return None
    return AlbumRecord.from_dict(data, root)


def get_new_record(directory: Path, callback: Optional[DiscoveryCallback] = None) -> AlbumRecord:
    """Build a fresh record for *directory* without reading any persisted one."""

    root = Path(directory).expanduser().resolve()
    record = AlbumRecord.defaults(root)
    record.images = merge_image_lists([], list_candidate_filenames(root, callback))
    return record


def get_record(directory: Path, callback: Optional[DiscoveryCallback] = None) -> AlbumRecord:
    """Load the persisted record of *directory* and reconcile it with the disk."""

    root = Path(directory).expanduser().resolve()
    record = read_record(root)
    if record is None:
        return get_new_record(root, callback)
    record.images = merge_image_lists(record.images, list_candidate_filenames(root, callback))
    return record


class Album:
    """An album directory together with its in-memory :class:`AlbumRecord`.

    Nothing is written to disk until :meth:`create` or :meth:`write` is
    called.
    """

    def __init__(self, root: Path, record: AlbumRecord) -> None:
        self.root = root
        self.record = record

    @classmethod
    def open(cls, root: Path, callback: Optional[DiscoveryCallback] = None) -> "Album":
        root = Path(root).expanduser().resolve()
        if not root.is_dir():
            raise AlbumNotFoundError(f"Album directory does not exist: {root}")
        return cls(root, get_record(root, callback))

    # Record fields ------------------------------------------------------

    @property
    def title(self) -> str:
        return self.record.title

    @title.setter
    def title(self, value: str) -> None:
        self.record.title = value

    @property
    def subtitle(self) -> str:
        return self.record.subtitle

    @subtitle.setter
    def subtitle(self, value: str) -> None:
        self.record.subtitle = value

    @property
    def description(self) -> str:
        return self.record.description

    @description.setter
    def description(self, value: str) -> None:
        self.record.description = value

    @property
    def template(self) -> Optional[str]:
        return self.record.template

    @template.setter
    def template(self, value: Optional[str]) -> None:
        self.record.template = value

    @property
    def destination(self) -> Optional[str]:
        return self.record.destination

    @destination.setter
    def destination(self, value: Optional[str]) -> None:
        self.record.destination = value

    @property
    def record_path(self) -> Path:
        return record_path_for(self.root)

    @property
    def images(self) -> List[ImageMetadata]:
        """Materialise :class:`ImageMetadata` for every filename in the record."""

        return collect_images(self.record.images, self.root)

    # Operations ---------------------------------------------------------

    def get_new_record(self, callback: Optional[DiscoveryCallback] = None) -> AlbumRecord:
        return get_new_record(self.root, callback)

    def get_record(self, callback: Optional[DiscoveryCallback] = None) -> AlbumRecord:
        return get_record(self.root, callback)

    def reconcile(self, callback: Optional[DiscoveryCallback] = None) -> List[str]:
        """Refresh the in-memory image list from the directory and return it."""

        self.record.images = merge_image_lists(
            self.record.images, list_candidate_filenames(self.root, callback)
        )
        return list(self.record.images)

    def create(self, initial_values: Optional[Mapping[str, str]] = None) -> Path:
        """Persist the record and a sidecar for every image.

        *initial_values* may override ``title``, ``subtitle`` and
        ``description``.
        """

        values = dict(initial_values or {})
        unknown = set(values) - set(EDITABLE_FIELDS)
        if unknown:
            raise ValueError(f"Unsupported album fields: {', '.join(sorted(unknown))}")

        self.reconcile()
        for key in EDITABLE_FIELDS:
            if values.get(key) is not None:
                setattr(self.record, key, str(values[key]))
        images = self.images

        with FileLock(self.root, "album"):
            path = self._write_record()
            for image in images:
                image.persist()
        LOGGER.info("Created album %r with %d images at %s", self.title, len(images), self.root)
        return path

    def write(self) -> Path:
        """Persist the album-level fields without touching image sidecars."""

        with FileLock(self.root, "album"):
            return self._write_record()

    def _write_record(self) -> Path:
        try:
            work_dir = ensure_work_dir(self.root, WORK_DIR_NAME)
        except OSError as exc:
            raise PersistenceError(f"Could not create {self.root / WORK_DIR_NAME}: {exc}") from exc
        path = self.record_path
        write_json(path, self.record.to_dict(), backup_dir=work_dir / RECORD_BACKUP_DIR_NAME)
        return path

    def to_dict(self) -> Dict[str, Any]:
        return self.record.to_dict()

    def __repr__(self) -> str:
        return f"Album({str(self.root)!r}, title={self.title!r}, images={len(self.record.images)})"


__all__ = [
    "Album",
    "AlbumRecord",
    "EDITABLE_FIELDS",
    "get_new_record",
    "get_record",
    "merge_image_lists",
    "read_record",
    "record_path_for",
]
