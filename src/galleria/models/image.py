"""Per-image metadata backed by the file itself and an optional sidecar."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Dict

from ..io.image_info import ImageInfo, ImageType, extract
from ..io.sidecar import load_sidecar, save_sidecar, sidecar_path_for_image


class ImageMetadata:
    """One image file plus its derived and user-editable attributes.

    ``type``, ``width`` and ``height`` always come from the file on disk.
    ``title`` and ``description`` default to the file name and an empty
    string and are overridden by the sidecar when one is present.
    """

    def __init__(self, path: Path) -> None:
        # Symlinks are kept: the album entry, not its target, is the identity.
        self._path = Path(os.path.abspath(Path(path).expanduser()))
        self._info: ImageInfo = extract(self._path)
        self.title: str = self._path.name
        self.description: str = ""
        self.load()

    @property
    def path(self) -> Path:
        return self._path

    @property
    def filename(self) -> str:
        return self._path.name

    @property
    def type(self) -> ImageType:
        return self._info.type

    @property
    def width(self) -> int:
        return self._info.width

    @property
    def height(self) -> int:
        return self._info.height

    @property
    def sidecar_path(self) -> Path:
        return sidecar_path_for_image(self._path)

    def load(self) -> bool:
        """Apply title/description overrides from the sidecar.

        Returns ``True`` when a valid sidecar was found.
        """

        data = load_sidecar(self._path)
        if data is None:
            return False
        if "title" in data:
            self.title = data["title"]
        if "description" in data:
            self.description = data["description"]
        return True

    def to_dict(self) -> Dict[str, Any]:
        return {
            "title": self.title,
            "type": self.type.value,
            "description": self.description,
            "width": self.width,
            "height": self.height,
        }

    def persist(self) -> Path:
        """Write the full metadata to the sidecar, replacing any previous one."""

        return save_sidecar(self._path, self.to_dict())

    create = persist

    def __repr__(self) -> str:
        return f"ImageMetadata({str(self._path)!r}, type={self.type.value}, {self.width}x{self.height})"
