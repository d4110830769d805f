"""Directory based templates: lookup and file-copy rendering."""

from __future__ import annotations

import os
import shutil
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Optional

from ..config import (
    BUILTIN_TEMPLATE_DIR,
    PUBLISH_DATA_NAME,
    PUBLISH_IMAGE_DIR_NAME,
    TEMPLATE_PATH_ENV,
    USER_TEMPLATE_DIR,
)
from ..errors import NotFoundError, PersistenceError, RenderError
from ..utils.jsonio import write_json
from ..utils.logging import get_logger
from ..utils.pathutils import is_hidden
from .interfaces import Renderer, TemplateResolver

LOGGER = get_logger("templates")


def _is_unchanged(source: Path, target: Path) -> bool:
    """Return ``True`` if *target* looks like an earlier copy of *source*."""

    try:
        src_stat = source.stat()
        dst_stat = target.stat()
    except FileNotFoundError:
        return False
    return src_stat.st_size == dst_stat.st_size and int(src_stat.st_mtime) == int(dst_stat.st_mtime)


def _copy(source: Path, target: Path, force: bool) -> bool:
    if not force and _is_unchanged(source, target):
        return False
    target.parent.mkdir(parents=True, exist_ok=True)
    shutil.copy2(source, target)
    return True


class DirectoryTemplate(Renderer):
    """A template is a directory whose files are copied into the destination.

    Next to the template files the renderer places every album image under
    ``images/`` and an ``album.json`` data file the template pages read.
    """

    def __init__(self, identifier: str, path: Path) -> None:
        self.identifier = identifier
        self.path = path

    def template_files(self) -> List[Path]:
        files = []
        for candidate in sorted(self.path.rglob("*")):
            rel = candidate.relative_to(self.path)
            if any(part.startswith(".") for part in rel.parts):
                continue
            if candidate.is_file():
                files.append(candidate)
        return files

    def publish_to(self, destination: Path, album_data: Mapping[str, Any], force: bool = False) -> int:
        written = 0
        try:
            destination.mkdir(parents=True, exist_ok=True)
            for source in self.template_files():
                if _copy(source, destination / source.relative_to(self.path), force):
                    written += 1

            published_images: List[Dict[str, Any]] = []
            for image in album_data.get("images", []):
                source = Path(image["path"])
                rel = Path(PUBLISH_IMAGE_DIR_NAME) / image["filename"]
                if _copy(source, destination / rel, force):
                    written += 1
                entry = {key: value for key, value in image.items() if key != "path"}
                entry["src"] = rel.as_posix()
                published_images.append(entry)

            payload = {key: value for key, value in album_data.items() if key != "images"}
            payload["images"] = published_images
            data_path = destination / PUBLISH_DATA_NAME
            if force:
                data_path.unlink(missing_ok=True)
            if write_json(data_path, payload):
                written += 1
        except (OSError, PersistenceError) as exc:
            raise RenderError(f"Template {self.identifier!r} failed to publish to {destination}: {exc}") from exc

        LOGGER.debug("Template %s wrote %d files to %s", self.identifier, written, destination)
        return written

    def __repr__(self) -> str:
        return f"DirectoryTemplate({self.identifier!r}, {str(self.path)!r})"


class DirectoryTemplateResolver(TemplateResolver):
    """Find templates by filesystem path or by name on a search path.

    Relative template paths are anchored at *base* (usually the album
    directory). Names are looked up in *search_paths* in order, then in the
    built-in templates shipped with the package.
    """

    def __init__(
        self,
        search_paths: Iterable[Path] = (),
        *,
        base: Optional[Path] = None,
        include_builtin: bool = True,
    ) -> None:
        self.search_paths = [Path(path).expanduser() for path in search_paths]
        if include_builtin:
            self.search_paths.append(BUILTIN_TEMPLATE_DIR)
        self.base = base

    @classmethod
    def from_environment(cls, *, base: Optional[Path] = None) -> "DirectoryTemplateResolver":
        """Build a resolver from ``$GALLERIA_TEMPLATE_PATH`` and the user template folder."""

        paths = [Path(entry) for entry in os.environ.get(TEMPLATE_PATH_ENV, "").split(os.pathsep) if entry]
        paths.append(USER_TEMPLATE_DIR)
        return cls(paths, base=base)

    def find(self, identifier: str) -> DirectoryTemplate:
        if not identifier:
            raise NotFoundError("Empty template identifier")

        candidate = Path(identifier).expanduser()
        if len(candidate.parts) > 1 or candidate.is_absolute() or identifier.startswith("."):
            if not candidate.is_absolute() and self.base is not None:
                candidate = self.base / candidate
            if candidate.is_dir():
                return DirectoryTemplate(identifier, candidate.resolve())
            raise NotFoundError(f"Template directory does not exist: {candidate}")

        for directory in self.search_paths:
            match = directory / identifier
            if match.is_dir() and not is_hidden(match):
                return DirectoryTemplate(identifier, match.resolve())
        raise NotFoundError(f"Template {identifier!r} not found in {', '.join(map(str, self.search_paths))}")


__all__ = ["DirectoryTemplate", "DirectoryTemplateResolver"]
