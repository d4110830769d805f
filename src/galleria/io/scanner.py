"""Directory scanner producing the album's candidate image filenames."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Callable, Iterable, Iterator, List, Optional

from ..errors import NotFoundError, UnrecognizedFormatError
from ..models.image import ImageMetadata
from ..utils.logging import get_logger
from ..utils.pathutils import is_hidden
from .image_info import ImageInfo, extract
from .sidecar import is_sidecar

LOGGER = get_logger("scanner")

DiscoveryCallback = Callable[[str, ImageInfo], None]


class CandidateListing:
    """Lazy, restartable sequence of recognised image filenames in a directory.

    Every iteration re-reads the directory, so two passes over an unchanged
    directory yield the same names in the same (lexicographic) order. Files
    whose format cannot be extracted are skipped; *callback* is invoked once
    per recognised file as it is yielded.
    """

    def __init__(self, directory: Path, callback: Optional[DiscoveryCallback] = None) -> None:
        self.directory = Path(directory)
        self._callback = callback

    def __iter__(self) -> Iterator[str]:
        try:
            names = sorted(entry.name for entry in os.scandir(self.directory))
        except FileNotFoundError as exc:
            raise NotFoundError(f"Directory does not exist: {self.directory}") from exc

        for name in names:
            candidate = self.directory / name
            if is_hidden(candidate) or not candidate.is_file():
                continue
            if is_sidecar(candidate):
                LOGGER.debug("Skipping sidecar %s", candidate)
                continue
            try:
                info = extract(candidate)
            except (NotFoundError, UnrecognizedFormatError) as exc:
                LOGGER.info("Skipping %s: %s", candidate, exc)
                continue
            if self._callback is not None:
                self._callback(name, info)
            yield name


def list_candidate_filenames(
    directory: Path, callback: Optional[DiscoveryCallback] = None
) -> CandidateListing:
    """Return the recognised image filenames found directly in *directory*."""

    return CandidateListing(directory, callback)


def collect_images(
    filenames: Iterable[str],
    directory: Path,
    callback: Optional[Callable[[ImageMetadata], None]] = None,
) -> List[ImageMetadata]:
    """Return :class:`ImageMetadata` for each of *filenames* that is a usable image.

    Missing and unrecognised files are skipped.
    """

    images: List[ImageMetadata] = []
    for name in filenames:
        try:
            image = ImageMetadata(Path(directory) / name)
        except (NotFoundError, UnrecognizedFormatError) as exc:
            LOGGER.info("Skipping %s: %s", name, exc)
            continue
        images.append(image)
        if callback is not None:
            callback(image)
    return images


__all__ = ["CandidateListing", "DiscoveryCallback", "collect_images", "list_candidate_filenames"]
