"""Image kind and geometry detection from file headers."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from PIL import Image, UnidentifiedImageError

from ..errors import NotFoundError, UnrecognizedFormatError


class ImageType(str, Enum):
    JPEG = "jpeg"
    PNG = "png"
    GIF = "gif"
    BMP = "bmp"
    TIFF = "tiff"
    WEBP = "webp"
    ICO = "ico"


# Pillow format name -> image kind. ``MPO`` is the multi-picture JPEG variant
# written by many cameras.
_PILLOW_FORMATS: dict[str, ImageType] = {
    "JPEG": ImageType.JPEG,
    "MPO": ImageType.JPEG,
    "PNG": ImageType.PNG,
    "GIF": ImageType.GIF,
    "BMP": ImageType.BMP,
    "TIFF": ImageType.TIFF,
    "WEBP": ImageType.WEBP,
    "ICO": ImageType.ICO,
}


@dataclass(frozen=True, slots=True)
class ImageInfo:
    """Attributes derived from the image bytes."""

    type: ImageType
    width: int
    height: int


def extract(path: Path) -> ImageInfo:
    """Return the kind and pixel size of the image at *path*.

    Only the header is parsed; pixel data is never decoded.
    """

    if not path.exists():
        raise NotFoundError(f"File does not exist: {path}")
    if not path.is_file():
        raise UnrecognizedFormatError(f"Not a regular file: {path}")
    try:
        with Image.open(path) as img:
            fmt = img.format
            width, height = img.size
    except (UnidentifiedImageError, Image.DecompressionBombError) as exc:
        raise UnrecognizedFormatError(f"Unknown image type: {path}") from exc
    except FileNotFoundError as exc:
        raise NotFoundError(f"File does not exist: {path}") from exc
    except OSError as exc:
        raise UnrecognizedFormatError(f"Unreadable image {path}: {exc}") from exc

    kind = _PILLOW_FORMATS.get(fmt or "")
    if kind is None:
        raise UnrecognizedFormatError(f"Unsupported image type {fmt!r}: {path}")
    return ImageInfo(type=kind, width=int(width), height=int(height))


__all__ = ["ImageInfo", "ImageType", "extract"]
