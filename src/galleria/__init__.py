"""Folder-native photo album keeper with template based publishing."""

from __future__ import annotations

from .models.album import Album, AlbumRecord, get_new_record, get_record, merge_image_lists
from .models.image import ImageMetadata

__all__ = [
    "Album",
    "AlbumRecord",
    "ImageMetadata",
    "get_new_record",
    "get_record",
    "merge_image_lists",
]

__version__ = "0.3.0"
