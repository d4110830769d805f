"""JSON Schemas for the album record and the per-image sidecar."""

from __future__ import annotations

from typing import Any

from jsonschema import Draft202012Validator
from jsonschema.exceptions import ValidationError

ALBUM_RECORD_SCHEMA: dict[str, Any] = {
    "$id": "galleria/album.schema.json",
    "type": "object",
    "properties": {
        "title": {"type": "string"},
        "subtitle": {"type": "string"},
        "description": {"type": "string"},
        "template": {"type": ["string", "null"]},
        "destination": {"type": ["string", "null"]},
        "images": {
            "type": "array",
            "items": {"type": "string", "minLength": 1},
        },
    },
    "additionalProperties": True,
}

# Only ``title`` and ``description`` are ever read back from a sidecar; the
# geometry fields are validated so a structurally broken file is rejected as
# a whole.
IMAGE_SIDECAR_SCHEMA: dict[str, Any] = {
    "$id": "galleria/image.schema.json",
    "type": "object",
    "properties": {
        "title": {"type": "string"},
        "description": {"type": "string"},
        "type": {"type": "string"},
        "width": {"type": "integer", "minimum": 0},
        "height": {"type": "integer", "minimum": 0},
    },
    "additionalProperties": True,
}

_album_validator = Draft202012Validator(ALBUM_RECORD_SCHEMA)
_sidecar_validator = Draft202012Validator(IMAGE_SIDECAR_SCHEMA)


def validate_album_record(data: Any) -> None:
    """Raise :class:`ValidationError` if *data* is not a valid album record."""

    _album_validator.validate(data)


def validate_image_sidecar(data: Any) -> None:
    """Raise :class:`ValidationError` if *data* is not a valid image sidecar."""

    _sidecar_validator.validate(data)


__all__ = [
    "ALBUM_RECORD_SCHEMA",
    "IMAGE_SIDECAR_SCHEMA",
    "ValidationError",
    "validate_album_record",
    "validate_image_sidecar",
]
