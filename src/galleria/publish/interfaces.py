from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Mapping


class Renderer(ABC):
    """A resolved template that can write an album into a destination."""

    identifier: str

    @abstractmethod
    def publish_to(self, destination: Path, album_data: Mapping[str, Any], force: bool = False) -> int:
        """Render *album_data* into *destination* and return the number of files written.

        With *force* every artifact is rewritten; otherwise unchanged ones may
        be skipped. Failures are reported as :class:`RenderError`.
        """


class TemplateResolver(ABC):
    @abstractmethod
    def find(self, identifier: str) -> Renderer:
        """Return the template named *identifier* or raise :class:`NotFoundError`."""


class PublishListener(ABC):
    @abstractmethod
    def notify(self, context: Any, message: str) -> None:
        """Receive a progress *message*; *context* is the running publisher."""
