"""Publish an album through a template into a destination directory."""

from __future__ import annotations

import threading
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional

from ..config import DEFAULT_TEMPLATE
from ..errors import (
    MissingDestinationError,
    NotFoundError,
    PublishCancelledError,
    PublishError,
    RenderError,
    TemplateResolutionError,
    UnrecognizedFormatError,
)
from ..models.album import Album
from ..models.image import ImageMetadata
from ..utils.logging import get_logger
from ..utils.pathutils import resolve_against
from .interfaces import PublishListener, Renderer, TemplateResolver

LOGGER = get_logger("publisher")


class PublishState(str, Enum):
    IDLE = "idle"
    RESOLVING_TEMPLATE = "resolving_template"
    RESOLVING_DESTINATION = "resolving_destination"
    RENDERING = "rendering"
    SAVING = "saving"
    DONE = "done"
    FAILED = "failed"


class Publisher:
    """Drive one album through template and destination resolution into a renderer.

    Listeners registered with :meth:`add_listener` receive ``notify(self,
    message)`` calls in registration order and are dropped once the publish
    call returns. A listener that raises is logged and skipped.
    """

    def __init__(self, album: Album, resolver: TemplateResolver, *, force: bool = False) -> None:
        self.album = album
        self.resolver = resolver
        self.force = force
        self.state = PublishState.IDLE
        self.renderer: Optional[Renderer] = None
        self.destination: Optional[Path] = None
        self._listeners: List[PublishListener] = []
        self._cancel_event = threading.Event()
        self._rendered = False

    # Listeners ----------------------------------------------------------

    def add_listener(self, listener: PublishListener) -> None:
        self._listeners.append(listener)

    def remove_listener(self, listener: PublishListener) -> None:
        try:
            self._listeners.remove(listener)
        except ValueError:
            pass

    def _notify(self, message: str) -> None:
        for listener in list(self._listeners):
            try:
                listener.notify(self, message)
            except Exception:
                LOGGER.exception("Publish listener %r failed on %r", listener, message)

    # Resolution ---------------------------------------------------------

    def resolve_template(self, identifier: Optional[str] = None) -> Renderer:
        """Return the renderer for *identifier*, the album's template or the default."""

        self.state = PublishState.RESOLVING_TEMPLATE
        name = identifier or self.album.template or DEFAULT_TEMPLATE
        try:
            renderer = self.resolver.find(name)
        except NotFoundError as exc:
            self.state = PublishState.FAILED
            raise TemplateResolutionError(
                f"Could not find template {name!r}. Pass a template name or path, "
                "or set 'template' in the album record."
            ) from exc
        self.album.template = name
        self.renderer = renderer
        return renderer

    def resolve_destination(self, destination: Optional[str | Path] = None) -> Path:
        """Return the absolute destination, anchoring relative paths at the album directory."""

        self.state = PublishState.RESOLVING_DESTINATION
        target = destination if destination is not None else self.album.destination
        if not target:
            self.state = PublishState.FAILED
            raise MissingDestinationError("Please provide a destination path for the published album.")
        self.album.destination = str(target)
        self.destination = resolve_against(self.album.root, target)
        return self.destination

    # Publishing ---------------------------------------------------------

    def cancel(self) -> None:
        """Stop the running publish before the next image is processed."""

        self._cancel_event.set()

    def album_data(self) -> Dict[str, Any]:
        """Return the album fields and per-image metadata handed to the renderer."""

        names = list(self.album.record.images)
        images: List[Dict[str, Any]] = []
        for index, name in enumerate(names, start=1):
            if self._cancel_event.is_set():
                raise PublishCancelledError(f"Publish of {self.album.root} cancelled at {name}")
            try:
                image = ImageMetadata(self.album.root / name)
            except (NotFoundError, UnrecognizedFormatError) as exc:
                LOGGER.warning("Leaving %s out of the published album: %s", name, exc)
                continue
            images.append({"filename": name, "path": str(image.path), **image.to_dict()})
            self._notify(f"Prepared {name} ({index}/{len(names)})")
        return {
            "title": self.album.title,
            "subtitle": self.album.subtitle,
            "description": self.album.description,
            "images": images,
        }

    def publish(
        self,
        template: Optional[str] = None,
        destination: Optional[str | Path] = None,
        *,
        force: Optional[bool] = None,
        save: bool = False,
    ) -> Path:
        """Render the album and return the absolute destination path.

        Template and destination errors are raised before anything is
        written. With *save* the resolved template and destination are
        persisted to the album record after a successful render.
        """

        if force is not None:
            self.force = force
        self._rendered = False
        try:
            renderer = self.resolve_template(template)
            target = self.resolve_destination(destination)

            self.state = PublishState.RENDERING
            self._notify("please wait, work in progress...")
            data = self.album_data()
            try:
                written = renderer.publish_to(target, data, self.force)
            except PublishError:
                raise
            except Exception as exc:
                raise RenderError(f"Template {renderer.identifier!r} failed: {exc}") from exc
            self._rendered = True
            LOGGER.info(
                "Published %d images of %s to %s (%d files written)",
                len(data["images"]),
                self.album.root,
                target,
                written,
            )
            self._notify(f"Published {len(data['images'])} images to {target}")

            if save:
                self.save_album()
            self.state = PublishState.DONE
            return target
        except BaseException:
            self.state = PublishState.FAILED
            raise
        finally:
            self._listeners.clear()
            self._cancel_event.clear()

    def save_album(self) -> Path:
        """Persist the album's template and destination after a successful render.

        When no template was configured the built-in default identifier is
        what gets stored.
        """

        if not self._rendered:
            raise PublishError("The album can only be saved after a successful publish")
        self.state = PublishState.SAVING
        path = self.album.write()
        self.state = PublishState.DONE
        self._notify(f"Saved album settings to {path}")
        return path


__all__ = ["PublishState", "Publisher"]
