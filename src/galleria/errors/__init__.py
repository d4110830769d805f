"""Custom exception hierarchy for galleria."""

from __future__ import annotations


class GalleriaError(Exception):
    """Base class for all custom errors raised by galleria."""


# --- 3-layer hierarchy ---

class DomainError(GalleriaError):
    """Base class for album and image level errors."""


class PublishError(GalleriaError):
    """Base class for errors that abort a publish run."""


class InfrastructureError(GalleriaError):
    """Base class for filesystem and locking errors."""


# --- Domain errors ---

class NotFoundError(DomainError):
    """Raised when a required path does not exist."""


class AlbumNotFoundError(NotFoundError):
    """Raised when the requested album directory cannot be located."""


class UnrecognizedFormatError(DomainError):
    """Raised when a file is not a supported image."""


# --- Publish errors ---

class TemplateResolutionError(PublishError):
    """Raised when no template matches the requested identifier."""


class MissingDestinationError(PublishError):
    """Raised when neither the caller nor the album names a destination."""


class RenderError(PublishError):
    """Raised when the renderer fails to write the published album."""


class PublishCancelledError(PublishError):
    """Raised when a publish run is cancelled before rendering."""


# --- Infrastructure errors ---

class PersistenceError(InfrastructureError):
    """Raised when an album record or image sidecar cannot be read or written."""


class LockTimeoutError(InfrastructureError):
    """Raised when an album lock cannot be acquired in time."""
