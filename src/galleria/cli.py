"""Typer-based CLI entry point."""

from __future__ import annotations

import functools
import logging
from pathlib import Path
from typing import Any, Optional

import typer
from rich import print

from .errors import (
    AlbumNotFoundError,
    GalleriaError,
    LockTimeoutError,
    MissingDestinationError,
    PersistenceError,
    TemplateResolutionError,
)
from .io.image_info import ImageInfo
from .models.album import Album
from .publish import DirectoryTemplateResolver, PublishListener, Publisher
from .utils.logging import ensure_console_logger, logger

app = typer.Typer(help="Folder-native photo albums published through templates")

SETTABLE_FIELDS = ("title", "subtitle", "description", "template", "destination")


def _handle_errors(func):
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except (TemplateResolutionError, MissingDestinationError) as exc:
            typer.echo(f"Error: {exc}", err=True)
            raise typer.Exit(2) from exc
        except (AlbumNotFoundError, PersistenceError, LockTimeoutError) as exc:
            typer.echo(f"Error: {exc}", err=True)
            raise typer.Exit(1) from exc
        except GalleriaError as exc:
            typer.echo(f"Unexpected error: {exc}", err=True)
            raise typer.Exit(1) from exc

    return wrapper


class ConsoleListener(PublishListener):
    """Echo publish progress to the terminal."""

    def notify(self, context: Any, message: str) -> None:
        print(message)


@app.callback()
def main(verbose: bool = typer.Option(False, "--verbose", "-v", help="Log debug output")) -> None:
    ensure_console_logger(logger, "galleria-cli", level=logging.DEBUG if verbose else logging.WARNING)


@app.command()
@_handle_errors
def init(
    album_dir: Path = typer.Argument(Path("."), help="Album directory"),
    title: Optional[str] = typer.Option(None, help="Album title (defaults to the folder name)"),
    subtitle: Optional[str] = typer.Option(None, help="Album subtitle"),
    description: Optional[str] = typer.Option(None, help="Album description"),
) -> None:
    """Create the album record and a sidecar for every image."""

    album = Album.open(album_dir)
    album.create({"title": title, "subtitle": subtitle, "description": description})
    print(f"[green]Initialised album '{album.title}' with {len(album.record.images)} images at {album.root}")


@app.command()
@_handle_errors
def scan(album_dir: Path = typer.Argument(Path("."), help="Album directory")) -> None:
    """Reconcile the album record with the images in the directory."""

    found = 0

    def _count(name: str, info: ImageInfo) -> None:
        nonlocal found
        found += 1
        logger.debug("Found %s (%s, %dx%d)", name, info.type.value, info.width, info.height)

    album = Album.open(album_dir, callback=_count)
    album.write()
    print(f"[green]Album '{album.title}' lists {len(album.record.images)} images ({found} found on disk)")


@app.command()
@_handle_errors
def publish(
    album_dir: Path = typer.Argument(Path("."), help="Album directory"),
    template: Optional[str] = typer.Option(None, "--template", "-t", help="Template name or path"),
    to: Optional[str] = typer.Option(None, "--to", help="Destination directory"),
    force: bool = typer.Option(False, "--force", "-f", help="Rewrite every published file"),
    save: bool = typer.Option(False, "--save", help="Remember template and destination in the album"),
) -> None:
    """Publish the album through a template into a destination."""

    album = Album.open(album_dir)
    publisher = Publisher(album, DirectoryTemplateResolver.from_environment(base=album.root))
    publisher.add_listener(ConsoleListener())
    target = publisher.publish(template, to, force=force, save=save)
    print(f"[green]Published '{album.title}' to {target}")


@app.command("set")
@_handle_errors
def set_field(
    field: str = typer.Argument(..., help=f"One of: {', '.join(SETTABLE_FIELDS)}"),
    value: str = typer.Argument(..., help="New value; an empty string clears template/destination"),
    album_dir: Path = typer.Option(Path("."), "--album", "-a", help="Album directory"),
) -> None:
    """Edit one album-level field and write the album record."""

    if field not in SETTABLE_FIELDS:
        raise typer.BadParameter(f"Unknown field {field!r}", param_hint="FIELD")
    album = Album.open(album_dir)
    if field in ("template", "destination"):
        setattr(album, field, value or None)
    else:
        setattr(album, field, value)
    album.write()
    print(f"[green]Set {field} of '{album.title}'")


if __name__ == "__main__":  # pragma: no cover
    app()
