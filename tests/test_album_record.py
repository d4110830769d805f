from __future__ import annotations

import json
from pathlib import Path

import pytest

from galleria.config import ALBUM_RECORD_NAME, RECORD_BACKUP_DIR_NAME, WORK_DIR_NAME
from galleria.errors import AlbumNotFoundError, PersistenceError
from galleria.models.album import Album, get_new_record, get_record, merge_image_lists
from galleria.models.image import ImageMetadata

FIRST = "2004-04-12 09-10-15 6928.jpg"
SECOND = "2004-06-20 11-07-53 6931.jpg"


def _write_record(root: Path, payload: dict) -> Path:
    path = root / WORK_DIR_NAME / ALBUM_RECORD_NAME
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(payload), encoding="utf-8")
    return path


def _read_record(root: Path) -> dict:
    return json.loads((root / WORK_DIR_NAME / ALBUM_RECORD_NAME).read_text(encoding="utf-8"))


def test_open_resolves_path(album_dir: Path) -> None:
    album = Album.open(album_dir)
    assert album.root == album_dir.resolve()


def test_open_missing_directory_raises(tmp_path: Path) -> None:
    with pytest.raises(AlbumNotFoundError):
        Album.open(tmp_path / "unknown")


def test_new_album_defaults(tmp_path: Path) -> None:
    root = tmp_path / "myalbum"
    root.mkdir()
    album = Album.open(root)
    assert album.title == "myalbum"
    assert album.subtitle == ""
    assert album.description == ""
    assert album.template is None
    assert album.destination is None
    assert album.images == []
    assert not (root / WORK_DIR_NAME).exists()


def test_get_new_record_ignores_persisted_record(album_dir: Path) -> None:
    _write_record(album_dir, {"title": "Stored", "images": [SECOND]})
    record = get_new_record(album_dir)
    assert record.title == "testalbum1"
    assert record.subtitle == ""
    assert record.template is None
    assert record.images == [FIRST, SECOND]


def test_get_record_loads_existing_album(album_dir: Path) -> None:
    _write_record(
        album_dir,
        {
            "title": "My test album",
            "subtitle": "A subtitle",
            "description": "A description",
            "template": "default",
            "destination": "../out",
            "images": [FIRST, SECOND],
        },
    )
    album = Album.open(album_dir)
    assert album.title == "My test album"
    assert album.subtitle == "A subtitle"
    assert album.description == "A description"
    assert album.template == "default"
    assert album.destination == "../out"
    assert album.record.images[0] == FIRST
    assert len(album.images) == 2


def test_get_record_defaults_missing_keys(album_dir: Path) -> None:
    _write_record(album_dir, {"subtitle": "only this"})
    record = get_record(album_dir)
    assert record.title == "testalbum1"
    assert record.subtitle == "only this"
    assert record.description == ""
    assert record.images == [FIRST, SECOND]


def test_merge_preserves_previous_order_and_appends_new_sorted() -> None:
    assert merge_image_lists(["B", "A"], {"A", "B", "C"}) == ["B", "A", "C"]
    assert merge_image_lists(["B", "A"], ["D", "C", "A", "B"]) == ["B", "A", "C", "D"]


def test_merge_drops_missing_and_duplicate_names() -> None:
    assert merge_image_lists(["X", "A", "A"], ["A"]) == ["A"]


def test_reconcile_preserves_order_on_disk(album_dir: Path, make_image) -> None:
    _write_record(album_dir, {"title": "Ordered", "images": [SECOND, FIRST]})
    make_image(album_dir / "2005-01-30 11-10-00 6933.jpg")
    make_image(album_dir / "0000-first.png", fmt="PNG")

    record = get_record(album_dir)
    assert record.images == [SECOND, FIRST, "0000-first.png", "2005-01-30 11-10-00 6933.jpg"]


def test_reconcile_drops_deleted_images(album_dir: Path) -> None:
    _write_record(album_dir, {"title": "Shrinking", "images": [SECOND, FIRST]})
    (album_dir / SECOND).unlink()
    assert get_record(album_dir).images == [FIRST]


def test_reconcile_is_idempotent(album_dir: Path) -> None:
    album = Album.open(album_dir)
    album.create({"title": "Stable"})
    first = get_record(album_dir)
    second = get_record(album_dir)
    assert first == second
    assert Album.open(album_dir).reconcile() == first.images


def test_unrecognized_files_are_excluded(album_dir: Path) -> None:
    (album_dir / "broken.jpg").write_bytes(b"\xff\xd8 truncated")
    album = Album.open(album_dir)
    assert "notes.txt" not in album.record.images
    assert "broken.jpg" not in album.record.images
    assert album.record.images == [FIRST, SECOND]


def test_malformed_record_falls_back_to_defaults(album_dir: Path) -> None:
    path = album_dir / WORK_DIR_NAME / ALBUM_RECORD_NAME
    path.parent.mkdir(parents=True)
    path.write_text("{ not json", encoding="utf-8")
    album = Album.open(album_dir)
    assert album.title == "testalbum1"
    assert path.read_text(encoding="utf-8") == "{ not json"


def test_invalid_record_falls_back_to_defaults(album_dir: Path) -> None:
    _write_record(album_dir, {"title": 42, "images": "nope"})
    album = Album.open(album_dir)
    assert album.title == "testalbum1"
    assert album.record.images == [FIRST, SECOND]


def test_record_path(album_dir: Path) -> None:
    album = Album.open(album_dir)
    assert album.record_path == album_dir.resolve() / WORK_DIR_NAME / ALBUM_RECORD_NAME


def test_create_writes_defaults(album_dir: Path) -> None:
    album = Album.open(album_dir)
    path = album.create()
    assert path.exists()
    saved = _read_record(album_dir)
    assert saved == {
        "title": "testalbum1",
        "subtitle": "",
        "description": "",
        "template": None,
        "destination": None,
        "images": [FIRST, SECOND],
    }


def test_create_with_initial_values(album_dir: Path) -> None:
    album = Album.open(album_dir)
    album.create({"title": "Pony", "subtitle": "subpony", "description": "descpony"})
    saved = _read_record(album_dir)
    assert saved["title"] == "Pony"
    assert saved["subtitle"] == "subpony"
    assert saved["description"] == "descpony"
    assert saved["images"] == [FIRST, SECOND]


def test_create_rejects_unknown_fields(album_dir: Path) -> None:
    album = Album.open(album_dir)
    with pytest.raises(ValueError):
        album.create({"cover": FIRST})
    assert not album.record_path.exists()


def test_create_persists_every_image_sidecar(album_dir: Path) -> None:
    album = Album.open(album_dir)
    album.create()
    images = album.images
    assert len(images) == 2
    for image in images:
        assert isinstance(image, ImageMetadata)
        assert image.sidecar_path.exists()
    sidecar = json.loads((album_dir / f"{FIRST}.json").read_text(encoding="utf-8"))
    assert sidecar == {"title": FIRST, "type": "jpeg", "description": "", "width": 40, "height": 30}


def test_create_is_idempotent(album_dir: Path) -> None:
    album = Album.open(album_dir)
    album.create({"title": "Pony"})
    before = album.record_path.read_text(encoding="utf-8")
    sidecar_before = (album_dir / f"{FIRST}.json").read_text(encoding="utf-8")

    again = Album.open(album_dir)
    again.create()
    assert again.title == "Pony"
    assert again.record_path.read_text(encoding="utf-8") == before
    assert (album_dir / f"{FIRST}.json").read_text(encoding="utf-8") == sidecar_before
    assert not (album_dir / WORK_DIR_NAME / RECORD_BACKUP_DIR_NAME).exists()


def test_create_keeps_image_edits(album_dir: Path) -> None:
    album = Album.open(album_dir)
    album.create()
    (album_dir / f"{FIRST}.json").write_text(
        json.dumps({"title": "Sunrise", "description": "Early start"}), encoding="utf-8"
    )
    Album.open(album_dir).create()
    image = ImageMetadata(album_dir / FIRST)
    assert image.title == "Sunrise"
    assert image.description == "Early start"


def test_sidecars_are_not_album_images(album_dir: Path) -> None:
    Album.open(album_dir).create()
    assert Album.open(album_dir).record.images == [FIRST, SECOND]


def test_write_persists_album_fields_only(album_dir: Path) -> None:
    root = album_dir.parent / "emptyalbum"
    root.mkdir()
    album = Album.open(root)
    album.title = "My little pony"
    album.subtitle = "subisub"
    album.description = "desci"
    album.write()

    saved = _read_record(root)
    assert saved["title"] == "My little pony"
    assert saved["subtitle"] == "subisub"
    assert saved["description"] == "desci"
    assert saved["images"] == []

    album = Album.open(album_dir)
    album.template = "default"
    album.write()
    assert not (album_dir / f"{FIRST}.json").exists()
    assert _read_record(album_dir)["template"] == "default"


def test_write_keeps_a_backup_of_the_previous_record(album_dir: Path) -> None:
    album = Album.open(album_dir)
    album.write()
    album.title = "Renamed"
    album.write()
    backups = list((album_dir / WORK_DIR_NAME / RECORD_BACKUP_DIR_NAME).glob("album-*.json"))
    assert len(backups) == 1
    assert json.loads(backups[0].read_text(encoding="utf-8"))["title"] == "testalbum1"


def test_write_failure_is_fatal(album_dir: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    album = Album.open(album_dir)

    def _fail(*args, **kwargs):
        raise OSError("disk full")

    monkeypatch.setattr("galleria.utils.jsonio.os.replace", _fail)
    with pytest.raises(PersistenceError):
        album.write()
    assert not album.record_path.exists()
    assert list((album_dir / WORK_DIR_NAME).glob(".album.json.*.tmp")) == []


def test_discovery_callback_runs_once_per_image(album_dir: Path) -> None:
    seen: list[str] = []
    Album.open(album_dir, callback=lambda name, info: seen.append(name))
    assert seen == [FIRST, SECOND]


def test_undecodable_record_falls_back_to_defaults(album_dir: Path) -> None:
    path = album_dir / WORK_DIR_NAME / ALBUM_RECORD_NAME
    path.parent.mkdir(parents=True)
    path.write_bytes(b'{"title": "\xff\xfe"}')
    album = Album.open(album_dir)
    assert album.title == "testalbum1"
    assert album.record.images == [FIRST, SECOND]


def test_write_replaces_undecodable_record(album_dir: Path) -> None:
    path = album_dir / WORK_DIR_NAME / ALBUM_RECORD_NAME
    path.parent.mkdir(parents=True)
    path.write_bytes(b"\xff\xfe garbage")
    album = Album.open(album_dir)
    album.title = "Recovered"
    album.write()
    assert _read_record(album_dir)["title"] == "Recovered"


def test_album_record_helpers_use_album_root(album_dir: Path) -> None:
    _write_record(album_dir, {"title": "Stored", "images": [SECOND]})
    album = Album.open(album_dir)
    assert album.get_record().title == "Stored"
    assert album.get_record().images == [SECOND, FIRST]
    fresh = album.get_new_record()
    assert fresh.title == "testalbum1"
    assert fresh.images == [FIRST, SECOND]
