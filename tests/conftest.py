import sys
from pathlib import Path
from typing import Callable

import pytest
from PIL import Image

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"

# Ensure the project sources are importable without an installed package.
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))


def write_image(path: Path, size: tuple[int, int] = (12, 8), fmt: str = "JPEG") -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    Image.new("RGB", size, color="blue").save(path, fmt)
    return path


@pytest.fixture
def make_image() -> Callable[..., Path]:
    return write_image


@pytest.fixture
def album_dir(tmp_path: Path) -> Path:
    """An album folder with two photos and a stray text file."""

    root = tmp_path / "testalbum1"
    write_image(root / "2004-04-12 09-10-15 6928.jpg", (40, 30))
    write_image(root / "2004-06-20 11-07-53 6931.jpg", (30, 40))
    (root / "notes.txt").write_text("not a photo", encoding="utf-8")
    return root
