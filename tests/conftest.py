from pathlib import Path
from typing import Optional, Tuple
import os, time

import pytest
from PIL import Image

def make_image(path: Path, size: Tuple[int, int] = (800, 600), color=(200, 80, 40), fmt: Optional[str] = None) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    Image.new("RGB", size, color).save(path, format=fmt)
    return path

def make_item(root: Path, category: str, name: str, image=True, **texts) -> Path:
    d = root / category / name
    d.mkdir(parents=True, exist_ok=True)
    if image:
        make_image(d / f"{name}.jpg")
    for key, value in texts.items():
        (d / f"{key}.txt").write_text(value, encoding="utf-8")
    return d

def set_mtime(path: Path, seconds_ago: float) -> None:
    t = int((time.time() - seconds_ago) * 1_000_000_000)
    os.utime(path, ns=(t, t))

@pytest.fixture
def root(tmp_path) -> Path:
    r = tmp_path / "gallery"
    r.mkdir()
    return r
