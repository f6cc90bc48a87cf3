"""Shared fixtures: image folders and mask files built in tmp_path."""
import sys
import logging
from pathlib import Path

import cv2
import numpy as np
import pytest

# Add the project root to Python path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from models import BatchSettings

logging.getLogger('PyQt6').setLevel(logging.WARNING)

TRIANGLE_ROW = "0 0,10 0,10 10"


def make_image(path, width=20, height=20, color=(0, 0, 0)):
    image = np.zeros((height, width, 3), dtype=np.uint8)
    image[:, :] = color
    assert cv2.imwrite(str(path), image)
    return path


@pytest.fixture
def black_image(tmp_path):
    """A 20x20 black PNG."""
    return make_image(tmp_path / "black.png")


@pytest.fixture
def mask_file(tmp_path):
    path = tmp_path / "mask.csv"
    path.write_text(TRIANGLE_ROW + "\n", encoding="utf-8")
    return path


@pytest.fixture
def batch_folders(tmp_path, mask_file):
    """Source folder with 3 PNGs and one non-matching text file, plus an empty destination."""
    src = tmp_path / "src"
    dist = tmp_path / "dist"
    src.mkdir()
    dist.mkdir()
    for name in ("a.png", "b.png", "c.png"):
        make_image(src / name)
    (src / "notes.txt").write_text("not an image", encoding="utf-8")
    return BatchSettings(str(src), str(dist), "*.png", str(mask_file))
