"""
Test Configuration File

Puts the project root on the Python path and provides wallpaper fixtures.
"""

import sys
from pathlib import Path

import pytest
from PIL import Image

# Add the project root to the Python path
root_path = Path(__file__).parent.parent
if str(root_path) not in sys.path:
    sys.path.insert(0, str(root_path))


def make_image(path: Path, color=(40, 120, 200), size=(8, 6)) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    image_format = {".jpg": "JPEG", ".bmp": "BMP"}.get(path.suffix.lower(), "PNG")
    Image.new("RGB", size, color).save(path, image_format)
    return path


@pytest.fixture
def wallpaper_dir(tmp_path):
    directory = tmp_path / "weather_wallpapers"
    directory.mkdir()
    return directory


@pytest.fixture
def image_factory(wallpaper_dir):
    def factory(name: str, **kwargs) -> Path:
        return make_image(wallpaper_dir / name, **kwargs)
    return factory
