import pytest
from PIL import Image

from errors import ImagePrintFail
from preview import UPPER_HALF_BLOCK, image_to_ansi, render_image


def test_two_pixels_per_character():
    image = Image.new("RGB", (4, 4), (255, 0, 0))
    lines = image_to_ansi(image, width=4)
    assert len(lines) == 2
    assert all(line.count(UPPER_HALF_BLOCK) == 4 for line in lines)
    assert "38;2;255;0;0" in lines[0]
    assert lines[0].endswith("\x1b[0m")


def test_render_prints_preview(image_factory, capsys):
    path = image_factory("a.png", size=(20, 10))
    render_image(path, width=10)
    out = capsys.readouterr().out
    assert out.count("\n") == 3
    assert UPPER_HALF_BLOCK in out


def test_unreadable_file_fails(wallpaper_dir):
    broken = wallpaper_dir / "broken.png"
    broken.write_bytes(b"not an image")
    with pytest.raises(ImagePrintFail):
        render_image(broken, width=8)


def test_missing_file_fails(wallpaper_dir):
    with pytest.raises(ImagePrintFail):
        render_image(wallpaper_dir / "missing.png", width=8)


def test_width_must_be_positive(image_factory):
    with pytest.raises(ImagePrintFail):
        render_image(image_factory("a.png"), width=-1)


def test_oversized_image_fails(image_factory, monkeypatch):
    path = image_factory("huge.png", size=(40, 40))
    monkeypatch.setattr(Image, "MAX_IMAGE_PIXELS", 100)
    with pytest.raises(ImagePrintFail):
        render_image(path, width=8)
