import logging
from pathlib import Path
from typing import List, Optional, Union

import click
from PIL import Image, ImageOps

from config import PreviewWidth
from errors import ImagePrintFail

logger = logging.getLogger(__name__)

try:
    RESAMPLE_LANCZOS = Image.Resampling.LANCZOS  # type: ignore[attr-defined]
except AttributeError:  # Pillow < 9
    RESAMPLE_LANCZOS = Image.LANCZOS

UPPER_HALF_BLOCK = "▀"


def image_to_ansi(image: Image.Image, width: int = PreviewWidth) -> List[str]:
    """
    Convert an image to lines of truecolor ANSI text.

    Every character cell shows two pixels: the upper one as the foreground
    of a half block, the lower one as the background.
    """
    rgb = ImageOps.exif_transpose(image).convert("RGB")
    height = max(2, round(rgb.height * width / rgb.width))
    height += height % 2
    pixels = rgb.resize((width, height), RESAMPLE_LANCZOS).load()

    lines = []
    for y in range(0, height, 2):
        cells = []
        for x in range(width):
            top = pixels[x, y]
            bottom = pixels[x, y + 1]
            cells.append(
                f"\x1b[38;2;{top[0]};{top[1]};{top[2]}m"
                f"\x1b[48;2;{bottom[0]};{bottom[1]};{bottom[2]}m{UPPER_HALF_BLOCK}"
            )
        lines.append("".join(cells) + "\x1b[0m")
    return lines


def render_image(path: Union[str, Path], width: Optional[int] = None) -> None:
    """Print a small preview of the image to the terminal"""
    width = width or PreviewWidth
    if width <= 0:
        raise ImagePrintFail(f"Preview width must be positive, got {width}")
    try:
        with Image.open(path) as image:
            lines = image_to_ansi(image, width)
    except (OSError, ValueError, Image.DecompressionBombError) as exc:
        raise ImagePrintFail(f"Could not preview {path}: {exc}") from exc

    for line in lines:
        click.echo(line)
