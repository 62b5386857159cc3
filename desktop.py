import ctypes
import logging
import os
import subprocess
import sys
from pathlib import Path
from typing import Union

from PIL import Image

from errors import InvalidWallpaper

logger = logging.getLogger(__name__)

SPI_SETDESKWALLPAPER = 20
SPIF_UPDATEINIFILE = 0x01
SPIF_SENDWININICHANGE = 0x02
SINGLE_BMP_NAME = "wallpaper_current.bmp"
MACOS_SET_PICTURE_SCRIPT = (
    "on run argv",
    'tell application "System Events" to tell every desktop to set picture to (item 1 of argv)',
    "end run",
)


def _convert_to_bmp(source_path: Path) -> str:
    target_path = os.path.join(os.path.expanduser("~"), SINGLE_BMP_NAME)
    with Image.open(source_path) as image:
        rgb_image = image.convert("RGB")
        try:
            rgb_image.save(target_path, "BMP")
        finally:
            rgb_image.close()
    return target_path


def _apply_windows(image_path: Path) -> None:
    # Older Windows builds only accept BMP files here
    bmp_path = _convert_to_bmp(image_path)
    result = ctypes.windll.user32.SystemParametersInfoW(  # type: ignore[attr-defined]
        SPI_SETDESKWALLPAPER, 0, bmp_path, SPIF_UPDATEINIFILE | SPIF_SENDWININICHANGE
    )
    if not result:
        raise ctypes.WinError()  # type: ignore[attr-defined]


def _apply_macos(image_path: Path) -> None:
    # The path goes in as an argument, never as script text
    command = ["osascript"]
    for line in MACOS_SET_PICTURE_SCRIPT:
        command += ["-e", line]
    subprocess.run(command + [str(image_path)], check=True, capture_output=True)


def _apply_gnome(image_path: Path) -> None:
    uri = image_path.as_uri()
    for key in ("picture-uri", "picture-uri-dark"):
        subprocess.run(
            ["gsettings", "set", "org.gnome.desktop.background", key, uri],
            check=True,
            capture_output=True,
        )


def set_desktop_background(path: Union[str, Path]) -> None:
    image_path = Path(path).expanduser().resolve()
    if not image_path.is_file():
        raise InvalidWallpaper(f"Wallpaper not found: {image_path}")

    try:
        if sys.platform.startswith("win"):
            _apply_windows(image_path)
        elif sys.platform == "darwin":
            _apply_macos(image_path)
        else:
            _apply_gnome(image_path)
    except (OSError, subprocess.CalledProcessError) as exc:
        raise InvalidWallpaper(f"Could not set {image_path.name} as wallpaper: {exc}") from exc

    logger.debug("Desktop background set to %s", image_path)
