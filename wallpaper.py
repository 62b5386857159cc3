import logging
import re
from pathlib import Path
from typing import Dict, Optional, Union

from config import ValidExtensions
from weather import Weather
from weather_tags import WeatherTag

logger = logging.getLogger(__name__)

VALID_EXTENSION_PATTERN = re.compile(rf"^\.?({'|'.join(ValidExtensions)})$", re.IGNORECASE)


def has_valid_extension(path: Union[str, Path]) -> bool:
    return bool(VALID_EXTENSION_PATTERN.match(Path(path).suffix))


class Wallpaper:
    """
    An image in the wallpaper directory and the weather it depicts.

    Two wallpapers are the same wallpaper when they point at the same file,
    whatever their tags say.
    """

    def __init__(
        self,
        path: Union[str, Path],
        weather: Optional[Weather] = None,
        favourited: bool = False,
    ):
        self.path = Path(path).expanduser().resolve()
        self.filename = self.path.name
        self.weather = weather if weather is not None else Weather.default()
        self.favourited = bool(favourited)

    def __eq__(self, other) -> bool:
        if not isinstance(other, Wallpaper):
            return NotImplemented
        return self.path == other.path

    def __hash__(self) -> int:
        return hash(self.path)

    def __repr__(self) -> str:
        return f"Wallpaper({self.filename!r}, {self.weather}, favourited={self.favourited})"

    def __str__(self) -> str:
        star = " *" if self.favourited else ""
        return f"{self.filename}{star} ({self.path})\n tags: {self.weather}"

    @property
    def key(self) -> str:
        return str(self.path)

    def is_valid(self) -> bool:
        """False once the backing file is gone"""
        return self.path.is_file() and has_valid_extension(self.path)

    def to_dict(self) -> Dict:
        data = self.weather.to_dict()
        data["favourited"] = self.favourited
        return data

    @classmethod
    def from_dict(cls, path: Union[str, Path], data: Dict) -> "Wallpaper":
        tags = set()
        for name in data.get("tags", []):
            try:
                tags.add(WeatherTag.from_name(name))
            except ValueError:
                logger.warning("Ignoring unknown tag '%s' on %s", name, path)
        is_day = data.get("is_day", True)
        return cls(
            path,
            Weather(frozenset(tags), None if is_day is None else bool(is_day)),
            favourited=bool(data.get("favourited", False)),
        )
