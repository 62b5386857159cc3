import json
import logging
import os
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Set, Union

from config import TagStoreFile, WallpaperDir, WallpaperDirName
from errors import TagStoreCorrupt
from wallpaper import Wallpaper, has_valid_extension
from weather import Weather

logger = logging.getLogger(__name__)


def default_wallpaper_dir() -> Path:
    if WallpaperDir:
        return Path(WallpaperDir).expanduser()
    return Path(os.path.expanduser("~")) / "Pictures" / WallpaperDirName


def ensure_wallpaper_dir(directory: Optional[Union[str, Path]] = None) -> Path:
    """Return the wallpaper directory, creating it if needed"""
    path = Path(directory).expanduser() if directory else default_wallpaper_dir()
    if not path.exists():
        path.mkdir(parents=True, exist_ok=True)
        logger.info("Created wallpaper directory %s", path)
    return path.resolve()


class WallpaperStore:
    """
    Wallpapers found in the wallpaper directory together with the tags
    saved for them in tags.json.
    """

    def __init__(self, directory: Optional[Union[str, Path]] = None, tags_path: Optional[Union[str, Path]] = None):
        self.directory = ensure_wallpaper_dir(directory)
        self.tags_path = Path(tags_path) if tags_path else self.directory / TagStoreFile

    def list_wallpaper_files(self) -> List[Path]:
        return sorted(
            entry.resolve()
            for entry in self.directory.iterdir()
            if entry.is_file() and has_valid_extension(entry)
        )

    def read_tag_store(self) -> Dict[str, Wallpaper]:
        if not self.tags_path.exists():
            return {}
        try:
            with open(self.tags_path, "r", encoding="utf-8") as handle:
                raw = json.load(handle)
        except json.JSONDecodeError as exc:
            raise TagStoreCorrupt(f"Could not parse {self.tags_path}: {exc}") from exc
        if not isinstance(raw, dict):
            raise TagStoreCorrupt(f"{self.tags_path} does not contain a JSON object")

        wallpapers: Dict[str, Wallpaper] = {}
        for key, value in raw.items():
            path = Path(key)
            if not path.is_absolute():
                path = self.directory / path
            if isinstance(value, list):
                # Old format: filename -> list of tags
                value = {"tags": value, "is_day": True, "favourited": False}
            if not isinstance(value, dict):
                logger.warning("Skipping malformed tag entry for %s", key)
                continue
            wallpaper = Wallpaper.from_dict(path, value)
            wallpapers[wallpaper.key] = wallpaper
        return wallpapers

    def write_tag_store(self, wallpapers: Iterable[Wallpaper]) -> None:
        data = {wallpaper.key: wallpaper.to_dict() for wallpaper in wallpapers}
        self.tags_path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.tags_path.with_name(f"{self.tags_path.name}.tmp")
        # ASCII output keeps undecodable filenames (surrogate escapes) intact
        try:
            with open(tmp_path, "w", encoding="utf-8") as handle:
                json.dump(data, handle, indent=2, sort_keys=True, ensure_ascii=True)
                handle.write("\n")
            os.replace(tmp_path, self.tags_path)
        finally:
            if tmp_path.exists():
                tmp_path.unlink()

    def load(self) -> Set[Wallpaper]:
        """
        Merge the saved tags with the files currently in the directory.

        Saved wallpapers whose file is gone are dropped, new files are added
        with default tags, and the merged set is written back.
        """
        saved = self.read_tag_store()
        wallpapers = {wallpaper for wallpaper in saved.values() if wallpaper.is_valid()}
        dropped = len(saved) - len(wallpapers)

        added = 0
        for path in self.list_wallpaper_files():
            wallpaper = Wallpaper(path, Weather.default())
            if wallpaper not in wallpapers:
                wallpapers.add(wallpaper)
                added += 1

        if dropped or added:
            logger.info("Wallpaper store: %d new, %d removed, %d total", added, dropped, len(wallpapers))
        self.save(wallpapers)
        return wallpapers

    def save(self, wallpapers: Iterable[Wallpaper]) -> None:
        valid = [wallpaper for wallpaper in wallpapers if wallpaper.is_valid()]
        self.write_tag_store(valid)
        logger.debug("Saved tags for %d wallpapers to %s", len(valid), self.tags_path)

    def reset(self) -> Set[Wallpaper]:
        """Forget every saved tag and reload the directory from scratch"""
        self.write_tag_store([])
        logger.info("Cleared all wallpaper tags")
        return self.load()
