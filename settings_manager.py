"""
Settings Manager for the weather wallpaper changer
Stores the refresh interval in settings.json
"""

import json
import logging
import math
from pathlib import Path
from typing import Dict, Union

import click

from config import DefaultIntervalMillis
from errors import InvalidInput

logger = logging.getLogger(__name__)


class Settings:
    """Persisted user settings"""

    def __init__(self, settings_file: Union[str, Path], interval_millis: int = DefaultIntervalMillis):
        self.settings_file = Path(settings_file)
        self.interval_millis = int(interval_millis)

    @classmethod
    def load(cls, settings_file: Union[str, Path]) -> "Settings":
        """Load settings, falling back to defaults if the file is missing or broken"""
        settings = cls(settings_file)
        if not settings.settings_file.exists():
            return settings
        try:
            with open(settings.settings_file, "r", encoding="utf-8") as f:
                data = json.load(f)
            settings.interval_millis = int(data.get("interval_millis", DefaultIntervalMillis))
        except (OSError, ValueError, TypeError, AttributeError) as e:
            logger.error("Failed to load settings from %s: %s", settings.settings_file, e)
            settings.restore_defaults()
        if settings.interval_millis <= 0:
            logger.warning("Ignoring non-positive refresh interval %s", settings.interval_millis)
            settings.restore_defaults()
        return settings

    def save(self) -> None:
        self.settings_file.parent.mkdir(parents=True, exist_ok=True)
        with open(self.settings_file, "w", encoding="utf-8") as f:
            json.dump(self.to_dict(), f, indent=2)

    def to_dict(self) -> Dict:
        return {"interval_millis": self.interval_millis}

    @property
    def interval_minutes(self) -> float:
        return self.interval_millis / (60 * 1000)

    @property
    def interval_seconds(self) -> float:
        return self.interval_millis / 1000

    def set_interval_minutes(self, minutes: float) -> None:
        if not math.isfinite(minutes) or minutes <= 0:
            raise InvalidInput("Refresh interval must be a positive number of minutes")
        interval_millis = int(minutes * 60 * 1000)
        if interval_millis <= 0:
            raise InvalidInput("Refresh interval is too short")
        self.interval_millis = interval_millis

    def restore_defaults(self) -> None:
        self.interval_millis = DefaultIntervalMillis


def _format_minutes(minutes: float) -> str:
    return f"{minutes:g}"


def edit_settings(settings: Settings) -> None:
    """Settings menu: refresh interval, restore defaults, back"""
    options = [
        f"Set refresh interval [{_format_minutes(settings.interval_minutes)} mins]",
        "Restore default settings",
        "Back",
    ]
    click.echo()
    for number, option in enumerate(options, start=1):
        click.echo(f"  {number}. {option}")
    try:
        choice = click.prompt("Edit settings", type=click.IntRange(1, len(options)), default=1)
    except click.Abort:
        click.echo()
        return

    if choice == 1:
        if not _prompt_interval(settings):
            return
    elif choice == 2:
        settings.restore_defaults()
    else:
        return

    settings.save()
    logger.info("Refresh interval set to %s minutes", _format_minutes(settings.interval_minutes))


def _prompt_interval(settings: Settings) -> bool:
    while True:
        try:
            minutes = click.prompt(
                f"Set refresh interval [{_format_minutes(settings.interval_minutes)} mins]",
                type=float,
            )
        except click.Abort:
            click.echo()
            return False
        try:
            settings.set_interval_minutes(minutes)
            return True
        except InvalidInput as e:
            click.secho(str(e), fg="red")
