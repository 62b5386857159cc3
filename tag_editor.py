"""
Tag Editor Module

Interactive workflow that walks through every wallpaper and asks which
weather it depicts. Cancelling a prompt (Ctrl+C) opens a small menu to
skip, go back, jump to a wallpaper, reset everything or stop.
"""

import logging
from enum import Enum
from typing import Callable, FrozenSet, List, Optional, Set

import click

from config import PreviewWidth
from errors import ImagePrintFail, Interrupted, InvalidInput
from preview import render_image
from wallpaper import Wallpaper
from wallpaper_store import WallpaperStore
from weather import Weather
from weather_tags import WeatherTag

logger = logging.getLogger(__name__)


class EditAction(Enum):
    NEXT = "Next"
    PREV = "Prev"
    GOTO = "Go to"
    RESET = "Reset all tags"
    QUIT = "Back to menu"


DAY_NIGHT_OPTIONS = [("Day", True), ("Night", False), ("Both", None)]


def _parse_indexes(value: str, count: int) -> Set[int]:
    value = value.strip()
    if value in ("", "-"):
        return set()
    indexes = set()
    for token in value.replace(",", " ").split():
        if not token.isdigit():
            raise InvalidInput(f"'{token}' is not a number")
        index = int(token)
        if not 1 <= index <= count:
            raise InvalidInput(f"{index} is not between 1 and {count}")
        indexes.add(index)
    return indexes


class TagPrompter:
    """Terminal prompts used by the editor. Ctrl+C raises Interrupted."""

    def _prompt(self, text: str, **kwargs):
        try:
            return click.prompt(text, **kwargs)
        except click.Abort as exc:
            click.echo()
            raise Interrupted() from exc

    def show(self, index: int, wallpaper: Wallpaper) -> None:
        click.echo()
        click.echo(f"{index}. " + click.style(wallpaper.filename, bold=True) + f" ({wallpaper.path})")
        click.echo(f" tags: {wallpaper.weather}")

    def warn(self, message: str) -> None:
        click.secho(message, fg="red")

    def select_tags(self, current: FrozenSet[WeatherTag]) -> Set[WeatherTag]:
        options = list(WeatherTag)
        for number, tag in enumerate(options, start=1):
            mark = "x" if tag in current else " "
            click.echo(f"  [{mark}] {number}. {tag.label}")
        default = " ".join(str(number) for number, tag in enumerate(options, start=1) if tag in current) or "-"
        while True:
            value = self._prompt("Select weather tags (numbers, '-' for none)", default=default)
            try:
                return {options[index - 1] for index in _parse_indexes(value, len(options))}
            except InvalidInput as exc:
                self.warn(str(exc))

    def select_day_night(self, current: Optional[bool]) -> Optional[bool]:
        for number, (label, _) in enumerate(DAY_NIGHT_OPTIONS, start=1):
            click.echo(f"  {number}. {label}")
        default = next(number for number, (_, value) in enumerate(DAY_NIGHT_OPTIONS, start=1) if value == current)
        choice = self._prompt(
            "Select day or night",
            type=click.IntRange(1, len(DAY_NIGHT_OPTIONS)),
            default=default,
        )
        return DAY_NIGHT_OPTIONS[choice - 1][1]

    def confirm_favourite(self, current: bool) -> bool:
        try:
            return click.confirm("Favourite", default=current)
        except click.Abort as exc:
            click.echo()
            raise Interrupted() from exc

    def interrupted_action(self) -> EditAction:
        actions = list(EditAction)
        click.secho("Interrupted", fg="yellow")
        for number, action in enumerate(actions, start=1):
            click.echo(f"  {number}. {action.value}")
        try:
            choice = self._prompt("Choose", type=click.IntRange(1, len(actions)), default=1)
        except Interrupted:
            return EditAction.QUIT
        return actions[choice - 1]

    def ask_index(self, count: int) -> int:
        value = self._prompt(f"Enter index of wallpaper to edit (0-{count - 1})")
        value = str(value).strip()
        if not value.isdigit():
            raise InvalidInput(f"'{value}' is not a number")
        return int(value)


class TagEditor:
    def __init__(
        self,
        store: WallpaperStore,
        prompter: Optional[TagPrompter] = None,
        preview: Optional[Callable] = render_image,
        preview_width: int = PreviewWidth,
    ):
        self.store = store
        self.prompter = prompter or TagPrompter()
        self.preview = preview
        self.preview_width = preview_width
        self.wallpapers: List[Wallpaper] = []

    def _load(self) -> List[Wallpaper]:
        return sorted(self.store.load(), key=lambda wallpaper: wallpaper.key)

    def run(self) -> List[Wallpaper]:
        """Edit every wallpaper in turn, then save the whole batch once"""
        self.wallpapers = self._load()
        index = 0
        while index < len(self.wallpapers):
            try:
                self.edit_wallpaper(index)
            except Interrupted:
                action = self.prompter.interrupted_action()
                logger.debug("Editing interrupted at %d: %s", index, action.name)
                index = self.next_index(index, action)
            else:
                index += 1

        self.store.save(self.wallpapers)
        logger.info("Saved tags for %d wallpapers", len(self.wallpapers))
        return self.wallpapers

    def next_index(self, index: int, action: EditAction) -> int:
        if action is EditAction.NEXT:
            return index + 1
        if action is EditAction.PREV:
            return max(index - 1, 0)
        if action is EditAction.GOTO:
            return self.goto(index)
        if action is EditAction.RESET:
            self.wallpapers = sorted(self.store.reset(), key=lambda wallpaper: wallpaper.key)
            return len(self.wallpapers)
        if action is EditAction.QUIT:
            return len(self.wallpapers)
        raise ValueError(f"Unknown edit action: {action}")

    def goto(self, current: int) -> int:
        """Ask for an index until a valid one is given"""
        count = len(self.wallpapers)
        while True:
            try:
                target = self.prompter.ask_index(count)
            except InvalidInput as exc:
                self.prompter.warn(str(exc))
                continue
            except Interrupted:
                return current
            if 0 <= target < count:
                return target
            self.prompter.warn(f"Index must be between 0 and {count - 1}")

    def edit_wallpaper(self, index: int) -> None:
        wallpaper = self.wallpapers[index]
        self.prompter.show(index, wallpaper)
        if self.preview:
            try:
                self.preview(wallpaper.path, self.preview_width)
            except ImagePrintFail as exc:
                logger.warning("Preview failed: %s", exc)

        tags = self.prompter.select_tags(wallpaper.weather.tags)
        is_day = self.prompter.select_day_night(wallpaper.weather.is_day)
        favourited = self.prompter.confirm_favourite(wallpaper.favourited)

        # Only commit once every prompt has been answered
        wallpaper.weather = Weather(frozenset(tags), is_day)
        wallpaper.favourited = favourited
