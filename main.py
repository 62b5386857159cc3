import json
import logging
import random
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Callable, Dict, Optional, Union

import click

from config import CurrentWallpaperInfoFile, LogFile, SettingsFile
from desktop import set_desktop_background
from errors import (
    ConditionLookupFailed,
    InvalidWallpaper,
    NoWallpapersAvailable,
    WeatherFetchFailed,
    WeatherWallpaperError,
)
from scheduler_service import RefreshService
from selection import choose, choose_random, rank
from settings_manager import Settings, edit_settings
from tag_editor import TagEditor
from wallpaper import Wallpaper
from wallpaper_store import WallpaperStore
from weather import Weather
from weather_api import WeatherClient
from weather_tags import ConditionParser

logger = logging.getLogger(__name__)


class MenuCommand(Enum):
    START = "Start"
    TAGS = "Tags"
    SETTINGS = "Settings"
    QUIT = "Quit"


def configure_logging(log_path: Path, verbose: bool = False) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format='%(asctime)s - %(levelname)s - %(message)s',
        handlers=[
            logging.FileHandler(log_path, encoding='utf-8'),
            logging.StreamHandler()
        ]
    )
    # Keep HTTP chatter out of the log unless asked for
    if not verbose:
        logging.getLogger("urllib3").setLevel(logging.WARNING)
        logging.getLogger("PIL").setLevel(logging.WARNING)


class WeatherWallpaperApp:
    def __init__(
        self,
        wallpaper_dir: Optional[Union[str, Path]] = None,
        weather_client: Optional[WeatherClient] = None,
        parser: Optional[ConditionParser] = None,
        set_background: Optional[Callable[[Path], None]] = None,
        rng: Optional[random.Random] = None,
    ) -> None:
        self.store = WallpaperStore(wallpaper_dir)
        self.app_dir = self.store.directory
        self.log_path = self.app_dir / LogFile
        self.current_wallpaper_info_path = self.app_dir / CurrentWallpaperInfoFile
        self.settings = Settings.load(self.app_dir / SettingsFile)
        self.weather_client = weather_client or WeatherClient()
        self.parser = parser or ConditionParser()
        self.set_background = set_background or set_desktop_background
        self.rng = rng

    def current_weather(self) -> Weather:
        data = self.weather_client.fetch_current_condition()
        weather = Weather.from_provider(data, self.parser)
        logger.info("🌤️ Weather: %s -> %s", data.text, weather)
        return weather

    def load_wallpapers(self):
        wallpapers = self.store.load()
        if not wallpapers:
            raise NoWallpapersAvailable(
                f"No wallpapers found in {self.store.directory}. "
                "Add some png, jpg or bmp images there and tag them first."
            )
        return wallpapers

    def change_wallpaper(self, trigger: str = "manual") -> Optional[Wallpaper]:
        """Pick a wallpaper for the current weather and apply it"""
        logger.info(f"Changing wallpaper (trigger: {trigger})")
        wallpapers = self.load_wallpapers()

        weather: Optional[Weather] = None
        try:
            weather = self.current_weather()
        except (WeatherFetchFailed, ConditionLookupFailed) as e:
            logger.warning("Weather unavailable (%s); choosing a random wallpaper", e)

        if weather is None:
            wallpaper = choose_random(wallpapers, self.rng)
        else:
            wallpaper = choose(weather, wallpapers, self.rng)

        try:
            self.set_background(wallpaper.path)
        except InvalidWallpaper as e:
            logger.error(f"Error changing wallpaper: {e}")
            return None

        logger.info(f"Wallpaper updated ({trigger}): {wallpaper.filename} [{wallpaper.weather}]")
        self._write_current_wallpaper_info(wallpaper, weather, trigger)
        return wallpaper

    def _write_current_wallpaper_info(self, wallpaper: Wallpaper, weather: Optional[Weather], trigger: str) -> None:
        info: Dict = {
            "path": wallpaper.key,
            "filename": wallpaper.filename,
            "wallpaper": wallpaper.to_dict(),
            "weather": weather.to_dict() if weather else None,
            "trigger": trigger,
            "timestamp": datetime.now().isoformat(),
        }
        try:
            with open(self.current_wallpaper_info_path, "w", encoding="utf-8") as handle:
                json.dump(info, handle, indent=2, ensure_ascii=False)
        except OSError as e:
            logger.warning(f"Could not write {self.current_wallpaper_info_path}: {e}")

    def start(self, cycles: Optional[int] = None) -> int:
        """Run the refresh loop; refuses to start without wallpapers"""
        count = len(self.load_wallpapers())
        logger.info(
            "Starting Weather Wallpaper (%d wallpapers, every %g minutes)",
            count,
            self.settings.interval_minutes,
        )
        return RefreshService(self, self.settings).run(cycles)

    def edit_tags(self) -> None:
        TagEditor(self.store).run()

    def edit_settings(self) -> None:
        edit_settings(self.settings)

    def status(self, limit: int = 5) -> None:
        wallpapers = self.store.load()
        click.echo(f"Wallpaper directory: {self.store.directory} ({len(wallpapers)} images)")
        click.echo(f"Refresh interval: {self.settings.interval_minutes:g} minutes")
        try:
            weather = self.current_weather()
        except (WeatherFetchFailed, ConditionLookupFailed) as e:
            click.secho(f"Weather unavailable: {e}", fg="yellow")
            return
        click.echo("Current weather: " + click.style(str(weather), bold=True))
        for wallpaper, score in rank(weather, wallpapers)[:limit]:
            click.echo(f"  {score:>3}  {wallpaper.filename} [{wallpaper.weather}]")

    def prompt_menu(self) -> MenuCommand:
        commands = list(MenuCommand)
        click.echo()
        for number, command in enumerate(commands, start=1):
            click.echo(f"  {number}. {command.value}")
        try:
            choice = click.prompt("Weather Wallpaper", type=click.IntRange(1, len(commands)), default=1)
        except click.Abort:
            click.echo()
            return MenuCommand.QUIT
        return commands[choice - 1]

    def menu(self) -> None:
        handlers: Dict[MenuCommand, Callable[[], object]] = {
            MenuCommand.START: self.start,
            MenuCommand.TAGS: self.edit_tags,
            MenuCommand.SETTINGS: self.edit_settings,
        }
        while True:
            command = self.prompt_menu()
            if command is MenuCommand.QUIT:
                return
            try:
                handlers[command]()
            except WeatherWallpaperError as e:
                click.secho(str(e), fg="red")


@click.group(invoke_without_command=True)
@click.option(
    "--wallpaper-dir",
    type=click.Path(file_okay=False),
    default=None,
    help="Folder with the wallpapers (default: ~/Pictures/weather_wallpapers)",
)
@click.option("--verbose", is_flag=True, help="Log debug details")
@click.pass_context
def cli(ctx, wallpaper_dir, verbose):
    """Swap the desktop wallpaper for one matching the weather."""
    app = WeatherWallpaperApp(wallpaper_dir)
    configure_logging(app.log_path, verbose)
    ctx.obj = app
    if ctx.invoked_subcommand is None:
        app.menu()


@cli.command()
@click.pass_obj
def start(app: WeatherWallpaperApp):
    """Change the wallpaper every refresh interval until stopped."""
    try:
        app.start()
    except WeatherWallpaperError as e:
        raise click.ClickException(str(e))


@cli.command()
@click.pass_obj
def once(app: WeatherWallpaperApp):
    """Change the wallpaper once and exit."""
    try:
        wallpaper = app.change_wallpaper("once")
    except WeatherWallpaperError as e:
        raise click.ClickException(str(e))
    if wallpaper is None:
        raise click.ClickException("The wallpaper could not be applied, see the log for details")
    click.echo(f"Wallpaper set to {wallpaper.filename}")


@cli.command()
@click.pass_obj
def tags(app: WeatherWallpaperApp):
    """Edit the weather tags of every wallpaper."""
    try:
        app.edit_tags()
    except WeatherWallpaperError as e:
        raise click.ClickException(str(e))


@cli.command()
@click.pass_obj
def settings(app: WeatherWallpaperApp):
    """Edit the refresh interval."""
    app.edit_settings()


@cli.command()
@click.pass_obj
def status(app: WeatherWallpaperApp):
    """Show the current weather and the best matching wallpapers."""
    try:
        app.status()
    except WeatherWallpaperError as e:
        raise click.ClickException(str(e))


if __name__ == "__main__":
    cli()
