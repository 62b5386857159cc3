import logging
import time
from typing import Optional

from errors import NoWallpapersAvailable, TagStoreCorrupt
from settings_manager import Settings

logger = logging.getLogger(__name__)


class RefreshService:
    """Changes the wallpaper, sleeps for the configured interval, repeats."""

    def __init__(self, controller, settings: Settings):
        self.controller = controller
        self.settings = settings

    def run(self, cycles: Optional[int] = None) -> int:
        """Block until interrupted (or after `cycles` changes). Returns the number of changes."""
        completed = 0
        try:
            while cycles is None or completed < cycles:
                try:
                    self.controller.change_wallpaper("scheduler")
                except (NoWallpapersAvailable, TagStoreCorrupt):
                    raise
                except Exception as exc:  # pragma: no cover
                    logger.exception("Wallpaper update failed: %s", exc)
                completed += 1

                if cycles is not None and completed >= cycles:
                    break
                logger.debug("Next change in %.1f minutes", self.settings.interval_minutes)
                time.sleep(self.settings.interval_seconds)
        except KeyboardInterrupt:
            logger.info("Refresh loop stopped")
        return completed
