"""Exceptions raised by the weather wallpaper changer."""


class WeatherWallpaperError(Exception):
    """Base class for all application errors."""


class WeatherFetchFailed(WeatherWallpaperError):
    """The weather provider could not be reached or returned unusable data."""


class ConditionLookupFailed(WeatherWallpaperError):
    """A condition text or code is not in the reference table."""

    def __init__(self, condition):
        super().__init__(f"Unknown weather condition: {condition!r}")
        self.condition = condition


class InvalidWallpaper(WeatherWallpaperError):
    """The desktop refused to use the given image."""


class ImagePrintFail(WeatherWallpaperError):
    """The terminal preview of an image could not be rendered."""


class Interrupted(WeatherWallpaperError):
    """The user cancelled an interactive prompt."""


class InvalidInput(WeatherWallpaperError):
    """User input was out of range or not a number."""


class NoWallpapersAvailable(WeatherWallpaperError):
    """There is nothing to choose from."""


class TagStoreCorrupt(WeatherWallpaperError):
    """The persisted tag file exists but cannot be parsed."""
