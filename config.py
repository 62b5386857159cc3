import os
from pathlib import Path
from dotenv import load_dotenv

# Load environment variables from .env file
env_path = Path(__file__).parent / '.env'
load_dotenv(dotenv_path=env_path)

# Enter your WeatherAPI key from https://www.weatherapi.com/my/
# Or set it in the .env file as WEATHER_API_KEY
WeatherApiKey = os.getenv("WEATHER_API_KEY", "")

# Location passed to the weather provider: city name, "lat,lon" or "auto:ip"
WeatherLocation = os.getenv("WEATHER_LOCATION", "auto:ip")

WeatherApiUrl = "https://api.weatherapi.com/v1/current.json"

# Seconds to wait for the weather provider before giving up
RequestTimeout = 30

# Folder (inside your Pictures directory) holding the wallpapers to rotate.
# Override with WALLPAPER_DIR in the .env file.
WallpaperDirName = "weather_wallpapers"
WallpaperDir = os.getenv("WALLPAPER_DIR", "")

# Only these extensions are picked up from the wallpaper directory
ValidExtensions = ("png", "jpg", "bmp")

# Files written next to the wallpapers
TagStoreFile = "tags.json"
SettingsFile = "settings.json"
CurrentWallpaperInfoFile = "current_wallpaper_info.json"
LogFile = "weatherwallpaper.log"

# Reference table of provider condition codes (ships with the program)
ConditionsFile = Path(__file__).parent / "weather_conditions.json"

# Default refresh interval: 5 minutes
DefaultIntervalMillis = 5 * 60 * 1000

# Favourited wallpapers have their matching-tag count multiplied by this
FavouriteMultiplier = 2

# Terminal preview size (characters)
PreviewWidth = 32
