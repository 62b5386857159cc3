"""
Wallpaper Selection Module

Picks the wallpaper that best fits the current weather.

Each wallpaper is weighted by how many of its tags match the weather
(multiplied for favourites) and one is drawn at random in proportion to
those weights. Day/night is applied as a filter first; if it leaves
nothing, the whole pool is used instead.
"""

import logging
import random
from typing import Iterable, List, Optional, Sequence, Tuple

from config import FavouriteMultiplier
from errors import NoWallpapersAvailable
from wallpaper import Wallpaper
from weather import Weather

logger = logging.getLogger(__name__)


def matching_tag_count(wallpaper: Wallpaper, weather: Weather) -> int:
    return len(wallpaper.weather.tags & weather.tags)


def weight(wallpaper: Wallpaper, weather: Weather, favourite_multiplier: int = FavouriteMultiplier) -> int:
    count = matching_tag_count(wallpaper, weather)
    return count * favourite_multiplier if wallpaper.favourited else count


def is_compatible(wallpaper: Wallpaper, weather: Weather) -> bool:
    """A wallpaper tagged for both day and night fits any time"""
    return wallpaper.weather.is_day is None or wallpaper.weather.is_day == weather.is_day


def weighted_choice(
    candidates: Sequence[Wallpaper],
    weights: Sequence[int],
    rng: Optional[random.Random] = None,
) -> Wallpaper:
    """Draw proportionally to weights, uniformly if every weight is zero"""
    rng = rng or random
    if not candidates:
        raise NoWallpapersAvailable("No wallpapers to choose from")
    if len(candidates) != len(weights):
        raise ValueError("Every candidate needs exactly one weight")
    if any(value < 0 for value in weights):
        raise ValueError(f"Weights must not be negative: {list(weights)}")

    if sum(weights) == 0:
        return rng.choice(list(candidates))
    return rng.choices(list(candidates), weights=list(weights), k=1)[0]


def rank(
    weather: Weather,
    pool: Iterable[Wallpaper],
    favourite_multiplier: int = FavouriteMultiplier,
) -> List[Tuple[Wallpaper, int]]:
    """Wallpapers with their weight, best first"""
    scored = [(wallpaper, weight(wallpaper, weather, favourite_multiplier)) for wallpaper in pool]
    return sorted(scored, key=lambda item: (-item[1], item[0].key))


def choose(
    weather: Weather,
    pool: Iterable[Wallpaper],
    rng: Optional[random.Random] = None,
    favourite_multiplier: int = FavouriteMultiplier,
) -> Wallpaper:
    wallpapers = sorted(set(pool), key=lambda wallpaper: wallpaper.key)
    if not wallpapers:
        raise NoWallpapersAvailable("No wallpapers available; add images to the wallpaper directory")

    candidates = [wallpaper for wallpaper in wallpapers if is_compatible(wallpaper, weather)]
    if not candidates:
        logger.info("No wallpaper suits the %s, ignoring time of day", weather.time_of_day)
        candidates = wallpapers

    weights = [weight(wallpaper, weather, favourite_multiplier) for wallpaper in candidates]
    if not any(weights):
        logger.info("No wallpaper matches %s, choosing at random", weather)

    chosen = weighted_choice(candidates, weights, rng)
    logger.debug("Chose %s out of %d candidates", chosen.filename, len(candidates))
    return chosen


def choose_random(pool: Iterable[Wallpaper], rng: Optional[random.Random] = None) -> Wallpaper:
    """Unweighted choice, used when the weather is unknown"""
    wallpapers = sorted(set(pool), key=lambda wallpaper: wallpaper.key)
    if not wallpapers:
        raise NoWallpapersAvailable("No wallpapers available; add images to the wallpaper directory")
    return (rng or random).choice(wallpapers)
