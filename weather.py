from dataclasses import dataclass, field
from typing import Dict, FrozenSet, Iterable, Optional

from weather_tags import ConditionParser, WeatherTag, sort_tags


@dataclass(frozen=True)
class Weather:
    """Weather tags plus time of day. is_day=None means day and night."""

    tags: FrozenSet[WeatherTag] = field(default_factory=frozenset)
    is_day: Optional[bool] = True

    def __post_init__(self):
        # Accept any iterable of tags but always store a frozenset
        object.__setattr__(self, "tags", frozenset(self.tags))

    @classmethod
    def default(cls) -> "Weather":
        return cls(frozenset(), True)

    @classmethod
    def from_provider(cls, data, parser: ConditionParser) -> "Weather":
        """Build a snapshot from already fetched provider data"""
        return cls(frozenset(parser.parse(data.code)), bool(data.is_day))

    def with_tags(self, tags: Iterable[WeatherTag]) -> "Weather":
        return Weather(frozenset(tags), self.is_day)

    def with_is_day(self, is_day: Optional[bool]) -> "Weather":
        return Weather(self.tags, is_day)

    @property
    def time_of_day(self) -> str:
        if self.is_day is None:
            return "day & night"
        return "daytime" if self.is_day else "night-time"

    def to_dict(self) -> Dict:
        return {
            "tags": [tag.value for tag in sort_tags(self.tags)],
            "is_day": self.is_day,
        }

    def __str__(self) -> str:
        labels = ", ".join(tag.label for tag in sort_tags(self.tags)) or "no tags"
        return f"{labels} ({self.time_of_day})"
