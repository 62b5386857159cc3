"""
Weather Tag Module

Closed taxonomy of weather tags and the parser that maps weather provider
conditions onto them.
"""

import json
import logging
from enum import Enum
from functools import lru_cache
from pathlib import Path
from typing import Dict, FrozenSet, Iterable, List, Mapping, Optional, Set, Union

from config import ConditionsFile
from errors import ConditionLookupFailed

logger = logging.getLogger(__name__)


class WeatherTag(Enum):
    """Semantic weather category shared by the weather and the wallpapers"""

    Sun = "Sun"
    PartCloud = "PartCloud"
    Cloud = "Cloud"
    Rain = "Rain"
    Storm = "Storm"
    Fog = "Fog"
    Snow = "Snow"

    @property
    def synonyms(self) -> List[str]:
        return TAG_SYNONYMS[self]

    @property
    def label(self) -> str:
        return TAG_SYNONYMS[self][0]

    @property
    def codes(self) -> FrozenSet[int]:
        return TAG_CODES[self]

    @classmethod
    def from_name(cls, name: str) -> "WeatherTag":
        """Resolve a persisted tag name, accepting any letter case"""
        for tag in cls:
            if tag.value.lower() == str(name).strip().lower():
                return tag
        raise ValueError(f"Unknown weather tag '{name}'")


# First synonym is the label shown in menus
TAG_SYNONYMS: Dict[WeatherTag, List[str]] = {
    WeatherTag.Sun: ["Sunny", "Sun", "Clear"],
    WeatherTag.PartCloud: ["Partly Cloudy", "Part Cloud", "Partial Cloud"],
    WeatherTag.Cloud: ["Cloudy", "Cloud", "Overcast"],
    WeatherTag.Rain: ["Rain", "Drizzle", "Shower", "Sleet"],
    WeatherTag.Storm: ["Storm", "Thunder", "Blizzard"],
    WeatherTag.Fog: ["Fog", "Mist", "Haze"],
    WeatherTag.Snow: ["Snow", "Sleet", "Ice", "Blizzard"],
}

# WeatherAPI condition codes, see weather_conditions.json
TAG_CODES: Dict[WeatherTag, FrozenSet[int]] = {
    WeatherTag.Sun: frozenset({1000}),
    WeatherTag.PartCloud: frozenset({1003, 1063, 1066, 1069, 1072, 1087, 1150, 1180, 1210, 1240, 1255}),
    WeatherTag.Cloud: frozenset({
        1006, 1009, 1030, 1114, 1117, 1135, 1147, 1153, 1168, 1171, 1183, 1186, 1189,
        1192, 1195, 1198, 1201, 1204, 1207, 1213, 1216, 1219, 1222, 1225, 1237, 1243,
        1246, 1252, 1258, 1264, 1276, 1282,
    }),
    WeatherTag.Rain: frozenset({
        1063, 1069, 1072, 1150, 1153, 1168, 1171, 1180, 1183, 1186, 1189, 1192, 1195,
        1198, 1201, 1204, 1207, 1240, 1243, 1246, 1249, 1252, 1273, 1276,
    }),
    WeatherTag.Storm: frozenset({1087, 1117, 1246, 1273, 1276, 1279, 1282}),
    WeatherTag.Fog: frozenset({1030, 1135, 1147}),
    WeatherTag.Snow: frozenset({
        1066, 1069, 1114, 1117, 1204, 1207, 1210, 1213, 1216, 1219, 1222, 1225, 1237,
        1249, 1252, 1255, 1258, 1261, 1264, 1279, 1282,
    }),
}


def sort_tags(tags: Iterable[WeatherTag]) -> List[WeatherTag]:
    """Order tags the way they are declared in the taxonomy"""
    order = list(WeatherTag)
    return sorted(set(tags), key=order.index)


@lru_cache(maxsize=None)
def _read_conditions(path: str) -> tuple:
    with open(path, "r", encoding="utf-8") as handle:
        return tuple(json.load(handle))


def load_conditions(path: Optional[Union[str, Path]] = None) -> List[Dict]:
    """Load the provider condition reference table (read once per path)"""
    return list(_read_conditions(str(path or ConditionsFile)))


class ConditionParser:
    """Maps a provider condition (code or text) to a set of weather tags"""

    def __init__(
        self,
        conditions: Optional[Iterable[Mapping]] = None,
        tag_codes: Optional[Mapping[WeatherTag, Iterable[int]]] = None,
    ):
        if conditions is None:
            conditions = load_conditions()
        self.conditions: Dict[int, Dict] = {}
        self._codes_by_text: Dict[str, int] = {}
        for record in conditions:
            code = int(record["code"])
            self.conditions[code] = dict(record)
            for key in ("day", "night"):
                text = str(record.get(key) or "").strip().lower()
                if text:
                    self._codes_by_text.setdefault(text, code)

        source = tag_codes if tag_codes is not None else TAG_CODES
        self.tag_codes: Dict[WeatherTag, FrozenSet[int]] = {
            tag: frozenset(int(code) for code in codes) for tag, codes in source.items()
        }

    def parse(self, condition: Union[int, str]) -> Set[WeatherTag]:
        """
        Resolve a condition code or condition text to its weather tags.

        Text is first resolved to a code through the reference table.
        Raises ConditionLookupFailed if the condition is not in the table.
        """
        if isinstance(condition, bool):
            raise TypeError("Condition must be a code or a text, not a bool")
        if isinstance(condition, int):
            return self.parse_code(condition)
        if isinstance(condition, str):
            return self.parse_code(self.code_for_text(condition))
        raise TypeError(f"Unsupported condition type: {type(condition).__name__}")

    def parse_code(self, code: int) -> Set[WeatherTag]:
        if code not in self.conditions:
            raise ConditionLookupFailed(code)
        tags = {tag for tag, codes in self.tag_codes.items() if code in codes}
        if not tags:
            logger.debug("Condition code %s does not map to any tag", code)
        return tags

    def code_for_text(self, text: str) -> int:
        key = text.strip().lower()
        if key not in self._codes_by_text:
            raise ConditionLookupFailed(text)
        return self._codes_by_text[key]

    def lookup(self, code: int) -> Dict:
        """Return the reference record of a condition code"""
        if code not in self.conditions:
            raise ConditionLookupFailed(code)
        return self.conditions[code]

    def describe(self, code: int, is_day: bool = True) -> str:
        record = self.lookup(code)
        return str(record.get("day" if is_day else "night") or record.get("day") or code)

    @staticmethod
    def parse_text(text: str) -> Set[WeatherTag]:
        """
        Legacy matching: a tag matches when one of its synonyms appears
        anywhere in the condition text (case-insensitive).
        """
        lowered = text.lower()
        return {
            tag for tag in WeatherTag
            if any(synonym.lower() in lowered for synonym in tag.synonyms)
        }
