"""
Weather provider client.

Fetches the current condition from WeatherAPI (https://www.weatherapi.com).
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

import requests

from config import RequestTimeout, WeatherApiKey, WeatherApiUrl, WeatherLocation
from errors import WeatherFetchFailed

logger = logging.getLogger(__name__)


@dataclass
class WeatherData:
    """Current condition as reported by the provider"""
    text: str
    code: int
    is_day: bool
    location: str = ""
    temperature: Optional[float] = None


class WeatherClient:
    def __init__(
        self,
        api_key: Optional[str] = None,
        location: Optional[str] = None,
        url: str = WeatherApiUrl,
        timeout: int = RequestTimeout,
        session: Optional[requests.Session] = None,
    ):
        self.api_key = api_key if api_key is not None else WeatherApiKey
        self.location = location or WeatherLocation
        self.url = url
        self.timeout = timeout
        self.session = session or requests.Session()

    @property
    def configured(self) -> bool:
        return bool(self.api_key)

    def fetch_current_condition(self) -> WeatherData:
        if not self.configured:
            raise WeatherFetchFailed("No weather API key configured (set WEATHER_API_KEY)")

        params = {"key": self.api_key, "q": self.location, "aqi": "no"}
        try:
            response = self.session.get(self.url, params=params, timeout=self.timeout)
            response.raise_for_status()
            payload = response.json()
        except requests.RequestException as exc:
            raise WeatherFetchFailed(f"Weather request failed: {exc}") from exc
        except ValueError as exc:
            raise WeatherFetchFailed("Weather provider returned invalid JSON") from exc

        data = self._parse_payload(payload)
        logger.debug("Weather for %s: %s (code %s, day=%s)", data.location, data.text, data.code, data.is_day)
        return data

    @staticmethod
    def _parse_payload(payload: Dict[str, Any]) -> WeatherData:
        try:
            current = payload["current"]
            condition = current["condition"]
            location = payload.get("location", {})
            return WeatherData(
                text=str(condition["text"]).strip(),
                code=int(condition["code"]),
                is_day=int(current["is_day"]) == 1,
                location=", ".join(
                    part for part in (location.get("name"), location.get("country")) if part
                ),
                temperature=current.get("temp_c"),
            )
        except (KeyError, TypeError, ValueError) as exc:
            raise WeatherFetchFailed(f"Unexpected weather payload: {exc}") from exc
