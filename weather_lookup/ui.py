"""
State behind the search page.

WeatherPanel mirrors what the form does in the browser: typing, submitting,
and which of result / error ends up on screen. The API's 404 and 500 are
deliberately shown the same way.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, Optional

CITY_NOT_FOUND = "City not found"

# (upper bound inclusive, icon), checked in ascending order
ICON_BANDS = (
    (3, "☀️"),
    (48, "☁️"),
    (67, "🌧️"),
    (77, "❄️"),
)
STORM_ICON = "⛈️"


def weather_icon(code: int) -> str:
    """Display-only bucket for a WMO weathercode."""
    for upper, icon in ICON_BANDS:
        if code <= upper:
            return icon
    return STORM_ICON


Fetcher = Callable[[str], Awaitable[Dict[str, Any]]]


@dataclass
class WeatherPanel:
    city: str = ""
    weather: Optional[Dict[str, Any]] = None
    error: str = ""
    loading: bool = False

    def on_input(self, value: str) -> None:
        self.city = value
        if value.strip() == "":
            self.weather = None
            self.error = ""

    async def search(self, fetch: Fetcher) -> None:
        if not self.city:
            return

        self.loading = True
        self.error = ""
        try:
            self.weather = await fetch(self.city)
        except Exception:
            # Not-found and server errors render identically
            self.error = CITY_NOT_FOUND
            self.weather = None
        finally:
            self.loading = False

    @property
    def icon(self) -> str:
        if self.weather is None:
            return ""
        return weather_icon(self.weather["weathercode"])
