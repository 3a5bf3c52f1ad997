"""
Weather clients.

API logic lives here, separate from the FastAPI endpoints, so it can be
tested in isolation with a mocked transport.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional

import httpx


@dataclass(frozen=True)
class ResolvedLocation:
    """
    First geocoding candidate for a free-text city name.
    """
    name: str
    country: str
    lat: float
    lon: float


@dataclass(frozen=True)
class CurrentWeather:
    """Current conditions block of the forecast response."""
    temperature: float
    windspeed: float
    weathercode: int
    time: str


class WeatherError(RuntimeError):
    """Base class for lookup failures."""
    pass


class CityNotFound(WeatherError):
    """Geocoding returned no candidates."""
    pass


class UpstreamFailure(WeatherError):
    """A provider call failed or returned something unusable."""
    pass


class PersistenceFailure(WeatherError):
    """Storing the lookup failed."""
    pass


class OpenMeteoClient:
    """
    Open-Meteo wrapper.

    Endpoints used:
    - Geocoding:
        https://geocoding-api.open-meteo.com/v1/search?name=...
    - Current weather:
        https://api.open-meteo.com/v1/forecast?latitude=...&longitude=...&current_weather=true

    Units are the provider defaults: °C and km/h.
    """

    def __init__(
        self,
        geocoding_url: str = "https://geocoding-api.open-meteo.com/v1/search",
        forecast_url: str = "https://api.open-meteo.com/v1/forecast",
        timeout_s: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.geocoding_url = geocoding_url
        self.forecast_url = forecast_url
        self.timeout_s = timeout_s
        self.transport = transport

    async def _get_json(self, url: str, params: Dict[str, Any], what: str) -> Dict[str, Any]:
        try:
            async with httpx.AsyncClient(timeout=self.timeout_s, transport=self.transport) as client:
                r = await client.get(url, params=params)
        except httpx.HTTPError as e:
            raise UpstreamFailure(f"{what} request failed: {e!r}") from e

        if r.status_code != 200:
            raise UpstreamFailure(f"{what} failed ({r.status_code}): {r.text}")

        try:
            data = r.json()
        except ValueError as e:
            raise UpstreamFailure(f"{what} returned invalid JSON") from e
        if not isinstance(data, dict):
            raise UpstreamFailure(f"{what} returned unexpected payload: {data!r}")
        return data

    async def geocode(self, name: str) -> ResolvedLocation:
        """
        Resolve a city name; the first candidate wins, no ranking.
        Raises CityNotFound when the provider has no candidates.
        """
        data = await self._get_json(self.geocoding_url, {"name": name}, "Geocoding")

        results = data.get("results") or []
        if not results:
            raise CityNotFound(f"No geocoding results for {name!r}")

        best = results[0]
        try:
            return ResolvedLocation(
                name=best.get("name", name),
                country=best.get("country", ""),
                lat=float(best["latitude"]),
                lon=float(best["longitude"]),
            )
        except (KeyError, TypeError, ValueError) as e:
            raise UpstreamFailure(f"Malformed geocoding result: {best!r}") from e

    async def current_weather(self, lat: float, lon: float) -> CurrentWeather:
        """
        Retrieves current weather conditions for a lat/lon.
        """
        params = {"latitude": lat, "longitude": lon, "current_weather": "true"}
        data = await self._get_json(self.forecast_url, params, "Current weather")

        current = data.get("current_weather")
        try:
            return CurrentWeather(
                temperature=float(current["temperature"]),
                windspeed=float(current["windspeed"]),
                weathercode=int(current["weathercode"]),
                time=str(current["time"]),
            )
        except (KeyError, TypeError, ValueError) as e:
            raise UpstreamFailure(f"Malformed current_weather block: {current!r}") from e
