import httpx
import pytest
from fastapi.testclient import TestClient

from weather_lookup import models
from weather_lookup.main import create_app, get_weather_client
from weather_lookup.settings import Settings
from weather_lookup.weather_clients import OpenMeteoClient


class FakeOpenMeteo:
    """Stands in for both Open-Meteo hosts behind an httpx.MockTransport."""

    def __init__(self):
        self.geo_results = [
            {"name": "Berlin", "country": "Germany", "latitude": 52.52, "longitude": 13.41},
            {"name": "Berlin", "country": "United States", "latitude": 44.47, "longitude": -71.19},
        ]
        self.current = {"temperature": 12.3, "windspeed": 9.4, "weathercode": 2, "time": "2026-10-18T12:00"}
        self.geo_status = 200
        self.forecast_status = 200
        self.forecast_exc = None
        self.requests = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if request.url.host == "geocoding-api.open-meteo.com":
            if self.geo_status != 200:
                return httpx.Response(self.geo_status, text="geocoder unavailable")
            if not self.geo_results:
                # Open-Meteo omits "results" entirely when nothing matches
                return httpx.Response(200, json={"generationtime_ms": 0.4})
            return httpx.Response(200, json={"results": self.geo_results})

        if self.forecast_exc is not None:
            raise self.forecast_exc
        if self.forecast_status != 200:
            return httpx.Response(self.forecast_status, text="upstream unavailable")
        return httpx.Response(200, json={"latitude": 52.52, "longitude": 13.41, "current_weather": self.current})

    def client(self) -> OpenMeteoClient:
        return OpenMeteoClient(transport=httpx.MockTransport(self.handler))

    def hosts(self):
        return [r.url.host for r in self.requests]


# Settings pointing at a temporary SQLite file, ignoring any local .env.
@pytest.fixture()
def settings(tmp_path):
    return Settings(_env_file=None, sqlite_path=str(tmp_path / "test.sqlite3"), database_url="")


@pytest.fixture()
def provider():
    return FakeOpenMeteo()


@pytest.fixture()
def app(settings, provider):
    app = create_app(settings)
    app.dependency_overrides[get_weather_client] = provider.client
    return app


@pytest.fixture()
def client(app):
    with TestClient(app) as c:
        yield c


@pytest.fixture()
def stored_records(app, client):
    """Returns a callable listing the rows currently in weather_records."""
    def _rows():
        db = app.state.db.session_factory()
        try:
            return db.query(models.WeatherRecord).order_by(models.WeatherRecord.id).all()
        finally:
            db.close()
    return _rows
