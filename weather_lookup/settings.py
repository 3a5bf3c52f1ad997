from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Centralized configuration.

    Loaded from:
    - environment variables (e.g. PORT, SQLITE_PATH, LOG_LEVEL)
    - .env file (if present)
    """
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_name: str = "Weather Forecast App"

    # Local database file. database_url wins when set (e.g. a server DSN).
    sqlite_path: str = "weather_app.sqlite3"
    database_url: str = ""

    # Open-Meteo endpoints (no API key required)
    geocoding_url: str = "https://geocoding-api.open-meteo.com/v1/search"
    forecast_url: str = "https://api.open-meteo.com/v1/forecast"
    # None: no timeout, a hung provider call hangs the request
    http_timeout_s: Optional[float] = None

    host: str = "0.0.0.0"
    port: int = 5000

    log_level: str = "INFO"

    @property
    def sqlalchemy_url(self) -> str:
        return self.database_url or f"sqlite:///{self.sqlite_path}"


settings = Settings()
