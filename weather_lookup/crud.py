"""
Lookup service.

Keeps main.py down to routing + request/response handling; the sequence
geocode -> forecast -> store lives here and is unit tested directly.
"""

from __future__ import annotations

import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from . import models
from .schemas import WeatherOut
from .weather_clients import (
    CityNotFound,
    CurrentWeather,
    OpenMeteoClient,
    PersistenceFailure,
    ResolvedLocation,
)

logger = logging.getLogger(__name__)


def create_record(db: Session, location: ResolvedLocation, current: CurrentWeather) -> models.WeatherRecord:
    """
    INSERT one lookup snapshot. Never updates an existing row.
    """
    record = models.WeatherRecord(
        city=location.name,
        country=location.country,
        temperature=current.temperature,
        windspeed=current.windspeed,
        weathercode=current.weathercode,
        latitude=location.lat,
        longitude=location.lon,
    )
    try:
        db.add(record)
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        raise PersistenceFailure(f"Could not store lookup for {location.name!r}") from e
    db.refresh(record)
    return record


async def lookup_weather(db: Session, city: str, client: OpenMeteoClient) -> WeatherOut:
    """
    - geocode the city (first candidate wins)
    - fetch current conditions for its coordinates
    - store the combined snapshot
    - return the public projection (no coordinates, no record id)
    """
    city = city.strip()
    if not city:
        raise CityNotFound("Empty city name")

    location = await client.geocode(city)
    current = await client.current_weather(location.lat, location.lon)

    record = create_record(db, location, current)
    logger.info("Stored lookup %s for %s, %s", record.id, record.city, record.country, extra={"city": city})

    return WeatherOut(
        city=location.name,
        country=location.country,
        temperature=current.temperature,
        windspeed=current.windspeed,
        weathercode=current.weathercode,
        time=current.time,
    )
