"""
ORM models.

One row per completed lookup. Rows are only ever inserted: a repeated city
produces a new row, nothing reads them back.
"""

from datetime import datetime, timezone

from sqlalchemy import String, Integer, Float, DateTime
from sqlalchemy.orm import Mapped, mapped_column

from .db import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class WeatherRecord(Base):
    __tablename__ = "weather_records"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)

    # Geocoded location (first geocoding candidate)
    city: Mapped[str] = mapped_column(String(255), index=True)
    country: Mapped[str] = mapped_column(String(255), default="")
    latitude: Mapped[float] = mapped_column(Float)
    longitude: Mapped[float] = mapped_column(Float)

    # Current conditions as reported by the forecast provider
    temperature: Mapped[float] = mapped_column(Float)  # °C
    windspeed: Mapped[float] = mapped_column(Float)  # km/h
    weathercode: Mapped[int] = mapped_column(Integer)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=_utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=_utcnow)

    def __repr__(self):
        return f"<WeatherRecord {self.id} {self.city}, {self.country}>"
