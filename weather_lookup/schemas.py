"""
Pydantic schemas.

Defines the contract of the JSON endpoint.
"""

from pydantic import BaseModel


class WeatherOut(BaseModel):
    """
    Projection returned by GET /weather/{city}.
    Coordinates and the stored record id are deliberately left out.
    """
    city: str
    country: str
    temperature: float
    windspeed: float
    weathercode: int
    time: str


class MessageOut(BaseModel):
    """Body of 404/500 responses."""
    message: str
