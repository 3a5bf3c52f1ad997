"""
FastAPI entrypoint.

This file focuses on:
- routing
- request/response handling
- wiring together DB + client + templates
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any, Dict, Optional
from urllib.parse import quote

import httpx
from fastapi import APIRouter, Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse, JSONResponse
from fastapi.templating import Jinja2Templates
from sqlalchemy.orm import Session

from .crud import lookup_weather
from .db import connect_db, get_db
from .logging_config import setup_logging
from .schemas import MessageOut, WeatherOut
from .settings import Settings, settings as default_settings
from .ui import CITY_NOT_FOUND, WeatherPanel
from .weather_clients import CityNotFound, OpenMeteoClient

logger = logging.getLogger(__name__)

templates = Jinja2Templates(directory=str(Path(__file__).parent / "templates"))

router = APIRouter()


def get_weather_client(request: Request) -> OpenMeteoClient:
    return request.app.state.weather_client


async def fetch_from_api(app: FastAPI, city: str) -> Dict[str, Any]:
    """
    Call this service's own GET /weather/{city} over HTTP, in-process.
    Any non-2xx status raises.
    """
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://weather-lookup") as client:
        r = await client.get(f"/weather/{quote(city, safe='')}")
    r.raise_for_status()
    return r.json()


# -------------------------
# UI routes
# -------------------------

@router.get("/", response_class=HTMLResponse)
async def home(request: Request, city: str = ""):
    """Search form; submitting it reloads the page with ?city=..."""
    panel = WeatherPanel()
    panel.on_input(city)

    async def fetch(name: str) -> Dict[str, Any]:
        return await fetch_from_api(request.app, name)

    await panel.search(fetch)
    return templates.TemplateResponse(
        request,
        "index.html",
        {"app_name": request.app.title, "panel": panel},
    )


# -------------------------
# JSON API
# -------------------------

@router.get(
    "/weather/{city:path}",
    response_model=WeatherOut,
    responses={404: {"model": MessageOut}, 500: {"model": MessageOut}},
)
async def api_weather(
    city: str,
    db: Session = Depends(get_db),
    client: OpenMeteoClient = Depends(get_weather_client),
):
    """
    Current weather for a city:
    - 404 when geocoding has no candidates
    - 500 for anything else that goes wrong (details only in the log)
    """
    try:
        return await lookup_weather(db, city, client)
    except CityNotFound:
        logger.info("City not found: %r", city, extra={"city": city})
        return JSONResponse(status_code=404, content={"message": CITY_NOT_FOUND})
    except Exception:
        logger.exception("Weather lookup failed for %r", city, extra={"city": city})
        return JSONResponse(status_code=500, content={"message": "Server error"})


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or default_settings

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        setup_logging(settings.log_level)
        app.state.db = connect_db(settings)
        app.state.weather_client = OpenMeteoClient(
            geocoding_url=settings.geocoding_url,
            forecast_url=settings.forecast_url,
            timeout_s=settings.http_timeout_s,
        )
        yield
        app.state.db.dispose()

    app = FastAPI(title=settings.app_name, lifespan=lifespan)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.include_router(router)
    return app


app = create_app()
