import uvicorn

from .settings import settings


def main():
    uvicorn.run("weather_lookup.main:app", host=settings.host, port=settings.port)


if __name__ == "__main__":
    main()
