import json
import logging
import sys

from weather_lookup.logging_config import JsonFormatter
from weather_lookup.settings import Settings


def test_port_defaults_to_5000(monkeypatch):
    monkeypatch.delenv("PORT", raising=False)
    assert Settings(_env_file=None).port == 5000


def test_port_from_environment(monkeypatch):
    monkeypatch.setenv("PORT", "8080")
    assert Settings(_env_file=None).port == 8080


def test_provider_timeout_is_off_unless_configured(monkeypatch):
    monkeypatch.delenv("HTTP_TIMEOUT_S", raising=False)
    assert Settings(_env_file=None).http_timeout_s is None

    monkeypatch.setenv("HTTP_TIMEOUT_S", "2.5")
    assert Settings(_env_file=None).http_timeout_s == 2.5


def test_database_url_overrides_sqlite_path(monkeypatch):
    monkeypatch.delenv("DATABASE_URL", raising=False)
    s = Settings(_env_file=None, sqlite_path="lookups.sqlite3")
    assert s.sqlalchemy_url == "sqlite:///lookups.sqlite3"

    monkeypatch.setenv("DATABASE_URL", "sqlite:////var/lib/weather/lookups.sqlite3")
    assert Settings(_env_file=None).sqlalchemy_url == "sqlite:////var/lib/weather/lookups.sqlite3"


def test_json_formatter_adds_stack_trace_for_errors():
    try:
        raise ValueError("boom")
    except ValueError:
        record = logging.LogRecord("weather_lookup", logging.ERROR, __file__, 10, "lookup failed", None, None)
        record.exc_info = sys.exc_info()

    out = json.loads(JsonFormatter().format(record))
    assert out["level"] == "ERROR"
    assert out["message"] == "lookup failed"
    assert "ValueError: boom" in out["stack_trace"]


def test_json_formatter_includes_city_context():
    record = logging.LogRecord("weather_lookup.main", logging.INFO, __file__, 20, "City not found: %r", ("Atlantis",), None)
    record.city = "Atlantis"

    out = json.loads(JsonFormatter().format(record))
    assert out["city"] == "Atlantis"
    assert out["message"] == "City not found: 'Atlantis'"
    assert "stack_trace" not in out
