"""
pytest configuration for farm-advisor tests.

Routes the HTTP cache to a per-test temporary directory and keeps real API
keys from leaking into unit tests.
"""

import importlib
from pathlib import Path

import pytest
import requests_cache
from dotenv import load_dotenv


def pytest_configure(config):
    """Load .env from the project root for tests marked ``network``."""
    env_path = Path(__file__).parent.parent / ".env"
    if env_path.exists():
        load_dotenv(env_path)


@pytest.fixture(autouse=True)
def _isolated_settings(monkeypatch):
    """Start every test without API keys and with fresh cached settings."""
    import farm_advisor.config as config

    for var in ("OPENWEATHER_API_KEY", "GEMINI_API_KEY", "GOOGLE_API_KEY", "GEMINI_MODEL", "SOIL_DEPTH"):
        monkeypatch.delenv(var, raising=False)
    # .env must not refill the variables removed above
    monkeypatch.setattr("dotenv.load_dotenv", lambda *args, **kwargs: False)

    config.clear_config_cache()
    yield
    config.clear_config_cache()


@pytest.fixture(autouse=True)
def _route_test_cache_to_tmp(tmp_path):
    """Give each test its own SQLite cache."""
    hc = importlib.import_module("farm_advisor.http_cache")
    hc.reset_session()

    test_session = requests_cache.CachedSession(
        cache_name=str(tmp_path / "test_cache"),
        backend="sqlite",
        cache_control=True,
        allowable_codes=(200,),
    )
    hc.set_session_for_tests(test_session)

    yield test_session

    hc.reset_session()


@pytest.fixture
def mock_response():
    """Build a Mock that looks like a ``requests.Response``."""
    from unittest.mock import Mock

    def _make(payload=None, status_code=200):
        response = Mock()
        response.status_code = status_code
        response.ok = 200 <= status_code < 400
        response.json.return_value = payload
        if payload is None:
            response.json.side_effect = ValueError("No JSON body")
        return response

    return _make


@pytest.fixture
def soilgrids_payload():
    """SoilGrids properties/query body for a loamy site (raw mapped units)."""

    def layer(name, mean, d_factor=10, mapped="g/kg", target="%"):
        return {
            "name": name,
            "unit_measure": {
                "d_factor": d_factor,
                "mapped_units": mapped,
                "target_units": target,
                "uncertainty_unit": "",
            },
            "depths": [
                {
                    "range": {"top_depth": 0, "bottom_depth": 5, "unit_depth": "cm"},
                    "label": "0-5cm",
                    "values": {"mean": mean},
                }
            ],
        }

    def _make(sand=400, silt=400, clay=200, phh2o=65, soc=183):
        return {
            "type": "Feature",
            "geometry": {"type": "Point", "coordinates": [77.21, 28.61]},
            "properties": {
                "layers": [
                    layer("clay", clay),
                    layer("sand", sand),
                    layer("silt", silt),
                    layer("phh2o", phh2o, mapped="pH*10", target="-"),
                    layer("soc", soc, mapped="dg/kg", target="g/kg"),
                ]
            },
            "query_time_s": 0.4,
        }

    return _make


@pytest.fixture
def openweather_payload():
    """OpenWeather current-weather body (metric units)."""
    return {
        "coord": {"lon": 77.21, "lat": 28.61},
        "weather": [
            {"id": 721, "main": "Haze", "description": "haze", "icon": "50d"}
        ],
        "main": {
            "temp": 31.4,
            "feels_like": 34.2,
            "temp_min": 29.9,
            "temp_max": 32.1,
            "pressure": 1008,
            "humidity": 58,
        },
        "visibility": 3000,
        "wind": {"speed": 2.5, "deg": 290},
        "clouds": {"all": 20},
        "dt": 1760770800,
        "sys": {"country": "IN", "sunrise": 1760748600, "sunset": 1760789700},
        "timezone": 19800,
        "name": "New Delhi",
        "cod": 200,
    }


@pytest.fixture
def openweather_forecast_payload():
    """OpenWeather 5 day / 3 hour forecast body for New Delhi (UTC+5:30).

    The 21:00 UTC slot on 18 Oct falls on 19 Oct local time.
    """

    def entry(dt, temp_min, temp_max, humidity, condition, description, icon, pop=None):
        item = {
            "dt": dt,
            "main": {
                "temp": (temp_min + temp_max) / 2,
                "temp_min": temp_min,
                "temp_max": temp_max,
                "humidity": humidity,
            },
            "weather": [{"main": condition, "description": description, "icon": icon}],
            "wind": {"speed": 2.0, "deg": 300},
        }
        if pop is not None:
            item["pop"] = pop
        return item

    return {
        "cod": "200",
        "cnt": 5,
        "list": [
            entry(1760778000, 30.0, 32.0, 50, "Haze", "haze", "50d", pop=0.1),
            entry(1760788800, 29.0, 31.0, 60, "Clear", "clear sky", "01n", pop=0.4),
            entry(1760821200, 24.0, 25.0, 80, "Clear", "clear sky", "01n", pop=0.0),
            entry(1760853600, 27.0, 33.0, 40, "Clouds", "scattered clouds", "03d", pop=0.2),
            entry(1760864400, 30.0, 34.5, 30, "Clouds", "broken clouds", "04d"),
        ],
        "city": {
            "name": "New Delhi",
            "country": "IN",
            "timezone": 19800,
            "sunrise": 1760748600,
            "sunset": 1760789700,
        },
    }
