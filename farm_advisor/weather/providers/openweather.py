"""
OpenWeather current-weather and forecast provider.

Requires an API key (``OPENWEATHER_API_KEY``). Responses are never cached:
conditions are fetched fresh on every call.
"""

from typing import Any

import pandas as pd
from pydantic import ValidationError

from farm_advisor.config import ProviderConfig, get_provider_config, get_settings
from farm_advisor.http_cache import request
from farm_advisor.logging_config import get_logger
from farm_advisor.weather.models import (
    CurrentWeather,
    DailyForecast,
    OpenWeatherForecastResponse,
    OpenWeatherResponse,
    WeatherForecast,
    epoch_to_datetime,
)
from farm_advisor.weather.providers.base import WeatherProviderBase

logger = get_logger(__name__)

DEFAULT_ENDPOINT = "https://api.openweathermap.org/data/2.5/weather"
DEFAULT_FORECAST_ENDPOINT = "https://api.openweathermap.org/data/2.5/forecast"
ICON_URL = "https://openweathermap.org/img/wn/{icon}@2x.png"


class OpenWeatherProvider(WeatherProviderBase):
    """Current conditions and a 5-day forecast from OpenWeather."""

    def __init__(self, api_key: str | None = None, timeout: float | None = None):
        config = get_provider_config("weather", "openweather") or ProviderConfig(
            timeout_s=20.0
        )
        super().__init__(timeout if timeout is not None else config.timeout_s)
        self.provider_name = "openweather"
        self.endpoint = config.endpoint or DEFAULT_ENDPOINT
        self.forecast_endpoint = config.forecast_endpoint or DEFAULT_FORECAST_ENDPOINT
        self.units = config.units or "metric"
        self.api_key = api_key if api_key is not None else get_settings().openweather_api_key

    def is_configured(self) -> bool:
        return bool(self.api_key)

    def get_current_weather(self, lat: float, lon: float) -> CurrentWeather:
        """Fetch current weather for ``(lat, lon)``.

        Raises:
            ValueError: If coordinates are invalid or the payload is malformed
            RuntimeError: If no API key is configured or the API rejects the call
        """
        logger.info(f"Fetching OpenWeather conditions for ({lat}, {lon})")
        body = self._get(self.endpoint, lat, lon, "Failed to fetch weather data")

        try:
            payload = OpenWeatherResponse.model_validate(body)
        except ValidationError as e:
            raise ValueError(f"Unexpected OpenWeather response: {e}") from e

        weather = CurrentWeather.from_openweather(payload, lat, lon)
        logger.debug(
            f"OpenWeather: {weather.temperature_c}°C, {weather.description} "
            f"at {weather.location_name or 'unnamed location'}"
        )
        return weather

    def get_forecast(self, lat: float, lon: float) -> WeatherForecast:
        """Fetch the 3-hourly forecast and roll it up into local calendar days.

        Raises:
            ValueError: If coordinates are invalid or the payload is malformed
            RuntimeError: If no API key is configured or the API rejects the call
        """
        logger.info(f"Fetching OpenWeather forecast for ({lat}, {lon})")
        body = self._get(
            self.forecast_endpoint, lat, lon, "Failed to fetch weather forecast"
        )

        try:
            payload = OpenWeatherForecastResponse.model_validate(body)
        except ValidationError as e:
            raise ValueError(f"Unexpected OpenWeather forecast response: {e}") from e

        city = payload.city
        days = self._aggregate_to_daily(payload)
        logger.debug(
            f"OpenWeather forecast: {len(days)} days for {city.name or 'unnamed location'}"
        )

        return WeatherForecast(
            latitude=lat,
            longitude=lon,
            location_name=city.name or None,
            country=city.country,
            utc_offset_s=city.timezone,
            sunrise=epoch_to_datetime(city.sunrise),
            sunset=epoch_to_datetime(city.sunset),
            days=days,
        )

    def _get(self, endpoint: str, lat: float, lon: float, failure: str) -> Any:
        self._validate_coordinates(lat, lon)
        if not self.api_key:
            raise RuntimeError("OpenWeather API key not configured.")

        params = {"lat": lat, "lon": lon, "appid": self.api_key, "units": self.units}
        response = request(
            "GET", endpoint, use_cache=False, params=params, timeout=self.timeout
        )

        if not response.ok:
            message = self._error_message(response, failure)
            logger.error(
                f"OpenWeather request failed ({response.status_code}): {message}"
            )
            raise RuntimeError(message)

        try:
            return response.json()
        except ValueError as e:
            raise ValueError(f"OpenWeather returned a non-JSON body: {e}") from e

    @staticmethod
    def _aggregate_to_daily(payload: OpenWeatherForecastResponse) -> list[DailyForecast]:
        """
        Aggregate 3-hourly forecast slots to one entry per local day.

        Temperatures are the min/max over the day's slots, humidity the mean,
        precipitation probability the highest slot. The condition is the most
        frequent one, ties going to the earliest slot.
        """
        if not payload.entries:
            return []

        offset = payload.city.timezone
        rows = []
        for entry in payload.entries:
            condition = entry.weather[0] if entry.weather else None
            main = entry.main
            rows.append(
                {
                    "local_time": epoch_to_datetime(entry.dt + offset),
                    "temp_min": main.temp if main.temp_min is None else main.temp_min,
                    "temp_max": main.temp if main.temp_max is None else main.temp_max,
                    "humidity": entry.main.humidity,
                    "pop": entry.pop,
                    "condition": condition.main if condition else None,
                    "description": condition.description if condition else None,
                    "icon": condition.icon if condition else None,
                }
            )

        df = pd.DataFrame(rows).sort_values("local_time")
        df["date"] = df["local_time"].dt.date

        days = []
        for day, group in df.groupby("date", sort=True):
            humidity = group["humidity"].dropna()
            pop = group["pop"].dropna()

            condition = description = icon_url = None
            conditions = group["condition"].dropna()
            if not conditions.empty:
                counts = conditions.value_counts()
                top = counts[counts == counts.max()].index
                first = group[group["condition"].isin(top)].iloc[0]
                condition = first["condition"]
                description = first["description"]
                if first["icon"]:
                    icon_url = ICON_URL.format(icon=first["icon"])

            days.append(
                DailyForecast(
                    forecast_date=day,
                    temp_min_c=float(group["temp_min"].min()),
                    temp_max_c=float(group["temp_max"].max()),
                    humidity_percent=(
                        round(float(humidity.mean()), 1) if not humidity.empty else None
                    ),
                    precipitation_probability_percent=(
                        round(float(pop.max()) * 100) if not pop.empty else None
                    ),
                    condition=condition,
                    description=description,
                    icon_url=icon_url,
                )
            )

        return days

    @staticmethod
    def _error_message(response, default: str) -> str:
        try:
            body = response.json()
        except ValueError:
            body = None
        if isinstance(body, dict) and body.get("message"):
            return str(body["message"])
        return default

