"""
Weather service: current conditions and daily forecast for a farm location.
"""

from collections.abc import Callable
from typing import TypeVar

from farm_advisor.logging_config import get_logger
from farm_advisor.weather.models import CurrentWeather, WeatherForecast
from farm_advisor.weather.providers.base import WeatherProviderBase
from farm_advisor.weather.providers.openweather import OpenWeatherProvider

logger = get_logger(__name__)

T = TypeVar("T")


class WeatherService:
    """Fetches weather from the first configured provider that succeeds."""

    def __init__(self, providers: list[WeatherProviderBase] | None = None):
        self.providers = providers or [OpenWeatherProvider()]

    def current(self, lat: float, lon: float) -> CurrentWeather:
        """
        Current conditions at ``(lat, lon)``.

        Providers without credentials are skipped. If every configured
        provider fails, the last error is raised.

        Raises:
            RuntimeError: If no provider is configured or all of them fail
        """
        return self._first_success(lambda p: p.get_current_weather(lat, lon))

    def forecast(self, lat: float, lon: float) -> WeatherForecast:
        """Daily forecast at ``(lat, lon)``, with the same fallback as ``current``."""
        return self._first_success(lambda p: p.get_forecast(lat, lon))

    def _first_success(self, call: Callable[[WeatherProviderBase], T]) -> T:
        configured = [p for p in self.providers if p.is_configured()]
        if not configured:
            raise RuntimeError("OpenWeather API key not configured.")

        *fallbacks, last = configured
        for provider in fallbacks:
            try:
                return call(provider)
            except RuntimeError as e:
                logger.warning(f"Weather provider {provider.provider_name} failed: {e}")

        return call(last)

    def get_provider_status(self) -> list[dict]:
        return [p.get_provider_info() for p in self.providers]
