"""
Base weather provider interface.
"""

from abc import ABC, abstractmethod
from typing import Any

from ..models import CurrentWeather, WeatherForecast


class WeatherProviderBase(ABC):
    """
    Abstract base class for current-weather and forecast providers.
    """

    def __init__(self, timeout: float = 20.0):
        self.timeout = timeout
        self.provider_name = self.__class__.__name__.replace("Provider", "").lower()

    @abstractmethod
    def get_current_weather(self, lat: float, lon: float) -> CurrentWeather:
        """
        Get current conditions for a location.

        Raises:
            ValueError: If coordinates are invalid
            RuntimeError: If the provider is misconfigured or the request fails
        """

    @abstractmethod
    def get_forecast(self, lat: float, lon: float) -> WeatherForecast:
        """
        Get a daily forecast for a location, today first.

        Raises:
            ValueError: If coordinates are invalid
            RuntimeError: If the provider is misconfigured or the request fails
        """

    @abstractmethod
    def is_configured(self) -> bool:
        """Return True if credentials needed for requests are present."""

    def get_provider_info(self) -> dict[str, Any]:
        return {
            "name": self.provider_name,
            "timeout": self.timeout,
            "configured": self.is_configured(),
        }

    def _validate_coordinates(self, lat: float, lon: float) -> None:
        if not (-90 <= lat <= 90):
            raise ValueError(f"Latitude must be between -90 and 90, got {lat}")
        if not (-180 <= lon <= 180):
            raise ValueError(f"Longitude must be between -180 and 180, got {lon}")
