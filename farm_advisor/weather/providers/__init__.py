"""Weather data providers."""

from .base import WeatherProviderBase
from .openweather import OpenWeatherProvider

__all__ = ["WeatherProviderBase", "OpenWeatherProvider"]
