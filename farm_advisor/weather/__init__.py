"""
Current weather and daily forecast for a farm location.
"""

from farm_advisor.weather.models import CurrentWeather, DailyForecast, WeatherForecast
from farm_advisor.weather.providers import OpenWeatherProvider
from farm_advisor.weather.service import WeatherService

__all__ = [
    "CurrentWeather",
    "DailyForecast",
    "OpenWeatherProvider",
    "WeatherForecast",
    "WeatherService",
]
