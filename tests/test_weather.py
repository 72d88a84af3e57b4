"""Tests for current-weather and forecast lookups."""

from datetime import date, datetime, timezone
from unittest.mock import Mock, patch

import pytest

from farm_advisor.config import clear_settings_cache
from farm_advisor.weather.models import (
    CurrentWeather,
    DailyForecast,
    OpenWeatherForecastResponse,
    OpenWeatherResponse,
    WeatherForecast,
)
from farm_advisor.weather.providers.base import WeatherProviderBase
from farm_advisor.weather.providers.openweather import (
    DEFAULT_ENDPOINT,
    DEFAULT_FORECAST_ENDPOINT,
    OpenWeatherProvider,
)
from farm_advisor.weather.service import WeatherService

LAT, LON = 28.6139, 77.2090


class TestCurrentWeatherModel:
    """Test conversion of OpenWeather payloads."""

    def test_from_openweather(self, openweather_payload):
        payload = OpenWeatherResponse.model_validate(openweather_payload)

        weather = CurrentWeather.from_openweather(payload, LAT, LON)

        assert weather.latitude == LAT
        assert weather.location_name == "New Delhi"
        assert weather.country == "IN"
        assert weather.temperature_c == 31.4
        assert weather.feels_like_c == 34.2
        assert weather.temp_min_c == 29.9
        assert weather.temp_max_c == 32.1
        assert weather.humidity_percent == 58
        assert weather.pressure_hpa == 1008
        assert weather.condition == "Haze"
        assert weather.description == "haze"
        assert weather.icon_url == "https://openweathermap.org/img/wn/50d@2x.png"
        assert weather.utc_offset_s == 19800
        assert weather.observed_at == datetime.fromtimestamp(1760770800, tz=timezone.utc)
        assert weather.provider == "openweather"

    def test_wind_speed_kmh(self, openweather_payload):
        payload = OpenWeatherResponse.model_validate(openweather_payload)
        weather = CurrentWeather.from_openweather(payload, LAT, LON)

        assert weather.wind_speed_ms == 2.5
        assert weather.wind_speed_kmh == 9.0

    def test_minimal_payload(self):
        """Only ``main.temp`` is required."""
        payload = OpenWeatherResponse.model_validate({"main": {"temp": -3.5}})

        weather = CurrentWeather.from_openweather(payload, 0.0, 0.0)

        assert weather.temperature_c == -3.5
        assert weather.location_name is None
        assert weather.condition is None
        assert weather.icon_url is None
        assert weather.wind_speed_kmh is None
        assert weather.sunrise is None

    def test_missing_main_rejected(self):
        with pytest.raises(ValueError):
            OpenWeatherResponse.model_validate({"weather": []})


class TestOpenWeatherProvider:
    """Test the OpenWeather provider."""

    def test_configuration(self):
        provider = OpenWeatherProvider(api_key="test-key")

        assert provider.is_configured()
        assert provider.endpoint == DEFAULT_ENDPOINT
        assert provider.units == "metric"
        assert provider.timeout == 20
        assert provider.get_provider_info() == {
            "name": "openweather",
            "timeout": 20,
            "configured": True,
        }

    def test_api_key_from_environment(self, monkeypatch):
        monkeypatch.setenv("OPENWEATHER_API_KEY", "env-key")
        clear_settings_cache()

        assert OpenWeatherProvider().api_key == "env-key"

    @patch("farm_advisor.weather.providers.openweather.request")
    def test_get_current_weather(self, mock_request, mock_response, openweather_payload):
        mock_request.return_value = mock_response(openweather_payload)

        weather = OpenWeatherProvider(api_key="test-key").get_current_weather(LAT, LON)

        assert weather.location_name == "New Delhi"
        assert weather.temperature_c == 31.4

        args, kwargs = mock_request.call_args
        assert args == ("GET", DEFAULT_ENDPOINT)
        assert kwargs["params"] == {
            "lat": LAT,
            "lon": LON,
            "appid": "test-key",
            "units": "metric",
        }
        assert kwargs["use_cache"] is False

    @patch("farm_advisor.weather.providers.openweather.request")
    def test_missing_api_key(self, mock_request):
        provider = OpenWeatherProvider()

        assert not provider.is_configured()
        with pytest.raises(RuntimeError, match="OpenWeather API key not configured."):
            provider.get_current_weather(LAT, LON)
        mock_request.assert_not_called()

    @patch("farm_advisor.weather.providers.openweather.request")
    def test_api_error_message(self, mock_request, mock_response):
        """The message field of an error body is surfaced as-is."""
        mock_request.return_value = mock_response(
            {"cod": 401, "message": "Invalid API key."}, status_code=401
        )

        with pytest.raises(RuntimeError, match="Invalid API key."):
            OpenWeatherProvider(api_key="bad").get_current_weather(LAT, LON)

    @patch("farm_advisor.weather.providers.openweather.request")
    def test_api_error_without_body(self, mock_request, mock_response):
        mock_request.return_value = mock_response(None, status_code=502)

        with pytest.raises(RuntimeError, match="Failed to fetch weather data"):
            OpenWeatherProvider(api_key="test-key").get_current_weather(LAT, LON)

    @patch("farm_advisor.weather.providers.openweather.request")
    def test_malformed_payload(self, mock_request, mock_response):
        mock_request.return_value = mock_response({"cod": 200})

        with pytest.raises(ValueError, match="Unexpected OpenWeather response"):
            OpenWeatherProvider(api_key="test-key").get_current_weather(LAT, LON)

    def test_invalid_coordinates(self):
        provider = OpenWeatherProvider(api_key="test-key")

        with pytest.raises(ValueError, match="Latitude"):
            provider.get_current_weather(-91.0, 0.0)
        with pytest.raises(ValueError, match="Longitude"):
            provider.get_current_weather(0.0, 200.0)


class TestForecastAggregation:
    """Test rolling 3-hourly slots up into local days."""

    def _days(self, payload):
        return OpenWeatherProvider._aggregate_to_daily(
            OpenWeatherForecastResponse.model_validate(payload)
        )

    def test_groups_by_local_date(self, openweather_forecast_payload):
        days = self._days(openweather_forecast_payload)

        assert [day.forecast_date for day in days] == [date(2025, 10, 18), date(2025, 10, 19)]

    def test_daily_extremes(self, openweather_forecast_payload):
        today, tomorrow = self._days(openweather_forecast_payload)

        assert (today.temp_min_c, today.temp_max_c) == (29.0, 32.0)
        # the 21:00 UTC slot is the coldest of the local next day
        assert (tomorrow.temp_min_c, tomorrow.temp_max_c) == (24.0, 34.5)

    def test_humidity_and_rain_chance(self, openweather_forecast_payload):
        today, tomorrow = self._days(openweather_forecast_payload)

        assert today.humidity_percent == 55.0
        assert today.precipitation_probability_percent == 40
        assert tomorrow.humidity_percent == 50.0
        assert tomorrow.precipitation_probability_percent == 20

    def test_condition_tie_goes_to_earliest_slot(self, openweather_forecast_payload):
        today, _ = self._days(openweather_forecast_payload)

        assert today.condition == "Haze"
        assert today.description == "haze"
        assert today.icon_url == "https://openweathermap.org/img/wn/50d@2x.png"

    def test_most_frequent_condition(self, openweather_forecast_payload):
        _, tomorrow = self._days(openweather_forecast_payload)

        assert tomorrow.condition == "Clouds"
        assert tomorrow.description == "scattered clouds"

    def test_utc_when_no_offset(self, openweather_forecast_payload):
        openweather_forecast_payload["city"]["timezone"] = 0

        days = self._days(openweather_forecast_payload)

        assert [day.forecast_date for day in days] == [date(2025, 10, 18), date(2025, 10, 19)]
        assert days[0].temp_min_c == 24.0

    def test_missing_pop_and_weather(self):
        payload = {"list": [{"dt": 1760778000, "main": {"temp": 18.5}}]}

        (day,) = self._days(payload)

        assert day.temp_min_c == day.temp_max_c == 18.5
        assert day.precipitation_probability_percent is None
        assert day.humidity_percent is None
        assert day.condition is None
        assert day.icon_url is None

    def test_empty_list(self):
        assert self._days({"list": []}) == []


class TestWeatherForecastModel:
    """Test the flattened forecast."""

    def _forecast(self):
        return WeatherForecast(
            latitude=LAT,
            longitude=LON,
            days=[
                DailyForecast(forecast_date=date(2025, 10, 18), temp_min_c=29.0, temp_max_c=32.0),
                DailyForecast(forecast_date=date(2025, 10, 19), temp_min_c=24.0, temp_max_c=34.5),
            ],
        )

    def test_today_is_first_day(self):
        assert self._forecast().today.forecast_date == date(2025, 10, 18)

    def test_today_without_days(self):
        assert WeatherForecast(latitude=LAT, longitude=LON).today is None

    def test_chart_data(self):
        assert self._forecast().chart_data() == [
            {"date": "Sat", "max": 32.0, "min": 29.0},
            {"date": "Sun", "max": 34.5, "min": 24.0},
        ]


class TestOpenWeatherForecast:
    """Test the OpenWeather forecast call."""

    @patch("farm_advisor.weather.providers.openweather.request")
    def test_get_forecast(self, mock_request, mock_response, openweather_forecast_payload):
        mock_request.return_value = mock_response(openweather_forecast_payload)

        forecast = OpenWeatherProvider(api_key="test-key").get_forecast(LAT, LON)

        assert forecast.location_name == "New Delhi"
        assert forecast.country == "IN"
        assert forecast.utc_offset_s == 19800
        assert forecast.sunrise == datetime.fromtimestamp(1760748600, tz=timezone.utc)
        assert len(forecast.days) == 2
        assert forecast.today.temp_max_c == 32.0

        args, kwargs = mock_request.call_args
        assert args == ("GET", DEFAULT_FORECAST_ENDPOINT)
        assert kwargs["params"]["appid"] == "test-key"
        assert kwargs["use_cache"] is False

    @patch("farm_advisor.weather.providers.openweather.request")
    def test_missing_api_key(self, mock_request):
        with pytest.raises(RuntimeError, match="OpenWeather API key not configured."):
            OpenWeatherProvider().get_forecast(LAT, LON)
        mock_request.assert_not_called()

    @patch("farm_advisor.weather.providers.openweather.request")
    def test_api_error_message(self, mock_request, mock_response):
        mock_request.return_value = mock_response(
            {"cod": "401", "message": "Invalid API key."}, status_code=401
        )

        with pytest.raises(RuntimeError, match="Invalid API key."):
            OpenWeatherProvider(api_key="bad").get_forecast(LAT, LON)

    @patch("farm_advisor.weather.providers.openweather.request")
    def test_api_error_without_body(self, mock_request, mock_response):
        mock_request.return_value = mock_response(None, status_code=503)

        with pytest.raises(RuntimeError, match="Failed to fetch weather forecast"):
            OpenWeatherProvider(api_key="test-key").get_forecast(LAT, LON)

    @patch("farm_advisor.weather.providers.openweather.request")
    def test_malformed_payload(self, mock_request, mock_response):
        mock_request.return_value = mock_response({"cod": "200", "city": {}})

        with pytest.raises(ValueError, match="Unexpected OpenWeather forecast response"):
            OpenWeatherProvider(api_key="test-key").get_forecast(LAT, LON)

    def test_invalid_coordinates(self):
        with pytest.raises(ValueError, match="Latitude"):
            OpenWeatherProvider(api_key="test-key").get_forecast(95.0, 0.0)


def _provider(configured=True, result=None, error=None, name="mock", forecast=None):
    provider = Mock(spec=WeatherProviderBase)
    provider.provider_name = name
    provider.is_configured.return_value = configured
    provider.get_current_weather.return_value = result
    provider.get_forecast.return_value = forecast
    if error is not None:
        provider.get_current_weather.side_effect = error
        provider.get_forecast.side_effect = error
    return provider


class TestWeatherService:
    """Test provider selection in the weather service."""

    def test_default_provider(self):
        service = WeatherService()
        assert isinstance(service.providers[0], OpenWeatherProvider)

    def test_no_configured_provider(self):
        service = WeatherService(providers=[_provider(configured=False)])

        with pytest.raises(RuntimeError, match="OpenWeather API key not configured."):
            service.current(LAT, LON)

    def test_skips_unconfigured_providers(self):
        weather = CurrentWeather(latitude=LAT, longitude=LON, temperature_c=20.0)
        unconfigured = _provider(configured=False)
        configured = _provider(result=weather)

        result = WeatherService(providers=[unconfigured, configured]).current(LAT, LON)

        assert result is weather
        unconfigured.get_current_weather.assert_not_called()

    def test_falls_back_after_failure(self):
        weather = CurrentWeather(latitude=LAT, longitude=LON, temperature_c=20.0)
        failing = _provider(error=RuntimeError("down"))
        working = _provider(result=weather)

        assert WeatherService(providers=[failing, working]).current(LAT, LON) is weather

    def test_raises_last_error(self):
        service = WeatherService(
            providers=[
                _provider(error=RuntimeError("first")),
                _provider(error=RuntimeError("second")),
            ]
        )

        with pytest.raises(RuntimeError, match="second"):
            service.current(LAT, LON)

    def test_coordinate_errors_propagate(self):
        service = WeatherService(providers=[_provider(error=ValueError("Latitude"))])

        with pytest.raises(ValueError):
            service.current(100.0, 0.0)

    def test_provider_status(self):
        provider = OpenWeatherProvider(api_key="k")
        status = WeatherService(providers=[provider]).get_provider_status()
        assert status[0]["configured"] is True

    def test_forecast(self):
        forecast = WeatherForecast(latitude=LAT, longitude=LON)
        provider = _provider(forecast=forecast)

        assert WeatherService(providers=[provider]).forecast(LAT, LON) is forecast
        provider.get_forecast.assert_called_once_with(LAT, LON)
        provider.get_current_weather.assert_not_called()

    def test_forecast_falls_back_after_failure(self):
        forecast = WeatherForecast(latitude=LAT, longitude=LON)
        failing = _provider(error=RuntimeError("down"))
        working = _provider(forecast=forecast)

        assert WeatherService(providers=[failing, working]).forecast(LAT, LON) is forecast

    def test_forecast_without_configured_provider(self):
        service = WeatherService(providers=[_provider(configured=False)])

        with pytest.raises(RuntimeError, match="OpenWeather API key not configured."):
            service.forecast(LAT, LON)

    def test_single_provider_error_is_raised_unchanged(self):
        error = RuntimeError("Invalid API key.")
        service = WeatherService(providers=[_provider(error=error)])

        with pytest.raises(RuntimeError) as exc_info:
            service.current(LAT, LON)
        assert exc_info.value is error
