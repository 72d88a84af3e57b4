"""
Weather data models.

``OpenWeatherResponse`` validates the raw current-weather payload;
``CurrentWeather`` and ``WeatherForecast`` are the flattened results the
rest of the package uses.
"""

from datetime import date, datetime, timezone

from pydantic import BaseModel, Field

# OpenWeather payload (data/2.5/weather, units=metric). Only the parts we read.


class OpenWeatherCondition(BaseModel):
    main: str = ""
    description: str = ""
    icon: str | None = None


class OpenWeatherMain(BaseModel):
    temp: float
    feels_like: float | None = None
    temp_min: float | None = None
    temp_max: float | None = None
    pressure: float | None = None
    humidity: float | None = Field(None, ge=0, le=100)


class OpenWeatherWind(BaseModel):
    speed: float | None = Field(None, ge=0)
    deg: float | None = None


class OpenWeatherSys(BaseModel):
    country: str | None = None
    sunrise: int | None = None
    sunset: int | None = None


class OpenWeatherResponse(BaseModel):
    """Validated body of an OpenWeather current-weather response."""

    name: str = ""
    dt: int | None = None
    timezone: int = 0
    weather: list[OpenWeatherCondition] = Field(default_factory=list)
    main: OpenWeatherMain
    wind: OpenWeatherWind = Field(default_factory=OpenWeatherWind)
    sys: OpenWeatherSys = Field(default_factory=OpenWeatherSys)


def epoch_to_datetime(seconds: int | None) -> datetime | None:
    if seconds is None:
        return None
    return datetime.fromtimestamp(seconds, tz=timezone.utc)


class CurrentWeather(BaseModel):
    """Current conditions at a location (metric units)."""

    latitude: float
    longitude: float
    location_name: str | None = None
    country: str | None = None

    temperature_c: float
    feels_like_c: float | None = None
    temp_min_c: float | None = None
    temp_max_c: float | None = None
    humidity_percent: float | None = None
    pressure_hpa: float | None = None
    wind_speed_ms: float | None = None
    wind_direction_deg: float | None = None

    condition: str | None = None
    description: str | None = None
    icon_url: str | None = None

    observed_at: datetime | None = None
    sunrise: datetime | None = None
    sunset: datetime | None = None
    utc_offset_s: int = 0
    provider: str = "openweather"

    @property
    def wind_speed_kmh(self) -> float | None:
        if self.wind_speed_ms is None:
            return None
        return round(self.wind_speed_ms * 3.6, 1)

    @classmethod
    def from_openweather(
        cls, payload: OpenWeatherResponse, latitude: float, longitude: float
    ) -> "CurrentWeather":
        condition = payload.weather[0] if payload.weather else None
        icon_url = None
        if condition and condition.icon:
            icon_url = f"https://openweathermap.org/img/wn/{condition.icon}@2x.png"

        return cls(
            latitude=latitude,
            longitude=longitude,
            location_name=payload.name or None,
            country=payload.sys.country,
            temperature_c=payload.main.temp,
            feels_like_c=payload.main.feels_like,
            temp_min_c=payload.main.temp_min,
            temp_max_c=payload.main.temp_max,
            humidity_percent=payload.main.humidity,
            pressure_hpa=payload.main.pressure,
            wind_speed_ms=payload.wind.speed,
            wind_direction_deg=payload.wind.deg,
            condition=condition.main if condition else None,
            description=condition.description if condition else None,
            icon_url=icon_url,
            observed_at=epoch_to_datetime(payload.dt),
            sunrise=epoch_to_datetime(payload.sys.sunrise),
            sunset=epoch_to_datetime(payload.sys.sunset),
            utc_offset_s=payload.timezone,
        )


# OpenWeather 5 day / 3 hour forecast (data/2.5/forecast)


class OpenWeatherForecastEntry(BaseModel):
    dt: int
    main: OpenWeatherMain
    weather: list[OpenWeatherCondition] = Field(default_factory=list)
    wind: OpenWeatherWind = Field(default_factory=OpenWeatherWind)
    pop: float | None = Field(None, ge=0, le=1, description="Probability of precipitation")


class OpenWeatherForecastCity(BaseModel):
    name: str = ""
    country: str | None = None
    timezone: int = 0
    sunrise: int | None = None
    sunset: int | None = None


class OpenWeatherForecastResponse(BaseModel):
    """Validated body of an OpenWeather forecast response."""

    entries: list[OpenWeatherForecastEntry] = Field(alias="list")
    city: OpenWeatherForecastCity = Field(default_factory=OpenWeatherForecastCity)


class DailyForecast(BaseModel):
    """One calendar day (local time) of the forecast."""

    forecast_date: date
    temp_min_c: float
    temp_max_c: float
    humidity_percent: float | None = None
    precipitation_probability_percent: int | None = None
    condition: str | None = None
    description: str | None = None
    icon_url: str | None = None


class WeatherForecast(BaseModel):
    """Multi-day forecast for a location, one entry per local day."""

    latitude: float
    longitude: float
    location_name: str | None = None
    country: str | None = None
    utc_offset_s: int = 0
    sunrise: datetime | None = None
    sunset: datetime | None = None
    days: list[DailyForecast] = Field(default_factory=list)
    provider: str = "openweather"

    @property
    def today(self) -> DailyForecast | None:
        return self.days[0] if self.days else None

    def chart_data(self) -> list[dict]:
        """Weekday label with daily max/min, in forecast order."""
        return [
            {
                "date": f"{day.forecast_date:%a}",
                "max": day.temp_max_c,
                "min": day.temp_min_c,
            }
            for day in self.days
        ]
