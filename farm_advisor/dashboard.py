"""Farm dashboard: weather, soil and advice for one location."""

from pathlib import Path

import requests
from pydantic import BaseModel, Field

from farm_advisor.advice import CropAdvisor, CropRecommendations, PestDetection
from farm_advisor.config import get_settings
from farm_advisor.location import Location
from farm_advisor.logging_config import get_logger
from farm_advisor.soil import SoilResult, SoilService
from farm_advisor.weather import CurrentWeather, WeatherForecast, WeatherService

logger = get_logger(__name__)


class DashboardSnapshot(BaseModel):
    """Everything the dashboard knows about a location at one moment."""

    location: Location
    weather: CurrentWeather | None = None
    forecast: WeatherForecast | None = None
    soil: SoilResult | None = None
    recommendations: CropRecommendations | None = None
    errors: list[str] = Field(
        default_factory=list, description="User-facing failure messages"
    )

    @property
    def soil_type(self) -> str | None:
        if self.soil is None or self.soil.soil_type is None:
            return None
        return self.soil.soil_type.value


class Dashboard:
    """Collects weather, soil and advice for a farm location.

    Each section is fetched independently: a failed weather call still
    leaves soil analysis and recommendations available, and vice versa.
    """

    def __init__(
        self,
        weather_service: WeatherService | None = None,
        soil_service: SoilService | None = None,
        advisor: CropAdvisor | None = None,
        soil_depth: str | None = None,
    ) -> None:
        settings = get_settings()
        self.weather_service = weather_service or WeatherService()
        self.soil_service = soil_service or SoilService()
        self.advisor = advisor or CropAdvisor(settings.advisor_config())
        self.soil_depth = soil_depth or settings.soil_depth

    def snapshot(
        self, location: Location, include_recommendations: bool = True
    ) -> DashboardSnapshot:
        """Build a dashboard snapshot for ``location``.

        Args:
            location: Farm location
            include_recommendations: Ask the advisor for crop advice once a
                soil type is known

        Returns:
            DashboardSnapshot; failures are listed in ``errors``
        """
        logger.info(f"Building dashboard for {location}")
        snapshot = DashboardSnapshot(location=location)

        snapshot.weather = self._fetch_weather(location, snapshot.errors)
        if snapshot.weather is not None:
            snapshot.forecast = self._fetch_forecast(location, snapshot.errors)
        snapshot.soil = self._fetch_soil(location, snapshot.errors)

        if include_recommendations:
            soil_type = snapshot.soil_type
            if soil_type is None:
                logger.info("No soil type available; skipping crop recommendations")
            else:
                snapshot.recommendations = self._fetch_recommendations(
                    location, soil_type, snapshot.errors
                )

        logger.info(
            f"Dashboard for {location} complete with {len(snapshot.errors)} error(s)"
        )
        return snapshot

    def identify_pest(self, image_path: str | Path) -> PestDetection:
        """Identify the pest shown in an image file.

        Raises:
            ValueError: If the file is not a usable image or the model reply
                is malformed
            RuntimeError: If the advisor is not configured
        """
        return self.advisor.detect_pest_from_file(image_path)

    def _fetch_weather(
        self, location: Location, errors: list[str]
    ) -> CurrentWeather | None:
        try:
            return self.weather_service.current(location.latitude, location.longitude)
        except (RuntimeError, ValueError, requests.RequestException) as e:
            logger.warning(f"Weather unavailable for {location}: {e}")
            errors.append(f"Failed to fetch weather data: {e}")
            return None

    def _fetch_forecast(
        self, location: Location, errors: list[str]
    ) -> WeatherForecast | None:
        try:
            return self.weather_service.forecast(location.latitude, location.longitude)
        except (RuntimeError, ValueError, requests.RequestException) as e:
            logger.warning(f"Forecast unavailable for {location}: {e}")
            errors.append(f"Failed to fetch weather forecast: {e}")
            return None

    def _fetch_soil(self, location: Location, errors: list[str]) -> SoilResult | None:
        try:
            result = self.soil_service.analyze(
                location.latitude, location.longitude, self.soil_depth
            )
        except ValueError as e:
            logger.warning(f"Soil analysis failed for {location}: {e}")
            errors.append(f"Failed to fetch soil data: {e}")
            return None

        if result.errors:
            errors.append(f"Failed to fetch soil data: {'; '.join(result.errors)}")
        return result

    def _fetch_recommendations(
        self, location: Location, soil_type: str, errors: list[str]
    ) -> CropRecommendations | None:
        try:
            return self.advisor.recommend(location, soil_type)
        except (RuntimeError, ValueError) as e:
            logger.warning(f"Crop recommendations failed for {location}: {e}")
            errors.append(f"Failed to get recommendations: {e}")
            return None
