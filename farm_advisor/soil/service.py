"""Soil analysis service."""

from farm_advisor.logging_config import get_logger
from farm_advisor.soil.models import SoilResult
from farm_advisor.soil.providers.base import SoilProviderBase
from farm_advisor.soil.providers.soilgrids import SoilGridsProvider

logger = get_logger(__name__)


class SoilService:
    """Fetches soil composition for a location and classifies its texture."""

    def __init__(self, providers: dict[str, SoilProviderBase] | None = None):
        self.providers = providers or {"soilgrids": SoilGridsProvider()}
        logger.info(
            "Initialized SoilService with providers: %s", list(self.providers.keys())
        )

    def analyze(
        self, latitude: float, longitude: float, depth_cm: str = "0-5cm"
    ) -> SoilResult:
        """Analyze the soil at a single location.

        Providers are tried in order until one returns a composition.

        Args:
            latitude: Latitude in decimal degrees
            longitude: Longitude in decimal degrees
            depth_cm: Depth interval

        Returns:
            SoilResult from the first provider with texture data, otherwise
            the last result seen (carrying its errors)
        """
        logger.info(f"Analyzing soil for location ({latitude}, {longitude})")

        last_result: SoilResult | None = None
        for provider_name, provider in self.providers.items():
            result = provider.get_soil_data(latitude, longitude, depth_cm)
            if result.composition is not None:
                logger.info(
                    f"Soil at ({latitude}, {longitude}) classified as "
                    f"{result.texture_class} by {provider_name}"
                )
                return result

            logger.info(f"Provider {provider_name} returned no texture data")
            last_result = result

        if last_result is not None:
            return last_result

        return SoilResult(
            latitude=latitude,
            longitude=longitude,
            depth_cm=depth_cm,
            provider="None",
            errors=["No soil providers configured"],
        )

    def analyze_batch(
        self, locations: list[tuple[float, float]], depth_cm: str = "0-5cm"
    ) -> list[SoilResult]:
        """Analyze multiple locations; one bad location does not stop the rest."""
        logger.info(f"Analyzing soil for {len(locations)} locations")

        results = []
        for i, (lat, lon) in enumerate(locations):
            try:
                results.append(self.analyze(lat, lon, depth_cm))
            except ValueError as e:
                logger.error(f"Error processing location ({lat}, {lon}): {e}")
                results.append(
                    SoilResult(
                        latitude=lat,
                        longitude=lon,
                        depth_cm=depth_cm,
                        provider="Error",
                        errors=[str(e)],
                    )
                )

            if (i + 1) % 10 == 0:
                logger.info(f"Processed {i + 1}/{len(locations)} locations")

        return results

    def get_provider_status(self) -> dict[str, dict]:
        """Availability and coverage of each provider."""
        status = {}

        for name, provider in self.providers.items():
            status[name] = {
                "name": provider.name,
                "available": provider.is_available(),
                "coverage": provider.coverage_description,
            }

        return status
