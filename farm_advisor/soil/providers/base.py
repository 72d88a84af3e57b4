"""Abstract base class for soil data providers."""

from abc import ABC, abstractmethod

from farm_advisor.soil.models import SoilResult


class SoilProviderBase(ABC):
    """Interface every soil survey provider implements."""

    @abstractmethod
    def get_soil_data(
        self, latitude: float, longitude: float, depth_cm: str = "0-5cm"
    ) -> SoilResult:
        """Retrieve soil data for a specific location.

        Args:
            latitude: Latitude in decimal degrees
            longitude: Longitude in decimal degrees
            depth_cm: Depth interval (e.g., "0-5cm", "5-15cm")

        Returns:
            SoilResult; retrieval failures are reported in ``errors``

        Raises:
            ValueError: If coordinates are invalid
        """

    @abstractmethod
    def is_available(self) -> bool:
        """Check if the provider is currently reachable."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Provider name for identification and logging."""

    @property
    @abstractmethod
    def coverage_description(self) -> str:
        """Description of geographic and data coverage."""

    def validate_coordinates(self, latitude: float, longitude: float) -> None:
        """Raise ValueError if the coordinates are out of range."""
        if not (-90 <= latitude <= 90):
            raise ValueError(f"Latitude must be between -90 and 90, got {latitude}")

        if not (-180 <= longitude <= 180):
            raise ValueError(f"Longitude must be between -180 and 180, got {longitude}")
