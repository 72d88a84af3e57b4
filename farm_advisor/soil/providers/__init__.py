"""Soil data providers."""

from farm_advisor.soil.providers.base import SoilProviderBase
from farm_advisor.soil.providers.soilgrids import SoilGridsProvider

__all__ = ["SoilProviderBase", "SoilGridsProvider"]
