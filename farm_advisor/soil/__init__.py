"""Soil analysis: survey lookups and texture classification.

Fetches sand/silt/clay fractions, pH and organic carbon for a location and
classifies the texture with an ordered rule cascade over the USDA triangle.
"""

from farm_advisor.soil.models import SoilComposition, SoilResult
from farm_advisor.soil.service import SoilService
from farm_advisor.soil.texture import (
    TextureLabel,
    classify_normalized,
    classify_soil_texture,
    normalize_composition,
)

__all__ = [
    "SoilComposition",
    "SoilResult",
    "SoilService",
    "TextureLabel",
    "classify_normalized",
    "classify_soil_texture",
    "normalize_composition",
]
