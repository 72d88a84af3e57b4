"""Farm Advisor: soil, weather and crop advice for a farm location."""

__version__ = "0.1.0"

from .location import Location
from .soil.texture import TextureLabel, classify_soil_texture

__all__ = ["Location", "TextureLabel", "classify_soil_texture"]
