"""Pydantic models for soil survey data and texture results."""

from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from farm_advisor.soil.texture import (
    TextureLabel,
    classify_soil_texture,
    normalize_composition,
)


class SoilComposition(BaseModel):
    """Sand/silt/clay fractions of a soil sample, in percent by mass.

    Values are deliberately not range-checked: survey data is passed
    through the classifier as reported.
    """

    model_config = ConfigDict(frozen=True)

    sand: float = Field(description="Sand content percentage")
    silt: float = Field(description="Silt content percentage")
    clay: float = Field(description="Clay content percentage")

    @property
    def total(self) -> float:
        return self.sand + self.silt + self.clay

    def normalized(self) -> "SoilComposition | None":
        """Return the composition rescaled to 100%, or None if all zero."""
        fractions = normalize_composition(self.sand, self.silt, self.clay)
        if fractions is None:
            return None
        sand, silt, clay = fractions
        return SoilComposition(sand=sand, silt=silt, clay=clay)

    def texture_class(self) -> TextureLabel:
        return classify_soil_texture(self.sand, self.silt, self.clay)


# SoilGrids REST payload (properties/query). Only the parts we read.


class SoilGridsUnitMeasure(BaseModel):
    d_factor: float = Field(1.0, gt=0)
    mapped_units: str | None = None
    target_units: str | None = None


class SoilGridsDepthValues(BaseModel):
    mean: float | None = None


class SoilGridsDepth(BaseModel):
    label: str
    values: SoilGridsDepthValues = Field(default_factory=SoilGridsDepthValues)


class SoilGridsLayer(BaseModel):
    name: str
    unit_measure: SoilGridsUnitMeasure = Field(default_factory=SoilGridsUnitMeasure)
    depths: list[SoilGridsDepth] = Field(default_factory=list)

    def mean_at(self, depth_label: str) -> float | None:
        """Mean value at ``depth_label`` converted to target units."""
        for depth in self.depths:
            if depth.label == depth_label and depth.values.mean is not None:
                return depth.values.mean / self.unit_measure.d_factor
        return None


class SoilGridsProperties(BaseModel):
    layers: list[SoilGridsLayer] = Field(default_factory=list)


class SoilGridsResponse(BaseModel):
    """Validated body of a SoilGrids ``properties/query`` response."""

    properties: SoilGridsProperties

    def means(self, depth_label: str) -> dict[str, float | None]:
        return {layer.name: layer.mean_at(depth_label) for layer in self.properties.layers}


class SoilResult(BaseModel):
    """Soil analysis for one location."""

    latitude: float = Field(description="Latitude of the queried location")
    longitude: float = Field(description="Longitude of the queried location")
    depth_cm: str = Field("0-5cm", description="Depth interval queried")

    composition: SoilComposition | None = None
    texture_class: TextureLabel | None = Field(
        None, description="Texture label; Unclassified when fractions are all zero"
    )
    ph_h2o: float | None = Field(None, description="Soil pH in water")
    organic_carbon: float | None = Field(
        None, description="Soil organic carbon content (g/kg)"
    )

    provider: str = Field(description="Data source provider")
    retrieved_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="When the data was retrieved",
    )
    errors: list[str] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)

    @property
    def succeeded(self) -> bool:
        return not self.errors and self.composition is not None

    @property
    def soil_type(self) -> TextureLabel | None:
        """Texture label usable for crop advice (None if unknown)."""
        if self.texture_class in (None, TextureLabel.UNCLASSIFIED):
            return None
        return self.texture_class

    def summary(self) -> dict[str, Any]:
        """Flat dictionary for JSON/CSV output."""
        result: dict[str, Any] = {
            "latitude": self.latitude,
            "longitude": self.longitude,
            "depth_cm": self.depth_cm,
            "texture_class": self.texture_class.value if self.texture_class else None,
            "provider": self.provider,
        }
        if self.composition:
            result["sand_percent"] = round(self.composition.sand, 1)
            result["silt_percent"] = round(self.composition.silt, 1)
            result["clay_percent"] = round(self.composition.clay, 1)
        result["ph_h2o"] = self.ph_h2o
        result["organic_carbon_g_kg"] = self.organic_carbon
        if self.errors:
            result["errors"] = "; ".join(self.errors)
        return result
