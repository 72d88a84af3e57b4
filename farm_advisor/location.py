"""Farm location model."""

from pydantic import BaseModel, Field


class Location(BaseModel):
    """A point on the map in decimal degrees (WGS84)."""

    latitude: float = Field(ge=-90.0, le=90.0, description="Latitude in degrees")
    longitude: float = Field(ge=-180.0, le=180.0, description="Longitude in degrees")

    @classmethod
    def parse(cls, text: str) -> "Location":
        """Parse a ``"lat,lon"`` string such as ``"28.61, 77.21"``.

        Raises:
            ValueError: If the text is not two comma-separated numbers or the
                coordinates are out of range
        """
        parts = [p.strip() for p in text.split(",")]
        if len(parts) != 2:
            raise ValueError(f"Expected 'latitude,longitude', got {text!r}")

        try:
            lat, lon = float(parts[0]), float(parts[1])
        except ValueError as e:
            raise ValueError(f"Coordinates must be numeric, got {text!r}") from e

        return cls(latitude=lat, longitude=lon)

    def as_tuple(self) -> tuple[float, float]:
        return (self.latitude, self.longitude)

    def __str__(self) -> str:
        return f"({self.latitude:.4f}, {self.longitude:.4f})"
