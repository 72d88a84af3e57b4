"""ISRIC SoilGrids provider for global soil texture and chemistry."""

from pydantic import ValidationError

from farm_advisor.config import ProviderConfig, get_provider_config
from farm_advisor.http_cache import request
from farm_advisor.logging_config import get_logger
from farm_advisor.soil.models import SoilComposition, SoilGridsResponse, SoilResult
from farm_advisor.soil.providers.base import SoilProviderBase
from farm_advisor.soil.texture import TextureLabel

logger = get_logger(__name__)

DEFAULT_ENDPOINT = "https://rest.isric.org/soilgrids/v2.0/properties/query"
DEFAULT_PROPERTIES = ["clay", "sand", "silt", "phh2o", "soc"]
VALID_DEPTHS = ("0-5cm", "5-15cm", "15-30cm", "30-60cm", "60-100cm", "100-200cm")


class SoilGridsProvider(SoilProviderBase):
    """ISRIC SoilGrids REST provider.

    Queries mean values of clay, sand, silt, pH and soil organic carbon at a
    standard depth interval, converts them from SoilGrids' mapped integer
    units using each layer's ``d_factor`` and derives the texture class.

    API Documentation: https://rest.isric.org/soilgrids/v2.0/docs
    """

    def __init__(self, timeout: float | None = None):
        config = get_provider_config("soil", "soilgrids") or ProviderConfig(
            timeout_s=30.0
        )
        self.endpoint = config.endpoint or DEFAULT_ENDPOINT
        self.timeout = timeout if timeout is not None else config.timeout_s
        self.properties = config.properties or list(DEFAULT_PROPERTIES)
        self.value = config.value or "mean"

    @property
    def name(self) -> str:
        return "ISRIC SoilGrids"

    @property
    def coverage_description(self) -> str:
        return "Global coverage at 250m resolution - texture, pH and organic carbon"

    def is_available(self) -> bool:
        """Check that the SoilGrids REST endpoint answers."""
        try:
            response = request(
                "GET",
                self.endpoint,
                use_cache=False,
                params={"lat": 0, "lon": 0, "property": "clay", "depth": "0-5cm"},
                timeout=5,
            )
            return response.status_code == 200
        except Exception as e:
            logger.debug(f"SoilGrids availability check failed: {e}")
            return False

    def get_soil_data(
        self, latitude: float, longitude: float, depth_cm: str = "0-5cm"
    ) -> SoilResult:
        """Get SoilGrids soil data and texture class for a location.

        Args:
            latitude: Latitude in decimal degrees
            longitude: Longitude in decimal degrees
            depth_cm: Standard SoilGrids depth label

        Returns:
            SoilResult; HTTP and payload failures are listed in ``errors``
        """
        self.validate_coordinates(latitude, longitude)
        if depth_cm not in VALID_DEPTHS:
            raise ValueError(
                f"Unsupported depth {depth_cm!r}; expected one of {', '.join(VALID_DEPTHS)}"
            )

        try:
            payload = self._query_properties(latitude, longitude, depth_cm)
        except Exception as e:
            logger.error(f"Error retrieving SoilGrids data: {e}")
            return SoilResult(
                latitude=latitude,
                longitude=longitude,
                depth_cm=depth_cm,
                provider=self.name,
                errors=[f"Failed to fetch from SoilGrids API: {e}"],
            )

        means = payload.means(depth_cm)
        warnings: list[str] = []

        composition = None
        texture_class = None
        if all(means.get(key) is not None for key in ("sand", "silt", "clay")):
            composition = SoilComposition(
                sand=means["sand"], silt=means["silt"], clay=means["clay"]
            )
            texture_class = composition.texture_class()
            if texture_class == TextureLabel.UNCLASSIFIED:
                warnings.append("Sand, silt and clay are all zero; texture unclassified")
        else:
            missing = [k for k in ("sand", "silt", "clay") if means.get(k) is None]
            warnings.append(f"No texture data for {', '.join(missing)} at this location")

        logger.info(
            f"Retrieved SoilGrids data for ({latitude}, {longitude}) at {depth_cm}: "
            f"texture={texture_class.value if texture_class else 'n/a'}"
        )

        return SoilResult(
            latitude=latitude,
            longitude=longitude,
            depth_cm=depth_cm,
            composition=composition,
            texture_class=texture_class,
            ph_h2o=means.get("phh2o"),
            organic_carbon=means.get("soc"),
            provider=self.name,
            warnings=warnings,
        )

    def _query_properties(
        self, latitude: float, longitude: float, depth_cm: str
    ) -> SoilGridsResponse:
        """Call properties/query and validate the body."""
        params = {
            "lat": latitude,
            "lon": longitude,
            "property": self.properties,
            "depth": depth_cm,
            "value": self.value,
        }

        logger.debug(f"Querying SoilGrids properties at ({latitude}, {longitude})")
        response = request("GET", self.endpoint, params=params, timeout=self.timeout)

        if not response.ok:
            raise RuntimeError(f"SoilGrids returned HTTP {response.status_code}")

        try:
            return SoilGridsResponse.model_validate(response.json())
        except (ValidationError, ValueError) as e:
            raise ValueError(f"Unexpected SoilGrids response: {e}") from e
