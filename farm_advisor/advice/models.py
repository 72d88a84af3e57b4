"""Request and response models for the generative advice client."""

from pydantic import BaseModel, Field, field_validator

from farm_advisor.advice.images import parse_data_uri
from farm_advisor.location import Location


class CropRecommendationsInput(BaseModel):
    """Where the farm is and what its soil texture is."""

    location: Location = Field(description="The location for which recommendations are needed.")
    soil_type: str = Field(
        min_length=1, description="The type of soil (e.g., Loam, Sandy Loam)."
    )

    @field_validator("soil_type")
    @classmethod
    def reject_unclassified(cls, v: str) -> str:
        if v.strip().lower() == "unclassified":
            raise ValueError("Cannot recommend crops for an unclassified soil")
        return v.strip()


class CropRecommendations(BaseModel):
    """Crop, fertilizer and pesticide advice returned by the model."""

    crop_recommendations: list[str] = Field(
        description="Recommended crops for the given location and soil type."
    )
    fertilizer_recommendations: str = Field(
        description="Fertilizer recommendations for the recommended crops."
    )
    pesticide_recommendations: str = Field(
        description="Pesticide recommendations for the recommended crops."
    )


class DetectPestInput(BaseModel):
    """A photo of a pest as a base64 data URI."""

    photo_data_uri: str = Field(
        description="A photo of a pest, as a data URI that must include a MIME type "
        "and use Base64 encoding: 'data:<mimetype>;base64,<encoded_data>'."
    )

    @field_validator("photo_data_uri")
    @classmethod
    def validate_data_uri(cls, v: str) -> str:
        mime_type, _ = parse_data_uri(v)
        if not mime_type.startswith("image/"):
            raise ValueError(f"Expected an image data URI, got {mime_type}")
        return v

    def image(self) -> tuple[str, bytes]:
        return parse_data_uri(self.photo_data_uri)


class PestDetection(BaseModel):
    """Pest identification returned by the model."""

    detected: str = Field(description="The name of the detected pest.")
    confidence: float = Field(
        ge=0.0, le=1.0, description="The confidence score of the detection (0-1)."
    )
    advice: str = Field(description="Recommended treatment for the pest.")
