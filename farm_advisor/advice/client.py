"""Crop and pest advice from a hosted Gemini model."""

from pathlib import Path
from typing import Any, TypeVar

import httpx
from google import genai
from google.genai import errors, types
from pydantic import BaseModel, ValidationError

from farm_advisor.advice.images import image_to_data_uri
from farm_advisor.advice.models import (
    CropRecommendations,
    CropRecommendationsInput,
    DetectPestInput,
    PestDetection,
)
from farm_advisor.advice.prompts import PEST_DETECTION_PROMPT, crop_recommendation_prompt
from farm_advisor.config import AdvisorConfig
from farm_advisor.location import Location
from farm_advisor.logging_config import get_logger

logger = get_logger(__name__)

ResponseModel = TypeVar("ResponseModel", bound=BaseModel)


class CropAdvisor:
    """Client for crop recommendations and pest identification.

    The configuration is passed in explicitly; the underlying
    ``genai.Client`` is created on first use unless one is injected.
    """

    def __init__(self, config: AdvisorConfig, client: Any = None):
        self.config = config
        self._client = client

    @property
    def client(self) -> Any:
        if self._client is None:
            if not self.config.is_configured:
                raise RuntimeError("Gemini API key not configured.")
            self._client = genai.Client(
                api_key=self.config.api_key,
                http_options=types.HttpOptions(timeout=int(self.config.timeout_s * 1000)),
            )
            logger.debug(f"Created Gemini client for model {self.config.model}")
        return self._client

    def recommend(self, location: Location, soil_type: str) -> CropRecommendations:
        """Recommend crops, fertilizers and pesticides for a location and soil.

        Raises:
            ValueError: If the input is invalid or the model reply does not
                match the expected schema
            RuntimeError: If no API key is configured or the API call fails
        """
        request = CropRecommendationsInput(location=location, soil_type=soil_type)
        logger.info(f"Requesting crop recommendations for {request.soil_type} soil at {location}")

        return self._generate(
            contents=[crop_recommendation_prompt(request)],
            response_model=CropRecommendations,
        )

    def detect_pest(self, photo_data_uri: str) -> PestDetection:
        """Identify the pest in a photo given as a base64 data URI.

        Raises:
            ValueError: If the data URI is invalid or the model reply does not
                match the expected schema
            RuntimeError: If no API key is configured or the API call fails
        """
        request = DetectPestInput(photo_data_uri=photo_data_uri)
        mime_type, data = request.image()
        logger.info(f"Requesting pest identification for {len(data)} byte {mime_type} image")

        return self._generate(
            contents=[
                types.Part.from_bytes(data=data, mime_type=mime_type),
                PEST_DETECTION_PROMPT,
            ],
            response_model=PestDetection,
        )

    def detect_pest_from_file(self, path: str | Path) -> PestDetection:
        """Identify the pest in an image file."""
        return self.detect_pest(image_to_data_uri(path))

    def _generate(
        self, contents: list, response_model: type[ResponseModel]
    ) -> ResponseModel:
        try:
            response = self.client.models.generate_content(
                model=self.config.model,
                contents=contents,
                config=types.GenerateContentConfig(
                    temperature=self.config.temperature,
                    response_mime_type="application/json",
                    response_schema=response_model,
                ),
            )
        except (errors.APIError, httpx.HTTPError) as e:
            logger.error(f"Gemini request failed: {e}")
            raise RuntimeError(f"Gemini request failed: {e}") from e

        text = getattr(response, "text", None)
        if not text:
            raise ValueError("Model returned an empty response")

        try:
            return response_model.model_validate_json(text)
        except ValidationError as e:
            logger.error(f"Model reply did not match {response_model.__name__}: {e}")
            raise ValueError(
                f"Model reply did not match {response_model.__name__}: {e}"
            ) from e
