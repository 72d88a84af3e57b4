"""Crop, fertilizer, pesticide and pest advice from a hosted language model."""

from farm_advisor.advice.client import CropAdvisor
from farm_advisor.advice.images import image_to_data_uri, parse_data_uri
from farm_advisor.advice.models import (
    CropRecommendations,
    CropRecommendationsInput,
    DetectPestInput,
    PestDetection,
)

__all__ = [
    "CropAdvisor",
    "CropRecommendations",
    "CropRecommendationsInput",
    "DetectPestInput",
    "PestDetection",
    "image_to_data_uri",
    "parse_data_uri",
]
