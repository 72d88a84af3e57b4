"""Prompt templates sent to the generative model."""

from farm_advisor.advice.models import CropRecommendationsInput

CROP_RECOMMENDATION_PROMPT = """You are an expert agricultural advisor. Based on the farmer's location and soil type, provide crop, fertilizer, and pesticide recommendations.

Location: Latitude: {latitude}, Longitude: {longitude}
Soil Type: {soil_type}

Consider the location and soil type to recommend the most suitable crops. Also, provide specific fertilizer and pesticide recommendations for those crops.
Format the output as a JSON object with 'crop_recommendations', 'fertilizer_recommendations', and 'pesticide_recommendations' fields."""

PEST_DETECTION_PROMPT = """You are an expert in pest identification and treatment for crops.

Analyze the image of the pest and provide the following information:

- detected: The name of the detected pest.
- confidence: A confidence score (0-1) indicating the certainty of the identification.
- advice: Recommended treatment for the pest.

Use the attached image to identify the pest and provide treatment advice."""


def crop_recommendation_prompt(request: CropRecommendationsInput) -> str:
    return CROP_RECOMMENDATION_PROMPT.format(
        latitude=request.location.latitude,
        longitude=request.location.longitude,
        soil_type=request.soil_type,
    )
