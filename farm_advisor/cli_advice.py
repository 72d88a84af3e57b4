"""CLI commands for crop recommendations and pest identification."""

import json
from pathlib import Path

import click
from rich.console import Console

from farm_advisor.advice import CropAdvisor, CropRecommendations, PestDetection
from farm_advisor.config import get_settings
from farm_advisor.location import Location
from farm_advisor.logging_config import get_logger
from farm_advisor.soil import SoilService
from farm_advisor.soil.texture import TextureLabel

console = Console()
logger = get_logger(__name__)

SOIL_TYPE_CHOICES = [label.value for label in TextureLabel if label != TextureLabel.UNCLASSIFIED]


@click.group()
def advice() -> None:
    """Crop, fertilizer, pesticide and pest advice."""


@advice.command()
@click.argument("latitude", type=float)
@click.argument("longitude", type=float)
@click.option(
    "--soil-type",
    type=click.Choice(SOIL_TYPE_CHOICES, case_sensitive=False),
    help="Soil texture class (looked up from SoilGrids when omitted)",
)
@click.option("--json", "as_json", is_flag=True, help="Print raw JSON")
def recommend(
    latitude: float, longitude: float, soil_type: str | None, as_json: bool
) -> None:
    """Recommend crops, fertilizers and pesticides for a location."""
    try:
        location = Location(latitude=latitude, longitude=longitude)

        if soil_type is None:
            soil_result = SoilService().analyze(
                latitude, longitude, get_settings().soil_depth
            )
            if soil_result.soil_type is None:
                reason = "; ".join(soil_result.errors + soil_result.warnings)
                raise RuntimeError(
                    f"Soil type unavailable for this location{': ' + reason if reason else ''}"
                )
            soil_type = soil_result.soil_type.value
            console.print(f"🪨 Soil type: {soil_type}")

        advisor = CropAdvisor(get_settings().advisor_config())
        result = advisor.recommend(location, soil_type)
    except (RuntimeError, ValueError) as e:
        logger.error(f"Error getting recommendations: {e}")
        click.echo(f"Error: {e}", err=True)
        raise click.Abort() from e

    if as_json:
        click.echo(json.dumps(result.model_dump(), indent=2))
    else:
        print_recommendations(result)


@advice.command()
@click.argument("image", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--json", "as_json", is_flag=True, help="Print raw JSON")
def pest(image: Path, as_json: bool) -> None:
    """Identify the pest in IMAGE and suggest a treatment."""
    try:
        advisor = CropAdvisor(get_settings().advisor_config())
        result = advisor.detect_pest_from_file(image)
    except (RuntimeError, ValueError) as e:
        logger.error(f"Pest detection failed: {e}")
        click.echo(f"Error: {e}", err=True)
        raise click.Abort() from e

    if as_json:
        click.echo(json.dumps(result.model_dump(), indent=2))
    else:
        print_pest_detection(result)


def print_recommendations(result: CropRecommendations) -> None:
    console.print("\n🌱 Recommended crops:")
    for crop in result.crop_recommendations:
        console.print(f"   • {crop}")
    console.print(f"\n🧪 Fertilizers: {result.fertilizer_recommendations}")
    console.print(f"\n🐛 Pesticides: {result.pesticide_recommendations}")


def print_pest_detection(result: PestDetection) -> None:
    console.print(f"\n🐛 Detected: {result.detected}")
    console.print(f"   Confidence: {result.confidence:.0%}")
    console.print(f"\n💊 Advice: {result.advice}")
