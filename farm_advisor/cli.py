"""Command-line interface for farm-advisor."""

import json

import click
from rich.console import Console

from farm_advisor import __version__
from farm_advisor.cli_advice import advice, print_recommendations
from farm_advisor.cli_soil import print_soil_table, soil
from farm_advisor.cli_weather import print_forecast, print_weather, weather
from farm_advisor.dashboard import Dashboard
from farm_advisor.location import Location
from farm_advisor.logging_config import setup_logging
from farm_advisor.soil.texture import classify_soil_texture, normalize_composition

console = Console()


@click.group()
@click.version_option(version=__version__)
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
@click.option(
    "--log-file", type=click.Path(dir_okay=False), help="Also write logs to this file"
)
def main(verbose: bool, log_file: str | None) -> None:
    """Farm Advisor: weather, soil texture and crop advice for your farm."""
    setup_logging(
        level="DEBUG" if verbose else "WARNING",
        log_file=log_file,
        enable_file_logging=log_file is not None,
        rich_console=verbose,
    )


@main.command()
@click.argument("sand", type=float)
@click.argument("silt", type=float)
@click.argument("clay", type=float)
@click.option("--json", "as_json", is_flag=True, help="Print raw JSON")
def classify(sand: float, silt: float, clay: float, as_json: bool) -> None:
    """Classify soil texture from SAND, SILT and CLAY percentages."""
    label = classify_soil_texture(sand, silt, clay)
    normalized = normalize_composition(sand, silt, clay)

    if as_json:
        payload = {
            "input": {"sand": sand, "silt": silt, "clay": clay},
            "normalized": (
                dict(zip(("sand", "silt", "clay"), normalized, strict=True))
                if normalized
                else None
            ),
            "texture_class": label.value,
        }
        click.echo(json.dumps(payload, indent=2))
        return

    click.echo(label.value)
    if normalized and normalized != (sand, silt, clay):
        n_sand, n_silt, n_clay = normalized
        click.echo(
            f"(normalized to sand={n_sand:.1f}%, silt={n_silt:.1f}%, clay={n_clay:.1f}%)"
        )


@main.command()
@click.argument("latitude", type=float)
@click.argument("longitude", type=float)
@click.option(
    "--no-recommendations", is_flag=True, help="Skip the crop recommendation request"
)
@click.option("--json", "as_json", is_flag=True, help="Print raw JSON")
def dashboard(
    latitude: float, longitude: float, no_recommendations: bool, as_json: bool
) -> None:
    """Weather, soil and crop advice for LATITUDE LONGITUDE in one view."""
    try:
        location = Location(latitude=latitude, longitude=longitude)
    except ValueError as e:
        click.echo(f"Error: {e}", err=True)
        raise click.Abort() from e

    snapshot = Dashboard().snapshot(
        location, include_recommendations=not no_recommendations
    )

    if as_json:
        click.echo(json.dumps(snapshot.model_dump(mode="json"), indent=2))
        return

    if snapshot.weather:
        print_weather(snapshot.weather)
    if snapshot.forecast:
        print_forecast(snapshot.forecast)
    if snapshot.soil:
        print_soil_table(snapshot.soil)
    if snapshot.recommendations:
        print_recommendations(snapshot.recommendations)
    for error in snapshot.errors:
        console.print(f"[red]✗ {error}[/red]")


main.add_command(soil)
main.add_command(weather)
main.add_command(advice)


if __name__ == "__main__":
    main()
