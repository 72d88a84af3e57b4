"""CLI commands for soil analysis."""

import csv
import json
import sys
from pathlib import Path

import click
from rich.console import Console
from rich.table import Table

from farm_advisor.config import get_settings
from farm_advisor.logging_config import get_logger
from farm_advisor.soil import SoilResult, SoilService
from farm_advisor.soil.providers.soilgrids import VALID_DEPTHS

console = Console()
logger = get_logger(__name__)


@click.group()
def soil() -> None:
    """Soil composition and texture for a farm location."""


@soil.command()
@click.argument("latitude", type=float)
@click.argument("longitude", type=float)
@click.option(
    "--depth",
    default=lambda: get_settings().soil_depth,
    type=click.Choice(VALID_DEPTHS),
    help="Depth interval (default: SOIL_DEPTH or 0-5cm)",
)
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["json", "table"]),
    default="table",
    help="Output format",
)
def lookup(latitude: float, longitude: float, depth: str, output_format: str) -> None:
    """Look up soil composition and texture class for a location.

    LATITUDE: Latitude in decimal degrees
    LONGITUDE: Longitude in decimal degrees
    """
    try:
        result = SoilService().analyze(latitude, longitude, depth)
    except ValueError as e:
        logger.error(f"Error looking up soil data: {e}")
        click.echo(f"Error: {e}", err=True)
        raise click.Abort() from e

    if output_format == "json":
        click.echo(json.dumps(result.model_dump(mode="json"), indent=2))
    else:
        print_soil_table(result)

    for error in result.errors:
        click.echo(f"Error: {error}", err=True)
    if result.errors:
        raise click.exceptions.Exit(1)


@soil.command()
@click.argument("input_file", type=click.Path(exists=True, path_type=Path))
@click.option(
    "--output", type=click.Path(path_type=Path), help="Output file (default: stdout)"
)
@click.option(
    "--depth",
    default=lambda: get_settings().soil_depth,
    type=click.Choice(VALID_DEPTHS),
    help="Depth interval (default: SOIL_DEPTH or 0-5cm)",
)
@click.option("--lat-col", default="latitude", help="Column name for latitude")
@click.option("--lon-col", default="longitude", help="Column name for longitude")
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["json", "csv"]),
    default="json",
    help="Output format",
)
def batch(
    input_file: Path,
    output: Path | None,
    depth: str,
    lat_col: str,
    lon_col: str,
    output_format: str,
) -> None:
    """Analyze every location in a CSV or JSON file.

    INPUT_FILE: CSV or JSON file with latitude/longitude columns
    """
    locations = load_locations(input_file, lat_col, lon_col)
    if not locations:
        click.echo("No valid locations found in input file", err=True)
        raise click.Abort()

    results = SoilService().analyze_batch(locations, depth)

    if output_format == "json":
        output_json = json.dumps(
            [result.model_dump(mode="json") for result in results], indent=2
        )
        if output:
            output.write_text(output_json)
            click.echo(f"Results written to {output}")
        else:
            click.echo(output_json)
    else:
        write_csv(results, output)

    successful = sum(1 for r in results if r.succeeded)
    click.echo(
        f"Summary: {successful}/{len(results)} locations classified successfully",
        err=True,
    )


@soil.command()
def providers() -> None:
    """Show status of soil data providers."""
    status = SoilService().get_provider_status()

    table = Table(title="Soil Data Providers")
    table.add_column("Provider")
    table.add_column("Available")
    table.add_column("Coverage")
    for info in status.values():
        table.add_row(info["name"], "yes" if info["available"] else "no", info["coverage"])
    console.print(table)


def print_soil_table(result: SoilResult) -> None:
    """Print a soil result as a rich table."""
    table = Table(title=f"Soil at ({result.latitude}, {result.longitude})")
    table.add_column("Property")
    table.add_column("Value", justify="right")

    table.add_row("Soil Type", result.texture_class.value if result.texture_class else "N/A")
    if result.composition:
        table.add_row("Clay", f"{result.composition.clay:.1f}%")
        table.add_row("Sand", f"{result.composition.sand:.1f}%")
        table.add_row("Silt", f"{result.composition.silt:.1f}%")
    if result.ph_h2o is not None:
        table.add_row("pH Level", f"{result.ph_h2o:.1f}")
    if result.organic_carbon is not None:
        table.add_row("Organic Carbon", f"{result.organic_carbon:.1f} g/kg")
    table.add_row("Depth", result.depth_cm)
    table.add_row("Provider", result.provider)
    console.print(table)

    for warning in result.warnings:
        console.print(f"[yellow]Warning: {warning}[/yellow]")


def load_locations(input_file: Path, lat_col: str, lon_col: str) -> list[tuple[float, float]]:
    """Load (lat, lon) pairs from a CSV or JSON file, skipping bad rows."""
    if input_file.suffix.lower() == ".json":
        data = json.loads(input_file.read_text())
        rows = data if isinstance(data, list) else []
    else:
        with open(input_file, newline="") as f:
            rows = list(csv.DictReader(f))

    locations = []
    for row in rows:
        if not isinstance(row, dict) or lat_col not in row or lon_col not in row:
            continue
        try:
            locations.append((float(row[lat_col]), float(row[lon_col])))
        except (ValueError, TypeError):
            logger.warning(f"Skipping row with invalid coordinates: {row}")

    return locations


def write_csv(results: list[SoilResult], output_file: Path | None) -> None:
    """Write one summary row per result to ``output_file`` or stdout."""
    rows = [result.summary() for result in results]
    fieldnames: list[str] = []
    for row in rows:
        fieldnames.extend(k for k in row if k not in fieldnames)

    if output_file:
        with open(output_file, "w", newline="") as f:
            writer = csv.DictWriter(f, fieldnames=fieldnames)
            writer.writeheader()
            writer.writerows(rows)
        click.echo(f"CSV results written to {output_file}")
    else:
        writer = csv.DictWriter(sys.stdout, fieldnames=fieldnames)
        writer.writeheader()
        writer.writerows(rows)
