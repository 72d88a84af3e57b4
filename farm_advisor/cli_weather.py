#!/usr/bin/env python3
"""
Weather CLI: current conditions and daily forecast for a farm location.
"""

import json
from datetime import timedelta

import click
import requests
from rich.console import Console
from rich.table import Table

from farm_advisor.logging_config import get_logger
from farm_advisor.weather import CurrentWeather, WeatherForecast, WeatherService

console = Console()
logger = get_logger(__name__)


@click.group()
def weather() -> None:
    """Current weather and forecast for a farm location."""


@weather.command()
@click.argument("latitude", type=float)
@click.argument("longitude", type=float)
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["json", "text"]),
    default="text",
    help="Output format",
)
def current(latitude: float, longitude: float, output_format: str) -> None:
    """Show current weather at LATITUDE LONGITUDE."""
    try:
        result = WeatherService().current(latitude, longitude)
    except (RuntimeError, ValueError, requests.RequestException) as e:
        logger.error(f"Error fetching weather: {e}")
        click.echo(f"Error: {e}", err=True)
        raise click.Abort() from e

    if output_format == "json":
        click.echo(json.dumps(result.model_dump(mode="json"), indent=2))
    else:
        print_weather(result)


@weather.command()
@click.argument("latitude", type=float)
@click.argument("longitude", type=float)
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["json", "text"]),
    default="text",
    help="Output format",
)
def forecast(latitude: float, longitude: float, output_format: str) -> None:
    """Show the daily forecast at LATITUDE LONGITUDE."""
    try:
        result = WeatherService().forecast(latitude, longitude)
    except (RuntimeError, ValueError, requests.RequestException) as e:
        logger.error(f"Error fetching forecast: {e}")
        click.echo(f"Error: {e}", err=True)
        raise click.Abort() from e

    if output_format == "json":
        data = result.model_dump(mode="json")
        data["chart"] = result.chart_data()
        click.echo(json.dumps(data, indent=2))
    else:
        print_forecast(result)


def print_weather(result: CurrentWeather) -> None:
    """Print current conditions in a compact, readable form."""
    place = result.location_name or "Unknown location"
    if result.country:
        place = f"{place}, {result.country}"
    console.print(
        f"\n🌤️  {place} ({result.latitude:.2f}, {result.longitude:.2f})"
    )
    console.print(f"🌡️  {round(result.temperature_c)}°C", end="")
    if result.description:
        console.print(f"  {result.description.capitalize()}", end="")
    console.print()

    if result.feels_like_c is not None:
        console.print(f"   Feels like {round(result.feels_like_c)}°C")
    if result.temp_max_c is not None and result.temp_min_c is not None:
        console.print(
            f"   High/Low: {round(result.temp_max_c)}° / {round(result.temp_min_c)}°"
        )
    if result.wind_speed_kmh is not None:
        console.print(f"💨 Wind: {result.wind_speed_kmh} km/h")
    if result.humidity_percent is not None:
        console.print(f"💧 Humidity: {result.humidity_percent:.0f}%")
    if result.pressure_hpa is not None:
        console.print(f"   Pressure: {result.pressure_hpa:.0f} hPa")
    if result.sunrise and result.sunset:
        console.print(
            f"🌅 Sunrise {result.sunrise:%H:%M} UTC, sunset {result.sunset:%H:%M} UTC"
        )


def print_forecast(result: WeatherForecast) -> None:
    """Print one table row per forecast day."""
    place = result.location_name or f"({result.latitude:.2f}, {result.longitude:.2f})"
    if result.country:
        place = f"{place}, {result.country}"

    table = Table(title=f"Forecast for {place}")
    table.add_column("Day")
    table.add_column("High", justify="right")
    table.add_column("Low", justify="right")
    table.add_column("Conditions")
    table.add_column("Rain", justify="right")

    for day in result.days:
        rain = day.precipitation_probability_percent
        table.add_row(
            f"{day.forecast_date:%a %d %b}",
            f"{round(day.temp_max_c)}°C",
            f"{round(day.temp_min_c)}°C",
            (day.description or day.condition or "").capitalize(),
            f"{rain}%" if rain is not None else "N/A",
        )
    console.print(table)

    if result.sunrise and result.sunset:
        offset = timedelta(seconds=result.utc_offset_s)
        console.print(
            f"🌅 Sunrise {result.sunrise + offset:%H:%M}, "
            f"sunset {result.sunset + offset:%H:%M} (local time)"
        )
