from __future__ import annotations

from typing import Optional

import typer

from cli.config import CLIConfig
from models.records import SensorReading
from services.readings import celsius_to_fahrenheit, read_sensor
from services.scanner import iter_chips, iter_temperature_features
from sources.base import SensorSource

NOT_AVAILABLE = "N/A"

HEADER_FIELDS = (
    "chip name",
    "feature name",
    "units",
    "input",
    "normalized input [%]",
    "min",
    "max",
    "critical",
)

NO_SENSORS_HINT = (
    "No sensors found!",
    "Make sure you loaded all the kernel drivers you need.",
    "Try sensors-detect to find out which these are.",
)


def format_value(value: Optional[float], fahrenheit: bool = False) -> str:
    if value is None:
        return NOT_AVAILABLE
    if fahrenheit:
        value = celsius_to_fahrenheit(value)
    return f"{value:5.2f}"


def format_header(config: CLIConfig) -> str:
    return config.delimiter.join(HEADER_FIELDS)


def format_reading(reading: SensorReading, config: CLIConfig) -> str:
    fields = [
        reading.chip_name,
        reading.feature_name,
        config.units,
        format_value(reading.input, config.fahrenheit),
        # A percentage, so never converted.
        format_value(reading.normalized_input),
        format_value(reading.min, config.fahrenheit),
        format_value(reading.max, config.fahrenheit),
        format_value(reading.critical, config.fahrenheit),
    ]
    return config.delimiter.join(fields)


def format_placeholder(config: CLIConfig) -> str:
    return config.delimiter.join([NOT_AVAILABLE] * len(HEADER_FIELDS))


def echo_error(prog_name: str, message: str) -> None:
    typer.secho(f"{prog_name}: {message}", fg=typer.colors.RED, err=True)


def render_report(source: SensorSource, config: CLIConfig, prog_name: str) -> int:
    """Print one row per temperature feature of every detected chip.

    Returns the number of chips detected, including chips without any
    temperature feature.
    """
    typer.echo(format_header(config))

    chip_count = 0
    for chip in iter_chips(source):
        for feature in iter_temperature_features(source, chip):
            reading = read_sensor(source, chip, feature)
            typer.echo(format_reading(reading, config))
        chip_count += 1

    if chip_count == 0:
        typer.echo(format_placeholder(config))
        for line in NO_SENSORS_HINT:
            typer.echo(f"{prog_name}: {line}", err=True)

    typer.echo()
    return chip_count
