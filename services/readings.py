"""Reading extraction and value conversions for temperature features."""

from __future__ import annotations

from typing import Optional

from models.records import SensorReading
from sources.base import ChipHandle, FeatureHandle, SensorSource, Subfeature


def celsius_to_fahrenheit(c: float) -> float:
    return (c * (9.0 / 5.0)) + 32.0


def normalize_input(
    input: Optional[float], min: Optional[float], max: Optional[float]
) -> Optional[float]:
    """Express ``input`` as a percentage of the ``[min, max]`` span.

    A missing ``min`` counts as 0. Without ``max`` or ``input`` there is
    nothing to normalize and None is returned. The span is not checked: a
    zero span gives an infinite (or NaN) result and a negative span a
    negative percentage.
    """
    if min is None:
        min = 0.0
    if max is None or input is None:
        return None

    span = max - min
    if span == 0:
        if input == 0:
            return float("nan")
        return float("inf") if input > 0 else float("-inf")
    return (input / span) * 100.0


def read_sensor(
    source: SensorSource, chip: ChipHandle, feature: FeatureHandle
) -> SensorReading:
    """Read input, min, max and critical values of one temperature feature."""
    input = source.read_subfeature(chip, feature, Subfeature.input)
    min = source.read_subfeature(chip, feature, Subfeature.min)
    max = source.read_subfeature(chip, feature, Subfeature.max)
    critical = source.read_subfeature(chip, feature, Subfeature.critical)

    return SensorReading(
        chip_name=chip.name,
        feature_name=feature.name,
        input=input,
        min=min,
        max=max,
        critical=critical,
        normalized_input=normalize_input(input, min, max),
    )
