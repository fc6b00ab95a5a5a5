"""Domain models shared across services."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(slots=True)
class SensorReading:
    """Values read from one temperature feature of one chip.

    Temperatures are raw degrees Celsius; ``None`` marks a value the chip does
    not provide.
    """

    chip_name: str
    feature_name: str
    input: Optional[float] = None
    min: Optional[float] = None
    max: Optional[float] = None
    critical: Optional[float] = None
    normalized_input: Optional[float] = None
