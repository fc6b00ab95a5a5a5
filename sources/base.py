"""Capability interface over a platform's hardware sensor subsystem."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional


class SensorSourceError(RuntimeError):
    """The sensor subsystem could not be initialized."""


class FeatureType(str, Enum):
    temperature = "temperature"
    other = "other"


class Subfeature(str, Enum):
    input = "input"
    min = "min"
    max = "max"
    critical = "critical"


@dataclass(frozen=True)
class ChipHandle:
    name: str
    native: Any = field(default=None, compare=False, repr=False)


@dataclass(frozen=True)
class FeatureHandle:
    name: str
    type: FeatureType
    native: Any = field(default=None, compare=False, repr=False)


class SensorSource(ABC):
    """Forward-only enumeration of detected chips and their features.

    The enumeration cursor lives inside the source and advances on every
    call, so a source supports exactly one pass and no concurrent callers.
    Use it as a context manager: entering initializes the underlying
    library, leaving releases it.
    """

    name = "sensors"

    def __enter__(self) -> "SensorSource":
        self.open()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    @abstractmethod
    def open(self) -> None:
        """Initialize the sensor subsystem; raise SensorSourceError on failure."""

    @abstractmethod
    def close(self) -> None:
        """Release the sensor subsystem. Safe to call more than once."""

    @abstractmethod
    def next_chip(self) -> Optional[ChipHandle]:
        """Return the next detected chip, or None once all were returned."""

    @abstractmethod
    def next_feature(self, chip: ChipHandle) -> Optional[FeatureHandle]:
        """Return the next feature of ``chip``, or None when exhausted."""

    @abstractmethod
    def read_subfeature(
        self, chip: ChipHandle, feature: FeatureHandle, kind: Subfeature
    ) -> Optional[float]:
        """Return the value in degrees Celsius, or None if it is unavailable."""
