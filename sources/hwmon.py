"""Sensor source reading the Linux sysfs hwmon interface directly.

Walks ``/sys/class/hwmon/hwmon*/``: each directory is a chip named after its
``name`` file, each ``<kind><N>_input`` file a feature. Temperature files hold
millidegrees Celsius.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Iterator, Optional

from settings import DEFAULT_HWMON_ROOT
from sources.base import (
    ChipHandle,
    FeatureHandle,
    FeatureType,
    SensorSource,
    SensorSourceError,
    Subfeature,
)

logger = logging.getLogger(__name__)

_INPUT_FILE = re.compile(r"^(?P<kind>[a-z]+)(?P<index>\d+)_input$")
_SUFFIXES = {
    Subfeature.input: "input",
    Subfeature.min: "min",
    Subfeature.max: "max",
    Subfeature.critical: "crit",
}


def _natural_key(path: Path) -> tuple[str, int]:
    match = re.match(r"^(\D*)(\d+)", path.name)
    if match is None:
        return (path.name, -1)
    return (match.group(1), int(match.group(2)))


def _parse_input_name(name: str) -> Optional[tuple[str, int]]:
    match = _INPUT_FILE.match(name)
    if match is None:
        return None
    return (match.group("kind"), int(match.group("index")))


class HwmonSource(SensorSource):
    name = "hwmon"

    def __init__(self, root: Path | str = DEFAULT_HWMON_ROOT) -> None:
        self.root = Path(root)
        self._chips: Optional[Iterator[Path]] = None
        self._current: Optional[ChipHandle] = None
        self._features: Iterator[tuple[str, int]] = iter(())

    def open(self) -> None:
        if not self.root.is_dir():
            raise SensorSourceError(f"hwmon root {self.root} is not a directory")
        chip_dirs = sorted((p for p in self.root.iterdir() if p.is_dir()), key=_natural_key)
        self._chips = iter(chip_dirs)
        logger.debug(
            "hwmon tree opened",
            extra={"backend": self.name, "path": self.root},
        )

    def close(self) -> None:
        self._chips = None
        self._current = None
        self._features = iter(())

    def next_chip(self) -> Optional[ChipHandle]:
        if self._chips is None:
            raise SensorSourceError("hwmon source is not open")
        chip_dir = next(self._chips, None)
        if chip_dir is None:
            self._current = None
            self._features = iter(())
            return None
        try:
            name = (chip_dir / "name").read_text().strip() or chip_dir.name
        except OSError:
            name = chip_dir.name
        parsed = (_parse_input_name(p.name) for p in chip_dir.iterdir())
        self._current = ChipHandle(name=name, native=chip_dir)
        self._features = iter(sorted(key for key in parsed if key is not None))
        return self._current

    def next_feature(self, chip: ChipHandle) -> Optional[FeatureHandle]:
        if chip is not self._current:
            raise ValueError(f"chip {chip.name!r} is not the chip being enumerated")
        key = next(self._features, None)
        if key is None:
            return None
        kind, index = key
        feature_type = FeatureType.temperature if kind == "temp" else FeatureType.other
        return FeatureHandle(name=f"{kind}{index}", type=feature_type, native=chip.native)

    def read_subfeature(
        self, chip: ChipHandle, feature: FeatureHandle, kind: Subfeature
    ) -> Optional[float]:
        path = feature.native / f"{feature.name}_{_SUFFIXES[kind]}"
        try:
            raw = path.read_text().strip()
            return int(raw) / 1000.0
        except FileNotFoundError:
            return None
        except (OSError, ValueError):
            logger.debug(
                "subfeature value unreadable",
                exc_info=True,
                extra={"chip": chip.name, "feature": feature.name, "path": path},
            )
            return None
