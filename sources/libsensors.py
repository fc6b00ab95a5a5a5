"""Sensor source backed by lm-sensors' libsensors through PySensors."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from types import ModuleType
from typing import Any, Iterator, Optional

from sources.base import (
    ChipHandle,
    FeatureHandle,
    FeatureType,
    SensorSource,
    SensorSourceError,
    Subfeature,
)

logger = logging.getLogger(__name__)

# Type codes from <sensors/sensors.h>.
FEATURE_TEMP = 0x02
SUBFEATURE_CODES = {
    Subfeature.input: 0x200,
    Subfeature.max: 0x201,
    Subfeature.min: 0x203,
    Subfeature.critical: 0x204,
}


def load_binding() -> ModuleType:
    """Import PySensors, which loads libsensors.so at import time."""
    try:
        import sensors
    except (ImportError, OSError, ValueError, AttributeError) as exc:
        raise SensorSourceError(f"cannot load libsensors: {exc}") from exc
    return sensors


def _text(value: Any) -> str:
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="replace")
    return str(value)


class LibsensorsSource(SensorSource):
    name = "libsensors"

    def __init__(
        self,
        config_file: Optional[Path] = None,
        binding: Optional[ModuleType] = None,
    ) -> None:
        self.config_file = config_file
        self._binding = binding
        self._initialized = False
        self._chips: Optional[Iterator[Any]] = None
        self._current: Optional[ChipHandle] = None
        self._features: Iterator[Any] = iter(())

    def open(self) -> None:
        if self._binding is None:
            self._binding = load_binding()
        try:
            if self.config_file is None:
                # sensors_init(NULL) searches sensors3.conf, sensors.conf and
                # sensors.d, none of which has to exist.
                self._binding._init(None)
            else:
                # init() passes the name to fopen() as a C string.
                self._binding.init(os.fsencode(self.config_file))
        except Exception as exc:
            raise SensorSourceError(f"libsensors initialization failed: {exc}") from exc
        self._initialized = True
        self._chips = iter(self._binding.iter_detected_chips())
        logger.debug(
            "libsensors initialized",
            extra={"backend": self.name, "config_file": self.config_file},
        )

    def close(self) -> None:
        if not self._initialized:
            return
        self._initialized = False
        self._chips = None
        self._current = None
        self._binding.cleanup()

    def next_chip(self) -> Optional[ChipHandle]:
        if self._chips is None:
            raise SensorSourceError("libsensors source is not open")
        native = next(self._chips, None)
        if native is None:
            self._current = None
            self._features = iter(())
            return None
        self._current = ChipHandle(name=_text(native.prefix), native=native)
        self._features = iter(native)
        return self._current

    def next_feature(self, chip: ChipHandle) -> Optional[FeatureHandle]:
        if chip is not self._current:
            raise ValueError(f"chip {chip.name!r} is not the chip being enumerated")
        native = next(self._features, None)
        if native is None:
            return None
        kind = FeatureType.temperature if native.type == FEATURE_TEMP else FeatureType.other
        return FeatureHandle(name=_text(native.name), type=kind, native=native)

    def read_subfeature(
        self, chip: ChipHandle, feature: FeatureHandle, kind: Subfeature
    ) -> Optional[float]:
        code = SUBFEATURE_CODES[kind]
        for subfeature in feature.native:
            if subfeature.type != code:
                continue
            try:
                return float(subfeature.get_value())
            except Exception:
                logger.debug(
                    "subfeature value unreadable",
                    exc_info=True,
                    extra={"chip": chip.name, "feature": feature.name, "subfeature": kind.value},
                )
                return None
        return None
