from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from settings import DEFAULT_HWMON_ROOT
from sources.base import SensorSource
from sources.hwmon import HwmonSource
from sources.libsensors import LibsensorsSource

logger = logging.getLogger(__name__)


def build_source(
    backend: str,
    config_file: Optional[Path] = None,
    hwmon_root: Path | str = DEFAULT_HWMON_ROOT,
) -> SensorSource:
    """Create the sensor source adapter named by ``backend``."""
    if backend == "libsensors":
        return LibsensorsSource(config_file=config_file)
    if backend == "hwmon":
        if config_file is not None:
            logger.warning(
                "hwmon backend ignores the sensors config file",
                extra={"backend": backend, "config_file": config_file},
            )
        return HwmonSource(root=hwmon_root)
    raise ValueError(f"Unknown sensor backend {backend!r}.")
