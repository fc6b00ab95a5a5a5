from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from settings import DEFAULT_DELIMITER, DEFAULT_HWMON_ROOT, get_settings


class InvalidDelimiterError(ValueError):
    """The field delimiter is not exactly one character."""


@dataclass(frozen=True)
class CLIConfig:
    delimiter: str = DEFAULT_DELIMITER
    fahrenheit: bool = False
    config_file: Optional[Path] = None
    backend: str = "libsensors"
    hwmon_root: Path = Path(DEFAULT_HWMON_ROOT)

    @property
    def units(self) -> str:
        return "F" if self.fahrenheit else "C"


def load_config(
    delimiter: Optional[str] = None,
    fahrenheit: bool = False,
    config_file: Optional[Path] = None,
    backend: Optional[str] = None,
) -> CLIConfig:
    settings = get_settings()
    if delimiter is None:
        delimiter = settings.delimiter
    if len(delimiter) != 1:
        raise InvalidDelimiterError(delimiter)
    if backend is None:
        backend = settings.backend
    return CLIConfig(
        delimiter=delimiter,
        fahrenheit=fahrenheit,
        config_file=config_file,
        backend=backend,
        hwmon_root=Path(settings.hwmon_root),
    )
