"""Single forward pass over the chips and features of a sensor source."""

from __future__ import annotations

from typing import Iterator

from sources.base import ChipHandle, FeatureHandle, FeatureType, SensorSource


def iter_chips(source: SensorSource) -> Iterator[ChipHandle]:
    while True:
        chip = source.next_chip()
        if chip is None:
            return
        yield chip


def iter_temperature_features(
    source: SensorSource, chip: ChipHandle
) -> Iterator[FeatureHandle]:
    """Yield the temperature features of ``chip``; other types are skipped."""
    while True:
        feature = source.next_feature(chip)
        if feature is None:
            return
        if feature.type is FeatureType.temperature:
            yield feature
