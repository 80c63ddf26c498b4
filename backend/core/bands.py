"""Octave bands used by the room-acoustics calculations."""

from collections.abc import Mapping
from enum import IntEnum
from typing import TypeAlias

from core.errors import InvalidInputError


class OctaveBand(IntEnum):
    """Octave band centre frequency in Hz."""

    HZ_125 = 125
    HZ_250 = 250
    HZ_500 = 500
    HZ_1000 = 1000
    HZ_2000 = 2000
    HZ_4000 = 4000
    HZ_8000 = 8000


# The six bands carried by absorption data and RT60 results.
STANDARD_BANDS: tuple[OctaveBand, ...] = (
    OctaveBand.HZ_125,
    OctaveBand.HZ_250,
    OctaveBand.HZ_500,
    OctaveBand.HZ_1000,
    OctaveBand.HZ_2000,
    OctaveBand.HZ_4000,
)

# Bands averaged into a single-number RT60.
MID_BANDS: tuple[OctaveBand, ...] = (OctaveBand.HZ_500, OctaveBand.HZ_1000, OctaveBand.HZ_2000)

BandValues: TypeAlias = dict[OctaveBand, float]


def band_values(values: Mapping[int, float], bands: tuple[OctaveBand, ...] = STANDARD_BANDS) -> BandValues:
    """Normalise an int- or enum-keyed mapping to an ``OctaveBand`` dict.

    Raises ``InvalidInputError`` naming the first band that is missing.
    """
    missing = [band for band in bands if band not in values]
    if missing:
        raise InvalidInputError(f"Missing value for {int(missing[0])} Hz band")
    return {band: float(values[band]) for band in bands}
