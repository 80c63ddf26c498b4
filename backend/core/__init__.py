"""Core domain models: rooms, venues, equipment and octave bands."""

from core.bands import MID_BANDS, STANDARD_BANDS, BandValues, OctaveBand
from core.errors import InvalidInputError
from core.models import (
    AcousticTargets,
    Amplifier,
    CoverageAngles,
    Occupancy,
    Point3,
    PowerHandling,
    RoomDimensions,
    Speaker,
    SpeakerType,
    TargetSPL,
    Venue,
    VenueCategory,
)

__all__ = [
    "MID_BANDS",
    "STANDARD_BANDS",
    "AcousticTargets",
    "Amplifier",
    "BandValues",
    "CoverageAngles",
    "InvalidInputError",
    "Occupancy",
    "OctaveBand",
    "Point3",
    "PowerHandling",
    "RoomDimensions",
    "Speaker",
    "SpeakerType",
    "TargetSPL",
    "Venue",
    "VenueCategory",
]
