"""Core data models: room geometry, venues and catalog equipment."""

import math
from dataclasses import dataclass, field
from enum import StrEnum

from core.errors import InvalidInputError


@dataclass(frozen=True)
class Point3:
    """A position in the room, metres. Origin at a floor corner, z up."""

    x: float
    y: float
    z: float

    def __post_init__(self) -> None:
        if not all(math.isfinite(v) for v in (self.x, self.y, self.z)):
            raise InvalidInputError(f"Coordinates must be finite, got ({self.x}, {self.y}, {self.z})")

    def __sub__(self, other: "Point3") -> "Point3":
        return Point3(self.x - other.x, self.y - other.y, self.z - other.z)


@dataclass(frozen=True)
class RoomDimensions:
    length: float  # m, along y
    width: float  # m, along x
    height: float  # m, along z

    def __post_init__(self) -> None:
        for name in ("length", "width", "height"):
            value = getattr(self, name)
            if not math.isfinite(value) or value <= 0:
                raise InvalidInputError(f"Room {name} must be a positive finite number, got {value}")

    @property
    def volume(self) -> float:
        return self.length * self.width * self.height

    @property
    def floor_area(self) -> float:
        return self.length * self.width


@dataclass(frozen=True)
class Occupancy:
    seated: int = 0
    standing: int = 0

    def __post_init__(self) -> None:
        if self.seated < 0 or self.standing < 0:
            raise InvalidInputError("Occupancy counts cannot be negative")


# ---------------------------------------------------------------------------
# Venue
# ---------------------------------------------------------------------------


class VenueCategory(StrEnum):
    CORPORATE = "corporate"
    EDUCATION = "education"
    WORSHIP = "worship"
    ENTERTAINMENT = "entertainment"
    HOSPITALITY = "hospitality"


@dataclass(frozen=True)
class TargetSPL:
    average: float  # dB
    peak: float  # dB


@dataclass(frozen=True)
class AcousticTargets:
    ambient_noise: float  # dBA
    target_rt60: float  # s
    target_sti: float  # 0-1
    target_spl: TargetSPL


@dataclass(frozen=True)
class Venue:
    """A room to be equipped, as entered by the designer."""

    venue_type: str  # e.g. "lecture-hall", "boardroom"
    category: VenueCategory
    dimensions: RoomDimensions
    capacity: Occupancy
    acoustics: AcousticTargets
    use_cases: tuple[str, ...] = ()

    @property
    def is_hard_room(self) -> bool:
        """Corporate and education rooms are assumed to have reflective finishes."""
        return self.category in (VenueCategory.CORPORATE, VenueCategory.EDUCATION)


# ---------------------------------------------------------------------------
# Catalog equipment (read-only records supplied by the catalog)
# ---------------------------------------------------------------------------


class SpeakerType(StrEnum):
    POINT_SOURCE = "point-source"
    LINE_ARRAY = "line-array"
    COLUMN = "column"
    CEILING = "ceiling"
    SUBWOOFER = "subwoofer"
    MONITOR = "monitor"


@dataclass(frozen=True)
class CoverageAngles:
    horizontal: float  # degrees
    vertical: float  # degrees

    def __post_init__(self) -> None:
        if not 0 < self.horizontal < 180:
            raise InvalidInputError(f"Horizontal coverage must be between 0 and 180 degrees, got {self.horizontal}")


@dataclass(frozen=True)
class PowerHandling:
    continuous: float  # W
    peak: float  # W


@dataclass(frozen=True)
class Speaker:
    id: str
    manufacturer: str
    model: str
    speaker_type: SpeakerType
    sensitivity: float  # dB SPL @ 1 W / 1 m
    max_spl: float  # dB
    impedance: float  # ohms
    coverage: CoverageAngles
    power_handling: PowerHandling
    transformer: str | None = None  # "70V", "100V" or None for low impedance
    price: float = 0.0  # USD
    weight_kg: float = 0.0

    @property
    def is_constant_voltage(self) -> bool:
        return self.transformer in ("70V", "100V")


@dataclass(frozen=True)
class Amplifier:
    id: str
    manufacturer: str
    model: str
    channels: int
    power_at_8_ohms: float  # W per channel
    power_at_4_ohms: float  # W per channel
    power_at_70v: float | None = None  # W per channel
    power_consumption: float | None = None  # W
    price: float = 0.0  # USD
    rack_units: int = 2
    protection: tuple[str, ...] = field(default_factory=tuple)
