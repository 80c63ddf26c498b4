"""Core data types for the acoustic and video calculation engines.

Every engine takes frozen input dataclasses and returns a frozen result
dataclass. Band-keyed values use ``OctaveBand`` keys; plain int keys
(``{125: 0.1, ...}``) are accepted on input and normalised.

Units follow the AV industry convention: metres, seconds for RT60,
milliseconds for delays, dB SPL re 20 µPa, watts, ohms, AWG.
"""

import math
from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Literal, TypeAlias

from core.bands import BandValues, OctaveBand, band_values
from core.errors import InvalidInputError
from core.models import Point3, Speaker

# -----------------------------------------------------------------------------
# Reverberation (RT60)
# -----------------------------------------------------------------------------


@dataclass(frozen=True)
class RoomSurface:
    """A room boundary with its absorption coefficients per octave band."""

    area: float  # m²
    material: str
    absorption_coefficients: Mapping[int, float]

    def __post_init__(self) -> None:
        if not math.isfinite(self.area) or self.area < 0:
            raise InvalidInputError(f"Surface area must be a non-negative finite number, got {self.area}")
        coefficients = band_values(self.absorption_coefficients)
        for band, coefficient in coefficients.items():
            if not 0.0 <= coefficient <= 1.0:
                raise InvalidInputError(
                    f"Absorption coefficient for {self.material} at {int(band)} Hz must be in [0, 1], got {coefficient}"
                )
        object.__setattr__(self, "absorption_coefficients", coefficients)

    def absorption(self, band: OctaveBand) -> float:
        """Absorption area in metric sabins (m²) for one band."""
        return self.area * self.absorption_coefficients[band]


@dataclass(frozen=True)
class TargetRange:
    min: float  # s
    max: float  # s

    def contains(self, value: float) -> bool:
        return self.min <= value <= self.max


@dataclass(frozen=True)
class RT60Bands:
    """RT60 per band plus the single-number (500/1k/2k) average.

    Values may be +inf (no absorption) or NaN (absorption exceeding the
    surface area in the Eyring formula); they are reported as computed.
    """

    values: BandValues  # s
    average: float  # s

    def __getitem__(self, band: int) -> float:
        return self.values[OctaveBand(band)]


@dataclass(frozen=True)
class RT60Result:
    sabine: RT60Bands
    eyring: RT60Bands
    recommended: float  # s
    within_target: bool


@dataclass(frozen=True)
class AvailableSurface:
    """A surface that could take acoustic treatment."""

    location: str  # e.g. "ceiling", "rear-wall"
    area: float  # m²


@dataclass(frozen=True)
class TreatmentSuggestion:
    location: str
    material: str
    area: float  # m², rounded up


# -----------------------------------------------------------------------------
# Speech intelligibility (STI)
# -----------------------------------------------------------------------------


class STIRating(StrEnum):
    BAD = "bad"
    POOR = "poor"
    FAIR = "fair"
    GOOD = "good"
    EXCELLENT = "excellent"


@dataclass(frozen=True)
class STIParameters:
    """Per-band inputs for the full STI calculation.

    The 8 kHz band may be supplied but carries zero weight and is ignored.
    """

    rt60_values: Mapping[int, float]  # s
    background_noise: Mapping[int, float]  # dB
    signal_level: Mapping[int, float]  # dB
    distance: float  # m from source

    def __post_init__(self) -> None:
        object.__setattr__(self, "rt60_values", band_values(self.rt60_values))
        object.__setattr__(self, "background_noise", band_values(self.background_noise))
        object.__setattr__(self, "signal_level", band_values(self.signal_level))

    def signal_to_noise(self, band: OctaveBand) -> float:
        return self.signal_level[band] - self.background_noise[band]


@dataclass(frozen=True)
class ModificationFactors:
    """Weighted modulation loss attributed to each degradation source."""

    noise: float
    reverberation: float
    level: float = 0.0
    nonlinearity: float = 0.0


@dataclass(frozen=True)
class STIResult:
    value: float  # 0-1, rounded to 2 decimals
    rating: STIRating
    octave_bands: BandValues  # per-band STI, includes 8 kHz reported as 0
    modification_factors: ModificationFactors


@dataclass(frozen=True)
class RequiredConditions:
    max_rt60: float  # s
    min_snr: float  # dB
    recommendations: list[str] = field(default_factory=list)


# -----------------------------------------------------------------------------
# SPL and coverage
# -----------------------------------------------------------------------------


@dataclass(frozen=True)
class SpeakerPlacement:
    speaker: Speaker
    position: Point3
    aim_point: Point3 | None = None
    tilt_angle: float = 0.0  # degrees, informational
    pan_angle: float = 0.0  # degrees, informational


@dataclass(frozen=True)
class SPLPoint:
    x: float
    y: float
    z: float
    spl: float  # dB
    distance: float  # m to the nearest speaker


@dataclass(frozen=True)
class SpeakerRequirements:
    average_spl: float  # dB
    min_spl: float  # dB
    max_spl: float  # dB
    variance: float  # dB, max - min
    coverage: list[SPLPoint]
    power_required: float  # W per speaker
    speakers_required: int
    meets_requirement: bool


@dataclass(frozen=True)
class SpeakerQuantity:
    speaker: Speaker
    quantity: int


@dataclass(frozen=True)
class AmplifierPowerResult:
    total_power: float  # W
    channels_required: int
    recommended_amplifier_power: float  # W


# -----------------------------------------------------------------------------
# Delay
# -----------------------------------------------------------------------------


@dataclass(frozen=True)
class DelaySpeaker:
    name: str
    position: Point3


@dataclass(frozen=True)
class DelayZone:
    name: str
    position: Point3
    distance_from_main: float  # m
    delay_time: float  # ms, rounded to 0.1
    delay_distance: float  # m


@dataclass(frozen=True)
class SystemDelayResult:
    zones: list[DelayZone]  # ascending by distance from main
    speed_of_sound: float  # m/s
    temperature: float  # °C
    max_delay: float  # ms


@dataclass(frozen=True)
class AVSyncResult:
    total_video_delay: float  # ms
    total_audio_delay: float  # ms
    required_audio_delay: float  # ms, rounded to 0.1
    in_sync: bool


@dataclass(frozen=True)
class FillDelayResult:
    delay_from_main: float  # ms
    delay_from_listener: float  # ms
    recommended_delay: float  # ms
    notes: str  # advisory, empty when nothing to report


# -----------------------------------------------------------------------------
# Cable loss
# -----------------------------------------------------------------------------


@dataclass(frozen=True)
class CableSpec:
    gauge: int  # AWG
    resistance_per_meter: float  # ohms per metre, one conductor
    max_current: float  # A


@dataclass(frozen=True)
class CableLossResult:
    total_resistance: float  # ohms, out and back
    voltage_drop: float  # V
    voltage_drop_percent: float
    power_loss: float  # W
    power_loss_percent: float
    voltage_at_speaker: float  # V
    power_at_speaker: float  # W
    recommended_gauge: int  # AWG
    acceptable: bool


# -----------------------------------------------------------------------------
# Video
# -----------------------------------------------------------------------------

ViewingRule: TypeAlias = Literal["4x", "6x", "8x"]
AspectRatio: TypeAlias = Literal["16:9", "16:10", "4:3"]


@dataclass(frozen=True)
class DisplayDimensions:
    width: float  # m
    height: float  # m


@dataclass(frozen=True)
class Resolution:
    width: int  # px
    height: int  # px


@dataclass(frozen=True)
class ViewingAngleResult:
    horizontal_angle: float  # degrees, magnitude
    vertical_angle: float  # degrees, positive = looking up
    distance: float  # m
    acceptable: bool


@dataclass(frozen=True)
class DisplaySizeResult:
    width: float  # m
    height: float  # m
    diagonal_inches: int
    aspect_ratio: str
    rule: str


@dataclass(frozen=True)
class PixelDensityResult:
    pixels_per_inch: float
    pixels_per_meter: float
    viewing_distance: float  # m
    minimum_pixel_pitch_mm: float
    readable: bool


@dataclass(frozen=True)
class BrightnessResult:
    required_nits: float
    foot_lamberts: float
    recommended_nits: int


@dataclass(frozen=True)
class ViewingDistanceRange:
    min_distance: float  # m
    max_distance: float  # m
    optimal_distance: float  # m


