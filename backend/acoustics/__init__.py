"""Acoustic and video calculation engines.

Pure, synchronous functions that turn venue geometry and equipment
parameters into physical predictions:

- RT60 per octave band (Sabine and Eyring) and treatment suggestions
- Speech Transmission Index via the modulation transfer function
- Direct-field SPL and coverage grids, loudspeaker and amplifier sizing
- Delay timing for distributed systems and A/V sync
- Cable loss for low-impedance and 70V/100V systems
- Display size, viewing angles, pixel density and brightness

Invalid inputs raise ``core.errors.InvalidInputError``. Degenerate
results (e.g. an RT60 of +inf in a room with no absorption) are returned
as computed, never clamped.

Example usage:

    from acoustics import RoomSurface, TargetRange, compute_rt60
    from core.models import Occupancy, RoomDimensions
    from data import coefficients_for

    room = RoomDimensions(length=10, width=8, height=3)
    surfaces = [
        RoomSurface(area=80, material="carpet-heavy", absorption_coefficients=coefficients_for("carpet-heavy")),
        RoomSurface(area=80, material="acoustic-ceiling", absorption_coefficients=coefficients_for("acoustic-ceiling")),
        RoomSurface(area=108, material="gypsum-board", absorption_coefficients=coefficients_for("gypsum-board")),
    ]

    result = compute_rt60(room, surfaces, Occupancy(seated=40), TargetRange(0.6, 1.0))
    print(f"RT60: {result.recommended:.2f} s")
"""

from acoustics.cable_loss import (
    CABLE_SPECS,
    cable_spec,
    distributed_system_loss,
    low_impedance_loss,
    max_cable_length,
    rated_drive_voltage,
)
from acoustics.config import DEFAULT, AcousticsConfig
from acoustics.delay import (
    audio_video_sync,
    delay_time,
    fill_speaker_delay,
    optimal_delay_positions,
    system_delays,
)
from acoustics.geometry import angle_between, distance, speed_of_sound
from acoustics.rt60 import compute_rt60, eyring_rt60, sabine_rt60, suggest_treatment
from acoustics.spl import amplifier_power, coverage_grid, speaker_requirements, spl_at_point, sum_spl
from acoustics.sti import compute_sti, estimate_sti, required_conditions, sti_rating
from acoustics.types import (
    AmplifierPowerResult,
    AvailableSurface,
    AVSyncResult,
    BrightnessResult,
    CableLossResult,
    CableSpec,
    DelaySpeaker,
    DelayZone,
    DisplayDimensions,
    DisplaySizeResult,
    FillDelayResult,
    ModificationFactors,
    PixelDensityResult,
    RequiredConditions,
    Resolution,
    RoomSurface,
    RT60Bands,
    RT60Result,
    SpeakerPlacement,
    SpeakerQuantity,
    SpeakerRequirements,
    SPLPoint,
    STIParameters,
    STIRating,
    STIResult,
    SystemDelayResult,
    TargetRange,
    TreatmentSuggestion,
    ViewingAngleResult,
    ViewingDistanceRange,
)
from acoustics.video import (
    brightness_requirements,
    display_size,
    optimal_viewing_distance,
    pixel_density,
    viewing_angles,
)

__all__ = [
    "CABLE_SPECS",
    "DEFAULT",
    "AVSyncResult",
    "AcousticsConfig",
    "AmplifierPowerResult",
    "AvailableSurface",
    "BrightnessResult",
    "CableLossResult",
    "CableSpec",
    "DelaySpeaker",
    "DelayZone",
    "DisplayDimensions",
    "DisplaySizeResult",
    "FillDelayResult",
    "ModificationFactors",
    "PixelDensityResult",
    "RT60Bands",
    "RT60Result",
    "RequiredConditions",
    "Resolution",
    "RoomSurface",
    "SPLPoint",
    "STIParameters",
    "STIRating",
    "STIResult",
    "SpeakerPlacement",
    "SpeakerQuantity",
    "SpeakerRequirements",
    "SystemDelayResult",
    "TargetRange",
    "TreatmentSuggestion",
    "ViewingAngleResult",
    "ViewingDistanceRange",
    "amplifier_power",
    "angle_between",
    "audio_video_sync",
    "brightness_requirements",
    "cable_spec",
    "compute_rt60",
    "compute_sti",
    "coverage_grid",
    "delay_time",
    "display_size",
    "distance",
    "distributed_system_loss",
    "estimate_sti",
    "eyring_rt60",
    "fill_speaker_delay",
    "low_impedance_loss",
    "max_cable_length",
    "optimal_delay_positions",
    "optimal_viewing_distance",
    "pixel_density",
    "rated_drive_voltage",
    "required_conditions",
    "sabine_rt60",
    "speaker_requirements",
    "speed_of_sound",
    "spl_at_point",
    "sti_rating",
    "suggest_treatment",
    "sum_spl",
    "system_delays",
    "viewing_angles",
]
