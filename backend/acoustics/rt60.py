"""Reverberation time (RT60) prediction.

Two classical estimators are evaluated per octave band:

    Sabine:  RT60 = 0.161 * V / A
    Eyring:  RT60 = 0.161 * V / (-S * ln(1 - A/S))

where V is the room volume (m³), S the total surface area (m²) and A the
total absorption (metric sabins) including air and audience absorption.
Eyring is the better estimate in absorptive rooms, so it is recommended
whenever the Sabine single-number average falls below 1.5 s.
"""

import logging
import math
import statistics
from collections.abc import Sequence

from acoustics.types import (
    AvailableSurface,
    RoomSurface,
    RT60Bands,
    RT60Result,
    TargetRange,
    TreatmentSuggestion,
)
from core.bands import MID_BANDS, STANDARD_BANDS, BandValues, OctaveBand
from core.errors import InvalidInputError
from core.models import Occupancy, RoomDimensions
from data.materials import ABSORPTION_COEFFICIENTS

logger = logging.getLogger(__name__)

SABINE_CONSTANT = 0.161  # s/m, metric units at ~20 °C

# Sabine average below which Eyring is recommended (s). Empirical.
EYRING_PREFERRED_BELOW_S = 1.5

# Air absorption per m³ of room volume (sabins/m³); negligible up to 500 Hz.
AIR_ABSORPTION_PER_M3: BandValues = {
    OctaveBand.HZ_125: 0.0,
    OctaveBand.HZ_250: 0.0,
    OctaveBand.HZ_500: 0.0,
    OctaveBand.HZ_1000: 0.003,
    OctaveBand.HZ_2000: 0.007,
    OctaveBand.HZ_4000: 0.02,
}

# Effective absorbing area per seated person (m²).
SEATED_AREA_PER_PERSON_M2 = 0.5

# Treatment priority: location keyword, material, average coefficient.
_TREATMENT_PRIORITY: tuple[tuple[str, str, float], ...] = (
    ("ceiling", "acoustic-ceiling", 0.78),
    ("rear-wall", "curtains-heavy", 0.53),
    ("side-walls", "acoustic-panels", 0.65),
)


def sabine_rt60(volume: float, total_absorption: float) -> float:
    """Sabine RT60 (s); +inf when there is no absorption."""
    if total_absorption == 0:
        return math.inf
    return SABINE_CONSTANT * volume / total_absorption


def eyring_rt60(volume: float, surface_area: float, mean_absorption: float) -> float:
    """Eyring RT60 (s).

    +inf when the mean coefficient is exactly 0 or 1. A mean coefficient
    above 1 has no physical meaning and yields NaN.
    """
    if mean_absorption == 0 or mean_absorption == 1:
        return math.inf
    if mean_absorption > 1:
        return math.nan
    return SABINE_CONSTANT * volume / (-surface_area * math.log(1 - mean_absorption))


def total_absorption(
    band: OctaveBand,
    volume: float,
    surfaces: Sequence[RoomSurface],
    occupancy: Occupancy,
) -> float:
    """Total absorption in one band: surfaces + air + seated audience (sabins)."""
    absorption = AIR_ABSORPTION_PER_M3[band] * volume
    absorption += sum(surface.absorption(band) for surface in surfaces)
    if occupancy.seated > 0:
        absorption += occupancy.seated * SEATED_AREA_PER_PERSON_M2 * ABSORPTION_COEFFICIENTS["audience-seated"][band]
    return absorption


def compute_rt60(
    dimensions: RoomDimensions,
    surfaces: Sequence[RoomSurface],
    occupancy: Occupancy,
    target_range: TargetRange,
) -> RT60Result:
    """Predict RT60 per octave band with both Sabine and Eyring.

    Args:
        dimensions: Room dimensions (m)
        surfaces: Room boundaries with their absorption coefficients
        occupancy: Audience; seated people add absorption
        target_range: Acceptable RT60 range (s), inclusive

    Returns:
        Per-band RT60 for both methods, their 500/1k/2k averages and the
        recommended single-number value.

    Raises:
        InvalidInputError: If no surfaces are given or their total area is zero
    """
    if not surfaces:
        raise InvalidInputError("At least one room surface is required")
    surface_area = sum(surface.area for surface in surfaces)
    if surface_area == 0:
        raise InvalidInputError("Total room surface area is zero")

    volume = dimensions.volume
    sabine: BandValues = {}
    eyring: BandValues = {}

    for band in STANDARD_BANDS:
        absorption = total_absorption(band, volume, surfaces, occupancy)
        sabine[band] = sabine_rt60(volume, absorption)
        eyring[band] = eyring_rt60(volume, surface_area, absorption / surface_area)

        if not math.isfinite(eyring[band]):
            logger.debug("RT60 at %d Hz is not finite (absorption=%.2f sabins)", band, absorption)

    sabine_avg = statistics.fmean(sabine[band] for band in MID_BANDS)
    eyring_avg = statistics.fmean(eyring[band] for band in MID_BANDS)

    recommended = eyring_avg if sabine_avg < EYRING_PREFERRED_BELOW_S else sabine_avg

    return RT60Result(
        sabine=RT60Bands(values=sabine, average=sabine_avg),
        eyring=RT60Bands(values=eyring, average=eyring_avg),
        recommended=recommended,
        within_target=target_range.contains(recommended),
    )


def suggest_treatment(
    current_rt60: float,
    target_rt60: float,
    room_volume: float,
    available_surfaces: Sequence[AvailableSurface],
) -> list[TreatmentSuggestion]:
    """Suggest absorptive treatment to bring RT60 down to a target.

    The extra absorption follows from inverting Sabine at both RT60 values.
    Surfaces are treated in a fixed priority order (ceiling, rear wall,
    side walls), each up to its available area.
    """
    suggestions: list[TreatmentSuggestion] = []
    if current_rt60 <= target_rt60:
        return suggestions

    current_absorption = SABINE_CONSTANT * room_volume / current_rt60
    target_absorption = SABINE_CONSTANT * room_volume / target_rt60
    remaining = target_absorption - current_absorption

    for location, material, avg_coefficient in _TREATMENT_PRIORITY:
        surface = next((s for s in available_surfaces if location in s.location), None)
        if surface is None or remaining <= 0:
            continue
        area_needed = min(remaining / avg_coefficient, surface.area)
        suggestions.append(
            TreatmentSuggestion(
                location=surface.location,
                material=material,
                area=float(math.ceil(area_needed)),
            )
        )
        remaining -= area_needed * avg_coefficient

    return suggestions
