"""Sound pressure level (SPL) prediction and loudspeaker coverage.

Direct-field SPL from a single loudspeaker:

    SPL = sensitivity + 10*log10(P) - 20*log10(max(d, 0.1)) + DI

where DI is a simple off-axis penalty derived from the nominal horizontal
coverage angle. Contributions from several loudspeakers are converted to
linear pressure and power-summed (uncorrelated sources), so two equal
contributions add 3 dB.
"""

import logging
import math
from collections.abc import Sequence

import numpy as np
from numpy.typing import NDArray

from acoustics.config import DEFAULT
from acoustics.geometry import angle_between, distance
from acoustics.types import (
    AmplifierPowerResult,
    SpeakerPlacement,
    SpeakerQuantity,
    SpeakerRequirements,
    SPLPoint,
)
from core.errors import InvalidInputError
from core.models import Point3, RoomDimensions, Speaker, TargetSPL

logger = logging.getLogger(__name__)

MIN_DISTANCE_M = 0.1  # avoids the 1/r singularity at the source

OUTSIDE_COVERAGE_DB = -12.0
COVERAGE_EDGE_DB = -6.0


def directivity_index(speaker: Speaker, off_axis_angle: float) -> float:
    """Off-axis attenuation (dB, <= 0) for an angle from the aim axis (degrees).

    Quadratic rolloff reaching -6 dB at the edge of the nominal horizontal
    coverage, and a flat -12 dB outside it.
    """
    half_coverage = speaker.coverage.horizontal / 2
    if off_axis_angle > half_coverage:
        return OUTSIDE_COVERAGE_DB
    return COVERAGE_EDGE_DB * (off_axis_angle / half_coverage) ** 2


def spl_at_point(
    speaker: Speaker,
    power: float,
    listener: Point3,
    speaker_position: Point3,
    aim_point: Point3 | None = None,
) -> float:
    """SPL (dB) at a listener position from one loudspeaker.

    Args:
        speaker: Catalog loudspeaker (sensitivity and coverage are used)
        power: Drive power (W)
        listener: Listener position (m)
        speaker_position: Loudspeaker position (m)
        aim_point: Point the loudspeaker is aimed at; without it no
            directivity penalty is applied

    Raises:
        InvalidInputError: If the drive power is not positive
    """
    if not power > 0:
        raise InvalidInputError(f"Drive power must be positive, got {power}")

    effective_distance = max(distance(listener, speaker_position), MIN_DISTANCE_M)

    di = 0.0
    if aim_point is not None:
        angle = angle_between(aim_point - speaker_position, listener - speaker_position)
        di = directivity_index(speaker, angle)

    return speaker.sensitivity + 10 * math.log10(power) - 20 * math.log10(effective_distance) + di


def sum_spl(levels: Sequence[float] | NDArray[np.float64]) -> float:
    """Combine uncorrelated contributions: SPL = 20*log10(sqrt(Σ p²)), p = 10^(SPL/20)."""
    pressures = np.power(10.0, np.asarray(levels, dtype=np.float64) / 20.0)
    return float(20.0 * np.log10(np.sqrt(np.sum(pressures**2))))


def grid_axis(extent: float, resolution: float) -> NDArray[np.float64]:
    """Lattice coordinates 0, r, 2r, ... up to and including ``extent``."""
    count = math.floor(extent / resolution + 1e-9) + 1
    return np.arange(count, dtype=np.float64) * resolution


def coverage_grid(
    room: RoomDimensions,
    placements: Sequence[SpeakerPlacement],
    grid_resolution: float = DEFAULT.grid_resolution_m,
    listener_height: float = DEFAULT.listener_height_m,
) -> list[SPLPoint]:
    """Combined SPL over a regular listener grid.

    Points cover [0, width] x [0, length] at ``listener_height``, x varying
    slowest. Each loudspeaker is driven at half its continuous rating
    (3 dB below). Each point also records the distance to the nearest
    loudspeaker.

    Raises:
        InvalidInputError: If there are no placements or the resolution is not positive
    """
    if not placements:
        raise InvalidInputError("At least one speaker placement is required")
    if not grid_resolution > 0:
        raise InvalidInputError(f"Grid resolution must be positive, got {grid_resolution}")

    points: list[SPLPoint] = []
    for x in grid_axis(room.width, grid_resolution):
        for y in grid_axis(room.length, grid_resolution):
            point = Point3(float(x), float(y), listener_height)
            levels = [
                spl_at_point(p.speaker, p.speaker.power_handling.continuous / 2, point, p.position, p.aim_point)
                for p in placements
            ]
            nearest = min(distance(point, p.position) for p in placements)
            points.append(SPLPoint(x=point.x, y=point.y, z=point.z, spl=sum_spl(levels), distance=nearest))

    return points


def speakers_for_area(room: RoomDimensions, speaker: Speaker, mounting_height: float) -> int:
    """Number of loudspeakers needed to cover the floor area.

    Each covers a circle of radius h*tan(half coverage), derated to 70%
    for overlap.
    """
    if not mounting_height > 0:
        raise InvalidInputError(f"Mounting height must be positive, got {mounting_height}")
    coverage_radius = mounting_height * math.tan(math.radians(speaker.coverage.horizontal / 2))
    coverage_area = math.pi * coverage_radius**2 * DEFAULT.coverage_overlap_factor
    return max(1, math.ceil(room.floor_area / coverage_area))


def grid_layout(
    room: RoomDimensions,
    speaker: Speaker,
    count: int,
    mounting_height: float,
    aim_height: float = DEFAULT.listener_height_m,
) -> list[SpeakerPlacement]:
    """Near-square ceiling grid of ``count`` loudspeakers aimed straight down."""
    rows = math.ceil(math.sqrt(count * room.length / room.width))
    cols = math.ceil(count / rows)

    placements: list[SpeakerPlacement] = []
    for row in range(rows):
        for col in range(cols):
            if len(placements) >= count:
                break
            x = (col + 0.5) * (room.width / cols)
            y = (row + 0.5) * (room.length / rows)
            placements.append(
                SpeakerPlacement(
                    speaker=speaker,
                    position=Point3(x, y, mounting_height),
                    aim_point=Point3(x, y, aim_height),
                )
            )
    return placements


def speaker_requirements(
    room: RoomDimensions,
    target_spl: TargetSPL,
    ambient_noise: float,
    speaker: Speaker,
    mounting_height: float = DEFAULT.mounting_height_m,
) -> SpeakerRequirements:
    """Size a distributed ceiling system for a target average SPL.

    Requirements are met when the quietest grid point reaches the target,
    the spread across the room stays within 6 dB and the target sits at
    least 15 dB above the ambient noise.

    Raises:
        InvalidInputError: If the mounting height is not positive
    """
    count = speakers_for_area(room, speaker, mounting_height)
    placements = grid_layout(room, speaker, count, mounting_height)
    coverage = coverage_grid(room, placements, DEFAULT.grid_resolution_m)

    levels = np.array([p.spl for p in coverage], dtype=np.float64)
    average_spl = float(np.mean(levels))
    min_spl = float(np.min(levels))
    max_spl = float(np.max(levels))
    variance = max_spl - min_spl

    signal_to_noise = target_spl.average - ambient_noise
    required_spl = target_spl.average + DEFAULT.spl_headroom_db
    power_required = 10 ** ((required_spl - speaker.sensitivity) / 10)

    meets_requirement = (
        min_spl >= target_spl.average
        and variance <= DEFAULT.max_spl_variance_db
        and signal_to_noise >= DEFAULT.min_signal_to_noise_db
    )

    logger.debug(
        "%s: %d speakers, SPL %.1f-%.1f dB, %.1f W each",
        speaker.model,
        count,
        min_spl,
        max_spl,
        power_required,
    )

    return SpeakerRequirements(
        average_spl=average_spl,
        min_spl=min_spl,
        max_spl=max_spl,
        variance=variance,
        coverage=coverage,
        power_required=power_required,
        speakers_required=count,
        meets_requirement=meets_requirement,
    )


def amplifier_power(
    speakers: Sequence[SpeakerQuantity],
    headroom_db: float = DEFAULT.amplifier_headroom_db,
    safety_factor: float = DEFAULT.amplifier_safety_factor,
) -> AmplifierPowerResult:
    """Total amplifier power and channel count for a set of loudspeakers.

    Constant-voltage (70V/100V) loudspeakers share channels, four per
    channel; low-impedance loudspeakers get a channel each.
    """
    total_power = 0.0
    channels = 0
    for item in speakers:
        per_speaker = item.speaker.power_handling.continuous * 10 ** (headroom_db / 10)
        total_power += per_speaker * item.quantity
        if item.speaker.is_constant_voltage:
            channels += math.ceil(item.quantity / DEFAULT.speakers_per_constant_voltage_channel)
        else:
            channels += item.quantity

    return AmplifierPowerResult(
        total_power=total_power,
        channels_required=channels,
        recommended_amplifier_power=total_power * safety_factor,
    )
