"""Delay timing for distributed loudspeaker systems.

Delay loudspeakers further from the main system must be held back by the
acoustic travel time from the mains, plus a small precedence (Haas)
offset so the mains are still perceived as the source. All times are in
milliseconds.
"""

import math
from collections.abc import Sequence

from acoustics.config import DEFAULT
from acoustics.geometry import distance, speed_of_sound
from acoustics.types import (
    AVSyncResult,
    DelaySpeaker,
    DelayZone,
    FillDelayResult,
    SystemDelayResult,
)
from core.errors import InvalidInputError
from core.models import Point3, RoomDimensions

__all__ = [
    "audio_video_sync",
    "delay_time",
    "fill_speaker_delay",
    "optimal_delay_positions",
    "speed_of_sound",
    "system_delays",
]


def delay_time(distance_m: float, temperature_c: float = DEFAULT.temperature_c) -> float:
    """Acoustic travel time (ms) over a distance."""
    return distance_m / speed_of_sound(temperature_c) * 1000


def system_delays(
    main_position: Point3,
    speakers: Sequence[DelaySpeaker],
    temperature_c: float = DEFAULT.temperature_c,
    additional_delay: float = 0.0,
) -> SystemDelayResult:
    """Delay settings for every zone of a distributed system.

    Args:
        main_position: Position of the main loudspeaker system
        speakers: Delay loudspeakers to time-align
        temperature_c: Air temperature (°C)
        additional_delay: Precedence offset added to every zone (ms),
            typically 10-20 ms

    Returns:
        Zones sorted by distance from the mains (nearest first), each delay
        rounded to 0.1 ms. ``max_delay`` is 0.0 when there are no zones.
    """
    zones: list[DelayZone] = []
    for speaker in speakers:
        path = distance(speaker.position, main_position)
        zones.append(
            DelayZone(
                name=speaker.name,
                position=speaker.position,
                distance_from_main=path,
                delay_time=round(delay_time(path, temperature_c) + additional_delay, 1),
                delay_distance=path,
            )
        )

    zones.sort(key=lambda zone: zone.distance_from_main)

    return SystemDelayResult(
        zones=zones,
        speed_of_sound=speed_of_sound(temperature_c),
        temperature=temperature_c,
        max_delay=max((zone.delay_time for zone in zones), default=0.0),
    )


def audio_video_sync(
    video_delay: float,
    audio_delay: float,
    distance_to_screen: float,
    temperature_c: float = DEFAULT.temperature_c,
) -> AVSyncResult:
    """Extra audio delay needed to keep sound in step with the picture.

    The acoustic path to the listener counts towards the audio delay. The
    result is in sync when the residual offset is within the lip-sync
    tolerance.
    """
    total_audio = audio_delay + delay_time(distance_to_screen, temperature_c)
    required = max(0.0, video_delay - total_audio)
    residual = abs(video_delay - (total_audio + required))

    return AVSyncResult(
        total_video_delay=video_delay,
        total_audio_delay=total_audio,
        required_audio_delay=round(required, 1),
        in_sync=residual <= DEFAULT.lip_sync_tolerance_ms,
    )


def fill_speaker_delay(
    main_speakers: Sequence[Point3],
    fill_speaker: DelaySpeaker,
    listener: Point3,
    temperature_c: float = DEFAULT.temperature_c,
) -> FillDelayResult:
    """Delay for a fill loudspeaker (under-balcony, side fill, front fill).

    Timed against the nearest main loudspeaker plus the Haas offset. Notes
    are advisory only.

    Raises:
        InvalidInputError: If no main loudspeakers are given
    """
    if not main_speakers:
        raise InvalidInputError("At least one main speaker position is required")

    from_main = min(distance(fill_speaker.position, main) for main in main_speakers)
    to_listener = distance(fill_speaker.position, listener)

    delay_from_main = delay_time(from_main, temperature_c)
    recommended = delay_from_main + DEFAULT.haas_offset_ms

    notes = ""
    if recommended > DEFAULT.echo_warning_delay_ms:
        notes = "Warning: Large delay may cause echo effects"
    elif to_listener < DEFAULT.close_listener_distance_m:
        notes = "Fill speaker is very close to listener - consider reducing level"

    return FillDelayResult(
        delay_from_main=round(delay_from_main, 1),
        delay_from_listener=round(delay_time(to_listener, temperature_c), 1),
        recommended_delay=round(recommended, 1),
        notes=notes,
    )


def optimal_delay_positions(
    room: RoomDimensions,
    main_position: Point3,
    target_coverage: float = 0.75,
) -> list[DelaySpeaker]:
    """Plan rows of delay loudspeakers along a rectangular room.

    Uses a simplified critical distance of 0.1*sqrt(L*W*H). Rooms whose
    diagonal is within twice that distance need no delays. Otherwise rows
    start at twice the critical distance, 1.5 critical distances apart,
    until ``target_coverage`` of the room length, near the ceiling.

    ``main_position`` is accepted for API symmetry; rows are laid out
    from the front wall (y = 0).
    """
    critical = 0.1 * math.sqrt(room.volume)
    if math.hypot(room.length, room.width) <= 2 * critical:
        return []

    spacing = 1.5 * critical
    per_row = max(1, math.ceil(room.width / (2 * spacing)))

    positions: list[DelaySpeaker] = []
    row_y = 2 * critical
    row = 1
    while row_y < room.length * target_coverage:
        for i in range(per_row):
            x = (i + 0.5) * (room.width / per_row)
            positions.append(DelaySpeaker(name=f"Delay Zone {row}-{i + 1}", position=Point3(x, row_y, room.height - 0.5)))
        row_y += spacing
        row += 1

    return positions
