"""Repeated calls with the same inputs give identical results for every engine."""

from collections.abc import Callable
from typing import Any

import pytest

from acoustics.cable_loss import distributed_system_loss, low_impedance_loss, max_cable_length
from acoustics.delay import audio_video_sync, fill_speaker_delay, optimal_delay_positions, system_delays
from acoustics.spl import coverage_grid, speaker_requirements, spl_at_point
from acoustics.sti import compute_sti, estimate_sti, required_conditions
from acoustics.types import DelaySpeaker, DisplayDimensions, Resolution, SpeakerPlacement, STIParameters
from acoustics.video import (
    brightness_requirements,
    display_size,
    optimal_viewing_distance,
    pixel_density,
    viewing_angles,
)
from core.models import Point3, RoomDimensions, TargetSPL
from data.sample_catalog import SAMPLE_SPEAKERS

BANDS = (125, 250, 500, 1000, 2000, 4000, 8000)
SPEAKER = SAMPLE_SPEAKERS[0]
ROOM = RoomDimensions(length=12, width=7.5, height=3.2)
MAIN = Point3(3.75, 1.0, 2.7)


def sti_params(rt60: float, noise: float, signal: float, distance: float) -> STIParameters:
    return STIParameters(
        rt60_values={b: rt60 for b in BANDS},
        background_noise={b: noise for b in BANDS},
        signal_level={b: signal for b in BANDS},
        distance=distance,
    )


def delay_speakers(count: int) -> list[DelaySpeaker]:
    return [DelaySpeaker(name=f"zone-{i}", position=Point3(1.5 * i, 4.0 + 3.3 * i, 2.7)) for i in range(count)]


CASES: dict[str, Callable[[], Any]] = {
    "sti-dry": lambda: compute_sti(sti_params(0.3, 30, 75, 4.0)),
    "sti-live": lambda: compute_sti(sti_params(2.4, 55, 68, 18.0)),
    "sti-estimate": lambda: [estimate_sti(rt60, snr) for rt60 in (0.2, 0.9, 3.1) for snr in (-5, 7, 22)],
    "sti-required": lambda: required_conditions(0.62, 1.7, 48),
    "spl-point": lambda: spl_at_point(SPEAKER, 7.3, Point3(2.2, 5.1, 1.2), MAIN, aim_point=Point3(3.75, 8, 1.2)),
    "spl-coverage": lambda: coverage_grid(
        ROOM,
        [
            SpeakerPlacement(speaker=SPEAKER, position=Point3(2, 3, 3.2), aim_point=Point3(2, 3, 1.2)),
            SpeakerPlacement(speaker=SPEAKER, position=Point3(5.5, 9, 3.2)),
        ],
        grid_resolution=0.7,
    ),
    "spl-requirements": lambda: speaker_requirements(ROOM, TargetSPL(average=72, peak=85), 38, SPEAKER),
    "delay-system": lambda: system_delays(MAIN, delay_speakers(5), temperature_c=26, additional_delay=12.5),
    "delay-sync": lambda: audio_video_sync(video_delay=45, audio_delay=8, distance_to_screen=17.3),
    "delay-fill": lambda: fill_speaker_delay(
        [MAIN, Point3(0.5, 1.0, 2.7)], DelaySpeaker(name="fill", position=Point3(7, 6, 2.4)), Point3(6, 9, 1.2)
    ),
    "delay-positions": lambda: optimal_delay_positions(RoomDimensions(length=40, width=22, height=9), MAIN),
    "cable-low-impedance": lambda: [low_impedance_loss(length, 4, 250, gauge=16) for length in (3, 17.5, 64)],
    "cable-distributed": lambda: [distributed_system_loss(length, 100, 180, gauge=18) for length in (10, 85, 240)],
    "cable-max-length": lambda: [max_cable_length(z, p) for z in (4, 8, 16) for p in (25, 150)],
    "video-angles": lambda: viewing_angles(Point3(1.3, 9.4, 1.2), Point3(3.75, 0, 2.1), DisplayDimensions(3.2, 1.8)),
    "video-size": lambda: [display_size(d, rule) for d in (6.5, 14, 31) for rule in ("4x", "6x", "8x")],
    "video-density": lambda: pixel_density(Resolution(3840, 2160), DisplayDimensions(2.4, 1.35), 5.5),
    "video-brightness": lambda: [brightness_requirements(lux, 15) for lux in (50, 320, 1200)],
    "video-distance": lambda: optimal_viewing_distance(DisplayDimensions(2.66, 1.5), "4x"),
}


@pytest.mark.parametrize("name", sorted(CASES))
def test_repeated_calls_are_identical(name: str) -> None:
    call = CASES[name]
    assert call() == call()
