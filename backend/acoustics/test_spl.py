"""SPL engine: distance law, source summation, coverage grid and sizing."""

import math

import pytest

from acoustics.spl import amplifier_power, coverage_grid, speaker_requirements, spl_at_point, sum_spl
from acoustics.types import SpeakerPlacement, SpeakerQuantity
from core.errors import InvalidInputError
from core.models import CoverageAngles, Point3, PowerHandling, RoomDimensions, Speaker, SpeakerType, TargetSPL


def make_speaker(coverage: float = 90.0, transformer: str | None = None) -> Speaker:
    return Speaker(
        id="test-speaker",
        manufacturer="Test",
        model="T-1",
        speaker_type=SpeakerType.CEILING,
        sensitivity=90.0,
        max_spl=110.0,
        impedance=8.0,
        coverage=CoverageAngles(horizontal=coverage, vertical=coverage),
        power_handling=PowerHandling(continuous=30.0, peak=60.0),
        transformer=transformer,
    )


SPEAKER = make_speaker()
ORIGIN = Point3(0, 0, 0)


def test_one_watt_at_one_metre_equals_sensitivity() -> None:
    assert spl_at_point(SPEAKER, 1.0, Point3(0, 1, 0), ORIGIN) == pytest.approx(90.0)


def test_doubling_distance_drops_6_db() -> None:
    near = spl_at_point(SPEAKER, 10.0, Point3(0, 2, 0), ORIGIN)
    far = spl_at_point(SPEAKER, 10.0, Point3(0, 4, 0), ORIGIN)

    assert near - far == pytest.approx(20 * math.log10(2))


def test_distance_is_floored_near_the_source() -> None:
    assert spl_at_point(SPEAKER, 1.0, ORIGIN, ORIGIN) == pytest.approx(90.0 + 20.0)


def test_off_axis_penalty() -> None:
    speaker_pos = Point3(0, 0, 3)
    aim = Point3(0, 0, 0)

    on_axis = spl_at_point(SPEAKER, 1.0, Point3(0, 0, 1), speaker_pos, aim)
    assert on_axis == pytest.approx(90.0 - 20 * math.log10(2))

    # 90° off axis, well outside the 45° half coverage
    outside = spl_at_point(SPEAKER, 1.0, Point3(2, 0, 3), speaker_pos, aim)
    assert outside == pytest.approx(90.0 - 20 * math.log10(2) - 12.0)


def test_zero_length_aim_counts_as_on_axis() -> None:
    speaker_pos = Point3(0, 0, 3)
    spl = spl_at_point(SPEAKER, 1.0, Point3(0, 0, 1), speaker_pos, aim_point=speaker_pos)
    assert spl == pytest.approx(90.0 - 20 * math.log10(2))


def test_non_positive_power_is_rejected() -> None:
    with pytest.raises(InvalidInputError):
        spl_at_point(SPEAKER, 0.0, Point3(0, 1, 0), ORIGIN)


def test_non_finite_positions_are_rejected() -> None:
    with pytest.raises(InvalidInputError):
        spl_at_point(SPEAKER, 1.0, Point3(math.nan, 0, 0), ORIGIN)
    with pytest.raises(InvalidInputError):
        Point3(0, math.inf, 0)


def test_coverage_angle_must_be_usable() -> None:
    for angle in (0.0, -30.0, 180.0, math.nan):
        with pytest.raises(InvalidInputError, match="coverage"):
            make_speaker(coverage=angle)


def test_two_identical_sources_add_3_db() -> None:
    assert sum_spl([80.0, 80.0]) == pytest.approx(80.0 + 10 * math.log10(2), abs=0.1)

    room = RoomDimensions(length=4, width=3, height=3)
    placement = SpeakerPlacement(speaker=SPEAKER, position=Point3(1.5, 0, 2.5))
    single = coverage_grid(room, [placement])
    double = coverage_grid(room, [placement, placement])

    for one, two in zip(single, double, strict=True):
        assert two.spl - one.spl == pytest.approx(3.01, abs=0.1)


def test_coverage_grid_layout() -> None:
    room = RoomDimensions(length=3, width=2, height=3)
    placement = SpeakerPlacement(speaker=SPEAKER, position=Point3(1, 0, 2.2))

    grid = coverage_grid(room, [placement], grid_resolution=1.0, listener_height=1.2)

    assert len(grid) == 3 * 4
    assert [(p.x, p.y) for p in grid[:5]] == [(0, 0), (0, 1), (0, 2), (0, 3), (1, 0)]
    assert all(p.z == 1.2 for p in grid)
    assert grid[4].distance == pytest.approx(1.0)
    # Half the continuous rating at 1 m
    assert grid[4].spl == pytest.approx(90.0 + 10 * math.log10(15.0))


def test_coverage_grid_rejects_bad_input() -> None:
    room = RoomDimensions(length=3, width=2, height=3)
    with pytest.raises(InvalidInputError):
        coverage_grid(room, [])
    with pytest.raises(InvalidInputError):
        coverage_grid(room, [SpeakerPlacement(speaker=SPEAKER, position=ORIGIN)], grid_resolution=0)


def test_speaker_requirements() -> None:
    room = RoomDimensions(length=10, width=8, height=3)
    result = speaker_requirements(room, TargetSPL(average=70, peak=80), ambient_noise=60, speaker=SPEAKER)

    # r = 3 m, 0.7 * π * 9 ≈ 19.8 m² per speaker for 80 m²
    assert result.speakers_required == 5
    assert len(result.coverage) == 9 * 11
    assert result.power_required == pytest.approx(10 ** ((80 - 90) / 10))
    assert result.variance == pytest.approx(result.max_spl - result.min_spl)
    assert result.min_spl <= result.average_spl <= result.max_spl
    # Only 10 dB above the ambient noise
    assert result.meets_requirement is False


def test_speaker_requirements_need_a_positive_mounting_height() -> None:
    room = RoomDimensions(length=10, width=8, height=3)
    for height in (0.0, -2.5):
        with pytest.raises(InvalidInputError, match="Mounting height"):
            speaker_requirements(room, TargetSPL(average=70, peak=80), 40, SPEAKER, mounting_height=height)


def test_amplifier_power() -> None:
    items = [
        SpeakerQuantity(speaker=make_speaker(transformer="70V"), quantity=10),
        SpeakerQuantity(speaker=SPEAKER, quantity=3),
    ]
    result = amplifier_power(items)

    per_speaker = 30.0 * 10 ** 0.3
    assert result.total_power == pytest.approx(per_speaker * 13)
    assert result.channels_required == 3 + 3
    assert result.recommended_amplifier_power == pytest.approx(result.total_power * 1.25)
