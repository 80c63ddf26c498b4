"""RT60 engine: reference values, monotonicity and degenerate rooms."""

import math

import pytest

from acoustics.rt60 import compute_rt60, sabine_rt60, suggest_treatment
from acoustics.types import AvailableSurface, RoomSurface, TargetRange
from core.bands import STANDARD_BANDS, OctaveBand
from core.errors import InvalidInputError
from core.models import Occupancy, RoomDimensions
from data import coefficients_for

ROOM = RoomDimensions(length=8, width=5, height=2.7)
TARGET = TargetRange(0.3, 0.6)


def uniform_surface(area: float, coefficient: float, material: str = "test") -> RoomSurface:
    return RoomSurface(area=area, material=material, absorption_coefficients={int(b): coefficient for b in STANDARD_BANDS})


def test_sabine_reference_case() -> None:
    assert sabine_rt60(108, 41.38) == pytest.approx(0.420, abs=0.01)

    result = compute_rt60(ROOM, [uniform_surface(206.9, 0.2)], Occupancy(), TARGET)
    assert result.sabine[1000] == pytest.approx(0.420, abs=0.01)


def test_more_absorption_lowers_rt60_in_every_band() -> None:
    low = compute_rt60(ROOM, [uniform_surface(206.9, 0.2)], Occupancy(), TARGET)
    high = compute_rt60(ROOM, [uniform_surface(206.9, 0.3)], Occupancy(), TARGET)

    for band in STANDARD_BANDS:
        assert high.sabine.values[band] < low.sabine.values[band]
        assert high.eyring.values[band] < low.eyring.values[band]


def test_eyring_recommended_for_short_reverberation() -> None:
    result = compute_rt60(ROOM, [uniform_surface(206.9, 0.2)], Occupancy(), TARGET)

    assert result.sabine.average < 1.5
    assert result.recommended == result.eyring.average
    assert result.eyring.average < result.sabine.average
    assert result.within_target is TARGET.contains(result.recommended)


def test_sabine_recommended_for_live_room() -> None:
    hall = RoomDimensions(length=40, width=25, height=15)
    result = compute_rt60(hall, [uniform_surface(3950, 0.05)], Occupancy(), TargetRange(1.5, 2.5))

    assert result.sabine.average >= 1.5
    assert result.recommended == result.sabine.average


def test_seated_audience_adds_absorption() -> None:
    empty = compute_rt60(ROOM, [uniform_surface(206.9, 0.2)], Occupancy(), TARGET)
    full = compute_rt60(ROOM, [uniform_surface(206.9, 0.2)], Occupancy(seated=30), TARGET)

    assert full.sabine.average < empty.sabine.average


def test_zero_absorption_is_infinite() -> None:
    result = compute_rt60(ROOM, [uniform_surface(206.9, 0.0)], Occupancy(), TARGET)

    # No air absorption at 125 Hz either
    assert result.sabine[125] == math.inf
    assert result.eyring[125] == math.inf
    assert math.isfinite(result.sabine[4000])


def test_fully_absorptive_surfaces_give_infinite_eyring() -> None:
    result = compute_rt60(ROOM, [uniform_surface(206.9, 1.0)], Occupancy(), TARGET)

    assert result.eyring.values[OctaveBand.HZ_125] == math.inf


def test_absorption_exceeding_area_gives_nan_eyring() -> None:
    result = compute_rt60(ROOM, [uniform_surface(10, 1.0)], Occupancy(seated=100), TARGET)

    assert math.isnan(result.eyring[125])
    assert math.isfinite(result.sabine[125])


def test_invalid_inputs() -> None:
    with pytest.raises(InvalidInputError):
        compute_rt60(ROOM, [], Occupancy(), TARGET)
    with pytest.raises(InvalidInputError):
        compute_rt60(ROOM, [uniform_surface(0, 0.5)], Occupancy(), TARGET)
    with pytest.raises(InvalidInputError):
        uniform_surface(10, 1.2)
    with pytest.raises(InvalidInputError):
        RoomSurface(area=10, material="partial", absorption_coefficients={125: 0.1, 250: 0.2})
    with pytest.raises(InvalidInputError):
        RoomDimensions(length=0, width=5, height=3)
    with pytest.raises(InvalidInputError):
        Occupancy(seated=-1)


def test_repeated_calls_are_identical() -> None:
    surfaces = [uniform_surface(80, 0.1), uniform_surface(126.9, 0.35)]
    first = compute_rt60(ROOM, surfaces, Occupancy(seated=12), TARGET)
    second = compute_rt60(ROOM, surfaces, Occupancy(seated=12), TARGET)

    assert first == second


def test_suggest_treatment_fills_surfaces_in_priority_order() -> None:
    surfaces = [
        AvailableSurface(location="rear-wall", area=100),
        AvailableSurface(location="ceiling", area=50),
    ]
    suggestions = suggest_treatment(current_rt60=2.0, target_rt60=1.0, room_volume=1000, available_surfaces=surfaces)

    assert [s.location for s in suggestions] == ["ceiling", "rear-wall"]
    assert suggestions[0].material == "acoustic-ceiling"
    assert suggestions[0].area == 50
    # 80.5 sabins needed, 39 from the ceiling, the rest at 0.53
    assert suggestions[1].area == 79


def test_no_treatment_when_already_on_target() -> None:
    surfaces = [AvailableSurface(location="ceiling", area=50)]
    assert suggest_treatment(0.8, 1.0, 500, surfaces) == []


def test_furnished_meeting_room_from_material_table() -> None:
    room = RoomDimensions(length=10, width=8, height=3)
    surfaces = [
        RoomSurface(area=80, material="carpet-heavy", absorption_coefficients=coefficients_for("carpet-heavy")),
        RoomSurface(area=80, material="acoustic-ceiling", absorption_coefficients=coefficients_for("acoustic-ceiling")),
        RoomSurface(area=108, material="gypsum-board", absorption_coefficients=coefficients_for("gypsum-board")),
    ]

    result = compute_rt60(room, surfaces, Occupancy(seated=40), TargetRange(0.6, 1.0))

    assert math.isfinite(result.recommended)
    assert 0 < result.recommended < 1.0
