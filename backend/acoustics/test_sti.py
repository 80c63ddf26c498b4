"""STI engine: rating bands, MTF extremes and the quick estimate."""

import pytest

from acoustics.sti import compute_sti, estimate_sti, required_conditions, sti_rating
from acoustics.types import STIParameters, STIRating
from core.bands import OctaveBand
from core.errors import InvalidInputError

BANDS = (125, 250, 500, 1000, 2000, 4000, 8000)


def params(rt60: float, noise: float, signal: float) -> STIParameters:
    return STIParameters(
        rt60_values={b: rt60 for b in BANDS},
        background_noise={b: noise for b in BANDS},
        signal_level={b: signal for b in BANDS},
        distance=10.0,
    )


def test_rating_boundaries_are_half_open() -> None:
    assert sti_rating(0.29) == STIRating.BAD
    assert sti_rating(0.30) == STIRating.POOR
    assert sti_rating(0.4499) == STIRating.POOR
    assert sti_rating(0.45) == STIRating.FAIR
    assert sti_rating(0.5999) == STIRating.FAIR
    assert sti_rating(0.6) == STIRating.GOOD
    assert sti_rating(0.75) == STIRating.EXCELLENT


def test_ideal_conditions_give_full_intelligibility() -> None:
    result = compute_sti(params(rt60=0.0, noise=0.0, signal=100.0))

    assert result.value == 1.0
    assert result.rating == STIRating.EXCELLENT
    assert result.modification_factors.noise == 0.0
    assert result.modification_factors.reverberation == 0.0


def test_reverberant_noisy_room_is_bad() -> None:
    result = compute_sti(params(rt60=10.0, noise=80.0, signal=60.0))

    assert result.value < 0.1
    assert result.rating == STIRating.BAD
    assert result.modification_factors.noise > 0.9


def test_more_noise_lowers_sti() -> None:
    quiet = compute_sti(params(rt60=1.0, noise=35.0, signal=70.0))
    noisy = compute_sti(params(rt60=1.0, noise=60.0, signal=70.0))

    assert noisy.value < quiet.value


def test_8k_band_is_reported_with_zero_weight() -> None:
    result = compute_sti(params(rt60=0.8, noise=40.0, signal=70.0))

    assert result.octave_bands[OctaveBand.HZ_8000] == 0.0
    assert set(result.octave_bands) == {OctaveBand(b) for b in BANDS}
    assert 0.0 <= result.value <= 1.0


def test_missing_band_is_rejected() -> None:
    with pytest.raises(InvalidInputError, match="125 Hz"):
        STIParameters(
            rt60_values={250: 1.0, 500: 1.0, 1000: 1.0, 2000: 1.0, 4000: 1.0},
            background_noise={b: 40.0 for b in BANDS},
            signal_level={b: 70.0 for b in BANDS},
            distance=5.0,
        )


def test_estimate_sti() -> None:
    assert estimate_sti(0.5, 25) == pytest.approx(1.0)
    assert estimate_sti(2.0, 10) == pytest.approx(0.25)
    assert estimate_sti(5.0, -10) == 0.0


def test_required_conditions_for_excellent_target() -> None:
    conditions = required_conditions(target_sti=0.8, current_rt60=1.0, current_noise=55)

    assert conditions.max_rt60 == 0.5
    assert conditions.min_snr == 25.0
    assert "Reduce reverberation time by 50% (add acoustic treatment)" in conditions.recommendations
    assert len(conditions.recommendations) == 4


def test_required_conditions_for_fair_target() -> None:
    conditions = required_conditions(target_sti=0.5, current_rt60=1.0, current_noise=40)

    assert (conditions.max_rt60, conditions.min_snr) == (1.2, 15.0)
    assert conditions.recommendations == ["Fair intelligibility - suitable for most applications"]
