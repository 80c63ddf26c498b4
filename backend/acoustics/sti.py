"""Speech Transmission Index (STI) prediction.

The full method follows the modulation transfer function (MTF) approach of
IEC 60268-16. For every octave band k and modulation frequency F:

    m(F) = 1 / sqrt(1 + (2π F T / 13.8)²)  *  1 / (1 + 10^(-SNR/10))

Each m is mapped to an apparent SNR, clipped to ±15 dB, averaged over the
fourteen modulation frequencies and rescaled to [0, 1]. The band values are
combined with fixed importance weights.

``estimate_sti`` is a separate, deliberately coarse empirical estimate used
where only a single RT60 and SNR are known.
"""

import math

import numpy as np
from numpy.typing import NDArray

from acoustics.types import ModificationFactors, RequiredConditions, STIParameters, STIRating, STIResult
from core.bands import STANDARD_BANDS, BandValues, OctaveBand

MODULATION_FREQUENCIES: NDArray[np.float64] = np.array(
    [0.63, 0.80, 1.00, 1.25, 1.60, 2.00, 2.50, 3.15, 4.00, 5.00, 6.30, 8.00, 10.00, 12.50],
    dtype=np.float64,
)

# Octave band importance weights; 8 kHz is carried with zero weight.
OCTAVE_WEIGHTS: BandValues = {
    OctaveBand.HZ_125: 0.085,
    OctaveBand.HZ_250: 0.127,
    OctaveBand.HZ_500: 0.230,
    OctaveBand.HZ_1000: 0.233,
    OctaveBand.HZ_2000: 0.192,
    OctaveBand.HZ_4000: 0.133,
    OctaveBand.HZ_8000: 0.0,
}

APPARENT_SNR_LIMIT_DB = 15.0

# Upper bounds (exclusive) of each rating, checked in order.
_RATING_THRESHOLDS: tuple[tuple[float, STIRating], ...] = (
    (0.30, STIRating.BAD),
    (0.45, STIRating.POOR),
    (0.60, STIRating.FAIR),
    (0.75, STIRating.GOOD),
)


def reverberation_reduction(rt60: float, modulation_freqs: NDArray[np.float64]) -> NDArray[np.float64]:
    """Modulation reduction due to reverberation, per modulation frequency."""
    return 1.0 / np.sqrt(1.0 + (2.0 * np.pi * modulation_freqs * rt60 / 13.8) ** 2)


def noise_reduction(snr_db: float) -> float:
    """Modulation reduction due to steady background noise."""
    ratio = 10.0 ** (snr_db / 10.0)
    return ratio / (1.0 + ratio)


def apparent_snr(modulation: NDArray[np.float64]) -> NDArray[np.float64]:
    """Apparent SNR (dB) for each modulation index, clipped to ±15 dB."""
    limit = APPARENT_SNR_LIMIT_DB
    with np.errstate(divide="ignore", invalid="ignore"):
        snr = 10.0 * np.log10(modulation / (1.0 - modulation))
    snr = np.where(modulation <= 0.0, -limit, snr)
    snr = np.where(modulation >= 1.0, limit, snr)
    return np.clip(snr, -limit, limit)


def sti_rating(value: float) -> STIRating:
    """Qualification band for an STI value; lower bounds are inclusive."""
    for upper, rating in _RATING_THRESHOLDS:
        if value < upper:
            return rating
    return STIRating.EXCELLENT


def compute_sti(params: STIParameters) -> STIResult:
    """Compute the STI from per-band RT60, noise and signal levels.

    Args:
        params: Per-band RT60 (s), background noise (dB) and signal level (dB)

    Returns:
        STI value (rounded to 2 decimals), its rating, per-band STI and the
        weighted modulation loss split into noise and reverberation.
    """
    octave_sti: BandValues = {}
    weighted_sum = 0.0
    weight_sum = 0.0
    noise_loss = 0.0
    reverb_loss = 0.0

    for band in STANDARD_BANDS:
        weight = OCTAVE_WEIGHTS[band]
        reverb = reverberation_reduction(params.rt60_values[band], MODULATION_FREQUENCIES)
        noise = noise_reduction(params.signal_to_noise(band))
        mtf = reverb * noise

        avg_snr = float(np.mean(apparent_snr(mtf)))
        octave_sti[band] = (avg_snr + APPARENT_SNR_LIMIT_DB) / (2 * APPARENT_SNR_LIMIT_DB)

        weighted_sum += octave_sti[band] * weight
        weight_sum += weight
        noise_loss += (1.0 - noise) * weight
        reverb_loss += (1.0 - float(np.mean(reverb))) * weight

    sti_value = weighted_sum / weight_sum
    octave_sti[OctaveBand.HZ_8000] = 0.0

    return STIResult(
        value=round(sti_value, 2),
        rating=sti_rating(sti_value),
        octave_bands=octave_sti,
        modification_factors=ModificationFactors(
            noise=round(noise_loss, 2),
            reverberation=round(reverb_loss, 2),
            level=0.0,
            nonlinearity=0.0,
        ),
    )


def estimate_sti(rt60: float, snr: float) -> float:
    """Quick empirical STI estimate from a single RT60 (s) and SNR (dB).

    Not derived from the MTF computation: RT60 contributes up to 0.5
    (falling 0.3 per second above 0.5 s) and SNR contributes snr/50 up to 0.5.
    """
    rt60_factor = max(0.0, 0.5 - (rt60 - 0.5) * 0.3)
    snr_factor = max(0.0, min(0.5, snr / 50))
    return max(0.0, min(1.0, rt60_factor + snr_factor))


def required_conditions(target_sti: float, current_rt60: float, current_noise: float) -> RequiredConditions:
    """Rule-of-thumb acoustic conditions needed to reach a target STI."""
    recommendations: list[str] = []

    if target_sti >= 0.75:
        max_rt60, min_snr = 0.5, 25.0
        recommendations.append("Excellent intelligibility requires very controlled acoustics")
    elif target_sti >= 0.60:
        max_rt60, min_snr = 0.8, 20.0
        recommendations.append("Good intelligibility is achievable with moderate acoustic treatment")
    elif target_sti >= 0.45:
        max_rt60, min_snr = 1.2, 15.0
        recommendations.append("Fair intelligibility - suitable for most applications")
    else:
        max_rt60, min_snr = 2.0, 10.0
        recommendations.append("Poor intelligibility - significant improvements needed")

    if current_rt60 > max_rt60:
        reduction = (current_rt60 - max_rt60) / current_rt60 * 100
        recommendations.append(f"Reduce reverberation time by {reduction:.0f}% (add acoustic treatment)")

    if current_noise > 50:
        recommendations.append("Reduce background noise levels (improve HVAC, add isolation)")

    if min_snr > 20:
        recommendations.append("Increase direct sound levels (add speakers, reduce distance)")

    return RequiredConditions(max_rt60=max_rt60, min_snr=min_snr, recommendations=recommendations)


def is_intelligible(result: STIResult, target: float) -> bool:
    """True when a computed STI meets a venue's target value."""
    return not math.isnan(result.value) and result.value >= target
