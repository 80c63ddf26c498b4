"""Resistive loss in loudspeaker cable runs.

Two wiring schemes are covered:

- Low impedance (4/8/16 Ω): the cable resistance forms a divider with the
  loudspeaker, judged on power loss (< 5%).
- Constant voltage (70V/100V): the line current is set by the total tapped
  power, judged on voltage drop (< 3%).

Cable lengths are one-way; resistance is counted out and back.
"""

import logging
import math

import numpy as np

from acoustics.config import DEFAULT
from acoustics.types import CableLossResult, CableSpec
from core.errors import InvalidInputError

logger = logging.getLogger(__name__)

CABLE_SPECS: dict[int, CableSpec] = {
    12: CableSpec(gauge=12, resistance_per_meter=0.0053, max_current=20),
    14: CableSpec(gauge=14, resistance_per_meter=0.0085, max_current=15),
    16: CableSpec(gauge=16, resistance_per_meter=0.0135, max_current=10),
    18: CableSpec(gauge=18, resistance_per_meter=0.0214, max_current=7),
    20: CableSpec(gauge=20, resistance_per_meter=0.0339, max_current=5),
    22: CableSpec(gauge=22, resistance_per_meter=0.0538, max_current=3),
}

SYSTEM_VOLTAGES = (70, 100)

MAX_SEARCH_LENGTH_M = 500.0
SEARCH_STEP_M = 0.1


def cable_spec(gauge: int) -> CableSpec:
    """Look up a gauge in the cable table.

    Raises:
        InvalidInputError: If the gauge is not in the table
    """
    spec = CABLE_SPECS.get(gauge)
    if spec is None:
        raise InvalidInputError(f"Unsupported cable gauge: {gauge} AWG")
    return spec


def loop_resistance(gauge: int, length: float) -> float:
    """Out-and-back resistance (Ω) of a run."""
    return cable_spec(gauge).resistance_per_meter * length * 2


def rated_drive_voltage(power: float, impedance: float) -> float:
    """RMS voltage that delivers ``power`` into ``impedance``: V = sqrt(P*Z)."""
    return math.sqrt(power * impedance)


def _low_impedance_loss_percent(resistance: float, impedance: float, power: float, voltage: float) -> float:
    current = voltage / (impedance + resistance)
    voltage_at_speaker = voltage - current * resistance
    return (power - voltage_at_speaker**2 / impedance) / power * 100


def _check_drive(power: float, impedance: float | None = None) -> None:
    if not power > 0:
        raise InvalidInputError(f"Drive power must be positive, got {power}")
    if impedance is not None and not impedance > 0:
        raise InvalidInputError(f"Loudspeaker impedance must be positive, got {impedance}")


def _thicker_gauges(gauge: int) -> list[int]:
    """Gauges thicker than ``gauge`` (lower AWG), in ascending AWG order."""
    return sorted(g for g in CABLE_SPECS if g < gauge)


def low_impedance_loss(
    length: float,
    impedance: float,
    power: float,
    amplifier_voltage: float | None = None,
    gauge: int = DEFAULT.default_gauge_awg,
) -> CableLossResult:
    """Loss on a low-impedance loudspeaker run.

    Args:
        length: One-way cable length (m)
        impedance: Loudspeaker impedance (Ω)
        power: Amplifier power into the loudspeaker (W)
        amplifier_voltage: Amplifier output (V RMS); defaults to the rated
            drive voltage for ``power`` into ``impedance``
        gauge: Cable gauge (AWG)

    Returns:
        Loss figures; ``acceptable`` when power loss is strictly below 5%.
        If it is not, ``recommended_gauge`` is the thinnest thicker gauge
        that would be acceptable (the given gauge if none is).

    Raises:
        InvalidInputError: If the gauge is unsupported, or the power or
            impedance is not positive
    """
    _check_drive(power, impedance)
    if amplifier_voltage is not None and not amplifier_voltage > 0:
        raise InvalidInputError(f"Amplifier voltage must be positive, got {amplifier_voltage}")
    voltage = rated_drive_voltage(power, impedance) if amplifier_voltage is None else amplifier_voltage
    resistance = loop_resistance(gauge, length)
    limit = DEFAULT.max_low_impedance_loss_percent

    current = voltage / (impedance + resistance)
    voltage_drop = current * resistance
    voltage_at_speaker = voltage - voltage_drop
    power_at_speaker = voltage_at_speaker**2 / impedance
    power_loss = power - power_at_speaker
    power_loss_percent = power_loss / power * 100
    acceptable = power_loss_percent < limit

    recommended = gauge
    if not acceptable:
        for candidate in _thicker_gauges(gauge):
            candidate_loss = _low_impedance_loss_percent(loop_resistance(candidate, length), impedance, power, voltage)
            if candidate_loss < limit:
                recommended = candidate
                break
        logger.debug("%.1f m at %d AWG loses %.1f%%, recommending %d AWG", length, gauge, power_loss_percent, recommended)

    return CableLossResult(
        total_resistance=resistance,
        voltage_drop=voltage_drop,
        voltage_drop_percent=voltage_drop / voltage * 100,
        power_loss=power_loss,
        power_loss_percent=power_loss_percent,
        voltage_at_speaker=voltage_at_speaker,
        power_at_speaker=power_at_speaker,
        recommended_gauge=recommended,
        acceptable=acceptable,
    )


def distributed_system_loss(
    length: float,
    system_voltage: int,
    total_power: float,
    gauge: int = DEFAULT.default_gauge_awg,
) -> CableLossResult:
    """Loss on a 70V/100V constant-voltage line.

    ``acceptable`` when the voltage drop is strictly below 3%.

    Raises:
        InvalidInputError: If the voltage is not 70 or 100, the gauge is
            unsupported or the total power is not positive
    """
    _check_drive(total_power)
    if system_voltage not in SYSTEM_VOLTAGES:
        raise InvalidInputError(f"Unsupported system voltage: {system_voltage}V (expected 70 or 100)")

    resistance = loop_resistance(gauge, length)
    limit = DEFAULT.max_distributed_drop_percent

    current = total_power / system_voltage
    voltage_drop = current * resistance
    voltage_drop_percent = voltage_drop / system_voltage * 100
    voltage_at_speaker = system_voltage - voltage_drop
    # Tapped loads behave as a fixed impedance of V²/P
    power_at_speaker = voltage_at_speaker**2 / (system_voltage**2 / total_power)
    power_loss = total_power - power_at_speaker
    acceptable = voltage_drop_percent < limit

    recommended = gauge
    if not acceptable:
        for candidate in _thicker_gauges(gauge):
            candidate_drop = current * loop_resistance(candidate, length) / system_voltage * 100
            if candidate_drop < limit:
                recommended = candidate
                break
        logger.debug("%dV line of %.1f m drops %.1f%%, recommending %d AWG", system_voltage, length, voltage_drop_percent, recommended)

    return CableLossResult(
        total_resistance=resistance,
        voltage_drop=voltage_drop,
        voltage_drop_percent=voltage_drop_percent,
        power_loss=power_loss,
        power_loss_percent=power_loss / total_power * 100,
        voltage_at_speaker=voltage_at_speaker,
        power_at_speaker=power_at_speaker,
        recommended_gauge=recommended,
        acceptable=acceptable,
    )


def max_cable_length(
    impedance: float,
    power: float,
    max_loss_percent: float = DEFAULT.max_low_impedance_loss_percent,
    gauge: int = DEFAULT.default_gauge_awg,
) -> float:
    """Longest low-impedance run (m, 0.1 m steps up to 500 m) within a loss limit.

    Lengths are swept in order and the sweep stops at the first length whose
    loss exceeds the limit. Returns 0.0 when even 0.1 m is too lossy.
    """
    _check_drive(power, impedance)
    spec = cable_spec(gauge)
    voltage = rated_drive_voltage(power, impedance)

    steps = int(round(MAX_SEARCH_LENGTH_M / SEARCH_STEP_M))
    lengths = np.round(np.arange(1, steps + 1) * SEARCH_STEP_M, 1)
    resistance = spec.resistance_per_meter * lengths * 2
    voltage_at_speaker = voltage - voltage / (impedance + resistance) * resistance
    loss_percent = (power - voltage_at_speaker**2 / impedance) / power * 100

    failing = np.flatnonzero(loss_percent > max_loss_percent)
    if failing.size == 0:
        return float(lengths[-1])
    first_failure = int(failing[0])
    if first_failure == 0:
        return 0.0
    return float(lengths[first_failure - 1])
