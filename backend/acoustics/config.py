"""Centralised engine defaults.

Design conventions that callers may want to revisit live here; the physical
constants of each formula stay in their own module. Create a custom
``AcousticsConfig`` to change a default for a study::

    cfg = AcousticsConfig(listener_height_m=1.7)  # standing audience
    grid = coverage_grid(room, placements, listener_height=cfg.listener_height_m)
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class AcousticsConfig:
    """Engine defaults, grouped by engine."""

    # --- Air ---
    temperature_c: float = 20.0

    # --- Listener / grid ---
    listener_height_m: float = 1.2  # seated ear height
    grid_resolution_m: float = 1.0
    mounting_height_m: float = 3.0

    # --- SPL requirements ---
    spl_headroom_db: float = 10.0
    coverage_overlap_factor: float = 0.7
    max_spl_variance_db: float = 6.0
    min_signal_to_noise_db: float = 15.0

    # --- Amplifier sizing ---
    amplifier_headroom_db: float = 3.0
    amplifier_safety_factor: float = 1.25
    speakers_per_constant_voltage_channel: int = 4

    # --- Delay ---
    haas_offset_ms: float = 10.0
    lip_sync_tolerance_ms: float = 40.0
    echo_warning_delay_ms: float = 100.0
    close_listener_distance_m: float = 3.0

    # --- Cable loss ---
    default_gauge_awg: int = 14
    max_low_impedance_loss_percent: float = 5.0
    max_distributed_drop_percent: float = 3.0

    # --- RT60 ---
    rt60_target_tolerance_s: float = 0.2  # ± around a venue's target


DEFAULT = AcousticsConfig()
