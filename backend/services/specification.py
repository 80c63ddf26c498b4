"""System specification assembler.

Runs the calculation engines for one venue and folds the results into a
specification document:

1. Room surfaces are derived from the venue category and dimensions
2. RT60, SPL coverage and STI are predicted for the chosen loudspeakers
3. Delay loudspeakers are planned for long rooms
4. Installation details (cable schedule, rack, power, mounting, labour)
5. Budget summary

Equipment selection itself is up to the caller: the loudspeaker model and
quantity (and optionally the amplifier model) are inputs.
"""

import logging
import math
from dataclasses import dataclass, field
from datetime import datetime

from acoustics.cable_loss import distributed_system_loss, low_impedance_loss
from acoustics.config import DEFAULT
from acoustics.delay import optimal_delay_positions, system_delays
from acoustics.rt60 import compute_rt60
from acoustics.spl import amplifier_power, coverage_grid
from acoustics.sti import compute_sti, is_intelligible
from acoustics.types import (
    AmplifierPowerResult,
    CableLossResult,
    RoomSurface,
    SpeakerPlacement,
    SpeakerQuantity,
    SPLPoint,
    STIParameters,
    STIRating,
    SystemDelayResult,
    TargetRange,
)
from core.bands import OctaveBand
from core.errors import InvalidInputError
from core.models import Amplifier, Point3, Speaker, SpeakerType, Venue
from data.materials import coefficients_for

logger = logging.getLogger(__name__)

SPEAKER_CABLE_GAUGE = 12  # AWG
CABLE_SLACK_FACTOR = 1.5
AMPLIFIER_RACK_SPACING_U = 1
FALLBACK_AMPLIFIER_CONSUMPTION_W = 500.0
OTHER_EQUIPMENT_LOAD_W = 500.0
MAINS_VOLTAGE = 120
BREAKER_DERATING = 0.8
HEAVY_SPEAKER_KG = 20.0
MOUNT_DOWN_TILT_DEG = 15.0

# Labour (hours)
SPEAKER_INSTALL_HOURS = 2.0
CABLE_RUN_HOURS = 0.5
RACK_UNIT_HOURS = 0.5
COMMISSIONING_HOURS = 8.0
TRAINING_HOURS = 4.0

# Budget
LABOR_RATE = 100.0  # USD/hour
MATERIALS_PER_CABLE_RUN = 50.0  # USD
MATERIALS_PER_MOUNT = 75.0  # USD
SHIPPING_RATE = 0.05
TAX_RATE = 0.08
CONTINGENCY_RATE = 0.10

# Per-band offsets from the single-number ambient noise and average SPL (dB)
NOISE_SPECTRUM_OFFSETS: dict[OctaveBand, float] = {
    OctaveBand.HZ_125: 10.0,
    OctaveBand.HZ_250: 5.0,
    OctaveBand.HZ_500: 0.0,
    OctaveBand.HZ_1000: 0.0,
    OctaveBand.HZ_2000: 0.0,
    OctaveBand.HZ_4000: 5.0,
    OctaveBand.HZ_8000: 10.0,
}
SPEECH_SPECTRUM_OFFSETS: dict[OctaveBand, float] = {
    OctaveBand.HZ_125: -10.0,
    OctaveBand.HZ_250: -5.0,
    OctaveBand.HZ_500: 0.0,
    OctaveBand.HZ_1000: 0.0,
    OctaveBand.HZ_2000: -3.0,
    OctaveBand.HZ_4000: -8.0,
    OctaveBand.HZ_8000: -15.0,
}


@dataclass
class EquipmentLine:
    equipment_id: str
    description: str
    quantity: int
    unit_price: float
    total_price: float = field(init=False)

    def __post_init__(self) -> None:
        self.total_price = self.unit_price * self.quantity


@dataclass
class AudioCalculations:
    """Engine results for the main loudspeaker system."""

    total_amplifier_power: float  # W, installed amplifier output
    power_requirement: AmplifierPowerResult
    coverage_map: list[SPLPoint]
    rt60_predicted: float  # s
    rt60_within_target: bool
    sti_predicted: float
    sti_rating: STIRating
    meets_sti_target: bool
    spl_average: float  # dB
    spl_min: float  # dB
    spl_peak: float  # dB


@dataclass
class AudioSystemSpec:
    speakers: list[EquipmentLine]
    amplifiers: list[EquipmentLine]
    calculations: AudioCalculations
    delays: SystemDelayResult


@dataclass
class RackUnit:
    position: int  # U from the bottom
    height: int  # U
    equipment_id: str
    notes: str = ""


@dataclass
class CableRun:
    id: str
    cable_type: str
    origin: str
    destination: str
    cable_spec: str
    length: float  # m
    quantity: int = 1
    loss: CableLossResult | None = None


@dataclass
class PowerCircuit:
    name: str
    voltage: int
    amperage: int
    phase: str
    outlets: int
    location: str
    loads: list[str] = field(default_factory=list)


@dataclass
class PowerRequirements:
    circuits: list[PowerCircuit]
    total_load: float  # W
    recommended_breaker: int  # A


@dataclass
class MountingDetail:
    equipment_id: str
    location: str
    mount_type: str
    height: float  # m
    angle: float  # degrees down-tilt
    hardware: str


@dataclass
class LaborHours:
    installation: float
    programming: float
    commissioning: float
    training: float
    total: float = field(init=False)

    def __post_init__(self) -> None:
        self.total = self.installation + self.programming + self.commissioning + self.training


@dataclass
class InstallationSpec:
    rack_layout: list[RackUnit]
    cable_schedule: list[CableRun]
    power_requirements: PowerRequirements
    mounting_details: list[MountingDetail]
    labor_hours: LaborHours


@dataclass
class BudgetSummary:
    equipment: float
    labor: float
    materials: float
    shipping: float
    tax: float
    contingency: float
    subtotal: float = field(init=False)
    grand_total: float = field(init=False)

    def __post_init__(self) -> None:
        self.subtotal = self.equipment + self.labor + self.materials
        self.grand_total = self.subtotal + self.shipping + self.tax + self.contingency


@dataclass
class SystemSpecification:
    id: str
    project_name: str
    venue: Venue
    audio: AudioSystemSpec
    installation: InstallationSpec
    budget: BudgetSummary
    created_at: datetime = field(default_factory=datetime.now)


def room_surfaces(venue: Venue) -> list[RoomSurface]:
    """Default boundary finishes for a venue.

    Corporate and education rooms get a hard front wall and a carpeted
    floor; other venues a draped front wall and a wooden floor. The rear
    wall and ceiling are assumed treated.
    """
    dims = venue.dimensions
    hard = venue.is_hard_room

    def surface(area: float, label: str, material: str) -> RoomSurface:
        return RoomSurface(area=area, material=label, absorption_coefficients=coefficients_for(material))

    return [
        surface(dims.width * dims.height, "Front Wall", "gypsum-board" if hard else "curtains-heavy"),
        surface(dims.width * dims.height, "Rear Wall", "acoustic-ceiling"),
        surface(dims.length * dims.height * 2, "Side Walls", "gypsum-board"),
        surface(dims.floor_area, "Floor", "carpet-heavy" if hard else "wood-floor"),
        surface(dims.floor_area, "Ceiling", "acoustic-ceiling"),
    ]


def main_speaker_placements(venue: Venue, speaker: Speaker, quantity: int) -> list[SpeakerPlacement]:
    """Front-of-room loudspeakers spread across the width near the ceiling."""
    dims = venue.dimensions
    spacing = dims.width / quantity
    placements: list[SpeakerPlacement] = []
    for i in range(quantity):
        x = (i + 0.5) * spacing
        placements.append(
            SpeakerPlacement(
                speaker=speaker,
                position=Point3(x, 1.0, dims.height - 0.5),
                aim_point=Point3(x, dims.length * 0.7, DEFAULT.listener_height_m),
            )
        )
    return placements


def _amplifier_quantity(amplifier: Amplifier, requirement: AmplifierPowerResult) -> int:
    return max(1, math.ceil(requirement.channels_required / amplifier.channels))


def _speaker_cable_loss(speaker: Speaker, length: float) -> CableLossResult:
    power = speaker.power_handling.continuous
    if speaker.is_constant_voltage:
        voltage = 100 if speaker.transformer == "100V" else 70
        return distributed_system_loss(length, voltage, power, gauge=SPEAKER_CABLE_GAUGE)
    return low_impedance_loss(length, speaker.impedance, power, gauge=SPEAKER_CABLE_GAUGE)


def build_installation(
    venue: Venue,
    speaker: Speaker,
    quantity: int,
    amplifiers: list[tuple[Amplifier, int]],
) -> InstallationSpec:
    """Cable schedule, rack layout, power, mounting and labour estimate."""
    dims = venue.dimensions

    rack: list[RackUnit] = []
    position = 1
    for amplifier, amp_quantity in amplifiers:
        for i in range(amp_quantity):
            rack.append(RackUnit(position=position, height=amplifier.rack_units, equipment_id=amplifier.id, notes=f"Amplifier {i + 1}"))
            position += amplifier.rack_units + AMPLIFIER_RACK_SPACING_U

    run_length = float(math.ceil(dims.length * CABLE_SLACK_FACTOR))
    loss = _speaker_cable_loss(speaker, run_length)
    if not loss.acceptable:
        logger.warning(
            "Speaker runs of %.0f m exceed the loss limit at %d AWG (recommended %d AWG)",
            run_length,
            SPEAKER_CABLE_GAUGE,
            loss.recommended_gauge,
        )
    cables = [
        CableRun(
            id=f"SPK-{i + 1}",
            cable_type="audio",
            origin="Amplifier Rack",
            destination=f"Main Speaker {i + 1}",
            cable_spec=f"{SPEAKER_CABLE_GAUGE}AWG Speaker Cable",
            length=run_length,
            loss=loss,
        )
        for i in range(quantity)
    ]

    total_load = (
        sum((amp.power_consumption or FALLBACK_AMPLIFIER_CONSUMPTION_W) * n for amp, n in amplifiers)
        + OTHER_EQUIPMENT_LOAD_W
    )
    breaker = math.ceil(total_load / MAINS_VOLTAGE / BREAKER_DERATING / 10) * 10
    power = PowerRequirements(
        circuits=[
            PowerCircuit(
                name="Audio Equipment",
                voltage=MAINS_VOLTAGE,
                amperage=breaker,
                phase="1ph",
                outlets=6,
                location="Equipment Rack",
                loads=[amp.id for amp, _ in amplifiers],
            )
        ],
        total_load=total_load,
        recommended_breaker=breaker,
    )

    mounts = [
        MountingDetail(
            equipment_id=speaker.id,
            location=f"Main Position {i + 1}",
            mount_type="Ceiling tile bridge" if speaker.speaker_type == SpeakerType.CEILING else "Wall bracket",
            height=dims.height - 0.5,
            angle=MOUNT_DOWN_TILT_DEG,
            hardware="Heavy-duty bracket with safety cable" if speaker.weight_kg > HEAVY_SPEAKER_KG else "Standard bracket",
        )
        for i in range(quantity)
    ]

    labor = LaborHours(
        installation=quantity * SPEAKER_INSTALL_HOURS + len(cables) * CABLE_RUN_HOURS + len(rack) * RACK_UNIT_HOURS,
        programming=0.0,
        commissioning=COMMISSIONING_HOURS,
        training=TRAINING_HOURS,
    )

    return InstallationSpec(
        rack_layout=rack,
        cable_schedule=cables,
        power_requirements=power,
        mounting_details=mounts,
        labor_hours=labor,
    )


def calculate_budget(audio: AudioSystemSpec, installation: InstallationSpec) -> BudgetSummary:
    equipment = sum(line.total_price for line in audio.speakers + audio.amplifiers)
    labor = installation.labor_hours.total * LABOR_RATE
    materials = (
        len(installation.cable_schedule) * MATERIALS_PER_CABLE_RUN
        + len(installation.mounting_details) * MATERIALS_PER_MOUNT
    )
    subtotal = equipment + labor + materials

    return BudgetSummary(
        equipment=equipment,
        labor=labor,
        materials=materials,
        shipping=subtotal * SHIPPING_RATE,
        tax=subtotal * TAX_RATE,
        contingency=subtotal * CONTINGENCY_RATE,
    )


def generate_specification(
    venue: Venue,
    project_name: str,
    speaker: Speaker,
    quantity: int,
    amplifier: Amplifier | None = None,
) -> SystemSpecification:
    """Assemble a complete system specification for one venue.

    Args:
        venue: Venue geometry, audience and acoustic targets
        project_name: Name printed on the specification
        speaker: Main loudspeaker model
        quantity: Number of main loudspeakers
        amplifier: Amplifier model; its quantity is sized from the
            channels the loudspeakers need

    Raises:
        InvalidInputError: If ``quantity`` is less than one
    """
    if quantity < 1:
        raise InvalidInputError(f"At least one main speaker is required, got {quantity}")

    dims = venue.dimensions
    targets = venue.acoustics

    # Acoustics
    tolerance = DEFAULT.rt60_target_tolerance_s
    rt60 = compute_rt60(
        dims,
        room_surfaces(venue),
        venue.capacity,
        TargetRange(targets.target_rt60 - tolerance, targets.target_rt60 + tolerance),
    )

    placements = main_speaker_placements(venue, speaker, quantity)
    coverage = coverage_grid(dims, placements)
    levels = [point.spl for point in coverage]
    spl_average = sum(levels) / len(levels)

    rt60_bands = dict(rt60.sabine.values)
    rt60_bands[OctaveBand.HZ_8000] = rt60_bands[OctaveBand.HZ_4000]
    sti = compute_sti(
        STIParameters(
            rt60_values=rt60_bands,
            background_noise={b: targets.ambient_noise + o for b, o in NOISE_SPECTRUM_OFFSETS.items()},
            signal_level={b: spl_average + o for b, o in SPEECH_SPECTRUM_OFFSETS.items()},
            distance=dims.length / 2,
        )
    )

    main_position = Point3(dims.width / 2, 1.0, dims.height - 0.5)
    delays = system_delays(
        main_position,
        optimal_delay_positions(dims, main_position),
        additional_delay=DEFAULT.haas_offset_ms,
    )

    # Equipment
    requirement = amplifier_power([SpeakerQuantity(speaker=speaker, quantity=quantity)])
    amplifiers: list[tuple[Amplifier, int]] = []
    if amplifier is not None:
        amplifiers.append((amplifier, _amplifier_quantity(amplifier, requirement)))

    audio = AudioSystemSpec(
        speakers=[EquipmentLine(speaker.id, f"{speaker.manufacturer} {speaker.model}", quantity, speaker.price)],
        amplifiers=[EquipmentLine(amp.id, f"{amp.manufacturer} {amp.model}", n, amp.price) for amp, n in amplifiers],
        calculations=AudioCalculations(
            total_amplifier_power=sum(amp.power_at_8_ohms * amp.channels * n for amp, n in amplifiers),
            power_requirement=requirement,
            coverage_map=coverage,
            rt60_predicted=rt60.recommended,
            rt60_within_target=rt60.within_target,
            sti_predicted=sti.value,
            sti_rating=sti.rating,
            meets_sti_target=is_intelligible(sti, targets.target_sti),
            spl_average=spl_average,
            spl_min=min(levels),
            spl_peak=max(levels),
        ),
        delays=delays,
    )

    installation = build_installation(venue, speaker, quantity, amplifiers)
    budget = calculate_budget(audio, installation)

    created_at = datetime.now()
    spec = SystemSpecification(
        id=f"SPEC-{int(created_at.timestamp() * 1000)}",
        project_name=project_name,
        venue=venue,
        audio=audio,
        installation=installation,
        budget=budget,
        created_at=created_at,
    )

    logger.info(
        "Specification %s (%s): RT60 %.2f s, STI %.2f (%s), %d delay zones, total $%.0f",
        spec.id,
        project_name,
        rt60.recommended,
        sti.value,
        sti.rating,
        len(delays.zones),
        budget.grand_total,
    )
    return spec
