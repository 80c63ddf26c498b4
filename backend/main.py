"""FastAPI entry point - thin layer over the calculation engines."""

import dataclasses
import logging
import math
from datetime import datetime
from enum import Enum
from typing import Any

from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from acoustics import (
    AvailableSurface,
    DelaySpeaker,
    DisplayDimensions,
    Resolution,
    RoomSurface,
    SpeakerPlacement,
    SpeakerQuantity,
    STIParameters,
    TargetRange,
    amplifier_power,
    audio_video_sync,
    brightness_requirements,
    compute_rt60,
    compute_sti,
    coverage_grid,
    display_size,
    distributed_system_loss,
    estimate_sti,
    fill_speaker_delay,
    low_impedance_loss,
    max_cable_length,
    optimal_delay_positions,
    optimal_viewing_distance,
    pixel_density,
    required_conditions,
    speaker_requirements,
    spl_at_point,
    sti_rating,
    suggest_treatment,
    system_delays,
    viewing_angles,
)
from acoustics.config import DEFAULT
from core.errors import InvalidInputError
from core.models import (
    AcousticTargets,
    CoverageAngles,
    Occupancy,
    Point3,
    PowerHandling,
    RoomDimensions,
    Speaker,
    SpeakerType,
    TargetSPL,
    Venue,
    VenueCategory,
)
from data import ABSORPTION_COEFFICIENTS, SAMPLE_AMPLIFIERS, SAMPLE_SPEAKERS, coefficients_for
from services.specification import generate_specification

logging.basicConfig(level=logging.WARNING, format="%(name)s | %(message)s")
logging.getLogger("services.specification").setLevel(logging.INFO)

app = FastAPI(title="AV Venue Acoustics API")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(InvalidInputError)
async def invalid_input_handler(request: Request, exc: InvalidInputError) -> JSONResponse:
    return JSONResponse(status_code=422, content={"detail": str(exc)})


def _jsonable(value: Any) -> Any:
    """Make engine output JSON-safe: non-finite floats become null, enum keys plain values."""
    if isinstance(value, float):
        return value if math.isfinite(value) else None
    if isinstance(value, dict):
        return {(k.value if isinstance(k, Enum) else k): _jsonable(v) for k, v in value.items()}
    if isinstance(value, list | tuple):
        return [_jsonable(v) for v in value]
    if isinstance(value, datetime):
        return value.isoformat()
    return value


def _to_payload(result: Any) -> Any:
    if isinstance(result, list):
        return [_to_payload(item) for item in result]
    if dataclasses.is_dataclass(result) and not isinstance(result, type):
        return _jsonable(dataclasses.asdict(result))
    return _jsonable(result)


# ---------------------------------------------------------------------------
# Shared request models
# ---------------------------------------------------------------------------


class PointModel(BaseModel):
    x: float
    y: float
    z: float

    def to_point(self) -> Point3:
        return Point3(self.x, self.y, self.z)


class RoomModel(BaseModel):
    length: float
    width: float
    height: float

    def to_room(self) -> RoomDimensions:
        return RoomDimensions(self.length, self.width, self.height)


class SpeakerModel(BaseModel):
    id: str
    manufacturer: str = ""
    model: str = ""
    speaker_type: SpeakerType = SpeakerType.POINT_SOURCE
    sensitivity: float
    max_spl: float = 120.0
    impedance: float = 8.0
    coverage_horizontal: float
    coverage_vertical: float
    power_continuous: float
    power_peak: float
    transformer: str | None = None
    price: float = 0.0
    weight_kg: float = 0.0

    def to_speaker(self) -> Speaker:
        return Speaker(
            id=self.id,
            manufacturer=self.manufacturer,
            model=self.model,
            speaker_type=self.speaker_type,
            sensitivity=self.sensitivity,
            max_spl=self.max_spl,
            impedance=self.impedance,
            coverage=CoverageAngles(self.coverage_horizontal, self.coverage_vertical),
            power_handling=PowerHandling(self.power_continuous, self.power_peak),
            transformer=self.transformer,
            price=self.price,
            weight_kg=self.weight_kg,
        )


class DisplayModel(BaseModel):
    width: float
    height: float

    def to_display(self) -> DisplayDimensions:
        return DisplayDimensions(self.width, self.height)


# ---------------------------------------------------------------------------
# Room acoustics
# ---------------------------------------------------------------------------


class SurfaceModel(BaseModel):
    area: float
    material: str
    # Looked up from the material table when omitted
    absorption_coefficients: dict[int, float] | None = None

    def to_surface(self) -> RoomSurface:
        coefficients = self.absorption_coefficients
        if coefficients is None:
            coefficients = coefficients_for(self.material)
        return RoomSurface(area=self.area, material=self.material, absorption_coefficients=coefficients)


class RT60Request(BaseModel):
    dimensions: RoomModel
    surfaces: list[SurfaceModel]
    seated: int = 0
    standing: int = 0
    target_min: float
    target_max: float


@app.post("/acoustics/rt60")
def post_rt60(body: RT60Request) -> dict[str, Any]:
    result = compute_rt60(
        body.dimensions.to_room(),
        [s.to_surface() for s in body.surfaces],
        Occupancy(seated=body.seated, standing=body.standing),
        TargetRange(body.target_min, body.target_max),
    )
    return _to_payload(result)


class AvailableSurfaceModel(BaseModel):
    location: str
    area: float


class TreatmentRequest(BaseModel):
    current_rt60: float
    target_rt60: float
    room_volume: float
    available_surfaces: list[AvailableSurfaceModel]


@app.post("/acoustics/rt60/treatment")
def post_treatment(body: TreatmentRequest) -> list[dict[str, Any]]:
    surfaces = [AvailableSurface(location=s.location, area=s.area) for s in body.available_surfaces]
    return _to_payload(suggest_treatment(body.current_rt60, body.target_rt60, body.room_volume, surfaces))


class STIRequest(BaseModel):
    rt60_values: dict[int, float]
    background_noise: dict[int, float]
    signal_level: dict[int, float]
    distance: float


@app.post("/acoustics/sti")
def post_sti(body: STIRequest) -> dict[str, Any]:
    params = STIParameters(
        rt60_values=body.rt60_values,
        background_noise=body.background_noise,
        signal_level=body.signal_level,
        distance=body.distance,
    )
    return _to_payload(compute_sti(params))


class STIEstimateRequest(BaseModel):
    rt60: float
    snr: float


@app.post("/acoustics/sti/estimate")
def post_sti_estimate(body: STIEstimateRequest) -> dict[str, Any]:
    value = estimate_sti(body.rt60, body.snr)
    return {"sti": value, "rating": sti_rating(value)}


class STIRequirementsRequest(BaseModel):
    target_sti: float
    current_rt60: float
    current_noise: float


@app.post("/acoustics/sti/requirements")
def post_sti_requirements(body: STIRequirementsRequest) -> dict[str, Any]:
    return _to_payload(required_conditions(body.target_sti, body.current_rt60, body.current_noise))


# ---------------------------------------------------------------------------
# SPL and coverage
# ---------------------------------------------------------------------------


class SPLPointRequest(BaseModel):
    speaker: SpeakerModel
    power: float
    listener: PointModel
    speaker_position: PointModel
    aim_point: PointModel | None = None


@app.post("/spl/point")
def post_spl_point(body: SPLPointRequest) -> dict[str, float]:
    spl = spl_at_point(
        body.speaker.to_speaker(),
        body.power,
        body.listener.to_point(),
        body.speaker_position.to_point(),
        body.aim_point.to_point() if body.aim_point else None,
    )
    return {"spl": spl}


class PlacementModel(BaseModel):
    speaker: SpeakerModel
    position: PointModel
    aim_point: PointModel | None = None
    tilt_angle: float = 0.0
    pan_angle: float = 0.0


class CoverageRequest(BaseModel):
    room: RoomModel
    placements: list[PlacementModel]
    grid_resolution: float = DEFAULT.grid_resolution_m
    listener_height: float = DEFAULT.listener_height_m


@app.post("/spl/coverage")
def post_coverage(body: CoverageRequest) -> list[dict[str, Any]]:
    placements = [
        SpeakerPlacement(
            speaker=p.speaker.to_speaker(),
            position=p.position.to_point(),
            aim_point=p.aim_point.to_point() if p.aim_point else None,
            tilt_angle=p.tilt_angle,
            pan_angle=p.pan_angle,
        )
        for p in body.placements
    ]
    return _to_payload(coverage_grid(body.room.to_room(), placements, body.grid_resolution, body.listener_height))


class SpeakerRequirementsRequest(BaseModel):
    room: RoomModel
    target_average_spl: float
    target_peak_spl: float
    ambient_noise: float
    speaker: SpeakerModel
    mounting_height: float = DEFAULT.mounting_height_m


@app.post("/spl/requirements")
def post_speaker_requirements(body: SpeakerRequirementsRequest) -> dict[str, Any]:
    result = speaker_requirements(
        body.room.to_room(),
        TargetSPL(body.target_average_spl, body.target_peak_spl),
        body.ambient_noise,
        body.speaker.to_speaker(),
        body.mounting_height,
    )
    return _to_payload(result)


class SpeakerQuantityModel(BaseModel):
    speaker: SpeakerModel
    quantity: int


class AmplifierPowerRequest(BaseModel):
    speakers: list[SpeakerQuantityModel]
    headroom_db: float = DEFAULT.amplifier_headroom_db
    safety_factor: float = DEFAULT.amplifier_safety_factor


@app.post("/spl/amplifier-power")
def post_amplifier_power(body: AmplifierPowerRequest) -> dict[str, Any]:
    speakers = [SpeakerQuantity(speaker=s.speaker.to_speaker(), quantity=s.quantity) for s in body.speakers]
    return _to_payload(amplifier_power(speakers, body.headroom_db, body.safety_factor))


# ---------------------------------------------------------------------------
# Delay
# ---------------------------------------------------------------------------


class DelaySpeakerModel(BaseModel):
    name: str
    position: PointModel

    def to_delay_speaker(self) -> DelaySpeaker:
        return DelaySpeaker(name=self.name, position=self.position.to_point())


class SystemDelayRequest(BaseModel):
    main_position: PointModel
    speakers: list[DelaySpeakerModel]
    temperature: float = DEFAULT.temperature_c
    additional_delay: float = 0.0


@app.post("/delay/system")
def post_system_delays(body: SystemDelayRequest) -> dict[str, Any]:
    result = system_delays(
        body.main_position.to_point(),
        [s.to_delay_speaker() for s in body.speakers],
        body.temperature,
        body.additional_delay,
    )
    return _to_payload(result)


class DelayPositionsRequest(BaseModel):
    room: RoomModel
    main_position: PointModel
    target_coverage: float = 0.75


@app.post("/delay/positions")
def post_delay_positions(body: DelayPositionsRequest) -> list[dict[str, Any]]:
    positions = optimal_delay_positions(body.room.to_room(), body.main_position.to_point(), body.target_coverage)
    return _to_payload(positions)


class AVSyncRequest(BaseModel):
    video_delay: float
    audio_delay: float
    distance_to_screen: float
    temperature: float = DEFAULT.temperature_c


@app.post("/delay/av-sync")
def post_av_sync(body: AVSyncRequest) -> dict[str, Any]:
    return _to_payload(audio_video_sync(body.video_delay, body.audio_delay, body.distance_to_screen, body.temperature))


class FillDelayRequest(BaseModel):
    main_speakers: list[PointModel]
    fill_speaker: DelaySpeakerModel
    listener: PointModel
    temperature: float = DEFAULT.temperature_c


@app.post("/delay/fill")
def post_fill_delay(body: FillDelayRequest) -> dict[str, Any]:
    result = fill_speaker_delay(
        [p.to_point() for p in body.main_speakers],
        body.fill_speaker.to_delay_speaker(),
        body.listener.to_point(),
        body.temperature,
    )
    return _to_payload(result)


# ---------------------------------------------------------------------------
# Cable loss
# ---------------------------------------------------------------------------


class LowImpedanceRequest(BaseModel):
    length: float
    impedance: float
    power: float
    amplifier_voltage: float | None = None
    gauge: int = DEFAULT.default_gauge_awg


@app.post("/cable/low-impedance")
def post_low_impedance(body: LowImpedanceRequest) -> dict[str, Any]:
    result = low_impedance_loss(body.length, body.impedance, body.power, body.amplifier_voltage, body.gauge)
    return _to_payload(result)


class DistributedRequest(BaseModel):
    length: float
    system_voltage: int
    total_power: float
    gauge: int = DEFAULT.default_gauge_awg


@app.post("/cable/distributed")
def post_distributed(body: DistributedRequest) -> dict[str, Any]:
    return _to_payload(distributed_system_loss(body.length, body.system_voltage, body.total_power, body.gauge))


class MaxLengthRequest(BaseModel):
    impedance: float
    power: float
    max_loss_percent: float = DEFAULT.max_low_impedance_loss_percent
    gauge: int = DEFAULT.default_gauge_awg


@app.post("/cable/max-length")
def post_max_length(body: MaxLengthRequest) -> dict[str, float]:
    return {"max_length": max_cable_length(body.impedance, body.power, body.max_loss_percent, body.gauge)}


# ---------------------------------------------------------------------------
# Video
# ---------------------------------------------------------------------------


class ViewingAnglesRequest(BaseModel):
    viewer: PointModel
    display: PointModel
    display_size: DisplayModel


@app.post("/video/viewing-angles")
def post_viewing_angles(body: ViewingAnglesRequest) -> dict[str, Any]:
    result = viewing_angles(body.viewer.to_point(), body.display.to_point(), body.display_size.to_display())
    return _to_payload(result)


class DisplaySizeRequest(BaseModel):
    furthest_viewer: float
    rule: str = "6x"
    aspect_ratio: str = "16:9"


@app.post("/video/display-size")
def post_display_size(body: DisplaySizeRequest) -> dict[str, Any]:
    return _to_payload(display_size(body.furthest_viewer, body.rule, body.aspect_ratio))  # type: ignore[arg-type]


class PixelDensityRequest(BaseModel):
    resolution_width: int
    resolution_height: int
    display_size: DisplayModel
    viewing_distance: float


@app.post("/video/pixel-density")
def post_pixel_density(body: PixelDensityRequest) -> dict[str, Any]:
    result = pixel_density(
        Resolution(body.resolution_width, body.resolution_height),
        body.display_size.to_display(),
        body.viewing_distance,
    )
    return _to_payload(result)


class BrightnessRequest(BaseModel):
    ambient_lux: float
    contrast_ratio: float = 10.0


@app.post("/video/brightness")
def post_brightness(body: BrightnessRequest) -> dict[str, Any]:
    return _to_payload(brightness_requirements(body.ambient_lux, body.contrast_ratio))


class ViewingDistanceRequest(BaseModel):
    display_size: DisplayModel
    rule: str = "6x"


@app.post("/video/viewing-distance")
def post_viewing_distance(body: ViewingDistanceRequest) -> dict[str, Any]:
    return _to_payload(optimal_viewing_distance(body.display_size.to_display(), body.rule))  # type: ignore[arg-type]


# ---------------------------------------------------------------------------
# Catalog and specification
# ---------------------------------------------------------------------------


@app.get("/catalog/speakers")
def get_speakers() -> list[dict[str, Any]]:
    return _to_payload(SAMPLE_SPEAKERS)


@app.get("/catalog/materials")
def get_materials() -> dict[str, dict[int, float]]:
    return _jsonable(ABSORPTION_COEFFICIENTS)


class VenueModel(BaseModel):
    venue_type: str
    category: VenueCategory
    dimensions: RoomModel
    seated: int = 0
    standing: int = 0
    ambient_noise: float
    target_rt60: float
    target_sti: float
    target_average_spl: float
    target_peak_spl: float
    use_cases: list[str] = []

    def to_venue(self) -> Venue:
        return Venue(
            venue_type=self.venue_type,
            category=self.category,
            dimensions=self.dimensions.to_room(),
            capacity=Occupancy(seated=self.seated, standing=self.standing),
            acoustics=AcousticTargets(
                ambient_noise=self.ambient_noise,
                target_rt60=self.target_rt60,
                target_sti=self.target_sti,
                target_spl=TargetSPL(self.target_average_spl, self.target_peak_spl),
            ),
            use_cases=tuple(self.use_cases),
        )


class SpecificationRequest(BaseModel):
    project_name: str
    venue: VenueModel
    speaker_id: str
    quantity: int
    amplifier_id: str | None = None


@app.post("/specification")
def post_specification(body: SpecificationRequest) -> dict[str, Any]:
    speaker = next((s for s in SAMPLE_SPEAKERS if s.id == body.speaker_id), None)
    if speaker is None:
        raise HTTPException(status_code=404, detail=f"Unknown speaker: {body.speaker_id}")

    amplifier = None
    if body.amplifier_id is not None:
        amplifier = next((a for a in SAMPLE_AMPLIFIERS if a.id == body.amplifier_id), None)
        if amplifier is None:
            raise HTTPException(status_code=404, detail=f"Unknown amplifier: {body.amplifier_id}")

    spec = generate_specification(body.venue.to_venue(), body.project_name, speaker, body.quantity, amplifier)
    return _to_payload(spec)
