"""Display sizing and viewing geometry.

Display height follows the usual viewing-distance rules: the furthest
viewer sits no more than 4x (detailed viewing), 6x (general viewing) or
8x (passive viewing) the image height from the screen.
"""

import math

from acoustics.types import (
    AspectRatio,
    BrightnessResult,
    DisplayDimensions,
    DisplaySizeResult,
    PixelDensityResult,
    Resolution,
    ViewingAngleResult,
    ViewingDistanceRange,
    ViewingRule,
)
from core.errors import InvalidInputError
from core.models import Point3

INCHES_PER_METER = 39.3701

VIEWING_RULE_MULTIPLIERS: dict[str, int] = {"4x": 4, "6x": 6, "8x": 8}

ASPECT_RATIOS: dict[str, float] = {"16:9": 16 / 9, "16:10": 16 / 10, "4:3": 4 / 3}

MAX_HORIZONTAL_ANGLE = 45.0  # degrees either side of the screen normal
MAX_VERTICAL_ANGLE = 30.0  # degrees above eye level

ARCMINUTE_RAD = 0.0003
PITCH_COMFORT_FACTOR = 2.5
MIN_READABLE_PPI = 50.0

LUX_TO_FOOT_CANDLES = 0.0929
NITS_PER_FOOT_LAMBERT = 3.426
BRIGHTNESS_HEADROOM = 1.2


def round_half_up(value: float) -> int:
    """Nearest integer, halves rounded up (160.5 -> 161)."""
    return math.floor(value + 0.5)


def rule_multiplier(rule: str) -> int:
    multiplier = VIEWING_RULE_MULTIPLIERS.get(rule)
    if multiplier is None:
        raise InvalidInputError(f"Unsupported viewing rule: {rule}")
    return multiplier


def viewing_angles(viewer: Point3, display: Point3, display_size: DisplayDimensions) -> ViewingAngleResult:
    """Viewing angles from a seat to the display centre.

    The horizontal angle is measured from the +y axis and reported as a
    magnitude; the vertical angle is positive when looking up. A seat is
    acceptable within 45° horizontally and between 0° and 30° up.
    """
    dx = display.x - viewer.x
    dy = display.y - viewer.y
    dz = display.z - viewer.z

    horizontal = abs(math.degrees(math.atan2(dx, dy)))
    vertical = math.degrees(math.atan2(dz, math.hypot(dx, dy)))

    return ViewingAngleResult(
        horizontal_angle=horizontal,
        vertical_angle=vertical,
        distance=math.sqrt(dx * dx + dy * dy + dz * dz),
        acceptable=horizontal <= MAX_HORIZONTAL_ANGLE and 0 <= vertical <= MAX_VERTICAL_ANGLE,
    )


def display_size(
    furthest_viewer: float,
    rule: ViewingRule = "6x",
    aspect_ratio: AspectRatio = "16:9",
) -> DisplaySizeResult:
    """Minimum image size for the furthest viewer.

    Raises:
        InvalidInputError: If the rule or aspect ratio is not recognised
    """
    multiplier = rule_multiplier(rule)
    ratio = ASPECT_RATIOS.get(aspect_ratio)
    if ratio is None:
        raise InvalidInputError(f"Unsupported aspect ratio: {aspect_ratio}")

    height = furthest_viewer / multiplier
    width = height * ratio

    return DisplaySizeResult(
        width=width,
        height=height,
        diagonal_inches=round_half_up(math.hypot(width, height) * INCHES_PER_METER),
        aspect_ratio=aspect_ratio,
        rule=rule,
    )


def pixel_density(resolution: Resolution, size: DisplayDimensions, viewing_distance: float) -> PixelDensityResult:
    """Pixel density of a display and the finest useful LED pitch at a distance.

    The pitch assumes the eye resolves about one arcminute, with a 2.5x
    comfort factor. Text is considered readable from 50 PPI.
    """
    diagonal_px = math.hypot(resolution.width, resolution.height)
    diagonal_in = math.hypot(size.width, size.height) * INCHES_PER_METER
    ppi = diagonal_px / diagonal_in

    return PixelDensityResult(
        pixels_per_inch=ppi,
        pixels_per_meter=ppi / INCHES_PER_METER,
        viewing_distance=viewing_distance,
        minimum_pixel_pitch_mm=viewing_distance * ARCMINUTE_RAD * PITCH_COMFORT_FACTOR * 1000,
        readable=ppi >= MIN_READABLE_PPI,
    )


def brightness_requirements(ambient_lux: float, contrast_ratio: float = 10.0) -> BrightnessResult:
    """Display luminance needed to hold a contrast ratio against ambient light."""
    ambient_nits = ambient_lux * LUX_TO_FOOT_CANDLES * NITS_PER_FOOT_LAMBERT
    required = ambient_nits * contrast_ratio

    return BrightnessResult(
        required_nits=required,
        foot_lamberts=required / NITS_PER_FOOT_LAMBERT,
        recommended_nits=round_half_up(required * BRIGHTNESS_HEADROOM),
    )


def optimal_viewing_distance(size: DisplayDimensions, rule: ViewingRule = "6x") -> ViewingDistanceRange:
    """Seating distance range for a display: 4x to 8x its height."""
    multiplier = rule_multiplier(rule)
    return ViewingDistanceRange(
        min_distance=size.height * 4,
        max_distance=size.height * 8,
        optimal_distance=size.height * multiplier,
    )
