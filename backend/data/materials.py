"""Absorption coefficients for common room finishes (125 Hz - 4 kHz)."""

from core.bands import STANDARD_BANDS, BandValues
from core.errors import InvalidInputError


def _coefficients(*values: float) -> BandValues:
    return dict(zip(STANDARD_BANDS, values, strict=True))


ABSORPTION_COEFFICIENTS: dict[str, BandValues] = {
    "concrete-painted": _coefficients(0.10, 0.05, 0.06, 0.07, 0.09, 0.08),
    "brick-painted": _coefficients(0.01, 0.01, 0.02, 0.02, 0.02, 0.03),
    "gypsum-board": _coefficients(0.29, 0.10, 0.05, 0.04, 0.07, 0.09),
    "wood-floor": _coefficients(0.15, 0.11, 0.10, 0.07, 0.06, 0.07),
    "carpet-heavy": _coefficients(0.02, 0.06, 0.14, 0.37, 0.60, 0.65),
    "acoustic-ceiling": _coefficients(0.65, 0.75, 0.80, 0.85, 0.80, 0.75),
    "curtains-heavy": _coefficients(0.14, 0.35, 0.55, 0.72, 0.70, 0.65),
    "glass-window": _coefficients(0.35, 0.25, 0.18, 0.12, 0.07, 0.04),
    # Per m² of audience; the RT60 engine counts 0.5 m² per seated person.
    "audience-seated": _coefficients(0.60, 0.74, 0.88, 0.96, 0.93, 0.85),
}


def coefficients_for(material: str) -> BandValues:
    """Look up a material's coefficients; unknown keys are an input error."""
    coefficients = ABSORPTION_COEFFICIENTS.get(material)
    if coefficients is None:
        raise InvalidInputError(f"Unknown material: {material}")
    return dict(coefficients)
