"""Reference data: material absorption table and a sample equipment catalog."""

from data.materials import ABSORPTION_COEFFICIENTS, coefficients_for
from data.sample_catalog import SAMPLE_AMPLIFIERS, SAMPLE_SPEAKERS

__all__ = ["ABSORPTION_COEFFICIENTS", "SAMPLE_AMPLIFIERS", "SAMPLE_SPEAKERS", "coefficients_for"]
