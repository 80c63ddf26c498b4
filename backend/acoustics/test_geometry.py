import pytest

from acoustics.geometry import angle_between, distance, magnitude
from core.models import Point3


def test_distance_and_magnitude() -> None:
    assert distance(Point3(1, 2, 3), Point3(4, 6, 3)) == pytest.approx(5.0)
    assert magnitude(Point3(3, 4, 0)) == pytest.approx(5.0)


def test_angle_between() -> None:
    assert angle_between(Point3(1, 0, 0), Point3(0, 1, 0)) == pytest.approx(90.0)
    assert angle_between(Point3(1, 0, 0), Point3(-2, 0, 0)) == pytest.approx(180.0)
    assert angle_between(Point3(1, 1, 0), Point3(2, 2, 0)) == pytest.approx(0.0, abs=1e-5)
    assert angle_between(Point3(1, 0, 0), Point3(3, 0, 0)) == 0.0


def test_zero_vector_has_no_angle() -> None:
    assert angle_between(Point3(0, 0, 0), Point3(1, 0, 0)) == 0.0
