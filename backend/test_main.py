"""HTTP layer: request mapping, error translation and JSON-safe payloads."""

import pytest
from fastapi.testclient import TestClient

from main import app

client = TestClient(app)

SPEAKER = {
    "id": "test",
    "sensitivity": 90.0,
    "coverage_horizontal": 90.0,
    "coverage_vertical": 90.0,
    "power_continuous": 30.0,
    "power_peak": 60.0,
}


def test_rt60_with_table_materials() -> None:
    response = client.post(
        "/acoustics/rt60",
        json={
            "dimensions": {"length": 10, "width": 8, "height": 3},
            "surfaces": [
                {"area": 80, "material": "carpet-heavy"},
                {"area": 80, "material": "acoustic-ceiling"},
                {"area": 108, "material": "gypsum-board"},
            ],
            "seated": 40,
            "target_min": 0.3,
            "target_max": 1.0,
        },
    )

    assert response.status_code == 200
    body = response.json()
    assert set(body["sabine"]["values"]) == {"125", "250", "500", "1000", "2000", "4000"}
    assert body["recommended"] > 0


def test_infinite_rt60_is_serialised_as_null() -> None:
    zero = {str(b): 0.0 for b in (125, 250, 500, 1000, 2000, 4000)}
    response = client.post(
        "/acoustics/rt60",
        json={
            "dimensions": {"length": 10, "width": 8, "height": 3},
            "surfaces": [{"area": 268, "material": "mirror", "absorption_coefficients": zero}],
            "target_min": 0.3,
            "target_max": 1.0,
        },
    )

    assert response.status_code == 200
    assert response.json()["sabine"]["values"]["125"] is None


def test_invalid_input_maps_to_422() -> None:
    response = client.post("/cable/low-impedance", json={"length": 10, "impedance": 8, "power": 100, "gauge": 13})

    assert response.status_code == 422
    assert response.json() == {"detail": "Unsupported cable gauge: 13 AWG"}

    response = client.post(
        "/acoustics/rt60",
        json={
            "dimensions": {"length": 10, "width": 8, "height": 3},
            "surfaces": [{"area": 80, "material": "unobtainium"}],
            "target_min": 0.3,
            "target_max": 1.0,
        },
    )
    assert response.status_code == 422
    assert "unobtainium" in response.json()["detail"]


def test_sti_endpoints() -> None:
    bands = (125, 250, 500, 1000, 2000, 4000, 8000)
    response = client.post(
        "/acoustics/sti",
        json={
            "rt60_values": {str(b): 0.8 for b in bands},
            "background_noise": {str(b): 40.0 for b in bands},
            "signal_level": {str(b): 70.0 for b in bands},
            "distance": 8.0,
        },
    )
    assert response.status_code == 200
    assert response.json()["octave_bands"]["8000"] == 0.0

    estimate = client.post("/acoustics/sti/estimate", json={"rt60": 0.5, "snr": 25}).json()
    assert estimate == {"sti": pytest.approx(1.0), "rating": "excellent"}


def test_spl_point_and_coverage() -> None:
    point = client.post(
        "/spl/point",
        json={
            "speaker": SPEAKER,
            "power": 1.0,
            "listener": {"x": 0, "y": 1, "z": 0},
            "speaker_position": {"x": 0, "y": 0, "z": 0},
        },
    )
    assert point.json()["spl"] == pytest.approx(90.0)

    coverage = client.post(
        "/spl/coverage",
        json={
            "room": {"length": 3, "width": 2, "height": 3},
            "placements": [{"speaker": SPEAKER, "position": {"x": 1, "y": 0, "z": 2.5}}],
        },
    )
    assert coverage.status_code == 200
    assert len(coverage.json()) == 12

    empty = client.post("/spl/coverage", json={"room": {"length": 3, "width": 2, "height": 3}, "placements": []})
    assert empty.status_code == 422


def test_delay_endpoints() -> None:
    response = client.post(
        "/delay/system",
        json={
            "main_position": {"x": 0, "y": 0, "z": 0},
            "speakers": [{"name": "zone", "position": {"x": 10, "y": 0, "z": 0}}],
            "additional_delay": 10,
        },
    )
    assert response.json()["max_delay"] == 39.1

    fill = client.post(
        "/delay/fill",
        json={
            "main_speakers": [],
            "fill_speaker": {"name": "fill", "position": {"x": 0, "y": 0, "z": 0}},
            "listener": {"x": 0, "y": 5, "z": 0},
        },
    )
    assert fill.status_code == 422


def test_cable_max_length() -> None:
    response = client.post("/cable/max-length", json={"impedance": 8, "power": 100})
    assert response.json()["max_length"] == pytest.approx(12.2)


def test_zero_drive_power_maps_to_422() -> None:
    response = client.post("/cable/max-length", json={"impedance": 8, "power": 0})

    assert response.status_code == 422
    assert "power" in response.json()["detail"]


def test_video_display_size() -> None:
    response = client.post("/video/display-size", json={"furthest_viewer": 12})
    assert response.json()["diagonal_inches"] == 161

    bad = client.post("/video/display-size", json={"furthest_viewer": 12, "rule": "5x"})
    assert bad.status_code == 422


def test_catalog() -> None:
    speakers = client.get("/catalog/speakers").json()
    assert {s["id"] for s in speakers} >= {"spk-ceiling-6", "spk-point-12"}

    materials = client.get("/catalog/materials").json()
    assert materials["carpet-heavy"]["4000"] == 0.65


def test_specification() -> None:
    venue = {
        "venue_type": "boardroom",
        "category": "corporate",
        "dimensions": {"length": 12, "width": 8, "height": 3},
        "seated": 20,
        "ambient_noise": 35,
        "target_rt60": 0.6,
        "target_sti": 0.6,
        "target_average_spl": 70,
        "target_peak_spl": 80,
    }
    response = client.post(
        "/specification",
        json={"project_name": "Boardroom", "venue": venue, "speaker_id": "spk-ceiling-6", "quantity": 4, "amplifier_id": "amp-4ch-300"},
    )

    assert response.status_code == 200
    body = response.json()
    assert body["project_name"] == "Boardroom"
    assert body["budget"]["grand_total"] > 0
    assert len(body["installation"]["cable_schedule"]) == 4

    missing = client.post(
        "/specification",
        json={"project_name": "Boardroom", "venue": venue, "speaker_id": "nope", "quantity": 4},
    )
    assert missing.status_code == 404
