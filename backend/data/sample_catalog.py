"""Sample equipment catalog for demos and tests."""

from core.models import Amplifier, CoverageAngles, PowerHandling, Speaker, SpeakerType


def create_sample_speakers() -> list[Speaker]:
    """A handful of ceiling, point-source and column loudspeakers."""
    return [
        Speaker(
            id="spk-ceiling-6",
            manufacturer="JBL",
            model="Control 26CT",
            speaker_type=SpeakerType.CEILING,
            sensitivity=89.0,
            max_spl=107.0,
            impedance=16.0,
            coverage=CoverageAngles(horizontal=110.0, vertical=110.0),
            power_handling=PowerHandling(continuous=30.0, peak=60.0),
            transformer="70V",
            price=185.0,
            weight_kg=3.2,
        ),
        Speaker(
            id="spk-ceiling-8",
            manufacturer="QSC",
            model="AD-C821R",
            speaker_type=SpeakerType.CEILING,
            sensitivity=91.0,
            max_spl=110.0,
            impedance=8.0,
            coverage=CoverageAngles(horizontal=100.0, vertical=100.0),
            power_handling=PowerHandling(continuous=60.0, peak=120.0),
            transformer="70V",
            price=260.0,
            weight_kg=5.4,
        ),
        Speaker(
            id="spk-point-12",
            manufacturer="EAW",
            model="JF260z",
            speaker_type=SpeakerType.POINT_SOURCE,
            sensitivity=97.0,
            max_spl=125.0,
            impedance=8.0,
            coverage=CoverageAngles(horizontal=90.0, vertical=60.0),
            power_handling=PowerHandling(continuous=300.0, peak=1200.0),
            price=1650.0,
            weight_kg=24.0,
        ),
        Speaker(
            id="spk-column-16",
            manufacturer="Renkus-Heinz",
            model="CX41",
            speaker_type=SpeakerType.COLUMN,
            sensitivity=93.0,
            max_spl=117.0,
            impedance=8.0,
            coverage=CoverageAngles(horizontal=120.0, vertical=30.0),
            power_handling=PowerHandling(continuous=150.0, peak=600.0),
            price=980.0,
            weight_kg=9.5,
        ),
    ]


def create_sample_amplifiers() -> list[Amplifier]:
    """Installation amplifiers for low-impedance and 70V systems."""
    return [
        Amplifier(
            id="amp-4ch-300",
            manufacturer="Crown",
            model="CDi 4|300",
            channels=4,
            power_at_8_ohms=300.0,
            power_at_4_ohms=300.0,
            power_at_70v=300.0,
            power_consumption=480.0,
            price=1890.0,
            rack_units=2,
            protection=("thermal", "short-circuit", "DC"),
        ),
        Amplifier(
            id="amp-2ch-1000",
            manufacturer="QSC",
            model="PLD4.2",
            channels=2,
            power_at_8_ohms=1000.0,
            power_at_4_ohms=1600.0,
            power_consumption=900.0,
            price=2400.0,
            rack_units=1,
            protection=("thermal", "clip-limiter"),
        ),
    ]


SAMPLE_SPEAKERS = create_sample_speakers()
SAMPLE_AMPLIFIERS = create_sample_amplifiers()
