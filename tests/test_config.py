import pytest

from seatray.config import EngineConfig
from seatray.models import InvalidInputError


def test_defaults():
    config = EngineConfig()
    assert config.interval_minutes == 10
    assert config.path_steps == 20
    assert config.terminator_step_degrees == 2
    assert config.ephemeris == "astral"
    assert config.with_refraction is False


def test_from_env():
    config = EngineConfig.from_env(
        {
            "SEATRAY_INTERVAL_MINUTES": "5",
            "SEATRAY_PATH_STEPS": "40",
            "SEATRAY_EPHEMERIS": "skyfield",
            "SEATRAY_WITH_REFRACTION": "yes",
            "SEATRAY_SCRUB_TOLERANCE_MINUTES": "",
            "UNRELATED": "1",
        }
    )
    assert config.interval_minutes == 5.0
    assert config.path_steps == 40
    assert config.ephemeris == "skyfield"
    assert config.with_refraction is True
    assert config.scrub_tolerance_minutes == 5.0


def test_from_env_reads_os_environ(monkeypatch):
    monkeypatch.setenv("SEATRAY_TERMINATOR_STEP_DEGREES", "5")
    assert EngineConfig.from_env().terminator_step_degrees == 5.0


@pytest.mark.parametrize(
    "env",
    [
        {"SEATRAY_PATH_STEPS": "many"},
        {"SEATRAY_WITH_REFRACTION": "perhaps"},
        {"SEATRAY_INTERVAL_MINUTES": "0"},
    ],
)
def test_from_env_rejects_bad_values(env):
    with pytest.raises(InvalidInputError):
        EngineConfig.from_env(env)


@pytest.mark.parametrize(
    "kwargs",
    [
        {"interval_minutes": -1},
        {"path_steps": 0},
        {"terminator_step_degrees": 0},
        {"scrub_tolerance_minutes": -1},
    ],
)
def test_validation(kwargs):
    with pytest.raises(InvalidInputError):
        EngineConfig(**kwargs)
