"""Engine tuning constants, passed explicitly into every computation."""

import os
from collections.abc import Mapping
from dataclasses import dataclass, fields

from seatray.models import InvalidInputError

_ENV_PREFIX = "SEATRAY_"


@dataclass(frozen=True)
class EngineConfig:
    interval_minutes: float = 10.0  # Solar sampling interval along the route
    path_steps: int = 20  # Interpolation steps for the drawn route line
    terminator_step_degrees: float = 2.0
    scrub_tolerance_minutes: float = 5.0  # sample_at() nearest-match window
    ephemeris: str = "astral"  # "astral" | "skyfield"
    ephemeris_dir: str = "resources"  # Directory holding the skyfield kernel
    ephemeris_kernel: str = "de421.bsp"
    with_refraction: bool = False  # Geometric altitude unless enabled

    def __post_init__(self) -> None:
        if self.interval_minutes <= 0:
            raise InvalidInputError(
                f"interval_minutes must be positive: {self.interval_minutes}"
            )
        if self.path_steps < 1:
            raise InvalidInputError(f"path_steps must be at least 1: {self.path_steps}")
        if self.terminator_step_degrees <= 0:
            raise InvalidInputError(
                f"terminator_step_degrees must be positive: {self.terminator_step_degrees}"
            )
        if self.scrub_tolerance_minutes < 0:
            raise InvalidInputError(
                f"scrub_tolerance_minutes must not be negative: {self.scrub_tolerance_minutes}"
            )

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "EngineConfig":
        """Build a config from ``SEATRAY_*`` variables, e.g. ``SEATRAY_INTERVAL_MINUTES=5``.

        Unset variables keep their defaults. Call ``dotenv.load_dotenv()`` first to
        pick up a ``.env`` file.
        """
        env = os.environ if environ is None else environ
        values: dict[str, object] = {}
        for f in fields(cls):
            raw = env.get(_ENV_PREFIX + f.name.upper())
            if raw is None or raw == "":
                continue
            try:
                values[f.name] = _coerce(raw, type(getattr(cls, f.name)))
            except ValueError as e:
                raise InvalidInputError(
                    f"Invalid {_ENV_PREFIX}{f.name.upper()}={raw!r}: {e}"
                ) from e
        return cls(**values)  # type: ignore[arg-type]


def _coerce(raw: str, kind: type) -> object:
    if kind is bool:
        lowered = raw.strip().lower()
        if lowered in ("1", "true", "yes", "on"):
            return True
        if lowered in ("0", "false", "no", "off"):
            return False
        raise ValueError("expected a boolean")
    if kind is int:
        return int(raw)
    if kind is float:
        return float(raw)
    return raw
