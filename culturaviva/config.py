"""Runtime settings.

All tuneable constants live here. Pass a ``Settings`` instance to every
component that needs one; ``Settings.from_env()`` reads overrides from the
environment (``.env`` is loaded by the API app before this is called).
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field

DEFAULT_API_URL = "https://museus-backend.onrender.com"
ARRIVAL_THRESHOLD_METERS = 20.0
DEFAULT_VALIDATION_URL = "https://culturaviva.app/verify"


def _env_float(name: str, default: float) -> float:
    raw = os.environ.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError as exc:
        raise ValueError(f"{name} must be a number, got {raw!r}") from exc


@dataclass
class Settings:
    # Platform backend
    api_base_url: str = DEFAULT_API_URL
    http_timeout_s: float = 15.0
    validation_base_url: str = DEFAULT_VALIDATION_URL  # QR payload prefix

    # Navigation
    arrival_threshold_m: float = ARRIVAL_THRESHOLD_METERS
    location_timeout_s: float = 10.0      # single-shot position acquisition
    position_max_age_s: float = 10.0      # reuse a pushed fix younger than this

    # API
    cors_origins: list[str] = field(default_factory=lambda: ["http://localhost:5173"])

    @classmethod
    def from_env(cls) -> Settings:
        return cls(
            api_base_url=os.environ.get("CULTURAVIVA_API_URL", DEFAULT_API_URL).rstrip("/"),
            http_timeout_s=_env_float("CULTURAVIVA_HTTP_TIMEOUT", 15.0),
            validation_base_url=os.environ.get(
                "CULTURAVIVA_VALIDATION_URL", DEFAULT_VALIDATION_URL
            ).rstrip("/"),
            arrival_threshold_m=_env_float(
                "CULTURAVIVA_ARRIVAL_THRESHOLD_M", ARRIVAL_THRESHOLD_METERS
            ),
            location_timeout_s=_env_float("CULTURAVIVA_LOCATION_TIMEOUT_S", 10.0),
            position_max_age_s=_env_float("CULTURAVIVA_POSITION_MAX_AGE_S", 10.0),
            cors_origins=os.environ.get("CORS_ORIGINS", "http://localhost:5173").split(","),
        )
