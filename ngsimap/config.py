"""Runtime settings read from the environment (and ``.env`` when present)."""

from __future__ import annotations

import os
from collections.abc import Mapping

from dotenv import load_dotenv
from pydantic import BaseModel, Field

from ngsimap.contracts.common import GeoPoint


def _flag(value: str | None) -> bool:
    return (value or "").strip().lower() in ("1", "true", "yes", "on")


def _number(env: Mapping[str, str], key: str, default: float) -> float:
    raw = env.get(key)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except ValueError:
        raise ValueError(f"{key} must be a number, got {raw!r}") from None


class Settings(BaseModel):
    """Broker, polling and viewport configuration."""

    base_url: str | None = None
    use_mock: bool = False
    context_url: str | None = None
    fetch_limit: int = Field(default=200, ge=1)
    poll_interval_s: float = Field(default=15.0, gt=0)
    http_timeout_s: float = Field(default=30.0, gt=0)
    geolocation_timeout_s: float = Field(default=5.0, gt=0)
    home: GeoPoint | None = None
    geoip_url: str | None = None
    cors_origins: list[str] = Field(default_factory=lambda: ["http://localhost:5173"])

    @property
    def stub_mode(self) -> bool:
        """No upstream configured: serve the built-in fixture."""
        return not self.base_url or self.use_mock

    @classmethod
    def from_env(cls, env: Mapping[str, str] | None = None) -> "Settings":
        if env is None:
            load_dotenv()
            env = os.environ

        home = None
        if env.get("NGSI_HOME_LAT") and env.get("NGSI_HOME_LON"):
            home = GeoPoint(
                latitude=_number(env, "NGSI_HOME_LAT", 0.0),
                longitude=_number(env, "NGSI_HOME_LON", 0.0),
            )

        return cls(
            base_url=env.get("NGSI_BASE_URL") or None,
            use_mock=_flag(env.get("NGSI_USE_MOCK")),
            context_url=env.get("NGSI_CONTEXT") or None,
            fetch_limit=int(_number(env, "NGSI_FETCH_LIMIT", 200)),
            poll_interval_s=_number(env, "NGSI_POLL_INTERVAL_S", 15.0),
            http_timeout_s=_number(env, "NGSI_HTTP_TIMEOUT_S", 30.0),
            geolocation_timeout_s=_number(env, "NGSI_GEOLOCATION_TIMEOUT_S", 5.0),
            home=home,
            geoip_url=env.get("NGSI_GEOIP_URL") or None,
            cors_origins=env.get("CORS_ORIGINS", "http://localhost:5173").split(","),
        )
