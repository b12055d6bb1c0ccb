from __future__ import annotations

import os
from typing import Any, Optional

from pydantic import BaseModel, Field


class Configuration(BaseModel):
    # Overpass
    overpass_base_url: str = Field(default="https://overpass-api.de")
    overpass_timeout: int = Field(default=40)
    overpass_query_timeout: int = Field(default=30)
    overpass_user_agent: str = Field(default="SnackRadar/0.1")

    # Defaults
    default_radius_m: int = Field(default=2000)
    # IANA zone used when deciding "open now"; server local time when unset
    hours_timezone: Optional[str] = Field(default=None)

    # Sessions
    session_ttl_sec: int = Field(default=3600)

    @classmethod
    def from_env(cls, overrides: Optional[dict[str, Any]] = None) -> "Configuration":
        raw: dict[str, Any] = {}

        env_map = {
            "overpass_base_url": os.getenv("OVERPASS_BASE_URL"),
            "overpass_timeout": os.getenv("OVERPASS_TIMEOUT"),
            "overpass_query_timeout": os.getenv("OVERPASS_QUERY_TIMEOUT"),
            "overpass_user_agent": os.getenv("OVERPASS_USER_AGENT"),
            "default_radius_m": os.getenv("DEFAULT_RADIUS_M"),
            "hours_timezone": os.getenv("HOURS_TIMEZONE"),
            "session_ttl_sec": os.getenv("SESSION_TTL_SEC"),
        }

        for k, v in env_map.items():
            if v is None or v == "":
                continue
            raw[k] = v

        if overrides:
            raw.update({k: v for k, v in overrides.items() if v is not None})

        return cls(**raw)

    @property
    def interpreter_url(self) -> str:
        return f"{self.overpass_base_url.rstrip('/')}/api/interpreter"

    def log_summary(self) -> str:
        return (
            "overpass=%s http_timeout=%s query_timeout=%s default_radius_m=%s hours_tz=%s session_ttl=%s"
            % (
                self.interpreter_url,
                self.overpass_timeout,
                self.overpass_query_timeout,
                self.default_radius_m,
                self.hours_timezone or "local",
                self.session_ttl_sec,
            )
        )
