from __future__ import annotations

from dataclasses import dataclass
import os


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


@dataclass(frozen=True)
class SimSettings:
    http_host: str
    http_port: int
    sampling_interval_ms: int
    production_interval_s: float
    reject_chance: float
    start_enabled: bool
    env: str

    @property
    def log_level(self) -> str:
        return "INFO" if self.env == "production" else "DEBUG"


def get_settings() -> SimSettings:
    """
    Simulator configuration from environment variables with safe defaults.
    """
    return SimSettings(
        http_host=os.getenv("LATHE_HTTP_HOST", "127.0.0.1"),
        http_port=int(os.getenv("LATHE_HTTP_PORT", "8000")),
        sampling_interval_ms=int(os.getenv("LATHE_SAMPLING_INTERVAL_MS", "1000")),
        production_interval_s=float(os.getenv("LATHE_PRODUCTION_INTERVAL_S", "10.0")),
        reject_chance=float(os.getenv("LATHE_REJECT_CHANCE", "0.1")),
        start_enabled=_env_bool("LATHE_START_ENABLED", True),
        env=os.getenv("LATHE_ENV", "development"),
    )
