from __future__ import annotations

from dataclasses import dataclass
import os


@dataclass(frozen=True)
class Settings:
    lathe_http: str
    timeout_s: float


def get_settings() -> Settings:
    """
    Client-side configuration for tests and tools talking to a running simulator.
    Values come from environment variables with safe defaults.
    """
    return Settings(
        lathe_http=os.getenv("LATHE_HTTP", "http://127.0.0.1:8000"),
        timeout_s=float(os.getenv("LATHE_HTTP_TIMEOUT_S", "2.0")),
    )
