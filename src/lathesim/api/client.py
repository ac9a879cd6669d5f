from __future__ import annotations
import httpx

from lathesim.config.settings import Settings, get_settings
from lathesim.utils.retry import RetryPolicy, with_retries

class TelemetryClient:
    """
    Pull-based reader for the simulator's HTTP telemetry surface.

    An existing httpx.Client (e.g. fastapi's TestClient) can be passed in
    place of base_url; it is then not closed by this object.
    """
    def __init__(self, base_url: str = "", timeout_s: float = 2.0, *, client: httpx.Client | None = None):
        self._owns_client = client is None
        self._client = client or httpx.Client(base_url=base_url, timeout=timeout_s)

    def close(self) -> None:
        if self._owns_client:
            self._client.close()

    def __enter__(self) -> "TelemetryClient":
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    def health(self) -> dict:
        r = self._client.get("/health")
        r.raise_for_status()
        return r.json()

    def telemetry(self) -> dict:
        r = self._client.get("/telemetry")
        r.raise_for_status()
        return r.json()

    def signal(self, name: str) -> bool | int | float:
        r = self._client.get(f"/telemetry/{name}")
        r.raise_for_status()
        return r.json()["value"]

    def wait_ready(self, policy: RetryPolicy | None = None) -> dict:
        """Poll /health until the simulator answers."""
        policy = policy or RetryPolicy(attempts=20, base_delay_s=0.1, max_delay_s=1.0)
        return with_retries(self.health, policy, retry_on=(httpx.HTTPError,))

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> "TelemetryClient":
        settings = settings or get_settings()
        return cls(settings.lathe_http, timeout_s=settings.timeout_s)
