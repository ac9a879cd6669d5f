import httpx
import pytest

from lathesim.api.client import TelemetryClient
from lathesim.utils.retry import RetryPolicy, with_retries

pytestmark = pytest.mark.unit


def test_with_retries_returns_after_transient_failures():
    calls = []
    delays = []

    def flaky():
        calls.append(1)
        if len(calls) < 3:
            raise ConnectionError("not yet")
        return "ok"

    policy = RetryPolicy(attempts=5, base_delay_s=0.01, max_delay_s=0.03)
    assert with_retries(flaky, policy, sleep=delays.append) == "ok"
    assert delays == [0.01, 0.02]


def test_with_retries_reraises_last_error():
    def broken():
        raise ConnectionError("down")

    with pytest.raises(ConnectionError):
        with_retries(broken, RetryPolicy(attempts=2), sleep=lambda s: None)


def test_with_retries_does_not_retry_unlisted_errors():
    calls = []

    def wrong():
        calls.append(1)
        raise KeyError("x")

    with pytest.raises(KeyError):
        with_retries(wrong, RetryPolicy(attempts=3), retry_on=(ConnectionError,), sleep=lambda s: None)
    assert calls == [1]


def test_wait_ready_polls_until_health_answers():
    attempts = []

    def handler(request: httpx.Request) -> httpx.Response:
        attempts.append(request.url.path)
        if len(attempts) < 2:
            raise httpx.ConnectError("refused", request=request)
        return httpx.Response(200, json={"status": "ok", "state": "enabled"})

    http = httpx.Client(base_url="http://lathe", transport=httpx.MockTransport(handler))
    client = TelemetryClient(client=http)
    health = client.wait_ready(RetryPolicy(attempts=3, base_delay_s=0.0, max_delay_s=0.0))
    assert health["state"] == "enabled"
    assert attempts == ["/health", "/health"]


def test_from_settings_uses_environment(monkeypatch):
    monkeypatch.setenv("LATHE_HTTP", "http://lathe.local:9001")
    with TelemetryClient.from_settings() as client:
        assert (client._client.base_url.host, client._client.base_url.port) == ("lathe.local", 9001)
