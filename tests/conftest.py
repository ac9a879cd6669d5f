import logging
import socket

import pytest
from fastapi.testclient import TestClient

from lathesim.api.client import TelemetryClient
from services.lathe_sim.app.api import create_app
from services.lathe_sim.app.core.console import Console
from services.lathe_sim.app.core.lathe import Lathe

from tests.fakes import ManualScheduler, ScriptedRandom


@pytest.fixture
def scheduler():
    return ManualScheduler()


@pytest.fixture
def rng():
    return ScriptedRandom([0.5])


@pytest.fixture
def lathe(scheduler, rng):
    return Lathe(scheduler=scheduler, rng=rng)


@pytest.fixture
def console(lathe):
    return Console(lathe)


@pytest.fixture
def api_client(lathe):
    """
    TelemetryClient wired to an in-process app serving the `lathe` fixture.
    """
    with TestClient(create_app(lathe, sampling_interval_ms=1000)) as http:
        yield TelemetryClient(client=http)


@pytest.fixture
def free_port():
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        sock.bind(("127.0.0.1", 0))
        return sock.getsockname()[1]


@pytest.fixture
def restore_logging():
    """Undo handlers and level changes made by configure_logging()."""
    root = logging.getLogger()
    before = list(root.handlers)
    level = root.level
    yield
    for h in root.handlers[:]:
        if h not in before:
            root.removeHandler(h)
    root.setLevel(level)
