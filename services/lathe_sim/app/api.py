from __future__ import annotations
from fastapi import FastAPI, HTTPException
from pydantic import BaseModel

from services.lathe_sim.app.core.lathe import Lathe

# readable variables, in the order they are published
SIGNALS = ("enabled", "temperature", "pressure", "depth", "speed", "produced", "rejected", "failure")


class TelemetryOut(BaseModel):
    status: str
    enabled: bool
    temperature: float
    pressure: float
    depth: float
    speed: float
    produced: int
    rejected: int
    failure: bool
    sampling_interval_ms: int


class SignalOut(BaseModel):
    name: str
    value: bool | int | float


def create_app(lathe: Lathe, sampling_interval_ms: int = 1000) -> FastAPI:
    """
    Read-only HTTP view of a lathe. Every request samples the lathe afresh.
    """
    app = FastAPI(title="Lathe Simulator", version="0.1.0")

    @app.get("/health")
    def health():
        return {"status": "ok", "state": lathe.status.value}

    @app.get("/telemetry", response_model=TelemetryOut)
    def telemetry():
        snap = lathe.snapshot()
        return TelemetryOut(
            status=snap.status.value,
            enabled=snap.enabled,
            temperature=snap.temperature,
            pressure=snap.pressure,
            depth=snap.depth,
            speed=snap.speed,
            produced=snap.produced,
            rejected=snap.rejected,
            failure=snap.failure,
            sampling_interval_ms=sampling_interval_ms,
        )

    @app.get("/telemetry/{name}", response_model=SignalOut)
    def signal(name: str):
        if name not in SIGNALS:
            raise HTTPException(status_code=404, detail=f"Unknown signal: {name}")
        return SignalOut(name=name, value=getattr(lathe, name))

    return app
