from __future__ import annotations
import logging
import random
from dataclasses import dataclass
from typing import Protocol

from .clock import CycleHandle, LoopScheduler, Scheduler
from .state import LatheStatus

log = logging.getLogger(__name__)

PRODUCTION_INTERVAL_S = 10.0
REJECT_CHANCE = 0.1


class RandomSource(Protocol):
    def random(self) -> float: ...


@dataclass(frozen=True)
class LatheSnapshot:
    status: LatheStatus
    enabled: bool
    failure: bool
    temperature: float
    pressure: float
    depth: float
    speed: float
    produced: int
    rejected: int


class Lathe:
    """
    Simulated lathe.

    While enabled, a production cycle fires every production_interval_s and
    counts either a produced or a rejected part. Failure is a display state
    layered over a disabled machine.
    """

    def __init__(
        self,
        enabled: bool = False,
        *,
        scheduler: Scheduler | None = None,
        rng: RandomSource | None = None,
        production_interval_s: float = PRODUCTION_INTERVAL_S,
        reject_chance: float = REJECT_CHANCE,
    ):
        self._scheduler = scheduler or LoopScheduler()
        self._rng = rng or random.Random()
        self.production_interval_s = production_interval_s
        self.reject_chance = reject_chance

        self._enabled = False
        self._failure = False
        self._produced = 0
        self._rejected = 0
        self._cycle: CycleHandle | None = None

        self.enabled = enabled

    @property
    def status(self) -> LatheStatus:
        if self._failure:
            return LatheStatus.FAILURE
        return LatheStatus.ENABLED if self._enabled else LatheStatus.DISABLED

    @property
    def enabled(self) -> bool:
        return self._enabled

    @enabled.setter
    def enabled(self, enabled: bool) -> None:
        # any assignment clears failure, even when the run state is unchanged
        self._failure = False

        if enabled == self._enabled:
            return

        if enabled:
            self._cycle = self._scheduler.call_every(self.production_interval_s, self.tick)
            log.debug("production cycle started (every %.3fs)", self.production_interval_s)
        elif self._cycle is not None:
            self._cycle.cancel()
            self._cycle = None
            log.debug("production cycle stopped")

        self._enabled = enabled

    @property
    def failure(self) -> bool:
        return self._failure

    @failure.setter
    def failure(self, failure: bool) -> None:
        if failure:
            self.enabled = False
        self._failure = failure

    @property
    def produced(self) -> int:
        return self._produced

    @property
    def rejected(self) -> int:
        return self._rejected

    @property
    def cycle_active(self) -> bool:
        return self._cycle is not None

    def _band(self, center: float, spread: float) -> float:
        if not self._enabled:
            return 0.0
        return center + spread * (1 - 2 * self._rng.random())

    @property
    def temperature(self) -> float:
        return self._band(100.0, 20.0)

    @property
    def pressure(self) -> float:
        return self._band(10.0, 1.0)

    @property
    def depth(self) -> float:
        return self._band(10.0, 5.0)

    @property
    def speed(self) -> float:
        return self._band(10.0, 5.0)

    def tick(self) -> None:
        """One production cycle step: reject with reject_chance, otherwise produce."""
        if self._rng.random() <= self.reject_chance:
            self.reject()
        else:
            self.produce()

    def produce(self) -> int:
        if self._enabled:
            self._produced += 1
        return self._produced

    def reject(self) -> int:
        if self._enabled:
            self._rejected += 1
        return self._rejected

    def reset(self) -> None:
        self._produced = 0
        self._rejected = 0

    def snapshot(self) -> LatheSnapshot:
        return LatheSnapshot(
            status=self.status,
            enabled=self.enabled,
            failure=self.failure,
            temperature=self.temperature,
            pressure=self.pressure,
            depth=self.depth,
            speed=self.speed,
            produced=self.produced,
            rejected=self.rejected,
        )
