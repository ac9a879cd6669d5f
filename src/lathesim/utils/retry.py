from __future__ import annotations
import time
from dataclasses import dataclass
from typing import Callable, TypeVar

T = TypeVar("T")

@dataclass(frozen=True)
class RetryPolicy:
    attempts: int = 3
    base_delay_s: float = 0.05
    max_delay_s: float = 0.25

def with_retries(
    fn: Callable[[], T],
    policy: RetryPolicy,
    *,
    retry_on: tuple[type[BaseException], ...] = (Exception,),
    sleep: Callable[[float], None] = time.sleep,
) -> T:
    last_exc: BaseException | None = None
    delay = policy.base_delay_s
    for attempt in range(policy.attempts):
        try:
            return fn()
        except retry_on as e:
            last_exc = e
            if attempt + 1 < policy.attempts:
                sleep(delay)
                delay = min(policy.max_delay_s, delay * 2)
    assert last_exc is not None
    raise last_exc
