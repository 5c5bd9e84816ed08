# src/oracle_fee_replay/services/retry.py
import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, TypeVar

from ..errors import FatalRetrievalError, MalformedRecordError, RetriesExhaustedError

T = TypeVar("T")

NON_RETRYABLE = (FatalRetrievalError, MalformedRecordError)

@dataclass(frozen=True)
class RetryPolicy:
    """
    Fixed-count retry with a fixed pause between attempts. Each attempt races
    a wall-clock timeout; a timeout counts as a failed attempt.
    """
    attempts: int = 5
    delay_sec: float = 2.0
    timeout_sec: float = 15.0

    async def call(self, fn: Callable[..., Awaitable[T]], *args: Any, label: str = "request") -> T:
        last_err: BaseException = RuntimeError("no attempts made")
        for a in range(self.attempts):
            try:
                return await asyncio.wait_for(fn(*args), timeout=self.timeout_sec)
            except NON_RETRYABLE:
                raise
            except asyncio.TimeoutError as e:
                last_err = e
                logging.warning("%s timed out after %.1fs (attempt %d/%d)",
                                label, self.timeout_sec, a + 1, self.attempts)
            except Exception as e:
                last_err = e
                logging.warning("%s failed: %s (attempt %d/%d)", label, e, a + 1, self.attempts)
            if a + 1 < self.attempts:
                await asyncio.sleep(self.delay_sec)
        desc = str(last_err) or type(last_err).__name__
        raise RetriesExhaustedError(f"{label} failed after {self.attempts} attempts: {desc}") from last_err
