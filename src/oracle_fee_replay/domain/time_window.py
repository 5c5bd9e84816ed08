# src/oracle_fee_replay/domain/time_window.py
import time
from dataclasses import dataclass
from typing import Optional

DAY_SEC = 24 * 60 * 60

@dataclass(frozen=True)
class TimeWindow:
    start_s: int
    end_s: int

    def __post_init__(self):
        if self.start_s > self.end_s:
            raise ValueError(f"window start {self.start_s} is after end {self.end_s}")

    def contains(self, ts: int) -> bool:
        return self.start_s <= ts <= self.end_s

    @classmethod
    def lookback(cls, days: float, now_s: Optional[int] = None) -> "TimeWindow":
        end = int(now_s if now_s is not None else time.time())
        return cls(end - int(days * DAY_SEC), end)
