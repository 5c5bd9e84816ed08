# src/oracle_fee_replay/ports/oracle_source.py
from abc import ABC, abstractmethod
from dataclasses import dataclass

@dataclass(frozen=True)
class RoundData:
    round_id: int
    timestamp: int      # updatedAt
    answer: int         # raw, unscaled

class OracleSource(ABC):
    @abstractmethod
    async def latest_round(self) -> int: ...
    @abstractmethod
    async def round_data(self, round_id: int) -> RoundData: ...
    @abstractmethod
    async def decimals(self) -> int: ...
