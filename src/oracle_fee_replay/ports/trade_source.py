# src/oracle_fee_replay/ports/trade_source.py
from abc import ABC, abstractmethod
from typing import Any, Dict, List

class TradeSource(ABC):
    """Paginated trade log; one call returns at most `first` raw swaps."""
    @abstractmethod
    async def fetch_page(self, start_ts: int, last_id: str, first: int) -> List[Dict[str, Any]]: ...
