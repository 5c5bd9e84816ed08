from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional, Tuple

from .time_window import TimeWindow

class Direction(str, Enum):
    BUY_BASE = "buy_base"     # trader pays quote (amount0 < 0), receives base
    SELL_BASE = "sell_base"   # trader pays base (amount1 < 0), receives quote

@dataclass(frozen=True)
class TradeRecord:
    id: str
    amount0: Decimal          # quote asset delta; negative = paid in by the trader
    amount1: Decimal          # base asset delta; negative = paid in by the trader
    timestamp: int
    tx_hash: str

@dataclass(frozen=True)
class OracleObservation:
    round_id: int
    timestamp: int
    price: Decimal

@dataclass(frozen=True)
class MatchedTrade:
    trade: TradeRecord
    observation: Optional[OracleObservation]   # None => no round at or before the trade
    time_gap_sec: Optional[int]

@dataclass(frozen=True)
class FeeOutcome:
    # trade identity
    trade_id: str
    tx_hash: str
    timestamp: int
    amount0: Decimal
    amount1: Decimal

    traded_price: Decimal
    direction: Direction

    # oracle side; None when unavailable
    oracle_round_id: Optional[int]
    oracle_price: Optional[Decimal]
    oracle_timestamp: Optional[int]
    time_gap_sec: Optional[int]
    deviation_pct: Optional[Decimal]       # signed
    abs_deviation_pct: Optional[Decimal]

    dynamic_fee_pct: Decimal
    standard_fee_pct: Decimal
    notional: Decimal
    standard_fee: Decimal
    dynamic_fee: Decimal
    hook_price: Decimal
    efficiency_pct: Optional[Decimal]

@dataclass(frozen=True)
class Report:
    window: TimeWindow
    generated_at: datetime
    trade_count: int
    rated_trade_count: int                 # trades carrying an efficiency value
    total_volume_base: Decimal
    total_volume_quote: Decimal
    total_standard_fee: Decimal
    total_dynamic_fee: Decimal
    average_efficiency_pct: Optional[Decimal]
    outcomes: Tuple[FeeOutcome, ...]
