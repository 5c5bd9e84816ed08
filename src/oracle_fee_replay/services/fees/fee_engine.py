# src/oracle_fee_replay/services/fees/fee_engine.py
from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from ...domain.models import Direction, FeeOutcome, MatchedTrade

_HUNDRED = Decimal(100)

@dataclass(frozen=True)
class FeePolicy:
    base_fee_pct: Decimal = Decimal("0.05")
    standard_fee_pct: Decimal = Decimal("0.05")
    deviation_multiplier: Decimal = Decimal("70")

    def dynamic_fee_pct(self, abs_deviation_pct: Optional[Decimal]) -> Decimal:
        # linear in deviation, uncapped
        if abs_deviation_pct is None:
            return self.base_fee_pct
        return self.base_fee_pct + self.deviation_multiplier * abs_deviation_pct / _HUNDRED

class FeeEngine:
    def __init__(self, policy: FeePolicy = FeePolicy()):
        self.policy = policy

    def compute(self, m: MatchedTrade) -> FeeOutcome:
        t = m.trade
        a0, a1 = abs(t.amount0), abs(t.amount1)
        direction = Direction.BUY_BASE if t.amount0 < 0 else Direction.SELL_BASE
        price = a0 / a1

        obs = m.observation
        oracle_price = obs.price if obs is not None else None
        # non-positive oracle answers are treated like a missing round
        ref = oracle_price if oracle_price is not None and oracle_price > 0 else None

        deviation = (price - ref) / ref * _HUNDRED if ref is not None else None
        abs_deviation = abs(deviation) if deviation is not None else None

        dyn_pct = self.policy.dynamic_fee_pct(abs_deviation)
        std_pct = self.policy.standard_fee_pct
        notional = max(a0, a1)

        if direction is Direction.BUY_BASE:
            hook = price * (1 + dyn_pct / _HUNDRED)
            efficiency = (ref - hook) / ref * _HUNDRED if ref is not None else None
        else:
            hook = price * (1 - dyn_pct / _HUNDRED)
            efficiency = (hook - ref) / ref * _HUNDRED if ref is not None else None

        return FeeOutcome(
            trade_id=t.id,
            tx_hash=t.tx_hash,
            timestamp=t.timestamp,
            amount0=t.amount0,
            amount1=t.amount1,
            traded_price=price,
            direction=direction,
            oracle_round_id=obs.round_id if obs is not None else None,
            oracle_price=oracle_price,
            oracle_timestamp=obs.timestamp if obs is not None else None,
            time_gap_sec=m.time_gap_sec,
            deviation_pct=deviation,
            abs_deviation_pct=abs_deviation,
            dynamic_fee_pct=dyn_pct,
            standard_fee_pct=std_pct,
            notional=notional,
            standard_fee=notional * std_pct / _HUNDRED,
            dynamic_fee=notional * dyn_pct / _HUNDRED,
            hook_price=hook,
            efficiency_pct=efficiency,
        )
