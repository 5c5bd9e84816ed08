# src/oracle_fee_replay/services/report/aggregator.py
from dataclasses import dataclass, replace
from datetime import datetime
from decimal import Decimal
from functools import reduce
from typing import Iterable

from ...domain.models import FeeOutcome, Report
from ...domain.time_window import TimeWindow

_ZERO = Decimal(0)

@dataclass(frozen=True)
class _Totals:
    trade_count: int = 0
    rated_trade_count: int = 0
    volume_base: Decimal = _ZERO
    volume_quote: Decimal = _ZERO
    standard_fee: Decimal = _ZERO
    dynamic_fee: Decimal = _ZERO
    efficiency_sum: Decimal = _ZERO

def _fold(acc: _Totals, o: FeeOutcome) -> _Totals:
    # trades without an oracle still count; only efficiency skips them
    rated = o.efficiency_pct is not None
    return replace(
        acc,
        trade_count=acc.trade_count + 1,
        rated_trade_count=acc.rated_trade_count + (1 if rated else 0),
        volume_base=acc.volume_base + abs(o.amount1),
        volume_quote=acc.volume_quote + abs(o.amount0),
        standard_fee=acc.standard_fee + o.standard_fee,
        dynamic_fee=acc.dynamic_fee + o.dynamic_fee,
        efficiency_sum=acc.efficiency_sum + (o.efficiency_pct if rated else _ZERO),
    )

def aggregate(outcomes: Iterable[FeeOutcome], *, window: TimeWindow, generated_at: datetime) -> Report:
    rows = tuple(outcomes)
    t = reduce(_fold, rows, _Totals())
    avg = t.efficiency_sum / t.rated_trade_count if t.rated_trade_count else None
    return Report(
        window=window,
        generated_at=generated_at,
        trade_count=t.trade_count,
        rated_trade_count=t.rated_trade_count,
        total_volume_base=t.volume_base,
        total_volume_quote=t.volume_quote,
        total_standard_fee=t.standard_fee,
        total_dynamic_fee=t.dynamic_fee,
        average_efficiency_pct=avg,
        outcomes=rows,
    )
