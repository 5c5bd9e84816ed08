from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Dict, Optional
import json

from ..domain.models import FeeOutcome, Report
from ..ports.presenter import Presenter

def _iso(ts: Optional[int]) -> Optional[str]:
    if ts is None:
        return None
    return datetime.fromtimestamp(ts, tz=timezone.utc).isoformat().replace("+00:00", "Z")

def _dec(v: Optional[Decimal]) -> Optional[str]:
    return None if v is None else str(v)

def outcome_to_dict(o: FeeOutcome) -> Dict[str, Any]:
    return {
        "trade_id": o.trade_id,
        "transaction_hash": o.tx_hash,
        "timestamp": o.timestamp,
        "swap_time": _iso(o.timestamp),
        "amount0": _dec(o.amount0),
        "amount1": _dec(o.amount1),
        "direction": o.direction.value,
        "traded_price": _dec(o.traded_price),
        "oracle_round_id": o.oracle_round_id,
        "oracle_price": _dec(o.oracle_price),
        "oracle_time": _iso(o.oracle_timestamp),
        "time_gap_sec": o.time_gap_sec,
        "deviation_pct": _dec(o.deviation_pct),
        "abs_deviation_pct": _dec(o.abs_deviation_pct),
        "dynamic_fee_pct": _dec(o.dynamic_fee_pct),
        "standard_fee_pct": _dec(o.standard_fee_pct),
        "notional": _dec(o.notional),
        "standard_fee": _dec(o.standard_fee),
        "dynamic_fee": _dec(o.dynamic_fee),
        "hook_price": _dec(o.hook_price),
        "efficiency_pct": _dec(o.efficiency_pct),
    }

def summary_to_dict(r: Report) -> Dict[str, Any]:
    return {
        "window_start": _iso(r.window.start_s),
        "window_end": _iso(r.window.end_s),
        "generated_at": r.generated_at.isoformat(),
        "total_trades": r.trade_count,
        "rated_trades": r.rated_trade_count,
        "total_volume_base": _dec(r.total_volume_base),
        "total_volume_quote": _dec(r.total_volume_quote),
        "total_standard_fee": _dec(r.total_standard_fee),
        "total_dynamic_fee": _dec(r.total_dynamic_fee),
        "average_efficiency_pct": _dec(r.average_efficiency_pct),
    }

def report_to_dict(r: Report) -> Dict[str, Any]:
    return {**summary_to_dict(r), "trades": [outcome_to_dict(o) for o in r.outcomes]}

class JsonPresenter(Presenter):
    def render(self, result: Any) -> None:
        print(json.dumps(result, default=str, ensure_ascii=False, indent=2))
