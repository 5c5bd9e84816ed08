from decimal import Decimal, InvalidOperation
from typing import Any, Dict
from ...domain.models import TradeRecord
from ...errors import MalformedRecordError

def _dec(raw: Dict[str, Any], field: str) -> Decimal:
    v = Decimal(str(raw[field]))
    if not v.is_finite():
        raise InvalidOperation(f"{field}={v}")
    return v

def parse_swap(raw: Dict[str, Any]) -> TradeRecord:
    """
    Subgraph swap -> TradeRecord. Exactly one amount is negative (the asset
    the trader supplies) and one positive (the asset received).
    """
    swap_id = raw.get("id") if isinstance(raw, dict) else None
    try:
        amount0 = _dec(raw, "amount0")
        amount1 = _dec(raw, "amount1")
        ts = int(raw["timestamp"])
        tx = raw["transaction"]["id"]
        if not swap_id:
            raise KeyError("id")
    except (KeyError, TypeError, ValueError, InvalidOperation) as e:
        raise MalformedRecordError(f"swap {swap_id!r}: {e!r}") from e

    if amount0 == 0 or amount1 == 0:
        raise MalformedRecordError(f"swap {swap_id!r}: zero amount ({amount0}, {amount1})")
    if (amount0 < 0) == (amount1 < 0):
        raise MalformedRecordError(f"swap {swap_id!r}: amounts share a sign ({amount0}, {amount1})")

    return TradeRecord(id=str(swap_id), amount0=amount0, amount1=amount1, timestamp=ts, tx_hash=str(tx))
