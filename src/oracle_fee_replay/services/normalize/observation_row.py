from decimal import Decimal
from typing import Any, Dict
from ...domain.models import OracleObservation
from ...ports.oracle_source import RoundData

def to_observation(rd: RoundData, decimals: int) -> OracleObservation:
    # answer * 10^-decimals, exact
    return OracleObservation(
        round_id=rd.round_id,
        timestamp=rd.timestamp,
        price=Decimal(rd.answer).scaleb(-decimals),
    )

def observation_to_dict(o: OracleObservation) -> Dict[str, Any]:
    return {"round_id": o.round_id, "timestamp": o.timestamp, "price": str(o.price)}

def observation_from_dict(d: Dict[str, Any]) -> OracleObservation:
    return OracleObservation(
        round_id=int(d["round_id"]),
        timestamp=int(d["timestamp"]),
        price=Decimal(str(d["price"])),
    )
