from typing import Dict, Iterable
from ...domain.models import OracleObservation
from ...ports.state_repository import ObservationCache

class MemoryObservationCache(ObservationCache):
    def __init__(self):
        self._db: Dict[int, OracleObservation] = {}

    def load(self) -> Dict[int, OracleObservation]:
        return dict(self._db)

    def save(self, observations: Iterable[OracleObservation]) -> None:
        for o in observations:
            self._db.setdefault(o.round_id, o)
