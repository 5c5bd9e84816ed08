from abc import ABC, abstractmethod
from typing import Dict, Iterable
from ..domain.models import OracleObservation

class ObservationCache(ABC):
    """Durable store of oracle rounds keyed by round id."""
    @abstractmethod
    def load(self) -> Dict[int, OracleObservation]: ...
    @abstractmethod
    def save(self, observations: Iterable[OracleObservation]) -> None: ...
