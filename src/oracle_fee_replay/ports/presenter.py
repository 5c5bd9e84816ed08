from abc import ABC, abstractmethod
from typing import Any

class Presenter(ABC):
    @abstractmethod
    def render(self, result: Any) -> None: ...
