# src/oracle_fee_replay/ports/sink.py
from abc import ABC, abstractmethod
from ..domain.models import Report

class ReportSink(ABC):
    """Write target for the final report (memory/file/S3). Returns where it landed."""
    @abstractmethod
    def write(self, report: Report) -> str: ...
