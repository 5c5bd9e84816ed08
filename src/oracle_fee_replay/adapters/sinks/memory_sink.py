# src/oracle_fee_replay/adapters/sinks/memory_sink.py
from typing import List
from ...ports.sink import ReportSink
from ...domain.models import Report
from .report_key import report_name

class MemoryReportSink(ReportSink):
    def __init__(self):
        self.reports: List[Report] = []

    def write(self, report: Report) -> str:
        self.reports.append(report)
        return f"memory://{report_name(report)}"
