# src/oracle_fee_replay/adapters/sinks/json_file_sink.py
import json
from pathlib import Path
from ...ports.sink import ReportSink
from ...domain.models import Report
from ...presenters.json_presenter import report_to_dict
from .report_key import report_name

class JsonFileReportSink(ReportSink):
    def __init__(self, out_dir: str):
        self._dir = Path(out_dir)

    def write(self, report: Report) -> str:
        self._dir.mkdir(parents=True, exist_ok=True)
        path = self._dir / report_name(report)
        path.write_text(json.dumps(report_to_dict(report), indent=2, ensure_ascii=False), encoding="utf-8")
        return str(path)
