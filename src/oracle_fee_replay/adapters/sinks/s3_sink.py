# src/oracle_fee_replay/adapters/sinks/s3_sink.py
import json
import boto3
from ...ports.sink import ReportSink
from ...domain.models import Report
from ...presenters.json_presenter import report_to_dict
from .report_key import report_name

class S3ReportSink(ReportSink):
    def __init__(self, bucket: str, prefix: str = "reports", client=None):
        self._client = client or boto3.client("s3")
        self._bucket = bucket
        self._prefix = prefix.strip("/")

    def write(self, report: Report) -> str:
        key = f"{self._prefix}/{report_name(report)}" if self._prefix else report_name(report)
        self._client.put_object(
            Bucket=self._bucket,
            Key=key,
            Body=json.dumps(report_to_dict(report), ensure_ascii=False).encode("utf-8"),
            ContentType="application/json",
        )
        return f"s3://{self._bucket}/{key}"
