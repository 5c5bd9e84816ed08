# src/oracle_fee_replay/adapters/state_repo/s3_cache.py
from typing import Dict, Iterable
import boto3
from botocore.exceptions import ClientError

from ...domain.models import OracleObservation
from ...ports.state_repository import ObservationCache
from .json_file_cache import dump_observations, parse_observations

_MISSING = {"NoSuchKey", "404", "NotFound"}

class S3ObservationCache(ObservationCache):
    def __init__(self, bucket: str, key: str, client=None):
        self._client = client or boto3.client("s3")
        self._bucket = bucket
        self._key = key

    def load(self) -> Dict[int, OracleObservation]:
        try:
            obj = self._client.get_object(Bucket=self._bucket, Key=self._key)
        except ClientError as e:
            if e.response.get("Error", {}).get("Code") in _MISSING:
                return {}
            raise
        return parse_observations(obj["Body"].read().decode("utf-8"))

    def save(self, observations: Iterable[OracleObservation]) -> None:
        merged = self.load()
        for o in observations:
            merged.setdefault(o.round_id, o)
        self._client.put_object(
            Bucket=self._bucket,
            Key=self._key,
            Body=dump_observations(merged).encode("utf-8"),
            ContentType="application/json",
        )
