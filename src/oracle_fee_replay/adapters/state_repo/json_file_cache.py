# src/oracle_fee_replay/adapters/state_repo/json_file_cache.py
import json
import os
from pathlib import Path
from typing import Dict, Iterable

from ...domain.models import OracleObservation
from ...ports.state_repository import ObservationCache
from ...services.normalize.observation_row import observation_from_dict, observation_to_dict

def dump_observations(observations: Dict[int, OracleObservation]) -> str:
    rows = [observation_to_dict(observations[k]) for k in sorted(observations, reverse=True)]
    return json.dumps({"observations": rows}, indent=2)

def parse_observations(text: str) -> Dict[int, OracleObservation]:
    doc = json.loads(text)
    rows = doc.get("observations", []) if isinstance(doc, dict) else doc
    out: Dict[int, OracleObservation] = {}
    for d in rows:
        o = observation_from_dict(d)
        out.setdefault(o.round_id, o)
    return out

class JsonFileObservationCache(ObservationCache):
    """
    Rounds as one JSON document. save() merges into what is on disk (existing
    round ids win) and rewrites via a temp file + rename.
    """
    def __init__(self, path: str):
        self._path = Path(path)

    def load(self) -> Dict[int, OracleObservation]:
        if not self._path.exists():
            return {}
        return parse_observations(self._path.read_text(encoding="utf-8"))

    def save(self, observations: Iterable[OracleObservation]) -> None:
        merged = self.load()
        for o in observations:
            merged.setdefault(o.round_id, o)
        self._path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self._path.with_suffix(self._path.suffix + ".tmp")
        tmp.write_text(dump_observations(merged), encoding="utf-8")
        os.replace(tmp, self._path)
