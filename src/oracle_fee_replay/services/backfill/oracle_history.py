# src/oracle_fee_replay/services/backfill/oracle_history.py
import logging
from typing import AsyncIterator, Dict, List, Optional, Tuple

from ...domain.models import OracleObservation
from ...domain.time_window import TimeWindow
from ...ports.oracle_source import OracleSource
from ...ports.state_repository import ObservationCache
from ..normalize.observation_row import to_observation
from ..retry import RetryPolicy

DEFAULT_MARGIN_ROUNDS = 5

class OracleHistoryBuilder:
    def __init__(
        self,
        source: OracleSource,
        *,
        retry: RetryPolicy,
        cache: Optional[ObservationCache] = None,
        margin: int = DEFAULT_MARGIN_ROUNDS,
        checkpoint_every: int = 100,
    ):
        self.source = source
        self.retry = retry
        self.cache = cache
        self.margin = margin
        self.checkpoint_every = checkpoint_every

        self._known: Dict[int, OracleObservation] = {}
        self._decimals: Optional[int] = None
        self._fetched = 0

    # ---------- one round, cache first ----------
    async def _round(self, round_id: int) -> OracleObservation:
        hit = self._known.get(round_id)
        if hit is not None:
            return hit

        if self._decimals is None:
            self._decimals = await self.retry.call(self.source.decimals, label="oracle decimals")
        rd = await self.retry.call(self.source.round_data, round_id, label=f"oracle round {round_id}")
        obs = to_observation(rd, self._decimals)

        self._known[round_id] = obs
        self._fetched += 1
        if self._fetched % self.checkpoint_every == 0:
            self._persist()
            logging.info("oracle walk: fetched=%d at round=%d ts=%d", self._fetched, round_id, obs.timestamp)
        return obs

    # ---------- backward walk ----------
    async def iter_rounds(self, window: TimeWindow) -> AsyncIterator[Tuple[OracleObservation, bool]]:
        """
        Yields (observation, retained) newest to oldest.

        Walks from the latest round down until a round at or below window.start
        (or round 0), then `margin` older rounds which are always retained.
        Round ids never go below zero.
        """
        round_id = await self.retry.call(self.source.latest_round, label="oracle latest round")
        obs = await self._round(round_id)

        while obs.timestamp > window.start_s and round_id > 0:
            yield obs, obs.timestamp <= window.end_s
            round_id -= 1
            obs = await self._round(round_id)

        # boundary round: kept only if it still lies inside the window
        yield obs, window.contains(obs.timestamp)

        for _ in range(self.margin):
            if round_id == 0:
                break
            round_id -= 1
            yield await self._round(round_id), True

    def _persist(self) -> None:
        if self.cache is not None:
            self.cache.save(self._known.values())

    async def build(self, window: TimeWindow) -> List[OracleObservation]:
        if self.cache is not None:
            self._known = dict(self.cache.load())
            logging.info("oracle cache loaded: rounds=%d", len(self._known))
        self._fetched = 0

        out: List[OracleObservation] = []
        try:
            async for obs, retained in self.iter_rounds(window):
                if retained:
                    out.append(obs)
        finally:
            # also on fatal abort or cancellation: fetched rounds stay reusable
            self._persist()
        logging.info("oracle rounds: kept=%d fetched=%d known=%d",
                     len(out), self._fetched, len(self._known))
        return out
