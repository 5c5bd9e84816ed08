from bisect import bisect_right
from typing import Iterable, List, Optional
from ...domain.models import MatchedTrade, OracleObservation, TradeRecord

class TemporalMatcher:
    """
    Pairs each trade with the latest oracle observation at or before it
    (last observation carried forward). Observations are sorted once; each
    lookup is a binary search on timestamps.
    """
    def __init__(self, observations: Iterable[OracleObservation]):
        # equal timestamps: the higher round sorts last and wins
        self._obs = sorted(observations, key=lambda o: (o.timestamp, o.round_id))
        self._ts = [o.timestamp for o in self._obs]

    def find(self, ts: int) -> Optional[OracleObservation]:
        i = bisect_right(self._ts, ts)
        return self._obs[i - 1] if i else None

    def match(self, trade: TradeRecord) -> MatchedTrade:
        obs = self.find(trade.timestamp)
        gap = abs(trade.timestamp - obs.timestamp) if obs is not None else None
        return MatchedTrade(trade=trade, observation=obs, time_gap_sec=gap)

    def match_all(self, trades: Iterable[TradeRecord]) -> List[MatchedTrade]:
        return [self.match(t) for t in trades]
