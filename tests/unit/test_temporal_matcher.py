from decimal import Decimal
from oracle_fee_replay.services.matching.temporal_matcher import TemporalMatcher
from oracle_fee_replay.domain.models import OracleObservation, TradeRecord

def obs(round_id, ts):
    return OracleObservation(round_id=round_id, timestamp=ts, price=Decimal(round_id + 1000))

def trade(ts):
    return TradeRecord(id=f"t{ts}", amount0=Decimal("-1"), amount1=Decimal("1"), timestamp=ts, tx_hash="0x")

def brute_force(observations, ts):
    # filter everything at or before ts, take the latest
    candidates = [o for o in observations if o.timestamp <= ts]
    if not candidates:
        return None
    return max(candidates, key=lambda o: (o.timestamp, o.round_id))

def test_matches_brute_force_for_every_timestamp():
    observations = [obs(5, 300), obs(2, 150), obs(1, 150), obs(0, 100), obs(6, 220), obs(7, 50)]
    m = TemporalMatcher(observations)
    for ts in range(0, 400):
        assert m.find(ts) == brute_force(observations, ts), ts

def test_exact_timestamp_is_eligible():
    m = TemporalMatcher([obs(1, 100), obs(2, 200)])
    assert m.find(200).round_id == 2
    assert m.find(199).round_id == 1

def test_no_observation_before_trade_is_unavailable():
    m = TemporalMatcher([obs(1, 100)])
    matched = m.match(trade(99))
    assert matched.observation is None
    assert matched.time_gap_sec is None

def test_time_gap_is_absolute_distance():
    m = TemporalMatcher([obs(1, 100), obs(2, 160)])
    matched = m.match(trade(190))
    assert matched.observation.round_id == 2
    assert matched.time_gap_sec == 30

def test_empty_history_matches_nothing():
    m = TemporalMatcher([])
    assert [x.observation for x in m.match_all([trade(1), trade(2)])] == [None, None]

def test_match_all_keeps_trade_order():
    m = TemporalMatcher([obs(1, 100), obs(2, 200)])
    trades = [trade(250), trade(150), trade(50)]
    out = m.match_all(trades)
    assert [x.trade for x in out] == trades
    assert [x.observation.round_id if x.observation else None for x in out] == [2, 1, None]
