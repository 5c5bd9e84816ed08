# tests/unit/test_compare_fees_usecase.py
import asyncio
import json
from datetime import datetime, timezone
from decimal import Decimal
import pytest

from oracle_fee_replay.orchestrators.compare_fees_usecase import run
from oracle_fee_replay.services.backfill.oracle_history import OracleHistoryBuilder
from oracle_fee_replay.services.backfill.trade_ingest import TradeIngestor
from oracle_fee_replay.services.fees.fee_engine import FeeEngine
from oracle_fee_replay.services.retry import RetryPolicy
from oracle_fee_replay.adapters.state_repo.memory_cache import MemoryObservationCache
from oracle_fee_replay.adapters.sinks.json_file_sink import JsonFileReportSink
from oracle_fee_replay.adapters.sinks.memory_sink import MemoryReportSink
from oracle_fee_replay.domain.time_window import TimeWindow
from oracle_fee_replay.ports.oracle_source import OracleSource, RoundData
from oracle_fee_replay.ports.trade_source import TradeSource
from oracle_fee_replay.errors import PoolNotFoundError

RETRY = RetryPolicy(attempts=2, delay_sec=0, timeout_sec=1)
NOW = datetime(2024, 1, 1, tzinfo=timezone.utc)

class FakeFeed(OracleSource):
    def __init__(self, rounds):
        self.rounds = rounds
    async def latest_round(self):
        return max(self.rounds)
    async def round_data(self, round_id):
        ts, answer = self.rounds[round_id]
        return RoundData(round_id, ts, answer)
    async def decimals(self):
        return 8

class FakeSwaps(TradeSource):
    def __init__(self, swaps, pool=True):
        self.swaps = swaps
        self.pool = pool
    async def fetch_page(self, start_ts, last_id, first):
        if not self.pool:
            raise PoolNotFoundError("pool missing")
        return [s for s in self.swaps if int(s["timestamp"]) >= start_ts] if not last_id else []

ROUNDS = {
    1: (800, 299000000000),
    2: (900, 299000000000),
    3: (1050, 300000000000),
    4: (1150, 300000000000),
    5: (1400, 300000000000),
}
SWAPS = [
    {"id": "0xsell", "amount0": "2970", "amount1": "-1", "timestamp": "1200", "transaction": {"id": "0xt1"}},
    {"id": "0xbuy", "amount0": "-3030", "amount1": "1", "timestamp": "1100", "transaction": {"id": "0xt2"}},
]

def pipeline(swaps=SWAPS, pool=True, cache=None):
    oracle = OracleHistoryBuilder(FakeFeed(ROUNDS), retry=RETRY, cache=cache, margin=1)
    trades = TradeIngestor(FakeSwaps(swaps, pool=pool), retry=RETRY)
    return run(TimeWindow(1000, 1300), oracle, trades, FeeEngine(), generated_at=NOW)

def test_buy_and_sell_end_to_end():
    report = asyncio.run(pipeline())
    assert report.trade_count == 2
    sell, buy = report.outcomes
    assert (sell.trade_id, sell.oracle_round_id, sell.time_gap_sec) == ("0xsell", 4, 50)
    assert (buy.trade_id, buy.oracle_round_id, buy.time_gap_sec) == ("0xbuy", 3, 50)

    assert report.total_standard_fee == sell.standard_fee + buy.standard_fee == Decimal("3")
    assert report.total_dynamic_fee == sell.dynamic_fee + buy.dynamic_fee == Decimal("45")
    assert report.average_efficiency_pct == (sell.efficiency_pct + buy.efficiency_pct) / 2
    assert report.average_efficiency_pct == Decimal("-1.75")
    assert report.total_volume_base == 2
    assert report.total_volume_quote == 6000

def test_trade_older_than_history_is_unrated():
    early = {"id": "0xearly", "amount0": "-3000", "amount1": "1", "timestamp": "1000",
             "transaction": {"id": "0xt3"}}
    # history holds rounds 4, 3 and 1 (t=800), so t=1000 still finds round 1
    report = asyncio.run(pipeline(swaps=SWAPS + [early]))
    assert report.outcomes[-1].oracle_round_id == 1

    report = asyncio.run(run(
        TimeWindow(1000, 1300),
        OracleHistoryBuilder(FakeFeed({0: (1050, 300000000000)}), retry=RETRY, margin=0),
        TradeIngestor(FakeSwaps([early]), retry=RETRY),
        FeeEngine(),
        generated_at=NOW,
    ))
    assert report.trade_count == 1
    assert report.rated_trade_count == 0
    assert report.outcomes[0].efficiency_pct is None
    assert report.average_efficiency_pct is None

def test_missing_pool_aborts_without_report():
    sink = MemoryReportSink()
    with pytest.raises(PoolNotFoundError):
        sink.write(asyncio.run(pipeline(pool=False)))
    assert sink.reports == []

def test_cache_is_filled_by_a_run():
    cache = MemoryObservationCache()
    asyncio.run(pipeline(cache=cache))
    assert sorted(cache.load()) == [1, 2, 3, 4, 5]

def test_report_document_written_per_run(tmp_path):
    report = asyncio.run(pipeline())
    path = JsonFileReportSink(str(tmp_path)).write(report)
    assert path.endswith("2024-01-01T000000Z.json")

    doc = json.loads((tmp_path / "2024-01-01T000000Z.json").read_text())
    assert doc["total_trades"] == 2
    assert Decimal(doc["average_efficiency_pct"]) == Decimal("-1.75")
    assert Decimal(doc["total_standard_fee"]) == Decimal("3")
    assert doc["window_start"] == "1970-01-01T00:16:40Z"
    first = doc["trades"][0]
    assert first["trade_id"] == "0xsell"
    assert first["transaction_hash"] == "0xt1"
    assert first["direction"] == "sell_base"
    assert Decimal(first["oracle_price"]) == Decimal("3000")
    assert first["oracle_time"] == "1970-01-01T00:19:10Z"

def test_swaps_after_window_end_are_left_out():
    late = {"id": "0xlate", "amount0": "-3100", "amount1": "1", "timestamp": "1200",
            "transaction": {"id": "0xt4"}}
    inside = {"id": "0xin", "amount0": "-3000", "amount1": "1", "timestamp": "1080",
              "transaction": {"id": "0xt5"}}
    oracle = OracleHistoryBuilder(FakeFeed(ROUNDS), retry=RETRY, margin=1)
    trades = TradeIngestor(FakeSwaps([late, inside]), retry=RETRY)
    report = asyncio.run(run(TimeWindow(1000, 1100), oracle, trades, FeeEngine(), generated_at=NOW))

    assert report.trade_count == 1
    assert [o.trade_id for o in report.outcomes] == ["0xin"]
    assert report.outcomes[0].oracle_round_id == 3
    assert all(o.timestamp <= 1100 for o in report.outcomes)

class SlowFeed(OracleSource):
    def __init__(self, n):
        self.n = n
        self.completed = []
    async def latest_round(self):
        return self.n
    async def round_data(self, round_id):
        await asyncio.sleep(0.001)
        self.completed.append(round_id)
        return RoundData(round_id, 10 * round_id, 300000000000)
    async def decimals(self):
        return 8

class LateMissingPool(TradeSource):
    async def fetch_page(self, start_ts, last_id, first):
        await asyncio.sleep(0.05)
        raise PoolNotFoundError("pool missing")

def test_fatal_trade_error_stops_oracle_walk_and_keeps_its_rounds():
    feed = SlowFeed(200)
    cache = MemoryObservationCache()

    async def go():
        oracle = OracleHistoryBuilder(feed, retry=RETRY, cache=cache, margin=0)
        with pytest.raises(PoolNotFoundError):
            await run(TimeWindow(0, 10_000), oracle, TradeIngestor(LateMissingPool(), retry=RETRY), FeeEngine())
        at_abort = len(feed.completed)
        await asyncio.sleep(0.05)
        return at_abort

    at_abort = asyncio.run(go())
    assert at_abort > 0
    assert len(feed.completed) == at_abort
    assert sorted(cache.load()) == sorted(feed.completed)
