import asyncio
import json
import logging
from typing import Any, Dict, Optional

import httpx

from .config import Config, load_config
from .domain.models import Report
from .domain.time_window import TimeWindow
from .adapters.rpc_client import JsonRpcClient
from .adapters.subgraph_client import SubgraphClient
from .adapters.chainlink_feed_provider import ChainlinkFeedSource
from .adapters.uniswap_subgraph_provider import UniswapSubgraphTradeSource
from .adapters.state_repo.json_file_cache import JsonFileObservationCache
from .adapters.state_repo.s3_cache import S3ObservationCache
from .adapters.sinks.json_file_sink import JsonFileReportSink
from .adapters.sinks.s3_sink import S3ReportSink
from .ports.sink import ReportSink
from .ports.state_repository import ObservationCache
from .presenters.json_presenter import summary_to_dict
from .services.backfill.oracle_history import OracleHistoryBuilder
from .services.backfill.trade_ingest import TradeIngestor
from .services.fees.fee_engine import FeeEngine, FeePolicy
from .services.retry import RetryPolicy
from .orchestrators.compare_fees_usecase import run

def build_cache(cfg: Config) -> ObservationCache:
    if cfg.cache_s3_bucket:
        return S3ObservationCache(cfg.cache_s3_bucket, cfg.cache_s3_key)
    return JsonFileObservationCache(cfg.cache_path)

def build_sink(cfg: Config, out_dir: Optional[str] = None) -> ReportSink:
    if cfg.report_s3_bucket and out_dir is None:
        return S3ReportSink(cfg.report_s3_bucket, cfg.report_s3_prefix)
    return JsonFileReportSink(out_dir or cfg.output_dir)

def resolve_window(event: Dict[str, Any], cfg: Config) -> TimeWindow:
    end = event.get("end_ts")
    start = event.get("start_ts")
    days = float(event.get("lookback_days") or cfg.lookback_days)
    window = TimeWindow.lookback(days, now_s=int(end) if end is not None else None)
    if start is not None:
        window = TimeWindow(int(start), window.end_s)
    return window

async def compare(cfg: Config, window: TimeWindow, cache: Optional[ObservationCache],
                  transport: Optional[httpx.AsyncBaseTransport] = None) -> Report:
    if not cfg.rpc_url:
        raise ValueError("RPC_URL (or ALCHEMY_KEY) is required to read the oracle")

    retry = RetryPolicy(attempts=cfg.retries, delay_sec=cfg.retry_delay_sec, timeout_sec=cfg.timeout_sec)
    policy = FeePolicy(
        base_fee_pct=cfg.base_fee_pct,
        standard_fee_pct=cfg.standard_fee_pct,
        deviation_multiplier=cfg.deviation_multiplier,
    )
    async with JsonRpcClient(cfg.rpc_url, timeout=cfg.timeout_sec, transport=transport) as rpc, \
            SubgraphClient(cfg.subgraph_url, timeout=cfg.timeout_sec, transport=transport) as graph:
        oracle = OracleHistoryBuilder(
            ChainlinkFeedSource(rpc, cfg.feed_address),
            retry=retry,
            cache=cache,
            margin=cfg.oracle_margin_rounds,
            checkpoint_every=cfg.cache_checkpoint_every,
        )
        trades = TradeIngestor(
            UniswapSubgraphTradeSource(graph, cfg.pool_id),
            retry=retry,
            page_size=cfg.page_size,
        )
        return await run(window, oracle, trades, FeeEngine(policy))

def lambda_handler(event, _context=None):
    """
    event (all optional):
      {
        "start_ts": 1700000000,
        "end_ts": 1700086400,
        "lookback_days": 1
      }
    """
    cfg = load_config()
    logging.basicConfig(level=cfg.log_level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    window = resolve_window(event or {}, cfg)
    logging.info("comparing fees for window [%d, %d]", window.start_s, window.end_s)
    report = asyncio.run(compare(cfg, window, build_cache(cfg)))
    location = build_sink(cfg).write(report)
    logging.info("report written to %s", location)

    return {"statusCode": 200, "body": json.dumps({
        "report": location,
        **summary_to_dict(report),
    }, ensure_ascii=False)}

if __name__ == "__main__":
    # local run: optional JSON event on stdin
    import sys
    raw = "" if sys.stdin.isatty() else sys.stdin.read()
    out = lambda_handler(json.loads(raw) if raw.strip() else {}, None)
    print(out["body"])
