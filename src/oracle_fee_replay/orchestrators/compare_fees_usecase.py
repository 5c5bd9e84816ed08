import asyncio
import logging
from datetime import datetime, timezone
from typing import Any, Awaitable, List, Optional, Tuple

from ..domain.models import OracleObservation, Report, TradeRecord
from ..domain.time_window import TimeWindow
from ..services.backfill.oracle_history import OracleHistoryBuilder
from ..services.backfill.trade_ingest import TradeIngestor
from ..services.fees.fee_engine import FeeEngine
from ..services.matching.temporal_matcher import TemporalMatcher
from ..services.report.aggregator import aggregate

async def _both(first: Awaitable[Any], second: Awaitable[Any]) -> Tuple[Any, Any]:
    """Awaits both; on the first failure the other is cancelled and awaited before re-raising."""
    tasks = [asyncio.ensure_future(first), asyncio.ensure_future(second)]
    try:
        done, pending = await asyncio.wait(tasks, return_when=asyncio.FIRST_EXCEPTION)
    except asyncio.CancelledError:
        for t in tasks:
            t.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        raise

    failed = next((t for t in tasks if t in done and t.exception() is not None), None)
    if failed is not None:
        for t in pending:
            t.cancel()
        await asyncio.gather(*pending, return_exceptions=True)
        raise failed.exception()
    return tasks[0].result(), tasks[1].result()

async def run(window: TimeWindow, oracle_builder: OracleHistoryBuilder, trade_ingestor: TradeIngestor,
              fee_engine: FeeEngine, generated_at: Optional[datetime] = None) -> Report:
    observations: List[OracleObservation]
    trades: List[TradeRecord]
    # both sources are independent; a fatal error in either aborts the run
    observations, trades = await _both(
        oracle_builder.build(window),
        trade_ingestor.fetch_all(window.start_s),
    )

    # the trade source has no upper bound; rounds past window.end were never kept
    in_window = [t for t in trades if t.timestamp <= window.end_s]
    if len(in_window) != len(trades):
        logging.info("dropped %d swaps after window end ts=%d", len(trades) - len(in_window), window.end_s)
    logging.info("matching trades=%d against oracle rounds=%d", len(in_window), len(observations))

    matcher = TemporalMatcher(observations)
    outcomes = [fee_engine.compute(m) for m in matcher.match_all(in_window)]
    return aggregate(
        outcomes,
        window=window,
        generated_at=generated_at or datetime.now(timezone.utc),
    )
