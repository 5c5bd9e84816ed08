# src/oracle_fee_replay/services/backfill/trade_ingest.py
import logging
from typing import List, Set

from ...domain.models import TradeRecord
from ...ports.trade_source import TradeSource
from ..normalize.swap_record import parse_swap
from ..retry import RetryPolicy

DEFAULT_PAGE_SIZE = 1000

class TradeIngestor:
    def __init__(self, source: TradeSource, *, retry: RetryPolicy, page_size: int = DEFAULT_PAGE_SIZE):
        self.source = source
        self.retry = retry
        self.page_size = page_size

    async def fetch_all(self, start_ts: int) -> List[TradeRecord]:
        """
        All swaps with timestamp >= start_ts, in retrieval order. A short page
        ends pagination; otherwise the last id of the page is the next cursor.
        """
        out: List[TradeRecord] = []
        seen: Set[str] = set()
        last_id = ""
        pages = 0

        while True:
            page = await self.retry.call(
                self.source.fetch_page, start_ts, last_id, self.page_size,
                label=f"swaps page {pages + 1}",
            )
            pages += 1

            for raw in page:
                rec = parse_swap(raw)
                if rec.id in seen:
                    logging.warning("duplicate swap id=%s skipped", rec.id)
                    continue
                seen.add(rec.id)
                out.append(rec)
            logging.info("swaps page=%d rows=%d total=%d", pages, len(page), len(out))

            if len(page) < self.page_size:
                break

            next_id = str(page[-1]["id"])
            if next_id == last_id:
                logging.warning("cursor did not advance, breaking to avoid loop")
                break
            last_id = next_id

        logging.info("swaps since ts=%d rows=%d pages=%d", start_ts, len(out), pages)
        return out
