# src/oracle_fee_replay/adapters/uniswap_subgraph_provider.py
from typing import Any, Dict, List
from ..errors import PoolNotFoundError
from ..ports.trade_source import TradeSource
from .subgraph_client import SubgraphClient

SWAPS_QUERY = """
query PoolSwaps($pool: ID!, $timestamp: BigInt!, $lastId: String!, $first: Int!) {
  pool(id: $pool) {
    id
    swaps(
      where: { timestamp_gte: $timestamp, id_gt: $lastId }
      orderBy: timestamp
      orderDirection: desc
      first: $first
    ) {
      id
      amount0
      amount1
      timestamp
      transaction {
        id
      }
    }
  }
}
"""

class UniswapSubgraphTradeSource(TradeSource):
    def __init__(self, client: SubgraphClient, pool_id: str):
        self._client = client
        self._pool = pool_id.lower()

    async def fetch_page(self, start_ts: int, last_id: str, first: int) -> List[Dict[str, Any]]:
        data = await self._client.query(SWAPS_QUERY, {
            "pool": self._pool,
            "timestamp": str(int(start_ts)),
            "lastId": last_id,
            "first": int(first),
        })
        pool = data.get("pool")
        if not pool:
            raise PoolNotFoundError(f"pool {self._pool} not found")
        return pool.get("swaps") or []
