# src/oracle_fee_replay/adapters/subgraph_client.py
from typing import Any, Dict, Optional
import httpx

from ..errors import PermanentHTTPError, SubgraphRequestError
from .http_status import RETRY_STATUSES

class SubgraphClient:
    """Minimal GraphQL client for a The Graph subgraph endpoint (POST JSON)."""
    def __init__(self, url: str, timeout: float = 15.0, transport: Optional[httpx.AsyncBaseTransport] = None):
        self._url = url
        self._client = httpx.AsyncClient(timeout=timeout, transport=transport)

    async def query(self, query: str, variables: Dict[str, Any]) -> Dict[str, Any]:
        r = await self._client.post(self._url, json={"query": query, "variables": variables})
        if r.status_code in RETRY_STATUSES:
            raise SubgraphRequestError(f"http {r.status_code}")
        if r.status_code != 200:
            raise PermanentHTTPError(f"HTTP {r.status_code}: {r.text[:200]}")
        body = r.json()
        if body.get("errors"):
            raise SubgraphRequestError(f"graphql errors: {str(body['errors'])[:200]}")
        return body.get("data") or {}

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self): return self
    async def __aexit__(self, exc_type, exc, tb): await self.aclose()
