# src/oracle_fee_replay/adapters/rpc_client.py
from typing import Any, List, Optional
import httpx

from ..errors import OracleRequestError, PermanentHTTPError
from .http_status import RETRY_STATUSES

class JsonRpcClient:
    """Ethereum JSON-RPC over HTTP; only what the aggregator reads need."""
    def __init__(self, url: str, timeout: float = 15.0, transport: Optional[httpx.AsyncBaseTransport] = None):
        self._url = url
        self._client = httpx.AsyncClient(timeout=timeout, transport=transport)
        self._next_id = 0

    async def call(self, method: str, params: List[Any]) -> Any:
        self._next_id += 1
        payload = {"jsonrpc": "2.0", "id": self._next_id, "method": method, "params": params}
        r = await self._client.post(self._url, json=payload)
        if r.status_code in RETRY_STATUSES:
            raise OracleRequestError(f"http {r.status_code}")
        if r.status_code != 200:
            raise PermanentHTTPError(f"HTTP {r.status_code}: {r.text[:200]}")
        body = r.json()
        if body.get("error"):
            raise OracleRequestError(f"rpc error: {body['error']}")
        return body.get("result")

    async def eth_call(self, to: str, data: str, block: str = "latest") -> str:
        return await self.call("eth_call", [{"to": to, "data": data}, block])

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self): return self
    async def __aexit__(self, exc_type, exc, tb): await self.aclose()
