# src/oracle_fee_replay/adapters/chainlink_feed_provider.py
from typing import List, Sequence, Tuple
from eth_abi import decode, encode
from eth_abi.exceptions import DecodingError
from eth_utils import function_signature_to_4byte_selector

from ..errors import OracleRequestError
from ..ports.oracle_source import OracleSource, RoundData
from .rpc_client import JsonRpcClient

def _selector(signature: str) -> bytes:
    return function_signature_to_4byte_selector(signature)

# AggregatorV3Interface
SEL_LATEST_ROUND = _selector("latestRound()")
SEL_GET_ROUND_DATA = _selector("getRoundData(uint80)")
SEL_DECIMALS = _selector("decimals()")

ROUND_DATA_TYPES = ["uint80", "int256", "uint256", "uint256", "uint80"]

def calldata(selector: bytes, types: Sequence[str] = (), args: Sequence = ()) -> str:
    return "0x" + (selector + encode(list(types), list(args))).hex()

def encode_round_id(round_id: int) -> str:
    if round_id < 0:
        raise ValueError(f"round id must be >= 0, got {round_id}")
    return calldata(SEL_GET_ROUND_DATA, ["uint80"], [round_id])

def decode_result(types: List[str], result: str) -> Tuple:
    data_hex = result or ""
    if data_hex.startswith("0x"):
        data_hex = data_hex[2:]
    try:
        return decode(types, bytes.fromhex(data_hex))
    except (DecodingError, ValueError) as e:
        raise OracleRequestError(f"undecodable eth_call result ({len(data_hex) // 2} bytes): {e}") from e

class ChainlinkFeedSource(OracleSource):
    def __init__(self, rpc: JsonRpcClient, feed_address: str):
        self._rpc = rpc
        self._feed = feed_address

    async def latest_round(self) -> int:
        res = await self._rpc.eth_call(self._feed, calldata(SEL_LATEST_ROUND))
        return decode_result(["uint80"], res)[0]

    async def round_data(self, round_id: int) -> RoundData:
        res = await self._rpc.eth_call(self._feed, encode_round_id(round_id))
        # (roundId, answer, startedAt, updatedAt, answeredInRound)
        _, answer, _, updated_at, _ = decode_result(ROUND_DATA_TYPES, res)
        return RoundData(round_id=round_id, timestamp=updated_at, answer=answer)

    async def decimals(self) -> int:
        res = await self._rpc.eth_call(self._feed, calldata(SEL_DECIMALS))
        return decode_result(["uint8"], res)[0]
