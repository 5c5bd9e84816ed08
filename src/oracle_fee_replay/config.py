# src/oracle_fee_replay/config.py
import os
from decimal import Decimal
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field

UNISWAP_V3_SUBGRAPH_URL = "https://api.thegraph.com/subgraphs/name/uniswap/uniswap-v3"
USDC_WETH_POOL_ID = "0x8ad599c3a0ff1de082011efddc58f1908eb6e6d8"
ETH_USD_FEED_ADDRESS = "0x5f4eC3Df9cbd43714FE2740f5E3616155c5b8419"

class Config(BaseModel):
    subgraph_url: str = UNISWAP_V3_SUBGRAPH_URL
    pool_id: str = USDC_WETH_POOL_ID
    rpc_url: str = ""
    feed_address: str = ETH_USD_FEED_ADDRESS

    lookback_days: float = Field(1.0, gt=0)
    page_size: int = Field(1000, ge=1)
    oracle_margin_rounds: int = Field(5, ge=0)

    retries: int = Field(5, ge=1)
    retry_delay_sec: float = Field(2.0, ge=0)
    timeout_sec: float = Field(15.0, gt=0)

    base_fee_pct: Decimal = Field(Decimal("0.05"), ge=0)
    standard_fee_pct: Decimal = Field(Decimal("0.05"), ge=0)
    deviation_multiplier: Decimal = Field(Decimal("70"), ge=0)

    cache_path: str = "cache/oracle_rounds.json"
    cache_s3_bucket: Optional[str] = None
    cache_s3_key: str = "oracle_rounds.json"
    cache_checkpoint_every: int = Field(100, ge=1)

    output_dir: str = "output"
    report_s3_bucket: Optional[str] = None
    report_s3_prefix: str = "reports"

    log_level: str = "INFO"

def _rpc_url_from_env() -> str:
    url = os.getenv("RPC_URL")
    if url:
        return url
    key = os.getenv("ALCHEMY_KEY")
    return f"https://eth-mainnet.g.alchemy.com/v2/{key}" if key else ""

_ENV_FIELDS = {
    "SUBGRAPH_URL": "subgraph_url",
    "POOL_ID": "pool_id",
    "FEED_ADDRESS": "feed_address",
    "LOOKBACK_DAYS": "lookback_days",
    "PAGE_SIZE": "page_size",
    "ORACLE_MARGIN_ROUNDS": "oracle_margin_rounds",
    "RETRIES": "retries",
    "RETRY_DELAY_SEC": "retry_delay_sec",
    "TIMEOUT_SEC": "timeout_sec",
    "BASE_FEE_PCT": "base_fee_pct",
    "STANDARD_FEE_PCT": "standard_fee_pct",
    "DEVIATION_MULTIPLIER": "deviation_multiplier",
    "CACHE_PATH": "cache_path",
    "CACHE_S3_BUCKET": "cache_s3_bucket",
    "CACHE_S3_KEY": "cache_s3_key",
    "CACHE_CHECKPOINT_EVERY": "cache_checkpoint_every",
    "OUTPUT_DIR": "output_dir",
    "REPORT_S3_BUCKET": "report_s3_bucket",
    "REPORT_S3_PREFIX": "report_s3_prefix",
    "LOG_LEVEL": "log_level",
}

def load_config() -> Config:
    """Reads .env (if any) and the process environment; pydantic coerces and validates."""
    load_dotenv()
    values = {field: os.environ[env] for env, field in _ENV_FIELDS.items() if os.getenv(env)}
    values["rpc_url"] = _rpc_url_from_env()
    return Config(**values)
