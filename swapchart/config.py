# swapchart/config.py
import os
from dataclasses import dataclass
from dotenv import load_dotenv

from swapchart.chain.abi import SWAP_TOPIC

# Loads variables from a local .env file into environment variables (dev only).
load_dotenv()

# Defaults point at Shibarium's puppynet testnet (ShibaSwap factory + WBONE).
DEFAULT_RPC_URL = "https://puppynet.shibrpc.com"
DEFAULT_FACTORY_ADDRESS = "0xb9E15055807FcDd1f845c1eBF04BF7A176379faA"
DEFAULT_QUOTE_TOKEN_ADDRESS = "0x41c3F37587EBcD46C0F85eF43E38BcfE1E70Ab56"
DEFAULT_TOKEN_ADDRESS = "0xC7e29EA23E3dAb1E1bc891674dCF631cb8569f00"


@dataclass(frozen=True)
class Settings:
    # App config
    app_env: str
    log_level: str
    provider: str

    # Chain config
    rpc_url: str
    rpc_timeout_seconds: float
    rpc_max_concurrency: int
    factory_address: str
    quote_token_address: str
    swap_topic: str
    token_decimals: int
    start_block: int
    log_block_chunk: int

    # Client / chart config
    token_meta_url: str
    default_token_address: str
    candle_interval_seconds: int
    poll_interval_seconds: float
    api_base_url: str
    http_timeout_seconds: float


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        raise RuntimeError(f"{name} must be an integer, got {raw!r}") from None


def _float_env(name: str, default: float) -> float:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        raise RuntimeError(f"{name} must be a number, got {raw!r}") from None


def get_settings() -> Settings:
    """
    Reads env vars and returns a Settings object.
    """
    chunk = _int_env("LOG_BLOCK_CHUNK", 5000)
    if chunk <= 0:
        raise RuntimeError("LOG_BLOCK_CHUNK must be positive")

    concurrency = _int_env("RPC_MAX_CONCURRENCY", 10)
    if concurrency <= 0:
        raise RuntimeError("RPC_MAX_CONCURRENCY must be positive")

    interval = _int_env("CANDLE_INTERVAL_SECONDS", 60)
    if interval <= 0:
        raise RuntimeError("CANDLE_INTERVAL_SECONDS must be positive")

    return Settings(
        app_env=os.getenv("APP_ENV", "local"),
        log_level=os.getenv("LOG_LEVEL", "INFO"),
        provider=os.getenv("PROVIDER", "JSONRPC"),
        rpc_url=os.getenv("RPC_URL", DEFAULT_RPC_URL),
        rpc_timeout_seconds=_float_env("RPC_TIMEOUT_SECONDS", 20.0),
        rpc_max_concurrency=concurrency,
        factory_address=os.getenv("FACTORY_ADDRESS", DEFAULT_FACTORY_ADDRESS),
        quote_token_address=os.getenv("QUOTE_TOKEN_ADDRESS", DEFAULT_QUOTE_TOKEN_ADDRESS),
        swap_topic=os.getenv("SWAP_TOPIC", SWAP_TOPIC).lower(),
        token_decimals=_int_env("TOKEN_DECIMALS", 18),
        start_block=_int_env("START_BLOCK", 0),
        log_block_chunk=chunk,
        token_meta_url=os.getenv("TOKEN_META_URL", "https://puppyscan.shib.io/api/token/{address}"),
        default_token_address=os.getenv("DEFAULT_TOKEN_ADDRESS", DEFAULT_TOKEN_ADDRESS),
        candle_interval_seconds=interval,
        poll_interval_seconds=_float_env("POLL_INTERVAL_SECONDS", 15.0),
        api_base_url=os.getenv("API_BASE_URL", "http://127.0.0.1:8000").rstrip("/"),
        http_timeout_seconds=_float_env("HTTP_TIMEOUT_SECONDS", 10.0),
    )
