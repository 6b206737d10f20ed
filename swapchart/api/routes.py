from __future__ import annotations

import logging
import traceback
from typing import Optional

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse

from swapchart.api.deps import get_app_settings, get_chain_provider
from swapchart.candles.aggregator import aggregate
from swapchart.chain.abi import is_address
from swapchart.chain.history import load_trades
from swapchart.config import Settings
from swapchart.errors import NotFoundError, UpstreamError, ValidationError
from swapchart.providers.base import ChainProvider

router = APIRouter(prefix="/api")
log = logging.getLogger("api")

MISSING_ADDRESS = "Missing contract address"
INVALID_ADDRESS = "Invalid contract address"
NO_PAIR = "No pair found for token"
UPSTREAM_FAILED = "Failed to fetch swap data"


def error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


def validate_address(ca: Optional[str]) -> str:
    ca = (ca or "").strip()
    if not ca:
        raise ValidationError(MISSING_ADDRESS)
    if not is_address(ca):
        raise ValidationError(INVALID_ADDRESS)
    return ca


async def _load(provider: ChainProvider, settings: Settings, ca: Optional[str], from_block: Optional[int]):
    """
    Shared by /history and /candles.
    Returns (swap_logs, trades) or a JSONResponse describing the failure.
    """
    try:
        token = validate_address(ca)
    except ValidationError as e:
        return error_response(400, str(e))

    try:
        return await load_trades(provider, token, settings, from_block=from_block)
    except NotFoundError:
        log.info("No pair for token=%s", token)
        return error_response(404, NO_PAIR)
    except UpstreamError as e:
        log.error("Swap history failed token=%s error=%s", token, repr(e))
        log.error(traceback.format_exc())
        return error_response(500, UPSTREAM_FAILED)
    except Exception as e:
        log.error("Unexpected swap history failure token=%s error=%s", token, repr(e))
        log.error(traceback.format_exc())
        return error_response(500, UPSTREAM_FAILED)


@router.get("/history")
async def history(
    ca: Optional[str] = Query(None, description="Token contract address"),
    from_block: Optional[int] = Query(None, alias="fromBlock", ge=0, description="First block to scan"),
    provider: ChainProvider = Depends(get_chain_provider),
    settings: Settings = Depends(get_app_settings),
):
    """
    Swap history for a token against the quote asset.
    Trades are listed in log order (not sorted by time).
    """
    loaded = await _load(provider, settings, ca, from_block)
    if isinstance(loaded, JSONResponse):
        return loaded

    swap_logs, trades = loaded
    return {
        "trades": [t.to_json() for t in trades],
        "pair": swap_logs.pair_address,
        "fromBlock": swap_logs.from_block,
        "toBlock": swap_logs.to_block,
    }


@router.get("/candles")
async def candles(
    ca: Optional[str] = Query(None, description="Token contract address"),
    interval: Optional[int] = Query(None, gt=0, description="Bucket width in seconds"),
    provider: ChainProvider = Depends(get_chain_provider),
    settings: Settings = Depends(get_app_settings),
):
    """Same pipeline as /history, aggregated server-side into OHLC candles."""
    loaded = await _load(provider, settings, ca, None)
    if isinstance(loaded, JSONResponse):
        return loaded

    _, trades = loaded
    series = aggregate(trades, interval or settings.candle_interval_seconds)
    return {
        "candles": [c.to_chart() for c in series],
        "latestPrice": trades[-1].price if trades else None,
    }


@router.get("/client-config")
def client_config(settings: Settings = Depends(get_app_settings)):
    """Values the browser page needs (it polls and draws on its own)."""
    return {
        "defaultAddress": settings.default_token_address,
        "pollIntervalSeconds": settings.poll_interval_seconds,
        "candleIntervalSeconds": settings.candle_interval_seconds,
        "tokenMetaUrl": settings.token_meta_url,
    }
