from __future__ import annotations

from typing import Optional

from swapchart.chain.extractor import extract_trades
from swapchart.chain.fetcher import fetch_swap_logs
from swapchart.config import Settings
from swapchart.models.market import SwapLogs, Trade
from swapchart.providers.base import ChainProvider


async def load_trades(
    provider: ChainProvider,
    token_address: str,
    settings: Settings,
    from_block: Optional[int] = None,
) -> tuple[SwapLogs, list[Trade]]:
    """Log fetch + trade extraction for one token, from `from_block` (or START_BLOCK) to latest."""
    swap_logs = await fetch_swap_logs(provider, token_address, settings, from_block=from_block)
    trades = await extract_trades(
        provider,
        swap_logs,
        token_address,
        decimals=settings.token_decimals,
        max_concurrency=settings.rpc_max_concurrency,
    )
    return swap_logs, trades
