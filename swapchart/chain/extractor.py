from __future__ import annotations

import asyncio
import logging
from decimal import Decimal

from swapchart.chain.abi import TOKEN0_SELECTOR, decode_address, decode_uint_words, same_address
from swapchart.models.market import RawLog, SwapLogs, Trade
from swapchart.providers.base import ChainProvider

log = logging.getLogger("trade_extractor")


def decode_swap_amounts(data: str) -> tuple[int, int, int, int]:
    """
    Swap(sender, amount0In, amount1In, amount0Out, amount1Out, to):
    sender and to are indexed, the four amounts live in `data`.
    """
    amount0_in, amount1_in, amount0_out, amount1_out = decode_uint_words(data, 4)
    return amount0_in, amount1_in, amount0_out, amount1_out


def swap_price(raw: RawLog, is_token0: bool, decimals: int = 18) -> float:
    """
    Amount of the token moved by this swap, scaled from fixed point.

    Uses amountIn when non-zero, otherwise amountOut. This is the traded
    amount, not a ratio against the quote asset.
    """
    amount0_in, amount1_in, amount0_out, amount1_out = decode_swap_amounts(raw.data)

    amount_in = amount0_in if is_token0 else amount1_in
    amount_out = amount0_out if is_token0 else amount1_out

    raw_amount = amount_in if amount_in > 0 else amount_out
    return float(Decimal(raw_amount).scaleb(-decimals))


async def pair_token0(provider: ChainProvider, pair_address: str) -> str:
    return decode_address(await provider.call(pair_address, TOKEN0_SELECTOR))


async def block_timestamps(
    provider: ChainProvider,
    block_numbers: list[int],
    max_concurrency: int = 10,
) -> dict[int, int]:
    """Looks up each distinct block once; at most `max_concurrency` lookups in flight."""
    if max_concurrency <= 0:
        raise ValueError("max_concurrency must be positive")

    unique = sorted(set(block_numbers))
    limit = asyncio.Semaphore(max_concurrency)

    async def lookup(n: int) -> int:
        async with limit:
            return await provider.get_block_timestamp(n)

    stamps = await asyncio.gather(*(lookup(n) for n in unique))
    return dict(zip(unique, stamps))


async def extract_trades(
    provider: ChainProvider,
    swap_logs: SwapLogs,
    token_address: str,
    decimals: int = 18,
    max_concurrency: int = 10,
) -> list[Trade]:
    """
    Decode swap logs into trades for `token_address`.

    token0() is read once for the whole batch. Output order == input log order.
    """
    if not swap_logs.logs:
        return []

    token0 = await pair_token0(provider, swap_logs.pair_address)
    is_token0 = same_address(token0, token_address)

    prices = [swap_price(raw, is_token0, decimals) for raw in swap_logs.logs]
    stamps = await block_timestamps(
        provider, [raw.block_number for raw in swap_logs.logs], max_concurrency=max_concurrency
    )

    trades = [
        Trade(timestamp=stamps[raw.block_number], tx_hash=raw.tx_hash, price=price)
        for raw, price in zip(swap_logs.logs, prices)
    ]

    log.info(
        "Extracted trades pair=%s side=%s count=%d",
        swap_logs.pair_address,
        "token0" if is_token0 else "token1",
        len(trades),
    )
    return trades
