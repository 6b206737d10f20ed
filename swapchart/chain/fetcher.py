from __future__ import annotations

import logging
from typing import Iterator, Optional

from swapchart.chain.abi import GET_PAIR_SELECTOR, ZERO_ADDRESS, decode_address, encode_call, same_address
from swapchart.config import Settings
from swapchart.errors import DecodeError, NotFoundError
from swapchart.models.market import RawLog, SwapLogs
from swapchart.providers.base import ChainProvider
from swapchart.providers.jsonrpc import parse_quantity

log = logging.getLogger("log_fetcher")


def iter_block_ranges(start: int, end: int, chunk: int) -> Iterator[tuple[int, int]]:
    """
    Splits the inclusive block range [start, end] into windows of at most `chunk` blocks.
    Yields nothing when start > end.
    """
    if chunk <= 0:
        raise ValueError("chunk must be positive")

    cursor = start
    while cursor <= end:
        upper = min(cursor + chunk - 1, end)
        yield cursor, upper
        cursor = upper + 1


async def resolve_pair(provider: ChainProvider, token_address: str, settings: Settings) -> str:
    """
    factory.getPair(token, quote).
    Raises NotFoundError when the factory returns the zero address.
    """
    data = encode_call(GET_PAIR_SELECTOR, token_address, settings.quote_token_address)
    pair = decode_address(await provider.call(settings.factory_address, data))
    log.info("Pair address token=%s pair=%s", token_address, pair)

    if same_address(pair, ZERO_ADDRESS):
        raise NotFoundError("No pair found for token")
    return pair


def to_raw_log(entry: dict) -> RawLog:
    try:
        return RawLog(
            block_number=parse_quantity(entry["blockNumber"]),
            tx_hash=entry["transactionHash"],
            log_index=parse_quantity(entry.get("logIndex", 0)),
            topics=tuple(entry.get("topics") or ()),
            data=entry["data"],
        )
    except (KeyError, TypeError) as e:
        raise DecodeError(f"Malformed log entry: {e!r}") from e


async def fetch_swap_logs(
    provider: ChainProvider,
    token_address: str,
    settings: Settings,
    from_block: Optional[int] = None,
    to_block: Optional[int] = None,
) -> SwapLogs:
    """
    Resolve the token's pair and collect its swap logs.

    Walks [from_block or START_BLOCK, to_block or latest] in LOG_BLOCK_CHUNK windows,
    one eth_getLogs per window. Logs keep the provider's order.
    """
    pair = await resolve_pair(provider, token_address, settings)

    start = settings.start_block if from_block is None else from_block
    end = await provider.block_number() if to_block is None else to_block

    logs: list[RawLog] = []
    windows = 0
    for lo, hi in iter_block_ranges(start, end, settings.log_block_chunk):
        entries = await provider.get_logs(pair, [settings.swap_topic], lo, hi)
        logs.extend(to_raw_log(e) for e in entries)
        windows += 1

    log.info(
        "Fetched swap logs pair=%s blocks=%d-%d windows=%d logs=%d",
        pair,
        start,
        end,
        windows,
        len(logs),
    )
    return SwapLogs(pair_address=pair, from_block=start, to_block=end, logs=logs)
