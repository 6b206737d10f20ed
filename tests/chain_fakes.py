from __future__ import annotations

from dataclasses import replace
from typing import Dict, List, Optional

from swapchart.chain.abi import GET_PAIR_SELECTOR, TOKEN0_SELECTOR
from swapchart.config import Settings, get_settings
from swapchart.errors import UpstreamError
from swapchart.providers.base import ChainProvider

TOKEN = "0xC7e29EA23E3dAb1E1bc891674dCF631cb8569f00"
QUOTE = "0x41c3F37587EBcD46C0F85eF43E38BcfE1E70Ab56"
PAIR = "0x1111111111111111111111111111111111111111"
OTHER = "0x2222222222222222222222222222222222222222"
ZERO = "0x" + "0" * 40

E18 = 10**18


def word(address: str) -> str:
    return "0x" + address[2:].lower().rjust(64, "0")


def make_log(block: int, tx: str, amounts: tuple[int, int, int, int], log_index: int = 0) -> dict:
    """eth_getLogs-shaped dict for Swap(amount0In, amount1In, amount0Out, amount1Out)."""
    return {
        "address": PAIR,
        "blockNumber": hex(block),
        "transactionHash": tx,
        "logIndex": hex(log_index),
        "topics": [get_settings().swap_topic],
        "data": "0x" + "".join(f"{a:064x}" for a in amounts),
    }


def make_settings(**overrides) -> Settings:
    return replace(get_settings(), quote_token_address=QUOTE, **overrides)


class FakeChainProvider(ChainProvider):
    """In-memory chain: one factory, one pair, a fixed list of swap logs."""

    def __init__(
        self,
        pair: str = PAIR,
        token0: str = TOKEN,
        logs: Optional[List[dict]] = None,
        latest: int = 100,
        timestamps: Optional[Dict[int, int]] = None,
        fail_logs: bool = False,
    ) -> None:
        self.pair = pair
        self.token0 = token0
        self.logs = logs or []
        self.latest = latest
        self.timestamps = timestamps or {}
        self.fail_logs = fail_logs

        self.calls: List[tuple] = []
        self.log_ranges: List[tuple[int, int]] = []
        self.block_lookups: List[int] = []

    async def call(self, to: str, data: str) -> str:
        self.calls.append(("call", to, data))
        if data.startswith(GET_PAIR_SELECTOR):
            return word(self.pair)
        if data == TOKEN0_SELECTOR:
            return word(self.token0)
        raise UpstreamError(f"unexpected call data {data}")

    async def block_number(self) -> int:
        self.calls.append(("block_number",))
        return self.latest

    async def get_logs(self, address, topics, from_block, to_block):
        self.calls.append(("get_logs", address, tuple(topics), from_block, to_block))
        self.log_ranges.append((from_block, to_block))
        if self.fail_logs:
            raise UpstreamError("eth_getLogs failed: boom")
        return [e for e in self.logs if from_block <= int(e["blockNumber"], 16) <= to_block]

    async def get_block_timestamp(self, block_number: int) -> int:
        self.calls.append(("get_block_timestamp", block_number))
        self.block_lookups.append(block_number)
        return self.timestamps.get(block_number, block_number * 10)
