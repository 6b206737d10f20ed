from __future__ import annotations

import itertools
import logging
from typing import Any, Dict, List, Optional

import httpx

from swapchart.errors import UpstreamError
from swapchart.providers.base import ChainProvider

log = logging.getLogger("jsonrpc_provider")


def to_hex_block(number: int) -> str:
    return hex(number)


def parse_quantity(value: Any) -> int:
    """
    Converts a JSON-RPC quantity to int.
    Handles:
      - hex strings ("0x1b4")
      - plain ints (some nodes / test doubles)
    """
    if isinstance(value, int):
        return value
    if isinstance(value, str) and value.startswith(("0x", "0X")):
        return int(value, 16)
    raise UpstreamError(f"Unexpected quantity value: {value!r}")


class JsonRpcProvider(ChainProvider):
    """
    EVM JSON-RPC provider over HTTP.

    Only the read-only methods needed to build a swap history:
    - eth_call / eth_blockNumber / eth_getLogs / eth_getBlockByNumber
    """

    def __init__(
        self,
        rpc_url: str,
        timeout_s: float = 20.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.rpc_url = rpc_url
        self._ids = itertools.count(1)
        self._client = httpx.AsyncClient(timeout=timeout_s, transport=transport)

    async def aclose(self) -> None:
        await self._client.aclose()

    # -------------------------
    # Transport
    # -------------------------
    async def _request(self, method: str, params: list) -> Any:
        payload = {"jsonrpc": "2.0", "id": next(self._ids), "method": method, "params": params}

        try:
            resp = await self._client.post(self.rpc_url, json=payload)
            resp.raise_for_status()
            body = resp.json()
        except httpx.HTTPError as e:
            raise UpstreamError(f"{method} failed: {e!r}") from e
        except ValueError as e:
            raise UpstreamError(f"{method} returned invalid JSON") from e

        if not isinstance(body, dict):
            raise UpstreamError(f"{method} returned unexpected payload type {type(body)}")

        err = body.get("error")
        if err:
            message = err.get("message") if isinstance(err, dict) else err
            raise UpstreamError(f"{method} error: {message}")

        if "result" not in body:
            raise UpstreamError(f"{method} returned no result")

        return body["result"]

    # -------------------------
    # Public interface used by the app
    # -------------------------
    async def call(self, to: str, data: str) -> str:
        result = await self._request("eth_call", [{"to": to, "data": data}, "latest"])
        if not isinstance(result, str):
            raise UpstreamError(f"eth_call returned {result!r}")
        return result

    async def block_number(self) -> int:
        return parse_quantity(await self._request("eth_blockNumber", []))

    async def get_logs(
        self,
        address: str,
        topics: List[Optional[str]],
        from_block: int,
        to_block: int,
    ) -> List[Dict]:
        params = {
            "address": address,
            "topics": topics,
            "fromBlock": to_hex_block(from_block),
            "toBlock": to_hex_block(to_block),
        }
        result = await self._request("eth_getLogs", [params])
        if not isinstance(result, list):
            log.warning("Unexpected eth_getLogs payload type address=%s type=%s", address, type(result))
            raise UpstreamError("eth_getLogs returned a non-list result")
        return result

    async def get_block_timestamp(self, block_number: int) -> int:
        block = await self._request("eth_getBlockByNumber", [to_hex_block(block_number), False])
        if not isinstance(block, dict) or "timestamp" not in block:
            raise UpstreamError(f"Block {block_number} not found")
        return parse_quantity(block["timestamp"])
