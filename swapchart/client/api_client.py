from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

import httpx

from swapchart.errors import ClientFetchError
from swapchart.models.market import Trade
from swapchart.models.token import TokenMeta

log = logging.getLogger("api_client")


@dataclass(frozen=True)
class HistoryPage:
    """One /api/history response: trades in log order plus the scanned block cursor."""
    trades: list[Trade]
    to_block: Optional[int]


def _parse_trade(row: object) -> Trade:
    if not isinstance(row, dict):
        raise ClientFetchError(f"Trade row is not an object: {row!r}")
    try:
        return Trade(
            timestamp=int(row["timestamp"]),
            tx_hash=str(row.get("txHash", "")),
            price=float(row["price"]),
        )
    except (KeyError, TypeError, ValueError) as e:
        raise ClientFetchError(f"Malformed trade row: {row!r}") from e


class HistoryClient:
    """
    Calls GET {base_url}/api/history?ca=... on the swapchart API.

    Any transport error, non-2xx status or payload without a `trades` list
    raises ClientFetchError; the caller decides how to degrade.
    """

    def __init__(
        self,
        base_url: str,
        timeout_s: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self._client = httpx.AsyncClient(timeout=timeout_s, transport=transport)

    async def aclose(self) -> None:
        await self._client.aclose()

    async def fetch_history(self, ca: str, from_block: Optional[int] = None) -> HistoryPage:
        params = {"ca": ca}
        if from_block is not None:
            params["fromBlock"] = str(from_block)

        try:
            resp = await self._client.get(f"{self.base_url}/api/history", params=params)
        except httpx.HTTPError as e:
            raise ClientFetchError(f"/api/history request failed: {e!r}") from e

        if resp.status_code != 200:
            raise ClientFetchError(f"/api/history returned {resp.status_code}")

        try:
            data = resp.json()
        except ValueError as e:
            raise ClientFetchError("/api/history returned invalid JSON") from e

        if not isinstance(data, dict) or not isinstance(data.get("trades"), list):
            raise ClientFetchError(f"Unexpected payload: {data!r}")

        to_block = data.get("toBlock")
        return HistoryPage(
            trades=[_parse_trade(row) for row in data["trades"]],
            to_block=to_block if isinstance(to_block, int) else None,
        )

    async def fetch_trades(self, ca: str) -> list[Trade]:
        return (await self.fetch_history(ca)).trades


class TokenMetaClient:
    """
    Token metadata straight from the explorer (does not go through the API).
    url_template contains "{address}".
    """

    def __init__(
        self,
        url_template: str,
        timeout_s: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.url_template = url_template
        self._client = httpx.AsyncClient(timeout=timeout_s, transport=transport)

    async def aclose(self) -> None:
        await self._client.aclose()

    async def fetch(self, address: str) -> Optional[TokenMeta]:
        try:
            url = self.url_template.format(address=address)
            resp = await self._client.get(url)
            resp.raise_for_status()
            data = resp.json()
            return TokenMeta(name=data["name"], symbol=data["symbol"], logo_url=data.get("logoURI"))
        except Exception as e:
            log.error("Token meta fetch failed address=%s error=%s", address, repr(e))
            return None
