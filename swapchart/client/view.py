from __future__ import annotations

import asyncio
import logging
import time
from typing import List, Optional

from swapchart.candles.book import CandleBook
from swapchart.client.api_client import HistoryClient, TokenMetaClient
from swapchart.client.renderer import ChartRenderer
from swapchart.errors import ClientFetchError
from swapchart.jobs.polling import CancelHandle, start_polling
from swapchart.models.market import Candle
from swapchart.models.token import TokenMeta

log = logging.getLogger("chart_view")


def placeholder_candles(now: Optional[int] = None) -> List[Candle]:
    """Five fake 1m candles ending a minute ago; shown while there is no data."""
    now = int(time.time()) if now is None else now
    return [
        Candle(bucket_start=now - n * 60, open=1.0 + i / 10, high=1.2 + i / 10, low=0.9 + i / 10, close=1.1 + i / 10)
        for i, n in enumerate((5, 4, 3, 2, 1))
    ]


class ChartView:
    """
    One chart page for one token address at a time.

    - set_address(): cancels the running poller, resets state, fetches now and every poll interval
    - load_chart(): manual refresh of trades + metadata
    - refresh(): fetch new trades -> fold into candles -> renderer.set_data()
    - dispose(): stops polling and releases the renderer

    With incremental=True only blocks after the last scanned one are requested
    and merged into the existing candles; otherwise every refresh re-reads the
    full history and replaces the candles.
    """

    def __init__(
        self,
        history: HistoryClient,
        renderer: ChartRenderer,
        meta_client: Optional[TokenMetaClient] = None,
        candle_interval_seconds: int = 60,
        poll_interval_seconds: float = 15.0,
        incremental: bool = True,
        sleep=asyncio.sleep,
    ) -> None:
        self.history = history
        self.renderer = renderer
        self.meta_client = meta_client
        self.poll_interval_seconds = poll_interval_seconds
        self.incremental = incremental
        self._sleep = sleep

        self.ca: str = ""
        self.book = CandleBook(interval_seconds=candle_interval_seconds)
        self.candles: List[Candle] = []
        self.latest_price: Optional[float] = None
        self.token_meta: Optional[TokenMeta] = None

        self._handle: Optional[CancelHandle] = None
        self._meta_task: Optional[asyncio.Task] = None
        self._lock = asyncio.Lock()
        self._generation = 0
        self._disposed = False

    # -------------------------
    # Lifecycle
    # -------------------------
    def set_address(self, ca: str) -> None:
        """Must be called from a running event loop."""
        if self._disposed:
            raise RuntimeError("view is disposed")

        self._stop()
        self._generation += 1
        self.ca = ca.strip()
        self.book.reset()
        self.candles = []
        self.latest_price = None
        self.token_meta = None

        if not self.ca:
            return

        log.info("Address changed ca=%s, polling every %ss", self.ca, self.poll_interval_seconds)
        if self.meta_client is not None:
            self._meta_task = asyncio.create_task(self.refresh_meta())
        self._handle = start_polling(self.refresh, self.poll_interval_seconds, sleep=self._sleep)

    async def load_chart(self) -> None:
        await self.refresh()
        await self.refresh_meta()

    async def dispose(self) -> None:
        if self._disposed:
            return
        self._disposed = True
        handle, meta_task = self._handle, self._meta_task
        self._stop()
        if handle is not None:
            await handle.wait()
        if meta_task is not None:
            try:
                await meta_task
            except asyncio.CancelledError:
                pass
        self.renderer.dispose()

    def _stop(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None
        if self._meta_task is not None:
            self._meta_task.cancel()
            self._meta_task = None

    @property
    def polling(self) -> bool:
        return self._handle is not None and not self._handle.cancelled

    # -------------------------
    # Data
    # -------------------------
    async def refresh(self) -> None:
        if not self.ca:
            return

        async with self._lock:
            generation, ca = self._generation, self.ca
            from_block = self.book.next_block() if self.incremental else None

            try:
                page = await self.history.fetch_history(ca, from_block=from_block)
            except ClientFetchError as e:
                log.error("Fetching trades failed ca=%s error=%s", ca, e)
                if generation == self._generation:
                    self.book.reset()
                    self._publish()
                return

            # Address changed while the request was in flight.
            if generation != self._generation:
                return

            if not self.incremental or page.to_block is None:
                self.book.reset()
            self.book.apply(page.trades, page.to_block)
            log.info("Fetched trades ca=%s new=%d cursor=%s", ca, len(page.trades), self.book.cursor)
            self._publish()

    async def refresh_meta(self) -> None:
        if not self.ca or self.meta_client is None:
            return
        generation = self._generation
        meta = await self.meta_client.fetch(self.ca)
        if generation == self._generation:
            self.token_meta = meta

    def _publish(self) -> None:
        self.candles = self.book.candles()
        self.latest_price = self.book.latest_price
        if self._disposed:
            return
        self.renderer.set_data(self.candles if self.candles else placeholder_candles())
