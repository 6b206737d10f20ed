from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Dict, List, Optional

from swapchart.candles.aggregator import fold_trades
from swapchart.models.market import Candle, Trade


@dataclass
class CandleBook:
    """
    Incremental candle set for one token.

    buckets[bucket_start] -> candle (still open to new trades)
    cursor -> last block already scanned; the next fetch starts at cursor + 1
    latest_price -> price of the last trade applied
    """
    interval_seconds: int = 60
    buckets: Dict[int, Candle] = field(default_factory=dict)
    cursor: Optional[int] = None
    latest_price: Optional[float] = None

    def next_block(self) -> Optional[int]:
        return None if self.cursor is None else self.cursor + 1

    def apply(self, trades: List[Trade], to_block: Optional[int] = None) -> None:
        """
        Merge a new batch of trades (those after the cursor) and advance the cursor.
        Trades are folded after everything applied before, in the order given.
        """
        fold_trades(self.buckets, trades, self.interval_seconds)
        if trades:
            self.latest_price = trades[-1].price
        if to_block is not None and (self.cursor is None or to_block > self.cursor):
            self.cursor = to_block

    def candles(self) -> List[Candle]:
        """Sorted snapshot; the returned candles are copies and never change after the call."""
        return [replace(self.buckets[k]) for k in sorted(self.buckets)]

    def is_empty(self) -> bool:
        return not self.buckets

    def reset(self) -> None:
        self.buckets.clear()
        self.cursor = None
        self.latest_price = None
