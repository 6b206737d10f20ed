from __future__ import annotations

from typing import Dict, Iterable, List

from swapchart.models.market import Candle, Trade


def bucket_start(ts: int, interval_seconds: int) -> int:
    """Round a unix timestamp down to the start of its interval bucket."""
    return (ts // interval_seconds) * interval_seconds


def fold_trades(buckets: Dict[int, Candle], trades: Iterable[Trade], interval_seconds: int) -> None:
    """
    Fold trades into `buckets` in iteration order.

    First trade of a bucket opens it (O=H=L=C=price); every later one
    updates high/low and overwrites close.
    """
    for trade in trades:
        start = bucket_start(trade.timestamp, interval_seconds)
        candle = buckets.get(start)
        if candle is None:
            buckets[start] = Candle.first(start, trade.price)
        else:
            candle.update(trade.price)


def aggregate(
    trades: Iterable[Trade],
    interval_seconds: int = 60,
    chronological: bool = False,
) -> List[Candle]:
    """
    Group trades into fixed-width OHLC candles, ascending by bucket start.

    By default trades are folded in the order given, so open/close are the
    first/last trade *processed* per bucket. chronological=True sorts by
    timestamp first (stable, so same-second trades keep their order).
    """
    if interval_seconds <= 0:
        raise ValueError("interval_seconds must be positive")

    if chronological:
        trades = sorted(trades, key=lambda t: t.timestamp)

    buckets: Dict[int, Candle] = {}
    fold_trades(buckets, trades, interval_seconds)
    return [buckets[k] for k in sorted(buckets)]
