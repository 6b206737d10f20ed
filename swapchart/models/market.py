from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class RawLog:
    """
    RawLog = one swap-event log as returned by eth_getLogs.

    block_number: block the log was emitted in
    tx_hash: transaction that emitted it
    log_index: position of the log inside the block
    topics: indexed event fields (topics[0] is the event signature)
    data: hex-encoded non-indexed event fields
    """
    block_number: int
    tx_hash: str
    log_index: int
    topics: tuple[str, ...]
    data: str


@dataclass(frozen=True)
class SwapLogs:
    """Swap logs of one pair for the scanned block range [from_block, to_block]."""
    pair_address: str
    from_block: int
    to_block: int
    logs: list[RawLog] = field(default_factory=list)


@dataclass(frozen=True)
class Trade:
    """
    Trade = a single decoded swap.

    timestamp: unix seconds of the block the swap landed in
    tx_hash: transaction hash
    price: swapped amount of the token, scaled by its decimals
    """
    timestamp: int
    tx_hash: str
    price: float

    def to_json(self) -> dict:
        return {"timestamp": self.timestamp, "txHash": self.tx_hash, "price": self.price}


@dataclass
class Candle:
    """
    Candle (OHLC) for one fixed-width time bucket.

    bucket_start: unix seconds, a multiple of the interval
    open/high/low/close: prices folded into the bucket, in processing order
    """
    bucket_start: int
    open: float
    high: float
    low: float
    close: float

    @classmethod
    def first(cls, bucket_start: int, price: float) -> "Candle":
        return cls(bucket_start=bucket_start, open=price, high=price, low=price, close=price)

    def update(self, price: float) -> None:
        """Fold one more trade price into this candle."""
        self.high = max(self.high, price)
        self.low = min(self.low, price)
        self.close = price

    def to_chart(self) -> dict:
        return {
            "time": self.bucket_start,
            "open": self.open,
            "high": self.high,
            "low": self.low,
            "close": self.close,
        }
