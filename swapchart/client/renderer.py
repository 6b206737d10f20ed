from __future__ import annotations

import sys
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import List, Optional, TextIO

from swapchart.models.market import Candle


class ChartRenderer(ABC):
    """
    Chart contract (interface).

    One renderer per view. set_data() replaces the whole series,
    dispose() releases it; nothing may be drawn afterwards.
    """

    @abstractmethod
    def set_data(self, candles: List[Candle]) -> None:
        raise NotImplementedError

    @abstractmethod
    def resize(self, width: int, height: int) -> None:
        raise NotImplementedError

    @abstractmethod
    def dispose(self) -> None:
        raise NotImplementedError


class ConsoleChartRenderer(ChartRenderer):
    """
    Text chart: one row per candle (newest last), a bar spanning low..high
    with the open/close body marked.

    width: characters per row
    height: number of candles shown
    """

    def __init__(self, stream: Optional[TextIO] = None, width: int = 80, height: int = 20) -> None:
        self.stream = stream or sys.stdout
        self.width = width
        self.height = height
        self.series: Optional[List[Candle]] = None
        self.disposed = False

    def _ensure_series(self) -> List[Candle]:
        if self.disposed:
            raise RuntimeError("renderer is disposed")
        if self.series is None:
            self.series = []
        return self.series

    def set_data(self, candles: List[Candle]) -> None:
        series = self._ensure_series()
        series[:] = candles
        self.draw()

    def resize(self, width: int, height: int) -> None:
        self._ensure_series()
        self.width = max(width, 40)
        self.height = max(height, 1)
        self.draw()

    def dispose(self) -> None:
        self.series = None
        self.disposed = True

    def render_lines(self) -> List[str]:
        rows = (self.series or [])[-self.height:]
        if not rows:
            return ["(no candles)"]

        lo = min(c.low for c in rows)
        hi = max(c.high for c in rows)
        label_w = 40
        bar_w = max(self.width - label_w, 10)
        span = (hi - lo) or 1.0

        def col(price: float) -> int:
            return int((price - lo) / span * (bar_w - 1))

        lines = []
        for c in rows:
            ts = datetime.fromtimestamp(c.bucket_start, tz=timezone.utc).strftime("%m-%d %H:%M")
            bar = [" "] * bar_w
            for i in range(col(c.low), col(c.high) + 1):
                bar[i] = "-"
            body_lo, body_hi = sorted((col(c.open), col(c.close)))
            mark = "#" if c.close >= c.open else "="
            for i in range(body_lo, body_hi + 1):
                bar[i] = mark
            label = f"{ts} O={c.open:.4g} C={c.close:.4g}"
            lines.append(f"{label:<{label_w}}{''.join(bar)}")
        return lines

    def draw(self) -> None:
        self.stream.write("\n".join(self.render_lines()) + "\n")
        self.stream.flush()
