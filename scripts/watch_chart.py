import argparse
import asyncio
import logging
import os
import sys

# Add repo root to Python import path so `import swapchart...` works
sys.path.insert(0, os.path.dirname(os.path.dirname(__file__)))

from swapchart.client.api_client import HistoryClient, TokenMetaClient
from swapchart.client.renderer import ConsoleChartRenderer
from swapchart.client.view import ChartView
from swapchart.config import get_settings


async def run(ca: str, minutes: float, rows: int, full: bool) -> None:
    """
    Polls the running API for `ca` and redraws a text chart on every refresh.
    Stops after `minutes` (0 = until Ctrl+C).
    """
    settings = get_settings()
    history = HistoryClient(settings.api_base_url, timeout_s=settings.http_timeout_seconds)
    meta = TokenMetaClient(settings.token_meta_url, timeout_s=settings.http_timeout_seconds)

    view = ChartView(
        history=history,
        renderer=ConsoleChartRenderer(height=rows),
        meta_client=meta,
        candle_interval_seconds=settings.candle_interval_seconds,
        poll_interval_seconds=settings.poll_interval_seconds,
        incremental=not full,
    )

    try:
        view.set_address(ca)
        if minutes > 0:
            await asyncio.sleep(minutes * 60)
        else:
            await asyncio.Event().wait()
    finally:
        if view.token_meta is not None:
            print(f"{view.token_meta.name} ({view.token_meta.symbol})")
        if view.latest_price is not None:
            print(f"Latest: ${view.latest_price:.8f}")
        await view.dispose()
        await history.aclose()
        await meta.aclose()


def main() -> None:
    settings = get_settings()
    parser = argparse.ArgumentParser()
    parser.add_argument("--ca", default=settings.default_token_address, help="Token contract address")
    parser.add_argument("--minutes", type=float, default=0, help="How long to watch (0 = forever)")
    parser.add_argument("--rows", type=int, default=20, help="Candles shown per redraw")
    parser.add_argument("--full", action="store_true", help="Re-read full history on every poll")
    args = parser.parse_args()

    logging.basicConfig(level=settings.log_level.upper())
    try:
        asyncio.run(run(args.ca, args.minutes, args.rows, args.full))
    except KeyboardInterrupt:
        pass


if __name__ == "__main__":
    main()
