import io
import unittest

from clock import ManualClock, settle

from swapchart.client.api_client import HistoryPage
from swapchart.client.renderer import ChartRenderer, ConsoleChartRenderer
from swapchart.client.view import ChartView, placeholder_candles
from swapchart.errors import ClientFetchError
from swapchart.models.market import Candle, Trade
from swapchart.models.token import TokenMeta

TOKEN_A = "0xaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaa"
TOKEN_B = "0xbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbb"


def trade(ts: int, price: float) -> Trade:
    return Trade(timestamp=ts, tx_hash="0x", price=price)


class FakeHistory:
    """Serves queued pages (or errors) in order; repeats an empty page when drained."""

    def __init__(self, *responses):
        self.responses = list(responses)
        self.calls = []

    async def fetch_history(self, ca, from_block=None):
        self.calls.append((ca, from_block))
        if not self.responses:
            return HistoryPage(trades=[], to_block=None)
        item = self.responses.pop(0)
        if isinstance(item, Exception):
            raise item
        return item


class FakeMeta:
    def __init__(self):
        self.calls = []

    async def fetch(self, address):
        self.calls.append(address)
        return TokenMeta(name="Puppy", symbol="PUP")


class RecordingRenderer(ChartRenderer):
    def __init__(self):
        self.frames = []
        self.sizes = []
        self.disposed = False

    def set_data(self, candles):
        self.frames.append(list(candles))

    def resize(self, width, height):
        self.sizes.append((width, height))

    def dispose(self):
        self.disposed = True


class TestChartView(unittest.IsolatedAsyncioTestCase):
    def view(self, history, **kwargs):
        self.clock = ManualClock()
        self.renderer = RecordingRenderer()
        v = ChartView(history, self.renderer, sleep=self.clock.sleep, **kwargs)
        self.addAsyncCleanup(v.dispose)
        return v

    async def test_fetches_now_then_on_each_tick(self):
        history = FakeHistory(
            HistoryPage(trades=[trade(0, 1), trade(30, 2)], to_block=10),
            HistoryPage(trades=[trade(61, 3)], to_block=20),
        )
        view = self.view(history)

        view.set_address(TOKEN_A)
        await settle()
        self.assertEqual(history.calls, [(TOKEN_A, None)])
        self.assertEqual(self.clock.delays, [15.0])

        self.clock.tick()
        await settle()
        self.assertEqual(history.calls, [(TOKEN_A, None), (TOKEN_A, 11)])
        self.assertEqual(
            view.candles,
            [
                Candle(bucket_start=0, open=1, high=2, low=1, close=2),
                Candle(bucket_start=60, open=3, high=3, low=3, close=3),
            ],
        )
        self.assertEqual(self.renderer.frames[-1], view.candles)
        self.assertEqual(view.latest_price, 3)

    async def test_address_change_cancels_old_timer(self):
        history = FakeHistory()
        view = self.view(history)

        view.set_address(TOKEN_A)
        await settle()
        old_handle = view._handle
        old_waiter = self.clock.waiters[-1]

        view.set_address(TOKEN_B)
        await settle()
        self.assertTrue(old_handle.cancelled)
        self.assertEqual(history.calls, [(TOKEN_A, None), (TOKEN_B, None)])

        old_waiter.set()
        self.clock.tick()
        await settle()

        self.assertEqual(history.calls, [(TOKEN_A, None), (TOKEN_B, None), (TOKEN_B, None)])

    async def test_failure_degrades_to_placeholder(self):
        history = FakeHistory(
            HistoryPage(trades=[trade(0, 1)], to_block=5),
            ClientFetchError("/api/history returned 500"),
        )
        view = self.view(history)

        view.set_address(TOKEN_A)
        await settle()
        self.assertEqual(len(view.candles), 1)

        with self.assertLogs("chart_view", level="ERROR"):
            self.clock.tick()
            await settle()

        self.assertEqual(view.candles, [])
        self.assertIsNone(view.latest_price)
        self.assertEqual(len(self.renderer.frames[-1]), 5)
        self.assertIsNone(view.book.cursor)

    async def test_full_refresh_mode_replaces_candles(self):
        history = FakeHistory(
            HistoryPage(trades=[trade(0, 1)], to_block=5),
            HistoryPage(trades=[trade(0, 4)], to_block=6),
        )
        view = self.view(history, incremental=False)

        view.set_address(TOKEN_A)
        await settle()
        self.clock.tick()
        await settle()

        self.assertEqual(history.calls, [(TOKEN_A, None), (TOKEN_A, None)])
        self.assertEqual(view.candles, [Candle(bucket_start=0, open=4, high=4, low=4, close=4)])

    async def test_load_chart_fetches_meta(self):
        meta = FakeMeta()
        history = FakeHistory(HistoryPage(trades=[trade(0, 1)], to_block=1))
        view = self.view(history, meta_client=meta)
        view.ca = TOKEN_A

        await view.load_chart()

        self.assertEqual(history.calls, [(TOKEN_A, None)])
        self.assertEqual(meta.calls, [TOKEN_A])
        self.assertEqual(view.token_meta.symbol, "PUP")

    async def test_empty_address_does_not_poll(self):
        history = FakeHistory()
        view = self.view(history)

        view.set_address("  ")
        await settle()

        self.assertFalse(view.polling)
        self.assertEqual(history.calls, [])

    async def test_dispose(self):
        view = self.view(FakeHistory())
        view.set_address(TOKEN_A)
        await settle()

        await view.dispose()
        await view.dispose()

        self.assertFalse(view.polling)
        self.assertTrue(self.renderer.disposed)
        with self.assertRaises(RuntimeError):
            view.set_address(TOKEN_B)


class TestPlaceholder(unittest.TestCase):
    def test_five_minutes_before_now(self):
        candles = placeholder_candles(now=1000)

        self.assertEqual([c.bucket_start for c in candles], [700, 760, 820, 880, 940])
        for c in candles:
            self.assertGreaterEqual(c.high, max(c.open, c.close))
            self.assertLessEqual(c.low, min(c.open, c.close))


class TestConsoleRenderer(unittest.TestCase):
    def test_draws_latest_rows(self):
        out = io.StringIO()
        renderer = ConsoleChartRenderer(stream=out, width=80, height=2)

        renderer.set_data([Candle(bucket_start=i * 60, open=1, high=2, low=0.5, close=1.5) for i in range(4)])

        self.assertEqual(len(renderer.render_lines()), 2)
        self.assertIn("O=1 C=1.5", out.getvalue())

    def test_resize_and_empty(self):
        out = io.StringIO()
        renderer = ConsoleChartRenderer(stream=out)

        renderer.resize(120, 5)
        self.assertEqual((renderer.width, renderer.height), (120, 5))
        self.assertEqual(renderer.render_lines(), ["(no candles)"])

    def test_disposed_renderer_rejects_data(self):
        renderer = ConsoleChartRenderer(stream=io.StringIO())
        renderer.dispose()

        with self.assertRaises(RuntimeError):
            renderer.set_data([])


if __name__ == "__main__":
    unittest.main()
