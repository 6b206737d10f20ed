import asyncio


async def settle(rounds: int = 20) -> None:
    """Let every ready task run a few steps."""
    for _ in range(rounds):
        await asyncio.sleep(0)


class ManualClock:
    """sleep() replacement: each call parks until the test releases it."""

    def __init__(self):
        self.delays = []
        self.waiters = []

    async def sleep(self, delay: float) -> None:
        self.delays.append(delay)
        ev = asyncio.Event()
        self.waiters.append(ev)
        await ev.wait()

    def tick(self) -> None:
        self.waiters[-1].set()
