"""Rotating status messages shown while a generation request is outstanding."""

import asyncio

from styleswap.config import STATUS_TICK_SECONDS

STATUS_MESSAGES = [
    "Analysing body contours...",
    "Processing fabric texture...",
    "Balancing light and shadow...",
    "Fitting the outfit to the body...",
    "Adding the finishing touches...",
]


class StatusTicker:
    def __init__(self, messages: list[str] | None = None, interval: float = STATUS_TICK_SECONDS):
        self.messages = messages or STATUS_MESSAGES
        self.interval = interval
        self.index = 0
        self._task: asyncio.Task | None = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    @property
    def message(self) -> str:
        return self.messages[self.index]

    def start(self) -> None:
        """Begin cycling from the first message. Must be called inside a running loop."""
        if self.running:
            return
        self.index = 0
        self._task = asyncio.get_running_loop().create_task(self._run())

    def stop(self) -> None:
        if self._task is not None:
            self._task.cancel()
            self._task = None

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self.interval)
            self.index = (self.index + 1) % len(self.messages)
