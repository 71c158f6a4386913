import asyncio
from logging import getLogger
from typing import Awaitable, Callable

from ..domain.events import LifecycleEvent

logger = getLogger(__name__)

EventHandler = Callable[[LifecycleEvent], Awaitable[None]]


class SessionEventDispatcher:
    """
    VCごとにキューとワーカータスクを1つずつ持ち、同じVCのイベントを到着順に処理する
    異なるVCのイベントは並行に処理される
    """

    def __init__(self, handler: EventHandler):
        self._handler = handler
        self._queues: dict[int, asyncio.Queue[LifecycleEvent]] = {}
        self._workers: dict[int, asyncio.Task] = {}

    @property
    def pending_channels(self) -> int:
        return len(self._workers)

    def dispatch(self, event: LifecycleEvent) -> None:
        key = event.voice_channel_id
        queue = self._queues.get(key)
        if queue is None:
            queue = self._queues[key] = asyncio.Queue()
        queue.put_nowait(event)
        if key not in self._workers:
            self._workers[key] = asyncio.create_task(
                self._drain(key, queue), name=f"vc-session-{key}"
            )

    def dispatch_all(self, events: list[LifecycleEvent]) -> None:
        for event in events:
            self.dispatch(event)

    async def join(self) -> None:
        """すべてのキューが空になるまで待つ"""
        while self._workers:
            await asyncio.gather(*self._workers.values(), return_exceptions=True)

    async def close(self) -> None:
        workers = list(self._workers.values())
        for task in workers:
            task.cancel()
        await asyncio.gather(*workers, return_exceptions=True)

    async def _drain(self, key: int, queue: asyncio.Queue[LifecycleEvent]) -> None:
        try:
            while True:
                try:
                    event = queue.get_nowait()
                except asyncio.QueueEmpty:
                    break
                try:
                    await self._handler(event)
                except Exception:
                    logger.exception(f"Failed to handle {type(event).__name__} for {key}")
        finally:
            # QueueEmptyからここまでawaitを挟まないので取りこぼしは起きない
            self._workers.pop(key, None)
            self._queues.pop(key, None)
