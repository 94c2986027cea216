"""
Result Feed - In-memory circular buffers of monitor results.
Provides real-time streaming via SSE.
"""
import asyncio
import logging
from collections import deque
from typing import Deque, Dict, List

from models import ProbeResult

logger = logging.getLogger("ReachProbe.ResultFeed")


class MonitorFeed:
    """
    Keeps the most recent results of every monitor and fans new ones out
    to SSE subscribers.
    """

    def __init__(self, max_results: int = 500):
        self.max_results = max_results
        self.results: Dict[str, Deque[ProbeResult]] = {}
        self.subscribers: Dict[str, List[asyncio.Queue]] = {}
        self._lock = asyncio.Lock()

    def sink(self, monitor_id: str):
        """Result callback bound to one monitor"""
        async def on_result(result: ProbeResult):
            await self.emit(monitor_id, result)
        return on_result

    async def emit(self, monitor_id: str, result: ProbeResult):
        """Add a new result and notify all subscribers of that monitor"""
        async with self._lock:
            buffer = self.results.setdefault(monitor_id, deque(maxlen=self.max_results))
            buffer.append(result)
            logger.debug(f"Monitor {monitor_id}: {result.method.value} success={result.success}")

            dead_queues = []
            for queue in self.subscribers.get(monitor_id, []):
                try:
                    queue.put_nowait(result)
                except asyncio.QueueFull:
                    # Subscriber is too slow - mark for removal
                    dead_queues.append(queue)

            for q in dead_queues:
                self.subscribers[monitor_id].remove(q)

    def get_recent(self, monitor_id: str, limit: int = 100) -> List[dict]:
        results = list(self.results.get(monitor_id, ()))[-limit:]
        return [r.to_dict() for r in results]

    async def subscribe(self, monitor_id: str) -> asyncio.Queue:
        queue: asyncio.Queue = asyncio.Queue(maxsize=100)
        async with self._lock:
            self.subscribers.setdefault(monitor_id, []).append(queue)
        logger.info(f"New subscriber for monitor {monitor_id}")
        return queue

    async def unsubscribe(self, monitor_id: str, queue: asyncio.Queue):
        async with self._lock:
            queues = self.subscribers.get(monitor_id, [])
            if queue in queues:
                queues.remove(queue)
        logger.info(f"Subscriber for monitor {monitor_id} removed")

    def drop(self, monitor_id: str):
        self.results.pop(monitor_id, None)
        self.subscribers.pop(monitor_id, None)
