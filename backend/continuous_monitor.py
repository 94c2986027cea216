"""
Continuous Monitor - repeating probe loops with cooperative cancellation.
"""
import asyncio
import inspect
import logging
import uuid
from typing import Any, Callable, Dict, List, Optional

from models import HostTarget, ProbeMethod, ProbeResult
from probe_orchestrator import ProbeOrchestrator

logger = logging.getLogger("ReachProbe.ContinuousMonitor")

ResultSink = Callable[[ProbeResult], Any]

RUNNING = "RUNNING"
CANCELLED = "CANCELLED"


class MonitorHandle:
    """
    Owns one repeating probe loop.
    Cancellation is checked between iterations and is idempotent.
    """

    def __init__(self, target: HostTarget, interval_ms: int, monitor_id: Optional[str] = None):
        self.id = monitor_id or str(uuid.uuid4())
        self.target = target
        self.interval_ms = interval_ms
        self.task: Optional[asyncio.Task] = None
        self._cancelled = asyncio.Event()

    @property
    def cancelled(self) -> bool:
        return self._cancelled.is_set()

    @property
    def state(self) -> str:
        return CANCELLED if self.cancelled else RUNNING

    def cancel(self):
        self._cancelled.set()

    async def wait(self, seconds: float):
        """Sleep between iterations, waking early on cancel"""
        if seconds <= 0:
            await asyncio.sleep(0)
            return
        try:
            await asyncio.wait_for(self._cancelled.wait(), timeout=seconds)
        except asyncio.TimeoutError:
            pass

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "host": self.target.host,
            "port": self.target.port,
            "interval_ms": self.interval_ms,
            "state": self.state,
        }


class ContinuousMonitor:
    def __init__(self, orchestrator: ProbeOrchestrator, timeout_ms: int = 5000):
        self.orchestrator = orchestrator
        self.timeout_ms = timeout_ms
        self.handles: Dict[str, MonitorHandle] = {}

    def start(self, host: str, port: int = 80, interval_ms: int = 5000,
              on_result: Optional[ResultSink] = None, monitor_id: Optional[str] = None) -> MonitorHandle:
        """Start a probe loop on the running event loop and return its handle"""
        target = HostTarget(host=host, port=port, timeout_ms=self.timeout_ms)
        handle = MonitorHandle(target, interval_ms, monitor_id)
        handle.task = asyncio.create_task(self._run_loop(handle, on_result or _discard))
        self.handles[handle.id] = handle
        logger.info(f"Monitor {handle.id} started for {target.key} every {interval_ms}ms")
        return handle

    def cancel(self, handle: MonitorHandle):
        if handle.cancelled:
            return
        handle.cancel()
        logger.info(f"Monitor {handle.id} for {handle.target.key} cancelled")

    def get(self, monitor_id: str) -> Optional[MonitorHandle]:
        return self.handles.get(monitor_id)

    def list_monitors(self) -> List[MonitorHandle]:
        return list(self.handles.values())

    async def _run_loop(self, handle: MonitorHandle, on_result: ResultSink):
        interval_s = handle.interval_ms / 1000.0
        try:
            await self._iterate(handle, on_result, interval_s)
        finally:
            # The registry only holds monitors whose loop is still alive
            if self.handles.get(handle.id) is handle:
                del self.handles[handle.id]
            logger.info(f"Monitor {handle.id} loop exited")

    async def _iterate(self, handle: MonitorHandle, on_result: ResultSink, interval_s: float):
        while not handle.cancelled:
            try:
                result = await self.orchestrator.run(handle.target)
                # A probe in flight at cancel time finishes, but is not delivered
                if handle.cancelled:
                    break
                await _deliver(on_result, result)
            except Exception as e:
                logger.warning(f"Monitor {handle.id} iteration failed: {e}")
                if handle.cancelled:
                    break
                failure = ProbeResult.failed(ProbeMethod.CONTINUOUS, f"Continuous ping error: {e}")
                try:
                    await _deliver(on_result, failure)
                except Exception:
                    logger.exception(f"Monitor {handle.id} could not deliver failure result")

            await handle.wait(interval_s)

    async def shutdown(self):
        """Cancel every monitor and wait for the loops to exit"""
        tasks = []
        for handle in list(self.handles.values()):
            self.cancel(handle)
            if handle.task is not None:
                tasks.append(handle.task)
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
        self.handles.clear()


async def _deliver(on_result: ResultSink, result: ProbeResult):
    outcome = on_result(result)
    if inspect.isawaitable(outcome):
        await outcome


def _discard(result: ProbeResult):
    pass
