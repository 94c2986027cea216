"""ICMP echo reachability probe"""
import asyncio
import logging
import socket
import time
from typing import Optional
from ping3 import ping

from models import ProbeMethod, ProbeResult
from .base import BaseProbe, resolve_host

logger = logging.getLogger("ReachProbe.IcmpProbe")


class IcmpProbe(BaseProbe):
    """Repeated ICMP echo checks against a host, independent of any port"""

    method = ProbeMethod.ICMP

    def __init__(self, attempts: int = 3, pause_ms: int = 100):
        self.attempts = attempts
        self.pause_ms = pause_ms

    async def check(self, host: str, timeout_ms: int = 5000) -> ProbeResult:
        """
        Perform up to `attempts` echo requests, each bounded by
        timeout_ms / attempts, and average the elapsed time of the
        ones that got a reply.

        Args:
            host: Target hostname or IP
            timeout_ms: Overall budget in milliseconds

        Returns:
            ProbeResult with method "icmp"
        """
        try:
            address = await resolve_host(host, socket.AF_INET)
            per_attempt_s = (timeout_ms / self.attempts) / 1000.0

            total_ms = 0
            success_count = 0

            for attempt in range(self.attempts):
                elapsed_ms = await self._echo(address, per_attempt_s)
                if elapsed_ms is not None:
                    total_ms += elapsed_ms
                    success_count += 1

                # Small delay between attempts
                if attempt < self.attempts - 1:
                    await asyncio.sleep(self.pause_ms / 1000.0)

            if success_count == 0:
                return ProbeResult.failed(self.method, "Host not reachable via icmp")

            return ProbeResult.ok(self.method, total_ms // success_count)

        except Exception as e:
            logger.debug(f"ICMP probe failed for {host}: {e}")
            return ProbeResult.failed(self.method, f"ICMP ping failed: {e}")

    async def _echo(self, address: str, timeout_s: float) -> Optional[int]:
        """
        One echo request on the thread pool.
        Returns elapsed wall-clock ms on reply, None on timeout or error.
        """
        loop = asyncio.get_running_loop()
        try:
            return await loop.run_in_executor(None, _timed_ping, address, timeout_s)
        except Exception as e:
            logger.debug(f"Ping error for {address}: {e}")
            return None


def _timed_ping(address: str, timeout_s: float) -> Optional[int]:
    # Timed on the worker thread, time spent queued for a free worker is excluded
    start = time.perf_counter()
    # ping3 returns seconds, None on timeout, or False on error
    reply = ping(address, timeout=timeout_s)
    end = time.perf_counter()

    if reply is None or reply is False:
        logger.debug(f"Ping returned {reply} for {address}")
        return None

    return int((end - start) * 1000)
