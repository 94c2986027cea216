"""TCP connect timing probe"""
import asyncio
import logging
import time

from models import ProbeMethod, ProbeResult
from .base import BaseProbe, resolve_host

logger = logging.getLogger("ReachProbe.TcpProbe")


class TcpProbe(BaseProbe):
    """Times a single TCP handshake against host:port"""

    method = ProbeMethod.TCP

    def __init__(self, timeout_cap_ms: int = 3000):
        self.timeout_cap_ms = timeout_cap_ms

    async def check(self, host: str, port: int = 80, timeout_ms: int = 5000) -> ProbeResult:
        writer = None
        try:
            address = await resolve_host(host)
            timeout_s = min(timeout_ms, self.timeout_cap_ms) / 1000.0

            start = time.perf_counter()
            _, writer = await asyncio.wait_for(
                asyncio.open_connection(address, port), timeout=timeout_s
            )
            latency_ms = int((time.perf_counter() - start) * 1000)

            logger.debug(f"TCP connect to {host}:{port} took {latency_ms}ms")
            return ProbeResult.ok(self.method, latency_ms)

        except asyncio.TimeoutError:
            return ProbeResult.failed(self.method, "TCP connection timeout")
        except ConnectionRefusedError:
            return ProbeResult.failed(self.method, "TCP connection refused")
        except Exception as e:
            logger.debug(f"TCP probe failed for {host}:{port}: {e}")
            return ProbeResult.failed(self.method, f"TCP ping failed: {e}")
        finally:
            if writer is not None:
                writer.close()
                try:
                    await writer.wait_closed()
                except OSError as e:
                    logger.debug(f"Error closing connection to {host}:{port}: {e}")
