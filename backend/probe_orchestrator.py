import asyncio
import logging
from typing import Awaitable, List, Optional

from models import HostTarget, ProbeMethod, ProbeResult
from network_gate import NetworkAvailabilityGate
from probes import IcmpProbe, TcpProbe, SystemPingProbe

logger = logging.getLogger("ReachProbe.Orchestrator")


def select_best(results: List[ProbeResult]) -> ProbeResult:
    """
    Lowest-latency success wins; min() keeps the earliest entry on ties,
    so list order (icmp, tcp, system) breaks them.
    With no success, the last attempted result is reported as-is.
    """
    successful = [r for r in results if r.success]
    if successful:
        return min(successful, key=lambda r: r.latency_ms)
    if results:
        return results[-1]
    return ProbeResult.failed(ProbeMethod.NO_METHODS, "All ping methods failed")


class ProbeOrchestrator:
    """Runs the enabled strategies for one target concurrently and reduces them to one result"""

    def __init__(self, gate: Optional[NetworkAvailabilityGate] = None,
                 icmp_probe: Optional[IcmpProbe] = None,
                 tcp_probe: Optional[TcpProbe] = None,
                 system_probe: Optional[SystemPingProbe] = None):
        self.gate = gate or NetworkAvailabilityGate()
        self.icmp_probe = icmp_probe or IcmpProbe()
        self.tcp_probe = tcp_probe or TcpProbe()
        self.system_probe = system_probe or SystemPingProbe()

    def _build_checks(self, target: HostTarget) -> List[Awaitable[ProbeResult]]:
        checks = []
        if target.use_icmp:
            checks.append(self.icmp_probe.check(target.host, timeout_ms=target.timeout_ms))
        if target.use_tcp:
            checks.append(self.tcp_probe.check(target.host, port=target.port, timeout_ms=target.timeout_ms))
        # System ping always runs as the fallback
        checks.append(self.system_probe.check(target.host, timeout_ms=target.timeout_ms))
        return checks

    async def run(self, target: HostTarget) -> ProbeResult:
        try:
            loop = asyncio.get_running_loop()
            available = await loop.run_in_executor(None, self.gate.is_available)
            if not available:
                logger.debug(f"No network available, skipping probes for {target.key}")
                return ProbeResult.failed(ProbeMethod.NETWORK_CHECK, "No network connection available")

            tasks = [asyncio.ensure_future(c) for c in self._build_checks(target)]
            # Every strategy runs to completion before results are compared
            outcomes = await asyncio.gather(*tasks, return_exceptions=True)
            for outcome in outcomes:
                # gather() raises if this task is cancelled, so this strategy was cancelled on its own
                if isinstance(outcome, asyncio.CancelledError):
                    raise RuntimeError("Strategy task was cancelled")
                if isinstance(outcome, BaseException):
                    raise outcome

            best = select_best(list(outcomes))
            logger.debug(
                f"Probed {target.key}: {best.method.value} "
                f"success={best.success} latency={best.latency_ms}ms"
            )
            return best

        except asyncio.CancelledError:
            raise
        except Exception as e:
            logger.error(f"Probe orchestration failed for {target.key}: {e}")
            return ProbeResult.failed(ProbeMethod.EXCEPTION, f"Ping operation failed: {e}")
