import asyncio
import logging
from typing import Dict, Iterable, Optional, Tuple

from batch_prober import BatchProber
from continuous_monitor import ContinuousMonitor, MonitorHandle, ResultSink
from models import HostTarget, ProbeResult
from network_gate import NetworkAvailabilityGate
from probe_orchestrator import ProbeOrchestrator
from probes import IcmpProbe, TcpProbe, SystemPingProbe
from settings import ProbeSettings, load_settings

logger = logging.getLogger("ReachProbe.Service")


def build_orchestrator(settings: ProbeSettings) -> ProbeOrchestrator:
    return ProbeOrchestrator(
        gate=NetworkAvailabilityGate(settings.connectivity_check_host, settings.connectivity_check_port),
        icmp_probe=IcmpProbe(attempts=settings.icmp_attempts, pause_ms=settings.icmp_attempt_pause_ms),
        tcp_probe=TcpProbe(timeout_cap_ms=settings.tcp_timeout_cap_ms),
        system_probe=SystemPingProbe(packet_count=settings.system_packets),
    )


class ProbeService:
    """Public entry points for probing; none of them raise on probe failure"""

    def __init__(self, settings: Optional[ProbeSettings] = None,
                 orchestrator: Optional[ProbeOrchestrator] = None):
        self.settings = settings or load_settings()
        self.orchestrator = orchestrator or build_orchestrator(self.settings)
        self.batch = BatchProber(self.orchestrator, self.settings.batch_concurrency)
        self.monitor = ContinuousMonitor(self.orchestrator, self.settings.default_timeout_ms)

    def reload_settings(self, settings: ProbeSettings):
        """Swap in new settings; running monitors pick up the new strategies on their next tick"""
        self.settings = settings
        fresh = build_orchestrator(settings)
        self.orchestrator.gate = fresh.gate
        self.orchestrator.icmp_probe = fresh.icmp_probe
        self.orchestrator.tcp_probe = fresh.tcp_probe
        self.orchestrator.system_probe = fresh.system_probe
        self.batch = BatchProber(self.orchestrator, settings.batch_concurrency)
        self.monitor.timeout_ms = settings.default_timeout_ms
        logging.getLogger().setLevel(settings.log_level)
        logger.info("Probe settings reloaded")

    async def probe_host(self, host: str, port: Optional[int] = None, timeout_ms: Optional[int] = None,
                         use_icmp: bool = True, use_tcp: bool = True) -> ProbeResult:
        target = HostTarget(
            host=host,
            port=port if port is not None else self.settings.default_port,
            timeout_ms=timeout_ms if timeout_ms is not None else self.settings.default_timeout_ms,
            use_icmp=use_icmp,
            use_tcp=use_tcp,
        )
        return await self.orchestrator.run(target)

    async def probe_hosts(self, targets: Iterable[Tuple[str, int]], timeout_ms: Optional[int] = None,
                          use_icmp: bool = True, use_tcp: bool = True) -> Dict[str, ProbeResult]:
        if timeout_ms is None:
            timeout_ms = self.settings.default_timeout_ms
        return await self.batch.run_batch(targets, timeout_ms, use_icmp, use_tcp)

    def start_monitor(self, host: str, port: Optional[int] = None, interval_ms: Optional[int] = None,
                      on_result: Optional[ResultSink] = None, monitor_id: Optional[str] = None) -> MonitorHandle:
        return self.monitor.start(
            host,
            port=port if port is not None else self.settings.default_port,
            interval_ms=interval_ms if interval_ms is not None else self.settings.monitor_interval_ms,
            on_result=on_result,
            monitor_id=monitor_id,
        )

    def cancel_monitor(self, handle: MonitorHandle):
        self.monitor.cancel(handle)

    async def get_network_type(self) -> str:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, self.orchestrator.gate.network_type)

    async def shutdown(self):
        await self.monitor.shutdown()
