import asyncio
import logging
from typing import Dict, Iterable, Tuple

from models import HostTarget, ProbeResult
from probe_orchestrator import ProbeOrchestrator

logger = logging.getLogger("ReachProbe.BatchProber")


class BatchProber:
    def __init__(self, orchestrator: ProbeOrchestrator, concurrency: int = 32):
        self.orchestrator = orchestrator
        # Caps open sockets and child processes across a large batch
        self.semaphore = asyncio.Semaphore(concurrency)

    async def _run_with_limit(self, target: HostTarget) -> Tuple[str, ProbeResult]:
        """Probe one target with semaphore to limit concurrent sockets"""
        async with self.semaphore:
            return target.key, await self.orchestrator.run(target)

    async def run_batch(self, targets: Iterable[Tuple[str, int]], timeout_ms: int = 5000,
                        use_icmp: bool = True, use_tcp: bool = True) -> Dict[str, ProbeResult]:
        """
        Probe every (host, port) pair concurrently.

        Returns:
            Mapping of "host:port" to that target's best result. Duplicate
            pairs collapse onto one key.
        """
        unique: Dict[str, HostTarget] = {}
        for host, port in targets:
            target = HostTarget(host=host, port=port, timeout_ms=timeout_ms,
                                use_icmp=use_icmp, use_tcp=use_tcp)
            unique.setdefault(target.key, target)

        logger.debug(f"Batch probing {len(unique)} targets")
        pairs = await asyncio.gather(*(self._run_with_limit(t) for t in unique.values()))
        return dict(pairs)
