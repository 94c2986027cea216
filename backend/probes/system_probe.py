"""System ping probe (native ping command)"""
import asyncio
import logging
from typing import Optional

from models import ProbeMethod, ProbeResult
from .base import BaseProbe
from .command_runner import CommandRunner, SubprocessRunner, build_ping_command
from .output_parser import parse_ping_output

logger = logging.getLogger("ReachProbe.SystemProbe")


class SystemPingProbe(BaseProbe):
    """Runs the platform ping binary and parses its round-trip times"""

    method = ProbeMethod.SYSTEM

    def __init__(self, packet_count: int = 2, runner: Optional[CommandRunner] = None,
                 platform: Optional[str] = None):
        self.packet_count = packet_count
        self.runner = runner or SubprocessRunner()
        self.platform = platform

    async def check(self, host: str, timeout_ms: int = 5000) -> ProbeResult:
        """
        The per-reply wait handed to ping is whole seconds (at least 1),
        while the process as a whole is bounded by timeout_ms.
        """
        timeout_s = max(timeout_ms // 1000, 1)
        argv = build_ping_command(host, self.packet_count, timeout_s, self.platform)

        try:
            output = await self.runner.run(argv, timeout_ms / 1000.0)
        except asyncio.TimeoutError:
            return ProbeResult.failed(self.method, "System ping timeout")
        except Exception as e:
            logger.debug(f"System ping could not run for {host}: {e}")
            return ProbeResult.failed(self.method, f"System ping failed: {e}")

        if output.returncode != 0:
            return ProbeResult.failed(
                self.method, f"System ping failed with exit code {output.returncode}"
            )

        latency = parse_ping_output(output.stdout)
        if latency <= 0:
            logger.debug(f"Unparseable ping output for {host}: {output.stdout!r}")
            return ProbeResult.failed(self.method, "Could not parse latency from ping output")

        return ProbeResult.ok(self.method, latency)
