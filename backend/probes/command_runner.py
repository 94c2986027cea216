"""Execution of the external ping tool"""
import asyncio
import logging
import sys
from dataclasses import dataclass
from typing import List, Optional

logger = logging.getLogger("ReachProbe.CommandRunner")


@dataclass
class CommandOutput:
    returncode: int
    stdout: str


def build_ping_command(host: str, count: int, timeout_s: int, platform: Optional[str] = None) -> List[str]:
    """Argument syntax of the native ping differs per OS"""
    platform = platform or sys.platform
    if platform.startswith("win"):
        return ["ping", "-n", str(count), "-w", str(timeout_s * 1000), host]
    if platform == "darwin":
        return ["ping", "-c", str(count), "-t", str(timeout_s), host]
    return ["ping", "-c", str(count), "-W", str(timeout_s), host]


class CommandRunner:
    """Runs an external command and captures its text output"""

    async def run(self, argv: List[str], timeout_s: float) -> CommandOutput:
        """
        Raises asyncio.TimeoutError once the process has been killed
        for exceeding timeout_s.
        """
        raise NotImplementedError("Subclasses must implement run()")


class SubprocessRunner(CommandRunner):

    async def run(self, argv: List[str], timeout_s: float) -> CommandOutput:
        process = await asyncio.create_subprocess_exec(
            *argv,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.DEVNULL,
        )
        try:
            stdout, _ = await asyncio.wait_for(process.communicate(), timeout=timeout_s)
        except asyncio.TimeoutError:
            logger.debug(f"Killing {argv[0]} (pid {process.pid}) after {timeout_s}s")
            self._kill(process)
            await process.wait()
            raise
        finally:
            # Reap on cancellation too
            if process.returncode is None:
                self._kill(process)
                await process.wait()

        return CommandOutput(
            returncode=process.returncode,
            stdout=stdout.decode(errors="replace"),
        )

    @staticmethod
    def _kill(process: asyncio.subprocess.Process):
        try:
            process.kill()
        except ProcessLookupError:
            pass
