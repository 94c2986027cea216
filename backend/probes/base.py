"""Base classes for probe strategies"""
import asyncio
import socket

from models import ProbeMethod, ProbeResult


async def resolve_host(host: str, family: int = socket.AF_UNSPEC) -> str:
    """Resolve a host name to its first address using the loop's resolver"""
    loop = asyncio.get_running_loop()
    infos = await loop.getaddrinfo(host, None, family=family, type=socket.SOCK_STREAM)
    if not infos:
        raise socket.gaierror(f"No address found for {host}")
    return infos[0][4][0]


class BaseProbe:
    """Base class for all probe strategies"""

    method: ProbeMethod

    async def check(self, host: str, **kwargs) -> ProbeResult:
        """
        Estimate reachability of the given host.
        Must never raise: failures come back as a failed ProbeResult.
        """
        raise NotImplementedError("Subclasses must implement check()")
