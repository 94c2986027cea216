"""Connectivity precondition and network type detection"""
import logging
import socket
import sys
from typing import Optional
import psutil

logger = logging.getLogger("ReachProbe.NetworkGate")

WIFI_PREFIXES = ("wl", "wifi")
CELLULAR_PREFIXES = ("wwan", "rmnet", "ppp", "ccmni")
ETHERNET_PREFIXES = ("eth", "en", "em")
# Built-in Wi-Fi on macOS
DARWIN_WIFI = ("en0",)


def classify_interface(name: str, platform: Optional[str] = None) -> str:
    """Map an interface name onto a transport type"""
    platform = platform or sys.platform
    name_lower = name.lower()
    if platform == "darwin" and name_lower in DARWIN_WIFI:
        return "WiFi"
    if name_lower.startswith(WIFI_PREFIXES):
        return "WiFi"
    if name_lower.startswith(CELLULAR_PREFIXES):
        return "Cellular"
    if name_lower.startswith(ETHERNET_PREFIXES):
        return "Ethernet"
    return "Unknown"


def is_loopback(name: str, stats) -> bool:
    """psutil reports interface flags on POSIX, Windows only has the name"""
    if stats.flags:
        return "loopback" in stats.flags.split(",")
    return name.lower().startswith("loopback") or name in ("lo", "lo0")


class NetworkAvailabilityGate:
    """
    Decides whether any internet-capable network path is up.

    The active network is the interface owning the local address the
    kernel would use to reach `check_host`. Connecting a UDP socket only
    consults the routing table, no packet leaves the machine.
    """

    def __init__(self, check_host: str = "8.8.8.8", check_port: int = 53):
        self.check_host = check_host
        self.check_port = check_port

    def _local_address(self) -> str:
        family = socket.AF_INET6 if ":" in self.check_host else socket.AF_INET
        with socket.socket(family, socket.SOCK_DGRAM) as s:
            s.connect((self.check_host, self.check_port))
            return s.getsockname()[0]

    def active_interface(self) -> Optional[str]:
        """Name of the interface carrying the default route, if it is up"""
        local_ip = self._local_address()
        if_addrs = psutil.net_if_addrs()
        if_stats = psutil.net_if_stats()

        for name, addrs in if_addrs.items():
            if not any(a.address.split("%")[0] == local_ip for a in addrs if a.address):
                continue
            stats = if_stats.get(name)
            if stats is None or not stats.isup:
                return None
            if is_loopback(name, stats):
                return None
            return name
        return None

    def is_available(self) -> bool:
        try:
            return self.active_interface() is not None
        except Exception as e:
            logger.debug(f"Network availability check failed: {e}")
            return False

    def network_type(self) -> str:
        try:
            name = self.active_interface()
        except Exception as e:
            logger.debug(f"Network type query failed: {e}")
            return "Unknown"
        if name is None:
            return "Unknown"
        return classify_interface(name)
