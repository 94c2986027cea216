"""Probe strategy exports"""
from .base import BaseProbe, resolve_host
from .icmp_probe import IcmpProbe
from .tcp_probe import TcpProbe
from .system_probe import SystemPingProbe
from .command_runner import CommandRunner, CommandOutput, SubprocessRunner, build_ping_command
from .output_parser import parse_ping_output

__all__ = [
    'BaseProbe', 'resolve_host', 'IcmpProbe', 'TcpProbe', 'SystemPingProbe',
    'CommandRunner', 'CommandOutput', 'SubprocessRunner', 'build_ping_command',
    'parse_ping_output',
]
