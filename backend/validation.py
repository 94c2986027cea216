"""Input validation utilities for ReachProbe backend"""
import ipaddress
import re
import logging

logger = logging.getLogger("ReachProbe.Validation")

HOSTNAME_LABEL = re.compile(r'^(?!-)[A-Za-z0-9-]{1,63}(?<!-)$')


def validate_ip_address(ip: str) -> bool:
    """Validate IPv4 or IPv6 address literal"""
    try:
        ipaddress.ip_address(ip)
        return True
    except ValueError:
        return False


def validate_hostname(name: str) -> bool:
    """Validate an RFC 1123 hostname (trailing dot allowed)"""
    if not name or len(name) > 253:
        logger.warning(f"Invalid hostname length: {len(name) if name else 0}")
        return False
    if name.endswith("."):
        name = name[:-1]
    labels = name.split(".")
    if not all(HOSTNAME_LABEL.match(label) for label in labels):
        logger.warning(f"Invalid hostname format: {name}")
        return False
    # An all-numeric dotted name is a malformed IPv4 literal, not a hostname
    if labels[-1].isdigit():
        logger.warning(f"Hostname looks like a malformed IP: {name}")
        return False
    return True


def validate_host(host: str) -> bool:
    """Accept either an IP literal or a hostname"""
    return validate_ip_address(host) or validate_hostname(host)


def validate_port(port: int) -> bool:
    """Validate port number is in valid range"""
    if not (1 <= port <= 65535):
        logger.warning(f"Port out of range (1-65535): {port}")
        return False
    return True
