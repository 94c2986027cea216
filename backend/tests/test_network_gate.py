import sys
import os
from types import SimpleNamespace
from unittest.mock import patch
import pytest

# Add backend to path so we can import modules
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from network_gate import NetworkAvailabilityGate, classify_interface, is_loopback


def addr(address):
    return SimpleNamespace(address=address)


def stats(isup=True, flags="up,broadcast,running,multicast"):
    return SimpleNamespace(isup=isup, flags=flags)


@pytest.fixture
def gate():
    gate = NetworkAvailabilityGate()
    with patch.object(gate, "_local_address", return_value="192.168.1.20"):
        yield gate


@pytest.fixture
def mock_psutil():
    with patch("network_gate.psutil") as mock_ps:
        mock_ps.net_if_addrs.return_value = {
            "lo": [addr("127.0.0.1")],
            "wlan0": [addr("192.168.1.20"), addr("fe80::1%wlan0")],
            "eth0": [addr("10.0.0.5")],
        }
        mock_ps.net_if_stats.return_value = {
            "lo": stats(flags="up,loopback,running"),
            "wlan0": stats(),
            "eth0": stats(),
        }
        yield mock_ps


def test_available_when_route_interface_is_up(gate, mock_psutil):
    assert gate.is_available() is True
    assert gate.active_interface() == "wlan0"
    assert gate.network_type() == "WiFi"


def test_unavailable_when_interface_is_down(gate, mock_psutil):
    mock_psutil.net_if_stats.return_value["wlan0"] = stats(isup=False)
    assert gate.is_available() is False
    assert gate.network_type() == "Unknown"


def test_unavailable_when_only_loopback(mock_psutil):
    gate = NetworkAvailabilityGate()
    with patch.object(gate, "_local_address", return_value="127.0.0.1"):
        assert gate.is_available() is False


def test_fail_closed_on_query_error(mock_psutil):
    gate = NetworkAvailabilityGate()
    with patch.object(gate, "_local_address", side_effect=OSError("Network is unreachable")):
        assert gate.is_available() is False
        assert gate.network_type() == "Unknown"


def test_fail_closed_on_psutil_error(gate, mock_psutil):
    mock_psutil.net_if_addrs.side_effect = RuntimeError("no /proc")
    assert gate.is_available() is False
    assert gate.network_type() == "Unknown"


def test_interface_classification():
    assert classify_interface("wlan0") == "WiFi"
    assert classify_interface("wlp3s0") == "WiFi"
    assert classify_interface("rmnet_data0") == "Cellular"
    assert classify_interface("wwan0") == "Cellular"
    assert classify_interface("ppp0") == "Cellular"
    assert classify_interface("eth0") == "Ethernet"
    assert classify_interface("enp0s31f6") == "Ethernet"
    assert classify_interface("tun0") == "Unknown"
    assert classify_interface("en0", platform="linux") == "Ethernet"


def test_macos_builtin_interface_is_wifi():
    assert classify_interface("en0", platform="darwin") == "WiFi"
    assert classify_interface("en5", platform="darwin") == "Ethernet"


def test_loopback_detected_from_flags():
    assert is_loopback("lo", stats(flags="up,loopback,running")) is True
    assert is_loopback("lowpan0", stats()) is False
    # Windows reports no flags
    assert is_loopback("Loopback Pseudo-Interface 1", stats(flags="")) is True
    assert is_loopback("Ethernet", stats(flags="")) is False


def test_available_on_interface_named_like_loopback(gate, mock_psutil):
    mock_psutil.net_if_addrs.return_value["lowpan0"] = mock_psutil.net_if_addrs.return_value.pop("wlan0")
    mock_psutil.net_if_stats.return_value["lowpan0"] = stats()

    assert gate.is_available() is True
    assert gate.active_interface() == "lowpan0"
