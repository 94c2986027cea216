import os
import sys
import pytest
from unittest.mock import AsyncMock, MagicMock
from fastapi.testclient import TestClient

# Ensure backend modules are importable
sys.path.insert(0, os.path.join(os.path.dirname(__file__), 'backend'))

from main import app
from models import ProbeMethod, ProbeResult
from network_gate import NetworkAvailabilityGate
from probe_orchestrator import ProbeOrchestrator
from probe_service import ProbeService
from probes import IcmpProbe, TcpProbe, SystemPingProbe
from result_feed import MonitorFeed
from settings import ProbeSettings


def _stub_probe(spec, result):
    probe = MagicMock(spec=spec)
    if isinstance(result, ProbeResult) or result is None:
        probe.check = AsyncMock(return_value=result)
    else:
        probe.check = AsyncMock(side_effect=result)
    return probe


@pytest.fixture
def make_orchestrator():
    """
    Factory for an orchestrator whose gate and strategies are mocks.
    Each strategy argument is a ProbeResult, or a callable/exception used as side_effect.
    """
    def factory(icmp=None, tcp=None, system=None, available=True, network_type="WiFi"):
        gate = MagicMock(spec=NetworkAvailabilityGate)
        gate.is_available.return_value = available
        gate.network_type.return_value = network_type
        return ProbeOrchestrator(
            gate=gate,
            icmp_probe=_stub_probe(IcmpProbe, icmp or ProbeResult.failed(ProbeMethod.ICMP, "Host not reachable via icmp")),
            tcp_probe=_stub_probe(TcpProbe, tcp or ProbeResult.failed(ProbeMethod.TCP, "TCP connection refused")),
            system_probe=_stub_probe(SystemPingProbe, system or ProbeResult.failed(ProbeMethod.SYSTEM, "System ping timeout")),
        )
    return factory


@pytest.fixture(scope="function")
def client(make_orchestrator, tmp_path, monkeypatch):
    """
    Fixture for TestClient with a stubbed probe service.
    """
    monkeypatch.setenv("CONFIG_PATH", str(tmp_path / "config.json"))
    orchestrator = make_orchestrator(
        icmp=ProbeResult.ok(ProbeMethod.ICMP, 40),
        tcp=ProbeResult.ok(ProbeMethod.TCP, 25),
        system=ProbeResult.ok(ProbeMethod.SYSTEM, 30),
    )
    app.state.probe_service = ProbeService(settings=ProbeSettings(), orchestrator=orchestrator)
    app.state.monitor_feed = MonitorFeed()

    with TestClient(app) as c:
        yield c

    del app.state.probe_service
    del app.state.monitor_feed
