import asyncio
import sys
import os
import pytest

# Add backend to path so we can import modules
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from models import ProbeMethod, ProbeResult
from result_feed import MonitorFeed


@pytest.mark.asyncio
async def test_buffer_keeps_latest_results():
    feed = MonitorFeed(max_results=2)
    for latency in (1, 2, 3):
        await feed.emit("m1", ProbeResult.ok(ProbeMethod.ICMP, latency))

    recent = feed.get_recent("m1")
    assert [r["latency"] for r in recent] == [2, 3]
    assert feed.get_recent("other") == []


@pytest.mark.asyncio
async def test_subscribers_receive_only_their_monitor():
    feed = MonitorFeed()
    queue = await feed.subscribe("m1")

    sink = feed.sink("m1")
    await sink(ProbeResult.ok(ProbeMethod.TCP, 9))
    await feed.emit("m2", ProbeResult.ok(ProbeMethod.TCP, 99))

    result = await asyncio.wait_for(queue.get(), timeout=1)
    assert result.latency_ms == 9
    assert queue.empty()

    await feed.unsubscribe("m1", queue)
    assert feed.subscribers["m1"] == []


@pytest.mark.asyncio
async def test_slow_subscriber_is_dropped():
    feed = MonitorFeed()
    queue = await feed.subscribe("m1")
    for _ in range(queue.maxsize + 1):
        await feed.emit("m1", ProbeResult.failed(ProbeMethod.SYSTEM, "System ping timeout"))

    assert queue not in feed.subscribers["m1"]


@pytest.mark.asyncio
async def test_drop_forgets_monitor():
    feed = MonitorFeed()
    await feed.subscribe("m1")
    await feed.emit("m1", ProbeResult.ok(ProbeMethod.ICMP, 4))
    await feed.emit("m2", ProbeResult.ok(ProbeMethod.ICMP, 5))

    feed.drop("m1")
    feed.drop("m1")

    assert "m1" not in feed.results
    assert "m1" not in feed.subscribers
    assert feed.get_recent("m1") == []
    assert len(feed.get_recent("m2")) == 1
