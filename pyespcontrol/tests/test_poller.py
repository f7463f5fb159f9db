"""Tests for the status poller."""
import asyncio

import pytest

from pyespcontrol.api import DeviceAPI
from pyespcontrol.clock import settle
from pyespcontrol.exceptions import TransportFailure
from pyespcontrol.monitor import ConnectionMonitor
from pyespcontrol.poller import StatusPoller
from pyespcontrol.state import BannerKind

STATUS = {"wifi_status": 3, "modbus_ready": True, "uptime_ms": 61000, "heap_free": 120000}


@pytest.fixture
def monitor(transport, clock, notes):
    return ConnectionMonitor(transport, clock=clock, notifier=lambda msg, level: notes.append((msg, level)))


@pytest.fixture
def poller(transport, monitor, clock):
    return StatusPoller(transport, monitor, clock=clock)


@pytest.mark.asyncio
async def test_poll_success(poller, transport, monitor):
    transport.route("/api/status", STATUS)
    badges = []
    poller.add_listener(badges.append)
    assert await poller.poll() == STATUS
    assert poller.last_status == STATUS
    assert badges == [STATUS]
    assert monitor.connected is True
    assert monitor.state.last_successful_ping is not None


@pytest.mark.asyncio
async def test_poll_failure_starts_reconnection(poller, monitor):
    assert await poller.poll() is None
    assert poller.last_status is None
    assert monitor.reconnecting is True
    await monitor.close()


@pytest.mark.asyncio
async def test_poll_success_restores_connection(poller, transport, monitor):
    monitor.record_failure()
    await settle()
    transport.route("/api/status", STATUS)
    await poller.poll()
    assert monitor.connected is True
    assert monitor.banner.kind == BannerKind.SUCCESS
    await monitor.close()


@pytest.mark.asyncio
async def test_periodic_cadence(poller, transport, clock):
    transport.route("/api/status", STATUS)
    poller.start()
    poller.start()
    await settle()
    assert transport.count("/api/status") == 1
    await clock.advance(10)
    assert transport.count("/api/status") == 2
    await clock.advance(10)
    assert transport.count("/api/status") == 3
    assert clock.sleeps == [10, 10, 10]
    await poller.stop()
    assert poller.running is False
    await clock.advance(10)
    assert transport.count("/api/status") == 3


@pytest.mark.asyncio
async def test_poll_and_api_failing_together_start_one_chain(poller, transport, monitor, clock, notes):
    api = DeviceAPI(transport, monitor)
    results = await asyncio.gather(poller.poll(), api.actuator_status(), return_exceptions=True)
    assert results[0] is None
    assert isinstance(results[1], TransportFailure)
    await settle()
    assert monitor.probes == 1
    assert clock.pending == 1
    assert notes == [("Communication error", "error")]

    # more failures while reconnecting change nothing
    await poller.poll()
    await settle()
    assert monitor.probes == 1
    await clock.advance(1.0)
    assert monitor.probes == 2
    assert clock.pending == 1
    await monitor.close()
