import asyncio
import logging
from typing import Callable, List, Optional

from pyespcontrol.clock import LoopClock
from pyespcontrol.exceptions import TransportFailure

log = logging.getLogger(__name__)

STATUS_PATH = "/api/status"
POLL_INTERVAL = 10  # seconds


class StatusPoller:
    """Periodic status request that keeps the ConnectionMonitor fed.

    Runs on its own cadence, independent of the monitor's probe chain. A poll
    failing while the monitor is already reconnecting is a no-op for the
    monitor, so polling can never start a second chain.
    """

    def __init__(self, transport, monitor, clock=None, interval: float = POLL_INTERVAL,
                 path: str = STATUS_PATH):
        self.transport = transport
        self.monitor = monitor
        self.clock = clock or LoopClock()
        self.interval = interval
        self.path = path
        self.last_status: Optional[dict] = None
        self._listeners: List[Callable[[dict], None]] = []
        self._task: Optional[asyncio.Task] = None

    def add_listener(self, fn: Callable[[dict], None]):
        """fn(status) is called with every status payload received."""
        self._listeners.append(fn)

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def poll(self) -> Optional[dict]:
        """Fetch the status summary once. Returns None if the device is unreachable."""
        try:
            status = await self.monitor.track(self.transport.perform("GET", self.path))
        except TransportFailure as exc:
            log.debug(f"Status poll failed: {exc}")
            return None
        self.last_status = status
        for fn in list(self._listeners):
            try:
                fn(status)
            except Exception as e:
                log.error(f"Error in status listener: {e}")
        return status

    def start(self):
        if self.running:
            return
        self._task = asyncio.get_running_loop().create_task(self._run())
        log.debug(f"Status poller started ({self.interval}s interval)")

    async def _run(self):
        while True:
            await self.poll()
            await self.clock.sleep(self.interval)

    async def stop(self):
        if self._task:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                # Expected when cancelling the polling task during shutdown
                pass
            self._task = None
