"""
 Connection Monitor

 Owns the ConnectionState for one device and reacts to the transport-level
 outcome of every call made to it.

 Flow:
    * record_success() after a usable (2xx) response from the device
    * record_failure() after a network error, timeout or non-2xx status (never for an error payload)
    * the first failure while connected starts one reconnection chain and
      shows attempt 1 at once:
        probe /api/status (5s timeout) -> success ends the chain
                                       -> failure sleeps 1s, 1.5s, 2.25s ... (max 30s)
    * the chain stops the moment the device is seen again by any path

 All handlers are plain methods that run on the event loop thread, so each
 transition completes before another one starts. The probe chain and the
 "connection restored" banner timer are asyncio tasks owned by the monitor.
"""
import asyncio
import logging
from typing import Awaitable, Callable, List, Optional

from pyespcontrol import state as sm
from pyespcontrol.clock import LoopClock
from pyespcontrol.exceptions import TransportFailure
from pyespcontrol.state import Banner, ConnectionState
from pyespcontrol.views import log_notifier

log = logging.getLogger(__name__)

PROBE_PATH = "/api/status"
PROBE_TIMEOUT = 5.0  # seconds
RESTORE_WINDOW = 2000  # ms the "connection restored" banner stays up


class ConnectionMonitor:

    def __init__(self, transport, clock=None, notifier: Callable = None, probe_path: str = PROBE_PATH,
                 probe_timeout: float = PROBE_TIMEOUT, restore_window: int = RESTORE_WINDOW,
                 backoff_initial: int = sm.BACKOFF_INITIAL, backoff_factor: float = sm.BACKOFF_FACTOR,
                 backoff_max: int = sm.BACKOFF_MAX):
        self.transport = transport
        self.clock = clock or LoopClock()
        self.notify = notifier or log_notifier
        self.probe_path = probe_path
        self.probe_timeout = probe_timeout
        self.restore_window = restore_window
        self.backoff_initial = backoff_initial
        self.backoff_factor = backoff_factor
        self.backoff_max = backoff_max
        self.state = ConnectionState()
        self.probes = 0  # probes issued over the monitor's lifetime
        self._restoring = False
        self._chain = 0  # id of the current probe chain
        self._reconnect_task: Optional[asyncio.Task] = None
        self._restore_task: Optional[asyncio.Task] = None
        self._tasks = set()
        self._listeners: List[Callable[[Banner], None]] = []
        self._banner = self.banner

    # Projection

    @property
    def banner(self) -> Banner:
        return sm.project(self.state, self._restoring)

    @property
    def connected(self) -> bool:
        return self.state.connected

    @property
    def reconnecting(self) -> bool:
        return self.state.reconnecting

    @property
    def reconnect_task(self) -> Optional[asyncio.Task]:
        return self._reconnect_task

    @property
    def restore_task(self) -> Optional[asyncio.Task]:
        return self._restore_task

    def add_listener(self, fn: Callable[[Banner], None]):
        self._listeners.append(fn)

    def remove_listener(self, fn: Callable[[Banner], None]):
        if fn in self._listeners:
            self._listeners.remove(fn)

    def backoff_delay(self, retry_count: int) -> int:
        return sm.backoff_delay(retry_count, self.backoff_initial, self.backoff_factor, self.backoff_max)

    def _emit(self):
        banner = self.banner
        if banner == self._banner:
            return
        self._banner = banner
        log.debug(f"Connection banner: {banner}")
        for fn in list(self._listeners):
            try:
                fn(banner)
            except Exception as e:
                log.error(f"Error in banner listener: {e}")

    # Transport outcomes

    def record_success(self):
        """A usable response was received from the device."""
        self.state, restored = sm.succeeded(self.state, self.clock.now())
        if restored:
            log.info("Connection to %s restored" % getattr(self.transport, 'host', 'device'))
            self._restoring = True
            self._cancel(self._restore_task)
            self._restore_task = self._spawn(self._end_restore())
        self._emit()

    def record_failure(self):
        """The device could not be reached or answered with a non-2xx status.
        Ignored while already disconnected."""
        self.state, lost = sm.failed(self.state)
        if not lost:
            return
        log.warning("Lost connection to %s" % getattr(self.transport, 'host', 'device'))
        if self._restoring:
            self._restoring = False
            self._cancel(self._restore_task)
        self.notify("Communication error", "error")
        self.start_reconnection()

    async def track(self, awaitable: Awaitable):
        """Await a transport call, feed its outcome into the monitor and pass it on."""
        try:
            result = await awaitable
        except TransportFailure:
            self.record_failure()
            raise
        self.record_success()
        return result

    # Reconnection

    def start_reconnection(self):
        """Start the probe chain unless one is already running."""
        if self.state.reconnecting:
            return
        self.state = sm.reconnect_started(self.state)
        self._chain += 1
        log.debug(f"Starting reconnection chain {self._chain}")
        self.state = sm.attempt_started(self.state)
        self._emit()
        self._reconnect_task = self._spawn(self._reconnect(self._chain))

    def stop_reconnection(self):
        """Halt the probe chain and leave the client disconnected."""
        if not self.state.reconnecting:
            return
        self._chain += 1
        self._cancel(self._reconnect_task)
        self.state = sm.reconnect_halted(self.state)
        log.info("Reconnection stopped")
        self._emit()

    def _active(self, chain: int) -> bool:
        return chain == self._chain and not self.state.connected

    async def _reconnect(self, chain: int):
        while True:
            ok = await self._probe()
            if not self._active(chain):
                # Seen by another path, or superseded while probing
                return
            if ok:
                self.record_success()
                return
            delay = self.backoff_delay(self.state.retry_count)
            log.debug(f"Probe {self.state.retry_count} failed - next attempt in {delay}ms")
            await self.clock.sleep(delay / 1000)
            if not self._active(chain):
                return
            self.state = sm.attempt_started(self.state)
            self._emit()

    async def _probe(self) -> bool:
        self.probes += 1
        try:
            await self.transport.perform("GET", self.probe_path, timeout=self.probe_timeout)
            return True
        except Exception as exc:  # every probe error is just a failed attempt
            log.debug(f"Probe failed: {exc}")
            return False

    async def _end_restore(self):
        await self.clock.sleep(self.restore_window / 1000)
        self._restoring = False
        self._emit()

    # Lifecycle

    def _spawn(self, coro) -> asyncio.Task:
        task = asyncio.get_running_loop().create_task(coro)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    @staticmethod
    def _cancel(task: Optional[asyncio.Task]):
        if task and not task.done() and task is not asyncio.current_task():
            task.cancel()

    async def close(self):
        """Cancel every probe chain and the restore timer."""
        self._chain += 1
        for task in list(self._tasks):
            task.cancel()
            try:
                await task
            except asyncio.CancelledError:
                # Expected when cancelling during shutdown
                pass
