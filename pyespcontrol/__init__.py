# pyESPControl Module
# -*- coding: utf-8 -*-
"""
 Python module to drive the HTTP control API of an ESP32 actuator / Modbus controller

 For more information see README.md

 Features
    * One asyncio event loop, blocking HTTP pushed to a worker pool
    * Detects loss of connectivity and reconnects with exponential backoff
      (1s, 1.5s, 2.25s ... capped at 30s), probing /api/status with a 5s timeout
    * Periodic status polling (10s) that feeds the same connection state
    * Feature modules (tabs) loaded on first activation, never fetched twice,
      initializer re-run on every activation
    * Typed calls for actuators, LED Modbus slave, WiFi, RS485, tasks and files

 Classes
    ControlPanel(host, settings, clock, transport, view, notifier)

 Functions
    start()                   # Start status polling and activate the initial tab
    switch_tab(name)          # Activate a feature module and refresh status
    close()                   # Stop background tasks and release the HTTP pool
    banner                    # Current connection banner (hidden/warning/error/success)

 Requirements
    This module requires the following modules: requests, pydantic, pydantic-settings
    pip install requests pydantic pydantic-settings
"""
import logging
import sys
from typing import Callable, Optional

version_tuple = (0, 1, 0)
version = __version__ = '%d.%d.%d' % version_tuple
__author__ = 'pyespcontrol'

from pyespcontrol.api import DeviceAPI
from pyespcontrol.clock import LoopClock, ManualClock
from pyespcontrol.config import Settings
from pyespcontrol.exceptions import (ApplicationFailure, AssetLoadFailure, EspControlError, HTTPStatusFailure,
                                     InvalidModuleName, TransportFailure)
from pyespcontrol.modules import FeatureModule, ModuleLoader
from pyespcontrol.monitor import ConnectionMonitor
from pyespcontrol.poller import StatusPoller
from pyespcontrol.state import Banner, BannerKind, ConnectionState
from pyespcontrol.transport import Transport
from pyespcontrol.views import ModuleView, log_notifier

log = logging.getLogger(__name__)
log.debug('%s version %s', __name__, __version__)
log.debug('Python %s on %s', sys.version, sys.platform)


def set_debug(toggle=True, color=True):
    """Enable verbose logging"""
    if toggle:
        if color:
            logging.basicConfig(format='\x1b[31;1m%(levelname)s:%(message)s\x1b[0m', level=logging.DEBUG)
        else:
            logging.basicConfig(format='%(levelname)s:%(message)s', level=logging.DEBUG)
        log.setLevel(logging.DEBUG)
        log.debug("%s [%s]\n" % (__name__, __version__))
    else:
        log.setLevel(logging.NOTSET)


class ControlPanel(object):
    def __init__(self, host: str = "", settings: Optional[Settings] = None, clock=None, transport=None,
                 view: Optional[ModuleView] = None, notifier: Optional[Callable] = None):
        """
        Client session for one controller. Build one per device and hand it
        (or its parts) to whatever needs to talk to the device.

        Args:
            host      = Hostname or IP address of the controller (default from ESP_HOST)
            settings  = Settings instance (default: read from environment)
            clock     = Clock for timers (default: LoopClock, ManualClock in tests)
            transport = Object with an async perform(method, path, body, timeout, text)
            view      = ModuleView that renders module markup and failures
            notifier  = Callable(message, level) for toast notifications
        """
        self.settings = settings or Settings()
        if host:
            self.settings = self.settings.model_copy(update={"host": host})
        if self.settings.debug:
            set_debug(True)
        self.host = self.settings.host
        self.clock = clock or LoopClock()
        self.notify = notifier or log_notifier
        self.transport = transport or Transport(self.host, timeout=self.settings.timeout,
                                                poolmaxsize=self.settings.pool_maxsize,
                                                https=self.settings.https)
        self.monitor = ConnectionMonitor(self.transport, clock=self.clock, notifier=self.notify,
                                         probe_timeout=self.settings.probe_timeout,
                                         restore_window=self.settings.restore_banner,
                                         backoff_initial=self.settings.backoff_initial,
                                         backoff_factor=self.settings.backoff_factor,
                                         backoff_max=self.settings.backoff_max)
        self.poller = StatusPoller(self.transport, self.monitor, clock=self.clock,
                                   interval=self.settings.poll_interval)
        self.api = DeviceAPI(self.transport, self.monitor, led_slave_id=self.settings.led_slave_id)
        self.loader = ModuleLoader(self.transport, view=view, notifier=self.notify,
                                   namespace={"api": self.api, "panel": self, "notify": self.notify})
        self.current_tab = FeatureModule.parse(self.settings.initial_tab)
        self.tab_data = {}  # filled by the tab initializers in pyespcontrol.tabs

    @property
    def banner(self) -> Banner:
        return self.monitor.banner

    def register(self, name, init_fn: Callable):
        """Register a module initializer (for modules provided in-process)."""
        self.loader.register(name, init_fn)

    async def start(self) -> bool:
        log.debug(f"Starting control panel for {self.host}")
        self.poller.start()
        return await self.loader.activate(self.current_tab)

    async def switch_tab(self, name) -> bool:
        """Activate a tab. Returns False if its module failed to load."""
        module = FeatureModule.parse(name)
        self.current_tab = module
        active = await self.loader.activate(module)
        await self.poller.poll()
        return active

    async def close(self):
        await self.poller.stop()
        await self.monitor.close()
        close = getattr(self.transport, "close", None)
        if close:
            close()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb):
        await self.close()
