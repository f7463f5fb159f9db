"""
 Feature Modules

 Each UI tab is a module made of a markup fragment served by the device
 (tabs/<name>.html) and a code unit shipped with the client
 (pyespcontrol.tabs.<name>). Modules are loaded the first time their tab is
 activated: the markup is fetched, the code unit is imported and its
 load(register, **context) runs, calling register(name, init_fn). init_fn is
 then called on that and on every later activation without loading anything
 again.

    loader = ModuleLoader(transport)
    await loader.activate("system")   # fetch markup, load code unit, run init
    await loader.activate("system")   # run init only
"""
import asyncio
import importlib
import inspect
import logging
import types
from enum import Enum
from typing import Any, Callable, Dict, Optional

from pydantic import BaseModel, ConfigDict

from pyespcontrol.exceptions import AssetLoadFailure, InvalidModuleName, TransportFailure
from pyespcontrol.views import LogView, ModuleView, log_notifier

log = logging.getLogger(__name__)

MARKUP_PATH = "tabs/{name}.html"
CODE_PACKAGE = "pyespcontrol.tabs"


class FeatureModule(str, Enum):
    ACTUATORS = "actuators"
    LEDMODBUS = "ledmodbus"
    SYSTEM = "system"
    TASKS = "tasks"
    CONFIG = "config"
    FILES = "files"

    @classmethod
    def parse(cls, name) -> "FeatureModule":
        if isinstance(name, cls):
            return name
        try:
            return cls(str(name).lower())
        except ValueError:
            raise InvalidModuleName(f"Unknown module '{name}' (expected one of "
                                    f"{', '.join(m.value for m in cls)})") from None


class ModuleRecord(BaseModel):
    model_config = ConfigDict(arbitrary_types_allowed=True)

    module: FeatureModule
    loaded: bool = False
    init: Optional[Callable[..., Any]] = None


class AssetHost:
    """Fetches module markup through the transport and imports code units."""

    def __init__(self, transport, markup_path: str = MARKUP_PATH, code_package: str = CODE_PACKAGE):
        self.transport = transport
        self.markup_path = markup_path
        self.code_package = code_package

    async def fetch_markup(self, module: FeatureModule) -> str:
        path = self.markup_path.format(name=module.value)
        try:
            return await self.transport.perform("GET", path, text=True)
        except TransportFailure as exc:
            raise AssetLoadFailure(module, f"Unable to fetch {path}: {exc}") from exc

    async def fetch_code(self, module: FeatureModule) -> types.ModuleType:
        name = f"{self.code_package}.{module.value}"
        try:
            return importlib.import_module(name)
        except Exception as exc:
            raise AssetLoadFailure(module, f"Unable to import {name}: {exc}") from exc


class ModuleLoader:

    def __init__(self, transport, view: ModuleView = None, notifier: Callable = None,
                 namespace: Optional[Dict[str, Any]] = None, assets: AssetHost = None):
        self.assets = assets or AssetHost(transport)
        self.view = view or LogView()
        self.notify = notifier or log_notifier
        self.namespace = dict(namespace or {})  # context handed to every code unit's load()
        self.records: Dict[FeatureModule, ModuleRecord] = {m: ModuleRecord(module=m) for m in FeatureModule}
        self._inflight: Dict[FeatureModule, asyncio.Task] = {}

    def is_loaded(self, name) -> bool:
        return self.records[FeatureModule.parse(name)].loaded

    def register(self, name, init_fn: Callable):
        """Called by a module's code unit while it loads."""
        module = FeatureModule.parse(name)
        record = self.records[module]
        record.init = init_fn
        record.loaded = True
        log.debug(f"Registered module {module.value}")

    async def activate(self, name) -> bool:
        """
        Make a module active, loading it on first use.

        Returns True if the module is loaded, False if its assets failed to
        load (a placeholder is shown and a later activate() retries).
        Raises InvalidModuleName for names outside FeatureModule.
        """
        module = FeatureModule.parse(name)
        if self.records[module].loaded:
            await self._run_init(module)
            return True
        # No await between the loaded check and registering the load task
        task = self._inflight.get(module)
        if task is None:
            task = asyncio.get_running_loop().create_task(self._load(module))
            self._inflight[module] = task
            task.add_done_callback(lambda _t, m=module: self._inflight.pop(m, None))
        else:
            log.debug(f"Module {module.value} already loading")
        return await asyncio.shield(task)

    async def _load(self, module: FeatureModule) -> bool:
        log.debug(f"Loading module {module.value}")
        record = self.records[module]
        previous_init = record.init
        try:
            markup = await self.assets.fetch_markup(module)
            self.view.render(module, markup)
            unit = await self.assets.fetch_code(module)
            self._execute(module, unit)
        except AssetLoadFailure as exc:
            # A unit may have registered before failing; the module is still not loaded
            record.loaded = False
            record.init = previous_init
            log.error(f"Failed to load module {module.value}: {exc}")
            self.view.render_failure(module)
            self.notify(f"Failed to load {module.value} module", "error")
            return False
        record.loaded = True
        # Read init now; register() may have replaced it while the unit ran
        await self._run_init(module)
        return True

    def _execute(self, module: FeatureModule, unit: types.ModuleType):
        load = getattr(unit, "load", None)
        if load is None:
            log.debug(f"Code unit {unit.__name__} has no load()")
            return
        try:
            load(self.register, **self.namespace)
        except Exception as exc:
            raise AssetLoadFailure(module, f"Error loading {unit.__name__}: {exc}") from exc

    async def _run_init(self, module: FeatureModule):
        init = self.records[module].init
        if init is None:
            return
        try:
            result = init()
            if inspect.isawaitable(result):
                await result
        except Exception as exc:
            log.error(f"Module {module.value} init failed: {exc}")
            self.notify(f"{module.value} module error: {exc}", "error")
