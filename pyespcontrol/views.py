"""
 Rendering adapters

 The state machines only produce projections (a Banner, a failed module, a
 toast). These adapters turn them into output. The defaults only log, the
 CLI swaps in printing versions.
"""
import logging

from pyespcontrol.state import Banner, BannerKind

log = logging.getLogger(__name__)

FAILURE_PLACEHOLDER = '<div class="tab-error">Failed to load module</div>'


def log_notifier(message: str, level: str = "info"):
    """Default toast sink."""
    if level == "error":
        log.error(message)
    elif level == "warning":
        log.warning(message)
    else:
        log.info(message)


class ModuleView:
    """Receives module markup and load failures. Subclass to render somewhere real."""

    def render(self, module, markup: str):
        raise NotImplementedError

    def render_failure(self, module):
        self.render(module, FAILURE_PLACEHOLDER)


class LogView(ModuleView):

    def __init__(self):
        self.containers = {}

    def render(self, module, markup: str):
        self.containers[module] = markup
        log.debug(f"Rendered {len(markup)} bytes into tab-{module.value}")


class BannerPrinter:
    """Banner listener that writes each change to a stream (used by the CLI)."""

    def __init__(self, stream, color=True):
        self.stream = stream
        self.color = color

    def __call__(self, banner: Banner):
        colors = {BannerKind.WARNING: '\x1b[33;1m', BannerKind.ERROR: '\x1b[31;1m',
                  BannerKind.SUCCESS: '\x1b[32;1m', BannerKind.HIDDEN: ''}
        text = banner.message or "Connected"
        if self.color and colors[banner.kind]:
            text = colors[banner.kind] + text + '\x1b[0m'
        self.stream.write(text + "\n")
        self.stream.flush()
