"""
 HTTP transport primitive

 All device traffic (API calls, health probes, module assets) goes through
 Transport.perform(). The blocking requests call runs in a dedicated thread
 pool and is bounded with asyncio.wait_for, so the event loop is never
 blocked and a stalled request is abandoned after its timeout.
"""
import asyncio
import functools
import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Optional

import requests
import urllib3
from requests import Response

from pyespcontrol.exceptions import HTTPStatusFailure, TransportFailure

urllib3.disable_warnings()  # Device serves a self-signed cert when HTTPS is enabled

log = logging.getLogger(__name__)


class Transport:

    def __init__(self, host: str, timeout: float = 10, poolmaxsize: int = 10, https: bool = False,
                 executor: Optional[ThreadPoolExecutor] = None):
        scheme = "https" if https else "http"
        self.host = host
        self.base_url = "%s://%s" % (scheme, host)
        self.timeout = timeout
        self.poolmaxsize = poolmaxsize
        if self.poolmaxsize > 0:
            # Create session object for http connection re-use
            self.session = requests.Session()
            # noinspection PyUnresolvedReferences
            a = requests.adapters.HTTPAdapter(pool_maxsize=self.poolmaxsize)
            self.session.mount('http://', a)
            self.session.mount('https://', a)
        else:
            # Disable http persistent connections
            self.session = requests
        self._executor = executor or ThreadPoolExecutor(max_workers=max(4, self.poolmaxsize),
                                                        thread_name_prefix="pyespcontrol")

    def url(self, path: str) -> str:
        return "%s/%s" % (self.base_url, path.lstrip('/'))

    async def perform(self, method: str, path: str, body: Optional[dict] = None,
                      timeout: Optional[float] = None, text: bool = False) -> Any:
        """
        Send one request to the device and return its decoded body.

        Args:
            method  = HTTP method (GET, POST)
            path    = path relative to the device root (e.g. /api/status, tabs/system.html)
            body    = optional JSON body
            timeout = seconds before the request is abandoned (default: self.timeout)
            text    = return the body as text instead of decoding JSON

        Raises:
            HTTPStatusFailure on a non-2xx response, TransportFailure on network
            error, timeout or an unparseable body.
        """
        timeout = timeout or self.timeout
        loop = asyncio.get_running_loop()
        call = functools.partial(self._request, method.upper(), path, body, timeout, text)
        try:
            return await asyncio.wait_for(loop.run_in_executor(self._executor, call), timeout=timeout)
        except asyncio.TimeoutError:
            log.debug('ERROR Timeout waiting for %s %s' % (method, path))
            raise TransportFailure(f"Timeout after {timeout}s waiting for {path}", self.url(path))

    def _request(self, method: str, path: str, body: Optional[dict], timeout: float, text: bool) -> Any:
        url = self.url(path)
        log.debug(' -- transport: %s %s' % (method, url))
        try:
            r: Response = self.session.request(method, url, json=body, verify=False, timeout=timeout)
        except requests.exceptions.Timeout:
            log.debug('ERROR Timeout waiting for device at %s' % url)
            raise TransportFailure(f"Timeout waiting for {url}", url)
        except requests.exceptions.ConnectionError as exc:
            log.debug('ERROR Unable to connect to device at %s' % url)
            raise TransportFailure(f"Unable to connect to {url}: {exc}", url)
        except requests.exceptions.RequestException as exc:
            log.debug(f'ERROR Unknown error connecting to device at {url}: {exc}')
            raise TransportFailure(f"Request to {url} failed: {exc}", url)
        if not r.ok:
            log.debug('%s response from %s' % (r.status_code, url))
            raise HTTPStatusFailure(f"{r.status_code} response from {url}", r.status_code, url)
        if text:
            return r.text
        try:
            return r.json()
        except ValueError as exc:
            log.debug(f'ERROR Unable to parse response from {url}: {exc}')
            raise TransportFailure(f"Unparseable response from {url}", url)

    def close(self):
        if isinstance(self.session, requests.Session):
            self.session.close()
        self._executor.shutdown(wait=False)
