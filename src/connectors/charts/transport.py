"""
Network Transport
-----------------
Shared HTTP access for info plugins. Requests run in the event loop's
executor and complete as asyncio futures resolved on the loop thread, so
plugin callbacks never run concurrently with each other.
"""
import asyncio
import logging
from dataclasses import dataclass
from typing import Optional

import requests

from .config import DEFAULT_TIMEOUT


@dataclass(frozen=True)
class NetworkReply:
    """Outcome of one GET: either a body or an error description."""

    url: str
    status_code: Optional[int] = None
    body: bytes = b""
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


class NetworkTransport:
    """Wrapper around a requests session owned by the host."""

    def __init__(
        self,
        loop: Optional[asyncio.AbstractEventLoop] = None,
        session: Optional[requests.Session] = None,
        timeout: float = DEFAULT_TIMEOUT,
    ):
        self._loop = loop
        self.session = session or requests.Session()
        self.timeout = timeout
        self.closed = False

    @property
    def loop(self) -> asyncio.AbstractEventLoop:
        if self._loop is None:
            self._loop = asyncio.get_running_loop()
        return self._loop

    def get(self, url: str) -> "asyncio.Future[NetworkReply]":
        """
        Start a GET request.

        Returns:
            Future resolved with a NetworkReply. HTTP and connection errors
            are reported through NetworkReply.error, never raised.
        """
        if self.closed:
            raise RuntimeError("Transport is closed")
        logging.debug(f"GET {url}")
        return self.loop.run_in_executor(None, self._fetch, url)

    def _fetch(self, url: str) -> NetworkReply:
        try:
            response = self.session.get(url, timeout=self.timeout)
            response.raise_for_status()
        except requests.RequestException as e:
            status = e.response.status_code if e.response is not None else None
            return NetworkReply(url=url, status_code=status, error=str(e))
        return NetworkReply(url=url, status_code=response.status_code, body=response.content)

    def close(self) -> None:
        """Close the session. Plugins holding this transport see it as gone."""
        if not self.closed:
            self.closed = True
            self.session.close()
