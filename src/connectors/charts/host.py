"""
Local Info Host
---------------
Minimal in-process host for running info plugins outside the player:
no cache (every lookup is a miss), one future per request id.
"""
import asyncio
import itertools
import logging
from typing import Any, Dict, Optional

from .config import ChartsConfig
from .models import InfoRequestData
from .plugin import SpotifyChartsPlugin
from .transport import NetworkTransport


class LocalInfoHost:
    """Drives a SpotifyChartsPlugin from asyncio code."""

    def __init__(self, config: Optional[ChartsConfig] = None, plugin_cls=SpotifyChartsPlugin):
        self.config = config or ChartsConfig()
        self.plugin = plugin_cls(self._on_info, self._on_get_cached_info, config=self.config)
        self._pending: Dict[int, "asyncio.Future[Optional[Dict[str, Any]]]"] = {}
        self._request_ids = itertools.count(1)

    async def connect(self, transport: NetworkTransport) -> None:
        """Hand the transport to the plugin and wait for its catalog refresh."""
        refresh = self.plugin.on_network_changed(transport)
        if refresh is not None:
            await asyncio.wait({refresh})

    async def get_info(self, request_data: InfoRequestData) -> Optional[Dict[str, Any]]:
        """Send one request and wait for its terminal response."""
        request_id = next(self._request_ids)
        future = asyncio.get_running_loop().create_future()
        self._pending[request_id] = future
        self.plugin.get_info(request_id, request_data)
        return await future

    def _on_get_cached_info(
        self, request_id: int, criteria: Dict[str, str], ttl: int, request_data: InfoRequestData
    ) -> None:
        logging.debug(f"Cache miss for #{request_id} {criteria}")
        self.plugin.not_in_cache(request_id, criteria, request_data)

    def _on_info(
        self, request_id: int, request_data: InfoRequestData, payload: Optional[Dict[str, Any]]
    ) -> None:
        future = self._pending.pop(request_id, None)
        if future is None:
            logging.warning(f"Response for unknown or finished request #{request_id}")
            return
        future.set_result(payload)
