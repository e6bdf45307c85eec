"""
Spotify Charts Info Plugin
--------------------------
Answers chart requests from the info system host:
 - chart capabilities: the catalog of (country, chart type) combinations
 - chart lists: the ranked tracks, albums or artists of one chart
Cache lookups are delegated to the host; on a miss the host calls
not_in_cache() and the plugin fetches from the provider.
"""
import asyncio
import copy
import logging
import weakref
from abc import ABC, abstractmethod
from collections.abc import Mapping
from typing import Any, Callable, Dict, List, Optional

from .config import CHART_SOURCE, ChartsConfig
from .countries import CountryResolver
from .models import (
    ChartsError,
    InfoRequestData,
    InfoType,
    InvalidRequestError,
    NetworkError,
    TransportUnavailableError,
)
from .normalizer import (
    CountryLookup,
    catalog_payload,
    decode_json,
    infer_chart_type,
    parse_categories,
    parse_chart,
)
from .transport import NetworkReply, NetworkTransport

InfoCallback = Callable[[int, InfoRequestData, Optional[Dict[str, Any]]], None]
CachedInfoCallback = Callable[[int, Dict[str, str], int, InfoRequestData], None]


class InfoPlugin(ABC):
    """Abstract base class for info system plugins."""

    def __init__(self, info: InfoCallback, get_cached_info: CachedInfoCallback):
        """
        Args:
            info: Host callback receiving the terminal response of a request.
                A None payload signals an error.
            get_cached_info: Host callback asked to look up the cache. On a
                miss the host calls not_in_cache() with the same arguments.
        """
        self._info = info
        self._get_cached_info = get_cached_info
        self._nam: Optional["weakref.ReferenceType[NetworkTransport]"] = None

    @property
    @abstractmethod
    def supported_get_types(self) -> List[InfoType]:
        """Return the request types this plugin answers."""
        pass

    @abstractmethod
    def get_info(self, request_id: int, request_data: InfoRequestData) -> None:
        pass

    @abstractmethod
    def not_in_cache(
        self, request_id: int, criteria: Dict[str, str], request_data: InfoRequestData
    ) -> None:
        pass

    def push_info(self, caller: str, info_type: InfoType, input: Any) -> None:
        """Pushed data is not used by chart plugins."""
        pass

    def on_network_changed(self, transport: Optional[NetworkTransport]) -> None:
        """Remember the host's transport without taking ownership of it."""
        if transport is None:
            return
        self._nam = weakref.ref(transport)

    @property
    def transport(self) -> Optional[NetworkTransport]:
        """The host's transport if it is still alive and open."""
        transport = self._nam() if self._nam is not None else None
        if transport is None or transport.closed:
            return None
        return transport

    def require_transport(self) -> NetworkTransport:
        transport = self.transport
        if transport is None:
            raise TransportUnavailableError("No network transport available")
        return transport

    def emit_info(
        self, request_id: int, request_data: InfoRequestData, payload: Optional[Dict[str, Any]]
    ) -> None:
        self._info(request_id, request_data, payload)

    def emit_error(self, request_id: int, request_data: InfoRequestData) -> None:
        self.emit_info(request_id, request_data, None)


class SpotifyChartsPlugin(InfoPlugin):
    """Chart capabilities and chart lists from the Spotify toplist provider."""

    def __init__(
        self,
        info: InfoCallback,
        get_cached_info: CachedInfoCallback,
        config: Optional[ChartsConfig] = None,
        resolve_country: Optional[CountryLookup] = None,
    ):
        super().__init__(info, get_cached_info)
        self.config = config or ChartsConfig()
        self._resolve_country = resolve_country or CountryResolver(path=self.config.countries_file)
        self._all_charts: Dict[str, Any] = {}

    @property
    def supported_get_types(self) -> List[InfoType]:
        return [InfoType.CHART, InfoType.CHART_CAPABILITIES]

    @property
    def all_charts(self) -> Dict[str, Any]:
        """Current chart catalog, {} until a refresh succeeded."""
        return copy.deepcopy(self._all_charts)

    # Request routing

    def get_info(self, request_id: int, request_data: InfoRequestData) -> None:
        logging.debug(f"get_info #{request_id} {request_data.type} from {request_data.caller!r}")

        try:
            if request_data.type is InfoType.CHART:
                criteria = self._chart_criteria(request_data)
            elif request_data.type is InfoType.CHART_CAPABILITIES:
                self._request_input(request_data, allow_empty=True)
                criteria = {}
            else:
                raise InvalidRequestError(f"Unsupported request type {request_data.type}")
        except InvalidRequestError as e:
            logging.warning(f"Rejected request #{request_id}: {e}")
            self.emit_error(request_id, request_data)
            return

        self._get_cached_info(request_id, criteria, 0, request_data)

    def _request_input(self, request_data: InfoRequestData, allow_empty: bool = False) -> Mapping:
        data = request_data.input
        if data is None and allow_empty:
            return {}
        if not isinstance(data, Mapping):
            raise InvalidRequestError(f"Input is not a mapping: {type(data).__name__}")
        return data

    def _chart_criteria(self, request_data: InfoRequestData) -> Dict[str, str]:
        data = self._request_input(request_data)
        if data.get("chart_source") != CHART_SOURCE:
            raise InvalidRequestError(f"Not a {CHART_SOURCE} chart: {data.get('chart_source')!r}")
        if not data.get("chart_id"):
            raise InvalidRequestError("Missing chart_id")
        return {"chart_id": str(data["chart_id"])}

    def not_in_cache(
        self, request_id: int, criteria: Dict[str, str], request_data: InfoRequestData
    ) -> None:
        try:
            transport = self.require_transport()
        except TransportUnavailableError as e:
            logging.error(f"Request #{request_id}: {e}")
            self.emit_error(request_id, request_data)
            return

        if request_data.type is InfoType.CHART:
            self._fetch_chart(transport, request_id, criteria, request_data)
        elif request_data.type is InfoType.CHART_CAPABILITIES:
            logging.debug(f"Sending chart capabilities for #{request_id}")
            self.emit_info(request_id, request_data, self.all_charts)
        else:
            logging.error(f"Don't know what to do with {request_data.type} after cache miss")
            self.emit_error(request_id, request_data)

    # Chart catalog

    def on_network_changed(
        self, transport: Optional[NetworkTransport]
    ) -> Optional["asyncio.Future[NetworkReply]"]:
        """
        Take the new transport and refresh the chart catalog with it.

        Returns:
            The pending catalog request, or None if nothing was requested.
        """
        super().on_network_changed(transport)
        transport = self.transport
        if transport is None:
            return None

        url = self.config.catalog_url()
        logging.info(f"Fetching chart catalog from {url}")
        try:
            future = transport.get(url)
        except RuntimeError as e:
            logging.error(f"Could not request chart catalog: {e}")
            return None
        future.add_done_callback(self._charts_returned)
        return future

    def _charts_returned(self, future: "asyncio.Future[NetworkReply]") -> None:
        try:
            data = decode_json(_reply_body(future))
            categories = parse_categories(data, self._resolve_country)
        except ChartsError as e:
            logging.error(f"Error fetching charts: {e}")
            return

        self._all_charts = catalog_payload(categories)
        logging.info(f"Chart catalog refreshed: {len(categories)} countries")

    # Chart data

    def _fetch_chart(
        self,
        transport: NetworkTransport,
        request_id: int,
        criteria: Dict[str, str],
        request_data: InfoRequestData,
    ) -> None:
        url = self.config.chart_url(criteria.get("chart_id", ""))
        logging.debug(f"Getting chart url {url}")
        try:
            future = transport.get(url)
        except RuntimeError as e:
            logging.error(f"Could not request chart for #{request_id}: {e}")
            self.emit_error(request_id, request_data)
            return

        future.add_done_callback(
            lambda f: self._chart_returned(f, url, request_id, request_data)
        )

    def _chart_returned(
        self,
        future: "asyncio.Future[NetworkReply]",
        url: str,
        request_id: int,
        request_data: InfoRequestData,
    ) -> None:
        try:
            data = decode_json(_reply_body(future))
            result = parse_chart(data, infer_chart_type(url))
        except ChartsError as e:
            logging.error(f"Error fetching chart {url}: {e}")
            self.emit_error(request_id, request_data)
            return

        if result.kind_label:
            logging.info(f"Chart #{request_id}: got {len(result)} {result.kind_label}")
        else:
            logging.warning(f"Unknown chart kind for {url}, returning empty chart")
        self.emit_info(request_id, request_data, result.to_payload())


def _reply_body(future: "asyncio.Future[NetworkReply]") -> bytes:
    """Body of a finished reply, raising NetworkError for any failure."""
    if future.cancelled():
        raise NetworkError("Request cancelled")
    exc = future.exception()
    if exc is not None:
        raise NetworkError(str(exc)) from exc
    reply = future.result()
    if not reply.ok:
        raise NetworkError(reply.error)
    return reply.body

