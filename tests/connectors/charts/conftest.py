import asyncio
import json
import sys
from pathlib import Path

import pytest

# Add project root to path
project_root = Path(__file__).parent.parent.parent.parent
sys.path.append(str(project_root))

from src.connectors.charts.config import ChartsConfig
from src.connectors.charts.countries import CountryResolver
from src.connectors.charts.plugin import SpotifyChartsPlugin
from src.connectors.charts.transport import NetworkReply

API_URL = "http://charts.test/"

CATALOG = {
    "Charts": [
        {
            "geo": [{"id": "SE", "name": "SE"}],
            "types": [
                {"id": "track", "name": "Top Tracks"},
                {"id": "album", "name": "Top Albums"},
            ],
        },
        {
            "geo": [
                {"id": "me", "name": "For me"},
                {"id": "everywhere", "name": "Everywhere"},
                {"id": "US", "name": "US"},
            ],
            "types": [{"id": "artist", "name": "Top Artists"}],
        },
    ]
}


def json_reply(url, data):
    return NetworkReply(url=url, status_code=200, body=json.dumps(data).encode("utf-8"))


class FakeTransport:
    """Transport answering from a url -> NetworkReply table."""

    def __init__(self, loop, replies=None):
        self.loop = loop
        self.replies = dict(replies or {})
        self.requested = []
        self.closed = False

    def get(self, url):
        if self.closed:
            raise RuntimeError("Transport is closed")
        self.requested.append(url)
        reply = self.replies.get(url) or NetworkReply(
            url=url, status_code=404, error=f"404 Client Error for url: {url}"
        )
        future = self.loop.create_future()
        future.set_result(reply)
        return future

    def close(self):
        self.closed = True


class Recorder:
    """Collects the host callbacks fired by a plugin."""

    def __init__(self):
        self.infos = []
        self.cache_requests = []
        self.plugin = None

    def info(self, request_id, request_data, payload):
        self.infos.append((request_id, request_data, payload))

    def get_cached_info(self, request_id, criteria, ttl, request_data):
        self.cache_requests.append((request_id, criteria, ttl, request_data))
        # Behave like a host with an empty cache
        self.plugin.not_in_cache(request_id, criteria, request_data)

    def payloads(self, request_id):
        return [payload for rid, _, payload in self.infos if rid == request_id]


@pytest.fixture
def loop():
    loop = asyncio.new_event_loop()
    yield loop
    loop.close()


@pytest.fixture
def drain(loop):
    def _drain():
        # Done callbacks are scheduled with call_soon, let them run
        for _ in range(3):
            loop.run_until_complete(asyncio.sleep(0))

    return _drain


@pytest.fixture
def config():
    return ChartsConfig(api_url=API_URL)


@pytest.fixture
def resolver():
    return CountryResolver({"US": "UnitedStates", "SE": "Sweden", "GB": "UnitedKingdom"})


@pytest.fixture
def recorder():
    return Recorder()


@pytest.fixture
def plugin(recorder, config, resolver):
    plugin = SpotifyChartsPlugin(
        recorder.info, recorder.get_cached_info, config=config, resolve_country=resolver
    )
    recorder.plugin = plugin
    return plugin


@pytest.fixture
def transport(loop, config):
    return FakeTransport(loop, {config.catalog_url(): json_reply(config.catalog_url(), CATALOG)})
