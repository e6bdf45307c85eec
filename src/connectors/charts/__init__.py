"""
Spotify Charts Info Plugin
--------------------------
Fetches chart catalogs and ranked charts from the Spotify toplist provider
and normalizes them into the info system's chart model.
"""

from .config import ChartsConfig
from .host import LocalInfoHost
from .models import ChartResult, ChartType, InfoRequestData, InfoType
from .plugin import InfoPlugin, SpotifyChartsPlugin
from .transport import NetworkReply, NetworkTransport

__all__ = [
    "ChartsConfig",
    "ChartResult",
    "ChartType",
    "InfoPlugin",
    "InfoRequestData",
    "InfoType",
    "LocalInfoHost",
    "NetworkReply",
    "NetworkTransport",
    "SpotifyChartsPlugin",
]
