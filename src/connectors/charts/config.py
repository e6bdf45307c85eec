"""
Charts Plugin Configuration
---------------------------
Provider endpoints, request criteria names and the country table.
Country names are loaded from countries.yaml.
"""
import os
import logging
from dataclasses import dataclass, field
from pathlib import Path

import yaml

DEFAULT_API_URL = "http://spotikea.tomahawk-player.org:10380/"
DEFAULT_TIMEOUT = 30
TOPLIST_PATH = "toplist/"
CATALOG_ENDPOINT = TOPLIST_PATH + "charts"

CHART_SOURCE = "spotify"
PROVIDER_LABEL = "Spotify"

# Geo labels handled before country lookup
GEO_FOR_ME = "For me"
GEO_EVERYWHERE = "Everywhere"

COUNTRIES_FILE = Path(__file__).parent / "countries.yaml"


def load_countries(path: Path = COUNTRIES_FILE) -> dict:
    """Load the geo code -> country name table."""
    try:
        with open(path, "r", encoding="utf-8") as f:
            countries = yaml.safe_load(f) or {}
    except Exception as e:
        logging.error(f"Failed to load {path.name}: {e}")
        raise RuntimeError(f"Could not load country table: {e}") from e

    return {str(code).upper(): str(name) for code, name in countries.items()}


@dataclass
class ChartsConfig:
    """Configuration for the charts plugin."""

    api_url: str = DEFAULT_API_URL
    timeout: float = DEFAULT_TIMEOUT
    countries_file: Path = field(default=COUNTRIES_FILE)

    def __post_init__(self):
        if not self.api_url.endswith("/"):
            self.api_url += "/"

    @classmethod
    def from_env(cls) -> "ChartsConfig":
        """Build a config from CHARTS_* environment variables."""
        timeout = os.getenv("CHARTS_TIMEOUT")
        try:
            timeout = float(timeout) if timeout else DEFAULT_TIMEOUT
        except ValueError:
            logging.warning(f"Invalid CHARTS_TIMEOUT {timeout!r}, using {DEFAULT_TIMEOUT}")
            timeout = DEFAULT_TIMEOUT

        return cls(
            api_url=os.getenv("CHARTS_API_URL") or DEFAULT_API_URL,
            timeout=timeout,
        )

    def catalog_url(self) -> str:
        return self.api_url + CATALOG_ENDPOINT

    def chart_url(self, chart_id: str) -> str:
        return f"{self.api_url}{TOPLIST_PATH}{chart_id}/"
