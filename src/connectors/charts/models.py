"""
Chart data model shared by the plugin, the normalizer and the host.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple, Union


class InfoType(Enum):
    """Request types understood by the info system."""

    CHART = "chart"
    CHART_CAPABILITIES = "chart_capabilities"
    # Track lookups belong to other plugins, chart plugins reject them
    TRACK = "track"


class ChartType(Enum):
    """Content kind of a chart, with the label used in payloads."""

    NONE = None
    TRACK = "tracks"
    ALBUM = "albums"
    ARTIST = "artists"

    @property
    def label(self) -> Optional[str]:
        return self.value


class ChartsError(Exception):
    """Base exception for the charts plugin."""

    pass


class InvalidRequestError(ChartsError):
    """Request input is missing required criteria or is not a mapping."""

    pass


class TransportUnavailableError(ChartsError):
    """No live network transport to issue the request with."""

    pass


class NetworkError(ChartsError):
    """The provider call finished with an error state."""

    pass


class ChartParseError(ChartsError):
    """The provider payload is not valid JSON or lacks expected fields."""

    pass


@dataclass(frozen=True)
class InfoRequestData:
    """Request context handed back unchanged with the terminal response."""

    type: InfoType
    input: Any = None
    caller: str = ""
    custom_data: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class ChartCategory:
    """One (country, chart type) combination offered by the provider."""

    country: str
    chart_type_id: str
    label: str
    geo_id: str

    @property
    def composite_id(self) -> str:
        return f"{self.chart_type_id}/{self.geo_id}"

    def to_dict(self) -> Dict[str, str]:
        """Descriptor in the shape the host expects."""
        return {"id": self.composite_id, "label": self.label, "type": self.chart_type_id}


@dataclass(frozen=True)
class TrackEntry:
    artist: str
    title: str

    def to_payload(self) -> Dict[str, str]:
        return {"artist": self.artist, "track": self.title}


@dataclass(frozen=True)
class AlbumEntry:
    artist: str
    title: str

    def to_payload(self) -> Dict[str, str]:
        return {"artist": self.artist, "album": self.title}


@dataclass(frozen=True)
class ArtistEntry:
    name: str

    def to_payload(self) -> str:
        return self.name


ChartEntry = Union[TrackEntry, AlbumEntry, ArtistEntry]


@dataclass(frozen=True)
class ChartResult:
    """Normalized chart, entries in provider rank order."""

    chart_type: ChartType
    entries: Tuple[ChartEntry, ...] = ()

    @property
    def kind_label(self) -> Optional[str]:
        return self.chart_type.label

    def __len__(self) -> int:
        return len(self.entries)

    def to_payload(self) -> Dict[str, Any]:
        """
        Build the payload handed to the host.

        Returns:
            {"type": label, label: [...]} or {} for an unknown chart kind.
        """
        if self.chart_type is ChartType.NONE:
            return {}
        items: List[Any] = [entry.to_payload() for entry in self.entries]
        return {"type": self.kind_label, self.kind_label: items}
