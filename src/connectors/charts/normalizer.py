"""
Charts Normalizer
-----------------
Turns provider JSON into the host's chart model:
 - catalog documents into country -> chart descriptors
 - toplist documents into ChartResult, tagged by content kind
"""
import json
import logging
from typing import Any, Callable, Dict, List, Optional, Union

from pydantic import ValidationError

from .config import GEO_EVERYWHERE, GEO_FOR_ME, PROVIDER_LABEL
from .countries import humanize_country
from .models import (
    AlbumEntry,
    ArtistEntry,
    ChartCategory,
    ChartEntry,
    ChartParseError,
    ChartResult,
    ChartType,
    TrackEntry,
)
from .schemas import ChartsDocument, ToplistDocument, row_fields

CountryLookup = Callable[[str], Optional[str]]

# Checked in this order against the request URL
CHART_TYPE_MARKERS = (
    ("albums", ChartType.ALBUM),
    ("tracks", ChartType.TRACK),
    ("artists", ChartType.ARTIST),
)


def decode_json(body: Union[bytes, str]) -> Dict[str, Any]:
    """Decode a reply body into a JSON object."""
    try:
        data = json.loads(body)
    except (TypeError, ValueError) as e:
        raise ChartParseError(f"Invalid JSON: {e}") from e
    if not isinstance(data, dict):
        raise ChartParseError(f"Expected a JSON object, got {type(data).__name__}")
    return data


def country_label(geo_name: str, geo_id: str, resolve_country: CountryLookup) -> Optional[str]:
    """
    Display label for a catalog geo entry.

    Returns None for geos that need a user identity ("For me").
    """
    if geo_name == GEO_FOR_ME:
        return None
    if geo_name == GEO_EVERYWHERE:
        return geo_name

    # The provider sends the two-letter code as the geo name
    country = resolve_country(geo_name) or resolve_country(geo_id)
    if not country:
        logging.debug(f"No country name for geo {geo_name!r}, keeping the code")
        country = geo_name
    return humanize_country(country)


def parse_categories(
    data: Dict[str, Any], resolve_country: CountryLookup
) -> Dict[str, List[ChartCategory]]:
    """
    Build chart categories per country from a toplist/charts document.

    Countries come from the last chart group and chart types from the first.
    """
    try:
        document = ChartsDocument.model_validate(data)
    except ValidationError as e:
        raise ChartParseError(f"Unexpected charts document: {e}") from e

    if not document.charts:
        raise ChartParseError("Charts list is empty")

    geos = document.charts[-1].geo
    types = document.charts[0].types

    categories: Dict[str, List[ChartCategory]] = {}
    for geo in geos:
        country = country_label(geo.name, geo.id, resolve_country)
        if country is None:
            continue

        categories[country] = [
            ChartCategory(
                country=country,
                chart_type_id=chart_type.id,
                label=chart_type.name,
                geo_id=geo.id,
            )
            for chart_type in types
        ]

    return categories


def catalog_payload(categories: Dict[str, List[ChartCategory]]) -> Dict[str, Any]:
    """Wrap categories into the capabilities payload, countries sorted by label."""
    charts = {
        country: [category.to_dict() for category in categories[country]]
        for country in sorted(categories)
    }
    return {PROVIDER_LABEL: charts}


def infer_chart_type(url: str) -> ChartType:
    for marker, chart_type in CHART_TYPE_MARKERS:
        if marker in url:
            return chart_type
    return ChartType.NONE


def parse_entry(row: Any, chart_type: ChartType) -> Optional[ChartEntry]:
    """Convert one result row, or None if the row carries nothing usable."""
    fields = row_fields(row)

    if chart_type is ChartType.ARTIST:
        if "name" not in fields:
            return None
        return ArtistEntry(name=fields["name"])

    # Track and album rows need a title or an artist
    if "title" not in fields and "artist" not in fields:
        return None

    title = fields.get("title", "")
    artist = fields.get("artist", "")

    if chart_type is ChartType.TRACK:
        return TrackEntry(artist=artist, title=title)
    if chart_type is ChartType.ALBUM:
        return AlbumEntry(artist=artist, title=title)
    return None


def parse_chart(data: Dict[str, Any], chart_type: ChartType) -> ChartResult:
    """Build a ChartResult from a toplist document, keeping provider rank order."""
    try:
        document = ToplistDocument.model_validate(data)
    except ValidationError as e:
        raise ChartParseError(f"Unexpected toplist document: {e}") from e

    entries = []
    for row in document.toplist.result:
        entry = parse_entry(row, chart_type)
        if entry is not None:
            entries.append(entry)

    skipped = len(document.toplist.result) - len(entries)
    if skipped and chart_type is not ChartType.NONE:
        logging.debug(f"Skipped {skipped} empty chart rows")

    return ChartResult(chart_type=chart_type, entries=tuple(entries))
