"""
Country Names
-------------
Resolves provider geo codes to country names and turns the joined names of
the country table into display labels.
"""
import logging
from pathlib import Path
from typing import Dict, Optional

from .config import COUNTRIES_FILE, load_countries


def humanize_country(name: str) -> str:
    """
    Insert a space before every uppercase letter after the first character.

    Examples:
        >>> humanize_country("UnitedStates")
        'United States'
        >>> humanize_country("Sweden")
        'Sweden'
    """
    if not name:
        return name
    return name[0] + "".join(f" {c}" if c.isupper() else c for c in name[1:])


class CountryResolver:
    """Looks up country names by two-letter geo code."""

    def __init__(self, countries: Optional[Dict[str, str]] = None, path: Path = COUNTRIES_FILE):
        self._countries = countries if countries is not None else load_countries(path)
        logging.debug(f"Country table loaded with {len(self._countries)} entries")

    def __call__(self, code: str) -> Optional[str]:
        return self._countries.get((code or "").upper())

    def __len__(self) -> int:
        return len(self._countries)
