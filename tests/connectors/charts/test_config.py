"""
Tests for configuration and country name handling.
"""
import pytest

from src.connectors.charts.config import (
    DEFAULT_API_URL,
    DEFAULT_TIMEOUT,
    ChartsConfig,
    load_countries,
)
from src.connectors.charts.countries import CountryResolver, humanize_country


def test_config_urls():
    config = ChartsConfig(api_url="http://charts.test")

    assert config.api_url == "http://charts.test/"
    assert config.catalog_url() == "http://charts.test/toplist/charts"
    assert config.chart_url("tracks/US") == "http://charts.test/toplist/tracks/US/"


def test_config_from_env(monkeypatch):
    monkeypatch.setenv("CHARTS_API_URL", "http://mirror.test/")
    monkeypatch.setenv("CHARTS_TIMEOUT", "2.5")

    config = ChartsConfig.from_env()

    assert config.api_url == "http://mirror.test/"
    assert config.timeout == 2.5


def test_config_from_env_defaults(monkeypatch):
    monkeypatch.delenv("CHARTS_API_URL", raising=False)
    monkeypatch.setenv("CHARTS_TIMEOUT", "soon")

    config = ChartsConfig.from_env()

    assert config.api_url == DEFAULT_API_URL
    assert config.timeout == DEFAULT_TIMEOUT


def test_bundled_country_table():
    countries = load_countries()

    assert countries["US"] == "UnitedStates"
    assert countries["SE"] == "Sweden"
    # Unquoted, NO would be read as a boolean key
    assert countries["NO"] == "Norway"


def test_missing_country_table(tmp_path):
    with pytest.raises(RuntimeError):
        load_countries(tmp_path / "missing.yaml")


def test_country_table_from_file(tmp_path):
    path = tmp_path / "countries.yaml"
    path.write_text('"fi": "Finland"\n', encoding="utf-8")

    resolver = CountryResolver(path=path)

    assert len(resolver) == 1
    assert resolver("FI") == "Finland"
    assert resolver("fi") == "Finland"
    assert resolver("SE") is None
    assert resolver(None) is None


@pytest.mark.parametrize(
    "name, expected",
    [
        ("UnitedStates", "United States"),
        ("UnitedKingdom", "United Kingdom"),
        ("Sweden", "Sweden"),
        ("CzechRepublic", "Czech Republic"),
        ("USA", "U S A"),
        ("", ""),
    ],
)
def test_humanize_country(name, expected):
    assert humanize_country(name) == expected
