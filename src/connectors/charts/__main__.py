#!/usr/bin/env python3
"""
Spotify Charts
--------------
Fetch the chart catalog or a single chart through the charts info plugin.

Usage:
    # List available charts per country
    python -m src.connectors.charts --list-charts

    # Fetch one chart
    python -m src.connectors.charts --chart-id tracks/US

    # Save a chart to a file
    python -m src.connectors.charts --chart-id albums/SE --output ./albums_se.json
"""
import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, Optional

# Add project root to path to ensure imports work when run as script
sys.path.append(str(Path(__file__).parent.parent.parent.parent))

from src.connectors.charts.config import CHART_SOURCE, ChartsConfig
from src.connectors.charts.host import LocalInfoHost
from src.connectors.charts.models import InfoRequestData, InfoType
from src.connectors.charts.transport import NetworkTransport
from src.connectors.charts.utils import load_env, setup_logging, write_json


def parse_args(argv=None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Fetch Spotify charts through the charts info plugin.",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    action = parser.add_mutually_exclusive_group(required=True)
    action.add_argument(
        "--list-charts",
        action="store_true",
        help="Print the chart catalog (countries and chart types)",
    )
    action.add_argument(
        "--chart-id",
        help="Chart to fetch, as type/geo (e.g. tracks/US)",
    )
    parser.add_argument(
        "-o", "--output",
        type=Path,
        help="Write the payload to this JSON file instead of stdout",
    )
    parser.add_argument(
        "--api-url",
        help="Chart provider base URL (default: CHARTS_API_URL or the public endpoint)",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        help="HTTP timeout in seconds (default: CHARTS_TIMEOUT or 30)",
    )
    parser.add_argument(
        "-e", "--env",
        type=Path,
        default=Path(__file__).parent.parent.parent.parent / ".env",
        help="Path to the .env file",
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default="INFO",
        help="Logging level",
    )
    return parser.parse_args(argv)


def build_config(args: argparse.Namespace) -> ChartsConfig:
    """Environment config, overridden by command line options."""
    config = ChartsConfig.from_env()
    if args.api_url:
        config = ChartsConfig(api_url=args.api_url, timeout=config.timeout)
    if args.timeout:
        config.timeout = args.timeout
    return config


def build_request(args: argparse.Namespace) -> InfoRequestData:
    if args.list_charts:
        return InfoRequestData(type=InfoType.CHART_CAPABILITIES, input={}, caller="cli")
    return InfoRequestData(
        type=InfoType.CHART,
        input={"chart_source": CHART_SOURCE, "chart_id": args.chart_id},
        caller="cli",
    )


async def run(config: ChartsConfig, request_data: InfoRequestData) -> Optional[Dict[str, Any]]:
    """Connect a host to the provider and send one request."""
    host = LocalInfoHost(config)
    transport = NetworkTransport(loop=asyncio.get_running_loop(), timeout=config.timeout)
    try:
        await host.connect(transport)
        return await host.get_info(request_data)
    finally:
        transport.close()


def main(argv=None) -> None:
    """Main entry point."""
    try:
        args = parse_args(argv)
        setup_logging(args.log_level)
        load_env(args.env)

        config = build_config(args)
        payload = asyncio.run(run(config, build_request(args)))

        if payload is None:
            logging.error("Chart request failed")
            sys.exit(1)

        if args.output:
            write_json(payload, args.output)
        else:
            print(json.dumps(payload, ensure_ascii=False, indent=2))

    except KeyboardInterrupt:
        logging.info("Script interrupted by user")
        sys.exit(130)


if __name__ == "__main__":
    main()
