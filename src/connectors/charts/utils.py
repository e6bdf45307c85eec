"""
Charts Plugin Utilities
-----------------------
Helper functions for logging, .env loading and JSON output.
"""
import json
import logging
from pathlib import Path
from typing import Any

from dotenv import load_dotenv


def setup_logging(level: str = "INFO") -> None:
    """Configure logging format and level."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        force=True,
    )


def load_env(dotenv_path: Path) -> None:
    """Load environment variables from .env file."""
    if dotenv_path.exists():
        load_dotenv(dotenv_path)
        logging.debug(f"Loaded .env from {dotenv_path}")
    else:
        logging.debug(f".env file not found at {dotenv_path}")


def write_json(data: Any, output_path: Path) -> None:
    """Write a payload as pretty JSON, creating parent directories."""
    try:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        with open(output_path, "w", encoding="utf-8") as f:
            json.dump(data, f, ensure_ascii=False, indent=2)
        logging.info(f"📁 Chart saved to: {output_path}")
    except OSError as e:
        raise IOError(f"Failed to write JSON file: {e}") from e
