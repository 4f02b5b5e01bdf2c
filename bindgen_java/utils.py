"""Utility functions for loading component interface metadata.

This module loads the JSON form of a component interface from files and
URLs with proper error handling, and turns it into a ``ComponentInterface``.
"""

import json
from pathlib import Path
from typing import Any
from urllib.parse import urlparse

import requests

from .codegen.core.interface import ComponentInterface
from .logging_config import get_logger

logger = get_logger(__name__)


class InterfaceLoaderError(Exception):
    """Raised when interface metadata cannot be loaded or parsed."""

    pass


def load_json_from_file(file_path: str | Path) -> tuple[str, Any]:
    """Load JSON data from a local file.

    Args:
        file_path: Path to the JSON file.

    Returns:
        Tuple of (source description, parsed JSON data).

    Raises:
        FileNotFoundError: If file doesn't exist.
        InterfaceLoaderError: If file cannot be read or JSON is invalid.
    """
    file_path = Path(file_path)
    logger.debug("Attempting to load interface from file: %s", file_path)

    if not file_path.exists():
        logger.error("File not found: %s", file_path)
        raise FileNotFoundError(f"File not found: {file_path}")

    if file_path.suffix.lower() != ".json":
        logger.warning("File does not have .json extension: %s", file_path)

    try:
        with file_path.open("r", encoding="utf-8") as f:
            data = json.load(f)
        logger.info("Loaded interface metadata from %s", file_path)
        return str(file_path), data
    except json.JSONDecodeError as e:
        logger.error("Invalid JSON in file %s: %s", file_path, e)
        raise InterfaceLoaderError(f"Invalid JSON in file {file_path}: {e}") from e
    except OSError as e:
        logger.error("Error reading file %s: %s", file_path, e)
        raise InterfaceLoaderError(f"Error reading file {file_path}: {e}") from e


def load_json_from_url(url: str, timeout: int = 30) -> tuple[str, Any]:
    """Load JSON data from a URL.

    Args:
        url: URL to fetch JSON from.
        timeout: Request timeout in seconds.

    Returns:
        Tuple of (source description, parsed JSON data).

    Raises:
        InterfaceLoaderError: If URL is invalid, request fails, or response isn't valid JSON.
    """
    logger.debug("Attempting to load interface from URL: %s", url)

    parsed_url = urlparse(url)
    if not all([parsed_url.scheme, parsed_url.netloc]):
        logger.error("Invalid URL format: %s", url)
        raise InterfaceLoaderError(f"Invalid URL: {url}")

    try:
        response = requests.get(url, timeout=timeout)
        response.raise_for_status()

        content_type = response.headers.get("content-type", "").lower()
        if "application/json" not in content_type and not url.endswith(".json"):
            logger.warning("URL %s does not have JSON content type: %s", url, content_type)

        data = response.json()
        logger.info("Loaded interface metadata from %s", url)
        return url, data

    except requests.exceptions.Timeout as e:
        logger.error("Request timeout for URL: %s", url)
        raise InterfaceLoaderError(f"Request timeout for URL: {url}") from e
    except requests.exceptions.ConnectionError as e:
        logger.error("Connection error for URL %s: %s", url, e)
        raise InterfaceLoaderError(f"Connection error for URL: {url}") from e
    except requests.exceptions.HTTPError as e:
        logger.error("HTTP error %s for URL: %s", e.response.status_code, url)
        raise InterfaceLoaderError(
            f"HTTP error {e.response.status_code} for URL: {url}"
        ) from e
    except requests.exceptions.JSONDecodeError as e:
        logger.error("Invalid JSON response from URL %s: %s", url, e)
        raise InterfaceLoaderError(f"Invalid JSON response from URL {url}: {e}") from e
    except requests.exceptions.RequestException as e:
        logger.error("Request error for URL %s: %s", url, e)
        raise InterfaceLoaderError(f"Request error for URL {url}: {e}") from e


def is_url(source: str | Path) -> bool:
    """True when ``source`` looks like an http(s) URL."""
    return isinstance(source, str) and urlparse(source).scheme in ("http", "https")


def load_interface(source: str | Path, timeout: int = 30) -> tuple[str, ComponentInterface]:
    """Load a component interface from a file path or URL.

    Args:
        source: Local path or http(s) URL of the interface metadata.
        timeout: Request timeout in seconds (only used for URLs).

    Returns:
        Tuple of (source description, component interface).

    Raises:
        InterfaceLoaderError: If loading fails or the metadata is malformed.
        FileNotFoundError: If a local file doesn't exist.
    """
    if not source:
        raise InterfaceLoaderError("An interface file or URL must be provided")

    if is_url(source):
        description, data = load_json_from_url(source, timeout)
    else:
        description, data = load_json_from_file(source)

    try:
        ci = ComponentInterface.from_dict(data)
    except (ValueError, KeyError, TypeError) as e:
        logger.error("Malformed interface metadata in %s: %s", description, e)
        raise InterfaceLoaderError(f"Malformed interface metadata in {description}: {e}") from e

    logger.debug("Interface %s loaded from %s", ci.namespace, description)
    return description, ci
