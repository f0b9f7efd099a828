"""
Bootstrap script fetching for the embed API.
"""

from typing import Optional

import requests

from embed_bridge.common.logger import setup_logger

logger = setup_logger(__name__)


class EmbedBridgeError(Exception):
    """Base class for Embed Bridge errors."""
    pass


class ScriptLoadError(EmbedBridgeError):
    """Raised when the provider's bootstrap script cannot be fetched."""
    pass


class ScriptFetcher:
    """Downloads the provider bootstrap script over HTTP."""

    DEFAULT_TIMEOUT = 10  # seconds

    def __init__(self, timeout: int = DEFAULT_TIMEOUT, session: Optional[requests.Session] = None):
        """
        Args:
            timeout: Request timeout in seconds
            session: Optional requests session (connection reuse, test doubles)
        """
        self.timeout = timeout
        self._session = session or requests.Session()

    def fetch(self, url: str) -> str:
        """
        Fetch the script body.

        Args:
            url: Script URL

        Returns:
            Script source text

        Raises:
            ScriptLoadError: On timeout, connection failure or non-200 status
        """
        try:
            response = self._session.get(url, timeout=self.timeout)
        except requests.Timeout:
            raise ScriptLoadError(f"Timed out fetching {url}")
        except requests.RequestException as e:
            raise ScriptLoadError(f"Error fetching {url}: {e}")

        if response.status_code != 200:
            raise ScriptLoadError(f"Fetching {url} failed: HTTP {response.status_code}")

        logger.debug("Fetched bootstrap script (%d bytes)", len(response.text))
        return response.text
