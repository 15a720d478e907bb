"""
Snapshot source for the availability API.
"""

import asyncio
import logging
from typing import Any, Dict

import requests

from ..domain.exceptions import SnapshotError
from ..schemas import FreeBusySnapshot

logger = logging.getLogger(__name__)

DISABLED_MESSAGE = "Free/busy time is not being shared right now."
UNAVAILABLE_MESSAGE = "There was a problem getting availability. Please try again later."


class HttpSnapshotSource:
    """
    Fetches the snapshot with a single GET request.

    Failures are reported, never retried: the next scheduled refresh is the
    retry.
    """

    def __init__(self, url: str, timeout: float = 30):
        """
        Initialize the HTTP source.

        Args:
            url: Free/busy endpoint URL
            timeout: Request timeout in seconds
        """
        self.url = url
        self.timeout = timeout
        self.headers = {"Accept": "application/json"}

    def get(self) -> FreeBusySnapshot:
        """
        Request and validate the snapshot.

        Raises:
            SnapshotError: If the request fails, the response status is not
                2xx or the body is not a valid snapshot
        """
        logger.debug("Fetching snapshot from %s", self.url)

        try:
            response = requests.get(self.url, headers=self.headers, timeout=self.timeout)
        except requests.exceptions.RequestException as exc:
            raise SnapshotError(f"Failed to fetch free/busy snapshot: {exc}") from exc

        if not response.ok:
            raise SnapshotError(self._error_message(response))

        try:
            payload = response.json()
        except ValueError as exc:
            raise SnapshotError(f"Free/busy response is not valid JSON: {exc}") from exc

        return FreeBusySnapshot.from_payload(payload)

    async def fetch_snapshot(self) -> FreeBusySnapshot:
        return await asyncio.to_thread(self.get)

    @staticmethod
    def _error_message(response: requests.Response) -> str:
        """
        Map an error response to a user-facing message.

        A 503 with ``{"error": "disabled"}`` means sharing is switched off;
        everything else is reported as unavailable.
        """
        body: Dict[str, Any] = {}
        try:
            decoded = response.json()
            if isinstance(decoded, dict):
                body = decoded
        except ValueError:
            logger.debug("Error response from %s has no JSON body", response.url)

        logger.warning("Free/busy request failed with HTTP %s (%s)", response.status_code, body.get("error"))

        if response.status_code == 503 and body.get("error") == "disabled":
            return DISABLED_MESSAGE
        return UNAVAILABLE_MESSAGE
