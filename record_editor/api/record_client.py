"""Record API client."""
import logging
from typing import Any, Dict, List, Optional

import requests

from config import EditorApiConfig
from record_editor.exceptions import TransportError

logger = logging.getLogger(__name__)


class RecordClient:
    """Client for the collection record API."""

    JSON_HEADERS = {"Content-Type": "application/json"}
    BANNER_ENDPOINT = "app-banner"
    NO_BANNER = "No banner message configured."

    def __init__(self, config: EditorApiConfig):
        """Initialize client."""
        self.config = config
        self.session = requests.Session()

        if config.api_key:
            self.session.headers.update({"Authorization": f"Bearer {config.api_key}"})

    def _url(self, endpoint: str) -> str:
        if endpoint.startswith("http"):
            return endpoint
        return f"{self.config.base_url}{endpoint}"

    def _handle(self, response: requests.Response) -> Any:
        """Raise for non-success status and decode the JSON body."""
        try:
            response.raise_for_status()
        except requests.exceptions.HTTPError as e:
            raise TransportError(f"STATUS {response.status_code}", response.status_code) from e

        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            raise TransportError(f"Invalid JSON from {response.url}") from e

    def _request(self, method: str, endpoint: str, payload: Optional[Dict[str, Any]] = None) -> Any:
        url = self._url(endpoint)
        logger.debug(f"{method} {url}")
        try:
            if method == "GET":
                response = self.session.get(url, timeout=self.config.timeout)
            elif method == "POST":
                response = self.session.post(
                    url, json=payload, headers=self.JSON_HEADERS, timeout=self.config.timeout
                )
            elif method == "PUT":
                response = self.session.put(
                    url, json=payload, headers=self.JSON_HEADERS, timeout=self.config.timeout
                )
            elif method == "DELETE":
                response = self.session.delete(
                    url, headers=self.JSON_HEADERS, timeout=self.config.timeout
                )
            else:
                raise ValueError(f"Unsupported method: {method}")
        except requests.exceptions.RequestException as e:
            logger.warning(f"Network error on {method} {url}: {e}")
            raise TransportError(f"Network error: {e}") from e

        return self._handle(response)

    def fetch_page(self, name: str) -> Dict[str, Any]:
        """
        Get a collection page.

        The API answers with a list whose first element carries the page
        heading and its items.

        Returns:
            Raw (wire-format) page dictionary
        """
        data = self._request("GET", name)
        if isinstance(data, list):
            data = data[0] if data else {}
        if not isinstance(data, dict):
            raise TransportError(f"Unexpected payload for '{name}'")
        return data

    def fetch_collection(self, name: str) -> List[Dict[str, Any]]:
        """Get the raw records of a collection."""
        return list(self.fetch_page(name).get("items") or [])

    def create_record(self, name: str, record: Dict[str, Any]) -> Any:
        """Create a record."""
        return self._request("POST", name, record)

    def update_record(self, name: str, record_id: str, record: Dict[str, Any]) -> Any:
        """Replace a record."""
        return self._request("PUT", f"{name}/{record_id}", record)

    def delete_record(self, name: str, record_id: str) -> None:
        """Delete a record."""
        self._request("DELETE", f"{name}/{record_id}")

    def fetch_banner(self) -> str:
        """Get the banner message (fallback text when none is configured)."""
        data = self._request("GET", self.BANNER_ENDPOINT)
        first = data[0] if isinstance(data, list) and data else data
        message = ""
        if isinstance(first, dict):
            message = str(first.get("banner") or "").strip()
        return message or self.NO_BANNER
