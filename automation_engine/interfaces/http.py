"""
HTTP interface for webhook steps.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class HttpResponse:
    """Minimal view of an HTTP response."""
    status_code: int
    body: Any = None  # Parsed JSON when possible, otherwise text

    @property
    def ok(self) -> bool:
        return self.status_code < 400


class HttpClient(ABC):
    """
    Abstract interface for issuing HTTP requests.

    See automation_engine.http_client.HttpxClient for the default
    implementation.
    """

    @abstractmethod
    async def request(
        self,
        method: str,
        url: str,
        headers: Optional[Dict[str, str]] = None,
        body: Any = None,
        timeout: Optional[float] = None
    ) -> HttpResponse:
        """
        Issue a request.

        Args:
            method: HTTP method (GET, POST, ...)
            url: Target URL
            headers: Optional request headers
            body: Optional body; dicts/lists are sent as JSON
            timeout: Optional timeout in seconds

        Returns:
            HttpResponse

        Raises:
            ExternalFailureError: If the request could not be completed
        """
        pass
