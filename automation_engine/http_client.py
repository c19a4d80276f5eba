"""
Default HTTP collaborator backed by httpx.
"""

import json
import logging
from typing import Any, Dict, Optional

import httpx

from .errors import ExternalFailureError
from .interfaces import HttpClient, HttpResponse

logger = logging.getLogger(__name__)


class HttpxClient(HttpClient):
    """
    HttpClient implementation using httpx.AsyncClient.

    Pass an existing client to share a connection pool (or a MockTransport in
    tests); otherwise a short-lived client is created per request.
    """

    def __init__(self, client: Optional[httpx.AsyncClient] = None, timeout: float = 30.0):
        self._client = client
        self.timeout = timeout

    async def request(
        self,
        method: str,
        url: str,
        headers: Optional[Dict[str, str]] = None,
        body: Any = None,
        timeout: Optional[float] = None
    ) -> HttpResponse:
        kwargs: Dict[str, Any] = {
            'headers': headers or {},
            'timeout': timeout if timeout is not None else self.timeout,
        }
        if isinstance(body, (dict, list)):
            kwargs['json'] = body
        elif body is not None:
            kwargs['content'] = str(body)

        try:
            if self._client is not None:
                response = await self._client.request(method, url, **kwargs)
            else:
                async with httpx.AsyncClient() as client:
                    response = await client.request(method, url, **kwargs)
        except httpx.HTTPError as e:
            logger.warning(f"HTTP {method} {url} failed: {e}")
            raise ExternalFailureError(f"Request to {url} failed: {e}") from e

        # Try to parse result as JSON
        try:
            parsed = response.json()
        except (json.JSONDecodeError, ValueError):
            parsed = response.text

        return HttpResponse(status_code=response.status_code, body=parsed)
