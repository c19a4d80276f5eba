"""
Webhook step.
"""

import logging
from typing import Any, Dict, Mapping
from urllib.parse import urlparse

from ..errors import ConfigurationError, ExternalFailureError
from ..interfaces.platform import HTTP
from ..types import StepType
from .base import StepContext, StepHandler, call_platform, require_string

logger = logging.getLogger(__name__)

HTTP_METHODS = ('GET', 'POST', 'PUT', 'PATCH', 'DELETE')


class WebhookStep(StepHandler):
    """Issue an HTTP request. A response status of 400 or above fails the step."""
    step_type = StepType.WEBHOOK.value
    requires = (HTTP,)
    sample_values = {'url': 'https://example.com', 'method': 'POST'}

    def validate(self, config: Mapping[str, Any]) -> None:
        url = require_string(config, 'url')
        parsed = urlparse(url.strip())
        if parsed.scheme not in ('http', 'https') or not parsed.netloc:
            raise ConfigurationError('url', "must be a valid HTTP/HTTPS URL")

        method = config.get('method')
        if method and str(method).upper() not in HTTP_METHODS:
            raise ConfigurationError('method', f"must be one of: {', '.join(HTTP_METHODS)}")

        headers = config.get('headers')
        if headers is not None and not isinstance(headers, dict):
            raise ConfigurationError('headers', "must be an object")

    async def execute(self, config: Mapping[str, Any], context: StepContext) -> Dict[str, Any]:
        http = self.collaborator(context, HTTP)
        url = config['url'].strip()
        method = str(config.get('method') or context.settings.default_http_method).upper()
        headers = {str(k): str(v) for k, v in (config.get('headers') or {}).items()}
        body = config.get('body')

        logger.info(f"Webhook {method} {url}")
        response = await call_platform(
            f"Webhook {method} {url} failed",
            http.request(method, url, headers=headers, body=body, timeout=context.settings.http_timeout)
        )

        if response.status_code >= 400:
            raise ExternalFailureError(f"Webhook {method} {url} returned HTTP {response.status_code}")

        return {'url': url, 'method': method, 'statusCode': response.status_code, 'response': response.body}
