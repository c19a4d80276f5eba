"""
Steps that open something through the Navigator: URLs, phone calls, apps.
"""

import logging
from typing import Any, Dict, Mapping, Optional
from urllib.parse import quote

from ..errors import ConfigurationError, ExternalFailureError
from ..interfaces.platform import NAVIGATION
from ..types import StepType
from .base import StepContext, StepHandler, call_platform, first_of, require_string

logger = logging.getLogger(__name__)

# App name -> URL scheme on devices
NATIVE_APP_URLS = {
    'settings': 'app-settings:',
    'phone': 'tel:',
    'messages': 'sms:',
    'mail': 'mailto:',
    'maps': 'maps:',
}

# App name -> web app, for the browser environment
WEB_APP_URLS = {
    'phone': 'tel:',
    'messages': 'sms:',
    'mail': 'mailto:',
    'maps': 'https://maps.google.com',
    'calendar': 'https://calendar.google.com',
    'contacts': 'https://contacts.google.com',
    'notes': 'https://keep.google.com',
    'photos': 'https://photos.google.com',
    'drive': 'https://drive.google.com',
    'youtube': 'https://youtube.com',
    'twitter': 'https://twitter.com',
    'facebook': 'https://facebook.com',
    'instagram': 'https://instagram.com',
    'linkedin': 'https://linkedin.com',
    'github': 'https://github.com',
    'spotify': 'https://open.spotify.com',
    'netflix': 'https://netflix.com',
    'whatsapp': 'https://web.whatsapp.com',
    'telegram': 'https://web.telegram.org',
    'discord': 'https://discord.com/app',
    'slack': 'https://app.slack.com',
}


async def open_url(navigator, url: str) -> None:
    """Hand a URL to the navigator, failing if nothing can open it."""
    opened = await call_platform(f"Could not open {url}", navigator.open_url(url))
    if not opened:
        logger.warning(f"Navigator refused URL: {url}")
        raise ExternalFailureError(f"Cannot open URL: {url}")


class OpenUrlStep(StepHandler):
    step_type = StepType.OPEN_URL.value
    requires = (NAVIGATION,)
    sample_values = {'url': 'https://example.com'}

    def validate(self, config: Mapping[str, Any]) -> None:
        url = require_string(config, 'url')
        if ':' not in url:
            raise ConfigurationError('url', f"'{url}' is not a URL")

    async def execute(self, config: Mapping[str, Any], context: StepContext) -> Dict[str, Any]:
        navigator = self.collaborator(context, NAVIGATION)
        url = config['url'].strip()
        await open_url(navigator, url)
        return {'action': 'url_opened', 'url': url}


class CallStep(StepHandler):
    step_type = StepType.CALL.value
    requires = (NAVIGATION,)

    def validate(self, config: Mapping[str, Any]) -> None:
        require_string(config, 'phoneNumber')

    async def execute(self, config: Mapping[str, Any], context: StepContext) -> Dict[str, Any]:
        navigator = self.collaborator(context, NAVIGATION)
        phone_number = config['phoneNumber'].strip()
        await open_url(navigator, f"tel:{quote(phone_number, safe='+')}")
        return {'action': 'call_initiated', 'phoneNumber': phone_number}


class OpenAppStep(StepHandler):
    """
    Open an app by explicit `url`, or by `appName` through a lookup table.

    Unknown names fall back to the `<name>://` scheme when `scheme_fallback`
    is set (devices); in the browser there is no such fallback.
    """
    step_type = StepType.OPEN_APP.value
    requires = (NAVIGATION,)

    def __init__(self, app_urls: Optional[Mapping[str, str]] = None, scheme_fallback: bool = True):
        self.app_urls = dict(NATIVE_APP_URLS if app_urls is None else app_urls)
        self.scheme_fallback = scheme_fallback

    def resolve_app_url(self, app_name: str) -> Optional[str]:
        key = app_name.strip().lower()
        if key in self.app_urls:
            return self.app_urls[key]
        if self.scheme_fallback and key:
            return f"{key.replace(' ', '')}://"
        return None

    def validate(self, config: Mapping[str, Any]) -> None:
        if first_of(config, 'url', 'appName') is None:
            raise ConfigurationError('appName', "either 'appName' or 'url' is required")

    async def execute(self, config: Mapping[str, Any], context: StepContext) -> Dict[str, Any]:
        navigator = self.collaborator(context, NAVIGATION)
        app_name = config.get('appName') or ''
        url = config.get('url') or self.resolve_app_url(str(app_name))
        if not url:
            raise ConfigurationError('appName', f"no known URL for app '{app_name}'")

        await open_url(navigator, url)
        return {'action': 'app_opened', 'appName': app_name, 'url': url}
