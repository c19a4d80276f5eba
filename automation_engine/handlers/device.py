"""
Location and clipboard steps.
"""

import logging
from typing import Any, Dict, Mapping
from urllib.parse import quote

from ..errors import ConfigurationError
from ..interfaces.platform import CLIPBOARD, LOCATION, MESSAGING, NAVIGATION
from ..types import StepType
from .base import StepContext, StepHandler, call_platform, require_field, require_string, to_number
from .navigation import open_url

logger = logging.getLogger(__name__)

LOCATION_ACTIONS = {
    'get-current': 'get-current',
    'get_current': 'get-current',
    'share': 'share',
    'share-location': 'share',
    'share_location': 'share',
    'open-maps': 'open-maps',
    'open_maps': 'open-maps',
}

CLIPBOARD_ACTIONS = {
    'copy': 'copy',
    'set': 'copy',
    'write': 'copy',
    'paste': 'paste',
    'get': 'paste',
    'read': 'paste',
}


def _action(config: Mapping[str, Any], actions: Mapping[str, str]) -> str:
    action = require_field(config, 'action')
    normalized = actions.get(str(action).strip().lower())
    if normalized is None:
        choices = ', '.join(sorted(set(actions.values())))
        raise ConfigurationError('action', f"unknown action '{action}' (expected one of: {choices})")
    return normalized


class LocationStep(StepHandler):
    """
    Geolocation step.

    Actions:
    - get-current: report the device position
    - share: build a maps link for the position and, if `phoneNumber` is set,
      open an SMS compose view with it
    - open-maps: open the maps link for `latitude`/`longitude`, or for the
      device position when `useCurrentLocation` is set
    """
    step_type = StepType.LOCATION.value
    requires = (LOCATION,)
    sample_values = {'action': 'get-current'}

    def validate(self, config: Mapping[str, Any]) -> None:
        action = _action(config, LOCATION_ACTIONS)
        if action == 'open-maps' and not config.get('useCurrentLocation'):
            to_number(config, 'latitude')
            to_number(config, 'longitude')

    async def _position(self, context: StepContext):
        provider = self.collaborator(context, LOCATION)
        return await call_platform("Could not get location", provider.get_current_position())

    async def execute(self, config: Mapping[str, Any], context: StepContext) -> Dict[str, Any]:
        action = _action(config, LOCATION_ACTIONS)

        if action == 'get-current':
            position = await self._position(context)
            return {
                'action': action,
                'latitude': position.latitude,
                'longitude': position.longitude,
                'accuracy': position.accuracy,
                'altitude': position.altitude,
            }

        if action == 'share':
            position = await self._position(context)
            maps_url = context.settings.maps_url.format(latitude=position.latitude, longitude=position.longitude)
            message = config.get('message') or 'My current location'
            phone_number = config.get('phoneNumber')
            if phone_number:
                logger.info("Sharing location by SMS")
                messaging = self.collaborator(context, MESSAGING)
                await call_platform("Could not open SMS", messaging.compose_sms(str(phone_number), f"{message}\n{maps_url}"))
            return {
                'action': action,
                'latitude': position.latitude,
                'longitude': position.longitude,
                'locationUrl': maps_url,
                'message': message,
                'phoneNumber': phone_number,
                'shared': bool(phone_number),
            }

        # open-maps
        navigator = self.collaborator(context, NAVIGATION)
        if config.get('useCurrentLocation'):
            position = await self._position(context)
            latitude, longitude = position.latitude, position.longitude
        else:
            latitude = to_number(config, 'latitude')
            longitude = to_number(config, 'longitude')
        label = config.get('label') or 'Location'
        maps_url = context.settings.maps_url.format(latitude=latitude, longitude=longitude)
        maps_url = f"{maps_url}&label={quote(str(label))}"
        await open_url(navigator, maps_url)
        return {'action': action, 'latitude': latitude, 'longitude': longitude, 'label': label, 'mapsUrl': maps_url}


class ClipboardStep(StepHandler):
    step_type = StepType.CLIPBOARD.value
    requires = (CLIPBOARD,)
    sample_values = {'action': 'paste'}

    def validate(self, config: Mapping[str, Any]) -> None:
        if _action(config, CLIPBOARD_ACTIONS) == 'copy':
            require_string(config, 'text')

    async def execute(self, config: Mapping[str, Any], context: StepContext) -> Dict[str, Any]:
        clipboard = self.collaborator(context, CLIPBOARD)
        action = _action(config, CLIPBOARD_ACTIONS)

        if action == 'copy':
            text = config['text']
            await call_platform("Could not write clipboard", clipboard.write_text(text))
            return {'action': 'copy', 'text': text}

        text = await call_platform("Could not read clipboard", clipboard.read_text())
        return {'action': 'paste', 'text': text or ''}
