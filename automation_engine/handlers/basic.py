"""
Notification, delay and variable steps.
"""

import logging
from typing import Any, Dict, Mapping

from ..errors import ConfigurationError
from ..interfaces.platform import NOTIFICATIONS
from ..types import StepType
from .base import StepContext, StepHandler, call_platform, require_string, to_number

logger = logging.getLogger(__name__)


class NotificationStep(StepHandler):
    step_type = StepType.NOTIFICATION.value
    requires = (NOTIFICATIONS,)

    def validate(self, config: Mapping[str, Any]) -> None:
        require_string(config, 'message')

    async def execute(self, config: Mapping[str, Any], context: StepContext) -> Dict[str, Any]:
        notifications = self.collaborator(context, NOTIFICATIONS)
        title = config.get('title') or context.settings.default_notification_title
        message = config['message']
        await call_platform("Could not show notification", notifications.show(str(title), message))
        return {'title': title, 'message': message}


class DelayStep(StepHandler):
    """Wait `delay` milliseconds. `duration` is read for older automations."""
    step_type = StepType.DELAY.value

    def _delay_ms(self, config: Mapping[str, Any], max_delay_ms=None) -> float:
        key = 'delay' if 'delay' in config else 'duration'
        if config.get(key) in (None, ''):
            raise ConfigurationError('delay', "'delay' is required (milliseconds)")
        delay = to_number(config, key)
        if delay < 0:
            raise ConfigurationError('delay', "must be zero or a positive number of milliseconds")
        if max_delay_ms is not None and delay > max_delay_ms:
            raise ConfigurationError('delay', f"must not exceed {max_delay_ms} ms")
        return delay

    def validate(self, config: Mapping[str, Any]) -> None:
        self._delay_ms(config)

    async def execute(self, config: Mapping[str, Any], context: StepContext) -> Dict[str, Any]:
        delay = self._delay_ms(config, context.settings.max_delay_ms)
        await context.platform.sleep(delay / 1000)
        return {'delay': delay}


class SetVariableStep(StepHandler):
    step_type = StepType.SET_VARIABLE.value

    def validate(self, config: Mapping[str, Any]) -> None:
        require_string(config, 'name')
        if 'value' not in config:
            raise ConfigurationError('value')

    async def execute(self, config: Mapping[str, Any], context: StepContext) -> Dict[str, Any]:
        name = config['name'].strip()
        value = config['value']
        context.variables.set(name, value)
        logger.info(f"Set variable '{name}'")
        return {'name': name, 'value': value}


class GetVariableStep(StepHandler):
    step_type = StepType.GET_VARIABLE.value

    def validate(self, config: Mapping[str, Any]) -> None:
        require_string(config, 'name')

    async def execute(self, config: Mapping[str, Any], context: StepContext) -> Dict[str, Any]:
        name = config['name'].strip()
        value = context.variables.get(name)
        found = value is not None
        if not found:
            value = config.get('defaultValue', '')
        return {'name': name, 'value': value, 'found': found}

