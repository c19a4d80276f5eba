"""
SMS and email steps.

Both hand the message off to a compose view; success means the compose
view was opened, not that anything was sent.
"""

import logging
import re
from typing import Any, Dict, Mapping

from ..errors import ConfigurationError
from ..interfaces.platform import MESSAGING
from ..types import StepType
from .base import StepContext, StepHandler, call_platform, require_string

logger = logging.getLogger(__name__)

EMAIL_PATTERN = re.compile(r'^[^\s@]+@[^\s@]+\.[^\s@]+$')


class SmsStep(StepHandler):
    step_type = StepType.SMS.value
    requires = (MESSAGING,)

    def validate(self, config: Mapping[str, Any]) -> None:
        require_string(config, 'phoneNumber')
        require_string(config, 'message')

    async def execute(self, config: Mapping[str, Any], context: StepContext) -> Dict[str, Any]:
        messaging = self.collaborator(context, MESSAGING)
        phone_number = config['phoneNumber'].strip()
        message = config['message']

        logger.info(f"Opening SMS compose (message length {len(message)})")
        await call_platform("Could not open SMS", messaging.compose_sms(phone_number, message))

        return {'action': 'sms_opened', 'phoneNumber': phone_number, 'message': message}


class EmailStep(StepHandler):
    step_type = StepType.EMAIL.value
    requires = (MESSAGING,)
    sample_values = {'email': 'someone@example.com'}

    def validate(self, config: Mapping[str, Any]) -> None:
        email = require_string(config, 'email')
        if not EMAIL_PATTERN.match(email.strip()):
            raise ConfigurationError('email', f"'{email}' is not a valid email address")
        require_string(config, 'subject')
        require_string(config, 'message')

    async def execute(self, config: Mapping[str, Any], context: StepContext) -> Dict[str, Any]:
        messaging = self.collaborator(context, MESSAGING)
        email = config['email'].strip()
        subject = config['subject']
        message = config['message']

        await call_platform("Could not open email", messaging.compose_email(email, subject, message))

        return {'action': 'email_opened', 'email': email, 'subject': subject, 'message': message}
