"""
Step handlers, one per step type, and the registry that maps tags to them.
"""

from .base import StepContext, StepHandler
from .basic import DelayStep, GetVariableStep, NotificationStep, SetVariableStep
from .compute import ConditionStep, LoopStep, MathOpStep, TextOpStep
from .device import ClipboardStep, LocationStep
from .messaging import EmailStep, SmsStep
from .navigation import CallStep, OpenAppStep, OpenUrlStep
from .network import WebhookStep
from .registry import WEB_STEP_TYPES, HandlerRegistry, create_default_registry, create_web_registry

__all__ = [
    'StepContext',
    'StepHandler',
    'HandlerRegistry',
    'create_default_registry',
    'create_web_registry',
    'WEB_STEP_TYPES',
    'NotificationStep',
    'DelayStep',
    'SetVariableStep',
    'GetVariableStep',
    'TextOpStep',
    'MathOpStep',
    'SmsStep',
    'CallStep',
    'EmailStep',
    'WebhookStep',
    'OpenUrlStep',
    'LocationStep',
    'ClipboardStep',
    'OpenAppStep',
    'ConditionStep',
    'LoopStep',
]
