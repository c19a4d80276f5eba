"""
Step handler registry and the per-environment handler sets.
"""

import logging
from typing import Dict, FrozenSet, Iterable, List, Optional

from ..interfaces import Platform
from ..types import StepType
from .base import StepHandler
from .basic import DelayStep, GetVariableStep, NotificationStep, SetVariableStep
from .compute import ConditionStep, LoopStep, MathOpStep, TextOpStep
from .device import ClipboardStep, LocationStep
from .messaging import EmailStep, SmsStep
from .navigation import WEB_APP_URLS, CallStep, OpenAppStep, OpenUrlStep
from .network import WebhookStep

logger = logging.getLogger(__name__)


class HandlerRegistry:
    """Maps step type tags to handlers."""

    def __init__(self, handlers: Optional[Iterable[StepHandler]] = None):
        self._handlers: Dict[str, StepHandler] = {}
        for handler in handlers or []:
            self.register(handler)

    def register(self, handler: StepHandler) -> None:
        """Register a handler, replacing any existing one for the same type."""
        if not handler.step_type:
            raise ValueError(f"{type(handler).__name__} has no step_type")
        if handler.step_type in self._handlers:
            logger.info(f"Replacing handler for step type '{handler.step_type}'")
        self._handlers[handler.step_type] = handler

    def unregister(self, step_type: str) -> None:
        self._handlers.pop(step_type, None)

    def get(self, step_type: str) -> Optional[StepHandler]:
        return self._handlers.get(step_type)

    def __contains__(self, step_type: str) -> bool:
        return step_type in self._handlers

    def __len__(self) -> int:
        return len(self._handlers)

    @property
    def step_types(self) -> List[str]:
        return list(self._handlers)

    def capabilities(self, platform: Platform) -> FrozenSet[str]:
        """
        Step types this registry can run on `platform`: registered types
        whose required collaborators are all wired.
        """
        available = platform.available()
        return frozenset(
            step_type for step_type, handler in self._handlers.items()
            if handler.is_available(available)
        )


def create_default_registry() -> HandlerRegistry:
    """Full handler set, for the device environment."""
    return HandlerRegistry([
        NotificationStep(),
        DelayStep(),
        SetVariableStep(),
        GetVariableStep(),
        TextOpStep(),
        MathOpStep(),
        SmsStep(),
        CallStep(),
        EmailStep(),
        WebhookStep(),
        OpenUrlStep(),
        LocationStep(),
        ClipboardStep(),
        OpenAppStep(),
        ConditionStep(),
        LoopStep(),
    ])


# Step types the browser environment accepts
WEB_STEP_TYPES = frozenset(t.value for t in (
    StepType.NOTIFICATION,
    StepType.DELAY,
    StepType.SET_VARIABLE,
    StepType.GET_VARIABLE,
    StepType.TEXT_OP,
    StepType.MATH_OP,
    StepType.SMS,
    StepType.CALL,
    StepType.EMAIL,
    StepType.OPEN_URL,
    StepType.OPEN_APP,
    StepType.LOCATION,
    StepType.CLIPBOARD,
))


def create_web_registry() -> HandlerRegistry:
    """Restricted handler set, for the browser environment."""
    registry = create_default_registry()
    for step_type in registry.step_types:
        if step_type not in WEB_STEP_TYPES:
            registry.unregister(step_type)
    registry.register(OpenAppStep(app_urls=WEB_APP_URLS, scheme_fallback=False))
    return registry
