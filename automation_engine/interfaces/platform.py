"""
The collaborator surface an environment provides to step handlers.
"""

import asyncio
from dataclasses import dataclass, field
from typing import Awaitable, Callable, FrozenSet, Optional

from .clipboard import ClipboardService
from .http import HttpClient
from .location import LocationProvider
from .messaging import MessagingService
from .navigation import Navigator
from .notifications import NotificationHandler

# Collaborator names used by StepHandler.requires
MESSAGING = "messaging"
NAVIGATION = "navigation"
LOCATION = "location"
CLIPBOARD = "clipboard"
NOTIFICATIONS = "notifications"
HTTP = "http"

COLLABORATORS = (MESSAGING, NAVIGATION, LOCATION, CLIPBOARD, NOTIFICATIONS, HTTP)


@dataclass
class Platform:
    """
    Collaborators wired for one environment. Leave a field as None when the
    environment cannot provide it; steps needing it are then filtered out.
    """
    messaging: Optional[MessagingService] = None
    navigation: Optional[Navigator] = None
    location: Optional[LocationProvider] = None
    clipboard: Optional[ClipboardService] = None
    notifications: Optional[NotificationHandler] = None
    http: Optional[HttpClient] = None
    sleep: Callable[[float], Awaitable[None]] = field(default=asyncio.sleep)

    def available(self) -> FrozenSet[str]:
        """Names of the collaborators that are wired."""
        return frozenset(name for name in COLLABORATORS if getattr(self, name) is not None)
