"""
Collaborator interfaces injected into step handlers.
"""

from .clipboard import ClipboardService
from .http import HttpClient, HttpResponse
from .location import Coordinates, LocationProvider
from .messaging import MessagingService
from .navigation import Navigator
from .notifications import NotificationHandler
from .platform import Platform

__all__ = [
    'ClipboardService',
    'Coordinates',
    'HttpClient',
    'HttpResponse',
    'LocationProvider',
    'MessagingService',
    'Navigator',
    'NotificationHandler',
    'Platform',
]
