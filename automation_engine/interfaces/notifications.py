"""
Notification interface for showing alerts to the user.
"""

from abc import ABC, abstractmethod


class NotificationHandler(ABC):
    """
    Abstract interface for showing a notification or alert.

    Native apps typically show a system alert; browsers fall back to a
    Notification or window.alert.
    """

    @abstractmethod
    async def show(self, title: str, message: str) -> None:
        """
        Show a notification.

        Args:
            title: Notification title
            message: Notification body
        """
        pass
