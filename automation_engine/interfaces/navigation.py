"""
Navigation interface for opening URLs and app URL schemes.
"""

from abc import ABC, abstractmethod


class Navigator(ABC):
    """Abstract interface for opening URLs (http(s), tel:, sms:, app schemes)."""

    @abstractmethod
    async def open_url(self, url: str) -> bool:
        """
        Open a URL with the platform handler.

        Args:
            url: URL or URL scheme to open

        Returns:
            True if the URL was handed off, False if nothing can open it
        """
        pass
