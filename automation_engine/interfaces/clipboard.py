"""
Clipboard interface.
"""

from abc import ABC, abstractmethod


class ClipboardService(ABC):
    """Abstract interface for reading and writing the system clipboard."""

    @abstractmethod
    async def read_text(self) -> str:
        """Return the clipboard text (empty string if none)."""
        pass

    @abstractmethod
    async def write_text(self, text: str) -> None:
        """Replace the clipboard contents with `text`."""
        pass
