"""
Geolocation interface.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Coordinates:
    """A position fix."""
    latitude: float
    longitude: float
    accuracy: Optional[float] = None  # Meters
    altitude: Optional[float] = None


class LocationProvider(ABC):
    """Abstract interface for querying the device position."""

    @abstractmethod
    async def get_current_position(self) -> Coordinates:
        """
        Get the current position, prompting for permission if needed.

        Returns:
            Coordinates of the device

        Raises:
            PermissionError: If the user denied location access
        """
        pass
