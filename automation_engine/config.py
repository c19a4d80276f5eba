"""
Engine settings.
"""

from dataclasses import dataclass, fields
from typing import Any, Mapping, Optional


@dataclass
class EngineSettings:
    """Tunables shared by the executor and step handlers."""
    http_timeout: float = 30.0  # Seconds, passed to the HTTP collaborator
    default_http_method: str = "POST"
    default_notification_title: str = "Notification"
    maps_url: str = "https://maps.google.com/?q={latitude},{longitude}"
    max_delay_ms: Optional[int] = None  # None = no upper bound on delay steps

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "EngineSettings":
        """Build settings from a plain mapping, ignoring unknown keys."""
        known = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in data.items() if k in known})
