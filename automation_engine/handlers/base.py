"""
Step handler base class and execution context.
"""

import math
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Awaitable, Dict, Iterable, Mapping, Optional, Tuple

from ..config import EngineSettings
from ..errors import ConfigurationError, ExternalFailureError, PlatformUnsupportedError, StepError
from ..interfaces import Platform
from ..types import Step
from ..variables import VariableStore


@dataclass
class StepContext:
    """What a handler can reach while executing one step."""
    variables: VariableStore
    platform: Platform
    step: Step
    settings: EngineSettings = field(default_factory=EngineSettings)


class StepHandler(ABC):
    """
    Performs one step type.

    Subclasses set `step_type` and `requires` (collaborator names from
    automation_engine.interfaces.platform) and implement `validate` and
    `execute`. The config passed to both has already been resolved.
    """

    step_type: str = ""
    requires: Tuple[str, ...] = ()

    # Stand-ins for fields whose value is only known at run time ({{...}}),
    # used by pre-flight validation. Fields not listed get a generic value.
    sample_values: Mapping[str, Any] = {}

    @abstractmethod
    def validate(self, config: Mapping[str, Any]) -> None:
        """
        Check the config.

        Raises:
            ConfigurationError: naming the first missing/invalid field
        """
        pass

    @abstractmethod
    async def execute(self, config: Mapping[str, Any], context: StepContext) -> Dict[str, Any]:
        """
        Perform the step's side effect.

        Returns:
            Output dict echoing the resolved parameters, for audit/debugging.
            Set 'success': False (with 'error') to fail the step without raising.
        """
        pass

    def is_available(self, collaborators: Iterable[str]) -> bool:
        """True if every collaborator this handler requires is wired."""
        available = set(collaborators)
        return all(name in available for name in self.requires)

    def collaborator(self, context: StepContext, name: str) -> Any:
        """Get a wired collaborator or raise PlatformUnsupportedError."""
        value = getattr(context.platform, name, None)
        if value is None:
            raise PlatformUnsupportedError(name, self.step_type)
        return value


def require_field(config: Mapping[str, Any], name: str, message: Optional[str] = None) -> Any:
    """Return config[name], raising ConfigurationError if missing or blank."""
    value = config.get(name)
    if value is None or (isinstance(value, str) and not value.strip()):
        raise ConfigurationError(name, message)
    return value


def require_string(config: Mapping[str, Any], name: str) -> str:
    value = require_field(config, name)
    if not isinstance(value, str):
        raise ConfigurationError(name, "must be a string")
    return value


def to_number(config: Mapping[str, Any], name: str, default: Optional[float] = None) -> float:
    """
    Read a numeric field. Numeric strings are accepted since values that
    came through a variable reference arrive as text.
    """
    value = config.get(name)
    if value is None or value == "":
        if default is not None:
            return default
        raise ConfigurationError(name)
    if isinstance(value, bool):
        raise ConfigurationError(name, "must be a number")
    try:
        number = float(value)
    except (TypeError, ValueError, OverflowError):
        raise ConfigurationError(name, f"must be a number, got {value!r}")
    if not math.isfinite(number):
        raise ConfigurationError(name, f"must be a finite number, got {value!r}")
    return number


def first_of(config: Mapping[str, Any], *names: str) -> Any:
    """First non-empty value among `names` (current spelling first, legacy after)."""
    for name in names:
        value = config.get(name)
        if value is not None and value != "":
            return value
    return None


async def call_platform(action: str, awaitable: Awaitable[Any]) -> Any:
    """
    Await a collaborator call, reporting platform failures as ExternalFailureError.

    Args:
        action: What was attempted, for the error message (e.g. "Could not open SMS")
        awaitable: The collaborator coroutine
    """
    try:
        return await awaitable
    except StepError:
        raise
    except PermissionError as e:
        raise ExternalFailureError(f"{action}: permission denied ({e})") from e
    except Exception as e:
        raise ExternalFailureError(f"{action}: {e}") from e
