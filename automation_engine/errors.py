"""
Error types raised by step handlers.

The executor catches these at the step boundary and turns them into a
failed ExecutionResult. Anything else a handler raises is reported as an
unexpected error.
"""

from typing import Optional


UNEXPECTED_ERROR = "UnexpectedError"


class StepError(Exception):
    """Base class for errors raised while executing a step."""

    @property
    def kind(self) -> str:
        return type(self).__name__


class ConfigurationError(StepError):
    """A required config field is missing or invalid."""

    def __init__(self, field: str, message: Optional[str] = None):
        self.field = field
        self.message = message or f"'{field}' is required"
        super().__init__(f"Invalid config field '{field}': {self.message}")


class PlatformUnsupportedError(StepError):
    """The step type is registered but its collaborator is not wired."""

    def __init__(self, collaborator: str, step_type: Optional[str] = None):
        self.collaborator = collaborator
        self.step_type = step_type
        if step_type:
            message = f"'{step_type}' needs {collaborator}, which is not available in this environment"
        else:
            message = f"{collaborator} is not available in this environment"
        super().__init__(message)


class ExternalFailureError(StepError):
    """The platform call failed or was refused (permission denied, HTTP error, ...)."""
