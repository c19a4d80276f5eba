"""
automation_engine - Runs user-authored automations step by step

Filters an automation's steps to what the current environment can do,
resolves {{variable}} references, executes the steps in order through
injected platform collaborators, and reports an ExecutionResult.
"""

__version__ = "0.1.0"

# Core types
from .types import (
    AutomationDefinition,
    Step,
    StepType,
    StepResult,
    ExecutionStatus,
    ExecutionResult,
    normalize_step_type,
)

from .errors import (
    StepError,
    ConfigurationError,
    PlatformUnsupportedError,
    ExternalFailureError,
)

from .config import EngineSettings
from .variables import VariableStore

# Template and condition utilities
from .templates import (
    get_nested_value,
    resolve_template,
    resolve_config,
    find_variable_references,
)

from .conditions import compare_values

from .compatibility import (
    filter_compatible_steps,
    find_incompatible_steps,
    can_execute,
)

# Interfaces for extension
from .interfaces import (
    ClipboardService,
    Coordinates,
    HttpClient,
    HttpResponse,
    LocationProvider,
    MessagingService,
    Navigator,
    NotificationHandler,
    Platform,
)

from .handlers import (
    StepContext,
    StepHandler,
    HandlerRegistry,
    create_default_registry,
    create_web_registry,
)

from .http_client import HttpxClient

# Executor
from .executor import ControllerState, ExecutionController, execute_automation
from .validation import validate_automation, validate_step

__all__ = [
    "__version__",
    # Types
    "AutomationDefinition",
    "Step",
    "StepType",
    "StepResult",
    "ExecutionStatus",
    "ExecutionResult",
    "normalize_step_type",
    # Errors
    "StepError",
    "ConfigurationError",
    "PlatformUnsupportedError",
    "ExternalFailureError",
    # Settings and store
    "EngineSettings",
    "VariableStore",
    # Templates
    "get_nested_value",
    "resolve_template",
    "resolve_config",
    "find_variable_references",
    # Conditions
    "compare_values",
    # Compatibility
    "filter_compatible_steps",
    "find_incompatible_steps",
    "can_execute",
    # Interfaces
    "ClipboardService",
    "Coordinates",
    "HttpClient",
    "HttpResponse",
    "LocationProvider",
    "MessagingService",
    "Navigator",
    "NotificationHandler",
    "Platform",
    "HttpxClient",
    # Handlers
    "StepContext",
    "StepHandler",
    "HandlerRegistry",
    "create_default_registry",
    "create_web_registry",
    # Executor
    "ControllerState",
    "ExecutionController",
    "execute_automation",
    "validate_automation",
    "validate_step",
]
