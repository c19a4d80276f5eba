"""
Automation Executor

Runs an automation's steps in order against a handler registry and the
collaborators of the current environment.
"""

import inspect
import logging
import time
from datetime import datetime, timezone
from enum import Enum
from typing import Any, AbstractSet, Awaitable, Callable, Dict, List, Mapping, Optional, Union

from .compatibility import filter_compatible_steps
from .config import EngineSettings
from .errors import UNEXPECTED_ERROR, PlatformUnsupportedError, StepError
from .handlers import HandlerRegistry, StepContext
from .interfaces import Platform
from .templates import resolve_config
from .types import AutomationDefinition, ExecutionResult, ExecutionStatus, Step, StepResult
from .variables import VariableStore

logger = logging.getLogger(__name__)

CANCELLED_ERROR = "cancelled"
NO_COMPATIBLE_STEPS_ERROR = "No compatible steps to execute in this environment"

StepCallback = Callable[..., Union[None, Awaitable[None]]]


class ControllerState(str, Enum):
    IDLE = "idle"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"
    CANCELLED = "cancelled"


TERMINAL_STATES = frozenset([ControllerState.COMPLETED, ControllerState.FAILED, ControllerState.CANCELLED])


def utc_timestamp() -> str:
    """ISO-8601 UTC timestamp with millisecond precision and Z suffix."""
    return datetime.now(timezone.utc).isoformat(timespec='milliseconds').replace('+00:00', 'Z')


class ExecutionController:
    """
    Drives a single automation run: Idle -> Running -> Completed/Failed/Cancelled.

    A controller runs once. Create a new one per run; registries, platforms
    and settings can be shared between controllers.

    Args:
        registry: Handlers for the step types this environment supports
        platform: Collaborators wired for this environment
        settings: Engine settings
        capabilities: Step types to accept; defaults to registry.capabilities(platform)
        on_step_start: Called with (index, step) before a step is dispatched
        on_step_complete: Called with (index, step_result) after a step succeeds
        on_step_error: Called with (index, error_message) when a step fails

    Callbacks may be plain functions or coroutines. Errors raised by a
    callback are logged and otherwise ignored.
    """

    def __init__(
        self,
        registry: HandlerRegistry,
        platform: Platform,
        settings: Optional[EngineSettings] = None,
        capabilities: Optional[AbstractSet[str]] = None,
        on_step_start: Optional[StepCallback] = None,
        on_step_complete: Optional[StepCallback] = None,
        on_step_error: Optional[StepCallback] = None
    ):
        self.registry = registry
        self.platform = platform
        self.settings = settings or EngineSettings()
        self.capabilities = capabilities
        self.on_step_start = on_step_start
        self.on_step_complete = on_step_complete
        self.on_step_error = on_step_error

        self.state = ControllerState.IDLE
        self.variables: Optional[VariableStore] = None
        self._cancel_requested = False

    @property
    def is_running(self) -> bool:
        return self.state == ControllerState.RUNNING

    def cancel(self) -> bool:
        """
        Request cancellation. Takes effect before the next step starts;
        a step already running is allowed to finish.

        Returns:
            True if the request was accepted, False if the run already ended
        """
        if self.state in TERMINAL_STATES:
            return False
        self._cancel_requested = True
        logger.info("Cancellation requested")
        return True

    async def start(
        self,
        definition: AutomationDefinition,
        initial_variables: Optional[Mapping[str, Any]] = None
    ) -> ExecutionResult:
        """
        Run the automation.

        Args:
            definition: Automation to run
            initial_variables: Bindings the variable store starts with

        Returns:
            ExecutionResult describing success, progress and any failure point
        """
        if self.state != ControllerState.IDLE:
            raise RuntimeError(f"Controller already used (state: {self.state.value})")

        self.state = ControllerState.RUNNING
        start_time = time.monotonic()
        self.variables = VariableStore(initial_variables)

        capabilities = self.capabilities
        if capabilities is None:
            capabilities = self.registry.capabilities(self.platform)
        steps = filter_compatible_steps(definition.steps, capabilities)
        total_steps = len(steps)

        logger.info(
            f"Starting automation '{definition.title}' ({definition.id}): "
            f"{total_steps} of {len(definition.steps)} steps compatible"
        )

        step_results: List[StepResult] = []
        steps_completed = 0

        def finish(state: ControllerState, error: Optional[str] = None,
                   failed_step: Optional[int] = None, error_type: Optional[str] = None) -> ExecutionResult:
            self.state = state
            return ExecutionResult(
                success=state == ControllerState.COMPLETED,
                status=ExecutionStatus(state.value),
                execution_time=round((time.monotonic() - start_time) * 1000),
                steps_completed=steps_completed,
                total_steps=total_steps,
                timestamp=utc_timestamp(),
                error=error,
                failed_step=failed_step,
                error_type=error_type,
                step_results=tuple(step_results),
            )

        if not steps:
            logger.warning(f"Automation '{definition.title}' has no compatible steps")
            return finish(ControllerState.FAILED, error=NO_COMPATIBLE_STEPS_ERROR)

        for index, step in enumerate(steps):
            if self._cancel_requested:
                logger.info(f"Automation '{definition.title}' cancelled before step {index}")
                return finish(ControllerState.CANCELLED, error=CANCELLED_ERROR)

            if not step.enabled:
                logger.info(f"Skipping disabled step {index}: {step.title}")
                step_results.append(StepResult(step_id=step.id, type=step.type, success=True, skipped=True))
                continue

            await self._notify(self.on_step_start, index, step)
            step_start = time.monotonic()

            try:
                output = await self._execute_step(step)
                error = None if output.get('success', True) else str(output.get('error') or 'Step reported failure')
                error_type = StepError.__name__
            except StepError as e:
                output, error, error_type = {}, str(e), e.kind
            except Exception as e:
                logger.exception(f"Unexpected error in step {index}: {step.title} ({step.type})")
                output, error, error_type = {}, str(e) or type(e).__name__, UNEXPECTED_ERROR

            duration_ms = round((time.monotonic() - step_start) * 1000)

            if error is not None:
                logger.warning(f"Step {index} failed: {step.title} ({step.type}): {error}")
                step_results.append(StepResult(
                    step_id=step.id,
                    type=step.type,
                    success=False,
                    duration_ms=duration_ms,
                    output=output,
                    error=error,
                ))
                await self._notify(self.on_step_error, index, error)
                return finish(ControllerState.FAILED, error=error, failed_step=index, error_type=error_type)

            step_result = StepResult(
                step_id=step.id,
                type=step.type,
                success=True,
                duration_ms=duration_ms,
                output=output,
            )
            step_results.append(step_result)
            steps_completed += 1
            logger.info(f"Step {index} completed: {step.title} ({step.type})")
            await self._notify(self.on_step_complete, index, step_result)

        result = finish(ControllerState.COMPLETED)
        logger.info(
            f"Automation '{definition.title}' completed: "
            f"{steps_completed}/{total_steps} steps in {result.execution_time}ms"
        )
        return result

    async def _execute_step(self, step: Step) -> Dict[str, Any]:
        handler = self.registry.get(step.type)
        if handler is None:
            raise PlatformUnsupportedError("a handler", step.type)

        # Resolve against the store as it is now; earlier steps may have set variables
        config = resolve_config(step.config, self.variables)
        handler.validate(config)

        context = StepContext(
            variables=self.variables,
            platform=self.platform,
            step=step,
            settings=self.settings,
        )
        return await handler.execute(config, context) or {}

    async def _notify(self, callback: Optional[StepCallback], *args: Any) -> None:
        if callback is None:
            return
        try:
            result = callback(*args)
            if inspect.isawaitable(result):
                await result
        except Exception:
            logger.exception("Step callback raised; ignoring")


async def execute_automation(
    definition: AutomationDefinition,
    registry: HandlerRegistry,
    platform: Platform,
    initial_variables: Optional[Mapping[str, Any]] = None,
    settings: Optional[EngineSettings] = None,
    capabilities: Optional[AbstractSet[str]] = None
) -> ExecutionResult:
    """
    Run an automation with a fresh controller.

    Args:
        definition: Automation to run
        registry: Handler registry for this environment
        platform: Collaborators for this environment
        initial_variables: Bindings the variable store starts with
        settings: Engine settings
        capabilities: Step types to accept; defaults to registry.capabilities(platform)

    Returns:
        ExecutionResult with details of execution
    """
    controller = ExecutionController(registry, platform, settings=settings, capabilities=capabilities)
    return await controller.start(definition, initial_variables)
