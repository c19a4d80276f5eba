"""
Data types for automation execution.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Tuple


class StepType(str, Enum):
    """Step type tags known to the engine."""
    NOTIFICATION = "notification"
    DELAY = "delay"
    SET_VARIABLE = "set-variable"
    GET_VARIABLE = "get-variable"
    TEXT_OP = "text-op"
    MATH_OP = "math-op"
    SMS = "sms"
    CALL = "call"
    EMAIL = "email"
    WEBHOOK = "webhook"
    OPEN_URL = "open-url"
    LOCATION = "location"
    CLIPBOARD = "clipboard"
    OPEN_APP = "open-app"
    CONDITION = "condition"
    LOOP = "loop"


# Tags written by older app versions
LEGACY_STEP_TYPES = {
    "variable": StepType.SET_VARIABLE.value,
    "set_variable": StepType.SET_VARIABLE.value,
    "get_variable": StepType.GET_VARIABLE.value,
    "text": StepType.TEXT_OP.value,
    "math": StepType.MATH_OP.value,
    "open_url": StepType.OPEN_URL.value,
    "app": StepType.OPEN_APP.value,
}


def normalize_step_type(step_type: str) -> str:
    """Map legacy tags onto their current name. Unknown tags are returned as-is."""
    return LEGACY_STEP_TYPES.get(step_type, step_type)


class ExecutionStatus(str, Enum):
    """Terminal status of an automation run."""
    COMPLETED = "completed"
    FAILED = "failed"
    CANCELLED = "cancelled"


@dataclass(frozen=True)
class Step:
    """One unit of work within an automation."""
    id: str
    type: str
    title: str = ""
    enabled: bool = True
    config: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], index: int = 0) -> "Step":
        step_type = data.get("type")
        if not step_type:
            raise ValueError(f"Step {index} is missing 'type'")
        return cls(
            id=str(data.get("id") or f"step_{index}"),
            type=normalize_step_type(str(step_type)),
            title=data.get("title") or str(step_type),
            enabled=bool(data.get("enabled", True)),
            config=dict(data.get("config") or {}),
        )


@dataclass(frozen=True)
class AutomationDefinition:
    """A user-authored, ordered list of steps. Read-only to the engine."""
    id: str
    title: str
    steps: Tuple[Step, ...] = ()

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "AutomationDefinition":
        """
        Build a definition from the app's JSON shape.

        Example:
            AutomationDefinition.from_dict({
                'id': 'a1',
                'title': 'Morning',
                'steps': [{'id': 's1', 'type': 'notification', 'config': {'message': 'Hi'}}],
            })
        """
        steps = data.get("steps")
        if steps is None:
            steps = []
        if not isinstance(steps, list):
            raise ValueError("Automation 'steps' must be a list")
        return cls(
            id=str(data.get("id") or ""),
            title=data.get("title") or "",
            steps=tuple(Step.from_dict(s, i) for i, s in enumerate(steps)),
        )


@dataclass(frozen=True)
class StepResult:
    """Result of a single step, as seen by the executor."""
    step_id: str
    type: str
    success: bool
    duration_ms: int = 0
    output: Dict[str, Any] = field(default_factory=dict)
    error: Optional[str] = None
    skipped: bool = False  # True if the step was disabled


@dataclass(frozen=True)
class ExecutionResult:
    """Result of a full automation run. Created once, at the terminal transition."""
    success: bool
    status: ExecutionStatus
    execution_time: int  # ms
    steps_completed: int
    total_steps: int
    timestamp: str
    error: Optional[str] = None
    failed_step: Optional[int] = None  # Index into the filtered step list
    error_type: Optional[str] = None
    step_results: Tuple[StepResult, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        """Render the camelCase shape consumed by the app layer."""
        data: Dict[str, Any] = {
            "success": self.success,
            "status": self.status.value,
            "executionTime": self.execution_time,
            "stepsCompleted": self.steps_completed,
            "totalSteps": self.total_steps,
            "timestamp": self.timestamp,
        }
        if self.error is not None:
            data["error"] = self.error
        if self.failed_step is not None:
            data["failedStep"] = self.failed_step
        if self.error_type is not None:
            data["errorType"] = self.error_type
        step_results: List[Dict[str, Any]] = []
        for r in self.step_results:
            entry = {"stepId": r.step_id, "type": r.type, "success": r.success, "durationMs": r.duration_ms}
            if r.skipped:
                entry["skipped"] = True
            if r.output:
                entry["output"] = r.output
            if r.error is not None:
                entry["error"] = r.error
            step_results.append(entry)
        data["stepResults"] = step_results
        return data
