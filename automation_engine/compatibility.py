"""
Restrict an automation's steps to those the current environment can run.
"""

import logging
from typing import AbstractSet, Iterable, List

from .types import Step

logger = logging.getLogger(__name__)


def filter_compatible_steps(steps: Iterable[Step], capabilities: AbstractSet[str]) -> List[Step]:
    """
    Return the steps whose type is in `capabilities`, in their original order.

    Steps are returned as-is (enabled flags and config are untouched). An
    empty result is valid; the executor reports it as a failure.
    """
    compatible = []
    for step in steps:
        if step.type in capabilities:
            compatible.append(step)
        else:
            logger.warning(f"Step '{step.title}' ({step.type}) is not supported in this environment")
    return compatible


def find_incompatible_steps(steps: Iterable[Step], capabilities: AbstractSet[str]) -> List[Step]:
    """Steps that would be dropped by filter_compatible_steps."""
    return [step for step in steps if step.type not in capabilities]


def can_execute(steps: Iterable[Step], capabilities: AbstractSet[str]) -> bool:
    """True if at least one enabled step can run in this environment."""
    return any(step.enabled and step.type in capabilities for step in steps)
