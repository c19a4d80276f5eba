"""
Pre-flight validation for automations.

Run before deploying or executing an automation to tell the user what will
not work, without touching any collaborator.
"""

import logging
import re
from typing import Any, Dict, List, Mapping, Tuple

from .errors import ConfigurationError
from .handlers import HandlerRegistry, StepHandler
from .templates import has_variable_reference
from .types import AutomationDefinition, Step

logger = logging.getLogger(__name__)

BLOCK_SYNTAX_PATTERN = re.compile(r'\{\{[#/][^}]+\}\}')


def _check_block_syntax(value: Any, path: str = "") -> List[str]:
    """
    Recursively check for Handlebars block syntax in a value.

    Returns list of error messages for any {{#...}} or {{/...}} patterns found.
    """
    errors = []

    if isinstance(value, str):
        matches = BLOCK_SYNTAX_PATTERN.findall(value)
        if matches:
            errors.append(
                f"Block syntax not supported at '{path}': {matches}. "
                f"Only plain {{{{name}}}} variable references are substituted."
            )
    elif isinstance(value, dict):
        for k, v in value.items():
            errors.extend(_check_block_syntax(v, f"{path}.{k}" if path else k))
    elif isinstance(value, list):
        for i, item in enumerate(value):
            errors.extend(_check_block_syntax(item, f"{path}[{i}]"))

    return errors


# Stand-in for a {{...}} field when the handler declares no sample value
SAMPLE_VALUE = "1"


def _sample_config(config: Mapping[str, Any], handler: StepHandler) -> Dict[str, Any]:
    """
    Config with each variable-dependent field replaced by a sample value.

    Fields containing {{...}} are only known at run time. Replacing them
    (instead of dropping them) keeps the key present, so the handler's
    validation still checks every other field.
    """
    return {
        key: handler.sample_values.get(key, SAMPLE_VALUE) if has_variable_reference(value) else value
        for key, value in config.items()
    }


def validate_step(step: Step, registry: HandlerRegistry, index: int = 0) -> List[str]:
    """Validate one step against the registry. Returns error messages."""
    label = f"Step {index} ({step.title or step.id})"
    errors = _check_block_syntax(step.config, f"steps[{index}].config")

    handler = registry.get(step.type)
    if handler is None:
        errors.append(f"{label}: unsupported step type '{step.type}'")
        return errors

    try:
        handler.validate(_sample_config(step.config, handler))
    except ConfigurationError as e:
        errors.append(f"{label}: {e}")

    return errors


def validate_automation(definition: AutomationDefinition, registry: HandlerRegistry) -> Tuple[bool, List[str]]:
    """
    Validate an automation before it is saved or run.

    Args:
        definition: Automation to check
        registry: Handler registry of the target environment

    Returns:
        Tuple of (is_valid, list_of_errors)
    """
    errors: List[str] = []

    if not definition.steps:
        errors.append("Automation must have at least one step")
        return False, errors

    for i, step in enumerate(definition.steps):
        if not step.enabled:
            continue
        errors.extend(validate_step(step, registry, i))

    if errors:
        logger.info(f"Automation '{definition.title}' failed validation with {len(errors)} error(s)")
    return len(errors) == 0, errors
