"""
Variable reference resolution for step configuration.
"""

import json
import logging
import re
from typing import Any, Dict, Mapping, Set

logger = logging.getLogger(__name__)

# Match {{variable}} patterns
VARIABLE_PATTERN = re.compile(r'\{\{([^}]+)\}\}')


def get_nested_value(data: Any, path: str) -> Any:
    """
    Get a nested value from a dict/list using dot notation.
    Supports array indexing: 'items[0].name' or 'items.0.name'

    Examples:
        get_nested_value({'a': {'b': 1}}, 'a.b') -> 1
        get_nested_value({'items': [{'name': 'x'}]}, 'items[0].name') -> 'x'
        get_nested_value({'items': [1, 2, 3]}, 'items.-1') -> 3
    """
    if data is None:
        return None

    # Handle array notation like items[0].name -> items.0.name
    path = re.sub(r'\[(-?\d+)\]', r'.\1', path)

    current = data
    for part in path.split('.'):
        if current is None:
            return None

        is_numeric = part.isdigit() or (part.startswith('-') and part[1:].isdigit())
        if is_numeric and isinstance(current, list):
            idx = int(part)
            if -len(current) <= idx < len(current):
                current = current[idx]
            else:
                return None
        elif isinstance(current, Mapping):
            current = current.get(part)
        else:
            return None

    return current


def lookup_variable(variables: Mapping[str, Any], name: str) -> Any:
    """Exact key first, then a dotted/indexed path into the store."""
    if name in variables:
        return variables[name]
    if '.' in name or '[' in name:
        return get_nested_value(variables, name)
    return None


def stringify(value: Any) -> str:
    """Render a variable value for substitution into a string field."""
    if value is None:
        return ""
    # bool before str(): JSON spelling ("true"), as the app shows it
    if isinstance(value, (bool, dict, list)):
        return json.dumps(value)
    return str(value)


def resolve_template(template: str, variables: Mapping[str, Any]) -> str:
    """
    Resolve {{name}} placeholders in a string.

    Unbound names are replaced with an empty string.

    Args:
        template: String with {{name}} placeholders
        variables: Variable store (or any mapping)

    Returns:
        Resolved string
    """
    if not isinstance(template, str):
        return template

    def replace_var(match):
        name = match.group(1).strip()
        value = lookup_variable(variables, name)
        if value is None:
            logger.warning(f"Variable not found: {name}")
            return ""
        return stringify(value)

    return VARIABLE_PATTERN.sub(replace_var, template)


def _resolve_value(value: Any, variables: Mapping[str, Any]) -> Any:
    if isinstance(value, str):
        return resolve_template(value, variables)
    if isinstance(value, dict):
        return resolve_config(value, variables)
    if isinstance(value, list):
        return [_resolve_value(item, variables) for item in value]
    return value


def resolve_config(config: Mapping[str, Any], variables: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Resolve all variable references in a step config.

    Always returns a new dict; nested dicts and lists are rebuilt rather
    than shared with `config`.
    """
    return {key: _resolve_value(value, variables) for key, value in config.items()}


def find_variable_references(value: Any) -> Set[str]:
    """
    Collect the variable names referenced anywhere in a value.

    Example: {"message": "Hi {{name}} from {{city}}"} -> {"name", "city"}
    """
    names: Set[str] = set()
    if isinstance(value, str):
        names.update(m.strip() for m in VARIABLE_PATTERN.findall(value))
    elif isinstance(value, dict):
        for v in value.values():
            names.update(find_variable_references(v))
    elif isinstance(value, list):
        for item in value:
            names.update(find_variable_references(item))
    return names


def has_variable_reference(value: Any) -> bool:
    return isinstance(value, str) and VARIABLE_PATTERN.search(value) is not None
