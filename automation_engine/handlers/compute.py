"""
Steps that only compute: text and math operations, condition and loop.

None of these call a collaborator. Condition and loop evaluate and report
their configuration; they do not change which steps run.
"""

import logging
import math
from typing import Any, Dict, Mapping, Union

from ..conditions import SUPPORTED_OPERATORS, compare_values
from ..errors import ConfigurationError
from ..templates import lookup_variable
from ..types import StepType
from .base import StepContext, StepHandler, require_field, require_string, to_number

logger = logging.getLogger(__name__)

TEXT_ACTIONS = ('combine', 'replace', 'uppercase', 'lowercase', 'trim', 'format')
MATH_OPERATIONS = ('add', 'subtract', 'multiply', 'divide', 'modulo', 'power')
DEFAULT_LOOP_COUNT = 3


def _text(config: Mapping[str, Any], name: str, default: str = '') -> str:
    value = config.get(name)
    return default if value is None else str(value)


def _tidy_number(value: float) -> Union[int, float]:
    """5.0 -> 5, so results substitute the way users expect."""
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return value


class TextOpStep(StepHandler):
    """
    Text operations:
    - combine: text1 + separator (default ' ') + text2
    - replace: first occurrence of text2 in text1 replaced by separator
    - uppercase / format, lowercase, trim: applied to text1
    """
    step_type = StepType.TEXT_OP.value
    sample_values = {'action': 'combine'}

    def validate(self, config: Mapping[str, Any]) -> None:
        action = require_string(config, 'action')
        if action not in TEXT_ACTIONS:
            raise ConfigurationError('action', f"unknown text action '{action}'")

    async def execute(self, config: Mapping[str, Any], context: StepContext) -> Dict[str, Any]:
        action = config['action']
        text1 = _text(config, 'text1')
        text2 = _text(config, 'text2')

        if action == 'combine':
            result = f"{text1}{_text(config, 'separator', ' ')}{text2}"
        elif action == 'replace':
            result = text1.replace(text2, _text(config, 'separator'), 1)
        elif action in ('uppercase', 'format'):
            result = text1.upper()
        elif action == 'lowercase':
            result = text1.lower()
        else:
            result = text1.strip()

        return {'action': action, 'text1': text1, 'text2': text2, 'result': result}


class MathOpStep(StepHandler):
    step_type = StepType.MATH_OP.value
    sample_values = {'operation': 'add'}

    def validate(self, config: Mapping[str, Any]) -> None:
        operation = require_string(config, 'operation')
        if operation not in MATH_OPERATIONS:
            raise ConfigurationError('operation', f"unknown math operation '{operation}'")
        to_number(config, 'number1')
        number2 = to_number(config, 'number2')
        if operation in ('divide', 'modulo') and number2 == 0:
            raise ConfigurationError('number2', "cannot divide by zero")

    async def execute(self, config: Mapping[str, Any], context: StepContext) -> Dict[str, Any]:
        operation = config['operation']
        number1 = to_number(config, 'number1')
        number2 = to_number(config, 'number2')

        if operation == 'add':
            result = number1 + number2
        elif operation == 'subtract':
            result = number1 - number2
        elif operation == 'multiply':
            result = number1 * number2
        elif operation == 'divide':
            result = number1 / number2
        elif operation == 'modulo':
            result = math.fmod(number1, number2)
        else:
            try:
                result = math.pow(number1, number2)
            except (OverflowError, ValueError) as e:
                raise ConfigurationError('number2', f"cannot compute {number1} ** {number2}: {e}")
        if not math.isfinite(result):
            raise ConfigurationError('operation', f"result of {operation} is out of range")

        return {
            'operation': operation,
            'number1': _tidy_number(number1),
            'number2': _tidy_number(number2),
            'result': _tidy_number(result),
        }


class ConditionStep(StepHandler):
    """Compare a variable against a value and report whether it matched."""
    step_type = StepType.CONDITION.value
    sample_values = {'condition': '=='}

    def validate(self, config: Mapping[str, Any]) -> None:
        require_string(config, 'variable')
        operator = require_string(config, 'condition')
        if operator not in SUPPORTED_OPERATORS:
            raise ConfigurationError('condition', f"unknown condition '{operator}'")
        if operator not in ('exists', 'not_exists') and 'value' not in config:
            raise ConfigurationError('value')

    async def execute(self, config: Mapping[str, Any], context: StepContext) -> Dict[str, Any]:
        variable = config['variable'].strip()
        operator = config['condition']
        expected = config.get('value')
        actual = lookup_variable(context.variables, variable)
        condition_met = compare_values(actual, operator, expected)

        logger.info(f"Condition {variable} {operator} {expected!r}: {condition_met}")
        return {
            'variable': variable,
            'condition': operator,
            'value': expected,
            'variableValue': actual,
            'conditionMet': condition_met,
        }


class LoopStep(StepHandler):
    """Report a loop's configuration. Steps are never repeated."""
    step_type = StepType.LOOP.value
    sample_values = {'type': 'count'}

    def _count(self, config: Mapping[str, Any]) -> int:
        count = to_number(config, 'count', default=DEFAULT_LOOP_COUNT)
        if count < 1 or not float(count).is_integer():
            raise ConfigurationError('count', "must be a whole number of at least 1")
        return int(count)

    def validate(self, config: Mapping[str, Any]) -> None:
        loop_type = require_field(config, 'type')
        if loop_type == 'count':
            self._count(config)

    async def execute(self, config: Mapping[str, Any], context: StepContext) -> Dict[str, Any]:
        loop_type = config['type']
        if loop_type == 'count':
            iterations = self._count(config)
            return {
                'loopType': loop_type,
                'iterations': iterations,
                'message': f"Loop configured for {iterations} iterations",
            }
        return {'loopType': loop_type, 'message': f"Loop type {loop_type} configured"}
