"""Rule-based validator collecting every violation, field by field."""
import re
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, Dict, Iterable, Optional, Union

from openagenda import validation
from openagenda.dates import parse_datetime

DEFAULT_MESSAGE = 'The provided value is invalid'
REQUIRED_MESSAGE = 'This field is required'
EMPTY_MESSAGE = 'This field cannot be left empty'

# check(value, context) -> True, False or an error message
RuleCheck = Callable[[Any, Dict[str, Any]], Union[bool, str]]
# presence: True, 'create', 'update' or callable(context) -> bool
Presence = Union[bool, str, Callable[[Dict[str, Any]], bool]]


@dataclass
class Rule:
    """Single named rule of a field."""
    check: RuleCheck
    message: Optional[str] = None


@dataclass
class FieldRules:
    """Presence, emptiness and rules of one field."""
    name: str
    presence: Presence = False
    presence_message: Optional[str] = None
    allow_empty: bool = True
    rules: Dict[str, Rule] = field(default_factory=dict)

    def is_presence_required(self, context: Dict[str, Any]) -> bool:
        if callable(self.presence):
            return bool(self.presence(context))
        if self.presence == 'create':
            return context.get('new_record', True)
        if self.presence == 'update':
            return not context.get('new_record', True)
        return bool(self.presence)


def is_empty(value: Any) -> bool:
    return value is None or value == '' or value == [] or value == {}


def _is_integer(value: Any, context: Dict[str, Any]) -> bool:
    if isinstance(value, bool):
        return False
    if isinstance(value, int):
        return True
    return isinstance(value, str) and re.fullmatch(r'-?\d+', value) is not None


def _is_numeric(value: Any, context: Dict[str, Any]) -> bool:
    if isinstance(value, bool):
        return False
    if isinstance(value, (int, float)):
        return True
    try:
        float(value)
    except (TypeError, ValueError):
        return False
    return True


def _is_boolean(value: Any, context: Dict[str, Any]) -> bool:
    return value in (True, False, 0, 1, '0', '1', 'true', 'false')


def _is_scalar(value: Any, context: Dict[str, Any]) -> bool:
    return isinstance(value, (str, int, float, bool))


def _is_array(value: Any, context: Dict[str, Any]) -> bool:
    return isinstance(value, (list, tuple, dict))


def _is_datetime(value: Any, context: Dict[str, Any]) -> bool:
    return isinstance(value, datetime) or parse_datetime(value) is not None


def _is_url(value: Any, context: Dict[str, Any]) -> bool:
    return validation.url(value)


class Validator:
    """
    Ordered set of field rules.

    Fields are checked in declaration order. A field missing from the data
    (or None) only fails when its presence is required; an empty value skips
    the rules unless emptiness is forbidden. Every failing rule is reported.
    """

    def __init__(self):
        self._fields: Dict[str, FieldRules] = {}

    def __len__(self) -> int:
        return len(self._fields)

    def __contains__(self, name: str) -> bool:
        return name in self._fields

    def field(self, name: str) -> FieldRules:
        if name not in self._fields:
            self._fields[name] = FieldRules(name)
        return self._fields[name]

    def require_presence(
        self, name: str, mode: Presence = True, message: Optional[str] = None
    ) -> 'Validator':
        rules = self.field(name)
        rules.presence = mode
        rules.presence_message = message
        return self

    def allow_empty(self, name: str) -> 'Validator':
        self.field(name).allow_empty = True
        return self

    def not_empty(self, name: str) -> 'Validator':
        self.field(name).allow_empty = False
        return self

    def add(
        self, name: str, rule: str, check: RuleCheck, message: Optional[str] = None
    ) -> 'Validator':
        self.field(name).rules[rule] = Rule(check, message)
        return self

    def integer(self, name: str) -> 'Validator':
        return self.add(name, 'integer', _is_integer)

    def numeric(self, name: str) -> 'Validator':
        return self.add(name, 'numeric', _is_numeric)

    def boolean(self, name: str) -> 'Validator':
        return self.add(name, 'boolean', _is_boolean)

    def scalar(self, name: str) -> 'Validator':
        return self.add(name, 'scalar', _is_scalar)

    def is_array(self, name: str) -> 'Validator':
        return self.add(name, 'isArray', _is_array)

    def date_time(self, name: str) -> 'Validator':
        return self.add(name, 'dateTime', _is_datetime)

    def url(self, name: str) -> 'Validator':
        return self.add(name, 'url', _is_url)

    def in_list(self, name: str, values: Iterable[Any]) -> 'Validator':
        values = list(values)
        return self.add(name, 'inList', lambda value, context: value in values)

    def multiple_options(self, name: str, values: Iterable[Any]) -> 'Validator':
        values = list(values)

        def check(value, context):
            return isinstance(value, (list, tuple)) and all(item in values for item in value)

        return self.add(name, 'multipleOptions', check)

    def max_length(self, name: str, length: int) -> 'Validator':
        return self.add(
            name, 'maxLength',
            lambda value, context: isinstance(value, str) and len(value) <= length,
        )

    def greater_than_or_equal(self, name: str, limit: float) -> 'Validator':
        return self.add(
            name, 'greaterThanOrEqual',
            lambda value, context: _is_numeric(value, context) and float(value) >= limit,
        )

    def less_than_or_equal(self, name: str, limit: float) -> 'Validator':
        return self.add(
            name, 'lessThanOrEqual',
            lambda value, context: _is_numeric(value, context) and float(value) <= limit,
        )

    def validate(self, data: Dict[str, Any], new_record: bool = True) -> Dict[str, Dict[str, str]]:
        """
        Validate data against every field.

        Args:
            data: Data to validate
            new_record: True when validating a creation

        Returns:
            Mapping of field to {rule: message}, empty when data is valid
        """
        errors: Dict[str, Dict[str, str]] = {}

        for name, rules in self._fields.items():
            context = {'data': data, 'new_record': new_record, 'field': name}
            value = data.get(name)

            if value is None:
                if rules.is_presence_required(context):
                    errors[name] = {'_required': rules.presence_message or REQUIRED_MESSAGE}
                continue

            if is_empty(value):
                if not rules.allow_empty:
                    errors[name] = {'_empty': EMPTY_MESSAGE}
                continue

            for rule_name, rule in rules.rules.items():
                result = rule.check(value, context)
                if result is True:
                    continue
                message = result if isinstance(result, str) else (rule.message or DEFAULT_MESSAGE)
                errors.setdefault(name, {})[rule_name] = message

        return errors
