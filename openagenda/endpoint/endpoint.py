"""Base endpoint: parameter validation and URL building."""
import json
import logging
from datetime import date, datetime
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple, Union
from urllib.parse import urlencode

from openagenda import registry
from openagenda.dates import parse_datetime, to_wire_string
from openagenda.entity.entity import Entity
from openagenda.exceptions import TransportError, ValidationError
from openagenda.validator import Validator

logger = logging.getLogger(__name__)

BASE_URL = 'https://api.openagenda.com/v2'

METHODS = ('exists', 'get', 'create', 'update', 'delete')


def build_query(query: Mapping[str, Any]) -> str:
    """
    Encode a query string with bracketed keys for nested values.

    ``{'fields': ['a', 'b']}`` gives ``fields%5B0%5D=a&fields%5B1%5D=b``.
    Booleans are sent as 1/0, None values are dropped and keys keep their
    insertion order.
    """
    pairs: List[Tuple[str, str]] = []

    def walk(key: str, value: Any) -> None:
        if value is None:
            return
        if isinstance(value, Mapping):
            for sub_key, item in value.items():
                walk(f'{key}[{sub_key}]', item)
        elif isinstance(value, (list, tuple)):
            for index, item in enumerate(value):
                walk(f'{key}[{index}]', item)
        elif isinstance(value, bool):
            pairs.append((key, '1' if value else '0'))
        elif isinstance(value, int):
            pairs.append((key, str(int(value))))
        elif isinstance(value, datetime):
            pairs.append((key, to_wire_string(value)))
        else:
            pairs.append((key, str(value)))

    for name, value in query.items():
        walk(str(name), value)

    return urlencode(pairs)


class Endpoint:
    """
    Resource endpoint built from a parameter mapping.

    ``query_fields`` declares accepted query params: local name mapped to
    ``{'name': wire name, 'type': coercion, 'matching': value rewrites}``.
    Path params are validated by ``validation_uri_path[_<method>]``, query
    params by ``validation_uri_query[_<method>]``, request bodies by
    ``validation_create`` and ``validation_update``.
    """

    base_url = BASE_URL
    query_fields: Dict[str, Dict[str, Any]] = {}
    query_methods = ('exists', 'get')

    def __init__(self, params: Optional[Mapping[str, Any]] = None, client=None):
        self.params: Dict[str, Any] = {}
        self.client = client
        if params:
            self.set(params)

    @property
    def name(self) -> str:
        return f'{type(self).__module__}.{type(self).__qualname__}'

    def set(self, params: Union[str, Mapping[str, Any]], value: Any = None) -> 'Endpoint':
        """Set one param, or many from a mapping, coerced by query field type."""
        if not isinstance(params, Mapping):
            params = {params: value}

        for param, item in params.items():
            self.params[param] = self._format_type(param, item)

        return self

    def _format_type(self, param: str, value: Any) -> Any:
        kind = self.query_fields.get(param, {}).get('type')
        if kind is None or value is None:
            return value

        if kind == 'datetime':
            return parse_datetime(value) or value
        if kind == 'array':
            if isinstance(value, (str, int, float)):
                return [value]
            if isinstance(value, (tuple, set)):
                return list(value)
        if kind == 'bool' and isinstance(value, str):
            if value.lower() in ('1', 'true'):
                return True
            if value.lower() in ('0', 'false'):
                return False
        if kind == 'int' and isinstance(value, str) and value.strip().lstrip('-').isdigit():
            return int(value)
        if kind == 'json' and isinstance(value, str):
            try:
                return json.loads(value)
            except ValueError:
                logger.warning(f"Param {param} is not valid JSON, kept as is")

        return value

    # Validators

    def validation_uri_path(self, validator: Validator) -> Validator:
        return validator

    def validation_uri_query(self, validator: Validator) -> Validator:
        return validator

    def get_validator(self, name: str, method: Optional[str] = None) -> Validator:
        """
        Build the validator ``validation_<name>_<method>``, or ``validation_<name>``.

        Args:
            name: Validator name, e.g. ``uri_path``
            method: Endpoint method, e.g. ``get``
        """
        builder: Optional[Callable[[Validator], Validator]] = None
        if method:
            builder = getattr(self, f'validation_{name}_{method}', None)
        if builder is None:
            builder = getattr(self, f'validation_{name}', None)
        if builder is None:
            return Validator()
        return builder(Validator())

    def raise_errors(self, errors: Dict[str, Dict[str, str]]) -> None:
        if errors:
            logger.info(f"{self.name} validation failed on {list(errors)}")
            raise ValidationError(self.name, errors)

    def validate_params(self, params: Mapping[str, Any], validator: Validator) -> Dict[str, Any]:
        """
        Keep declared query params (missing ones are None) and validate them.

        Raises:
            ValidationError: With every violation found
        """
        params = {name: params.get(name) for name in self.query_fields}
        self.raise_errors(validator.validate(params))
        return params

    # Url

    def uri_path(self, method: str) -> str:
        """
        Validate path params. Concrete endpoints return their path.

        Raises:
            ValidationError: If path params are invalid
        """
        method = method.lower()
        validator = self.get_validator('uri_path', method)
        self.raise_errors(validator.validate(self.params, new_record=method == 'create'))
        return ''

    def uri_query(self, method: str = 'get') -> Dict[str, Any]:
        """Query params in wire names and formats, None values dropped."""
        method = method.lower()
        if method not in self.query_methods:
            return {}

        params = self.validate_params(self.params, self.get_validator('uri_query', method))

        query: Dict[str, Any] = {}
        for param, value in params.items():
            field = self.query_fields[param]
            value = self._convert_query_value(field, value)
            if value is not None:
                query[field.get('name', param)] = value

        return query

    @staticmethod
    def _convert_query_value(field: Dict[str, Any], value: Any) -> Any:
        if isinstance(value, datetime):
            value = to_wire_string(value)
        elif isinstance(value, date):
            value = value.isoformat()

        matching = field.get('matching')
        if matching:
            if isinstance(value, str):
                value = matching.get(value, value)
            elif isinstance(value, list):
                value = [matching.get(item, item) if isinstance(item, str) else item for item in value]

        return value

    def get_url(self, method: str) -> str:
        """
        Full url for a method.

        Raises:
            ValidationError: If params are invalid
        """
        url = self.base_url + self.uri_path(method)
        query = build_query(self.uri_query(method))
        if query:
            url = f'{url}?{query}'
        return url

    def to_dict(self) -> Dict[str, Any]:
        """Urls of every method and the params."""
        result: Dict[str, Any] = {method: self.get_url(method) for method in METHODS}
        result['params'] = dict(self.params)
        return result

    # Requests

    def _client(self):
        return self.client or registry.require_client()

    def _request_exists(self) -> bool:
        status = self._client().head(self.get_url('exists'))
        return 200 <= status < 300

    def _request_get(self) -> Optional[Dict[str, Any]]:
        """GET the item url, None when the API answers 404."""
        try:
            return self._client().get(self.get_url('get'))
        except TransportError as e:
            if e.status_code == 404:
                logger.info(f"{self.name} not found: {e}")
                return None
            raise

    def _validate_entity(self, entity: Entity, method: str) -> None:
        validator = self.get_validator(method)
        self.raise_errors(validator.validate(entity.to_dict(), new_record=method == 'create'))

    @staticmethod
    def _hydrate(entity_class, response: Optional[Dict[str, Any]], key: Optional[str]):
        """Entity from a response payload (whole payload when key is None)."""
        if not response or not response.get('_success'):
            return None
        data = response.get(key) if key else {
            name: value for name, value in response.items() if not name.startswith('_')
        }
        if not data:
            return None
        return entity_class.from_wire(data)
