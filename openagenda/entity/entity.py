"""Base entity: attribute bag with accessors and dirty tracking."""
import json
import logging
from datetime import datetime
from typing import Any, Callable, Dict, Iterable, List, Mapping, NamedTuple, Optional, Tuple, Union

from openagenda import registry
from openagenda.dates import parse_datetime, to_wire_string
from openagenda.entity.image import image_to_wire, to_image
from openagenda.exceptions import DomainError, InvalidInputError

logger = logging.getLogger(__name__)

_MISSING = object()

Accessor = Optional[Callable[['Entity', Any], Any]]


class DirtyKey(NamedTuple):
    """Dirty marker. subkey is the language of a multilingual field."""
    field: str
    subkey: Optional[str] = None


def camelize(name: str) -> str:
    """``long_description`` -> ``longDescription``"""
    head, *tail = name.split('_')
    return head + ''.join(part[:1].upper() + part[1:] for part in tail)


class Entity:
    """
    Mutable attribute bag mirroring an API resource.

    Fields are not predeclared. ``schema`` lists the fields sent to the API
    with their coercion type and whether they are always sent on partial
    updates. Accessors are methods named ``_get_<field>`` and
    ``_set_<field>`` (snake_case of the camelCase field name), collected once
    per concrete class.

    Construction modes:
        * default: setters applied, every field dirty
        * ``use_setters=False``: raw values, every field dirty
        * ``mark_clean=True``: nothing dirty (hydration from API responses)
    """

    schema: Dict[str, Dict[str, Any]] = {}
    _accessors: Dict[str, Tuple[Accessor, Accessor]] = {}

    def __init_subclass__(cls, **kwargs):
        super().__init_subclass__(**kwargs)
        cls._accessors = cls._build_accessors()

    @classmethod
    def _build_accessors(cls) -> Dict[str, Tuple[Accessor, Accessor]]:
        getters: Dict[str, Callable] = {}
        setters: Dict[str, Callable] = {}
        for attr in dir(cls):
            if attr.startswith('_get_'):
                getters[camelize(attr[len('_get_'):])] = getattr(cls, attr)
            elif attr.startswith('_set_'):
                setters[camelize(attr[len('_set_'):])] = getattr(cls, attr)

        return {
            name: (getters.get(name), setters.get(name))
            for name in sorted(set(getters) | set(setters))
        }

    def __init__(
        self,
        properties: Optional[Mapping[str, Any]] = None,
        use_setters: bool = True,
        mark_clean: bool = False
    ):
        object.__setattr__(self, '_fields', {})
        object.__setattr__(self, '_dirty', {})
        object.__setattr__(self, '_new', True)

        if properties and mark_clean and not use_setters:
            self._fields.update(self._coerce(dict(properties)))
            return

        if properties:
            self.set(properties, use_setter=use_setters)

        if mark_clean:
            self.clean()

    @classmethod
    def from_wire(cls, data: Mapping[str, Any]) -> 'Entity':
        """Build a clean, persisted entity from an API payload."""
        entity = cls(data, mark_clean=True)
        entity.set_new(False)
        return entity

    # Attribute and item sugar

    def __getattr__(self, name: str) -> Any:
        if name.startswith('_'):
            raise AttributeError(name)
        return self.get(name)

    def __setattr__(self, name: str, value: Any) -> None:
        if name.startswith('_'):
            object.__setattr__(self, name, value)
        else:
            self.set(name, value)

    def __getitem__(self, name: str) -> Any:
        return self.get(name)

    def __setitem__(self, name: str, value: Any) -> None:
        self.set(name, value)

    def __delitem__(self, name: str) -> None:
        self.unset(name)

    def __contains__(self, name: str) -> bool:
        return self.has(name)

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, Entity):
            return NotImplemented
        return type(self) is type(other) and self._fields == other._fields

    def __repr__(self) -> str:
        return f'{type(self).__name__}({self._fields!r})'

    # Fields

    def set(
        self,
        fields: Union[str, Mapping[str, Any], None],
        value: Any = None,
        use_setter: bool = True
    ) -> 'Entity':
        """
        Set one field, or many from a mapping.

        Args:
            fields: Field name, or mapping of field name to value
            value: Value when fields is a name
            use_setter: Route values through the field setters

        Returns:
            self

        Raises:
            InvalidInputError: If a field name is empty
        """
        if isinstance(fields, str) and fields != '':
            fields = {fields: value}
        elif not isinstance(fields, Mapping):
            raise InvalidInputError('Cannot set an empty field')
        if any(not isinstance(name, str) or name == '' for name in fields):
            raise InvalidInputError('Cannot set an empty field')

        for name, item in self._coerce(dict(fields)).items():
            if use_setter:
                setter = self._accessors.get(name, (None, None))[1]
                if setter:
                    item = setter(self, item)

            self._mark_changes(name, item)
            self._fields[name] = item

        return self

    def get(self, name: str) -> Any:
        """
        Get a field value, through its getter when one exists.

        Raises:
            InvalidInputError: If the field name is empty
        """
        if not isinstance(name, str) or name == '':
            raise InvalidInputError('Cannot get an empty field')

        value = self._fields.get(name)
        getter = self._accessors.get(name, (None, None))[0]
        if getter:
            return getter(self, value)
        return value

    def has(self, fields: Union[str, Iterable[str]]) -> bool:
        """True when every given field is not None."""
        if isinstance(fields, str):
            fields = [fields]
        return all(self.get(name) is not None for name in fields)

    def unset(self, fields: Union[str, Iterable[str]]) -> 'Entity':
        if isinstance(fields, str):
            fields = [fields]
        for name in fields:
            self._fields.pop(name, None)
            self.set_dirty(name, False)
        return self

    def extract(self, fields: Iterable[str], only_dirty: bool = False) -> Dict[str, Any]:
        """
        Return the given fields.

        Args:
            fields: Field names
            only_dirty: Keep only dirty fields

        Returns:
            Mapping of field name to value
        """
        return {
            name: self.get(name)
            for name in fields
            if not only_dirty or self.is_dirty(name)
        }

    # Dirty state

    def set_dirty(self, name: str, is_dirty: bool = True, subkey: Optional[str] = None) -> 'Entity':
        """
        Mark or unmark a field (or one language of it) dirty.

        Unmarking without subkey clears every language of the field.
        """
        if is_dirty:
            self._dirty[DirtyKey(name, subkey)] = True
        elif subkey is None:
            for key in [key for key in self._dirty if key.field == name]:
                del self._dirty[key]
        else:
            self._dirty.pop(DirtyKey(name, subkey), None)
        return self

    def is_dirty(self, name: Optional[str] = None) -> bool:
        if name is None:
            return bool(self._dirty)
        return any(key.field == name for key in self._dirty)

    def get_dirty(self) -> List[str]:
        """Dirty field names, in marking order."""
        return list(dict.fromkeys(key.field for key in self._dirty))

    def get_dirty_keys(self) -> List[DirtyKey]:
        return list(self._dirty)

    def clean(self) -> None:
        self._dirty.clear()

    def set_new(self, new: bool) -> 'Entity':
        """Set the lifecycle flag, a new entity has all its fields dirty."""
        if new:
            for name in self._fields:
                self.set_dirty(name)
        object.__setattr__(self, '_new', new)
        return self

    def is_new(self) -> bool:
        return self._new

    def _is_multilingual(self, name: str) -> bool:
        return self.schema.get(name, {}).get('type') == 'multilingual'

    def _mark_changes(self, name: str, value: Any) -> None:
        old = self._fields.get(name, _MISSING)

        if self._is_multilingual(name) and isinstance(value, dict):
            previous = old if isinstance(old, dict) else {}
            languages = [
                code for code in dict.fromkeys(list(value) + list(previous))
                if previous.get(code, _MISSING) != value.get(code, _MISSING)
            ]
            for code in languages:
                self.set_dirty(name, subkey=code)
            if old is _MISSING and not value:
                self.set_dirty(name)
            return

        if old is _MISSING or old != value:
            self.set_dirty(name)

    # Conversion

    def _coerce(self, data: Dict[str, Any]) -> Dict[str, Any]:
        """Convert raw wire values according to the schema type."""
        for name, value in data.items():
            kind = self.schema.get(name, {}).get('type') if isinstance(name, str) else None
            if kind is None or value is None:
                continue

            if kind == 'datetime':
                if isinstance(value, str):
                    data[name] = parse_datetime(value) or value
            elif kind in ('json', 'array'):
                if isinstance(value, str):
                    try:
                        data[name] = json.loads(value)
                    except ValueError:
                        logger.warning(f"Field {name} is not valid JSON, kept as is")
            elif kind == 'bool':
                if isinstance(value, str):
                    data[name] = value.strip().lower() not in ('', '0', 'false')
                else:
                    data[name] = bool(value)
            elif kind == 'int':
                if isinstance(value, str) and value.strip().lstrip('-').isdigit():
                    data[name] = int(value)
            elif kind == 'float':
                if isinstance(value, (str, int)) and not isinstance(value, bool):
                    try:
                        data[name] = float(value)
                    except ValueError:
                        logger.warning(f"Field {name} is not a number, kept as is")
            elif kind == 'file':
                data[name] = to_image(value)
            elif isinstance(kind, type) and issubclass(kind, Entity):
                if isinstance(value, Mapping):
                    data[name] = kind(value, mark_clean=True)
                elif isinstance(value, Entity) and not isinstance(value, kind):
                    data[name] = kind(value.to_dict(), mark_clean=True)

        return data

    def to_dict(self) -> Dict[str, Any]:
        """Every field through its getter, nested entities expanded."""
        return {name: _export(self.get(name)) for name in self._fields}

    def to_wire(self, only_changed: bool = False) -> Dict[str, Any]:
        """
        Export schema fields in wire format.

        Args:
            only_changed: Keep required fields and dirty fields only

        Returns:
            Mapping ready to be sent as request body
        """
        if only_changed:
            names = [name for name in self._fields if self.schema.get(name, {}).get('required')]
            names += [
                name for name in self.get_dirty()
                if name in self._fields and name not in names
            ]
        else:
            names = list(self._fields)

        return {
            name: self._wire_value(name, self._fields[name])
            for name in names
            if name in self.schema
        }

    def _wire_value(self, name: str, value: Any) -> Any:
        kind = self.schema.get(name, {}).get('type')
        if value is None:
            return None
        if isinstance(value, datetime):
            return to_wire_string(value)
        if kind == 'bool':
            return 1 if value else 0
        if kind == 'file':
            return image_to_wire(value)
        if isinstance(value, Entity):
            return value.to_wire()
        return value

    # Common accessors

    def _set_uid(self, value: Any) -> Optional[int]:
        return self._number('uid', value, int)

    def _get_id(self, value: Any) -> Any:
        return value if value is not None else self._fields.get('uid')

    @staticmethod
    def _number(name: str, value: Any, cast: Callable[[Any], Any]) -> Any:
        """
        Cast a numeric field, empty values become None.

        Raises:
            DomainError: If the value is not a number
        """
        if value is None or value == '':
            return None
        try:
            return cast(value)
        except (TypeError, ValueError):
            raise DomainError(f'`{name}` must be a number, got {value!r}')

    @staticmethod
    def _require_client():
        return registry.require_client()


def _export(value: Any) -> Any:
    if isinstance(value, Entity):
        return value.to_dict()
    if isinstance(value, (list, tuple)):
        return [_export(item) for item in value]
    if isinstance(value, dict):
        return {key: _export(item) for key, item in value.items()}
    return value


Entity._accessors = Entity._build_accessors()
