"""Event entity, its enumerations and the rules shared with the validator."""
from enum import IntEnum
from typing import Any, Dict, List, Optional

from openagenda import registry
from openagenda.dates import parse_datetime, to_atom_string, to_utc
from openagenda.entity.agenda import Agenda
from openagenda.entity.entity import Entity
from openagenda.entity.location import Location
from openagenda.exceptions import DomainError
from openagenda.markup import no_html
from openagenda.multilingual import set_multilingual


class EventState(IntEnum):
    """Publication workflow."""
    REFUSED = -1
    MODERATION = 0
    READY = 1
    PUBLISHED = 2


class EventStatus(IntEnum):
    SCHEDULED = 1
    RESCHEDULED = 2
    ONLINE = 3
    DEFERRED = 4
    FULL = 5
    CANCELED = 6


class AttendanceMode(IntEnum):
    OFFLINE = 1
    ONLINE = 2
    MIXED = 3


# Accessibility flags
ACCESS_HI = 'hi'  # hearing impairment
ACCESS_II = 'ii'  # visual impairment
ACCESS_MI = 'mi'  # motor impairment
ACCESS_PI = 'pi'  # intellectual impairment
ACCESS_VI = 'vi'  # psychic impairment
ACCESSIBILITY = (ACCESS_HI, ACCESS_II, ACCESS_MI, ACCESS_PI, ACCESS_VI)

LONG_DESCRIPTION_FORMATS = ('markdown', 'HTML', 'HTMLWithEmbeds')


def check_timings(check: Any, context: Optional[Dict[str, Any]] = None) -> bool:
    """
    Check timings are a non-empty list of {begin, end} with begin < end.

    Args:
        check: Timings to check
        context: Validation context (unused)

    Returns:
        True if every timing is valid
    """
    if not isinstance(check, (list, tuple)) or not check:
        return False

    for item in check:
        if not isinstance(item, dict) or 'begin' not in item or 'end' not in item:
            return False

        begin = parse_datetime(item['begin'])
        end = parse_datetime(item['end'])
        if begin is None or end is None:
            return False

        if to_utc(begin) >= to_utc(end):
            return False

    return True


def check_age(check: Any, context: Optional[Dict[str, Any]] = None) -> bool:
    """
    Check an age range. Empty is valid, max needs min, min <= max.

    Bounds must be integers or integer strings.
    """
    if not check:
        return True

    if not isinstance(check, dict) or 'min' not in check or 'max' not in check:
        return False

    minimum = _to_age(check['min'])
    maximum = _to_age(check['max'])

    if not all(bound is None or _is_int(bound) for bound in (minimum, maximum)):
        return False
    if minimum is None and maximum is None:
        return True
    if minimum is None:
        return False
    if maximum is not None and minimum > maximum:
        return False

    return True


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _to_age(value: Any) -> Any:
    """Integer strings become ints, other values are left to validation."""
    if value == '':
        return None
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            return value
    return value


def check_accessibility(check: Any, context: Optional[Dict[str, Any]] = None) -> bool:
    """Check accessibility is a mapping of known flags to booleans."""
    if not isinstance(check, dict):
        return False
    return all(key in ACCESSIBILITY and isinstance(value, bool) for key, value in check.items())


def presence_location_uid(context: Dict[str, Any]) -> bool:
    """locationUid is required on creation without mode, and for offline or mixed events."""
    data = context.get('data') or {}
    is_new = context.get('new_record', True)
    mode = data.get('attendanceMode')

    return bool(
        (is_new and not mode)
        or mode in (AttendanceMode.OFFLINE, AttendanceMode.MIXED)
    )


def presence_online_access_link(context: Dict[str, Any]) -> bool:
    """onlineAccessLink is required for online and mixed events."""
    data = context.get('data') or {}
    return data.get('attendanceMode') in (AttendanceMode.ONLINE, AttendanceMode.MIXED)


def _to_enum(enum, value: Any) -> Any:
    """Convert to enum member when possible, invalid values are left to validation."""
    if value is None or isinstance(value, bool):
        return value
    try:
        return enum(int(value))
    except (TypeError, ValueError):
        return value


class Event(Entity):
    """An event of an agenda, optionally at a location."""

    schema = {
        'uid': {'type': 'int'},
        'agendaUid': {'type': 'int'},
        'locationUid': {'type': 'int'},
        'slug': {},
        'title': {'type': 'multilingual', 'required': True},
        'description': {'type': 'multilingual', 'required': True},
        'longDescription': {'type': 'multilingual'},
        'conditions': {'type': 'multilingual'},
        'keywords': {'type': 'multilingual'},
        'image': {'type': 'file'},
        'imageCredits': {},
        'registration': {},
        'accessibility': {},
        'timings': {'required': True},
        'type': {},
        'age': {},
        'attendanceMode': {},
        'onlineAccessLink': {},
        'links': {},
        'timezone': {},
        'status': {},
        'state': {},
        'featured': {'type': 'bool'},
        'createdAt': {'type': 'datetime'},
        'updatedAt': {'type': 'datetime'},
        'originAgenda': {'type': Agenda},
        'location': {'type': Location},
    }

    check_timings = staticmethod(check_timings)
    check_age = staticmethod(check_age)
    check_accessibility = staticmethod(check_accessibility)
    presence_location_uid = staticmethod(presence_location_uid)
    presence_online_access_link = staticmethod(presence_online_access_link)

    def update(self) -> 'Event':
        """
        Send dirty fields to the API.

        Returns:
            Event returned by the API

        Raises:
            ConfigurationError: If no client is registered
        """
        client = self._require_client()

        data = {
            name: value
            for name, value in self.extract(self.schema, only_dirty=True).items()
            if value is not None
        }
        if self.get('uid'):
            data['uid'] = self.get('uid')
        data['agendaUid'] = self.get('agendaUid')

        return self._endpoint('/event', data, client).update()

    def delete(self) -> 'Event':
        """
        Delete this event.

        Raises:
            ConfigurationError: If no client is registered
        """
        client = self._require_client()
        return self._endpoint('/event', self.extract(['agendaUid', 'uid']), client).delete()

    def agenda_endpoint(self, params: Optional[Dict[str, Any]] = None, client=None):
        params = dict(params or {})
        params['uid'] = self.get('agendaUid')
        return self._endpoint('/agenda', params, client)

    def location_endpoint(self, params: Optional[Dict[str, Any]] = None, client=None):
        params = dict(params or {})
        params['agendaUid'] = self.get('agendaUid')
        if 'uid' not in params and 'extId' not in params:
            params['uid'] = self.get('locationUid')
        return self._endpoint('/location', params, client)

    @staticmethod
    def _endpoint(path: str, params: Dict[str, Any], client):
        from openagenda.endpoint.factory import make

        return make(path, params, client)

    def to_wire(self, only_changed: bool = False) -> Dict[str, Any]:
        data = super().to_wire(only_changed)

        location = self._fields.get('location')
        if 'location' in data and isinstance(location, Location):
            data['locationUid'] = location.get('uid')

        timings = data.get('timings')
        if isinstance(timings, list):
            data['timings'] = [
                {
                    key: to_atom_string(value) if hasattr(value, 'isoformat') else value
                    for key, value in timing.items()
                } if isinstance(timing, dict) else timing
                for timing in timings
            ]

        for name in ('uid', 'agendaUid', 'originAgenda', 'location'):
            data.pop(name, None)

        return data

    # Getters

    def _get_agenda(self, value: Any) -> Optional[Agenda]:
        if value is not None:
            return value
        return self._fields.get('originAgenda')

    def _get_agenda_uid(self, value: Any) -> Optional[int]:
        if value:
            return int(value)
        agenda = self.get('agenda')
        if isinstance(agenda, Agenda):
            return agenda.get('uid')
        return None

    def _get_location_uid(self, value: Any) -> Optional[int]:
        if value:
            return value
        location = self._fields.get('location')
        if isinstance(location, Location):
            return location.get('uid')
        return None

    # Setters

    def _set_location_uid(self, value: Any) -> Optional[int]:
        return self._number('locationUid', value, int)

    def _set_title(self, value: Any) -> Any:
        return set_multilingual(value, clean=True, max_length=140)

    def _set_description(self, value: Any) -> Any:
        return set_multilingual(value, clean=True, max_length=200)

    def _set_long_description(self, value: Any) -> Any:
        return set_multilingual(value, rich=True, max_length=10000)

    def _set_conditions(self, value: Any) -> Any:
        return set_multilingual(value, clean=True, max_length=255)

    def _set_keywords(self, keywords: Any) -> Any:
        """A string or a list is stored under the default language."""
        if isinstance(keywords, str):
            keywords = [keywords]

        if isinstance(keywords, (list, tuple)):
            keywords = {registry.get_default_lang(): list(keywords)}

        if isinstance(keywords, dict):
            keywords = set_multilingual(keywords)
            keywords = {
                code: [no_html(item) if isinstance(item, str) else item for item in items]
                if isinstance(items, (list, tuple)) else items
                for code, items in keywords.items()
            }

        return keywords

    def _set_timings(self, timings: Any) -> Any:
        if not isinstance(timings, (list, tuple)):
            return timings

        result: List[Any] = []
        for timing in timings:
            if isinstance(timing, dict):
                timing = dict(timing)
                for key in ('begin', 'end'):
                    if isinstance(timing.get(key), str):
                        timing[key] = parse_datetime(timing[key]) or timing[key]
            result.append(timing)
        return result

    def _set_age(self, value: Any) -> Any:
        """``[min, max]`` or ``{'min': .., 'max': ..}``."""
        if value is None:
            return None

        minimum = maximum = None
        if isinstance(value, (list, tuple)) and len(value) == 2:
            minimum, maximum = value
        elif isinstance(value, dict):
            minimum = value.get('min')
            maximum = value.get('max')

        return {'min': _to_age(minimum), 'max': _to_age(maximum)}

    def _set_accessibility(self, value: Any) -> Dict[str, bool]:
        """
        Accept a flag, a list of flags or a mapping of flags to booleans.

        Raises:
            DomainError: If a flag is unknown
        """
        result = {flag: False for flag in ACCESSIBILITY}

        if value is None or value == '':
            return result

        if isinstance(value, str):
            value = [value]

        if isinstance(value, (list, tuple, set)):
            value = {flag: True for flag in value}

        if not isinstance(value, dict):
            raise DomainError(f'Invalid accessibility value of type {type(value).__name__}.')

        for flag, enabled in value.items():
            if flag not in ACCESSIBILITY:
                raise DomainError(f'`{flag}` is not a valid accessibility flag.')
            result[flag] = bool(enabled)

        return result

    def _set_attendance_mode(self, value: Any) -> Any:
        return _to_enum(AttendanceMode, value)

    def _set_status(self, value: Any) -> Any:
        return _to_enum(EventStatus, value)

    def _set_state(self, value: Any) -> Any:
        return _to_enum(EventState, value)
