"""Location entity."""
from typing import Any, Dict, Mapping, Optional, Union

from openagenda.entity.entity import Entity
from openagenda.multilingual import set_multilingual
from openagenda.validation import format_phone


class Location(Entity):
    """A place where events happen, owned by an agenda."""

    schema = {
        'uid': {'type': 'int'},
        'agendaUid': {'type': 'int'},
        'name': {},
        'address': {},
        'access': {'type': 'multilingual'},
        'description': {'type': 'multilingual'},
        'image': {'type': 'file'},
        'imageCredits': {},
        'slug': {},
        'locationSetUid': {'type': 'int'},
        'city': {},
        'department': {},
        'region': {},
        'postalCode': {},
        'insee': {},
        'countryCode': {},
        'district': {},
        'latitude': {'type': 'float'},
        'longitude': {'type': 'float'},
        'createdAt': {'type': 'datetime'},
        'updatedAt': {'type': 'datetime'},
        'website': {},
        'email': {},
        'phone': {},
        'links': {'type': 'json'},
        'timezone': {},
        'extId': {},
        'state': {'type': 'bool'},
    }

    def set(
        self,
        fields: Union[str, Mapping[str, Any], None],
        value: Any = None,
        use_setter: bool = True
    ) -> 'Location':
        """
        Set fields, with phone numbers read in the location country.

        ``phone`` is applied after ``countryCode`` from the same mapping, and a
        stored phone is parsed again when only the country changes.
        """
        if isinstance(fields, Mapping) and 'phone' in fields:
            fields = {
                **{name: item for name, item in fields.items() if name != 'phone'},
                'phone': fields['phone'],
            }
        super().set(fields, value, use_setter)

        names = fields if isinstance(fields, Mapping) else (fields,)
        if use_setter and 'countryCode' in names and 'phone' not in names and self._fields.get('phone'):
            super().set('phone', self._fields['phone'])
        return self

    def update(self) -> 'Location':
        """
        Send dirty fields to the API.

        Returns:
            Location returned by the API

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
        elif self.get('extId'):
            data['extId'] = self.get('extId')
        data['agendaUid'] = self.get('agendaUid')

        return self._endpoint(data, client).update()

    def delete(self) -> 'Location':
        """
        Delete this location.

        Raises:
            ConfigurationError: If no client is registered
        """
        client = self._require_client()
        return self._endpoint(self.extract(['agendaUid', 'uid', 'extId']), client).delete()

    def agenda_endpoint(self, params: Optional[Dict[str, Any]] = None, client=None):
        from openagenda.endpoint.factory import make

        params = dict(params or {})
        params['uid'] = self.get('agendaUid')
        return make('/agenda', params, client)

    def _endpoint(self, params: Dict[str, Any], client):
        from openagenda.endpoint.factory import make

        return make('/location', params, client)

    def to_wire(self, only_changed: bool = False) -> Dict[str, Any]:
        data = super().to_wire(only_changed)
        data.pop('uid', None)
        data.pop('agendaUid', None)
        return data

    def _set_latitude(self, value: Any) -> Optional[float]:
        return self._number('latitude', value, float)

    def _set_longitude(self, value: Any) -> Optional[float]:
        return self._number('longitude', value, float)

    def _set_country_code(self, value: Any) -> Any:
        return value.upper() if isinstance(value, str) else value

    def _set_phone(self, value: Any) -> Any:
        """E.164 when the number is valid in the location country, kept as given otherwise."""
        if value is None or value == '':
            return None
        return format_phone(value, self._fields.get('countryCode')) or value

    def _set_description(self, value: Any) -> Any:
        return set_multilingual(value, clean=True, max_length=5000)

    def _set_access(self, value: Any) -> Any:
        return set_multilingual(value, clean=True, max_length=1000)
