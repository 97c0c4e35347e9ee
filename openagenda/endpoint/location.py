"""Single location endpoint."""
from typing import Any, Dict, Optional
from urllib.parse import quote

from openagenda import validation
from openagenda.endpoint.endpoint import Endpoint
from openagenda.endpoint.rules import check_image, check_multilingual
from openagenda.entity.location import Location as LocationEntity
from openagenda.validator import Validator

UID_OR_EXT_ID = 'One of `uid` or `extId` is required'


def presence_uid_or_ext_id(context: Dict[str, Any]) -> bool:
    """Required while neither uid nor extId is given."""
    data = context.get('data') or {}
    return not data.get('uid') and not data.get('extId')


class Location(Endpoint):
    """``/agendas/{agendaUid}/locations[/{uid} | /ext/{extId}]``"""

    query_methods = ()

    def validation_uri_path(self, validator: Validator) -> Validator:
        return (
            super().validation_uri_path(validator)
            .require_presence('agendaUid')
            .integer('agendaUid')
            .require_presence('uid', presence_uid_or_ext_id, UID_OR_EXT_ID)
            .integer('uid')
            .require_presence('extId', presence_uid_or_ext_id, UID_OR_EXT_ID)
            .scalar('extId')
        )

    def validation_uri_path_create(self, validator: Validator) -> Validator:
        return (
            validator
            .require_presence('agendaUid')
            .integer('agendaUid')
        )

    def validation_create(self, validator: Validator) -> Validator:
        return (
            self.validation_uri_path_create(validator)
            .require_presence('name', 'create')
            .scalar('name')
            .max_length('name', 100)
            .require_presence('address', 'create')
            .scalar('address')
            .max_length('address', 255)
            .require_presence('countryCode', 'create')
            .add('countryCode', 'countryCode', lambda value, context: validation.country_code(value))
            .add('description', 'multilingual', check_multilingual(5000))
            .add('access', 'multilingual', check_multilingual(1000))
            .add('image', 'image', check_image(20))
            .max_length('imageCredits', 255)
            .url('website')
            .add('phone', 'phone', lambda value, context: validation.phone(
                value, context['data'].get('countryCode')
            ))
            .numeric('latitude')
            .numeric('longitude')
            .is_array('links')
            .boolean('state')
        )

    def validation_update(self, validator: Validator) -> Validator:
        return self.validation_create(validator)

    def uri_path(self, method: str) -> str:
        super().uri_path(method)

        agenda_uid = self.params.get('agendaUid') or 0
        if method == 'create':
            return f'/agendas/{agenda_uid}/locations'
        if self.params.get('uid'):
            return f"/agendas/{agenda_uid}/locations/{self.params['uid']}"
        return f"/agendas/{agenda_uid}/locations/ext/{quote(str(self.params['extId']), safe='')}"

    def exists(self) -> bool:
        return self._request_exists()

    def get(self) -> Optional[LocationEntity]:
        """
        Fetch the location.

        Returns:
            Location, or None when not found
        """
        return self._hydrate(LocationEntity, self._request_get(), 'location')

    def create(self, validate: bool = True) -> Optional[LocationEntity]:
        """
        Create the location described by the params.

        Raises:
            ValidationError: If params are invalid
            TransportError: If the API refuses the location
        """
        params = self._body_params()
        params.pop('uid', None)
        entity = LocationEntity(params)

        if validate:
            self._validate_entity(entity, 'create')

        response = self._client().post(self.get_url('create'), entity.to_wire())
        return self._hydrate(LocationEntity, response, 'location')

    def update(self, validate: bool = True) -> Optional[LocationEntity]:
        """
        Update the location with the params.

        Raises:
            ValidationError: If params are invalid
            TransportError: If the API refuses the update
        """
        entity = LocationEntity(self._body_params())
        entity.set_new(False)

        if validate:
            self._validate_entity(entity, 'update')

        response = self._client().patch(self.get_url('update'), entity.to_wire())
        return self._hydrate(LocationEntity, response, 'location')

    def delete(self) -> Optional[LocationEntity]:
        """
        Delete the location.

        Raises:
            TransportError: If the API refuses the deletion
        """
        response = self._client().delete(self.get_url('delete'))
        return self._hydrate(LocationEntity, response, 'location')

    def _body_params(self) -> Dict[str, Any]:
        return {name: value for name, value in self.params.items() if not name.startswith('_')}
