"""Single event endpoint."""
from typing import Any, Dict, Optional

from openagenda.endpoint.endpoint import Endpoint
from openagenda.endpoint.rules import check_image, check_multilingual
from openagenda.entity.event import (
    LONG_DESCRIPTION_FORMATS,
    AttendanceMode,
    Event as EventEntity,
    EventState,
    EventStatus,
    check_accessibility,
    check_age,
    check_timings,
    presence_location_uid,
    presence_online_access_link,
)
from openagenda.validator import Validator


class Event(Endpoint):
    """``/agendas/{agendaUid}/events[/{uid}]``"""

    query_fields = {
        'longDescriptionFormat': {'name': 'longDescriptionFormat'},
    }

    def validation_uri_path(self, validator: Validator) -> Validator:
        return (
            super().validation_uri_path(validator)
            .require_presence('agendaUid')
            .integer('agendaUid')
        )

    def validation_uri_path_get(self, validator: Validator) -> Validator:
        return (
            self.validation_uri_path(validator)
            .require_presence('uid')
            .integer('uid')
        )

    def validation_uri_path_exists(self, validator: Validator) -> Validator:
        return self.validation_uri_path_get(validator)

    def validation_uri_path_update(self, validator: Validator) -> Validator:
        return self.validation_uri_path_get(validator)

    def validation_uri_path_delete(self, validator: Validator) -> Validator:
        return self.validation_uri_path_get(validator)

    def validation_uri_query_get(self, validator: Validator) -> Validator:
        return validator.in_list('longDescriptionFormat', LONG_DESCRIPTION_FORMATS)

    def validation_create(self, validator: Validator) -> Validator:
        return (
            self.validation_uri_path(validator)
            .require_presence('uid', 'update')
            .integer('uid')
            .require_presence('title', 'create')
            .add('title', 'multilingual', check_multilingual(140))
            .require_presence('description', 'create')
            .add('description', 'multilingual', check_multilingual(200))
            .add('longDescription', 'multilingual', check_multilingual(10000))
            .add('conditions', 'multilingual', check_multilingual(255))
            .add('keywords', 'multilingual', check_multilingual(255))
            .add('image', 'image', check_image(20))
            .max_length('imageCredits', 255)
            .is_array('registration')
            .add('accessibility', 'accessibility', check_accessibility)
            .require_presence('timings', 'create')
            .add('timings', 'timings', check_timings)
            .add('age', 'age', check_age)
            .require_presence('locationUid', presence_location_uid)
            .integer('locationUid')
            .in_list('attendanceMode', list(AttendanceMode))
            .require_presence('onlineAccessLink', presence_online_access_link)
            .url('onlineAccessLink')
            .in_list('status', list(EventStatus))
            .in_list('state', list(EventState))
        )

    def validation_update(self, validator: Validator) -> Validator:
        return self.validation_create(validator)

    def uri_path(self, method: str) -> str:
        super().uri_path(method)

        agenda_uid = self.params.get('agendaUid') or 0
        if method == 'create':
            return f'/agendas/{agenda_uid}/events'
        return f"/agendas/{agenda_uid}/events/{self.params.get('uid') or 0}"

    def exists(self) -> bool:
        return self._request_exists()

    def get(self) -> Optional[EventEntity]:
        """
        Fetch the event.

        Returns:
            Event, or None when not found
        """
        return self._hydrate(EventEntity, self._request_get(), 'event')

    def create(self, validate: bool = True) -> Optional[EventEntity]:
        """
        Create the event described by the params.

        Raises:
            ValidationError: If params are invalid
            TransportError: If the API refuses the event
        """
        params = self._body_params()
        params.pop('uid', None)
        entity = EventEntity(params)

        if validate:
            self._validate_entity(entity, 'create')

        response = self._client().post(self.get_url('create'), entity.to_wire())
        return self._hydrate(EventEntity, response, 'event')

    def update(self, validate: bool = True) -> Optional[EventEntity]:
        """
        Update the event with the params.

        Raises:
            ValidationError: If params are invalid
            TransportError: If the API refuses the update
        """
        entity = EventEntity(self._body_params())
        entity.set_new(False)

        if validate:
            self._validate_entity(entity, 'update')

        response = self._client().patch(self.get_url('update'), entity.to_wire())
        return self._hydrate(EventEntity, response, 'event')

    def delete(self) -> Optional[EventEntity]:
        """
        Delete the event.

        Raises:
            TransportError: If the API refuses the deletion
        """
        response = self._client().delete(self.get_url('delete'))
        return self._hydrate(EventEntity, response, 'event')

    def _body_params(self) -> Dict[str, Any]:
        return {
            name: value for name, value in self.params.items()
            if not name.startswith('_') and name not in self.query_fields
        }
