"""Locations search endpoint."""
from openagenda.collection import Collection
from openagenda.endpoint.endpoint import Endpoint
from openagenda.entity.location import Location
from openagenda.validator import Validator

ORDERS = ('name.asc', 'name.desc', 'createdAt.asc', 'createdAt.desc')


class Locations(Endpoint):
    """``/agendas/{agendaUid}/locations``"""

    query_fields = {
        'size': {'name': 'size', 'type': 'int'},
        'after': {'name': 'after', 'type': 'array'},
        'search': {'name': 'search'},
        'detailed': {'name': 'detailed', 'type': 'bool'},
        'state': {'name': 'state', 'type': 'bool'},
        'createdAt[lte]': {'name': 'createdAt[lte]', 'type': 'datetime'},
        'createdAt[gte]': {'name': 'createdAt[gte]', 'type': 'datetime'},
        'updatedAt[lte]': {'name': 'updatedAt[lte]', 'type': 'datetime'},
        'updatedAt[gte]': {'name': 'updatedAt[gte]', 'type': 'datetime'},
        'order': {'name': 'order'},
    }

    def validation_uri_path(self, validator: Validator) -> Validator:
        return (
            super().validation_uri_path(validator)
            .require_presence('agendaUid')
            .integer('agendaUid')
        )

    def validation_uri_query_get(self, validator: Validator) -> Validator:
        return (
            validator
            .numeric('size')
            .greater_than_or_equal('size', 1)
            .is_array('after')
            .scalar('search')
            .boolean('detailed')
            .boolean('state')
            .date_time('createdAt[lte]')
            .date_time('createdAt[gte]')
            .date_time('updatedAt[lte]')
            .date_time('updatedAt[gte]')
            .scalar('order')
            .in_list('order', ORDERS)
        )

    def uri_path(self, method: str) -> str:
        super().uri_path(method)
        return f"/agendas/{self.params.get('agendaUid') or 0}/locations"

    def get(self) -> Collection:
        """Search locations, an empty collection when nothing matches."""
        response = self._client().get(self.get_url('get'))
        return Collection(
            Location.from_wire(item) for item in response.get('locations') or []
        )
