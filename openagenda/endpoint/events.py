"""Events search endpoint."""
from typing import Any, Dict, Optional

from openagenda import validation
from openagenda.collection import Collection
from openagenda.endpoint.endpoint import Endpoint
from openagenda.entity.event import (
    ACCESSIBILITY,
    LONG_DESCRIPTION_FORMATS,
    Event,
    EventState,
    EventStatus,
)
from openagenda.validator import Validator

RELATIVE = ('passed', 'upcoming', 'current')


def check_geo(check: Any, context: Optional[Dict[str, Any]] = None) -> bool:
    """Empty, or a box with northEast and southWest lat/lng corners."""
    if not check:
        return True
    if not isinstance(check, dict):
        return False
    return all(
        isinstance(check.get(corner), dict)
        and check[corner].get('lat') is not None
        and check[corner].get('lng') is not None
        for corner in ('northEast', 'southWest')
    )


class Events(Endpoint):
    """``/agendas/{agendaUid}/events``"""

    query_fields = {
        'detailed': {'name': 'detailed', 'type': 'bool'},
        'longDescriptionFormat': {'name': 'longDescriptionFormat'},
        'size': {'name': 'size', 'type': 'int'},
        'after': {'name': 'after', 'type': 'array'},
        'includeLabels': {'name': 'includeLabels', 'type': 'bool'},
        'includeFields': {'name': 'includeFields', 'type': 'array'},
        'monolingual': {'name': 'monolingual'},
        'removed': {'name': 'removed', 'type': 'bool'},
        'city': {'name': 'city', 'type': 'array'},
        'department': {'name': 'department', 'type': 'array'},
        'region': {'name': 'region'},
        'timings[gte]': {'name': 'timings[gte]', 'type': 'datetime'},
        'timings[lte]': {'name': 'timings[lte]', 'type': 'datetime'},
        'updatedAt[gte]': {'name': 'updatedAt[gte]', 'type': 'datetime'},
        'updatedAt[lte]': {'name': 'updatedAt[lte]', 'type': 'datetime'},
        'search': {'name': 'search'},
        'uid': {'name': 'uid', 'type': 'array'},
        'slug': {'name': 'slug'},
        'featured': {'name': 'featured', 'type': 'bool'},
        'relative': {'name': 'relative', 'type': 'array'},
        'state': {'name': 'state', 'type': 'int'},
        'keyword': {'name': 'keyword', 'type': 'array'},
        'geo': {'name': 'geo', 'type': 'json'},
        'locationUid': {'name': 'locationUid', 'type': 'array'},
        'accessibility': {'name': 'accessibility', 'type': 'array'},
        'status': {'name': 'status', 'type': 'array'},
        'sort': {'name': 'sort'},
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
            .boolean('detailed')
            .in_list('longDescriptionFormat', LONG_DESCRIPTION_FORMATS)
            .greater_than_or_equal('size', 1)
            .less_than_or_equal('size', 300)
            .is_array('after')
            .boolean('includeLabels')
            .is_array('includeFields')
            .add('monolingual', 'monolingual', lambda value, context: validation.lang(value))
            .boolean('removed')
            .is_array('city')
            .is_array('department')
            .scalar('region')
            .date_time('timings[gte]')
            .date_time('timings[lte]')
            .date_time('updatedAt[gte]')
            .date_time('updatedAt[lte]')
            .scalar('search')
            .is_array('uid')
            .scalar('slug')
            .boolean('featured')
            .multiple_options('relative', RELATIVE)
            .in_list('state', list(EventState))
            .is_array('keyword')
            .add('geo', 'geo', check_geo)
            .is_array('locationUid')
            .multiple_options('accessibility', ACCESSIBILITY)
            .multiple_options('status', list(EventStatus))
            .scalar('sort')
        )

    def uri_path(self, method: str) -> str:
        super().uri_path(method)
        return f"/agendas/{self.params.get('agendaUid') or 0}/events"

    def get(self) -> Collection:
        """Search events, an empty collection when nothing matches."""
        response = self._client().get(self.get_url('get'))
        return Collection(
            Event.from_wire(item) for item in response.get('events') or []
        )
