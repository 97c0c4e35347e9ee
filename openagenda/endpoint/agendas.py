"""Agendas search endpoint."""
from openagenda.collection import Collection
from openagenda.endpoint.endpoint import Endpoint
from openagenda.entity.agenda import Agenda
from openagenda.validator import Validator

MINES_PATH = '/agendas/mines'

SORT_MATCHING = {
    'created_desc': 'createdAt.desc',
    'recent_events': 'recentlyAddedEvents.desc',
}


class Agendas(Endpoint):
    """``/agendas``, or ``/me/agendas`` for the agendas of the key owner."""

    query_fields = {
        'limit': {'name': 'size', 'type': 'int'},
        'fields': {'name': 'fields', 'type': 'array'},
        'search': {'name': 'search'},
        'official': {'name': 'official', 'type': 'bool'},
        'slug': {'name': 'slug', 'type': 'array'},
        'id': {'name': 'uid', 'type': 'array'},
        'network': {'name': 'network', 'type': 'int'},
        'sort': {'name': 'sort', 'matching': SORT_MATCHING},
    }

    def validation_uri_query_get(self, validator: Validator) -> Validator:
        return (
            validator
            .integer('limit')
            .greater_than_or_equal('limit', 1)
            .multiple_options('fields', ['summary', 'schema'])
            .scalar('search')
            .boolean('official')
            .is_array('slug')
            .is_array('id')
            .integer('network')
            .in_list('sort', list(SORT_MATCHING) + list(SORT_MATCHING.values()))
        )

    @property
    def is_mines(self) -> bool:
        return self.params.get('_path') == MINES_PATH

    def uri_path(self, method: str) -> str:
        super().uri_path(method)
        return '/me/agendas' if self.is_mines else '/agendas'

    def get(self) -> Collection:
        """Search agendas, an empty collection when nothing matches."""
        response = self._client().get(self.get_url('get'))
        target = 'items' if self.is_mines else 'agendas'

        return Collection(
            Agenda.from_wire(item) for item in response.get(target) or []
        )
