"""Single agenda endpoint."""
import logging
from typing import Optional

from openagenda.endpoint.agendas import Agendas
from openagenda.endpoint.endpoint import Endpoint
from openagenda.entity.agenda import Agenda as AgendaEntity
from openagenda.validator import Validator

logger = logging.getLogger(__name__)


class Agenda(Endpoint):
    """``/agendas/{uid}``, an agenda can also be looked up by slug."""

    query_fields = {
        'detailed': {'name': 'detailed', 'type': 'bool'},
    }

    def validation_uri_path(self, validator: Validator) -> Validator:
        return (
            super().validation_uri_path(validator)
            .require_presence('uid')
            .integer('uid')
        )

    def validation_uri_query_get(self, validator: Validator) -> Validator:
        return validator.boolean('detailed')

    def uri_path(self, method: str) -> str:
        super().uri_path(method)
        return f"/agendas/{self.params.get('uid') or 0}"

    def exists(self) -> bool:
        if not self.params.get('uid') and self.params.get('slug'):
            return self.get() is not None
        return self._request_exists()

    def get(self) -> Optional[AgendaEntity]:
        """
        Fetch the agenda.

        Returns:
            Agenda, or None when not found
        """
        if not self.params.get('uid') and self.params.get('slug'):
            return self._get_by_slug(self.params['slug'])
        return self._hydrate(AgendaEntity, self._request_get(), None)

    def _get_by_slug(self, slug: str) -> Optional[AgendaEntity]:
        agendas = Agendas({'slug': slug, 'limit': 1}, self.client).get()
        if not agendas:
            logger.info(f"No agenda found with slug {slug}")
            return None
        return agendas.first()
