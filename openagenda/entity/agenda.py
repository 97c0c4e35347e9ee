"""Agenda entity."""
from typing import Any, Dict, Optional

from openagenda.collection import Collection
from openagenda.entity.entity import Entity


class Agenda(Entity):
    """An agenda owns locations and events, referenced by its uid."""

    schema = {
        'uid': {'type': 'int'},
        'title': {},
        'slug': {},
        'description': {},
        'url': {},
        'image': {},
        'official': {'type': 'bool'},
        'private': {'type': 'bool'},
        'indexed': {'type': 'bool'},
        'networkUid': {'type': 'int'},
        'locationSetUid': {'type': 'int'},
        'category': {},
        'createdAt': {'type': 'datetime'},
        'updatedAt': {'type': 'datetime'},
    }

    def locations(self, params: Optional[Dict[str, Any]] = None) -> Collection:
        """
        Fetch the locations of this agenda.

        Raises:
            ConfigurationError: If no client is registered
        """
        client = self._require_client()
        return self.locations_endpoint(params, client).get()

    def events(self, params: Optional[Dict[str, Any]] = None) -> Collection:
        """
        Fetch the events of this agenda.

        Raises:
            ConfigurationError: If no client is registered
        """
        client = self._require_client()
        return self.events_endpoint(params, client).get()

    def locations_endpoint(self, params: Optional[Dict[str, Any]] = None, client=None):
        return self._endpoint('/locations', params, client)

    def location_endpoint(self, params: Optional[Dict[str, Any]] = None, client=None):
        return self._endpoint('/location', params, client)

    def events_endpoint(self, params: Optional[Dict[str, Any]] = None, client=None):
        return self._endpoint('/events', params, client)

    def event_endpoint(self, params: Optional[Dict[str, Any]] = None, client=None):
        return self._endpoint('/event', params, client)

    def _endpoint(self, path: str, params: Optional[Dict[str, Any]], client):
        from openagenda.endpoint.factory import make

        params = dict(params or {})
        params['agendaUid'] = self.get('uid')
        return make(path, params, client)

    def _set_category(self, value: Any) -> Any:
        if isinstance(value, (list, tuple)):
            value = ','.join(str(item) for item in value)
        if isinstance(value, str):
            value = ','.join(part.strip() for part in value.split(',') if part.strip())
        return value
