"""Endpoint lookup by path."""
from typing import Any, Dict, Optional

from openagenda.endpoint.agenda import Agenda
from openagenda.endpoint.agendas import Agendas
from openagenda.endpoint.endpoint import Endpoint
from openagenda.endpoint.event import Event
from openagenda.endpoint.events import Events
from openagenda.endpoint.location import Location
from openagenda.endpoint.locations import Locations
from openagenda.exceptions import UnknownEndpointError

ENDPOINTS = {
    '/agendas': Agendas,
    '/agendas/mines': Agendas,
    '/agenda': Agenda,
    '/locations': Locations,
    '/location': Location,
    '/events': Events,
    '/event': Event,
}


def make(path: str, params: Optional[Dict[str, Any]] = None, client=None) -> Endpoint:
    """
    Build the endpoint registered for path.

    Args:
        path: One of ENDPOINTS keys
        params: Endpoint params
        client: Client to use (default: registered client)

    Raises:
        UnknownEndpointError: If path is not registered
    """
    endpoint_class = ENDPOINTS.get(path)
    if endpoint_class is None:
        raise UnknownEndpointError(path)

    params = dict(params or {})
    params['_path'] = path
    return endpoint_class(params, client)
