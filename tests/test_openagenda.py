"""Unit tests for the OpenAgenda facade."""
import json
import os
from unittest.mock import patch

import pytest
import responses

from conftest import json_response
from openagenda import registry
from openagenda.cache import MemoryCache
from openagenda.client import ACCESS_TOKEN_KEY
from openagenda.collection import Collection
from openagenda.endpoint.agenda import Agenda as AgendaEndpoint
from openagenda.endpoint.event import Event as EventEndpoint
from openagenda.endpoint.location import Location as LocationEndpoint
from openagenda.entity.location import Location
from openagenda.exceptions import ConfigurationError, TransportError
from openagenda.openagenda import OpenAgenda
from openagenda.transport import RequestsTransport

BASE_URL = 'https://api.openagenda.com/v2'


@pytest.fixture
def openagenda(transport):
    """Facade with a cached access token."""
    cache = MemoryCache()
    cache.set(ACCESS_TOKEN_KEY, 'token', 3600)
    return OpenAgenda('public-key', 'secret-key', transport, cache)


class TestConfiguration:
    """Test cases for facade configuration."""

    def test_registers_defaults(self, transport):
        openagenda = OpenAgenda('public-key', transport=transport, default_lang='en',
                                project_url='https://example.com/')

        assert registry.get_client() is openagenda.client
        assert registry.get_default_lang() == 'en'
        assert registry.get_project_url() == 'https://example.com'

    def test_invalid_default_lang(self, transport):
        with pytest.raises(ConfigurationError, match='Invalid `default_lang`.'):
            OpenAgenda('public-key', transport=transport, default_lang='french')

    def test_invalid_project_url(self, transport):
        with pytest.raises(ConfigurationError, match='Invalid `project_url`.'):
            OpenAgenda('public-key', transport=transport, project_url='example')

    def test_missing_public_key(self, transport):
        with pytest.raises(ConfigurationError):
            OpenAgenda(transport=transport)

    def test_missing_transport(self):
        with pytest.raises(ConfigurationError):
            OpenAgenda('public-key')
        assert registry.get_client() is None


class TestFromEnv:
    """Test cases for environment configuration."""

    def test_from_mapping(self):
        openagenda = OpenAgenda.from_env({
            'OPENAGENDA_PUBLIC_KEY': 'public-key',
            'OPENAGENDA_SECRET_KEY': 'secret-key',
            'OPENAGENDA_DEFAULT_LANG': 'en',
            'OPENAGENDA_TIMEOUT_SECONDS': '10',
        })

        assert openagenda.client.public_key == 'public-key'
        assert openagenda.client.secret_key == 'secret-key'
        assert isinstance(openagenda.client.transport, RequestsTransport)
        assert openagenda.client.transport.timeout == 10
        assert isinstance(openagenda.client.cache, MemoryCache)
        assert registry.get_default_lang() == 'en'

    @patch.dict(os.environ, {'OPENAGENDA_PUBLIC_KEY': 'env-key', 'OPENAGENDA_CACHE_TABLE': 'tokens'}, clear=True)
    @patch('openagenda.openagenda.DynamoDBCache')
    def test_from_environ(self, mock_cache):
        mock_cache.return_value = MemoryCache()

        openagenda = OpenAgenda.from_env()

        mock_cache.assert_called_once_with('tokens')
        assert openagenda.client.public_key == 'env-key'
        assert openagenda.client.transport.timeout == 30
        assert registry.get_default_lang() == 'fr'

    def test_invalid_timeout(self):
        with pytest.raises(ConfigurationError, match='OPENAGENDA_TIMEOUT_SECONDS'):
            OpenAgenda.from_env({'OPENAGENDA_PUBLIC_KEY': 'public-key', 'OPENAGENDA_TIMEOUT_SECONDS': 'soon'})

    def test_missing_public_key(self):
        with pytest.raises(ConfigurationError):
            OpenAgenda.from_env({})


class TestFacade:
    """Test cases for facade requests."""

    def test_get_access_token(self, openagenda):
        assert openagenda.get_access_token() == 'token'

    def test_get_access_token_failure(self, transport):
        transport.post.side_effect = TransportError('Request error: timeout')
        openagenda = OpenAgenda('public-key', 'secret-key', transport, MemoryCache())

        assert openagenda.get_access_token() is None

    def test_raw_requests(self, openagenda, transport):
        transport.get.return_value = json_response({'uid': 1})
        transport.head.return_value = json_response({}, status=200)
        transport.post.return_value = json_response({'success': True})

        assert openagenda.get('/agendas/1')['uid'] == 1
        assert openagenda.head('/agendas/1') == 200
        openagenda.post('/agendas/1/events', {'title': {'fr': 'Concert'}})

        assert transport.get.call_args[0][0] == f'{BASE_URL}/agendas/1'
        assert transport.post.call_args[0][0] == f'{BASE_URL}/agendas/1/events'

    def test_resources(self, openagenda, transport, agenda_payload):
        transport.get.return_value = json_response({'agendas': [agenda_payload], 'items': [agenda_payload]})

        assert isinstance(openagenda.agendas({'limit': 1}), Collection)
        assert openagenda.my_agendas().first().uid == 41648
        assert isinstance(openagenda.agenda({'uid': 1}), AgendaEndpoint)
        assert isinstance(openagenda.location({'agendaUid': 1}), LocationEndpoint)
        assert isinstance(openagenda.event({'agendaUid': 1}), EventEndpoint)
        assert openagenda.agenda({'uid': 1}).client is openagenda.client

    def test_locations_and_events(self, openagenda, transport, location_payload, event_payload):
        transport.get.return_value = json_response({'locations': [location_payload], 'events': [event_payload]})

        assert openagenda.locations({'agendaUid': 1}).first().uid == 35867424
        assert openagenda.events({'agendaUid': 1}).first().uid == 41294774


@responses.activate
def test_create_location_end_to_end(location_payload):
    """Token request then location creation over HTTP."""
    responses.add(
        responses.POST,
        f'{BASE_URL}/requestAccessToken',
        json={'access_token': 'fresh-token', 'expires_in': 3600},
        status=200,
    )
    responses.add(
        responses.POST,
        f'{BASE_URL}/agendas/41648/locations',
        json={'success': True, 'location': location_payload},
        status=200,
    )
    openagenda = OpenAgenda('public-key', 'secret-key', RequestsTransport())

    location = openagenda.location({
        'agendaUid': 41648,
        'name': 'Centres sociaux de Wattrelos 59150',
        'address': '4 rue Edouard Herriot 59150 Wattrelos',
        'countryCode': 'FR',
    }).create()

    assert isinstance(location, Location)
    assert location.uid == 35867424
    assert len(responses.calls) == 2
    auth_request, create_request = [call.request for call in responses.calls]
    assert json.loads(auth_request.body) == {'grant_type': 'authorization_code', 'code': 'secret-key'}
    assert create_request.headers['access-token'] == 'fresh-token'
    assert create_request.headers['nonce'].isdigit()
    assert json.loads(create_request.body)['countryCode'] == 'FR'


@responses.activate
def test_get_missing_event_end_to_end():
    responses.add(
        responses.GET,
        f'{BASE_URL}/agendas/41648/events/1',
        json={'message': 'Event not found'},
        status=404,
    )
    openagenda = OpenAgenda('public-key', transport=RequestsTransport())

    assert openagenda.event({'agendaUid': 41648, 'uid': 1}).get() is None
    assert 'key=public-key' in responses.calls[0].request.url
