"""Unit tests for the Location endpoint."""
import pytest

from conftest import json_response
from openagenda.endpoint.factory import make
from openagenda.entity.location import Location
from openagenda.exceptions import TransportError, ValidationError

BASE = 'https://api.openagenda.com/v2/agendas/123/locations'


@pytest.fixture
def new_location():
    return {
        'agendaUid': 123,
        'name': 'Centres sociaux de Wattrelos',
        'address': '4 rue Edouard Herriot 59150 Wattrelos',
        'countryCode': 'fr',
        'latitude': '50.70428',
        'longitude': 3.235638,
    }


class TestLocationUrls:
    """Test cases for location urls."""

    def test_by_uid(self):
        endpoint = make('/location', {'agendaUid': 123, 'uid': 456})

        assert endpoint.get_url('get') == f'{BASE}/456'
        assert endpoint.get_url('delete') == f'{BASE}/456'
        assert endpoint.get_url('create') == BASE

    def test_by_ext_id(self):
        endpoint = make('/location', {'agendaUid': 123, 'extId': 'ext/1 a'})

        assert endpoint.get_url('get') == f'{BASE}/ext/ext%2F1%20a'

    def test_create_does_not_need_uid(self):
        assert make('/location', {'agendaUid': 123}).get_url('create') == BASE

    def test_agenda_uid_is_required(self):
        with pytest.raises(ValidationError) as excinfo:
            make('/location', {'uid': 456}).get_url('get')

        assert excinfo.value.errors == {'agendaUid': {'_required': 'This field is required'}}


class TestLocationRequests:
    """Test cases for location requests."""

    def test_exists(self, client, transport):
        transport.head.return_value = json_response({}, status=404)

        assert not make('/location', {'agendaUid': 123, 'uid': 456}).exists()

    def test_get(self, client, transport, location_payload):
        transport.get.return_value = json_response({'success': True, 'location': location_payload})

        location = make('/location', {'agendaUid': 123, 'uid': 35867424}).get()

        assert isinstance(location, Location)
        assert location.city == 'Wattrelos'
        assert not location.is_dirty()

    def test_get_not_found(self, client, transport):
        transport.get.return_value = json_response({'message': 'not found'}, status=404)

        assert make('/location', {'agendaUid': 123, 'uid': 1}).get() is None

    def test_create(self, client, transport, new_location, location_payload):
        transport.post.return_value = json_response({'success': True, 'location': location_payload})

        location = make('/location', {**new_location, 'uid': 999}).create()

        url, data, params = transport.post.call_args[0]
        assert url == BASE
        assert data == {
            'name': 'Centres sociaux de Wattrelos',
            'address': '4 rue Edouard Herriot 59150 Wattrelos',
            'countryCode': 'FR',
            'latitude': 50.70428,
            'longitude': 3.235638,
        }
        assert params['headers']['access-token'] == 'token'
        assert params['headers']['nonce'].isdigit()
        assert location.uid == 35867424

    def test_create_without_country_code(self, client, transport, new_location):
        del new_location['countryCode']

        with pytest.raises(ValidationError) as excinfo:
            make('/location', new_location).create()

        assert excinfo.value.errors == {'countryCode': {'_required': 'This field is required'}}
        transport.post.assert_not_called()

    def test_create_with_invalid_values(self, client, transport, new_location):
        new_location.update({
            'countryCode': 'XX',
            'website': 'not an url',
        })

        with pytest.raises(ValidationError) as excinfo:
            make('/location', new_location).create(validate=True)

        assert set(excinfo.value.errors) == {'countryCode', 'website'}
        transport.post.assert_not_called()

    def test_create_with_invalid_phone(self, client, transport, new_location):
        new_location['phone'] = 'not a phone'

        with pytest.raises(ValidationError) as excinfo:
            make('/location', new_location).create()

        assert excinfo.value.errors == {'phone': {'phone': 'The provided value is invalid'}}
        transport.post.assert_not_called()

    def test_create_with_local_phone_before_country(self, client, transport, new_location, location_payload):
        transport.post.return_value = json_response({'success': True, 'location': location_payload})
        del new_location['countryCode']
        new_location.update({'phone': '02 512 34 56', 'countryCode': 'be'})

        make('/location', new_location).create()

        data = transport.post.call_args[0][1]
        assert data['phone'] == '+3225123456'
        assert data['countryCode'] == 'BE'

    def test_create_without_validation(self, client, transport, new_location, location_payload):
        transport.post.return_value = json_response({'success': True, 'location': location_payload})
        del new_location['countryCode']

        make('/location', new_location).create(validate=False)

        transport.post.assert_called_once()

    def test_create_refused(self, client, transport, new_location):
        transport.post.return_value = json_response({'message': 'Invalid address'}, status=400)

        with pytest.raises(TransportError, match='Invalid address') as excinfo:
            make('/location', new_location).create()

        assert excinfo.value.status_code == 400
        assert excinfo.value.payload['message'] == 'Invalid address'

    def test_update_by_ext_id(self, client, transport, location_payload):
        transport.patch.return_value = json_response({'success': True, 'location': location_payload})

        make('/location', {'agendaUid': 123, 'extId': 'abc', 'name': 'New name'}).update()

        url, data, _ = transport.patch.call_args[0]
        assert url == f'{BASE}/ext/abc'
        assert data == {'extId': 'abc', 'name': 'New name'}

    def test_delete(self, client, transport, location_payload):
        transport.delete.return_value = json_response({'success': True, 'location': location_payload})

        location = make('/location', {'agendaUid': 123, 'uid': 35867424}).delete()

        assert transport.delete.call_args[0][0] == f'{BASE}/35867424'
        assert location.uid == 35867424
