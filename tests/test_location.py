"""Unit tests for the Location entity."""
import pytest

from conftest import json_response
from openagenda.entity.image import ImagePath, ImageUrl
from openagenda.entity.location import Location
from openagenda.exceptions import ConfigurationError, DomainError

LOCATION_URL = 'https://api.openagenda.com/v2/agendas/123/locations/35867424'


@pytest.fixture
def location(location_payload):
    return Location.from_wire({**location_payload, 'agendaUid': 123})


def test_uid_is_cast_to_int():
    assert Location({'uid': '1'}).uid == 1


def test_coordinates_are_floats():
    location = Location({'latitude': '50.70428', 'longitude': 3})

    assert location.latitude == 50.70428
    assert isinstance(location.longitude, float)


def test_country_code_is_upper_cased():
    assert Location({'countryCode': 'fr'}).countryCode == 'FR'


def test_phone_is_normalized():
    """Local numbers are read in the location country."""
    location = Location({'countryCode': 'FR', 'phone': '01 42 68 53 00'})

    assert location.phone == '+33142685300'


def test_invalid_phone_is_kept_for_validation():
    assert Location({'phone': 'not a phone'}).phone == 'not a phone'


def test_phone_is_read_in_country_given_after_it():
    location = Location({'phone': '02 512 34 56', 'countryCode': 'BE'})

    assert location.phone == '+3225123456'
    assert location.countryCode == 'BE'


def test_phone_is_read_again_when_country_changes():
    location = Location({'phone': '02 512 34 56'})
    assert location.phone == '02 512 34 56'

    location.countryCode = 'be'

    assert location.phone == '+3225123456'
    assert location.is_dirty('phone')


def test_normalized_phone_survives_country_change():
    location = Location({'countryCode': 'FR', 'phone': '01 42 68 53 00'})
    location.clean()

    location.countryCode = 'BE'

    assert location.phone == '+33142685300'
    assert not location.is_dirty('phone')


def test_invalid_coordinates():
    with pytest.raises(DomainError, match='latitude'):
        Location({'latitude': 'north'})

    with pytest.raises(DomainError, match='longitude'):
        Location({'longitude': [3]})


def test_description_and_access_are_truncated():
    location = Location({'description': 'a' * 6000, 'access': '<p>' + 'b' * 1500 + '</p>'})

    assert len(location.description['fr']) == 5000
    assert location.description['fr'].endswith(' ...')
    assert len(location.access['fr']) == 1000
    assert location.access['fr'].startswith('bbb')


def test_image_values():
    assert Location({'image': 'https://example.com/a.jpg'}).image == ImageUrl('https://example.com/a.jpg')
    assert Location({'image': '/tmp/a.jpg'}).image == ImagePath('/tmp/a.jpg')


def test_to_wire_drops_identifiers(location):
    data = location.to_wire()

    assert 'uid' not in data
    assert 'agendaUid' not in data
    assert data['name'] == 'Centres sociaux de Wattrelos 59150'
    assert data['state'] == 0
    assert data['createdAt'] == '2024-12-27T15:41:32'


def test_from_wire_is_clean(location):
    assert not location.is_new()
    assert not location.is_dirty()
    assert location.state is False


def test_update_without_client(location):
    location.name = 'New name'

    with pytest.raises(ConfigurationError):
        location.update()


def test_update_sends_changed_fields(client, transport, location, location_payload):
    """Only dirty fields are sent, identifiers go in the url."""
    transport.patch.return_value = json_response({
        'success': True,
        'location': {**location_payload, 'name': 'New name'},
    })
    location.name = 'New name'

    updated = location.update()

    url, data, params = transport.patch.call_args[0]
    assert url == LOCATION_URL
    assert data == {'name': 'New name'}
    assert params['headers']['access-token'] == 'token'
    assert isinstance(updated, Location)
    assert updated.name == 'New name'


def test_delete(client, transport, location, location_payload):
    transport.delete.return_value = json_response({'success': True, 'location': location_payload})

    deleted = location.delete()

    assert transport.delete.call_args[0][0] == LOCATION_URL
    assert deleted.uid == 35867424


def test_agenda_endpoint(location):
    endpoint = location.agenda_endpoint()

    assert endpoint.get_url('get') == 'https://api.openagenda.com/v2/agendas/123'
