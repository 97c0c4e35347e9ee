"""Shared fixtures."""
import json
from unittest.mock import Mock

import pytest
from requests.structures import CaseInsensitiveDict

from openagenda import registry
from openagenda.cache import MemoryCache
from openagenda.client import ACCESS_TOKEN_KEY, Client
from openagenda.transport import HttpTransport, Response


def json_response(payload, status=200):
    return Response(
        status_code=status,
        headers=CaseInsensitiveDict({'Content-Type': 'application/json'}),
        body=json.dumps(payload).encode('utf-8'),
    )


@pytest.fixture(autouse=True)
def reset_registry():
    """Registered client, default language and project url are process wide."""
    registry.reset()
    yield
    registry.reset()


@pytest.fixture
def transport():
    """Transport double, every verb is a Mock."""
    return Mock(spec=HttpTransport)


@pytest.fixture
def client(transport):
    """Client with a cached access token, registered as current client."""
    cache = MemoryCache()
    cache.set(ACCESS_TOKEN_KEY, 'token', 3600)
    client = Client('public-key', 'secret-key', transport, cache)
    registry.set_client(client)
    return client


@pytest.fixture
def agenda_payload():
    return {
        'uid': 41648,
        'title': 'La Semaine Nationale de la Petite Enfance',
        'description': "Du 15 au 24 mars 2025, tous ensemble pour l'éveil du tout-petit !",
        'slug': 'semainepetiteenfance',
        'url': 'https://www.semainepetiteenfance.fr',
        'image': 'https://cdn.openagenda.com/main/agenda41648.jpg',
        'official': 1,
        'private': 0,
        'indexed': 1,
        'networkUid': None,
        'locationSetUid': None,
        'createdAt': '2016-07-27T12:24:08.000Z',
        'updatedAt': '2025-01-04T10:31:53.000Z',
    }


@pytest.fixture
def location_payload():
    return {
        'uid': 35867424,
        'name': 'Centres sociaux de Wattrelos 59150',
        'address': '4 rue Edouard Herriot 59150 Wattrelos',
        'access': {},
        'description': {},
        'imageCredits': None,
        'slug': 'centres-sociaux-de-wattrelos-59150_6977111',
        'city': 'Wattrelos',
        'department': 'Nord',
        'region': 'Hauts-de-France',
        'postalCode': '59150',
        'insee': '59650',
        'countryCode': 'FR',
        'district': None,
        'latitude': 50.70428,
        'longitude': 3.235638,
        'createdAt': '2024-12-27T15:41:32.000Z',
        'updatedAt': '2024-12-27T15:42:32.000Z',
        'email': None,
        'phone': None,
        'links': [],
        'timezone': 'Europe/Paris',
        'extId': None,
        'state': 0,
    }


@pytest.fixture
def event_payload(location_payload):
    return {
        'uid': 41294774,
        'slug': 'atelier-eveil-musical',
        'title': {'fr': 'Atelier éveil musical'},
        'description': {'fr': 'Un atelier pour les tout-petits'},
        'longDescription': {'fr': 'Venez **chanter** avec nous'},
        'conditions': {'fr': 'Gratuit'},
        'keywords': {'fr': ['musique', 'enfants']},
        'image': {
            'filename': 'event.jpg',
            'base': 'https://cdn.openagenda.com/main/',
        },
        'accessibility': {'hi': True, 'ii': False, 'mi': True, 'pi': False, 'vi': False},
        'timings': [
            {'begin': '2025-03-18T10:00:00+01:00', 'end': '2025-03-18T11:00:00+01:00'},
        ],
        'age': {'min': 0, 'max': 3},
        'attendanceMode': 1,
        'status': 1,
        'state': 2,
        'featured': False,
        'locationUid': 35867424,
        'location': location_payload,
        'originAgenda': {'uid': 41648, 'title': 'La Semaine Nationale de la Petite Enfance'},
        'createdAt': '2025-01-10T08:00:00.000Z',
        'updatedAt': '2025-01-11T09:30:00.000Z',
    }
