"""Unit tests for image values and collections."""
import io

import pytest

from openagenda.collection import Collection
from openagenda.entity.agenda import Agenda
from openagenda.entity.image import ImageBytes, ImagePath, ImageUrl, image_to_wire, to_image
from openagenda.exceptions import DomainError


class TestToImage:
    """Test cases for to_image."""

    def test_urls(self):
        assert to_image('https://cdn.openagenda.com/a.jpg') == ImageUrl('https://cdn.openagenda.com/a.jpg')
        assert to_image({'url': 'https://cdn.openagenda.com/a.jpg'}) == ImageUrl('https://cdn.openagenda.com/a.jpg')
        assert to_image({
            'base': 'https://cdn.openagenda.com/main/',
            'filename': 'a.jpg',
        }) == ImageUrl('https://cdn.openagenda.com/main/a.jpg')

    def test_path(self):
        image = to_image('/var/images/event.jpg')

        assert image == ImagePath('/var/images/event.jpg')
        assert image.filename == 'event.jpg'

    def test_bytes(self):
        image = to_image(b'\x89PNG')

        assert isinstance(image, ImageBytes)
        assert image.stream.read() == b'\x89PNG'
        assert image.filename == 'image'

    def test_file_object(self, tmp_path):
        path = tmp_path / 'poster.png'
        path.write_bytes(b'\x89PNG')

        with open(path, 'rb') as stream:
            image = to_image(stream)

            assert image.stream is stream
            assert image.filename == 'poster.png'

    def test_passthrough(self):
        image = ImageUrl('https://cdn.openagenda.com/a.jpg')

        assert to_image(image) is image
        assert to_image(None) is None
        assert to_image(False) is False

    def test_invalid(self):
        with pytest.raises(DomainError):
            to_image(42)
        with pytest.raises(DomainError):
            to_image({'filename': 'a.jpg'})


def test_image_to_wire():
    stream = ImageBytes(io.BytesIO(b''))

    assert image_to_wire(ImageUrl('https://cdn.openagenda.com/a.jpg')) == {'url': 'https://cdn.openagenda.com/a.jpg'}
    assert image_to_wire(stream) is stream
    assert image_to_wire(False) is False


class TestCollection:
    """Test cases for Collection."""

    def test_first_and_last(self):
        collection = Collection([Agenda({'uid': 1}), Agenda({'uid': 2})])

        assert collection.first().uid == 1
        assert collection.last().uid == 2

    def test_empty(self):
        assert Collection().first() is None
        assert Collection().last() is None
        assert Collection().to_dict() == []

    def test_to_dict(self):
        collection = Collection([Agenda({'uid': 1, 'official': True}), {'raw': True}])

        assert collection.to_dict() == [{'uid': 1, 'official': True}, {'raw': True}]
