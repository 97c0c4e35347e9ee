"""Image values: a local file path, a remote url or in-memory bytes."""
import io
import os
from dataclasses import dataclass
from typing import Any, BinaryIO, Union

from openagenda import validation
from openagenda.exceptions import DomainError


@dataclass(frozen=True)
class ImagePath:
    """Local image file, uploaded as multipart."""
    path: str

    @property
    def filename(self) -> str:
        return os.path.basename(self.path)


@dataclass(frozen=True)
class ImageUrl:
    """Remote image, sent as ``{"url": ...}``."""
    url: str


@dataclass
class ImageBytes:
    """Open binary stream, uploaded as multipart."""
    stream: BinaryIO
    filename: str = 'image'


Image = Union[ImagePath, ImageUrl, ImageBytes]
FILE_IMAGES = (ImagePath, ImageBytes)


def to_image(value: Any):
    """
    Convert a user or wire value to an image variant.

    None and False (remove image) pass through.

    Raises:
        DomainError: If the value cannot represent an image
    """
    if value is None or value is False:
        return value

    if isinstance(value, (ImagePath, ImageUrl, ImageBytes)):
        return value

    if isinstance(value, dict):
        if value.get('url'):
            return ImageUrl(value['url'])
        if value.get('base') and value.get('filename'):
            return ImageUrl(value['base'] + value['filename'])
        raise DomainError('Image mapping should have an `url` or `base` and `filename`.')

    if isinstance(value, str):
        if validation.url(value):
            return ImageUrl(value)
        return ImagePath(value)

    if isinstance(value, (bytes, bytearray)):
        return ImageBytes(io.BytesIO(value))

    if hasattr(value, 'read'):
        name = getattr(value, 'name', None)
        filename = os.path.basename(name) if isinstance(name, str) else 'image'
        return ImageBytes(value, filename)

    raise DomainError(f'Invalid image value of type {type(value).__name__}.')


def image_to_wire(image: Any):
    """Remote images become ``{"url": ...}``, files stay as variants for multipart."""
    if isinstance(image, ImageUrl):
        return {'url': image.url}
    return image
