"""Validation tools shared by entities and endpoints."""
import json
import logging
import mimetypes
import os
from typing import Any, Optional, Union
from urllib.parse import urlparse

import phonenumbers
import pycountry
from phonenumbers.phonenumberutil import NumberParseException

logger = logging.getLogger(__name__)

# ISO 639-1 codes
LANGUAGES = frozenset(
    language.alpha_2 for language in pycountry.languages
    if hasattr(language, 'alpha_2')
)

IMAGE_TYPES = ('image/jpg', 'image/jpeg', 'image/png', 'image/webp')


def lang(check: Any) -> bool:
    """Check a value is a valid ISO 639-1 language code."""
    return isinstance(check, str) and check in LANGUAGES


def url(check: Any) -> bool:
    """Check a value is an absolute http(s) url."""
    if not isinstance(check, str):
        return False
    parsed = urlparse(check)
    return parsed.scheme in ('http', 'https') and bool(parsed.netloc)


def country_code(check: Any) -> bool:
    """Check a value is an ISO 3166-1 alpha-2 country code."""
    if not isinstance(check, str) or len(check) != 2:
        return False
    return pycountry.countries.get(alpha_2=check.upper()) is not None


def format_phone(number: Any, region: Optional[str] = None) -> Optional[str]:
    """
    Normalize a phone number to E.164.

    Args:
        number: Phone number, local or international
        region: ISO country code used for local numbers (default: FR)

    Returns:
        E.164 formatted number or None if the number is invalid
    """
    if not isinstance(number, str) or not number.strip():
        return None

    region = region.upper() if isinstance(region, str) and region else 'FR'
    try:
        parsed = phonenumbers.parse(number, region)
    except NumberParseException as e:
        logger.warning(f"Invalid phone number '{number}': {e}")
        return None

    if not phonenumbers.is_valid_number(parsed):
        logger.warning(f"Invalid phone number '{number}' for region {region}")
        return None

    return phonenumbers.format_number(parsed, phonenumbers.PhoneNumberFormat.E164)


def phone(check: Any, region: Optional[str] = None) -> bool:
    """Check a value is a valid phone number."""
    return format_phone(check, region) is not None


def multilingual(check: Any, max_length: Optional[int] = None) -> Union[str, bool]:
    """
    Check a multilingual mapping.

    Args:
        check: Mapping of language code to text (or list of keywords)
        max_length: Maximum length per language

    Returns:
        True if valid, otherwise the error message
    """
    if not isinstance(check, dict):
        return 'Value should be a mapping of language code to text.'

    for code, value in check.items():
        if not lang(code):
            return f'`{code}` is an invalid ISO 639-1 language code.'

        if max_length:
            if isinstance(value, (list, dict)):
                to_check = json.dumps(value, ensure_ascii=False)
            else:
                to_check = value or ''

            if len(to_check) > max_length:
                return f'Value for `{code}` exceed size limit.'

    return True


def image(check: Any, max_size: float) -> bool:
    """
    Validate an image file path or an open file.

    Args:
        check: Absolute path, binary file object, or False to remove image
        max_size: Maximum size in megabytes

    Returns:
        True if the image is acceptable
    """
    max_bytes = max_size * 1024 * 1024

    if check is False:
        return True

    if isinstance(check, str):
        if not os.path.isfile(check):
            return False
        mime, _ = mimetypes.guess_type(check)
        return os.path.getsize(check) <= max_bytes and mime in IMAGE_TYPES

    if hasattr(check, 'seek') and hasattr(check, 'tell'):
        position = check.tell()
        check.seek(0, os.SEEK_END)
        size = check.tell()
        check.seek(position)
        name = getattr(check, 'name', None)
        mime = mimetypes.guess_type(name)[0] if isinstance(name, str) else None
        return 0 < size <= max_bytes and (mime is None or mime in IMAGE_TYPES)

    return False
