"""Process-wide defaults shared by entities and endpoints.

Holds the client registered by the last ``OpenAgenda`` facade, the default
language for plain-string multilingual values and the project url used to
resolve relative links in rich text. Tests call ``reset()`` between cases.
"""
from typing import Optional

from openagenda.exceptions import ConfigurationError

DEFAULT_LANG = 'fr'

_client = None
_default_lang = DEFAULT_LANG
_project_url: Optional[str] = None


def set_client(client) -> None:
    global _client
    _client = client


def get_client():
    return _client


def require_client():
    """
    Return the registered client.

    Raises:
        ConfigurationError: If no client was registered
    """
    if _client is None:
        raise ConfigurationError(
            'OpenAgenda object was not previously created or Client not set.'
        )
    return _client


def reset_client() -> None:
    set_client(None)


def set_default_lang(lang: str) -> None:
    global _default_lang
    _default_lang = lang


def get_default_lang() -> str:
    return _default_lang


def set_project_url(url: Optional[str]) -> None:
    global _project_url
    _project_url = url.rstrip('/') if url else None


def get_project_url() -> Optional[str]:
    return _project_url


def reset() -> None:
    """Restore every default."""
    reset_client()
    set_default_lang(DEFAULT_LANG)
    set_project_url(None)
