"""Exceptions raised by the OpenAgenda client."""
import json
from typing import Any, Dict, Optional


class OpenAgendaError(Exception):
    """Base class for every error raised by this library."""


class ConfigurationError(OpenAgendaError):
    """Invalid or missing client configuration."""


class ValidationError(OpenAgendaError):
    """Endpoint params or entity data failed validation.

    The message is a JSON document listing every violation found, so it can
    be compared as-is in tests and logs.
    """

    def __init__(self, subject: str, errors: Dict[str, Dict[str, str]]):
        self.subject = subject
        self.errors = errors
        super().__init__(json.dumps(
            {'message': f'{subject} has errors.', 'errors': errors},
            ensure_ascii=False,
        ))


class TransportError(OpenAgendaError):
    """HTTP request failed or the API answered with a non-2xx status."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        payload: Optional[Dict[str, Any]] = None,
        response: Any = None
    ):
        super().__init__(message)
        self.status_code = status_code
        self.payload = payload or {}
        self.response = response


class AuthenticationError(TransportError):
    """No access token could be obtained for a write request."""


class DomainError(OpenAgendaError, ValueError):
    """Entity invariant violation."""


class InvalidLanguageError(DomainError):
    """Language code is not a valid ISO 639-1 code."""


class InvalidInputError(DomainError):
    """Entity accessed with an empty or invalid field name."""


class UnknownEndpointError(OpenAgendaError):
    """No endpoint is registered for the given path."""

    def __init__(self, path: str):
        super().__init__(f'Endpoint `{path}` does not exist.')
        self.path = path
