"""HTTP transport used by the client."""
import json
import logging
from abc import ABC, abstractmethod
from contextlib import ExitStack
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

import requests
from requests.structures import CaseInsensitiveDict

from openagenda.entity.image import FILE_IMAGES, ImagePath
from openagenda.exceptions import TransportError

logger = logging.getLogger(__name__)

USER_AGENT = 'openagenda-python'


@dataclass
class Response:
    """Transport-agnostic HTTP response."""
    status_code: int
    headers: CaseInsensitiveDict = field(default_factory=CaseInsensitiveDict)
    body: bytes = b''

    @property
    def text(self) -> str:
        return self.body.decode('utf-8', errors='replace')

    def json(self) -> Any:
        """
        Decode the body as JSON.

        Raises:
            ValueError: If the body is not valid JSON
        """
        return json.loads(self.text)

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300


class HttpTransport(ABC):
    """
    HTTP verbs used by the client.

    ``params`` may hold ``query`` (query string mapping) and ``headers``.
    """

    @abstractmethod
    def head(self, url: str, params: Optional[Dict[str, Any]] = None) -> Response:
        ...

    @abstractmethod
    def get(self, url: str, params: Optional[Dict[str, Any]] = None) -> Response:
        ...

    @abstractmethod
    def post(self, url: str, data: Dict[str, Any], params: Optional[Dict[str, Any]] = None) -> Response:
        ...

    @abstractmethod
    def patch(self, url: str, data: Dict[str, Any], params: Optional[Dict[str, Any]] = None) -> Response:
        ...

    @abstractmethod
    def delete(
        self, url: str, data: Optional[Dict[str, Any]] = None, params: Optional[Dict[str, Any]] = None
    ) -> Response:
        ...


def has_file(data: Optional[Dict[str, Any]]) -> bool:
    """True when a value must be sent as a multipart file part."""
    if not data:
        return False
    return any(isinstance(value, FILE_IMAGES) or hasattr(value, 'read') for value in data.values())


class RequestsTransport(HttpTransport):
    """HttpTransport implemented with requests."""

    def __init__(self, timeout: int = 30, session: Optional[requests.Session] = None):
        """
        Initialize the transport.

        Args:
            timeout: HTTP request timeout in seconds (default: 30)
            session: requests session to reuse (default: a new session)
        """
        self.timeout = timeout
        self.session = session or requests.Session()

    def head(self, url, params=None):
        return self._request('HEAD', url, None, params)

    def get(self, url, params=None):
        return self._request('GET', url, None, params)

    def post(self, url, data, params=None):
        return self._request('POST', url, data, params)

    def patch(self, url, data, params=None):
        return self._request('PATCH', url, data, params)

    def delete(self, url, data=None, params=None):
        return self._request('DELETE', url, data, params)

    def _request(
        self, method: str, url: str, data: Optional[Dict[str, Any]], params: Optional[Dict[str, Any]]
    ) -> Response:
        """
        Send a request and wrap the response.

        Raises:
            TransportError: If the request could not be sent
        """
        params = params or {}
        headers = {'Accept': 'application/json', 'User-Agent': USER_AGENT}
        headers.update(params.get('headers') or {})

        logger.info(f"{method} {url}")

        with ExitStack() as stack:
            kwargs: Dict[str, Any] = {
                'params': params.get('query'),
                'headers': headers,
                'timeout': self.timeout,
            }
            if has_file(data):
                kwargs['data'], kwargs['files'] = self._multipart(data, stack)
            elif data is not None:
                kwargs['json'] = data

            try:
                response = self.session.request(method, url, **kwargs)
            except requests.RequestException as e:
                logger.error(f"Error sending {method} {url}: {e}")
                raise TransportError(f'Request error: {e}') from e

        return Response(
            status_code=response.status_code,
            headers=CaseInsensitiveDict(response.headers),
            body=response.content or b'',
        )

    @staticmethod
    def _multipart(data: Dict[str, Any], stack: ExitStack):
        """Split data into the JSON ``data`` field and the file parts."""
        fields = {}
        files = {}
        for key, value in data.items():
            if isinstance(value, ImagePath):
                files[key] = (value.filename, stack.enter_context(open(value.path, 'rb')))
            elif isinstance(value, FILE_IMAGES):
                files[key] = (value.filename, value.stream)
            elif hasattr(value, 'read'):
                files[key] = value
            else:
                fields[key] = value
        return {'data': json.dumps(fields, ensure_ascii=False)}, files
