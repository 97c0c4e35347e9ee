"""API client: access token handling and JSON responses."""
import logging
import secrets
from typing import Any, Dict, Optional

from openagenda.cache import AccessTokenCache, MemoryCache
from openagenda.endpoint.auth import Auth
from openagenda.exceptions import AuthenticationError, ConfigurationError, TransportError
from openagenda.transport import HttpTransport, Response

logger = logging.getLogger(__name__)

ACCESS_TOKEN_KEY = 'openagenda_api_access_token'
DEFAULT_TOKEN_TTL = 3600


class Client:
    """
    Sends requests through the transport.

    Reads carry the public key as ``key`` query param, writes carry an
    ``access-token`` header and a one-time ``nonce``.
    """

    def __init__(
        self,
        public_key: str,
        secret_key: Optional[str] = None,
        transport: Optional[HttpTransport] = None,
        cache: Optional[AccessTokenCache] = None
    ):
        """
        Initialize the client.

        Args:
            public_key: Public API key
            secret_key: Secret API key, needed for writes
            transport: HTTP transport
            cache: Access token cache (default: in memory)

        Raises:
            ConfigurationError: If an option is missing or invalid
        """
        if not public_key:
            raise ConfigurationError('Missing `public_key`.')
        if not isinstance(transport, HttpTransport):
            raise ConfigurationError('Invalid or missing `transport`.')
        if cache is not None and not isinstance(cache, AccessTokenCache):
            raise ConfigurationError('Cache should implement AccessTokenCache.')

        self.public_key = public_key
        self.secret_key = secret_key
        self.transport = transport
        self.cache = cache or MemoryCache()

    def get_access_token(self) -> Optional[str]:
        """
        Return the cached access token, or request a new one.

        Returns:
            Access token, or None if the API refused to deliver one

        Raises:
            ConfigurationError: If no secret key is configured
            TransportError: If the request could not be sent
        """
        token = self.cache.get(ACCESS_TOKEN_KEY)
        if token:
            return token

        if not self.secret_key:
            raise ConfigurationError('Missing `secret_key`.')

        logger.info("Requesting a new access token")
        response = self.transport.post(
            Auth().get_url('create'),
            {'grant_type': 'authorization_code', 'code': self.secret_key},
        )
        payload = self._parse(response)

        token = payload.get('access_token')
        if not payload['_success'] or not token:
            logger.warning(f"Access token request failed with status {payload['_status']}")
            return None

        ttl = int(payload.get('expires_in') or DEFAULT_TOKEN_TTL)
        self.cache.set(ACCESS_TOKEN_KEY, token, ttl)
        logger.info(f"Access token cached for {ttl} seconds")
        return token

    def head(self, url: str, params: Optional[Dict[str, Any]] = None) -> int:
        """Return the HTTP status code of a HEAD request."""
        response = self.transport.head(url, self._read_params(params))
        return response.status_code

    def get(self, url: str, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """
        GET a url.

        Raises:
            TransportError: If the API answers with an error
        """
        response = self.transport.get(url, self._read_params(params))
        return self._payload(response, url)

    def post(self, url: str, data: Dict[str, Any], params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        response = self.transport.post(url, data, self._write_params(params))
        return self._payload(response, url)

    def patch(self, url: str, data: Dict[str, Any], params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        response = self.transport.patch(url, data, self._write_params(params))
        return self._payload(response, url)

    def delete(
        self, url: str, data: Optional[Dict[str, Any]] = None, params: Optional[Dict[str, Any]] = None
    ) -> Dict[str, Any]:
        response = self.transport.delete(url, data, self._write_params(params))
        return self._payload(response, url)

    def _read_params(self, params: Optional[Dict[str, Any]]) -> Dict[str, Any]:
        params = dict(params or {})
        params['query'] = {**(params.get('query') or {}), 'key': self.public_key}
        return params

    def _write_params(self, params: Optional[Dict[str, Any]]) -> Dict[str, Any]:
        """
        Raises:
            AuthenticationError: If no access token is available
        """
        token = self.get_access_token()
        if not token:
            raise AuthenticationError('No access token available.')

        params = dict(params or {})
        params['headers'] = {
            **(params.get('headers') or {}),
            'access-token': token,
            'nonce': str(secrets.randbelow(10 ** 12)),
        }
        return params

    @staticmethod
    def _parse(response: Response) -> Dict[str, Any]:
        """JSON body annotated with ``_status`` and ``_success``."""
        try:
            payload = response.json() if response.body else {}
        except ValueError:
            payload = {'message': response.text}

        if not isinstance(payload, dict):
            payload = {'data': payload}

        payload['_status'] = response.status_code
        payload['_success'] = response.ok and payload.get('success', True) is not False
        return payload

    def _payload(self, response: Response, url: str) -> Dict[str, Any]:
        """
        Parse a response and raise on errors.

        Raises:
            TransportError: If the status is not 2xx or the API reports a failure
        """
        payload = self._parse(response)
        if not payload['_success']:
            message = payload.get('message') or payload.get('error') or 'Request error'
            logger.error(f"Request to {url} failed with status {payload['_status']}: {message}")
            raise TransportError(str(message), payload['_status'], payload, response)
        return payload
