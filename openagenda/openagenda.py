"""Entry point: builds the client and exposes the resources."""
import logging
import os
from typing import Any, Dict, Mapping, Optional

from openagenda import registry, validation
from openagenda.cache import AccessTokenCache, DynamoDBCache
from openagenda.client import Client
from openagenda.collection import Collection
from openagenda.endpoint.endpoint import BASE_URL
from openagenda.endpoint.factory import make
from openagenda.exceptions import ConfigurationError, TransportError
from openagenda.transport import HttpTransport, RequestsTransport

logger = logging.getLogger(__name__)


class OpenAgenda:
    """
    OpenAgenda API facade.

    Creating an instance registers its client, default language and project
    url for entities and endpoints built without an explicit client.
    """

    def __init__(
        self,
        public_key: Optional[str] = None,
        secret_key: Optional[str] = None,
        transport: Optional[HttpTransport] = None,
        cache: Optional[AccessTokenCache] = None,
        default_lang: str = registry.DEFAULT_LANG,
        project_url: Optional[str] = None
    ):
        """
        Initialize the facade.

        Args:
            public_key: Public API key
            secret_key: Secret API key, needed for writes
            transport: HTTP transport
            cache: Access token cache (default: in memory)
            default_lang: Language of plain string multilingual values
            project_url: Base url for relative links in rich text

        Raises:
            ConfigurationError: If an option is missing or invalid
        """
        if not validation.lang(default_lang):
            raise ConfigurationError('Invalid `default_lang`.')
        if project_url and not validation.url(project_url):
            raise ConfigurationError('Invalid `project_url`.')

        self.client = Client(public_key, secret_key, transport, cache)

        registry.set_client(self.client)
        registry.set_default_lang(default_lang)
        registry.set_project_url(project_url)

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> 'OpenAgenda':
        """
        Build from environment variables.

        OPENAGENDA_PUBLIC_KEY, OPENAGENDA_SECRET_KEY, OPENAGENDA_DEFAULT_LANG,
        OPENAGENDA_PROJECT_URL, OPENAGENDA_TIMEOUT_SECONDS and
        OPENAGENDA_CACHE_TABLE (DynamoDB table for the access token).
        """
        env = os.environ if environ is None else environ

        try:
            timeout = int(env.get('OPENAGENDA_TIMEOUT_SECONDS', '30'))
        except ValueError:
            raise ConfigurationError('OPENAGENDA_TIMEOUT_SECONDS should be an integer.')

        table_name = env.get('OPENAGENDA_CACHE_TABLE')
        cache = DynamoDBCache(table_name) if table_name else None

        logger.info(f"Configuring OpenAgenda client (timeout={timeout}s, cache table={table_name})")
        return cls(
            public_key=env.get('OPENAGENDA_PUBLIC_KEY'),
            secret_key=env.get('OPENAGENDA_SECRET_KEY'),
            transport=RequestsTransport(timeout=timeout),
            cache=cache,
            default_lang=env.get('OPENAGENDA_DEFAULT_LANG', registry.DEFAULT_LANG),
            project_url=env.get('OPENAGENDA_PROJECT_URL'),
        )

    def get_access_token(self) -> Optional[str]:
        """Access token, or None when it cannot be obtained."""
        try:
            return self.client.get_access_token()
        except TransportError as e:
            logger.warning(f"Could not get an access token: {e}")
            return None

    # Raw requests, path relative to the API base url

    def head(self, path: str, params: Optional[Dict[str, Any]] = None) -> int:
        return self.client.head(BASE_URL + path, params)

    def get(self, path: str, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        return self.client.get(BASE_URL + path, params)

    def post(self, path: str, data: Dict[str, Any], params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        return self.client.post(BASE_URL + path, data, params)

    def patch(self, path: str, data: Dict[str, Any], params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        return self.client.patch(BASE_URL + path, data, params)

    def delete(self, path: str, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        return self.client.delete(BASE_URL + path, None, params)

    # Resources

    def agendas(self, params: Optional[Dict[str, Any]] = None) -> Collection:
        return make('/agendas', params, self.client).get()

    def my_agendas(self, params: Optional[Dict[str, Any]] = None) -> Collection:
        return make('/agendas/mines', params, self.client).get()

    def agenda(self, params: Dict[str, Any]):
        return make('/agenda', params, self.client)

    def locations(self, params: Optional[Dict[str, Any]] = None) -> Collection:
        return make('/locations', params, self.client).get()

    def location(self, params: Optional[Dict[str, Any]] = None):
        return make('/location', params, self.client)

    def events(self, params: Optional[Dict[str, Any]] = None) -> Collection:
        return make('/events', params, self.client).get()

    def event(self, params: Optional[Dict[str, Any]] = None):
        return make('/event', params, self.client)
