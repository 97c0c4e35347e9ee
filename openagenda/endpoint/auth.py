"""Access token endpoint."""
from openagenda.endpoint.endpoint import Endpoint


class Auth(Endpoint):

    def uri_path(self, method: str) -> str:
        super().uri_path(method)
        return '/requestAccessToken'
