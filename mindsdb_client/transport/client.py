"""HTTP transport with session cookies and transparent reauthentication."""

from typing import Any, Dict, Optional

import httpx

from .authenticator import HttpAuthenticator
from .retry import ReplayContext, retry_once
from ..config import settings
from ..utils import setup_logger

logger = setup_logger(__name__)

DEFAULT_HOST = "https://cloud.mindsdb.com"


def create_default_client(
    base_url: Optional[str] = None,
    timeout: Optional[float] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> httpx.AsyncClient:
    """Create the HTTP client used for all requests when none is supplied.

    Redirects are followed, so an http:// host that redirects to https://
    keeps working.

    Args:
        base_url: MindsDB host (defaults to config)
        timeout: Response timeout in seconds (defaults to config)
        transport: Custom httpx transport (e.g. a mock in tests)

    Returns:
        AsyncClient with keep-alive pooling configured from settings
    """
    http_config = settings.http
    limits = httpx.Limits(
        max_connections=http_config.get("max_connections", 128),
        max_keepalive_connections=http_config.get("max_keepalive_connections", 128),
        keepalive_expiry=http_config.get("keepalive_expiry", 30),
    )
    return httpx.AsyncClient(
        base_url=base_url or settings.get("connection.host", DEFAULT_HOST),
        timeout=timeout or http_config.get("timeout", 60),
        limits=limits,
        follow_redirects=True,
        transport=transport,
    )


class HttpTransport:
    """Sends MindsDB API requests and renews the session when it expires.

    Every request carries the session cookie when one is set. A request
    rejected with 401/403 is replayed once after logging in again; any
    other failure is raised to the caller untouched.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        client: Optional[httpx.AsyncClient] = None,
        authenticator: Optional[HttpAuthenticator] = None,
        timeout: Optional[float] = None,
    ):
        """Initialize the transport.

        Args:
            base_url: MindsDB host, e.g. http://127.0.0.1:47334
            client: Custom HTTP client (the caller keeps ownership)
            authenticator: Session holder (a new one is created if None)
            timeout: Response timeout in seconds for the default client
        """
        self._owns_client = client is None
        if client is None:
            client = create_default_client(base_url, timeout)
        self.client = client

        client_base = str(client.base_url) if client.base_url else ""
        self.base_url = (
            base_url or client_base or settings.get("connection.host", DEFAULT_HOST)
        ).rstrip("/")
        self.authenticator = authenticator or HttpAuthenticator()

    @property
    def session(self) -> Optional[str]:
        """Current session token, if logged in."""
        return self.authenticator.session

    def url_for(self, path: str) -> str:
        """Resolve an API path against the base URL."""
        if path.startswith(("http://", "https://")):
            return path
        return f"{self.base_url}/{path.lstrip('/')}"

    def base_headers(self) -> Dict[str, str]:
        """Headers attached to every request.

        The session cookie is only sent once a session exists; local and
        self-hosted instances get no such header.
        """
        headers: Dict[str, str] = {}
        if self.authenticator.session:
            headers["Cookie"] = f"session={self.authenticator.session}"
        return headers

    async def request(
        self,
        method: str,
        path: str,
        *,
        json: Any = None,
        params: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> httpx.Response:
        """Send a request to the MindsDB API.

        Args:
            method: HTTP method
            path: API path (e.g. /api/sql/query) or absolute URL
            json: Optional JSON body
            params: Optional query parameters
            headers: Extra headers, merged over the base headers

        Returns:
            Successful (2xx) response

        Raises:
            httpx.HTTPStatusError: If the server answers with a non-2xx status
            httpx.RequestError: If no response was received
        """
        request = self.client.build_request(
            method,
            self.url_for(path),
            json=json,
            params=params,
            headers={**self.base_headers(), **(headers or {})},
        )
        return await self.send(ReplayContext(request))

    async def send(self, context: ReplayContext) -> httpx.Response:
        """Send the request held by the context, replaying it on auth failure."""
        try:
            response = await self.client.send(context.request)
            response.raise_for_status()
            return response
        except httpx.HTTPError as error:
            return await retry_once(error, self, self.authenticator, context)

    async def get(self, path: str, **kwargs) -> httpx.Response:
        return await self.request("GET", path, **kwargs)

    async def post(self, path: str, **kwargs) -> httpx.Response:
        return await self.request("POST", path, **kwargs)

    async def put(self, path: str, **kwargs) -> httpx.Response:
        return await self.request("PUT", path, **kwargs)

    async def delete(self, path: str, **kwargs) -> httpx.Response:
        return await self.request("DELETE", path, **kwargs)

    async def aclose(self) -> None:
        """Close the HTTP client if this transport created it."""
        if self._owns_client:
            await self.client.aclose()
            logger.debug("Closed MindsDB HTTP client")

    async def __aenter__(self) -> "HttpTransport":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.aclose()
