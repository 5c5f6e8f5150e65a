"""Session authentication and reauthentication for MindsDB."""

import asyncio
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Optional

from .cookies import extract_cookie, extract_request_cookie
from ..utils import setup_logger

if TYPE_CHECKING:
    from .client import HttpTransport

logger = setup_logger(__name__)

LOGIN_URI = "/cloud/login"
MANAGED_LOGIN_URI = "/api/login"
SESSION_COOKIE = "session"

# Only auth-shaped failures trigger a new login.
REAUTH_STATUS_CODES = (401, 403)


@dataclass
class Credentials:
    """Login credentials retained for reauthentication."""

    user: str
    password: str = field(repr=False)
    managed: bool = False


class HttpAuthenticator:
    """Holds the session for one connection and renews it when it expires.

    Each transport owns its own authenticator, so independent connections
    never share a session.
    """

    def __init__(self) -> None:
        self.session: Optional[str] = None
        self.credentials: Optional[Credentials] = None
        # Created on first use so it binds to the loop that runs the requests
        self._lock: Optional[asyncio.Lock] = None

    async def authenticate(
        self,
        transport: "HttpTransport",
        user: str,
        password: str,
        managed: bool = False,
    ) -> None:
        """Log into MindsDB and store the returned session.

        The credentials are kept for later reauthentication even if the
        login fails.

        Args:
            transport: Transport whose base URL and HTTP client are used
            user: MindsDB email or username
            password: MindsDB password
            managed: Use the managed-instance login endpoint

        Raises:
            httpx.HTTPError: If the login request fails
        """
        self.credentials = Credentials(user=user, password=password, managed=managed)
        login_url = transport.url_for(MANAGED_LOGIN_URI if managed else LOGIN_URI)

        logger.debug(f"Logging into MindsDB at {login_url}")
        # Sent straight through the HTTP client: a failing login must never
        # re-enter the reauthentication path.
        response = await transport.client.post(
            login_url,
            json={"email": user, "username": user, "password": password},
        )
        response.raise_for_status()

        session = extract_cookie(response.headers.get_list("set-cookie"), SESSION_COOKIE)
        if session is None:
            logger.warning(f"Login to {login_url} succeeded but no session cookie was set")
        self.session = session

    async def handle_reauthentication(
        self,
        transport: "HttpTransport",
        error: Optional[BaseException],
    ) -> bool:
        """Log in again if the error shows the session expired.

        Args:
            transport: Transport to send the login request through
            error: Error raised by the original request

        Returns:
            True if a fresh session is available, False if reauthentication
            does not apply to this error

        Raises:
            httpx.HTTPError: If the new login fails
        """
        if not self.session or error is None:
            # We never needed to authenticate to begin with.
            return False

        response = getattr(error, "response", None)
        if response is None or response.status_code not in REAUTH_STATUS_CODES:
            return False

        if self.credentials is None:
            logger.warning("Session rejected but no credentials are stored to log in again")
            return False

        failed_session = _request_session(error)
        if self._lock is None:
            self._lock = asyncio.Lock()
        async with self._lock:
            if failed_session is not None and self.session and failed_session != self.session:
                # A concurrent request already renewed the session.
                logger.debug("Session already renewed by another request")
                return True

            logger.info("MindsDB HTTP session expired. Reauthenticating...")
            await self.authenticate(
                transport,
                self.credentials.user,
                self.credentials.password,
                self.credentials.managed,
            )
            logger.info("Successfully reauthenticated.")
        return True


def _request_session(error: BaseException) -> Optional[str]:
    """Session cookie carried by the request that produced the error."""
    try:
        request = error.request  # type: ignore[attr-defined]
    except (AttributeError, RuntimeError):
        return None
    if request is None:
        return None
    return extract_request_cookie(request.headers.get("cookie"), SESSION_COOKIE)
