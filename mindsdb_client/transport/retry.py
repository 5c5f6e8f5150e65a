"""One-shot replay of requests rejected because the session expired."""

from typing import TYPE_CHECKING, Optional

import httpx

from ..utils import setup_logger

if TYPE_CHECKING:
    from .authenticator import HttpAuthenticator
    from .client import HttpTransport

logger = setup_logger(__name__)


class ReplayContext:
    """Tracks a pending request and whether it was already replayed.

    A request is replayed at most once, even against a server that keeps
    answering 401.
    """

    def __init__(self, request: Optional[httpx.Request]):
        """Initialize replay context.

        Args:
            request: The outbound request, retained for a possible replay
        """
        self.request = request
        self.retried = False

    def should_retry(self, error: BaseException) -> bool:
        """Check whether the request may still be replayed.

        Args:
            error: The error raised by the last attempt

        Returns:
            True if a replay is allowed, False otherwise
        """
        if self.request is None:
            return False

        if self.retried:
            logger.debug(
                f"Request {self.request.method} {self.request.url} already replayed "
                f"once, giving up: {type(error).__name__}"
            )
            return False

        return True

    def prepare_replay(self, session: Optional[str]) -> httpx.Request:
        """Attach the renewed session to the request and mark it replayed."""
        if session:
            self.request.headers["Cookie"] = f"session={session}"
        self.retried = True
        return self.request


async def retry_once(
    error: BaseException,
    transport: "HttpTransport",
    authenticator: "HttpAuthenticator",
    context: Optional[ReplayContext],
) -> httpx.Response:
    """Replay a failed request once after reauthenticating.

    Args:
        error: Error raised by the failed attempt
        transport: Transport used to replay the request
        authenticator: Authenticator holding the session
        context: Replay context of the failed request

    Returns:
        Response of the replayed request

    Raises:
        The original error if the request cannot or should not be replayed,
        or whatever the replay itself raises.
    """
    if context is None or not context.should_retry(error):
        raise error

    if not await authenticator.handle_reauthentication(transport, error):
        raise error

    request = context.prepare_replay(authenticator.session)
    logger.debug(f"Replaying {request.method} {request.url} with renewed session")
    return await transport.send(context)
