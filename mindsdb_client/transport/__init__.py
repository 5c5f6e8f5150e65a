"""HTTP transport, session authentication and request replay."""

from .authenticator import Credentials, HttpAuthenticator
from .client import HttpTransport, create_default_client
from .cookies import extract_cookie, is_cloud_endpoint
from .retry import ReplayContext, retry_once

__all__ = [
    "Credentials",
    "HttpAuthenticator",
    "HttpTransport",
    "create_default_client",
    "extract_cookie",
    "is_cloud_endpoint",
    "ReplayContext",
    "retry_once",
]
