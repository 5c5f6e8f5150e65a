"""Cookie helpers for session authentication.

See RFC 6265 section 3.1 for the Set-Cookie syntax handled here.
"""

from typing import Optional, Sequence
from urllib.parse import urlparse


def extract_cookie(all_cookies: Sequence[str], name: str) -> Optional[str]:
    """Get the value of a cookie from raw Set-Cookie headers.

    The first ``key=value`` pair of each header is the cookie itself; the
    remaining attributes (Domain, Path, ...) are ignored.

    Args:
        all_cookies: Raw Set-Cookie header values
        name: Cookie name to look up (case-sensitive)

    Returns:
        Value of the first matching cookie, or None if no header sets it
    """
    for raw_cookie in all_cookies:
        leading = raw_cookie.split(";", 1)[0].strip()
        key, sep, value = leading.partition("=")
        if sep and key.strip() == name:
            return value.strip()
    return None


def extract_request_cookie(cookie_header: Optional[str], name: str) -> Optional[str]:
    """Get a cookie value from an outgoing ``Cookie`` request header."""
    if not cookie_header:
        return None
    for pair in cookie_header.split(";"):
        key, sep, value = pair.strip().partition("=")
        if sep and key == name:
            return value
    return None


def is_cloud_endpoint(url: str) -> bool:
    """Whether the URL points to hosted MindsDB (e.g. cloud.mindsdb.com)."""
    host = urlparse(url).hostname or url
    return host == "mindsdb.com" or host.endswith(".mindsdb.com")
