"""Shared plumbing for resource clients."""

from typing import Any, Optional
from urllib.parse import quote

import httpx

from ..sql import QueryResult, SqlExecutor
from ..transport import HttpTransport
from ..utils import MindsDbError, QueryError


def path_segment(name: Any) -> str:
    """Quote a name for use as a single URL path segment."""
    return quote(str(name), safe="")


class SqlResourceClient:
    """Base class for clients that manage MindsDB objects with SQL."""

    def __init__(self, sql_client: SqlExecutor):
        """Initialize resource client.

        Args:
            sql_client: Executor used to send every statement
        """
        self.sql_client = sql_client

    async def _execute(self, statement: str) -> QueryResult:
        """Run a statement and raise if MindsDB reports an error.

        Raises:
            QueryError: If the statement failed on the server
            MindsDbError: If the request failed
        """
        result = await self.sql_client.run_query(statement)
        if result.is_error:
            raise QueryError(result.error_message)
        return result


class RestResourceClient:
    """Base class for clients that manage MindsDB objects over the REST API."""

    def __init__(self, transport: HttpTransport):
        """Initialize resource client.

        Args:
            transport: Transport used to send every request
        """
        self.transport = transport

    async def _request(self, method: str, path: str, json: Any = None) -> Optional[Any]:
        """Send a request and decode its JSON body.

        Returns:
            Decoded body, or None when the response has no body

        Raises:
            MindsDbError: If the request fails or the body isn't JSON
        """
        url = self.transport.url_for(path)
        try:
            response = await self.transport.request(method, path, json=json)
        except httpx.HTTPError as e:
            raise MindsDbError.from_http_error(e, url) from e

        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            raise MindsDbError(f"Unexpected response from {url}: {str(e)}", url=url) from e
