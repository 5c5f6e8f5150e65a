"""SQL execution over the MindsDB REST API."""

from abc import ABC, abstractmethod

import httpx

from .models import QueryResult, SqlApiResponse
from ..transport import HttpTransport
from ..utils import MindsDbError, setup_logger, mask_sensitive_data

logger = setup_logger(__name__)

SQL_QUERY_URI = "/api/sql/query"


class SqlExecutor(ABC):
    """Anything that can run a raw SQL statement against MindsDB."""

    @abstractmethod
    async def run_query(self, statement: str) -> QueryResult:
        """Run a raw SQL statement.

        Args:
            statement: SQL text to execute

        Returns:
            Result of the statement

        Raises:
            MindsDbError: If the request fails
        """


class SqlRestApiClient(SqlExecutor):
    """Runs SQL statements through the /api/sql/query endpoint."""

    def __init__(self, transport: HttpTransport):
        self.transport = transport

    @property
    def query_url(self) -> str:
        return self.transport.url_for(SQL_QUERY_URI)

    async def run_query(self, statement: str) -> QueryResult:
        """Run a raw SQL statement and normalize the response.

        Expired sessions are renewed transparently by the transport; this
        method never retries on its own.

        Args:
            statement: SQL text to execute

        Returns:
            QueryResult with lower-cased column names. Statement errors are
            returned as a result of type ERROR, not raised.

        Raises:
            MindsDbError: If the HTTP request fails or the response is malformed
        """
        url = self.query_url
        logger.debug(f"Running query: {mask_sensitive_data(statement)[:500]}")

        try:
            response = await self.transport.post(SQL_QUERY_URI, json={"query": statement})
        except httpx.HTTPError as e:
            error = MindsDbError.from_http_error(e, url)
            logger.error(error.message)
            raise error from e

        try:
            payload = SqlApiResponse.model_validate(response.json())
        except ValueError as e:
            raise MindsDbError(
                f"Unexpected response from {url}: {str(e)}",
                status_code=response.status_code,
                url=url,
            ) from e

        result = QueryResult.from_response(payload)
        if result.is_error:
            logger.warning(f"Query failed: {result.error_message}")
        else:
            logger.debug(f"Query returned {len(result.rows)} rows ({result.type.value})")
        return result
