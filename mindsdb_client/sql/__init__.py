"""SQL execution modules."""

from .client import SQL_QUERY_URI, SqlExecutor, SqlRestApiClient
from .models import QueryResult, ResultType, SqlApiResponse

__all__ = [
    "SQL_QUERY_URI",
    "SqlExecutor",
    "SqlRestApiClient",
    "QueryResult",
    "ResultType",
    "SqlApiResponse",
]
