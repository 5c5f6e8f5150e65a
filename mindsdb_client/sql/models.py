"""Data models for SQL query API responses and results."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, field_validator


class ResultType(Enum):
    """Kind of result returned by the SQL query API."""
    TABLE = "table"
    OK = "ok"
    ERROR = "error"


class SqlApiResponse(BaseModel):
    """Raw payload returned by the /api/sql/query endpoint."""

    column_names: List[str] = Field(
        default_factory=list,
        description="Ordered column names of the result"
    )
    type: ResultType = Field(description="'table', 'ok' or 'error'")
    data: List[List[Any]] = Field(
        default_factory=list,
        description="Data rows, fields in the same order as column_names"
    )
    error_code: Optional[int] = None
    error_message: Optional[str] = None
    context: Optional[Dict[str, Any]] = None

    @field_validator('column_names', 'data', mode='before')
    @classmethod
    def default_empty(cls, v):
        """Treat null column names or data as empty."""
        return [] if v is None else v


@dataclass
class QueryResult:
    """Structured result of running a SQL statement."""

    column_names: List[str] = field(default_factory=list)
    rows: List[Dict[str, Any]] = field(default_factory=list)
    type: ResultType = ResultType.OK
    error_message: Optional[str] = None
    context: Optional[Dict[str, Any]] = None

    @property
    def is_error(self) -> bool:
        return self.type == ResultType.ERROR

    @classmethod
    def from_response(cls, response: SqlApiResponse) -> "QueryResult":
        """Build a result from a raw API response.

        Column names are lower-cased so lookups are case-insensitive, and each
        data row becomes a mapping of column name to value. Error responses
        carry no rows.

        Args:
            response: Validated API response

        Returns:
            QueryResult
        """
        column_names = [name.lower() for name in response.column_names]

        if response.type == ResultType.ERROR:
            return cls(
                column_names=column_names,
                rows=[],
                type=ResultType.ERROR,
                error_message=response.error_message or "Unknown error",
                context=response.context,
            )

        rows = [dict(zip(column_names, row)) for row in response.data]
        return cls(
            column_names=column_names,
            rows=rows,
            type=response.type,
            context=response.context,
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert result to dictionary representation."""
        return {
            "column_names": self.column_names,
            "rows": self.rows,
            "type": self.type.value,
            "error_message": self.error_message,
            "context": self.context,
        }
