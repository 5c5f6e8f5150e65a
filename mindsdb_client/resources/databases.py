"""Databases (data integrations and projects) managed through SQL."""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from .base import SqlResourceClient
from ..utils import (
    escape_identifier,
    escape_identifier_unquoted,
    escape_json,
    escape_value,
    setup_logger,
)

logger = setup_logger(__name__)


@dataclass
class Database:
    """A MindsDB database."""

    name: str
    type: str
    engine: Optional[str] = None
    client: Optional["DatabasesClient"] = field(default=None, repr=False, compare=False)

    async def delete(self) -> None:
        """Delete this database."""
        await self.client.delete_database(self.name)


class DatabasesClient(SqlResourceClient):
    """Lists, creates and deletes databases."""

    def _from_row(self, row: Dict[str, Any]) -> Database:
        return Database(
            name=row.get("database"),
            type=row.get("type"),
            engine=row.get("engine"),
            client=self,
        )

    async def list_databases(self) -> List[Database]:
        """Get all databases for the authenticated user."""
        result = await self._execute("SHOW FULL DATABASES")
        return [self._from_row(row) for row in result.rows]

    async def get_database(self, name: str) -> Optional[Database]:
        """Get a database by name.

        Returns:
            Matching database, or None if it doesn't exist
        """
        result = await self._execute("SHOW FULL DATABASES")
        for row in result.rows:
            if row.get("database") == name:
                return self._from_row(row)
        return None

    async def create_database(
        self,
        name: str,
        engine: Optional[str] = None,
        params: Optional[Dict[str, Any]] = None,
    ) -> Database:
        """Create a database.

        Args:
            name: Name of the database
            engine: Optional integration engine (e.g. postgres)
            params: Optional connection parameters (e.g. user, password)

        Returns:
            The new database

        Raises:
            QueryError: If MindsDB rejects the statement
        """
        # Backticks would end up in the information schema, so the name is
        # escaped but left unquoted.
        lines = [f"CREATE DATABASE {escape_identifier_unquoted(name)}"]
        db_type = "project"

        if engine:
            db_type = "data"
            engine_clause = f"WITH ENGINE = {escape_value(engine)}"
            if params:
                engine_clause += ","
            lines.append(engine_clause)
            if params:
                lines.append(f"PARAMETERS = {escape_json(params)}")
        elif params:
            lines.append(f"WITH PARAMETERS = {escape_json(params)}")

        await self._execute("\n".join(lines))
        logger.info(f"Created database: {name}")
        return Database(name=name, type=db_type, engine=engine, client=self)

    async def delete_database(self, name: str) -> None:
        """Delete a database by name."""
        await self._execute(f"DROP DATABASE {escape_identifier(name)}")
        logger.info(f"Deleted database: {name}")
