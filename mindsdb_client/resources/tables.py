"""Tables inside data integrations."""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from .base import SqlResourceClient
from ..utils import escape_identifier, escape_value, setup_logger

logger = setup_logger(__name__)

FILES_INTEGRATION = "files"


@dataclass
class Table:
    """A table that belongs to an integration (e.g. files, mindsdb)."""

    name: str
    integration: str
    client: Optional["TablesClient"] = field(default=None, repr=False, compare=False)

    @property
    def full_name(self) -> str:
        return f"{self.integration}.{self.name}"

    async def create(self, select: str) -> "Table":
        """Create this table from a SELECT statement."""
        return await self.client.create_table(self.name, self.integration, select)

    async def insert(self, select: str) -> None:
        """Insert the rows returned by a SELECT statement."""
        await self.client.insert_into_table(self.name, self.integration, select)

    async def update(self, values: Dict[str, Any], where: Optional[str] = None) -> None:
        """Update rows of this table."""
        await self.client.update_table(self.name, self.integration, values, where)

    async def delete(self) -> None:
        """Delete this table from its integration."""
        await self.client.delete_table(self.name, self.integration)


class TablesClient(SqlResourceClient):
    """Creates, fills, updates and drops tables."""

    def _table_id(self, name: str, integration: str) -> str:
        return f"{escape_identifier(integration)}.{escape_identifier(name)}"

    async def create_table(
        self,
        name: str,
        integration: str,
        select: str,
        replace: bool = False,
    ) -> Table:
        """Create a table in an integration from a SELECT statement.

        Args:
            name: Name of the table
            integration: Integration the table will belong to
            select: SELECT statement used to populate the table
            replace: Drop and recreate the table if it already exists

        Returns:
            The new table

        Raises:
            QueryError: If MindsDB rejects the statement
        """
        verb = "CREATE OR REPLACE TABLE" if replace else "CREATE TABLE"
        statement = "\n".join([
            f"{verb} {self._table_id(name, integration)}",
            f"({select})",
        ])
        await self._execute(statement)
        logger.info(f"Created table: {integration}.{name}")
        return Table(name=name, integration=integration, client=self)

    async def create_or_replace_table(self, name: str, integration: str, select: str) -> Table:
        """Create a table, replacing any existing table of the same name."""
        return await self.create_table(name, integration, select, replace=True)

    async def insert_into_table(self, name: str, integration: str, select: str) -> None:
        """Insert the rows returned by a SELECT statement into a table."""
        statement = "\n".join([
            f"INSERT INTO {self._table_id(name, integration)}",
            f"({select})",
        ])
        await self._execute(statement)

    async def update_table(
        self,
        name: str,
        integration: str,
        values: Dict[str, Any],
        where: Optional[str] = None,
    ) -> None:
        """Update rows of a table.

        Args:
            name: Name of the table
            integration: Integration the table belongs to
            values: Column name to new value
            where: Optional raw WHERE condition

        Raises:
            ValueError: If no values are given
            QueryError: If MindsDB rejects the statement
        """
        if not values:
            raise ValueError("At least one column value is required to update a table")

        assignments = ",\n".join(
            f"{escape_identifier(column, qualified=False)} = {escape_value(value)}"
            for column, value in values.items()
        )
        lines = [f"UPDATE {self._table_id(name, integration)}", f"SET {assignments}"]
        if where:
            lines.append(f"WHERE {where}")
        await self._execute("\n".join(lines))

    async def delete_table(self, name: str, integration: str) -> None:
        """Delete a table from its integration."""
        await self._execute(f"DROP TABLE {self._table_id(name, integration)}")
        logger.info(f"Deleted table: {integration}.{name}")

    async def delete_file(self, name: str) -> None:
        """Delete an uploaded file from the files integration."""
        await self.delete_table(name, FILES_INTEGRATION)
