"""Views inside projects."""

from dataclasses import dataclass, field
from typing import List, Optional

from .base import SqlResourceClient
from ..utils import escape_identifier, setup_logger

logger = setup_logger(__name__)


@dataclass
class View:
    """A view that belongs to a project."""

    name: str
    project: str
    client: Optional["ViewsClient"] = field(default=None, repr=False, compare=False)

    async def delete(self) -> None:
        """Delete this view from its project."""
        await self.client.delete_view(self.name, self.project)


class ViewsClient(SqlResourceClient):
    """Lists, creates and deletes views."""

    async def list_views(self, project: str) -> List[View]:
        """Get all views of a project."""
        result = await self._execute(f"SHOW FULL TABLES FROM {escape_identifier(project)}")
        name_column = f"tables_in_{project.lower()}"
        return [
            View(name=row.get(name_column), project=project, client=self)
            for row in result.rows
            if row.get("table_type") == "VIEW"
        ]

    async def create_view(self, name: str, project: str, select: str) -> View:
        """Create a view from a SELECT statement.

        Raises:
            QueryError: If MindsDB rejects the statement
        """
        statement = (
            f"CREATE VIEW {escape_identifier(project)}.{escape_identifier(name)} "
            f"AS ({select})"
        )
        await self._execute(statement)
        logger.info(f"Created view: {project}.{name}")
        return View(name=name, project=project, client=self)

    async def delete_view(self, name: str, project: str) -> None:
        """Delete a view from its project."""
        await self._execute(
            f"DROP VIEW {escape_identifier(project)}.{escape_identifier(name)}"
        )
        logger.info(f"Deleted view: {project}.{name}")
