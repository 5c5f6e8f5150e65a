"""Projects: listed over REST, created and dropped with SQL."""

from dataclasses import dataclass, field
from typing import List, Optional

from .base import RestResourceClient, SqlResourceClient
from ..sql import SqlExecutor
from ..transport import HttpTransport
from ..utils import escape_identifier, setup_logger

logger = setup_logger(__name__)

PROJECTS_URI = "/api/projects"


@dataclass
class Project:
    """A MindsDB project."""

    name: str
    client: Optional["ProjectsClient"] = field(default=None, repr=False, compare=False)

    async def delete(self) -> None:
        """Delete this project."""
        await self.client.delete_project(self.name)


class ProjectsClient(RestResourceClient, SqlResourceClient):
    """Lists, creates and deletes projects."""

    def __init__(self, transport: HttpTransport, sql_client: SqlExecutor):
        RestResourceClient.__init__(self, transport)
        SqlResourceClient.__init__(self, sql_client)

    async def list_projects(self) -> List[Project]:
        """Get all projects for the authenticated user.

        Raises:
            MindsDbError: If the request fails
        """
        data = await self._request("GET", PROJECTS_URI)

        projects = []
        for item in data or []:
            name = item.get("name") if isinstance(item, dict) else item
            if name:
                projects.append(Project(name=name, client=self))
        return projects

    async def get_project(self, name: str) -> Optional[Project]:
        """Get a project by name, or None if it doesn't exist."""
        for project in await self.list_projects():
            if project.name == name:
                return project
        return None

    async def create_project(self, name: str) -> Project:
        """Create a new project.

        Raises:
            QueryError: If MindsDB rejects the statement
        """
        await self._execute(f"CREATE PROJECT {escape_identifier(name)}")
        logger.info(f"Created project: {name}")
        return Project(name=name, client=self)

    async def delete_project(self, name: str) -> None:
        """Delete a project by name."""
        await self._execute(f"DROP PROJECT {escape_identifier(name)}")
        logger.info(f"Deleted project: {name}")
