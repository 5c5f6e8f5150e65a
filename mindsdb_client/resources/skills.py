"""Skills: data sources an agent may consult (SQL tables or retrieval)."""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from .base import RestResourceClient, path_segment
from .projects import PROJECTS_URI
from ..utils import MindsDbError, setup_logger

logger = setup_logger(__name__)

SQL_SKILL = "sql"
RETRIEVAL_SKILL = "retrieval"


@dataclass
class Skill:
    """A MindsDB skill.

    ``params`` depends on the type: SQL skills carry ``database`` and
    ``tables``, retrieval skills carry ``source``. Both may have a
    ``description``.
    """

    name: str
    type: str
    project: str
    params: Dict[str, Any] = field(default_factory=dict)
    client: Optional["SkillsClient"] = field(default=None, repr=False, compare=False)

    @classmethod
    def sql(
        cls,
        name: str,
        project: str,
        database: str,
        tables: List[str],
        description: Optional[str] = None,
    ) -> "Skill":
        """Build a skill that queries tables of a database."""
        params: Dict[str, Any] = {"database": database, "tables": list(tables)}
        if description is not None:
            params["description"] = description
        return cls(name=name, type=SQL_SKILL, project=project, params=params)

    @classmethod
    def retrieval(
        cls,
        name: str,
        project: str,
        source: str,
        description: Optional[str] = None,
    ) -> "Skill":
        """Build a skill that retrieves from a knowledge base."""
        params: Dict[str, Any] = {"source": source}
        if description is not None:
            params["description"] = description
        return cls(name=name, type=RETRIEVAL_SKILL, project=project, params=params)

    @classmethod
    def from_json(
        cls,
        project: str,
        data: Dict[str, Any],
        client: Optional["SkillsClient"] = None,
    ) -> "Skill":
        return cls(
            name=data.get("name"),
            type=data.get("type"),
            project=project,
            params=data.get("params") or {},
            client=client,
        )

    @property
    def database(self) -> Optional[str]:
        return self.params.get("database")

    @property
    def tables(self) -> List[str]:
        return self.params.get("tables") or []

    @property
    def source(self) -> Optional[str]:
        return self.params.get("source")

    @property
    def description(self) -> Optional[str]:
        return self.params.get("description")

    async def delete(self) -> None:
        """Delete this skill."""
        await self.client.delete_skill(self.name, self.project)


class SkillsClient(RestResourceClient):
    """Manages the skills of a project."""

    def _skills_path(self, project: str, name: Optional[str] = None) -> str:
        path = f"{PROJECTS_URI}/{path_segment(project)}/skills"
        if name is not None:
            path += f"/{path_segment(name)}"
        return path

    async def list_skills(self, project: str) -> List[Skill]:
        """Get all skills in a project."""
        data = await self._request("GET", self._skills_path(project))
        return [Skill.from_json(project, item, self) for item in data or []]

    async def get_skill(self, name: str, project: str) -> Skill:
        """Get a skill by name.

        Raises:
            MindsDbError: If the skill doesn't exist or the request fails
        """
        path = self._skills_path(project, name)
        data = await self._request("GET", path)
        if not data:
            raise MindsDbError(f"Skill {name} not found", url=self.transport.url_for(path))
        return Skill.from_json(project, data, self)

    async def create_skill(
        self,
        name: str,
        project: str,
        type: str,
        params: Dict[str, Any],
    ) -> Skill:
        """Create a new skill.

        Args:
            name: Name of the skill
            project: Project the skill belongs to
            type: Skill type, ``sql`` or ``retrieval``
            params: Type-specific parameters (see Skill)

        Raises:
            MindsDbError: If the request fails
        """
        payload = {"skill": {"name": name, "type": type, "params": params}}
        data = await self._request("POST", self._skills_path(project), json=payload)
        logger.info(f"Created skill: {project}.{name}")
        if not data:
            return Skill(name=name, type=type, project=project, params=dict(params), client=self)
        return Skill.from_json(project, data, self)

    async def update_skill(self, name: str, project: str, skill: Skill) -> Skill:
        """Replace a skill's name, type and parameters with those of ``skill``."""
        payload = {"skill": {"name": skill.name, "type": skill.type, "params": skill.params}}
        data = await self._request("PUT", self._skills_path(project, name), json=payload)
        logger.info(f"Updated skill: {project}.{name}")
        if not data:
            return Skill(
                name=skill.name,
                type=skill.type,
                project=project,
                params=dict(skill.params),
                client=self,
            )
        return Skill.from_json(project, data, self)

    async def delete_skill(self, name: str, project: str) -> None:
        """Delete a skill by name."""
        await self._request("DELETE", self._skills_path(project, name))
        logger.info(f"Deleted skill: {project}.{name}")
