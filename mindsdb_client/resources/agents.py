"""Agents: LLM agents that answer questions using skills."""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from .base import RestResourceClient, path_segment
from .projects import PROJECTS_URI
from ..utils import MindsDbError, setup_logger

logger = setup_logger(__name__)

DEFAULT_LLM_PROMPT = "Answer the user's question in a helpful way: {{question}}"
DEFAULT_LLM_MODEL = "gpt-4o"


@dataclass
class AgentCompletion:
    """An agent's answer and the context it was based on."""

    content: str
    context: List[str] = field(default_factory=list)


@dataclass
class Agent:
    """A MindsDB agent."""

    project: str
    name: str
    model: Optional[str] = None
    skills: List[str] = field(default_factory=list)
    params: Dict[str, Any] = field(default_factory=dict)
    provider: Optional[str] = None
    client: Optional["AgentsClient"] = field(default=None, repr=False, compare=False)

    @classmethod
    def from_json(
        cls,
        project: str,
        data: Dict[str, Any],
        client: Optional["AgentsClient"] = None,
    ) -> "Agent":
        """Build an agent from its REST representation.

        Skills come back as objects; only their names are kept.
        """
        skills = []
        for skill in data.get("skills") or []:
            name = skill.get("name") if isinstance(skill, dict) else skill
            if name:
                skills.append(name)
        return cls(
            project=project,
            name=data.get("name"),
            model=data.get("model_name") or data.get("model"),
            skills=skills,
            params=data.get("params") or {},
            provider=data.get("provider"),
            client=client,
        )

    async def completion(self, messages: List[Dict[str, Any]]) -> AgentCompletion:
        """Ask this agent to answer a conversation."""
        return await self.client.completion(self.name, self.project, messages)

    async def update(self, **changes: Any) -> "Agent":
        """Update this agent; see AgentsClient.update_agent for the options."""
        return await self.client.update_agent(self.name, self.project, **changes)

    async def delete(self) -> None:
        """Delete this agent."""
        await self.client.delete_agent(self.name, self.project)


class AgentsClient(RestResourceClient):
    """Manages agents and asks them for completions."""

    def _agents_path(self, project: str, name: Optional[str] = None) -> str:
        path = f"{PROJECTS_URI}/{path_segment(project)}/agents"
        if name is not None:
            path += f"/{path_segment(name)}"
        return path

    async def list_agents(self, project: str) -> List[Agent]:
        """Get all agents in a project.

        Raises:
            MindsDbError: If the request fails
        """
        data = await self._request("GET", self._agents_path(project))
        return [Agent.from_json(project, item, self) for item in data or []]

    async def get_agent(self, name: str, project: str) -> Agent:
        """Get an agent by name.

        Raises:
            MindsDbError: If the agent doesn't exist or the request fails
        """
        path = self._agents_path(project, name)
        data = await self._request("GET", path)
        if not data:
            raise MindsDbError(f"Agent {name} not found", url=self.transport.url_for(path))
        return Agent.from_json(project, data, self)

    async def create_agent(
        self,
        name: str,
        project: str,
        model: Optional[str] = None,
        provider: Optional[str] = None,
        skills: Optional[List[str]] = None,
        params: Optional[Dict[str, Any]] = None,
    ) -> Agent:
        """Create a new agent.

        Args:
            name: Name of the agent
            project: Project the agent belongs to
            model: LLM to use (defaults to gpt-4o)
            provider: Provider of the LLM (e.g. openai)
            skills: Names of existing skills the agent may use
            params: Extra agent parameters; a default prompt template is
                added when none is given

        Raises:
            MindsDbError: If the request fails
        """
        agent_params = dict(params or {})
        agent_params.setdefault("prompt_template", DEFAULT_LLM_PROMPT)

        payload = {
            "agent": {
                "name": name,
                "model_name": model or DEFAULT_LLM_MODEL,
                "skills": list(skills or []),
                "provider": provider,
                "params": agent_params,
            }
        }
        data = await self._request("POST", self._agents_path(project), json=payload)
        logger.info(f"Created agent: {project}.{name}")
        if not data:
            return Agent.from_json(project, payload["agent"], self)
        return Agent.from_json(project, data, self)

    async def update_agent(
        self,
        name: str,
        project: str,
        updated_name: Optional[str] = None,
        updated_model: Optional[str] = None,
        updated_skills: Optional[List[str]] = None,
        updated_params: Optional[Dict[str, Any]] = None,
    ) -> Agent:
        """Update an existing agent.

        Only the skills that differ from the agent's current skills are sent
        as additions and removals. Leaving ``updated_skills`` unset keeps the
        current skills.

        Raises:
            MindsDbError: If the agent doesn't exist or the request fails
        """
        agent = await self.get_agent(name, project)

        skills_to_add: List[str] = []
        skills_to_remove: List[str] = []
        if updated_skills is not None:
            skills_to_add = [s for s in dict.fromkeys(updated_skills) if s not in agent.skills]
            skills_to_remove = [s for s in agent.skills if s not in updated_skills]

        payload = {
            "agent": {
                "name": updated_name or agent.name,
                "model_name": updated_model or agent.model,
                "skills_to_add": skills_to_add,
                "skills_to_remove": skills_to_remove,
                "params": updated_params if updated_params is not None else agent.params,
            }
        }
        data = await self._request("PUT", self._agents_path(project, name), json=payload)
        logger.info(f"Updated agent: {project}.{name}")
        if not data:
            return await self.get_agent(updated_name or name, project)
        return Agent.from_json(project, data, self)

    async def delete_agent(self, name: str, project: str) -> None:
        """Delete an agent by name."""
        await self._request("DELETE", self._agents_path(project, name))
        logger.info(f"Deleted agent: {project}.{name}")

    async def completion(
        self,
        name: str,
        project: str,
        messages: List[Dict[str, Any]],
    ) -> AgentCompletion:
        """Ask an agent to answer a conversation.

        Args:
            name: Name of the agent
            project: Project the agent belongs to
            messages: Conversation so far, e.g. ``[{"question": "...", "answer": None}]``

        Raises:
            MindsDbError: If the request fails or the answer is malformed
        """
        path = f"{self._agents_path(project, name)}/completions"
        data = await self._request("POST", path, json={"messages": messages})

        message = data.get("message") if isinstance(data, dict) else None
        if not isinstance(message, dict) or "content" not in message:
            url = self.transport.url_for(path)
            raise MindsDbError(f"Unexpected response from {url}: no message in answer", url=url)
        return AgentCompletion(
            content=message["content"],
            context=list(message.get("context") or []),
        )
