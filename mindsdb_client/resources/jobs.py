"""Scheduled jobs."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional, Union

from .base import SqlResourceClient
from ..utils import escape_identifier, escape_value, setup_logger

logger = setup_logger(__name__)

Timestamp = Union[str, datetime]


@dataclass
class Job:
    """A job that runs a statement on a schedule."""

    name: str
    project: str
    query: str
    if_query: Optional[str] = None
    start_at: Optional[Timestamp] = None
    end_at: Optional[Timestamp] = None
    schedule: Optional[str] = None
    next_run_at: Optional[Timestamp] = None
    client: Optional["JobsClient"] = field(default=None, repr=False, compare=False)

    async def delete(self) -> None:
        """Delete this job."""
        await self.client.delete_job(self.name, self.project)


class JobsClient(SqlResourceClient):
    """Creates, lists and deletes jobs."""

    def _from_row(self, row: Dict[str, Any], project: str) -> Job:
        return Job(
            name=row.get("name"),
            project=row.get("project") or project,
            query=row.get("query"),
            if_query=row.get("if_query"),
            start_at=row.get("start_at"),
            end_at=row.get("end_at"),
            schedule=row.get("schedule_str"),
            next_run_at=row.get("next_run_at"),
            client=self,
        )

    async def list_jobs(self, project: str) -> List[Job]:
        """Get all jobs of a project."""
        result = await self._execute(f"SELECT * FROM {escape_identifier(project)}.jobs")
        return [self._from_row(row, project) for row in result.rows]

    async def get_job(self, name: str, project: str) -> Optional[Job]:
        """Get a job by name, or None if it doesn't exist."""
        for job in await self.list_jobs(project):
            if job.name == name:
                return job
        return None

    async def create_job(
        self,
        project: str,
        name: str,
        query: str,
        if_query: Optional[str] = None,
        start_at: Optional[Timestamp] = None,
        end_at: Optional[Timestamp] = None,
        schedule: Optional[str] = None,
    ) -> Job:
        """Create a job unless one with the same name exists.

        Args:
            project: Project the job belongs to
            name: Name of the job
            query: Statement(s) the job runs
            if_query: Condition statement; the job only runs when it returns rows
            start_at: When the job starts running
            end_at: When the job stops running
            schedule: Interval such as '1 hour' or '2 days'

        Returns:
            The new job

        Raises:
            QueryError: If MindsDB rejects the statement
        """
        lines = [
            f"CREATE JOB IF NOT EXISTS {escape_identifier(project)}.{escape_identifier(name)} AS (",
            query,
            ")",
        ]
        if start_at:
            lines.append(f"START {escape_value(start_at)}")
        if end_at:
            lines.append(f"END {escape_value(end_at)}")
        if schedule:
            lines.append(f"EVERY {schedule}")
        if if_query:
            lines.append(f"IF ({if_query})")

        await self._execute("\n".join(lines))
        logger.info(f"Created job: {project}.{name}")
        return Job(
            name=name,
            project=project,
            query=query,
            if_query=if_query,
            start_at=start_at,
            end_at=end_at,
            schedule=schedule,
            client=self,
        )

    async def delete_job(self, name: str, project: str) -> None:
        """Delete a job."""
        await self._execute(f"DROP JOB {escape_identifier(project)}.{escape_identifier(name)}")
        logger.info(f"Deleted job: {project}.{name}")
