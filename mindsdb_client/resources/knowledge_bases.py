"""Knowledge bases: embedded documents searchable by content."""

import json
from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Optional

from .base import RestResourceClient, SqlResourceClient, path_segment
from .projects import PROJECTS_URI
from ..sql import QueryResult, SqlExecutor
from ..transport import HttpTransport
from ..utils import escape_identifier, escape_value, setup_logger

logger = setup_logger(__name__)

KNOWLEDGE_BASES_TABLE = "information_schema.knowledge_bases"


def parse_knowledge_base_params(raw: Any) -> Dict[str, Any]:
    """Parse the params column of information_schema.knowledge_bases.

    MindsDB returns it either as JSON text or as an object. Anything that
    isn't a JSON object becomes an empty dict.
    """
    if isinstance(raw, dict):
        return raw
    if not raw or not isinstance(raw, str):
        return {}
    try:
        params = json.loads(raw)
    except ValueError:
        logger.debug("Could not parse knowledge base params, ignoring them")
        return {}
    return params if isinstance(params, dict) else {}


@dataclass
class KnowledgeBase:
    """A knowledge base, optionally narrowed down to a content search.

    ``find`` returns a copy with a search query; ``fetch`` runs it.
    """

    name: str
    project: str
    model: Optional[str] = None
    storage: Optional[str] = None
    params: Dict[str, Any] = field(default_factory=dict)
    query: Optional[str] = None
    limit: Optional[int] = None
    client: Optional["KnowledgeBasesClient"] = field(default=None, repr=False, compare=False)

    @property
    def table_name(self) -> str:
        return f"{self.project}.{self.name}"

    @property
    def metadata_columns(self) -> List[str]:
        return self.params.get("metadata_columns") or []

    @property
    def content_columns(self) -> List[str]:
        return self.params.get("content_columns") or []

    @property
    def id_column(self) -> Optional[str]:
        return self.params.get("id_column")

    @property
    def sql(self) -> str:
        """SELECT statement returning this knowledge base's (matching) rows."""
        statement = f"SELECT * FROM {escape_identifier(self.project)}.{escape_identifier(self.name)}"
        if self.query:
            statement += f" WHERE content = {escape_value(self.query)}"
        if self.limit:
            statement += f" LIMIT {int(self.limit)}"
        return statement

    def find(self, query: str, limit: Optional[int] = None) -> "KnowledgeBase":
        """Return a copy of this knowledge base that searches for ``query``."""
        return replace(self, params=dict(self.params), query=query, limit=limit)

    async def fetch(self) -> QueryResult:
        """Run this knowledge base's SELECT statement."""
        return await self.client.fetch(self.sql)

    async def insert(self, records: List[Dict[str, Any]]) -> None:
        """Insert records (column name to value) into this knowledge base."""
        await self.client.insert_into_knowledge_base(self.name, self.project, records)

    async def insert_web_pages(
        self,
        urls: List[str],
        crawl_depth: int = 1,
        filters: Optional[List[str]] = None,
    ) -> None:
        """Crawl web pages into this knowledge base."""
        await self.client.insert_web_pages(self.name, self.project, urls, crawl_depth, filters)

    async def delete(self) -> None:
        """Delete this knowledge base."""
        await self.client.delete_knowledge_base(self.name, self.project)


class KnowledgeBasesClient(RestResourceClient, SqlResourceClient):
    """Creates, fills, searches and drops knowledge bases."""

    def __init__(self, transport: HttpTransport, sql_client: SqlExecutor):
        RestResourceClient.__init__(self, transport)
        SqlResourceClient.__init__(self, sql_client)

    def _from_row(self, row: Dict[str, Any]) -> KnowledgeBase:
        return KnowledgeBase(
            name=row.get("name"),
            project=row.get("project"),
            model=row.get("model") or None,
            storage=row.get("storage") or None,
            params=parse_knowledge_base_params(row.get("params")),
            client=self,
        )

    async def list_knowledge_bases(self, project: Optional[str] = None) -> List[KnowledgeBase]:
        """Get all knowledge bases, optionally only those of one project."""
        return await self._select(project=project)

    async def get_knowledge_base(
        self,
        name: str,
        project: Optional[str] = None,
    ) -> Optional[KnowledgeBase]:
        """Get a knowledge base by name, or None if it doesn't exist."""
        knowledge_bases = await self._select(name=name, project=project)
        return knowledge_bases[0] if knowledge_bases else None

    async def _select(self, **filters: Optional[str]) -> List[KnowledgeBase]:
        conditions = [
            f"{column} = {escape_value(value)}"
            for column, value in filters.items()
            if value is not None
        ]
        statement = f"SELECT * FROM {KNOWLEDGE_BASES_TABLE}"
        if conditions:
            statement += " WHERE " + " AND ".join(conditions)
        result = await self._execute(statement)
        return [self._from_row(row) for row in result.rows]

    async def create_knowledge_base(
        self,
        name: str,
        project: str,
        model: Optional[str] = None,
        storage: Optional[str] = None,
        metadata_columns: Optional[List[str]] = None,
        content_columns: Optional[List[str]] = None,
        id_column: Optional[str] = None,
        params: Optional[Dict[str, Any]] = None,
    ) -> KnowledgeBase:
        """Create a knowledge base.

        Args:
            name: Name of the knowledge base
            project: Project the knowledge base belongs to
            model: Embedding model, a model of the same project
            storage: Vector store table, e.g. ``chroma_db.docs``
            metadata_columns: Columns kept as metadata
            content_columns: Columns that are embedded (default ``content``)
            id_column: Column identifying each record
            params: Extra parameters, merged over the column options

        Raises:
            QueryError: If MindsDB rejects the statement
        """
        kb_params: Dict[str, Any] = {}
        if metadata_columns:
            kb_params["metadata_columns"] = list(metadata_columns)
        if content_columns:
            kb_params["content_columns"] = list(content_columns)
        if id_column:
            kb_params["id_column"] = id_column
        kb_params.update(params or {})

        using = []
        if model:
            using.append(f"model = {escape_identifier(project)}.{escape_identifier(model)}")
        if storage:
            using.append(f"storage = {escape_identifier(storage)}")
        using.extend(
            f"{escape_identifier(key)} = {escape_value(value)}"
            for key, value in kb_params.items()
        )

        lines = [f"CREATE KNOWLEDGE BASE {escape_identifier(project)}.{escape_identifier(name)}"]
        if using:
            lines.append("USING\n" + ",\n".join(using))
        await self._execute("\n".join(lines))
        logger.info(f"Created knowledge base: {project}.{name}")

        # MindsDB stores the name lower-cased
        created = await self.get_knowledge_base(name.lower(), project)
        if created is not None:
            return created
        return KnowledgeBase(
            name=name,
            project=project,
            model=model,
            storage=storage,
            params=kb_params,
            client=self,
        )

    async def delete_knowledge_base(self, name: str, project: str) -> None:
        """Delete a knowledge base by name."""
        await self._execute(
            f"DROP KNOWLEDGE BASE {escape_identifier(project)}.{escape_identifier(name)}"
        )
        logger.info(f"Deleted knowledge base: {project}.{name}")

    async def insert_into_knowledge_base(
        self,
        name: str,
        project: str,
        records: List[Dict[str, Any]],
    ) -> None:
        """Insert records into a knowledge base.

        Columns are taken from the first record; a record missing one of
        them inserts NULL.

        Raises:
            ValueError: If there are no records
            QueryError: If MindsDB rejects the statement
        """
        if not records:
            raise ValueError("At least one record is required")

        columns = list(records[0].keys())
        rows = [
            "(" + ", ".join(escape_value(record.get(column)) for column in columns) + ")"
            for record in records
        ]
        column_list = ", ".join(escape_identifier(column, qualified=False) for column in columns)
        statement = "\n".join([
            f"INSERT INTO {escape_identifier(project)}.{escape_identifier(name)} ({column_list})",
            "VALUES " + ",\n".join(rows),
        ])
        await self._execute(statement)
        logger.info(f"Inserted {len(records)} records into knowledge base: {project}.{name}")

    async def insert_web_pages(
        self,
        name: str,
        project: str,
        urls: List[str],
        crawl_depth: int = 1,
        filters: Optional[List[str]] = None,
    ) -> None:
        """Crawl web pages into a knowledge base.

        Args:
            name: Name of the knowledge base
            project: Project the knowledge base belongs to
            urls: Pages to start crawling from
            crawl_depth: How many links deep to follow
            filters: Regular expressions a crawled URL must match

        Raises:
            MindsDbError: If the request fails
        """
        payload = {
            "knowledge_base": {
                "urls": list(urls),
                "crawl_depth": crawl_depth,
                "filters": list(filters or []),
            }
        }
        path = f"{PROJECTS_URI}/{path_segment(project)}/knowledge_bases/{path_segment(name)}"
        await self._request("PUT", path, json=payload)
        logger.info(f"Inserting {len(urls)} web pages into knowledge base: {project}.{name}")

    async def fetch(self, statement: str) -> QueryResult:
        """Run a SELECT against a knowledge base."""
        return await self._execute(statement)
