"""ML engines (model handlers) configured on the server."""

import ast
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from .base import SqlResourceClient
from .models import make_using_clause
from ..utils import escape_identifier, setup_logger

logger = setup_logger(__name__)


@dataclass
class MLEngine:
    """An ML engine backed by a handler (e.g. openai, lightwood)."""

    name: str
    handler: str
    connection_data: Any = None
    client: Optional["MLEnginesClient"] = field(default=None, repr=False, compare=False)

    async def delete(self) -> None:
        """Delete this ML engine."""
        await self.client.delete_ml_engine(self.name)


def parse_connection_data(raw: Any) -> Any:
    """Parse the connection data column of SHOW ML_ENGINES.

    MindsDB renders it as a Python literal (single-quoted dict). Text that
    can't be parsed is returned unchanged.
    """
    if not raw or not isinstance(raw, str):
        return raw or None
    try:
        return ast.literal_eval(raw)
    except (ValueError, TypeError, SyntaxError, MemoryError, RecursionError):
        logger.debug("Could not parse ML engine connection data, keeping raw text")
        return raw


class MLEnginesClient(SqlResourceClient):
    """Lists, creates and deletes ML engines."""

    def _from_row(self, row: Dict[str, Any]) -> MLEngine:
        return MLEngine(
            name=row.get("name"),
            handler=row.get("handler"),
            connection_data=parse_connection_data(row.get("connection_data")),
            client=self,
        )

    async def list_ml_engines(self) -> List[MLEngine]:
        """Get all ML engines."""
        result = await self._execute("SHOW ML_ENGINES")
        return [self._from_row(row) for row in result.rows]

    async def get_ml_engine(self, name: str) -> Optional[MLEngine]:
        """Get an ML engine by name, or None if it doesn't exist."""
        for engine in await self.list_ml_engines():
            if engine.name == name:
                return engine
        return None

    async def create_ml_engine(
        self,
        name: str,
        handler: str,
        params: Optional[Dict[str, Any]] = None,
    ) -> MLEngine:
        """Create an ML engine from an installed handler.

        Args:
            name: Name of the ML engine
            handler: Handler providing the engine (e.g. openai)
            params: Optional engine parameters (e.g. api keys)

        Raises:
            QueryError: If MindsDB rejects the statement
        """
        lines = [f"CREATE ML_ENGINE {escape_identifier(name)}", f"FROM {escape_identifier(handler)}"]
        using = make_using_clause(params)
        if using:
            lines.append(using)

        await self._execute("\n".join(lines))
        logger.info(f"Created ML engine: {name}")
        return MLEngine(name=name, handler=handler, connection_data=params or None, client=self)

    async def delete_ml_engine(self, name: str) -> None:
        """Delete an ML engine by name."""
        await self._execute(f"DROP ML_ENGINE {escape_identifier(name)}")
        logger.info(f"Deleted ML engine: {name}")
