"""Connecting to MindsDB and wiring the resource clients together."""

from typing import Optional

import httpx

from .config import settings
from .resources import (
    AgentsClient,
    CallbacksClient,
    DatabasesClient,
    JobsClient,
    KnowledgeBasesClient,
    MLEnginesClient,
    ModelsClient,
    ProjectsClient,
    SkillsClient,
    TablesClient,
    ViewsClient,
)
from .sql import QueryResult, SqlRestApiClient
from .transport import HttpTransport, is_cloud_endpoint
from .transport.authenticator import LOGIN_URI, MANAGED_LOGIN_URI
from .utils import AuthenticationError, ConfigurationError, setup_logger

logger = setup_logger(__name__)


class Connection:
    """An open connection to a MindsDB instance.

    Each connection owns its transport and session, so several connections
    (e.g. to different hosts) can be used side by side.
    """

    def __init__(self, transport: HttpTransport):
        self.transport = transport
        self.sql = SqlRestApiClient(transport)
        self.databases = DatabasesClient(self.sql)
        self.projects = ProjectsClient(transport, self.sql)
        self.tables = TablesClient(self.sql)
        self.views = ViewsClient(self.sql)
        self.models = ModelsClient(self.sql)
        self.jobs = JobsClient(self.sql)
        self.ml_engines = MLEnginesClient(self.sql)
        self.knowledge_bases = KnowledgeBasesClient(transport, self.sql)
        self.agents = AgentsClient(transport)
        self.skills = SkillsClient(transport)
        self.callbacks = CallbacksClient(transport)

    @property
    def host(self) -> str:
        return self.transport.base_url

    @property
    def is_authenticated(self) -> bool:
        return self.transport.session is not None

    async def run_query(self, statement: str) -> QueryResult:
        """Run a raw SQL statement."""
        return await self.sql.run_query(statement)

    async def aclose(self) -> None:
        """Close the underlying HTTP client."""
        await self.transport.aclose()

    async def __aenter__(self) -> "Connection":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.aclose()

    def __repr__(self) -> str:
        return f"Connection(host={self.host!r}, authenticated={self.is_authenticated})"


async def connect(
    host: Optional[str] = None,
    user: Optional[str] = None,
    password: Optional[str] = None,
    managed: Optional[bool] = None,
    http_client: Optional[httpx.AsyncClient] = None,
    timeout: Optional[float] = None,
) -> Connection:
    """Connect to MindsDB, logging in when the instance requires it.

    Cloud endpoints and managed instances need a user and password; local
    and self-hosted instances are used without a session.

    Args:
        host: Base URL, e.g. http://127.0.0.1:47334 (defaults to config)
        user: MindsDB email or username (defaults to config)
        password: MindsDB password (defaults to config)
        managed: Whether the host is a managed instance (defaults to config)
        http_client: Custom HTTP client (the caller keeps ownership)
        timeout: Response timeout in seconds (defaults to config)

    Returns:
        Open connection

    Raises:
        ConfigurationError: If login is required but credentials are missing
        AuthenticationError: If logging in fails
    """
    connection_config = settings.connection
    if user is None:
        user = connection_config.get("user")
    if password is None:
        password = connection_config.get("password")
    if managed is None:
        managed = bool(connection_config.get("managed", False))

    transport = HttpTransport(base_url=host, client=http_client, timeout=timeout)

    if managed or is_cloud_endpoint(transport.base_url):
        if not user or not password:
            await transport.aclose()
            raise ConfigurationError(
                f"A user and password are required to connect to {transport.base_url}. "
                "Pass them to connect() or set MINDSDB_USER and MINDSDB_PASSWORD."
            )

        login_url = transport.url_for(MANAGED_LOGIN_URI if managed else LOGIN_URI)
        try:
            await transport.authenticator.authenticate(transport, user, password, managed)
        except httpx.HTTPError as e:
            await transport.aclose()
            error = AuthenticationError.from_http_error(e, login_url)
            logger.error(f"Login to {login_url} failed: {error.message}")
            raise error from e

    logger.info(f"Connected to MindsDB at {transport.base_url}")
    return Connection(transport)
